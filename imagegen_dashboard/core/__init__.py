"""
Core modules for the image generation dashboard.

This package contains the aggregation engine (filters, daily buckets,
frequency ranking, monthly growth, CSV export) and the views built on it.
"""
