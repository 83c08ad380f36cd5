"""Image generation dashboard: usage statistics for an AI image generator."""

__version__ = "0.1.0"
