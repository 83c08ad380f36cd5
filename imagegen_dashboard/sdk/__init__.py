"""
SDK for the image generation dashboard.

Provides programmatic access to image generation with record keeping.
"""

from .image_client import GenerationError, GuardedImageGenerator

__all__ = ["GenerationError", "GuardedImageGenerator"]
