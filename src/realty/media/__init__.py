"""
Media Package

ImageKit upload, deletion and URL transformation helpers for listing media.
"""
from src.realty.media.imagekit import (
    ImageKitClient,
    ImageKitError,
    get_imagekit_client,
    optimized_url,
    collect_media_file_ids,
)

__all__ = [
    "ImageKitClient",
    "ImageKitError",
    "get_imagekit_client",
    "optimized_url",
    "collect_media_file_ids",
]
