"""
Image source adapters.

This module provides adapters for getting images into the pipeline:
- Decoding files or bytes with EXIF orientation correction
- Local directories
- The sample gallery

Each source yields upright RGB numpy arrays.
"""

from .images import decode_image, get_exif_rotation, load_image
from .local import IMAGE_EXTENSIONS, scan_local_images
from .samples import SampleEntry, list_samples, make_thumbnail

__all__ = [
    "decode_image",
    "get_exif_rotation",
    "load_image",
    "IMAGE_EXTENSIONS",
    "scan_local_images",
    "SampleEntry",
    "list_samples",
    "make_thumbnail",
]
