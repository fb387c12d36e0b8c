"""
Image source adapters.

Local files and directories are the only source: each image is listed,
decoded into an RGB array and handed to detection.
"""

from .local import IMAGE_EXTENSIONS, is_image_file, scan_local_images, load_image

__all__ = [
    "IMAGE_EXTENSIONS",
    "is_image_file",
    "scan_local_images",
    "load_image",
]
