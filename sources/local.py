"""
Local image files.

Finding image files on disk and decoding them for detection.
"""

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

# Supported image extensions
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff", ".tif"}


def is_image_file(path: str | Path) -> bool:
    """Whether the file name has a supported image extension (any case)."""
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def scan_local_images(path: str | Path) -> list[Path]:
    """List the images to process for a path.

    A single image file is returned as is. For a directory, the image files
    directly inside it are returned; subdirectories are not searched.

    Returns:
        Sorted list of image file paths.

    Raises:
        ValueError: If path doesn't exist or isn't an image file or directory.
    """
    file_path = Path(path)

    if file_path.is_file():
        if is_image_file(file_path):
            return [file_path]
        raise ValueError(f"{path} is not a supported image file")

    if not file_path.is_dir():
        raise ValueError(f"Not found: {path}")

    return sorted(p for p in file_path.iterdir() if p.is_file() and is_image_file(p))


def load_image(path: str | Path) -> np.ndarray:
    """Decode an image file into an RGB uint8 array.

    Raises:
        OSError: If the file can't be read or decoded.
    """
    try:
        with Image.open(path) as image:
            return np.array(image.convert("RGB"))
    except UnidentifiedImageError as exc:
        raise OSError(f"Failed to open image file {path}") from exc
