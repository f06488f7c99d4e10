"""
Image output.

Turns the renderer's linear color buffer into 8-bit pixels and writes it
either as a plain-text PPM (P3) or, for any other extension, through Pillow.

The output policy for every channel is: gamma 2 correction (square root of
positive values), clamp to [0, 0.999], then floor(256 * value).
"""

from __future__ import annotations
import logging
import math
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image as PILImage

from .interval import INTENSITY
from .errors import ImageWriteError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def linear_to_gamma(linear: float) -> float:
    """Gamma 2 transfer for a single channel; non-positive values pass through."""
    if linear > 0:
        return math.sqrt(linear)
    return linear


def to_ldr(image: np.ndarray) -> np.ndarray:
    """Convert a linear image to 8-bit with gamma correction.

    Args:
        image: Linear image array (H, W, 3)

    Returns:
        LDR image as uint8 array of the same shape
    """
    image = np.asarray(image, dtype=np.float64)
    corrected = np.where(image > 0, np.sqrt(np.maximum(image, 0.0)), image)
    clamped = np.clip(corrected, INTENSITY.min, INTENSITY.max)
    return np.floor(256 * clamped).astype(np.uint8)


def format_ppm(image: np.ndarray) -> str:
    """Format a linear image as plain-text PPM, rows top to bottom."""
    height, width = image.shape[:2]
    pixels = to_ldr(image).reshape(-1, 3)
    lines = [f"P3\n{width} {height}\n255\n"]
    lines.extend(f"{r} {g} {b}\n" for r, g, b in pixels)
    return "".join(lines)


def write_ppm(path: PathLike, image: np.ndarray) -> None:
    """Write a linear image as a plain-text PPM file.

    Raises:
        ImageWriteError: if the file cannot be written
    """
    try:
        with open(path, 'w', encoding='ascii', newline='\n') as f:
            f.write(format_ppm(image))
    except OSError as exc:
        raise ImageWriteError(f"Cannot write image to {path}: {exc}") from exc


def save_image(path: PathLike, image: np.ndarray) -> None:
    """Save a linear image, picking the format from the file extension.

    `.ppm` is written as plain-text P3; anything else goes through Pillow.

    Raises:
        ImageWriteError: if the file cannot be written
    """
    path = Path(path)
    if path.suffix.lower() == '.ppm':
        write_ppm(path, image)
    else:
        try:
            PILImage.fromarray(to_ldr(image)).save(path)
        except (OSError, ValueError) as exc:
            raise ImageWriteError(f"Cannot write image to {path}: {exc}") from exc

    height, width = image.shape[:2]
    logger.info("Wrote %dx%d image to %s", width, height, path)
