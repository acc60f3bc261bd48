"""Image decode / canonicalization, PNG encoding, file output and terminal display."""

import io
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image
from term_image.image import AutoImage

from .errors import InferenceError, InvalidInputError

logger = logging.getLogger(__name__)

# Fixed input resolution of the segmentation model (width == height)
CANONICAL_SIZE = 513

IMAGE_EXTENSIONS = ('bmp', 'gif', 'jpg', 'jpeg', 'png')

PathLike = Union[str, Path]


def is_image_file(filename: PathLike) -> bool:
    """True if filename has one of the supported image extensions."""
    suffix = Path(str(filename)).suffix.lower().lstrip('.')
    return bool(filename) and suffix in IMAGE_EXTENSIONS


def validate_input(filename: PathLike) -> Path:
    """Return the input path, or raise InvalidInputError if it cannot be processed."""
    if not filename:
        raise InvalidInputError('no input image specified.')
    if not is_image_file(filename):
        raise InvalidInputError(
            f"'{filename}' is not a supported image; expected one of: {', '.join(IMAGE_EXTENSIONS)}"
        )
    path = Path(filename)
    if not path.is_file():
        raise InvalidInputError(f"input image '{filename}' does not exist")
    return path


def canonicalize(img: Image.Image, size: int = CANONICAL_SIZE) -> np.ndarray:
    """
    Resize img to fit inside size x size (keeping aspect ratio) and paste it at
    the top-left of an opaque black canvas. Returns (size, size, 4) uint8 RGBA.
    """
    img = img.convert('RGB')
    w, h = img.size
    scale = min(size / w, size / h)
    new_size = (max(1, min(size, round(w * scale))), max(1, min(size, round(h * scale))))
    if new_size != (w, h):
        img = img.resize(new_size, Image.Resampling.BILINEAR)
    canvas = Image.new('RGBA', (size, size), (0, 0, 0, 255))
    canvas.paste(img, (0, 0))
    return np.array(canvas, dtype=np.uint8)


def load_canonical_image(path: PathLike, size: int = CANONICAL_SIZE) -> np.ndarray:
    """Decode the image at path and canonicalize it; decode failures raise InferenceError."""
    try:
        with Image.open(path) as img:
            rgba = canonicalize(img, size)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise InferenceError(f"error decoding image '{path}' - {e}") from e
    logger.debug("Canonicalized %s to %dx%d", path, size, size)
    return rgba


def output_path_for(image_path: PathLike, segment: str) -> Path:
    """<dir>/<basename without extension>-<segment>.png"""
    p = Path(image_path)
    return p.with_name(f"{p.stem}-{segment}.png")


def encode_png(rgba: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(rgba).save(buf, format='PNG')
    return buf.getvalue()


def write_png(path: PathLike, png: bytes) -> Path:
    path = Path(path)
    path.write_bytes(png)
    logger.debug("Wrote %d bytes to %s", len(png), path)
    return path


def display_in_terminal(png: bytes) -> None:
    """Decode PNG bytes and draw the image inline in the terminal."""
    img = Image.open(io.BytesIO(png))
    img.load()
    print(AutoImage(img))
