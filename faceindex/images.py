"""Pick the files Rekognition will accept out of a source directory."""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from .models import ImageFile

logger = logging.getLogger(__name__)

# Pillow format name -> media type. Rekognition only takes JPEG and PNG;
# multi-picture JPEGs from phone cameras open as MPO.
SUPPORTED_FORMATS = {"JPEG": "image/jpeg", "MPO": "image/jpeg", "PNG": "image/png"}

# Bytes Pillow hands to each format's accept check.
_PREFIX_LENGTH = 16


def _sniff_header(path: Path) -> Optional[str]:
    """Identify an image Pillow refuses to open by its leading bytes alone."""
    with path.open("rb") as fh:
        prefix = fh.read(_PREFIX_LENGTH)
    Image.init()
    for fmt in ("JPEG", "PNG"):
        _, accept = Image.OPEN[fmt]
        if accept is not None and accept(prefix) is True:
            return SUPPORTED_FORMATS[fmt]
    return None


def sniff_media_type(path: Path) -> Optional[str]:
    """Return the media type detected from the file's bytes, or None.

    The file name is never consulted: a ``.dat`` file holding JPEG data is
    ``image/jpeg`` and a ``.jpg`` file holding text is None. Images over
    Pillow's pixel limit are still classified from their header.
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", Image.DecompressionBombWarning)
            with Image.open(path) as img:
                fmt = img.format
    except Image.DecompressionBombError as exc:
        logger.debug("Oversized image %s (%s); checking header only", path, exc)
        return _sniff_header(path)
    except (UnidentifiedImageError, OSError) as exc:
        logger.debug("Not an image: %s (%s)", path, exc)
        return None
    return SUPPORTED_FORMATS.get(fmt or "")


def find_images(directory: Path) -> List[ImageFile]:
    """List the JPEG/PNG files directly inside ``directory``, sorted by name."""
    images: List[ImageFile] = []
    for path in sorted(directory.iterdir()):
        if not path.is_file():
            continue
        media_type = sniff_media_type(path)
        if media_type is None:
            logger.info("Ignoring %s: not a JPEG or PNG image", path.name)
            continue
        logger.debug("Accepted %s as %s", path.name, media_type)
        images.append(ImageFile(path))
    return images


__all__ = ["SUPPORTED_FORMATS", "find_images", "sniff_media_type"]
