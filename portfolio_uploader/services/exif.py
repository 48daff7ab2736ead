"""
EXIF Extractor - Single Responsibility: read capture attributes from images.

Uses Pillow. Extraction is best effort: any problem yields empty metadata.
"""
import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from PIL import ExifTags, Image, UnidentifiedImageError

from ..models import CaptureMetadata

logger = logging.getLogger(__name__)

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    text = str(value).strip().strip("\x00")
    return text or None


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, tuple) and len(value) == 2:
        num, den = value
        return float(num) / float(den) if den else None
    try:
        return float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    number = _to_float(value)
    return int(number) if number is not None else None


def parse_exif_date(value: Any) -> Optional[datetime]:
    text = _to_text(value)
    if not text:
        return None
    try:
        return datetime.strptime(text[:19], EXIF_DATE_FORMAT)
    except ValueError:
        logger.debug("Unparseable EXIF date %r", text)
        return None


class ExifExtractor:
    """Implements IMetadataExtractor on top of Pillow's EXIF reader."""

    def read(self, path: Path) -> CaptureMetadata:
        """Read capture metadata synchronously."""
        try:
            with Image.open(path) as img:
                exif = img.getexif()
                if not exif:
                    return CaptureMetadata()
                details = exif.get_ifd(ExifTags.IFD.Exif)

                def lookup(tag: int):
                    value = details.get(tag)
                    return value if value is not None else exif.get(tag)

                return CaptureMetadata(
                    camera=_to_text(exif.get(ExifTags.Base.Model)),
                    f_number=_to_float(lookup(ExifTags.Base.FNumber)),
                    exposure_time=_to_float(lookup(ExifTags.Base.ExposureTime)),
                    iso=_to_int(lookup(ExifTags.Base.ISOSpeedRatings)),
                    shot_date=parse_exif_date(lookup(ExifTags.Base.DateTimeOriginal)),
                )
        except (OSError, UnidentifiedImageError, ValueError, TypeError, KeyError) as exc:
            logger.debug("EXIF extraction failed for %s: %s", path, exc)
            return CaptureMetadata()

    async def extract(self, path: Path) -> CaptureMetadata:
        """Read capture metadata in a worker thread."""
        return await asyncio.to_thread(self.read, Path(path))
