# -*- coding: utf-8 -*-
import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from PIL import Image
import piexif
from pillow_heif import register_heif_opener

from .config import SVG_EXTENSION
from .models import ImageMetadata
from .utils import format_date, today

# Lets Pillow read HEIC containers (and their EXIF block).
register_heif_opener()

logger = logging.getLogger(__name__)

# Exif 2.31 offset tags. Looked up by number since older piexif releases lack the names.
OFFSET_TIME_ORIGINAL = 0x9011
OFFSET_TIME_DIGITIZED = 0x9012

_EXIF_DATETIME_FORMATS = ("%Y:%m:%d %H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y:%m:%d")


def _decode(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    text = str(value).replace("\x00", "").strip()
    return text or None


def _parse_offset(value: Any) -> Optional[timezone]:
    # "+09:00" / "-05:00"
    text = _decode(value)
    if not text or len(text) != 6 or text[0] not in "+-" or text[3] != ":":
        return None
    try:
        hours, minutes = int(text[1:3]), int(text[4:6])
    except ValueError:
        return None
    delta = timedelta(hours=hours, minutes=minutes)
    return timezone(-delta if text[0] == "-" else delta)


def parse_exif_datetime(value: Any, offset: Any = None) -> Optional[datetime]:
    """
    Parses an EXIF timestamp ("YYYY:MM:DD HH:MM:SS").

    The result is timezone aware: the matching OffsetTime* tag is applied when
    present, otherwise the recorded wall time is taken as UTC.
    Returns None for blank or malformed values.
    """
    text = _decode(value)
    if not text:
        return None
    parsed = None
    for fmt in _EXIF_DATETIME_FORMATS:
        try:
            parsed = datetime.strptime(text[:19], fmt)
            break
        except ValueError:
            continue
    if parsed is None:
        logger.debug(f"Ignoring unparseable EXIF timestamp: {text!r}")
        return None
    return parsed.replace(tzinfo=_parse_offset(offset) or timezone.utc)


def read_exif(file_path: str) -> Tuple[Dict[str, Any], Optional[Tuple[int, int]]]:
    """
    Returns (piexif dict, (width, height)) for file_path.
    Raises whatever Pillow or piexif raise when the file cannot be read.
    """
    with Image.open(file_path) as img:
        size = img.size
        raw_exif = img.info.get("exif")
        if not raw_exif:
            exif = img.getexif()
            raw_exif = exif.tobytes() if exif else None
    if not raw_exif:
        return {}, size
    return piexif.load(raw_exif), size


def _filesystem_date(file_path: str) -> str:
    try:
        stats = os.stat(file_path)
    except OSError as e:
        logger.warning(f"Could not get file stats for {file_path}: {e}")
        return today()

    # st_birthtime only exists on some platforms (macOS, BSD, Windows).
    timestamp = getattr(stats, "st_birthtime", None) or stats.st_mtime
    return format_date(datetime.fromtimestamp(timestamp, tz=timezone.utc))


def extract_image_metadata(file_path: str) -> ImageMetadata:
    """
    Extracts the creation date for file_path. Never raises.

    Order: EXIF DateTimeOriginal, EXIF DateTimeDigitized (creation time), file
    creation time (or last-modified time where creation time is not exposed),
    then today's date.
    """
    size = None
    if os.path.splitext(file_path)[1].lower() == SVG_EXTENSION:
        logger.debug(f"Skipping EXIF lookup for vector file {file_path}")
    else:
        try:
            exif_data, size = read_exif(file_path)
            exif_ifd = exif_data.get("Exif", {}) or {}

            date_original = parse_exif_datetime(
                exif_ifd.get(piexif.ExifIFD.DateTimeOriginal), exif_ifd.get(OFFSET_TIME_ORIGINAL)
            )
            if date_original is not None:
                return ImageMetadata(format_date(date_original), *size)

            date_digitized = parse_exif_datetime(
                exif_ifd.get(piexif.ExifIFD.DateTimeDigitized), exif_ifd.get(OFFSET_TIME_DIGITIZED)
            )
            if date_digitized is not None:
                return ImageMetadata(format_date(date_digitized), *size)
        except Exception as e:
            logger.warning(f"Could not extract EXIF data from {file_path}: {type(e).__name__}: {e}")

    width, height = size if size else (None, None)
    return ImageMetadata(_filesystem_date(file_path), width, height)
