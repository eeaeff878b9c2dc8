# -*- coding: utf-8 -*-
import os
import random
import string
import logging
from datetime import datetime, timezone
from typing import List, Optional

from .config import Config
from .errors import StartupError

logger = logging.getLogger(__name__)

RANDOM_ID_CHARS = string.ascii_lowercase + string.digits


def generate_random_id(length: int = 8) -> str:
    """Random lowercase alphanumeric id. Not checked for uniqueness."""
    return "".join(random.choice(RANDOM_ID_CHARS) for _ in range(length))


def format_date(date: datetime) -> str:
    """
    Formats a datetime as YYYY-MM-DD in UTC.
    Naive datetimes are taken to already be in UTC.
    """
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc)
    return date.strftime("%Y-%m-%d")


def today() -> str:
    return format_date(datetime.now(timezone.utc))


def create_timestamped_folder_name(now: Optional[datetime] = None) -> str:
    """Run folder name in local time, e.g. 2024-03-10_14-05-09."""
    now = now or datetime.now()
    return now.strftime("%Y-%m-%d_%H-%M-%S")


def ensure_directory_exists(dir_path: str) -> str:
    """Creates dir_path (and parents) if missing. OSError propagates."""
    if not os.path.isdir(dir_path):
        os.makedirs(dir_path, exist_ok=True)
        logger.info(f"Created directory: {dir_path}")
    return dir_path


def is_supported_format(file_path: str, config: Config) -> bool:
    file_ext = os.path.splitext(file_path)[1].lower()
    return bool(file_ext) and file_ext in config.supported_extensions


def get_image_files(input_dir: str, config: Config) -> List[str]:
    """
    Lists the supported image files at the top level of input_dir.

    Subdirectories and files with other extensions are skipped (logged at DEBUG).
    The result is sorted by file name so runs are reproducible.

    Raises:
        StartupError: if the directory cannot be listed.
    """
    try:
        filenames = sorted(os.listdir(input_dir))
    except OSError as e:
        raise StartupError(f"Could not read input directory {input_dir}: {e}") from e

    image_files = []
    for filename in filenames:
        full_path = os.path.join(input_dir, filename)
        if not os.path.isfile(full_path):
            logger.debug(f"Skipping '{filename}' (Is a directory)")
            continue
        if not is_supported_format(filename, config):
            logger.debug(f"Skipping '{filename}' (Extension not in supported list: {config.supported_extensions})")
            continue
        image_files.append(full_path)

    logger.debug(f"Scan complete: Found {len(image_files)} supported files in '{input_dir}'.")
    return image_files
