# -*- coding: utf-8 -*-
import os
import re
import logging

from .config import Config
from .models import OutputEntry, OutputPlan
from .utils import ensure_directory_exists

logger = logging.getLogger(__name__)

MAX_FOLDER_NAME_LENGTH = 15
TRUNCATED_FOLDER_PREFIX = 12
ELLIPSIS = "..."

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9\-]")


def derive_folder_name(input_filename: str) -> str:
    """
    Folder name for one input image, e.g. "My Photo #1.png" -> "my-photo-1".
    Names longer than 15 characters become their first 12 characters plus "...".

    A name with no characters left after filtering (e.g. "###.png" or a non-ASCII
    name) yields "", so its outputs are written straight into the run folder as
    <format>/<file>. Such names are not disambiguated.
    """
    base_name = os.path.splitext(os.path.basename(input_filename))[0]
    folder_name = _WHITESPACE_RE.sub("-", base_name.lower())
    folder_name = _DISALLOWED_RE.sub("", folder_name)

    if len(folder_name) > MAX_FOLDER_NAME_LENGTH:
        folder_name = folder_name[:TRUNCATED_FOLDER_PREFIX] + ELLIPSIS
    return folder_name


def plan_outputs(input_filename: str, random_id: str, date_created: str, config: Config) -> OutputPlan:
    """
    Lays out every (format, size) output for one image.

    Entries are format-major, size-minor, in configured order. The function is
    pure: the same arguments always give the same plan.
    """
    folder_name = derive_folder_name(input_filename)
    entries = []
    for output_format in config.target_formats:
        for size in config.output_sizes:
            file_name = f"{random_id}_{size}_{date_created}.{output_format}"
            entries.append(
                OutputEntry(
                    format=output_format,
                    size=size,
                    file_name=file_name,
                    relative_path=os.path.join(folder_name, output_format, file_name),
                )
            )
    return OutputPlan(folder_name=folder_name, entries=tuple(entries))


def create_output_directories(output_dir: str, plan: OutputPlan) -> str:
    """Creates output_dir/<folder> and one subfolder per format. Idempotent."""
    image_dir = ensure_directory_exists(os.path.join(output_dir, plan.folder_name))
    for output_format in plan.formats:
        ensure_directory_exists(os.path.join(image_dir, output_format))
    return image_dir
