# -*- coding: utf-8 -*-
import os
import asyncio
import logging
from typing import List

from .config import Config
from .engine import resize_and_encode
from .metadata import extract_image_metadata
from .models import ProcessingResult
from .normalizer import prepare_image_source
from .planner import create_output_directories, plan_outputs
from .utils import generate_random_id

logger = logging.getLogger(__name__)


async def process_image(input_path: str, output_dir: str, config: Config) -> ProcessingResult:
    """
    Runs one image through the whole matrix of formats and sizes.

    Never raises. The first failing encode stops the remaining outputs for this
    image and the image is reported as failed with no output files, even though
    files written before the failure stay on disk.

    Args:
        input_path: Source image file.
        output_dir: The run's timestamped output folder.
        config: Run configuration.

    Returns:
        ProcessingResult with relative output paths in plan order on success.
    """
    file_name = os.path.basename(input_path)
    logger.info(f"Processing: {file_name}")

    try:
        metadata = await asyncio.to_thread(extract_image_metadata, input_path)
        logger.debug(f"{file_name}: date={metadata.date_created}, size={metadata.width}x{metadata.height}")
        random_id = generate_random_id(config.random_id_length)
        source = await asyncio.to_thread(prepare_image_source, input_path)

        plan = plan_outputs(file_name, random_id, metadata.date_created, config)
        image_dir = await asyncio.to_thread(create_output_directories, output_dir, plan)

        output_files: List[str] = []
        for entry in plan.entries:
            output_path = os.path.join(image_dir, entry.format, entry.file_name)
            await asyncio.to_thread(resize_and_encode, source, entry.size, entry.format, output_path, config)
            output_files.append(entry.relative_path)
            logger.info(f"  -> Generated: {entry.relative_path}")

        return ProcessingResult.ok(file_name, output_files)

    except Exception as e:
        error_message = str(e) or type(e).__name__
        logger.error(f"Error processing {file_name}: {error_message}", exc_info=logger.isEnabledFor(logging.DEBUG))
        return ProcessingResult.failed(file_name, error_message)
