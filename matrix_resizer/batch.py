# -*- coding: utf-8 -*-
import asyncio
import logging
import contextlib
from typing import List, Sequence

from tqdm import tqdm

from .config import Config
from .models import BatchReport, ProcessingResult
from .pipeline import process_image

logger = logging.getLogger(__name__)


async def run_batch(image_files: Sequence[str], output_dir: str, config: Config) -> List[ProcessingResult]:
    """
    Processes every image concurrently and returns the results in input order.

    All images are launched together and awaited jointly; config.max_concurrency,
    when set, caps how many run at the same time. A failing image never stops
    the others.
    """
    if not image_files:
        return []

    limiter = asyncio.Semaphore(config.max_concurrency) if config.max_concurrency else None
    logger.info(f"Starting batch processing of {len(image_files)} images. Output will be saved to: '{output_dir}'")

    with tqdm(total=len(image_files), desc="Processing images", unit="file", ncols=100, leave=True,
              disable=not config.show_progress) as pbar:

        async def run_one(input_path: str) -> ProcessingResult:
            async with (limiter or contextlib.nullcontext()):
                result = await process_image(input_path, output_dir, config)
            if not result.success:
                # Write error to tqdm to not mess up the progress bar
                tqdm.write(f" x Error processing '{result.input_file}': {result.error}")
            pbar.update(1)
            return result

        results = await asyncio.gather(*(run_one(path) for path in image_files))

    report = summarize(results)
    logger.info(f"Batch processing complete. Success: {report.successful}, Errors: {report.failed}")
    return list(results)


def summarize(results: Sequence[ProcessingResult]) -> BatchReport:
    successful = sum(1 for r in results if r.success)
    failures = tuple((r.input_file, r.error or "Unknown error") for r in results if not r.success)
    return BatchReport(
        successful=successful,
        failed=len(failures),
        total_output_files=sum(len(r.output_files) for r in results),
        failures=failures,
    )
