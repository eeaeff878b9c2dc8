# -*- coding: utf-8 -*-
import os
import sys
import asyncio
import argparse
import logging
from typing import List, Optional, Sequence

from . import __version__
from .batch import run_batch, summarize
from .config import Config, DEFAULT_CONFIG, FILTER_NAMES
from .errors import StartupError
from .models import BatchReport, ProcessingResult
from .utils import create_timestamped_folder_name, ensure_directory_exists, get_image_files

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(threadName)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    """Installs a single console handler on the root logger."""
    log_handler = logging.StreamHandler()
    log_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root_logger = logging.getLogger()
    # Remove any existing handlers to prevent duplicate log output.
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(log_handler)
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"Matrix Resizer (v{__version__}): resize every image in the input folder "
                    f"to each configured format and size.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose (DEBUG level) logging for detailed output.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def display_settings(config: Config) -> None:
    print("\n" + "=" * 30 + " Matrix Resizer " + "=" * 30)
    print(f"Input folder: {config.input_folder}")
    print(f"Output folder: {config.output_folder}")
    print(f"Target formats: {', '.join(f.upper() for f in config.target_formats)}")
    print(f"Output sizes: {', '.join(str(s) for s in config.output_sizes)} pixels")
    print(f"Outputs per image: {config.outputs_per_image}")
    print(f"Resize filter: {FILTER_NAMES[config.resample_filter]}")
    print(f"Supported input extensions: {', '.join(config.supported_extensions)}")
    print(f"Log Level: {logging.getLevelName(logging.getLogger().getEffectiveLevel())}")
    print("=" * 76)


def prepare_run_directory(config: Config) -> str:
    """
    Makes sure the base folders exist and creates this run's timestamped folder.

    Raises:
        StartupError: when any of the folders cannot be created.
    """
    try:
        ensure_directory_exists(config.input_folder)
        ensure_directory_exists(config.output_folder)
        run_dir = os.path.join(config.output_folder, create_timestamped_folder_name())
        ensure_directory_exists(run_dir)
    except OSError as e:
        raise StartupError(f"Could not create output directories: {e}") from e
    return run_dir


def print_summary(report: BatchReport, run_dir: str) -> None:
    print("\n\n--- Processing Summary ---")
    print(f"Successful: {report.successful}")
    print(f"Failed: {report.failed}")
    print(f"Total output files: {report.total_output_files}")

    if report.failures:
        print("\n[Failed files]")
        for input_file, error in report.failures:
            print(f"  - {input_file}: {error}")

    print("\n--- Processing complete ---")
    print(f"Results saved in: '{run_dir}'")


def run(config: Config) -> Optional[List[ProcessingResult]]:
    """
    Runs one batch with config. Returns None when the input folder holds no
    supported images.

    Raises:
        StartupError: for failures that must abort the whole run.
    """
    run_dir = prepare_run_directory(config)
    logger.info(f"Created output folder: {os.path.basename(run_dir)}")

    image_files = get_image_files(config.input_folder, config)
    if not image_files:
        print("No supported image files found in input folder.")
        print(f"Supported formats: {', '.join(config.supported_extensions)}")
        return None

    logger.info(f"Found {len(image_files)} image(s) to process")
    results = asyncio.run(run_batch(image_files, run_dir, config))
    print_summary(summarize(results), run_dir)
    return results


def main(argv: Optional[Sequence[str]] = None, config: Config = DEFAULT_CONFIG) -> None:
    """
    Entry point. Exits 0 after a completed run (even with failed images), 1 on
    startup failures and 2 on unexpected errors.
    """
    args = get_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        logger.info(f"===== Matrix Resizer Started (v{__version__}) =====")
        display_settings(config)
        run(config)
        logger.info("===== Matrix Resizer Finished =====")
    except StartupError as e:
        logger.critical(f"(!) Fatal error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.critical(f"An unhandled critical exception occurred: {e}", exc_info=True)
        print(f"\n(!) Critical Error: {e}. Check logs for details.")
        sys.exit(2)
    sys.exit(0)
