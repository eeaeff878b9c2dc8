# -*- coding: utf-8 -*-
import io
import os
import logging

from PIL import Image
import pillow_heif

from .config import HEIC_EXTENSION
from .models import PreparedSource

logger = logging.getLogger(__name__)


def convert_heic_to_buffer(input_path: str) -> bytes:
    """Decodes a HEIC file and re-encodes it in memory as a lossless PNG."""
    heif_file = pillow_heif.read_heif(input_path)
    img = Image.frombytes(
        heif_file.mode,
        heif_file.size,
        heif_file.data,
        "raw",
        heif_file.mode,
        heif_file.stride,
    )
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def prepare_image_source(input_path: str) -> PreparedSource:
    """
    Decides what the encoder reads for input_path.

    HEIC files are transcoded up front; when that fails the raw path is handed
    over and the encoder tries to decode it natively. Never raises.
    """
    if os.path.splitext(input_path)[1].lower() != HEIC_EXTENSION:
        return PreparedSource(decoded_buffer=None, effective_path=input_path)

    try:
        buffer = convert_heic_to_buffer(input_path)
    except Exception as e:
        logger.warning(f"HEIC conversion failed for {input_path}, trying the encoder directly: {type(e).__name__}: {e}")
        return PreparedSource(decoded_buffer=None, effective_path=input_path)

    logger.info(f"  -> Converted HEIC to PNG buffer for processing for {input_path}")
    return PreparedSource(decoded_buffer=buffer, effective_path=input_path)
