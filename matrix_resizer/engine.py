# -*- coding: utf-8 -*-
import io
import os
import logging
from typing import Any, Dict

from PIL import Image, ImageOps, UnidentifiedImageError
from pillow_heif import register_heif_opener

from .config import Config, OUTPUT_FORMATS, SVG_EXTENSION
from .errors import EncodeError
from .models import PreparedSource

# Native HEIC decoding for files the normalizer could not transcode.
register_heif_opener()

logger = logging.getLogger(__name__)

_PIL_RESAMPLE_FILTERS = {
    "lanczos": Image.Resampling.LANCZOS,  # Highest quality
    "bicubic": Image.Resampling.BICUBIC,
    "bilinear": Image.Resampling.BILINEAR,
    "nearest": Image.Resampling.NEAREST,  # Lowest quality, fastest
}

_PNG_MODES = ("1", "L", "LA", "I", "P", "RGB", "RGBA")


def rasterize_svg(svg_path: str) -> bytes:
    # cairosvg loads the native cairo library on import; only SVG inputs need it.
    import cairosvg

    return cairosvg.svg2png(url=svg_path)


def open_source(source: PreparedSource) -> Image.Image:
    """
    Opens the image the encoder should read: the decoded buffer when there is one,
    a rasterized copy for SVG, otherwise the file itself.
    """
    if source.decoded_buffer is not None:
        return Image.open(io.BytesIO(source.decoded_buffer))
    if os.path.splitext(source.effective_path)[1].lower() == SVG_EXTENSION:
        return Image.open(io.BytesIO(rasterize_svg(source.effective_path)))
    return Image.open(source.effective_path)


def fit_within_box(img: Image.Image, size: int, resample_filter: Any) -> Image.Image:
    """
    Scales img down to fit inside a size x size box, keeping the aspect ratio.
    Images that already fit are returned unchanged (never enlarged).
    """
    original_width, original_height = img.size
    if original_width <= 0 or original_height <= 0:
        logger.warning(f"Original image dimensions ({original_width}x{original_height}) are invalid. Skipping resize.")
        return img

    ratio_calc = min(size / original_width, size / original_height)
    if ratio_calc >= 1:
        logger.debug(f"({original_width},{original_height}) already fits in {size}x{size}. Skipping resize.")
        return img

    new_width = max(1, round(original_width * ratio_calc))
    new_height = max(1, round(original_height * ratio_calc))
    logger.debug(f"Resizing (aspect ratio): ({original_width},{original_height}) -> ({new_width},{new_height})")
    return img.resize((new_width, new_height), resample_filter)


def prepare_image_for_save(img: Image.Image, output_format: str) -> Image.Image:
    """
    Converts the image mode where the target format needs it.
    JPEG drops alpha by compositing onto white; WEBP and PNG get RGB(A).
    """
    save_img = img
    original_mode = img.mode
    pillow_format = OUTPUT_FORMATS[output_format]

    if pillow_format == "JPEG":
        if img.mode == "P":
            save_img = img.convert("RGBA") if "transparency" in img.info else img.convert("RGB")
        if save_img.mode in ("RGBA", "LA"):
            background = Image.new("RGB", save_img.size, (255, 255, 255))
            background.paste(save_img, (0, 0), mask=save_img.split()[-1])
            save_img = background
        elif save_img.mode != "RGB":
            save_img = save_img.convert("RGB")
    elif pillow_format == "WEBP":
        if img.mode not in ("RGB", "RGBA"):
            has_alpha = img.mode in ("LA", "PA") or "transparency" in img.info
            save_img = img.convert("RGBA" if has_alpha else "RGB")
    elif pillow_format == "PNG":
        if img.mode not in _PNG_MODES:
            save_img = img.convert("RGB")

    if save_img.mode != original_mode:
        logger.debug(f"Image mode converted: '{original_mode}' -> '{save_img.mode}' (Target output format: {output_format})")
    return save_img


def _save_options(output_format: str, config: Config) -> Dict[str, Any]:
    pillow_format = OUTPUT_FORMATS[output_format]
    if pillow_format == "JPEG":
        return {"quality": config.jpg_quality, "optimize": True, "progressive": True}
    if pillow_format == "WEBP":
        return {"quality": config.webp_quality}
    if pillow_format == "PNG":
        return {"optimize": True}
    return {}


def resize_and_encode(source: PreparedSource, size: int, output_format: str, output_path: str, config: Config) -> str:
    """
    Fits the source into a size x size box and writes it to output_path.

    Args:
        source: Buffer or path to read from.
        size: Bounding box edge in pixels, applied to width and height.
        output_format: Target format key (see config.OUTPUT_FORMATS).
        output_path: Destination file.
        config: Run configuration (filter, qualities).

    Returns:
        output_path.

    Raises:
        EncodeError: for any read, decode, encode or write failure.
    """
    if output_format not in OUTPUT_FORMATS:
        raise EncodeError(f"Unsupported output format '{output_format}'.")

    try:
        with open_source(source) as img:
            img = ImageOps.exif_transpose(img)
            resized = fit_within_box(img, size, _PIL_RESAMPLE_FILTERS[config.resample_filter])
            prepared = prepare_image_for_save(resized, output_format)
            prepared.save(output_path, format=OUTPUT_FORMATS[output_format], **_save_options(output_format, config))
        return output_path
    except UnidentifiedImageError as e:
        raise EncodeError("Invalid or corrupted image file. Pillow could not identify the image format.") from e
    except PermissionError as e:
        raise EncodeError(f"File read/write permission denied ({e}).") from e
    except FileNotFoundError as e:
        raise EncodeError(f"File not found ({e}).") from e
    except OSError as e:
        if os.path.exists(output_path):
            try:
                os.remove(output_path)
                logger.warning(f"Removed partially written output file: '{output_path}'")
            except OSError as rm_e:
                logger.error(f"Could not remove partially written output file '{output_path}': {rm_e}")
        raise EncodeError(f"File system or OS-level error occurred ({e}).") from e
    except ValueError as e:
        raise EncodeError(f"Image processing value error, likely from Pillow ({e}).") from e
    except Exception as e:
        raise EncodeError(f"An unexpected error occurred ({type(e).__name__}: {e}).") from e
