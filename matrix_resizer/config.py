# -*- coding: utf-8 -*-
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# User-friendly names for resize filters.
FILTER_NAMES: Dict[str, str] = {
    "lanczos": "LANCZOS (High quality)",
    "bicubic": "BICUBIC (Medium quality)",
    "bilinear": "BILINEAR (Low quality)",
    "nearest": "NEAREST (Lowest quality)",
}

# Target format key -> Pillow format name.
OUTPUT_FORMATS: Dict[str, str] = {
    "png": "PNG",
    "webp": "WEBP",
    "jpg": "JPEG",
    "jpeg": "JPEG",
}

HEIC_EXTENSION = ".heic"
SVG_EXTENSION = ".svg"


@dataclass(frozen=True)
class Config:
    """
    Immutable run configuration.

    Built once at process start (see DEFAULT_CONFIG) and passed explicitly to the
    batch driver, the pipeline, the planner and the encoder. Tests derive their own
    instances with dataclasses.replace().
    """
    input_folder: str = "./input"
    output_folder: str = "./output"
    target_formats: Tuple[str, ...] = ("png", "webp")
    output_sizes: Tuple[int, ...] = (60, 120, 300, 600, 1200)  # pixel dimensions
    supported_extensions: Tuple[str, ...] = (".png", ".jpg", ".jpeg", ".heic", ".svg")

    random_id_length: int = 8
    resample_filter: str = "lanczos"
    webp_quality: int = 80  # Quality for lossy WEBP output.
    jpg_quality: int = 95
    max_concurrency: Optional[int] = None  # None launches every image at once.
    show_progress: bool = True

    def __post_init__(self):
        # Frozen dataclass: normalized values go through object.__setattr__.
        object.__setattr__(self, "target_formats", tuple(f.lower().lstrip(".") for f in self.target_formats))
        object.__setattr__(self, "output_sizes", tuple(int(s) for s in self.output_sizes))
        object.__setattr__(
            self,
            "supported_extensions",
            tuple(f".{ext.lower().lstrip('.')}" for ext in self.supported_extensions),
        )
        self._validate()

    def _validate(self):
        if not self.target_formats:
            raise ValueError("At least one target format is required.")
        for fmt in self.target_formats:
            if fmt not in OUTPUT_FORMATS:
                raise ValueError(f"Unsupported target format '{fmt}'. Choose from: {', '.join(OUTPUT_FORMATS)}")
        if len(set(self.target_formats)) != len(self.target_formats):
            raise ValueError(f"Target formats must not repeat: {self.target_formats}")

        if not self.output_sizes:
            raise ValueError("At least one output size is required.")
        if any(size <= 0 for size in self.output_sizes):
            raise ValueError(f"Output sizes must be positive integers, got {self.output_sizes}")
        if len(set(self.output_sizes)) != len(self.output_sizes):
            raise ValueError(f"Output sizes must not repeat: {self.output_sizes}")

        if self.resample_filter not in FILTER_NAMES:
            raise ValueError(f"Unknown resample filter '{self.resample_filter}'.")
        if not (1 <= self.webp_quality <= 100):
            raise ValueError(f"webp_quality must be between 1 and 100 (inclusive), got {self.webp_quality}.")
        if not (1 <= self.jpg_quality <= 100):
            raise ValueError(f"jpg_quality must be between 1 and 100 (inclusive), got {self.jpg_quality}.")
        if self.random_id_length <= 0:
            raise ValueError("random_id_length must be greater than 0.")
        if self.max_concurrency is not None and self.max_concurrency <= 0:
            raise ValueError("max_concurrency must be greater than 0 when set.")

    @property
    def outputs_per_image(self) -> int:
        return len(self.target_formats) * len(self.output_sizes)


DEFAULT_CONFIG = Config()
