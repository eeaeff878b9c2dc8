# -*- coding: utf-8 -*-
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class ImageMetadata:
    """
    date_created:
        Capture date as YYYY-MM-DD. Used only to build output file names.
    width / height:
        Source pixel dimensions when they could be read, else None.
    """
    date_created: str
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class PreparedSource:
    """What gets handed to the encoder: a decoded in-memory buffer, or the raw path."""
    decoded_buffer: Optional[bytes]
    effective_path: str


@dataclass(frozen=True)
class OutputEntry:
    format: str
    size: int
    file_name: str
    relative_path: str


@dataclass(frozen=True)
class OutputPlan:
    folder_name: str
    entries: Tuple[OutputEntry, ...] = ()

    @property
    def formats(self) -> Tuple[str, ...]:
        seen = []
        for entry in self.entries:
            if entry.format not in seen:
                seen.append(entry.format)
        return tuple(seen)


@dataclass(frozen=True)
class ProcessingResult:
    input_file: str
    output_files: Tuple[str, ...] = ()
    success: bool = False
    error: Optional[str] = None

    @classmethod
    def ok(cls, input_file: str, output_files: Iterable[str]) -> "ProcessingResult":
        return cls(input_file=input_file, output_files=tuple(output_files), success=True, error=None)

    @classmethod
    def failed(cls, input_file: str, error: str) -> "ProcessingResult":
        # A failed image never reports partial output.
        return cls(input_file=input_file, output_files=(), success=False, error=error or "Unknown error")


@dataclass(frozen=True)
class BatchReport:
    successful: int = 0
    failed: int = 0
    total_output_files: int = 0
    failures: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return self.successful + self.failed
