# -*- coding: utf-8 -*-


class MatrixResizerError(Exception):
    """Base class for errors raised by the matrix resizer."""


class EncodeError(MatrixResizerError):
    """A single resize/encode/write call failed. The message is user facing."""


class StartupError(MatrixResizerError):
    """The run cannot start (base folders or run folder unusable)."""
