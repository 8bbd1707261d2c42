"""Utility helpers for logging, ordering and file IO."""

from .files import InputError, InputKind, classify_input, iter_image_paths, load_image, open_pdf
from .logging import configure_logging, get_logger
from .ordering import sorted_keys

__all__ = [
    "InputError",
    "InputKind",
    "classify_input",
    "iter_image_paths",
    "load_image",
    "open_pdf",
    "configure_logging",
    "get_logger",
    "sorted_keys",
]
