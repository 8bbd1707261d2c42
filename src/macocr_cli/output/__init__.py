"""Document serialization and output path policy."""

from .writer import (
    OutputError,
    OutputFormat,
    output_format_for,
    render_json,
    render_text,
    resolve_output_path,
    write_document,
)

__all__ = [
    "OutputError",
    "OutputFormat",
    "output_format_for",
    "render_json",
    "render_text",
    "resolve_output_path",
    "write_document",
]
