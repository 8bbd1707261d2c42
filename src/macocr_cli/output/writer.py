from __future__ import annotations

import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import List, Optional

import simplejson

from ..schema import BatchDocument, DocumentResult, ImageDocument, PdfDocument
from ..utils.files import InputKind
from ..utils.logging import get_logger

logger = get_logger("output.writer")

EXPLICIT_SUFFIXES = {".json", ".txt"}


class OutputError(RuntimeError):
    pass


class OutputFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


def output_format_for(path: Path) -> OutputFormat:
    if path.suffix.lower() == ".txt":
        return OutputFormat.TEXT
    return OutputFormat.JSON


def default_output_name(input_path: Path, kind: InputKind) -> str:
    if kind is InputKind.BATCH:
        return "batch_output.json"
    if kind is InputKind.PDF:
        return f"{input_path.stem}_pdf_output.json"
    return f"{input_path.stem}.json"


def resolve_output_path(input_path: Path, explicit: Optional[Path], kind: InputKind) -> Path:
    """
    Decide where a document is written.

    ``.json``/``.txt`` paths are used as given, any other explicit path is a
    directory receiving the default file name, and without a path the default
    file lands next to the input (inside it for a directory of images).
    """
    name = default_output_name(input_path, kind)
    if explicit is not None:
        if explicit.suffix.lower() in EXPLICIT_SUFFIXES:
            return explicit
        return explicit / name
    if kind is InputKind.BATCH:
        return input_path / name
    return input_path.parent / name


def render_json(document: DocumentResult, indent: int = 2) -> str:
    # use_decimal writes fixed-precision coordinates as bare numbers such as 25.000.
    return simplejson.dumps(document.ordered(), indent=indent, ensure_ascii=False, use_decimal=True)


def render_text(document: DocumentResult) -> str:
    blocks: List[str] = []
    if isinstance(document, BatchDocument):
        for name in document.file_names():
            lines = [f"=== {name} ==="] + document.results[name].texts()
            blocks.append("\n".join(lines))
    elif isinstance(document, PdfDocument):
        blocks = ["\n".join(page.texts()) for page in document.pages]
    elif isinstance(document, ImageDocument):
        blocks = ["\n".join(document.result.texts())]
    else:
        raise OutputError(f"Unsupported document type: {type(document).__name__}")
    return "\n\n".join(blocks) + "\n"


def render(document: DocumentResult, output_format: OutputFormat, indent: int = 2) -> str:
    if output_format is OutputFormat.TEXT:
        return render_text(document)
    return render_json(document, indent=indent)


def write_document(document: DocumentResult, path: Path, indent: int = 2) -> Path:
    """
    Serialize ``document`` fully, then move it into place in one step.
    """
    output_format = output_format_for(path)
    try:
        content = render(document, output_format, indent=indent)
    except (TypeError, ValueError) as exc:
        raise OutputError(f"Failed to serialize output: {exc}") from exc

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
        ) as handle:
            tmp_name = handle.name
            handle.write(content)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputError(f"Failed to write {path}: {exc}") from exc
    logger.info("Wrote %s output to %s", output_format.value, path)
    return path
