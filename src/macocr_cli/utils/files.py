from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Tuple

from PIL import Image, UnidentifiedImageError

try:
    import pypdfium2 as pdfium  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    pdfium = None  # type: ignore

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif", ".webp"}
POINTS_PER_INCH = 72.0


class InputError(RuntimeError):
    """Raised when an input image or PDF cannot be read."""


class InputKind(str, Enum):
    IMAGE = "image"
    BATCH = "batch"
    PDF = "pdf"


def classify_input(path: Path) -> InputKind:
    if path.is_dir():
        return InputKind.BATCH
    if path.suffix.lower() == ".pdf":
        return InputKind.PDF
    return InputKind.IMAGE


def iter_image_paths(directory: Path) -> Iterable[Path]:
    """
    Yield image files directly inside ``directory`` in name order.
    """
    for file_path in sorted(directory.iterdir()):
        if file_path.is_file() and file_path.suffix.lower() in IMAGE_SUFFIXES:
            yield file_path


def load_image(path: Path) -> Image.Image:
    """Decode an image fully into memory, releasing the file handle."""
    try:
        with Image.open(path) as image:
            image.load()
            return image.convert("RGB")
    except FileNotFoundError as exc:
        raise InputError(f"Image file not found: {path}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise InputError(f"Unable to read image: {path} ({exc})") from exc


class PdfSource:
    """Page access for one open PDF document."""

    def __init__(self, document) -> None:
        self._document = document

    @property
    def page_count(self) -> int:
        return len(self._document)

    def page_size(self, index: int) -> Tuple[float, float]:
        """Page width and height in points for the 0-based ``index``."""
        page = self._document[index]
        try:
            width, height = page.get_size()
        finally:
            page.close()
        return float(width), float(height)

    def render_page(self, index: int, scale: float) -> Image.Image:
        try:
            page = self._document[index]
        except pdfium.PdfiumError as exc:
            raise InputError(f"Unable to load page {index + 1}: {exc}") from exc
        try:
            bitmap = page.render(scale=scale)
            return bitmap.to_pil().convert("RGB")
        except pdfium.PdfiumError as exc:
            raise InputError(f"Unable to render page {index + 1}: {exc}") from exc
        finally:
            page.close()


@contextmanager
def open_pdf(path: Path) -> Iterator[PdfSource]:
    if pdfium is None:
        raise InputError("pypdfium2 is not installed. Install it to process PDF files.")
    if not path.exists():
        raise InputError(f"PDF file not found: {path}")
    try:
        document = pdfium.PdfDocument(str(path))
    except pdfium.PdfiumError as exc:
        raise InputError(f"Unable to open PDF: {path} ({exc})") from exc
    try:
        yield PdfSource(document)
    finally:
        document.close()
