from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .geometry.transform import round_fixed
from .schema import BatchDocument, Dpi, ImageDocument, PageResult, PdfDocument
from .utils.files import POINTS_PER_INCH
from .utils.logging import get_logger

logger = get_logger("aggregation")

PAGE_RANGE_PATTERN = re.compile(r"\s*(\d+)\s*(?:-\s*(\d+)\s*)?")


class PageRangeError(ValueError):
    pass


@dataclass(frozen=True)
class PageRange:
    """Inclusive, 1-based page range."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1:
            raise PageRangeError(f"Page range must start at 1 or later, got {self.start}")
        if self.end < self.start:
            raise PageRangeError(f"Invalid page range {self.start}-{self.end}: end before start")

    def pages(self) -> range:
        return range(self.start, self.end + 1)

    def clamp(self, page_count: int) -> "PageRange":
        if self.start > page_count:
            raise PageRangeError(
                f"Page range {self.start}-{self.end} starts beyond the last page ({page_count})"
            )
        if self.end > page_count:
            logger.warning(
                "Page range end %d exceeds page count %d; clamping", self.end, page_count
            )
            return PageRange(self.start, page_count)
        return self


def parse_page_range(value: str) -> PageRange:
    """Parse ``"2-5"`` or ``"3"``."""
    match = PAGE_RANGE_PATTERN.fullmatch(value or "")
    if not match:
        raise PageRangeError(f"Invalid page range '{value}'. Expected N or N-M.")
    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else start
    return PageRange(start, end)


def select_pages(page_count: int, page_range: Optional[PageRange]) -> range:
    if page_range is None:
        return range(1, page_count + 1)
    return page_range.clamp(page_count).pages()


def compute_dpi(pixel_size: Tuple[int, int], point_size: Tuple[float, float]) -> Dpi:
    """DPI of a rendered page from its pixel size and its size in points."""
    pixel_width, pixel_height = pixel_size
    point_width, point_height = point_size
    return Dpi(
        x=float(round_fixed(pixel_width / (point_width / POINTS_PER_INCH))),
        y=float(round_fixed(pixel_height / (point_height / POINTS_PER_INCH))),
    )


def build_image_document(source: Path, result: PageResult) -> ImageDocument:
    return ImageDocument(source=source.name, result=result)


def build_batch_document(source: Path, results: Iterable[Tuple[str, PageResult]]) -> BatchDocument:
    """Map file names to results, leaving out files where nothing was recognized."""
    document = BatchDocument(source=source.name)
    for name, result in results:
        if result.is_empty:
            logger.info("No text recognized in %s; omitting from batch output", name)
            continue
        document.results[name] = result
    return document


def build_pdf_document(
    source: Path,
    page_count: int,
    pages: List[PageResult],
    dpi: Optional[Dpi],
) -> PdfDocument:
    return PdfDocument(
        source=source.name,
        page_count=page_count,
        dpi=dpi,
        pages=sorted(pages, key=lambda page: page.page or 0),
    )
