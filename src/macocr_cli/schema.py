from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .geometry.segmenter import SegmentLevel
from .geometry.transform import PixelBox
from .utils.ordering import sorted_keys

# Whole pixels by default, 3-decimal Decimals in fixed-precision mode.
Number = Union[int, Decimal]


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: Number
    y: Number
    width: Number
    height: Number


class TextUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    confidence: float
    level: SegmentLevel
    bbox: BoundingBox
    x0: Number
    y0: Number
    x1: Number
    y1: Number
    x2: Number
    y2: Number
    x3: Number
    y3: Number

    @field_serializer("level")
    def _serialize_level(self, level: SegmentLevel) -> str:
        return level.value

    @classmethod
    def from_box(cls, text: str, confidence: float, level: SegmentLevel, box: PixelBox) -> "TextUnit":
        x0, y0, x1, y1, x2, y2, x3, y3 = box.corners
        return cls(
            text=text,
            confidence=confidence,
            level=level,
            bbox=BoundingBox(x=box.x, y=box.y, width=box.width, height=box.height),
            x0=x0,
            y0=y0,
            x1=x1,
            y1=y1,
            x2=x2,
            y2=y2,
            x3=x3,
            y3=y3,
        )


class PageResult(BaseModel):
    page: Optional[int] = Field(None, description="1-based page number, PDFs only")
    width: int
    height: int
    text: str = ""
    observations: List[TextUnit] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when recognition failed or found no text at all."""
        return not self.text and not self.observations

    def texts(self) -> List[str]:
        return [unit.text for unit in self.observations]

    def ordered(self) -> dict:
        """Return an ordered dict; fixed-precision coordinates stay Decimal."""
        return self.model_dump(exclude_none=True)


class Dpi(BaseModel):
    x: float
    y: float


class ImageDocument(BaseModel):
    source: str
    result: PageResult

    def ordered(self) -> dict:
        return self.result.ordered()


class BatchDocument(BaseModel):
    source: str
    results: Dict[str, PageResult] = Field(default_factory=dict)

    def file_names(self) -> List[str]:
        return sorted_keys(self.results)

    def ordered(self) -> dict:
        return {name: self.results[name].ordered() for name in self.file_names()}


class PdfDocument(BaseModel):
    source: str
    page_count: int
    dpi: Optional[Dpi] = None
    pages: List[PageResult] = Field(default_factory=list)

    def ordered(self) -> dict:
        return {
            "source": self.source,
            "page_count": self.page_count,
            "dpi": self.dpi.model_dump() if self.dpi else None,
            "pages": [page.ordered() for page in self.pages],
        }


DocumentResult = Union[ImageDocument, BatchDocument, PdfDocument]
