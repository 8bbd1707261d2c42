from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pytest
from PIL import Image

from macocr_cli.config import PipelineConfig, RecognitionConfig
from macocr_cli.ocr.base import NormalizedQuad, OCREngineError


def rect_quad(x: float, y: float, width: float, height: float) -> NormalizedQuad:
    return NormalizedQuad.from_rect(x, y, width, height)


@dataclass
class FakeCandidate:
    """Candidate whose sub-range geometry comes from a lookup table."""

    text: str
    confidence: float = 0.9
    quad: Optional[NormalizedQuad] = None
    ranges: Dict[Tuple[int, int], NormalizedQuad] = field(default_factory=dict)
    evenly_spaced: bool = True
    missing: Tuple[Tuple[int, int], ...] = ()

    def bounding_quad(self, start: int, end: int) -> Optional[NormalizedQuad]:
        if (start, end) in self.missing:
            return None
        if (start, end) in self.ranges:
            return self.ranges[(start, end)]
        if not self.evenly_spaced or not self.text or end > len(self.text):
            return None
        # Spread the line across the top tenth of the image.
        step = 1.0 / len(self.text)
        return rect_quad(start * step, 0.9, (end - start) * step, 0.1)


@dataclass
class FakeEngine:
    name: str = "fake"
    pages: List[List[FakeCandidate]] = field(default_factory=list)
    fail_calls: Tuple[int, ...] = ()
    calls: List[Tuple[Tuple[int, int], Tuple[str, ...]]] = field(default_factory=list)

    def recognize(self, image: Image.Image, languages: Sequence[str]) -> List[FakeCandidate]:
        call = len(self.calls)
        self.calls.append((image.size, tuple(languages)))
        if call in self.fail_calls:
            raise OCREngineError("engine exploded")
        if not self.pages:
            return []
        return list(self.pages[call % len(self.pages)])

    def supported_languages(self) -> List[str]:
        return ["en-US", "fr-FR", "zh-Hans"]


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig(dpi=144, recognition=RecognitionConfig(engine="fake"))


@pytest.fixture
def make_image(tmp_path):
    def _make(name: str, size: Tuple[int, int] = (200, 100)):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, "white").save(path)
        return path

    return _make
