from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

import regex

from ..ocr.base import NormalizedQuad, RecognizedCandidate

GRAPHEME_PATTERN = regex.compile(r"\X")

# Scripts written without spaces between words. Word mode falls back to
# per-character units for these. Covers Vision and Tesseract language codes.
NON_SPACE_LANGUAGES = frozenset(
    {
        "zh-hans",
        "zh-hant",
        "yue-hans",
        "yue-hant",
        "ja",
        "ja-jp",
        "th",
        "th-th",
        "lo",
        "lo-la",
        "km",
        "km-kh",
        "my",
        "my-mm",
        "bo",
        "chi_sim",
        "chi_tra",
        "chi_sim_vert",
        "chi_tra_vert",
        "jpn",
        "jpn_vert",
        "tha",
        "lao",
        "khm",
        "mya",
        "bod",
    }
)


class SegmentLevel(str, Enum):
    LINE = "line"
    WORD = "word"
    CHARACTER = "character"


@dataclass(frozen=True)
class TextSegment:
    text: str
    confidence: float
    level: SegmentLevel
    quad: Optional[NormalizedQuad]


def uses_space_delimiters(languages: Sequence[str]) -> bool:
    """Whether the primary recognition language separates words with spaces."""
    if not languages:
        return True
    return languages[0].strip().lower() not in NON_SPACE_LANGUAGES


def word_spans(text: str) -> Iterator[Tuple[str, int, int]]:
    """
    Yield ``(word, start, end)`` for each space separated word.

    Positions advance by exactly one delimiter per word, so runs of spaces or
    leading whitespace shift every later range.
    """
    position = 0
    for word in (piece for piece in text.split(" ") if piece):
        end = position + len(word)
        yield word, position, end
        position = end + 1


def character_spans(text: str) -> Iterator[Tuple[str, int, int]]:
    """Yield ``(grapheme, start, end)`` for each visible character."""
    position = 0
    for grapheme in GRAPHEME_PATTERN.findall(text):
        end = position + len(grapheme)
        if not grapheme.isspace():
            yield grapheme, position, end
        position = end


def segment_candidate(
    candidate: RecognizedCandidate,
    level: SegmentLevel = SegmentLevel.LINE,
    languages: Sequence[str] = (),
) -> List[TextSegment]:
    text = candidate.text
    if level is SegmentLevel.LINE:
        quad = candidate.bounding_quad(0, len(text)) or candidate.quad
        return [TextSegment(text=text, confidence=candidate.confidence, level=level, quad=quad)]

    if level is SegmentLevel.WORD and uses_space_delimiters(languages):
        spans = word_spans(text)
    else:
        spans = character_spans(text)

    segments: List[TextSegment] = []
    for piece, start, end in spans:
        quad = candidate.bounding_quad(start, end)
        if quad is None:
            continue
        segments.append(
            TextSegment(text=piece, confidence=candidate.confidence, level=level, quad=quad)
        )
    return segments
