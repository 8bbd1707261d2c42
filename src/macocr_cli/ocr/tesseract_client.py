from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from PIL import Image

import pytesseract

from ..utils.logging import get_logger
from .base import BaseOCREngine, NormalizedQuad, OCREngineError

logger = get_logger("ocr.tesseract")

# Vision-style language identifiers mapped onto Tesseract traineddata names.
TESSERACT_LANGUAGES = {
    "en": "eng",
    "en-us": "eng",
    "en-gb": "eng",
    "fr": "fra",
    "fr-fr": "fra",
    "de": "deu",
    "de-de": "deu",
    "es": "spa",
    "es-es": "spa",
    "it": "ita",
    "it-it": "ita",
    "pt": "por",
    "pt-br": "por",
    "ru": "rus",
    "ru-ru": "rus",
    "uk": "ukr",
    "uk-ua": "ukr",
    "ko": "kor",
    "ko-kr": "kor",
    "ja": "jpn",
    "ja-jp": "jpn",
    "zh-hans": "chi_sim",
    "zh-hant": "chi_tra",
    "th": "tha",
    "th-th": "tha",
    "vi": "vie",
    "vi-vt": "vie",
    "ar": "ara",
    "ar-sa": "ara",
}

WORD_LEVEL = 5


def tesseract_language(languages: Sequence[str]) -> str:
    codes: List[str] = []
    for language in languages:
        code = TESSERACT_LANGUAGES.get(language.strip().lower(), language.strip())
        if code and code not in codes:
            codes.append(code)
    return "+".join(codes) or "eng"


@dataclass(frozen=True)
class WordBox:
    """One Tesseract word, pixel space with origin top-left."""

    text: str
    start: int
    end: int
    left: int
    top: int
    width: int
    height: int


@dataclass
class TesseractCandidate:
    """A text line assembled from Tesseract word boxes."""

    text: str
    confidence: float
    words: List[WordBox]
    image_width: int
    image_height: int
    quad: Optional[NormalizedQuad] = field(default=None)

    def __post_init__(self) -> None:
        if self.quad is None and self.words:
            self.quad = self._normalize(
                min(word.left for word in self.words),
                min(word.top for word in self.words),
                max(word.left + word.width for word in self.words),
                max(word.top + word.height for word in self.words),
            )

    def bounding_quad(self, start: int, end: int) -> Optional[NormalizedQuad]:
        if start < 0 or end > len(self.text) or start >= end:
            return None
        spans: List[Tuple[float, float, int, int]] = []
        for word in self.words:
            overlap_start = max(start, word.start)
            overlap_end = min(end, word.end)
            if overlap_start >= overlap_end:
                continue
            # Character ranges inside a word are spread evenly across its box.
            char_width = word.width / max(len(word.text), 1)
            left = word.left + (overlap_start - word.start) * char_width
            right = word.left + (overlap_end - word.start) * char_width
            spans.append((left, right, word.top, word.top + word.height))
        if not spans:
            return None
        return self._normalize(
            min(span[0] for span in spans),
            min(span[2] for span in spans),
            max(span[1] for span in spans),
            max(span[3] for span in spans),
        )

    def _normalize(self, left: float, top: float, right: float, bottom: float) -> NormalizedQuad:
        width = float(self.image_width)
        height = float(self.image_height)
        return NormalizedQuad.from_rect(
            left / width,
            1.0 - bottom / height,
            (right - left) / width,
            (bottom - top) / height,
        )


@dataclass
class TesseractOCREngine(BaseOCREngine):
    """Line-level OCR engine powered by pytesseract."""

    name: str = "tesseract"

    def recognize(self, image: Image.Image, languages: Sequence[str]) -> List[TesseractCandidate]:
        lang = tesseract_language(languages)
        try:
            data = pytesseract.image_to_data(image, lang=lang, output_type=pytesseract.Output.DICT)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as exc:
            raise OCREngineError(f"Tesseract failed: {exc}") from exc
        return self._group_lines(data, image.width, image.height)

    def supported_languages(self) -> List[str]:
        try:
            return sorted(pytesseract.get_languages(config=""))
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as exc:
            raise OCREngineError(f"Unable to list Tesseract languages: {exc}") from exc

    def _group_lines(self, data: Dict[str, list], width: int, height: int) -> List[TesseractCandidate]:
        lines: Dict[Tuple[int, int, int], List[int]] = {}
        for idx in range(len(data["text"])):
            if int(data["level"][idx]) != WORD_LEVEL:
                continue
            if not str(data["text"][idx]).strip():
                continue
            key = (int(data["block_num"][idx]), int(data["par_num"][idx]), int(data["line_num"][idx]))
            lines.setdefault(key, []).append(idx)

        candidates: List[TesseractCandidate] = []
        for indices in lines.values():
            words: List[WordBox] = []
            scores: List[float] = []
            position = 0
            for idx in indices:
                text = str(data["text"][idx]).strip()
                words.append(
                    WordBox(
                        text=text,
                        start=position,
                        end=position + len(text),
                        left=int(data["left"][idx]),
                        top=int(data["top"][idx]),
                        width=int(data["width"][idx]),
                        height=int(data["height"][idx]),
                    )
                )
                position += len(text) + 1
                try:
                    conf = float(data["conf"][idx])
                except (TypeError, ValueError):
                    continue
                if conf >= 0:
                    scores.append(conf / 100.0)
            candidates.append(
                TesseractCandidate(
                    text=" ".join(word.text for word in words),
                    confidence=sum(scores) / len(scores) if scores else 0.0,
                    words=words,
                    image_width=width,
                    image_height=height,
                )
            )
        logger.debug("Tesseract grouped %d lines", len(candidates))
        return candidates
