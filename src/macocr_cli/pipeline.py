from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from .aggregation import (
    PageRange,
    build_batch_document,
    build_image_document,
    build_pdf_document,
    compute_dpi,
    select_pages,
)
from .config import PipelineConfig, RecognitionConfig, load_config
from .geometry.segmenter import segment_candidate
from .geometry.transform import to_pixel_box
from .ocr.base import BaseOCREngine, OCREngineError
from .ocr.tesseract_client import TesseractOCREngine
from .schema import BatchDocument, DocumentResult, Dpi, ImageDocument, PageResult, PdfDocument, TextUnit
from .utils.files import InputError, InputKind, classify_input, iter_image_paths, load_image, open_pdf
from .utils.logging import get_logger

logger = get_logger("pipeline")


class PageProcessor:
    """Recognize one image and turn the engine's candidates into a page result."""

    def __init__(
        self,
        engine: BaseOCREngine,
        recognition: RecognitionConfig,
        fixed_precision: bool = False,
    ) -> None:
        self.engine = engine
        self.recognition = recognition
        self.fixed_precision = fixed_precision

    def process(self, image: Image.Image, page: Optional[int] = None) -> PageResult:
        width, height = image.size
        try:
            candidates = self.engine.recognize(image, self.recognition.languages)
        except OCREngineError as exc:
            logger.warning("Recognition failed%s: %s", _page_label(page), exc)
            return PageResult(page=page, width=width, height=height)
        if not candidates:
            logger.warning("Recognition returned no text%s", _page_label(page))
            return PageResult(page=page, width=width, height=height)

        units: List[TextUnit] = []
        lines: List[str] = []
        for candidate in candidates:
            lines.append(candidate.text)
            for segment in segment_candidate(
                candidate, self.recognition.level, self.recognition.languages
            ):
                box = to_pixel_box(segment.quad, width, height, self.fixed_precision)
                units.append(
                    TextUnit.from_box(segment.text, segment.confidence, segment.level, box)
                )
        logger.debug(
            "Page%s: %d candidates, %d %s units",
            _page_label(page),
            len(candidates),
            len(units),
            self.recognition.level.value,
        )
        return PageResult(
            page=page,
            width=width,
            height=height,
            text="\n".join(lines),
            observations=units,
        )


def _page_label(page: Optional[int]) -> str:
    return f" on page {page}" if page is not None else ""


class OCRPipeline:
    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        ocr_engine: Optional[BaseOCREngine] = None,
    ) -> None:
        self.config = config or load_config()
        self.ocr_engine = ocr_engine or self._build_ocr_engine()
        self.page_processor = PageProcessor(
            self.ocr_engine,
            self.config.recognition,
            fixed_precision=self.config.output.fixed_precision,
        )

    def run(self, path: Path, page_range: Optional[PageRange] = None) -> DocumentResult:
        path = path.expanduser()
        if not path.exists():
            raise InputError(f"Input not found: {path}")
        kind = classify_input(path)
        logger.info("Processing %s (%s)", path, kind.value)
        if kind is InputKind.BATCH:
            return self.run_batch(path)
        if kind is InputKind.PDF:
            return self.run_pdf(path, page_range)
        return self.run_image(path)

    def run_image(self, path: Path) -> ImageDocument:
        image = load_image(path)
        result = self.page_processor.process(image)
        return build_image_document(path, result)

    def run_batch(self, directory: Path) -> BatchDocument:
        results: List[Tuple[str, PageResult]] = []
        for image_path in iter_image_paths(directory):
            try:
                image = load_image(image_path)
            except InputError as exc:
                logger.warning("Skipping %s: %s", image_path.name, exc)
                continue
            results.append((image_path.name, self.page_processor.process(image)))
        document = build_batch_document(directory, results)
        logger.info("Batch produced results for %d of %d images", len(document.results), len(results))
        return document

    def run_pdf(self, path: Path, page_range: Optional[PageRange] = None) -> PdfDocument:
        pages: List[PageResult] = []
        dpi: Optional[Dpi] = None
        with open_pdf(path) as pdf:
            page_count = pdf.page_count
            selected = select_pages(page_count, page_range)
            logger.info("Rendering %d of %d pages at %d dpi", len(selected), page_count, self.config.dpi)
            for page_number in selected:
                index = page_number - 1
                image = pdf.render_page(index, self.config.render_scale)
                try:
                    if dpi is None:
                        dpi = compute_dpi(image.size, pdf.page_size(index))
                    pages.append(self.page_processor.process(image, page=page_number))
                finally:
                    image.close()
        return build_pdf_document(path, page_count, pages, dpi)

    def _build_ocr_engine(self) -> BaseOCREngine:
        recognition = self.config.recognition
        engine = (recognition.engine or "vision").lower()
        if engine == "vision":
            try:
                from .ocr.vision_client import VisionOCREngine  # local import

                return VisionOCREngine(
                    fast_mode=recognition.fast_mode,
                    use_language_correction=recognition.use_language_correction,
                )
            except ImportError as exc:
                logger.warning("Failed to initialize Apple Vision (%s). Falling back to Tesseract.", exc)
                return TesseractOCREngine()
        if engine == "tesseract":
            return TesseractOCREngine()
        logger.warning("Unknown OCR engine '%s'. Falling back to Tesseract.", engine)
        return TesseractOCREngine()
