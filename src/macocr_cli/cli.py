from __future__ import annotations

import argparse
import dataclasses
import locale
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .aggregation import PageRange, PageRangeError, parse_page_range
from .config import PipelineConfig, load_config, parse_languages
from .geometry.segmenter import SegmentLevel
from .ocr.base import OCREngineError
from .output.writer import OutputError, resolve_output_path, write_document
from .pipeline import OCRPipeline
from .utils.files import InputError, classify_input
from .utils.logging import configure_logging, get_logger

logger = get_logger("cli")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="macocr",
        description="Recognize text in an image, a directory of images or a PDF and "
        "write pixel-space boxes as JSON or plain text.",
    )
    parser.add_argument("input", nargs="?", type=Path, help="Image file, image directory or PDF.")
    parser.add_argument(
        "-l",
        "--langs",
        default=None,
        help="Comma separated recognition languages, e.g. en-US,fr-FR.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output .json/.txt file, or a directory for the default file name.",
    )
    parser.add_argument("--pages", default=None, help="PDF page range, e.g. 2-5 or 3.")
    parser.add_argument(
        "--level",
        choices=[level.value for level in SegmentLevel],
        default=None,
        help="Emit lines (default), words or characters.",
    )
    parser.add_argument("--fast", action="store_true", help="Use the fast recognition mode.")
    parser.add_argument(
        "--lang-correction",
        action="store_true",
        help="Enable the engine's language correction.",
    )
    parser.add_argument(
        "--fixed-precision",
        action="store_true",
        help="Emit coordinates rounded to 3 decimals instead of whole pixels.",
    )
    parser.add_argument(
        "--engine",
        choices=["vision", "tesseract"],
        default=None,
        help="Recognition engine (default from config: vision).",
    )
    parser.add_argument("--dpi", type=int, default=None, help="PDF render resolution.")
    parser.add_argument("--config", type=Path, default=None, help="Optional path to config.yaml")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    parser.add_argument(
        "--list-langs",
        action="store_true",
        help="List the languages supported by the engine and exit.",
    )
    return parser


def apply_overrides(config: PipelineConfig, args: argparse.Namespace) -> PipelineConfig:
    recognition = config.recognition
    if args.langs:
        recognition = dataclasses.replace(recognition, languages=parse_languages(args.langs))
    if args.level:
        recognition = dataclasses.replace(recognition, level=SegmentLevel(args.level))
    if args.fast:
        recognition = dataclasses.replace(recognition, fast_mode=True)
    if args.lang_correction:
        recognition = dataclasses.replace(recognition, use_language_correction=True)
    if args.engine:
        recognition = dataclasses.replace(recognition, engine=args.engine)

    output = config.output
    if args.fixed_precision:
        output = dataclasses.replace(output, fixed_precision=True)

    return dataclasses.replace(
        config,
        dpi=args.dpi if args.dpi else config.dpi,
        recognition=recognition,
        output=output,
    )


def list_languages(pipeline: OCRPipeline) -> int:
    try:
        languages = pipeline.ocr_engine.supported_languages()
    except OCREngineError as exc:
        logger.error("%s", exc)
        return 1
    for language in languages:
        print(language)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # argparse exits with 2 on bad arguments; --help exits with 0.
        return 0 if not exc.code else 1
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.debug("Falling back to the C collation for file ordering")

    config = apply_overrides(load_config(args.config), args)
    logger.debug("Configuration: %s", config.to_dict())

    if args.list_langs:
        return list_languages(OCRPipeline(config=config))

    if args.input is None:
        parser.print_usage(sys.stderr)
        logger.error("An input path is required unless --list-langs is given.")
        return 1

    input_path = args.input.expanduser()
    page_range: Optional[PageRange] = None
    try:
        if args.pages:
            page_range = parse_page_range(args.pages)
        document = OCRPipeline(config=config).run(input_path, page_range=page_range)
    except (InputError, PageRangeError) as exc:
        logger.error("%s", exc)
        return 1

    output_path = resolve_output_path(input_path, args.output, classify_input(input_path))
    try:
        write_document(document, output_path, indent=config.output.indent)
    except OutputError as exc:
        logger.error("%s", exc)
        return 1
    print(f"Processed {input_path} -> {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
