"""
Command-line OCR with pixel-space text geometry.

The package exposes the `OCRPipeline` entry point alongside helpers for
coordinate transforms, line segmentation, multi-page aggregation and
JSON / plain-text output.
"""

from .pipeline import OCRPipeline, PageProcessor

__all__ = ["OCRPipeline", "PageProcessor"]
