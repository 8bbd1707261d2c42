from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .geometry.segmenter import SegmentLevel


DEFAULT_CONFIG_PATH = Path("configs/config.yaml")


@dataclass(frozen=True)
class RecognitionConfig:
    """Recognition engine options passed to every page."""

    engine: str = "vision"
    languages: Tuple[str, ...] = ("en-US",)
    fast_mode: bool = False
    use_language_correction: bool = False
    level: SegmentLevel = SegmentLevel.LINE


@dataclass(frozen=True)
class OutputConfig:
    """Rendering options for emitted documents."""

    fixed_precision: bool = False
    indent: int = 2


@dataclass(frozen=True)
class PipelineConfig:
    """Top-level configuration shared across pipeline modules."""

    dpi: int = 300
    recognition: RecognitionConfig = field(default_factory=RecognitionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def render_scale(self) -> float:
        return self.dpi / 72.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dpi": self.dpi,
            "recognition": {
                "engine": self.recognition.engine,
                "languages": list(self.recognition.languages),
                "fast_mode": self.recognition.fast_mode,
                "use_language_correction": self.recognition.use_language_correction,
                "level": self.recognition.level.value,
            },
            "output": {
                "fixed_precision": self.output.fixed_precision,
                "indent": self.output.indent,
            },
        }


def parse_languages(value: Any) -> Tuple[str, ...]:
    """Accept ``"en-US,fr-FR"`` or a YAML list."""
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(item) for item in value]
    return tuple(item.strip() for item in items if item.strip())


def load_yaml_config(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_config(path: Optional[Path] = None) -> PipelineConfig:
    """
    Load pipeline configuration from YAML, falling back to defaults.
    """

    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        data = load_yaml_config(config_path)
    else:
        data = {}

    recognition_data: Dict[str, Any] = data.get("recognition", {}) or {}
    output_data: Dict[str, Any] = data.get("output", {}) or {}
    defaults = PipelineConfig()

    languages = recognition_data.get("languages")
    return PipelineConfig(
        dpi=int(data.get("dpi", defaults.dpi)),
        recognition=RecognitionConfig(
            engine=recognition_data.get("engine", defaults.recognition.engine),
            languages=parse_languages(languages) if languages else defaults.recognition.languages,
            fast_mode=bool(recognition_data.get("fast_mode", defaults.recognition.fast_mode)),
            use_language_correction=bool(
                recognition_data.get(
                    "use_language_correction", defaults.recognition.use_language_correction
                )
            ),
            level=SegmentLevel(recognition_data.get("level", defaults.recognition.level.value)),
        ),
        output=OutputConfig(
            fixed_precision=bool(
                output_data.get("fixed_precision", defaults.output.fixed_precision)
            ),
            indent=int(output_data.get("indent", defaults.output.indent)),
        ),
    )
