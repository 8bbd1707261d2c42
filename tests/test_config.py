from pathlib import Path

from macocr_cli.config import PipelineConfig, load_config, parse_languages
from macocr_cli.geometry.segmenter import SegmentLevel


def test_defaults_when_file_missing(tmp_path: Path):
    config = load_config(tmp_path / "missing.yaml")
    assert config == PipelineConfig()
    assert config.recognition.languages == ("en-US",)
    assert config.render_scale == 300 / 72.0


def test_yaml_values_override_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "dpi: 144\n"
        "recognition:\n"
        "  engine: tesseract\n"
        "  languages: [zh-Hans, en-US]\n"
        "  level: character\n"
        "output:\n"
        "  fixed_precision: true\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.dpi == 144
    assert config.recognition.engine == "tesseract"
    assert config.recognition.languages == ("zh-Hans", "en-US")
    assert config.recognition.level is SegmentLevel.CHARACTER
    assert config.recognition.fast_mode is False
    assert config.output.fixed_precision is True
    assert config.output.indent == 2
    assert config.to_dict()["recognition"]["level"] == "character"


def test_parse_languages():
    assert parse_languages("en-US, fr-FR,,") == ("en-US", "fr-FR")
    assert parse_languages(["ja-JP"]) == ("ja-JP",)
