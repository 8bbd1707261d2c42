import json
from pathlib import Path

import pytest

from macocr_cli.geometry.segmenter import SegmentLevel
from macocr_cli.geometry.transform import to_pixel_box
from macocr_cli.output.writer import (
    OutputError,
    OutputFormat,
    output_format_for,
    render_json,
    render_text,
    resolve_output_path,
    write_document,
)
from macocr_cli.schema import BatchDocument, Dpi, ImageDocument, PageResult, PdfDocument, TextUnit
from macocr_cli.utils.files import InputKind

from conftest import rect_quad


def _page(*texts, page=None, fixed=False) -> PageResult:
    units = [
        TextUnit.from_box(
            text, 0.5, SegmentLevel.LINE, to_pixel_box(rect_quad(0.25, 0.25, 0.5, 0.125), 100, 200, fixed)
        )
        for text in texts
    ]
    return PageResult(page=page, width=100, height=200, text="\n".join(texts), observations=units)


def test_output_format_selection():
    assert output_format_for(Path("out/result.txt")) is OutputFormat.TEXT
    assert output_format_for(Path("out/result.json")) is OutputFormat.JSON
    assert output_format_for(Path("out/result")) is OutputFormat.JSON


def test_resolve_explicit_file_paths():
    for name in ["out/result.txt", "out/result.json"]:
        assert resolve_output_path(Path("a.png"), Path(name), InputKind.IMAGE) == Path(name)


def test_resolve_explicit_directory():
    assert resolve_output_path(Path("in/a.png"), Path("out/result"), InputKind.IMAGE) == Path(
        "out/result/a.json"
    )
    assert resolve_output_path(Path("scans"), Path("out"), InputKind.BATCH) == Path(
        "out/batch_output.json"
    )
    assert resolve_output_path(Path("docs/report.pdf"), Path("out"), InputKind.PDF) == Path(
        "out/report_pdf_output.json"
    )


def test_resolve_default_next_to_input():
    assert resolve_output_path(Path("in/a.png"), None, InputKind.IMAGE) == Path("in/a.json")
    assert resolve_output_path(Path("scans"), None, InputKind.BATCH) == Path(
        "scans/batch_output.json"
    )
    assert resolve_output_path(Path("docs/report.pdf"), None, InputKind.PDF) == Path(
        "docs/report_pdf_output.json"
    )


def test_single_image_json_fields():
    payload = json.loads(render_json(ImageDocument(source="a.png", result=_page("hello"))))
    assert payload["width"] == 100
    assert payload["height"] == 200
    assert payload["text"] == "hello"
    assert "page" not in payload
    unit = payload["observations"][0]
    assert unit["text"] == "hello"
    assert unit["confidence"] == 0.5
    assert unit["level"] == "line"
    assert unit["bbox"] == {"x": 25, "y": 125, "width": 50, "height": 25}
    assert {"x0", "y0", "x1", "y1", "x2", "y2", "x3", "y3"} <= set(unit)


def test_fixed_precision_keeps_three_decimals():
    rendered = render_json(ImageDocument(source="a.png", result=_page("x", fixed=True)))
    assert '"x": 25.000' in rendered
    assert '"height": 25.000' in rendered
    assert '"x0": 25.000' in rendered
    assert '"y0": 125.000' in rendered
    payload = json.loads(rendered)
    assert payload["observations"][0]["bbox"] == {"x": 25.0, "y": 125.0, "width": 50.0, "height": 25.0}


def test_default_precision_writes_whole_pixels():
    rendered = render_json(ImageDocument(source="a.png", result=_page("x")))
    assert '"x": 25,' in rendered
    assert "25.0" not in rendered


def test_batch_json_uses_natural_key_order():
    document = BatchDocument(
        source="scans",
        results={"2.png": _page("b"), "10.png": _page("c"), "1.png": _page("a")},
    )
    rendered = render_json(document)
    assert list(json.loads(rendered)) == ["1.png", "2.png", "10.png"]


def test_pdf_json_carries_dpi_once():
    document = PdfDocument(
        source="doc.pdf",
        page_count=3,
        dpi=Dpi(x=144.0, y=144.0),
        pages=[_page("p1", page=1), _page("p2", page=2)],
    )
    payload = json.loads(render_json(document))
    assert payload["dpi"] == {"x": 144.0, "y": 144.0}
    assert payload["page_count"] == 3
    assert [page["page"] for page in payload["pages"]] == [1, 2]
    assert all("dpi" not in page for page in payload["pages"])


def test_text_output_batch():
    document = BatchDocument(
        source="scans",
        results={"10.png": _page("c"), "2.png": _page("a", "b")},
    )
    assert render_text(document) == "=== 2.png ===\na\nb\n\n=== 10.png ===\nc\n"


def test_text_output_pdf_and_single():
    pdf = PdfDocument(source="d.pdf", page_count=2, pages=[_page("a", "b", page=1), _page("c", page=2)])
    assert render_text(pdf) == "a\nb\n\nc\n"
    single = ImageDocument(source="a.png", result=_page("x", "y"))
    assert render_text(single) == "x\ny\n"


def test_write_text_has_no_box_fields(tmp_path):
    target = tmp_path / "out" / "result.txt"
    write_document(ImageDocument(source="a.png", result=_page("hello")), target)
    content = target.read_text(encoding="utf-8")
    assert content == "hello\n"
    assert "bbox" not in content


def test_write_json_creates_directories(tmp_path):
    target = tmp_path / "out" / "nested" / "a.json"
    write_document(ImageDocument(source="a.png", result=_page("日本語")), target)
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["text"] == "日本語"
    assert [path.name for path in target.parent.iterdir()] == ["a.json"]


def test_write_failure_raises_output_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")
    with pytest.raises(OutputError):
        write_document(ImageDocument(source="a.png", result=_page("x")), blocker / "a.json")
