import pytest
from PIL import Image

import pypdfium2 as pdfium

from macocr_cli.utils.files import (
    InputError,
    InputKind,
    PdfSource,
    classify_input,
    iter_image_paths,
    load_image,
    open_pdf,
)


def test_classify_input(tmp_path):
    assert classify_input(tmp_path) is InputKind.BATCH
    assert classify_input(tmp_path / "a.PDF") is InputKind.PDF
    assert classify_input(tmp_path / "a.png") is InputKind.IMAGE


def test_iter_image_paths_filters_suffixes(tmp_path):
    for name in ["b.PNG", "a.jpg", "notes.md"]:
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "nested.png").mkdir()
    assert [path.name for path in iter_image_paths(tmp_path)] == ["a.jpg", "b.PNG"]


def test_load_image_converts_to_rgb(tmp_path):
    path = tmp_path / "gray.png"
    Image.new("LA", (4, 3)).save(path)
    image = load_image(path)
    assert image.mode == "RGB"
    assert image.size == (4, 3)


def test_load_image_errors(tmp_path):
    with pytest.raises(InputError):
        load_image(tmp_path / "missing.png")


def test_open_pdf_reports_sizes_and_renders(tmp_path):
    path = tmp_path / "blank.pdf"
    document = pdfium.PdfDocument.new()
    document.new_page(612, 792)
    document.new_page(200, 100)
    document.save(str(path))
    document.close()

    with open_pdf(path) as pdf:
        assert pdf.page_count == 2
        assert pdf.page_size(1) == pytest.approx((200.0, 100.0))
        image = pdf.render_page(1, 2.0)
        assert image.size == (400, 200)


def test_open_pdf_errors(tmp_path):
    with pytest.raises(InputError):
        with open_pdf(tmp_path / "missing.pdf"):
            pass
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"not a pdf")
    with pytest.raises(InputError):
        with open_pdf(broken):
            pass


class _BrokenPage:
    def __init__(self) -> None:
        self.closed = False

    def render(self, scale):
        raise pdfium.PdfiumError("boom")

    def close(self):
        self.closed = True


def test_render_failure_raises_input_error():
    page = _BrokenPage()
    with pytest.raises(InputError, match="page 3"):
        PdfSource([None, None, page]).render_page(2, 1.0)
    assert page.closed
