import pytest

from invoice_parser.reader import (
    ensure_file_exists,
    iter_pdf_tokens,
    prepare_ocr_pdf,
    read_pdf_tokens,
)

PAGE_HEIGHT = 842


def test_ensure_file_exists(tmp_path):
    with pytest.raises(FileNotFoundError):
        ensure_file_exists(str(tmp_path / "missing.pdf"))


def test_tokens_use_upward_y(invoice_pdf):
    pages = list(iter_pdf_tokens(str(invoice_pdf)))
    assert [page_num for page_num, _ in pages] == [1, 2]

    first_page = {t.text: t for t in pages[0][1]}
    assert set(first_page) == {"03100012", "20240313"}

    code = first_page["03100012"]
    assert code.x == pytest.approx(50, abs=1)
    assert code.y == pytest.approx(PAGE_HEIGHT - 100, abs=1)
    assert code.width > 0
    assert code.height > 0
    # 页面上方的行 y 更大
    assert code.y > first_page["20240313"].y


def test_page_filter(invoice_pdf):
    pages = list(iter_pdf_tokens(str(invoice_pdf), pages=[2]))
    assert [page_num for page_num, _ in pages] == [2]


def test_read_pdf_tokens_rows(invoice_pdf):
    rows = read_pdf_tokens(str(invoice_pdf))
    assert [(r["page"], r["index"]) for r in rows] == [(1, 1), (1, 2), (2, 1)]
    assert set(rows[0]) == {"page", "index", "x", "y", "width", "height", "text"}


def test_prepare_ocr_pdf_disabled():
    assert prepare_ocr_pdf("a.pdf", "") == "a.pdf"
