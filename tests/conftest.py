import fitz
import pytest

PAGE_WIDTH = 595
PAGE_HEIGHT = 842


@pytest.fixture
def make_pdf(tmp_path):
    """按页生成测试 PDF：pages = [[(x, baseline_y, text), ...], ...]，y 为 PyMuPDF 坐标（向下）"""

    def _make(pages, name="invoice.pdf"):
        path = tmp_path / name
        doc = fitz.open()
        for items in pages:
            page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            for x, y, text in items:
                page.insert_text((x, y), text, fontsize=12)
        doc.save(str(path))
        doc.close()
        return path

    return _make


@pytest.fixture
def invoice_pdf(make_pdf):
    return make_pdf([
        [
            (50, 100, "03100012"),
            (50, 140, "20240313"),
        ],
        [
            (50, 100, "Invoice No: 24317000000075757963"),
        ],
    ])
