import pytest

from invoice_parser.models import InvoiceFields
from invoice_parser.renamer import (
    MANIFEST_NAME,
    build_invoice_filename,
    rename_invoices,
    unique_filename,
)


def test_build_invoice_filename():
    fields = InvoiceFields(date="2024年03月13日", code="03100012", money="88.00")
    assert build_invoice_filename("张三", fields) == "张三+03100012+88.00+2024年03月13日.pdf"


def test_build_invoice_filename_missing_fields():
    assert build_invoice_filename("张三", InvoiceFields(money="1.00")) == "张三++1.00+.pdf"


def test_unique_filename():
    assert unique_filename("a.pdf", set()) == "a.pdf"
    assert unique_filename("a.pdf", {"a.pdf"}) == "a(1).pdf"
    assert unique_filename("a.pdf", {"a.pdf", "a(1).pdf"}) == "a(2).pdf"


def test_rename_invoices(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "1.pdf").write_bytes(b"%PDF-1")
    (src / "2.pdf").write_bytes(b"%PDF-2")
    (src / "3.pdf").write_bytes(b"%PDF-3")
    fields = {"date": "2024年03月13日", "code": "03100012", "money": "88.00"}
    records = [
        dict(fields, file=str(src / "1.pdf"), error=None),
        dict(fields, file=str(src / "2.pdf"), error=None),
        {"file": str(src / "3.pdf"), "date": None, "code": None, "money": None, "error": "ValueError: bad"},
    ]

    out = tmp_path / "out"
    names = rename_invoices(records, " 张三 ", str(out))

    assert names == [
        "张三+03100012+88.00+2024年03月13日.pdf",
        "张三+03100012+88.00+2024年03月13日(1).pdf",
    ]
    assert (out / names[0]).read_bytes() == b"%PDF-1"
    assert (out / names[1]).read_bytes() == b"%PDF-2"
    assert (out / MANIFEST_NAME).read_text(encoding="utf-8") == "\n".join(names)


def test_rename_requires_name(tmp_path):
    with pytest.raises(ValueError):
        rename_invoices([], "  ", str(tmp_path))
