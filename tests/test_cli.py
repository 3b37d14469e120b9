import json

import pytest

from invoice_parser.cli import main
from invoice_parser.renamer import MANIFEST_NAME


def test_no_command_exits():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1


def test_parse_writes_json(invoice_pdf, tmp_path):
    out = tmp_path / "result.json"
    main(["parse", str(invoice_pdf), "--year", "2024", "--out", str(out)])

    records = json.loads(out.read_text(encoding="utf-8"))
    assert len(records) == 1
    assert records[0]["code"] == "03100012"
    assert records[0]["date"] == "2024年03月13日"


def test_parse_prints_json(invoice_pdf, capsys):
    main(["parse", str(invoice_pdf), "--year", "2024"])
    records = json.loads(capsys.readouterr().out)
    assert records[0]["file"] == str(invoice_pdf)


def test_parse_empty_directory_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["parse", str(tmp_path)])
    assert exc.value.code == 1


def test_parse_debug_dumps_tokens(invoice_pdf):
    main(["parse", str(invoice_pdf), "--debug", "0"])
    dump = invoice_pdf.with_name("invoice_debug_tokens.csv")
    assert dump.exists()
    assert "03100012" in dump.read_text(encoding="utf-8-sig")


def test_parse_debug_dumps_cleaned_lines(invoice_pdf):
    main(["parse", str(invoice_pdf), "--debug", "2"])
    dump = invoice_pdf.with_name("invoice_debug_cleaned.csv")
    assert "InvoiceNo:24317000000075757963" in dump.read_text(encoding="utf-8-sig")


def test_lines_prints_jsonl(invoice_pdf, capsys):
    main(["lines", str(invoice_pdf)])
    rows = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert rows == [
        {"page": 1, "index": 1, "text": "03100012"},
        {"page": 1, "index": 2, "text": "20240313"},
        {"page": 2, "index": 1, "text": "Invoice No: 24317000000075757963"},
    ]


def test_rename(invoice_pdf, tmp_path):
    out_dir = tmp_path / "renamed"
    main(["rename", str(invoice_pdf), "--name", "张三", "--year", "2024", "--out-dir", str(out_dir)])

    expected = "张三+03100012++2024年03月13日.pdf"
    assert (out_dir / expected).exists()
    assert (out_dir / MANIFEST_NAME).read_text(encoding="utf-8") == expected
