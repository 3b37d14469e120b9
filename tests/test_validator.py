from invoice_parser.models import InvoiceFields
from invoice_parser.validator import parse_money, validate_invoice_fields


def test_parse_money():
    assert parse_money("88.00") == 88.0
    assert parse_money("1,234.5") == 1234.5
    assert parse_money("nan") is None
    assert parse_money("") is None
    assert parse_money(None) is None


def test_valid_fields_have_no_warnings():
    fields = InvoiceFields(date="2024年03月13日", code="03100012", money="88.00")
    assert validate_invoice_fields(fields, 2024) == []


def test_twenty_digit_code_is_valid():
    fields = InvoiceFields(date="2023年12月31日", code="24317000000075757963", money="1.00")
    assert validate_invoice_fields(fields, "2024") == []


def test_missing_fields():
    warnings = validate_invoice_fields(InvoiceFields(), 2024)
    assert warnings == [
        "[WARNING] money is MISSING",
        "[WARNING] code is MISSING",
        "[WARNING] date is MISSING",
    ]


def test_bad_code_length():
    fields = InvoiceFields(date="2024年03月13日", code="12345", money="1.00")
    warnings = validate_invoice_fields(fields, 2024)
    assert len(warnings) == 1
    assert "length=5" in warnings[0]


def test_partial_date_flagged():
    fields = InvoiceFields(date="2024年03月日", code="03100012", money="1.00")
    warnings = validate_invoice_fields(fields, 2024)
    assert warnings == ["[WARNING] date '2024年03月日' is incomplete or malformed"]


def test_date_range_checks():
    fields = InvoiceFields(date="2021年13月32日", code="03100012", money="1.00")
    warnings = validate_invoice_fields(fields, 2024)
    assert any("invalid month 13" in w for w in warnings)
    assert any("invalid day 32" in w for w in warnings)
    assert any("outside 2023-2024" in w for w in warnings)


def test_negative_money_is_numeric():
    assert parse_money("-21.00") == -21.0
    fields = InvoiceFields(date="2024年03月13日", code="03100012", money="-21.00")
    assert validate_invoice_fields(fields, 2024) == [
        "[WARNING] money -21.00 is negative (red-letter invoice)"
    ]
