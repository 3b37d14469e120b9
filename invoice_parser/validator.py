"""
数据校验模块

对抽取结果做合理性检查，只返回警告信息，不抛异常。
低置信度的字段交给调用方提示用户手动修正。
"""

import re
from typing import List, Optional

from .models import InvoiceFields

DATE_RE = re.compile(r"^(\d{4})年(\d{2})月(\d{2})日$")
VALID_CODE_LENGTHS = (8, 20)


def parse_money(s: Optional[str]) -> Optional[float]:
    """
    解析金额字符串。

    Example:
        "88.00"  → 88.0
        "1,234.5" → 1234.5
        "-21.00" → -21.0（红字发票）
        "nan"    → None
        None     → None
    """
    if not s:
        return None
    cleaned = s.replace(",", "").strip()
    if not re.fullmatch(r"-?\d+(\.\d+)?", cleaned):
        return None
    return float(cleaned)


def validate_invoice_fields(fields: InvoiceFields, year) -> List[str]:
    """
    校验发票字段。

    校验项：
        1. 金额：必填，必须是数字；负数（红字发票）单独提示
        2. 发票号码：必填，8 位或 20 位数字
        3. 开票日期：必填，"YYYY年MM月DD日"，月/日在合法范围，年份为当年或上一年

    Args:
        fields: 抽取结果
        year: 参考年份

    Returns:
        警告信息列表
    """
    warnings = []
    ref_year = int(year)

    # 金额
    if fields.money is None:
        warnings.append("[WARNING] money is MISSING")
    elif parse_money(fields.money) is None:
        warnings.append(f"[WARNING] money is not numeric: '{fields.money}'")
    elif parse_money(fields.money) < 0:
        warnings.append(f"[WARNING] money {fields.money} is negative (red-letter invoice)")

    # 发票号码
    if not fields.code:
        warnings.append("[WARNING] code is MISSING")
    elif not fields.code.isdigit() or len(fields.code) not in VALID_CODE_LENGTHS:
        warnings.append(
            f"[WARNING] code '{fields.code}' is not an 8 or 20 digit number (length={len(fields.code)})"
        )

    # 开票日期
    if not fields.date:
        warnings.append("[WARNING] date is MISSING")
        return warnings

    m = DATE_RE.match(fields.date)
    if not m:
        warnings.append(f"[WARNING] date '{fields.date}' is incomplete or malformed")
        return warnings

    y, mo, d = (int(g) for g in m.groups())
    if not 1 <= mo <= 12:
        warnings.append(f"[WARNING] date '{fields.date}' has invalid month {mo}")
    if not 1 <= d <= 31:
        warnings.append(f"[WARNING] date '{fields.date}' has invalid day {d}")
    if y not in (ref_year, ref_year - 1):
        warnings.append(
            f"[WARNING] date '{fields.date}' is outside {ref_year - 1}-{ref_year}"
        )

    return warnings
