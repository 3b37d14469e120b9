"""
内容抽取算法模块

职责：
- 从有序文本行中抽取发票金额、发票号码（代码）、开票日期
- 每个字段是一组按优先级排列的策略，前一个策略没结果才尝试下一个
- 每个策略都是 (lines, year) 的纯函数，可单独测试
- 只做提取，不做校验（校验由 validator.py 负责）
"""

import re
import math
import logging
from datetime import date
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .models import InvoiceFields
from .preprocessor import clean_lines

logger = logging.getLogger("invoice_parser")

CURRENCY_MARK = "¥"
CHINESE_AMOUNT_RE = re.compile(r"[壹贰叁肆伍陆柒捌玖拾佰仟万亿元角分整]+")
NUMERIC_RUN_RE = re.compile(r"[\d.]+", re.ASCII)
# 与 JavaScript parseFloat 一致：只取开头能解析的数字部分；
# 开头空白按 Unicode 匹配（全角空格、不换行空格），数字只认 ASCII
FLOAT_PREFIX_RE = re.compile(r"\s*([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")
DIGITS_RE = re.compile(r"[0-9]+")
DATE_MARKS_RE = re.compile(r"[年月日]")

YearLike = Union[int, str]


def _is_digits(text: str) -> bool:
    return DIGITS_RE.fullmatch(text) is not None


def parse_float_prefix(text: str) -> Optional[float]:
    """
    解析字符串开头的浮点数，解析不了返回 None。

    Example:
        "88.00"    → 88.0
        "12.50元"  → 12.5
        "合计"     → None
    """
    m = FLOAT_PREFIX_RE.match(text)
    if not m:
        return None
    return float(m.group(1))


def resolve_year(year: Optional[YearLike] = None) -> str:
    """参考年份，未指定时取当前年份。"""
    if year is None:
        return str(date.today().year)
    return str(year)


def previous_year(year: str) -> str:
    return str(int(year) - 1)


#
# ========== 金额 ==========
#

def currency_marked_amounts(lines: Sequence[str], year: str) -> List[float]:
    """
    带 ¥ 的金额：按 ¥ 拆分后逐段解析数字。

    发票通常同时印有单项金额和价税合计，合计是其中最大值。

    Example:
        ["¥12.50", "合计¥88.00"] → [12.5, 88.0]
    """
    amounts = []
    for line in lines:
        if CURRENCY_MARK not in line:
            continue
        for part in line.split(CURRENCY_MARK):
            if not part:
                continue
            value = parse_float_prefix(part)
            if value is not None:
                amounts.append(value)
    return amounts


def chinese_numeral_amounts(lines: Sequence[str], year: str) -> List[float]:
    """
    不含 ¥ 的金额：在含有中文大写金额字符的行里取第一段数字。

    只有阿拉伯数字和大写金额印在同一行时才能命中，如 "贰拾壹圆整21.00"。
    """
    amounts = []
    for line in lines:
        if not CHINESE_AMOUNT_RE.search(line):
            continue
        m = NUMERIC_RUN_RE.search(line)
        if not m:
            continue
        try:
            amounts.append(float(m.group(0)))
        except ValueError:
            # "." 或 "1.2.3" 之类
            logger.debug(f"[AMOUNT] Skip unparsable numeric run '{m.group(0)}' in '{line}'")
    return amounts


#
# ========== 发票号码 ==========
#

def eight_digit_code(lines: Sequence[str], year: str) -> Optional[str]:
    """8 位纯数字且不以当年年份开头（以年份开头的多半是日期）。"""
    for line in lines:
        if len(line) == 8 and _is_digits(line) and not line.startswith(year):
            return line
    return None


def twenty_digit_code(lines: Sequence[str], year: str) -> Optional[str]:
    """电子发票（普通发票）的 20 位发票号码。"""
    for line in lines:
        if len(line) == 20 and _is_digits(line):
            return line
    return None


def trailing_twenty_digit_code(lines: Sequence[str], year: str) -> Optional[str]:
    """
    号码和标签粘在一行的情况，取末尾 20 位。

    Example:
        "发票号码：24317000000075757963" → "24317000000075757963"
    """
    for line in lines:
        if len(line) > 20 and _is_digits(line[-20:]):
            return line[-20:]
    return None


#
# ========== 开票日期 ==========
#

def strip_date_marks(text: str) -> str:
    """去掉 年/月/日（部分发票抽取出来的文字顺序是乱的）。"""
    return DATE_MARKS_RE.sub("", text)


def eight_digit_date_this_year(lines: Sequence[str], year: str) -> Optional[str]:
    for line in lines:
        if len(line) == 8 and _is_digits(line) and line.startswith(year):
            return line
    return None


def eight_digit_date_last_year(lines: Sequence[str], year: str) -> Optional[str]:
    last_year = previous_year(year)
    for line in lines:
        if len(line) == 8 and _is_digits(line) and line.startswith(last_year):
            return line
    return None


def eleven_char_date(lines: Sequence[str], year: str) -> Optional[str]:
    """
    长度 11 的日期，如 "2024年03月13日"。

    Example:
        "2024年03月13日" → "20240313"
    """
    last_year = previous_year(year)
    for line in lines:
        if len(line) == 11 and (line.startswith(year) or line.startswith(last_year)):
            return strip_date_marks(line)
    return None


def free_text_date(lines: Sequence[str], year: str) -> Optional[str]:
    """
    日期和标签粘在一行，取最后一次出现的年份及其后内容。

    Example:
        "开票日期：2024年03月13日" → "20240313"
    """
    marker = f"{year}年"
    for line in lines:
        if marker in line:
            return strip_date_marks(year + line.split(year)[-1])
    return None


def format_date(raw: str) -> str:
    """
    按位置拼装日期：0-3 年，4-5 月，6-7 日。

    输入不足 8 位时输出残缺的日期，不报错。

    Example:
        "20240313" → "2024年03月13日"
        "202403"   → "2024年03月日"
    """
    return f"{raw[0:4]}年{raw[4:6]}月{raw[6:8]}日"


#
# ========== 策略编排 ==========
#

AmountStrategy = Callable[[Sequence[str], str], List[float]]
TextStrategy = Callable[[Sequence[str], str], Optional[str]]

AMOUNT_STRATEGIES: List[Tuple[str, AmountStrategy]] = [
    ("currency_marked", currency_marked_amounts),
    ("chinese_numeral", chinese_numeral_amounts),
]

CODE_STRATEGIES: List[Tuple[str, TextStrategy]] = [
    ("eight_digit", eight_digit_code),
    ("twenty_digit", twenty_digit_code),
    ("trailing_twenty_digit", trailing_twenty_digit_code),
]

DATE_STRATEGIES: List[Tuple[str, TextStrategy]] = [
    ("eight_digit_this_year", eight_digit_date_this_year),
    ("eight_digit_last_year", eight_digit_date_last_year),
    ("eleven_char", eleven_char_date),
    ("free_text", free_text_date),
]


def run_strategies(strategies, lines: Sequence[str], year: str, tag: str):
    """
    按顺序执行策略，返回第一个非空结果。

    Returns:
        (策略名, 结果)，全部落空时返回 (None, None)
    """
    for name, strategy in strategies:
        result = strategy(lines, year)
        if result:
            logger.debug(f"[{tag}] Strategy '{name}' matched: {result!r}")
            return name, result
    logger.debug(f"[{tag}] No strategy matched")
    return None, None


def format_money(value: float) -> str:
    """
    两位小数，按二进制精确值四舍五入（.5 远离 0），与 JavaScript toFixed(2) 一致。

    Example:
        0.125 → "0.13"
        1.005 → "1.00"（二进制略小于 1.005）
        -0.125 → "-0.13"
    """
    if not math.isfinite(value):
        return f"{value:.2f}"
    # + 0.0 把 -0.0 变成 0.0；精度要容纳 float 最大值的全部整数位
    rounded = Decimal(value + 0.0).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP, context=Context(prec=400))
    return str(rounded)


def extract_money(lines: Sequence[str], year: str) -> Optional[str]:
    """金额候选取最大值，格式化为两位小数；没有候选返回 None。"""
    _, candidates = run_strategies(AMOUNT_STRATEGIES, lines, year, "AMOUNT")
    if not candidates:
        logger.warning("[AMOUNT] No amount candidate found")
        return None
    return format_money(max(candidates))


def extract_code(lines: Sequence[str], year: str) -> Optional[str]:
    _, code = run_strategies(CODE_STRATEGIES, lines, year, "CODE")
    if code is None:
        logger.warning("[CODE] No invoice code found")
    return code


def extract_date(lines: Sequence[str], year: str) -> Optional[str]:
    _, raw = run_strategies(DATE_STRATEGIES, lines, year, "DATE")
    if raw is None:
        logger.warning("[DATE] No invoice date found")
        return None
    return format_date(raw)


def extract_invoice_info(lines: Sequence[str], year: Optional[YearLike] = None) -> InvoiceFields:
    """
    从整份发票的有序文本行（多页已按页序拼接）抽取关键字段。

    Args:
        lines: 文本行
        year: 参考年份，用于区分 8 位发票代码和 8 位日期；None 表示当前年份

    Returns:
        InvoiceFields，未找到的字段为 None

    Example:
        extract_invoice_info(["20240313", "03100012", "合计¥88.00"], year=2024)
        → InvoiceFields(date="2024年03月13日", code="03100012", money="88.00")
    """
    ref_year = resolve_year(year)
    cleaned = clean_lines(lines)
    logger.debug(f"[EXTRACT] {len(cleaned)} non-empty line(s), reference year {ref_year}")

    return InvoiceFields(
        date=extract_date(cleaned, ref_year),
        code=extract_code(cleaned, ref_year),
        money=extract_money(cleaned, ref_year),
    )
