"""
解析流程模块

数据流：reader（逐页片段）→ preprocessor（重建文本行）→ extractor（抽取字段）→ validator（校验）
"""

import os
import shutil
import logging
from typing import Any, Dict, Iterable, List, Optional

from .models import InvoiceFields
from .reader import iter_pdf_tokens, prepare_ocr_pdf
from .preprocessor import merge_text_items, DEFAULT_X_TOLERANCE, DEFAULT_Y_TOLERANCE
from .extractor import extract_invoice_info, resolve_year
from .validator import validate_invoice_fields

logger = logging.getLogger("invoice_parser")


def read_invoice_lines(
    pdf_path: str,
    x_tolerance: float = DEFAULT_X_TOLERANCE,
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
    pages: Optional[List[int]] = None,
) -> List[str]:
    """逐页重建文本行，按页序拼接。"""
    lines: List[str] = []
    for page_num, tokens in iter_pdf_tokens(pdf_path, pages):
        merged = merge_text_items(tokens, x_tolerance, y_tolerance)
        logger.debug(f"[PIPELINE] Page {page_num}: {len(merged)} line(s)")
        lines.extend(merged)
    return lines


def parse_invoice_pdf(
    pdf_path: str,
    x_tolerance: float = DEFAULT_X_TOLERANCE,
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
    year=None,
    ocr_lang: str = "",
) -> InvoiceFields:
    """
    从 PDF 文件解析发票信息。

    Args:
        pdf_path: PDF 文件路径
        x_tolerance: 行内合并容差
        y_tolerance: 分行容差
        year: 参考年份，None 表示当前年份
        ocr_lang: 没有文本层时使用的 OCR 语言，空字符串表示不做 OCR

    Returns:
        InvoiceFields
    """
    lines = read_invoice_lines(pdf_path, x_tolerance, y_tolerance)

    # 如果内容为空，尝试 OCR
    if ocr_lang and not any(line.strip() for line in lines):
        logger.info("PDF content is empty, trying OCR...")
        src = prepare_ocr_pdf(pdf_path, ocr_lang)
        if src != pdf_path:
            try:
                lines = read_invoice_lines(src, x_tolerance, y_tolerance)
            finally:
                # OCR 输出在 prepare_ocr_pdf 建的临时目录里，读完即删
                shutil.rmtree(os.path.dirname(src), ignore_errors=True)
                logger.debug(f"[PIPELINE] Removed OCR temp dir {os.path.dirname(src)}")

    fields = extract_invoice_info(lines, year)
    logger.info(f"Parsed {pdf_path}: date={fields.date} code={fields.code} money={fields.money}")
    return fields


def collect_pdf_paths(inputs: Iterable[str]) -> List[str]:
    """
    展开输入：目录取其中的 *.pdf（排序），文件原样保留。

    Example:
        ["a.pdf", "invoices/"] → ["a.pdf", "invoices/1.pdf", "invoices/2.pdf"]
    """
    paths = []
    for item in inputs:
        if os.path.isdir(item):
            found = sorted(
                os.path.join(item, name)
                for name in os.listdir(item)
                if name.lower().endswith(".pdf")
            )
            logger.info(f"Found {len(found)} PDF(s) in {item}")
            paths.extend(found)
        else:
            paths.append(item)
    return paths


def parse_invoice_batch(
    paths: Iterable[str],
    x_tolerance: float = DEFAULT_X_TOLERANCE,
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
    year=None,
    ocr_lang: str = "",
) -> List[Dict[str, Any]]:
    """
    批量解析，单个文件失败不影响其他文件。

    Returns:
        [{"file": str, "date": ..., "code": ..., "money": ...,
          "warnings": [str, ...], "error": Optional[str]}, ...]
    """
    ref_year = resolve_year(year)
    records = []
    for path in paths:
        record: Dict[str, Any] = {"file": path}
        try:
            fields = parse_invoice_pdf(path, x_tolerance, y_tolerance, ref_year, ocr_lang)
        except (OSError, ValueError, RuntimeError) as e:
            logger.error(f"Failed to parse {path}: {e!r}")
            record.update(InvoiceFields().to_dict())
            record["warnings"] = []
            record["error"] = f"{type(e).__name__}: {e}"
        else:
            record.update(fields.to_dict())
            record["warnings"] = validate_invoice_fields(fields, ref_year)
            record["error"] = None
            for warning in record["warnings"]:
                logger.warning(f"{path}: {warning}")
        records.append(record)
    return records
