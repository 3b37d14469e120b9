"""
发票重命名模块

按 "{报销人}+{发票号码}+{金额}+{开票日期}.pdf" 复制发票，
并生成清单文件 发票详情.txt（每行一个新文件名）。
"""

import os
import shutil
import logging
from typing import Any, Dict, Iterable, List

from .models import InvoiceFields

logger = logging.getLogger("invoice_parser")

MANIFEST_NAME = "发票详情.txt"


def build_invoice_filename(name: str, fields: InvoiceFields) -> str:
    """
    生成发票文件名，缺失字段留空。

    Example:
        ("张三", InvoiceFields("2024年03月13日", "03100012", "88.00"))
        → "张三+03100012+88.00+2024年03月13日.pdf"
    """
    return f"{name}+{fields.code or ''}+{fields.money or ''}+{fields.date or ''}.pdf"


def unique_filename(filename: str, taken: set) -> str:
    """
    文件名重复时加 (n) 后缀。

    Example:
        "a.pdf" 已存在 → "a(1).pdf"
    """
    if filename not in taken:
        return filename
    stem, ext = os.path.splitext(filename)
    n = 1
    while f"{stem}({n}){ext}" in taken:
        n += 1
    return f"{stem}({n}){ext}"


def rename_invoices(records: Iterable[Dict[str, Any]], name: str, out_dir: str) -> List[str]:
    """
    把解析过的发票按新文件名复制到输出目录。

    Args:
        records: parse_invoice_batch 的结果，解析失败（error 非空）的记录跳过
        name: 报销人姓名
        out_dir: 输出目录，不存在会自动创建

    Returns:
        新文件名列表（与清单文件内容一致）
    """
    if not name.strip():
        raise ValueError("name is required")

    os.makedirs(out_dir, exist_ok=True)
    taken = set()
    filenames = []

    for record in records:
        if record.get("error"):
            logger.warning(f"Skip {record['file']}: {record['error']}")
            continue
        fields = InvoiceFields(
            date=record.get("date"),
            code=record.get("code"),
            money=record.get("money"),
        )
        filename = unique_filename(build_invoice_filename(name.strip(), fields), taken)
        taken.add(filename)
        shutil.copyfile(record["file"], os.path.join(out_dir, filename))
        logger.info(f"Copied {record['file']} -> {filename}")
        filenames.append(filename)

    manifest = os.path.join(out_dir, MANIFEST_NAME)
    with open(manifest, "w", encoding="utf-8") as f:
        f.write("\n".join(filenames))
    logger.info(f"Wrote manifest: {manifest} ({len(filenames)} file(s))")

    return filenames
