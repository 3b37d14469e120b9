"""
PDF 文本读取模块

职责：
- 打开 PDF 文件
- 逐页提取带坐标的文本片段（PositionedToken）
- OCR 处理（可选）
- 返回原始数据，不做任何业务逻辑处理

坐标约定：
    PyMuPDF 的 y 轴向下，这里统一翻转为 y 轴向上（页面底部为 0），
    y 取片段基线位置，与 preprocessor 的"y 大的行在上"一致。
"""

import os
import sys
import tempfile
import subprocess
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

import fitz  # PyMuPDF

from .models import PositionedToken

logger = logging.getLogger("invoice_parser")


def ensure_file_exists(pdf_path: str) -> None:
    """
    检查文件是否存在。

    Args:
        pdf_path: PDF 文件路径

    Raises:
        FileNotFoundError: 文件不存在
    """
    if not os.path.isfile(pdf_path):
        logger.error("File not found: %s", pdf_path)
        raise FileNotFoundError(pdf_path)


def prepare_ocr_pdf(pdf_path: str, ocr_lang: str) -> str:
    """
    使用 ocrmypdf 为扫描件添加 OCR 文本层（如果需要）。

    Args:
        pdf_path: 原始 PDF 路径
        ocr_lang: OCR 语言，如 "chi_sim+eng"；空字符串表示不使用 OCR

    Returns:
        处理后的 PDF 路径（可能是临时文件，所在临时目录由调用方删除），失败时返回原路径
    """
    if not ocr_lang:
        return pdf_path

    td = tempfile.mkdtemp(prefix="invoice_ocr_")
    out_pdf = os.path.join(td, "ocr.pdf")
    cmd = [sys.executable, "-m", "ocrmypdf", "--skip-text", "-l", ocr_lang, pdf_path, out_pdf]
    try:
        subprocess.run(cmd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        logger.info("Prepared OCR PDF → %s", out_pdf)
        return out_pdf
    except FileNotFoundError:
        logger.error("Python interpreter not found for ocrmypdf: %s", sys.executable)
        return pdf_path
    except subprocess.CalledProcessError as e:
        # exit=1-3: 错误, exit=4+: 警告（PDF 仍然生成）
        if e.returncode <= 3:
            logger.error("ocrmypdf failed (exit=%s).", e.returncode)
            logger.error("stderr: %s", (e.stderr or b"").decode(errors="ignore")[:2000])
            return pdf_path
        logger.warning("ocrmypdf completed with warnings (exit=%s), continuing...", e.returncode)
        if os.path.isfile(out_pdf):
            return out_pdf
        return pdf_path


def open_document(pdf_path: str) -> "fitz.Document":
    """
    打开 PDF，加密文档尝试空密码。

    Raises:
        FileNotFoundError: 文件不存在
        ValueError: 加密文档无法打开
    """
    ensure_file_exists(pdf_path)
    doc = fitz.open(pdf_path)
    if doc.is_encrypted and not doc.authenticate(""):
        doc.close()
        raise ValueError(f"encrypted_pdf_not_supported: {pdf_path}")
    return doc


def extract_tokens_from_page(page) -> List[PositionedToken]:
    """
    从页面提取文本片段。

    使用 page.get_text('dict') 的 spans，每个 span 一个片段。

    Args:
        page: PyMuPDF 页面对象

    Returns:
        [PositionedToken, ...]，顺序不做保证
    """
    page_height = float(page.rect.height)
    info = page.get_text("dict")
    tokens = []
    for blk in info.get("blocks", []):
        if blk.get("type", 0) != 0:
            continue
        for ln in blk.get("lines", []):
            for sp in ln.get("spans", []):
                text = sp.get("text") or ""
                if not text.strip():
                    continue
                x0, y0, x1, y1 = (float(v) for v in sp["bbox"])
                ox, oy = sp.get("origin", (x0, y1))
                tokens.append(PositionedToken(
                    text=text,
                    x=round(float(ox), 2),
                    y=round(page_height - float(oy), 2),
                    width=round(x1 - x0, 2),
                    height=round(y1 - y0, 2),
                ))
    return tokens


def iter_pdf_tokens(
    pdf_path: str,
    pages: Optional[List[int]] = None,
) -> Iterator[Tuple[int, List[PositionedToken]]]:
    """
    逐页产出文本片段。

    Args:
        pdf_path: PDF 文件路径
        pages: 指定页码（1-based），None 表示全部

    Yields:
        (页码, [PositionedToken, ...])
    """
    doc = open_document(pdf_path)
    try:
        for pno in range(doc.page_count):
            page_num = pno + 1
            if pages and page_num not in pages:
                continue
            tokens = extract_tokens_from_page(doc.load_page(pno))
            logger.debug(f"[READER] Page {page_num}: {len(tokens)} token(s)")
            yield page_num, tokens
    finally:
        doc.close()


def read_pdf_tokens(pdf_path: str, pages: Optional[List[int]] = None) -> List[Dict[str, Any]]:
    """
    读取全部文本片段为平铺的字典行（用于 debug 输出）。

    Returns:
        [{"page": int, "index": int, "x": float, "y": float,
          "width": float, "height": float, "text": str}, ...]
    """
    rows = []
    for page_num, tokens in iter_pdf_tokens(pdf_path, pages):
        for idx, tok in enumerate(tokens, start=1):
            rows.append({
                "page": page_num,
                "index": idx,
                "x": tok.x,
                "y": tok.y,
                "width": tok.width,
                "height": tok.height,
                "text": tok.text,
            })
    return rows
