"""
发票 PDF 文本解析工具

模块架构（按数据流）：
    reader.py       → PDF 逐页读取带坐标的文本片段（PyMuPDF + OCR）
    preprocessor.py → 片段分行、行内合并、行文本清理
    extractor.py    → 金额 / 发票号码 / 开票日期的多策略抽取
    validator.py    → 字段合理性校验
    pipeline.py     → 单文件 / 批量解析流程
    renamer.py      → 按字段重命名发票
    writer.py       → 输出模块（JSON/CSV/JSONL/Excel）
    config.py       → 配置加载
    cli.py          → 命令行接口（主入口）

公共 API：
    merge_text_items      - 文本片段重建为有序文本行
    extract_invoice_info  - 从文本行抽取发票字段
    parse_invoice_pdf     - 从 PDF 文件解析发票字段
    parse_invoice_batch   - 批量解析
    validate_invoice_fields - 字段校验
    rename_invoices       - 按字段重命名
"""

__version__ = "1.0.0"

# === Models ===
from .models import (
    PositionedToken,
    TextBlock,
    LineGroup,
    InvoiceFields,
)

# === Reader 模块 ===
from .reader import (
    ensure_file_exists,
    extract_tokens_from_page,
    iter_pdf_tokens,
    read_pdf_tokens,
    prepare_ocr_pdf,
)

# === Preprocessor 模块 ===
from .preprocessor import (
    merge_text_items,
    clean_lines,
)

# === Extractor 模块 ===
from .extractor import (
    extract_invoice_info,
    format_date,
)

# === Validator 模块 ===
from .validator import (
    validate_invoice_fields,
    parse_money,
)

# === Pipeline 模块 ===
from .pipeline import (
    read_invoice_lines,
    parse_invoice_pdf,
    parse_invoice_batch,
    collect_pdf_paths,
)

# === Renamer 模块 ===
from .renamer import (
    build_invoice_filename,
    rename_invoices,
)

# === Writer 模块 ===
from .writer import (
    write_json,
    write_jsonl,
    write_csv,
    write_excel,
    write_auto,
    print_json,
    print_jsonl,
)

__all__ = [
    # 版本
    "__version__",

    # Models
    "PositionedToken",
    "TextBlock",
    "LineGroup",
    "InvoiceFields",

    # Reader
    "ensure_file_exists",
    "extract_tokens_from_page",
    "iter_pdf_tokens",
    "read_pdf_tokens",
    "prepare_ocr_pdf",

    # Preprocessor
    "merge_text_items",
    "clean_lines",

    # Extractor
    "extract_invoice_info",
    "format_date",

    # Validator
    "validate_invoice_fields",
    "parse_money",

    # Pipeline
    "read_invoice_lines",
    "parse_invoice_pdf",
    "parse_invoice_batch",
    "collect_pdf_paths",

    # Renamer
    "build_invoice_filename",
    "rename_invoices",

    # Writer
    "write_json",
    "write_jsonl",
    "write_csv",
    "write_excel",
    "write_auto",
    "print_json",
    "print_jsonl",
]
