#!/usr/bin/env python3
"""
发票解析工具 - CLI 入口

命令行用法：
    python parse_invoice.py parse invoice.pdf
    python parse_invoice.py parse ./invoices/ --out result.xlsx
    python parse_invoice.py lines invoice.pdf --out lines.csv
    python parse_invoice.py rename ./invoices/ --name 张三 --out-dir ./renamed/

依赖：
    pip install pymupdf pandas openpyxl
    可选 OCR 支持：ocrmypdf + tesseract-ocr
"""

from invoice_parser.cli import main

if __name__ == "__main__":
    main()
