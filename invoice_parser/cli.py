"""
命令行接口模块（主入口）

职责：
- 解析命令行参数
- 协调各模块完成任务
- 数据流：reader → preprocessor → extractor → validator → writer / renamer
"""

import sys
import logging
import argparse

from .config import load_config
from .reader import ensure_file_exists, read_pdf_tokens, iter_pdf_tokens
from .preprocessor import merge_text_items, clean_lines
from .pipeline import collect_pdf_paths, parse_invoice_batch
from .renamer import rename_invoices
from .writer import write_auto, print_auto

logger = logging.getLogger("invoice_parser")
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_parser() -> argparse.ArgumentParser:
    """设置命令行参数解析器"""
    parser = argparse.ArgumentParser(
        description="Invoice PDF parser - extract date, code and amount from Chinese tax invoices",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    # 通用参数函数
    def add_common_args(p):
        """添加通用参数"""
        p.add_argument("--config", default=None, help="Config file path (default: invoice_config.json)")
        p.add_argument("--config-key", default="default", help="Config key name (default: 'default')")
        p.add_argument("--x-tol", type=float, default=None, help="Horizontal merge tolerance")
        p.add_argument("--y-tol", type=float, default=None, help="Vertical line tolerance")
        p.add_argument("--year", type=int, default=None, help="Reference year (default: current year)")
        p.add_argument("--ocr-lang", default=None, help="OCR language for PDFs without text, e.g. 'chi_sim+eng'")

    # parse subcommand
    parse_parser = subparsers.add_parser("parse", help="Parse invoice PDFs (files or directories)")
    parse_parser.add_argument("pdf", nargs="+", help="PDF files or directories")
    parse_parser.add_argument(
        "--out",
        default="",
        help="Output file path (.json/.jsonl/.csv/.xlsx), stdout if not specified"
    )
    parse_parser.add_argument(
        "--debug",
        type=int,
        default=-1,
        choices=[-1, 0, 1, 2],
        help="Dump intermediate data next to each PDF and stop: -1=off, 0=tokens, 1=lines, 2=cleaned lines"
    )
    add_common_args(parse_parser)

    # lines subcommand
    lines_parser = subparsers.add_parser("lines", help="Dump reconstructed text lines of a PDF")
    lines_parser.add_argument("pdf", help="PDF file path")
    lines_parser.add_argument("--out", default="", help="Output file path, stdout if not specified")
    add_common_args(lines_parser)

    # rename subcommand
    rename_parser = subparsers.add_parser("rename", help="Copy invoices as NAME+code+money+date.pdf")
    rename_parser.add_argument("pdf", nargs="+", help="PDF files or directories")
    rename_parser.add_argument("--name", required=True, help="Claimant name used as filename prefix")
    rename_parser.add_argument("--out-dir", required=True, help="Output directory")
    add_common_args(rename_parser)

    return parser


def resolve_options(args) -> dict:
    """配置文件 + 命令行参数（命令行优先）"""
    options = load_config(args.config, args.config_key)
    overrides = {
        "x_tolerance": args.x_tol,
        "y_tolerance": args.y_tol,
        "year": args.year,
        "ocr_lang": args.ocr_lang,
    }
    options.update({k: v for k, v in overrides.items() if v is not None})
    return options


def collect_line_rows(pdf_path: str, x_tolerance: float, y_tolerance: float) -> list:
    """逐页重建文本行，带页码和行号"""
    rows = []
    for page_num, tokens in iter_pdf_tokens(pdf_path):
        for idx, text in enumerate(merge_text_items(tokens, x_tolerance, y_tolerance), start=1):
            rows.append({"page": page_num, "index": idx, "text": text})
    return rows


def dump_debug(pdf_path: str, level: int, options: dict) -> None:
    """输出某个阶段的中间数据到 PDF 同目录的 CSV"""
    ensure_file_exists(pdf_path)
    if level == 0:
        rows = read_pdf_tokens(pdf_path)
        suffix = "_debug_tokens.csv"
    else:
        rows = collect_line_rows(pdf_path, options["x_tolerance"], options["y_tolerance"])
        suffix = "_debug_lines.csv"
        if level == 2:
            cleaned = clean_lines(r["text"] for r in rows)
            rows = [{"index": i, "text": t} for i, t in enumerate(cleaned, start=1)]
            suffix = "_debug_cleaned.csv"

    debug_file = pdf_path[:-4] + suffix if pdf_path.lower().endswith(".pdf") else pdf_path + suffix
    write_auto(rows, debug_file)
    logger.info(f"[DEBUG] Level {level}: {len(rows)} row(s) -> {debug_file}")


def run_parse(args) -> None:
    """执行 parse 子命令"""
    options = resolve_options(args)
    paths = collect_pdf_paths(args.pdf)
    if not paths:
        logger.error("No PDF found")
        sys.exit(1)

    if args.debug >= 0:
        for path in paths:
            dump_debug(path, args.debug, options)
        return

    records = parse_invoice_batch(
        paths,
        x_tolerance=options["x_tolerance"],
        y_tolerance=options["y_tolerance"],
        year=options["year"],
        ocr_lang=options["ocr_lang"],
    )

    if args.out:
        write_auto(records, args.out)
        print(f"Parsed {len(records)} invoice(s) -> {args.out}")
    else:
        print_auto(records, mode="json")


def run_lines(args) -> None:
    """执行 lines 子命令"""
    options = resolve_options(args)
    rows = collect_line_rows(args.pdf, options["x_tolerance"], options["y_tolerance"])

    if args.out:
        write_auto(rows, args.out)
        print(f"Wrote {len(rows)} line(s) -> {args.out}")
    else:
        print_auto(rows, mode="jsonl")


def run_rename(args) -> None:
    """执行 rename 子命令"""
    options = resolve_options(args)
    paths = collect_pdf_paths(args.pdf)
    if not paths:
        logger.error("No PDF found")
        sys.exit(1)

    records = parse_invoice_batch(
        paths,
        x_tolerance=options["x_tolerance"],
        y_tolerance=options["y_tolerance"],
        year=options["year"],
        ocr_lang=options["ocr_lang"],
    )
    filenames = rename_invoices(records, args.name, args.out_dir)
    print(f"Renamed {len(filenames)} invoice(s) -> {args.out_dir}")


def main(argv=None):
    """CLI 主入口"""
    parser = setup_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=DEFAULT_LOG_FORMAT,
    )

    # 子命令模式
    if args.command == "parse":
        run_parse(args)
    elif args.command == "lines":
        run_lines(args)
    elif args.command == "rename":
        run_rename(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
