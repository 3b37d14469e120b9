"""
输出模块

职责：
- 格式化输出到 JSON/CSV/JSONL/Excel
- 统一输出接口，不包含业务逻辑
"""

import os
import csv
import json
import logging
from typing import List, Dict, Any

import pandas as pd

logger = logging.getLogger("invoice_parser")


def write_json(data: Any, file_path: str) -> None:
    """
    输出 JSON 文件。

    Args:
        data: 要输出的数据
        file_path: 输出文件路径
    """
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    logger.info(f"Wrote JSON: {file_path}")


def write_jsonl(rows: List[Dict], file_path: str) -> None:
    """输出 JSONL 文件（每行一个 JSON 对象）。"""
    with open(file_path, "w", encoding="utf-8") as f:
        for r in rows:
            f.write(json.dumps(r, ensure_ascii=False) + "\n")
    logger.info(f"Wrote JSONL: {file_path} ({len(rows)} rows)")


def _flatten(value: Any) -> Any:
    # 列表字段（如 warnings）在表格里合成一格
    if isinstance(value, list):
        return "; ".join(str(v) for v in value)
    return value


def write_csv(rows: List[Dict], file_path: str, fieldnames: List[str] = None) -> None:
    """
    输出 CSV 文件（utf-8-sig，Excel 直接打开不乱码）。

    Args:
        rows: 要输出的行列表
        file_path: 输出文件路径
        fieldnames: 列名列表，不指定则自动从第一行推断
    """
    if not rows:
        logger.warning(f"No data to write to CSV: {file_path}")
        return

    if fieldnames is None:
        fieldnames = list(rows[0].keys())

    with open(file_path, "w", newline="", encoding="utf-8-sig") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        w.writerows({k: _flatten(v) for k, v in r.items()} for r in rows)
    logger.info(f"Wrote CSV: {file_path} ({len(rows)} rows)")


def write_excel(rows: List[Dict], file_path: str) -> None:
    """输出 Excel 文件（.xlsx）。"""
    if not rows:
        logger.warning(f"No data to write to Excel: {file_path}")
        return

    df = pd.DataFrame([{k: _flatten(v) for k, v in r.items()} for r in rows])
    df.to_excel(file_path, index=False)
    logger.info(f"Wrote Excel: {file_path} ({len(rows)} rows)")


def print_json(data: Any) -> None:
    """输出 JSON 到 stdout。"""
    print(json.dumps(data, ensure_ascii=False, indent=2))


def print_jsonl(rows: List[Dict], limit: int = 50) -> None:
    """
    输出 JSONL 到 stdout（预览模式）。

    Args:
        rows: 要输出的行列表
        limit: 最多输出行数
    """
    for r in rows[:limit]:
        print(json.dumps(r, ensure_ascii=False))

    if len(rows) > limit:
        print(f"... ({len(rows) - limit} more rows, use --out to save all)")


def write_auto(data: Any, file_path: str) -> None:
    """
    根据文件扩展名自动选择输出格式。

    Raises:
        ValueError: 不支持的文件格式，或格式要求列表数据
    """
    ext = os.path.splitext(file_path)[1].lower()

    if ext == ".json":
        write_json(data, file_path)
        return

    if ext not in (".jsonl", ".csv", ".xlsx"):
        raise ValueError(f"Unsupported file format: {ext}")
    if not isinstance(data, list):
        raise ValueError(f"{ext} format requires list data, got {type(data)}")

    if ext == ".jsonl":
        write_jsonl(data, file_path)
    elif ext == ".csv":
        write_csv(data, file_path)
    else:
        write_excel(data, file_path)


def print_auto(data: Any, mode: str = "json") -> None:
    """根据模式自动选择输出格式到 stdout："json" 或 "jsonl"。"""
    if mode == "jsonl" and isinstance(data, list):
        print_jsonl(data)
    else:
        print_json(data)
