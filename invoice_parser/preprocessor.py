"""
文本预处理模块

职责：
- 按 y 坐标把零散的文本片段分行（容差量化）
- 行内按 x 排序并合并水平相邻的片段
- 输出从上到下、从左到右的文本序列
- 清理行文本（去空格、去空行）
- 不包含业务逻辑，只做通用文本处理
"""

import math
import logging
from typing import Dict, Iterable, List

from .models import LineGroup, PositionedToken, TextBlock

logger = logging.getLogger("invoice_parser")

DEFAULT_X_TOLERANCE = 10
DEFAULT_Y_TOLERANCE = 10


def quantize_y(y: float, y_tolerance: float = DEFAULT_Y_TOLERANCE) -> float:
    """
    把 y 坐标量化到最近的 y_tolerance 整数倍（四舍五入，.5 向上）。

    Example:
        quantize_y(104) → 100
        quantize_y(105) → 110
        quantize_y(96)  → 100
    """
    return math.floor(y / y_tolerance + 0.5) * y_tolerance


def group_lines(
    tokens: Iterable[PositionedToken],
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
) -> Dict[float, List[PositionedToken]]:
    """
    按量化后的 y 坐标分行。

    Args:
        tokens: 文本片段（任意顺序）
        y_tolerance: 垂直容差

    Returns:
        {量化 y: [token, ...]}，每行内保持输入顺序
    """
    lines: Dict[float, List[PositionedToken]] = {}
    for token in tokens:
        key = quantize_y(token.y, y_tolerance)
        lines.setdefault(key, []).append(token)
    return lines


def merge_line_blocks(
    tokens: List[PositionedToken],
    x_tolerance: float = DEFAULT_X_TOLERANCE,
) -> List[TextBlock]:
    """
    合并同一行中水平连续的片段。

    合并条件：
        gap = token.x - (block.x + block.width)
        gap <= x_tolerance 时拼接（边界包含）

    Args:
        tokens: 同一行的片段
        x_tolerance: 水平容差

    Returns:
        按 x 从左到右排列的文本块

    Example:
        输入:  [{"text": "发票", x: 0, width: 20}, {"text": "号码", x: 25, width: 20}]
        输出:  [{"text": "发票号码", x: 0, width: 45}]
    """
    # sorted 是稳定排序，x 相同的片段保持输入顺序
    ordered = sorted(tokens, key=lambda t: t.x)

    blocks: List[TextBlock] = []
    current = None

    for token in ordered:
        if current is None:
            current = TextBlock.from_token(token)
            continue

        gap = token.x - (current.x + current.width)
        if gap <= x_tolerance:
            # 连续 → 拼接
            current.text += token.text
            current.width = token.x + token.width - current.x
            current.height = max(current.height, token.height)
        else:
            # 不连续 → 保存上一块，开启新块
            blocks.append(current)
            current = TextBlock.from_token(token)

    if current is not None:
        blocks.append(current)

    return blocks


def build_line_groups(
    tokens: Iterable[PositionedToken],
    x_tolerance: float = DEFAULT_X_TOLERANCE,
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
) -> List[LineGroup]:
    """分行 + 行内合并，按 y 从上到下（y 轴向上，y 大的在前）排序。"""
    groups = [
        LineGroup(y=y, blocks=merge_line_blocks(line_tokens, x_tolerance))
        for y, line_tokens in group_lines(tokens, y_tolerance).items()
    ]
    groups.sort(key=lambda g: g.y, reverse=True)
    return groups


def merge_text_items(
    tokens: Iterable[PositionedToken],
    x_tolerance: float = DEFAULT_X_TOLERANCE,
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
) -> List[str]:
    """
    把一页的文本片段重建为有序文本序列。

    Args:
        tokens: 页面文本片段（任意顺序，可为空）
        x_tolerance: 行内合并的最大水平间距
        y_tolerance: 分行的量化步长

    Returns:
        每个文本块的内容，从上到下、从左到右
    """
    groups = build_line_groups(tokens, x_tolerance, y_tolerance)
    texts = [block.text for group in groups for block in group.blocks]
    logger.debug(f"[MERGE] {len(groups)} line(s) -> {len(texts)} block(s)")
    return texts


def clean_lines(lines: Iterable[str]) -> List[str]:
    """
    清理文本行：去掉所有空格，丢弃清理后为空的行。

    Example:
        ["发票 号码：123", "   ", "¥ 88.00"] → ["发票号码：123", "¥88.00"]
    """
    cleaned = (line.replace(" ", "") for line in lines)
    return [line for line in cleaned if line]
