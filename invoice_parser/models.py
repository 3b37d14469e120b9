"""
数据结构定义

- PositionedToken：页面文本源给出的带坐标文本片段（y 轴向上）
- TextBlock：同一行内水平相邻、已合并的片段
- LineGroup：同一量化 y 坐标下的所有 TextBlock
- InvoiceFields：抽取结果，None 表示未找到
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict


@dataclass
class PositionedToken:
    """页面上的一个文本片段（单字或一小段）。"""

    text: str
    x: float
    y: float
    width: float
    height: float


@dataclass
class TextBlock:
    """水平连续的若干片段合并后的文本块，坐标为合并后的包围盒。"""

    text: str
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_token(cls, token: PositionedToken) -> "TextBlock":
        return cls(
            text=token.text,
            x=token.x,
            y=token.y,
            width=token.width,
            height=token.height,
        )


@dataclass
class LineGroup:
    y: float
    blocks: List[TextBlock] = field(default_factory=list)


@dataclass
class InvoiceFields:
    """
    发票关键字段。

    date:  "YYYY年MM月DD日"
    code:  8 位或 20 位数字串
    money: 两位小数的金额字符串
    """

    date: Optional[str] = None
    code: Optional[str] = None
    money: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)
