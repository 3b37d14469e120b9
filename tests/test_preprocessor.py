from itertools import permutations

from invoice_parser.models import PositionedToken
from invoice_parser.preprocessor import (
    build_line_groups,
    clean_lines,
    merge_line_blocks,
    merge_text_items,
    quantize_y,
)


def tok(text, x, y, width=10, height=10):
    return PositionedToken(text=text, x=x, y=y, width=width, height=height)


def test_merge_text_items_empty():
    assert merge_text_items([]) == []


def test_quantize_y_rounds_half_up():
    assert quantize_y(104) == 100
    assert quantize_y(105) == 110
    assert quantize_y(96) == 100
    assert quantize_y(-5) == 0
    assert quantize_y(7, y_tolerance=5) == 5


def test_gap_equal_to_tolerance_merges():
    # 第一块右边界 x=10，第二块 x=20，gap=10
    assert merge_text_items([tok("发票", 0, 100), tok("号码", 20, 100)]) == ["发票号码"]


def test_gap_above_tolerance_splits():
    assert merge_text_items([tok("发票", 0, 100), tok("号码", 20.01, 100)]) == ["发票", "号码"]


def test_custom_x_tolerance():
    tokens = [tok("a", 0, 100), tok("b", 40, 100)]
    assert merge_text_items(tokens) == ["a", "b"]
    assert merge_text_items(tokens, x_tolerance=30) == ["ab"]


def test_merged_block_geometry():
    blocks = merge_line_blocks([
        tok("b", 12, 100, width=8, height=14),
        tok("a", 0, 100, width=10, height=10),
        tok("c", 50, 100),
    ])
    assert [b.text for b in blocks] == ["ab", "c"]
    assert blocks[0].x == 0
    assert blocks[0].width == 20
    assert blocks[0].height == 14


def test_tokens_in_different_buckets_are_different_lines():
    # 相差 2，但分别量化到 100 和 110
    out = merge_text_items([tok("A", 0, 104), tok("B", 10, 106)])
    assert out == ["B", "A"]


def test_tokens_in_same_bucket_share_line():
    out = merge_text_items([tok("A", 0, 101), tok("B", 10, 104)])
    assert out == ["AB"]


def test_lines_ordered_top_to_bottom():
    out = merge_text_items([tok("bottom", 0, 50), tok("top", 0, 100)])
    assert out == ["top", "bottom"]


def test_blocks_ordered_left_to_right_within_line():
    out = merge_text_items([tok("right", 200, 100), tok("left", 0, 100)])
    assert out == ["left", "right"]


def test_output_independent_of_input_order():
    tokens = [
        tok("开票", 0, 300, width=20),
        tok("日期", 22, 301, width=20),
        tok("¥88.00", 300, 200, width=40),
        tok("合计", 0, 198, width=20),
    ]
    expected = merge_text_items(tokens)
    assert expected == ["开票日期", "合计", "¥88.00"]
    for perm in permutations(tokens):
        assert merge_text_items(list(perm)) == expected


def test_identical_x_keeps_input_order():
    assert merge_text_items([tok("a", 0, 100), tok("b", 0, 100)]) == ["ab"]
    assert merge_text_items([tok("b", 0, 100), tok("a", 0, 100)]) == ["ba"]


def test_build_line_groups():
    groups = build_line_groups([tok("x", 0, 49), tok("y", 0, 151), tok("z", 30, 52)])
    assert [g.y for g in groups] == [150, 50]
    assert [[b.text for b in g.blocks] for g in groups] == [["y"], ["x", "z"]]


def test_clean_lines_strips_spaces_and_drops_empty():
    assert clean_lines(["发票 号码：123", "   ", "", "¥ 88.00"]) == ["发票号码：123", "¥88.00"]
