import random

from docmirror_lib.models import ImageItem, PathItem, TextItem
from docmirror_lib.reading_order import find_split, order_items


def text(label, x, y, w=200, h=10):
    return TextItem(x, y, w, h, text=label)


def labels(items):
    return [i.text for i in items]


def test_single_item_and_empty():
    assert order_items([]) == []
    item = text("a", 0, 0)
    assert order_items([item]) == [item]


def test_two_columns_read_column_by_column():
    items = [text(f"{side}{row}", x, 100 + row * 20) for row in range(3) for side, x in
             (("L", 50), ("R", 320))]
    assert labels(order_items(items)) == ["L0", "L1", "L2", "R0", "R1", "R2"]


def test_two_rows_read_top_to_bottom():
    lower = text("lower", 50, 300, w=500)
    upper = text("upper", 50, 100, w=500)
    assert labels(order_items([lower, upper])) == ["upper", "lower"]


def test_heading_above_two_columns():
    items = [
        text("R0", 320, 60),
        text("L0", 50, 60),
        text("title", 50, 20, w=500, h=20),
        text("R1", 320, 80),
        text("L1", 50, 80),
    ]
    assert labels(order_items(items)) == ["title", "L0", "L1", "R0", "R1"]


def test_columns_take_priority_over_rows():
    # Every row has a vertical gap, but the gutter must win
    items = [text(f"{side}{row}", x, row * 40) for row in range(4) for side, x in
             (("L", 0), ("R", 300))]
    result = labels(order_items(items))
    assert result.index("L3") < result.index("R0")


def test_paths_do_not_block_a_cut():
    rule = PathItem(0, 90, 600, 1, method="line")
    items = [text("L", 50, 100), text("R", 320, 100), rule]
    assert find_split(items, "x") == 285
    assert rule in order_items(items)


def test_find_split_picks_widest_gap():
    items = [text("a", 0, 0, w=100), text("b", 120, 0, w=100), text("c", 300, 0, w=100)]
    # Gaps of 20 and 80: the cut goes in the middle of the wider one
    assert find_split(items, "x") == 260


def test_find_split_ignores_small_gaps():
    items = [text("a", 0, 0, w=100), text("b", 110, 0, w=100)]
    assert find_split(items, "x") is None
    assert find_split([text("a", 0, 0)], "x") is None


def test_atomic_region_sorts_rows_then_x():
    a = TextItem(100, 100, 100, 20, text="a")
    b = TextItem(50, 103, 100, 20, text="b")
    c = TextItem(80, 112, 100, 20, text="c")
    assert labels(order_items([a, c, b])) == ["b", "a", "c"]


def test_order_is_a_permutation():
    rng = random.Random(7)
    items = []
    for n in range(40):
        x, y = rng.uniform(0, 500), rng.uniform(0, 700)
        if n % 5 == 0:
            items.append(ImageItem(x, y, rng.uniform(10, 100), rng.uniform(10, 100)))
        else:
            items.append(text(str(n), x, y, w=rng.uniform(5, 200), h=rng.uniform(5, 15)))
    result = order_items(items)
    assert len(result) == len(items)
    assert sorted(map(id, result)) == sorted(map(id, items))
