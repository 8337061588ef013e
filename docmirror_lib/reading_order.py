# --- docmirror_lib/reading_order.py ---
"""
docmirror_lib/reading_order.py: Recursive X-Y cut reading-order reconstruction.

Columns take priority over rows: a region is cut vertically whenever a wide
enough gutter exists, so a two-column page is never read row by row across
both columns. Regions that cannot be cut on either axis are sorted by
position.
"""
import functools
import logging
from typing import List, Optional, Sequence

from .constants import (
    ATOMIC_ROW_TOLERANCE,
    INTERVAL_TOLERANCE,
    MIN_COL_GAP,
    MIN_ROW_GAP,
    ORDER_CONTRIBUTORS,
)
from .models import PageItem

log_order = logging.getLogger("docmirror.order")

MIN_GAPS = {"x": MIN_COL_GAP, "y": MIN_ROW_GAP}


def _interval(item, axis):
    if axis == "x":
        return [item.x, item.x + item.width]
    return [item.y, item.y + item.height]


def find_split(items: Sequence[PageItem], axis: str) -> Optional[float]:
    """
    Finds the midpoint of the widest empty band across the given axis.

    Only text, image and table items contribute; paths are decoration.

    Returns:
        The cut coordinate, or None when no gap exceeds the axis minimum.
    """
    contributors = [i for i in items if i.type in ORDER_CONTRIBUTORS]
    if len(contributors) < 2:
        return None

    intervals = sorted((_interval(i, axis) for i in contributors), key=lambda s: s[0])
    merged = [intervals[0]]
    for start, end in intervals[1:]:
        current = merged[-1]
        if start < current[1] - INTERVAL_TOLERANCE:
            current[1] = max(current[1], end)
        else:
            merged.append([start, end])

    best_gap, max_gap_size = None, 0.0
    min_size = MIN_GAPS[axis]
    for (_, prev_end), (next_start, _) in zip(merged, merged[1:]):
        gap_size = next_start - prev_end
        if gap_size > min_size and gap_size > max_gap_size:
            max_gap_size = gap_size
            best_gap = (prev_end + next_start) / 2
    return best_gap


def _compare_atomic(a, b):
    if abs(a.y - b.y) > ATOMIC_ROW_TOLERANCE:
        return -1 if a.y < b.y else 1
    if a.x == b.x:
        return 0
    return -1 if a.x < b.x else 1


def _sort_atomic(items):
    return sorted(items, key=functools.cmp_to_key(_compare_atomic))


def order_items(items: Sequence[PageItem], depth: int = 0) -> List[PageItem]:
    """
    Returns the items of one page in reading order.

    The result is a permutation of the input: every item appears exactly once.
    """
    items = list(items)
    if len(items) <= 1:
        return items

    split_x = find_split(items, "x")
    if split_x is not None:
        left = [i for i in items if i.center_x < split_x]
        right = [i for i in items if i.center_x >= split_x]
        log_order.debug("%sX-cut at %.2f (%d | %d)", "  " * depth, split_x, len(left), len(right))
        return order_items(left, depth + 1) + order_items(right, depth + 1)

    split_y = find_split(items, "y")
    if split_y is not None:
        top = [i for i in items if i.center_y < split_y]
        bottom = [i for i in items if i.center_y >= split_y]
        log_order.debug("%sY-cut at %.2f (%d / %d)", "  " * depth, split_y, len(top), len(bottom))
        return order_items(top, depth + 1) + order_items(bottom, depth + 1)

    log_order.debug("%sAtomic region of %d items.", "  " * depth, len(items))
    return _sort_atomic(items)
