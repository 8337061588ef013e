# --- docmirror_lib/segments.py ---
"""
docmirror_lib/segments.py: The translation contract.

Translation happens outside this package. The contract is a flat list of
positioned text segments taken from a Document, and a list of replacement
strings applied back in the same order. Only text changes; geometry, fonts
and flags are preserved, so the translated Document can go straight to the
renderer.
"""
import copy
import logging
from typing import Iterator, List, NamedTuple, Optional, Sequence

from .models import Document

log_api = logging.getLogger("docmirror.api")

BATCH_SIZE = 40


class Segment(NamedTuple):
    """Address of one translatable string; row/cell are set for table cells."""

    page_index: int
    item_index: int
    row_index: Optional[int]
    cell_index: Optional[int]
    text: str


def collect_segments(document: Document) -> List[Segment]:
    """Lists every non-blank text item and table cell in reading order."""
    segments = []
    for p_idx, page in enumerate(document.pages):
        for i_idx, item in enumerate(page.items):
            if item.type == "text" and item.text.strip():
                segments.append(Segment(p_idx, i_idx, None, None, item.text))
            elif item.type == "table":
                for r_idx, row in enumerate(item.rows):
                    for c_idx, cell in enumerate(row.cells):
                        if cell.text.strip():
                            segments.append(Segment(p_idx, i_idx, r_idx, c_idx, cell.text))
    return segments


def batch_segments(segments: Sequence[Segment], size: int = BATCH_SIZE) -> Iterator[List[Segment]]:
    """Yields consecutive slices of at most size segments."""
    for start in range(0, len(segments), size):
        yield list(segments[start : start + size])


def apply_translations(
    document: Document, segments: Sequence[Segment], translations: Sequence[str]
) -> Document:
    """
    Returns a copy of document with segment texts replaced by translations.

    A short translation list is applied as a prefix and the remaining
    segments keep their original text; surplus translations are ignored.
    """
    if len(translations) != len(segments):
        log_api.warning(
            "Got %d translations for %d segments; unmatched segments keep their text.",
            len(translations),
            len(segments),
        )
    translated = copy.deepcopy(document)
    for segment, text in zip(segments, translations):
        item = translated.pages[segment.page_index].items[segment.item_index]
        if segment.row_index is None:
            item.text = text
        else:
            item.rows[segment.row_index].cells[segment.cell_index].text = text
    return translated
