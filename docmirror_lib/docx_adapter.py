# --- docmirror_lib/docx_adapter.py ---
"""
docmirror_lib/docx_adapter.py: Synthesizes paged structure from a DOCX body.

A DOCX file has no fixed geometry, so its paragraphs and tables are laid out
top to bottom on A4-sized synthetic pages with fixed margins and line height.
The body is walked in document order by python-docx; the layout step works on
plain blocks and never touches the package.
"""
import logging
import os
from io import BytesIO
from typing import Iterable, Iterator, List, NamedTuple, Optional, Union
from zipfile import BadZipFile

import docx
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml.ns import qn
from docx.table import Table, _Cell
from docx.text.paragraph import Paragraph

from .constants import (
    DEFAULT_FONT_NAME,
    DOCX_FONT_SIZE,
    DOCX_LINE_HEIGHT_FACTOR,
    DOCX_MARGIN,
    DOCX_PAGE_HEIGHT,
    DOCX_PAGE_WIDTH,
    DOCX_TABLE_ROW_HEIGHT,
    DOCX_TABLE_SPACING,
)
from .errors import ExtractionError
from .models import Page, TableCell, TableItem, TableRow, TextItem

log_extract = logging.getLogger("docmirror.extract")

ALIGNMENTS = {
    WD_ALIGN_PARAGRAPH.LEFT: "left",
    WD_ALIGN_PARAGRAPH.CENTER: "center",
    WD_ALIGN_PARAGRAPH.RIGHT: "right",
    WD_ALIGN_PARAGRAPH.JUSTIFY: "justify",
}


class ParagraphBlock(NamedTuple):
    text: str
    is_bold: bool = False
    alignment: Optional[str] = None


class TableBlock(NamedTuple):
    rows: List[TableRow]


def _alignment(paragraph: Paragraph) -> Optional[str]:
    return ALIGNMENTS.get(paragraph.alignment)


def _is_bold(paragraph: Paragraph) -> bool:
    runs = [r for r in paragraph.runs if r.text.strip()]
    return bool(runs) and all(r.bold for r in runs)


def _is_header_row(tr) -> bool:
    for flag in tr.xpath("./w:trPr/w:tblHeader"):
        return flag.get(qn("w:val"), "true").lower() not in ("0", "false", "off")
    return False


def _grid_rows(table: Table):
    """Returns, per row, the (grid column, tc) pairs of its physical cells."""
    grid = []
    for tr in table._tbl.tr_lst:
        col, cells = 0, []
        for tc in tr.tc_lst:
            cells.append((col, tc))
            col += tc.grid_span
        grid.append((tr, cells))
    return grid


def _row_span(grid, row_index: int, col: int) -> int:
    span = 1
    for _, cells in grid[row_index + 1 :]:
        below = next((tc for c, tc in cells if c == col), None)
        if below is None or below.vMerge != "continue":
            break
        span += 1
    return span


def table_rows(table: Table) -> List[TableRow]:
    """
    Converts a python-docx table into TableRows.

    Vertically merged continuation cells are omitted and rows that end up
    without cells are dropped.
    """
    grid = _grid_rows(table)
    rows = []
    for row_index, (tr, cells) in enumerate(grid):
        is_header = _is_header_row(tr)
        out = []
        for col, tc in cells:
            if tc.vMerge == "continue":
                continue
            cell = _Cell(tc, table)
            out.append(
                TableCell(
                    text=cell.text.strip(),
                    is_header=is_header,
                    col_span=tc.grid_span,
                    row_span=_row_span(grid, row_index, col) if tc.vMerge == "restart" else 1,
                    align=_alignment(cell.paragraphs[0]) if cell.paragraphs else None,
                )
            )
        if out:
            rows.append(TableRow(out))
    return rows


def iter_docx_blocks(document) -> Iterator[Union[ParagraphBlock, TableBlock]]:
    """Yields the body's paragraphs and tables in document order."""
    for block in document.iter_inner_content():
        if isinstance(block, Paragraph):
            text = block.text.strip()
            if text:
                yield ParagraphBlock(text, _is_bold(block), _alignment(block))
        elif isinstance(block, Table):
            yield TableBlock(table_rows(block))


def layout_docx_blocks(blocks: Iterable[Union[ParagraphBlock, TableBlock]]) -> List[Page]:
    """
    Flows blocks onto fixed-size pages.

    Returns:
        At least one Page, even for an empty body.
    """
    line_height = DOCX_FONT_SIZE * DOCX_LINE_HEIGHT_FACTOR
    content_width = DOCX_PAGE_WIDTH - 2 * DOCX_MARGIN
    bottom = DOCX_PAGE_HEIGHT - DOCX_MARGIN
    pages, items, y = [], [], DOCX_MARGIN

    def new_page():
        nonlocal items, y
        pages.append(Page(DOCX_PAGE_WIDTH, DOCX_PAGE_HEIGHT, items))
        items, y = [], DOCX_MARGIN

    for block in blocks:
        if isinstance(block, ParagraphBlock):
            if y + line_height > bottom:
                new_page()
            items.append(
                TextItem(
                    x=DOCX_MARGIN,
                    y=y,
                    width=content_width,
                    height=DOCX_FONT_SIZE,
                    text=block.text,
                    font_size=DOCX_FONT_SIZE,
                    font_name=DEFAULT_FONT_NAME,
                    is_bold=block.is_bold,
                    is_paragraph_start=True,
                    alignment=block.alignment,
                )
            )
            y += line_height
        elif block.rows:
            height = len(block.rows) * DOCX_TABLE_ROW_HEIGHT
            if y + height > bottom:
                new_page()
            items.append(
                TableItem(x=DOCX_MARGIN, y=y, width=content_width, height=height, rows=block.rows)
            )
            y += height + DOCX_TABLE_SPACING

    if items or not pages:
        pages.append(Page(DOCX_PAGE_WIDTH, DOCX_PAGE_HEIGHT, items))
    return pages


def extract_docx(source: Union[str, bytes, os.PathLike]) -> List[Page]:
    """
    Reads a DOCX file (path or bytes) into synthetic pages.

    Raises:
        ExtractionError: If the package cannot be opened or parsed.
    """
    name = "<bytes>" if isinstance(source, bytes) else os.fspath(source)
    try:
        document = docx.Document(BytesIO(source) if isinstance(source, bytes) else name)
        pages = layout_docx_blocks(iter_docx_blocks(document))
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError, SyntaxError) as e:
        log_extract.debug("python-docx failed on %s: %s", name, e)
        raise ExtractionError("Could not parse DOCX content.", name) from e
    log_extract.info("Laid out DOCX body on %d pages.", len(pages))
    return pages
