# --- docmirror_lib/api.py ---
"""
docmirror_lib/api.py: Entry points for turning a PDF or DOCX into a Document.

A PDF page goes through four steps: glyph runs are grouped into lines, images
and paths join the text items, the page is reordered by X-Y cut, and adjacent
lines are merged into paragraphs. DOCX files already carry their reading
order and only need synthetic pagination.
"""
import logging
import os
from typing import Iterable, Optional, Set

from .docx_adapter import extract_docx
from .errors import ExtractionError
from .grouper import group_runs
from .merger import merge_text_blocks
from .models import Document, Page, PageGeometry
from .pdf_adapter import iter_pdf_pages
from .reading_order import order_items

log = logging.getLogger("docmirror.api")

SUPPORTED_EXTENSIONS = (".pdf", ".docx")


def parse_page_selection(pages_str: str) -> Optional[Set[int]]:
    """Parses a page selection string (e.g., '1,3,5-7') into a set of integers."""
    if not pages_str or pages_str.lower() == "all":
        return None
    pages = set()
    try:
        for p in pages_str.split(","):
            part = p.strip()
            if "-" in part:
                s, e = map(int, part.split("-"))
                pages.update(range(s, e + 1))
            else:
                pages.add(int(part))
    except ValueError:
        log.error("Invalid page selection format: %s. Defaulting to 'all'.", pages_str)
        return None
    return {p for p in pages if p > 0} or None


def reconstruct_page(geometry: PageGeometry) -> Page:
    """
    Rebuilds the logical structure of one page from its raw geometry.

    Returns:
        A Page whose items are in reading order with paragraphs merged.
    """
    items = group_runs(geometry) + list(geometry.images) + list(geometry.paths)
    ordered = order_items(items)
    merged = merge_text_blocks(ordered)
    log.debug("Page reconstructed: %d raw items -> %d items.", len(items), len(merged))
    return Page(geometry.width, geometry.height, merged)


def extract_pdf_structure(
    source, pages: Optional[Iterable[int]] = None, embed_images: bool = True
) -> Document:
    """Reconstructs every selected page of a PDF (path or bytes)."""
    document = Document()
    for geometry in iter_pdf_pages(source, pages=pages, embed_images=embed_images):
        document.pages.append(reconstruct_page(geometry))
        log.info("Reconstructed page %d.", len(document.pages))
    return document


def extract_docx_structure(source, pages: Optional[Iterable[int]] = None) -> Document:
    """Lays out a DOCX (path or bytes) on synthetic pages."""
    all_pages = extract_docx(source)
    if pages:
        selected = set(pages)
        all_pages = [p for i, p in enumerate(all_pages, 1) if i in selected]
    return Document(all_pages)


def extract_document(path: str, pages_str: str = "all", embed_images: bool = True) -> Document:
    """
    Extracts the structure of a PDF or DOCX file, chosen by extension.

    Args:
        path: The input file.
        pages_str: Page selection such as '1,3,5-7' or 'all'.
        embed_images: Whether PDF image payloads are decoded and embedded.

    Raises:
        ExtractionError: If the file is missing, unsupported or unreadable.
    """
    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ExtractionError(f"Unsupported file type '{ext or '(none)'}'.", path)

    pages = parse_page_selection(pages_str)
    try:
        if not os.path.exists(path):
            raise FileNotFoundError(f"File not found: {path}")
        if ext == ".docx":
            document = extract_docx_structure(path, pages)
        else:
            document = extract_pdf_structure(path, pages, embed_images)
    except FileNotFoundError as e:
        raise ExtractionError(str(e), path) from e

    log.info(
        "Extracted %d pages with %d items from %s.",
        len(document.pages),
        sum(len(p.items) for p in document.pages),
        os.path.basename(path),
    )
    return document
