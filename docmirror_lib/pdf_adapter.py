# --- docmirror_lib/pdf_adapter.py ---
"""
docmirror_lib/pdf_adapter.py: Turns PDF pages into raw PageGeometry.

pdfminer.six does the parsing. Characters of every LTTextLine are regrouped
into glyph runs (split at the virtual spaces pdfminer inserts and at font
changes), so the rest of the pipeline sees positioned string fragments
rather than single characters. Images and stroked rectangles/lines are
reported alongside the runs. Coordinates are left in PDF space (origin at the
bottom-left) for runs; images and paths are converted to top-left here.
"""
import base64
import logging
import math
import os
from io import BytesIO
from typing import Iterable, Iterator, List, Optional, Union

from pdfminer.high_level import extract_pages
from pdfminer.layout import LAParams, LTAnno, LTChar, LTImage, LTLine, LTRect, LTTextLine
from pdfminer.pdfdocument import PDFEncryptionError, PDFTextExtractionNotAllowed
from pdfminer.pdfparser import PDFSyntaxError
from pdfminer.psparser import PSException
from PIL import Image, UnidentifiedImageError

from .constants import IMAGE_PLACEHOLDER
from .errors import ExtractionError
from .models import GlyphRun, ImageItem, PageGeometry, PathItem

log_extract = logging.getLogger("docmirror.extract")

PdfSource = Union[str, bytes, os.PathLike]


def _find_elements_by_type(obj, t):
    """Recursively finds all layout elements of a specific type."""
    e = []
    if isinstance(obj, t):
        e.append(obj)
    if hasattr(obj, "_objs"):
        for child in obj:
            e.extend(_find_elements_by_type(child, t))
    return e


def _color_to_hex(color) -> Optional[str]:
    """Converts a pdfminer stroking colour (gray, RGB or CMYK) to #rrggbb."""
    if color is None:
        return None
    if isinstance(color, (int, float)):
        color = (color,)
    try:
        values = [float(c) for c in color]
    except (TypeError, ValueError):
        return None  # pattern colours and the like
    if len(values) == 1:
        rgb = values * 3
    elif len(values) == 3:
        rgb = values
    elif len(values) == 4:
        c, m, y, k = values
        rgb = [(1 - c) * (1 - k), (1 - m) * (1 - k), (1 - y) * (1 - k)]
    else:
        return None
    return "#" + "".join(f"{round(min(max(v, 0.0), 1.0) * 255):02x}" for v in rgb)


def _make_run(chars: List[LTChar], page_x0: float, page_y0: float) -> GlyphRun:
    first, last = chars[0], chars[-1]
    a, b, c, d, e, f = first.matrix
    norm = math.hypot(a, b)
    k = first.size / norm if norm else 0.0
    return GlyphRun(
        text="".join(ch.get_text() for ch in chars),
        transform=(a * k, b * k, c * k, d * k, e - page_x0, f - page_y0),
        width=last.x1 - first.x0,
        font_name=first.fontname,
    )


def line_to_runs(line: LTTextLine, page_x0: float = 0.0, page_y0: float = 0.0) -> List[GlyphRun]:
    """Splits one pdfminer text line into glyph runs."""
    runs, chars = [], []
    for element in line:
        if isinstance(element, LTChar):
            if chars and element.fontname != chars[-1].fontname:
                runs.append(_make_run(chars, page_x0, page_y0))
                chars = []
            chars.append(element)
        elif isinstance(element, LTAnno) and chars:
            runs.append(_make_run(chars, page_x0, page_y0))
            chars = []
    if chars:
        runs.append(_make_run(chars, page_x0, page_y0))
    return runs


def _encode_image(element: LTImage, page_no: int) -> str:
    """Decodes an image stream with Pillow and re-encodes it as a PNG data URI."""
    try:
        data = element.stream.get_data()
        if not data:
            log_extract.warning("Image '%s' on page %d has no data.", element.name, page_no)
            return IMAGE_PLACEHOLDER
        with Image.open(BytesIO(data)) as img:
            buffer = BytesIO()
            img.save(buffer, format="PNG")
    except UnidentifiedImageError:
        log_extract.warning(
            "Could not identify format of image '%s' on page %d.", element.name, page_no
        )
        return IMAGE_PLACEHOLDER
    except (OSError, PSException) as e:
        log_extract.warning("Could not decode image '%s' on page %d: %s", element.name, page_no, e)
        return IMAGE_PLACEHOLDER
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("utf-8")


def layout_to_geometry(layout, embed_images: bool = True) -> PageGeometry:
    """Converts one pdfminer LTPage into PageGeometry."""
    x0, y0, height = layout.x0, layout.y0, layout.height
    geometry = PageGeometry(width=layout.width, height=height)

    for line in _find_elements_by_type(layout, LTTextLine):
        geometry.runs.extend(line_to_runs(line, x0, y0))

    for element in _find_elements_by_type(layout, LTImage):
        data = _encode_image(element, layout.pageid) if embed_images else IMAGE_PLACEHOLDER
        geometry.images.append(
            ImageItem(
                x=element.x0 - x0,
                y=height - (element.y1 - y0),
                width=element.width,
                height=element.height,
                data=data,
                name=element.name,
            )
        )

    for element in _find_elements_by_type(layout, (LTRect, LTLine)):
        if isinstance(element, LTRect) and element.linewidth <= 0:
            continue
        geometry.paths.append(
            PathItem(
                x=element.x0 - x0,
                y=height - (element.y1 - y0),
                width=element.width,
                height=element.height,
                method="rect" if isinstance(element, LTRect) else "line",
                line_width=element.linewidth or 1.0,
                stroke_color=_color_to_hex(getattr(element, "stroking_color", None)),
            )
        )

    log_extract.debug(
        "Page %d: %d runs, %d images, %d paths.",
        layout.pageid,
        len(geometry.runs),
        len(geometry.images),
        len(geometry.paths),
    )
    return geometry


def iter_pdf_pages(
    source: PdfSource, pages: Optional[Iterable[int]] = None, embed_images: bool = True
) -> Iterator[PageGeometry]:
    """
    Yields the PageGeometry of each (selected) page of a PDF.

    Args:
        source: A file path or the raw PDF bytes.
        pages: 1-based page numbers to extract; None for all pages.
        embed_images: Whether image payloads are decoded and embedded.

    Raises:
        ExtractionError: If the PDF is malformed or encrypted.
        FileNotFoundError: If source is a path that does not exist.
    """
    name = "<bytes>" if isinstance(source, bytes) else os.fspath(source)
    fp = BytesIO(source) if isinstance(source, bytes) else name
    page_numbers = sorted(p - 1 for p in pages) if pages else None
    try:
        for layout in extract_pages(fp, page_numbers=page_numbers, laparams=LAParams()):
            yield layout_to_geometry(layout, embed_images)
    except (PDFEncryptionError, PDFTextExtractionNotAllowed) as e:
        raise ExtractionError(f"Encrypted or protected PDF: {e}", name) from e
    except PDFSyntaxError as e:
        raise ExtractionError(f"Malformed PDF: {e}", name) from e
    except PSException as e:
        raise ExtractionError(f"Could not parse PDF: {e}", name) from e
