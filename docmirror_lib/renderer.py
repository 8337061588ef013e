# --- docmirror_lib/renderer.py ---
"""
docmirror_lib/renderer.py: Lays a reconstructed Document out as positioned boxes.

The renderer does not draw anything itself. It produces a RenderPlan, a list
of absolutely positioned boxes with CSS-like style properties per page, which
a drawing surface (HTML, a PDF writer) can consume as-is. Text boxes are
passed through the auto-fit step so translated text stays within the geometry
of the source line.
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .autofit import PillowTextMeasurer, TextMeasurer, fit_font_size
from .constants import (
    BASELINE_OFFSET_FACTOR,
    DEFAULT_STROKE_COLOR,
    INDIC_FONT_STACK,
    PARAGRAPH_START_MARGIN,
    TABLE_CELL_PADDING,
    TABLE_FONT_DELTA,
)
from .models import Document, Page, PageItem

log_render = logging.getLogger("docmirror.render")

FONT_PREFIXES = {
    "helvetica": (),
    "times": ("'Times New Roman'", "serif"),
    "courier": ("'Courier New'", "monospace"),
}
PAGE_FOOTER = "RECONSTRUCTED MIRROR - PAGE {}"


def build_font_stack(user_font: str) -> str:
    """Returns the comma-separated font stack for a user font choice."""
    if user_font not in FONT_PREFIXES:
        log_render.warning("Unknown font '%s'; using helvetica.", user_font)
        user_font = "helvetica"
    return ", ".join(FONT_PREFIXES[user_font] + INDIC_FONT_STACK)


@dataclass
class RenderedBox:
    """One absolutely positioned box; geometry is already scaled."""

    item_type: str
    x: float
    y: float
    width: float
    height: float
    z_index: int
    style: Dict[str, Any] = field(default_factory=dict)
    text: Optional[str] = None
    cells: Optional[List[List[Dict[str, Any]]]] = None
    payload: Optional[str] = None
    overflow: bool = False


@dataclass
class RenderedPage:
    width: float
    height: float
    boxes: List[RenderedBox] = field(default_factory=list)
    footer: str = ""


@dataclass
class TextLayerEntry:
    """A searchable text run positioned at its approximate baseline."""

    page_index: int
    text: str
    x: float
    y: float
    font_size: float


@dataclass
class RenderPlan:
    font_stack: str
    line_spacing: float
    scale: float
    pages: List[RenderedPage] = field(default_factory=list)

    @property
    def overflow_count(self) -> int:
        return sum(1 for p in self.pages for b in p.boxes if b.overflow)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LayoutRenderer:
    """
    Converts a Document into a RenderPlan.

    Args:
        measurer: Text measurement capability used by auto-fit. Defaults to
            Pillow's bundled font.
    """

    def __init__(self, measurer: TextMeasurer = None):
        self.measurer = measurer or PillowTextMeasurer()

    def render(
        self,
        document: Document,
        user_font: str = "helvetica",
        user_font_size: float = 12,
        line_spacing: float = 1.5,
        scale: float = 1.0,
    ) -> RenderPlan:
        """
        Lays out every page of the document.

        Args:
            document: The reconstructed structure to render.
            user_font: One of helvetica, times or courier.
            user_font_size: Base font size for table cells.
            line_spacing: Line-height multiplier for text boxes.
            scale: Multiplier applied to every length.

        Returns:
            The RenderPlan, one RenderedPage per page.
        """
        font_stack = build_font_stack(user_font)
        plan = RenderPlan(font_stack=font_stack, line_spacing=line_spacing, scale=scale)
        for index, page in enumerate(document.pages):
            plan.pages.append(
                self._render_page(page, index, font_stack, user_font_size, line_spacing, scale)
            )
        log_render.info(
            "Rendered %d pages (%d boxes, %d overflowing).",
            len(plan.pages),
            sum(len(p.boxes) for p in plan.pages),
            plan.overflow_count,
        )
        return plan

    def _render_page(self, page: Page, index, font_stack, user_font_size, line_spacing, scale):
        rendered = RenderedPage(
            width=page.width * scale,
            height=page.height * scale,
            footer=PAGE_FOOTER.format(index + 1),
        )
        for item in page.items:
            box = RenderedBox(
                item_type=item.type,
                x=item.x * scale,
                y=item.y * scale,
                width=item.width * scale,
                height=item.height * scale,
                z_index=2 if item.type == "text" else 1,
            )
            if item.type == "text":
                self._style_text(box, item, font_stack, line_spacing, scale)
            elif item.type == "image":
                box.payload = item.data
            elif item.type == "table":
                self._style_table(box, item, font_stack, user_font_size, scale)
            elif item.type == "path":
                self._style_path(box, item, scale)
            else:
                log_render.warning("Cannot render item of type '%s'.", item.type)
                continue
            rendered.boxes.append(box)
        return rendered

    def _style_text(self, box: RenderedBox, item: PageItem, font_stack, line_spacing, scale):
        fit = fit_font_size(
            item.text,
            box.width,
            box.height,
            item.font_size * scale,
            self.measurer,
            font_stack,
            line_spacing,
            item.is_bold,
        )
        box.text = item.text
        box.overflow = fit.overflow
        box.style = {
            "font-size": fit.font_size,
            "font-family": font_stack,
            "font-weight": 700 if item.is_bold else 400,
            "line-height": line_spacing,
        }
        if item.alignment:
            box.style["text-align"] = item.alignment
        if item.indent:
            box.style["text-indent"] = item.indent * scale
        if item.is_paragraph_start:
            box.style["margin-top"] = PARAGRAPH_START_MARGIN * scale

    def _style_table(self, box: RenderedBox, item: PageItem, font_stack, user_font_size, scale):
        box.style = {
            "font-family": font_stack,
            "font-size": (user_font_size - TABLE_FONT_DELTA) * scale,
            "border-collapse": "collapse",
        }
        box.cells = [
            [
                {
                    "text": cell.text,
                    "header": cell.is_header,
                    "colSpan": cell.col_span,
                    "rowSpan": cell.row_span,
                    "text-align": cell.align or "left",
                    "font-weight": 900 if cell.is_header else 400,
                    "padding": TABLE_CELL_PADDING * scale,
                }
                for cell in row.cells
            ]
            for row in item.rows
        ]

    def _style_path(self, box: RenderedBox, item: PageItem, scale):
        lw = item.line_width * scale
        color = item.stroke_color or DEFAULT_STROKE_COLOR
        if item.method == "rect":
            widths = (lw, lw, lw, lw)
        elif item.width > item.height:
            widths = (lw, 0, 0, 0)  # horizontal rule: top border
        else:
            widths = (0, 0, 0, lw)  # vertical rule: left border
        box.style = {"border-color": color, "border-width": widths, "border-style": "solid"}

    @staticmethod
    def text_layer(document: Document) -> List[TextLayerEntry]:
        """
        Positions every text item for an invisible, selectable text layer.

        The y coordinate approximates the baseline from the item's top edge.
        """
        return [
            TextLayerEntry(
                page_index=index,
                text=item.text,
                x=item.x,
                y=item.y + item.font_size * BASELINE_OFFSET_FACTOR,
                font_size=item.font_size,
            )
            for index, page in enumerate(document.pages)
            for item in page.text_items
        ]
