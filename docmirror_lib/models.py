# --- docmirror_lib/models.py ---
"""
docmirror_lib/models.py: The document structure model.

A Document is an ordered list of Pages; each Page holds geometrically
positioned items (text, image, path, table) whose order is the reading order.
The model is also the interchange format handed to translation and rendering
collaborators, so it round-trips through a plain nested record with
camelCase keys.
"""
import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .constants import DEFAULT_FONT_NAME, IMAGE_PLACEHOLDER

log = logging.getLogger("docmirror.api")


# --- RAW EXTRACTION INPUT ---
@dataclass
class GlyphRun:
    """A contiguous positioned string fragment as emitted by an extractor."""

    text: str
    transform: Tuple[float, float, float, float, float, float]
    width: float
    font_name: str = DEFAULT_FONT_NAME

    @property
    def font_size(self) -> float:
        a, b = self.transform[0], self.transform[1]
        return math.sqrt(a * a + b * b)

    @property
    def x(self) -> float:
        return self.transform[4]

    @property
    def baseline(self) -> float:
        return self.transform[5]


@dataclass
class PageGeometry:
    """Everything an extraction adapter reports for one page."""

    width: float
    height: float
    runs: List[GlyphRun] = field(default_factory=list)
    images: List["ImageItem"] = field(default_factory=list)
    paths: List["PathItem"] = field(default_factory=list)


# --- ITEMS ---
@dataclass
class Item:
    """Base for every positioned item; y is measured from the page top."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


@dataclass
class TextItem(Item):
    text: str = ""
    font_size: float = 12.0
    font_name: str = DEFAULT_FONT_NAME
    is_bold: bool = False
    is_paragraph_start: Optional[bool] = None
    indent: float = 0.0
    alignment: Optional[str] = None  # left, center, right, justify or unset
    type: str = field(default="text", init=False)


@dataclass
class ImageItem(Item):
    data: str = IMAGE_PLACEHOLDER
    name: Optional[str] = None
    type: str = field(default="image", init=False)


@dataclass
class PathItem(Item):
    method: str = "rect"  # rect or line
    line_width: float = 1.0
    stroke_color: Optional[str] = None
    type: str = field(default="path", init=False)


@dataclass
class TableCell:
    text: str = ""
    is_header: bool = False
    col_span: int = 1
    row_span: int = 1
    align: Optional[str] = None


@dataclass
class TableRow:
    cells: List[TableCell] = field(default_factory=list)


@dataclass
class TableItem(Item):
    rows: List[TableRow] = field(default_factory=list)
    has_borders: bool = True
    type: str = field(default="table", init=False)


PageItem = Union[TextItem, ImageItem, PathItem, TableItem]


@dataclass
class Page:
    width: float
    height: float
    items: List[PageItem] = field(default_factory=list)

    @property
    def text_items(self) -> List[TextItem]:
        return [i for i in self.items if i.type == "text"]


@dataclass
class Document:
    pages: List[Page] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pages": [
                {
                    "width": p.width,
                    "height": p.height,
                    "items": [item_to_dict(i) for i in p.items],
                }
                for p in self.pages
            ]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        pages = []
        for page_data in data.get("pages", []):
            items = []
            for item_data in page_data.get("items", []):
                item = item_from_dict(item_data)
                if item is not None:
                    items.append(item)
            pages.append(Page(page_data["width"], page_data["height"], items))
        return cls(pages)


# --- SERIALIZATION ---
def _geometry(item) -> Dict[str, Any]:
    return {"type": item.type, "x": item.x, "y": item.y, "width": item.width,
            "height": item.height}


def item_to_dict(item: PageItem) -> Dict[str, Any]:
    """Converts an item to the camelCase record used by the renderer contract."""
    d = _geometry(item)
    if item.type == "text":
        d.update(
            text=item.text,
            fontSize=item.font_size,
            fontName=item.font_name,
            isBold=item.is_bold,
            indent=item.indent,
        )
        if item.is_paragraph_start is not None:
            d["isParagraphStart"] = item.is_paragraph_start
        if item.alignment:
            d["alignment"] = item.alignment
    elif item.type == "image":
        d["data"] = item.data
        if item.name:
            d["name"] = item.name
    elif item.type == "path":
        d.update(method=item.method, lineWidth=item.line_width)
        if item.stroke_color:
            d["strokeColor"] = item.stroke_color
    elif item.type == "table":
        d["hasBorders"] = item.has_borders
        d["rows"] = [
            {
                "cells": [
                    {
                        "text": c.text,
                        "isHeader": c.is_header,
                        "colSpan": c.col_span,
                        "rowSpan": c.row_span,
                        **({"align": c.align} if c.align else {}),
                    }
                    for c in row.cells
                ]
            }
            for row in item.rows
        ]
    return d


def item_from_dict(data: Dict[str, Any]) -> Optional[PageItem]:
    """Rebuilds an item from its record; unknown types yield None."""
    item_type = data.get("type")
    geo = dict(x=data["x"], y=data["y"], width=data["width"], height=data["height"])
    if item_type == "text":
        return TextItem(
            **geo,
            text=data.get("text", ""),
            font_size=data.get("fontSize", 12.0),
            font_name=data.get("fontName", DEFAULT_FONT_NAME),
            is_bold=bool(data.get("isBold", False)),
            is_paragraph_start=data.get("isParagraphStart"),
            indent=data.get("indent", 0.0),
            alignment=data.get("alignment"),
        )
    if item_type == "image":
        return ImageItem(**geo, data=data.get("data", IMAGE_PLACEHOLDER), name=data.get("name"))
    if item_type == "path":
        return PathItem(
            **geo,
            method=data.get("method", "rect"),
            line_width=data.get("lineWidth", 1.0),
            stroke_color=data.get("strokeColor"),
        )
    if item_type == "table":
        rows = [
            TableRow(
                [
                    TableCell(
                        text=c.get("text", ""),
                        is_header=bool(c.get("isHeader", False)),
                        col_span=int(c.get("colSpan", 1)),
                        row_span=int(c.get("rowSpan", 1)),
                        align=c.get("align"),
                    )
                    for c in row.get("cells", [])
                ]
            )
            for row in data.get("rows", [])
        ]
        return TableItem(**geo, rows=rows, has_borders=data.get("hasBorders", True))
    log.warning("Unknown item type '%s' encountered. Skipping.", item_type)
    return None


def save_json(document: Document, output_path: str) -> None:
    """Serializes a Document to a JSON file."""
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)


def load_json(input_path: str) -> Document:
    """Deserializes a JSON file written by save_json."""
    with open(input_path, "r", encoding="utf-8") as f:
        return Document.from_dict(json.load(f))
