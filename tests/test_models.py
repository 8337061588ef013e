import json

from docmirror_lib.models import (
    Document,
    ImageItem,
    Page,
    PathItem,
    TableCell,
    TableItem,
    TableRow,
    TextItem,
    item_from_dict,
    item_to_dict,
    load_json,
    save_json,
)


def sample_document():
    items = [
        TextItem(10, 20, 300, 12, text="Résumé", font_size=12, is_bold=True,
                 is_paragraph_start=True, indent=8, alignment="center"),
        ImageItem(10, 40, 100, 50, name="Im0"),
        PathItem(10, 100, 300, 0.5, method="line", stroke_color="#000000"),
        TableItem(10, 120, 300, 50, rows=[TableRow([TableCell("a", True, 2, 1, "right")])]),
    ]
    return Document([Page(595.28, 841.89, items), Page(595.28, 841.89)])


def test_text_item_uses_camel_case_keys():
    d = item_to_dict(sample_document().pages[0].items[0])
    assert d["type"] == "text"
    assert d["fontSize"] == 12
    assert d["isBold"] is True
    assert d["isParagraphStart"] is True
    assert d["alignment"] == "center"


def test_optional_fields_are_omitted():
    d = item_to_dict(TextItem(0, 0, 10, 10, text="x"))
    assert "isParagraphStart" not in d
    assert "alignment" not in d
    assert "strokeColor" not in item_to_dict(PathItem(0, 0, 10, 1))


def test_table_cell_keys():
    cell = item_to_dict(sample_document().pages[0].items[3])["rows"][0]["cells"][0]
    assert cell == {"text": "a", "isHeader": True, "colSpan": 2, "rowSpan": 1, "align": "right"}


def test_document_round_trip():
    doc = sample_document()
    assert Document.from_dict(doc.to_dict()) == doc


def test_unknown_item_type_is_skipped(caplog):
    data = {"pages": [{"width": 10, "height": 10, "items": [
        {"type": "chart", "x": 0, "y": 0, "width": 1, "height": 1},
        {"type": "text", "x": 0, "y": 0, "width": 1, "height": 1, "text": "ok"},
    ]}]}
    doc = Document.from_dict(data)
    assert [i.type for i in doc.pages[0].items] == ["text"]
    assert "Unknown item type 'chart'" in caplog.text
    assert item_from_dict({"type": None, "x": 0, "y": 0, "width": 0, "height": 0}) is None


def test_item_geometry_helpers():
    item = TextItem(10, 20, 30, 40)
    assert (item.right, item.bottom, item.center_x, item.center_y) == (40, 60, 25, 40)
    assert sample_document().pages[0].text_items[0].text == "Résumé"


def test_save_and_load_json(tmp_path):
    path = tmp_path / "structure.json"
    doc = sample_document()
    save_json(doc, str(path))

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["pages"][0]["items"][0]["text"] == "Résumé"
    assert load_json(str(path)) == doc
