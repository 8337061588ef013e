import logging

import pytest

from docmirror_lib.models import Document, ImageItem, Page, TableCell, TableItem, TableRow, TextItem
from docmirror_lib.segments import Segment, apply_translations, batch_segments, collect_segments


@pytest.fixture
def document():
    page1 = Page(600, 800, [
        TextItem(0, 0, 100, 10, text="Hello"),
        TextItem(0, 20, 100, 10, text="   "),
        ImageItem(0, 40, 50, 50),
        TableItem(0, 100, 200, 50, rows=[
            TableRow([TableCell("Name", is_header=True), TableCell("")]),
            TableRow([TableCell("Ada"), TableCell("1815")]),
        ]),
    ])
    page2 = Page(600, 800, [TextItem(0, 0, 100, 10, text="Bye")])
    return Document([page1, page2])


def test_collect_segments_addresses_text_and_cells(document):
    assert collect_segments(document) == [
        Segment(0, 0, None, None, "Hello"),
        Segment(0, 3, 0, 0, "Name"),
        Segment(0, 3, 1, 0, "Ada"),
        Segment(0, 3, 1, 1, "1815"),
        Segment(1, 0, None, None, "Bye"),
    ]


def test_apply_translations_replaces_only_text(document):
    segments = collect_segments(document)
    translated = apply_translations(document, segments, ["Hola", "Nombre", "Ada", "1815", "Adiós"])

    assert translated.pages[0].items[0].text == "Hola"
    assert translated.pages[0].items[3].rows[0].cells[0].text == "Nombre"
    assert translated.pages[0].items[3].rows[0].cells[0].is_header is True
    assert translated.pages[1].items[0].text == "Adiós"
    assert translated.pages[0].items[0].x == document.pages[0].items[0].x
    # Source document is untouched
    assert document.pages[0].items[0].text == "Hello"


def test_short_translation_list_applies_prefix(document, caplog):
    segments = collect_segments(document)
    with caplog.at_level(logging.WARNING, logger="docmirror.api"):
        translated = apply_translations(document, segments, ["Hola", "Nombre"])

    assert translated.pages[0].items[0].text == "Hola"
    assert translated.pages[0].items[3].rows[1].cells[0].text == "Ada"
    assert translated.pages[1].items[0].text == "Bye"
    assert "2 translations for 5 segments" in caplog.text


def test_extra_translations_are_ignored(document):
    segments = collect_segments(document)
    translated = apply_translations(document, segments, ["a", "b", "c", "d", "e", "f", "g"])
    assert collect_segments(translated)[-1].text == "e"


def test_batch_segments():
    segments = [Segment(0, i, None, None, str(i)) for i in range(95)]
    batches = list(batch_segments(segments))
    assert [len(b) for b in batches] == [40, 40, 15]
    assert list(batch_segments([])) == []
