import pytest

from docmirror_lib.grouper import bucket_lines, group_runs, infer_alignment, line_key
from docmirror_lib.models import GlyphRun, PageGeometry, TextItem


def run(text, x, baseline, size=10.0, width=None, font="Helvetica"):
    if width is None:
        width = len(text) * 5.0
    return GlyphRun(text, (size, 0, 0, size, x, baseline), width, font)


@pytest.mark.parametrize(
    "baseline, expected",
    [(100.24, 100.0), (100.25, 100.5), (100.74, 100.5), (100.75, 101.0)],
)
def test_line_key_rounds_half_up(baseline, expected):
    assert line_key(baseline) == expected


def test_glyph_run_properties():
    r = GlyphRun("x", (3.0, 4.0, 0, 0, 12.0, 80.0), 5.0)
    assert r.font_size == 5.0
    assert r.x == 12.0
    assert r.baseline == 80.0


def test_bucket_lines_skips_blank_runs():
    lines = bucket_lines([run("a", 10, 100), run("   ", 20, 100), run("", 30, 100)])
    assert list(lines) == [100.0]
    assert [r.text for r in lines[100.0]] == ["a"]


def test_paragraph_starts_follow_line_gaps():
    page = PageGeometry(600, 200, runs=[run(f"line {b}", 50, b) for b in (100, 154, 114, 140)])
    items = group_runs(page)

    assert [i.text for i in items] == ["line 154", "line 140", "line 114", "line 100"]
    assert [i.is_paragraph_start for i in items] == [True, False, True, False]
    first = items[0]
    assert first.y == pytest.approx(200 - 154 - 10)
    assert first.height == 10
    assert first.font_size == 10


def test_adjacent_runs_join_with_space():
    page = PageGeometry(
        600,
        800,
        runs=[run("Hello", 50, 700), run("world", 80, 700), run("Far", 300, 700)],
    )
    items = group_runs(page)

    assert [i.text for i in items] == ["Hello world", "Far"]
    assert items[0].width == pytest.approx(55)
    assert items[1].is_paragraph_start is False


def test_touching_runs_join_without_space():
    page = PageGeometry(600, 800, runs=[run("inter", 50, 700), run("national", 75, 700)])
    assert [i.text for i in group_runs(page)] == ["international"]


def test_first_line_indent_of_new_paragraph():
    runs = [run("a", 50, b) for b in (154, 140, 126)] + [run("indented", 70, 90)]
    items = group_runs(PageGeometry(600, 800, runs=runs))

    assert items[-1].is_paragraph_start is True
    assert items[-1].indent == pytest.approx(20)
    assert all(i.indent == 0 for i in items[:-1])


def test_large_offset_is_not_an_indent():
    runs = [run("a", 50, b) for b in (154, 140, 126)] + [run("far", 200, 90)]
    items = group_runs(PageGeometry(600, 800, runs=runs))
    assert items[-1].indent == 0


def test_bold_from_font_name():
    items = group_runs(PageGeometry(600, 800, runs=[run("Title", 50, 700, font="Arial-BoldMT")]))
    assert items[0].is_bold is True
    assert items[0].font_name == "Arial-BoldMT"


def test_infer_alignment():
    assert infer_alignment(TextItem(250, 0, 100, 10), 600) == "center"
    assert infer_alignment(TextItem(450, 0, 100, 10), 600) == "right"
    assert infer_alignment(TextItem(50, 0, 100, 10), 600) is None


def test_empty_page_yields_no_items():
    assert group_runs(PageGeometry(600, 800)) == []


def test_coordinates_are_clamped_to_page():
    items = group_runs(PageGeometry(600, 100, runs=[run("top", -5, 98, size=12)]))
    assert items[0].x == 0
    assert items[0].y == 0
