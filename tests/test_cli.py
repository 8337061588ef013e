import json
import logging

import pytest

import docmirror
from docmirror import Application, main
from docmirror_lib.errors import ExtractionError
from docmirror_lib.models import Document, Page, TextItem, load_json


@pytest.fixture
def document():
    line = TextItem(
        50, 90, 300, 10, text="Hello wonderful world", font_size=10, is_paragraph_start=True
    )
    return Document([Page(600, 800, [line])])


@pytest.fixture
def mock_pipeline(mocker, document):
    mocker.patch("docmirror.setup_logging")
    return mocker.patch("docmirror.extract_document", return_value=document)


def make_app(tmp_path, *extra):
    args = Application.parse_arguments(
        [str(tmp_path / "paper.pdf"), "-c", str(tmp_path / "test.cfg"), *extra]
    )
    return Application(args)


def test_parse_arguments_defaults():
    args = Application.parse_arguments(["paper.pdf"])
    assert args.input_file == "paper.pdf"
    assert args.pages == "all"
    assert args.output_file is None
    assert args.font is None and args.line_spacing is None
    assert args.debug_topics is None
    assert not args.dry_run and not args.fetch_fonts


def test_parse_arguments_flags():
    args = Application.parse_arguments(
        ["paper.pdf", "-o", "-d", "--font", "times", "--line-spacing", "1.8", "-p", "2-3"]
    )
    assert args.output_file == Application.DEFAULT_FILENAME_SENTINEL
    assert args.debug_topics == "all"
    assert args.font == "times"
    assert args.line_spacing == 1.8
    assert args.pages == "2-3"


def test_font_size_must_be_a_known_size(capsys):
    assert Application.parse_arguments(["paper.pdf", "--font-size", "14"]).font_size == 14.0
    with pytest.raises(SystemExit):
        Application.parse_arguments(["paper.pdf", "--font-size", "13"])
    assert "invalid choice" in capsys.readouterr().err


def test_options_fall_back_to_config(tmp_path, mock_pipeline):
    (tmp_path / "test.cfg").write_text("[Render]\nfont = courier\nline_spacing = 2.0\n")
    app = make_app(tmp_path, "-o", "-D")
    app.run()

    assert app.args.font == "courier"
    assert app.args.line_spacing == 2.0
    assert app.args.font_size == 12.0
    assert app.args.output_file == "paper.structure.json"
    mock_pipeline.assert_called_once_with(str(tmp_path / "paper.pdf"), "all", embed_images=True)


def test_run_writes_structure_and_segments(tmp_path, mock_pipeline):
    out, seg = tmp_path / "out.json", tmp_path / "segments.json"
    make_app(tmp_path, "-o", str(out), "--segments", str(seg)).run()

    assert json.loads(seg.read_text(encoding="utf-8")) == ["Hello wonderful world"]
    assert load_json(str(out)).pages[0].items[0].text == "Hello wonderful world"


def test_run_applies_translations_and_renders(tmp_path, mock_pipeline):
    translations = tmp_path / "hi.json"
    translations.write_text(json.dumps(["नमस्ते दुनिया"]), encoding="utf-8")
    out, plan = tmp_path / "out.json", tmp_path / "plan.json"
    app = make_app(
        tmp_path,
        "-o", str(out),
        "--translations", str(translations),
        "--render-plan", str(plan),
        "--line-spacing", "1.0",
    )
    app.run()

    assert load_json(str(out)).pages[0].items[0].text == "नमस्ते दुनिया"
    payload = json.loads(plan.read_text(encoding="utf-8"))
    box = payload["plan"]["pages"][0]["boxes"][0]
    assert box["text"] == "नमस्ते दुनिया"
    assert box["style"]["margin-top"] == 2
    assert payload["plan"]["pages"][0]["footer"] == "RECONSTRUCTED MIRROR - PAGE 1"
    assert payload["textLayer"][0]["y"] == pytest.approx(98)
    assert "overflowing_boxes" in app.stats
    assert app.stats["source_language"] == "English"


def test_bad_translations_exit(tmp_path, mock_pipeline):
    translations = tmp_path / "bad.json"
    translations.write_text(json.dumps({"not": "a list"}))
    with pytest.raises(SystemExit) as exc:
        make_app(tmp_path, "--translations", str(translations)).run()
    assert exc.value.code == 1


def test_dry_run_prints_summary_and_writes_nothing(tmp_path, mock_pipeline, capsys):
    out = tmp_path / "out.json"
    make_app(tmp_path, "-D", "-o", str(out)).run()

    assert "translatable segments" in capsys.readouterr().out
    assert not out.exists()


def test_main_exit_codes(mocker, tmp_path):
    mocker.patch("docmirror.setup_logging")
    cfg = str(tmp_path / "test.cfg")

    mocker.patch("sys.argv", ["docmirror", str(tmp_path / "missing.pdf"), "-c", cfg])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1

    mocker.patch.object(docmirror.Application, "run", side_effect=KeyboardInterrupt)
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 0

    mocker.patch.object(docmirror.Application, "run", side_effect=ExtractionError("boom"))
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1


class RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_topic_records_carry_input_name(tmp_path, mock_pipeline, document):
    def extract(*args, **kwargs):
        logging.getLogger("docmirror.api").warning("extracting")
        return document

    mock_pipeline.side_effect = extract
    handler = RecordingHandler()
    root = logging.getLogger()
    root.addHandler(handler)
    try:
        make_app(tmp_path, "-D").run()
    finally:
        root.removeHandler(handler)

    record = next(r for r in handler.records if r.getMessage() == "extracting")
    assert record.context == "paper.pdf"
    assert handler.filters == []
