from docmirror_lib.language import (
    detect_document_language,
    detect_script_language,
    sample_document_text,
)
from docmirror_lib.models import Document, ImageItem, Page, TextItem


def page(*texts):
    return Page(600, 800, [TextItem(0, i * 20, 100, 10, text=t) for i, t in enumerate(texts)])


def test_detects_scripts():
    assert detect_script_language("नमस्ते दुनिया यह एक परीक्षण है") == "Hindi"
    assert detect_script_language("வணக்கம் உலகம் இது ஒரு சோதனை") == "Tamil"
    assert detect_script_language("Hello world, this is a test") == "English"
    assert detect_script_language("ਸਤ ਸ੍ਰੀ ਅਕਾਲ ਜੀ ਆਇਆਂ ਨੂੰ") == "Punjabi"


def test_too_few_letters_is_unknown():
    assert detect_script_language("abc 123") == "Unknown"
    assert detect_script_language("") == "Unknown"
    assert detect_script_language("12345 !!! ???") == "Unknown"


def test_only_first_thousand_letters_count():
    text = "a" * 1000 + "क" * 2000
    assert detect_script_language(text) == "English"


def test_sample_skips_symbol_only_items_and_late_pages():
    doc = Document([page("Intro", "---", "42")] + [page("x")] * 3 + [page("late page")])
    doc.pages[0].items.append(ImageItem(0, 0, 10, 10))
    sample = sample_document_text(doc)
    assert sample == "Intro x x x"


def test_sample_is_capped():
    doc = Document([page(*["word " * 100] * 20)])
    assert len(sample_document_text(doc)) <= 4000


def test_detect_document_language():
    assert detect_document_language(Document([page("Bonjour tout le monde")])) == "English"
    assert detect_document_language(Document()) == "Unknown"
