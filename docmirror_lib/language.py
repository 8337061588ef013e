# --- docmirror_lib/language.py ---
"""
docmirror_lib/language.py: Script-based source language guess.

Counts letters per Unicode block. Devanagari is reported as Hindi and Latin
as English; telling languages that share a script apart is out of reach of
this heuristic.
"""
import logging
import re

from .models import Document

log_api = logging.getLogger("docmirror.api")

SCRIPT_LANGUAGES = (
    ("Hindi", re.compile(r"[\u0900-\u097F]")),
    ("Bengali", re.compile(r"[\u0980-\u09FF]")),
    ("Tamil", re.compile(r"[\u0B80-\u0BFF]")),
    ("Telugu", re.compile(r"[\u0C00-\u0C7F]")),
    ("Gujarati", re.compile(r"[\u0A80-\u0AFF]")),
    ("Malayalam", re.compile(r"[\u0D00-\u0D7F]")),
    ("Kannada", re.compile(r"[\u0C80-\u0CFF]")),
    ("Punjabi", re.compile(r"[\u0A00-\u0A7F]")),
    ("Odia", re.compile(r"[\u0B00-\u0B7F]")),
    ("English", re.compile(r"[a-zA-Z]")),
)
LETTER_RE = re.compile(r"[a-zA-Z\u0900-\u0D7F]")
NON_LETTER_RE = re.compile(r"[^a-zA-Z\u0900-\u0D7F]")

SAMPLE_PAGES = 4
SAMPLE_CHARS = 4000
SCAN_LETTERS = 1000
MIN_SCRIPT_HITS = 5
UNKNOWN = "Unknown"


def sample_document_text(document: Document) -> str:
    """Concatenates letter-bearing text items from the first pages."""
    sample = ""
    for page in document.pages[:SAMPLE_PAGES]:
        for item in page.text_items:
            if item.text and LETTER_RE.search(item.text):
                sample += item.text + " "
            if len(sample) >= SAMPLE_CHARS:
                return sample[:SAMPLE_CHARS].strip()
    return sample.strip()


def detect_script_language(text: str) -> str:
    """Returns the language of the dominant script, or "Unknown"."""
    letters = NON_LETTER_RE.sub("", text)[:SCAN_LETTERS]
    counts = {name: 0 for name, _ in SCRIPT_LANGUAGES}
    for ch in letters:
        for name, regex in SCRIPT_LANGUAGES:
            if regex.match(ch):
                counts[name] += 1
    best = max(counts, key=counts.get)
    log_api.debug("Script counts: %s", {k: v for k, v in counts.items() if v})
    return best if counts[best] > MIN_SCRIPT_HITS else UNKNOWN


def detect_document_language(document: Document) -> str:
    return detect_script_language(sample_document_text(document))
