# --- docmirror_lib/fonts.py ---
"""
docmirror_lib/fonts.py: Font resolution for target languages.

Maps a language to the font families able to render its script and a family
to a downloadable TrueType asset. Both tables are injectable so nothing in
the geometry code knows about network locations.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from core.font_utils import fetch_font

from .autofit import PillowTextMeasurer

log_fonts = logging.getLogger("docmirror.fonts")


@dataclass(frozen=True)
class FontConfig:
    """Font requirements of one language."""

    families: List[str]
    sample_text: str
    primary_font: str


def _noto(family: str, sample: str) -> FontConfig:
    return FontConfig([f"family={family.replace(' ', '+')}:wght@400;700"], sample, family)


DEVANAGARI = "Noto Sans Devanagari"
BENGALI = "Noto Sans Bengali"
ARABIC = "Noto Sans Arabic"

DEFAULT_LANGUAGE_FONTS: Dict[str, FontConfig] = {
    "Hindi": _noto(DEVANAGARI, "नमस्ते"),
    "Marathi": _noto(DEVANAGARI, "नमस्कार"),
    "Nepali": _noto(DEVANAGARI, "नमस्ते"),
    "Sanskrit": _noto(DEVANAGARI, "नमस्ते"),
    "Maithili": _noto(DEVANAGARI, "प्रणाम"),
    "Bodo": _noto(DEVANAGARI, "खुलुमबाय"),
    "Dogri": _noto(DEVANAGARI, "नमस्ते"),
    "Konkani": _noto(DEVANAGARI, "देव बरे करू"),
    "Bengali": _noto(BENGALI, "হ্যালো"),
    "Assamese": _noto(BENGALI, "নমস্কাৰ"),
    "Tamil": _noto("Noto Sans Tamil", "வணக்கம்"),
    "Telugu": _noto("Noto Sans Telugu", "హలో"),
    "Kannada": _noto("Noto Sans Kannada", "ನಮಸ್ಕಾರ"),
    "Malayalam": _noto("Noto Sans Malayalam", "ഹലോ"),
    "Gujarati": _noto("Noto Sans Gujarati", "નમસ્તે"),
    "Punjabi": _noto("Noto Sans Gurmukhi", "ਸਤ ਸ੍ਰੀ ਅਕਾਲ"),
    "Odia": _noto("Noto Sans Oriya", "ନମସ୍କାର"),
    "Urdu": _noto(ARABIC, "مرحبا"),
    "Kashmiri": _noto(ARABIC, "سَلام"),
    "Sindhi": _noto(ARABIC, "سلام"),
    "Manipuri": _noto("Noto Sans Meetei Mayek", "ꯈꯨꯔꯨꯝꯖꯔꯤ"),
    "Santali": _noto("Noto Sans Ol Chiki", "ᱡᱚᱦᱟᱨ"),
}

NOTO_BASE = "https://raw.githubusercontent.com/google/fonts/main/ofl"
DEFAULT_FONT_URLS: Dict[str, str] = {
    DEVANAGARI: f"{NOTO_BASE}/notosansdevanagari/NotoSansDevanagari-Regular.ttf",
    BENGALI: f"{NOTO_BASE}/notosansbengali/NotoSansBengali-Regular.ttf",
    "Noto Sans Tamil": f"{NOTO_BASE}/notosanstamil/NotoSansTamil-Regular.ttf",
    "Noto Sans Telugu": f"{NOTO_BASE}/notosanstelugu/NotoSansTelugu-Regular.ttf",
    "Noto Sans Kannada": f"{NOTO_BASE}/notosanskannada/NotoSansKannada-Regular.ttf",
    "Noto Sans Malayalam": f"{NOTO_BASE}/notosansmalayalam/NotoSansMalayalam-Regular.ttf",
    "Noto Sans Gujarati": f"{NOTO_BASE}/notosansgujarati/NotoSansGujarati-Regular.ttf",
    "Noto Sans Gurmukhi": f"{NOTO_BASE}/notosansgurmukhi/NotoSansGurmukhi-Regular.ttf",
    "Noto Sans Oriya": f"{NOTO_BASE}/notosansoriya/NotoSansOriya-Regular.ttf",
    ARABIC: f"{NOTO_BASE}/notosansarabic/NotoSansArabic-Regular.ttf",
    "Noto Sans Meetei Mayek": f"{NOTO_BASE}/notosansmeeteimayek/NotoSansMeeteiMayek-Regular.ttf",
    "Noto Sans Ol Chiki": f"{NOTO_BASE}/notosansolchiki/NotoSansOlChiki-Regular.ttf",
    "Inter": f"{NOTO_BASE}/inter/static/Inter-Regular.ttf",
}

LATIN_FALLBACK_FONT = "Inter"
LATIN_LANGUAGES = ("English", "Spanish", "French", "German", "Italian")


@dataclass
class FontResolver:
    """Resolves language -> font family -> font asset locator."""

    language_fonts: Mapping[str, FontConfig] = field(
        default_factory=lambda: dict(DEFAULT_LANGUAGE_FONTS)
    )
    font_urls: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_FONT_URLS))

    def primary_font(self, language: str) -> Optional[str]:
        """The family used for the language's text layer, or None if unknown."""
        config = self.language_fonts.get(language)
        if config and config.primary_font in self.font_urls:
            return config.primary_font
        if language in LATIN_LANGUAGES:
            return LATIN_FALLBACK_FONT
        return config.primary_font if config else None

    def font_url(self, language: str) -> Optional[str]:
        family = self.primary_font(language)
        return self.font_urls.get(family) if family else None

    def measurer_for(self, language: str, cache_dir: str, timeout: float = 20.0):
        """
        Builds a text measurer using the language's primary font.

        A failed download degrades to Pillow's default font.
        """
        family, url = self.primary_font(language), self.font_url(language)
        if not url:
            log_fonts.info("No font asset known for '%s'; using default metrics.", language)
            return PillowTextMeasurer()
        path = fetch_font(url, cache_dir, timeout=timeout)
        if path is None:
            log_fonts.warning("Falling back to default font metrics for '%s'.", language)
            return PillowTextMeasurer()
        return PillowTextMeasurer({family: path})
