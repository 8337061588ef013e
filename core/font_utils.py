# --- core/font_utils.py ---
"""
core/font_utils.py: Downloads and caches TrueType font assets.

Font fetching is best-effort: every failure is logged and reported as None so
callers can fall back to default metrics instead of aborting.
"""
import logging
import os
import re
import time
from urllib.parse import urlparse

import requests

log_fonts = logging.getLogger("docmirror.fonts")

MAX_RETRIES = 3
RETRY_DELAY_S = 1
TTF_MAGIC = (b"\x00\x01\x00\x00", b"true", b"OTTO", b"ttcf")


def _cache_path(url: str, cache_dir: str) -> str:
    name = os.path.basename(urlparse(url).path) or "font.ttf"
    return os.path.join(cache_dir, re.sub(r"[^\w.\-]", "_", name))


def fetch_font(url: str, cache_dir: str, timeout: float = 20.0) -> str | None:
    """
    Returns a local path to the font at url, downloading it if needed.

    Args:
        url: Location of a .ttf/.otf file.
        cache_dir: Directory holding previously downloaded fonts.
        timeout: Per-request timeout in seconds.

    Returns:
        The cached file path, or None when the font could not be obtained.
    """
    path = _cache_path(url, cache_dir)
    if os.path.exists(path) and os.path.getsize(path) > 0:
        log_fonts.debug("Using cached font %s", path)
        return path

    for attempt in range(MAX_RETRIES):
        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
            data = response.content
            if not data.startswith(TTF_MAGIC):
                log_fonts.error("Response from %s is not a font file.", url)
                return None
            os.makedirs(cache_dir, exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
            log_fonts.info("Downloaded font %s (%d bytes).", os.path.basename(path), len(data))
            return path
        except requests.exceptions.RequestException as e:
            log_fonts.warning(
                "Font fetch failed on attempt %d/%d: %s", attempt + 1, MAX_RETRIES, e
            )
            if attempt < MAX_RETRIES - 1:
                time.sleep(RETRY_DELAY_S)
        except OSError as e:
            log_fonts.error("Could not write font cache %s: %s", path, e)
            return None
    log_fonts.error("Failed to fetch font from %s after %d retries.", url, MAX_RETRIES)
    return None
