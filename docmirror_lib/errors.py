# --- docmirror_lib/errors.py ---
"""
docmirror_lib/errors.py: Exception types raised by the reconstruction pipeline.
"""


class DocmirrorError(Exception):
    """Base class for all docmirror errors."""


class ExtractionError(DocmirrorError):
    """The input document is missing, malformed or of an unsupported type."""

    def __init__(self, reason, source=None):
        self.reason = reason
        self.source = source
        msg = f"{source}: {reason}" if source else reason
        super().__init__(msg)
