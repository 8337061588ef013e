# --- docmirror_lib/constants.py ---
"""
docmirror_lib/constants.py: Geometry thresholds and fixed layout parameters.

All distances are page points (1/72 inch) with y growing downward.
"""

# --- LINE-SPACING STATISTICS ---
DEFAULT_STD_LINE_HEIGHT = 14
DEFAULT_PARA_GAP_THRESHOLD = 20
MIN_LINE_GAP = 5
MAX_LINE_GAP = 300
MIN_MODAL_LINE_HEIGHT = 8
PARA_GAP_FACTOR = 1.5

# --- LINE GROUPING ---
LINE_KEY_RESOLUTION = 2  # half-unit buckets
RUN_JOIN_CHAR_FACTOR = 2.5
RUN_JOIN_MIN_GAP = 12
RUN_SPACE_CHAR_FACTOR = 0.3
INDENT_MIN = 10
INDENT_MAX = 80
CENTER_TOLERANCE = 15
RIGHT_ALIGN_RATIO = 0.65
DEFAULT_FONT_NAME = "sans-serif"

# --- READING ORDER ---
MIN_COL_GAP = 14
MIN_ROW_GAP = 6
INTERVAL_TOLERANCE = 0.1
ATOMIC_ROW_TOLERANCE = 6
ORDER_CONTRIBUTORS = ("text", "image", "table")

# --- TEXT BLOCK MERGING ---
MAX_FONT_SIZE_DIFF = 2.0
MAX_LINE_ADVANCE_FACTOR = 2.5
MAX_LEFT_ALIGN_DIFF = 20
FLOW_MARGIN = 40
HANGING_INDENT_MIN = 5
LIST_MARKER_PATTERNS = (r"^[•●\-*]\s", r"^\d+[.)]\s")

# --- AUTO-FIT ---
WRAP_SLACK = 0.95
HEIGHT_OVERFLOW_TOLERANCE = 1.1
MIN_FONT_SCALE = 0.6

# --- RENDERING ---
BASELINE_OFFSET_FACTOR = 0.8
PARAGRAPH_START_MARGIN = 2
TABLE_FONT_DELTA = 2
TABLE_CELL_PADDING = 6
DEFAULT_STROKE_COLOR = "#f1f5f9"
USER_FONTS = ("helvetica", "times", "courier")
LINE_SPACINGS = (1.2, 1.5, 1.8, 2.0)
FONT_SIZES = (10, 12, 14, 16)

INDIC_FONT_STACK = (
    "'Inter'",
    "'Noto Sans Devanagari'",
    "'Noto Sans Bengali'",
    "'Noto Sans Tamil'",
    "'Noto Sans Telugu'",
    "'Noto Sans Kannada'",
    "'Noto Sans Malayalam'",
    "'Noto Sans Gujarati'",
    "'Noto Sans Gurmukhi'",
    "'Noto Sans Odia'",
    "'Noto Sans Oriya'",
    "'Noto Sans Arabic'",
    "'Noto Sans Meetei Mayek'",
    "'Noto Sans Ol Chiki'",
    "sans-serif",
)

# --- DOCX SYNTHETIC PAGINATION ---
DOCX_PAGE_WIDTH = 595.28
DOCX_PAGE_HEIGHT = 841.89
DOCX_MARGIN = 50
DOCX_FONT_SIZE = 12
DOCX_LINE_HEIGHT_FACTOR = 1.5
DOCX_TABLE_ROW_HEIGHT = 25
DOCX_TABLE_SPACING = 20

# --- IMAGES ---
IMAGE_PLACEHOLDER = "placeholder"
