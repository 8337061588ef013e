# --- core/log_utils.py ---
"""
core/log_utils.py: Logging setup shared by the command line and the library.
This module contains:
- setup_logging: Installs console/file handlers and per-topic DEBUG levels.
- ContextFilter: A logging filter that tags records with the current input.
- RichLogFormatter: A custom logging formatter for colorful console output.
"""

import logging

PROJECT_TOPICS = {
    "docmirror": {
        "layout",
        "order",
        "merge",
        "fit",
        "render",
        "extract",
        "fonts",
        "config",
        "api",
    },
}


def setup_logging(
    project_name: str,
    level=logging.INFO,
    color_logs=False,
    debug_topics=None,
    log_file: str = None,
):
    """Configures logging for the application."""
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        for h in root_logger.handlers[:]:
            root_logger.removeHandler(h)
            h.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(RichLogFormatter(use_color=color_logs))
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
            file_handler.setFormatter(RichLogFormatter(use_color=False))
            root_logger.addHandler(file_handler)
            logging.getLogger(project_name).info("Logging to file: %s", log_file)
        except IOError as e:
            logging.getLogger(project_name).error(
                "Could not open log file %s: %s", log_file, e
            )

    # Silence noisy libraries
    logging.getLogger("pdfminer").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if debug_topics:
        valid_topics = PROJECT_TOPICS.get(project_name, set())
        user_topics = [t.strip() for t in debug_topics.split(",") if t.strip()]
        if "all" in user_topics:
            topics_to_set = valid_topics
        else:
            topics_to_set = {
                full for u in user_topics for full in valid_topics if full.startswith(u)
            }
        for topic in topics_to_set:
            logging.getLogger(f"{project_name}.{topic}").setLevel(logging.DEBUG)
        if topics_to_set and level > logging.DEBUG:
            # Topic loggers can only emit DEBUG if the handlers let it through.
            root_logger.setLevel(logging.DEBUG)
            for name in PROJECT_TOPICS.get(project_name, set()) - topics_to_set:
                logging.getLogger(f"{project_name}.{name}").setLevel(level)


class ContextFilter(logging.Filter):
    """Injects the name of the document being processed into log records."""

    def __init__(self, context_str=""):
        super().__init__()
        self.context_str = context_str

    def filter(self, record):
        record.context = self.context_str
        return True


class RichLogFormatter(logging.Formatter):
    """Formats records as `LEVEL:topic [context]: message`, one prefix per line.

    Args:
        use_color (bool): If True, ANSI color codes are used. Defaults to False.
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[38;5;252m",
        logging.INFO: "\033[38;5;111m",
        logging.WARNING: "\033[38;5;229m",
        logging.ERROR: "\033[38;5;210m",
        logging.CRITICAL: "\033[38;5;217m",
    }

    def __init__(self, use_color=False):
        super().__init__()
        self.use_color = use_color
        self.BOLD = "\033[1m" if use_color else ""
        self.RESET = "\033[0m" if use_color else ""

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, "") if self.use_color else ""
        level_name = record.levelname[:5]

        # The part of the logger name after the project name is the topic
        name_parts = record.name.split(".")
        topic = name_parts[1][:6] if len(name_parts) > 1 else record.name[:6]

        context = getattr(record, "context", "")
        context_str = f"[{context}]" if context else ""

        prefix = (
            f"{color}{level_name:<5}{self.RESET}:"
            f"{self.BOLD}{topic:<6}{self.RESET}{context_str}: "
        )
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return "\n".join(f"{prefix}{line}" for line in message.split("\n"))
