#!/usr/bin/env python3
"""
docmirror: Rebuilds the logical structure of PDF and DOCX documents.

This script extracts positioned text, images, rules and tables from a file,
restores reading order and paragraphs, and writes the result as a JSON
structure. The structure can be handed to an external translator through the
segment contract, re-applied, and laid out again as a render plan whose text
is auto-fitted to the original geometry.
"""

import argparse
import json
import logging
import os
import sys
import time
from dataclasses import asdict

from rich.console import Console
from rich.table import Table

from core.log_utils import ContextFilter, setup_logging
from docmirror_lib.api import extract_document
from docmirror_lib.autofit import PillowTextMeasurer
from docmirror_lib.config import DEFAULT_CONFIG_PATH, ConfigService
from docmirror_lib.constants import FONT_SIZES, LINE_SPACINGS, USER_FONTS
from docmirror_lib.errors import ExtractionError
from docmirror_lib.fonts import FontResolver
from docmirror_lib.language import detect_document_language
from docmirror_lib.models import save_json
from docmirror_lib.renderer import LayoutRenderer
from docmirror_lib.segments import apply_translations, collect_segments

log = logging.getLogger("docmirror")


class CustomHelpFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawTextHelpFormatter
):
    """
    A custom argparse formatter that combines showing default values with
    preserving newline formatting in help text.
    """

    pass


class Application:
    """Orchestrates extraction, translation hand-off and layout from the command line."""

    DEFAULT_FILENAME_SENTINEL = "__DEFAULT_FILENAME__"

    def __init__(self, args):
        self.args = args
        self.config = ConfigService(args.config)
        self.stats = {}

    def run(self):
        """Main entry point for the application logic."""
        self.stats["start_time"] = time.monotonic()
        setup_logging(
            project_name="docmirror",
            level=logging.INFO if self.args.verbose else logging.WARNING,
            color_logs=self.args.color_logs,
            debug_topics=self.args.debug_topics,
            log_file=self.args.log_file,
        )
        self._resolve_options()

        log_filter = ContextFilter(os.path.basename(self.args.input_file))
        # Handler filters also see records propagated from the topic loggers.
        handlers = logging.getLogger().handlers[:]
        for handler in handlers:
            handler.addFilter(log_filter)
        try:
            extract_start = time.monotonic()
            document = extract_document(
                self.args.input_file,
                self.args.pages,
                embed_images=self.config.get_bool("Extraction", "embed_images"),
            )
            self.stats["extraction_duration"] = time.monotonic() - extract_start
            self.stats["source_language"] = detect_document_language(document)
            log.info("Detected source language: %s", self.stats["source_language"])

            segments = collect_segments(document)
            if self.args.translations:
                document = apply_translations(
                    document, segments, self._load_translations(self.args.translations)
                )
                segments = collect_segments(document)

            if self.args.dry_run:
                self._display_dry_run_summary(document, segments)
                return

            self._save_segments(segments)
            self._save_structure(document)
            if self.args.render_plan:
                self._save_render_plan(document)
        finally:
            for handler in handlers:
                handler.removeFilter(log_filter)
            self._display_performance_epilogue()

    def _resolve_options(self):
        """Fills options not given on the command line from the config file."""
        a, cfg = self.args, self.config
        if a.font is None:
            a.font = cfg.get("Render", "font")
        if a.font_size is None:
            a.font_size = cfg.get_float("Render", "font_size")
        if a.line_spacing is None:
            a.line_spacing = cfg.get_float("Render", "line_spacing")
        if a.language is None:
            a.language = cfg.get("Fonts", "language")
        if a.output_file == self.DEFAULT_FILENAME_SENTINEL:
            base = os.path.splitext(os.path.basename(a.input_file))[0]
            a.output_file = f"{base}.structure.json"

    def _load_translations(self, path):
        """Reads a JSON array of strings, one per segment."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                translations = json.load(f)
        except (IOError, json.JSONDecodeError) as e:
            log.error("Could not read translations from %s: %s", path, e)
            sys.exit(1)
        if not isinstance(translations, list) or not all(isinstance(t, str) for t in translations):
            log.error("Translations file %s must contain a JSON array of strings.", path)
            sys.exit(1)
        log.info("Loaded %d translations from '%s'.", len(translations), path)
        return translations

    def _save_segments(self, segments):
        if not self.args.segments:
            return
        try:
            with open(self.args.segments, "w", encoding="utf-8") as f:
                json.dump([s.text for s in segments], f, indent=2, ensure_ascii=False)
            log.info("%d segments saved to: '%s'", len(segments), self.args.segments)
        except IOError as e:
            log.error("Error saving segments: %s", e)

    def _save_structure(self, document):
        if not self.args.output_file:
            return
        try:
            save_json(document, self.args.output_file)
            log.info("Structure saved to: '%s'", self.args.output_file)
        except IOError as e:
            log.error("Error saving structure: %s", e)

    def _build_measurer(self):
        if not self.args.fetch_fonts:
            return PillowTextMeasurer()
        return FontResolver().measurer_for(
            self.args.language,
            self.config.get("Fonts", "cache_dir"),
            timeout=self.config.get_float("Fonts", "timeout"),
        )

    def _save_render_plan(self, document):
        renderer = LayoutRenderer(self._build_measurer())
        plan = renderer.render(
            document,
            user_font=self.args.font,
            user_font_size=self.args.font_size,
            line_spacing=self.args.line_spacing,
            scale=self.config.get_float("Render", "scale"),
        )
        self.stats["overflowing_boxes"] = plan.overflow_count
        payload = {
            "plan": plan.to_dict(),
            "textLayer": [asdict(e) for e in renderer.text_layer(document)],
        }
        try:
            with open(self.args.render_plan, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            log.info("Render plan saved to: '%s'", self.args.render_plan)
        except IOError as e:
            log.error("Error saving render plan: %s", e)

    def _display_dry_run_summary(self, document, segments):
        """Prints a per-page table of the reconstructed structure."""
        console = Console()
        table = Table(title=f"Document Structure Summary (Dry Run): {self.args.input_file}")
        for column in ("Page", "Size", "Text", "Paragraphs", "Images", "Tables", "Paths", "Chars"):
            table.add_column(column, justify="right" if column != "Size" else "center")
        for index, page in enumerate(document.pages, 1):
            counts = {t: 0 for t in ("text", "image", "table", "path")}
            for item in page.items:
                counts[item.type] = counts.get(item.type, 0) + 1
            texts = page.text_items
            table.add_row(
                str(index),
                f"{page.width:.0f}x{page.height:.0f}",
                str(counts["text"]),
                str(sum(1 for t in texts if t.is_paragraph_start)),
                str(counts["image"]),
                str(counts["table"]),
                str(counts["path"]),
                str(sum(len(t.text) for t in texts)),
            )
        console.print(table)
        console.print(
            f"{len(segments)} translatable segments; "
            f"source language: {self.stats.get('source_language', 'Unknown')}"
        )

    def _display_performance_epilogue(self):
        total_dur = time.monotonic() - self.stats.get("start_time", time.monotonic())
        report = [
            "\n--- Performance Epilogue ---",
            f"Total Execution Time: {total_dur:.1f} seconds",
            f"Extraction: {self.stats.get('extraction_duration', 0):.1f}s",
        ]
        if "overflowing_boxes" in self.stats:
            report.append(f"Overflowing text boxes: {self.stats['overflowing_boxes']}")
        log.info("\n".join(report))

    @staticmethod
    def parse_arguments(args=None):
        """Parses command-line arguments for the script."""
        examples = [
            "\nExamples:",
            "  python docmirror.py paper.pdf -o",
            "  python docmirror.py paper.pdf --segments segments.json",
            "  python docmirror.py paper.pdf --translations hi.json --render-plan plan.json"
            " --language Hindi --fetch-fonts",
            "  python docmirror.py report.docx -D -d order,merge --color-logs",
        ]
        parser = argparse.ArgumentParser(
            description="Rebuilds the logical structure of PDF and DOCX documents.",
            formatter_class=CustomHelpFormatter,
            add_help=False,
            epilog="\n".join(examples),
        )
        S = Application.DEFAULT_FILENAME_SENTINEL

        g_opts = parser.add_argument_group("Main Options")
        g_opts.add_argument("input_file", help="Path to the input PDF or DOCX file.")
        g_opts.add_argument(
            "-h",
            "--help",
            action="help",
            help="Show this help message and exit.",
        )
        g_opts.add_argument(
            "-c",
            "--config",
            default=DEFAULT_CONFIG_PATH,
            metavar="FILE",
            help="INI configuration file. (default: %(default)s)",
        )

        g_proc = parser.add_argument_group("Processing Control")
        g_proc.add_argument(
            "-p",
            "--pages",
            default="all",
            metavar="PAGES",
            help="Pages to process (e.g., '1,3,5-7'). (default: %(default)s)",
        )
        g_proc.add_argument(
            "--translations",
            metavar="FILE",
            default=None,
            help="JSON array of strings replacing the segments in order.",
        )

        g_render = parser.add_argument_group("Rendering")
        g_render.add_argument(
            "--font",
            choices=USER_FONTS,
            default=None,
            help="Base font family. (default: from config)",
        )
        g_render.add_argument(
            "--font-size",
            type=float,
            choices=FONT_SIZES,
            default=None,
            help="Base font size for tables. (default: from config)",
        )
        g_render.add_argument(
            "--line-spacing",
            type=float,
            default=None,
            help=f"Line-height multiplier, e.g. {', '.join(map(str, LINE_SPACINGS))}."
            " (default: from config)",
        )
        g_render.add_argument(
            "--language",
            default=None,
            help="Target language used to pick fonts. (default: from config)",
        )
        g_render.add_argument(
            "--fetch-fonts",
            action="store_true",
            help="Download the target language font for text measurement.",
        )

        g_out = parser.add_argument_group("Script Output & Actions")
        g_out.add_argument(
            "-o",
            "--output-file",
            nargs="?",
            const=S,
            default=None,
            metavar="FILE",
            help="Save the structure as JSON. Defaults to input name.",
        )
        g_out.add_argument(
            "--segments",
            metavar="FILE",
            default=None,
            help="Save the translatable segment texts as a JSON array.",
        )
        g_out.add_argument(
            "--render-plan",
            metavar="FILE",
            default=None,
            help="Save the render plan and searchable text layer as JSON.",
        )
        g_out.add_argument(
            "--log-file",
            metavar="FILE",
            default=None,
            help="Redirect all logging output to a specified file.",
        )
        g_out.add_argument(
            "--color-logs",
            action="store_true",
            help="Enable colored logging output. (default: %(default)s)",
        )
        g_out.add_argument(
            "-D",
            "--dry-run",
            action="store_true",
            help="Print a structure summary without writing files. (default: %(default)s)",
        )
        g_out.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable INFO logging for detailed progress. (default: %(default)s)",
        )
        g_out.add_argument(
            "-d",
            "--debug",
            nargs="?",
            const="all",
            dest="debug_topics",
            metavar="TOPICS",
            help="Enable DEBUG logging (all,layout,order,merge,fit,render,extract,fonts).",
        )

        return parser.parse_args(args)


def main():
    """Main entry point for the script."""
    # Basic logging config for early errors before full setup
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        args = Application.parse_arguments(sys.argv[1:])
        app = Application(args)
        app.run()
    except (ExtractionError, FileNotFoundError) as e:
        log.critical(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        log.info("\nProcess interrupted by user. Exiting.")
        sys.exit(0)
    except Exception as e:
        log.critical("\nAn unexpected error occurred: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
