"""
bookpress entrypoint - command line interface.

    bookpress build                 Markdown chapters -> HTML -> PDF
    bookpress html                  Markdown chapters -> HTML
    bookpress render SOURCE DEST    existing HTML -> PDF
"""

import argparse
import asyncio
from pathlib import Path

from pydantic import ValidationError

from bookpress import __version__
from bookpress.config import Settings, get_settings, init_settings
from bookpress.modules.book import BookBuilder
from bookpress.modules.render import BrowserEngine, LayoutPolicy, Margins, export_to_pdf
from bookpress.pipeline import build_pdf
from bookpress.shared.errors import BookpressError
from bookpress.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _add_layout_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--format", default="A4", help="Page format (A4, Letter, ...)")
    parser.add_argument("--margin", default="1in", help="Uniform margin as a CSS length")
    parser.add_argument("--no-background", action="store_true", help="Do not print backgrounds")
    parser.add_argument("--no-header-footer", action="store_true", help="Omit running header and footer")


def _add_book_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--book-root", type=Path, help="Directory holding chapters/, examples/, appendix/")
    parser.add_argument("--output-dir", help="Output directory, relative to the book root")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookpress",
        description="Build the handbook and print it to PDF with headless Chromium.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Logging level (default from settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build the HTML book and export it to PDF")
    _add_book_options(build)
    _add_layout_options(build)

    html = sub.add_parser("html", help="Build the HTML book only")
    _add_book_options(html)

    render = sub.add_parser("render", help="Export an existing HTML file to PDF")
    render.add_argument("source", type=Path, help="HTML file to render")
    render.add_argument("destination", type=Path, help="PDF file to write")
    _add_layout_options(render)

    return parser


def layout_from_args(args: argparse.Namespace) -> LayoutPolicy:
    return LayoutPolicy(
        page_format=args.format,
        margins=Margins.uniform(args.margin),
        print_background=not args.no_background,
        display_header_footer=not args.no_header_footer,
    )


def run(argv: list[str] | None = None, engine: BrowserEngine | None = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments (defaults to sys.argv)
        engine: Browser engine override (useful for testing)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if getattr(args, "book_root", None):
        overrides["book_root"] = args.book_root.resolve()
    if getattr(args, "output_dir", None):
        overrides["output_dir"] = args.output_dir

    try:
        settings = get_settings()
        if overrides:
            settings = init_settings(Settings(**{**settings.model_dump(), **overrides}))
    except ValidationError as e:
        setup_logging()
        logger.error(f"Invalid settings: {e}")
        return 2

    setup_logging(settings.log_level)

    try:
        if args.command == "html":
            path = BookBuilder(settings).build_document()
            print(f"HTML book written: {path}")
            return 0

        policy = layout_from_args(args)
        if args.command == "render":
            path = asyncio.run(export_to_pdf(args.source, args.destination, policy, engine))
        else:
            path = asyncio.run(build_pdf(settings, policy, engine))

    except ValidationError as e:
        logger.error(f"Invalid layout options: {e}")
        return 2
    except BookpressError as e:
        logger.error(f"PDF generation failed: {e.message}")
        logger.debug(f"Error details: {e.to_dict()}")
        return e.exit_code

    print(f"PDF generated successfully: {path}")
    return 0


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
