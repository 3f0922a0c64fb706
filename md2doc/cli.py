"""
md2doc - Markdown to Word / PDF converters

Command-line front ends for the two converters: ``md2docx`` and ``md2pdf``.
"""

import argparse
import sys
import os
import logging

from . import __version__
from .config import ConversionConfig, PdfConfig
from .converter_api import convert_file_to_docx, convert_file_to_pdf, markdown_to_html
from .exceptions import ConvertError

logger = logging.getLogger('md2doc')

MARKDOWN_EXTENSIONS = ('.md', '.markdown')


def setup_logging(verbose=False, quiet=False):
    """Configure logging based on CLI flags.

    Args:
        verbose: If True, show DEBUG level messages
        quiet: If True, suppress all non-error output
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger = logging.getLogger('md2doc')
    root_logger.setLevel(level)
    root_logger.addHandler(handler)


def _add_common_arguments(parser, output_ext):
    parser.add_argument("input_file", help="Input Markdown file (.md, .markdown)")
    parser.add_argument("-o", "--output", default=None,
                        help=f"Output file (default: input filename with {output_ext} extension)")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", default=False,
                        help="Show detailed debug output")
    parser.add_argument("-q", "--quiet", action="store_true", default=False,
                        help="Suppress all non-error output")


def _check_input(input_file):
    """Return False (after logging) when the input cannot be converted."""
    if not os.path.exists(input_file):
        logger.error("Input file does not exist: %s", input_file)
        return False

    input_ext = os.path.splitext(input_file)[1].lower()
    if input_ext not in MARKDOWN_EXTENSIONS:
        logger.warning("Input file does not have .md or .markdown extension")
    return True


def _default_output(input_file, output_ext):
    return os.path.splitext(input_file)[0] + output_ext


def _run(convert, input_file, output):
    logger.info("Converting %s to %s...", input_file, output)
    try:
        convert()
    except ConvertError as e:
        logger.error("Conversion failed: %s", e)
        return 1
    except Exception as e:
        logger.error("Unexpected error: %s", e)
        return 1
    logger.info("Successfully converted to %s", output)
    return 0


def main_docx(argv=None):
    parser = argparse.ArgumentParser(
        prog="md2docx",
        description="Convert a Markdown file to Word (.docx) format.",
        epilog="Supported page sizes:\n"
               "  Letter (default): 8.5in x 11in\n"
               "  A4: 210mm x 297mm\n"
               "  Legal: 8.5in x 14in\n\n"
               "Examples:\n"
               "  md2docx README.md\n"
               "  md2docx README.md -o documentation.docx\n"
               "  md2docx README.md --font-family Arial --font-size 11\n"
               "  md2docx README.md --page-size A4 --margin-top 1 --margin-bottom 1\n"
               "  md2docx README.md --code-font-family Consolas --code-font-size 9",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    _add_common_arguments(parser, ".docx")
    parser.add_argument("--font-family", default="Calibri", help="Font family for body text")
    parser.add_argument("--font-size", type=float, default=11,
                        help="Font size in points for body text")
    parser.add_argument("--code-font-family", default="Consolas", help="Font family for code blocks")
    parser.add_argument("--code-font-size", type=float, default=10,
                        help="Font size in points for code blocks")
    parser.add_argument("--margin-top", type=float, default=1.0, help="Top margin in inches")
    parser.add_argument("--margin-bottom", type=float, default=1.0, help="Bottom margin in inches")
    parser.add_argument("--margin-left", type=float, default=1.0, help="Left margin in inches")
    parser.add_argument("--margin-right", type=float, default=1.0, help="Right margin in inches")
    parser.add_argument("--page-size", default="Letter", help="Page size: Letter, A4, Legal")

    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if not _check_input(args.input_file):
        return 1
    output = args.output or _default_output(args.input_file, ".docx")

    config = ConversionConfig(
        font_family=args.font_family,
        font_size=args.font_size,
        code_font_family=args.code_font_family,
        code_font_size=args.code_font_size,
        margin_top=args.margin_top,
        margin_bottom=args.margin_bottom,
        margin_left=args.margin_left,
        margin_right=args.margin_right,
        page_size=args.page_size,
    )
    return _run(lambda: convert_file_to_docx(args.input_file, output, config),
                args.input_file, output)


def main_pdf(argv=None):
    parser = argparse.ArgumentParser(
        prog="md2pdf",
        description="Convert a Markdown file to PDF using headless Chromium.",
        epilog="Supported paper sizes:\n"
               "  A4 (default): 210mm x 297mm\n"
               "  Letter: 8.5in x 11in\n"
               "  Legal: 8.5in x 14in\n"
               "  A3: 297mm x 420mm\n"
               "  A5: 148mm x 210mm\n"
               "  Tabloid: 11in x 17in\n\n"
               "Examples:\n"
               "  md2pdf README.md\n"
               "  md2pdf README.md -o documentation.pdf\n"
               "  md2pdf README.md --paper-size Letter --landscape\n"
               "  md2pdf README.md --margin-top 25 --margin-bottom 25\n"
               "  md2pdf README.md --css custom-style.css",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    _add_common_arguments(parser, ".pdf")
    parser.add_argument("--paper-size", default="A4",
                        help="Paper size: A4, Letter, Legal, A3, A5, Tabloid")
    parser.add_argument("--margin-top", type=float, default=15, help="Top margin in millimeters")
    parser.add_argument("--margin-bottom", type=float, default=15, help="Bottom margin in millimeters")
    parser.add_argument("--margin-left", type=float, default=15, help="Left margin in millimeters")
    parser.add_argument("--margin-right", type=float, default=15, help="Right margin in millimeters")
    parser.add_argument("--no-print-background", dest="print_background", action="store_false",
                        default=True, help="Do not print background graphics")
    parser.add_argument("--landscape", action="store_true", default=False,
                        help="Use landscape orientation")
    parser.add_argument("--css", default=None, help="Custom CSS file to apply to the PDF")
    parser.add_argument("--html", action="store_true", default=False,
                        help="Write the intermediate HTML instead of the PDF")

    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if not _check_input(args.input_file):
        return 1
    output = args.output or _default_output(args.input_file, ".html" if args.html else ".pdf")

    custom_css = ''
    if args.css:
        try:
            with open(args.css, 'r', encoding='utf-8') as f:
                custom_css = f.read()
        except OSError as e:
            logger.error("Failed to read CSS file: %s", e)
            return 1

    config = PdfConfig(
        paper_size=args.paper_size,
        margin_top=args.margin_top,
        margin_bottom=args.margin_bottom,
        margin_left=args.margin_left,
        margin_right=args.margin_right,
        print_background=args.print_background,
        landscape=args.landscape,
        custom_css=custom_css,
    )

    if args.html:
        def convert():
            with open(args.input_file, 'rb') as f:
                html_doc = markdown_to_html(f.read(), config)
            with open(output, 'w', encoding='utf-8') as f:
                f.write(html_doc)
    else:
        def convert():
            convert_file_to_pdf(args.input_file, output, config)

    return _run(convert, args.input_file, output)


if __name__ == "__main__":
    sys.exit(main_docx())
