"""
md2doc - Convert Markdown to Word (.docx) and PDF

The .docx converter walks the Markdown tree itself and writes the
WordprocessingML package directly; the PDF converter renders styled HTML
and prints it with headless Chromium.
"""

__version__ = "1.0.0"

from .MarkdownToDocx import MarkdownToDocx
from .MarkdownToHtml import MarkdownToHtml
from .MarkdownToPdf import MarkdownToPdf
from .marko_adapter import MarkoToPandocAdapter
from .docx_package import DocxPackage, check_package, read_package
from .runs import Fragment, RunStyle
from .frontmatter_parser import parse_markdown_string_with_frontmatter, metadata_to_properties
from .config import ConversionConfig, PdfConfig, DEFAULT_CONFIG, DEFAULT_PDF_CONFIG
from .exceptions import (
    ConvertError,
    InputError,
    ParseError,
    AssemblyError,
    RenderError,
    SecurityError,
)
from .converter_api import (
    convert_markdown_to_docx,
    convert_file_to_docx,
    convert_markdown_to_pdf,
    convert_file_to_pdf,
    markdown_to_html,
)

__all__ = [
    "MarkdownToDocx",
    "MarkdownToHtml",
    "MarkdownToPdf",
    "MarkoToPandocAdapter",
    "DocxPackage",
    "check_package",
    "read_package",
    "Fragment",
    "RunStyle",
    "parse_markdown_string_with_frontmatter",
    "metadata_to_properties",
    "ConversionConfig",
    "PdfConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_PDF_CONFIG",
    "ConvertError",
    "InputError",
    "ParseError",
    "AssemblyError",
    "RenderError",
    "SecurityError",
    "convert_markdown_to_docx",
    "convert_file_to_docx",
    "convert_markdown_to_pdf",
    "convert_file_to_pdf",
    "markdown_to_html",
]
