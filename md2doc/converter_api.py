"""
High-level convenience API for md2doc.

Provides simple functions to convert Markdown bytes, strings or files to
Word (.docx) or PDF without needing to understand the internal pipeline.
"""

import os

from .config import DEFAULT_CONFIG, DEFAULT_PDF_CONFIG
from .exceptions import InputError, SecurityError
from .frontmatter_parser import parse_markdown_string_with_frontmatter, metadata_to_properties
from .MarkdownToDocx import MarkdownToDocx
from .MarkdownToHtml import MarkdownToHtml
from .MarkdownToPdf import MarkdownToPdf


def _decode_markdown(markdown, max_size):
    """Return Markdown text from bytes or str, enforcing the size limit."""
    if markdown is None:
        raise InputError("no markdown content provided")

    if isinstance(markdown, str):
        size = len(markdown.encode('utf-8'))
    else:
        size = len(markdown)
    if size > max_size:
        raise SecurityError(f"failed to accept input: {size} bytes exceeds the {max_size} byte limit")

    if isinstance(markdown, str):
        return markdown
    try:
        return bytes(markdown).decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise InputError(f"input is not valid UTF-8: {e}") from e


def _read_input_file(input_path, max_size):
    """Read a Markdown file as bytes after checking it exists and its size."""
    try:
        input_size = os.path.getsize(input_path)
    except OSError as e:
        raise InputError(f"failed to read input file: {e}") from e
    if input_size > max_size:
        raise SecurityError(
            f"Input file too large: {input_size} bytes (max {max_size} bytes)"
        )
    try:
        with open(input_path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise InputError(f"failed to read input file: {e}") from e


def convert_markdown_to_docx(markdown, output, config=None):
    """Convert Markdown to a .docx file.

    Args:
        markdown: Markdown source as bytes or str (may include YAML front matter)
        output: Output .docx path or a writable binary file object
        config: Optional ConversionConfig instance. Uses DEFAULT_CONFIG if None.

    Returns:
        The list of body Fragments that were written.

    Raises:
        InputError: If the input cannot be decoded.
        ParseError: If the Markdown tree cannot be built or walked.
        AssemblyError: If the package cannot be built or written.
    """
    if config is None:
        config = DEFAULT_CONFIG

    text = _decode_markdown(markdown, config.MAX_INPUT_FILE_SIZE)
    metadata, md_content = parse_markdown_string_with_frontmatter(text)

    return MarkdownToDocx.convert_to_docx(
        md_content, output, config=config,
        properties=metadata_to_properties(metadata),
    )


def convert_file_to_docx(input_path, output_path, config=None):
    """Read a Markdown file and convert it to a .docx file."""
    if config is None:
        config = DEFAULT_CONFIG
    markdown = _read_input_file(input_path, config.MAX_INPUT_FILE_SIZE)
    return convert_markdown_to_docx(markdown, output_path, config)


def markdown_to_html(markdown, config=None):
    """Return the styled HTML document that the PDF converter prints."""
    if config is None:
        config = DEFAULT_PDF_CONFIG

    text = _decode_markdown(markdown, config.MAX_INPUT_FILE_SIZE)
    metadata, md_content = parse_markdown_string_with_frontmatter(text)
    title = metadata_to_properties(metadata)['title'] or None
    return MarkdownToHtml.convert_to_html(md_content, config, title)


def convert_markdown_to_pdf(markdown, output, config=None):
    """Convert Markdown to a PDF file.

    Args:
        markdown: Markdown source as bytes or str (may include YAML front matter)
        output: Output .pdf path or a writable binary file object
        config: Optional PdfConfig instance. Uses DEFAULT_PDF_CONFIG if None.

    Raises:
        InputError: If the input cannot be decoded.
        RenderError: If the browser fails to print the document.
        AssemblyError: If the PDF cannot be written.
    """
    if config is None:
        config = DEFAULT_PDF_CONFIG

    text = _decode_markdown(markdown, config.MAX_INPUT_FILE_SIZE)
    metadata, md_content = parse_markdown_string_with_frontmatter(text)
    title = metadata_to_properties(metadata)['title'] or None
    MarkdownToPdf.convert_to_pdf(md_content, output, config, title)


def convert_file_to_pdf(input_path, output_path, config=None):
    """Read a Markdown file and convert it to a PDF file."""
    if config is None:
        config = DEFAULT_PDF_CONFIG
    markdown = _read_input_file(input_path, config.MAX_INPUT_FILE_SIZE)
    convert_markdown_to_pdf(markdown, output_path, config)
