import os
import logging

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import DEFAULT_PDF_CONFIG
from .exceptions import AssemblyError, RenderError
from .MarkdownToHtml import MarkdownToHtml

logger = logging.getLogger('md2doc')


class MarkdownToPdf:
    """Prints generated HTML to PDF with headless Chromium."""

    def __init__(self, config=None):
        self.config = config if config is not None else DEFAULT_PDF_CONFIG

    @staticmethod
    def convert_to_pdf(markdown_text, output, config=None, title=None):
        """
        Convert Markdown text to PDF.

        Args:
            markdown_text: Markdown source (front matter already removed)
            output: Output .pdf path or a writable binary file object
            config: Optional PdfConfig instance
            title: Optional document title for the HTML <title>
        """
        html_content = MarkdownToHtml.convert_to_html(markdown_text, config, title)
        pdf_bytes = MarkdownToPdf(config).render(html_content)
        write_output(output, pdf_bytes)
        logger.info("Successfully created %s", getattr(output, 'name', output))

    def pdf_options(self):
        """Keyword arguments for Playwright's ``page.pdf``."""
        width, height = self.config.paper_dimensions()
        margins = self.config.margins_inches()
        return {
            'width': f"{width}in",
            'height': f"{height}in",
            'landscape': self.config.landscape,
            'print_background': self.config.print_background,
            'margin': {side: f"{value:.4f}in" for side, value in margins.items()},
        }

    def render(self, html_content):
        """Render a full HTML document and return the PDF bytes."""
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=True)
                try:
                    page = browser.new_page()
                    page.set_default_timeout(self.config.RENDER_TIMEOUT_MS)
                    page.set_content(html_content, wait_until='load')
                    return page.pdf(**self.pdf_options())
                finally:
                    browser.close()
        except PlaywrightError as e:
            if "Executable doesn't exist" in str(e):
                raise RenderError(
                    "headless Chromium is not installed; run `playwright install chromium`"
                ) from e
            raise RenderError(f"chrome operation failed: {e}") from e


def write_output(output, data):
    """Write rendered bytes to a path or a writable binary file object."""
    if hasattr(output, 'write'):
        try:
            output.write(data)
        except (OSError, ValueError) as e:
            raise AssemblyError(f"failed to write output: {e}") from e
        return

    output_path = os.fspath(output)
    try:
        with open(output_path, 'wb') as f:
            f.write(data)
    except OSError as e:
        raise AssemblyError(f"failed to write PDF file {output_path}: {e}") from e
