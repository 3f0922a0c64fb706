"""HTML rendering and PDF printing, with the browser mocked out."""
import importlib
import io
import unittest
from unittest import mock

from playwright.sync_api import Error as PlaywrightError

from md2doc import MarkdownToPdf, PdfConfig, RenderError, convert_markdown_to_pdf, markdown_to_html

pdf_module = importlib.import_module("md2doc.MarkdownToPdf")

FAKE_PDF = b"%PDF-1.4 fake"


def fake_browser():
    """Return (sync_playwright mock, page mock, browser mock)."""
    sync_playwright = mock.MagicMock()
    p = sync_playwright.return_value.__enter__.return_value
    browser = p.chromium.launch.return_value
    page = browser.new_page.return_value
    page.pdf.return_value = FAKE_PDF
    return sync_playwright, page, browser


class HtmlTest(unittest.TestCase):
    def test_document_structure(self) -> None:
        html_doc = markdown_to_html(b"# Hello\n\nText with **bold**.\n")
        self.assertTrue(html_doc.startswith("<!DOCTYPE html>"))
        self.assertIn("<title>Document</title>", html_doc)
        self.assertIn("<h1>Hello</h1>", html_doc)
        self.assertIn("<strong>bold</strong>", html_doc)

    def test_front_matter_title_is_escaped(self) -> None:
        html_doc = markdown_to_html("---\ntitle: A & B\n---\nbody\n")
        self.assertIn("<title>A &amp; B</title>", html_doc)
        self.assertNotIn("title: A", html_doc)

    def test_fenced_code_is_highlighted(self) -> None:
        html_doc = markdown_to_html("```python\nprint('hi')\n```\n")
        self.assertIn('class="highlight"', html_doc)
        self.assertIn(".highlight", html_doc)

    def test_custom_css_comes_last(self) -> None:
        html_doc = markdown_to_html("x", PdfConfig(custom_css="body { color: red; }"))
        self.assertGreater(html_doc.index("body { color: red; }"), html_doc.index("box-sizing"))

    def test_soft_line_breaks_kept(self) -> None:
        html_doc = markdown_to_html("first line\nsecond line\n")
        self.assertIn("first line<br />", html_doc)
        self.assertIn("second line", html_doc)

    def test_tables_rendered(self) -> None:
        html_doc = markdown_to_html("| a | b |\n|---|---|\n| 1 | 2 |\n")
        self.assertIn("<table>", html_doc)


class PdfOptionsTest(unittest.TestCase):
    def test_defaults(self) -> None:
        options = MarkdownToPdf().pdf_options()
        self.assertEqual(options["width"], "8.27in")
        self.assertEqual(options["height"], "11.69in")
        self.assertTrue(options["print_background"])
        self.assertFalse(options["landscape"])
        self.assertEqual(options["margin"]["top"], "0.5906in")

    def test_paper_size_and_margins(self) -> None:
        config = PdfConfig(paper_size="letter", margin_left=25.4, landscape=True)
        options = MarkdownToPdf(config).pdf_options()
        self.assertEqual((options["width"], options["height"]), ("8.5in", "11in"))
        self.assertEqual(options["margin"]["left"], "1.0000in")
        self.assertTrue(options["landscape"])

    def test_unknown_paper_size_falls_back_to_a4(self) -> None:
        self.assertEqual(PdfConfig(paper_size="B4").paper_dimensions(), (8.27, 11.69))


class RenderTest(unittest.TestCase):
    def test_pdf_written_to_file_object(self) -> None:
        sync_playwright, page, browser = fake_browser()
        buf = io.BytesIO()
        with mock.patch.object(pdf_module, "sync_playwright", sync_playwright):
            convert_markdown_to_pdf(b"# Hi\n", buf)

        self.assertEqual(buf.getvalue(), FAKE_PDF)
        html_doc = page.set_content.call_args[0][0]
        self.assertIn("<h1>Hi</h1>", html_doc)
        page.set_default_timeout.assert_called_once_with(60000)
        self.assertEqual(page.pdf.call_args[1]["width"], "8.27in")
        browser.close.assert_called_once_with()

    def test_browser_failure_becomes_render_error(self) -> None:
        sync_playwright, page, browser = fake_browser()
        page.pdf.side_effect = PlaywrightError("Target closed")
        with mock.patch.object(pdf_module, "sync_playwright", sync_playwright):
            with self.assertRaises(RenderError):
                convert_markdown_to_pdf(b"# Hi\n", io.BytesIO())
        browser.close.assert_called_once_with()

    def test_missing_browser_mentions_install(self) -> None:
        sync_playwright, _, _ = fake_browser()
        p = sync_playwright.return_value.__enter__.return_value
        p.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist at /nowhere")
        with mock.patch.object(pdf_module, "sync_playwright", sync_playwright):
            with self.assertRaises(RenderError) as ctx:
                MarkdownToPdf().render("<html></html>")
        self.assertIn("playwright install", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
