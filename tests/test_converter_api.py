"""End-to-end conversion through the public API."""
import io
import os
import re
import tempfile
import unittest
import xml.etree.ElementTree as ET
from unittest import mock

from md2doc import (
    ConversionConfig,
    InputError,
    MarkoToPandocAdapter,
    ParseError,
    SecurityError,
    check_package,
    convert_file_to_docx,
    convert_markdown_to_docx,
    read_package,
)
from tests.helpers.docx_inspector import body_paragraphs, paragraph_text

NS_DC = "http://purl.org/dc/elements/1.1/"

SAMPLE = b"# Title\n\nSome **bold** and *italic* text.\n"


class TinyConfig(ConversionConfig):
    MAX_INPUT_FILE_SIZE = 10


def convert(markdown, config=None):
    buf = io.BytesIO()
    fragments = convert_markdown_to_docx(markdown, buf, config)
    return fragments, read_package(buf.getvalue())


class ConvertMarkdownTest(unittest.TestCase):
    def test_bytes_input(self) -> None:
        fragments, parts = convert(SAMPLE)
        check_package(parts)
        paragraphs = body_paragraphs(parts["word/document.xml"])
        self.assertEqual(
            [paragraph_text(p) for p in paragraphs],
            ["Title", "Some bold and italic text."],
        )
        self.assertEqual(len(fragments), 2)

    def test_str_input(self) -> None:
        fragments, _ = convert(SAMPLE.decode("utf-8"))
        self.assertEqual([f.kind for f in fragments], ["heading", "paragraph"])

    def test_byte_order_mark_is_skipped(self) -> None:
        fragments, _ = convert(b"\xef\xbb\xbf# Title\n")
        self.assertEqual(fragments[0].text, "Title")

    def test_empty_input(self) -> None:
        fragments, parts = convert(b"")
        self.assertEqual(fragments, [])
        check_package(parts)

    def test_invalid_utf8(self) -> None:
        with self.assertRaises(InputError):
            convert(b"\xff\xfe bad")

    def test_none_input(self) -> None:
        with self.assertRaises(InputError):
            convert(None)

    def test_size_limit(self) -> None:
        with self.assertRaises(SecurityError):
            convert(b"# far more than ten bytes", TinyConfig())

    def test_parser_failure_becomes_parse_error(self) -> None:
        with mock.patch.object(MarkoToPandocAdapter, "parse", side_effect=RuntimeError("boom")):
            with self.assertRaises(ParseError):
                convert(SAMPLE)

    def test_front_matter_fills_core_properties(self) -> None:
        source = b"---\ntitle: My Doc\nauthor: [Kim, Lee]\nkeywords: [a, b]\n---\n# Heading\n"
        fragments, parts = convert(source)
        self.assertEqual([f.text for f in fragments], ["Heading"])
        core = ET.fromstring(parts["docProps/core.xml"])
        self.assertEqual(core.find(f"{{{NS_DC}}}title").text, "My Doc")
        self.assertEqual(core.find(f"{{{NS_DC}}}creator").text, "Kim; Lee")

    def test_reserved_characters_round_trip_through_archive(self) -> None:
        source = "`a<b>&\"q\"'s` and a < b & \"c\" > 'd'\n"
        _, parts = convert(source)
        check_package(parts)
        paragraphs = body_paragraphs(parts["word/document.xml"])
        self.assertEqual(paragraph_text(paragraphs[0]), "a<b>&\"q\"'s and a < b & \"c\" > 'd'")

        document = parts["word/document.xml"].decode("utf-8")
        for text in re.findall(r"<w:t[^>]*>(.*?)</w:t>", document):
            for char in "<>\"'":
                self.assertNotIn(char, text)
            self.assertIsNone(re.search(r"&(?!amp;|lt;|gt;|#34;|#39;)", text))

    def test_success_is_logged(self) -> None:
        with self.assertLogs("md2doc", level="INFO") as logs:
            convert(SAMPLE)
        self.assertTrue(any("Successfully created" in line for line in logs.output))


class ConvertFileTest(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmpdir = tmp.name

    def test_file_to_file(self) -> None:
        source = os.path.join(self.tmpdir, "doc.md")
        target = os.path.join(self.tmpdir, "doc.docx")
        with open(source, "wb") as f:
            f.write(SAMPLE)

        convert_file_to_docx(source, target)

        with open(target, "rb") as f:
            check_package(read_package(f.read()))

    def test_missing_file(self) -> None:
        with self.assertRaises(InputError):
            convert_file_to_docx(os.path.join(self.tmpdir, "nope.md"),
                                 os.path.join(self.tmpdir, "nope.docx"))
        self.assertEqual(os.listdir(self.tmpdir), [])

    def test_oversized_file(self) -> None:
        source = os.path.join(self.tmpdir, "big.md")
        with open(source, "wb") as f:
            f.write(b"x" * 64)
        with self.assertRaises(SecurityError):
            convert_file_to_docx(source, os.path.join(self.tmpdir, "big.docx"), TinyConfig())


if __name__ == "__main__":
    unittest.main()
