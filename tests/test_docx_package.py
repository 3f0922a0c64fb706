"""Package assembly: the fixed part set, section properties and archive writing."""
import io
import os
import tempfile
import unittest
import xml.etree.ElementTree as ET
import zipfile

from md2doc import AssemblyError, ConversionConfig, DocxPackage, check_package, read_package
from tests.helpers.docx_inspector import body_paragraphs, translate, w, w_attr

EXPECTED_PARTS = {
    "[Content_Types].xml",
    "_rels/.rels",
    "docProps/core.xml",
    "word/document.xml",
    "word/_rels/document.xml.rels",
    "word/styles.xml",
}
NS_DC = "http://purl.org/dc/elements/1.1/"
NS_CP = "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"


def build(markdown_text="", config=None, properties=None):
    config = config or ConversionConfig()
    return DocxPackage(translate(markdown_text, config), config, properties).build_parts()


def section_props(parts):
    root = ET.fromstring(parts["word/document.xml"])
    return root.find(f"{w('body')}/{w('sectPr')}")


class PartsTest(unittest.TestCase):
    def test_every_part_present_and_consistent(self) -> None:
        parts = build("# Title\n\nBody.")
        self.assertEqual(set(parts), EXPECTED_PARTS)
        check_package(parts)
        self.assertEqual(len(body_paragraphs(parts["word/document.xml"])), 2)

    def test_empty_body_still_complete(self) -> None:
        parts = build("")
        check_package(parts)
        body = ET.fromstring(parts["word/document.xml"]).find(w("body"))
        self.assertEqual([child.tag for child in body], [w("sectPr")])

    def test_package_parts_declare_default_namespace(self) -> None:
        parts = build("x")
        self.assertIn(
            b'<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">',
            parts["[Content_Types].xml"],
        )
        for name in ("_rels/.rels", "word/_rels/document.xml.rels"):
            root = ET.fromstring(parts[name])
            self.assertEqual(
                root.tag,
                "{http://schemas.openxmlformats.org/package/2006/relationships}Relationships",
            )
            self.assertTrue(all(rel.get("Target") for rel in root))

    def test_archive_starts_with_content_types(self) -> None:
        data = DocxPackage(translate("x")).to_bytes()
        with zipfile.ZipFile(io.BytesIO(data)) as z:
            self.assertEqual(z.namelist()[0], "[Content_Types].xml")
        self.assertEqual(set(read_package(data)), EXPECTED_PARTS)


class SectionTest(unittest.TestCase):
    def test_a4_with_inch_margins(self) -> None:
        sect = section_props(build("x", ConversionConfig(page_size="A4")))
        pg_sz = sect.find(w("pgSz"))
        self.assertEqual((w_attr(pg_sz, "w"), w_attr(pg_sz, "h")), ("11906", "16838"))
        pg_mar = sect.find(w("pgMar"))
        for side in ("top", "bottom", "left", "right"):
            self.assertEqual(w_attr(pg_mar, side), "1440")
        self.assertEqual(w_attr(pg_mar, "header"), "720")
        self.assertEqual(w_attr(pg_mar, "gutter"), "0")

    def test_page_size_is_case_insensitive(self) -> None:
        pg_sz = section_props(build("x", ConversionConfig(page_size="LEGAL"))).find(w("pgSz"))
        self.assertEqual(w_attr(pg_sz, "h"), "20160")

    def test_unknown_page_size_falls_back_to_letter(self) -> None:
        pg_sz = section_props(build("x", ConversionConfig(page_size="B5"))).find(w("pgSz"))
        self.assertEqual((w_attr(pg_sz, "w"), w_attr(pg_sz, "h")), ("12240", "15840"))

    def test_fractional_margins(self) -> None:
        config = ConversionConfig(margin_top=0.5, margin_left=1.25)
        pg_mar = section_props(build("x", config)).find(w("pgMar"))
        self.assertEqual(w_attr(pg_mar, "top"), "720")
        self.assertEqual(w_attr(pg_mar, "left"), "1800")


class StylesAndPropertiesTest(unittest.TestCase):
    def test_default_font_in_styles(self) -> None:
        config = ConversionConfig(font_family='Fancy "Quote" & Co', font_size=10.5)
        root = ET.fromstring(build("x", config)["word/styles.xml"])
        rpr = root.find(f"{w('docDefaults')}/{w('rPrDefault')}/{w('rPr')}")
        self.assertEqual(w_attr(rpr.find(w("rFonts")), "ascii"), 'Fancy "Quote" & Co')
        self.assertEqual(w_attr(rpr.find(w("sz")), "val"), "21")

    def test_core_properties(self) -> None:
        parts = build("x", properties={"title": "A & B <C>", "author": "Kim; Lee"})
        root = ET.fromstring(parts["docProps/core.xml"])
        self.assertEqual(root.find(f"{{{NS_DC}}}title").text, "A & B <C>")
        self.assertEqual(root.find(f"{{{NS_DC}}}creator").text, "Kim; Lee")
        self.assertIsNotNone(root.find(f"{{{NS_CP}}}keywords"))

    def test_core_properties_sanitize_control_characters(self) -> None:
        parts = build("x", properties={"title": "bell\x07here"})
        check_package(parts)
        root = ET.fromstring(parts["docProps/core.xml"])
        self.assertEqual(root.find(f"{{{NS_DC}}}title").text, "bell\ufffdhere")


class CheckPackageTest(unittest.TestCase):
    def test_missing_relationship_target(self) -> None:
        parts = build("x")
        del parts["word/styles.xml"]
        with self.assertRaises(AssemblyError) as ctx:
            check_package(parts)
        self.assertIn("word/styles.xml", str(ctx.exception))

    def test_part_without_content_type(self) -> None:
        parts = build("x")
        parts["word/media/blob.bin"] = b"<x/>"
        with self.assertRaises(AssemblyError):
            check_package(parts)

    def test_malformed_part(self) -> None:
        parts = build("x")
        parts["word/styles.xml"] = b"<w:styles"
        with self.assertRaises(AssemblyError):
            check_package(parts)


class WriteTest(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmpdir = tmp.name

    def test_write_to_path(self) -> None:
        target = os.path.join(self.tmpdir, "out.docx")
        DocxPackage(translate("# Hi")).write(target)
        self.assertTrue(zipfile.is_zipfile(target))
        self.assertEqual(os.listdir(self.tmpdir), ["out.docx"])

    def test_write_to_file_object(self) -> None:
        buf = io.BytesIO()
        DocxPackage(translate("# Hi")).write(buf)
        check_package(read_package(buf.getvalue()))

    def test_failed_write_leaves_no_file(self) -> None:
        target = os.path.join(self.tmpdir, "missing", "out.docx")
        with self.assertLogs("md2doc", level="ERROR"):
            with self.assertRaises(AssemblyError):
                DocxPackage(translate("# Hi")).write(target)
        self.assertFalse(os.path.exists(target))
        self.assertEqual(os.listdir(self.tmpdir), [])


if __name__ == "__main__":
    unittest.main()
