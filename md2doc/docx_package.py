"""
Assembles translated body fragments into a WordprocessingML (.docx) package.

The part set is fixed: every part below is always written, and every
relationship target and content-type override points at one of them.
"""

import io
import os
import logging
import posixpath
import tempfile
import zipfile
import xml.etree.ElementTree as ET

from .config import DEFAULT_CONFIG
from .exceptions import AssemblyError
from .xmlwriter import NS_CORE_PROPS, NS_DC, NS_W, serialize

logger = logging.getLogger('md2doc')

NS_CONTENT_TYPES = 'http://schemas.openxmlformats.org/package/2006/content-types'
NS_RELATIONSHIPS = 'http://schemas.openxmlformats.org/package/2006/relationships'

REL_OFFICE_DOCUMENT = 'http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument'
REL_CORE_PROPERTIES = 'http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties'
REL_STYLES = 'http://schemas.openxmlformats.org/officeDocument/2006/relationships/styles'

CT_RELATIONSHIPS = 'application/vnd.openxmlformats-package.relationships+xml'
CT_XML = 'application/xml'
CT_DOCUMENT = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml'
CT_STYLES = 'application/vnd.openxmlformats-officedocument.wordprocessingml.styles+xml'
CT_CORE_PROPS = 'application/vnd.openxmlformats-package.core-properties+xml'

CONTENT_TYPES_PART = '[Content_Types].xml'
ROOT_RELS_PART = '_rels/.rels'
CORE_PROPS_PART = 'docProps/core.xml'
DOCUMENT_PART = 'word/document.xml'
DOCUMENT_RELS_PART = 'word/_rels/document.xml.rels'
STYLES_PART = 'word/styles.xml'

# Write order inside the archive ([Content_Types].xml first)
PART_NAMES = (
    CONTENT_TYPES_PART,
    ROOT_RELS_PART,
    CORE_PROPS_PART,
    DOCUMENT_PART,
    DOCUMENT_RELS_PART,
    STYLES_PART,
)


def _qn(ns, tag):
    return f'{{{ns}}}{tag}'


def _w(tag):
    return _qn(NS_W, tag)


def _w_attrib(**attrs):
    return {_w(k): str(v) for k, v in attrs.items()}


class DocxPackage:
    """Builds the fixed set of .docx parts and writes them as one archive."""

    def __init__(self, fragments, config=None, properties=None):
        self.fragments = list(fragments)
        self.config = config if config is not None else DEFAULT_CONFIG
        self.properties = properties or {}

    # --- Parts ---

    def build_parts(self):
        """Return ``{part name: serialized XML bytes}`` for every part."""
        builders = {
            CONTENT_TYPES_PART: self._content_types_xml,
            ROOT_RELS_PART: self._root_rels_xml,
            CORE_PROPS_PART: self._core_props_xml,
            DOCUMENT_PART: self._document_xml,
            DOCUMENT_RELS_PART: self._document_rels_xml,
            STYLES_PART: self._styles_xml,
        }
        parts = {}
        for name in PART_NAMES:
            try:
                parts[name] = builders[name]()
            except (ValueError, TypeError) as e:
                raise AssemblyError(f"failed to serialize {name}: {e}") from e
            logger.debug("Built part %s (%d bytes)", name, len(parts[name]))
        return parts

    def _content_types_xml(self):
        root = ET.Element(_qn(NS_CONTENT_TYPES, 'Types'))
        ET.SubElement(root, _qn(NS_CONTENT_TYPES, 'Default'),
                      {'Extension': 'rels', 'ContentType': CT_RELATIONSHIPS})
        ET.SubElement(root, _qn(NS_CONTENT_TYPES, 'Default'),
                      {'Extension': 'xml', 'ContentType': CT_XML})
        for part_name, content_type in (
            (DOCUMENT_PART, CT_DOCUMENT),
            (STYLES_PART, CT_STYLES),
            (CORE_PROPS_PART, CT_CORE_PROPS),
        ):
            ET.SubElement(root, _qn(NS_CONTENT_TYPES, 'Override'),
                          {'PartName': '/' + part_name, 'ContentType': content_type})
        return serialize(root, default_namespace=NS_CONTENT_TYPES)

    def _relationships_xml(self, relationships):
        root = ET.Element(_qn(NS_RELATIONSHIPS, 'Relationships'))
        for rel_id, rel_type, target in relationships:
            ET.SubElement(root, _qn(NS_RELATIONSHIPS, 'Relationship'),
                          {'Id': rel_id, 'Type': rel_type, 'Target': target})
        return serialize(root, default_namespace=NS_RELATIONSHIPS)

    def _root_rels_xml(self):
        return self._relationships_xml([
            ('rId1', REL_OFFICE_DOCUMENT, DOCUMENT_PART),
            ('rId2', REL_CORE_PROPERTIES, CORE_PROPS_PART),
        ])

    def _document_rels_xml(self):
        # Targets are relative to word/
        return self._relationships_xml([
            ('rId1', REL_STYLES, posixpath.relpath(STYLES_PART, 'word')),
        ])

    def _core_props_xml(self):
        root = ET.Element(_qn(NS_CORE_PROPS, 'coreProperties'))
        ET.SubElement(root, _qn(NS_DC, 'title')).text = self.properties.get('title', '')
        ET.SubElement(root, _qn(NS_DC, 'subject')).text = self.properties.get('subject', '')
        ET.SubElement(root, _qn(NS_DC, 'creator')).text = self.properties.get('author', '')
        ET.SubElement(root, _qn(NS_CORE_PROPS, 'keywords')).text = self.properties.get('keywords', '')
        return serialize(root)

    def _styles_xml(self):
        size = self.config.body_half_points
        font = self.config.font_family

        root = ET.Element(_w('styles'))
        doc_defaults = ET.SubElement(root, _w('docDefaults'))
        rpr_default = ET.SubElement(doc_defaults, _w('rPrDefault'))
        rpr = ET.SubElement(rpr_default, _w('rPr'))
        ET.SubElement(rpr, _w('rFonts'), _w_attrib(ascii=font, hAnsi=font))
        ET.SubElement(rpr, _w('sz'), _w_attrib(val=size))
        ET.SubElement(rpr, _w('szCs'), _w_attrib(val=size))
        return serialize(root)

    def _document_xml(self):
        page_width, page_height = self.config.page_dimensions()
        margins = self.config.margins_twips()

        root = ET.Element(_w('document'))
        body = ET.SubElement(root, _w('body'))
        for fragment in self.fragments:
            body.append(fragment.element)

        sect_pr = ET.SubElement(body, _w('sectPr'))
        ET.SubElement(sect_pr, _w('pgSz'), _w_attrib(w=page_width, h=page_height))
        ET.SubElement(sect_pr, _w('pgMar'), _w_attrib(
            top=margins['top'],
            right=margins['right'],
            bottom=margins['bottom'],
            left=margins['left'],
            header=self.config.HEADER_DISTANCE,
            footer=self.config.FOOTER_DISTANCE,
            gutter=0,
        ))
        return serialize(root)

    # --- Archive ---

    def to_bytes(self):
        """Build, check and zip every part; returns the archive bytes."""
        parts = self.build_parts()
        check_package(parts)

        buf = io.BytesIO()
        with zipfile.ZipFile(buf, 'w', zipfile.ZIP_DEFLATED) as out_zip:
            for name in PART_NAMES:
                out_zip.writestr(name, parts[name])
        return buf.getvalue()

    def write(self, output):
        """Write the archive to a path or a writable binary file object.

        For a path the archive lands under a temporary name next to the
        target and is renamed into place, so a failed write never leaves a
        partial file at ``output``.
        """
        data = self.to_bytes()

        if hasattr(output, 'write'):
            try:
                output.write(data)
            except (OSError, ValueError) as e:
                raise AssemblyError(f"failed to write document: {e}") from e
            return

        output_path = os.fspath(output)
        out_dir = os.path.dirname(os.path.abspath(output_path))
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile('wb', dir=out_dir, suffix='.docx.tmp',
                                             delete=False) as tmp:
                tmp_path = tmp.name
                tmp.write(data)
            os.replace(tmp_path, output_path)
        except OSError as e:
            logger.error("DOCX creation failed: %s", e, exc_info=True)
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise AssemblyError(f"failed to write document {output_path}: {e}") from e


def read_package(data):
    """Read every member of a .docx archive into ``{part name: bytes}``."""
    with zipfile.ZipFile(io.BytesIO(data)) as z:
        return {name: z.read(name) for name in z.namelist()}


def check_package(parts):
    """Verify the internal consistency of a package.

    Every part must be well-formed XML and covered by a content type, every
    content-type override must name an existing part, and every internal
    relationship target must exist.

    Raises:
        AssemblyError: listing every problem found
    """
    problems = []
    roots = {}
    for name, data in parts.items():
        try:
            roots[name] = ET.fromstring(data)
        except ET.ParseError as e:
            problems.append(f"{name} is not well-formed: {e}")

    types_root = roots.get(CONTENT_TYPES_PART)
    if types_root is None:
        problems.append(f"missing {CONTENT_TYPES_PART}")
        defaults, overrides = {}, {}
    else:
        defaults = {
            d.get('Extension', '').lower(): d.get('ContentType')
            for d in types_root.findall(_qn(NS_CONTENT_TYPES, 'Default'))
        }
        overrides = {
            o.get('PartName', '').lstrip('/'): o.get('ContentType')
            for o in types_root.findall(_qn(NS_CONTENT_TYPES, 'Override'))
        }

    for part_name in overrides:
        if part_name not in parts:
            problems.append(f"content type override for missing part /{part_name}")

    for name in parts:
        if name == CONTENT_TYPES_PART:
            continue
        # '_rels/.rels' has the extension 'rels' in package terms
        basename = posixpath.basename(name)
        ext = basename.rsplit('.', 1)[-1].lower() if '.' in basename else ''
        if name not in overrides and ext not in defaults:
            problems.append(f"no content type for {name}")

    for name, root in roots.items():
        if not name.endswith('.rels'):
            continue
        # _rels/.rels -> package root; word/_rels/document.xml.rels -> word/
        source_dir = posixpath.dirname(posixpath.dirname(name))
        for rel in root.findall(_qn(NS_RELATIONSHIPS, 'Relationship')):
            if rel.get('TargetMode') == 'External':
                continue
            target = rel.get('Target', '')
            if target.startswith('/'):
                resolved = target.lstrip('/')
            else:
                resolved = posixpath.normpath(posixpath.join(source_dir, target))
            if resolved not in parts:
                problems.append(f"{name}: relationship {rel.get('Id')} targets missing part {resolved}")

    if problems:
        raise AssemblyError("failed to verify package: " + "; ".join(problems))
