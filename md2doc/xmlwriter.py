"""
Serializer for the ElementTree parts of the .docx package.

Text nodes get the five markup-reserved characters escaped (quotes as
numeric references) and characters outside the XML 1.0 range replaced by
U+FFFD, so every part re-parses to the text that was put in.
"""

import re
import xml.sax.saxutils as saxutils

XML_NS = 'http://www.w3.org/XML/1998/namespace'

NS_W = 'http://schemas.openxmlformats.org/wordprocessingml/2006/main'
NS_CORE_PROPS = 'http://schemas.openxmlformats.org/package/2006/metadata/core-properties'
NS_DC = 'http://purl.org/dc/elements/1.1/'

PREFIXES = {
    XML_NS: 'xml',
    NS_W: 'w',
    NS_CORE_PROPS: 'cp',
    NS_DC: 'dc',
}

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

_TEXT_ENTITIES = {'"': '&#34;', "'": '&#39;'}
_ATTR_ENTITIES = {'"': '&quot;', "'": '&apos;', '\n': '&#10;', '\r': '&#13;', '\t': '&#9;'}

_INVALID_XML_CHARS_RE = re.compile(
    r'[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]'
)


def sanitize(text):
    """Replace characters XML 1.0 cannot carry with U+FFFD."""
    return _INVALID_XML_CHARS_RE.sub('\ufffd', text)


def escape_text(text):
    return saxutils.escape(sanitize(text), _TEXT_ENTITIES)


def escape_attr(value):
    return saxutils.escape(sanitize(str(value)), _ATTR_ENTITIES)


def _split(name):
    if name.startswith('{'):
        uri, local = name[1:].split('}', 1)
        return uri, local
    return None, name


def _namespaces(root):
    """Namespace URIs used by the tree, in first-seen order."""
    uris = []
    for elem in root.iter():
        for name in (elem.tag, *elem.attrib):
            uri, _ = _split(name)
            if uri and uri != XML_NS and uri not in uris:
                uris.append(uri)
    return uris


def to_string(root, default_namespace=None):
    """Serialize an element and its subtree to a str.

    Namespaces are declared once on ``root``. Elements in
    ``default_namespace`` are written without a prefix; attributes never
    use the default namespace.
    """
    prefixes = {XML_NS: 'xml'}
    declarations = []
    for i, uri in enumerate(_namespaces(root)):
        if uri == default_namespace:
            prefixes[uri] = ''
            declarations.append(('xmlns', uri))
        else:
            prefix = PREFIXES.get(uri, f'ns{i}')
            prefixes[uri] = prefix
            declarations.append((f'xmlns:{prefix}', uri))

    def qname(name, is_attr=False):
        uri, local = _split(name)
        if uri is None:
            return local
        prefix = prefixes[uri]
        if not prefix:
            if is_attr:
                raise ValueError(f"attribute {local!r} cannot use the default namespace")
            return local
        return f'{prefix}:{local}'

    out = []

    def write(elem, extra_attrs):
        tag = qname(elem.tag)
        out.append(f'<{tag}')
        for key, value in extra_attrs:
            out.append(f' {key}="{escape_attr(value)}"')
        for key, value in elem.attrib.items():
            out.append(f' {qname(key, is_attr=True)}="{escape_attr(value)}"')
        if elem.text is None and len(elem) == 0:
            out.append('/>')
        else:
            out.append('>')
            if elem.text:
                out.append(escape_text(elem.text))
            for child in elem:
                write(child, ())
            out.append(f'</{tag}>')
        if elem.tail:
            out.append(escape_text(elem.tail))

    write(root, declarations)
    return ''.join(out)


def serialize(root, default_namespace=None):
    """Serialize a part root to UTF-8 bytes with an XML declaration."""
    return (XML_DECLARATION + to_string(root, default_namespace)).encode('utf-8')
