"""
Style/Run model and output fragments for the Word converter.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, replace
from typing import Optional

from .xmlwriter import NS_W, to_string


@dataclass(frozen=True)
class RunStyle:
    """One run of inline text sharing a single set of style attributes."""

    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False        # monospace font at the code size
    link: bool = False
    link_url: Optional[str] = None
    color: Optional[str] = None  # hex, e.g. '0000FF'
    highlight: bool = False

    def restyled(self, **changes) -> RunStyle:
        return replace(self, **changes)


@dataclass(frozen=True)
class Fragment:
    """A paragraph-equivalent unit of document body markup.

    ``kind`` names the block it came from ('heading', 'paragraph',
    'code', 'spacer', 'list_item', 'blockquote', 'rule'). The element is
    never modified once the fragment exists.
    """

    kind: str
    element: ET.Element

    @property
    def text(self) -> str:
        """Concatenated text of every ``w:t`` in the paragraph."""
        return ''.join(t.text or '' for t in self.element.iter(f'{{{NS_W}}}t'))

    def to_xml(self) -> str:
        return to_string(self.element)
