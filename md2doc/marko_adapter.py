from __future__ import annotations
from typing import Union
from marko import Markdown


class MarkoToPandocAdapter:
    """Converts Marko AST to Pandoc-like dict format.

    Every node is ``{"t": kind, "c": content}``. The set of kinds is closed
    (see ``BLOCK_KINDS`` / ``INLINE_KINDS``); consumers dispatch on ``"t"``
    and fall back to a documented default for anything else.
    """

    BLOCK_KINDS = frozenset({
        'Header', 'Para', 'Plain', 'CodeBlock', 'BulletList', 'OrderedList',
        'BlockQuote', 'HorizontalRule', 'RawBlock', 'Table',
    })
    INLINE_KINDS = frozenset({
        'Str', 'Emph', 'Strong', 'Code', 'Link', 'AutoLink', 'Image',
        'Strikeout', 'SoftBreak', 'LineBreak', 'RawInline', 'Span',
    })

    def __init__(self):
        # GFM brings tables, strikethrough, task lists and bare URL autolinks
        self.md = Markdown(extensions=['gfm'])

    def parse(self, markdown_text: str) -> dict:
        """
        Parse markdown and return Pandoc-like AST dict.

        Returns:
            {"pandoc-api-version": [...], "meta": {...}, "blocks": [...]}
        """
        doc = self.md.parse(markdown_text)

        return {
            "pandoc-api-version": [1, 23, 1],  # Compatibility marker
            "meta": {},  # Front matter is handled separately
            "blocks": self._convert_blocks(doc.children),
        }

    def _convert_blocks(self, children, tight=False) -> list:
        blocks = []
        for child in children:
            block = self._convert_block(child, tight=tight)
            if block:
                blocks.append(block)
        return blocks

    def _convert_block(self, element, tight=False) -> Union[dict, None]:
        """Convert a Marko block element to Pandoc dict format."""
        elem_type = type(element).__name__

        if elem_type in ('Heading', 'SetextHeading'):
            return self._convert_heading(element)
        elif elem_type == 'Paragraph':
            return self._convert_paragraph(element, tight)
        elif elem_type == 'List':
            return self._convert_list(element)
        elif elem_type in ('FencedCode', 'CodeBlock'):
            return self._convert_code_block(element)
        elif elem_type == 'Table':
            return self._convert_table(element)
        elif elem_type == 'Quote':
            return {"t": "BlockQuote", "c": self._convert_blocks(element.children)}
        elif elem_type == 'ThematicBreak':
            return {"t": "HorizontalRule"}
        elif elem_type == 'HTMLBlock':
            # Kept as a kind of its own; the .docx translator skips it
            return {"t": "RawBlock", "c": ["html", getattr(element, 'body', '')]}
        elif elem_type in ('BlankLine', 'LinkRefDef', 'FootnoteDef'):
            return None

        # Unknown block type
        return None

    def _convert_heading(self, elem) -> dict:
        """Heading -> {"t": "Header", "c": [level, [id, [], []], inlines]}"""
        inlines = self._convert_children_to_inlines(elem.children)
        level = getattr(elem, 'level', 1)
        return {
            "t": "Header",
            "c": [level, ["", [], []], inlines]
        }

    def _convert_paragraph(self, elem, tight=False) -> dict:
        """Paragraph -> {"t": "Para", "c": [inlines]} ("Plain" inside tight lists)"""
        inlines = self._convert_children_to_inlines(elem.children)
        return {"t": "Plain" if tight else "Para", "c": inlines}

    def _convert_list(self, elem) -> dict:
        """List -> BulletList or OrderedList"""
        tight = bool(getattr(elem, 'tight', False))
        items = []
        for item in elem.children:
            items.append(self._convert_blocks(item.children, tight=tight))

        if getattr(elem, 'ordered', False):
            # OrderedList: [[start, style, delim], items]
            start = getattr(elem, 'start', 1) or 1
            return {
                "t": "OrderedList",
                "c": [[start, {"t": "Decimal"}, {"t": "Period"}], items]
            }
        return {"t": "BulletList", "c": items}

    def _convert_code_block(self, elem) -> dict:
        """FencedCode / CodeBlock -> {"t": "CodeBlock", "c": [[id, classes, attrs], code]}"""
        lang = getattr(elem, 'lang', '') or ''
        code = ''
        for child in elem.children:
            if hasattr(child, 'children'):
                code += child.children
            else:
                code += str(child)
        return {
            "t": "CodeBlock",
            "c": [["", [lang] if lang else [], []], code]
        }

    def _convert_table(self, elem) -> dict:
        """Table -> {"t": "Table", "c": [[cell inlines, ...], ...]} (first row is the header)

        Tables are not rendered into the .docx; the node keeps the kind set
        complete so consumers can skip it by name.
        """
        rows = []
        for row in elem.children:
            if type(row).__name__ != 'TableRow':
                continue
            rows.append([self._convert_children_to_inlines(cell.children) for cell in row.children])
        return {"t": "Table", "c": rows}

    def _convert_children_to_inlines(self, children) -> list:
        """Convert Marko inline children to Pandoc inline list.

        Adjacent text pieces are merged into one Str so that a run of plain
        text is never split at parser-internal boundaries.
        """
        if children is None:
            return []
        if isinstance(children, str):
            return [{"t": "Str", "c": children}] if children else []

        result = []
        for child in children:
            inline = self._convert_inline(child)
            if not inline:
                continue
            if inline['t'] == 'Str' and result and result[-1]['t'] == 'Str':
                result[-1] = {"t": "Str", "c": result[-1]['c'] + inline['c']}
            else:
                result.append(inline)
        return result

    def _convert_inline(self, elem):
        """Convert a Marko inline element to Pandoc inline dict."""
        # Handle bare string children
        if isinstance(elem, str):
            return {"t": "Str", "c": elem} if elem else None

        elem_type = type(elem).__name__

        if elem_type in ('RawText', 'Literal'):
            text = getattr(elem, 'children', '')
            return {"t": "Str", "c": text} if text else None
        elif elem_type == 'Emphasis':
            return {"t": "Emph", "c": self._convert_children_to_inlines(elem.children)}
        elif elem_type == 'StrongEmphasis':
            return {"t": "Strong", "c": self._convert_children_to_inlines(elem.children)}
        elif elem_type == 'Link':
            inlines = self._convert_children_to_inlines(elem.children)
            dest = getattr(elem, 'dest', '')
            title = getattr(elem, 'title', '') or ''
            return {"t": "Link", "c": [["", [], []], inlines, [dest, title]]}
        elif elem_type == 'Image':
            inlines = self._convert_children_to_inlines(elem.children)
            dest = getattr(elem, 'dest', '')
            title = getattr(elem, 'title', '') or ''
            return {"t": "Image", "c": [["", [], []], inlines, [dest, title]]}
        elif elem_type == 'CodeSpan':
            return {"t": "Code", "c": [["", [], []], getattr(elem, 'children', '')]}
        elif elem_type == 'LineBreak':
            return {"t": "SoftBreak"} if getattr(elem, 'soft', False) else {"t": "LineBreak"}
        elif elem_type == 'Strikethrough':
            return {"t": "Strikeout", "c": self._convert_children_to_inlines(elem.children)}
        elif elem_type == 'InlineHTML':
            return {"t": "RawInline", "c": ["html", getattr(elem, 'children', '')]}
        elif elem_type in ('AutoLink', 'Url'):
            return {"t": "AutoLink", "c": getattr(elem, 'dest', '')}

        # Unknown inline type - keep its content reachable
        children = getattr(elem, 'children', None)
        if isinstance(children, str):
            return {"t": "Str", "c": children} if children else None
        if isinstance(children, list):
            return {"t": "Span", "c": self._convert_children_to_inlines(children)}
        return None
