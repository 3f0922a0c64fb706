import re
import logging
import xml.etree.ElementTree as ET

from .config import DEFAULT_CONFIG
from .docx_package import DocxPackage
from .exceptions import ParseError
from .marko_adapter import MarkoToPandocAdapter
from .runs import NS_W, Fragment, RunStyle

logger = logging.getLogger('md2doc')

XML_SPACE = '{http://www.w3.org/XML/1998/namespace}space'

_WHITESPACE_RE = re.compile(r'\s+')


class MarkdownToDocx:
    """Walks the Pandoc-like block tree and emits one Fragment per output paragraph.

    A converter instance is good for one conversion: ``fragments`` is
    created empty and only ever appended to while the tree is walked.
    """

    def __init__(self, json_ast=None, config=None):
        self.ast = json_ast
        self.config = config if config is not None else DEFAULT_CONFIG
        self.fragments = []

    @staticmethod
    def convert_to_docx(markdown_text, output, config=None, properties=None):
        """
        Convert Markdown text to a .docx archive.

        Args:
            markdown_text: Markdown source (front matter already removed)
            output: Output .docx path or a writable binary file object
            config: Optional ConversionConfig instance
            properties: Optional document properties (title, author, ...)

        Returns:
            The list of body Fragments written to the document.
        """
        if config is None:
            config = DEFAULT_CONFIG

        # 1. Parse
        try:
            json_ast = MarkoToPandocAdapter().parse(markdown_text)
        except Exception as e:
            raise ParseError(f"failed to parse markdown: {e}") from e

        # 2. Translate
        converter = MarkdownToDocx(json_ast, config)
        fragments = converter.convert()

        # 3. Assemble and write
        DocxPackage(fragments, config, properties).write(output)

        logger.info("Successfully created %s", getattr(output, 'name', output))
        return fragments

    def convert(self):
        blocks = self.ast.get('blocks', [])
        try:
            self._process_blocks(blocks)
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            raise ParseError(f"failed to translate document tree: {e!r}") from e
        return self.fragments

    def _process_blocks(self, blocks):
        for block in blocks:
            b_type = block.get('t')
            b_content = block.get('c')

            if b_type == 'Header':
                self._handle_header(b_content)
            elif b_type in ('Para', 'Plain'):
                self._handle_para(b_content)
            elif b_type == 'CodeBlock':
                self._handle_code_block(b_content)
            elif b_type == 'BulletList':
                self._handle_list(b_content, ordered=False, level=0)
            elif b_type == 'OrderedList':
                self._handle_list(b_content[1], ordered=True, level=0)
            elif b_type == 'BlockQuote':
                self._handle_blockquote(b_content)
            elif b_type == 'HorizontalRule':
                self._handle_horizontal_rule()
            else:
                # Raw HTML, tables and anything newer are left out
                logger.debug("Skipping unsupported block: %s", b_type)

    def _append(self, kind, para):
        self.fragments.append(Fragment(kind, para))

    # --- XML Element Builder Helpers ---

    def _make_elem(self, tag, attrib=None):
        """Create element in the WordprocessingML namespace."""
        return ET.Element(f'{{{NS_W}}}{tag}', self._w_attrib(attrib))

    def _add_elem(self, parent, tag, attrib=None):
        """Add child element to parent."""
        return ET.SubElement(parent, f'{{{NS_W}}}{tag}', self._w_attrib(attrib))

    @staticmethod
    def _w_attrib(attrib):
        if not attrib:
            return {}
        return {f'{{{NS_W}}}{k}': str(v) for k, v in attrib.items()}

    # --- Paragraph/Run Element Creators ---
    # pPr and rPr children are added in schema order.

    def _create_para_elem(self, border=None, shading=None, spacing=None, indent=None):
        """Create paragraph element with its properties.

        Args:
            border: (side, attrs) for a single pBdr edge
            shading: attrs for w:shd
            spacing: attrs for w:spacing
            indent: left indent in twips
        """
        para = self._make_elem('p')
        if border or shading or spacing or indent is not None:
            ppr = self._add_elem(para, 'pPr')
            if border:
                side, attrs = border
                pbdr = self._add_elem(ppr, 'pBdr')
                self._add_elem(pbdr, side, attrs)
            if shading:
                self._add_elem(ppr, 'shd', shading)
            if spacing:
                self._add_elem(ppr, 'spacing', spacing)
            if indent is not None:
                self._add_elem(ppr, 'ind', {'left': indent})
        return para

    def _create_run_elem(self, text, size, bold=False, italic=False, color=None,
                         underline=False, highlight=None, font=None):
        """Create run element containing text."""
        run = self._make_elem('r')
        rpr = self._add_elem(run, 'rPr')
        if font:
            self._add_elem(rpr, 'rFonts', {'ascii': font, 'hAnsi': font})
        if bold:
            self._add_elem(rpr, 'b')
        if italic:
            self._add_elem(rpr, 'i')
        if color:
            self._add_elem(rpr, 'color', {'val': color})
        self._add_elem(rpr, 'sz', {'val': size})
        self._add_elem(rpr, 'szCs', {'val': size})
        if highlight:
            self._add_elem(rpr, 'highlight', {'val': highlight})
        if underline:
            self._add_elem(rpr, 'u', {'val': 'single'})

        t_elem = self._add_elem(run, 't')
        t_elem.set(XML_SPACE, 'preserve')
        t_elem.text = text
        return run

    def _append_runs(self, para, runs, size):
        """Serialize styled runs into the paragraph."""
        for run in runs:
            if run.code:
                para.append(self._create_run_elem(
                    run.text, self.config.code_half_points,
                    bold=run.bold, italic=run.italic, color=run.color,
                    underline=run.link,
                    highlight=self.config.CODE_HIGHLIGHT if run.highlight else None,
                    font=self.config.code_font_family,
                ))
            else:
                para.append(self._create_run_elem(
                    run.text, size,
                    bold=run.bold, italic=run.italic, color=run.color,
                    underline=run.link,
                    highlight=self.config.CODE_HIGHLIGHT if run.highlight else None,
                ))

    # --- Block Handlers ---

    def _handle_header(self, content):
        level = min(max(int(content[0]), 1), 6)
        text = self._get_plain_text(content[2])
        size = self.config.heading_half_points(level)

        para = self._create_para_elem(spacing={
            'after': self.config.HEADING_SPACING_AFTER,
            'before': self.config.HEADING_SPACING_BEFORE,
        })
        para.append(self._create_run_elem(text, size, bold=True))
        self._append('heading', para)

    def _handle_para(self, content):
        runs = self._process_inlines(content)
        para = self._create_para_elem(spacing={'after': self.config.PARAGRAPH_SPACING_AFTER})
        self._append_runs(para, runs, self.config.body_half_points)
        self._append('paragraph', para)

    def _handle_code_block(self, content):
        # content = [[id, classes, attrs], code]
        code = content[1].rstrip('\n')
        size = self.config.code_half_points

        for line in code.split('\n'):
            if line == '':
                line = ' '
            para = self._create_para_elem(
                shading={'val': 'clear', 'color': 'auto', 'fill': self.config.CODE_BLOCK_FILL},
                spacing={'after': 0},
                indent=self.config.CODE_BLOCK_INDENT,
            )
            para.append(self._create_run_elem(line, size, font=self.config.code_font_family))
            self._append('code', para)

        # Spacing after code block
        self._append('spacer', self._create_para_elem(
            spacing={'after': self.config.PARAGRAPH_SPACING_AFTER}
        ))

    def _handle_list(self, items, ordered, level):
        """Emit every item of a list; the ordinal restarts at 1 for each list."""
        if level >= self.config.MAX_NESTING_DEPTH:
            logger.warning("List nesting depth limit reached (%d). Flattening.",
                           self.config.MAX_NESTING_DEPTH)
            level = self.config.MAX_NESTING_DEPTH - 1

        item_num = 1
        for item_blocks in items:
            self._handle_list_item(item_blocks, level, ordered, item_num)
            if ordered:
                item_num += 1

    def _handle_list_item(self, item_blocks, level, ordered, item_num):
        """Emit one list item.

        Only the text before the first nested list belongs to the item: the
        nested list is emitted right after the item and the rest of the
        item's blocks are not visited.
        """
        content_runs = []
        for block in item_blocks:
            b_type = block.get('t')
            if b_type in ('Plain', 'Para'):
                content_runs.extend(self._process_inlines(block.get('c')))
            elif b_type in ('BulletList', 'OrderedList'):
                self._emit_list_item(content_runs, level, ordered, item_num)
                if b_type == 'OrderedList':
                    self._handle_list(block['c'][1], ordered=True, level=level + 1)
                else:
                    self._handle_list(block['c'], ordered=False, level=level + 1)
                return

        self._emit_list_item(content_runs, level, ordered, item_num)

    def _emit_list_item(self, content_runs, level, ordered, item_num):
        indent = self.config.LIST_INDENT_BASE + level * self.config.LIST_INDENT_PER_LEVEL
        size = self.config.body_half_points
        bullet = f"{item_num}. " if ordered else self.config.LIST_BULLET

        para = self._create_para_elem(
            spacing={'after': self.config.LIST_SPACING_AFTER},
            indent=indent,
        )
        para.append(self._create_run_elem(bullet, size))
        self._append_runs(para, content_runs, size)
        self._append('list_item', para)

    def _handle_blockquote(self, content):
        """Handle block quote block.

        Each direct paragraph becomes an indented, left-bordered paragraph
        whose runs are all italic and muted. Other nested blocks are not
        rendered.
        """
        for block in content:
            if block.get('t') != 'Para':
                continue
            runs = [
                run.restyled(italic=True, color=self.config.BLOCKQUOTE_COLOR)
                for run in self._process_inlines(block.get('c'))
            ]
            para = self._create_para_elem(
                border=('left', {
                    'val': 'single',
                    'sz': self.config.BLOCKQUOTE_BORDER_SIZE,
                    'space': 4,
                    'color': self.config.BLOCKQUOTE_BORDER_COLOR,
                }),
                spacing={'after': self.config.PARAGRAPH_SPACING_AFTER},
                indent=self.config.BLOCKQUOTE_LEFT_INDENT,
            )
            self._append_runs(para, runs, self.config.body_half_points)
            self._append('blockquote', para)

    def _handle_horizontal_rule(self):
        para = self._create_para_elem(
            border=('bottom', {
                'val': 'single',
                'sz': self.config.RULE_BORDER_SIZE,
                'space': 1,
                'color': self.config.RULE_BORDER_COLOR,
            }),
            spacing={'before': self.config.RULE_SPACING, 'after': self.config.RULE_SPACING},
        )
        self._append('rule', para)

    # --- Inline Handling ---

    def _process_inlines(self, inlines):
        """Flatten inline nodes into an ordered list of RunStyle values."""
        runs = []
        if not inlines:
            return runs

        for item in inlines:
            i_type = item.get('t')
            i_content = item.get('c')

            if i_type == 'Str':
                runs.append(RunStyle(i_content))

            elif i_type in ('SoftBreak', 'LineBreak'):
                runs.append(RunStyle(' '))

            elif i_type == 'Emph':
                runs.append(RunStyle(self._get_plain_text(i_content), italic=True))

            elif i_type == 'Strong':
                runs.append(RunStyle(self._get_plain_text(i_content), bold=True))

            elif i_type == 'Code':
                runs.append(RunStyle(self._get_plain_text([item]), code=True, highlight=True))

            elif i_type == 'Link':
                runs.append(RunStyle(
                    self._get_plain_text(i_content[1]),
                    link=True, link_url=i_content[2][0], color=self.config.LINK_COLOR,
                ))

            elif i_type == 'AutoLink':
                runs.append(RunStyle(i_content, link=True, link_url=i_content,
                                     color=self.config.LINK_COLOR))

            elif i_type == 'Image':
                alt_text = self._get_plain_text(i_content[1]) or 'Image'
                runs.append(RunStyle(f"[{alt_text}]", italic=True,
                                     color=self.config.IMAGE_PLACEHOLDER_COLOR))

            elif self._has_inline_children(i_content):
                # Strikeout, Span and other wrappers
                runs.extend(self._process_inlines(i_content))

        return runs

    @staticmethod
    def _has_inline_children(content):
        return isinstance(content, list) and all(isinstance(c, dict) for c in content)

    def _get_plain_text(self, inlines):
        """Literal text of the inlines with whitespace collapsed and ends trimmed."""
        text = _WHITESPACE_RE.sub(' ', self._collect_text(inlines))
        return text.strip()

    def _collect_text(self, inlines):
        if not isinstance(inlines, list):
            return ""
        text = []
        for item in inlines:
            t = item.get('t')
            c = item.get('c')
            if t == 'Str':
                text.append(c)
            elif t in ('SoftBreak', 'LineBreak'):
                text.append(" ")
            elif t == 'Code':
                text.append(c[1])
            elif t == 'AutoLink':
                text.append(c)
            elif t in ('Link', 'Image'):
                # c = [attr, [text], [url, title]]
                text.append(self._collect_text(c[1]))
            elif self._has_inline_children(c):
                text.append(self._collect_text(c))
        return "".join(text)
