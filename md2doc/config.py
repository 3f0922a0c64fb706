"""
Configuration for md2doc converters.

Per-conversion options (fonts, margins, page size) live on frozen dataclass
instances so they cannot change in the middle of a document walk. The fixed
layout tables and limits shared by every conversion are class-level
constants. Values can be overridden by:
1. Keyword arguments to the config constructors
2. CLI arguments
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import ClassVar, Mapping, Tuple


class _Limits:
    # === Security Limits ===
    MAX_INPUT_FILE_SIZE = 50 * 1024 * 1024  # 50 MB max input file
    MAX_NESTING_DEPTH = 20  # Max recursion for nested lists


@dataclass(frozen=True)
class ConversionConfig(_Limits):
    """Options for Markdown to Word (.docx) conversion.

    Font sizes are in points, margins in inches.
    """

    font_family: str = 'Calibri'
    font_size: float = 11
    code_font_family: str = 'Consolas'
    code_font_size: float = 10

    margin_top: float = 1.0
    margin_bottom: float = 1.0
    margin_left: float = 1.0
    margin_right: float = 1.0

    # Letter, A4 or Legal (case-insensitive)
    page_size: str = 'Letter'

    # === Unit Conversion ===
    TWIPS_PER_INCH: ClassVar[int] = 1440  # 1/20 of a point

    # === Headings (half-points) ===
    HEADING_SIZES: ClassVar[Mapping[int, int]] = MappingProxyType({
        1: 48,  # 24pt
        2: 40,  # 20pt
        3: 32,  # 16pt
        4: 28,  # 14pt
        5: 24,  # 12pt
        6: 22,  # 11pt
    })
    HEADING_SPACING_BEFORE: ClassVar[int] = 240
    HEADING_SPACING_AFTER: ClassVar[int] = 120

    # === Page Sizes (twips, width x height) ===
    PAGE_SIZES: ClassVar[Mapping[str, Tuple[int, int]]] = MappingProxyType({
        'letter': (12240, 15840),  # 8.5in x 11in
        'a4': (11906, 16838),      # 210mm x 297mm
        'legal': (12240, 20160),   # 8.5in x 14in
    })
    DEFAULT_PAGE_SIZE: ClassVar[str] = 'letter'
    HEADER_DISTANCE: ClassVar[int] = 720
    FOOTER_DISTANCE: ClassVar[int] = 720

    # === Paragraph Spacing ===
    PARAGRAPH_SPACING_AFTER: ClassVar[int] = 160

    # === Code Blocks ===
    CODE_BLOCK_FILL: ClassVar[str] = 'F6F8FA'
    CODE_BLOCK_INDENT: ClassVar[int] = 360
    CODE_HIGHLIGHT: ClassVar[str] = 'lightGray'

    # === Lists ===
    LIST_INDENT_BASE: ClassVar[int] = 360
    LIST_INDENT_PER_LEVEL: ClassVar[int] = 360
    LIST_SPACING_AFTER: ClassVar[int] = 80
    LIST_BULLET: ClassVar[str] = '• '

    # === Block Quote ===
    BLOCKQUOTE_LEFT_INDENT: ClassVar[int] = 720
    BLOCKQUOTE_COLOR: ClassVar[str] = '6A737D'
    BLOCKQUOTE_BORDER_COLOR: ClassVar[str] = 'DFE2E5'
    BLOCKQUOTE_BORDER_SIZE: ClassVar[int] = 24

    # === Horizontal Rule ===
    RULE_BORDER_COLOR: ClassVar[str] = 'E1E4E8'
    RULE_BORDER_SIZE: ClassVar[int] = 6
    RULE_SPACING: ClassVar[int] = 240

    # === Link / Image Styling ===
    LINK_COLOR: ClassVar[str] = '0000FF'
    IMAGE_PLACEHOLDER_COLOR: ClassVar[str] = '808080'

    @property
    def body_half_points(self) -> int:
        return int(self.font_size * 2)

    @property
    def code_half_points(self) -> int:
        return int(self.code_font_size * 2)

    def heading_half_points(self, level: int) -> int:
        """Font size for a heading level, clamping the level to 1..6."""
        level = min(max(level, 1), 6)
        return self.HEADING_SIZES[level]

    def page_dimensions(self) -> Tuple[int, int]:
        """Page width and height in twips; unknown names fall back to Letter."""
        key = (self.page_size or '').strip().lower()
        return self.PAGE_SIZES.get(key, self.PAGE_SIZES[self.DEFAULT_PAGE_SIZE])

    def margins_twips(self) -> dict:
        return {
            'top': int(self.margin_top * self.TWIPS_PER_INCH),
            'bottom': int(self.margin_bottom * self.TWIPS_PER_INCH),
            'left': int(self.margin_left * self.TWIPS_PER_INCH),
            'right': int(self.margin_right * self.TWIPS_PER_INCH),
        }


@dataclass(frozen=True)
class PdfConfig(_Limits):
    """Options for Markdown to PDF conversion.

    Margins are in millimetres.
    """

    # A3, A4, A5, Letter, Legal or Tabloid (case-insensitive)
    paper_size: str = 'A4'

    margin_top: float = 15
    margin_bottom: float = 15
    margin_left: float = 15
    margin_right: float = 15

    print_background: bool = True
    landscape: bool = False

    # Extra stylesheet appended after the built-in one
    custom_css: str = ''

    MM_PER_INCH: ClassVar[float] = 25.4

    # === Paper Sizes (inches, width x height) ===
    PAPER_SIZES: ClassVar[Mapping[str, Tuple[float, float]]] = MappingProxyType({
        'a3': (11.69, 16.54),
        'a4': (8.27, 11.69),
        'a5': (5.83, 8.27),
        'letter': (8.5, 11),
        'legal': (8.5, 14),
        'tabloid': (11, 17),
    })
    DEFAULT_PAPER_SIZE: ClassVar[str] = 'a4'

    # === Rendering ===
    RENDER_TIMEOUT_MS: ClassVar[int] = 60 * 1000
    HIGHLIGHT_STYLE: ClassVar[str] = 'default'

    def paper_dimensions(self) -> Tuple[float, float]:
        """Paper width and height in inches; unknown names fall back to A4."""
        key = (self.paper_size or '').strip().lower()
        return self.PAPER_SIZES.get(key, self.PAPER_SIZES[self.DEFAULT_PAPER_SIZE])

    def margins_inches(self) -> dict:
        return {
            'top': self.margin_top / self.MM_PER_INCH,
            'bottom': self.margin_bottom / self.MM_PER_INCH,
            'left': self.margin_left / self.MM_PER_INCH,
            'right': self.margin_right / self.MM_PER_INCH,
        }


# Global default config instances
DEFAULT_CONFIG = ConversionConfig()
DEFAULT_PDF_CONFIG = PdfConfig()
