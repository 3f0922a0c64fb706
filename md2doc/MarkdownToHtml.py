import html

from marko import Markdown
from marko.helpers import MarkoExtension
from pygments.formatters import HtmlFormatter

from .config import DEFAULT_PDF_CONFIG
from .exceptions import ParseError

DEFAULT_CSS = """
* {
    box-sizing: border-box;
}
body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Roboto', 'Oxygen', 'Ubuntu', 'Cantarell', 'Fira Sans', 'Droid Sans', 'Helvetica Neue', sans-serif;
    font-size: 14px;
    line-height: 1.6;
    color: #333;
    max-width: 100%;
    padding: 0;
    margin: 0;
}
h1, h2, h3, h4, h5, h6 {
    margin-top: 24px;
    margin-bottom: 16px;
    font-weight: 600;
    line-height: 1.25;
}
h1 { font-size: 2em; border-bottom: 1px solid #eaecef; padding-bottom: 0.3em; }
h2 { font-size: 1.5em; border-bottom: 1px solid #eaecef; padding-bottom: 0.3em; }
h3 { font-size: 1.25em; }
h4 { font-size: 1em; }
h5 { font-size: 0.875em; }
h6 { font-size: 0.85em; color: #6a737d; }
p { margin-top: 0; margin-bottom: 16px; }
a { color: #0366d6; text-decoration: none; }
code {
    font-family: 'SFMono-Regular', Consolas, 'Liberation Mono', Menlo, monospace;
    font-size: 85%;
    background-color: rgba(27, 31, 35, 0.05);
    padding: 0.2em 0.4em;
    border-radius: 3px;
}
pre, .highlight pre {
    font-family: 'SFMono-Regular', Consolas, 'Liberation Mono', Menlo, monospace;
    font-size: 85%;
    background-color: #f6f8fa;
    border-radius: 6px;
    padding: 16px;
    overflow: auto;
    line-height: 1.45;
    margin-bottom: 16px;
}
pre code { background-color: transparent; padding: 0; font-size: 100%; }
blockquote {
    margin: 0 0 16px 0;
    padding: 0 1em;
    color: #6a737d;
    border-left: 0.25em solid #dfe2e5;
}
ul, ol { margin-top: 0; margin-bottom: 16px; padding-left: 2em; }
li { margin-bottom: 4px; }
li + li { margin-top: 0.25em; }
table { border-collapse: collapse; border-spacing: 0; margin-bottom: 16px; width: 100%; }
table th, table td { padding: 6px 13px; border: 1px solid #dfe2e5; }
table th { font-weight: 600; background-color: #f6f8fa; }
table tr:nth-child(2n) { background-color: #f6f8fa; }
hr { height: 0.25em; padding: 0; margin: 24px 0; background-color: #e1e4e8; border: 0; }
img { max-width: 100%; height: auto; }
.task-list-item { list-style-type: none; }
.task-list-item input { margin-right: 0.5em; }
"""


class HardWrapRendererMixin:
    """Soft line breaks print as <br /> instead of joining the lines."""

    def render_line_break(self, element):
        if element.soft:
            return "<br />\n"
        return super().render_line_break(element)


HARD_WRAP = MarkoExtension(renderer_mixins=[HardWrapRendererMixin])


class MarkdownToHtml:
    """Renders Markdown to a standalone, styled HTML document."""

    def __init__(self, config=None, title=None):
        self.config = config if config is not None else DEFAULT_PDF_CONFIG
        self.title = title
        # codehilite highlights fenced code through Pygments; raw HTML passes through
        self.md = Markdown(extensions=['gfm', 'codehilite', HARD_WRAP])

    @staticmethod
    def convert_to_html(markdown_text, config=None, title=None):
        """Convert Markdown text to a full HTML document string."""
        return MarkdownToHtml(config, title).convert(markdown_text)

    def convert(self, markdown_text):
        try:
            body_content = self.md.convert(markdown_text)
        except Exception as e:
            raise ParseError(f"failed to convert markdown to HTML: {e}") from e
        return self.wrap_html(body_content)

    def stylesheet(self):
        """Built-in CSS, then highlight CSS, then the user's CSS."""
        highlight_css = HtmlFormatter(style=self.config.HIGHLIGHT_STYLE).get_style_defs('.highlight')
        return "\n".join(css for css in (DEFAULT_CSS, highlight_css, self.config.custom_css) if css)

    def wrap_html(self, content):
        title = html.escape(self.title) if self.title else "Document"
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title}</title>
<style>
{self.stylesheet()}
</style>
</head>
<body>
{content}
</body>
</html>"""
