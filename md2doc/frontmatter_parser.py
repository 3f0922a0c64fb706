"""
YAML front matter parser using python-frontmatter.
"""

import frontmatter
import yaml

from .exceptions import InputError


def parse_markdown_string_with_frontmatter(markdown_text: str) -> tuple[dict, str]:
    """
    Parse a Markdown string with YAML front matter.

    A leading ``---`` block only counts as front matter when it holds a
    non-empty YAML mapping; anything else is left in place for the Markdown
    parser (it is then a thematic break, a setext heading, ...).

    Args:
        markdown_text: Markdown content as string

    Returns:
        (metadata_dict, markdown_content_without_frontmatter)
    """
    try:
        post = frontmatter.loads(markdown_text)
    except yaml.YAMLError as e:
        raise InputError(f"failed to read front matter: {e}") from e

    if not post.metadata:
        return {}, markdown_text

    return dict(post.metadata), post.content


def metadata_to_properties(metadata: dict) -> dict:
    """
    Convert front matter metadata to document property strings.

    Input:  {"title": "Doc", "author": ["A", "B"], "keywords": ["x", "y"]}
    Output: {"title": "Doc", "author": "A; B", "subject": "", "keywords": "x, y"}

    Args:
        metadata: Dictionary of metadata from front matter

    Returns:
        Dictionary with the keys title, author, subject and keywords
    """
    return {
        'title': _to_text(metadata.get('title')),
        'author': _to_text(metadata.get('author'), separator='; '),
        'subject': _to_text(metadata.get('subject')),
        'keywords': _to_text(metadata.get('keywords'), separator=', '),
    }


def _to_text(value, separator=' ') -> str:
    if value is None:
        return ''
    if isinstance(value, (list, tuple)):
        return separator.join(_to_text(v) for v in value if v is not None)
    if isinstance(value, dict):
        # e.g. author: {name: ..., email: ...}
        return _to_text(value.get('name', ''))
    return str(value).strip()
