"""
Custom exception classes for md2doc converters.
"""


class ConvertError(Exception):
    """Base exception for all md2doc errors."""
    pass


class InputError(ConvertError):
    """Markdown source could not be read or decoded."""
    pass


class ParseError(ConvertError):
    """The Markdown parser failed or produced a tree the translator cannot walk."""
    pass


class AssemblyError(ConvertError):
    """A package part could not be serialized or the archive could not be written."""
    pass


class RenderError(ConvertError):
    """The PDF rendering engine failed."""
    pass


class SecurityError(ConvertError):
    """Error related to security validation (size limits, etc.)."""
    pass
