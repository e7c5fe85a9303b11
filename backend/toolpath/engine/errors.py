"""Fatal conversion errors.

Anything raised from here aborts the whole conversion. Recoverable problems go
through the diagnostics sink instead (see diagnostics.py).
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for errors that abort a conversion."""


class SvgParseError(ConversionError):
    """The markup could not be parsed into a document tree."""


class AttributeSyntaxError(ConversionError, ValueError):
    """A present attribute value (viewBox, preserveAspectRatio, transform) is malformed."""

    def __init__(self, attribute: str, value: str, reason: str = "") -> None:
        self.attribute = attribute
        self.value = value
        message = f"could not parse {attribute}: {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class PathDataError(ConversionError, ValueError):
    """Path data in a `d` attribute is malformed."""


class ReferenceCycleError(ConversionError):
    """A <use> element ended up expanding itself."""
