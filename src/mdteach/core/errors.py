"""Conversion error hierarchy"""


class ConversionError(RuntimeError):
    """Base class for fatal conversion failures."""


class MalformedEventStreamError(ConversionError):
    """Enter/leave events out of order, unbalanced, or a list item outside a list."""


class UnsupportedEventError(ConversionError):
    """Block, span, text or token kind the compiler does not handle."""


class NullCharacterError(ConversionError):
    """The source document contains a NUL character."""


class SinkError(ConversionError):
    """The destination rejected a flush."""
