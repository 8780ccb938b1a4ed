""" Exceptions raised while decoding a bridge reply, or while casting the
    decoded values to a concrete Python type.
"""


class BridgeError(Exception):
    """Base class for all decoding errors."""


class ProtocolError(BridgeError):
    """ The reply violates the wire format: an odd number of frames, a header
        missing a required key, or an unknown content kind. A reply raising
        this error yields no records at all.
    """


class CastError(BridgeError, TypeError):
    """Base class for errors raised by the typed accessors."""


class CastMismatch(CastError):
    """A tagged value was requested as a type it does not carry."""


class TypeMismatch(CastError):
    """An array view was requested with an element type it does not carry."""


class SizeMismatch(CastError):
    """The requested element count differs from the actual element count."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
