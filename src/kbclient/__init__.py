""" Python client for a data bridge serving detector data over ZeroMQ. Each
    request for the next train of data is answered with a multipart reply,
    which is decoded into one :class:`SourceRecord` per source: metadata,
    structured fields, and zero-copy numpy views of the array payloads.
"""

__version__ = '0.2.0'

# Decoding of replies, independent of how they were received.

from . import protocol

# Transports, and the request/reply session built on them.

from . import transport

# Primary public-facing interfaces.

from .transport.session import Client

from .protocol import (
    ArrayView,
    SourceRecord,
    Value,
    BridgeError,
    ProtocolError,
    CastError,
    CastMismatch,
    TypeMismatch,
    SizeMismatch,
)

from .transport import (
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
