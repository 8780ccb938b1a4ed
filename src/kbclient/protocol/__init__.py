from . import errors
from . import fields
from . import dtype
from . import value
from . import array
from . import record
from . import frames
from . import trace

from .errors import (
    BridgeError,
    ProtocolError,
    CastError,
    CastMismatch,
    TypeMismatch,
    SizeMismatch,
)
from .array import ArrayView
from .record import SourceRecord
from .value import Value


"""
Bridge Protocol Layer
=====================

This package decodes the multipart replies of a data bridge into typed,
per-source records. It has no knowledge of how the frames were received.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Session (transport/session.py)
    Issues 'next' requests, hands each reply to decode()

    │
    ▼
Frame Dissection (frames.py)
    - pairs(): (header, payload) grouping, evenness check
    - Header: required keys, content kind
    - decode(): dispatch by content kind

    │
    ▼
Record Aggregation (record.py)
    Record boundaries, ownership of frames and trees

    │
    ▼
Typed Access (value.py, array.py)
    - Value: deferred msgpack decoding, strict casts
    - ArrayView: zero-copy numpy views over raw frames

    │
    ▼
Field Vocabulary (fields.py, dtype.py)
    Canonical names for header keys, content kinds, element types

---------------------------------------------------------------------

Design Principles
-----------------

1. No Implicit Conversion
   A value is returned only as exactly the type it carries.

2. Deferred Failure
   Type errors surface when a specific value is cast, never while a reply
   is being decoded; structural errors surface immediately.

3. Zero Copy
   Array payloads are aliased, not copied, until a caller asks for a copy.

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
