""" Dissection of a multipart bridge reply. A reply is an ordered sequence of
    (header, payload) frame pairs; each header is a msgpack map announcing
    the source and the kind of content carried by the payload that follows.

    Record pairs:
        header  {source, content='msgpack', metadata}
        payload msgpack map of field name to value

    Array pairs:
        header  {source, content='array' or 'ImageData', path, shape, dtype}
        payload raw array bytes
"""

import logging

from . import fields
from . import record
from . import value
from .array import ArrayView
from .errors import CastMismatch, ProtocolError, SizeMismatch

logger = logging.getLogger(__name__)


def pairs(frames):
    """ Return the list of (header, payload) tuples for the *frames* of one
        reply, in their original order.
    """

    frames = list(frames)

    if len(frames) % 2:
        raise ProtocolError('odd frame count: %d' % (len(frames)))

    return list(zip(frames[0::2], frames[1::2]))


class Header:
    """ The decoded header *frame* of one pair. The :class:`Tree` for the
        header is retained as :attr:`tree`, the metadata values of a record
        header refer to it.

        :ivar source: The source identifier.
        :ivar content: The content kind of the paired payload.
        :ivar metadata: A map :class:`Value` for record headers, otherwise None.
        :ivar path: The array destination key for array headers.
        :ivar shape: Tuple of array dimensions for array headers.
        :ivar dtype: Declared array element type for array headers.
    """

    def __init__(self, frame):

        self.frame = frame
        self.tree = value.Tree(frame)

        root = self.tree.root

        if root.kind != value.MAP:
            raise ProtocolError('header is a msgpack ' + root.kind + ', not a map')

        self.root = root
        self.source = self._string(fields.SOURCE)
        self.content = self._string(fields.CONTENT)

        self.metadata = None
        self.path = None
        self.shape = None
        self.dtype = None

        if self.content == fields.RECORD:
            metadata = self._require(fields.METADATA)
            if metadata.kind != value.MAP:
                raise ProtocolError('header key ' + repr(fields.METADATA) + ' is not a map')
            self.metadata = metadata

        elif self.content in fields.ARRAY_KINDS:
            self.path = self._string(fields.PATH)
            self.dtype = self._string(fields.DTYPE)

            shape = self._require(fields.SHAPE)
            if shape.kind != value.ARRAY:
                raise ProtocolError('header key ' + repr(fields.SHAPE) + ' is not an array')

            dimensions = list()
            for dimension in shape:
                if dimension.kind != value.UINT:
                    raise ProtocolError('array dimensions must be unsigned integers, not ' + dimension.dtype)
                dimensions.append(dimension.cast('uint64'))

            self.shape = tuple(dimensions)

        else:
            raise ProtocolError('unknown content kind: ' + repr(self.content))


    def _require(self, key):

        found = self.root.get(key)

        if found is None:
            raise ProtocolError('header is missing required key ' + repr(key))

        return found


    def _string(self, key):

        found = self._require(key)

        if found.kind != value.STR:
            raise ProtocolError('header key ' + repr(key) + ' must be a string, not ' + found.dtype)

        try:
            return found.cast(str)
        except CastMismatch as e:
            raise ProtocolError('header key ' + repr(key) + ' is not valid UTF-8') from e


# end of class Header



def decode(frames):
    """ Decode the *frames* of one reply, returning a dictionary of
        :class:`SourceRecord` instances keyed by source. An empty reply
        yields an empty dictionary. Any structural violation raises
        :class:`ProtocolError`, in which case nothing is returned.
    """

    frames = list(frames)
    aggregator = record.Aggregator()

    for header_frame, payload_frame in pairs(frames):
        header = Header(header_frame)

        if header.content == fields.RECORD:
            current = aggregator.begin(header.source)
            current.adopt(header_frame, header.tree)

            payload = value.Tree(payload_frame)
            if payload.root.kind != value.MAP:
                raise ProtocolError('record payload for ' + header.source + ' is a msgpack ' + payload.root.kind + ', not a map')

            current.adopt(payload_frame, payload)
            current.metadata = dict(header.metadata.items())
            current.fields.update(payload.root.items())

        else:
            current = aggregator.record(header.source)
            current.adopt(header_frame, header.tree)

            try:
                view = ArrayView(payload_frame, header.shape, header.dtype)
            except (SizeMismatch, OverflowError) as e:
                raise ProtocolError('array ' + repr(header.path) + ' from ' + header.source + ': ' + str(e)) from e

            current.adopt(payload_frame)
            current.arrays[header.path] = view

        aggregator.source = header.source

    records = aggregator.finish()
    logger.debug("decoded %d frames into %d records", len(frames), len(records))
    return records


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
