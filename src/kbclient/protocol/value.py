""" Deferred decoding of msgpack frames. A :class:`Tree` walks the encoded
    bytes of one frame exactly once, recording where each node starts and
    ends and what kind of node it is; a :class:`Value` is a handle to one of
    those nodes. Scalar leaves are only decoded when :func:`Value.cast` is
    invoked.

    The indexing pass feeds the frame through a msgpack unpacker, which
    buffers its own transient copy; once the index is built that copy is
    discarded, and binary leaves are served straight from the frame.
"""

import collections
import collections.abc

import msgpack
import numpy

from . import dtype
from .errors import CastMismatch, ProtocolError, SizeMismatch


# Node kinds. These mirror the msgpack type system, with the integers split
# by sign the same way the reference msgpack implementation does.

NIL = 'nil'
BOOL = 'bool'
UINT = 'uint'
INT = 'int'
FLOAT32 = 'float32'
FLOAT64 = 'float64'
STR = 'str'
BIN = 'bin'
ARRAY = 'array'
MAP = 'map'
EXT = 'ext'

ARRAY_LIKE = 'array-like'

# The canonical dtype reported for each scalar node kind.

scalar_dtypes = dict()
scalar_dtypes[NIL] = dtype.NIL
scalar_dtypes[BOOL] = 'bool'
scalar_dtypes[UINT] = 'uint64'
scalar_dtypes[INT] = 'int64'
scalar_dtypes[FLOAT32] = 'float32'
scalar_dtypes[FLOAT64] = 'float64'
scalar_dtypes[STR] = dtype.STR
scalar_dtypes[EXT] = dtype.EXT


def _classify(marker):
    """ Return the node kind for the msgpack format byte *marker*.
    """

    if marker <= 0x7f:
        return UINT
    if marker <= 0x8f:
        return MAP
    if marker <= 0x9f:
        return ARRAY
    if marker <= 0xbf:
        return STR
    if marker >= 0xe0:
        return INT

    try:
        return _markers[marker]
    except KeyError:
        raise ProtocolError('invalid msgpack format byte: 0x%02x' % (marker))


_markers = dict()
_markers[0xc0] = NIL
_markers[0xc2] = BOOL
_markers[0xc3] = BOOL
_markers[0xca] = FLOAT32
_markers[0xcb] = FLOAT64
_markers[0xdc] = ARRAY
_markers[0xdd] = ARRAY
_markers[0xde] = MAP
_markers[0xdf] = MAP

for _marker in (0xc4, 0xc5, 0xc6):
    _markers[_marker] = BIN
for _marker in (0xc7, 0xc8, 0xc9, 0xd4, 0xd5, 0xd6, 0xd7, 0xd8):
    _markers[_marker] = EXT
for _marker in (0xcc, 0xcd, 0xce, 0xcf):
    _markers[_marker] = UINT
for _marker in (0xd0, 0xd1, 0xd2, 0xd3):
    _markers[_marker] = INT
for _marker in (0xd9, 0xda, 0xdb):
    _markers[_marker] = STR

# Length of the bin8/bin16/bin32 headers preceding the raw bytes.

_bin_header = {0xc4: 2, 0xc5: 3, 0xc6: 5}

# Deepest container nesting accepted in a frame.

max_depth = 256


# Node kinds that cannot be elements of a cast array-like.

_not_elements = (ARRAY, MAP, BIN, EXT)


Node = collections.namedtuple('Node', ('kind', 'start', 'end', 'count', 'keys', 'children'))


class Tree:
    """ The index of a single msgpack-encoded *frame*. The frame is retained
        for the lifetime of the :class:`Tree`, and every :class:`Value`
        derived from the tree retains the tree; no node ever refers to bytes
        that have been released.

        :ivar frame: The object that owns the encoded bytes.
        :ivar root: A :class:`Value` for the top-level node.
    """

    def __init__(self, frame):

        self.frame = frame
        self.memory = memoryview(frame).cast('B')
        length = len(self.memory)

        if length == 0:
            raise ProtocolError('cannot decode an empty msgpack frame')

        unpacker = msgpack.Unpacker(raw=False, strict_map_key=False,
                                    max_buffer_size=max(length, 1024))
        unpacker.feed(self.memory)

        try:
            node = self._index(unpacker, 0)
        except msgpack.UnpackException as e:
            raise ProtocolError('malformed msgpack frame: ' + str(e)) from e
        except ValueError as e:
            raise ProtocolError('malformed msgpack frame: ' + str(e)) from e
        except TypeError as e:
            # Raised by the unpacker for container map keys.
            raise ProtocolError('malformed msgpack frame: ' + str(e)) from e

        if node.end != length:
            raise ProtocolError('%d trailing bytes after msgpack frame' % (length - node.end))

        self.root = Value(self, node)


    def __len__(self):
        return len(self.memory)


    def _index(self, unpacker, depth):
        """ Record the node starting at the current position of the
            *unpacker*, recursing into containers. Map keys are decoded
            immediately, they are needed to navigate the tree.
        """

        start = unpacker.tell()

        try:
            marker = self.memory[start]
        except IndexError:
            raise ProtocolError('truncated msgpack frame')

        kind = _classify(marker)
        keys = None
        children = None

        if kind in (ARRAY, MAP) and depth >= max_depth:
            raise ProtocolError('msgpack containers nested deeper than ' + str(max_depth) + ' levels')

        if kind == ARRAY:
            count = unpacker.read_array_header()
            children = list()
            for index in range(count):
                children.append(self._index(unpacker, depth + 1))
            children = tuple(children)
        elif kind == MAP:
            count = unpacker.read_map_header()
            keys = list()
            children = list()
            for index in range(count):
                keys.append(unpacker.unpack())
                children.append(self._index(unpacker, depth + 1))
            keys = tuple(keys)
            children = tuple(children)
        else:
            unpacker.skip()
            count = 0

        end = unpacker.tell()

        if kind == BIN:
            count = end - start - _bin_header[marker]
        elif kind == INT and marker < 0xe0:
            # Non-negative values packed with a signed format are reported
            # as unsigned, the same as any other msgpack decoder would.
            if self.decode(start, end) >= 0:
                kind = UINT

        return Node(kind, start, end, count, keys, children)


    def decode(self, start, end):
        """ Fully decode the bytes between *start* and *end*.
        """

        return msgpack.unpackb(self.memory[start:end], raw=False, strict_map_key=False)


# end of class Tree



class Value:
    """ A lazily decoded node of a msgpack :class:`Tree`. The descriptive
        properties (:attr:`dtype`, :attr:`size`, :attr:`shape`,
        :attr:`container_type`) are established once, at construction, and
        never trigger a decode or an error; only :func:`cast` inspects the
        content of the node.
    """

    def __init__(self, tree, node):

        self.tree = tree
        self.node = node

        kind = node.kind

        if kind == ARRAY:
            self._size = node.count
            self._container = ARRAY_LIKE
            if node.children:
                self._dtype = _node_dtype(node.children[0])
            else:
                self._dtype = dtype.UNKNOWN
        elif kind == BIN:
            self._size = node.count
            self._container = ARRAY_LIKE
            self._dtype = 'uint8'
        elif kind == MAP:
            self._size = node.count
            self._container = MAP
            self._dtype = dtype.UNDEFINED
        else:
            self._size = 0
            self._container = ''
            self._dtype = scalar_dtypes[kind]


    def __repr__(self):
        if self._container:
            return '<Value %s of %s, size %d>' % (self._container, self._dtype, self._size)
        return '<Value %s>' % (self._dtype)


    @property
    def kind(self):
        return self.node.kind

    @property
    def dtype(self):
        """ The canonical type of a scalar, or of the elements of a container.
        """
        return self._dtype

    @property
    def size(self):
        """ Zero for scalars; the element count for arrays and maps, the byte
            count for binary values.
        """
        return self._size

    @property
    def shape(self):
        if self._size:
            return (self._size,)
        return ()

    @property
    def container_type(self):
        """ 'array-like' for arrays and binary values, 'map' for maps, and the
            empty string for everything else.
        """
        return self._container


    def cast(self, target, container=None, size=None):
        """ Return the content of this node as the requested *target* type.
            No implicit conversion is performed: an unsigned integer cannot
            be read as 'int64', nor a 'float32' as 'float64'. A
            :class:`CastMismatch` exception is raised if the node does not
            carry exactly the requested type.

            Arrays must be requested with a *container*, such as list, tuple,
            or numpy.ndarray, and every element must carry the *target* type.
            If *size* is specified the node must have exactly that many
            elements, otherwise :class:`SizeMismatch` is raised.

            Binary values are returned as bytes when *target* is bytes; a
            'uint8' *target* with a *container* yields the individual byte
            values. Maps, which are unexpected in bridge payloads, can only
            be requested as dict.
        """

        kind = self.node.kind

        if kind == MAP:
            if target is dict and container is None:
                return self._decode()
            raise self._mismatch()

        if target is dict:
            raise self._mismatch()

        expected = dtype.canonical(target)

        if kind == BIN:
            if container is None:
                if expected != dtype.BYTES:
                    raise self._mismatch()
                self._check_size(size)
                return bytes(self.data())

            if expected != self._dtype:
                raise self._mismatch()
            self._check_size(size)
            return _materialize(container, self.data().tolist(), expected)

        if kind == ARRAY:
            if container is None:
                raise self._mismatch()

            for child in self.node.children:
                if child.kind in _not_elements or _node_dtype(child) != expected:
                    raise self._mismatch()

            self._check_size(size)
            decoded = self._decode()
            return _materialize(container, decoded, expected)

        if container is not None or size is not None:
            raise self._mismatch()

        if expected != self._dtype or kind == EXT:
            raise self._mismatch()

        if kind == NIL:
            return None

        return self._decode()


    def data(self):
        """ Return a zero-copy memoryview of the raw bytes of a binary node.
        """

        if self.node.kind != BIN:
            raise self._mismatch()

        return self.tree.memory[self.node.end - self.node.count:self.node.end]


    def _decode(self):

        try:
            return self.tree.decode(self.node.start, self.node.end)
        except (TypeError, ValueError) as e:
            raise CastMismatch('the ' + self._dtype + ' content cannot be decoded: ' + str(e)) from e


    def _check_size(self, size):

        if size is None or size == self._size:
            return

        raise SizeMismatch('the requested size ' + str(size) + ' is different from the actual size ' + str(self._size))


    def _mismatch(self):

        if self._size:
            message = 'the expected type is a(n) ' + self._container + ' of ' + self._dtype
        else:
            message = 'the expected type is ' + self._dtype

        return CastMismatch(message)


    # Navigation of map nodes; bridge headers and record payloads are maps.

    def _require_map(self):
        if self.node.kind != MAP:
            raise self._mismatch()

    def keys(self):
        self._require_map()
        return self.node.keys

    def items(self):
        self._require_map()
        return [(key, Value(self.tree, child)) for key, child in zip(self.node.keys, self.node.children)]

    def get(self, key, default=None):
        try:
            return self[key]
        except KeyError:
            return default

    def __contains__(self, key):
        self._require_map()
        return key in self.node.keys

    def __getitem__(self, key):
        self._require_map()

        try:
            index = self.node.keys.index(key)
        except ValueError:
            raise KeyError(key)

        return Value(self.tree, self.node.children[index])

    def __len__(self):
        return self._size

    def __bool__(self):
        return True

    def __iter__(self):
        """ Iterate over the elements of an array node, or the keys of a map.
        """

        if self.node.kind == MAP:
            return iter(self.node.keys)
        if self.node.kind == ARRAY:
            return (Value(self.tree, child) for child in self.node.children)

        raise TypeError('scalar ' + self._dtype + ' value is not iterable')


# end of class Value



def _node_dtype(node):
    """ Return the dtype a :class:`Value` would report for *node*.
    """

    kind = node.kind

    if kind == ARRAY:
        if node.children:
            return _node_dtype(node.children[0])
        return dtype.UNKNOWN
    if kind == BIN:
        return 'uint8'
    if kind == MAP:
        return dtype.UNDEFINED

    return scalar_dtypes[kind]


def _materialize(container, elements, expected):
    """ Place the decoded *elements* into a new instance of *container*.
    """

    if isinstance(container, type) and issubclass(container, collections.abc.Mapping):
        raise CastMismatch('a mapping cannot hold the elements of an array-like of ' + expected)

    if container is numpy.ndarray:
        if expected != dtype.STR and dtype.numeric(expected) is None:
            raise CastMismatch('a numpy.ndarray cannot hold the elements of an array-like of ' + expected)
        return numpy.array(elements, dtype=expected)

    return container(elements)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
