""" Human-readable renderings of bridge replies, intended for interactive
    inspection of what a server is sending.
"""

from . import fields
from . import value
from .errors import CastMismatch, ProtocolError


separator = '\n----------new message----------\n'
indent = '    '


def render(frame):
    """ Render a single msgpack-encoded *frame* as text. Maps are rendered as
        one 'key: value' line per entry, nested maps are indented; binary
        values are rendered as '(bin)'. Frames that are not valid msgpack,
        such as raw array payloads, are rendered as their byte count.
    """

    try:
        tree = value.Tree(frame)
    except ProtocolError:
        return _raw(frame)

    return _render(tree.root, 0) + '\n'


def render_multipart(frames, boundary=True):
    """ Render every frame of a multipart reply, in order. If *boundary* is
        True each frame is preceded by a separator line.
    """

    output = list()
    raw_next = False

    for frame in frames:
        if boundary:
            output.append(separator)

        if raw_next:
            output.append(_raw(frame))
            raw_next = False
            continue

        output.append(render(frame))
        raw_next = _announces_array(frame)

    return ''.join(output)


def summarize(records):
    """ Describe the structure of decoded *records*, a dictionary as
        returned by :func:`kbclient.protocol.frames.decode`: for every source,
        the path, container type, shape, and dtype of each entry.
    """

    lines = list()

    for key, record in records.items():
        lines.append('source: ' + key)
        lines.append('Total bytes received: ' + str(record.bytes_received()))
        lines.append('')
        lines.append('path, container, container shape, type')

        sections = (('metadata', record.metadata),
                    ('data', record.fields),
                    ('array', record.arrays))

        for title, entries in sections:
            lines.append('')
            lines.append(title)
            lines.append('-' * len(title))

            for path, entry in entries.items():
                lines.append(_describe(path, entry))

        lines.append('')

    if lines:
        lines.append('')

    return '\n'.join(lines)


def _describe(path, entry):

    if entry.shape:
        shape = '[' + ', '.join(str(dimension) for dimension in entry.shape) + ']'
    else:
        shape = ''

    line = ', '.join((str(path), entry.container_type, shape, entry.dtype))

    if entry.container_type == value.MAP or entry.dtype == value.EXT:
        line += ' (Check...unexpected data type!)'

    return line


def _raw(frame):
    return '(%d bytes)\n' % (memoryview(frame).nbytes)


def _announces_array(frame):
    """ Return True if *frame* is a header announcing a raw array payload.
    """

    try:
        root = value.Tree(frame).root
    except ProtocolError:
        return False

    if root.kind != value.MAP:
        return False

    content = root.get(fields.CONTENT)

    if content is None or content.kind != value.STR:
        return False

    try:
        return content.cast(str) in fields.ARRAY_KINDS
    except CastMismatch:
        return False


def _render(node, level):

    kind = node.kind

    if kind == value.MAP:
        entries = list()
        for key, child in node.items():
            if isinstance(key, bytes):
                key = key.decode(errors='replace')
            entries.append('\n' + indent * level + str(key) + ': ' + _render(child, level + 1))
        return ','.join(entries)

    if kind == value.ARRAY:
        return '[' + ','.join(_render(child, level) for child in node) + ']'

    if kind == value.NIL:
        return 'null'
    if kind == value.BOOL:
        if node.cast(bool):
            return 'true'
        return 'false'
    if kind == value.STR:
        try:
            return '"' + node.cast(str) + '"'
        except CastMismatch:
            return '(invalid str)'
    if kind == value.BIN:
        return '(bin)'
    if kind == value.EXT:
        return ''
    if kind in (value.FLOAT32, value.FLOAT64):
        return format(node.cast(node.dtype), 'g')

    return str(node.cast(node.dtype))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
