""" The canonical element-type vocabulary shared by :class:`Value` and
    :class:`ArrayView` instances. Canonical names are numpy dtype names
    ('uint16', 'float32', 'bool', ...), extended with a handful of names for
    msgpack node kinds that have no numpy counterpart.
"""

import numpy


NIL = 'nil'
EXT = 'ext'
STR = 'str'
BYTES = 'bytes'
UNDEFINED = 'undefined'
UNKNOWN = 'unknown'

# Element type names as they appear in C/C++ code, mapped to their numpy
# equivalent. A trailing '_t' is stripped before this lookup.

aliases = dict()
aliases['char'] = 'int8'
aliases['uchar'] = 'uint8'
aliases['float'] = 'float32'
aliases['double'] = 'float64'

# Only these numpy kinds are meaningful as array elements: boolean, signed
# and unsigned integer, floating point, complex.

numeric_kinds = 'biufc'


def normalize(name):
    """ Return the canonical form of the dtype *name* declared on the wire.
        Names numpy does not recognize are returned unchanged; an array
        declared with such a name can be inspected but never cast.

        This is applied once, when a :class:`ArrayView` is constructed.
    """

    name = str(name)

    try:
        return numpy.dtype(_resolve(name)).name
    except (TypeError, ValueError):
        return name


def _resolve(name):
    """ Apply the C/C++ spelling rules to a declared dtype *name*, leaving
        any byte order prefix in place.
    """

    if name.endswith('_t'):
        name = name[:-2]

    return aliases.get(name, name)


def canonical(target):
    """ Translate the *target* type requested by a caller into a canonical
        name. The *target* may be a canonical name, a numpy type or dtype,
        or one of the Python builtins that numpy understands (bool, int,
        float, str, bytes). None requests the 'nil' type.
    """

    if target is None:
        return NIL

    if isinstance(target, str):
        return normalize(target)

    try:
        return numpy.dtype(target).name
    except TypeError:
        raise TypeError('not a recognized data type: ' + repr(target))


def numeric(name):
    """ Return the numpy dtype for *name* if it describes a fixed-width
        numeric or boolean element, otherwise return None. A declared wire
        name such as '>u4' keeps its byte order.
    """

    try:
        resolved = numpy.dtype(_resolve(str(name)))
    except (TypeError, ValueError):
        return None

    if resolved.kind in numeric_kinds:
        return resolved

    return None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
