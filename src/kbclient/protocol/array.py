""" Zero-copy typed views over the raw array payloads of a bridge reply.
"""

import collections.abc
import sys

import numpy

from . import dtype as dtypes
from .errors import SizeMismatch, TypeMismatch


class ArrayView:
    """ An :class:`ArrayView` aliases the bytes of the *buffer* it is given,
        typically a :class:`zmq.Frame`, interpreting them as an N-dimensional
        array of the declared *shape* and *dtype*. The declared dtype is
        normalized once, here; see :func:`kbclient.protocol.dtype.normalize`.
        A declared byte order, such as '>u4', is honored when the bytes
        are read; copies are always in native byte order.

        The view holds a strong reference to the *buffer*, the aliased bytes
        remain valid for as long as the view is reachable.

        :ivar buffer: The object owning the aliased bytes.
        :ivar shape: Tuple of dimension lengths.
        :ivar dtype: The canonical element type.
        :ivar size: The total number of elements.
    """

    container_type = 'array-like'

    def __init__(self, buffer, shape, dtype):

        self.buffer = buffer
        self.memory = memoryview(buffer).cast('B')
        self.shape = tuple(int(dimension) for dimension in shape)
        self.dtype = dtypes.normalize(dtype)
        self.size = _product(self.shape)

        self._numpy = dtypes.numeric(dtype)

        if self._numpy is not None:
            required = self.size * self._numpy.itemsize
            if required > len(self.memory):
                raise SizeMismatch('shape %s of %s requires %d bytes, the buffer holds %d' % (self.shape, self.dtype, required, len(self.memory)))


    def __repr__(self):
        return '<ArrayView %s %s>' % (self.dtype, self.shape)


    def __len__(self):
        return self.size


    @property
    def nbytes(self):
        """ The number of aliased bytes, which for a numeric dtype is exactly
            the element count times the element size.
        """

        if self._numpy is None:
            return len(self.memory)

        return self.size * self._numpy.itemsize


    def cast(self, target, container=None, size=None):
        """ Return a copy of the array content. The *target* element type
            must match the declared dtype exactly, otherwise
            :class:`TypeMismatch` is raised; there is no implicit conversion.

            With no *container* a contiguous numpy.ndarray of the original
            shape is returned. Any other *container*, such as list or tuple,
            receives the flattened elements. If *size* is specified it must
            equal the element count of the array, otherwise
            :class:`SizeMismatch` is raised.
        """

        if isinstance(container, type) and issubclass(container, collections.abc.Mapping):
            raise self._mismatch()

        typed = self.data(target)

        if size is not None and size != self.size:
            raise SizeMismatch('the requested size ' + str(size) + ' is different from the actual size ' + str(self.size))

        if container is None or container is numpy.ndarray:
            return typed.astype(self._numpy.newbyteorder('='))

        return container(typed.ravel().tolist())


    def data(self, target=None):
        """ With no arguments, return the raw bytes as a memoryview. With
            a *target* element type, return a read-only numpy.ndarray of the
            declared shape that aliases the same bytes; the type check is the
            same as the one applied by :func:`cast`. Neither form copies.
        """

        if target is None:
            return self.memory[:self.nbytes]

        expected = dtypes.canonical(target)

        if self._numpy is None or expected != self.dtype:
            raise self._mismatch()

        if self.size == 0:
            return numpy.empty(self.shape, dtype=self._numpy)

        flat = numpy.frombuffer(self.memory, dtype=self._numpy, count=self.size)
        flat.flags.writeable = False
        return flat.reshape(self.shape)


    def _mismatch(self):
        return TypeMismatch('the expected type is a(n) ' + self.container_type + ' of ' + self.dtype)


# end of class ArrayView



def _product(shape):
    """ Return the product of the *shape* dimensions, refusing any result
        that could not be addressed in memory.
    """

    size = 1

    for dimension in shape:
        if dimension < 0:
            raise ValueError('negative array dimension: ' + str(dimension))

        size *= dimension

        if size > sys.maxsize:
            raise OverflowError('array shape ' + str(shape) + ' overflows the addressable size')

    return size


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
