import numpy
import pytest

from kbclient.protocol import dtype


def test_normalize_numpy_names():

    for name in ('int8', 'int16', 'int32', 'int64', 'uint8', 'uint16', 'uint32', 'uint64', 'float32', 'float64', 'bool'):
        assert dtype.normalize(name) == name


def test_normalize_c_names():

    assert dtype.normalize('uint16_t') == 'uint16'
    assert dtype.normalize('int64_t') == 'int64'
    assert dtype.normalize('float') == 'float32'
    assert dtype.normalize('double') == 'float64'
    assert dtype.normalize('char') == 'int8'


def test_normalize_byte_order():

    assert dtype.normalize('<u4') == 'uint32'
    assert dtype.normalize('<f8') == 'float64'
    assert dtype.normalize('>u4') == 'uint32'


def test_numeric_keeps_byte_order():

    assert dtype.numeric('>u4') == numpy.dtype('>u4')
    assert dtype.numeric('>u4').byteorder == '>'
    assert dtype.numeric('uint16_t') == numpy.dtype('uint16')
    assert dtype.numeric('double') == numpy.dtype('float64')


def test_normalize_unknown():

    assert dtype.normalize('mystery') == 'mystery'
    assert dtype.normalize('nil') == 'nil'


def test_canonical():

    assert dtype.canonical(None) == 'nil'
    assert dtype.canonical(bool) == 'bool'
    assert dtype.canonical(float) == 'float64'
    assert dtype.canonical(str) == 'str'
    assert dtype.canonical(bytes) == 'bytes'
    assert dtype.canonical(numpy.float32) == 'float32'
    assert dtype.canonical(numpy.dtype('uint16')) == 'uint16'
    assert dtype.canonical('uint32_t') == 'uint32'

    with pytest.raises(TypeError):
        dtype.canonical(object())


def test_numeric():

    assert dtype.numeric('float32').itemsize == 4
    assert dtype.numeric('bool').itemsize == 1
    assert dtype.numeric('str') is None
    assert dtype.numeric('nil') is None
    assert dtype.numeric('mystery') is None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
