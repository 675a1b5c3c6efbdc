# -*- coding: utf-8 -*-
#
# Copyright (c) 2021 Ian Ottoway <ian@ottoway.dev>
# Copyright (c) 2014 Agostino Ruscito <ruscito@gmail.com>
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#

"""
Data types stored in PLC-5 data files.

Each type class provides ``encode`` / ``decode`` class methods, they raise
:class:`~plc5comm.exceptions.DataError` for anything that cannot be packed or unpacked.
"""

from itertools import chain
from struct import pack, unpack
from typing import Any, Tuple, Type

from .exceptions import DataError

__all__ = [
    "DataType",
    "ElementaryDataType",
    "USINT",
    "UINT",
    "INT",
    "DINT",
    "REAL",
    "BCD",
    "PCCC_ASCII",
    "PCCC_STRING",
    "CONTROL_WORDS",
    "PLC5_DATA_TYPE",
    "PLC5_DATA_SIZE",
    "data_type_for",
]


class _DataTypeMeta(type):
    def __repr__(cls):
        return cls.__name__


class DataType(metaclass=_DataTypeMeta):
    size: int = 0  #: size of the type in bytes

    @classmethod
    def encode(cls, value: Any) -> bytes:
        try:
            return cls._encode(value)
        except Exception as err:
            raise DataError(f"Error packing {value!r} as {cls.__name__}") from err

    @classmethod
    def _encode(cls, value: Any) -> bytes:
        ...

    @classmethod
    def decode(cls, data: bytes) -> Any:
        try:
            if len(data) < cls.size:
                raise ValueError(f"need {cls.size} bytes, got {len(data)}")
            return cls._decode(bytes(data[: cls.size]))
        except Exception as err:
            raise DataError(f"Error unpacking {bytes(data)!r} as {cls.__name__}") from err

    @classmethod
    def _decode(cls, data: bytes) -> Any:
        ...


class ElementaryDataType(DataType):
    _format: str = ""

    @classmethod
    def _encode(cls, value: Any) -> bytes:
        return pack(cls._format, value)

    @classmethod
    def _decode(cls, data: bytes) -> Any:
        return unpack(cls._format, data)[0]


class USINT(ElementaryDataType):
    """
    Unsigned 8-bit integer
    """

    size = 1
    _format = "<B"


class UINT(ElementaryDataType):
    """
    Unsigned 16-bit integer
    """

    size = 2
    _format = "<H"


class INT(ElementaryDataType):
    """
    Signed 16-bit integer
    """

    size = 2
    _format = "<h"


class DINT(ElementaryDataType):
    """
    Signed 32-bit integer
    """

    size = 4
    _format = "<i"


class REAL(ElementaryDataType):
    """
    32-bit floating point
    """

    size = 4
    _format = "<f"


class BCD(DataType):
    """
    4 digit binary coded decimal word, decoded to an ``int``
    """

    size = 2

    @classmethod
    def _encode(cls, value: int) -> bytes:
        if not 0 <= value <= 9999:
            raise ValueError("BCD value out of range")
        return UINT.encode(int(str(value), 16))

    @classmethod
    def _decode(cls, data: bytes) -> int:
        return int(f"{UINT.decode(data):x}")


def _pccc_string_swap(data: bytes) -> bytes:
    pairs = [(x2, x1) for x1, x2 in (data[i : i + 2] for i in range(0, len(data), 2))]
    return bytes(chain.from_iterable(pairs))


class PCCC_ASCII(DataType):
    """
    Two characters stored in one word, high byte first
    """

    size = 2
    encoding = "iso-8859-1"

    @classmethod
    def _encode(cls, value: str) -> bytes:
        if len(value) > 2:
            raise ValueError("ASCII element holds at most 2 characters")
        return _pccc_string_swap(value.ljust(2).encode(cls.encoding))

    @classmethod
    def _decode(cls, data: bytes) -> str:
        return _pccc_string_swap(data).decode(cls.encoding)


class PCCC_STRING(DataType):
    """
    String element, a length word followed by 82 characters stored with swapped byte pairs
    """

    size = 84
    encoding = "iso-8859-1"

    @classmethod
    def _encode(cls, value: str) -> bytes:
        if len(value) > 82:
            raise ValueError("string elements hold at most 82 characters")
        _data = value.encode(cls.encoding).ljust(82, b"\x00")
        return UINT.encode(len(value)) + _pccc_string_swap(_data)

    @classmethod
    def _decode(cls, data: bytes) -> str:
        _len = UINT.decode(data)
        return _pccc_string_swap(data[2:84])[:_len].decode(cls.encoding)


class CONTROL_WORDS(DataType):
    """
    Timer, counter and control elements: control word, preset and accumulator
    """

    size = 6

    @classmethod
    def _encode(cls, value: Tuple[int, int, int]) -> bytes:
        ctrl, pre, acc = value
        return UINT.encode(ctrl) + INT.encode(pre) + INT.encode(acc)

    @classmethod
    def _decode(cls, data: bytes) -> Tuple[int, int, int]:
        return UINT.decode(data[0:2]), INT.decode(data[2:4]), INT.decode(data[4:6])


PLC5_DATA_TYPE = {
    "O": UINT,
    "I": UINT,
    "S": UINT,
    "B": UINT,
    "T": CONTROL_WORDS,
    "C": CONTROL_WORDS,
    "R": CONTROL_WORDS,
    "N": INT,
    "F": REAL,
    "D": BCD,
    "A": PCCC_ASCII,
    "ST": PCCC_STRING,
    "L": DINT,
}

PLC5_DATA_SIZE = {file_type: typ.size for file_type, typ in PLC5_DATA_TYPE.items()}


def data_type_for(file_type: str, element_size: int) -> Type[DataType]:
    """
    Data type used to decode one element, falls back to the file type's default
    when the element size matches, else to a signed integer of that width.
    """
    typ = PLC5_DATA_TYPE.get(file_type.upper())
    if typ is not None and typ.size == element_size:
        return typ
    if element_size == 2:
        return INT
    if element_size == 4:
        return DINT
    raise DataError(f"No data type for {element_size} byte elements of file type {file_type!r}")
