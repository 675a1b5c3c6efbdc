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
Bounds-checked cursors used to build requests and pick apart responses.

Every write is checked against the remaining capacity before anything is written,
so a failed encode never leaves a partial field in the buffer.
"""

import logging
from typing import Optional

from .exceptions import BufferEmptyError, BufferTooSmallError, DataError

__all__ = ["BufferWriter", "BufferReader"]


class BufferWriter:
    """
    Append-only byte buffer with a fixed capacity.
    """

    __log = logging.getLogger(f"{__module__}.{__qualname__}")

    def __init__(self, capacity: int):
        if capacity < 0:
            raise DataError(f"Invalid buffer capacity {capacity}")
        self.capacity = capacity
        self._buffer = bytearray()

    @property
    def offset(self) -> int:
        return len(self._buffer)

    @property
    def remaining(self) -> int:
        return self.capacity - len(self._buffer)

    def _reserve(self, size: int):
        if size > self.remaining:
            self.__log.debug(f"write of {size} bytes at offset {self.offset} overflows capacity {self.capacity}")
            raise BufferTooSmallError(
                f"Cannot write {size} bytes at offset {self.offset}, buffer capacity is {self.capacity}"
            )

    def write_u8(self, value: int) -> "BufferWriter":
        if not 0 <= value <= 0xFF:
            raise DataError(f"Value {value!r} does not fit in a byte")
        self._reserve(1)
        self._buffer.append(value)
        return self

    def write_u16_le(self, value: int) -> "BufferWriter":
        if not 0 <= value <= 0xFFFF:
            raise DataError(f"Value {value!r} does not fit in 16 bits")
        self._reserve(2)
        self._buffer += value.to_bytes(2, "little")
        return self

    def write_bytes(self, data: bytes) -> "BufferWriter":
        self._reserve(len(data))
        self._buffer += data
        return self

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self):
        return len(self._buffer)

    def __repr__(self):
        return f"{self.__class__.__name__}(capacity={self.capacity}, offset={self.offset})"


class BufferReader:
    """
    Read cursor over an immutable byte string, raises ``BufferEmptyError`` on a short read.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self._data = bytes(data)
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self.offset

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise BufferEmptyError(
                f"Cannot read {size} bytes at offset {self.offset}, only {self.remaining} remain"
            )
        data = self._data[self.offset : self.offset + size]
        self.offset += size
        return data

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u16_le(self) -> int:
        return int.from_bytes(self._take(2), "little")

    def read_bytes(self, size: Optional[int] = None) -> bytes:
        return self._take(self.remaining if size is None else size)

    def __repr__(self):
        return f"{self.__class__.__name__}(offset={self.offset}, remaining={self.remaining})"
