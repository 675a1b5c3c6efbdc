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
PLC-5 data file addresses.

A data file address has up to three levels: file number, element and (optionally) sub-element.
On the wire it is a level mask byte followed by one field per level, each field is a single byte
for values up to ``0xFE`` or ``0xFF`` followed by the value as a little-endian word.
"""

import logging
import re
from typing import NamedTuple, Optional, Tuple, Union

from .buffer import BufferReader, BufferWriter
from .const import (
    ADDRESS_EXTENDED_LEVEL,
    ADDRESS_LEVELS_ELEMENT,
    ADDRESS_LEVELS_SUB_ELEMENT,
    ADDRESS_MAX_SHORT_LEVEL,
)
from .exceptions import DataError, RequestError

__all__ = [
    "LogicalAddress",
    "parse_address",
    "encode_logical_address",
    "decode_logical_address",
    "MAX_ENCODED_ADDRESS_SIZE",
]

_log = logging.getLogger(__name__)

#: mask byte plus three extended levels
MAX_ENCODED_ADDRESS_SIZE = 1 + 3 * 3


class LogicalAddress(NamedTuple):
    file_type: str  #: data file type letter(s), e.g. ``N`` or ``ST``
    file_number: int
    element: int
    sub_element: Optional[int] = None  #: ``None`` addresses the whole element

    def __str__(self):
        sub = "" if self.sub_element is None else f"/{self.sub_element}"
        return f"{self.file_type}{self.file_number}:{self.element}{sub}"


# files without an explicit number in the address
_DEFAULT_FILE_NUMBER = {"O": 0, "I": 1, "S": 2}

# word offsets within timer/counter/control elements, bit mnemonics live in the control word
_CONTROL_SUB_ELEMENT = {
    "PRE": 1,
    "ACC": 2,
    "LEN": 1,
    "POS": 2,
    "EN": 0,
    "TT": 0,
    "DN": 0,
    "CU": 0,
    "CD": 0,
    "OV": 0,
    "UN": 0,
    "UA": 0,
    "EU": 0,
    "ER": 0,
    "EM": 0,
    "IN": 0,
    "FD": 0,
    "UL": 0,
}

DATA_FILE_RE = re.compile(
    r"^(?P<file_type>ST|[NFBDLAISO])(?P<file_number>\d{1,4})?"
    r"(:)(?P<element_number>\d{1,5})"
    r"(/(?P<sub_element>\d{1,5}))?"
    r"({(?P<element_count>\d+)})?$",
    flags=re.IGNORECASE,
)

CONTROL_FILE_RE = re.compile(
    r"^(?P<file_type>[TCR])(?P<file_number>\d{1,4})"
    r"(:)(?P<element_number>\d{1,5})"
    r"((\.)(?P<sub_element>[A-Z]{2,3}))?"
    r"({(?P<element_count>\d+)})?$",
    flags=re.IGNORECASE,
)


def parse_address(address: str) -> Tuple[LogicalAddress, int]:
    """
    Parse a data file address like ``N7:0``, ``N7:0/3``, ``F8:10{4}`` or ``T4:1.ACC``.

    :return: the logical address and the element count (from the ``{count}`` suffix, else 1)
    """
    text = address.strip() if isinstance(address, str) else ""

    t = CONTROL_FILE_RE.match(text)
    if t:
        sub_element = t.group("sub_element")
        if sub_element is not None:
            try:
                sub_element = _CONTROL_SUB_ELEMENT[sub_element.upper()]
            except KeyError:
                raise RequestError(f"Unknown sub-element {sub_element!r} in address {address!r}") from None
        return _make_address(address, t, sub_element)

    t = DATA_FILE_RE.match(text)
    if t:
        sub_element = t.group("sub_element")
        return _make_address(address, t, None if sub_element is None else int(sub_element))

    raise RequestError(f"Error parsing data file address {address!r}")


def _make_address(address, match, sub_element) -> Tuple[LogicalAddress, int]:
    file_type = match.group("file_type").upper()
    file_number = match.group("file_number")
    if file_number is None:
        if file_type not in _DEFAULT_FILE_NUMBER:
            raise RequestError(f"Missing file number in address {address!r}")
        file_number = _DEFAULT_FILE_NUMBER[file_type]

    element_count = match.group("element_count")
    element_count = int(element_count) if element_count is not None else 1

    logical = LogicalAddress(file_type, int(file_number), int(match.group("element_number")), sub_element)
    for name in ("file_number", "element", "sub_element"):
        value = getattr(logical, name)
        if value is not None and value > 0xFFFF:
            raise RequestError(f"{name} {value} out of range in address {address!r}")
    if element_count < 1:
        raise RequestError(f"Element count must be at least 1 in address {address!r}")

    _log.debug(f"parsed {address!r} as {logical!r} x {element_count}")
    return logical, element_count


def _encode_level(writer: BufferWriter, value: int):
    if not 0 <= value <= 0xFFFF:
        raise DataError(f"Address level {value!r} out of range")

    if value <= ADDRESS_MAX_SHORT_LEVEL:
        writer.write_u8(value)
    else:
        writer.write_u8(ADDRESS_EXTENDED_LEVEL)
        writer.write_u16_le(value)


def encode_logical_address(
    file_number: int, element: int, sub_element: Optional[int] = None, writer: Optional[BufferWriter] = None
) -> bytes:
    """
    Encode a data file address into its variable-width binary form.

    If `writer` is supplied the address is appended to it (and must fit the remaining capacity,
    else :class:`~plc5comm.exceptions.BufferTooSmallError`), otherwise a new buffer is used.

    :return: the encoded address bytes
    """
    if writer is None:
        writer = BufferWriter(MAX_ENCODED_ADDRESS_SIZE)
    start = writer.offset

    if sub_element is not None:
        writer.write_u8(ADDRESS_LEVELS_SUB_ELEMENT)
    else:
        writer.write_u8(ADDRESS_LEVELS_ELEMENT)

    _encode_level(writer, file_number)
    _encode_level(writer, element)
    if sub_element is not None:
        _encode_level(writer, sub_element)

    return writer.getvalue()[start:]


def _decode_level(reader: BufferReader) -> int:
    value = reader.read_u8()
    if value == ADDRESS_EXTENDED_LEVEL:
        value = reader.read_u16_le()
    return value


def decode_logical_address(buffer: Union[bytes, BufferReader]) -> Tuple[int, int, Optional[int]]:
    """
    Decode an encoded address, the inverse of :func:`encode_logical_address`.

    :return: ``(file_number, element, sub_element)``, `sub_element` is ``None`` for two level addresses
    """
    reader = buffer if isinstance(buffer, BufferReader) else BufferReader(buffer)
    mask = reader.read_u8()
    if mask not in (ADDRESS_LEVELS_ELEMENT, ADDRESS_LEVELS_SUB_ELEMENT):
        raise DataError(f"Unsupported address level mask 0x{mask:02x}")

    file_number = _decode_level(reader)
    element = _decode_level(reader)
    sub_element = _decode_level(reader) if mask == ADDRESS_LEVELS_SUB_ELEMENT else None

    return file_number, element, sub_element
