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
An in-memory PLC-5 data table that answers word-range read and write requests.

Use it with :class:`~plc5comm.transport.LoopbackTransport` to exercise tags without a controller.
"""

import logging
from typing import Dict, NamedTuple, Optional, Tuple

from .address import decode_logical_address
from .buffer import BufferReader, BufferWriter
from .const import (
    PCCC_STS_EXTENDED,
    PCCC_STS_SUCCESS,
    PCCC_TYPED_CMD,
    PCCC_TYPED_CMD_REPLY,
    PLC5_FNC_READ,
    PLC5_FNC_WRITE,
)
from .data_types import PLC5_DATA_SIZE
from .exceptions import DataError, RequestError

__all__ = ["DataFile", "PLC5Simulator"]

STS_ILLEGAL_COMMAND = 0x10
EXT_STS_ILLEGAL_FIELD = 0x01
EXT_STS_UNUSABLE_ADDRESS = 0x06
EXT_STS_TRANSACTION_TOO_LARGE = 0x0A


class DataFile(NamedTuple):
    file_type: str
    element_size: int
    data: bytearray


class PLC5Simulator:
    __log = logging.getLogger(f"{__module__}.{__qualname__}")

    def __init__(self, files: Optional[Dict[int, DataFile]] = None):
        self.files: Dict[int, DataFile] = dict(files or {})
        #: ``(sts, ext_sts)`` to answer every request with instead of processing it
        self.fault: Optional[Tuple[int, Optional[int]]] = None

    def create_file(self, number: int, file_type: str, elements: int, element_size: Optional[int] = None) -> DataFile:
        file_type = file_type.upper()
        if element_size is None:
            try:
                element_size = PLC5_DATA_SIZE[file_type]
            except KeyError:
                raise RequestError(f"Unknown data file type {file_type!r}") from None

        data_file = DataFile(file_type, element_size, bytearray(element_size * elements))
        self.files[number] = data_file
        self.__log.debug(f"Created {file_type}{number} with {elements} elements")
        return data_file

    def _reply(self, sequence: int, sts: int = PCCC_STS_SUCCESS, ext_sts: Optional[int] = None, data: bytes = b"") -> bytes:
        writer = BufferWriter(4 + 1 + len(data))
        writer.write_u8(PCCC_TYPED_CMD_REPLY)
        writer.write_u8(sts)
        writer.write_u16_le(sequence)
        if ext_sts is not None:
            writer.write_u8(ext_sts)
        writer.write_bytes(data)
        return writer.getvalue()

    def handle(self, request: bytes) -> bytes:
        """
        Process one request and return the reply bytes
        """
        reader = BufferReader(request)
        try:
            command = reader.read_u8()
            reader.read_u8()  # status
            sequence = reader.read_u16_le()
        except DataError:
            return self._reply(0, STS_ILLEGAL_COMMAND)

        if self.fault is not None:
            sts, ext_sts = self.fault
            return self._reply(sequence, sts, ext_sts)

        try:
            function = reader.read_u8()
            if command != PCCC_TYPED_CMD or function not in (PLC5_FNC_READ, PLC5_FNC_WRITE):
                self.__log.debug(f"Unsupported command 0x{command:02x} function 0x{function:02x}")
                return self._reply(sequence, STS_ILLEGAL_COMMAND)

            offset_words = reader.read_u16_le()
            total_words = reader.read_u16_le()
            file_number, element, sub_element = decode_logical_address(reader)
        except DataError as err:
            self.__log.debug(f"Malformed request: {err}")
            return self._reply(sequence, PCCC_STS_EXTENDED, EXT_STS_ILLEGAL_FIELD)

        data_file = self.files.get(file_number)
        if data_file is None:
            return self._reply(sequence, PCCC_STS_EXTENDED, EXT_STS_UNUSABLE_ADDRESS)

        start = element * data_file.element_size + 2 * (sub_element or 0)
        if start + 2 * total_words > len(data_file.data):
            return self._reply(sequence, PCCC_STS_EXTENDED, EXT_STS_TRANSACTION_TOO_LARGE)
        start += 2 * offset_words

        try:
            if function == PLC5_FNC_READ:
                size = reader.read_u8()
                payload = self._read(data_file, start, size)
                return self._reply(sequence, data=payload)

            self._write(data_file, start, reader.read_bytes())
            return self._reply(sequence)
        except (DataError, RequestError) as err:
            self.__log.debug(f"Rejected request: {err}")
            return self._reply(sequence, PCCC_STS_EXTENDED, EXT_STS_TRANSACTION_TOO_LARGE)

    @staticmethod
    def _read(data_file: DataFile, start: int, size: int) -> bytes:
        if start + size > len(data_file.data):
            raise RequestError("read past the end of the file")
        return bytes(data_file.data[start : start + size])

    @staticmethod
    def _write(data_file: DataFile, start: int, data: bytes):
        if start + len(data) > len(data_file.data):
            raise RequestError("write past the end of the file")
        data_file.data[start : start + len(data)] = data
