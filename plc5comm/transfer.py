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
Chunked word-range transfers.

A value larger than one request is moved as a sequence of chunks, each chunk is one exchange
with the transport.  An exchange is two-phase: the transport calls :meth:`TransferChunk.build`
when it is ready to send and :meth:`TransferChunk.apply` with the reply.  When bytes remain
after a reply is applied, the next chunk is handed to the transport from inside ``apply``.
"""

import logging
from typing import TYPE_CHECKING, Optional

from .address import MAX_ENCODED_ADDRESS_SIZE, encode_logical_address
from .buffer import BufferWriter
from .const import PLC5_FNC_READ, PLC5_FNC_WRITE
from .exceptions import BadReplyError, ConfigurationError, Plc5Error, RequestError
from .packets import encode_request_header, response_sequence, validate_response
from .util import PacketLazyFormatter

if TYPE_CHECKING:
    from .tag import OperationStatus, PLC5Tag

__all__ = ["plan_chunk", "TransferChunk", "ReadChunk", "WriteChunk", "REQUEST_HEADER_SIZE"]

#: CMD, STS, TSN, FNC, offset, total size
REQUEST_HEADER_SIZE = 9


def plan_chunk(remaining: int, max_payload: int, element_size: int) -> int:
    """
    Number of bytes to move in the next chunk: as much of `remaining` as fits in
    `max_payload`, rounded down to whole elements.

    :raises ConfigurationError: if not even one element fits
    """
    if element_size <= 0:
        raise ConfigurationError(f"Invalid element size {element_size}")

    available = min(remaining, max_payload)
    num_elements = available // element_size
    chunk = num_elements * element_size

    if chunk <= 0:
        raise ConfigurationError(
            f"Cannot transfer {element_size} byte elements with {available} bytes available in the transfer window"
        )
    return chunk


class TransferChunk:
    """
    One request/response exchange of a read or write transfer.

    Errors from either phase are recorded on the tag's status and re-raised to the transport,
    nothing is retried here.
    """

    __log = logging.getLogger(f"{__module__}.{__qualname__}")
    function: int = None
    name: str = None

    def __init__(self, tag: "PLC5Tag"):
        self.tag = tag
        self.offset = tag.offset  #: byte offset this chunk starts at
        self.size: Optional[int] = None  #: bytes moved by this chunk, known once built

    @property
    def capacity(self) -> int:
        return REQUEST_HEADER_SIZE + MAX_ENCODED_ADDRESS_SIZE + self.max_payload + 1

    @property
    def max_payload(self) -> int:
        raise NotImplementedError

    def build(self) -> bytes:
        try:
            request = self._build()
        except Plc5Error as err:
            self.__log.warning(f"Unable to build {self.name} request for {self.tag.address}: {err}")
            self.tag._fail(self, err)
            raise

        self.__log.verbose(f"{self.name} request:%s", PacketLazyFormatter(request))
        return request

    def apply(self, data: bytes) -> "OperationStatus":
        if not self.tag._is_current(self):
            self.__log.debug(f"Ignoring response to a stale {self.name} request for {self.tag.address}")
            return self.tag.status()

        self.__log.verbose(f"{self.name} response:%s", PacketLazyFormatter(data or b""))
        try:
            if self.size is None:
                raise RequestError(f"Response applied to a {self.name} request that was never built")
            payload = validate_response(data)
            sequence = response_sequence(data)
            if sequence != self.tag.sequence:
                self.__log.debug(f"Response sequence {sequence} does not match request {self.tag.sequence}")
            self._apply(payload)
        except Plc5Error as err:
            self.__log.warning(f"Error, {err}, handling {self.name} response for {self.tag.address}")
            self.tag._fail(self, err)
            raise

        if self.tag.offset < self.tag.size:
            self.__log.debug(f"Starting new {self.name} request for remaining data at offset {self.tag.offset}")
            self.tag._next(type(self))
        else:
            self.tag._complete(self)

        return self.tag.status()

    def fail(self, err: Plc5Error):
        """
        Called by a transport when the exchange could not be completed, e.g. no response was received
        """
        self.__log.warning(f"{self.name} request for {self.tag.address} failed: {err}")
        self.tag._fail(self, err)

    def _encode_header(self, writer: BufferWriter) -> int:
        """
        Writes the request header and the data file address, returns the size of the encoded address
        """
        self.tag.sequence = self.tag.transport.next_sequence()
        encode_request_header(
            writer,
            function=self.function,
            sequence=self.tag.sequence,
            offset_words=self.offset // 2,
            total_words=self.tag.size // 2,
        )
        address = self.tag.address
        encoded = encode_logical_address(address.file_number, address.element, address.sub_element, writer=writer)
        return len(encoded)

    def _build(self) -> bytes:
        ...

    def _apply(self, payload: bytes):
        ...

    def __repr__(self):
        return f"{self.__class__.__name__}(tag={self.tag.address!s}, offset={self.offset}, size={self.size})"


class ReadChunk(TransferChunk):
    __log = logging.getLogger(f"{__module__}.{__qualname__}")
    function = PLC5_FNC_READ
    name = "read"

    @property
    def max_payload(self) -> int:
        return self.tag.max_read_payload

    def _build(self) -> bytes:
        writer = BufferWriter(self.capacity)
        self._encode_header(writer)

        self.size = plan_chunk(self.tag.size - self.offset, self.max_payload, self.tag.element_size)
        self.__log.debug(f"Reading {self.size} bytes of {self.tag.address} at offset {self.offset}")
        writer.write_u8(self.size)

        return writer.getvalue()

    def _apply(self, payload: bytes):
        if not payload:
            raise BadReplyError("Read response contained no data")
        if len(payload) > self.size:
            raise BadReplyError(f"Read response has {len(payload)} bytes, only {self.size} were requested")
        if len(payload) % self.tag.element_size:
            raise BadReplyError(
                f"Read response has {len(payload)} bytes, not a whole number of {self.tag.element_size} byte elements"
            )

        end = self.offset + len(payload)
        self.tag.data[self.offset : end] = payload
        self.tag.offset = end


class WriteChunk(TransferChunk):
    __log = logging.getLogger(f"{__module__}.{__qualname__}")
    function = PLC5_FNC_WRITE
    name = "write"

    @property
    def max_payload(self) -> int:
        return self.tag.max_write_payload

    def _build(self) -> bytes:
        writer = BufferWriter(self.capacity)
        address_size = self._encode_header(writer)

        # the encoded address shares the payload ceiling with the data
        self.size = plan_chunk(
            self.tag.size - self.offset, self.max_payload - address_size, self.tag.element_size
        )
        self.__log.debug(f"Writing {self.size} bytes of {self.tag.address} at offset {self.offset}")
        writer.write_bytes(self.tag.data[self.offset : self.offset + self.size])

        # progress is counted when the chunk is sent, rebuilding resends the same chunk
        self.tag.offset = self.offset + self.size
        return writer.getvalue()

    def _apply(self, payload: bytes):
        pass
