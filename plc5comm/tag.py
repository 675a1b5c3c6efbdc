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

import logging
from abc import ABC, abstractmethod
from typing import Any, List, NamedTuple, Optional, Type, Union

from .address import LogicalAddress, parse_address
from .const import PLC5_READ_MAX_PAYLOAD, PLC5_WRITE_MAX_PAYLOAD, ErrorKind, State
from .data_types import PLC5_DATA_SIZE, DataType, data_type_for
from .exceptions import (
    BusyError,
    ConfigurationError,
    NullReferenceError,
    Plc5Error,
    RequestError,
    UnsupportedError,
)
from .transfer import ReadChunk, TransferChunk, WriteChunk

__all__ = ["OperationStatus", "TagDriver", "PLC5Tag"]


class OperationStatus(NamedTuple):
    state: State  #: where the last read/write is at
    error: Optional[ErrorKind] = None  #: kind of error that stopped the operation, else ``None``
    message: Optional[str] = None  #: error message if unsuccessful, else ``None``

    def __bool__(self):
        """
        ``True`` only if the last operation completed successfully
        """
        return self.state == State.OK

    @classmethod
    def failed(cls, err: Plc5Error) -> "OperationStatus":
        return cls(State.ERROR, err.kind, str(err))

    def __str__(self):
        if self.error is None:
            return self.state.name
        return f"{self.state.name}({self.error.name}): {self.message}"


class TagDriver(ABC):
    """
    Operations every controller family's tag provides.

    ``read`` and ``write`` only start an operation, progress is made by the transport
    and the outcome is observed through ``status``.
    """

    @abstractmethod
    def abort(self) -> None:
        """
        Stop any in-flight read or write
        """

    @abstractmethod
    def read(self) -> State:
        ...

    @abstractmethod
    def write(self) -> State:
        ...

    @abstractmethod
    def status(self) -> OperationStatus:
        ...

    @abstractmethod
    def tickler(self) -> None:
        """
        Periodic background work for families that need it
        """

    @abstractmethod
    def get_attr(self, name: str) -> int:
        ...

    @abstractmethod
    def set_attr(self, name: str, value: int) -> None:
        ...


class PLC5Tag(TagDriver):
    """
    A value in a PLC-5 data file, read and written in chunks with word-range commands.

    The value is held in :attr:`data`, reads fill it and writes send it.
    """

    __log = logging.getLogger(f"{__module__}.{__qualname__}")

    def __init__(
        self,
        transport,
        address: Union[str, LogicalAddress],
        element_size: Optional[int] = None,
        element_count: Optional[int] = None,
        max_read_payload: int = PLC5_READ_MAX_PAYLOAD,
        max_write_payload: int = PLC5_WRITE_MAX_PAYLOAD,
    ):
        """
        :param transport: the :class:`~plc5comm.transport.Transport` exchanges are sent through
        :param address: a data file address string (e.g. ``N7:0``, ``F8:0{10}``) or a :class:`LogicalAddress`
        :param element_size: bytes per element, defaults to the size for the address' file type
        :param element_count: number of elements, defaults to the ``{count}`` in the address or 1
        """
        if transport is None:
            raise NullReferenceError("A transport is required to create a tag")
        if address is None:
            raise NullReferenceError("A data file address is required to create a tag")

        if isinstance(address, LogicalAddress):
            parsed_count = 1
        else:
            address, parsed_count = parse_address(address)

        if element_size is None:
            element_size = self._default_element_size(address)
        if element_count is None:
            element_count = parsed_count

        if element_size <= 0:
            raise ConfigurationError(f"Element size must be positive, got {element_size}")
        if element_count <= 0:
            raise ConfigurationError(f"Element count must be positive, got {element_count}")
        if (element_size * element_count) % 2:
            raise ConfigurationError(
                f"Value size {element_size * element_count} is not a whole number of 16-bit words"
            )
        if not 0 < max_read_payload <= 0xFF:
            raise ConfigurationError(f"Read payload limit must be between 1 and 255 bytes, got {max_read_payload}")

        self.transport = transport
        self.address = address
        self.element_size = element_size
        self.element_count = element_count
        self.size = element_size * element_count  #: total size of the value in bytes
        self.data = bytearray(self.size)
        self.offset = 0  #: bytes transferred so far in the current operation
        self.sequence: Optional[int] = None  #: sequence token of the most recent request
        self.max_read_payload = max_read_payload
        self.max_write_payload = max_write_payload

        self._status = OperationStatus(State.IDLE)
        self._exchange: Optional[TransferChunk] = None

        self.__log.debug(f"Created {self!r}")

    @staticmethod
    def _default_element_size(address: LogicalAddress) -> int:
        if address.sub_element is not None and address.file_type.upper() in {"T", "C", "R"}:
            return 2  # a single word of the control element
        try:
            return PLC5_DATA_SIZE[address.file_type.upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown element size for file type {address.file_type!r}") from None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self):
        """
        Aborts any in-flight operation and releases the transport
        """
        if self.transport is None:
            return
        self.abort()
        self.transport = None
        self.__log.debug(f"Closed tag {self.address}")

    @property
    def in_progress(self) -> bool:
        return self._exchange is not None

    # ----- TagDriver ---------------------------------------------------

    def abort(self) -> None:
        if self._exchange is None:
            return

        self.__log.info(f"Aborting {self._exchange.name} of {self.address} at offset {self.offset}")
        self.transport.cancel_exchange(self)
        self._exchange = None
        if self._status.state == State.PENDING:
            self._status = OperationStatus(State.IDLE)

    def read(self) -> State:
        """
        Start reading the value into :attr:`data`
        """
        return self._start(ReadChunk)

    def write(self) -> State:
        """
        Start writing :attr:`data` to the controller
        """
        return self._start(WriteChunk)

    def status(self) -> OperationStatus:
        return self._status

    def tickler(self) -> None:
        raise UnsupportedError("PLC-5 tags do not use a tickler")

    def get_attr(self, name: str) -> int:
        key = name.lower() if isinstance(name, str) else name
        if key in {"elem_size", "element_size"}:
            value = self.element_size
        elif key in {"elem_count", "element_count"}:
            value = self.element_count
        else:
            err = UnsupportedError(f"Unsupported attribute name {name!r}")
            self.__log.warning(str(err))
            self._status = OperationStatus.failed(err)
            raise err

        if self._exchange is None:
            self._status = OperationStatus(State.OK)
        return value

    def set_attr(self, name: str, value: int) -> None:
        err = UnsupportedError(f"Attribute {name!r} is not writable")
        self.__log.warning(str(err))
        self._status = OperationStatus.failed(err)
        raise err

    # ----- transfer bookkeeping, called by the chunks ------------------

    def _start(self, chunk_type: Type[TransferChunk]) -> State:
        if self.transport is None:
            raise NullReferenceError(f"Tag {self.address} has been closed")
        if self._exchange is not None:
            raise BusyError(f"A {self._exchange.name} of {self.address} is already in progress")

        self.offset = 0
        self._status = OperationStatus(State.PENDING)
        self.__log.debug(f"Starting {chunk_type.name} of {self.size} bytes for {self.address}")
        self._begin(chunk_type(self))
        return State.PENDING

    def _begin(self, exchange: TransferChunk):
        self._exchange = exchange
        try:
            self.transport.begin_exchange(self, exchange)
        except Plc5Error as err:
            self.__log.warning(f"Unable to start {exchange.name} request: {err}")
            self._fail(exchange, err)
            raise

    def _next(self, chunk_type: Type[TransferChunk]):
        self._begin(chunk_type(self))

    def _is_current(self, exchange: TransferChunk) -> bool:
        return exchange is self._exchange

    def _complete(self, exchange: TransferChunk):
        if not self._is_current(exchange):
            return
        self.__log.debug(f"Finished {exchange.name} of {self.address}")
        self._exchange = None
        self.offset = 0
        self._status = OperationStatus(State.OK)

    def _fail(self, exchange: TransferChunk, err: Plc5Error):
        if not self._is_current(exchange):
            return
        self._exchange = None
        self._status = OperationStatus.failed(err)

    # ----- typed access to the value buffer ----------------------------

    @property
    def data_type(self) -> Type[DataType]:
        return data_type_for(self.address.file_type, self.element_size)

    def _element_span(self, index: int):
        if not 0 <= index < self.element_count:
            raise RequestError(f"Element index {index} out of range for {self.element_count} elements")
        start = index * self.element_size
        return start, start + self.element_size

    def get_value(self, index: int = 0) -> Any:
        """
        Decode one element of the value buffer using the file type's data type
        """
        start, end = self._element_span(index)
        return self.data_type.decode(self.data[start:end])

    def set_value(self, value: Any, index: int = 0) -> None:
        """
        Encode `value` into one element of the value buffer, call :meth:`write` to send it
        """
        if self._exchange is not None:
            raise BusyError(f"Cannot change the value of {self.address} while a transfer is in progress")
        start, end = self._element_span(index)
        self.data[start:end] = self.data_type.encode(value)

    @property
    def value(self) -> Union[Any, List[Any]]:
        values = [self.get_value(i) for i in range(self.element_count)]
        return values[0] if self.element_count == 1 else values

    @value.setter
    def value(self, value: Union[Any, List[Any]]):
        if self.element_count == 1:
            self.set_value(value)
            return

        if len(value) != self.element_count:
            raise RequestError(f"Expected {self.element_count} values, got {len(value)}")
        for i, val in enumerate(value):
            self.set_value(val, i)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(address={self.address!s}, element_size={self.element_size}, "
            f"element_count={self.element_count}, status={self._status!s})"
        )
