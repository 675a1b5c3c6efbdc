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
Transports move request/response exchanges between tags and a controller.

A transport owns sequencing, delivery and retries, tags only hand it exchange objects
(anything with ``build()``, ``apply(data)`` and ``fail(err)``) and may cancel them.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, List, Tuple

from .exceptions import NullReferenceError, Plc5Error
from .util import cycle

__all__ = ["Transport", "LoopbackTransport"]


class Transport(ABC):
    @abstractmethod
    def begin_exchange(self, owner, exchange) -> None:
        """
        Queue `exchange` for sending on behalf of `owner`, the exchange is built when the
        transport is ready to send it and the response is applied to it when it arrives.
        """

    @abstractmethod
    def cancel_exchange(self, owner) -> None:
        """
        Drop any exchange queued or in flight for `owner`, no-op if there is none
        """

    @abstractmethod
    def next_sequence(self) -> int:
        """
        Transfer sequence number for the next outgoing request
        """


class LoopbackTransport(Transport):
    """
    Delivers requests to a callable in the same process, e.g. :meth:`PLC5Simulator.handle`.

    With `auto_dispatch` exchanges are processed as soon as they are queued, otherwise they
    wait until :meth:`poll` or :meth:`dispatch` is called.
    """

    __log = logging.getLogger(f"{__module__}.{__qualname__}")

    def __init__(self, handler: Callable[[bytes], bytes], auto_dispatch: bool = True):
        self._handler = handler
        self._queue: Deque[Tuple[object, object]] = deque()
        self._sequence = cycle(0xFFFF, start=1)
        self._dispatching = False
        self.auto_dispatch = auto_dispatch
        self.requests: List[bytes] = []  #: every request sent, in order

    @property
    def pending(self) -> int:
        return len(self._queue)

    def next_sequence(self) -> int:
        return next(self._sequence)

    def begin_exchange(self, owner, exchange) -> None:
        if owner is None or exchange is None:
            raise NullReferenceError("An owner and an exchange are required")

        self._queue.append((owner, exchange))
        if self.auto_dispatch:
            self.dispatch()

    def cancel_exchange(self, owner) -> None:
        before = len(self._queue)
        self._queue = deque(item for item in self._queue if item[0] is not owner)
        self.__log.debug(f"Canceled {before - len(self._queue)} exchange(s) for {owner!r}")

    def poll(self) -> bool:
        """
        Process one queued exchange.

        :return: ``True`` if an exchange was processed, ``False`` if the queue was empty
        """
        if not self._queue:
            return False

        owner, exchange = self._queue.popleft()
        try:
            request = exchange.build()
        except Plc5Error as err:
            self.__log.debug(f"Dropping exchange for {owner!r}, build failed: {err}")
            return True

        self.requests.append(request)
        try:
            reply = self._handler(request)
        except Plc5Error as err:
            exchange.fail(err)
            return True

        try:
            exchange.apply(reply)
        except Plc5Error as err:
            self.__log.debug(f"Response for {owner!r} rejected: {err}")
        return True

    def dispatch(self) -> int:
        """
        Process queued exchanges until the queue is empty, including follow-up exchanges
        queued while applying responses.

        :return: number of exchanges processed
        """
        if self._dispatching:
            return 0

        count = 0
        self._dispatching = True
        try:
            while self.poll():
                count += 1
        finally:
            self._dispatching = False
        return count
