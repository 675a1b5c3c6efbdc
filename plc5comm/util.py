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
Various utility functions.
"""

from typing import Iterator


def cycle(stop: int, start: int = 0) -> Iterator[int]:
    """
    Endless counter from `start` to `stop` (inclusive), wrapping back to `start`.
    Used for transfer sequence numbers.
    """
    val = start
    while True:
        if val > stop:
            val = start

        yield val
        val += 1


def print_bytes_msg(msg: bytes, info: str = "") -> str:
    """
    Format `msg` as rows of 10 hex bytes prefixed by the row offset, for packet dumps in the logs
    """
    out = info
    for idx, ch in enumerate(msg):
        if idx % 10 == 0:
            out += f"\n({idx:0>4d}) "
        out += f"{ch:0>2x} "
    return out


class PacketLazyFormatter:
    """
    Defers the hex dump of a packet until a log record is actually emitted
    """

    def __init__(self, data: bytes):
        self._data = data

    def __str__(self):
        return print_bytes_msg(self._data)

    def __len__(self):
        return len(self._data)
