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
Encoding of PCCC word-range request headers and validation of their replies.

Request header::

    CMD (0x06) | STS (0x00) | TSN (UINT) | FNC | offset in words (UINT) | total size in words (UINT)

Reply::

    CMD (0x46) | STS | TSN (UINT) | [EXT STS] | data ...
"""

import logging
from typing import Optional

from .buffer import BufferWriter
from .const import (
    PCCC_ERROR_CODE,
    PCCC_EXT_ERROR_CODE,
    PCCC_REPLY_HEADER_SIZE,
    PCCC_STS_EXTENDED,
    PCCC_STS_SUCCESS,
    PCCC_TYPED_CMD,
    PCCC_TYPED_CMD_REPLY,
)
from .exceptions import BadReplyError, TooSmallResponseError

__all__ = [
    "encode_request_header",
    "validate_response",
    "response_sequence",
    "decode_status",
]

_log = logging.getLogger(__name__)


def encode_request_header(
    writer: BufferWriter, function: int, sequence: int, offset_words: int, total_words: int
) -> BufferWriter:
    writer.write_u8(PCCC_TYPED_CMD)
    writer.write_u8(PCCC_STS_SUCCESS)  # status, always zero in requests
    writer.write_u16_le(sequence)
    writer.write_u8(function)
    writer.write_u16_le(offset_words)
    writer.write_u16_le(total_words)
    return writer


def decode_status(sts: int, ext_sts: Optional[int] = None) -> str:
    """
    Human readable text for a PCCC status byte, using the extended status when ``sts`` is ``0xF0``
    """
    if sts == PCCC_STS_EXTENDED and ext_sts is not None:
        return PCCC_EXT_ERROR_CODE.get(ext_sts, f"Unknown extended status 0x{ext_sts:02x}")

    # local errors use the low nibble, remote errors the high nibble
    code = sts & 0xF0 or sts & 0x0F
    return PCCC_ERROR_CODE.get(code, f"Unknown status 0x{sts:02x}")


def response_sequence(data: bytes) -> Optional[int]:
    if len(data) < PCCC_REPLY_HEADER_SIZE:
        return None
    return int.from_bytes(data[2:4], "little")


def validate_response(data: bytes) -> bytes:
    """
    Checks the command and status bytes of a reply.

    :return: the reply data following the 4 byte header
    """
    if data is None or len(data) < PCCC_REPLY_HEADER_SIZE:
        _log.warning("Unexpectedly short PCCC response!")
        raise TooSmallResponseError(
            f"Response of {0 if data is None else len(data)} bytes is shorter than the {PCCC_REPLY_HEADER_SIZE} byte header"
        )

    if data[0] != PCCC_TYPED_CMD_REPLY:
        _log.warning(f"Unexpected PCCC response command 0x{data[0]:02x}")
        raise BadReplyError(f"Unexpected response command 0x{data[0]:02x}, expected 0x{PCCC_TYPED_CMD_REPLY:02x}")

    sts = data[1]
    if sts != PCCC_STS_SUCCESS:
        ext_sts = data[PCCC_REPLY_HEADER_SIZE] if len(data) > PCCC_REPLY_HEADER_SIZE else None
        msg = decode_status(sts, ext_sts)
        _log.warning(f"Received error response {msg} (0x{sts:02x})")
        raise BadReplyError(msg)

    return bytes(data[PCCC_REPLY_HEADER_SIZE:])
