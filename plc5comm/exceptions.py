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

from .const import ErrorKind


class Plc5Error(Exception):
    """
    Base exception for all exceptions raised by plc5comm
    """

    #: the :class:`~plc5comm.const.ErrorKind` recorded on a tag's status when this error stops a transfer
    kind = ErrorKind.BAD_PARAM


class CommError(Plc5Error):
    """
    For exceptions raised by a transport while exchanging a request
    """

    kind = ErrorKind.COMM


class DataError(Plc5Error):
    """
    For exceptions raised during binary encoding/decoding of data
    """

    kind = ErrorKind.DATA


class BufferEmptyError(DataError):
    """
    Raised when trying to decode past the end of a buffer
    """


class BufferTooSmallError(DataError):
    """
    Raised when an encode step would write past the capacity of its buffer
    """

    kind = ErrorKind.OUT_OF_BOUNDS


class ResponseError(Plc5Error):
    """
    For exceptions raised during handling for responses to requests
    """

    kind = ErrorKind.BAD_REPLY


class TooSmallResponseError(ResponseError):
    """
    Raised when a response is shorter than the PCCC reply header
    """

    kind = ErrorKind.TOO_SMALL


class BadReplyError(ResponseError):
    """
    Raised when a response has the wrong command byte or the controller reported a fault
    """


class RequestError(Plc5Error):
    """
    For exceptions raised due to issues building requests or processing of user supplied data
    """


class NullReferenceError(RequestError):
    kind = ErrorKind.NULL_REFERENCE


class BusyError(RequestError):
    """
    Raised when starting a read or write on a tag that already has one in flight
    """

    kind = ErrorKind.BUSY


class ConfigurationError(RequestError):
    """
    Raised when a tag's geometry cannot be transferred, e.g. an element that does not fit a chunk
    """

    kind = ErrorKind.CONFIGURATION


class UnsupportedError(Plc5Error):
    """
    Raised for operations and attributes a PLC-5 tag does not support
    """

    kind = ErrorKind.UNSUPPORTED
