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
Logging for plc5comm.

Every class logs through a child of the ``plc5comm`` logger named after its module and class,
e.g. ``plc5comm.transfer.ReadChunk``.  Chunk planning and tag state changes go to DEBUG and INFO,
rejected replies and unsupported attributes to WARNING.  The custom VERBOSE level sits below DEBUG
and carries the hex dump of each request and reply chunk, so a transfer can be traced byte by byte
without flooding the DEBUG output.
"""

import logging
import sys

__all__ = ["configure_default_logger", "LOG_VERBOSE"]

LOG_VERBOSE = 5


_logger = logging.getLogger("plc5comm")
_logger.addHandler(logging.NullHandler())


def _verbose(self: logging.Logger, msg, *args, **kwargs):
    if self.isEnabledFor(LOG_VERBOSE):
        self._log(LOG_VERBOSE, msg, args, **kwargs)


logging.addLevelName(LOG_VERBOSE, "VERBOSE")
logging.Logger.verbose = _verbose


def configure_default_logger(level: int = logging.INFO, filename: str = None, logger: str = None):
    """
    Helper method to configure basic logging.  `level` will set the logging level.
    To see every request and response chunk dumped as hex, use the `LOG_VERBOSE` level
    from the `plc5comm.logger` module. The default level is `logging.INFO`.

    To log to a file in addition to the terminal, set `filename` to the desired log file.

    By default this method only configures the 'plc5comm' logger, to also configure your own logger,
    set the `logger` argument to the name of the logger you wish to also configure.  For the root logger
    use an empty string (``''``).
    """
    loggers = [logging.getLogger("plc5comm")]
    if logger == "":
        loggers.append(logging.getLogger())
    elif logger:
        loggers.append(logging.getLogger(logger))

    formatter = logging.Formatter(
        fmt="{asctime} [{levelname}] {name}.{funcName}(): {message}", style="{"
    )
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    file_handler = None
    if filename:
        file_handler = logging.FileHandler(filename, encoding="utf-8")
        file_handler.setFormatter(formatter)

    for _log in loggers:
        _log.setLevel(level)
        _log.addHandler(handler)

        if file_handler is not None:
            _log.addHandler(file_handler)
