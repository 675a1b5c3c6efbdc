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
Wire constants for PCCC word-range commands used by PLC-5 processors.
"""

from enum import IntEnum

__all__ = [
    "State",
    "ErrorKind",
    "PCCC_TYPED_CMD",
    "PCCC_CMD_OK",
    "PCCC_TYPED_CMD_REPLY",
    "PCCC_STS_SUCCESS",
    "PCCC_STS_EXTENDED",
    "PCCC_REPLY_HEADER_SIZE",
    "PLC5_FNC_READ",
    "PLC5_FNC_WRITE",
    "PLC5_READ_MAX_PAYLOAD",
    "PLC5_WRITE_MAX_PAYLOAD",
    "ADDRESS_LEVELS_ELEMENT",
    "ADDRESS_LEVELS_SUB_ELEMENT",
    "ADDRESS_EXTENDED_LEVEL",
    "ADDRESS_MAX_SHORT_LEVEL",
    "PCCC_ERROR_CODE",
    "PCCC_EXT_ERROR_CODE",
]


class State(IntEnum):
    IDLE = 0
    PENDING = 1
    OK = 2
    ERROR = 3


class ErrorKind(IntEnum):
    NULL_REFERENCE = 1
    OUT_OF_BOUNDS = 2
    TOO_SMALL = 3
    BAD_REPLY = 4
    UNSUPPORTED = 5
    CONFIGURATION = 6
    BAD_PARAM = 7
    BUSY = 8
    DATA = 9
    COMM = 10


PCCC_TYPED_CMD = 0x06
PCCC_CMD_OK = 0x40
PCCC_TYPED_CMD_REPLY = PCCC_TYPED_CMD | PCCC_CMD_OK  # 0x46
PCCC_STS_SUCCESS = 0x00
PCCC_STS_EXTENDED = 0xF0  # real status is in the EXT STS byte
PCCC_REPLY_HEADER_SIZE = 4  # CMD, STS, TSN (2)

PLC5_FNC_READ = 0x01  # word range read
PLC5_FNC_WRITE = 0x00  # word range write

# TODO: reverify both limits against a PLC-5 with a retried request in flight
PLC5_READ_MAX_PAYLOAD = 244
PLC5_WRITE_MAX_PAYLOAD = 244

# level masks for the logical address, bit 0 is unused
ADDRESS_LEVELS_ELEMENT = 0x06  # 0b0110, file and element
ADDRESS_LEVELS_SUB_ELEMENT = 0x0E  # 0b1110, file, element and sub-element
ADDRESS_EXTENDED_LEVEL = 0xFF
ADDRESS_MAX_SHORT_LEVEL = 0xFE


PCCC_ERROR_CODE = {
    0x01: "Destination node is out of buffer space",
    0x02: "Cannot guarantee delivery, link layer",
    0x03: "Duplicate token holder detected",
    0x04: "Local port is disconnected",
    0x05: "Application layer timed out waiting for a response",
    0x06: "Duplicate node detected",
    0x07: "Station is offline",
    0x08: "Hardware fault",
    0x10: "Illegal command or format",
    0x20: "Host has a problem and will not communicate",
    0x30: "Remote node host is missing, disconnected, or shut down",
    0x40: "Host could not complete function due to hardware fault",
    0x50: "Addressing problem or memory protect rungs",
    0x60: "Function not allowed due to command protection selection",
    0x70: "Processor is in Program mode",
    0x80: "Compatibility mode file missing or communication zone problem",
    0x90: "Remote node cannot buffer command",
    0xA0: "Wait ACK (1775-KA buffer full)",
    0xB0: "Remote node problem due to download",
    0xC0: "Wait ACK (1775-KA buffer full)",
    0xF0: "Error code in the EXT STS byte",
}

PCCC_EXT_ERROR_CODE = {
    0x01: "A field has an illegal value",
    0x02: "Less levels specified in address than minimum for any address",
    0x03: "More levels specified in address than system supports",
    0x04: "Symbol not found",
    0x05: "Symbol is of improper format",
    0x06: "Address doesn't point to something usable",
    0x07: "File is wrong size",
    0x08: "Cannot complete request, situation has changed since the start of the command",
    0x09: "Data or file is too large",
    0x0A: "Transaction size plus word address is too large",
    0x0B: "Access denied, improper privilege",
    0x0C: "Condition cannot be generated, resource is not available",
    0x0D: "Condition already exists, resource is already available",
    0x0E: "Command cannot be executed",
    0x0F: "Histogram overflow",
    0x10: "No access",
    0x11: "Illegal data type",
    0x12: "Invalid parameter or invalid data",
    0x13: "Address reference exists to deleted area",
    0x14: "Command execution failure for unknown reason",
    0x15: "Data conversion error",
    0x16: "Scanner not able to communicate with 1771 rack adapter",
    0x17: "Type mismatch",
    0x18: "1771 module response was not valid",
    0x19: "Duplicated label",
    0x1A: "File is open, another node owns it",
    0x1B: "Another node is the program owner",
    0x1E: "Data table element protection violation",
    0x1F: "Temporary internal problem",
}
