import pytest

from plc5comm.address import encode_logical_address
from plc5comm.exceptions import RequestError
from plc5comm.simulator import PLC5Simulator


def _request(function, file_number, element, tail, offset=0, total=1, sequence=0x0102):
    return (
        bytes([0x06, 0x00]) + sequence.to_bytes(2, 'little') + bytes([function])
        + offset.to_bytes(2, 'little') + total.to_bytes(2, 'little')
        + encode_logical_address(file_number, element) + tail
    )


def test_read_returns_words(simulator):
    reply = simulator.handle(_request(0x01, 7, 1, b'\x04', total=2))
    assert reply == b'\x46\x00\x02\x01' + bytes([2, 3, 4, 5])


def test_write_updates_file(simulator):
    reply = simulator.handle(_request(0x00, 8, 0, b'\x01\x02\x03\x04', total=2))
    assert reply == b'\x46\x00\x02\x01'
    assert simulator.files[8].data[:4] == b'\x01\x02\x03\x04'


def test_missing_file():
    reply = PLC5Simulator().handle(_request(0x01, 7, 0, b'\x02'))
    assert reply == b'\x46\xf0\x02\x01\x06'


def test_range_past_end_of_file(simulator):
    reply = simulator.handle(_request(0x01, 8, 99, b'\x08', total=4))
    assert reply == b'\x46\xf0\x02\x01\x0a'


def test_unknown_function(simulator):
    reply = simulator.handle(_request(0x05, 7, 0, b'\x02'))
    assert reply == b'\x46\x10\x02\x01'


def test_truncated_request(simulator):
    assert simulator.handle(b'\x06') == b'\x46\x10\x00\x00'
    assert simulator.handle(b'\x06\x00\x01\x00\x01\x00\x00') == b'\x46\xf0\x01\x00\x01'


def test_create_file_unknown_type():
    with pytest.raises(RequestError):
        PLC5Simulator().create_file(10, 'Q', 10)
