import pytest

from plc5comm.buffer import BufferWriter
from plc5comm.exceptions import BadReplyError, TooSmallResponseError
from plc5comm.packets import decode_status, encode_request_header, response_sequence, validate_response


def test_encode_request_header():
    writer = encode_request_header(BufferWriter(9), function=0x01, sequence=0x1234, offset_words=2, total_words=300)
    assert writer.getvalue() == b'\x06\x00\x34\x12\x01\x02\x00\x2c\x01'


def test_validate_response_returns_payload():
    assert validate_response(b'\x46\x00\x01\x00\x01\x02') == b'\x01\x02'
    assert validate_response(b'\x46\x00\x01\x00') == b''


@pytest.mark.parametrize('data', [None, b'', b'\x46', b'\x46\x00\x01'])
def test_validate_response_too_small(data):
    with pytest.raises(TooSmallResponseError):
        validate_response(data)


def test_validate_response_wrong_command():
    with pytest.raises(BadReplyError):
        validate_response(b'\x4f\x00\x01\x00\x01\x02')


def test_validate_response_status_error_is_decoded():
    with pytest.raises(BadReplyError, match='Illegal command or format'):
        validate_response(b'\x46\x10\x01\x00')


def test_validate_response_extended_status_is_decoded():
    with pytest.raises(BadReplyError, match="Address doesn't point to something usable"):
        validate_response(b'\x46\xf0\x01\x00\x06')


@pytest.mark.parametrize(
    ['sts', 'ext_sts', 'expected'],
    [
        (0x05, None, 'Application layer timed out waiting for a response'),
        (0x70, None, 'Processor is in Program mode'),
        (0xF0, None, 'Error code in the EXT STS byte'),
        (0xF0, 0x0A, 'Transaction size plus word address is too large'),
        (0xF0, 0xEE, 'Unknown extended status 0xee'),
        (0xE0, None, 'Unknown status 0xe0'),
    ]
)
def test_decode_status(sts, ext_sts, expected):
    assert decode_status(sts, ext_sts) == expected


def test_response_sequence():
    assert response_sequence(b'\x46\x00\x34\x12') == 0x1234
    assert response_sequence(b'\x46') is None
