import pytest

from plc5comm.buffer import BufferReader, BufferWriter
from plc5comm.exceptions import BufferEmptyError, BufferTooSmallError, DataError


def test_writer_writes_little_endian_words():
    writer = BufferWriter(5)
    writer.write_u8(0x06).write_u16_le(0x1234).write_bytes(b'\xaa\xbb')
    assert writer.getvalue() == b'\x06\x34\x12\xaa\xbb'
    assert writer.remaining == 0
    assert len(writer) == 5


def test_writer_overflow_leaves_buffer_untouched():
    writer = BufferWriter(3)
    writer.write_u16_le(0xFFFF)
    with pytest.raises(BufferTooSmallError):
        writer.write_u16_le(1)
    with pytest.raises(BufferTooSmallError):
        writer.write_bytes(b'\x00\x00')
    assert writer.getvalue() == b'\xff\xff'
    assert writer.offset == 2


@pytest.mark.parametrize(['method', 'value'], [('write_u8', 256), ('write_u8', -1), ('write_u16_le', 0x10000)])
def test_writer_rejects_values_that_do_not_fit(method, value):
    writer = BufferWriter(10)
    with pytest.raises(DataError):
        getattr(writer, method)(value)
    assert writer.offset == 0


def test_zero_capacity_writer():
    with pytest.raises(BufferTooSmallError):
        BufferWriter(0).write_u8(0)


def test_reader():
    reader = BufferReader(b'\x46\x00\x34\x12\x01\x02\x03')
    assert reader.read_u8() == 0x46
    assert reader.read_u8() == 0
    assert reader.read_u16_le() == 0x1234
    assert reader.remaining == 3
    assert reader.read_bytes() == b'\x01\x02\x03'
    assert reader.remaining == 0


def test_reader_raises_past_end():
    reader = BufferReader(b'\x01')
    with pytest.raises(BufferEmptyError):
        reader.read_u16_le()
    assert reader.offset == 0
