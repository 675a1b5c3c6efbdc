from itertools import islice

from plc5comm.util import PacketLazyFormatter, cycle, print_bytes_msg


def test_print_bytes_msg_returns_expected_output_for_msg():
    TEST_MESSAGE = b'This is a message'
    EXPECTED_RESPONSE = '\n(0000) 54 68 69 73 20 69 73 20 61 20 \n(0010) 6d 65 73 73 61 67 65 '
    assert EXPECTED_RESPONSE == print_bytes_msg(TEST_MESSAGE)


def test_packet_lazy_formatter():
    formatter = PacketLazyFormatter(b'\x06\x00')
    assert str(formatter) == '\n(0000) 06 00 '
    assert len(formatter) == 2


def test_cycle_wraps_to_start():
    assert list(islice(cycle(3, start=1), 7)) == [1, 2, 3, 1, 2, 3, 1]
