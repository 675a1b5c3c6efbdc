"""Tests for PLC5Tag running full transfers against the simulator"""

from unittest import mock

import pytest

from plc5comm import LoopbackTransport, OperationStatus, PLC5Tag, TagDriver
from plc5comm.address import LogicalAddress
from plc5comm.const import ErrorKind, State
from plc5comm.exceptions import (
    BusyError,
    CommError,
    ConfigurationError,
    NullReferenceError,
    RequestError,
    UnsupportedError,
)

from .conftest import PATTERN


def _chunk_sizes(requests):
    return [request[-1] for request in requests]


def test_read_600_bytes_takes_three_chunks(transport):
    tag = PLC5Tag(transport, 'N7:0{300}')
    assert tag.read() == State.PENDING

    assert len(transport.requests) == 3
    assert _chunk_sizes(transport.requests) == [244, 244, 112]
    assert [r[5:7] for r in transport.requests] == [b'\x00\x00', b'\x7a\x00', b'\xf4\x00']
    assert tag.data == PATTERN[:600]
    assert tag.offset == 0
    assert tag.status() == OperationStatus(State.OK)
    assert tag.sequence == 3


def test_read_uses_element_offset(transport):
    tag = PLC5Tag(transport, 'N7:10{4}')
    tag.read()
    assert tag.status()
    assert tag.data == PATTERN[20:28]


def test_write_600_bytes(transport, simulator):
    tag = PLC5Tag(transport, 'N7:0{300}')
    data = bytes(reversed(PATTERN[:600]))
    tag.data[:] = data
    tag.write()

    # 3 byte address leaves 241 bytes per request, 240 after rounding to elements
    assert [len(r) - 12 for r in transport.requests] == [240, 240, 120]
    assert simulator.files[7].data[:600] == data
    assert simulator.files[7].data[600:] == PATTERN[600:]
    assert tag.offset == 0
    assert tag.status().state == State.OK


def test_write_then_read_values(transport):
    tag = PLC5Tag(transport, 'F8:0{3}')
    tag.value = [1.5, 2.5, -3.0]
    tag.write()
    assert tag.status()

    other = PLC5Tag(transport, 'F8:0{3}')
    other.read()
    assert other.value == [1.5, 2.5, -3.0]
    assert other.get_value(1) == 2.5


def test_single_element_value(transport):
    tag = PLC5Tag(transport, LogicalAddress('N', 7, 5))
    tag.value = -2
    tag.write()
    tag.read()
    assert tag.value == -2


def test_bad_reply_command_stops_transfer():
    handler = mock.Mock(return_value=b'\x4f\x00\x01\x00' + bytes(244))
    transport = LoopbackTransport(handler)
    tag = PLC5Tag(transport, 'N7:0{300}')
    tag.read()

    assert handler.call_count == 1
    assert tag.status().state == State.ERROR
    assert tag.status().error == ErrorKind.BAD_REPLY
    assert transport.pending == 0


def test_short_response_is_too_small():
    transport = LoopbackTransport(lambda request: b'\x46\x00')
    tag = PLC5Tag(transport, 'N7:0')
    tag.write()
    assert tag.status().error == ErrorKind.TOO_SMALL


def test_controller_fault_is_decoded(transport, simulator):
    simulator.fault = (0x70, None)
    tag = PLC5Tag(transport, 'N7:0')
    tag.read()
    status = tag.status()
    assert not status
    assert status.error == ErrorKind.BAD_REPLY
    assert status.message == 'Processor is in Program mode'


def test_missing_file_is_reported(transport):
    tag = PLC5Tag(transport, 'N9:0')
    tag.read()
    assert tag.status().message == "Address doesn't point to something usable"


def test_failure_mid_read_keeps_applied_bytes(simulator):
    replies = []

    def handler(request):
        if replies:
            return b'\x46\x10' + request[2:4]
        replies.append(request)
        return simulator.handle(request)

    transport = LoopbackTransport(handler)
    tag = PLC5Tag(transport, 'N7:0{300}')
    tag.read()

    assert len(transport.requests) == 2
    assert tag.status().error == ErrorKind.BAD_REPLY
    assert tag.data[:244] == PATTERN[:244]
    assert tag.data[244:] == bytearray(356)


def test_transport_failure_is_recorded():
    transport = LoopbackTransport(mock.Mock(side_effect=CommError('no response')))
    tag = PLC5Tag(transport, 'N7:0')
    tag.read()
    assert tag.status() == OperationStatus(State.ERROR, ErrorKind.COMM, 'no response')


def test_element_too_large_for_window(transport):
    tag = PLC5Tag(transport, 'N7:0', element_size=300, element_count=2)
    tag.read()
    assert tag.status().error == ErrorKind.CONFIGURATION
    assert transport.requests == []


def test_abort_while_awaiting_response_restarts_from_zero(manual_transport):
    tag = PLC5Tag(manual_transport, 'N7:0{300}')
    tag.read()
    assert manual_transport.poll()
    assert tag.offset == 244
    assert tag.status().state == State.PENDING
    assert manual_transport.pending == 1

    tag.abort()
    assert manual_transport.pending == 0
    assert tag.status().state == State.IDLE
    assert tag.offset == 244

    tag.read()
    assert tag.offset == 0
    assert manual_transport.dispatch() == 3
    assert manual_transport.requests[1][5:7] == b'\x00\x00'
    assert tag.status().state == State.OK
    assert tag.data == PATTERN[:600]


def test_abort_when_idle_is_noop(manual_transport):
    tag = PLC5Tag(manual_transport, 'N7:0')
    with mock.patch.object(manual_transport, 'cancel_exchange') as mock_cancel:
        tag.abort()
        assert not mock_cancel.called
    assert tag.status().state == State.IDLE


def test_second_operation_while_pending_is_refused(manual_transport):
    tag = PLC5Tag(manual_transport, 'N7:0')
    tag.read()
    with pytest.raises(BusyError):
        tag.write()
    with pytest.raises(BusyError):
        tag.set_value(1)
    assert tag.status().state == State.PENDING
    assert manual_transport.pending == 1


def test_tickler_is_unsupported(transport):
    tag = PLC5Tag(transport, 'N7:0')
    with pytest.raises(UnsupportedError):
        tag.tickler()
    assert tag.status().state == State.IDLE


@pytest.mark.parametrize(['name', 'expected'], [('elem_size', 2), ('ELEM_COUNT', 10), ('element_count', 10)])
def test_get_attr(transport, name, expected):
    tag = PLC5Tag(transport, 'N7:0{10}')
    assert tag.get_attr(name) == expected


def test_get_attr_unknown_name_records_status(transport):
    tag = PLC5Tag(transport, 'N7:0')
    with pytest.raises(UnsupportedError):
        tag.get_attr('offset')
    assert tag.status().error == ErrorKind.UNSUPPORTED


def test_get_attr_success_clears_earlier_error(transport):
    tag = PLC5Tag(transport, 'N7:0{10}')
    with pytest.raises(UnsupportedError):
        tag.get_attr('bogus')
    assert tag.get_attr('elem_size') == 2
    assert tag.status() == OperationStatus(State.OK)


def test_get_attr_success_keeps_pending_status(manual_transport):
    tag = PLC5Tag(manual_transport, 'N7:0{10}')
    tag.read()
    assert tag.get_attr('elem_count') == 10
    assert tag.status().state == State.PENDING


def test_set_attr_is_unsupported(transport):
    tag = PLC5Tag(transport, 'N7:0')
    with pytest.raises(UnsupportedError):
        tag.set_attr('elem_size', 4)
    assert tag.status().error == ErrorKind.UNSUPPORTED
    assert tag.element_size == 2


def test_tag_is_a_tag_driver(transport):
    assert isinstance(PLC5Tag(transport, 'N7:0'), TagDriver)
    with pytest.raises(TypeError):
        TagDriver()


def test_default_element_sizes(transport):
    assert PLC5Tag(transport, 'F8:0').element_size == 4
    assert PLC5Tag(transport, 'T4:0').element_size == 6
    assert PLC5Tag(transport, 'T4:0.ACC').element_size == 2
    assert PLC5Tag(transport, 'ST9:0').element_size == 84


def test_requires_transport():
    with pytest.raises(NullReferenceError):
        PLC5Tag(None, 'N7:0')


@pytest.mark.parametrize(
    ['element_size', 'element_count'],
    [(1, 3), (0, 1), (2, 0), (-2, 1)]
)
def test_invalid_geometry(transport, element_size, element_count):
    with pytest.raises(ConfigurationError):
        PLC5Tag(transport, 'N7:0', element_size=element_size, element_count=element_count)


@pytest.mark.parametrize('max_read_payload', [0, -1, 256, 1000])
def test_read_payload_limit_must_fit_size_byte(transport, max_read_payload):
    with pytest.raises(ConfigurationError):
        PLC5Tag(transport, 'N7:0', max_read_payload=max_read_payload)


def test_bad_address(transport):
    with pytest.raises(RequestError):
        PLC5Tag(transport, 'N7')


def test_closed_tag_cancels_and_refuses_operations(manual_transport):
    with PLC5Tag(manual_transport, 'N7:0') as tag:
        tag.read()
    assert manual_transport.pending == 0
    assert tag.transport is None
    with pytest.raises(NullReferenceError):
        tag.read()


def test_value_index_out_of_range(transport):
    tag = PLC5Tag(transport, 'N7:0{2}')
    with pytest.raises(RequestError):
        tag.get_value(2)
    with pytest.raises(RequestError):
        tag.value = [1, 2, 3]


def test_operation_status_truthiness():
    assert OperationStatus(State.OK)
    assert not OperationStatus(State.IDLE)
    assert not OperationStatus(State.PENDING)
    assert not OperationStatus(State.ERROR, ErrorKind.BAD_REPLY, 'bad')
    assert str(OperationStatus(State.ERROR, ErrorKind.BAD_REPLY, 'bad')) == 'ERROR(BAD_REPLY): bad'
