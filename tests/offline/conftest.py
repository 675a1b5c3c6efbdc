import pytest

from plc5comm import LoopbackTransport, PLC5Simulator
from plc5comm.transport import Transport

PATTERN = bytes(i % 251 for i in range(2000))


@pytest.fixture
def simulator():
    plc = PLC5Simulator()
    n7 = plc.create_file(7, 'N', 1000)
    n7.data[:] = PATTERN
    plc.create_file(8, 'F', 100)
    plc.create_file(300, 'N', 2000)
    return plc


@pytest.fixture
def transport(simulator):
    return LoopbackTransport(simulator.handle)


@pytest.fixture
def manual_transport(simulator):
    return LoopbackTransport(simulator.handle, auto_dispatch=False)


class RecordingTransport(Transport):
    """Keeps exchanges so tests can drive build/apply by hand"""

    def __init__(self):
        self.exchanges = []
        self.canceled = []
        self._sequence = 0

    def begin_exchange(self, owner, exchange):
        self.exchanges.append(exchange)

    def cancel_exchange(self, owner):
        self.canceled.append(owner)

    def next_sequence(self):
        self._sequence += 1
        return self._sequence


@pytest.fixture
def recorder():
    return RecordingTransport()
