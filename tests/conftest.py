import pytest

import bushttp


@pytest.fixture
def settings():
    """ Short timeouts keep the failure-path tests quick.
    """

    return bushttp.config.Config(timeout=0.5, settle=0)


@pytest.fixture
def bus():

    bus = bushttp.transport.local.Bus()
    yield bus
    bus.close()


@pytest.fixture
def broker():

    broker = bushttp.transport.zmq.Broker('127.0.0.1')

    yield broker

    broker.stop()


class Recorder:
    """ Subscribe to a subject on the local bus and keep every message.
    """

    def __init__(self, bus, pattern):
        self.messages = list()
        self.subscription = bus.subscribe(pattern, self.messages.append)


@pytest.fixture
def recorder():
    return Recorder


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
