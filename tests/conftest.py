import logging
import socket

import pytest

from addrpool.host import HostError, InterfaceAddress


class ScriptedRandom:
    """Stands in for random.Random, replaying fixed randrange results."""

    def __init__(self, values, repeat=False):
        self.values = list(values)
        self.repeat = repeat
        self.calls = []

    def randrange(self, stop):
        if not self.values:
            raise AssertionError("ScriptedRandom ran out of values")
        value = self.values[0] if self.repeat else self.values.pop(0)
        assert 0 <= value < stop, f"scripted value {value} outside [0, {stop})"
        self.calls.append(stop)
        if self.repeat:
            self.values.append(self.values.pop(0))
        return value


def addresses(*specs):
    """Build InterfaceAddress records from 'ifname:address/prefix' strings."""
    result = []
    for spec in specs:
        ifname, rest = spec.split(":", 1)
        address, prefixlen = rest.rsplit("/", 1)
        family = socket.AF_INET6 if ":" in address else socket.AF_INET
        result.append(InterfaceAddress(ifname, address, int(prefixlen), family))
    return result


@pytest.fixture
def empty_host():
    return lambda: []


@pytest.fixture
def busy_host():
    return lambda: addresses(
        "eth0:172.27.4.9/16",
        "wlan0:192.168.5.5/24",
        "lo:127.0.0.1/8",
        "docker0:10.0.0.1/24",
        "eth0:fe80::1/64",
    )


@pytest.fixture
def broken_host():
    def _inspect():
        raise HostError("netlink socket unavailable")
    return _inspect


@pytest.fixture(autouse=True)
def reset_addrpool_logger():
    yield
    logger = logging.getLogger("addrpool")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
