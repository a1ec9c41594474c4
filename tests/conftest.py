"""
Slack SNTP Test Fixtures
"""

import threading
import time
from typing import List, Optional, Union

import pytest

from slack_sntp.errors import ResolutionError
from slack_sntp.sntp_protocol import Success


class FakeSntpClient:
    """Deterministic stand-in for SntpClient.

    Every query returns (or raises) the next scripted item. Items are handed
    out in call order; since queries run on executor threads, tests should
    not rely on which attempt receives which item.
    """

    def __init__(
        self,
        script: List[Union[Success, Exception]],
        address: str = "192.0.2.10",
        resolve_error: Optional[Exception] = None,
        delay_s: float = 0.0,
    ):
        self.script = list(script)
        self.address = address
        self.resolve_error = resolve_error
        self.delay_s = delay_s

        self.resolved_hosts: List[str] = []
        self.queried: List[tuple] = []
        self._index = 0
        self._lock = threading.Lock()

    async def query_host_address(self, host: str) -> str:
        self.resolved_hosts.append(host)
        if self.resolve_error is not None:
            raise self.resolve_error
        return self.address

    def request_time(self, address: str, port: int, timeout_ms: int) -> Success:
        with self._lock:
            item = self.script[self._index % len(self.script)]
            self._index += 1
            self.queried.append((address, port, timeout_ms))
        if self.delay_s:
            time.sleep(self.delay_s)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def query_count(self) -> int:
        return len(self.queried)


def success(rtt_ms: int, base: int = 1704067200000) -> Success:
    """Build a Success whose time and uptime encode its round trip."""
    return Success(
        ntp_time_ms=base + rtt_ms,
        uptime_reference_ms=10_000 + rtt_ms,
        round_trip_time_ms=rtt_ms,
    )


@pytest.fixture
def make_client():
    """Factory for FakeSntpClient instances."""
    return FakeSntpClient


@pytest.fixture
def unresolvable_client():
    """Client whose pool lookup always fails."""
    return FakeSntpClient(
        [success(50)],
        resolve_error=ResolutionError("Unable to resolve pool.invalid: not found"),
    )
