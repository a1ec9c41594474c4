"""
SNTP Query Types
================

Outcome and result types exchanged between the query adapter, the
fan-out engine and the arbiter.

QUERY OUTCOME (one per attempt):
    Success   ntp_time_ms, uptime_reference_ms, round_trip_time_ms
    Failure   error (optional), error_msg

TIME SYNC INFO (one per request):
    request_time    network time at acquisition (epoch ms)
    request_uptime  local monotonic clock at acquisition (ms)

A caller projects the current network time forward from a TimeSyncInfo:
    now = request_time + (uptime_ms() - request_uptime)
"""

import time
from dataclasses import dataclass
from typing import Optional, Union


# =================
# CONSTANTS
# =================

NTP_PORT = 123
NTP_VERSION = 3

QUERY_COUNT = 5             # attempts per fan-out batch

DEFAULT_NTP_POOL = "time.google.com"
DEFAULT_MAX_ROUND_TRIP_MS = 1_000
DEFAULT_TIMEOUT_MS = 10_000

DEFAULT_SOURCE_ID = "default-slack-sntp"
DEFAULT_SOURCE_PRIORITY = 10


# ===================
# UTILITY FUNCTIONS
# ===================

def current_time_ms() -> int:
    """Current time in milliseconds since Unix epoch."""
    return int(time.time() * 1000)


def uptime_ms() -> int:
    """Monotonic clock in milliseconds (unaffected by wall-clock changes)."""
    return int(time.monotonic() * 1000)


# =================
# DATA CLASSES
# =================

@dataclass(frozen=True)
class TimeSourceConfig:
    """Identity of a time source within the surrounding framework."""
    id: str = DEFAULT_SOURCE_ID
    priority: int = DEFAULT_SOURCE_PRIORITY


@dataclass(frozen=True)
class Success:
    """A completed, timed query.

    ``ntp_time_ms`` is the network time observed at the instant the local
    monotonic clock read ``uptime_reference_ms``.
    """
    ntp_time_ms: int
    uptime_reference_ms: int
    round_trip_time_ms: int


@dataclass(frozen=True)
class Failure:
    """A query that did not produce a usable reading."""
    error: Optional[BaseException]
    error_msg: str


QueryOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class TimeSyncInfo:
    """An accepted time reading paired with the uptime it was taken at."""
    request_time: int
    request_uptime: int

    def now_ms(self, uptime: Optional[int] = None) -> int:
        """Project the reading forward to ``uptime`` (default: now).

        Args:
            uptime: Monotonic timestamp (ms) to project to.

        Returns:
            Estimated network time in epoch milliseconds.
        """
        if uptime is None:
            uptime = uptime_ms()
        return self.request_time + (uptime - self.request_uptime)
