"""
Slack SNTP Package
==================

Fault-tolerant network time acquisition: several concurrent SNTP queries
against one resolved pool address, slow replies discarded, median round
trip selected.

Modules:
    sntp_protocol - Outcome/result types, constants and clock helpers
    sntp_client   - Pool resolution and single SNTP queries (aiohttp, ntplib)
    arbiter       - Slack filtering and median selection
    stats         - Per-batch outcome summary
    time_source   - Concurrent fan-out and the TimeSource interface
    errors        - ResolutionError, AllRequestsFailure
"""

from .sntp_protocol import (
    NTP_PORT,
    QUERY_COUNT,
    Success,
    Failure,
    QueryOutcome,
    TimeSyncInfo,
    TimeSourceConfig,
    current_time_ms,
    uptime_ms,
)
from .errors import ResolutionError, AllRequestsFailure
from .sntp_client import SntpClient
from .arbiter import ResultArbiter, aggregate_failures
from .stats import BatchSummary
from .time_source import TimeSource, SlackSntpTimeSource

__all__ = [
    "NTP_PORT",
    "QUERY_COUNT",
    "Success",
    "Failure",
    "QueryOutcome",
    "TimeSyncInfo",
    "TimeSourceConfig",
    "current_time_ms",
    "uptime_ms",
    "ResolutionError",
    "AllRequestsFailure",
    "SntpClient",
    "ResultArbiter",
    "aggregate_failures",
    "BatchSummary",
    "TimeSource",
    "SlackSntpTimeSource",
]
