"""
Slack SNTP Time Source
======================

Queries an NTP pool five times concurrently against one resolved address,
discards failures and replies whose round trip took longer than the allowed
maximum, and returns the reading with the median round trip.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from .arbiter import ResultArbiter
from .errors import AllRequestsFailure
from .sntp_client import SntpClient
from .sntp_protocol import (
    DEFAULT_MAX_ROUND_TRIP_MS,
    DEFAULT_NTP_POOL,
    DEFAULT_TIMEOUT_MS,
    NTP_PORT,
    QUERY_COUNT,
    Failure,
    QueryOutcome,
    TimeSourceConfig,
    TimeSyncInfo,
)
from .stats import BatchSummary

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MSG = "Error requesting time source time."


class TimeSource(ABC):
    """A source of network time, ranked by ``config.priority``."""

    @property
    @abstractmethod
    def config(self) -> TimeSourceConfig:
        ...

    @abstractmethod
    async def request_time(self) -> TimeSyncInfo:
        """Acquire one time reading."""

    def request_time_sync(self) -> TimeSyncInfo:
        """Blocking wrapper around request_time() for non-async callers.

        Runs its own event loop via asyncio.run(), so it raises RuntimeError
        when called from a thread that already has a running loop; await
        request_time() there instead.
        """
        return asyncio.run(self.request_time())


class SlackSntpTimeSource(TimeSource):
    """A forgiving SNTP time source.

    Each request resolves ``ntp_pool`` once, fires ``QUERY_COUNT`` queries
    at the address, then takes the median-round-trip reading among those
    that finished within ``max_round_trip_ms``.

    Args:
        config:            Source id and priority.
        ntp_pool:          Hostname of the NTP pool.
        max_round_trip_ms: Maximum allowed round trip per reading (ms).
        timeout_ms:        Maximum time allowed per query (ms).
        client:            Resolver/query adapter; an SntpClient by default.
    """

    def __init__(
        self,
        config: Optional[TimeSourceConfig] = None,
        ntp_pool: str = DEFAULT_NTP_POOL,
        max_round_trip_ms: int = DEFAULT_MAX_ROUND_TRIP_MS,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        client: Optional[SntpClient] = None,
    ):
        if timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")
        if max_round_trip_ms < 0:
            raise ValueError(f"max_round_trip_ms must not be negative, got {max_round_trip_ms}")

        self._config = config or TimeSourceConfig()
        self.ntp_pool = ntp_pool
        self.max_round_trip_ms = max_round_trip_ms
        self.timeout_ms = timeout_ms

        self._client = client or SntpClient()
        self._arbiter = ResultArbiter(max_round_trip_ms)

    @property
    def config(self) -> TimeSourceConfig:
        return self._config

    # ---- Request -------------------------------------------------------------

    async def request_time(self) -> TimeSyncInfo:
        """Acquire one reading from the pool.

        Returns:
            The median-round-trip reading of the batch.

        Raises:
            ResolutionError:    If the pool name cannot be resolved. No
                                query is sent in that case.
            AllRequestsFailure: If no query produced a fast enough reading.
        """
        # Resolution errors are not aggregated; they surface as raised
        address = await self._client.query_host_address(self.ntp_pool)

        raw = await asyncio.gather(
            *(self._request_time_to_address(address) for _ in range(QUERY_COUNT))
        )
        results = self._arbiter.turn_slow_requests_into_failure(raw)
        summary = BatchSummary.from_outcomes(raw, results)
        logger.info(f"{self.config.id} batch: {summary}")

        try:
            return self._arbiter.select(results)
        except AllRequestsFailure as e:
            logger.error(f"{self.config.id}: {e}")
            raise

    async def _request_time_to_address(self, address: str) -> QueryOutcome:
        """Run one blocking query on the executor, turning errors into a Failure."""
        loop = asyncio.get_running_loop()
        try:
            outcome = await asyncio.wait_for(
                loop.run_in_executor(
                    None, self._client.request_time, address, NTP_PORT, self.timeout_ms
                ),
                timeout=self.timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError as e:
            outcome = Failure(e, f"Timeout after {self.timeout_ms}ms")
        except Exception as e:
            outcome = Failure(e, str(e) or DEFAULT_ERROR_MSG)

        logger.debug(f"Query {address}: {outcome}")
        return outcome
