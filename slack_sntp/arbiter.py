"""
Result Arbiter
==============

Picks one reading out of a fan-out batch.

  1. Slack filtering: successes whose round trip exceeds the allowed
     maximum are rewritten as failures (no cause, descriptive message).
  2. Selection: the surviving successes are sorted by round trip and the
     one at index n // 2 is taken (upper median for even n). Readings are
     never averaged: time and uptime pairs only make sense together.

If nothing survives, every failure message is folded into one
AllRequestsFailure.
"""

import logging
from typing import Optional, Sequence

from .errors import AllRequestsFailure
from .sntp_protocol import Failure, QueryOutcome, Success, TimeSyncInfo

logger = logging.getLogger(__name__)


class ResultArbiter:
    """Median-by-round-trip selection over a batch of query outcomes.

    Args:
        max_round_trip_ms: Largest round trip (ms) a reading may take.
    """

    def __init__(self, max_round_trip_ms: int):
        self.max_round_trip_ms = max_round_trip_ms

    def turn_slow_requests_into_failure(
        self, outcomes: Sequence[QueryOutcome]
    ) -> list[QueryOutcome]:
        """Return ``outcomes`` with over-threshold successes replaced by failures."""
        return [self._reclassify(outcome) for outcome in outcomes]

    def _reclassify(self, outcome: QueryOutcome) -> QueryOutcome:
        if not isinstance(outcome, Success):
            return outcome
        if outcome.round_trip_time_ms <= self.max_round_trip_ms:
            return outcome

        logger.warning(
            f"Slow reply discarded: rtt={outcome.round_trip_time_ms}ms "
            f"max={self.max_round_trip_ms}ms"
        )
        return Failure(
            None,
            "RoundTrip time exceeded allowed threshold:"
            f" took {outcome.round_trip_time_ms}, but max is {self.max_round_trip_ms}",
        )

    def select(self, outcomes: Sequence[QueryOutcome]) -> TimeSyncInfo:
        """Pick the median-round-trip success.

        Raises:
            AllRequestsFailure: If ``outcomes`` holds no Success.
        """
        successes = [o for o in outcomes if isinstance(o, Success)]
        if not successes:
            error = aggregate_failures([o for o in outcomes if isinstance(o, Failure)])
            raise error from error.cause

        chosen = sorted(successes, key=lambda s: s.round_trip_time_ms)[len(successes) // 2]
        logger.info(
            f"Selected reading: rtt={chosen.round_trip_time_ms}ms "
            f"({len(successes)} candidates)"
        )
        return TimeSyncInfo(
            request_time=chosen.ntp_time_ms,
            request_uptime=chosen.uptime_reference_ms,
        )


def aggregate_failures(failures: Sequence[Failure]) -> AllRequestsFailure:
    """Fold individual failures into one error.

    The message brackets every failure message, joined by "; ". The cause
    is the first error carried by any failure, or None.
    """
    msgs = "; ".join(f.error_msg for f in failures)
    cause: Optional[BaseException] = next(
        (f.error for f in failures if f.error is not None), None
    )
    return AllRequestsFailure(f"All NTP requests failed: [{msgs}]", cause)
