"""
Batch Summary
=============

Per-batch counters for a single fan-out, built after slack filtering and
logged once per request.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .sntp_protocol import Failure, QueryOutcome, Success


@dataclass(frozen=True)
class BatchSummary:
    """Outcome counts for one batch.

    Attributes:
        attempts:   Number of queries launched.
        ok:         Successes within the round-trip threshold.
        slow:       Successes rewritten as failures for being too slow.
        failed:     Attempts that failed outright (error, timeout).
        median_rtt: Round trip of the median surviving success, ms.
    """
    attempts: int
    ok: int
    slow: int
    failed: int
    median_rtt: Optional[int] = None

    @classmethod
    def from_outcomes(
        cls, raw: Sequence[QueryOutcome], filtered: Sequence[QueryOutcome]
    ) -> "BatchSummary":
        """Compare a batch before and after slack filtering.

        Args:
            raw:      Outcomes as returned by the fan-out.
            filtered: The same outcomes after slow successes were reclassified.
        """
        raw_ok = sum(1 for o in raw if isinstance(o, Success))
        rtts = sorted(o.round_trip_time_ms for o in filtered if isinstance(o, Success))
        return cls(
            attempts=len(raw),
            ok=len(rtts),
            slow=raw_ok - len(rtts),
            failed=sum(1 for o in raw if isinstance(o, Failure)),
            median_rtt=rtts[len(rtts) // 2] if rtts else None,
        )

    def __str__(self) -> str:
        rtt = f"{self.median_rtt}ms" if self.median_rtt is not None else "n/a"
        return (
            f"attempts={self.attempts} ok={self.ok} "
            f"slow={self.slow} failed={self.failed} "
            f"median_rtt={rtt}"
        )
