"""
Errors
======

ResolutionError     - pool hostname could not be resolved (raised as is)
AllRequestsFailure  - no attempt in a batch produced an acceptable reading
"""

from typing import Optional


class ResolutionError(OSError):
    """Hostname lookup for the NTP pool failed."""


class AllRequestsFailure(RuntimeError):
    """Every query in a fan-out batch failed or was too slow.

    Args:
        error_msg: Aggregate message listing each individual failure.
        cause:     Underlying error of the first failure that carried one.
    """

    def __init__(self, error_msg: str, cause: Optional[BaseException] = None):
        super().__init__(error_msg)
        self.cause = cause
