from __future__ import annotations


class EvacuationPlannerError(Exception):
    """Base evacuation planner exception."""


class UpstreamUnavailableError(EvacuationPlannerError):
    """Raised by upstream clients on network, timeout, status or payload failures."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class QuotaExceededError(EvacuationPlannerError):
    """Raised when the daily call budget of a gated upstream source is spent."""

    def __init__(self, source: str, limit: int | None = None) -> None:
        detail = f" (limit {limit}/day)" if limit is not None else ""
        super().__init__(f"daily quota for {source} reached{detail}; retry tomorrow")
        self.source = source
        self.limit = limit
