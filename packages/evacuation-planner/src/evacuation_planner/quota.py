from __future__ import annotations

from typing import Protocol


class QuotaGuard(Protocol):
    """Daily call budget for a gated upstream source.

    Storage and day rollover belong to the implementation; callers only
    check before issuing a call and increment right after issuing it.
    """

    source: str
    limit: int

    async def check_quota(self) -> bool: ...

    async def increment_quota(self) -> None: ...
