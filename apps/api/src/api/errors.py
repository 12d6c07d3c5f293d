from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    """Error rendered as ``{"success": false, "error": {...}}`` with ``status_code``."""

    code: str
    message: str
    status_code: int

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"
