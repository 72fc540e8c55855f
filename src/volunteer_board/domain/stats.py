"""Domain models for board statistics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BoardStats:
    """Totals shown above the record list."""

    record_count: int
    total_hours: float
    total_comments: int
