"""Parsing and ordering helpers for listing timestamps."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence


class MissingTimestampError(LookupError):
    """Raised when a listing item carries no timestamp attribute."""


@dataclass(frozen=True)
class OrderViolation:
    position: int
    previous: datetime
    current: datetime

    def describe(self) -> str:
        return (
            f"Article #{self.position} ({self.current.isoformat()}) is newer than "
            f"article #{self.position - 1} ({self.previous.isoformat()})."
        )


def parse_age_title(title: str | None) -> datetime:
    """Parse an age title such as '2025-05-26T22:19:17 1748297957'.

    Only the ISO component is used; the trailing epoch seconds are ignored.
    The site renders UTC without an offset, so naive values are tagged UTC.
    """
    if title is None or not title.strip():
        raise MissingTimestampError("title attribute not found on age element")

    iso_part = title.split()[0]
    try:
        parsed = datetime.fromisoformat(iso_part)
    except ValueError as exc:
        raise ValueError(f"Invalid age title '{title}', expected ISO-8601 timestamp") from exc

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def find_ordering_violations(timestamps: Sequence[datetime]) -> list[OrderViolation]:
    """Return every adjacent pair where a later item is newer than the one before it."""
    violations: list[OrderViolation] = []
    for index in range(1, len(timestamps)):
        previous, current = timestamps[index - 1], timestamps[index]
        if previous < current:
            violations.append(OrderViolation(position=index + 1, previous=previous, current=current))
    return violations


def describe_violations(violations: Sequence[OrderViolation]) -> str:
    return "\n".join(violation.describe() for violation in violations)
