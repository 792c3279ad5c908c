"""Delay calculation between scheduled and estimated/actual times."""

from typing import Optional

from pierwatch.models import parse_timestamp


def calculate_delay_minutes(scheduled: Optional[str], estimated: Optional[str]) -> float:
    """
    Signed minutes from scheduled to estimated time.

    Negative means early. Returns 0 if either timestamp is missing or
    invalid.
    """
    scheduled_at = parse_timestamp(scheduled)
    estimated_at = parse_timestamp(estimated)
    if scheduled_at is None or estimated_at is None:
        return 0.0
    return (estimated_at - scheduled_at).total_seconds() / 60
