"""Step-function recency multipliers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pulse.models import asUtc

# (max age, multiplier), checked in order; age beyond the last tier gets DECAY_FLOOR
DECAY_TIERS: tuple[tuple[timedelta, float], ...] = (
    (timedelta(hours=12), 1.2),
    (timedelta(days=2), 1.0),
    (timedelta(days=4), 0.8),
    (timedelta(days=7), 0.6),
    (timedelta(days=14), 0.4),
    (timedelta(days=21), 0.2),
)
DECAY_FLOOR = 0.1


def articleAge(published_date: datetime, now: datetime | None = None) -> timedelta:
    """Age of an article, never negative (future dates count as brand new)."""
    current = asUtc(now) if now else datetime.now(timezone.utc)
    return max(timedelta(0), current - asUtc(published_date))


def timeDecay(published_date: datetime, now: datetime | None = None) -> float:
    """Tier multiplier for an article's age.

    <= 12h: 1.2, <= 2d: 1.0, <= 4d: 0.8, <= 7d: 0.6, <= 14d: 0.4,
    <= 21d: 0.2, older: 0.1
    """
    age = articleAge(published_date, now)
    for max_age, multiplier in DECAY_TIERS:
        if age <= max_age:
            return multiplier
    return DECAY_FLOOR
