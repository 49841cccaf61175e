"""Rating aggregation: folds rating rows into summary statistics.

Nothing computed here is persisted: album and track pages call these
functions on every fetch with whatever rows the store currently holds.
All functions are pure and synchronous, so they are safe to call from
any number of concurrent requests.

Distribution buckets
--------------------
The histogram has ten buckets, one per half star.  A rating ``r`` lands
in bucket ``floor(r * 2) - 1``::

    0.5 -> 0    1.0 -> 1    2.5 -> 4    5.0 -> 9

Values whose bucket falls outside ``0..9`` (for example a legacy ``0`` or
``5.5`` row) are left out of the histogram but still count towards
``count`` and ``average``, matching how the album page has always
reported them.  The write path never lets such values in.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from musicboard.models.ratings import (
    DISTRIBUTION_BUCKETS,
    Rating,
    RatingSummary,
    TrackRatingStats,
)


def _value(row: Rating | float) -> float:
    return row.rating if isinstance(row, Rating) else float(row)


def distribution_bucket(rating: float) -> int | None:
    """Return the histogram bucket for *rating*, or ``None`` if off-scale."""
    index = math.floor(rating * 2) - 1
    if 0 <= index < DISTRIBUTION_BUCKETS:
        return index
    return None


def rating_distribution(ratings: Iterable[Rating | float]) -> list[int]:
    """Return the ten-bucket histogram of *ratings*."""
    distribution = [0] * DISTRIBUTION_BUCKETS
    for row in ratings:
        index = distribution_bucket(_value(row))
        if index is not None:
            distribution[index] += 1
    return distribution


def average_rating(ratings: Iterable[Rating | float]) -> float:
    """Arithmetic mean of *ratings*, ``0.0`` when there are none."""
    values = [_value(row) for row in ratings]
    if not values:
        return 0.0
    return sum(values) / len(values)


def aggregate_ratings(
    ratings: Iterable[Rating | float],
    user_id: str | None = None,
    target_id: str | None = None,
) -> RatingSummary:
    """Fold *ratings* for one target into a :class:`RatingSummary`.

    Parameters
    ----------
    ratings:
        Rating rows (or bare values) for a single album or track, in any
        order.
    user_id:
        The viewer.  When given, ``user_rating`` is that user's own rating
        (``0.0`` if they have not rated).  Bare values carry no user and
        never match.
    target_id:
        Echoed into the summary for the caller's convenience.
    """
    rows = list(ratings)
    user_rating = 0.0
    if user_id is not None:
        for row in rows:
            if isinstance(row, Rating) and row.user_id == user_id:
                user_rating = row.rating

    return RatingSummary(
        target_id=target_id,
        count=len(rows),
        average=average_rating(rows),
        distribution=rating_distribution(rows),
        user_rating=user_rating,
    )


def aggregate_track_ratings(rows: Iterable[Rating]) -> dict[str, TrackRatingStats]:
    """Build per-track running averages while folding *rows* once.

    Each track keeps a running mean updated as
    ``avg += (rating - avg) / count``, which yields the same value as the
    simple mean of that track's ratings without a second pass.
    """
    counts: dict[str, int] = {}
    averages: dict[str, float] = {}

    for row in rows:
        track_id = row.target_id
        count = counts.get(track_id, 0) + 1
        previous = averages.get(track_id, 0.0)
        counts[track_id] = count
        averages[track_id] = previous + (row.rating - previous) / count

    return {
        track_id: TrackRatingStats(
            track_id=track_id,
            count=counts[track_id],
            average=averages[track_id],
        )
        for track_id in counts
    }
