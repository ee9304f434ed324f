"""
Day rollup - fixed 24h buckets over a trailing window

Bucket i (oldest first) covers
    [reference_time - (window_days - i) * DAY, reference_time - (window_days - i - 1) * DAY)
so the last bucket ends exactly at reference_time (exclusive).
"""

from datetime import datetime, timezone
from typing import Dict, List, Sequence

import numpy as np

from eventlens.core.errors import InvalidArgument
from eventlens.core.reference_data import MS_PER_DAY

DATE_LABEL_FORMAT = "%b %d"


class DayBucket:
    """Per-day counts for trend charts"""

    def __init__(
        self,
        date: str,
        day_start: int,
        day_end: int,
        event_count: int = 0,
        purchase_count: int = 0,
        revenue: float = 0.0,
        unique_users: int = 0,
        unique_sessions: int = 0,
    ):
        self.date = date
        self.day_start = day_start
        self.day_end = day_end
        self.event_count = event_count
        self.purchase_count = purchase_count
        self.revenue = revenue
        self.unique_users = unique_users
        self.unique_sessions = unique_sessions

    def __repr__(self):
        return f"DayBucket({self.date}, events={self.event_count}, purchases={self.purchase_count})"

    def to_dict(self) -> Dict:
        return {
            'date': self.date,
            'day_start': self.day_start,
            'day_end': self.day_end,
            'event_count': self.event_count,
            'purchase_count': self.purchase_count,
            'revenue': self.revenue,
            'unique_users': self.unique_users,
            'unique_sessions': self.unique_sessions,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'DayBucket':
        return cls(**data)


def day_label(day_start_ms: int) -> str:
    """Human-readable UTC label, e.g. 'Mar 07'"""
    return datetime.fromtimestamp(day_start_ms // 1000, tz=timezone.utc).strftime(DATE_LABEL_FORMAT)


def rollup_by_day(events: Sequence, window_days: int, reference_time: int) -> List[DayBucket]:
    """
    Assign each event to exactly one day bucket and total it.

    Events outside the window are ignored. Every bucket is emitted, including
    empty ones, so the series has no gaps.
    """
    if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days < 1:
        raise InvalidArgument(f"window_days must be an integer >= 1, got {window_days!r}")

    window_start = reference_time - window_days * MS_PER_DAY

    event_counts = np.zeros(window_days, dtype=np.int64)
    purchase_counts = np.zeros(window_days, dtype=np.int64)
    revenue = np.zeros(window_days, dtype=np.float64)
    users: List[set] = [set() for _ in range(window_days)]
    sessions: List[set] = [set() for _ in range(window_days)]

    if len(events):
        timestamps = np.fromiter((e.timestamp for e in events), dtype=np.int64, count=len(events))
        bucket_idx = (timestamps - window_start) // MS_PER_DAY
        in_window = (timestamps >= window_start) & (timestamps < reference_time)

        is_purchase = np.fromiter((e.is_purchase for e in events), dtype=bool, count=len(events))
        amounts = np.fromiter(
            ((e.revenue or 0.0) if e.is_purchase else 0.0 for e in events),
            dtype=np.float64,
            count=len(events),
        )

        idx = bucket_idx[in_window]
        event_counts = np.bincount(idx, minlength=window_days)
        purchase_counts = np.bincount(idx, weights=is_purchase[in_window].astype(np.float64), minlength=window_days).astype(np.int64)
        revenue = np.bincount(idx, weights=amounts[in_window], minlength=window_days)

        for position in np.flatnonzero(in_window):
            event = events[position]
            bucket = bucket_idx[position]
            users[bucket].add(event.user_id)
            sessions[bucket].add(event.session_id)

    buckets = []
    for i in range(window_days):
        day_start = window_start + i * MS_PER_DAY
        buckets.append(DayBucket(
            date=day_label(day_start),
            day_start=day_start,
            day_end=day_start + MS_PER_DAY,
            event_count=int(event_counts[i]),
            purchase_count=int(purchase_counts[i]),
            revenue=float(revenue[i]),
            unique_users=len(users[i]),
            unique_sessions=len(sessions[i]),
        ))
    return buckets
