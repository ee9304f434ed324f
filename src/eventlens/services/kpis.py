"""
KPI summary over an event collection
"""

import math
from typing import Dict, Iterable, Optional


class KpiSummary:
    """Headline dashboard numbers; recomputed on every filter or seed change"""

    def __init__(
        self,
        unique_users: int,
        unique_sessions: int,
        conversion_rate: float,
        total_revenue: float,
        date_from: Optional[int],
        date_to: Optional[int],
    ):
        self.unique_users = unique_users
        self.unique_sessions = unique_sessions
        self.conversion_rate = conversion_rate
        self.total_revenue = total_revenue
        self.date_from = date_from
        self.date_to = date_to

    def __eq__(self, other):
        if not isinstance(other, KpiSummary):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"KpiSummary({self.to_dict()!r})"

    def to_dict(self) -> Dict:
        return {
            'unique_users': self.unique_users,
            'unique_sessions': self.unique_sessions,
            'conversion_rate': self.conversion_rate,
            'total_revenue': self.total_revenue,
            'date_from': self.date_from,
            'date_to': self.date_to,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'KpiSummary':
        return cls(**{key: data.get(key) for key in (
            'unique_users', 'unique_sessions', 'conversion_rate',
            'total_revenue', 'date_from', 'date_to',
        )})

    @classmethod
    def empty(cls) -> 'KpiSummary':
        return cls(0, 0, 0.0, 0.0, None, None)


def compute_kpis(events: Iterable) -> KpiSummary:
    """
    Reduce events to unique users/sessions, conversion rate, revenue and the
    covered date range.

    A user converts with at least one signup or purchase. Revenue counts
    purchase events only.
    """
    users = set()
    sessions = set()
    converted = set()
    revenues = []
    date_from = None
    date_to = None

    for event in events:
        users.add(event.user_id)
        sessions.add(event.session_id)
        if event.is_conversion:
            converted.add(event.user_id)
        if event.is_purchase and event.revenue:
            revenues.append(event.revenue)

        ts = event.timestamp
        if date_from is None or ts < date_from:
            date_from = ts
        if date_to is None or ts > date_to:
            date_to = ts

    if not users:
        return KpiSummary.empty()

    return KpiSummary(
        unique_users=len(users),
        unique_sessions=len(sessions),
        conversion_rate=len(converted) / len(users),
        # fsum: total is independent of event order
        total_revenue=math.fsum(revenues),
        date_from=date_from,
        date_to=date_to,
    )
