"""
Dashboard Service - Business logic behind the dashboard endpoints

Aggregates are cached by content: the key combines the aggregate name, the
fingerprint of the event collection and the aggregation parameters.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence

from eventlens.core.config import Settings
from eventlens.core.errors import InvalidArgument
from eventlens.core.event_model import Event, now_ms
from eventlens.core.fingerprint import events_fingerprint, params_fingerprint
from eventlens.core.reference_data import MAX_DAYS, MIN_DAYS
from eventlens.repositories.aggregate_repository import AggregateRepository
from eventlens.services.breakdown import BreakdownEntry, breakdown_by
from eventlens.services.filters import FilterCriteria, apply_filters
from eventlens.services.kpis import KpiSummary, compute_kpis
from eventlens.services.rollup import DayBucket, rollup_by_day
from eventlens.services.synthesizer import generate_events, validate_int

logger = logging.getLogger(__name__)

OVERVIEW_BREAKDOWN_FIELDS = ('device', 'country', 'event_type')


class DashboardService:
    """Generates, filters and aggregates event collections"""

    def __init__(self, aggregate_repo: AggregateRepository, settings: Optional[Settings] = None):
        self.aggregate_repo = aggregate_repo
        self.settings = settings or Settings()

    def get_events(
        self,
        seed: int,
        days: int,
        count: int,
        reference_time: Optional[int] = None,
    ) -> List[Event]:
        """Synthetic events with the API's range limits applied"""
        validate_int("days", days, minimum=MIN_DAYS)
        validate_int("count", count, minimum=0)
        if days > MAX_DAYS:
            raise InvalidArgument(f"days must be in [{MIN_DAYS}, {MAX_DAYS}], got {days}")
        if count > self.settings.max_event_count:
            raise InvalidArgument(f"count must be <= {self.settings.max_event_count}, got {count}")

        events = generate_events(seed, days, count, reference_time=reference_time)
        logger.info("Generated %d events (seed=%s, days=%s)", len(events), seed, days)
        return events

    def filter_events(self, events: Sequence[Event], criteria: Optional[FilterCriteria]) -> List[Event]:
        return apply_filters(events, criteria)

    def get_kpis(self, events: Sequence[Event], fingerprint: Optional[str] = None) -> KpiSummary:
        data = self._get_or_compute(
            'kpis',
            fingerprint or events_fingerprint(events),
            [],
            lambda: compute_kpis(events).to_dict(),
        )
        return KpiSummary.from_dict(data)

    def get_rollup(
        self,
        events: Sequence[Event],
        window_days: int,
        reference_time: int,
        fingerprint: Optional[str] = None,
    ) -> List[DayBucket]:
        data = self._get_or_compute(
            'rollup',
            fingerprint or events_fingerprint(events),
            [window_days, reference_time],
            lambda: [bucket.to_dict() for bucket in rollup_by_day(events, window_days, reference_time)],
        )
        return [DayBucket.from_dict(item) for item in data]

    def get_breakdown(
        self,
        events: Sequence[Event],
        field: str,
        top_n: Optional[int] = None,
        fingerprint: Optional[str] = None,
    ) -> List[BreakdownEntry]:
        data = self._get_or_compute(
            'breakdown',
            fingerprint or events_fingerprint(events),
            [field, top_n],
            lambda: [entry.to_dict() for entry in breakdown_by(events, field, top_n)],
        )
        return [BreakdownEntry.from_dict(item) for item in data]

    def build_overview(
        self,
        events: Sequence[Event],
        window_days: int,
        reference_time: Optional[int] = None,
        top_n: Optional[int] = None,
    ) -> Dict:
        """KPIs, day rollup and the three breakdowns over one collection"""
        if reference_time is None:
            reference_time = now_ms()

        fingerprint = events_fingerprint(events)
        return {
            'event_count': len(events),
            'reference_time': reference_time,
            'kpis': self.get_kpis(events, fingerprint).to_dict(),
            'rollup': [b.to_dict() for b in self.get_rollup(events, window_days, reference_time, fingerprint)],
            'breakdowns': {
                field: [e.to_dict() for e in self.get_breakdown(events, field, top_n, fingerprint)]
                for field in OVERVIEW_BREAKDOWN_FIELDS
            },
        }

    def _get_or_compute(self, name: str, fingerprint: str, params: List, compute: Callable):
        """Cached aggregate or compute and store; the cache is best-effort"""
        key = f"{name}:{fingerprint}:{params_fingerprint(params)}"

        try:
            cached = self.aggregate_repo.get(key)
        except Exception as e:
            logger.warning("Aggregate cache read failed for %s: %s", key, e)
            cached = None

        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        value = compute()
        try:
            self.aggregate_repo.store(key, value, ttl=self.settings.cache_ttl_seconds)
        except Exception as e:
            logger.warning("Aggregate cache write failed for %s: %s", key, e)
        return value
