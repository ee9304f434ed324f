"""
GA4 Mock Source - simulated Google Analytics 4 event stream

No network traffic: a service-account mapping is checked for shape, and the
events are synthesized from a daily traffic curve. The output uses the same
Event schema as the synthesizer, so everything downstream is source-agnostic.

Days are 24h windows counted back from reference_time, so no event is newer
than it. Traffic model per day:
    sessions = weekend_factor * seasonal * random_factor * base
      weekend_factor  0.6 when the window starts on Saturday/Sunday (UTC), else 1.0
      seasonal        1 + 0.3 * sin(2*pi * day / days)
      random_factor   uniform in [0.8, 1.2)
      base            uniform in [500, 700)
One event is emitted per session.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Optional

from eventlens.core.errors import GA4AuthError, InvalidArgument
from eventlens.core.event_model import DeviceType, Event, EventType, now_ms
from eventlens.core.random_source import SeededRandom
from eventlens.core.reference_data import (
    DEFAULT_DAYS,
    DEFAULT_SEED,
    DEVICE_TYPES,
    GA4_BASE_SESSIONS_MIN,
    GA4_BASE_SESSIONS_RANGE,
    GA4_COUNTRY_CODES,
    GA4_EVENT_TYPES,
    GA4_MAX_REALTIME_EVENTS,
    GA4_MIN_REALTIME_EVENTS,
    GA4_MOCK_TOKEN_PREFIX,
    GA4_RANDOM_VARIATION_MIN,
    GA4_RANDOM_VARIATION_RANGE,
    GA4_REALTIME_EVENT_TYPES,
    GA4_REALTIME_WINDOW_MS,
    GA4_SEASONAL_AMPLITUDE,
    GA4_USER_POOL_SIZE,
    GA4_WEEKEND_TRAFFIC_MULTIPLIER,
    MAX_DAYS,
    MAX_REVENUE,
    MIN_DAYS,
    MIN_REVENUE,
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
)

logger = logging.getLogger(__name__)

REALTIME_USER_POOL_SIZE = 1_000
REALTIME_MAX_REVENUE = 210

_DEVICES = tuple(DeviceType(name) for name in DEVICE_TYPES)
_EVENT_TYPES = tuple(EventType(name) for name in GA4_EVENT_TYPES)
_REALTIME_EVENT_TYPES = tuple(EventType(name) for name in GA4_REALTIME_EVENT_TYPES)


class DailyTraffic:
    """Simulated traffic for one 24h window"""

    def __init__(self, date: str, day_start: int, sessions: int, is_weekend: bool):
        self.date = date
        self.day_start = day_start
        self.sessions = sessions
        self.is_weekend = is_weekend


class GA4MockSource:
    """Alternate event producer mimicking the GA4 Data API"""

    def authenticate(self, service_account: Optional[Dict]) -> str:
        """
        Validate a service-account mapping and hand back a mock access token.

        Raises:
            GA4AuthError: mapping missing or without client_email
        """
        if not service_account or not service_account.get('client_email'):
            raise GA4AuthError("Invalid service account configuration: client_email is required")
        return f"{GA4_MOCK_TOKEN_PREFIX}{now_ms()}"

    @staticmethod
    def _check_property(property_id: str):
        if not property_id or not str(property_id).strip():
            raise InvalidArgument("property_id is required")

    def daily_traffic(self, days: int, rand: SeededRandom, reference_time: int) -> List[DailyTraffic]:
        """Oldest day first; 24h windows whose last one ends at reference_time"""
        series = []
        for i in range(days):
            day_start = reference_time - (days - i) * MS_PER_DAY
            date = datetime.fromtimestamp(day_start // 1000, tz=timezone.utc)
            is_weekend = date.weekday() >= 5

            weekend_factor = GA4_WEEKEND_TRAFFIC_MULTIPLIER if is_weekend else 1.0
            seasonal = 1 + GA4_SEASONAL_AMPLITUDE * math.sin(2 * math.pi * i / days)
            random_factor = GA4_RANDOM_VARIATION_MIN + rand.next() * GA4_RANDOM_VARIATION_RANGE
            base = GA4_BASE_SESSIONS_MIN + rand.next() * GA4_BASE_SESSIONS_RANGE

            sessions = int(weekend_factor * seasonal * random_factor * base)
            series.append(DailyTraffic(date.strftime('%Y-%m-%d'), day_start, sessions, is_weekend))
        return series

    def fetch_events(
        self,
        property_id: str,
        service_account: Optional[Dict],
        days: int = DEFAULT_DAYS,
        seed: int = DEFAULT_SEED,
        reference_time: Optional[int] = None,
    ) -> List[Event]:
        """
        Simulate a GA4 event export for the last `days` days.

        Events are sorted newest first. Only purchases carry revenue.

        Raises:
            GA4AuthError: bad service account
            InvalidArgument: missing property_id or days out of range
        """
        self._check_property(property_id)
        self.authenticate(service_account)
        if isinstance(days, bool) or not isinstance(days, int) or not MIN_DAYS <= days <= MAX_DAYS:
            raise InvalidArgument(f"days must be an integer in [{MIN_DAYS}, {MAX_DAYS}], got {days!r}")

        if reference_time is None:
            reference_time = now_ms()

        rand = SeededRandom(seed)
        traffic = self.daily_traffic(days, rand, reference_time)

        events: List[Event] = []
        for day_index, day in enumerate(traffic):
            for i in range(day.sessions):
                timestamp = day.day_start + rand.index(24) * MS_PER_HOUR + rand.index(60) * MS_PER_MINUTE
                event_type = rand.choice(_EVENT_TYPES)
                user_id = f"user_{rand.index(GA4_USER_POOL_SIZE)}"
                device = rand.choice(_DEVICES)
                country = rand.choice(GA4_COUNTRY_CODES)

                revenue = None
                if event_type is EventType.PURCHASE:
                    revenue = MIN_REVENUE + rand.index(MAX_REVENUE - MIN_REVENUE)

                events.append(Event(
                    id=f"ga4_{day_index}_{i}",
                    user_id=user_id,
                    session_id=f"ga4_session_{day_index}_{i}",
                    timestamp=timestamp,
                    event_type=event_type,
                    url=f"/page/{rand.index(50) + 1}",
                    device=device,
                    country=country,
                    revenue=revenue,
                ))

        logger.info("Simulated %d GA4 events for property %s over %d days", len(events), property_id, days)
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events

    def fetch_realtime_events(
        self,
        property_id: str,
        service_account: Optional[Dict],
        seed: int = DEFAULT_SEED,
        reference_time: Optional[int] = None,
    ) -> List[Event]:
        """A handful of events from the trailing five minutes, newest first"""
        self._check_property(property_id)
        self.authenticate(service_account)

        if reference_time is None:
            reference_time = now_ms()

        rand = SeededRandom(seed)
        count = GA4_MIN_REALTIME_EVENTS + rand.index(GA4_MAX_REALTIME_EVENTS - GA4_MIN_REALTIME_EVENTS + 1)

        events = []
        for i in range(count):
            # (reference_time - window, reference_time]
            timestamp = reference_time - rand.index(GA4_REALTIME_WINDOW_MS)
            event_type = rand.choice(_REALTIME_EVENT_TYPES)

            revenue = None
            if event_type is EventType.PURCHASE:
                revenue = MIN_REVENUE + rand.index(REALTIME_MAX_REVENUE - MIN_REVENUE)

            events.append(Event(
                id=f"realtime_{timestamp}_{i}",
                user_id=f"user_{rand.index(REALTIME_USER_POOL_SIZE)}",
                session_id=f"session_{timestamp}_{i}",
                timestamp=timestamp,
                event_type=event_type,
                url=f"/page/{rand.index(20) + 1}",
                device=rand.choice(_DEVICES),
                country=rand.choice(GA4_COUNTRY_CODES[:8]),
                revenue=revenue,
            ))

        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events
