"""
Event Synthesizer - deterministic synthetic product-usage events

Every event consumes random draws in this fixed order:

    1. timestamp    uniform in [now - window, now)
    2. url          PAGE_URLS
    3. event type   weighted thresholds (EVENT_TYPE_WEIGHTS)
    4. device       DEVICE_TYPES
    5. country      COUNTRIES
    6. user id      u_0 .. u_{USER_POOL_SIZE-1}
    7. session id   s_0 .. s_{SESSION_POOL_SIZE-1}
    8. revenue      purchases only, whole units in [MIN_REVENUE, MAX_REVENUE)

Reordering or adding a draw shifts every later event, so this order is part
of the output contract for a given (seed, window_days, count, reference_time).
"""

import logging
from operator import attrgetter
from typing import Callable, List, Optional

from eventlens.core.errors import GenerationCancelled, InvalidArgument
from eventlens.core.event_model import DeviceType, Event, EventType, now_ms
from eventlens.core.random_source import SeededRandom
from eventlens.core.reference_data import (
    COUNTRIES,
    DEVICE_TYPES,
    GENERATION_BATCH_SIZE,
    MAX_REVENUE,
    MIN_REVENUE,
    MS_PER_DAY,
    PAGE_URLS,
    SESSION_POOL_SIZE,
    USER_POOL_SIZE,
    cumulative_event_thresholds,
)

logger = logging.getLogger(__name__)

DRAWS_PER_EVENT = 7
DRAWS_PER_PURCHASE = DRAWS_PER_EVENT + 1

_EVENT_THRESHOLDS = tuple((bound, EventType(name)) for bound, name in cumulative_event_thresholds())
_DEVICES = tuple(DeviceType(name) for name in DEVICE_TYPES)


def _pool(prefix: str, size: int) -> tuple:
    return tuple(f"{prefix}_{i}" for i in range(size))


# Identical on every call regardless of count, so datasets stay comparable
USER_POOL = _pool("u", USER_POOL_SIZE)
SESSION_POOL = _pool("s", SESSION_POOL_SIZE)


def validate_int(name: str, value, minimum: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise InvalidArgument(f"{name} must be >= {minimum}, got {value}")
    return value


def pick_event_type(r: float) -> EventType:
    """Map one uniform draw onto the weighted event-type table"""
    for bound, event_type in _EVENT_THRESHOLDS:
        if r < bound:
            return event_type
    # Float accumulation can leave the last bound a hair under 1.0
    return _EVENT_THRESHOLDS[-1][1]


class EventSynthesizer:
    """Generates one event at a time from a seeded random source"""

    def __init__(self, seed: int, window_days: int, reference_time: int):
        self.rand = SeededRandom(seed)
        self.reference_time = reference_time
        self.window_start = reference_time - window_days * MS_PER_DAY
        self._span = reference_time - self.window_start

    def next_event(self, index: int) -> Event:
        rand = self.rand
        timestamp = int(self.window_start + rand.next() * self._span)
        url = rand.choice(PAGE_URLS)
        event_type = pick_event_type(rand.next())
        device = rand.choice(_DEVICES)
        country = rand.choice(COUNTRIES)
        user_id = rand.choice(USER_POOL)
        session_id = rand.choice(SESSION_POOL)

        revenue = None
        if event_type is EventType.PURCHASE:
            revenue = MIN_REVENUE + rand.index(MAX_REVENUE - MIN_REVENUE)

        return Event(
            id=f"evt_{index}_{timestamp}",
            user_id=user_id,
            session_id=session_id,
            timestamp=timestamp,
            event_type=event_type,
            url=url,
            device=device,
            country=country,
            revenue=revenue,
        )


def generate_events(
    seed: int,
    window_days: int,
    count: int,
    reference_time: Optional[int] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> List[Event]:
    """
    Generate `count` synthetic events over the trailing `window_days`.

    Args:
        seed: any integer; reduced modulo 2^32
        window_days: size of the trailing window, >= 1
        count: number of events, >= 0
        reference_time: "now" in epoch ms; sampled once when omitted
        should_cancel: polled between batches; returning True aborts

    Returns:
        Events sorted newest first (stable for equal timestamps)

    Raises:
        InvalidArgument: window_days < 1, count < 0, or non-integer input
        GenerationCancelled: should_cancel() returned True
    """
    validate_int("seed", seed)
    validate_int("window_days", window_days, minimum=1)
    validate_int("count", count, minimum=0)

    if count == 0:
        return []

    if reference_time is None:
        reference_time = now_ms()

    synthesizer = EventSynthesizer(seed, window_days, reference_time)
    events: List[Event] = []

    for batch_start in range(0, count, GENERATION_BATCH_SIZE):
        if should_cancel is not None and should_cancel():
            logger.info("Generation cancelled at %d/%d events", batch_start, count)
            raise GenerationCancelled(batch_start, count)

        batch_end = min(batch_start + GENERATION_BATCH_SIZE, count)
        events.extend(synthesizer.next_event(i) for i in range(batch_start, batch_end))

    logger.debug("Generated %d events for seed=%s window_days=%d", count, seed, window_days)

    # Final deterministic step, outside the random draw sequence
    return sorted(events, key=attrgetter("timestamp"), reverse=True)
