"""
EventLens reference tables

Fixed lookup tables and generation constants shared by the synthetic
producers. Changing the order or length of any table changes every
generated dataset, so treat these as part of the reproducibility contract.
"""

from typing import Tuple

MS_PER_SECOND = 1_000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

EVENT_TYPES: Tuple[str, ...] = ("page_view", "click", "signup", "purchase")

# GA4 simulation uses a wider vocabulary
GA4_EVENT_TYPES: Tuple[str, ...] = ("page_view", "click", "scroll", "search", "purchase", "signup")
GA4_REALTIME_EVENT_TYPES: Tuple[str, ...] = ("page_view", "click", "scroll", "search", "purchase")

DEVICE_TYPES: Tuple[str, ...] = ("desktop", "mobile", "tablet")

PAGE_URLS: Tuple[str, ...] = (
    "/home",
    "/product",
    "/checkout",
    "/about",
    "/contact",
    "/blog",
    "/pricing",
    "/login",
    "/docs",
    "/signup",
)

COUNTRIES: Tuple[str, ...] = (
    "United States",
    "United Kingdom",
    "Canada",
    "Germany",
    "France",
    "Japan",
    "Australia",
    "India",
    "Brazil",
    "Mexico",
    "Spain",
    "Netherlands",
)

GA4_COUNTRY_CODES: Tuple[str, ...] = ("US", "GB", "CA", "DE", "FR", "AU", "JP", "IN", "BR", "MX")

# Cumulative thresholds: page_view 70%, click 20%, signup 7%, purchase 3%
EVENT_TYPE_WEIGHTS: Tuple[Tuple[str, float], ...] = (
    ("page_view", 0.70),
    ("click", 0.20),
    ("signup", 0.07),
    ("purchase", 0.03),
)

MIN_REVENUE = 10
MAX_REVENUE = 500

USER_POOL_SIZE = 20_000
SESSION_POOL_SIZE = 60_000

GENERATION_BATCH_SIZE = 1_000

# Generation defaults and limits
DEFAULT_SEED = 42
DEFAULT_DAYS = 30
DEFAULT_EVENT_COUNT = 1_000
MAX_EVENT_COUNT = 1_000_000
MIN_DAYS = 1
MAX_DAYS = 365

# GA4 time-series simulation
GA4_BASE_SESSIONS_MIN = 500
GA4_BASE_SESSIONS_RANGE = 200
GA4_WEEKEND_TRAFFIC_MULTIPLIER = 0.6
GA4_SEASONAL_AMPLITUDE = 0.3
GA4_RANDOM_VARIATION_MIN = 0.8
GA4_RANDOM_VARIATION_RANGE = 0.4
GA4_PURCHASE_PROBABILITY = 0.05
GA4_USER_POOL_SIZE = 10_000
GA4_REALTIME_WINDOW_MS = 5 * MS_PER_MINUTE
GA4_MIN_REALTIME_EVENTS = 2
GA4_MAX_REALTIME_EVENTS = 12
GA4_MOCK_TOKEN_PREFIX = "mock_access_token_"


def cumulative_event_thresholds() -> Tuple[Tuple[float, str], ...]:
    """(upper bound, event type) pairs for a single uniform draw"""
    total = 0.0
    thresholds = []
    for event_type, weight in EVENT_TYPE_WEIGHTS:
        total += weight
        thresholds.append((total, event_type))
    return tuple(thresholds)
