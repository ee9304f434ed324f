"""
Event Domain Models

One discrete user action. Revenue is modelled as an explicit optional field:
it is set (and positive) exactly when the event is a purchase, and the
constructor rejects anything else.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Optional

from eventlens.core.errors import InvalidArgument


class EventType(str, Enum):
    """Event vocabulary; SCROLL and SEARCH only come from the GA4 source"""
    PAGE_VIEW = "page_view"
    CLICK = "click"
    SIGNUP = "signup"
    PURCHASE = "purchase"
    SCROLL = "scroll"
    SEARCH = "search"


class DeviceType(str, Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"
    TABLET = "tablet"


CONVERSION_EVENT_TYPES = frozenset({EventType.SIGNUP, EventType.PURCHASE})


@dataclass(frozen=True)
class Event:
    id: str
    user_id: str
    session_id: str
    timestamp: int  # epoch ms
    event_type: EventType
    url: str
    device: DeviceType
    country: str
    revenue: Optional[float] = None

    def __post_init__(self):
        # Accept raw strings from callers, store the enum members
        try:
            object.__setattr__(self, "event_type", EventType(self.event_type))
            object.__setattr__(self, "device", DeviceType(self.device))
        except ValueError as e:
            raise InvalidArgument(str(e)) from e

        is_purchase = self.event_type is EventType.PURCHASE
        # Exports and GA4 feeds write revenue 0 on non-purchases; treat it as unset
        if not is_purchase and self.revenue == 0:
            object.__setattr__(self, "revenue", None)
        if is_purchase and (self.revenue is None or self.revenue <= 0):
            raise InvalidArgument(f"Purchase event {self.id} requires positive revenue")
        if not is_purchase and self.revenue is not None:
            raise InvalidArgument(f"Event {self.id} of type {self.event_type.value} cannot carry revenue")

    @property
    def is_purchase(self) -> bool:
        return self.event_type is EventType.PURCHASE

    @property
    def is_conversion(self) -> bool:
        return self.event_type in CONVERSION_EVENT_TYPES

    def field_tuple(self) -> tuple:
        """Field values in declaration order, used for content hashing"""
        return (
            self.id,
            self.user_id,
            self.session_id,
            self.timestamp,
            self.event_type.value,
            self.url,
            self.device.value,
            self.country,
            self.revenue,
        )

    def to_dict(self) -> Dict:
        """Export in the camelCase wire format consumed by the dashboard"""
        data = {
            "id": self.id,
            "userId": self.user_id,
            "sessionId": self.session_id,
            "timestamp": self.timestamp,
            "eventType": self.event_type.value,
            "url": self.url,
            "device": self.device.value,
            "country": self.country,
        }
        if self.revenue is not None:
            data["revenue"] = self.revenue
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "Event":
        revenue = data.get("revenue")
        return cls(
            id=data["id"],
            user_id=data["userId"],
            session_id=data["sessionId"],
            timestamp=int(data["timestamp"]),
            event_type=data.get("eventType") or data["event"],
            url=data["url"],
            device=data["device"],
            country=data["country"],
            revenue=float(revenue) if revenue is not None else None,
        )


def epoch_ms_to_iso(timestamp_ms: int) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix"""
    dt = datetime.fromtimestamp(timestamp_ms // 1000, tz=timezone.utc) + timedelta(milliseconds=timestamp_ms % 1000)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)
