"""
Request models for the EventLens API
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from eventlens.core.reference_data import (
    DEFAULT_DAYS,
    DEFAULT_EVENT_COUNT,
    DEFAULT_SEED,
    MAX_DAYS,
    MIN_DAYS,
)


class EventModel(BaseModel):
    """One event in the dashboard's camelCase wire format"""
    id: str
    userId: str
    sessionId: str
    timestamp: int = Field(..., description="Epoch milliseconds (UTC)")
    eventType: str = Field(..., examples=["page_view"])
    url: str
    device: str = Field(..., examples=["desktop"])
    country: str
    revenue: Optional[float] = Field(None, description="Set on purchase events only")


class FilterSpec(BaseModel):
    """Optional predicates, ANDed; omitted or empty means no constraint"""
    date_from: Optional[int] = Field(None, description="Inclusive lower bound, epoch ms")
    date_to: Optional[int] = Field(None, description="Inclusive upper bound, epoch ms")
    countries: Optional[List[str]] = Field(None, examples=[["United States", "Germany"]])
    devices: Optional[List[str]] = Field(None, examples=[["mobile"]])
    event_types: Optional[List[str]] = Field(None, examples=[["purchase", "signup"]])
    purchases_only: bool = False


class EventSourceRequest(BaseModel):
    """
    Selects the event collection an endpoint works on.

    When `events` is supplied it is used as-is; otherwise a synthetic
    collection is generated from seed/days/count. `reference_time` pins "now"
    so repeated calls return identical data.
    """
    events: Optional[List[EventModel]] = Field(None, description="Explicit event collection")
    seed: int = Field(DEFAULT_SEED, description="Any integer; reduced modulo 2^32")
    days: int = Field(DEFAULT_DAYS, ge=MIN_DAYS, le=MAX_DAYS)
    count: int = Field(DEFAULT_EVENT_COUNT, ge=0)
    reference_time: Optional[int] = Field(None, description="'Now' in epoch ms; current time when omitted")
    filters: Optional[FilterSpec] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "seed": 42,
                "days": 30,
                "count": 1000,
                "filters": {"devices": ["mobile"], "purchases_only": False},
            }
        }
    }


class RollupRequest(EventSourceRequest):
    window_days: Optional[int] = Field(None, ge=MIN_DAYS, le=MAX_DAYS, description="Defaults to `days`")


class BreakdownRequest(EventSourceRequest):
    field: str = Field("device", examples=["device", "country", "event_type"])
    top_n: Optional[int] = Field(None, ge=0)


class OverviewRequest(EventSourceRequest):
    window_days: Optional[int] = Field(None, ge=MIN_DAYS, le=MAX_DAYS, description="Defaults to `days`")
    top_n: Optional[int] = Field(None, ge=0)


class GA4EventsRequest(BaseModel):
    """Mocked GA4 fetch; no request leaves the process"""
    property_id: str = Field(..., examples=["123456789"])
    service_account: Optional[Dict] = Field(
        None,
        description="Service account JSON; only client_email is checked",
        examples=[{"client_email": "dashboard@project.iam.gserviceaccount.com"}],
    )
    days: int = Field(DEFAULT_DAYS, ge=MIN_DAYS, le=MAX_DAYS)
    seed: int = DEFAULT_SEED
    reference_time: Optional[int] = None
    realtime: bool = Field(False, description="Return the last five minutes instead of a daily series")
