"""
Response models for the EventLens API
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from eventlens.models.requests import EventModel


class EventsResponse(BaseModel):
    data: List[EventModel]


class KpiResponse(BaseModel):
    unique_users: int
    unique_sessions: int
    conversion_rate: float = Field(..., ge=0, le=1)
    total_revenue: float
    date_from: Optional[int]
    date_to: Optional[int]


class DayBucketResponse(BaseModel):
    date: str = Field(..., description="UTC label of the bucket start, e.g. 'Mar 07'")
    day_start: int
    day_end: int
    event_count: int
    purchase_count: int
    revenue: float
    unique_users: int
    unique_sessions: int


class RollupResponse(BaseModel):
    window_days: int
    reference_time: int
    data: List[DayBucketResponse]


class BreakdownEntryResponse(BaseModel):
    value: str
    count: int
    percentage: float


class BreakdownResponse(BaseModel):
    field: str
    data: List[BreakdownEntryResponse]


class OverviewResponse(BaseModel):
    """Everything the dashboard renders for one collection"""
    event_count: int
    reference_time: int
    kpis: KpiResponse
    rollup: List[DayBucketResponse]
    breakdowns: Dict[str, List[BreakdownEntryResponse]]
