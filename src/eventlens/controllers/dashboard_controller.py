"""
Dashboard Controller - HTTP route handlers
"""
import logging
from fastapi import HTTPException
from typing import Dict, List

from eventlens.core.errors import GA4AuthError
from eventlens.core.event_model import Event, now_ms
from eventlens.models.requests import (
    BreakdownRequest,
    EventSourceRequest,
    GA4EventsRequest,
    OverviewRequest,
    RollupRequest,
)
from eventlens.services.csv_io import export_events_csv, import_events_csv
from eventlens.services.dashboard_service import DashboardService
from eventlens.services.filters import FilterCriteria
from eventlens.services.ga4_mock import GA4MockSource

logger = logging.getLogger(__name__)


def _reference_time(request) -> int:
    """Pin "now" once per request so generation and rollup agree"""
    if request.reference_time is not None:
        return request.reference_time
    return now_ms()


class DashboardController:
    """Controller for dashboard endpoints"""

    def __init__(self, dashboard_service: DashboardService, ga4_source: GA4MockSource):
        self.dashboard_service = dashboard_service
        self.ga4_source = ga4_source

    def _resolve_events(self, request: EventSourceRequest, reference_time: int) -> List[Event]:
        """Supplied or generated events, with the request's filters applied"""
        if request.events is not None:
            events = [Event.from_dict(e.model_dump()) for e in request.events]
        else:
            events = self.dashboard_service.get_events(
                request.seed, request.days, request.count, reference_time=reference_time
            )

        criteria = None
        if request.filters is not None:
            criteria = FilterCriteria(**request.filters.model_dump())
        return self.dashboard_service.filter_events(events, criteria)

    def get_events(self, seed: int, days: int, count: int, reference_time: int = None) -> Dict:
        """GET /api/events"""
        try:
            events = self.dashboard_service.get_events(seed, days, count, reference_time=reference_time)
            return {"data": [e.to_dict() for e in events]}
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("Event generation failed")
            raise HTTPException(status_code=500, detail=f"Failed to generate events: {str(e)}")

    def filter_events(self, request: EventSourceRequest) -> Dict:
        """POST /api/events/filter"""
        try:
            events = self._resolve_events(request, _reference_time(request))
            return {"data": [e.to_dict() for e in events]}
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("Event filtering failed")
            raise HTTPException(status_code=500, detail=f"Failed to filter events: {str(e)}")

    def get_kpis(self, request: EventSourceRequest) -> Dict:
        """POST /api/kpis"""
        try:
            events = self._resolve_events(request, _reference_time(request))
            return self.dashboard_service.get_kpis(events).to_dict()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("KPI computation failed")
            raise HTTPException(status_code=500, detail=f"Failed to compute KPIs: {str(e)}")

    def get_rollup(self, request: RollupRequest) -> Dict:
        """POST /api/rollup"""
        try:
            reference_time = _reference_time(request)
            window_days = request.window_days or request.days
            events = self._resolve_events(request, reference_time)
            buckets = self.dashboard_service.get_rollup(events, window_days, reference_time)
            return {
                "window_days": window_days,
                "reference_time": reference_time,
                "data": [b.to_dict() for b in buckets],
            }
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("Rollup failed")
            raise HTTPException(status_code=500, detail=f"Failed to compute rollup: {str(e)}")

    def get_breakdown(self, request: BreakdownRequest) -> Dict:
        """POST /api/breakdown"""
        try:
            events = self._resolve_events(request, _reference_time(request))
            entries = self.dashboard_service.get_breakdown(events, request.field, request.top_n)
            return {"field": request.field, "data": [e.to_dict() for e in entries]}
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("Breakdown failed")
            raise HTTPException(status_code=500, detail=f"Failed to compute breakdown: {str(e)}")

    def get_overview(self, request: OverviewRequest) -> Dict:
        """POST /api/overview - one payload for the whole dashboard"""
        try:
            reference_time = _reference_time(request)
            events = self._resolve_events(request, reference_time)
            return self.dashboard_service.build_overview(
                events,
                window_days=request.window_days or request.days,
                reference_time=reference_time,
                top_n=request.top_n,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("Overview failed")
            raise HTTPException(status_code=500, detail=f"Failed to build overview: {str(e)}")

    def import_events(self, csv_text: str) -> Dict:
        """POST /api/events/import"""
        try:
            events = import_events_csv(csv_text)
            logger.info("Imported %d events from CSV", len(events))
            return {"data": [e.to_dict() for e in events]}
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("CSV import failed")
            raise HTTPException(status_code=500, detail=f"Failed to import CSV: {str(e)}")

    def export_events(self, request: EventSourceRequest) -> str:
        """POST /api/events/export"""
        try:
            events = self._resolve_events(request, _reference_time(request))
            return export_events_csv(events)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("CSV export failed")
            raise HTTPException(status_code=500, detail=f"Failed to export CSV: {str(e)}")

    def fetch_ga4_events(self, request: GA4EventsRequest) -> Dict:
        """POST /api/ga4/events"""
        try:
            if request.realtime:
                events = self.ga4_source.fetch_realtime_events(
                    request.property_id,
                    request.service_account,
                    seed=request.seed,
                    reference_time=request.reference_time,
                )
            else:
                events = self.ga4_source.fetch_events(
                    request.property_id,
                    request.service_account,
                    days=request.days,
                    seed=request.seed,
                    reference_time=request.reference_time,
                )
            return {"data": [e.to_dict() for e in events]}
        except GA4AuthError as e:
            raise HTTPException(status_code=401, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.exception("GA4 fetch failed")
            raise HTTPException(status_code=500, detail=f"Failed to fetch GA4 events: {str(e)}")
