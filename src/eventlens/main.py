"""
EventLens API - analytics dashboard data service

Synthetic (or mocked GA4) event streams, filtered and reduced to KPIs, day
rollups and categorical breakdowns.
"""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from eventlens import __version__
from eventlens.controllers.dashboard_controller import DashboardController
from eventlens.core.config import Settings, configure_logging
from eventlens.core.reference_data import (
    DEFAULT_DAYS,
    DEFAULT_EVENT_COUNT,
    DEFAULT_SEED,
    MAX_DAYS,
    MIN_DAYS,
)
from eventlens.models.requests import (
    BreakdownRequest,
    EventSourceRequest,
    GA4EventsRequest,
    OverviewRequest,
    RollupRequest,
)
from eventlens.models.responses import (
    BreakdownResponse,
    EventsResponse,
    KpiResponse,
    OverviewResponse,
    RollupResponse,
)
from eventlens.repositories.aggregate_repository import (
    AggregateRepository,
    InMemoryAggregateRepository,
    RedisAggregateRepository,
)
from eventlens.services.dashboard_service import DashboardService
from eventlens.services.ga4_mock import GA4MockSource

logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> AggregateRepository:
    if settings.cache_backend == 'redis':
        logger.info("Using Redis aggregate cache at %s:%s", settings.redis_host, settings.redis_port)
        return RedisAggregateRepository(host=settings.redis_host, port=settings.redis_port)
    return InMemoryAggregateRepository(max_items=settings.cache_max_items)


def create_app(
    settings: Optional[Settings] = None,
    aggregate_repo: Optional[AggregateRepository] = None,
) -> FastAPI:
    """Wire repositories, services and routes into a FastAPI app"""
    settings = settings or Settings()
    aggregate_repo = aggregate_repo or build_repository(settings)

    # Initialize services
    dashboard_service = DashboardService(aggregate_repo, settings)
    controller = DashboardController(dashboard_service, GA4MockSource())

    app = FastAPI(
        title="EventLens API",
        version=__version__,
        description="Deterministic analytics events with KPI, rollup and breakdown aggregates"
    )
    app.state.settings = settings
    app.state.controller = controller

    @app.get("/")
    def root():
        return {
            "service": "EventLens API",
            "version": __version__,
            "status": "running",
            "endpoints": {
                "events": "/api/events",
                "filter": "/api/events/filter",
                "kpis": "/api/kpis",
                "rollup": "/api/rollup",
                "breakdown": "/api/breakdown",
                "overview": "/api/overview",
                "import": "/api/events/import",
                "export": "/api/events/export",
                "ga4": "/api/ga4/events",
                "health": "/health"
            }
        }

    @app.get("/health")
    def health_check():
        try:
            aggregate_repo.ping()
            return {"status": "healthy", "cache": settings.cache_backend, "cache_status": "ok"}
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return {"status": "unhealthy", "cache": settings.cache_backend, "error": str(e)}

    @app.get("/api/events", response_model=EventsResponse, response_model_exclude_none=True)
    def get_events(
        seed: int = Query(DEFAULT_SEED),
        days: int = Query(DEFAULT_DAYS, ge=MIN_DAYS, le=MAX_DAYS),
        count: int = Query(DEFAULT_EVENT_COUNT, ge=0),
        reference_time: Optional[int] = Query(None),
    ):
        """Synthetic events, newest first"""
        return controller.get_events(seed, days, count, reference_time)

    @app.post("/api/events/filter", response_model=EventsResponse, response_model_exclude_none=True)
    def filter_events(request: EventSourceRequest):
        return controller.filter_events(request)

    @app.post("/api/kpis", response_model=KpiResponse)
    def get_kpis(request: EventSourceRequest):
        return controller.get_kpis(request)

    @app.post("/api/rollup", response_model=RollupResponse)
    def get_rollup(request: RollupRequest):
        return controller.get_rollup(request)

    @app.post("/api/breakdown", response_model=BreakdownResponse)
    def get_breakdown(request: BreakdownRequest):
        return controller.get_breakdown(request)

    @app.post("/api/overview", response_model=OverviewResponse)
    def get_overview(request: OverviewRequest):
        return controller.get_overview(request)

    @app.post("/api/events/import", response_model=EventsResponse, response_model_exclude_none=True)
    async def import_events(request: Request):
        """CSV text body; see csv_io for the accepted columns"""
        body = await request.body()
        try:
            csv_text = body.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise HTTPException(status_code=400, detail=f"CSV must be UTF-8: {e}")
        return controller.import_events(csv_text)

    @app.post("/api/events/export", response_class=PlainTextResponse)
    def export_events(request: EventSourceRequest):
        csv_text = controller.export_events(request)
        return PlainTextResponse(
            csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="events.csv"'},
        )

    @app.post("/api/ga4/events", response_model=EventsResponse, response_model_exclude_none=True)
    def fetch_ga4_events(request: GA4EventsRequest):
        """Mocked GA4 export; no network access"""
        return controller.fetch_ga4_events(request)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)
