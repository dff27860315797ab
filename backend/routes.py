"""Atlas Backend: FastAPI Routes"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from categories import with_category
from config import CORS_ORIGINS, INCIDENTS_CSV_PATH
from filters import IncidentFilters, parse_filters
from incident_store import IncidentStore, LoadFailed, Loaded
from models import CacheStatus, HealthResponse, Incident, IncidentSummary
from summary import summarize

logger = logging.getLogger("atlas.routes")


# ─────────────────────────── Dependencies ───────────────────────

def get_store(request: Request) -> IncidentStore:
    return request.app.state.incident_store


def get_filters(
    startDate: Optional[str] = Query(default=None),
    endDate: Optional[str] = Query(default=None),
    crimeType: Optional[str] = Query(default=None),
) -> IncidentFilters:
    try:
        return parse_filters(startDate, endDate, crimeType)
    except ValueError as e:
        logger.warning(f"Invalid date format in query params: {e}")
        raise HTTPException(status_code=400, detail=str(e))


async def _load(store: IncidentStore, filters: Optional[IncidentFilters] = None) -> Loaded:
    """Filtered collection, or 503 when nothing could be loaded."""
    result = await store.get_filtered_incidents(filters)
    if isinstance(result, LoadFailed):
        raise HTTPException(
            status_code=503,
            detail={"error": "Failed to load incidents data", "reason": result.reason},
        )
    return result


# ─────────────────────────── App Setup ──────────────────────────

def create_app(store: Optional[IncidentStore] = None) -> FastAPI:
    app = FastAPI(title="Atlas Incident API", version="1.0.0")
    app.state.incident_store = store or IncidentStore.from_csv(INCIDENTS_CSV_PATH)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─────────────────────── Incidents ──────────────────────────

    @app.get("/api/incidents", response_model=list[Incident])
    async def list_incidents(
        filters: IncidentFilters = Depends(get_filters),
        store: IncidentStore = Depends(get_store),
    ):
        """Incidents matching the optional date range and news type."""
        result = await _load(store, filters)
        logger.info(f"Serving {len(result.incidents)} incidents (stale={result.stale})")
        return [with_category(i) for i in result.incidents]

    @app.get("/api/incidents/summary", response_model=IncidentSummary)
    async def incident_summary(
        filters: IncidentFilters = Depends(get_filters),
        store: IncidentStore = Depends(get_store),
    ):
        """Dashboard counts over the filtered incidents."""
        result = await _load(store, filters)
        return summarize(result.incidents, stale=result.stale)

    @app.get("/api/incidents/{incident_id}", response_model=Incident)
    async def get_incident(incident_id: str, store: IncidentStore = Depends(get_store)):
        result = await _load(store)
        for incident in result.incidents:
            if incident.id == incident_id:
                return with_category(incident)
        raise HTTPException(status_code=404, detail="Incident not found")

    # ─────────────────────── Utility ────────────────────────────

    @app.get("/api/health", response_model=HealthResponse)
    async def health(store: IncidentStore = Depends(get_store)):
        return HealthResponse(
            status="ok",
            cache=CacheStatus(
                loaded=store.age() is not None,
                incidentCount=store.incident_count,
                ageSeconds=store.age(),
                reloading=store.reloading,
            ),
        )

    return app
