"""
deployment/api.py - Missions REST API

Reference persistence service for the composer: list, fetch, create,
replace and delete missions kept in the JSON mission store.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING
from datetime import datetime, timezone
import logging
import math

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from fleetops import __version__
from .mission_store import MissionNotFound, MissionStore
from .schemas import MissionPayload

if TYPE_CHECKING:
    from fleetops.bootstrap.app import AppContext

logger = logging.getLogger("deployment.api")

MISSIONS_PATH = "/api/fleet-ops/missions"
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


def paginate(items, page: int, page_size: int, max_page_size: int = MAX_PAGE_SIZE) -> Dict[str, Any]:
    """Slice items into the list envelope. page >= 1; page_size clamped to 1..max."""
    page = max(1, page)
    page_size = min(max(1, page_size), max_page_size)
    total = len(items)
    start = (page - 1) * page_size
    return {
        "items": items[start:start + page_size],
        "page": page,
        "pageSize": page_size,
        "total": total,
        "totalPages": math.ceil(total / page_size),
    }


def _resolve_store(context: Optional["AppContext"]) -> MissionStore:
    if context is not None and getattr(context, "mission_store", None) is not None:
        return context.mission_store
    if context is not None and context.config is not None:
        return MissionStore(context.config.storage.missions_file)
    return MissionStore()


def create_fastapi_app(context: "AppContext" = None, store: MissionStore = None):
    """
    Create FastAPI application.

    Args:
        context: Application context with config and mission store
        store: Explicit mission store (overrides the context's)

    Returns:
        FastAPI application instance
    """
    # Configuration
    enable_docs = True
    docs_url = "/docs"
    cors_origins = ["*"]
    default_page_size = DEFAULT_PAGE_SIZE
    max_page_size = MAX_PAGE_SIZE

    if context and context.config:
        enable_docs = context.config.api.enable_docs
        docs_url = context.config.api.docs_url
        cors_origins = context.config.api.cors_origins
        default_page_size = context.config.composer.default_page_size
        max_page_size = context.config.composer.max_page_size

    missions = store if store is not None else _resolve_store(context)

    app = FastAPI(
        title="FleetOps API",
        description="Mission composition and crew assignment",
        version=__version__,
        docs_url=docs_url if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.mission_store = missions

    # =========================================================================
    # Health Endpoints
    # =========================================================================

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "missions": len(missions),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # =========================================================================
    # Mission Endpoints
    # =========================================================================

    @app.get(MISSIONS_PATH)
    async def list_missions(
        status: Optional[str] = None,
        leader_id: Optional[str] = Query(None, alias="leaderId"),
        page: int = 1,
        page_size: int = Query(default_page_size, alias="pageSize"),
    ):
        """List missions, optionally filtered by status and leader."""
        items = missions.list(status=status, leader_id=leader_id)
        return paginate(items, page, page_size, max_page_size)

    @app.get(MISSIONS_PATH + "/{mission_id}")
    async def get_mission(mission_id: str):
        try:
            return missions.get(mission_id)
        except MissionNotFound:
            raise HTTPException(status_code=404, detail="Mission not found")

    @app.post(MISSIONS_PATH, status_code=201)
    async def create_mission(payload: MissionPayload):
        """Create a mission. Draft ids are replaced with a stored id."""
        return missions.create(payload.to_record())

    @app.put(MISSIONS_PATH + "/{mission_id}")
    async def update_mission(mission_id: str, payload: MissionPayload):
        try:
            return missions.update(mission_id, payload.to_record())
        except MissionNotFound:
            raise HTTPException(status_code=404, detail="Mission not found")

    @app.delete(MISSIONS_PATH)
    async def delete_mission_by_query(id: Optional[str] = None):
        """Delete by ``?id=``, the form the composer client uses."""
        if not id:
            raise HTTPException(status_code=400, detail="Mission id is required")
        return _delete(id)

    @app.delete(MISSIONS_PATH + "/{mission_id}")
    async def delete_mission(mission_id: str):
        return _delete(mission_id)

    def _delete(mission_id: str) -> Dict[str, Any]:
        try:
            missions.delete(mission_id)
        except MissionNotFound:
            raise HTTPException(status_code=404, detail="Mission not found")
        return {"success": True, "id": mission_id}

    logger.info(f"FastAPI app created with {len(missions)} stored missions")
    return app
