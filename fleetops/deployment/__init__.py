"""
deployment/ - Reference persistence service

Missions REST API, its request schemas and the JSON mission store.
"""

from .mission_store import (
    MissionNotFound,
    MissionStore,
)

from .schemas import (
    MissionParticipantModel,
    MissionPayload,
)

from .api import (
    create_fastapi_app,
    paginate,
    MISSIONS_PATH,
)


__all__ = [
    # Store
    "MissionNotFound",
    "MissionStore",
    # Schemas
    "MissionParticipantModel",
    "MissionPayload",
    # API
    "create_fastapi_app",
    "paginate",
    "MISSIONS_PATH",
]
