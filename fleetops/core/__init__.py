"""
core/ - Mission model, selection store and crew assignment rules
"""

from .enums import (
    MissionType,
    MissionStatus,
    CrewRole,
    Stage,
    SaveStatus,
)

from .models import (
    GROUND_SUPPORT,
    Vessel,
    SelectedVessel,
    Person,
    CrewAssignment,
    Participant,
    MissionOverview,
    MissionDraft,
)

from .identifiers import (
    IdAllocator,
    is_draft_mission_id,
    new_mission_id,
    new_vessel_id,
)

from .selection_store import SelectionStore

from . import rules

__all__ = [
    # Enums
    "MissionType",
    "MissionStatus",
    "CrewRole",
    "Stage",
    "SaveStatus",
    # Models
    "GROUND_SUPPORT",
    "Vessel",
    "SelectedVessel",
    "Person",
    "CrewAssignment",
    "Participant",
    "MissionOverview",
    "MissionDraft",
    # Identifiers
    "IdAllocator",
    "is_draft_mission_id",
    "new_mission_id",
    "new_vessel_id",
    # Store & rules
    "SelectionStore",
    "rules",
]
