"""
FleetOps Core Enumerations

All enumeration types used by the mission composer.
"""

from enum import Enum
from typing import List


class MissionType(str, Enum):
    """
    Kinds of mission an organization can plan.
    """
    CARGO_HAUL = "Cargo Haul"
    SALVAGE_OPERATION = "Salvage Operation"
    BOUNTY_HUNTING = "Bounty Hunting"
    EXPLORATION = "Exploration"
    RECONNAISSANCE = "Reconnaissance"
    MEDICAL_SUPPORT = "Medical Support"
    COMBAT_PATROL = "Combat Patrol"
    ESCORT_DUTY = "Escort Duty"
    MINING_EXPEDITION = "Mining Expedition"


class MissionStatus(str, Enum):
    """
    Lifecycle status of a mission.

    Flow: Planning -> Briefing -> In Progress -> Debriefing -> Completed -> Archived
    """
    PLANNING = "Planning"
    BRIEFING = "Briefing"
    IN_PROGRESS = "In Progress"
    DEBRIEFING = "Debriefing"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"
    CANCELLED = "Cancelled"


class CrewRole(str, Enum):
    """
    Roles offered when seating a person on a vessel.
    """
    PILOT = "Pilot"
    CO_PILOT = "Co-Pilot"
    GUNNER = "Gunner"
    ENGINEER = "Engineer"
    MEDIC = "Medic"
    NAVIGATOR = "Navigator"
    CREW = "Crew"
    SUPPORT = "Support"


class Stage(str, Enum):
    """
    The four ordered sections of the composer.

    Flow: overview -> personnel -> vessels -> review
    """
    OVERVIEW = "overview"
    PERSONNEL = "personnel"
    VESSELS = "vessels"
    REVIEW = "review"

    @property
    def title(self) -> str:
        return self.value.capitalize()

    @classmethod
    def ordered(cls) -> List["Stage"]:
        return [cls.OVERVIEW, cls.PERSONNEL, cls.VESSELS, cls.REVIEW]


class SaveStatus(str, Enum):
    """
    Persistence state of the draft as shown by the host.
    """
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


DEFAULT_MISSION_TYPE = MissionType.CARGO_HAUL
DEFAULT_MISSION_STATUS = MissionStatus.PLANNING
DEFAULT_CREW_ROLE = CrewRole.CREW
