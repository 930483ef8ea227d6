"""
FleetOps Crew Assignment Rules

Pure derivations over a MissionDraft: vessel occupancy, overview
completeness, the save verdict, the first field to fix, section error
badges and the participant list sent to persistence.

Nothing in this module mutates the draft or raises.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fleetops.core.enums import Stage
from fleetops.core.models import MissionDraft, Participant, Person, SelectedVessel, CrewAssignment
from fleetops.errors.taxonomy import ErrorCode, FleetOpsError, create_validation_error

# Focus targets for the required overview fields, in form order
FIELD_MISSION_NAME = "mission-name"
FIELD_MISSION_TYPE = "mission-type"
FIELD_MISSION_DATETIME = "mission-datetime"

REQUIRED_OVERVIEW_FIELDS = [
    (FIELD_MISSION_NAME, "name", "Mission name is required"),
    (FIELD_MISSION_TYPE, "type", "Mission type is required"),
    (FIELD_MISSION_DATETIME, "scheduled_date_time", "Scheduled date and time is required"),
]


def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class Occupancy:
    """Crew count against capacity for one vessel. capacity None is unlimited."""
    vessel_id: str = ""
    count: int = 0
    capacity: Optional[int] = None

    @property
    def is_over(self) -> bool:
        return self.capacity is not None and self.count > self.capacity

    @property
    def label(self) -> str:
        cap = "\u221e" if self.capacity is None else str(self.capacity)  # ∞
        return f"{self.count}/{cap}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vessel_id": self.vessel_id,
            "count": self.count,
            "capacity": self.capacity,
            "is_over": self.is_over,
        }


@dataclass
class SectionErrors:
    """Error badge counts per composer section."""
    overview: int = 0
    personnel: int = 0
    vessels: int = 0

    @property
    def review(self) -> int:
        return self.overview + self.personnel + self.vessels

    def for_stage(self, stage: Stage) -> int:
        if stage == Stage.REVIEW:
            return self.review
        return getattr(self, stage.value)

    def to_dict(self) -> Dict[str, int]:
        return {
            "overview": self.overview,
            "personnel": self.personnel,
            "vessels": self.vessels,
            "review": self.review,
        }


@dataclass
class ValidationIssue:
    """One reason the mission cannot be saved, and where to fix it."""
    stage: Stage = Stage.OVERVIEW
    target: str = ""
    message: str = ""
    code: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.value,
            "target": self.target,
            "message": self.message,
            "code": self.code,
        }

    def to_error(self, mission_id: Optional[str] = None) -> FleetOpsError:
        code = ErrorCode.VAL_OVER_CAPACITY if self.code == "over_capacity" else ErrorCode.VAL_MISSING_FIELD
        return create_validation_error(
            self.message,
            source="rules",
            code=code,
            detail=self.target,
            mission_id=mission_id,
        )


@dataclass
class MissionSummary:
    """Headline counts shown in the Review stage."""
    participant_count: int = 0
    vessel_count: int = 0
    crewed_vessel_count: int = 0
    ground_support_count: int = 0
    unassigned_count: int = 0
    over_capacity: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participants": self.participant_count,
            "vessels": self.vessel_count,
            "crewed_vessels": self.crewed_vessel_count,
            "ground_support": self.ground_support_count,
            "unassigned": self.unassigned_count,
            "over_capacity": list(self.over_capacity),
        }


# =============================================================================
# OCCUPANCY
# =============================================================================

def effective_capacity(vessel: SelectedVessel, zero_capacity_unlimited: bool = False) -> Optional[int]:
    """
    Capacity used for the over-capacity check.

    None is unlimited. With zero_capacity_unlimited, a stored 0 is read as
    unlimited too, matching records written before capacities were tracked.
    """
    capacity = vessel.crew_capacity
    if capacity is None:
        return None
    if capacity == 0 and zero_capacity_unlimited:
        return None
    return capacity


def crew_of(draft: MissionDraft, vessel_id: str) -> List[CrewAssignment]:
    """Non-ground-support assignments seated on the vessel."""
    return [
        a for a in draft.assignments
        if not a.is_ground_support and a.vessel_id == vessel_id
    ]


def occupancy(draft: MissionDraft, vessel_id: str, zero_capacity_unlimited: bool = False) -> Occupancy:
    vessel = draft.find_vessel(vessel_id)
    capacity = effective_capacity(vessel, zero_capacity_unlimited) if vessel is not None else None
    return Occupancy(
        vessel_id=vessel_id,
        count=len(crew_of(draft, vessel_id)),
        capacity=capacity,
    )


def over_capacity_vessels(draft: MissionDraft, zero_capacity_unlimited: bool = False) -> List[SelectedVessel]:
    return [
        v for v in draft.vessels
        if occupancy(draft, v.vessel_id, zero_capacity_unlimited).is_over
    ]


def vessels_valid(draft: MissionDraft, zero_capacity_unlimited: bool = False) -> bool:
    return not over_capacity_vessels(draft, zero_capacity_unlimited)


# =============================================================================
# OVERVIEW & SAVE VERDICT
# =============================================================================

def overview_complete(draft: MissionDraft) -> bool:
    ov = draft.overview
    return all(not _blank(getattr(ov, attr)) for _, attr, _ in REQUIRED_OVERVIEW_FIELDS)


def can_save(draft: MissionDraft, zero_capacity_unlimited: bool = False) -> bool:
    """The single save verdict: overview complete and no vessel over capacity."""
    return overview_complete(draft) and vessels_valid(draft, zero_capacity_unlimited)


def first_invalid_field(draft: MissionDraft) -> Optional[str]:
    """First blank required overview field in form order, or None."""
    for target, attr, _ in REQUIRED_OVERVIEW_FIELDS:
        if _blank(getattr(draft.overview, attr)):
            return target
    return None


def error_counts(draft: MissionDraft, zero_capacity_unlimited: bool = False) -> SectionErrors:
    """
    Error badges per section.

    Personnel has no blocking rules, so its badge is always zero.
    """
    overview = sum(
        1 for _, attr, _ in REQUIRED_OVERVIEW_FIELDS
        if _blank(getattr(draft.overview, attr))
    )
    return SectionErrors(
        overview=overview,
        personnel=0,
        vessels=len(over_capacity_vessels(draft, zero_capacity_unlimited)),
    )


def validation_issues(draft: MissionDraft, zero_capacity_unlimited: bool = False) -> List[ValidationIssue]:
    """Every reason the save is blocked, in the order the user should fix them."""
    issues = []
    for target, attr, message in REQUIRED_OVERVIEW_FIELDS:
        if _blank(getattr(draft.overview, attr)):
            issues.append(ValidationIssue(
                stage=Stage.OVERVIEW,
                target=target,
                message=message,
                code="missing_field",
            ))
    for vessel in draft.vessels:
        occ = occupancy(draft, vessel.vessel_id, zero_capacity_unlimited)
        if occ.is_over:
            issues.append(ValidationIssue(
                stage=Stage.VESSELS,
                target=vessel.vessel_id,
                message=f"{vessel.name or vessel.type} is over capacity ({occ.label})",
                code="over_capacity",
            ))
    return issues


# =============================================================================
# ROSTER QUERIES
# =============================================================================

def unassigned_people(draft: MissionDraft) -> List[Person]:
    """Roster members holding no assignment at all."""
    assigned = {a.person_id for a in draft.assignments}
    return [p for p in draft.people if p.id not in assigned]


def ground_support(draft: MissionDraft) -> List[CrewAssignment]:
    return [a for a in draft.assignments if a.is_ground_support]


def mission_summary(draft: MissionDraft, zero_capacity_unlimited: bool = False) -> MissionSummary:
    seated = {a.vessel_id for a in draft.assignments if not a.is_ground_support and a.vessel_id}
    return MissionSummary(
        participant_count=len(draft.people),
        vessel_count=len(draft.vessels),
        crewed_vessel_count=len(seated),
        ground_support_count=len(ground_support(draft)),
        unassigned_count=len(unassigned_people(draft)),
        over_capacity=[v.vessel_id for v in over_capacity_vessels(draft, zero_capacity_unlimited)],
    )


# =============================================================================
# SERIALIZATION
# =============================================================================

def serialize_participants(draft: MissionDraft) -> List[Participant]:
    """
    One participant per roster member, in roster order.

    People without an assignment are included with no ship and no roles.
    """
    participants = []
    for person in draft.people:
        a = draft.assignment_for(person.id)
        if a is None:
            participants.append(Participant(user_id=person.id, user_name=person.display_name))
            continue
        participants.append(Participant(
            user_id=person.id,
            user_name=person.display_name,
            ship_id=a.vessel_id or None,
            ship_name=a.vessel_name or None,
            ship_type=a.vessel_type or None,
            manufacturer=a.manufacturer or None,
            image=a.image or None,
            crew_requirement=a.crew_capacity,
            is_ground_support=a.is_ground_support,
            roles=[a.role] if a.role else [],
        ))
    return participants


def build_save_payload(draft: MissionDraft) -> Dict[str, Any]:
    """Overview fields, cleaned diagram links and the participant list."""
    payload = draft.overview.to_dict()
    payload["diagramLinks"] = [
        link for link in draft.overview.diagram_links
        if isinstance(link, str) and link.strip()
    ]
    payload["participants"] = [p.to_dict() for p in serialize_participants(draft)]
    return payload
