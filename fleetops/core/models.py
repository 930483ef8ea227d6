"""
FleetOps Mission Dataclasses

Reference entities (Person, Vessel), mission-scoped selections
(SelectedVessel, CrewAssignment) and the MissionDraft aggregate.
Each dataclass includes to_dict() and from_dict() for the wire shape used by
the persistence API (camelCase keys).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import copy

from fleetops.core.enums import DEFAULT_MISSION_STATUS, DEFAULT_MISSION_TYPE
from fleetops.core.identifiers import IdAllocator, default_allocator

GROUND_SUPPORT = "ground-support"
GROUND_SUPPORT_LABEL = "Ground Support"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _split_roles(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(v) for v in value if v]


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


# ==================== 1. Vessel ====================

@dataclass
class Vessel:
    """
    A ship-type reference entity.

    crew_capacity is the maximum number of non-ground-support crew.
    None means the capacity is unknown and treated as unlimited.
    """
    vessel_id: str = ""
    name: str = ""
    type: str = ""
    manufacturer: str = ""
    crew_capacity: Optional[int] = None
    image: str = ""
    size: Optional[str] = None
    role_tags: List[str] = field(default_factory=list)

    # Contributing owner
    owner_id: Optional[str] = None
    owner_name: Optional[str] = None

    # Descriptive dimensions
    cargo_capacity: Optional[float] = None
    length: Optional[float] = None
    beam: Optional[float] = None
    height: Optional[float] = None
    speed_scm: Optional[float] = None
    speed_boost: Optional[float] = None
    status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "shipId": self.vessel_id,
            "name": self.name,
            "type": self.type,
            "manufacturer": self.manufacturer,
            "crewRequirement": self.crew_capacity,
            "image": self.image,
            "size": self.size,
            "role": list(self.role_tags),
            "ownerId": self.owner_id,
            "ownerName": self.owner_name,
            "cargoCapacity": self.cargo_capacity,
            "length": self.length,
            "beam": self.beam,
            "height": self.height,
            "speedSCM": self.speed_scm,
            "speedBoost": self.speed_boost,
            "status": self.status,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vessel":
        return cls(
            vessel_id=str(data.get("shipId") or data.get("id") or ""),
            name=data.get("name") or "",
            type=data.get("type") or "",
            manufacturer=data.get("manufacturer") or "",
            crew_capacity=_optional_int(data.get("crewRequirement", data.get("crewCapacity"))),
            image=data.get("image") or "",
            size=data.get("size"),
            role_tags=_split_roles(data.get("role", data.get("roleTags"))),
            owner_id=data.get("ownerId"),
            owner_name=data.get("ownerName"),
            cargo_capacity=_optional_float(data.get("cargoCapacity")),
            length=_optional_float(data.get("length")),
            beam=_optional_float(data.get("beam")),
            height=_optional_float(data.get("height")),
            speed_scm=_optional_float(data.get("speedSCM")),
            speed_boost=_optional_float(data.get("speedBoost")),
            status=data.get("status"),
        )


@dataclass
class SelectedVessel(Vessel):
    """A vessel placed in a mission's roster, tagged with its contributing owner."""

    @classmethod
    def from_vessel(
        cls,
        vessel: Vessel,
        vessel_id: Optional[str] = None,
        owner_id: Optional[str] = None,
        owner_name: Optional[str] = None,
    ) -> "SelectedVessel":
        values = {name: copy.copy(getattr(vessel, name)) for name in Vessel.__dataclass_fields__}
        if vessel_id is not None:
            values["vessel_id"] = vessel_id
        if owner_id is not None:
            values["owner_id"] = owner_id
        if owner_name is not None:
            values["owner_name"] = owner_name
        return cls(**values)


# ==================== 2. Person ====================

@dataclass
class Person:
    """A member from the user directory."""
    id: str = ""
    display_name: str = ""
    owned_vessels: List[Vessel] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "aydoHandle": self.display_name,
            "ships": [v.to_dict() for v in self.owned_vessels],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Person":
        return cls(
            id=str(data.get("id") or data.get("userId") or ""),
            display_name=data.get("aydoHandle") or data.get("displayName") or data.get("name") or "",
            owned_vessels=[Vessel.from_dict(v) for v in data.get("ships") or []],
        )


# ==================== 3. CrewAssignment ====================

@dataclass
class CrewAssignment:
    """
    Binding of one person to one vessel seat, or to ground support.

    Ground support carries no vessel: vessel_id is empty and the vessel
    name and type both read "Ground Support".
    """
    person_id: str = ""
    person_name: str = ""
    vessel_id: str = ""
    vessel_name: str = ""
    vessel_type: str = ""
    manufacturer: str = ""
    image: str = ""
    crew_capacity: Optional[int] = None
    role: str = ""
    is_ground_support: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.person_id,
            "userName": self.person_name,
            "shipId": self.vessel_id,
            "shipName": self.vessel_name,
            "shipType": self.vessel_type,
            "manufacturer": self.manufacturer,
            "image": self.image,
            "crewRequirement": self.crew_capacity,
            "role": self.role,
            "isGroundSupport": self.is_ground_support,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrewAssignment":
        return cls(
            person_id=str(data.get("userId") or ""),
            person_name=data.get("userName") or "",
            vessel_id=data.get("shipId") or "",
            vessel_name=data.get("shipName") or "",
            vessel_type=data.get("shipType") or "",
            manufacturer=data.get("manufacturer") or "",
            image=data.get("image") or "",
            crew_capacity=_optional_int(data.get("crewRequirement")),
            role=data.get("role") or "",
            is_ground_support=bool(data.get("isGroundSupport", False)),
        )

    @classmethod
    def ground_support(cls, person: Person, role: str) -> "CrewAssignment":
        return cls(
            person_id=person.id,
            person_name=person.display_name,
            vessel_name=GROUND_SUPPORT_LABEL,
            vessel_type=GROUND_SUPPORT_LABEL,
            role=role,
            is_ground_support=True,
        )


# ==================== 4. Participant ====================

@dataclass
class Participant:
    """One entry of a persisted mission's participant list."""
    user_id: str = ""
    user_name: str = ""
    ship_id: Optional[str] = None
    ship_name: Optional[str] = None
    ship_type: Optional[str] = None
    manufacturer: Optional[str] = None
    image: Optional[str] = None
    crew_requirement: Optional[int] = None
    is_ground_support: bool = False
    roles: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "userId": self.user_id,
            "userName": self.user_name,
            "shipId": self.ship_id,
            "shipName": self.ship_name,
            "shipType": self.ship_type,
            "manufacturer": self.manufacturer,
            "image": self.image,
            "crewRequirement": self.crew_requirement,
            "isGroundSupport": self.is_ground_support,
            "roles": list(self.roles),
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        return cls(
            user_id=str(data.get("userId") or ""),
            user_name=data.get("userName") or "",
            ship_id=data.get("shipId") or None,
            ship_name=data.get("shipName") or None,
            ship_type=data.get("shipType") or None,
            manufacturer=data.get("manufacturer") or None,
            image=data.get("image") or None,
            crew_requirement=_optional_int(data.get("crewRequirement")),
            is_ground_support=bool(data.get("isGroundSupport", False)),
            roles=_split_roles(data.get("roles")),
        )


# ==================== 5. MissionOverview ====================

# Wire key -> attribute name
OVERVIEW_FIELDS: Dict[str, str] = {
    "id": "id",
    "name": "name",
    "type": "type",
    "status": "status",
    "scheduledDateTime": "scheduled_date_time",
    "location": "location",
    "briefSummary": "brief_summary",
    "details": "details",
    "leaderId": "leader_id",
    "leaderName": "leader_name",
    "images": "images",
    "diagramLinks": "diagram_links",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


@dataclass
class MissionOverview:
    """Scalar mission fields edited in the Overview stage."""
    id: str = ""
    name: str = ""
    type: str = DEFAULT_MISSION_TYPE.value
    status: str = DEFAULT_MISSION_STATUS.value
    scheduled_date_time: str = ""
    location: str = ""
    brief_summary: str = ""
    details: str = ""
    leader_id: Optional[str] = None
    leader_name: Optional[str] = None
    images: List[str] = field(default_factory=list)
    diagram_links: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {wire: getattr(self, attr) for wire, attr in OVERVIEW_FIELDS.items()}
        data["images"] = list(self.images)
        data["diagramLinks"] = list(self.diagram_links)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MissionOverview":
        values = {}
        for wire, attr in OVERVIEW_FIELDS.items():
            if wire in data and data[wire] is not None:
                values[attr] = data[wire]
            elif attr in data and data[attr] is not None:
                values[attr] = data[attr]
        for attr in ("images", "diagram_links"):
            if attr in values:
                values[attr] = [str(v) for v in values[attr] or []]
        if "id" in values:
            values["id"] = str(values["id"])
        return cls(**values)

    @staticmethod
    def resolve_field(name: str) -> Optional[str]:
        """Map a wire or attribute field name to the attribute name."""
        if name in OVERVIEW_FIELDS:
            return OVERVIEW_FIELDS[name]
        if name in OVERVIEW_FIELDS.values():
            return name
        return None


# ==================== 6. MissionDraft ====================

@dataclass
class MissionDraft:
    """
    The mission under edit: overview, rosters and crew assignments.

    persisted is True when the draft was hydrated from a stored mission.
    """
    overview: MissionOverview = field(default_factory=MissionOverview)
    people: List[Person] = field(default_factory=list)
    vessels: List[SelectedVessel] = field(default_factory=list)
    assignments: List[CrewAssignment] = field(default_factory=list)
    dirty: bool = False
    persisted: bool = False

    def find_person(self, person_id: str) -> Optional[Person]:
        for person in self.people:
            if person.id == person_id:
                return person
        return None

    def find_vessel(self, vessel_id: str) -> Optional[SelectedVessel]:
        for vessel in self.vessels:
            if vessel.vessel_id == vessel_id:
                return vessel
        return None

    def assignment_for(self, person_id: str) -> Optional[CrewAssignment]:
        for assignment in self.assignments:
            if assignment.person_id == person_id:
                return assignment
        return None

    def has_vessel(self, vessel_id: str) -> bool:
        return self.find_vessel(vessel_id) is not None

    def copy(self) -> "MissionDraft":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.overview.to_dict(),
            "people": [{"id": p.id, "displayName": p.display_name} for p in self.people],
            "vessels": [v.to_dict() for v in self.vessels],
            "assignments": [a.to_dict() for a in self.assignments],
            "dirty": self.dirty,
        }

    @classmethod
    def new(
        cls,
        now: Optional[datetime] = None,
        allocator: Optional[IdAllocator] = None,
    ) -> "MissionDraft":
        """Create an empty draft for a new mission."""
        allocator = allocator or default_allocator
        now = now or datetime.now(timezone.utc)
        stamp = now.isoformat()
        overview = MissionOverview(
            id=allocator.mission_id(),
            scheduled_date_time=stamp,
            created_at=stamp,
            updated_at=stamp,
        )
        return cls(overview=overview)

    @classmethod
    def from_mission(cls, mission: Dict[str, Any]) -> "MissionDraft":
        """
        Hydrate a draft from a persisted mission.

        Every participant becomes a roster member. Participants with roles
        become crew assignments when their ship is rostered (or they are
        ground support), and participants with a ship id and name
        contribute that ship to the vessel roster (first occurrence wins).
        """
        overview = MissionOverview.from_dict(mission)
        participants = [Participant.from_dict(p) for p in mission.get("participants") or []]

        people: List[Person] = []
        seen_people = set()
        vessels: List[SelectedVessel] = []
        seen_vessels = set()
        assignments: List[CrewAssignment] = []

        for p in participants:
            if p.user_id and p.user_id not in seen_people:
                seen_people.add(p.user_id)
                people.append(Person(id=p.user_id, display_name=p.user_name))

            if p.ship_id and p.ship_name and not p.is_ground_support and p.ship_id not in seen_vessels:
                seen_vessels.add(p.ship_id)
                vessels.append(SelectedVessel(
                    vessel_id=p.ship_id,
                    name=p.ship_name,
                    type=p.ship_type or p.ship_name,
                    manufacturer=p.manufacturer or "",
                    image=p.image or "",
                    crew_capacity=p.crew_requirement,
                    owner_id=p.user_id,
                    owner_name=p.user_name,
                ))

        for p in participants:
            if p.roles and p.user_id:
                if not p.is_ground_support and p.ship_id not in seen_vessels:
                    # Roles without a rostered ship stay unassigned
                    continue
                if p.is_ground_support:
                    assignment = CrewAssignment.ground_support(
                        Person(id=p.user_id, display_name=p.user_name), p.roles[0]
                    )
                else:
                    vessel = next(v for v in vessels if v.vessel_id == p.ship_id)
                    assignment = CrewAssignment(
                        person_id=p.user_id,
                        person_name=p.user_name,
                        vessel_id=p.ship_id,
                        vessel_name=p.ship_name or vessel.name,
                        vessel_type=p.ship_type or vessel.type,
                        manufacturer=p.manufacturer or vessel.manufacturer,
                        image=p.image or vessel.image,
                        crew_capacity=p.crew_requirement if p.crew_requirement is not None else vessel.crew_capacity,
                        role=p.roles[0],
                    )
                # One assignment per person
                assignments = [a for a in assignments if a.person_id != p.user_id]
                assignments.append(assignment)

        return cls(
            overview=overview,
            people=people,
            vessels=vessels,
            assignments=assignments,
            persisted=True,
        )

