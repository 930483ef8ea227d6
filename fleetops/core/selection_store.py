"""
FleetOps SelectionStore

Holds the mission draft under edit and applies every roster and assignment
mutation atomically. Removals cascade to crew assignments so no assignment
ever points at a person or vessel outside the rosters.

Invalid references (unknown person, vessel not in the roster) are rejected
silently at this boundary. Only programming errors raise.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from fleetops.core.enums import CrewRole
from fleetops.core.identifiers import IdAllocator, default_allocator
from fleetops.core.models import (
    GROUND_SUPPORT,
    CrewAssignment,
    MissionDraft,
    MissionOverview,
    Person,
    SelectedVessel,
    Vessel,
    utc_now_iso,
)
from fleetops.errors.taxonomy import InvalidFieldError

logger = logging.getLogger(__name__)

# listener(action, draft)
ChangeListener = Callable[[str, MissionDraft], None]


class SelectionStore:
    """
    Mutable holder of one MissionDraft.

    Features:
    - Idempotent add for people and vessels (unique by id)
    - Cascading removal of crew assignments
    - One assignment per person (vessel seat or ground support)
    - Change listeners notified after every effective mutation
    """

    def __init__(
        self,
        draft: Optional[MissionDraft] = None,
        allocator: Optional[IdAllocator] = None,
    ):
        """
        Initialize the store.

        Args:
            draft: Draft to manage. Creates an empty new-mission draft if not provided.
            allocator: Id allocator for synthetic vessel ids.
        """
        self._allocator = allocator or default_allocator
        self._draft = draft if draft is not None else MissionDraft.new(allocator=self._allocator)
        self._listeners: List[ChangeListener] = []

    @property
    def draft(self) -> MissionDraft:
        """Access the live draft. Treat as read-only outside the store."""
        return self._draft

    def snapshot(self) -> MissionDraft:
        """Deep copy of the current draft."""
        return self._draft.copy()

    # ==================== Listeners ====================

    def add_listener(self, listener: ChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> bool:
        try:
            self._listeners.remove(listener)
            return True
        except ValueError:
            return False

    def _changed(self, action: str, mark_dirty: bool = True) -> None:
        if mark_dirty:
            self._draft.dirty = True
        for listener in list(self._listeners):
            try:
                listener(action, self._draft)
            except Exception as e:
                logger.error(f"Selection listener failed on {action}: {e}")

    # ==================== Lifecycle ====================

    def hydrate(self, mission: Dict[str, Any]) -> MissionDraft:
        """Replace the draft with one hydrated from a persisted mission."""
        self._draft = MissionDraft.from_mission(mission)
        logger.debug(
            f"Hydrated mission {self._draft.overview.id}: "
            f"{len(self._draft.people)} people, {len(self._draft.vessels)} vessels"
        )
        self._changed("hydrate", mark_dirty=False)
        return self._draft

    def reset(self) -> MissionDraft:
        """Replace the draft with an empty new-mission draft."""
        self._draft = MissionDraft.new(allocator=self._allocator)
        self._changed("reset", mark_dirty=False)
        return self._draft

    # ==================== Personnel ====================

    def add_person(self, person: Person) -> bool:
        """
        Add a person to the roster.

        Returns:
            True if added, False if a person with that id is already present.
        """
        if not person.id or self._draft.find_person(person.id) is not None:
            return False
        self._draft.people.append(Person(
            id=person.id,
            display_name=person.display_name,
            owned_vessels=list(person.owned_vessels),
        ))
        self._changed("add_person")
        return True

    def remove_person(self, person_id: str) -> bool:
        """Remove a person and every crew assignment that references them."""
        before = len(self._draft.people)
        self._draft.people = [p for p in self._draft.people if p.id != person_id]
        if len(self._draft.people) == before:
            return False
        self._draft.assignments = [a for a in self._draft.assignments if a.person_id != person_id]
        self._changed("remove_person")
        return True

    # ==================== Vessels ====================

    def _admit_vessel(self, vessel: Vessel) -> Optional[str]:
        vessel_id = vessel.vessel_id or self._allocator.vessel_id()
        if self._draft.has_vessel(vessel_id):
            return None
        self._draft.vessels.append(SelectedVessel.from_vessel(vessel, vessel_id=vessel_id))
        return vessel_id

    def add_vessel(self, vessel: Vessel) -> Optional[str]:
        """
        Add a vessel to the roster.

        A vessel without an id receives a synthetic one.

        Returns:
            The roster id of the added vessel, or None if it was already present.
        """
        vessel_id = self._admit_vessel(vessel)
        if vessel_id is not None:
            self._changed("add_vessel")
        return vessel_id

    def add_vessels(self, vessels: Iterable[Vessel]) -> List[str]:
        """Add several vessels with a single change notification."""
        added = []
        for vessel in vessels:
            vessel_id = self._admit_vessel(vessel)
            if vessel_id is not None:
                added.append(vessel_id)
        if added:
            self._changed("add_vessels")
        return added

    def remove_vessel(self, vessel_id: str) -> bool:
        """Remove a vessel and every crew assignment seated on it."""
        before = len(self._draft.vessels)
        self._draft.vessels = [v for v in self._draft.vessels if v.vessel_id != vessel_id]
        if len(self._draft.vessels) == before:
            return False
        self._draft.assignments = [
            a for a in self._draft.assignments
            if a.is_ground_support or a.vessel_id != vessel_id
        ]
        self._changed("remove_vessel")
        return True

    # ==================== Assignments ====================

    def assign_crew(
        self,
        person_id: str,
        vessel_id: str,
        role: str = "",
        vessel_name: Optional[str] = None,
        vessel_type: Optional[str] = None,
        manufacturer: Optional[str] = None,
        image: Optional[str] = None,
        crew_capacity: Optional[int] = None,
    ) -> bool:
        """
        Upsert the person's single crew assignment.

        Args:
            person_id: Roster person to assign
            vessel_id: Roster vessel id, GROUND_SUPPORT, or "" together with
                an empty role to clear the assignment
            role: Crew role; a vessel seat with no role gets "Crew"
            vessel_name, vessel_type, manufacturer, image, crew_capacity:
                Overrides for the vessel metadata copied into the assignment

        Returns:
            True if the assignments changed
        """
        if not vessel_id and not role:
            return self.unassign(person_id)

        person = self._draft.find_person(person_id)
        if person is None:
            logger.debug(f"assign_crew ignored: person {person_id} not in roster")
            return False

        if vessel_id == GROUND_SUPPORT:
            assignment = CrewAssignment.ground_support(person, role or CrewRole.SUPPORT.value)
        else:
            vessel = self._draft.find_vessel(vessel_id) if vessel_id else None
            if vessel is None:
                logger.debug(f"assign_crew ignored: vessel {vessel_id!r} not in roster")
                return False
            assignment = CrewAssignment(
                person_id=person.id,
                person_name=person.display_name,
                vessel_id=vessel.vessel_id,
                vessel_name=vessel_name if vessel_name is not None else vessel.name,
                vessel_type=vessel_type if vessel_type is not None else vessel.type,
                manufacturer=manufacturer if manufacturer is not None else vessel.manufacturer,
                image=image if image is not None else vessel.image,
                crew_capacity=crew_capacity if crew_capacity is not None else vessel.crew_capacity,
                role=role or CrewRole.CREW.value,
            )

        self._draft.assignments = [a for a in self._draft.assignments if a.person_id != person_id]
        self._draft.assignments.append(assignment)
        self._changed("assign_crew")
        return True

    def unassign(self, person_id: str) -> bool:
        """Clear the person's assignment, leaving them in the roster."""
        before = len(self._draft.assignments)
        self._draft.assignments = [a for a in self._draft.assignments if a.person_id != person_id]
        if len(self._draft.assignments) == before:
            return False
        self._changed("unassign")
        return True

    # ==================== Overview ====================

    def update_overview_field(self, field_name: str, value: Any) -> None:
        """
        Set one overview field and stamp updated_at.

        Accepts wire names (``scheduledDateTime``) or attribute names
        (``scheduled_date_time``).

        Raises:
            InvalidFieldError: If the field does not exist.
        """
        attr = MissionOverview.resolve_field(field_name)
        if attr is None:
            raise InvalidFieldError(field_name)

        if attr in ("images", "diagram_links"):
            value = [str(v) for v in value or []]

        setattr(self._draft.overview, attr, value)
        if attr != "updated_at":
            self._draft.overview.updated_at = utc_now_iso()
        self._changed(f"update:{attr}")
