"""
ui/composer.py - Mission composer shell

Owns one SelectionStore, one StageNavigator and one VesselPicker, renders
the four accordion sections with their error badges, and reports the save
verdict to whatever hosts it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union
import logging

from fleetops.core import rules
from fleetops.core.enums import CrewRole, Stage
from fleetops.core.identifiers import IdAllocator
from fleetops.core.models import GROUND_SUPPORT, MissionDraft, Person
from fleetops.core.selection_store import SelectionStore
from .components import AccordionSection, AlertComponent, ButtonComponent, DataTable
from .events import EventBus, EventType, UIEvent, event_bus as default_bus
from .stage_navigator import STAGE_DEFINITIONS, StageNavigator
from .vessel_picker import VesselPicker

logger = logging.getLogger("ui.composer")


@dataclass
class ComposerState:
    """What the host needs to drive its header."""
    can_save: bool = False
    status: str = ""
    first_invalid_id: Optional[str] = None
    dirty: bool = False
    errors: rules.SectionErrors = field(default_factory=rules.SectionErrors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "can_save": self.can_save,
            "status": self.status,
            "first_invalid_id": self.first_invalid_id,
            "dirty": self.dirty,
            "errors": self.errors.to_dict(),
        }


StateCallback = Callable[[ComposerState], None]
SaveCallback = Callable[[Dict[str, Any]], None]


class MissionComposer:
    """
    Multi-stage mission editor.

    Usage:
        composer = MissionComposer(mission=stored, directory=directory, bus=bus)
        with composer:
            await composer.load_reference_data()
            composer.add_person("u1")
            ...
    """

    def __init__(
        self,
        mission: Optional[Dict[str, Any]] = None,
        directory: Optional[Any] = None,
        bus: Optional[EventBus] = None,
        on_state: Optional[StateCallback] = None,
        on_save: Optional[SaveCallback] = None,
        zero_capacity_unlimited: bool = False,
        allocator: Optional[IdAllocator] = None,
    ):
        """
        Initialize the composer.

        Args:
            mission: Stored mission to edit; None starts a new mission
            directory: UserDirectory used by load_reference_data
            bus: Event bus shared with the host
            on_state: Called with a ComposerState after every change
            on_save: Called with the save payload when a save is accepted
            zero_capacity_unlimited: Read a stored crew capacity of 0 as unlimited
            allocator: Id allocator for synthetic ids
        """
        self.bus = bus or default_bus
        self.directory = directory
        self.on_state = on_state
        self.on_save = on_save
        self.zero_capacity_unlimited = zero_capacity_unlimited

        self.store = SelectionStore(allocator=allocator)
        if mission is not None:
            self.store.hydrate(mission)
        self.navigator = StageNavigator.for_draft(self.store.draft, bus=self.bus)
        self.picker = VesselPicker(allocator=allocator)
        self.members: List[Person] = []
        self.personnel_search: str = ""

        self._mounted = False
        self.store.add_listener(self._on_store_changed)

    @property
    def draft(self) -> MissionDraft:
        return self.store.draft

    # ==================== Lifecycle ====================

    def mount(self) -> "MissionComposer":
        """Start answering host save requests and publish the initial state."""
        if not self._mounted:
            self.bus.subscribe(EventType.SAVE_REQUESTED, self._handle_save_request)
            self._mounted = True
            logger.debug(f"Composer mounted for {self.draft.overview.id}")
        self._report_state()
        return self

    def unmount(self) -> None:
        if self._mounted:
            self.bus.unsubscribe(EventType.SAVE_REQUESTED, self._handle_save_request)
            self._mounted = False
            logger.debug(f"Composer unmounted for {self.draft.overview.id}")

    @property
    def mounted(self) -> bool:
        return self._mounted

    def __enter__(self) -> "MissionComposer":
        return self.mount()

    def __exit__(self, *exc_info: Any) -> None:
        self.unmount()

    def load(self, mission: Optional[Dict[str, Any]]) -> None:
        """Replace the draft: hydrate a stored mission, or start a new one."""
        if mission is None:
            self.store.reset()
        else:
            self.store.hydrate(mission)
        initial = Stage.REVIEW if self.draft.persisted else Stage.OVERVIEW
        self.navigator.open(initial)

    async def load_reference_data(self) -> List[Person]:
        """
        Load directory members (and through them, the vessel pool).

        A failing directory leaves both lists empty; the composer stays usable.
        """
        people: List[Person] = []
        if self.directory is not None:
            try:
                people = await self.directory.fetch()
            except Exception as e:
                logger.exception(f"Reference data load failed: {e}")
                people = []
        self.set_members(people)
        return people

    def set_members(self, people: List[Person]) -> None:
        self.members = list(people)
        self.picker.set_pool(self.members)
        self.bus.emit_simple(
            EventType.REFERENCE_DATA_LOADED,
            source="composer",
            members=len(self.members),
            vessels=len(self.picker.pool),
        )

    # ==================== State reporting ====================

    def _on_store_changed(self, action: str, draft: MissionDraft) -> None:
        self._report_state()

    def state(self) -> ComposerState:
        draft = self.draft
        return ComposerState(
            can_save=rules.can_save(draft, self.zero_capacity_unlimited),
            status=draft.overview.status,
            first_invalid_id=rules.first_invalid_field(draft),
            dirty=draft.dirty,
            errors=rules.error_counts(draft, self.zero_capacity_unlimited),
        )

    def _report_state(self) -> None:
        state = self.state()
        if self.on_state is not None:
            try:
                self.on_state(state)
            except Exception as e:
                logger.error(f"on_state callback failed: {e}")
        self.bus.emit(UIEvent(
            event_type=EventType.COMPOSER_STATE_CHANGED,
            source="composer",
            payload=state.to_dict(),
        ))

    @property
    def can_save(self) -> bool:
        return rules.can_save(self.draft, self.zero_capacity_unlimited)

    @property
    def errors(self) -> rules.SectionErrors:
        return rules.error_counts(self.draft, self.zero_capacity_unlimited)

    def issues(self) -> List[rules.ValidationIssue]:
        return rules.validation_issues(self.draft, self.zero_capacity_unlimited)

    def summary(self) -> rules.MissionSummary:
        return rules.mission_summary(self.draft, self.zero_capacity_unlimited)

    def occupancy(self, vessel_id: str) -> rules.Occupancy:
        return rules.occupancy(self.draft, vessel_id, self.zero_capacity_unlimited)

    # ==================== Overview ====================

    def set_field(self, field_name: str, value: Any) -> None:
        self.store.update_overview_field(field_name, value)

    # ==================== Personnel ====================

    def find_member(self, person_id: str) -> Optional[Person]:
        for person in self.members:
            if person.id == person_id:
                return person
        return None

    def search_people(self, text: Optional[str] = None) -> List[Person]:
        """Directory members whose display name contains the text (any case)."""
        needle = (self.personnel_search if text is None else text).strip().lower()
        if not needle:
            return list(self.members)
        return [p for p in self.members if needle in p.display_name.lower()]

    def add_person(self, person: Union[Person, str]) -> bool:
        if isinstance(person, str):
            found = self.find_member(person)
            if found is None:
                logger.debug(f"add_person ignored: {person} not in directory")
                return False
            person = found
        return self.store.add_person(person)

    def remove_person(self, person_id: str) -> bool:
        return self.store.remove_person(person_id)

    # ==================== Vessels ====================

    def toggle_pending(self, vessel_id: str) -> bool:
        return self.picker.toggle(vessel_id, self.draft)

    def commit_pending(self) -> List[str]:
        return self.picker.commit(self.store)

    def remove_vessel(self, vessel_id: str) -> bool:
        return self.store.remove_vessel(vessel_id)

    def assign(self, person_id: str, vessel_id: str, role: str = "") -> bool:
        return self.store.assign_crew(person_id, vessel_id, role)

    def assign_ground_support(self, person_id: str, role: str = CrewRole.SUPPORT.value) -> bool:
        return self.store.assign_crew(person_id, GROUND_SUPPORT, role)

    def unassign(self, person_id: str) -> bool:
        return self.store.unassign(person_id)

    def set_role(self, person_id: str, role: str) -> bool:
        """Change the role of an existing assignment, keeping its seat."""
        current = self.draft.assignment_for(person_id)
        if current is None:
            return False
        seat = GROUND_SUPPORT if current.is_ground_support else current.vessel_id
        return self.store.assign_crew(person_id, seat, role)

    def unassigned_people(self) -> List[Person]:
        return rules.unassigned_people(self.draft)

    def quick_assign(self, vessel_id: str, person_id: str, role: str = CrewRole.CREW.value) -> bool:
        """Seat an unassigned roster member on the vessel."""
        if person_id not in {p.id for p in self.unassigned_people()}:
            return False
        return self.store.assign_crew(person_id, vessel_id, role)

    # ==================== Save ====================

    def _handle_save_request(self, event: UIEvent) -> None:
        mission_id = event.payload.get("mission_id")
        if mission_id and mission_id != self.draft.overview.id:
            return
        self.submit()

    def submit(self) -> Optional[Dict[str, Any]]:
        """
        Commit the draft for saving.

        When the save is blocked, navigates to the first field to fix and
        returns None. Otherwise returns the payload after passing it to on_save.
        """
        if not self.can_save:
            target = self.navigator.handle_rejected_save(self.draft)
            logger.info(f"Save blocked for {self.draft.overview.id}, focus -> {target}")
            return None

        payload = rules.build_save_payload(self.draft)
        if self.on_save is not None:
            self.on_save(payload)
        return payload

    # ==================== Rendering ====================

    def sections(self) -> List[AccordionSection]:
        """The four accordion sections, with badges and open state."""
        errors = self.errors
        builders = {
            Stage.OVERVIEW: self._overview_section,
            Stage.PERSONNEL: self._personnel_section,
            Stage.VESSELS: self._vessels_section,
            Stage.REVIEW: self._review_section,
        }
        sections = []
        for stage in Stage.ordered():
            info = STAGE_DEFINITIONS[stage]
            section = AccordionSection(
                component_id=stage.value,
                title=info.name,
                badge=errors.for_stage(stage),
                expanded=self.navigator.is_open(stage),
            )
            builders[stage](section)
            if info.next_label:
                nxt = self.navigator.next_stage(stage)
                section.footer = ButtonComponent(
                    component_id=f"{stage.value}-next",
                    text=info.next_label,
                    action=f"goto:{nxt.value}" if nxt else "",
                )
            sections.append(section)
        return sections

    def _overview_section(self, section: AccordionSection) -> None:
        ov = self.draft.overview
        section.content = "\n".join([
            f"Name:      {ov.name}",
            f"Type:      {ov.type}",
            f"Status:    {ov.status}",
            f"Scheduled: {ov.scheduled_date_time}",
            f"Location:  {ov.location}",
            f"Summary:   {ov.brief_summary}",
        ])

    def _personnel_section(self, section: AccordionSection) -> None:
        rows = []
        for person in self.draft.people:
            a = self.draft.assignment_for(person.id)
            rows.append({
                "id": person.id,
                "name": person.display_name,
                "assignment": (a.vessel_name if a else "Unassigned"),
                "role": a.role if a else "",
            })
        section.add_child(DataTable(
            component_id="personnel-roster",
            columns=["id", "name", "assignment", "role"],
            rows=rows,
            empty_text="No personnel selected",
        ))

    def _vessels_section(self, section: AccordionSection) -> None:
        rows = []
        for vessel in self.draft.vessels:
            occ = self.occupancy(vessel.vessel_id)
            rows.append({
                "id": vessel.vessel_id,
                "name": vessel.name,
                "type": vessel.type,
                "owner": vessel.owner_name or "",
                "crew": occ.label + (" OVER" if occ.is_over else ""),
            })
        section.add_child(DataTable(
            component_id="vessel-roster",
            columns=["id", "name", "type", "owner", "crew"],
            rows=rows,
            empty_text="No vessels selected",
        ))
        ground = rules.ground_support(self.draft)
        if ground:
            names = ", ".join(f"{a.person_name} ({a.role})" for a in ground)
            section.add_child(AlertComponent(
                component_id="ground-support",
                message=f"Ground Support: {names}",
                severity="info",
            ))

    def _review_section(self, section: AccordionSection) -> None:
        summary = self.summary()
        section.content = (
            f"Participants: {summary.participant_count}  "
            f"Vessels: {summary.vessel_count}  "
            f"Ground support: {summary.ground_support_count}"
        )
        for issue in self.issues():
            section.add_child(AlertComponent(
                component_id=f"issue-{issue.target}",
                message=f"{issue.message} (fix in {issue.stage.title})",
                severity="error",
            ))
        if not self.can_save:
            return
        section.add_child(AlertComponent(
            component_id="review-ready",
            message="Ready to save",
            severity="success",
        ))

    def render_ascii(self) -> str:
        return "\n".join(s.render_ascii() for s in self.sections())

    def render_html(self) -> str:
        body = "".join(s.render_html() for s in self.sections())
        return f'<div class="mission-composer">{body}</div>'
