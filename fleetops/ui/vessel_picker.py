"""
ui/vessel_picker.py - Staged vessel multi-select

Candidates are every vessel owned by a directory member. The user filters by
manufacturer and free text, toggles a pending set, then commits the set to
the selection store in one batch.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING
import logging

from fleetops.core.identifiers import IdAllocator, default_allocator
from fleetops.core.models import MissionDraft, Person, Vessel
from .components import DataTable

if TYPE_CHECKING:
    from fleetops.core.selection_store import SelectionStore

logger = logging.getLogger("ui.vessel_picker")


@dataclass
class PickerCandidate:
    """A pool vessel with its selection state."""
    vessel: Vessel = field(default_factory=Vessel)
    in_mission: bool = False
    pending: bool = False

    @property
    def state_label(self) -> str:
        if self.in_mission:
            return "Added"
        return "Selected" if self.pending else ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shipId": self.vessel.vessel_id,
            "name": self.vessel.name,
            "type": self.vessel.type,
            "manufacturer": self.vessel.manufacturer,
            "owner": self.vessel.owner_name,
            "in_mission": self.in_mission,
            "pending": self.pending,
        }


class VesselPicker:
    """Filterable, staged multi-select over the members' vessels."""

    def __init__(self, allocator: Optional[IdAllocator] = None):
        self._allocator = allocator or default_allocator
        self._pool: List[Vessel] = []
        self._pending: List[str] = []
        self.manufacturer_filter: str = ""
        self.search_text: str = ""

    # ==================== Pool ====================

    def set_pool(self, people: Iterable[Person]) -> None:
        """
        Rebuild the candidate pool from directory members.

        Vessels without an id get a synthetic one so they can be toggled.
        Pending selections that left the pool are dropped.
        """
        pool = []
        for person in people:
            for vessel in person.owned_vessels:
                if not vessel.vessel_id:
                    vessel.vessel_id = self._allocator.vessel_id()
                if vessel.owner_id is None:
                    vessel.owner_id = person.id
                    vessel.owner_name = person.display_name
                pool.append(vessel)
        self._pool = pool
        ids = {v.vessel_id for v in pool}
        self._pending = [vid for vid in self._pending if vid in ids]
        logger.debug(f"Vessel pool rebuilt: {len(pool)} candidates")

    @property
    def pool(self) -> List[Vessel]:
        return list(self._pool)

    def find(self, vessel_id: str) -> Optional[Vessel]:
        for vessel in self._pool:
            if vessel.vessel_id == vessel_id:
                return vessel
        return None

    # ==================== Filters ====================

    def manufacturers(self) -> List[str]:
        """Sorted distinct manufacturers in the pool."""
        return sorted({v.manufacturer for v in self._pool if v.manufacturer})

    def set_manufacturer(self, manufacturer: str) -> None:
        self.manufacturer_filter = manufacturer or ""

    def set_search(self, text: str) -> None:
        self.search_text = text or ""

    def clear_filters(self) -> None:
        self.manufacturer_filter = ""
        self.search_text = ""

    def filtered(self) -> List[Vessel]:
        """Pool vessels matching the manufacturer and the name/type search."""
        needle = self.search_text.strip().lower()
        result = []
        for vessel in self._pool:
            if self.manufacturer_filter and vessel.manufacturer != self.manufacturer_filter:
                continue
            if needle and needle not in vessel.name.lower() and needle not in vessel.type.lower():
                continue
            result.append(vessel)
        return result

    # ==================== Selection ====================

    @property
    def pending(self) -> List[str]:
        return list(self._pending)

    @staticmethod
    def is_in_mission(draft: MissionDraft, vessel_id: str) -> bool:
        return draft.has_vessel(vessel_id)

    def is_pending(self, vessel_id: str) -> bool:
        return vessel_id in self._pending

    def toggle(self, vessel_id: str, draft: Optional[MissionDraft] = None) -> bool:
        """
        Flip a vessel in or out of the pending set.

        Vessels already in the mission, or not in the pool, cannot be toggled.

        Returns:
            True if the vessel is pending after the call
        """
        if draft is not None and self.is_in_mission(draft, vessel_id):
            return False
        if self.find(vessel_id) is None:
            return False
        if vessel_id in self._pending:
            self._pending.remove(vessel_id)
            return False
        self._pending.append(vessel_id)
        return True

    def candidates(self, draft: MissionDraft) -> List[PickerCandidate]:
        return [
            PickerCandidate(
                vessel=v,
                in_mission=self.is_in_mission(draft, v.vessel_id),
                pending=v.vessel_id in self._pending,
            )
            for v in self.filtered()
        ]

    def commit(self, store: "SelectionStore") -> List[str]:
        """
        Add every pending vessel not yet in the mission, then clear the set.

        Returns:
            Ids of the vessels added
        """
        to_add = [
            self.find(vid) for vid in self._pending
            if not store.draft.has_vessel(vid)
        ]
        added = store.add_vessels(v for v in to_add if v is not None)
        logger.info(f"Committed {len(added)} of {len(self._pending)} pending vessels")
        self._pending = []
        return added

    # ==================== Rendering ====================

    def as_table(self, draft: MissionDraft) -> DataTable:
        rows = [
            {
                "id": c.vessel.vessel_id,
                "name": c.vessel.name,
                "type": c.vessel.type,
                "manufacturer": c.vessel.manufacturer,
                "owner": c.vessel.owner_name or "",
                "state": c.state_label,
            }
            for c in self.candidates(draft)
        ]
        return DataTable(
            component_id="vessel-picker",
            columns=["id", "name", "type", "manufacturer", "owner", "state"],
            rows=rows,
            empty_text="No vessels match the current filters",
        )
