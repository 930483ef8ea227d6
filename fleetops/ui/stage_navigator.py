"""
ui/stage_navigator.py - Stage navigation component

Single-open accordion over the four composer stages.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import logging

from fleetops.core.enums import Stage
from fleetops.core import rules
from .events import EventBus, UIEvent, event_bus as default_bus

if TYPE_CHECKING:
    from fleetops.core.models import MissionDraft

logger = logging.getLogger("ui.stage_navigator")


@dataclass
class StageInfo:
    stage: Stage = Stage.OVERVIEW
    name: str = ""
    description: str = ""
    next_label: str = ""

    @property
    def header_id(self) -> str:
        return f"{self.stage.value}-header"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.value,
            "name": self.name,
            "description": self.description,
            "header_id": self.header_id,
            "next_label": self.next_label,
        }


# Stage definitions with metadata
STAGE_DEFINITIONS = {
    Stage.OVERVIEW: StageInfo(
        stage=Stage.OVERVIEW,
        name="Overview",
        description="Name, type, status, schedule and briefing",
        next_label="Next: Personnel",
    ),
    Stage.PERSONNEL: StageInfo(
        stage=Stage.PERSONNEL,
        name="Personnel",
        description="Pick the members taking part",
        next_label="Next: Vessels",
    ),
    Stage.VESSELS: StageInfo(
        stage=Stage.VESSELS,
        name="Vessels",
        description="Pick vessels and seat the crew",
        next_label="Next: Review",
    ),
    Stage.REVIEW: StageInfo(
        stage=Stage.REVIEW,
        name="Review",
        description="Check counts and blocking issues before saving",
    ),
}


class StageNavigator:
    """
    Tracks which composer stage is open.

    At most one stage is open at a time; None means every section is closed.
    Every change of the open stage is published as STAGE_CHANGED.
    """

    def __init__(self, initial: Optional[Stage] = Stage.OVERVIEW, bus: Optional[EventBus] = None):
        self._current: Optional[Stage] = initial
        self._bus = bus or default_bus

    @classmethod
    def for_draft(cls, draft: "MissionDraft", bus: Optional[EventBus] = None) -> "StageNavigator":
        """Review opens first for a stored mission, Overview for a new one."""
        return cls(initial=Stage.REVIEW if draft.persisted else Stage.OVERVIEW, bus=bus)

    @property
    def current(self) -> Optional[Stage]:
        return self._current

    def is_open(self, stage: Stage) -> bool:
        return self._current == stage

    def get_all_stages(self) -> List[StageInfo]:
        return [STAGE_DEFINITIONS[s] for s in Stage.ordered()]

    def _set(self, stage: Optional[Stage]) -> None:
        if stage == self._current:
            return
        old = self._current
        self._current = stage
        logger.debug(f"Stage {old.value if old else None} -> {stage.value if stage else None}")
        self._bus.emit(UIEvent.stage_changed(
            old.value if old else None,
            stage.value if stage else None,
        ))

    def open(self, stage: Stage) -> None:
        self._set(stage)

    def close(self) -> None:
        self._set(None)

    def toggle(self, stage: Stage) -> Optional[Stage]:
        """Open the stage, or close everything if it is already open."""
        self._set(None if self._current == stage else stage)
        return self._current

    def go_to_section(self, stage: Stage) -> None:
        """Open the stage and ask the host to scroll its header into view."""
        self._set(stage)
        self._bus.emit(UIEvent.focus_requested(STAGE_DEFINITIONS[stage].header_id, scroll=True))

    def next_stage(self, stage: Optional[Stage] = None) -> Optional[Stage]:
        """Stage after the given one (default: the open one), or None after Review."""
        stage = stage or self._current
        if stage is None:
            return Stage.OVERVIEW
        order = Stage.ordered()
        idx = order.index(stage)
        return order[idx + 1] if idx + 1 < len(order) else None

    def advance(self) -> Optional[Stage]:
        """Follow the "Next" link of the open stage."""
        nxt = self.next_stage()
        if nxt is not None:
            self.go_to_section(nxt)
        return nxt

    def handle_rejected_save(self, draft: "MissionDraft") -> Optional[str]:
        """
        React to a save attempt on an invalid draft.

        With an incomplete overview, opens Overview and focuses the first
        blank required field. Otherwise leaves the open stage alone.

        Returns:
            The focused field id, or None
        """
        target = rules.first_invalid_field(draft)
        if target is None:
            return None
        self._set(Stage.OVERVIEW)
        self._bus.emit(UIEvent.focus_requested(target, scroll=True))
        return target

    def render_ascii(self, badges: Optional["rules.SectionErrors"] = None) -> str:
        """Render the accordion headers as text."""
        lines = []
        for info in self.get_all_stages():
            marker = "\u25bc" if self.is_open(info.stage) else "\u25b6"  # ▼ / ▶
            count = badges.for_stage(info.stage) if badges else 0
            badge = f" ({count})" if count else ""
            lines.append(f"{marker} {info.name}{badge}")
        return "\n".join(lines)
