"""
ui/board.py - Mission board

List view over stored missions. Stays current without refetching by
listening for saves and deletes made in any composer host.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

from .components import DataTable
from .events import EventBus, EventType, UIEvent, event_bus as default_bus

logger = logging.getLogger("ui.board")


class MissionBoard:
    """Mission list that prunes on MISSION_DELETED and upserts on MISSION_SAVED."""

    def __init__(self, client: Any, bus: Optional[EventBus] = None):
        self.client = client
        self.bus = bus or default_bus
        self.missions: List[Dict[str, Any]] = []
        self.status_filter: Optional[str] = None
        self._attached = False

    def attach(self) -> "MissionBoard":
        if not self._attached:
            self.bus.subscribe(EventType.MISSION_DELETED, self._on_deleted)
            self.bus.subscribe(EventType.MISSION_SAVED, self._on_saved)
            self._attached = True
        return self

    def detach(self) -> None:
        if self._attached:
            self.bus.unsubscribe(EventType.MISSION_DELETED, self._on_deleted)
            self.bus.unsubscribe(EventType.MISSION_SAVED, self._on_saved)
            self._attached = False

    async def refresh(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        self.status_filter = status
        page = await self.client.list_missions(status=status)
        self.missions = list(page.get("items") or [])
        logger.debug(f"Board refreshed: {len(self.missions)} missions")
        return self.missions

    def find(self, mission_id: str) -> Optional[Dict[str, Any]]:
        for mission in self.missions:
            if mission.get("id") == mission_id:
                return mission
        return None

    def _on_deleted(self, event: UIEvent) -> None:
        mission_id = event.payload.get("id")
        before = len(self.missions)
        self.missions = [m for m in self.missions if m.get("id") != mission_id]
        if len(self.missions) != before:
            logger.debug(f"Board pruned mission {mission_id}")

    def _on_saved(self, event: UIEvent) -> None:
        mission = event.payload.get("mission") or {}
        mission_id = mission.get("id")
        if not mission_id:
            return
        if self.status_filter and mission.get("status") != self.status_filter:
            self.missions = [m for m in self.missions if m.get("id") != mission_id]
            return
        for i, existing in enumerate(self.missions):
            if existing.get("id") == mission_id:
                self.missions[i] = mission
                return
        self.missions.append(mission)

    def as_table(self) -> DataTable:
        rows = [
            {
                "id": m.get("id", ""),
                "name": m.get("name", ""),
                "type": m.get("type", ""),
                "status": m.get("status", ""),
                "scheduled": m.get("scheduledDateTime", ""),
                "participants": len(m.get("participants") or []),
            }
            for m in self.missions
        ]
        return DataTable(
            component_id="mission-board",
            columns=["id", "name", "type", "status", "scheduled", "participants"],
            rows=rows,
            empty_text="No missions",
        )

    def render_ascii(self) -> str:
        return self.as_table().render_ascii()
