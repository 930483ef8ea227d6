from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from fleetops.core.identifiers import is_draft_mission_id

logger = logging.getLogger("deployment.mission_store")


class MissionNotFound(Exception):
    """Raised when a requested mission is not in the store."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_stored_id() -> str:
    return f"FO-{datetime.now().strftime('%Y%m%d')}-{uuid.uuid4().hex[:8].upper()}"


class MissionStore:
    """
    Missions kept in a single JSON file, keyed by id.

    Every write rewrites the whole file. Suitable for the reference service
    and tests, not for concurrent writers across processes.
    """

    def __init__(self, path: Optional[str] = None):
        self._path = Path(path) if path else None
        self._lock = threading.Lock()
        self._missions: Dict[str, Dict[str, Any]] = {}
        self._load()

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def _load(self) -> None:
        if not self._path or not self._path.exists():
            return
        try:
            with open(self._path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read mission store {self._path}: {e}")
            raise
        items = data.get("missions", []) if isinstance(data, dict) else data
        self._missions = {m["id"]: m for m in items if m.get("id")}
        logger.info(f"Loaded {len(self._missions)} missions from {self._path}")

    def _commit(self, missions: Dict[str, Dict[str, Any]]) -> None:
        """Write missions to disk, then make them current. A failed write changes nothing."""
        if self._path:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            with open(tmp, "w") as f:
                json.dump({"missions": list(missions.values())}, f, indent=2)
            tmp.replace(self._path)
        self._missions = missions

    def list(self, status: Optional[str] = None, leader_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Missions matching the filters, soonest scheduled first."""
        items = list(self._missions.values())
        if status:
            items = [m for m in items if m.get("status") == status]
        if leader_id:
            items = [m for m in items if m.get("leaderId") == leader_id]
        return sorted(items, key=lambda m: (m.get("scheduledDateTime") or "", m["id"]))

    def get(self, mission_id: str) -> Dict[str, Any]:
        """
        Raises:
            MissionNotFound: if no mission has this id.
        """
        try:
            return self._missions[mission_id]
        except KeyError:
            raise MissionNotFound(f"Mission {mission_id} not found.") from None

    def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Store a new mission. Draft or missing ids are replaced by a fresh id."""
        with self._lock:
            mission = dict(record)
            if is_draft_mission_id(mission.get("id")) or mission["id"] in self._missions:
                mission["id"] = new_stored_id()
            stamp = _now()
            mission["createdAt"] = stamp
            mission["updatedAt"] = stamp
            missions = dict(self._missions)
            missions[mission["id"]] = mission
            self._commit(missions)
        logger.info(f"Mission created: {mission['id']}")
        return mission

    def update(self, mission_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Replace a stored mission, keeping its id and creation stamp."""
        with self._lock:
            existing = self.get(mission_id)
            mission = dict(record)
            mission["id"] = mission_id
            mission["createdAt"] = existing.get("createdAt") or _now()
            mission["updatedAt"] = _now()
            missions = dict(self._missions)
            missions[mission_id] = mission
            self._commit(missions)
        logger.info(f"Mission updated: {mission_id}")
        return mission

    def delete(self, mission_id: str) -> None:
        with self._lock:
            if mission_id not in self._missions:
                raise MissionNotFound(f"Mission {mission_id} not found.")
            missions = dict(self._missions)
            del missions[mission_id]
            self._commit(missions)
        logger.info(f"Mission deleted: {mission_id}")

    def __len__(self) -> int:
        return len(self._missions)
