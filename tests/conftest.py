"""
FleetOps Test Configuration and Fixtures

Sample directory members, a fake directory and a fake persistence client
shared by the unit and integration tests.
"""

import copy
from typing import Any, Dict, List, Optional

import pytest

from fleetops.core.identifiers import IdAllocator, is_draft_mission_id
from fleetops.core.models import Person, Vessel
from fleetops.errors.taxonomy import PersistenceError
from fleetops.ui.events import EventBus, EventType


def _vessel(vessel_id, name, manufacturer, capacity, ship_type=None):
    return Vessel(
        vessel_id=vessel_id,
        name=name,
        type=ship_type or name,
        manufacturer=manufacturer,
        crew_capacity=capacity,
    )


def sample_members() -> List[Person]:
    """Four members; Cato owns nothing, the Hull C has no known capacity."""
    return [
        Person(id="u1", display_name="Aria", owned_vessels=[
            _vessel("s-cut", "Cutlass Black", "Drake Interplanetary", 2),
        ]),
        Person(id="u2", display_name="Bram", owned_vessels=[
            _vessel("s-free", "Freelancer", "MISC", 2),
            _vessel("s-aur", "Aurora MR", "Roberts Space Industries", 1),
        ]),
        Person(id="u3", display_name="Cato"),
        Person(id="u4", display_name="Dee", owned_vessels=[
            _vessel("s-hull", "Hull C", "MISC", None),
        ]),
    ]


class FakeDirectory:
    """Stands in for UserDirectory."""

    def __init__(self, people: Optional[List[Person]] = None, fail: bool = False):
        self._people = people if people is not None else sample_members()
        self.fail = fail
        self.calls = 0

    async def fetch(self) -> List[Person]:
        self.calls += 1
        if self.fail:
            raise RuntimeError("directory offline")
        return copy.deepcopy(self._people)


class FakeMissionClient:
    """
    In-memory MissionClient double.

    Draft ids are replaced on create, like the real service.
    """

    def __init__(self):
        self.missions: Dict[str, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.fail_with: Optional[int] = None
        self._next = 1
        self.closed = False

    def _maybe_fail(self, op: str, mission_id: Optional[str] = None) -> None:
        if self.fail_with is not None:
            raise PersistenceError(
                f"{op} returned {self.fail_with}",
                status_code=self.fail_with,
                mission_id=mission_id,
            )

    async def save_mission(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("save", payload))
        self._maybe_fail("save", payload.get("id"))
        mission = copy.deepcopy(payload)
        if is_draft_mission_id(mission.get("id")):
            mission["id"] = f"FO-{self._next}"
            self._next += 1
        self.missions[mission["id"]] = mission
        return copy.deepcopy(mission)

    async def get_mission(self, mission_id: str) -> Dict[str, Any]:
        self.calls.append(("get", mission_id))
        if mission_id not in self.missions:
            raise PersistenceError("not found", status_code=404, mission_id=mission_id)
        return copy.deepcopy(self.missions[mission_id])

    async def delete_mission(self, mission_id: str) -> None:
        self.calls.append(("delete", mission_id))
        self._maybe_fail("delete", mission_id)
        self.missions.pop(mission_id, None)

    async def list_missions(self, status=None, leader_id=None, page=None, page_size=None):
        self.calls.append(("list", status))
        items = [m for m in self.missions.values() if not status or m.get("status") == status]
        return {"items": copy.deepcopy(items), "page": 1, "pageSize": 50,
                "total": len(items), "totalPages": 1}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def bus():
    """Isolated event bus."""
    return EventBus()


@pytest.fixture
def recorded(bus):
    """Every event emitted on the bus fixture, in order."""
    events = []
    bus.subscribe_all(events.append)
    return events


@pytest.fixture
def allocator():
    return IdAllocator(clock=lambda: 1700000000000, seed=7)


@pytest.fixture
def members():
    return sample_members()


@pytest.fixture
def directory():
    return FakeDirectory()


@pytest.fixture
def failing_directory():
    return FakeDirectory(fail=True)


@pytest.fixture
def client():
    return FakeMissionClient()


@pytest.fixture
def stored_mission():
    """A persisted mission: two crew on the Cutlass, one ground support, one unassigned."""
    return {
        "id": "FO-100",
        "name": "Supply Run",
        "type": "Cargo Haul",
        "status": "Planning",
        "scheduledDateTime": "2026-11-01T18:00:00+00:00",
        "location": "Port Olisar",
        "leaderId": "u1",
        "leaderName": "Aria",
        "diagramLinks": [],
        "images": [],
        "participants": [
            {"userId": "u1", "userName": "Aria", "shipId": "s-cut", "shipName": "Cutlass Black",
             "shipType": "Cutlass Black", "manufacturer": "Drake Interplanetary",
             "crewRequirement": 2, "roles": ["Pilot"]},
            {"userId": "u2", "userName": "Bram", "shipId": "s-cut", "shipName": "Cutlass Black",
             "shipType": "Cutlass Black", "crewRequirement": 2, "roles": ["Gunner"]},
            {"userId": "u3", "userName": "Cato", "shipName": "Ground Support",
             "shipType": "Ground Support", "isGroundSupport": True, "roles": ["Support"]},
            {"userId": "u4", "userName": "Dee", "roles": []},
        ],
    }


@pytest.fixture
def saved_events(bus):
    """MISSION_SAVED events on the bus fixture."""
    events = []
    bus.subscribe(EventType.MISSION_SAVED, events.append)
    return events
