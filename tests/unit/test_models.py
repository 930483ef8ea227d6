"""
tests/unit/test_models.py - Mission dataclass and identifier tests
"""

from datetime import datetime, timezone

import pytest


class TestIdAllocator:
    """Synthetic id allocation."""

    def test_vessel_ids_are_unique_within_one_millisecond(self):
        from fleetops.core.identifiers import IdAllocator
        allocator = IdAllocator(clock=lambda: 1700000000000)
        ids = {allocator.vessel_id() for _ in range(200)}
        assert len(ids) == 200
        assert all(i.startswith("ship-1700000000000-") for i in ids)

    def test_mission_id_is_draft(self):
        from fleetops.core.identifiers import IdAllocator, is_draft_mission_id
        allocator = IdAllocator(clock=lambda: 42)
        assert allocator.mission_id() == "mission-42"
        assert is_draft_mission_id(allocator.mission_id())

    def test_is_draft_mission_id(self):
        from fleetops.core.identifiers import is_draft_mission_id
        assert is_draft_mission_id(None)
        assert is_draft_mission_id("")
        assert is_draft_mission_id("mission-1")
        assert not is_draft_mission_id("FO-100")


class TestVessel:
    """Vessel wire shape."""

    def test_from_dict_reads_wire_keys(self):
        from fleetops.core.models import Vessel
        vessel = Vessel.from_dict({
            "shipId": "s1",
            "name": "Cutlass Black",
            "type": "Cutlass Black",
            "manufacturer": "Drake Interplanetary",
            "crewRequirement": "2",
            "role": "Light Freight, Interdiction",
            "speedSCM": 215,
        })
        assert vessel.vessel_id == "s1"
        assert vessel.crew_capacity == 2
        assert vessel.role_tags == ["Light Freight", "Interdiction"]
        assert vessel.speed_scm == 215.0

    def test_unknown_capacity_is_none(self):
        from fleetops.core.models import Vessel
        assert Vessel.from_dict({"name": "X", "crewRequirement": "lots"}).crew_capacity is None
        assert Vessel.from_dict({"name": "X"}).crew_capacity is None

    def test_to_dict_drops_unset_fields(self):
        from fleetops.core.models import Vessel
        data = Vessel(vessel_id="s1", name="Freelancer", crew_capacity=None).to_dict()
        assert data["shipId"] == "s1"
        assert "crewRequirement" not in data
        assert "ownerId" not in data

    def test_selected_vessel_copies_and_overrides(self):
        from fleetops.core.models import SelectedVessel, Vessel
        base = Vessel(vessel_id="s1", name="Freelancer", role_tags=["Freight"])
        selected = SelectedVessel.from_vessel(base, vessel_id="s2", owner_id="u1", owner_name="Aria")
        assert selected.vessel_id == "s2"
        assert selected.owner_name == "Aria"
        selected.role_tags.append("Other")
        assert base.role_tags == ["Freight"]


class TestPerson:

    def test_from_dict_uses_handle(self):
        from fleetops.core.models import Person
        person = Person.from_dict({"id": 7, "aydoHandle": "Aria", "ships": [{"name": "Aurora MR"}]})
        assert person.id == "7"
        assert person.display_name == "Aria"
        assert person.owned_vessels[0].name == "Aurora MR"


class TestParticipant:

    def test_to_dict_omits_missing_ship(self):
        from fleetops.core.models import Participant
        data = Participant(user_id="u1", user_name="Aria").to_dict()
        assert data == {"userId": "u1", "userName": "Aria", "isGroundSupport": False, "roles": []}

    def test_from_dict_accepts_role_string(self):
        from fleetops.core.models import Participant
        p = Participant.from_dict({"userId": "u1", "userName": "Aria", "roles": "Pilot"})
        assert p.roles == ["Pilot"]


class TestMissionDraft:
    """Draft creation and hydration."""

    def test_new_draft_defaults(self, allocator):
        from fleetops.core.models import MissionDraft
        now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        draft = MissionDraft.new(now=now, allocator=allocator)
        assert draft.overview.id == "mission-1700000000000"
        assert draft.overview.type == "Cargo Haul"
        assert draft.overview.status == "Planning"
        assert draft.overview.scheduled_date_time == now.isoformat()
        assert draft.overview.name == ""
        assert not draft.persisted
        assert not draft.dirty

    def test_from_mission_rebuilds_rosters(self, stored_mission):
        from fleetops.core.models import MissionDraft
        draft = MissionDraft.from_mission(stored_mission)

        assert draft.persisted
        assert draft.overview.id == "FO-100"
        assert draft.overview.scheduled_date_time == "2026-11-01T18:00:00+00:00"
        assert [p.id for p in draft.people] == ["u1", "u2", "u3", "u4"]
        assert [v.vessel_id for v in draft.vessels] == ["s-cut"]

        cutlass = draft.find_vessel("s-cut")
        assert cutlass.crew_capacity == 2
        assert cutlass.owner_id == "u1"
        assert cutlass.manufacturer == "Drake Interplanetary"

    def test_from_mission_assignments(self, stored_mission):
        from fleetops.core.models import MissionDraft
        draft = MissionDraft.from_mission(stored_mission)

        assert draft.assignment_for("u1").role == "Pilot"
        assert draft.assignment_for("u2").vessel_id == "s-cut"
        ground = draft.assignment_for("u3")
        assert ground.is_ground_support
        assert ground.vessel_id == ""
        assert ground.vessel_name == "Ground Support"
        assert draft.assignment_for("u4") is None

    def test_from_mission_first_vessel_occurrence_wins(self, stored_mission):
        from fleetops.core.models import MissionDraft
        stored_mission["participants"][1]["shipName"] = "Renamed"
        draft = MissionDraft.from_mission(stored_mission)
        assert draft.find_vessel("s-cut").name == "Cutlass Black"

    def test_from_mission_roles_without_rostered_ship_stay_unassigned(self, stored_mission):
        from fleetops.core import rules
        from fleetops.core.models import MissionDraft
        participants = stored_mission["participants"]
        participants[3]["roles"] = ["Pilot"]
        participants.append({"userId": "u5", "userName": "Eve", "shipId": "s-ghost", "roles": ["Gunner"]})
        draft = MissionDraft.from_mission(stored_mission)

        assert draft.assignment_for("u4") is None
        assert draft.assignment_for("u5") is None
        assert not draft.has_vessel("s-ghost")
        by_user = {p.user_id: p for p in rules.serialize_participants(draft)}
        assert by_user["u5"].ship_id is None
        assert by_user["u5"].roles == []

    def test_from_mission_crew_on_ship_named_later(self):
        from fleetops.core.models import MissionDraft
        draft = MissionDraft.from_mission({"id": "FO-2", "name": "Escort", "participants": [
            {"userId": "u2", "userName": "Bram", "shipId": "s-cut", "roles": ["Gunner"]},
            {"userId": "u1", "userName": "Aria", "shipId": "s-cut", "shipName": "Cutlass Black",
             "crewRequirement": 2, "roles": ["Pilot"]},
        ]})
        gunner = draft.assignment_for("u2")
        assert gunner.vessel_id == "s-cut"
        assert gunner.vessel_name == "Cutlass Black"
        assert gunner.crew_capacity == 2

    def test_from_mission_without_participants(self):
        from fleetops.core.models import MissionDraft
        draft = MissionDraft.from_mission({"id": "FO-1", "name": "Empty"})
        assert draft.people == []
        assert draft.vessels == []
        assert draft.overview.type == "Cargo Haul"

    def test_copy_is_deep(self, stored_mission):
        from fleetops.core.models import MissionDraft
        draft = MissionDraft.from_mission(stored_mission)
        clone = draft.copy()
        clone.people.pop()
        clone.overview.name = "Changed"
        assert len(draft.people) == 4
        assert draft.overview.name == "Supply Run"

    def test_resolve_field(self):
        from fleetops.core.models import MissionOverview
        assert MissionOverview.resolve_field("scheduledDateTime") == "scheduled_date_time"
        assert MissionOverview.resolve_field("brief_summary") == "brief_summary"
        assert MissionOverview.resolve_field("nope") is None
