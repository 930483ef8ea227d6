"""
tests/unit/test_rules.py - Crew assignment rule tests
"""

import pytest


def _ready_store(allocator, members):
    """Supply Run with the Cutlass and Aria, Bram, Cato in the roster."""
    from fleetops.core.selection_store import SelectionStore
    store = SelectionStore(allocator=allocator)
    store.update_overview_field("name", "Supply Run")
    store.update_overview_field("type", "Cargo Haul")
    store.update_overview_field("scheduledDateTime", "2026-11-01T18:00:00+00:00")
    for person in members[:3]:
        store.add_person(person)
    store.add_vessel(members[0].owned_vessels[0])
    return store


class TestSaveVerdict:

    def test_full_crew_then_over_capacity(self, allocator, members):
        from fleetops.core import rules
        store = _ready_store(allocator, members)
        store.assign_crew("u1", "s-cut", "Pilot")
        store.assign_crew("u2", "s-cut", "Gunner")
        assert rules.can_save(store.draft)

        store.assign_crew("u3", "s-cut", "Engineer")
        assert not rules.vessels_valid(store.draft)
        assert not rules.can_save(store.draft)

    def test_new_mission_with_valid_vessels_needs_name(self, allocator, members):
        from fleetops.core import rules
        from fleetops.core.selection_store import SelectionStore
        store = SelectionStore(allocator=allocator)
        store.add_person(members[0])
        store.add_vessel(members[0].owned_vessels[0])
        store.assign_crew("u1", "s-cut", "Pilot")

        assert rules.vessels_valid(store.draft)
        assert not rules.can_save(store.draft)
        assert rules.first_invalid_field(store.draft) == rules.FIELD_MISSION_NAME

    @pytest.mark.parametrize("field_name,target", [
        ("name", "mission-name"),
        ("type", "mission-type"),
        ("scheduledDateTime", "mission-datetime"),
    ])
    def test_each_required_field_blocks_save(self, allocator, members, field_name, target):
        from fleetops.core import rules
        store = _ready_store(allocator, members)
        store.update_overview_field(field_name, "   ")
        assert not rules.can_save(store.draft)
        assert rules.first_invalid_field(store.draft) == target

    def test_first_invalid_field_follows_form_order(self, allocator, members):
        from fleetops.core import rules
        store = _ready_store(allocator, members)
        store.update_overview_field("scheduledDateTime", "")
        store.update_overview_field("type", "")
        assert rules.first_invalid_field(store.draft) == "mission-type"


class TestCapacity:

    def test_unknown_capacity_is_unlimited(self, allocator, members):
        from fleetops.core import rules
        store = _ready_store(allocator, members)
        store.add_vessel(members[3].owned_vessels[0])
        for pid in ("u1", "u2", "u3"):
            store.assign_crew(pid, "s-hull")
        occ = rules.occupancy(store.draft, "s-hull")
        assert occ.count == 3
        assert not occ.is_over
        assert occ.label == "3/\u221e"  # ∞

    def test_zero_capacity(self, allocator, members):
        from fleetops.core import rules
        from fleetops.core.models import Vessel
        store = _ready_store(allocator, members)
        store.add_vessel(Vessel(vessel_id="s-zero", name="Legacy", crew_capacity=0))
        store.assign_crew("u1", "s-zero", "Pilot")
        assert not rules.vessels_valid(store.draft)
        assert rules.vessels_valid(store.draft, zero_capacity_unlimited=True)

    def test_ground_support_does_not_count(self, allocator, members):
        from fleetops.core import rules
        from fleetops.core.models import GROUND_SUPPORT
        store = _ready_store(allocator, members)
        store.assign_crew("u1", "s-cut", "Pilot")
        store.assign_crew("u2", "s-cut", "Gunner")
        store.assign_crew("u3", GROUND_SUPPORT)
        assert rules.occupancy(store.draft, "s-cut").count == 2
        assert rules.can_save(store.draft)


class TestBadgesAndIssues:

    def test_error_counts(self, allocator, members):
        from fleetops.core import rules
        from fleetops.core.enums import Stage
        store = _ready_store(allocator, members)
        store.update_overview_field("name", "")
        for pid in ("u1", "u2", "u3"):
            store.assign_crew(pid, "s-cut")
        errors = rules.error_counts(store.draft)
        assert errors.to_dict() == {"overview": 1, "personnel": 0, "vessels": 1, "review": 2}
        assert errors.for_stage(Stage.REVIEW) == 2
        assert errors.for_stage(Stage.PERSONNEL) == 0

    def test_validation_issues_in_fix_order(self, allocator, members):
        from fleetops.core import rules
        from fleetops.core.enums import Stage
        store = _ready_store(allocator, members)
        store.update_overview_field("name", "")
        for pid in ("u1", "u2", "u3"):
            store.assign_crew(pid, "s-cut")
        issues = rules.validation_issues(store.draft)
        assert [i.code for i in issues] == ["missing_field", "over_capacity"]
        assert issues[0].stage == Stage.OVERVIEW
        assert issues[1].target == "s-cut"
        assert "3/2" in issues[1].message

    def test_clean_draft_has_no_issues(self, allocator, members):
        from fleetops.core import rules
        store = _ready_store(allocator, members)
        assert rules.validation_issues(store.draft) == []
        assert rules.error_counts(store.draft).review == 0


class TestSerialization:

    def test_one_participant_per_person(self, allocator, members):
        from fleetops.core import rules
        from fleetops.core.models import GROUND_SUPPORT
        store = _ready_store(allocator, members)
        store.add_person(members[3])
        store.assign_crew("u1", "s-cut", "Pilot")
        store.assign_crew("u3", GROUND_SUPPORT, "Medic")

        participants = rules.serialize_participants(store.draft)
        assert [p.user_id for p in participants] == ["u1", "u2", "u3", "u4"]

        pilot, idle, medic, _ = participants
        assert pilot.ship_id == "s-cut"
        assert pilot.crew_requirement == 2
        assert pilot.roles == ["Pilot"]
        assert idle.ship_id is None
        assert idle.roles == []
        assert medic.is_ground_support
        assert medic.ship_id is None
        assert medic.ship_name == "Ground Support"

    def test_build_save_payload(self, allocator, members):
        from fleetops.core import rules
        store = _ready_store(allocator, members)
        store.update_overview_field("diagramLinks", ["https://maps/1", "", "  "])
        payload = rules.build_save_payload(store.draft)
        assert payload["name"] == "Supply Run"
        assert payload["id"] == "mission-1700000000000"
        assert payload["diagramLinks"] == ["https://maps/1"]
        assert len(payload["participants"]) == 3

    def test_summary(self, allocator, members):
        from fleetops.core import rules
        from fleetops.core.models import GROUND_SUPPORT
        store = _ready_store(allocator, members)
        store.add_vessel(members[1].owned_vessels[0])
        store.assign_crew("u1", "s-cut", "Pilot")
        store.assign_crew("u2", GROUND_SUPPORT)
        summary = rules.mission_summary(store.draft)
        assert summary.to_dict() == {
            "participants": 3,
            "vessels": 2,
            "crewed_vessels": 1,
            "ground_support": 1,
            "unassigned": 1,
            "over_capacity": [],
        }
        assert [p.id for p in rules.unassigned_people(store.draft)] == ["u3"]

    def test_issue_as_structured_error(self, allocator, members):
        from fleetops.core import rules
        from fleetops.errors import ErrorCode
        store = _ready_store(allocator, members)
        for pid in ("u1", "u2", "u3"):
            store.assign_crew(pid, "s-cut")
        error = rules.validation_issues(store.draft)[0].to_error("FO-1")
        assert error.code == ErrorCode.VAL_OVER_CAPACITY
        assert error.detail == "s-cut"
        assert error.mission_id == "FO-1"
