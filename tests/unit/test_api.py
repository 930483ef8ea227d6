"""
tests/unit/test_api.py - Missions REST API tests
"""

import pytest

# Skip all tests if FastAPI not installed
pytest.importorskip("fastapi")

from fastapi.testclient import TestClient


# =============================================================================
# FIXTURES
# =============================================================================

def _mission(**overrides):
    mission = {
        "id": "mission-1",
        "name": "Supply Run",
        "type": "Cargo Haul",
        "status": "Planning",
        "scheduledDateTime": "2026-11-01T18:00:00+00:00",
        "participants": [
            {"userId": "u1", "userName": "Aria", "shipId": "s-cut", "shipName": "Cutlass Black",
             "crewRequirement": 2, "roles": ["Pilot"]},
        ],
    }
    mission.update(overrides)
    return mission


@pytest.fixture
def store():
    from fleetops.deployment.mission_store import MissionStore
    return MissionStore()


@pytest.fixture
def api(store):
    from fleetops.deployment.api import create_fastapi_app
    return TestClient(create_fastapi_app(store=store))


PATH = "/api/fleet-ops/missions"


# =============================================================================
# TESTS
# =============================================================================

class TestHealth:

    def test_health(self, api):
        from fleetops import __version__
        response = api.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["missions"] == 0


class TestCreateAndFetch:

    def test_create_returns_201_with_stored_id(self, api):
        response = api.post(PATH, json=_mission())
        assert response.status_code == 201
        data = response.json()
        assert data["id"].startswith("FO-")
        assert data["participants"][0]["roles"] == ["Pilot"]

        fetched = api.get(f"{PATH}/{data['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Supply Run"

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"type": "Piracy"},
        {"scheduledDateTime": ""},
    ])
    def test_invalid_create_is_422(self, api, overrides):
        assert api.post(PATH, json=_mission(**overrides)).status_code == 422

    def test_missing_name_is_422(self, api):
        body = _mission()
        del body["name"]
        assert api.post(PATH, json=body).status_code == 422

    def test_unknown_id_is_404(self, api):
        assert api.get(f"{PATH}/FO-404").status_code == 404


class TestList:

    def test_pagination(self, api):
        for day in range(1, 6):
            api.post(PATH, json=_mission(scheduledDateTime=f"2026-11-0{day}T18:00:00+00:00"))
        data = api.get(PATH, params={"page": 2, "pageSize": 2}).json()
        assert data["page"] == 2
        assert data["pageSize"] == 2
        assert data["total"] == 5
        assert data["totalPages"] == 3
        assert [m["scheduledDateTime"][:10] for m in data["items"]] == ["2026-11-03", "2026-11-04"]

    def test_empty_list(self, api):
        data = api.get(PATH).json()
        assert data == {"items": [], "page": 1, "pageSize": 50, "total": 0, "totalPages": 0}

    def test_filters(self, api):
        api.post(PATH, json=_mission(leaderId="u1"))
        api.post(PATH, json=_mission(status="Completed"))
        assert api.get(PATH, params={"leaderId": "u1"}).json()["total"] == 1
        assert api.get(PATH, params={"status": "Completed"}).json()["total"] == 1
        assert api.get(PATH, params={"status": "Archived"}).json()["total"] == 0

    def test_paginate_clamps(self):
        from fleetops.deployment.api import paginate
        data = paginate(list(range(10)), page=0, page_size=500, max_page_size=4)
        assert data["page"] == 1
        assert data["pageSize"] == 4
        assert data["items"] == [0, 1, 2, 3]
        assert paginate([], page=3, page_size=0)["pageSize"] == 1


class TestUpdateAndDelete:

    def test_put_replaces(self, api):
        created = api.post(PATH, json=_mission()).json()
        response = api.put(f"{PATH}/{created['id']}", json=_mission(id=created["id"], location="Lorville"))
        assert response.status_code == 200
        assert response.json()["location"] == "Lorville"
        assert response.json()["createdAt"] == created["createdAt"]

    def test_put_unknown_is_404(self, api):
        assert api.put(f"{PATH}/FO-404", json=_mission()).status_code == 404

    def test_delete_by_query(self, api, store):
        created = api.post(PATH, json=_mission()).json()
        response = api.delete(PATH, params={"id": created["id"]})
        assert response.status_code == 200
        assert response.json() == {"success": True, "id": created["id"]}
        assert len(store) == 0

    def test_delete_requires_id(self, api):
        assert api.delete(PATH).status_code == 400

    def test_delete_by_path(self, api):
        created = api.post(PATH, json=_mission()).json()
        assert api.delete(f"{PATH}/{created['id']}").status_code == 200
        assert api.delete(f"{PATH}/{created['id']}").status_code == 404
