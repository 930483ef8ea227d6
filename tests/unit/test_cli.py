"""
tests/unit/test_cli.py - CLI command tests

Drives the REPL line by line against the fake directory and mission client.
"""

import json

import pytest


@pytest.fixture
def repl(client, directory, bus):
    from fleetops.cli.core import CLIContext
    from fleetops.cli.repl import REPL
    ctx = CLIContext(client=client, directory=directory, bus=bus)
    yield REPL(ctx)
    ctx.close()


def _run(repl, *lines):
    results = [repl.execute_line(line) for line in lines]
    for line, result in zip(lines, results):
        assert result.success, f"{line}: {result.error}"
    return results[-1]


class TestRegistry:

    def test_aliases(self):
        from fleetops.cli.commands import DEFAULT_COMMANDS
        from fleetops.cli.core import CommandRegistry
        registry = CommandRegistry()
        for command_cls in DEFAULT_COMMANDS:
            registry.register(command_cls())
        assert registry.get("commit").name == "add-picked"
        assert registry.get("validate").name == "status"
        assert registry.get("nope") is None

    def test_format_output(self):
        from fleetops.cli.core import CommandResult, OutputFormat, format_output
        ok = CommandResult(success=True, message="Done", data={"id": "FO-1"})
        assert format_output(ok, OutputFormat.TEXT) == "Done\n  id: FO-1"
        assert json.loads(format_output(ok, OutputFormat.JSON))["data"] == {"id": "FO-1"}
        failed = CommandResult(success=False, error="nope")
        assert format_output(failed, OutputFormat.TEXT) == "Error: nope"
        assert format_output(failed, OutputFormat.MINIMAL) == "nope"
        table = CommandResult(data=[{"id": "u1", "name": "Aria"}])
        assert format_output(table, OutputFormat.TABLE).splitlines()[0] == "id | name"


class TestSession:

    def test_requires_open_mission(self, repl):
        result = repl.execute_line("status")
        assert not result.success
        assert result.error == "No mission open. Use 'new' or 'load'."

    def test_unknown_command_and_bad_args(self, repl):
        assert "Unknown command" in repl.execute_line("launch").error
        assert repl.execute_line("assign").error == "Invalid arguments for assign"
        assert "Parse error" in repl.execute_line('set name "unterminated').error

    def test_new_mission_loads_members(self, repl):
        result = _run(repl, 'new "Supply Run" --type Exploration')
        assert result.data["members"] == 4
        assert repl.ctx.composer.draft.overview.type == "Exploration"
        assert repl.ctx.history == ['new "Supply Run" --type Exploration']

    def test_compose_and_save(self, repl, client):
        _run(
            repl,
            'new "Supply Run"',
            "add-person u1",
            "add-person u2",
            "add-person u3",
            "pick s-cut",
            "add-picked",
            "assign u1 s-cut --role Pilot",
            "assign u2 s-cut",
        )
        over = _run(repl, "assign u3 s-cut")
        assert "(3/2) - over capacity" in over.message

        blocked = repl.execute_line("save")
        assert not blocked.success
        assert blocked.error == "Cannot save: Cutlass Black is over capacity (3/2)"
        assert client.calls == []

        saved = _run(repl, "ground u3 --role Medic", "save")
        assert saved.data["id"] == "FO-1"
        participants = client.missions["FO-1"]["participants"]
        assert [p["roles"] for p in participants] == [["Pilot"], ["Crew"], ["Medic"]]

    def test_status(self, repl):
        _run(repl, "new")
        result = _run(repl, "validate")
        assert result.message.startswith("Can save: no")
        assert "[Overview] Mission name is required" in result.message
        assert result.data["errors"]["overview"] == 1
        assert result.data["issues"][0]["code"] == 1002

    def test_save_failure_reported(self, repl, client):
        client.fail_with = 503
        _run(repl, 'new "Supply Run"')
        result = repl.execute_line("save")
        assert not result.success
        assert result.error.startswith("Save failed: ")
        assert repl.ctx.host.header().status == "Save failed"

    def test_save_without_client(self, directory, bus):
        from fleetops.cli.core import CLIContext
        from fleetops.cli.repl import REPL
        ctx = CLIContext(directory=directory, bus=bus)
        try:
            repl = REPL(ctx)
            _run(repl, 'new "Supply Run"')
            assert repl.execute_line("save").error == "No persistence API configured"
        finally:
            ctx.close()

    def test_pick_rejects_unknown_and_added(self, repl):
        _run(repl, "new", "pick s-cut", "add-picked")
        result = repl.execute_line("pick s-cut s-free ghost")
        assert not result.success
        assert result.error == "Not selectable: s-cut, ghost"
        assert result.data["pending"] == ["s-free"]

    def test_filter_and_ships(self, repl):
        _run(repl, "new")
        result = _run(repl, "filter -m MISC")
        assert result.message == "2 of 4 vessels match"
        ships = _run(repl, "ships")
        assert [row["id"] for row in ships.data] == ["s-free", "s-hull"]
        _run(repl, "filter --clear", "pick s-hull", "commit")
        selected = _run(repl, "ships --selected")
        assert selected.data == [
            {"id": "s-hull", "name": "Hull C", "type": "Hull C", "crew": "0/\u221e", "over": False},  # ∞
        ]

    def test_roster_and_removal(self, repl):
        _run(repl, "new", "add-person u1", "add-person u2", "pick s-cut", "commit", "assign u1 s-cut")
        roster = _run(repl, "people --roster")
        assert roster.data[0] == {"id": "u1", "name": "Aria", "seat": "Cutlass Black", "role": "Crew"}
        _run(repl, "remove-ship s-cut")
        assert _run(repl, "people --roster").data[0]["seat"] == ""
        _run(repl, "remove-person u2")
        assert not repl.execute_line("unassign u1").success

    def test_set_fields(self, repl):
        _run(repl, "new", "set location Lorville", "set diagramLinks 'https://a, https://b'")
        overview = repl.ctx.composer.draft.overview
        assert overview.location == "Lorville"
        assert overview.diagram_links == ["https://a", "https://b"]
        assert repl.execute_line("set cargo x").error == "Unknown mission field: cargo"

    def test_stage_navigation(self, repl):
        _run(repl, "new")
        assert _run(repl, "stage next").data == {"open": "personnel"}
        assert _run(repl, "stage review --toggle").data == {"open": "review"}
        assert _run(repl, "stage review --toggle").data == {"open": None}
        assert not repl.execute_line("stage cargo").success

    def test_load_by_id_and_file(self, repl, client, stored_mission, tmp_path):
        client.missions["FO-100"] = stored_mission
        result = _run(repl, "load FO-100")
        assert result.data == {"id": "FO-100", "people": 4, "vessels": 1}

        path = tmp_path / "mission.json"
        path.write_text(json.dumps(stored_mission))
        _run(repl, f"load {path}")
        assert repl.ctx.mission_path == str(path)

        missing = repl.execute_line("load FO-404")
        assert not missing.success

    def test_export(self, repl, tmp_path):
        out = tmp_path / "exports" / "mission.json"
        _run(repl, 'new "Supply Run"', "add-person u1", f"export {out}")
        payload = json.loads(out.read_text())
        assert payload["name"] == "Supply Run"
        assert payload["participants"] == [
            {"userId": "u1", "userName": "Aria", "isGroundSupport": False, "roles": []},
        ]

    def test_show(self, repl):
        _run(repl, 'new "Supply Run"')
        assert _run(repl, "show").data.startswith("New Mission  <Planning>  [Save]")
        assert _run(repl, "show --html").data.startswith('<div class="modal">')

    def test_batch_stops_on_failure(self, repl, tmp_path):
        script = tmp_path / "compose.fo"
        script.write_text("# comment\nnew Raid\nadd-person ghost\nadd-person u1\n")
        results = repl.execute_file(str(script))
        assert [r.success for r in results] == [True, False]


class TestContext:

    def test_close_closes_client(self, client, directory, bus):
        from fleetops.cli.core import CLIContext
        ctx = CLIContext(client=client, directory=directory, bus=bus)
        ctx.open_mission(None)
        host = ctx.host
        ctx.close()
        assert client.closed
        assert ctx.host is None
        assert not host.is_open
