"""
tests/unit/test_bootstrap.py - Application builder and entry point tests
"""

import json
import logging

import pytest


@pytest.fixture
def restore_logging():
    """Undo root handler changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """No config files, no FLEETOPS_ overrides, storage under tmp_path."""
    import os
    for name in list(os.environ):
        if name.startswith("FLEETOPS_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("FLEETOPS_STORAGE_DIR", str(tmp_path / "storage"))
    monkeypatch.setenv("FLEETOPS_USERS_URL", "")
    return tmp_path


def _config(tmp_path):
    from fleetops.bootstrap.config import FleetOpsConfig, StorageConfig
    return FleetOpsConfig(storage=StorageConfig(
        base_dir=str(tmp_path / "storage"),
        missions_file=str(tmp_path / "storage" / "data" / "missions.json"),
        exports_dir=str(tmp_path / "storage" / "exports"),
    ))


class TestLogging:

    def test_setup_logging_adds_handlers(self, restore_logging, tmp_path):
        from fleetops.bootstrap.entrypoints import setup_logging
        log_file = tmp_path / "fleetops.log"
        before = len(restore_logging.handlers)
        setup_logging(level="debug", log_file=str(log_file))
        assert len(restore_logging.handlers) == before + 2
        assert restore_logging.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

        logging.getLogger("fleetops.test").info("composer ready")
        for handler in restore_logging.handlers:
            handler.flush()
        assert "composer ready" in log_file.read_text()

    def test_json_formatter(self):
        from fleetops.bootstrap.entrypoints import JSONFormatter
        record = logging.LogRecord("ui.host", logging.ERROR, __file__, 1, "save %s", ("failed",), None)
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "ERROR"
        assert data["logger"] == "ui.host"
        assert data["message"] == "save failed"
        assert "exception" not in data


class TestFleetOpsApp:

    def test_build_creates_storage(self, tmp_path):
        from fleetops.bootstrap.app import AppState, FleetOpsApp
        app = FleetOpsApp(config=_config(tmp_path)).build()
        assert (tmp_path / "storage" / "data").is_dir()
        assert (tmp_path / "storage" / "exports").is_dir()
        assert len(app.mission_store) == 0
        assert app.context.state == AppState.CONFIGURING

    def test_factories_follow_config(self, tmp_path):
        from fleetops.bootstrap.app import FleetOpsApp
        config = _config(tmp_path)
        config.providers.base_url = "https://ops.example"
        config.providers.users_url = "https://ops.example/api/users"
        config.composer.zero_capacity_unlimited = True
        app = FleetOpsApp(config=config).build()

        client = app.create_client()
        assert client.base_url == "https://ops.example"
        assert client.missions_path == "/api/fleet-ops/missions"
        assert app.create_directory().url == "https://ops.example/api/users"

        ctx = app.create_cli_context()
        try:
            assert ctx.zero_capacity_unlimited
        finally:
            ctx.close()

    @pytest.mark.asyncio
    async def test_lifecycle_hooks(self, tmp_path):
        from fleetops.bootstrap.app import AppState, FleetOpsApp
        calls = []

        async def warm(context):
            calls.append(("start", len(context.mission_store)))

        app = FleetOpsApp(config=_config(tmp_path))
        app.on_startup(warm).on_shutdown(lambda context: calls.append(("stop", context.state.value)))
        await app.start()
        assert app.context.state == AppState.RUNNING
        assert app.context.get_uptime() >= 0
        await app.stop()
        assert calls == [("start", 0), ("stop", "stopping")]
        assert app.context.state == AppState.STOPPED

    @pytest.mark.asyncio
    async def test_failing_startup_hook(self, tmp_path):
        from fleetops.bootstrap.app import AppState, FleetOpsApp

        def broken(context):
            raise RuntimeError("no storage")

        app = FleetOpsApp(config=_config(tmp_path)).on_startup(broken)
        with pytest.raises(RuntimeError):
            await app.start()
        assert app.context.state == AppState.FAILED

    def test_create_app_from_config_file(self, isolated_env, monkeypatch):
        import fleetops.bootstrap.config as config_module
        from fleetops.bootstrap.app import create_app
        monkeypatch.setattr(config_module, "_config", None)
        path = isolated_env / "custom.json"
        path.write_text(json.dumps({"environment": "staging", "composer": {"focus_delay_ms": 0}}))
        app = create_app(str(path))
        assert app.config.environment == "staging"
        assert app.config.composer.focus_delay_ms == 0
        assert (isolated_env / "storage").is_dir()

    def test_create_api_shares_store(self, tmp_path):
        pytest.importorskip("fastapi")
        from fastapi.testclient import TestClient
        from fleetops.bootstrap.app import FleetOpsApp
        app = FleetOpsApp(config=_config(tmp_path)).build()
        app.mission_store.create({"id": "FO-1", "name": "Supply Run"})
        api = TestClient(app.create_api())
        assert api.get("/health").json()["missions"] == 1
        assert api.get("/api/fleet-ops/missions/FO-1").json()["name"] == "Supply Run"


class TestEntryPoints:

    def test_execute_requires_mission(self, isolated_env, restore_logging, capsys):
        from fleetops.bootstrap.entrypoints import cli_main
        assert cli_main(["--log-level", "ERROR", "-e", "status"]) == 1
        assert "No mission open" in capsys.readouterr().out

    def test_execute_json(self, isolated_env, restore_logging, capsys):
        from fleetops.bootstrap.entrypoints import cli_main
        assert cli_main(["--log-level", "ERROR", "--json", "-e", "new 'Supply Run'"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        assert data["data"]["members"] == 0

    def test_script(self, isolated_env, restore_logging, capsys):
        from fleetops.bootstrap.entrypoints import cli_main
        script = isolated_env / "compose.fo"
        out = isolated_env / "out.json"
        script.write_text(f"new 'Supply Run'\nset location Lorville\nexport {out}\n")
        assert cli_main(["--log-level", "ERROR", "-s", str(script)]) == 0
        assert json.loads(out.read_text())["location"] == "Lorville"
