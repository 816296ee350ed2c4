"""Application factory and CLI entry point tests."""

import uvicorn

from delphi_server import app as app_module
from delphi_server.config import ServerSettings


def test_cli_runs_a_single_worker(monkeypatch):
    """Session locks are per process, so the CLI never forks workers."""
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda *args, **kwargs: calls.append(kwargs))
    monkeypatch.setattr(
        app_module, "load_settings", lambda: ServerSettings(port=5055)
    )

    app_module.cli()

    assert calls[0]["workers"] == 1
    assert calls[0]["port"] == 5055


def test_create_app_exposes_swagger_under_api():
    app = app_module.create_app(ServerSettings())
    assert app.docs_url == "/api/swagger"
    assert app.openapi_url == "/api/openapi.json"
