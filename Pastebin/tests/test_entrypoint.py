from Pastebin.api import __main__ as entrypoint
from Pastebin.core.config import Settings


def test_main_serves_with_configured_address(monkeypatch):
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(entrypoint, "get_settings", lambda: Settings(HOST="127.0.0.1", PORT=9100, LOG_LEVEL="DEBUG"))
    monkeypatch.setattr(entrypoint.uvicorn, "run", fake_run)

    entrypoint.main()

    assert calls["app"] == "Pastebin.api.main:app"
    assert calls["host"] == "127.0.0.1"
    assert calls["port"] == 9100
    assert calls["log_level"] == "debug"
