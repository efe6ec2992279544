import uvicorn

from nutri_ai import __main__ as launcher
from nutri_ai import config


def test_main_serves_the_app(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    launcher.main()

    assert calls == [("nutri_ai.main:app", {"host": config.NUTRI_AI_HOST, "port": config.NUTRI_AI_PORT})]
