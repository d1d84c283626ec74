"""Tests for the uvicorn entrypoint."""

import uvicorn

from photo_studio.api import serve


def test_main_runs_asgi_app_with_configured_address(settings, monkeypatch) -> None:
    calls: list[tuple[str, dict[str, object]]] = []
    monkeypatch.setattr(
        uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs))
    )

    serve.main(settings.model_copy(update={"server_host": "0.0.0.0", "server_port": 9000}))

    assert calls == [
        (
            "photo_studio.api.asgi:app",
            {"host": "0.0.0.0", "port": 9000, "reload": False},
        )
    ]
