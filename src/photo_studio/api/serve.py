"""Command-line entrypoint that runs the API under uvicorn."""

import uvicorn

from photo_studio.config import Settings


def main(settings: Settings | None = None) -> None:
    """Serve the ASGI app on the configured host and port."""
    resolved_settings = settings or Settings()
    uvicorn.run(
        "photo_studio.api.asgi:app",
        host=resolved_settings.server_host,
        port=resolved_settings.server_port,
        reload=resolved_settings.environment == "local",
    )


if __name__ == "__main__":
    main()
