"""Command-line entrypoint that serves the API with uvicorn."""

import uvicorn

from exercise_tracker.api.app import create_app
from exercise_tracker.config import Settings
from exercise_tracker.containers import build_container


def main() -> None:
    """Run the API server on the configured host and port."""
    settings = Settings()
    app = create_app(build_container(settings))
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
