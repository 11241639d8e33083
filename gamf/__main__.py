"""Run the service with ``python -m gamf``."""

import uvicorn

from gamf.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "gamf.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=15,
    )


if __name__ == "__main__":
    main()
