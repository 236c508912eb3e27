"""Entry point for running the API server."""

import uvicorn

from wp_php_settings.core.config import get_settings


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "wp_php_settings.api.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
