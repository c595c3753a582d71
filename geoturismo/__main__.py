"""Runs the API with uvicorn: `python -m geoturismo`."""

import uvicorn

from geoturismo.config import settings


def main() -> None:
    uvicorn.run(
        "geoturismo.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
