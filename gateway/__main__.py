"""Process entry point: ``python -m gateway`` or the ``blog-gateway`` script."""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from gateway.config import get_settings
from gateway.logging_config import configure_logging

logger = logging.getLogger("gateway")


def run() -> None:
    """Validate configuration, then serve until interrupted.

    Exits with status 1 when required configuration is missing or invalid.
    """
    configure_logging()
    try:
        settings = get_settings()
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"]) or "settings"
            logger.critical("Invalid configuration %s: %s", field.upper(), err["msg"])
        sys.exit(1)

    configure_logging(settings.log_level)

    from gateway.main import app

    # uvicorn exits non-zero when the lifespan startup fails
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
