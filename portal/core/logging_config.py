import logging

from portal.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Configure root logging once from LOG_LEVEL."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # SQL echo is controlled by the engine, keep the driver quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
