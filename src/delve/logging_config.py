import logging
import os


def configure_logging(default_level: int = logging.WARNING) -> None:
    """Configure the root logger with the project format.

    Respects DELVE_LOG_LEVEL if set (e.g. "debug", "INFO").
    """
    level_name = os.getenv("DELVE_LOG_LEVEL")
    level = default_level
    if level_name:
        level = getattr(logging, level_name.upper(), default_level)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )
