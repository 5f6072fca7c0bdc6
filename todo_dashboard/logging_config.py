import logging
import os

NOISY_LOGGERS = ("urllib3", "requests", "watchdog", "asyncio")


def configure_logging(level_name=None):
    level_name = (level_name or os.getenv("DASHBOARD_LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logging.getLogger("todo_dashboard")
