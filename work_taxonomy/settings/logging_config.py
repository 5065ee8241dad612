import logging
from typing import Optional

from work_taxonomy.settings.config import get_settings
from work_taxonomy.settings.datadog_logger import DATADOG_API_KEY, DatadogLogger


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for CLI runs.

    Console output always; Datadog shipping only when DATADOG_API_KEY is set.
    """
    settings = get_settings()
    handlers = [logging.StreamHandler()]
    if DATADOG_API_KEY:
        handlers.append(DatadogLogger(service=settings.datadog_service, env=settings.environment))

    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=settings.log_format,
        handlers=handlers,
        force=True,
    )
