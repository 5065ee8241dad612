"""
Configuration package for the work taxonomy engine.

Contains:
- config: Environment-based settings
- database: Engine/session factories and the declarative Base
- datadog_logger / logging_config: Log shipping and CLI logging setup
"""

from work_taxonomy.settings.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
