import logging
import os
import json
import requests
from typing import Optional

# =========================
# Datadog Configuration
# =========================

DATADOG_API_KEY = os.getenv("DATADOG_API_KEY")

# US1 site (correct for https://app.datadoghq.com)
DATADOG_LOG_URL = "https://http-intake.logs.datadoghq.com/v1/input"

# ONLY exclude very noisy internals
EXCLUDED_LOGGERS = {
    "sqlalchemy.engine",
    "urllib3",
}

# Structured fields attached via extra= by the reconciliation services
STRUCTURED_PREFIX = "reconciliation."

# Optional allowlist (comma-separated logger prefixes)
# Example: DD_INCLUDE_LOGGERS=work_taxonomy.services
INCLUDE_LOGGERS = (
    os.getenv("DD_INCLUDE_LOGGERS").split(",")
    if os.getenv("DD_INCLUDE_LOGGERS")
    else None
)

# =========================
# Datadog Logging Handler
# =========================

class DatadogLogger(logging.Handler):
    def __init__(self, service: str, env: Optional[str] = None):
        super().__init__()
        self.service = service
        self.env = env or os.getenv("ENV", "qa")
        self.setFormatter(logging.Formatter("%(message)s"))

    def should_log(self, record: logging.LogRecord) -> bool:
        """
        Decide whether to send this log to Datadog.
        """
        logger_name = record.name

        # Allowlist mode (if configured)
        if INCLUDE_LOGGERS:
            return any(
                logger_name.startswith(prefix.strip())
                for prefix in INCLUDE_LOGGERS
                if prefix.strip()
            )

        for excluded in EXCLUDED_LOGGERS:
            if logger_name.startswith(excluded):
                return False
        return True

    def structured_fields(self, record: logging.LogRecord) -> dict:
        """Collect reconciliation.* attributes set through extra=."""
        return {
            attr: value
            for attr, value in vars(record).items()
            if attr.startswith(STRUCTURED_PREFIX) and value is not None
        }

    def build_payload(self, record: logging.LogRecord) -> dict:
        payload = {
            "message": record.getMessage(),
            "ddsource": "python",
            "service": self.service,
            "hostname": os.getenv("HOSTNAME"),
            "status": record.levelname.lower(),
            "logger": record.name,
        }

        tags = [f"env:{self.env}", f"service:{self.service}"]
        fields = self.structured_fields(record)
        if fields:
            payload.update(fields)
            scope = fields.get("reconciliation.scope")
            if scope:
                tags.append(f"reconciliation.scope:{scope}")
            if "reconciliation.dry_run" in fields:
                tags.append(f"reconciliation.dry_run:{str(fields['reconciliation.dry_run']).lower()}")
        payload["ddtags"] = ",".join(tags)
        return payload

    def emit(self, record: logging.LogRecord):
        if not DATADOG_API_KEY:
            return

        try:
            if not self.should_log(record):
                return

            headers = {
                "Content-Type": "application/json",
                "DD-API-KEY": DATADOG_API_KEY,
            }

            requests.post(
                DATADOG_LOG_URL,
                headers=headers,
                data=json.dumps(self.build_payload(record), default=str),
                timeout=2,
            )

        except Exception:
            # Never break a reconciliation pass because of logging
            self.handleError(record)
