"""
Activity Logger

DESIGN DECISION: Every change to the plan is logged.
This provides:
1. A history the couple can look back on
2. Debugging capability when a save fails

The activity logger:
- Always writes a structured local log line
- Persists to storage when one is configured
- Never breaks the main flow if persisting fails
"""

import logging
import sys
from typing import Optional

import structlog

from cazen.models.activity import ActivityEvent, ActivitySeverity
from cazen.services.storage import ActivityStorageInterface


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog (JSON lines on stderr) and the stdlib root level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class ActivityLogger:
    """
    Central activity logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The activity storage (for persistence and the history view)
    """

    def __init__(
        self,
        storage: Optional[ActivityStorageInterface] = None,
    ):
        """
        Initialize activity logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("cazen.activity")

    async def log(self, event: ActivityEvent) -> bool:
        """
        Log an activity event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "activity_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True
