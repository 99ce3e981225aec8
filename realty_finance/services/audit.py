"""
Audit / analytics events for simulation requests.

Events are fire-and-forget: a failing sink is logged and never affects the
simulation response. Without an external sink configured, events are written
to the application log.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional

from realty_finance.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

EventSink = Callable[[str, Dict[str, Any]], None]


class AuditService:
    """Emits one event per simulation to an external sink."""

    def __init__(self, sink: Optional[EventSink] = None, enabled: Optional[bool] = None):
        self.enabled = settings.audit_enabled if enabled is None else enabled
        self.sink = sink

    def emit(self, action: str, details: Dict[str, Any]) -> bool:
        """
        Emit an event.

        Args:
            action: Event name (e.g. "financing_simulation")
            details: Input and output snapshot

        Returns:
            True if the event was delivered, False otherwise
        """
        if not self.enabled:
            return False

        try:
            if self.sink is None:
                # Log event to console if no sink is configured
                logger.info(
                    "[AUDIT] %s %s",
                    action,
                    json.dumps(details, default=str, sort_keys=True),
                )
            else:
                self.sink(action, details)
            return True

        except Exception as e:
            logger.error(f"Error emitting audit event {action}: {str(e)}")
            return False


# Singleton instance
_audit_service: Optional[AuditService] = None


def get_audit_service() -> AuditService:
    """Get the audit service singleton."""
    global _audit_service
    if _audit_service is None:
        _audit_service = AuditService()
    return _audit_service
