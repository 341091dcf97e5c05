"""
Audit sinks subscribed to the history manager.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from kitchenops.services.history import HistoryEvent


@dataclass
class AuditEntry:
    """One recorded history event."""
    username: str
    action: str
    description: str
    timestamp: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class AuditTrail:
    """In-memory audit log, attributed to the user of the session."""

    def __init__(self, username: str = ""):
        self.username = username
        self.entries: List[AuditEntry] = []

    def __call__(self, event: HistoryEvent) -> None:
        self.entries.append(AuditEntry(
            username=self.username,
            action=event.action,
            description=event.description,
            timestamp=event.timestamp,
        ))

    def for_action(self, action: str) -> List[AuditEntry]:
        return [entry for entry in self.entries if entry.action == action]


class LoggingAuditSink:
    """Writes every history event to a logger."""

    def __init__(self, audit_logger: Optional[logging.Logger] = None):
        self.logger = audit_logger or logging.getLogger("kitchenops.audit")

    def __call__(self, event: HistoryEvent) -> None:
        self.logger.info(f"{event.action}: {event.description}")
