"""
Undo/redo history for catalog commands.

The manager owns two bounded LIFO stacks. Executing a new command clears the
redo stack; when the undo stack grows past capacity the oldest half is
discarded. Observers (audit sinks) are notified after every execute, undo
and redo; an observer that raises is logged and otherwise ignored.
"""
import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Deque, Generic, Iterable, Iterator, List, Optional, TypeVar

from kitchenops.commands.base import Command
from kitchenops.core.clock import Clock, now
from kitchenops.core.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HistoryEvent:
    """Notification sent to audit sinks."""
    action: str  # execute, undo, redo
    description: str
    timestamp: datetime


AuditSink = Callable[[HistoryEvent], None]


class BoundedStack(Generic[T]):
    """
    LIFO stack with a capacity.

    When a push takes the stack past capacity, ``evict()`` discards the
    oldest entries so that only the most recent ``capacity // 2`` remain.
    """

    def __init__(self, capacity: int):
        if capacity < 2:
            raise ValueError(f"capacity must be at least 2 (got {capacity})")
        self.capacity = capacity
        self._items: Deque[T] = deque()

    def push(self, item: T) -> List[T]:
        """Push an item; returns whatever the push evicted (oldest first)."""
        self._items.append(item)
        return self.evict()

    def pop(self) -> T:
        return self._items.pop()

    def peek(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def evict(self) -> List[T]:
        if len(self._items) <= self.capacity:
            return []
        keep = self.capacity // 2
        evicted = []
        while len(self._items) > keep:
            evicted.append(self._items.popleft())
        return evicted

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        """Newest first."""
        return reversed(self._items)


class HistoryManager:
    """
    Executes commands and keeps them for undo/redo.

    ``execute_command``, ``undo`` and ``redo`` each run as one critical section.
    ``undo``/``redo`` on an empty stack are no-ops returning False.
    """

    def __init__(self, capacity: Optional[int] = None, sinks: Iterable[AuditSink] = (),
                 clock: Optional[Clock] = None):
        capacity = capacity if capacity is not None else get_settings().HISTORY_CAPACITY
        self._undo_stack: BoundedStack[Command] = BoundedStack(capacity)
        self._redo_stack: BoundedStack[Command] = BoundedStack(capacity)
        self._sinks: List[AuditSink] = list(sinks)
        self._lock = threading.RLock()
        self.clock = clock or now

    @property
    def capacity(self) -> int:
        return self._undo_stack.capacity

    @property
    def can_undo(self) -> bool:
        return len(self._undo_stack) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._redo_stack) > 0

    def execute_command(self, command: Command) -> None:
        """
        Execute a command and record it.

        Errors from ``execute()`` propagate unchanged and nothing is recorded.
        """
        with self._lock:
            try:
                command.execute()
            except Exception as e:
                logger.warning(f"Command failed: {command.description}: {e}")
                raise
            self._push_undo(command)
            self._redo_stack.clear()
            logger.info(f"Executed: {command.description}")
        self._publish("execute", command)

    def undo(self) -> bool:
        with self._lock:
            if not self._undo_stack:
                return False
            command = self._undo_stack.pop()
            command.undo()
            self._redo_stack.push(command)
            logger.info(f"Undone: {command.description}")
        self._publish("undo", command)
        return True

    def redo(self) -> bool:
        """
        Re-execute the most recently undone command.

        If it fails (for example stock was consumed in the meantime) the
        command stays on the redo stack and the error propagates.
        """
        with self._lock:
            if not self._redo_stack:
                return False
            command = self._redo_stack.pop()
            try:
                command.execute()
            except Exception as e:
                self._redo_stack.push(command)
                logger.warning(f"Redo failed: {command.description}: {e}")
                raise
            self._push_undo(command)
            logger.info(f"Redone: {command.description}")
        self._publish("redo", command)
        return True

    def clear(self) -> None:
        with self._lock:
            self._undo_stack.clear()
            self._redo_stack.clear()

    def describe_undo_history(self) -> List[str]:
        """Descriptions of undoable commands, most recent first."""
        with self._lock:
            return [command.description for command in self._undo_stack]

    def describe_redo_history(self) -> List[str]:
        """Descriptions of redoable commands, most recent first."""
        with self._lock:
            return [command.description for command in self._redo_stack]

    def subscribe(self, sink: AuditSink) -> None:
        self._sinks.append(sink)

    def unsubscribe(self, sink: AuditSink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    def _push_undo(self, command: Command) -> None:
        evicted = self._undo_stack.push(command)
        if evicted:
            logger.info(f"History over capacity {self.capacity}; discarded {len(evicted)} oldest entries")

    def _publish(self, action: str, command: Command) -> None:
        event = HistoryEvent(action=action, description=command.description, timestamp=self.clock())
        for sink in list(self._sinks):
            try:
                sink(event)
            except Exception as e:
                logger.warning(f"Audit sink {sink!r} failed on {action}: {e}")
