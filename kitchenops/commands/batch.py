"""
Composite command running several commands as one history entry.
"""
import logging
from typing import Iterable, List

from kitchenops.commands.base import Command
from kitchenops.core.errors import ValidationError

logger = logging.getLogger(__name__)


class BatchCommand(Command):
    """
    Execute member commands in order as a single undoable step.

    If a member fails, the members already executed are undone in reverse
    order before the error propagates, so the batch applies fully or not at all.
    """

    def __init__(self, commands: Iterable[Command], description: str = ""):
        self.commands: List[Command] = list(commands)
        if not self.commands:
            raise ValidationError("A batch must contain at least one command")
        self._description = description

    def execute(self) -> None:
        executed: List[Command] = []
        try:
            for command in self.commands:
                command.execute()
                executed.append(command)
        except Exception:
            logger.warning(f"Batch failed after {len(executed)} of {len(self.commands)} commands; reverting")
            for command in reversed(executed):
                command.undo()
            raise

    def undo(self) -> None:
        for command in reversed(self.commands):
            command.undo()

    @property
    def description(self) -> str:
        if self._description:
            return self._description
        return f"Batch of {len(self.commands)}: " + "; ".join(c.description for c in self.commands)
