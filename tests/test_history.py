"""
Tests for the bounded undo/redo history.
"""
import pytest

from kitchenops.commands.base import Command
from kitchenops.core.config import Settings
from kitchenops.services.history import BoundedStack, HistoryManager


class AppendCommand(Command):
    """Appends a value to a shared list; undo removes it."""

    def __init__(self, log, value):
        self.log = log
        self.value = value

    def execute(self):
        self.log.append(self.value)

    def undo(self):
        self.log.remove(self.value)

    @property
    def description(self):
        return f"append {self.value}"


class FailingCommand(Command):
    """Fails every execute until ``armed`` is cleared."""

    def __init__(self):
        self.armed = True
        self.executions = 0

    def execute(self):
        if self.armed:
            raise RuntimeError("boom")
        self.executions += 1

    def undo(self):
        self.executions -= 1

    @property
    def description(self):
        return "flaky"


class TestBoundedStack:
    """Eviction policy of the stack on its own."""

    def test_push_within_capacity(self):
        """Nothing is evicted until capacity is exceeded."""
        stack = BoundedStack(4)
        for i in range(4):
            assert stack.push(i) == []
        assert len(stack) == 4

    def test_overflow_keeps_most_recent_half(self):
        """Pushing the 11th item into a capacity-10 stack keeps items 7..11."""
        stack = BoundedStack(10)
        for i in range(1, 11):
            stack.push(i)

        evicted = stack.push(11)

        assert evicted == [1, 2, 3, 4, 5, 6]
        assert list(stack) == [11, 10, 9, 8, 7]

    def test_pop_and_peek_are_lifo(self):
        """The last pushed item comes out first."""
        stack = BoundedStack(3)
        stack.push("a")
        stack.push("b")
        assert stack.peek() == "b"
        assert stack.pop() == "b"
        assert stack.pop() == "a"
        assert stack.peek() is None

    def test_capacity_below_two_rejected(self):
        """A capacity of 1 cannot hold half of itself."""
        with pytest.raises(ValueError):
            BoundedStack(1)


class TestHistoryManager:
    """Undo/redo bookkeeping."""

    def test_execute_undo_redo(self, history):
        """A command can be undone and redone."""
        log = []
        history.execute_command(AppendCommand(log, 1))
        assert log == [1]

        assert history.undo() is True
        assert log == []
        assert history.can_redo

        assert history.redo() is True
        assert log == [1]
        assert not history.can_redo

    def test_empty_stacks_are_noops(self, history):
        """Undo and redo with nothing to do return False."""
        assert history.undo() is False
        assert history.redo() is False

    def test_new_command_invalidates_redo(self, history):
        """Executing after an undo discards the redo stack."""
        log = []
        history.execute_command(AppendCommand(log, 1))
        history.execute_command(AppendCommand(log, 2))
        history.undo()

        history.execute_command(AppendCommand(log, 3))

        assert not history.can_redo
        assert log == [1, 3]
        assert history.describe_undo_history() == ["append 3", "append 1"]

    def test_redo_keeps_remaining_redo_entries(self, history):
        """Redoing one entry leaves older undone entries redoable."""
        log = []
        for i in (1, 2, 3):
            history.execute_command(AppendCommand(log, i))
        history.undo()
        history.undo()

        history.redo()

        assert log == [1, 2]
        assert history.describe_redo_history() == ["append 3"]

    def test_capacity_overflow_discards_oldest_half(self, history):
        """Capacity 10: the 11th command leaves commands 7..11 undoable."""
        log = []
        for i in range(1, 12):
            history.execute_command(AppendCommand(log, i))

        assert history.describe_undo_history() == [f"append {i}" for i in (11, 10, 9, 8, 7)]

        while history.undo():
            pass
        assert log == [1, 2, 3, 4, 5, 6]

    def test_default_capacity_overflow(self):
        """With the default capacity of 50, the 51st command leaves 25 entries, oldest #27."""
        history = HistoryManager()
        assert history.capacity == 50
        log = []
        for i in range(1, 52):
            history.execute_command(AppendCommand(log, i))

        descriptions = history.describe_undo_history()
        assert len(descriptions) == 25
        assert descriptions[-1] == "append 27"
        assert descriptions[0] == "append 51"

    def test_failed_execute_is_not_recorded(self, history):
        """A command whose execute raises never reaches the undo stack."""
        log = []
        history.execute_command(AppendCommand(log, 1))
        history.undo()

        with pytest.raises(RuntimeError):
            history.execute_command(FailingCommand())

        assert not history.can_undo
        assert history.describe_redo_history() == ["append 1"]

    def test_failed_redo_stays_redoable(self, history):
        """A redo that fails re-raises and keeps the command on the redo stack."""
        command = FailingCommand()
        command.armed = False
        history.execute_command(command)
        history.undo()
        command.armed = True

        with pytest.raises(RuntimeError):
            history.redo()

        assert history.can_redo
        assert not history.can_undo

        command.armed = False
        assert history.redo() is True
        assert command.executions == 1

    def test_clear(self, history):
        """Clear empties both stacks."""
        log = []
        history.execute_command(AppendCommand(log, 1))
        history.execute_command(AppendCommand(log, 2))
        history.undo()

        history.clear()

        assert not history.can_undo
        assert not history.can_redo
        assert log == [1]


class TestHistorySinks:
    """Observers notified by the history manager."""

    def test_events_published_in_order(self, history, trail):
        """Execute, undo and redo each produce one audit entry."""
        log = []
        history.execute_command(AppendCommand(log, 1))
        history.undo()
        history.redo()

        assert [e.action for e in trail.entries] == ["execute", "undo", "redo"]
        assert all(e.description == "append 1" for e in trail.entries)
        assert all(e.username == "staff1" for e in trail.entries)
        assert trail.entries[-1].timestamp == history.clock.current

    def test_failed_execute_not_published(self, history, trail):
        """Nothing is audited for a command that failed."""
        with pytest.raises(RuntimeError):
            history.execute_command(FailingCommand())
        assert trail.entries == []

    def test_sink_failure_is_isolated(self, history, trail):
        """A raising sink does not break the command or other sinks."""
        def broken_sink(event):
            raise RuntimeError("sink down")

        history.subscribe(broken_sink)
        log = []
        history.execute_command(AppendCommand(log, 1))

        assert log == [1]
        assert history.can_undo
        assert len(trail.entries) == 1

    def test_unsubscribe(self, history, trail):
        """An unsubscribed sink receives no further events."""
        history.unsubscribe(trail)
        history.execute_command(AppendCommand([], 1))
        assert trail.entries == []


class TestHistoryConfiguration:
    """Capacity comes from settings unless given."""

    def test_capacity_from_settings(self, monkeypatch):
        """HISTORY_CAPACITY sets the stack size."""
        monkeypatch.setattr(
            "kitchenops.services.history.get_settings",
            lambda: Settings(HISTORY_CAPACITY=4),
        )
        assert HistoryManager().capacity == 4
