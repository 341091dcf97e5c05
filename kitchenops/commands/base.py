"""
Reversible command abstraction.

A command applies one logical mutation to the catalog store in ``execute()``
and reverses it exactly in ``undo()``. Commands are built by the caller (with
all construction-time validation done in ``__init__``) and handed to the
history manager, which calls ``execute()`` once per push or redo.
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from kitchenops.db.store import CatalogStore, Entity, EntityKind


class Command(ABC):
    """Unit of reversible mutation."""

    @abstractmethod
    def execute(self) -> None:
        """Apply the mutation. Must leave the store untouched if it raises."""

    @abstractmethod
    def undo(self) -> None:
        """Restore the state observed immediately before ``execute()``."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable label for audit and history display."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.description}>"


class CatalogCommand(Command):
    """
    Command that journals pre-images of every entity it writes.

    Subclasses implement ``_apply()`` using ``_write``/``_delete``. Before the
    first write to an entity the journal stores a detached copy of it and its
    position in the store (or None if it did not exist); ``undo()`` reinstalls
    those copies in reverse order, at their original positions. Subclasses
    must run all of their checks, against the store as it is at execute
    time, before the first write.
    """

    def __init__(self, store: CatalogStore):
        self.store = store
        self._journal: Dict[Tuple[EntityKind, str], Tuple[Optional[Entity], Optional[int]]] = {}

    def execute(self) -> None:
        self._journal = {}
        self._apply()

    def undo(self) -> None:
        for (kind, entity_id), (before, index) in reversed(list(self._journal.items())):
            if before is None:
                self.store.remove(kind, entity_id)
            elif self.store.contains(kind, entity_id):
                self.store.put(kind, before)
            else:
                self.store.restore(kind, before, index)
        self._journal = {}

    @abstractmethod
    def _apply(self) -> None:
        ...

    def _capture(self, kind: EntityKind, entity_id: str) -> None:
        key = (kind, entity_id)
        if key not in self._journal:
            self._journal[key] = (self.store.get(kind, entity_id), self.store.index_of(kind, entity_id))

    def _write(self, kind: EntityKind, entity: Entity) -> None:
        self._capture(kind, entity.id)
        self.store.put(kind, entity)

    def _delete(self, kind: EntityKind, entity_id: str) -> None:
        self._capture(kind, entity_id)
        self.store.remove(kind, entity_id)
