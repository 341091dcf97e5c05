"""
Generic add/update/delete commands and their batch variants.

Entity-specific behaviour (reference checks, cached cost refresh, delete
guards) comes from a rules mixin placed first in the bases of each concrete
command, e.g. ``class AddDishCommand(DishRules, AddEntityCommand)``.
"""
from typing import Iterable, List

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from kitchenops.commands.base import CatalogCommand
from kitchenops.core.errors import ValidationError
from kitchenops.db.store import CatalogStore, Entity, EntityKind


class EntityRules:
    """Default hooks; overridden per entity kind."""
    kind: EntityKind
    label: str
    label_plural: str
    store: CatalogStore

    def _check_references(self, entity: Entity) -> None:
        """Raise ValidationError if the entity points at missing entities."""

    def _check_removable(self, entity_id: str) -> None:
        """Raise ValidationError if something still references the entity."""

    def _prepare(self, entity: Entity) -> Entity:
        """Return the copy to install, with derived fields recomputed."""
        return entity

    def _refresh_dependents(self, entity_id: str) -> None:
        """Recompute cached fields of entities derived from this one."""


class EntityCommand(EntityRules, CatalogCommand):
    """Shared install/remove steps for CRUD commands."""

    def _install(self, entity: Entity) -> None:
        self._write(self.kind, self._prepare(entity))
        self._refresh_dependents(entity.id)

    def _uninstall(self, entity_id: str) -> None:
        self._delete(self.kind, entity_id)

    def _require_unique(self, entities: List[Entity]) -> None:
        seen = set()
        for entity in entities:
            if entity.id in seen:
                raise ValidationError(f"Duplicate {self.label} id '{entity.id}' in batch")
            seen.add(entity.id)

    def _require_absent(self, entity: Entity) -> None:
        if self.store.contains(self.kind, entity.id):
            raise ValidationError(f"{self.label.capitalize()} '{entity.id}' already exists")

    def _summary(self, verb: str, ids: List[str]) -> str:
        label = self.label if len(ids) == 1 else self.label_plural
        return f"{verb} {len(ids)} {label}: {', '.join(ids)}"


class AddEntityCommand(EntityCommand):
    """Insert a new entity; undo removes it."""

    def __init__(self, store: CatalogStore, entity: Entity):
        super().__init__(store)
        self._require_absent(entity)
        self._check_references(entity)
        self.entity = entity.snapshot()

    def _apply(self) -> None:
        self._require_absent(self.entity)
        self._check_references(self.entity)
        self._install(self.entity)

    @property
    def description(self) -> str:
        return f"Add {self.label} '{self.entity.id}' ({self.entity.name})"


class UpdateEntityCommand(EntityCommand):
    """Replace an entity with a post-image; undo reinstalls the pre-image."""

    def __init__(self, store: CatalogStore, updated: Entity):
        super().__init__(store)
        self.before = store.require(self.kind, updated.id)
        self._check_references(updated)
        self.after = updated.snapshot()

    @classmethod
    def from_changes(cls, store: CatalogStore, entity_id: str, changes: BaseModel, **overrides):
        """
        Build the post-image by applying the set fields of ``changes`` to the
        current entity.

        Raises:
            NotFoundError: the entity does not exist
            ValidationError: the merged entity is invalid
        """
        kind = cls.kind
        before = store.require(kind, entity_id)
        data = before.model_dump()
        data.update(changes.model_dump(exclude_unset=True))
        data.update(overrides)
        try:
            updated = type(before).model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e)
        return cls(store, updated)

    def _apply(self) -> None:
        self.store.require(self.kind, self.after.id)
        self._check_references(self.after)
        self._install(self.after)

    @property
    def description(self) -> str:
        return f"Update {self.label} '{self.after.id}' ({self.after.name})"


class DeleteEntityCommand(EntityCommand):
    """Remove an entity; undo reinserts it."""

    def __init__(self, store: CatalogStore, entity_id: str):
        super().__init__(store)
        self.removed = store.require(self.kind, entity_id)
        self._check_removable(entity_id)

    def _apply(self) -> None:
        self.store.require(self.kind, self.removed.id)
        self._check_removable(self.removed.id)
        self._uninstall(self.removed.id)

    @property
    def description(self) -> str:
        return f"Delete {self.label} '{self.removed.id}' ({self.removed.name})"


class BatchAddEntitiesCommand(EntityCommand):
    """Insert several entities in one step, in the given order."""

    def __init__(self, store: CatalogStore, entities: Iterable[Entity]):
        super().__init__(store)
        self.entities = [entity.snapshot() for entity in entities]
        if not self.entities:
            raise ValidationError(f"Batch of {self.label_plural} is empty")
        self._require_unique(self.entities)
        for entity in self.entities:
            self._require_absent(entity)
            self._check_references(entity)

    def _apply(self) -> None:
        for entity in self.entities:
            self._require_absent(entity)
            self._check_references(entity)
        for entity in self.entities:
            self._install(entity)

    @property
    def description(self) -> str:
        return self._summary("Add", [e.id for e in self.entities])


class BatchUpdateEntitiesCommand(EntityCommand):
    """Replace several entities in one step, in the given order."""

    def __init__(self, store: CatalogStore, updated: Iterable[Entity], label: str = "Update"):
        super().__init__(store)
        self.after = [entity.snapshot() for entity in updated]
        if not self.after:
            raise ValidationError(f"Batch of {self.label_plural} is empty")
        self._require_unique(self.after)
        self.before = [store.require(self.kind, entity.id) for entity in self.after]
        for entity in self.after:
            self._check_references(entity)
        self.verb = label

    def _apply(self) -> None:
        for entity in self.after:
            self.store.require(self.kind, entity.id)
            self._check_references(entity)
        for entity in self.after:
            self._install(entity)

    @property
    def description(self) -> str:
        return self._summary(self.verb, [e.id for e in self.after])


class BatchDeleteEntitiesCommand(EntityCommand):
    """Remove several entities in one step, in the given order."""

    def __init__(self, store: CatalogStore, entity_ids: Iterable[str]):
        super().__init__(store)
        ids = list(entity_ids)
        if not ids:
            raise ValidationError(f"Batch of {self.label_plural} is empty")
        if len(set(ids)) != len(ids):
            raise ValidationError(f"Duplicate {self.label} ids in batch")
        self.removed = [store.require(self.kind, entity_id) for entity_id in ids]
        for entity_id in ids:
            self._check_removable(entity_id)

    def _apply(self) -> None:
        for entity in self.removed:
            self.store.require(self.kind, entity.id)
            self._check_removable(entity.id)
        for entity in self.removed:
            self._uninstall(entity.id)

    @property
    def description(self) -> str:
        return self._summary("Delete", [e.id for e in self.removed])
