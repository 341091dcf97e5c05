"""
Combo commands.
"""
from kitchenops.commands.entity import (
    AddEntityCommand,
    DeleteEntityCommand,
    EntityRules,
    UpdateEntityCommand,
)
from kitchenops.core.errors import ValidationError
from kitchenops.db.store import EntityKind
from kitchenops.models import Combo
from kitchenops.services.cost_calculator import CostCalculator


class ComboRules(EntityRules):
    kind = EntityKind.COMBO
    label = "combo"
    label_plural = "combos"

    def _check_references(self, entity: Combo) -> None:
        if not entity.dish_ids:
            raise ValidationError(f"Combo '{entity.id}' must contain at least one dish")
        missing = [d for d in entity.dish_ids if not self.store.contains(EntityKind.DISH, d)]
        if missing:
            raise ValidationError(f"Combo '{entity.id}' references unknown dishes: {', '.join(missing)}")

    def _prepare(self, entity: Combo) -> Combo:
        return CostCalculator(self.store).refresh_combo(entity)


class AddComboCommand(ComboRules, AddEntityCommand):
    pass


class UpdateComboCommand(ComboRules, UpdateEntityCommand):
    pass


class DeleteComboCommand(ComboRules, DeleteEntityCommand):
    pass
