# talentforge/modules/talent_pkg/modifiers.py
"""
Talent modifier configs and the engine that applies them to a skill depot.

This module provides:
- One pydantic model per modifier kind, tagged by the "$type" key
- A closed `TalentModifier` union used to validate raw config records
- apply_modifier / apply_modifiers, which report errors per modifier
  instead of aborting the batch
"""
import logging
from typing import Annotated, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .errors import TalentEngineError
from .param_refs import is_literal_zero, resolve_param_reference
from .predicates import Predicate, PredicateContext, all_predicates_hold
from .skill_depot import SkillDepot

logger = logging.getLogger("talentforge.talent.modifiers")


class BaseTalentConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    predicates: List[Predicate] = Field(
        default_factory=list,
        description="All must hold for the modifier to apply.",
    )

    def apply(self, depot: SkillDepot, param_list: Sequence[float]) -> None:
        """Applies the modifier to the depot. Every modifier kind overrides this."""
        raise NotImplementedError

    def is_gated(self) -> bool:
        return bool(self.predicates)


class ModifyAbility(BaseTalentConfig):
    """Adds a delta to an ability special, then scales it by a ratio."""
    type: Literal["ModifyAbility"] = Field("ModifyAbility", alias="$type")
    ability_name: str
    param_special: str
    param_delta: Optional[Union[float, str]] = Field(
        None, description="Literal delta or '%index' into the param list."
    )
    param_ratio: Optional[Union[float, str]] = Field(
        None, description="Literal ratio or '%index' into the param list."
    )

    def apply(self, depot: SkillDepot, param_list: Sequence[float]) -> None:
        special = depot.get_special(self.ability_name, self.param_special)

        delta = resolve_param_reference(self.param_delta, param_list)
        if delta is not None:
            special += delta

        # A literal zero ratio is ignored; a referenced ratio that resolves to zero is not.
        if not is_literal_zero(self.param_ratio):
            ratio = resolve_param_reference(self.param_ratio, param_list)
            if ratio is not None:
                special *= ratio

        depot.set_special(self.ability_name, self.param_special, special)


class AddAbility(BaseTalentConfig):
    type: Literal["AddAbility"] = Field("AddAbility", alias="$type")
    ability_name: str

    def apply(self, depot: SkillDepot, param_list: Sequence[float]) -> None:
        depot.add_ability(self.ability_name)


class UnlockTalentParam(BaseTalentConfig):
    type: Literal["UnlockTalentParam"] = Field("UnlockTalentParam", alias="$type")
    ability_name: str
    talent_param: str

    def apply(self, depot: SkillDepot, param_list: Sequence[float]) -> None:
        unlocked = depot.unlocked_talent_params.setdefault(self.ability_name, [])
        if self.talent_param not in unlocked:
            unlocked.append(self.talent_param)


class AddTalentExtraLevel(BaseTalentConfig):
    type: Literal["AddTalentExtraLevel"] = Field("AddTalentExtraLevel", alias="$type")
    talent_type: str
    extra_level: int = 0

    def apply(self, depot: SkillDepot, param_list: Sequence[float]) -> None:
        current = depot.extra_talent_levels.get(self.talent_type, 0)
        depot.extra_talent_levels[self.talent_type] = current + self.extra_level


TalentModifier = Annotated[
    Union[ModifyAbility, AddAbility, UnlockTalentParam, AddTalentExtraLevel],
    Field(discriminator="type"),
]

modifier_adapter = TypeAdapter(TalentModifier)
modifier_list_adapter = TypeAdapter(List[TalentModifier])


def parse_modifiers(raw_records: list) -> List[BaseTalentConfig]:
    """Validates a list of raw talent config records into modifier models."""
    return modifier_list_adapter.validate_python(raw_records)


def apply_modifier(
    modifier: BaseTalentConfig,
    depot: SkillDepot,
    param_list: Sequence[float],
    context: Optional[PredicateContext] = None,
) -> Optional[TalentEngineError]:
    """
    Applies one modifier to the depot.

    Returns:
        Optional[TalentEngineError]: The error that prevented the modifier from
        applying, or None on success (including a skip by a failing predicate).
        A failed modifier leaves the depot unchanged.
    """
    if modifier.is_gated():
        if context is None:
            logger.debug(f"Skipping gated {modifier.type}: no predicate context supplied")
            return None
        if not all_predicates_hold(modifier.predicates, context):
            return None

    try:
        modifier.apply(depot, param_list)
    except TalentEngineError as e:
        logger.warning(f"{modifier.type} skipped for depot {depot.depot_id}: {e}")
        return e
    return None


def apply_modifiers(
    modifiers: Sequence[BaseTalentConfig],
    depot: SkillDepot,
    param_list: Sequence[float],
    context: Optional[PredicateContext] = None,
) -> List[TalentEngineError]:
    """Applies modifiers in declaration order and collects per-modifier errors."""
    errors = []
    for modifier in modifiers:
        error = apply_modifier(modifier, depot, param_list, context)
        if error is not None:
            errors.append(error)
    return errors
