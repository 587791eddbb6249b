# talentforge/modules/talent_pkg/predicates.py
"""
Predicate configs that gate whether a talent modifier applies.

Each predicate kind is a pydantic model tagged by its "$type" key; the
`Predicate` union below is closed, so an unknown "$type" fails validation
instead of silently evaluating to something.
"""
import logging
import operator
from dataclasses import dataclass, field
from typing import Annotated, Callable, Dict, FrozenSet, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .enums import AbilityState, LogicType

logger = logging.getLogger("talentforge.talent.predicates")

_COMPARATORS: Dict[LogicType, Callable[[float, float], bool]] = {
    LogicType.EQUAL: operator.eq,
    LogicType.NOT_EQUAL: operator.ne,
    LogicType.GREATER: operator.gt,
    LogicType.GREATER_OR_EQUAL: operator.ge,
    LogicType.LESSER: operator.lt,
    LogicType.LESSER_OR_EQUAL: operator.le,
}


@dataclass(frozen=True)
class PredicateContext:
    """Snapshot of the target state a predicate is evaluated against."""
    target_altitude: float = 0.0
    target_hp_ratio: float = 1.0
    ability_states: FrozenSet[AbilityState] = field(default_factory=frozenset)


def compare(logic: Optional[LogicType], lhs: float, rhs: float) -> bool:
    """
    Compares lhs against rhs with the given operator.

    An absent operator makes the comparison vacuously true.
    """
    if logic is None:
        return True
    return _COMPARATORS[logic](lhs, rhs)


class BasePredicate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def evaluate(self, context: PredicateContext) -> bool:
        """Every predicate kind overrides this."""
        raise NotImplementedError


class ByTargetAltitude(BasePredicate):
    type: Literal["ByTargetAltitude"] = Field("ByTargetAltitude", alias="$type")
    logic: Optional[LogicType] = None
    value: float = 0.0

    def evaluate(self, context: PredicateContext) -> bool:
        return compare(self.logic, context.target_altitude, self.value)


class ByTargetHPRatio(BasePredicate):
    type: Literal["ByTargetHPRatio"] = Field("ByTargetHPRatio", alias="$type")
    logic: Optional[LogicType] = None
    value: float = 0.0

    def evaluate(self, context: PredicateContext) -> bool:
        return compare(self.logic, context.target_hp_ratio, self.value)


class ByHasAbilityState(BasePredicate):
    type: Literal["ByHasAbilityState"] = Field("ByHasAbilityState", alias="$type")
    ability_state: AbilityState

    def evaluate(self, context: PredicateContext) -> bool:
        return self.ability_state in context.ability_states


class ByNot(BasePredicate):
    """True when none of the nested predicates holds."""
    type: Literal["ByNot"] = Field("ByNot", alias="$type")
    predicates: List["Predicate"] = Field(default_factory=list)

    def evaluate(self, context: PredicateContext) -> bool:
        return not any(p.evaluate(context) for p in self.predicates)


class ByAny(BasePredicate):
    """True when at least one nested predicate holds."""
    type: Literal["ByAny"] = Field("ByAny", alias="$type")
    predicates: List["Predicate"] = Field(default_factory=list)

    def evaluate(self, context: PredicateContext) -> bool:
        return any(p.evaluate(context) for p in self.predicates)


Predicate = Annotated[
    Union[ByTargetAltitude, ByTargetHPRatio, ByHasAbilityState, ByNot, ByAny],
    Field(discriminator="type"),
]

ByNot.model_rebuild()
ByAny.model_rebuild()

predicate_adapter = TypeAdapter(Predicate)


def evaluate_predicate(predicate: BasePredicate, context: PredicateContext) -> bool:
    """Evaluates a single predicate config against the given context."""
    result = predicate.evaluate(context)
    logger.debug(f"{predicate.type} evaluated to {result}")
    return result


def all_predicates_hold(predicates: List[BasePredicate], context: PredicateContext) -> bool:
    return all(evaluate_predicate(p, context) for p in predicates)
