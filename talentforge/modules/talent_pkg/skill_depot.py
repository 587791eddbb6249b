# talentforge/modules/talent_pkg/skill_depot.py
from typing import Any, Dict, Iterable, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .errors import UnknownAbility, UnknownSpecial


class SkillDepot(BaseModel):
    """
    Mutable per-character store of ability specials.

    `ability_specials` maps ability name -> special name -> value. Talent
    modifiers read and overwrite entries in place; a depot is owned by a
    single live avatar and must not be mutated from two threads at once.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    depot_id: int = 0
    abilities: List[str] = Field(default_factory=list)
    ability_specials: Dict[str, Dict[str, float]] = Field(default_factory=dict)
    unlocked_talent_params: Dict[str, List[str]] = Field(default_factory=dict)
    extra_talent_levels: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_ability_configs(cls, depot_id: int, configs: Iterable[Any]) -> "SkillDepot":
        """Builds a depot seeded with the default specials of each ability config."""
        depot = cls(depot_id=depot_id)
        for config in configs:
            depot.add_ability(config.ability_name, config.ability_specials)
        return depot

    def add_ability(self, ability_name: str, specials: Dict[str, float] = None) -> bool:
        """
        Grants an ability to the depot. Existing specials are never overwritten.

        Returns:
            bool: True if the ability was not present before.
        """
        added = ability_name not in self.abilities
        if added:
            self.abilities.append(ability_name)
        table = self.ability_specials.setdefault(ability_name, {})
        for name, value in (specials or {}).items():
            table.setdefault(name, float(value))
        return added

    def get_special(self, ability_name: str, special_name: str) -> float:
        table = self.ability_specials.get(ability_name)
        if table is None:
            raise UnknownAbility(ability_name)
        if special_name not in table:
            raise UnknownSpecial(ability_name, special_name)
        return table[special_name]

    def set_special(self, ability_name: str, special_name: str, value: float) -> None:
        table = self.ability_specials.get(ability_name)
        if table is None:
            raise UnknownAbility(ability_name)
        if special_name not in table:
            raise UnknownSpecial(ability_name, special_name)
        table[special_name] = value

    def clone(self) -> "SkillDepot":
        return self.model_copy(deep=True)

    def to_snapshot(self) -> Dict[str, Any]:
        """Serializes the depot for the persistence layer."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_snapshot(cls, snapshot: Dict[str, Any]) -> "SkillDepot":
        return cls.model_validate(snapshot)
