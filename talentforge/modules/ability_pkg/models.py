# talentforge/modules/ability_pkg/models.py
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ConfigAbility(_CamelModel):
    """
    One ability config as loaded from ability_configs.json.

    Only the parts the engine needs are modelled; the rest of the record is
    ignored.
    """
    ability_name: str
    ability_specials: Dict[str, float] = Field(
        default_factory=dict, description="Default value of each special, keyed by special name."
    )
    modifiers: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Ability modifier configs keyed by modifier name."
    )


class AvatarTalentData(_CamelModel):
    """A talent (constellation) entry: which talent configs to open, with which params."""
    talent_id: int
    open_config: str
    param_list: List[float] = Field(default_factory=list)


class ProudSkillData(_CamelModel):
    """One level of a proud skill (passive or skill upgrade)."""
    proud_skill_id: int
    proud_skill_group_id: int
    level: int = 1
    open_config: str = ""
    param_list: List[float] = Field(default_factory=list)


class AvatarData(_CamelModel):
    avatar_id: int
    name: str
    ability_group: str = Field(..., description="Key into ability_configs.json.")
    talent_ids: List[int] = Field(default_factory=list)
    proud_skill_group_ids: List[int] = Field(default_factory=list)
