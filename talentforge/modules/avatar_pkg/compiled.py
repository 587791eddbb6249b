# talentforge/modules/avatar_pkg/compiled.py
"""
Per-avatar compiled data: the base skill depot and the resolved talent and
proud skill configs, built once per avatar definition and shared by every
live instance of that avatar.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..ability_pkg.data_loader import AbilityDataContainer
from ..ability_pkg.models import AvatarData
from ..talent_pkg.modifiers import BaseTalentConfig
from ..talent_pkg.skill_depot import SkillDepot

logger = logging.getLogger("talentforge.avatar.compiled")


@dataclass
class CompiledTalent:
    """Modifiers opened by one talent or proud skill level, with its params."""
    source_id: int
    open_config: str
    modifiers: List[BaseTalentConfig] = field(default_factory=list)
    param_list: List[float] = field(default_factory=list)


class AvatarCompiledData:
    """
    Talent data of one avatar definition, compiled against the loaded configs.

    `talents` keeps the avatar's declared talent order; the order in which
    talents are applied affects the resulting specials.
    """

    def __init__(self, avatar: AvatarData, rules: AbilityDataContainer):
        self.avatar_id = avatar.avatar_id
        self.name = avatar.name
        self.base_depot = SkillDepot.from_ability_configs(
            avatar.avatar_id, rules.get_ability_group(avatar.ability_group)
        )
        if not self.base_depot.abilities:
            logger.warning(f"Avatar {avatar.avatar_id} has no abilities in group '{avatar.ability_group}'")

        self.talents: Dict[int, CompiledTalent] = {}
        for talent_id in avatar.talent_ids:
            talent = rules.avatar_talents.get(talent_id)
            if talent is None:
                logger.warning(f"Avatar {avatar.avatar_id}: talent {talent_id} not found, skipping")
                continue
            self.talents[talent_id] = CompiledTalent(
                source_id=talent_id,
                open_config=talent.open_config,
                modifiers=self._resolve_open_config(rules, talent.open_config),
                param_list=list(talent.param_list),
            )

        # group id -> level -> compiled level
        self.proud_skills: Dict[int, Dict[int, CompiledTalent]] = {}
        for group_id in avatar.proud_skill_group_ids:
            levels = {}
            for proud_skill in rules.get_proud_skill_levels(group_id):
                levels[proud_skill.level] = CompiledTalent(
                    source_id=proud_skill.proud_skill_id,
                    open_config=proud_skill.open_config,
                    modifiers=self._resolve_open_config(rules, proud_skill.open_config),
                    param_list=list(proud_skill.param_list),
                )
            if not levels:
                logger.warning(f"Avatar {avatar.avatar_id}: proud skill group {group_id} has no levels")
            self.proud_skills[group_id] = levels

    def _resolve_open_config(self, rules: AbilityDataContainer, open_config: str) -> List[BaseTalentConfig]:
        if not open_config:
            return []
        modifiers = rules.get_talent_config(open_config)
        if modifiers is None:
            logger.warning(f"Avatar {self.avatar_id}: talent config '{open_config}' not found")
            return []
        return list(modifiers)

    def get_proud_skill_level(self, group_id: int, level: int) -> Optional[CompiledTalent]:
        return self.proud_skills.get(group_id, {}).get(level)

    def get_base_specials(self) -> Dict[str, Dict[str, float]]:
        return self.base_depot.clone().ability_specials


def compile_all_avatars(rules: AbilityDataContainer) -> Dict[int, AvatarCompiledData]:
    """Compiles every loaded avatar definition, keyed by avatar id."""
    compiled = {avatar_id: AvatarCompiledData(avatar, rules) for avatar_id, avatar in rules.avatars.items()}
    logger.info(f"Compiled talent data for {len(compiled)} avatars")
    return compiled
