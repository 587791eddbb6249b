# talentforge/modules/avatar_pkg/avatar.py
import copy
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from ..talent_pkg.errors import TalentEngineError
from ..talent_pkg.modifiers import apply_modifiers
from ..talent_pkg.predicates import PredicateContext
from ..talent_pkg.skill_depot import SkillDepot
from .compiled import AvatarCompiledData

logger = logging.getLogger("talentforge.avatar")


class Avatar:
    """
    A live avatar owned by one player.

    The avatar's depot starts as a clone of the compiled base depot; talent
    and proud skill modifiers are applied on top of it by recalculate_specials.
    """

    def __init__(
        self,
        compiled: AvatarCompiledData,
        unlocked_talent_ids: Optional[Iterable[int]] = None,
        proud_skill_levels: Optional[Dict[int, int]] = None,
        guid: Optional[str] = None,
    ):
        self.compiled = compiled
        self.guid = guid or str(uuid.uuid4())
        self.unlocked_talent_ids = set(unlocked_talent_ids or [])
        self.proud_skill_levels: Dict[int, int] = dict(proud_skill_levels or {})
        self.depot: SkillDepot = compiled.base_depot.clone()

    @property
    def avatar_id(self) -> int:
        return self.compiled.avatar_id

    def unlock_talent(self, talent_id: int) -> bool:
        """Unlocks a talent declared for this avatar. Returns False if unknown or already unlocked."""
        if talent_id not in self.compiled.talents or talent_id in self.unlocked_talent_ids:
            return False
        self.unlocked_talent_ids.add(talent_id)
        return True

    def set_proud_skill_level(self, group_id: int, level: int) -> bool:
        if self.compiled.get_proud_skill_level(group_id, level) is None:
            logger.warning(f"Avatar {self.avatar_id}: no proud skill group {group_id} at level {level}")
            return False
        self.proud_skill_levels[group_id] = level
        return True

    def recalculate_specials(self, context: Optional[PredicateContext] = None) -> List[TalentEngineError]:
        """
        Rebuilds the depot from the base depot and reapplies every unlocked
        talent and the current level of each proud skill group, both in the
        order the avatar declares them.

        Returns:
            List[TalentEngineError]: Errors of modifiers that could not apply.
        """
        depot = self.compiled.base_depot.clone()
        errors: List[TalentEngineError] = []

        for talent_id, talent in self.compiled.talents.items():
            if talent_id in self.unlocked_talent_ids:
                errors.extend(apply_modifiers(talent.modifiers, depot, talent.param_list, context))

        # Declared group order, not the order levels were set in.
        for group_id in self.compiled.proud_skills:
            level = self.proud_skill_levels.get(group_id)
            if level is None:
                continue
            proud_skill = self.compiled.get_proud_skill_level(group_id, level)
            if proud_skill is not None:
                errors.extend(apply_modifiers(proud_skill.modifiers, depot, proud_skill.param_list, context))

        self.depot = depot
        if errors:
            logger.warning(f"Avatar {self.avatar_id} ({self.guid}): {len(errors)} modifiers failed to apply")
        return errors

    def clone(self) -> "Avatar":
        """An independent copy with a new guid; the compiled data stays shared."""
        twin = Avatar(self.compiled, self.unlocked_talent_ids, self.proud_skill_levels)
        twin.depot = self.depot.clone()
        return twin

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            "guid": self.guid,
            "avatarId": self.avatar_id,
            "unlockedTalentIds": sorted(self.unlocked_talent_ids),
            "proudSkillLevels": {str(k): v for k, v in self.proud_skill_levels.items()},
            "depot": self.depot.to_snapshot(),
        }

    @classmethod
    def from_snapshot(cls, compiled: AvatarCompiledData, snapshot: Dict[str, Any]) -> "Avatar":
        avatar = cls(
            compiled,
            unlocked_talent_ids=snapshot.get("unlockedTalentIds", []),
            proud_skill_levels={int(k): v for k, v in snapshot.get("proudSkillLevels", {}).items()},
            guid=snapshot.get("guid"),
        )
        if snapshot.get("depot"):
            avatar.depot = SkillDepot.from_snapshot(copy.deepcopy(snapshot["depot"]))
        return avatar

    def __repr__(self) -> str:
        return f"<Avatar {self.compiled.name} id={self.avatar_id} guid={self.guid}>"
