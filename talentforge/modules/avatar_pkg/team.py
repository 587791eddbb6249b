# talentforge/modules/avatar_pkg/team.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional

from ...config import get_config
from .avatar import Avatar

logger = logging.getLogger("talentforge.avatar.team")


class TeamInfo:
    """
    Ordered avatar slots of one team.

    Tower teams hold clones of the avatars they were built from, so later
    changes to the originals don't leak into them, and they can't be edited
    once built.
    """

    def __init__(
        self,
        name: str = "",
        avatars: Optional[Iterable[Avatar]] = None,
        is_tower_team: bool = False,
        max_size: Optional[int] = None,
    ):
        self.team_name = name
        self.max_size = max_size if max_size is not None else get_config().team_size_limit
        self.avatars: List[Avatar] = []
        self.is_tower_team = False

        members = list(avatars or [])
        if is_tower_team and members:
            # Each clone gets its own depot and guid.
            with ThreadPoolExecutor() as pool:
                members = list(pool.map(Avatar.clone, members))
        for avatar in members:
            if not self.add_avatar(avatar):
                logger.warning(f"Team '{name}': could not add {avatar}")
        self.is_tower_team = is_tower_team

    def _contains(self, avatar: Avatar) -> bool:
        return any(member.guid == avatar.guid for member in self.avatars)

    def add_avatar(self, avatar: Avatar, index: Optional[int] = None) -> bool:
        """
        Puts an avatar in a slot. An index inside the team replaces that slot;
        None or an index past the end appends.
        """
        if self.is_tower_team or self._contains(avatar):
            return False
        replacing = index is not None and 0 <= index < len(self.avatars)
        if not replacing and len(self.avatars) >= self.max_size:
            return False

        if replacing:
            self.avatars[index] = avatar
        else:
            self.avatars.append(avatar)
        return True

    def remove_avatar(self, slot: int) -> bool:
        if self.is_tower_team or not 0 <= slot < len(self.avatars):
            return False
        del self.avatars[slot]
        return True

    def copy_from(self, team: "TeamInfo", max_team_size: Optional[int] = None) -> bool:
        limit = max_team_size if max_team_size is not None else self.max_size
        if self.is_tower_team or len(team.avatars) > limit:
            return False
        self.avatars = list(team.avatars)
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "teamName": self.team_name,
            "avatarGuids": [avatar.guid for avatar in self.avatars],
            "isTowerTeam": self.is_tower_team,
        }
