# talentforge/modules/abilities.py
"""
Entry points other parts of the server use to reach ability data.

Data is loaded lazily on first access from the configured data directory.
"""
import logging
import threading
from typing import Any, Dict, Optional

from ..config import get_config
from .ability_pkg.data_loader import AbilityDataContainer
from .avatar_pkg.avatar import Avatar
from .avatar_pkg.compiled import AvatarCompiledData, compile_all_avatars

logger = logging.getLogger("talentforge.abilities")

_avatar_info: Dict[int, AvatarCompiledData] = {}
_avatar_info_lock = threading.Lock()


def get_rules() -> AbilityDataContainer:
    """Returns the loaded data container, loading it on first use."""
    rules = AbilityDataContainer.get_instance(get_config().data_directory)
    if not rules.is_loaded:
        rules.load_all()
    return rules


def _compile_avatars(rules: AbilityDataContainer) -> None:
    global _avatar_info
    _avatar_info = compile_all_avatars(rules)


def get_avatar_info(avatar_id: int) -> Optional[AvatarCompiledData]:
    rules = get_rules()
    with _avatar_info_lock:
        if not _avatar_info and rules.avatars:
            _compile_avatars(rules)
        return _avatar_info.get(avatar_id)


def create_avatar(avatar_id: int, **kwargs: Any) -> Optional[Avatar]:
    """Creates a live avatar from its compiled data, with specials already calculated."""
    compiled = get_avatar_info(avatar_id)
    if compiled is None:
        logger.warning(f"create_avatar: unknown avatar {avatar_id}")
        return None
    avatar = Avatar(compiled, **kwargs)
    avatar.recalculate_specials()
    return avatar


def lookup_ability_hash(ability_hash: int) -> str:
    """Translates a client-sent name hash back into its config name ("unknown" if absent)."""
    return get_rules().hash_index.describe(ability_hash)


def reload_all() -> Dict[str, Any]:
    """Hot-reloads ability data and recompiles avatars."""
    rules = AbilityDataContainer.get_instance(get_config().data_directory)
    summary = rules.reload()
    with _avatar_info_lock:
        _compile_avatars(rules)
    logger.info("Ability data reloaded")
    return summary


def reset() -> None:
    """Drops the loaded data and compiled avatars (primarily for testing)."""
    AbilityDataContainer.reset_instance()
    with _avatar_info_lock:
        _avatar_info.clear()
