# talentforge/modules/ability_pkg/hashing.py
"""
Reverse lookup from ability name hashes back to the names they came from.

Clients refer to abilities, specials and modifiers by a 32-bit hash of their
config name. The index is built once from every loaded ability config and is
read-only afterwards, so it can be shared across threads without locking.
"""
import logging
import struct
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from .models import ConfigAbility

logger = logging.getLogger("talentforge.ability.hashing")

UNKNOWN_NAME = "unknown"


def ability_hash(name: str) -> int:
    """
    Hashes a config name the way the client does.

    h = h * 131 + c over the UTF-16 code units of the name, kept to an
    unsigned 32-bit value.
    """
    value = 0
    for (unit,) in struct.iter_unpack("<H", name.encode("utf-16-le")):
        value = (value * 131 + unit) & 0xFFFFFFFF
    return value


@dataclass(frozen=True)
class HashCollision:
    """Two different names hashed to the same value; `replacement` won."""
    hash_value: int
    previous: str
    replacement: str


class HashIndex:
    """Immutable hash -> name mapping. Build it with `HashIndex.build`."""

    def __init__(self, names: Dict[int, str], collisions: List[HashCollision]):
        self._names = dict(names)
        self._collisions = tuple(collisions)

    @classmethod
    def build(
        cls,
        configs: Iterable[ConfigAbility],
        hash_fn: Callable[[str], int] = ability_hash,
    ) -> "HashIndex":
        """
        Indexes every ability name, special name and modifier name.

        If two different names share a hash the later one overwrites the
        earlier; the collision is logged and kept on `collisions`.
        """
        names: Dict[int, str] = {}
        collisions: List[HashCollision] = []

        def insert(name: str) -> None:
            key = hash_fn(name) & 0xFFFFFFFF
            previous = names.get(key)
            if previous is not None and previous != name:
                logger.warning(f"Ability hash collision on {key}: '{previous}' replaced by '{name}'")
                collisions.append(HashCollision(key, previous, name))
            names[key] = name

        for config in configs:
            insert(config.ability_name)
            for special in config.ability_specials:
                insert(special)
            for modifier in config.modifiers:
                insert(modifier)

        logger.info(f"Built ability hash index with {len(names)} names ({len(collisions)} collisions)")
        return cls(names, collisions)

    @property
    def names(self) -> Mapping[int, str]:
        return MappingProxyType(self._names)

    @property
    def collisions(self) -> tuple:
        return self._collisions

    def lookup(self, hash_value: int) -> Optional[str]:
        """The indexed name, or None. Use `describe` where "unknown" is wanted for a miss."""
        return self._names.get(hash_value & 0xFFFFFFFF)

    def describe(self, hash_value: int) -> str:
        """Returns the name for a hash, or "unknown" when it was never indexed."""
        name = self.lookup(hash_value)
        return name if name is not None else UNKNOWN_NAME

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, hash_value: int) -> bool:
        return (hash_value & 0xFFFFFFFF) in self._names
