"""
Ability Data Loader with Validation and Singleton Pattern

This module provides:
- AbilityDataContainer singleton holding every loaded ability, talent and avatar record
- Pydantic-based validation; invalid records are reported and skipped
- Thread-safe initialization and hot reload
- The ability name hash index, built once per load
"""
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ..talent_pkg.modifiers import BaseTalentConfig, modifier_adapter
from .hashing import HashIndex
from .models import AvatarData, AvatarTalentData, ConfigAbility, ProudSkillData

logger = logging.getLogger("talentforge.ability.data_loader")

ABILITY_CONFIGS_FILE = "ability_configs.json"
TALENT_CONFIGS_FILE = "talent_configs.json"
AVATAR_TALENTS_FILE = "avatar_talents.json"
PROUD_SKILLS_FILE = "proud_skills.json"
AVATARS_FILE = "avatars.json"


def get_default_data_directory() -> Path:
    return Path(__file__).parent / "data"


class AbilityDataContainer:
    """Thread-safe singleton container for loaded ability data.

    All records are loaded once at startup and cached for fast access.
    A load builds every table off to the side and swaps them in only when
    it succeeds, so readers never see a half-loaded container and a failed
    reload keeps the previous data.
    """

    _instance: Optional["AbilityDataContainer"] = None
    _instance_lock = threading.Lock()

    def __init__(self, data_directory: Optional[Union[str, Path]] = None):
        self.data_directory: Path = (
            Path(data_directory) if data_directory is not None else get_default_data_directory()
        )
        self._lock = threading.Lock()
        self._initialized = False

        self.ability_groups: Dict[str, List[ConfigAbility]] = {}
        self.talent_configs: Dict[str, List[BaseTalentConfig]] = {}
        self.avatar_talents: Dict[int, AvatarTalentData] = {}
        self.proud_skills: Dict[int, ProudSkillData] = {}
        self.avatars: Dict[int, AvatarData] = {}
        self.hash_index: HashIndex = HashIndex({}, [])
        self.load_errors: List[Dict[str, Any]] = []
        logger.info(f"AbilityDataContainer created for {self.data_directory} (not yet loaded)")

    @classmethod
    def get_instance(cls, data_directory: Optional[Union[str, Path]] = None) -> "AbilityDataContainer":
        """Get or create the singleton instance."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls(data_directory)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton (primarily for testing)."""
        with cls._instance_lock:
            cls._instance = None

    @property
    def is_loaded(self) -> bool:
        return self._initialized

    def _record_error(self, errors: List[Dict[str, Any]], filename: str, error_type: str, message: str) -> None:
        logger.error(f"{filename}: {message}")
        errors.append({"file": filename, "error_type": error_type, "message": message})

    def _load_json_file(self, errors: List[Dict[str, Any]], filename: str, default: Any) -> Any:
        """Load and parse a JSON file, recording failures instead of raising.

        Args:
            errors: Error list of the load in progress
            filename: Name of JSON file to load
            default: Value returned when the file is missing or unreadable
        """
        filepath = self.data_directory / filename
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            logger.info(f"Loaded: {filename}")
            return data
        except FileNotFoundError:
            self._record_error(errors, filename, "FileNotFoundError", f"File not found at {filepath}")
        except json.JSONDecodeError as e:
            self._record_error(errors, filename, "JSONDecodeError", f"Invalid JSON: {e}")
        return default

    def _validate(self, errors: List[Dict[str, Any]], filename: str, model, raw: Any, where: str):
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            self._record_error(errors, filename, "ValidationError", f"{where}: {e}")
            return None

    def _load_ability_groups(self, errors: List[Dict[str, Any]]) -> Dict[str, List[ConfigAbility]]:
        raw = self._load_json_file(errors, ABILITY_CONFIGS_FILE, {})
        groups = {}
        for group_name, entries in raw.items():
            if not isinstance(entries, list):
                self._record_error(errors, ABILITY_CONFIGS_FILE, "ValidationError", f"{group_name}: expected a list")
                continue
            configs = []
            for i, entry in enumerate(entries):
                config = self._validate(errors, ABILITY_CONFIGS_FILE, ConfigAbility, entry, f"{group_name}[{i}]")
                if config is not None:
                    configs.append(config)
            groups[group_name] = configs
        return groups

    def _load_talent_configs(self, errors: List[Dict[str, Any]]) -> Dict[str, List[BaseTalentConfig]]:
        raw = self._load_json_file(errors, TALENT_CONFIGS_FILE, {})
        talent_configs = {}
        for config_name, records in raw.items():
            if not isinstance(records, list):
                self._record_error(errors, TALENT_CONFIGS_FILE, "ValidationError", f"{config_name}: expected a list")
                continue
            modifiers = []
            for i, record in enumerate(records):
                try:
                    modifiers.append(modifier_adapter.validate_python(record))
                except ValidationError as e:
                    self._record_error(errors, TALENT_CONFIGS_FILE, "ValidationError", f"{config_name}[{i}]: {e}")
            talent_configs[config_name] = modifiers
        return talent_configs

    def _load_keyed_list(self, errors: List[Dict[str, Any]], filename: str, model, key: str) -> Dict[int, Any]:
        raw = self._load_json_file(errors, filename, [])
        records = {}
        for i, entry in enumerate(raw):
            record = self._validate(errors, filename, model, entry, f"[{i}]")
            if record is not None:
                records[getattr(record, key)] = record
        return records

    def _load_locked(self) -> Dict[str, Any]:
        """Loads every file and swaps the result in. Caller holds self._lock."""
        logger.info("Loading ability data from %s", self.data_directory)
        errors: List[Dict[str, Any]] = []

        try:
            ability_groups = self._load_ability_groups(errors)
            talent_configs = self._load_talent_configs(errors)
            avatar_talents = self._load_keyed_list(errors, AVATAR_TALENTS_FILE, AvatarTalentData, "talent_id")
            proud_skills = self._load_keyed_list(errors, PROUD_SKILLS_FILE, ProudSkillData, "proud_skill_id")
            avatars = self._load_keyed_list(errors, AVATARS_FILE, AvatarData, "avatar_id")
            hash_index = HashIndex.build(
                config for configs in ability_groups.values() for config in configs
            )
        except Exception as e:
            logger.exception("Fatal error during ability data loading")
            raise ValueError(f"Failed to load ability data: {e}") from e

        self.ability_groups = ability_groups
        self.talent_configs = talent_configs
        self.avatar_talents = avatar_talents
        self.proud_skills = proud_skills
        self.avatars = avatars
        self.hash_index = hash_index
        self.load_errors = errors
        self._initialized = True

        summary = self.get_summary()
        for key, value in summary.items():
            logger.info(f"  {key}: {value}")
        if errors:
            logger.warning(f"Loaded with {len(errors)} errors")
        return summary

    def load_all(self) -> Dict[str, Any]:
        """Load and validate all ability data.

        Returns:
            Summary dictionary of loaded data

        Raises:
            ValueError: If loading fails for a reason other than bad records
        """
        with self._lock:
            if self._initialized:
                logger.warning("Already initialized, skipping reload")
                return self.get_summary()
            return self._load_locked()

    def reload(self) -> Dict[str, Any]:
        """Load again from disk. On failure the previously loaded data stays in place."""
        with self._lock:
            return self._load_locked()

    def get_summary(self) -> Dict[str, int]:
        return {
            "ability_groups": len(self.ability_groups),
            "abilities": sum(len(configs) for configs in self.ability_groups.values()),
            "talent_configs": len(self.talent_configs),
            "avatar_talents": len(self.avatar_talents),
            "proud_skills": len(self.proud_skills),
            "avatars": len(self.avatars),
            "hashed_names": len(self.hash_index),
            "hash_collisions": len(self.hash_index.collisions),
            "load_errors": len(self.load_errors),
        }

    # Convenience accessors
    def get_ability_group(self, group_name: str) -> List[ConfigAbility]:
        return self.ability_groups.get(group_name, [])

    def get_talent_config(self, config_name: str) -> Optional[List[BaseTalentConfig]]:
        return self.talent_configs.get(config_name)

    def get_avatar(self, avatar_id: int) -> Optional[AvatarData]:
        return self.avatars.get(avatar_id)

    def get_proud_skill_levels(self, group_id: int) -> List[ProudSkillData]:
        """All levels of a proud skill group, lowest level first."""
        levels = [p for p in self.proud_skills.values() if p.proud_skill_group_id == group_id]
        return sorted(levels, key=lambda p: p.level)
