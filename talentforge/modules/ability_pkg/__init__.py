from .data_loader import AbilityDataContainer
from .hashing import HashCollision, HashIndex, ability_hash
from .models import AvatarData, AvatarTalentData, ConfigAbility, ProudSkillData
