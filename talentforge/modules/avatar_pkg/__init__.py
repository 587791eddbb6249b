from .avatar import Avatar
from .compiled import AvatarCompiledData, CompiledTalent, compile_all_avatars
from .team import TeamInfo
