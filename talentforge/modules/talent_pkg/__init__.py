from .errors import (
    IndexOutOfRange,
    MalformedReference,
    TalentEngineError,
    UnknownAbility,
    UnknownSpecial,
)
from .modifiers import (
    AddAbility,
    AddTalentExtraLevel,
    ModifyAbility,
    TalentModifier,
    UnlockTalentParam,
    apply_modifier,
    apply_modifiers,
    parse_modifiers,
)
from .param_refs import resolve_param_reference
from .predicates import PredicateContext, evaluate_predicate
from .skill_depot import SkillDepot
