from enum import Enum


class LogicType(str, Enum):
    """Comparison operators used by threshold predicates."""
    EQUAL = "Equal"
    NOT_EQUAL = "NotEqual"
    GREATER = "Greater"
    GREATER_OR_EQUAL = "GreaterOrEqual"
    LESSER = "Lesser"
    LESSER_OR_EQUAL = "LesserOrEqual"


class AbilityState(str, Enum):
    ELEMENT_FREEZE = "ElementFreeze"
    ELEMENT_WET = "ElementWet"
    MUTE_TAUNT = "MuteTaunt"
