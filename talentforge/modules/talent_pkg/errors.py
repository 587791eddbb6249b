"""Exceptions raised while applying talent modifiers to a skill depot."""


class TalentEngineError(Exception):
    """Base exception for modifier application and reference resolution."""


class UnknownAbility(TalentEngineError):
    """Raised when a modifier targets an ability the depot does not have."""

    def __init__(self, ability_name: str):
        self.ability_name = ability_name
        super().__init__(f"Ability '{ability_name}' not found in skill depot")


class UnknownSpecial(TalentEngineError):
    """Raised when a modifier targets a special missing from the ability's table."""

    def __init__(self, ability_name: str, special_name: str):
        self.ability_name = ability_name
        self.special_name = special_name
        super().__init__(f"Special '{special_name}' not found on ability '{ability_name}'")


class MalformedReference(TalentEngineError):
    """Raised when a parameter reference is not a valid non-negative index."""

    def __init__(self, reference):
        self.reference = reference
        super().__init__(f"Malformed parameter reference: {reference!r}")


class IndexOutOfRange(TalentEngineError):
    """Raised when a parameter reference points past the end of the param list."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Parameter index {index} out of range for param list of length {length}")
