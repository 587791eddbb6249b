# talentforge/modules/talent_pkg/param_refs.py
"""
Resolution of talent parameter references.

A delta or ratio in a talent config is either absent, a literal number, or a
string such as "%1" that indexes into the param list of the talent level or
proud skill level being applied.
"""
import re
from typing import Optional, Sequence, Union

from .errors import IndexOutOfRange, MalformedReference

ParamValue = Optional[Union[float, int, str]]

REFERENCE_MARKER = "%"
_INDEX_PATTERN = re.compile(r"^\s*([+-]?)([0-9]+)\s*$")


def is_reference(value: ParamValue) -> bool:
    """Returns True when the value is an indexed reference rather than a literal."""
    return isinstance(value, str)


def is_literal_zero(value: ParamValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def parse_reference_index(reference: str) -> int:
    """
    Parses the param list index encoded in a reference string.

    Every marker character is removed before the remainder is parsed, so
    "%2", "2" and "%%2" all address index 2.

    Raises:
        MalformedReference: If the remainder is not a non-negative integer.
    """
    match = _INDEX_PATTERN.match(reference.replace(REFERENCE_MARKER, ""))
    if match is None:
        raise MalformedReference(reference)
    sign, digits = match.groups()
    index = int(digits)
    if sign == "-" and index != 0:
        raise MalformedReference(reference)
    return index


def resolve_param_reference(value: ParamValue, param_list: Sequence[float]) -> Optional[float]:
    """
    Resolves a delta/ratio value against a param list.

    Args:
        value: None, a literal number, or an indexed reference string.
        param_list: The params of the talent or proud skill level being applied.

    Returns:
        Optional[float]: The resolved number, or None when the value is absent.

    Raises:
        MalformedReference: If the value is neither a number nor a valid reference.
        IndexOutOfRange: If the referenced index is past the end of param_list.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise MalformedReference(value)
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise MalformedReference(value)

    index = parse_reference_index(value)
    if index >= len(param_list):
        raise IndexOutOfRange(index, len(param_list))
    return float(param_list[index])
