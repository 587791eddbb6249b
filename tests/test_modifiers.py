import pytest
from pydantic import ValidationError

from talentforge.modules.talent_pkg.enums import LogicType
from talentforge.modules.talent_pkg.errors import (
    IndexOutOfRange,
    MalformedReference,
    UnknownAbility,
    UnknownSpecial,
)
from talentforge.modules.talent_pkg.modifiers import (
    AddAbility,
    AddTalentExtraLevel,
    BaseTalentConfig,
    ModifyAbility,
    UnlockTalentParam,
    apply_modifier,
    apply_modifiers,
    parse_modifiers,
)
from talentforge.modules.talent_pkg.predicates import ByTargetAltitude, PredicateContext
from talentforge.modules.talent_pkg.skill_depot import SkillDepot

SKILL = "Avatar_Test_Skill"


def _special(depot, name="Fire_DMG"):
    return depot.ability_specials[SKILL][name]


def test_literal_delta_is_added(depot):
    modifier = ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_delta=5)
    assert apply_modifier(modifier, depot, []) is None
    assert _special(depot) == 15.0


def test_literal_zero_ratio_is_suppressed(depot):
    modifier = ModifyAbility(ability_name=SKILL, param_special="Skill_CD", param_ratio=0)
    assert apply_modifier(modifier, depot, []) is None
    assert _special(depot, "Skill_CD") == 7.0


def test_referenced_zero_ratio_is_applied(depot):
    modifier = ModifyAbility(ability_name=SKILL, param_special="Skill_CD", param_ratio="%0")
    assert apply_modifier(modifier, depot, [0.0]) is None
    assert _special(depot, "Skill_CD") == 0.0


def test_literal_zero_delta_is_still_added(depot):
    modifier = ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_delta=0)
    apply_modifier(modifier, depot, [])
    assert _special(depot) == 10.0


def test_delta_applies_before_ratio(depot):
    modifier = ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_delta="%0", param_ratio="%1")
    apply_modifier(modifier, depot, [2.0, 3.0])
    assert _special(depot) == 36.0


def test_reapplying_compounds(depot):
    modifier = ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_ratio=2)
    apply_modifiers([modifier, modifier], depot, [])
    assert _special(depot) == 40.0


def test_declaration_order_matters():
    add_then_scale = [
        ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_delta=1),
        ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_ratio=3),
    ]
    first = SkillDepot(ability_specials={SKILL: {"Fire_DMG": 1.0}})
    second = SkillDepot(ability_specials={SKILL: {"Fire_DMG": 1.0}})
    apply_modifiers(add_then_scale, first, [])
    apply_modifiers(list(reversed(add_then_scale)), second, [])
    assert _special(first) == 6.0
    assert _special(second) == 4.0


def test_unknown_ability_leaves_depot_unmodified(depot):
    before = depot.to_snapshot()
    modifier = ModifyAbility(ability_name="Avatar_Missing", param_special="Fire_DMG", param_delta=5)
    error = apply_modifier(modifier, depot, [])
    assert isinstance(error, UnknownAbility)
    assert error.ability_name == "Avatar_Missing"
    assert depot.to_snapshot() == before


def test_unknown_special(depot):
    modifier = ModifyAbility(ability_name=SKILL, param_special="Ice_DMG", param_delta=5)
    assert isinstance(apply_modifier(modifier, depot, []), UnknownSpecial)
    assert "Ice_DMG" not in depot.ability_specials[SKILL]


def test_bad_reference_leaves_special_untouched(depot):
    out_of_range = ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_delta=1, param_ratio="%4")
    malformed = ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_delta="%x")
    assert isinstance(apply_modifier(out_of_range, depot, [1.0]), IndexOutOfRange)
    assert isinstance(apply_modifier(malformed, depot, [1.0]), MalformedReference)
    assert _special(depot) == 10.0


def test_failures_do_not_stop_siblings(depot):
    modifiers = [
        ModifyAbility(ability_name="Avatar_Missing", param_special="Fire_DMG", param_delta=5),
        ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_delta="%9"),
        ModifyAbility(ability_name=SKILL, param_special="Fire_DMG", param_delta=5),
    ]
    errors = apply_modifiers(modifiers, depot, [1.0])
    assert [type(e) for e in errors] == [UnknownAbility, IndexOutOfRange]
    assert _special(depot) == 15.0


def test_predicate_gate(depot):
    gated = ModifyAbility(
        ability_name=SKILL,
        param_special="Fire_DMG",
        param_ratio=2,
        predicates=[ByTargetAltitude(logic=LogicType.GREATER_OR_EQUAL, value=5.0)],
    )
    apply_modifier(gated, depot, [], PredicateContext(target_altitude=1.0))
    assert _special(depot) == 10.0
    apply_modifier(gated, depot, [])
    assert _special(depot) == 10.0
    apply_modifier(gated, depot, [], PredicateContext(target_altitude=5.0))
    assert _special(depot) == 20.0


def test_add_ability_is_idempotent(depot):
    modifier = AddAbility(ability_name="Avatar_Test_Extra")
    apply_modifiers([modifier, modifier], depot, [])
    assert depot.abilities == [SKILL, "Avatar_Test_Extra"]
    assert depot.ability_specials["Avatar_Test_Extra"] == {}


def test_add_ability_keeps_existing_specials(depot):
    apply_modifier(AddAbility(ability_name=SKILL), depot, [])
    assert _special(depot) == 10.0


def test_unlock_talent_param(depot):
    modifier = UnlockTalentParam(ability_name=SKILL, talent_param="Test_Extend")
    apply_modifiers([modifier, modifier], depot, [])
    assert depot.unlocked_talent_params == {SKILL: ["Test_Extend"]}


def test_add_talent_extra_level(depot):
    modifier = AddTalentExtraLevel(talent_type="Skill", extra_level=3)
    apply_modifiers([modifier, modifier], depot, [])
    assert depot.extra_talent_levels == {"Skill": 6}


def test_parse_modifiers_from_config_records():
    modifiers = parse_modifiers([
        {"$type": "ModifyAbility", "abilityName": SKILL, "paramSpecial": "Fire_DMG", "paramDelta": "%0", "paramRatio": 1.5},
        {"$type": "AddAbility", "abilityName": "Avatar_Test_Extra"},
        {"$type": "UnlockTalentParam", "abilityName": SKILL, "talentParam": "Test_Extend"},
        {"$type": "AddTalentExtraLevel", "talentType": "Burst", "extraLevel": 3},
    ])
    assert [type(m) for m in modifiers] == [ModifyAbility, AddAbility, UnlockTalentParam, AddTalentExtraLevel]
    assert modifiers[0].param_delta == "%0"
    assert modifiers[0].param_ratio == 1.5


def test_parse_gated_modifier():
    (modifier,) = parse_modifiers([{
        "$type": "ModifyAbility",
        "abilityName": SKILL,
        "paramSpecial": "Fire_DMG",
        "predicates": [{"$type": "ByTargetAltitude", "logic": "Greater", "value": 2}],
    }])
    assert modifier.is_gated()
    assert isinstance(modifier.predicates[0], ByTargetAltitude)


def test_unknown_modifier_type_is_rejected():
    with pytest.raises(ValidationError):
        parse_modifiers([{"$type": "ModifySkillPoint", "abilityName": SKILL}])


def test_base_config_must_be_overridden(depot):
    with pytest.raises(NotImplementedError):
        BaseTalentConfig().apply(depot, [])
