"""
Pytest fixtures for the talentforge test suite.

Provides the bundled ability data, fresh skill depots, and isolation of the
process-wide data container between tests.
"""
import pytest

from talentforge.config import set_config
from talentforge.modules import abilities
from talentforge.modules.ability_pkg.data_loader import AbilityDataContainer
from talentforge.modules.talent_pkg.skill_depot import SkillDepot


@pytest.fixture(autouse=True)
def isolated_singletons():
    """Every test starts without loaded data or cached config."""
    abilities.reset()
    set_config(None)
    yield
    abilities.reset()
    set_config(None)


@pytest.fixture
def rules():
    """A container loaded from the bundled data directory."""
    container = AbilityDataContainer()
    container.load_all()
    return container


@pytest.fixture
def depot():
    return SkillDepot(
        depot_id=1,
        abilities=["Avatar_Test_Skill"],
        ability_specials={"Avatar_Test_Skill": {"Fire_DMG": 10.0, "Skill_CD": 7.0}},
    )
