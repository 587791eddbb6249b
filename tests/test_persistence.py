import pytest
from sqlalchemy.exc import OperationalError

from talentforge.modules import abilities
from talentforge.modules.persistence_pkg import crud
from talentforge.modules.persistence_pkg.bulk_writer import BulkWriter
from talentforge.modules.persistence_pkg.database import build_engine, build_session_factory, init_db

EMBER_ID = 10000001
ART = "Avatar_Ember_ElementalArt"


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    init_db(bind=engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def ember():
    avatar = abilities.create_avatar(EMBER_ID, unlocked_talent_ids=[101, 102])
    assert avatar is not None
    return avatar


def test_save_and_load_snapshot(db, ember):
    record = crud.save_avatar_snapshot(db, owner_uid=42, avatar=ember)
    assert record.id is not None
    assert record.avatar_id == EMBER_ID

    snapshot = crud.load_avatar_snapshot(db, ember.guid)
    assert snapshot["unlockedTalentIds"] == [101, 102]
    depot = crud.load_depot_snapshot(db, ember.guid)
    assert depot.ability_specials[ART]["Skill_CD"] == pytest.approx(9.6)
    assert depot.unlocked_talent_params == ember.depot.unlocked_talent_params


def test_save_replaces_existing_snapshot(db, ember):
    crud.save_avatar_snapshot(db, 42, ember)
    ember.unlock_talent(103)
    ember.recalculate_specials()
    crud.save_avatar_snapshot(db, 42, ember)

    assert len(crud.list_owner_snapshots(db, 42)) == 1
    assert crud.load_depot_snapshot(db, ember.guid).extra_talent_levels == {"Skill": 3}


def test_save_depot_snapshot_keeps_avatar_state(db, ember):
    crud.save_avatar_snapshot(db, 42, ember)
    depot = ember.depot.clone()
    depot.set_special(ART, "Fire_DMG", 5.0)
    crud.save_depot_snapshot(db, 42, EMBER_ID, ember.guid, depot)

    snapshot = crud.load_avatar_snapshot(db, ember.guid)
    assert snapshot["unlockedTalentIds"] == [101, 102]
    assert crud.load_depot_snapshot(db, ember.guid).ability_specials[ART]["Fire_DMG"] == 5.0


def test_save_depot_snapshot_for_new_avatar(db, depot):
    crud.save_depot_snapshot(db, 3, 99, "fresh-guid", depot)
    assert crud.load_avatar_snapshot(db, "fresh-guid")["avatarId"] == 99
    assert crud.load_depot_snapshot(db, "fresh-guid").ability_specials == depot.ability_specials


def test_missing_snapshot(db):
    assert crud.load_avatar_snapshot(db, "no-such-guid") is None
    assert crud.load_depot_snapshot(db, "no-such-guid") is None


def test_list_owner_snapshots(db, ember):
    other = ember.clone()
    crud.save_avatar_snapshot(db, 1, ember)
    crud.save_avatar_snapshot(db, 1, other)
    crud.save_avatar_snapshot(db, 2, abilities.create_avatar(EMBER_ID))
    assert [s["guid"] for s in crud.list_owner_snapshots(db, 1)] == [ember.guid, other.guid]


def test_bulk_writer_keeps_latest_snapshot(session_factory, db, ember):
    writer = BulkWriter(session_factory, interval_seconds=60)
    writer.queue_avatar(7, ember)
    ember.unlock_talent(103)
    ember.recalculate_specials()
    writer.queue_avatar(7, ember)
    writer.queue_avatar(7, ember.clone())
    assert writer.pending_count == 2

    assert writer.flush() == 2
    assert writer.pending_count == 0
    assert writer.flush() == 0
    assert crud.load_depot_snapshot(db, ember.guid).extra_talent_levels == {"Skill": 3}
    assert len(crud.list_owner_snapshots(db, 7)) == 2


def test_bulk_writer_snapshot_is_taken_when_queued(session_factory, db, ember):
    writer = BulkWriter(session_factory)
    writer.queue_avatar(7, ember)
    ember.depot.set_special(ART, "Skill_CD", 0.5)
    writer.flush()
    assert crud.load_depot_snapshot(db, ember.guid).ability_specials[ART]["Skill_CD"] == pytest.approx(9.6)


def test_bulk_writer_requeues_failed_batch(ember):
    engine = build_engine("sqlite://")  # no tables
    writer = BulkWriter(build_session_factory(engine))
    writer.queue_avatar(7, ember)
    with pytest.raises(OperationalError):
        writer.flush()
    assert writer.pending_count == 1
    engine.dispose()


def test_bulk_writer_stop_flushes(session_factory, db, ember):
    writer = BulkWriter(session_factory, interval_seconds=60)
    writer.start()
    writer.queue_avatar(7, ember)
    writer.stop()
    assert writer.pending_count == 0
    assert crud.load_avatar_snapshot(db, ember.guid) is not None
