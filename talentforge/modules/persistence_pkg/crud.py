# crud.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from ..talent_pkg.skill_depot import SkillDepot
from . import models

logger = logging.getLogger("talentforge.persistence.crud")


def get_record(db: Session, avatar_guid: str) -> Optional[models.AvatarSpecialsRecord]:
    return (
        db.query(models.AvatarSpecialsRecord)
        .filter(models.AvatarSpecialsRecord.avatar_guid == avatar_guid)
        .first()
    )


def upsert_snapshot(
    db: Session, owner_uid: int, avatar_id: int, avatar_guid: str, snapshot: Dict[str, Any]
) -> models.AvatarSpecialsRecord:
    """
    Inserts or replaces the stored snapshot of one avatar. Does not commit.
    """
    record = get_record(db, avatar_guid)
    if record is None:
        record = models.AvatarSpecialsRecord(
            avatar_guid=avatar_guid, owner_uid=owner_uid, avatar_id=avatar_id, snapshot=snapshot
        )
        db.add(record)
    else:
        record.owner_uid = owner_uid
        record.snapshot = snapshot
        flag_modified(record, "snapshot")
    return record


def save_avatar_snapshot(db: Session, owner_uid: int, avatar) -> models.AvatarSpecialsRecord:
    """
    Persists an avatar's current state immediately.

    Args:
        db (Session): The database session.
        owner_uid (int): Game uid of the owning player.
        avatar (Avatar): The live avatar to store.

    Returns:
        models.AvatarSpecialsRecord: The stored record.
    """
    record = upsert_snapshot(db, owner_uid, avatar.avatar_id, avatar.guid, avatar.to_snapshot())
    db.commit()
    db.refresh(record)
    logger.info(f"Saved specials of avatar {avatar.avatar_id} ({avatar.guid}) for owner {owner_uid}")
    return record


def save_depot_snapshot(
    db: Session, owner_uid: int, avatar_id: int, avatar_guid: str, depot: SkillDepot
) -> models.AvatarSpecialsRecord:
    """Stores only the skill depot of an avatar, keeping the rest of any stored snapshot."""
    record = get_record(db, avatar_guid)
    snapshot = dict(record.snapshot) if record is not None else {"guid": avatar_guid, "avatarId": avatar_id}
    snapshot["depot"] = depot.to_snapshot()
    record = upsert_snapshot(db, owner_uid, avatar_id, avatar_guid, snapshot)
    db.commit()
    db.refresh(record)
    return record


def load_avatar_snapshot(db: Session, avatar_guid: str) -> Optional[Dict[str, Any]]:
    record = get_record(db, avatar_guid)
    return dict(record.snapshot) if record is not None else None


def load_depot_snapshot(db: Session, avatar_guid: str) -> Optional[SkillDepot]:
    """Reloads only the skill depot of a stored avatar."""
    snapshot = load_avatar_snapshot(db, avatar_guid)
    if snapshot is None or not snapshot.get("depot"):
        return None
    return SkillDepot.from_snapshot(snapshot["depot"])


def list_owner_snapshots(db: Session, owner_uid: int) -> List[Dict[str, Any]]:
    records = (
        db.query(models.AvatarSpecialsRecord)
        .filter(models.AvatarSpecialsRecord.owner_uid == owner_uid)
        .order_by(models.AvatarSpecialsRecord.id)
        .all()
    )
    return [dict(r.snapshot) for r in records]
