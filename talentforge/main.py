import logging
from typing import Dict, List

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from talentforge.config import get_config
from talentforge.modules import abilities
from talentforge.modules.persistence_pkg import crud
from talentforge.modules.persistence_pkg.bulk_writer import BulkWriter
from talentforge.modules.persistence_pkg.database import build_engine, build_session_factory, init_db

# Initialize Logging
logging.basicConfig(level=get_config().log_level)
logger = logging.getLogger("talentforge.api")

app = FastAPI(title="Talentforge Ability API", version="1.0.0")


class AvatarCreateRequest(BaseModel):
    unlocked_talent_ids: List[int] = Field(default_factory=list)
    proud_skill_levels: Dict[int, int] = Field(
        default_factory=dict, description="Proud skill group id -> level."
    )


@app.on_event("startup")
async def startup_event():
    """Load ability data, open the database and start the bulk writer."""
    config = get_config()
    summary = abilities.get_rules().get_summary()
    logger.info(f"Ability data ready: {summary}")

    engine = build_engine(config.database_url)
    init_db(bind=engine)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.bulk_writer = BulkWriter(app.state.session_factory, config.bulk_write_interval_seconds)
    app.state.bulk_writer.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Write out queued snapshots before the process exits."""
    app.state.bulk_writer.stop(flush=True)
    app.state.engine.dispose()


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@app.get("/abilities/hash/{ability_hash}", tags=["Abilities"])
def lookup_hash_endpoint(ability_hash: int):
    """Translates a client-sent ability name hash back into its config name."""
    return {"hash": ability_hash, "name": abilities.lookup_ability_hash(ability_hash)}


@app.get("/avatars/{avatar_id}/specials", tags=["Avatars"])
def avatar_specials_endpoint(avatar_id: int):
    """Base ability specials of an avatar, before any talent is applied."""
    compiled = abilities.get_avatar_info(avatar_id)
    if compiled is None:
        raise HTTPException(status_code=404, detail=f"Avatar {avatar_id} not found")
    return {"avatarId": avatar_id, "name": compiled.name, "abilitySpecials": compiled.get_base_specials()}


@app.post("/owners/{owner_uid}/avatars/{avatar_id}", tags=["Avatars"])
def create_avatar_endpoint(owner_uid: int, avatar_id: int, request: AvatarCreateRequest):
    """
    Creates a live avatar with the given talents and proud skill levels,
    calculates its specials and queues it for the next bulk write.
    """
    avatar = abilities.create_avatar(
        avatar_id,
        unlocked_talent_ids=request.unlocked_talent_ids,
        proud_skill_levels=request.proud_skill_levels,
    )
    if avatar is None:
        raise HTTPException(status_code=404, detail=f"Avatar {avatar_id} not found")
    app.state.bulk_writer.queue_avatar(owner_uid, avatar)
    return avatar.to_snapshot()


@app.get("/owners/{owner_uid}/avatars", tags=["Avatars"])
def list_owner_avatars_endpoint(owner_uid: int, db: Session = Depends(get_db)):
    """Stored avatar snapshots of one owner (queued writes appear after the next flush)."""
    return crud.list_owner_snapshots(db, owner_uid)


# --- Admin Routes ---

@app.post("/admin/reload-abilities", tags=["Admin"])
async def reload_abilities_endpoint():
    """
    Hot-reloads ability, talent and avatar data from disk.
    """
    logger.warning("Hot-reload of ability data triggered")
    try:
        summary = abilities.reload_all()
    except ValueError as e:
        logger.error(f"Hot-reload failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return {"status": "success", "summary": summary}


@app.post("/admin/flush", tags=["Admin"])
def flush_endpoint():
    """Writes queued avatar snapshots now instead of waiting for the timer."""
    return {"status": "success", "written": app.state.bulk_writer.flush()}


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "talentforge-api"}
