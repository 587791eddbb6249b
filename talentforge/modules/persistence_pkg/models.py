# talentforge/modules/persistence_pkg/models.py
from sqlalchemy import JSON, Column, DateTime, Integer, String, func

from .database import Base


class AvatarSpecialsRecord(Base):
    __tablename__ = "avatar_specials"

    id = Column(Integer, primary_key=True, autoincrement=True)
    avatar_guid = Column(String, unique=True, index=True, nullable=False)
    owner_uid = Column(Integer, index=True, nullable=False)
    avatar_id = Column(Integer, nullable=False)
    snapshot = Column(JSON, nullable=False)  # Avatar.to_snapshot()
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
