from datetime import datetime, timezone

from sqlalchemy import Column, String, JSON, DateTime
from database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class SessionDB(Base):
    __tablename__ = "sessions"

    session_id = Column(String, primary_key=True, index=True)
    access_token = Column(String, nullable=False)
    instance_url = Column(String, nullable=False)
    user_info = Column(JSON, default=dict)
    auth_method = Column(String, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
