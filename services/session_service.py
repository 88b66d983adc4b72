import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

from fastapi import Depends, Request

import config
from database import SessionLocal
from models.session_db_model import SessionDB
from models.session_models import SessionData
from services.errors import AuthError

logger = logging.getLogger(__name__)

# Key under which the opaque store key lives in the signed cookie
SESSION_KEY = "sid"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """Server-side storage for authenticated Salesforce sessions."""

    def get(self, session_id: str) -> Optional[SessionData]:
        raise NotImplementedError

    def save(self, session_id: str, data: SessionData) -> None:
        raise NotImplementedError

    def delete(self, session_id: str) -> None:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    def __init__(self, max_age: int = config.SESSION_MAX_AGE):
        self.max_age = max_age
        self._sessions: Dict[str, Tuple[SessionData, datetime]] = {}

    def get(self, session_id: str) -> Optional[SessionData]:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        data, saved_at = entry
        if _utcnow() - saved_at > timedelta(seconds=self.max_age):
            self._sessions.pop(session_id, None)
            return None
        return data

    def save(self, session_id: str, data: SessionData) -> None:
        self._sessions[session_id] = (data, _utcnow())

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)


class DatabaseSessionStore(SessionStore):
    def __init__(self, session_factory=SessionLocal, max_age: int = config.SESSION_MAX_AGE):
        self.session_factory = session_factory
        self.max_age = max_age

    def get(self, session_id: str) -> Optional[SessionData]:
        db = self.session_factory()
        try:
            row = db.query(SessionDB).filter(SessionDB.session_id == session_id).first()
            if row is None:
                return None

            updated_at = row.updated_at
            # SQLite hands back naive datetimes
            if updated_at is not None and updated_at.tzinfo is None:
                updated_at = updated_at.replace(tzinfo=timezone.utc)
            if updated_at is None or _utcnow() - updated_at > timedelta(seconds=self.max_age):
                db.delete(row)
                db.commit()
                return None

            return SessionData(
                access_token=row.access_token,
                instance_url=row.instance_url,
                user_info=row.user_info or {},
                auth_method=row.auth_method,
            )
        finally:
            db.close()

    def save(self, session_id: str, data: SessionData) -> None:
        db = self.session_factory()
        try:
            row = db.query(SessionDB).filter(SessionDB.session_id == session_id).first()
            if row is None:
                row = SessionDB(session_id=session_id)
                db.add(row)
            row.access_token = data.access_token
            row.instance_url = data.instance_url
            row.user_info = data.user_info
            row.auth_method = data.auth_method
            row.updated_at = _utcnow()
            db.commit()
        finally:
            db.close()

    def delete(self, session_id: str) -> None:
        db = self.session_factory()
        try:
            db.query(SessionDB).filter(SessionDB.session_id == session_id).delete()
            db.commit()
        finally:
            db.close()


_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    global _store
    if _store is None:
        if config.SESSION_STORE == "memory":
            _store = InMemorySessionStore()
        else:
            _store = DatabaseSessionStore()
        logger.info("Using %s", type(_store).__name__)
    return _store


class SessionContext:
    """
    The authenticated session bound to one request.

    The browser only ever holds an opaque key (inside Starlette's signed
    session cookie); the Salesforce credentials stay in the store.
    """

    def __init__(self, request: Request, store: SessionStore):
        self.request = request
        self.store = store

    @property
    def key(self) -> Optional[str]:
        return self.request.session.get(SESSION_KEY)

    def load(self) -> Optional[SessionData]:
        if not self.key:
            return None
        return self.store.get(self.key)

    def save(self, data: SessionData) -> None:
        """Store fresh credentials under a new key, dropping any previous one."""
        old_key = self.key
        key = uuid.uuid4().hex
        self.store.save(key, data)
        self.request.session[SESSION_KEY] = key
        if old_key:
            self.store.delete(old_key)

    def destroy(self) -> None:
        if self.key:
            self.store.delete(self.key)
        self.request.session.clear()


def get_session_context(request: Request, store: SessionStore = Depends(get_session_store)) -> SessionContext:
    return SessionContext(request, store)


def require_session(ctx: SessionContext = Depends(get_session_context)) -> SessionData:
    session = ctx.load()
    if session is None:
        raise AuthError("Not authenticated")
    return session
