"""
Database configuration for the server-side session store.
"""

import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import DATABASE_URL

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
logger.debug("SQLAlchemy engine created for %s", engine.url.render_as_string(hide_password=True))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    """
    Create the sessions table if it does not exist yet.
    Called once when the application starts.
    """
    # Register the model on Base.metadata before create_all
    from models.session_db_model import SessionDB  # noqa: F401

    logger.info("Initializing session database")
    Base.metadata.create_all(bind=engine)
    logger.info("Session database ready")
