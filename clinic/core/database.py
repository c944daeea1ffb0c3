from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import logging
import redis
from .config import settings

logger = logging.getLogger(__name__)

def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    # PostgreSQL connection pool settings
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
    }

engine = create_engine(settings.get_database_url, **_engine_options(settings.get_database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Connections are opened lazily, on the first command
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)

# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Redis dependency
def get_redis():
    """Get Redis client."""
    return redis_client

# Database initialization
def init_db():
    """Initialize database tables and the seed admin account."""
    from .. import models  # noqa: F401  registers the mappers on Base

    Base.metadata.create_all(bind=engine)

    if settings.INITIAL_ADMIN_USERNAME and settings.INITIAL_ADMIN_PASSWORD:
        db = SessionLocal()
        try:
            _seed_admin(db, settings.INITIAL_ADMIN_USERNAME, settings.INITIAL_ADMIN_PASSWORD)
        finally:
            db.close()

def _seed_admin(db: Session, username: str, password: str) -> None:
    from ..models.admin import Admin
    from .security import get_password_hash

    if db.query(Admin).filter(Admin.username == username).first():
        logger.info(f"Admin '{username}' already exists (skipping)")
        return

    db.add(Admin(username=username, password_hash=get_password_hash(password)))
    db.commit()
    logger.info(f"Created admin '{username}'")
