from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator, Optional

from campus_events.core.config import settings

# Create base class for models (can be defined before engine)
Base = declarative_base()

# Lazy engine initialization - create on first use to avoid import-time issues
_engine: Optional[AsyncEngine] = None
_async_session_local: Optional[async_sessionmaker[AsyncSession]] = None


def get_database_url() -> str:
    """Get properly formatted database URL"""
    db_url = settings.DATABASE_URL
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://")
    return db_url


def build_engine(db_url: str) -> AsyncEngine:
    """
    Create an engine for `db_url`.

    Connection pooling strategy:
    - SQLite: NullPool, one connection per session. The busy timeout makes
      concurrent writers queue on the file lock instead of failing.
    - PostgreSQL: default QueuePool with pre-ping
    """
    if "sqlite" in db_url:
        return create_async_engine(
            db_url,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False, "timeout": 30},
            poolclass=NullPool,
        )
    return create_async_engine(
        db_url,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,  # Verify connections before use
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


def get_engine() -> AsyncEngine:
    """Get or create the application engine (lazy initialization)"""
    global _engine
    if _engine is None:
        _engine = build_engine(get_database_url())
    return _engine


def get_session_local() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory (lazy initialization)"""
    global _async_session_local
    if _async_session_local is None:
        _async_session_local = create_session_factory(get_engine())
    return _async_session_local


def AsyncSessionLocal():
    """Create a new async session"""
    return get_session_local()()


# Dependency to get DB session
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session - only commits if there are pending changes"""
    async with get_session_local()() as session:
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise


# Database initialization
async def init_db(engine: Optional[AsyncEngine] = None):
    """Create all tables"""
    import campus_events.models  # noqa: F401 - register models on the metadata

    eng = engine or get_engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connection"""
    global _engine, _async_session_local
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_local = None
