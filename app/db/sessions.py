from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings
from app.db.base import Base, load_all_models
from app.utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """Owns the async engine and session factory for one application."""

    def __init__(self, settings: Settings):
        self.url = settings.DATABASE_URL
        self.pool_size = settings.DB_POOL_SIZE
        self.max_overflow = settings.DB_MAX_OVERFLOW
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def connect(self) -> None:
        options = {"echo": False}
        # sqlite pools take no sizing arguments
        if not make_url(self.url).get_backend_name().startswith("sqlite"):
            options.update(pool_size=self.pool_size, max_overflow=self.max_overflow)

        self.engine = create_async_engine(self.url, **options)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

        load_all_models()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Connected to database ({self.engine.url.render_as_string(hide_password=True)})")

    async def disconnect(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database connection closed")
        self.engine = None
        self.session_factory = None

    async def ping(self) -> bool:
        """Return True when the store answers a trivial query."""
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def new_session(self) -> AsyncSession:
        if self.session_factory is None:
            raise RuntimeError("Database is not connected")
        return self.session_factory()
