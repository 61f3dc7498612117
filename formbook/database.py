# formbook/database.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import AUTO_CREATE_TABLES, DATABASE_URL, DB_ECHO

logger = logging.getLogger(__name__)

# echo=True prints every SQL statement SQLAlchemy emits; keep it off outside debugging
engine = create_async_engine(DATABASE_URL, echo=DB_ECHO)

AsyncSessionFactory = async_sessionmaker(
    bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
)

Base = declarative_base()


async def get_db_session():
    async with AsyncSessionFactory() as session:
        try:
            yield session
            await session.commit()  # commit once the request handler succeeded
        except Exception:
            await session.rollback()
            raise


async def create_db_and_tables():
    """
    Creates missing tables when AUTO_CREATE_TABLES is set (local SQLite fallback
    and tests). Deployed databases are migrated with Alembic instead.
    """
    if not AUTO_CREATE_TABLES:
        logger.info("Skipping table creation, schema is managed by Alembic.")
        return
    from . import models  # noqa: F401  registers the tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured for %s", engine.url.render_as_string(hide_password=True))
