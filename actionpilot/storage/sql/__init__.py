from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .execution import SqlExecutionResultRepository
from .models import Base
from .plan import SqlPlanRepository
from .resolver import SqlResolver


def create_session_factory(url: str, **engine_kwargs) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an async engine and its session factory.

    ``url`` is an async SQLAlchemy URL, e.g. ``postgresql+asyncpg://...``.
    """
    engine = create_async_engine(url, **engine_kwargs)
    return engine, async_sessionmaker(engine, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = [
    'Base',
    'SqlExecutionResultRepository',
    'SqlPlanRepository',
    'SqlResolver',
    'create_schema',
    'create_session_factory',
]
