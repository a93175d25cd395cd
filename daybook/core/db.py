from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from daybook.core.config import settings


def _async_url(database_url: str) -> str:
    # asyncpg does not accept psycopg params like sslmode/channel_binding.
    # Anything else (sqlite+aiosqlite, postgresql+asyncpg) is used as given.
    parsed = urlparse(database_url)
    if parsed.scheme != "postgresql":
        return database_url
    scheme = "postgresql+asyncpg"
    query = parse_qs(parsed.query, keep_blank_values=True)
    query.pop("sslmode", None)
    query.pop("channel_binding", None)
    new_query = urlencode(query, doseq=True)
    return urlunparse((scheme, parsed.netloc, parsed.path, parsed.params, new_query, parsed.fragment))


async_database_url = _async_url(settings.database_url)

if settings.is_sqlite:
    engine = create_async_engine(async_database_url, echo=False)
else:
    engine = create_async_engine(
        async_database_url,
        echo=settings.env == "development",
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        connect_args={"ssl": True},
    )

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create tables if using create_all; prefer Alembic in production."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
