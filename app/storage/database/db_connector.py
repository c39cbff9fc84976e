from collections.abc import AsyncGenerator
from sqlalchemy.engine.url import make_url, URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from app.core.settings import settings

raw: str = settings.DATABASE_URL.get_secret_value()

u = make_url(raw)


def _async_url(url: URL) -> URL:
    """Plain postgres URLs are rebuilt for asyncpg, dropping their query string."""
    if url.get_backend_name() == "sqlite":
        return url.set(drivername="sqlite+aiosqlite")
    if url.get_backend_name() != "postgresql":
        return url
    return URL.create(
        drivername="postgresql+asyncpg",
        username=url.username,
        password=url.password,
        host=url.host,
        port=url.port,
        database=url.database,
    )


def build_engine(url: URL) -> AsyncEngine:
    if url.get_backend_name() == "postgresql":
        return create_async_engine(
            url.render_as_string(hide_password=False),
            echo=bool(getattr(settings, "DEBUG", False)),
            poolclass=NullPool,
            pool_pre_ping=True,
            execution_options={"isolation_level": "READ COMMITTED"},
            connect_args={
                "ssl": True,
                "statement_cache_size": 0,
            },
        )
    return create_async_engine(
        url.render_as_string(hide_password=False),
        echo=bool(getattr(settings, "DEBUG", False)),
    )


clean_url: URL = _async_url(u)

engine = build_engine(clean_url)

async_session = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False, class_=AsyncSession)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    session: AsyncSession = async_session()
    try:
        yield session
    finally:
        await session.close()

async def create_all() -> None:
    from app.v1_0.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def dispose_engine() -> None:
    await engine.dispose()
