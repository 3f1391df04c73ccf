"""Async SQLAlchemy engine and session factory for the asset database."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config.settings import settings

_ASYNC_SCHEME = "postgresql+psycopg://"


def _normalise_url(url: str) -> str:
    """Point plain postgres URLs at the async psycopg driver."""
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return _ASYNC_SCHEME + url[len(scheme):]
    return url


engine = create_async_engine(_normalise_url(settings.database_url), echo=settings.sql_echo)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
