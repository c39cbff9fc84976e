from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncSession

@asynccontextmanager
async def maybe_begin(session: AsyncSession):
    """
    Si la sesión ya está en transacción, reutilízala.
    Si no, abre una transacción de contexto.
    """
    if session.in_transaction():
        yield
    else:
        async with session.begin():
            yield


@asynccontextmanager
async def atomic(session: AsyncSession):
    """
    Run a unit of work and always settle it: commit on success,
    rollback and re-raise on any failure.

    Unlike ``maybe_begin`` this also commits a transaction that was
    auto-begun by an earlier read on the same session.
    """
    if not session.in_transaction():
        await session.begin()
    try:
        yield
        await session.commit()
    except Exception:
        await session.rollback()
        raise
