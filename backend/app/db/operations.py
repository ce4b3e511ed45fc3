"""
Set semantics for link tables.

Relationship lists (event participants, a user's joined events, team members,
help-request volunteers) live in link tables carrying a unique constraint over
the referenced pair. Adding goes through ``INSERT ... ON CONFLICT DO NOTHING``
so a duplicate add, including one racing from another request, is a no-op at
the database rather than an error.
"""

from sqlalchemy import delete, func, literal, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(session: AsyncSession, model):
    dialect = session.get_bind().dialect.name
    try:
        return _INSERTS[dialect](model)
    except KeyError:
        raise NotImplementedError(f"add_to_set is not supported on {dialect}")


async def add_to_set(session: AsyncSession, model, **values) -> bool:
    """Insert a link row unless an equal one exists. Returns True if inserted."""
    stmt = _insert_for(session, model).values(**values).on_conflict_do_nothing()
    result = await session.execute(stmt)
    return result.rowcount > 0


async def pull(session: AsyncSession, model, **values) -> int:
    """Delete the link rows matching ``values``. Returns the number removed."""
    stmt = delete(model).where(
        *(getattr(model, key) == value for key, value in values.items())
    )
    result = await session.execute(stmt)
    return result.rowcount


async def add_to_capped_set(
    session: AsyncSession, model, limit: int, scope: dict, **values
) -> bool:
    """
    Like ``add_to_set`` but only while fewer than ``limit`` rows match ``scope``.

    Counting and inserting happen in one ``INSERT ... SELECT ... WHERE count <
    limit`` statement. On PostgreSQL a row inserted by another open transaction
    is not counted, so callers lock the owning row first.
    """
    columns = model.__table__.c
    taken = (
        select(func.count())
        .select_from(model)
        .where(*(columns[key] == value for key, value in scope.items()))
        .correlate(None)
        .scalar_subquery()
    )
    source = select(
        *(literal(value, columns[key].type).label(key) for key, value in values.items())
    ).where(taken < limit)
    stmt = (
        _insert_for(session, model)
        .from_select(list(values), source)
        .on_conflict_do_nothing()
    )
    result = await session.execute(stmt)
    return result.rowcount > 0
