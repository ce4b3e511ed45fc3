import logging
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.config import settings
from app.db.base import AbstractSQLModel
from app.db.registry import *

engine = create_async_engine(settings.DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)


async def get_session():
    async with AsyncSessionLocal() as session:
        yield session


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(AbstractSQLModel.metadata.create_all)


SessionDep = Annotated[AsyncSession, Depends(get_session)]

# setup logging for sqlalchemy

logger = logging.getLogger("sqlalchemy.engine")
logger.setLevel(logging.INFO if settings.SQL_ECHO else logging.WARNING)
