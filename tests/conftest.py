import asyncio
import os

os.environ["APP_SECRET_KEY"] = "test-secret-key"
os.environ["APP_DATABASE_URL"] = "sqlite+aiosqlite:///./unused.db"
os.environ["APP_CREATE_TABLES"] = "false"
os.environ["APP_BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.db.base import AbstractSQLModel
from app.db.core import get_session
from hub import application

EVENT = {
    "title": "Park Cleanup",
    "description": "Pick up litter around the lake",
    "date": "2025-06-01T10:00",
    "location": "Central Park",
    "category": "Environmental",
}


@pytest.fixture
def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )

    async def create_all():
        async with engine.begin() as conn:
            await conn.run_sync(AbstractSQLModel.metadata.create_all)

    asyncio.run(create_all())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


@pytest.fixture
def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_session] = override_get_session
    with TestClient(application) as client:
        yield client
    application.dependency_overrides.clear()


@pytest.fixture
def count_rows(session_factory):
    def count(model, *criteria):
        async def run():
            async with session_factory() as session:
                query = select(func.count()).select_from(model)
                if criteria:
                    query = query.where(*criteria)
                return await session.scalar(query)

        return asyncio.run(run())

    return count


def register(client, name, email, password="pw123456"):
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def ann(client):
    data = register(client, "Ann", "ann@x.com")
    return {"id": data["user"]["id"], "headers": bearer(data["token"])}


@pytest.fixture
def bob(client):
    data = register(client, "Bob", "bob@x.com")
    return {"id": data["user"]["id"], "headers": bearer(data["token"])}


@pytest.fixture
def carol(client):
    data = register(client, "Carol", "carol@x.com")
    return {"id": data["user"]["id"], "headers": bearer(data["token"])}


@pytest.fixture
def park_cleanup(client, ann):
    response = client.post("/api/events", json=EVENT, headers=ann["headers"])
    assert response.status_code == 201, response.text
    return response.json()["data"]
