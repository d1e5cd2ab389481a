from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_lifecycle.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tenant_lifecycle.api.utils.jwt import ALGORITHM
from tenant_lifecycle.depends import get_clock, get_unit_of_work
from tests.utils.app_config import ADMIN_API_KEY, TestConfig
from tests.utils.clock import FakeClock


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(TestConfig.DB_URI)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app_config():
    return TestConfig


@pytest_asyncio.fixture
async def client(db_session, clock, app_config):
    from tenant_lifecycle.api.app import create_app

    app = create_app(app_config)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def organization_id():
    return uuid4()


@pytest.fixture
def auth_headers():
    """Bearer headers for a token minted with the test JWT secret"""

    def _headers(email, organization_id=None, role=None, user_id=None):
        claims = {"user_id": str(user_id or uuid4()), "email": email}
        if organization_id is not None:
            claims["organization_id"] = str(organization_id)
        if role is not None:
            claims["role"] = role
        token = jwt.encode(claims, TestConfig.JWT_SECRET, algorithm=ALGORITHM)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": ADMIN_API_KEY}
