"""
Project Sentinel - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from faker import Faker

# Set testing environment
os.environ['TESTING'] = 'true'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_FILE'] = ''
os.environ['ANALYSIS_DELAY_SECONDS'] = '0'
os.environ['PERF_TEST_DELAY_SECONDS'] = '0'
os.environ['TEST_RUN_DELAY_SECONDS'] = '0'

from sentinel.main import app
from sentinel.core.database import Base, get_db
from sentinel.core.security import get_password_hash, create_access_token
from sentinel.models.user import User
from sentinel.modules.repair.session_store import repair_sessions

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_repair_sessions():
    """Repair sessions live in a process-wide store"""
    repair_sessions.clear()
    yield
    repair_sessions.clear()


async def _create_user(db_session: AsyncSession, password: str) -> User:
    user = User(
        email=fake.unique.email(),
        hashed_password=get_password_hash(password),
        full_name=fake.name(),
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user"""
    return await _create_user(db_session, 'testpassword123')


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second user for ownership checks"""
    return await _create_user(db_session, 'otherpassword123')


def _headers_for(user: User) -> dict:
    token = create_access_token({'sub': str(user.id), 'email': user.email})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return _headers_for(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return _headers_for(other_user)


@pytest.fixture
def project_data() -> dict:
    """Wizard phase 1 payload"""
    return {
        "name": "Payment Gateway",
        "module_name": "PaymentProcessor",
        "test_kind": "unit",
        "parameters": {
            "expectedInputs": "amount, currency",
            "expectedOutputs": "transaction id",
        },
    }


@pytest.fixture
async def project(client: AsyncClient, auth_headers: dict, project_data: dict) -> dict:
    """A stored project owned by test_user"""
    response = await client.post("/api/v1/projects", json=project_data, headers=auth_headers)
    assert response.status_code == 201
    return response.json()
