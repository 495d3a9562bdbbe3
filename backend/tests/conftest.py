"""
X-Recruit API - Test Configuration and Fixtures
"""
import logging
import os
from typing import AsyncGenerator, Dict, Any
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment (before any app import reads settings)
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''

from app.main import app
from app.core.database import Base, get_db
from app.core.logging_config import logger, clear_context
from app.core.security import get_password_hash, create_access_token
from app.models.user import User, UserType
from app.services.user_store import UserStore

fake = Faker()

TEST_PASSWORD = 'testpassword123'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool, hide_parameters=True)
TestSessionLocal = async_sessionmaker(
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


@pytest.fixture
def user_store(db_session: AsyncSession) -> UserStore:
    return UserStore(db_session)


@pytest.fixture
def registration_data() -> Dict[str, Any]:
    """Valid registration payload (camelCase, as the frontend sends it)"""
    password = fake.password(length=12)
    return {
        'email': fake.unique.email(),
        'password': password,
        'confirmPassword': password,
        'firstName': fake.first_name(),
        'lastName': fake.last_name(),
    }


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user"""
    user = User(
        email=fake.unique.email(),
        password_hash=get_password_hash(TEST_PASSWORD),
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        user_type=UserType.STUDENT.value,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    token = create_access_token({
        'userId': test_user.id,
        'email': test_user.email,
        'firstName': test_user.first_name,
        'lastName': test_user.last_name,
        'userType': test_user.user_type,
    })
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


class ListHandler(logging.Handler):
    """Keeps raw records so a test can run them through any formatter"""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def log_records():
    handler = ListHandler()
    logger.addHandler(handler)
    yield handler.records
    logger.removeHandler(handler)
    clear_context()
