import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["GENERATION_DELAY_SECONDS"] = "0"

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from studycards.core.database import create_engine, init_models
from studycards.core.utils import generate_uuid
from studycards.models.user import User


@pytest_asyncio.fixture
async def engine():
    engine = create_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
def make_user(db):
    async def _make_user(email=None):
        user = User(
            id=generate_uuid(),
            email=email or f"{generate_uuid()}@example.com",
            password="not-a-real-hash",
        )
        db.add(user)
        await db.commit()
        return user.id

    return _make_user
