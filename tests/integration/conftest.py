"""Integration fixtures: a real DataAccessLayer against TEST_DATABASE_URL.

Tables are created from the ORM metadata for the test and dropped afterwards,
so point TEST_DATABASE_URL at a throwaway database.
"""

import os

import pytest

from app.core.config import get_settings
from app.infrastructure.persistence import models  # noqa: F401
from app.infrastructure.persistence.database import Base, DataAccessLayer
from app.infrastructure.persistence.unit_of_work import SqlUnitOfWork

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "")


@pytest.fixture
async def data_access():
    if not TEST_DATABASE_URL:
        pytest.skip("TEST_DATABASE_URL not set")
    dal = DataAccessLayer(TEST_DATABASE_URL, pool_size=5, ipv4_mode="off")
    await dal.init()
    async with dal.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield dal
    async with dal.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await dal.close()


@pytest.fixture
def sql_uow(data_access: DataAccessLayer) -> SqlUnitOfWork:
    return SqlUnitOfWork(data_access, get_settings())
