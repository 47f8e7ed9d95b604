"""Data access dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.application.interfaces.repositories import IUnitOfWork
from app.core.config import get_settings
from app.infrastructure.persistence.database import DataAccessLayer
from app.infrastructure.persistence.unit_of_work import (
    SqlUnitOfWork,
    UnconfiguredUnitOfWork,
)


def get_data_access(request: Request) -> DataAccessLayer | None:
    """DataAccessLayer built by the lifespan; None when DATABASE_URL is not set."""
    return getattr(request.app.state, "data_access", None)


def get_unit_of_work(
    data_access: Annotated[DataAccessLayer | None, Depends(get_data_access)],
) -> IUnitOfWork:
    """Unit of work over the shared pool (one transaction per call to run).

    Without a database every run raises SqlNotConfiguredException (503).
    """
    if data_access is None:
        return UnconfiguredUnitOfWork()
    return SqlUnitOfWork(data_access, get_settings())
