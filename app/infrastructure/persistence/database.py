"""Persistence: data access layer, retry policy, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations. The engine is owned by a
DataAccessLayer instance that the application lifespan builds, initializes
and closes (held on app.state.data_access); nothing is created at import
time, so importing this module does not trigger Settings validation.

Queries and transactions are retried only for connection-class failures
(refused, reset, timed out, invalidated connections, pool exhaustion).
Integrity, syntax and data errors propagate on the first attempt.
"""

import asyncio
import logging
import socket
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, TypeVar

from sqlalchemy import exc as sa_exc
from sqlalchemy import text
from sqlalchemy.engine import RowMapping, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import Executable

from app.core.config import Settings
from app.domain.exceptions import (
    AtsException,
    DatabaseUnreachableException,
    TransientStorageFailureException,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Lower-cased substrings that mark a driver error as connection-class.
_CONNECTION_MARKERS = (
    "connection",
    "timeout",
    "timed out",
    "econnreset",
    "etimedout",
    "econnrefused",
    "reset by peer",
    "server closed",
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for connection-class failures.

    ``retries`` extra attempts after the first one; the n-th retry waits
    ``backoff_seconds * 2**n`` (1s then 2s with the defaults).
    """

    retries: int = 2
    backoff_seconds: float = 1.0

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    def delay_for(self, attempt: int) -> float:
        return self.backoff_seconds * (2**attempt)


@dataclass(frozen=True)
class QueryResult:
    """Buffered outcome of DataAccessLayer.execute."""

    rows: Sequence[RowMapping] = field(default_factory=tuple)
    rowcount: int = 0

    def first(self) -> RowMapping | None:
        return self.rows[0] if self.rows else None


def is_connection_error(exc: BaseException) -> bool:
    """Return True when ``exc`` is a transient connectivity failure worth retrying."""
    if isinstance(exc, AtsException):
        return False
    if isinstance(
        exc, (sa_exc.IntegrityError, sa_exc.ProgrammingError, sa_exc.DataError)
    ):
        return False
    if isinstance(
        exc,
        (
            ConnectionError,
            TimeoutError,
            sa_exc.TimeoutError,
            sa_exc.DisconnectionError,
        ),
    ):
        return True
    if isinstance(exc, OSError):
        return True
    if not isinstance(exc, sa_exc.DBAPIError):
        return False
    if exc.connection_invalidated or isinstance(exc, sa_exc.InterfaceError):
        return True
    orig = exc.orig
    if isinstance(orig, BaseException) and orig is not exc:
        if isinstance(orig, (ConnectionError, TimeoutError, OSError)):
            return True
        message = str(orig).lower()
    else:
        message = str(exc).lower()
    return any(marker in message for marker in _CONNECTION_MARKERS)


async def resolve_database_host(host: str, port: int, mode: str) -> str | None:
    """Resolve the database host according to the IPv4 mode.

    - ``off``: no resolution; returns None (driver resolves the host itself).
    - ``prefer``: returns the first IPv4 address; when there is none, logs a
      warning and returns None so the driver may use any family.
    - ``force``: returns the first IPv4 address or fails.

    Raises:
        DatabaseUnreachableException: No usable address for the host.
    """
    if mode == "off" or not host or host.startswith("/"):
        return None
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(
            host, port, family=socket.AF_INET, type=socket.SOCK_STREAM
        )
    except socket.gaierror as exc:
        logger.debug("IPv4 lookup for %s failed: %s", host, exc)
        infos = []
    if infos:
        return infos[0][4][0]
    if mode == "force":
        raise DatabaseUnreachableException(
            host, "no IPv4 address found and db_ipv4_mode is 'force'"
        )
    logger.warning(
        "No IPv4 address for database host %s; falling back to any address family",
        host,
    )
    try:
        infos = await loop.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except socket.gaierror as exc:
        raise DatabaseUnreachableException(
            host, f"name resolution failed ({exc})"
        ) from exc
    if not infos:
        raise DatabaseUnreachableException(host, "name resolution returned no addresses")
    return None


class DataAccessLayer:
    """Connection pool plus retrying query and transaction primitives.

    Lifecycle: construct, ``await init()`` (address resolution, engine
    creation and a startup probe), use, ``await close()``.
    """

    def __init__(
        self,
        database_url: str,
        *,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 0,
        pool_timeout: float = 15.0,
        pool_recycle: int = 30,
        connect_timeout: float = 15.0,
        command_timeout: float = 15.0,
        statement_timeout_ms: int = 15_000,
        ssl: bool = False,
        ipv4_mode: str = "prefer",
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._url = make_url(database_url)
        self._echo = echo
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._pool_timeout = pool_timeout
        self._pool_recycle = pool_recycle
        self._connect_timeout = connect_timeout
        self._command_timeout = command_timeout
        self._statement_timeout_ms = statement_timeout_ms
        self._ssl = ssl
        self._ipv4_mode = ipv4_mode
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "DataAccessLayer":
        return cls(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            connect_timeout=settings.db_connect_timeout,
            command_timeout=settings.db_command_timeout,
            statement_timeout_ms=settings.db_statement_timeout_ms,
            ssl=settings.db_ssl,
            ipv4_mode=settings.db_ipv4_mode,
            retry_policy=RetryPolicy(
                retries=settings.db_query_retries,
                backoff_seconds=settings.db_retry_backoff_seconds,
            ),
        )

    @property
    def is_initialized(self) -> bool:
        return self._sessionmaker is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("DataAccessLayer.init() has not been called")
        return self._engine

    def _build_engine(self, address: str | None) -> AsyncEngine:
        url = self._url.set(host=address) if address else self._url
        kwargs: dict[str, Any] = {"echo": self._echo}
        if url.get_backend_name() == "postgresql":
            kwargs.update(
                pool_pre_ping=True,
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
                pool_timeout=self._pool_timeout,
                pool_recycle=self._pool_recycle,
            )
            if url.get_driver_name() == "asyncpg":
                connect_args: dict[str, Any] = {
                    "timeout": self._connect_timeout,
                    "command_timeout": self._command_timeout,
                    "server_settings": {
                        "statement_timeout": str(self._statement_timeout_ms),
                        "jit": "off",
                    },
                }
                if self._ssl:
                    connect_args["ssl"] = "require"
                kwargs["connect_args"] = connect_args
        return create_async_engine(url, **kwargs)

    async def init(self) -> None:
        """Resolve the host, create the pool, and verify it with ``SELECT 1``.

        Raises:
            DatabaseUnreachableException: Host has no usable address.
            TransientStorageFailureException: Probe still failing after retries.
        """
        if self.is_initialized:
            return
        address = None
        if self._url.host and self._url.get_backend_name() == "postgresql":
            address = await resolve_database_host(
                self._url.host, self._url.port or 5432, self._ipv4_mode
            )
        self._engine = self._build_engine(address)
        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        try:
            await self.execute(text("SELECT 1"))
        except BaseException:
            await self.close()
            raise
        logger.info(
            "Database pool ready (host=%s, pool_size=%d)",
            address or self._url.host,
            self._pool_size,
        )

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            raise RuntimeError("DataAccessLayer.init() has not been called")
        return self._sessionmaker

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session without an explicit transaction (reads)."""
        async with self._sessions()() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Yield a session inside begin(); commits on success, rolls back on error."""
        async with self._sessions()() as session:
            async with session.begin():
                yield session

    async def run_with_retry(
        self, operation: Callable[[], Awaitable[T]], label: str = "operation"
    ) -> T:
        """Run ``operation`` under the retry policy.

        Connection-class failures are retried with backoff; anything else
        propagates immediately. When every attempt fails, raises one
        TransientStorageFailureException chained to the last error.
        """
        policy = self.retry_policy
        last_error: BaseException | None = None
        for attempt in range(policy.max_attempts):
            try:
                return await operation()
            except Exception as exc:
                if not is_connection_error(exc):
                    raise
                last_error = exc
                if attempt + 1 >= policy.max_attempts:
                    break
                delay = policy.delay_for(attempt)
                logger.warning(
                    "Database %s failed with a connection error (attempt %d/%d), retrying in %.1fs: %s",
                    label,
                    attempt + 1,
                    policy.max_attempts,
                    delay,
                    exc,
                )
                await self._sleep(delay)
        logger.error(
            "Database %s failed after %d attempts: %s",
            label,
            policy.max_attempts,
            last_error,
        )
        raise TransientStorageFailureException(policy.max_attempts) from last_error

    async def execute(
        self, statement: Executable, params: Mapping[str, Any] | None = None
    ) -> QueryResult:
        """Execute one statement in its own transaction, with retry."""

        async def _run() -> QueryResult:
            async with self.transaction() as session:
                result = await session.execute(statement, params or {})
                rows = result.mappings().all() if result.returns_rows else ()
                return QueryResult(rows=rows, rowcount=result.rowcount)

        return await self.run_with_retry(_run, "query")

    async def run_in_transaction(
        self, work: Callable[[AsyncSession], Awaitable[T]]
    ) -> T:
        """Run ``work(session)`` atomically; the whole unit is re-run on retry."""

        async def _run() -> T:
            async with self.transaction() as session:
                return await work(session)

        return await self.run_with_retry(_run, "transaction")

    async def is_healthy(self) -> bool:
        """Single-attempt ``SELECT 1``; never raises."""
        if not self.is_initialized:
            return False
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning("Database health probe failed: %s", exc)
            return False
        return True
