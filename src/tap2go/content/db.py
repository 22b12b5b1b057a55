"""
Content store client.

Pooled access to the relational content store on SQLAlchemy 2.0's async
engine. Statements are textual SQL with named ``:param`` placeholders so the
same operations run against PostgreSQL (asyncpg) and SQLite (aiosqlite).

Structured columns cross the boundary as JSON text: ``dict``/``list``
parameters are serialized on the way in and the columns named in
``json_columns`` are parsed on the way out.
"""

import json
import time
from collections.abc import Awaitable, Callable, Iterable, Mapping
from datetime import UTC, datetime
from typing import Any, Self, TypeVar

import structlog
from sqlalchemy import DateTime, bindparam, make_url, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from tap2go.content.exceptions import ConnectionTimeoutError, QueryError
from tap2go.content.settings import Settings

logger = structlog.get_logger(__name__)

T = TypeVar("T")
Row = dict[str, Any]


def _encode_param(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    if isinstance(value, datetime) and value.tzinfo is not None:
        # Timestamp columns are stored as naive UTC.
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def _decode_json_columns(row: Row, json_columns: Iterable[str], sql: str) -> Row:
    for column in json_columns:
        raw = row.get(column)
        if not isinstance(raw, (str, bytes)):
            continue
        try:
            row[column] = json.loads(raw)
        except ValueError as exc:
            raise QueryError(
                f"Malformed JSON in column {column!r}", sql=sql, context={"column": column}
            ) from exc
    return row


class ContentQueryHandle:
    """Query handle bound to one connection inside a transaction."""

    def __init__(self, client: "ContentStoreClient", connection: AsyncConnection) -> None:
        self._client = client
        self._connection = connection

    async def query(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        json_columns: Iterable[str] = (),
    ) -> list[Row]:
        return await self._client._execute(self._connection, sql, params, json_columns)

    async def query_one(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        json_columns: Iterable[str] = (),
    ) -> Row | None:
        rows = await self.query(sql, params, json_columns)
        return rows[0] if rows else None


class ContentStoreClient:
    """
    Pooled client for the content store.

    The pool holds ``pool_min`` connections and grows to ``pool_max`` under
    load. Checkout waits up to ``connection_timeout`` seconds before raising
    :class:`ConnectionTimeoutError`. Every statement runs on a connection that
    is returned to the pool on all exit paths. Failures are raised as
    :class:`QueryError` without retry.
    """

    def __init__(
        self,
        url: str,
        *,
        ssl: bool = False,
        pool_min: int = 2,
        pool_max: int = 10,
        connection_timeout: float = 60.0,
        pool_recycle: int = 3600,
        echo: bool = False,
    ) -> None:
        self.url = url
        self.connection_timeout = connection_timeout
        self.engine: AsyncEngine = self._create_engine(
            url,
            ssl=ssl,
            pool_min=pool_min,
            pool_max=pool_max,
            connection_timeout=connection_timeout,
            pool_recycle=pool_recycle,
            echo=echo,
        )

    @classmethod
    def from_settings(cls, config: Settings.DatabaseSettings) -> Self:
        return cls(
            config.url,
            ssl=config.ssl,
            pool_min=config.pool_min,
            pool_max=config.pool_max,
            connection_timeout=config.connection_timeout,
            pool_recycle=config.pool_recycle,
            echo=config.echo,
        )

    @staticmethod
    def _create_engine(
        url: str,
        *,
        ssl: bool,
        pool_min: int,
        pool_max: int,
        connection_timeout: float,
        pool_recycle: int,
        echo: bool,
    ) -> AsyncEngine:
        parsed = make_url(url)
        engine_kwargs: dict[str, Any] = {"echo": echo}

        if parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:"):
            # In-memory databases live on a single connection.
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs.update(
                pool_size=pool_min,
                max_overflow=pool_max - pool_min,
                pool_timeout=connection_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=True,
            )
            if ssl and parsed.get_backend_name() == "postgresql":
                engine_kwargs["connect_args"] = {"ssl": "require"}

        return create_async_engine(parsed, **engine_kwargs)

    async def _checkout(self, sql: str) -> AsyncConnection:
        try:
            return await self.engine.connect()
        except PoolTimeoutError as exc:
            logger.error("content_store.pool_timeout", timeout=self.connection_timeout)
            raise ConnectionTimeoutError(
                "Timed out waiting for a content store connection",
                timeout=self.connection_timeout,
                sql=sql,
            ) from exc
        except SQLAlchemyError as exc:
            logger.error("content_store.connect_failed", error=str(exc))
            raise QueryError(f"Could not connect to content store: {exc}", sql=sql) from exc

    async def _execute(
        self,
        connection: AsyncConnection,
        sql: str,
        params: Mapping[str, Any] | None,
        json_columns: Iterable[str],
    ) -> list[Row]:
        statement = text(sql)
        bound: dict[str, Any] = {}
        for name, value in (params or {}).items():
            if isinstance(value, datetime):
                statement = statement.bindparams(bindparam(name, type_=DateTime()))
            bound[name] = _encode_param(value)

        started = time.perf_counter()
        try:
            result = await connection.execute(statement, bound)
            rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
        except SQLAlchemyError as exc:
            logger.error("content_store.query_failed", error=str(exc), sql=" ".join(sql.split()))
            raise QueryError(f"Query failed: {getattr(exc, 'orig', None) or exc}", sql=sql) from exc

        logger.debug(
            "content_store.query_executed",
            rows=len(rows),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        columns = tuple(json_columns)
        return [_decode_json_columns(row, columns, sql) for row in rows]

    async def query(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        json_columns: Iterable[str] = (),
    ) -> list[Row]:
        """Execute one statement on a pooled connection and commit it."""
        connection = await self._checkout(sql)
        try:
            async with connection.begin():
                return await self._execute(connection, sql, params, json_columns)
        except SQLAlchemyError as exc:
            raise QueryError(f"Commit failed: {exc}", sql=sql) from exc
        finally:
            await connection.close()

    async def query_one(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        json_columns: Iterable[str] = (),
    ) -> Row | None:
        """Execute one statement and return its first row, or ``None``."""
        rows = await self.query(sql, params, json_columns)
        return rows[0] if rows else None

    async def transaction(self, fn: Callable[[ContentQueryHandle], Awaitable[T]]) -> T:
        """
        Run ``fn`` inside a single transaction.

        ``fn`` receives a :class:`ContentQueryHandle` bound to the transaction's
        connection. The transaction commits when ``fn`` returns and rolls back
        when it raises; the exception is re-raised either way.
        """
        connection = await self._checkout("BEGIN")
        try:
            async with connection.begin():
                return await fn(ContentQueryHandle(self, connection))
        except SQLAlchemyError as exc:
            logger.warning("content_store.transaction_rolled_back", error=str(exc))
            raise QueryError(f"Transaction failed: {exc}") from exc
        except Exception as exc:
            logger.warning("content_store.transaction_rolled_back", error=str(exc))
            raise
        finally:
            await connection.close()

    async def health_check(self) -> bool:
        """Return True when the content store answers a trivial query."""
        try:
            await self.query("SELECT 1 AS ok")
        except QueryError as exc:
            logger.warning("content_store.health_check_failed", error=exc.message)
            return False
        return True

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("content_store.closed")

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
