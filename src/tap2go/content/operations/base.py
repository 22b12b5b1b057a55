"""
Shared CRUD plumbing for content type operations.

Each content category subclasses :class:`ContentOperations` with its table
name and record/create/patch models, then adds category-specific finders.
"""

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, TypeVar

import structlog
from pydantic import ValidationError

from tap2go.content.db import ContentStoreClient
from tap2go.content.exceptions import ContentNotFoundError, QueryError
from tap2go.content.models import ContentModel, ContentPatch

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=ContentModel)
CreateT = TypeVar("CreateT", bound=ContentModel)
PatchT = TypeVar("PatchT", bound=ContentPatch)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class ContentOperations(Generic[RecordT, CreateT, PatchT]):
    """Typed CRUD helpers for one content table."""

    table: ClassVar[str]
    record_model: type[RecordT]
    newest_first: ClassVar[str] = "created_at DESC, id DESC"

    def __init__(self, client: ContentStoreClient, clock: Clock = utc_now) -> None:
        self.client = client
        self.clock = clock

    @property
    def json_columns(self) -> tuple[str, ...]:
        return self.record_model.json_columns

    def _to_record(self, row: Mapping[str, Any], sql: str) -> RecordT:
        try:
            return self.record_model.model_validate(row)
        except ValidationError as exc:
            logger.error("content.row_invalid", table=self.table, error=str(exc))
            raise QueryError(
                f"Row in {self.table} does not match its record type",
                sql=sql,
                context={
                    "table": self.table,
                    "errors": exc.errors(
                        include_url=False, include_input=False, include_context=False
                    ),
                },
            ) from exc

    async def _fetch_one(self, sql: str, params: Mapping[str, Any] | None = None) -> RecordT | None:
        row = await self.client.query_one(sql, params, self.json_columns)
        return self._to_record(row, sql) if row is not None else None

    async def _fetch_all(self, sql: str, params: Mapping[str, Any] | None = None) -> list[RecordT]:
        rows = await self.client.query(sql, params, self.json_columns)
        return [self._to_record(row, sql) for row in rows]

    async def create(self, fields: CreateT) -> RecordT:
        """Insert a row with every create column and return the persisted record."""
        values = fields.model_dump()
        columns = ", ".join(values)
        placeholders = ", ".join(f":{name}" for name in values)
        sql = f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders}) RETURNING *"

        record = await self._fetch_one(sql, values)
        if record is None:
            # RETURNING always yields the inserted row
            raise RuntimeError(f"Insert into {self.table} returned no row")
        logger.info("content.created", table=self.table, id=record.id)  # type: ignore[attr-defined]
        return record

    async def get_by_id(self, record_id: int) -> RecordT | None:
        return await self._fetch_one(
            f"SELECT * FROM {self.table} WHERE id = :record_id", {"record_id": record_id}
        )

    async def update(self, record_id: int, patch: PatchT) -> RecordT:
        """
        Write only the fields set on ``patch`` and bump ``updated_at``.

        Raises:
            ContentNotFoundError: no row has ``record_id``
        """
        changes = patch.changes()
        assignments = [f"{name} = :{name}" for name in changes]
        assignments.append("updated_at = CURRENT_TIMESTAMP")
        sql = (
            f"UPDATE {self.table} SET {', '.join(assignments)} "
            "WHERE id = :record_id RETURNING *"
        )

        record = await self._fetch_one(sql, {**changes, "record_id": record_id})
        if record is None:
            raise ContentNotFoundError(self.table, record_id)
        logger.info(
            "content.updated", table=self.table, id=record_id, fields=sorted(changes)
        )
        return record

    async def delete(self, record_id: int) -> bool:
        """Hard-delete a row. Cached copies must be invalidated by the caller."""
        rows = await self.client.query(
            f"DELETE FROM {self.table} WHERE id = :record_id RETURNING id",
            {"record_id": record_id},
        )
        deleted = bool(rows)
        if deleted:
            logger.info("content.deleted", table=self.table, id=record_id)
        return deleted

    async def list_all(self, limit: int = 50, offset: int = 0) -> list[RecordT]:
        return await self._fetch_all(
            f"SELECT * FROM {self.table} ORDER BY {self.newest_first} LIMIT :limit OFFSET :offset",
            {"limit": limit, "offset": offset},
        )
