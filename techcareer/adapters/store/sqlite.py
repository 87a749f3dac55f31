"""SQLite repository adapters.

Implements the repository ports using SQLite with aiosqlite for async access.
All repositories share one SQLiteDatabase, which owns the connection pool
and the schema.

Title and name uniqueness among rows that are not soft-deleted is also
enforced by partial UNIQUE indexes, so two concurrent creates with the same
title cannot both be stored even when both pass the business-rule pre-check.
"""

import asyncio
import dataclasses
import logging
import weakref
from abc import abstractmethod
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar
from uuid import UUID

import aiosqlite

from techcareer.core.errors import ConflictError
from techcareer.core.messages import EventMessages, InstructorMessages
from techcareer.core.models import Category, Event, Instructor
from techcareer.core.ports import (
    CategoryRepositoryPort,
    EventRepositoryPort,
    InstructorRepositoryPort,
    OrderBy,
    Predicate,
    RepositoryPort,
)

logger = logging.getLogger(__name__)

TEntity = TypeVar("TEntity")
TId = TypeVar("TId")

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS categories (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS events (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        image_url TEXT NOT NULL DEFAULT '',
        participation_text TEXT NOT NULL DEFAULT '',
        category_id INTEGER NOT NULL REFERENCES categories(id),
        created_at TIMESTAMP,
        updated_at TIMESTAMP,
        deleted_at TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS instructors (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        about TEXT NOT NULL DEFAULT '',
        created_at TIMESTAMP,
        updated_at TIMESTAMP,
        deleted_at TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_events_category ON events(category_id)",
    "CREATE INDEX IF NOT EXISTS idx_events_deleted ON events(deleted_at)",
    "CREATE INDEX IF NOT EXISTS idx_instructors_deleted ON instructors(deleted_at)",
    # Titles and names are unique among live rows only
    "CREATE UNIQUE INDEX IF NOT EXISTS uq_events_title_live "
    "ON events(title) WHERE deleted_at IS NULL",
    "CREATE UNIQUE INDEX IF NOT EXISTS uq_instructors_name_live "
    "ON instructors(name) WHERE deleted_at IS NULL",
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _format_ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _copy_fields(source: Any, target: Any) -> None:
    for entity_field in dataclasses.fields(source):
        value = getattr(source, entity_field.name)
        # Keep a previously loaded relation when this load didn't include it
        if entity_field.name == "category" and value is None:
            continue
        setattr(target, entity_field.name, value)


class SQLiteDatabase:
    """SQLite database file with connection pooling and lazy schema creation."""

    def __init__(self, db_path: str, pool_size: int = 5):
        """Initialize the database with connection pooling.

        Args:
            db_path: Path to SQLite database file.
            pool_size: Number of connections to maintain in the pool.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._pool: list[aiosqlite.Connection] = []
        self._pool_lock = asyncio.Lock()
        self._schema_lock = asyncio.Lock()
        self._pool_size = pool_size
        self._schema_initialized = False

    async def get_connection(self) -> aiosqlite.Connection:
        """Get a connection from the pool or create a new one."""
        async with self._pool_lock:
            if self._pool:
                return self._pool.pop()
        conn = await aiosqlite.connect(str(self.db_path))
        await conn.execute("PRAGMA foreign_keys = ON")
        return conn

    async def return_connection(self, conn: aiosqlite.Connection) -> None:
        """Return a connection to the pool."""
        async with self._pool_lock:
            if len(self._pool) < self._pool_size:
                self._pool.append(conn)
                return
        await conn.close()

    async def close(self) -> None:
        """Close all pooled connections."""
        async with self._pool_lock:
            for conn in self._pool:
                await conn.close()
            self._pool.clear()

    async def init_schema(self) -> None:
        """Create tables on first use.

        Only runs once per instance. Subsequent calls are no-ops.
        """
        if self._schema_initialized:
            return
        async with self._schema_lock:
            # Check again after acquiring lock to prevent race
            if self._schema_initialized:
                return

            conn = await self.get_connection()
            try:
                for statement in SCHEMA:
                    await conn.execute(statement)
                await conn.commit()
                self._schema_initialized = True
            finally:
                await self.return_connection(conn)


class SQLiteRepository(RepositoryPort[TEntity, TId]):
    """Shared CRUD logic for one table.

    Subclasses describe the table (name, columns) and convert between rows
    and entities. Soft deletion and audit timestamps are handled here, as
    is the identity map used when tracking is enabled.
    """

    table: str
    columns: tuple[str, ...]
    conflict_message: str = "Record already exists"
    soft_delete: bool = True

    def __init__(self, database: SQLiteDatabase):
        self.database = database
        # Entries disappear once no caller holds the entity
        self._identity_map: weakref.WeakValueDictionary[Any, TEntity] = (
            weakref.WeakValueDictionary()
        )

    @abstractmethod
    def _to_row(self, entity: TEntity) -> tuple[Any, ...]:
        """Convert an entity to column values, in ``columns`` order."""

    @abstractmethod
    def _from_row(self, row: Sequence[Any]) -> TEntity:
        """Build an entity from column values, in ``columns`` order."""

    def _key(self, entity_id: Any) -> Any:
        """Convert an entity id to its stored form."""
        return entity_id

    async def _load_related(
        self, conn: aiosqlite.Connection, entities: list[TEntity]
    ) -> None:
        """Populate related records on ``entities``. No-op by default."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add(self, entity: TEntity) -> TEntity:
        """Insert an entity and stamp its creation time."""
        await self.database.init_schema()

        if self.soft_delete:
            entity.created_at = _utcnow()

        placeholders = ", ".join("?" for _ in self.columns)
        await self._write(
            f"INSERT INTO {self.table} ({', '.join(self.columns)}) "
            f"VALUES ({placeholders})",
            self._to_row(entity),
        )
        self._identity_map[entity.id] = entity
        return entity

    async def update(self, entity: TEntity) -> TEntity:
        """Persist all columns of an existing entity and stamp its update time."""
        await self.database.init_schema()

        if self.soft_delete:
            entity.updated_at = _utcnow()

        row = self._to_row(entity)
        assignments = ", ".join(f"{column} = ?" for column in self.columns[1:])
        try:
            rowcount = await self._write(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                (*row[1:], row[0]),
            )
        except (ConflictError, aiosqlite.Error):
            await self._restore(entity)
            raise
        if rowcount == 0:
            raise LookupError(f"{self.table} row {entity.id} does not exist")

        self._identity_map[entity.id] = entity
        return entity

    async def delete(self, entity: TEntity, permanent: bool = False) -> TEntity:
        """Soft-delete (default) or permanently remove an entity."""
        await self.database.init_schema()

        if permanent or not self.soft_delete:
            await self._write(
                f"DELETE FROM {self.table} WHERE id = ?", (self._key(entity.id),)
            )
            self._identity_map.pop(entity.id, None)
        else:
            entity.deleted_at = _utcnow()
            await self._write(
                f"UPDATE {self.table} SET deleted_at = ? WHERE id = ?",
                (_format_ts(entity.deleted_at), self._key(entity.id)),
            )

        logger.debug(
            f"Deleted {self.table} row {entity.id}",
            extra={"table": self.table, "permanent": permanent},
        )
        return entity

    async def _write(self, sql: str, params: tuple[Any, ...]) -> int:
        conn = await self.database.get_connection()
        try:
            try:
                cursor = await conn.execute(sql, params)
                await conn.commit()
            except aiosqlite.IntegrityError as e:
                await conn.rollback()
                if "UNIQUE constraint failed" in str(e):
                    raise ConflictError(self.conflict_message) from e
                raise
            return cursor.rowcount
        finally:
            await self.database.return_connection(conn)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_list(
        self,
        predicate: Predicate | None = None,
        order_by: OrderBy | None = None,
        include: bool = False,
        with_deleted: bool = False,
        enable_tracking: bool = True,
    ) -> list[TEntity]:
        """Return entities in insertion order, filtered then ordered in Python."""
        entities = await self._select(
            with_deleted=with_deleted, include=include, enable_tracking=enable_tracking
        )
        if predicate is not None:
            entities = [entity for entity in entities if predicate(entity)]
        if order_by is not None:
            entities = list(order_by(entities))
        return entities

    async def get_by_id(
        self, entity_id: TId, include: bool = False, with_deleted: bool = False
    ) -> TEntity | None:
        entities = await self._select(
            with_deleted=with_deleted,
            include=include,
            enable_tracking=True,
            where=("id = ?", (self._key(entity_id),)),
        )
        return entities[0] if entities else None

    async def any(self, predicate: Predicate, with_deleted: bool = False) -> bool:
        entities = await self._select(
            with_deleted=with_deleted, include=False, enable_tracking=False
        )
        return any(predicate(entity) for entity in entities)

    async def _select(
        self,
        with_deleted: bool,
        include: bool,
        enable_tracking: bool,
        where: tuple[str, tuple[Any, ...]] | None = None,
    ) -> list[TEntity]:
        await self.database.init_schema()

        clauses: list[str] = []
        params: tuple[Any, ...] = ()
        if where is not None:
            clauses.append(where[0])
            params = where[1]
        if self.soft_delete and not with_deleted:
            clauses.append("deleted_at IS NULL")

        sql = f"SELECT {', '.join(self.columns)} FROM {self.table}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY rowid"

        conn = await self.database.get_connection()
        try:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            entities = [self._parse_row(row) for row in rows]
            if include:
                await self._load_related(conn, entities)
        finally:
            await self.database.return_connection(conn)

        if enable_tracking:
            entities = [self._track(entity) for entity in entities]
        return entities

    def _parse_row(self, row: Sequence[Any]) -> TEntity:
        """Convert a database row to an entity.

        Raises:
            ValueError: If row is malformed or contains invalid data.
        """
        try:
            if not row or len(row) != len(self.columns):
                raise ValueError(
                    f"Invalid row length: expected {len(self.columns)}, "
                    f"got {len(row) if row else 0}"
                )
            return self._from_row(row)
        except Exception as e:
            logger.error(f"Failed to parse {self.table} row: {e}")
            raise ValueError(f"Row parsing failed: {e}") from e

    def _track(self, loaded: TEntity) -> TEntity:
        """Return the tracked instance for ``loaded``, refreshed from storage."""
        tracked = self._identity_map.get(loaded.id)
        if tracked is None:
            self._identity_map[loaded.id] = loaded
            return loaded

        _copy_fields(loaded, tracked)
        return tracked

    async def _restore(self, entity: TEntity) -> None:
        """Reset ``entity`` to its stored values after a rejected write."""
        stored = await self._select(
            with_deleted=True,
            include=False,
            enable_tracking=False,
            where=("id = ?", (self._key(entity.id),)),
        )
        if stored:
            _copy_fields(stored[0], entity)
        else:
            self._identity_map.pop(entity.id, None)


class SQLiteCategoryRepository(SQLiteRepository[Category, int], CategoryRepositoryPort):
    """Categories are plain lookup rows: no audit columns, deletes are permanent."""

    table = "categories"
    columns = ("id", "name")
    conflict_message = "Category already exists"
    soft_delete = False

    def _to_row(self, entity: Category) -> tuple[Any, ...]:
        return (entity.id, entity.name)

    def _from_row(self, row: Sequence[Any]) -> Category:
        category_id, name = row
        return Category(id=category_id, name=name)


class SQLiteEventRepository(SQLiteRepository[Event, UUID], EventRepositoryPort):
    """Event rows; ``include`` loads each event's category."""

    table = "events"
    columns = (
        "id",
        "title",
        "description",
        "image_url",
        "participation_text",
        "category_id",
        "created_at",
        "updated_at",
        "deleted_at",
    )
    conflict_message = EventMessages.EVENT_TITLE_MUST_BE_UNIQUE

    def _key(self, entity_id: Any) -> Any:
        return str(entity_id)

    def _to_row(self, entity: Event) -> tuple[Any, ...]:
        return (
            str(entity.id),
            entity.title,
            entity.description,
            entity.image_url,
            entity.participation_text,
            entity.category_id,
            _format_ts(entity.created_at),
            _format_ts(entity.updated_at),
            _format_ts(entity.deleted_at),
        )

    def _from_row(self, row: Sequence[Any]) -> Event:
        (
            event_id,
            title,
            description,
            image_url,
            participation_text,
            category_id,
            created_at,
            updated_at,
            deleted_at,
        ) = row
        return Event(
            id=UUID(event_id),
            title=title,
            description=description,
            image_url=image_url,
            participation_text=participation_text,
            category_id=category_id,
            created_at=_parse_ts(created_at),
            updated_at=_parse_ts(updated_at),
            deleted_at=_parse_ts(deleted_at),
        )

    async def update(self, entity: Event) -> Event:
        # A changed category_id invalidates the loaded relation
        if entity.category is not None and entity.category.id != entity.category_id:
            entity.category = None
        return await super().update(entity)

    async def _load_related(
        self, conn: aiosqlite.Connection, entities: list[Event]
    ) -> None:
        category_ids = sorted({event.category_id for event in entities})
        if not category_ids:
            return

        placeholders = ", ".join("?" for _ in category_ids)
        cursor = await conn.execute(
            f"SELECT id, name FROM categories WHERE id IN ({placeholders})",
            tuple(category_ids),
        )
        categories = {
            row[0]: Category(id=row[0], name=row[1]) for row in await cursor.fetchall()
        }
        for event in entities:
            event.category = categories.get(event.category_id)


class SQLiteInstructorRepository(
    SQLiteRepository[Instructor, UUID], InstructorRepositoryPort
):
    """Instructor rows. Instructors have no related records to include."""

    table = "instructors"
    columns = ("id", "name", "about", "created_at", "updated_at", "deleted_at")
    conflict_message = InstructorMessages.INSTRUCTOR_NAME_MUST_BE_UNIQUE

    def _key(self, entity_id: Any) -> Any:
        return str(entity_id)

    def _to_row(self, entity: Instructor) -> tuple[Any, ...]:
        return (
            str(entity.id),
            entity.name,
            entity.about,
            _format_ts(entity.created_at),
            _format_ts(entity.updated_at),
            _format_ts(entity.deleted_at),
        )

    def _from_row(self, row: Sequence[Any]) -> Instructor:
        instructor_id, name, about, created_at, updated_at, deleted_at = row
        return Instructor(
            id=UUID(instructor_id),
            name=name,
            about=about,
            created_at=_parse_ts(created_at),
            updated_at=_parse_ts(updated_at),
            deleted_at=_parse_ts(deleted_at),
        )
