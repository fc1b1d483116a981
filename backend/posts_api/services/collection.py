"""
Posts & Comments API — Collections (Data Access)
==================================================

What:  The narrow data-access interface the resource controller consumes,
       and its async SQLAlchemy implementation.
How:   `Collection` is a typing.Protocol with five operations. `SqlCollection`
       implements it for one ORM model, using pydantic schemas for the
       resource's field rules and wire names.
Who:   Constructed once per resource in main.create_app(); called only by
       ResourceController.

Record shape:
    Records leave a collection as plain JSON-ready dicts keyed by wire names:
        {"_id": "5f0c...", "title": "...", "createdAt": "2024-01-15T12:00:00Z"}

Filter semantics (find):
    Exact match on every key. Keys are wire names. Values are cast to the
    field's type first (a cast failure raises ValidationError). A list value
    matches any of its items. A key naming no field matches nothing, so the
    result is an empty list.

Error contract:
    ValidationError   the record (or a filter value) broke the field rules
    None              find_by_id / update / delete on an unknown identifier
    anything else     store failure, propagated unchanged
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import (
    Any,
    AsyncIterator,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Type,
    runtime_checkable,
)

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from posts_api.database import Base
from posts_api.exceptions import ValidationError
from posts_api.schemas.common import RecordSchema

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

# Store-assigned fields; never written from a request body
_STORE_ASSIGNED = frozenset({"id", "created_at"})


@runtime_checkable
class Collection(Protocol):
    """Store of records of one resource type."""

    name: str

    async def find(self, filter: Mapping[str, Any]) -> List[Record]:
        ...

    async def find_by_id(self, record_id: str) -> Optional[Record]:
        ...

    async def create(self, fields: Mapping[str, Any]) -> Record:
        ...

    async def find_by_id_and_update(
        self,
        record_id: str,
        fields: Mapping[str, Any],
        *,
        return_updated: bool = True,
        validate: bool = True,
    ) -> Optional[Record]:
        ...

    async def find_by_id_and_delete(self, record_id: str) -> Optional[Record]:
        ...


def describe_validation_error(exc: SchemaValidationError, prefix: str) -> str:
    """
    Flatten pydantic errors into one line.

    Missing fields read "title: Path `title` is required."; any other
    problem uses pydantic's own message.
    """
    problems = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"]) or "body"
        if err["type"] == "missing":
            problems.append(f"{path}: Path `{path}` is required.")
        else:
            problems.append(f"{path}: {err['msg']}")
    return f"{prefix}: " + ", ".join(problems)


class SqlCollection:
    """
    Collection backed by one SQLAlchemy model.

    Every operation runs in its own session: commit on success, rollback on
    any exception. Instances hold no per-request state and are safe to share
    across concurrent requests.

    Args:
        name:            Resource name used in validation messages ("post")
        model:           ORM class
        record_schema:   RecordSchema subclass; defines the wire field names
        create_schema:   Rules for create bodies
        update_schema:   Rules for partial update bodies
        session_factory: async_sessionmaker bound to the target engine
    """

    def __init__(
        self,
        name: str,
        model: Type[Base],
        record_schema: Type[RecordSchema],
        create_schema: Type[BaseModel],
        update_schema: Type[BaseModel],
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self.name = name
        self._model = model
        self._record_schema = record_schema
        self._create_schema = create_schema
        self._update_schema = update_schema
        self._session_factory = session_factory

        # wire name → ORM attribute, and the adapter that casts filter values
        self._fields: Dict[str, str] = {}
        self._casters: Dict[str, Tuple[str, TypeAdapter]] = {}
        for attr, info in record_schema.model_fields.items():
            wire = info.serialization_alias or info.alias or attr
            self._fields[wire] = attr
            type_name = getattr(info.annotation, "__name__", "value")
            self._casters[wire] = (type_name, TypeAdapter(info.annotation))

    def __repr__(self) -> str:
        return f"<SqlCollection(name='{self.name}', model={self._model.__name__})>"

    # ── Session Scope ─────────────────────────────────────────────────────

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    # ── Serialization Helpers ─────────────────────────────────────────────

    def _to_record(self, row: Base) -> Record:
        return self._record_schema.model_validate(row).model_dump(by_alias=True, mode="json")

    def _cast(self, wire: str, value: Any) -> Any:
        type_name, caster = self._casters[wire]
        try:
            cast = caster.validate_python(value)
        except SchemaValidationError:
            raise ValidationError(
                message=f'Cast to {type_name} failed for value "{value}" at path "{wire}"',
                field=wire,
            )
        if isinstance(cast, datetime):
            # Stored timestamps are UTC
            cast = cast.replace(tzinfo=timezone.utc) if cast.tzinfo is None else cast.astimezone(timezone.utc)
        return cast

    def _validated(self, schema: Type[BaseModel], fields: Mapping[str, Any], prefix: str) -> Dict[str, Any]:
        try:
            data = schema.model_validate(fields)
        except SchemaValidationError as exc:
            raise ValidationError(message=describe_validation_error(exc, prefix))
        return {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if key not in _STORE_ASSIGNED
        }

    def _unvalidated(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        values = {}
        for wire, value in fields.items():
            if wire not in self._fields:
                continue
            attr = self._fields[wire]
            if attr not in _STORE_ASSIGNED:
                values[attr] = value
        return values

    # ── Collection Operations ─────────────────────────────────────────────

    async def find(self, filter: Mapping[str, Any]) -> List[Record]:
        query = select(self._model)
        for wire, value in filter.items():
            if wire not in self._fields:
                logger.debug("%s: filter key '%s' names no field; nothing matches", self.name, wire)
                return []
            column = getattr(self._model, self._fields[wire])
            if isinstance(value, (list, tuple)):
                query = query.where(column.in_([self._cast(wire, item) for item in value]))
            else:
                query = query.where(column == self._cast(wire, value))
        query = query.order_by(self._model.created_at, self._model.id)

        async with self._session() as session:
            result = await session.execute(query)
            return [self._to_record(row) for row in result.scalars().all()]

    async def find_by_id(self, record_id: str) -> Optional[Record]:
        async with self._session() as session:
            row = await session.get(self._model, record_id)
            return self._to_record(row) if row is not None else None

    async def create(self, fields: Mapping[str, Any]) -> Record:
        values = self._validated(self._create_schema, fields, f"{self.name} validation failed")
        row = self._model(**values)
        async with self._session() as session:
            session.add(row)
            await session.flush()
            record = self._to_record(row)
        logger.info("%s %s created", self.name, record["_id"])
        return record

    async def find_by_id_and_update(
        self,
        record_id: str,
        fields: Mapping[str, Any],
        *,
        return_updated: bool = True,
        validate: bool = True,
    ) -> Optional[Record]:
        if validate:
            values = self._validated(self._update_schema, fields, "Validation failed")
        else:
            values = self._unvalidated(fields)

        async with self._session() as session:
            row = await session.get(self._model, record_id)
            if row is None:
                return None
            before = self._to_record(row)
            for attr, value in values.items():
                setattr(row, attr, value)
            await session.flush()
            after = self._to_record(row)

        logger.info("%s %s updated (%s)", self.name, record_id, ", ".join(values) or "no fields")
        return after if return_updated else before

    async def find_by_id_and_delete(self, record_id: str) -> Optional[Record]:
        async with self._session() as session:
            row = await session.get(self._model, record_id)
            if row is None:
                return None
            record = self._to_record(row)
            await session.delete(row)

        logger.info("%s %s deleted", self.name, record_id)
        return record
