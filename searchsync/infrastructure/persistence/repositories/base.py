"""Base repository: generic CRUD and lifecycle hooks (search sync subscribes here)."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from sqlalchemy import and_, delete, inspect as sa_inspect, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import object_session

from searchsync.domain.exceptions import ResourceNotFoundException
from searchsync.infrastructure.persistence.database import Base
from searchsync.shared.enums import LifecycleEvent

logger = logging.getLogger(__name__)

LifecycleHandler = Callable[[Any], Awaitable[None]]

ModelType = TypeVar("ModelType", bound=Base)


class RepositoryHooks:
    """Typed subscription point for record lifecycle events.

    Handlers are awaited in subscription order, inside the repository call
    that triggered them. A handler error propagates to the caller and stops
    the remaining handlers.
    """

    def __init__(self) -> None:
        self._handlers: dict[LifecycleEvent, list[LifecycleHandler]] = defaultdict(list)

    def subscribe(self, event: LifecycleEvent, handler: LifecycleHandler) -> None:
        """Register handler for event (a handler is registered at most once)."""
        if handler not in self._handlers[event]:
            self._handlers[event].append(handler)

    def unsubscribe(self, event: LifecycleEvent, handler: LifecycleHandler) -> None:
        """Remove handler for event if present."""
        if handler in self._handlers[event]:
            self._handlers[event].remove(handler)

    def handlers(self, event: LifecycleEvent) -> list[LifecycleHandler]:
        return list(self._handlers[event])

    async def emit(self, event: LifecycleEvent, obj: Any) -> None:
        """Await every handler subscribed to event with obj."""
        for handler in self.handlers(event):
            await handler(obj)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, get_all, create, update, delete and hooks.

    create, update and delete emit AFTER_CREATE, AFTER_UPDATE and
    AFTER_DELETE on self.hooks once the row is flushed. Set-based
    update_where/delete_where never emit: they do not load the affected rows.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model
        self.hooks = RepositoryHooks()

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """Return a single record by primary key, or None."""
        return await self.db.get(self.model, entity_id)

    async def get_many(self, entity_ids: list[Any]) -> list[ModelType]:
        """Return records whose primary key is in entity_ids (unordered)."""
        if not entity_ids:
            return []
        pk = sa_inspect(self.model).primary_key[0]
        result = await self.db.execute(select(self.model).where(pk.in_(entity_ids)))
        return list(result.scalars().all())

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """Return records with pagination, ordered by primary key."""
        pk = sa_inspect(self.model).primary_key[0]
        result = await self.db.execute(
            select(self.model).order_by(pk).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(
        self, obj: ModelType, *, skip_existence_check: bool = False
    ) -> ModelType:
        """Update an existing record (merge if detached) and run _on_after_update hook.

        Verifies the record exists by primary key before merging; raises
        ResourceNotFoundException if any PK is missing or no row is found.
        When the object is already attached to this session, skips the existence
        SELECT. When skip_existence_check is True, the SELECT is also skipped.
        """
        mapper = sa_inspect(self.model)
        pk_attrs = [mapper.get_property_by_column(c) for c in mapper.primary_key]
        for attr in pk_attrs:
            if getattr(obj, attr.key) is None:
                raise ValueError(
                    f"Cannot update: primary key '{attr.key}' is missing on "
                    f"{self.model.__name__} instance."
                )
        attached = object_session(obj) is self.db.sync_session
        if not attached and not skip_existence_check:
            stmt = select(self.model).where(
                and_(
                    *(getattr(self.model, a.key) == getattr(obj, a.key) for a in pk_attrs)
                )
            )
            result = await self.db.execute(stmt)
            if result.scalar_one_or_none() is None:
                pk_str = ",".join(str(getattr(obj, a.key)) for a in pk_attrs)
                raise ResourceNotFoundException(self.model.__name__, pk_str)
            obj = await self.db.merge(obj)
        elif not attached and skip_existence_check:
            obj = await self.db.merge(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Run _on_before_delete hook, delete the record, then run _on_after_delete."""
        await self._on_before_delete(obj)
        await self.db.delete(obj)
        await self.db.flush()
        await self._on_after_delete(obj)

    async def update_where(self, values: dict[str, Any], *criteria: Any) -> int:
        """Set-based UPDATE of every row matching criteria. Returns rowcount.

        Lifecycle hooks do not run and the search index is NOT synced. Load
        the affected records and use SearchableCollection.update_index()
        afterwards when the index must follow.
        """
        result = await self.db.execute(
            update(self.model).where(*criteria).values(**values)
        )
        logger.debug(
            "Set-based update on %s touched %s row(s); search index not synced",
            self.model.__name__,
            result.rowcount,
        )
        return result.rowcount

    async def delete_where(self, *criteria: Any) -> int:
        """Set-based DELETE of every row matching criteria. Returns rowcount.

        Lifecycle hooks do not run and the search index is NOT synced. Load
        the affected records and use SearchableCollection.remove_index()
        before deleting when the index must follow.
        """
        result = await self.db.execute(delete(self.model).where(*criteria))
        logger.debug(
            "Set-based delete on %s removed %s row(s); search index not synced",
            self.model.__name__,
            result.rowcount,
        )
        return result.rowcount

    async def _on_after_create(self, obj: ModelType) -> None:
        await self.hooks.emit(LifecycleEvent.AFTER_CREATE, obj)

    async def _on_after_update(self, obj: ModelType) -> None:
        await self.hooks.emit(LifecycleEvent.AFTER_UPDATE, obj)

    async def _on_before_delete(self, obj: ModelType) -> None:
        """Override in subclasses to validate or snapshot before delete."""

    async def _on_after_delete(self, obj: ModelType) -> None:
        await self.hooks.emit(LifecycleEvent.AFTER_DELETE, obj)
