"""
Persistence gateway: a thin find/insert/update/delete facade over the
users, events and memberships tables.

Services never build queries for simple lookups themselves; they ask a
collection for rows matching keyword filters. Database failures surface
immediately as DatabaseError (no retries). Unique-constraint violations
surface as Conflict so callers can map them to domain errors.
"""

from contextlib import contextmanager
from typing import Any, Generic, Iterable, Optional, Type, TypeVar

from fastapi import Depends
from sqlalchemy import Integer, delete, func, insert, literal, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from event_buddy.core.exceptions import Conflict, DatabaseError
from event_buddy.core.logging import get_logger
from event_buddy.core.metrics import record_db_operation
from event_buddy.db.session import get_db
from event_buddy.models import Event, EventMembership, Sequence, User

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


@contextmanager
def _guard(operation: str, model: str):
    try:
        yield
    except IntegrityError as e:
        record_db_operation("error")
        logger.warning("db_integrity_error", operation=operation, model=model, error=str(e.orig))
        raise Conflict(f"{model} already exists") from e
    except SQLAlchemyError as e:
        record_db_operation("error")
        logger.error("db_operation_failed", operation=operation, model=model, error=str(e))
        raise DatabaseError() from e
    record_db_operation(operation)


class Collection(Generic[ModelT]):
    """Filter-based access to one mapped model."""

    def __init__(self, db: AsyncSession, model: Type[ModelT]):
        self.db = db
        self.model = model
        self.name = model.__name__

    async def find(self, *, order_by: Optional[Iterable[Any]] = None, **filters) -> list[ModelT]:
        query = select(self.model).filter_by(**filters)
        if order_by is not None:
            query = query.order_by(*order_by)
        with _guard("read", self.name):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def find_one(self, *, fresh: bool = False, for_update: bool = False, **filters) -> Optional[ModelT]:
        """
        First row matching the filters, or None.
        `fresh=True` overwrites any in-session copy with what the database holds.
        `for_update=True` row-locks the match until the transaction ends
        (ignored by SQLite, which serializes writers instead).
        """
        query = select(self.model).filter_by(**filters).limit(1)
        if fresh:
            query = query.execution_options(populate_existing=True)
        if for_update:
            query = query.with_for_update()
        with _guard("read", self.name):
            result = await self.db.execute(query)
            return result.scalars().first()

    async def count(self, **filters) -> int:
        query = select(func.count()).select_from(self.model).filter_by(**filters)
        with _guard("read", self.name):
            return (await self.db.execute(query)).scalar_one()

    async def insert(self, **values) -> ModelT:
        obj = self.model(**values)
        with _guard("write", self.name):
            self.db.add(obj)
            await self.db.flush()
            await self.db.refresh(obj)
        return obj

    async def save(self, obj: ModelT, **values) -> ModelT:
        for key, value in values.items():
            setattr(obj, key, value)
        with _guard("write", self.name):
            await self.db.flush()
            await self.db.refresh(obj)
        return obj

    async def delete(self, **filters) -> int:
        with _guard("write", self.name):
            result = await self.db.execute(delete(self.model).filter_by(**filters))
            await self.db.flush()
        return result.rowcount

    async def remove(self, obj: ModelT) -> None:
        with _guard("write", self.name):
            await self.db.delete(obj)
            await self.db.flush()


class PersistenceGateway:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users: Collection[User] = Collection(db, User)
        self.events: Collection[Event] = Collection(db, Event)
        self.memberships: Collection[EventMembership] = Collection(db, EventMembership)

    async def next_sequence(self, name: str) -> int:
        """Atomically increment and return the named counter, creating it at 1."""
        with _guard("write", "Sequence"):
            result = await self.db.execute(
                update(Sequence)
                .where(Sequence.name == name)
                .values(value=Sequence.value + 1)
                .returning(Sequence.value)
                .execution_options(synchronize_session=False)
            )
            value = result.scalar_one_or_none()
            if value is None:
                self.db.add(Sequence(name=name, value=1))
                await self.db.flush()
                value = 1
        return value

    async def add_membership_if_room(self, user_id: int, event: Event) -> bool:
        """
        Insert a membership only while the event is below max_attendees.

        The capacity test and the insert are one statement:
            INSERT INTO event_memberships (user_id, event_id)
            SELECT :user_id, :event_id WHERE (SELECT count(*) ...) < :max
        so two joins racing for the last place cannot both land.
        Returns False when the event was already full.
        A duplicate (user, event) still surfaces as Conflict.
        """
        values = select(literal(user_id, Integer), literal(event.id, Integer))
        if event.max_attendees is not None:
            taken = (
                select(func.count())
                .select_from(EventMembership)
                .where(EventMembership.event_id == event.id)
                .scalar_subquery()
            )
            values = values.where(taken < event.max_attendees)

        statement = insert(EventMembership.__table__).from_select(["user_id", "event_id"], values)
        with _guard("write", "EventMembership"):
            result = await self.db.execute(statement)
        return result.rowcount == 1

    async def created_events(self, user_id: int) -> list[Event]:
        return await self.events.find(creator_id=user_id, order_by=[Event.id.asc()])

    async def joined_events(self, user_id: int) -> list[Event]:
        """Events the user joined, in join order. Inner join drops dangling rows."""
        query = (
            select(Event)
            .join(EventMembership, EventMembership.event_id == Event.id)
            .where(EventMembership.user_id == user_id)
            .order_by(EventMembership.id.asc())
        )
        with _guard("read", "Event"):
            result = await self.db.execute(query)
            return list(result.scalars().all())


async def get_gateway(db: AsyncSession = Depends(get_db)) -> PersistenceGateway:
    return PersistenceGateway(db)
