"""Activity persistence behind one interface.

ActivityRepository is the contract the service depends on. Two backends:
InMemoryActivityRepository (process-local dict) and SqlActivityRepository
(SQLAlchemy through crud.py). build_repository() picks one from Settings.
"""

import logging
import threading
from contextlib import contextmanager
from typing import List, Protocol

from sqlalchemy.exc import SQLAlchemyError

from . import crud
from .database import make_engine, make_session_factory, init_db
from .errors import InvalidArgumentError, StorageError
from .schemas import Activity

logger = logging.getLogger(__name__)

SORT_FIELDS = ("timestamp", "value", "category")


def check_listing_args(sort_by, sort_order, limit, offset):
    if sort_by not in SORT_FIELDS:
        raise InvalidArgumentError(
            f"sort_by must be one of {', '.join(SORT_FIELDS)}", field="sort_by",
        )
    if limit is not None and limit < 0:
        raise InvalidArgumentError("limit must not be negative", field="limit")
    if offset < 0:
        raise InvalidArgumentError("offset must not be negative", field="offset")
    # anything but "asc" sorts descending
    return "asc" if sort_order == "asc" else "desc"


class ActivityRepository(Protocol):
    def add(self, activity: Activity) -> Activity: ...
    def get(self, activity_id: str) -> Activity | None: ...
    def update(self, activity: Activity) -> Activity | None: ...
    def delete(self, activity_id: str) -> bool: ...
    def list(
        self, user_id: str, category: str | None = None,
        sort_by: str = "timestamp", sort_order: str = "desc",
        limit: int | None = 10, offset: int = 0,
    ) -> List[Activity]: ...
    def all_for_user(self, user_id: str) -> List[Activity]: ...
    def close(self) -> None: ...


class InMemoryActivityRepository:
    """Dict-backed store; contents are lost when the process exits."""

    def __init__(self):
        self._items: dict[str, Activity] = {}
        self._lock = threading.Lock()

    def add(self, activity):
        with self._lock:
            self._items[activity.id] = activity.model_copy(deep=True)
        return activity

    def get(self, activity_id):
        with self._lock:
            item = self._items.get(activity_id)
            return item.model_copy(deep=True) if item else None

    def update(self, activity):
        with self._lock:
            if activity.id not in self._items:
                return None
            self._items[activity.id] = activity.model_copy(deep=True)
        return activity

    def delete(self, activity_id):
        with self._lock:
            return self._items.pop(activity_id, None) is not None

    def list(self, user_id, category=None, sort_by="timestamp", sort_order="desc", limit=10, offset=0):
        order = check_listing_args(sort_by, sort_order, limit, offset)
        with self._lock:
            rows = [a for a in self._items.values() if a.user_id == user_id]
        if category:
            rows = [a for a in rows if a.category == category]
        rows.sort(key=lambda a: a.id)
        rows.sort(key=lambda a: getattr(a, sort_by), reverse=(order == "desc"))
        end = None if limit is None else offset + limit
        return [a.model_copy(deep=True) for a in rows[offset:end]]

    def all_for_user(self, user_id):
        return self.list(user_id, limit=None)

    def close(self):
        with self._lock:
            self._items.clear()


class SqlActivityRepository:
    """SQLAlchemy-backed store, one session per operation."""

    def __init__(self, database_url):
        self.engine = make_engine(database_url)
        self._session_factory = make_session_factory(self.engine)
        init_db(self.engine)

    @contextmanager
    def session(self):
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Activity store error: {e}")
            raise StorageError("Database operation failed", "query") from e
        finally:
            db.close()

    def add(self, activity):
        with self.session() as db:
            return crud.to_record(crud.create_activity(db, activity))

    def get(self, activity_id):
        with self.session() as db:
            row = crud.get_activity(db, activity_id)
            return crud.to_record(row) if row else None

    def update(self, activity):
        with self.session() as db:
            row = crud.update_activity(db, activity)
            return crud.to_record(row) if row else None

    def delete(self, activity_id):
        with self.session() as db:
            return crud.delete_activity(db, activity_id)

    def list(self, user_id, category=None, sort_by="timestamp", sort_order="desc", limit=10, offset=0):
        order = check_listing_args(sort_by, sort_order, limit, offset)
        with self.session() as db:
            rows = crud.list_activities(db, user_id, category, sort_by, order, limit, offset)
            return [crud.to_record(r) for r in rows]

    def all_for_user(self, user_id):
        return self.list(user_id, limit=None)

    def close(self):
        self.engine.dispose()


def build_repository(settings) -> ActivityRepository:
    if settings.activity_store == "sql":
        logger.info("Using SQL activity store", extra={"store": "sql"})
        return SqlActivityRepository(settings.database_url)
    logger.info("Using in-memory activity store", extra={"store": "memory"})
    return InMemoryActivityRepository()
