# app/db/store.py
"""
Document store adapter.

A thin collection/document API over the `documents` table. Every service gets
its own DocumentStore handle at construction time; there is no module-level
store.

Filtering and ordering run in Python over one collection at a time, which
keeps the adapter portable across SQLAlchemy backends.
"""
import logging
import operator
import uuid
from contextlib import contextmanager
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.db.models.document import Document

logger = logging.getLogger(__name__)

_OPS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda value, options: value in options,
}

Filter = Tuple[str, str, Any]


class DocumentNotFound(LookupError):
    pass


def encode(value: Any) -> Any:
    """Convert a Python value into something the JSON column accepts."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        # fixed width so that string order == time order
        return value.astimezone(timezone.utc).isoformat(timespec="microseconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [encode(v) for v in value]
    return value


def _matches(data: Dict[str, Any], filters: Iterable[Filter]) -> bool:
    for field, op, expected in filters:
        if field not in data:
            return False
        actual = data[field]
        try:
            if not _OPS[op](actual, expected):
                return False
        except TypeError:
            # comparing incompatible types never matches
            return False
    return True


class DocumentStore:
    def __init__(self, db: Session):
        self.db = db
        self._batch_depth = 0

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    # ---------- writes ----------

    def add(self, collection: str, data: Dict[str, Any], doc_id: Optional[str] = None) -> str:
        doc_id = doc_id or data.get("id") or self.new_id()
        payload = encode({**data, "id": doc_id})
        self.db.add(Document(collection=collection, id=doc_id, data=payload))
        self._commit()
        return doc_id

    def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> None:
        row = self._row(collection, doc_id)
        if row is None:
            raise DocumentNotFound(f"{collection}/{doc_id}")
        # JSON columns are not mutation-tracked; assign a fresh dict
        row.data = {**row.data, **encode(changes)}
        self._commit()

    def delete(self, collection: str, doc_id: str) -> bool:
        row = self._row(collection, doc_id)
        if row is None:
            return False
        self.db.delete(row)
        self._commit()
        return True

    @contextmanager
    def batch(self):
        """Group writes so they commit (or roll back) together."""
        self._batch_depth += 1
        try:
            yield self
        except Exception:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self.db.rollback()
            raise
        else:
            self._batch_depth -= 1
            self._commit()

    # ---------- reads ----------

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        row = self._row(collection, doc_id)
        if row is None:
            return None
        return {**row.data, "id": row.id}

    def find(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        conditions = [(k, "==", encode(v)) for k, v in (where or {}).items()]
        conditions.extend((f, op, encode(v)) for f, op, v in filters)

        docs = [d for d in self._scan(collection) if _matches(d, conditions)]

        if order_by:
            present = [d for d in docs if d.get(order_by) is not None]
            missing = [d for d in docs if d.get(order_by) is None]
            present.sort(key=lambda d: d[order_by], reverse=descending)
            docs = present + missing

        if limit is not None:
            docs = docs[:limit]
        return docs

    def all(self, collection: str) -> List[Dict[str, Any]]:
        return self.find(collection)

    def count(self, collection: str, where: Optional[Dict[str, Any]] = None) -> int:
        if not where:
            stmt = select(func.count()).select_from(Document).where(Document.collection == collection)
            return self.db.execute(stmt).scalar() or 0
        return len(self.find(collection, where=where))

    # ---------- internals ----------

    def _row(self, collection: str, doc_id: str) -> Optional[Document]:
        return self.db.get(Document, (collection, doc_id))

    def _scan(self, collection: str) -> List[Dict[str, Any]]:
        if self._batch_depth:
            self.db.flush()
        rows = self.db.execute(select(Document).where(Document.collection == collection)).scalars()
        return [{**row.data, "id": row.id} for row in rows]

    def _commit(self) -> None:
        if self._batch_depth:
            self.db.flush()
            return
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)
