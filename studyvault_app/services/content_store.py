"""Content store: CRUD and simple queries over courses, questions and tags.

Records cross this boundary as immutable DTOs (see ``schemas.py``). Every
SQLAlchemy failure is rolled back, logged and re-raised as ``StoreError``;
nothing here retries.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..core.error_handlers import NotFoundError, StoreError
from ..core.signals import content_created, content_deleted, content_purged, content_updated
from ..extensions import db
from ..models import Course, Question, QuestionTag, Tag

logger = logging.getLogger(__name__)

COLLECTIONS = {
    'courses': Course,
    'questions': Question,
    'tags': Tag,
}

# Columns each collection accepts on create/update; anything else is ignored.
WRITABLE_FIELDS = {
    'courses': ('title', 'description', 'color', 'topics', 'is_sample'),
    'questions': (
        'course_id', 'title', 'content', 'answer', 'difficulty',
        'type', 'topic', 'tag_ids', 'estimated_time', 'is_sample',
    ),
    'tags': ('name', 'color'),
}

# Columns usable in ``list_where`` equality filters.
QUERYABLE_FIELDS = {
    'courses': ('title', 'is_sample'),
    'questions': ('course_id', 'topic', 'difficulty', 'type', 'is_sample'),
    'tags': ('name',),
}


def _store_call(operation: str):
    """Roll back and translate database errors for one store operation."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.exception("Content store operation '%s' failed", operation)
                raise StoreError(f"Failed to {operation.replace('_', ' ')}.", operation=operation) from exc
        return wrapper

    return decorator


def _sender():
    return current_app._get_current_object()


class ContentStore:
    """Persistence boundary for the three content collections."""

    def __init__(self, session=None):
        self.session = session or db.session

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _model(collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection '{collection}'") from None

    @staticmethod
    def _apply(collection: str, record, data: Dict[str, Any]) -> None:
        for field in WRITABLE_FIELDS[collection]:
            if field in data:
                setattr(record, field, data[field])

    def _get_record(self, collection: str, record_id: int):
        return self.session.get(self._model(collection), record_id)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    @_store_call('create_record')
    def create(self, collection: str, data: Dict[str, Any]):
        model = self._model(collection)
        record = model()
        self._apply(collection, record, data)
        self.session.add(record)
        self.session.commit()
        dto = record.to_dto()
        logger.info("Created %s record %s", collection, dto.id)
        content_created.send(_sender(), collection=collection, record=dto)
        return dto

    @_store_call('get_record')
    def get_by_id(self, collection: str, record_id: int):
        record = self._get_record(collection, record_id)
        return record.to_dto() if record else None

    @_store_call('list_records')
    def list_all(self, collection: str) -> List[Any]:
        model = self._model(collection)
        primary_key = model.__mapper__.primary_key[0]
        return [record.to_dto() for record in self.session.query(model).order_by(primary_key).all()]

    @_store_call('update_record')
    def update(self, collection: str, record_id: int, data: Dict[str, Any]):
        record = self._get_record(collection, record_id)
        if record is None:
            raise NotFoundError(f"{collection[:-1].capitalize()} not found", resource=collection)
        self._apply(collection, record, data)
        # Tag edits only touch question_tags rows, which never trigger onupdate.
        record.updated_at = func.now()
        self.session.commit()
        dto = record.to_dto()
        logger.info("Updated %s record %s", collection, record_id)
        content_updated.send(_sender(), collection=collection, record=dto)
        return dto

    @_store_call('delete_record')
    def delete(self, collection: str, record_id: int) -> int:
        record = self._get_record(collection, record_id)
        if record is None:
            raise NotFoundError(f"{collection[:-1].capitalize()} not found", resource=collection)
        self.session.delete(record)
        self.session.commit()
        logger.info("Deleted %s record %s", collection, record_id)
        content_deleted.send(_sender(), collection=collection, record_id=record_id)
        return record_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @_store_call('query_records')
    def list_where(self, collection: str, **equals) -> List[Any]:
        """Equality filters; a list/tuple/set value means "field in values"."""
        model = self._model(collection)
        query = self.session.query(model)
        for field, value in equals.items():
            if field not in QUERYABLE_FIELDS[collection]:
                raise ValueError(f"Field '{field}' cannot be queried on {collection}")
            column = getattr(model, field)
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.filter(column.in_(list(value)))
            else:
                query = query.filter(column == value)
        primary_key = model.__mapper__.primary_key[0]
        return [record.to_dto() for record in query.order_by(primary_key).all()]

    @_store_call('query_questions_by_tag')
    def questions_with_tag(self, tag_id: int) -> List[Any]:
        """The single array-contains query: questions whose tag set holds ``tag_id``."""
        records = (
            self.session.query(Question)
            .join(QuestionTag, QuestionTag.question_id == Question.question_id)
            .filter(QuestionTag.tag_id == tag_id)
            .order_by(Question.question_id)
            .all()
        )
        return [record.to_dto() for record in records]

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------
    @_store_call('delete_all_questions')
    def delete_all_questions(self) -> int:
        """Delete every question in one transaction; returns the count."""
        deleted = self._purge_questions()
        self.session.commit()
        logger.warning("Deleted all questions (%d)", deleted)
        content_purged.send(_sender(), collections=('questions',))
        return deleted

    @_store_call('delete_all_courses')
    def delete_all_courses(self) -> Tuple[int, int]:
        """Delete every course and every question in one transaction."""
        deleted_questions = self._purge_questions()
        deleted_courses = self.session.query(Course).delete(synchronize_session=False)
        self.session.commit()
        logger.warning(
            "Deleted all courses (%d) and questions (%d)", deleted_courses, deleted_questions
        )
        content_purged.send(_sender(), collections=('courses', 'questions'))
        return deleted_courses, deleted_questions

    def _purge_questions(self) -> int:
        self.session.query(QuestionTag).delete(synchronize_session=False)
        deleted = self.session.query(Question).delete(synchronize_session=False)
        self.session.expire_all()
        return deleted

    # ------------------------------------------------------------------
    # Convenience wrappers used by the routes
    # ------------------------------------------------------------------
    def get_or_404(self, collection: str, record_id: int, redirect: Optional[str] = None):
        dto = self.get_by_id(collection, record_id)
        if dto is None:
            raise NotFoundError(
                f"{collection[:-1].capitalize()} not found",
                resource=collection,
                redirect=redirect,
            )
        return dto
