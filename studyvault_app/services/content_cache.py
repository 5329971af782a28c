"""In-process snapshot of every course, question and tag.

Each collection is an immutable tuple of DTOs. Writers build a new tuple and
swap it in under ``_write_lock``; readers just take the current tuple, so a
request never sees a half-applied change.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Dict, Iterable, Optional, Tuple

from flask import current_app

from ..core.signals import content_created, content_deleted, content_purged, content_updated
from ..schemas import CourseDTO, QuestionDTO, TagDTO

logger = logging.getLogger(__name__)


class ContentCache:
    """Whole-collection-replacement cache with a single writer lock."""

    def __init__(self):
        self._courses: Tuple[CourseDTO, ...] = ()
        self._questions: Tuple[QuestionDTO, ...] = ()
        self._tags: Tuple[TagDTO, ...] = ()
        self._loaded = False
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def courses(self) -> Tuple[CourseDTO, ...]:
        return self._courses

    @property
    def questions(self) -> Tuple[QuestionDTO, ...]:
        return self._questions

    @property
    def tags(self) -> Tuple[TagDTO, ...]:
        return self._tags

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get_course(self, course_id) -> Optional[CourseDTO]:
        return _find(self._courses, course_id)

    def get_question(self, question_id) -> Optional[QuestionDTO]:
        return _find(self._questions, question_id)

    def get_tag(self, tag_id) -> Optional[TagDTO]:
        return _find(self._tags, tag_id)

    def course_index(self) -> Dict[int, CourseDTO]:
        return {course.id: course for course in self._courses}

    def tag_index(self) -> Dict[int, TagDTO]:
        return {tag.id: tag for tag in self._tags}

    # ------------------------------------------------------------------
    # Write side: every method ends in a whole-collection replacement
    # ------------------------------------------------------------------
    def load(self, store) -> None:
        """Fetch all three collections from the store (application start)."""
        courses = store.list_all('courses')
        questions = store.list_all('questions')
        tags = store.list_all('tags')
        with self._write_lock:
            self._courses = tuple(courses)
            self._questions = tuple(questions)
            self._tags = tuple(tags)
            self._loaded = True

    def replace_courses(self, courses: Iterable[CourseDTO]) -> None:
        snapshot = tuple(courses)
        with self._write_lock:
            self._courses = snapshot

    def replace_questions(self, questions: Iterable[QuestionDTO]) -> None:
        snapshot = tuple(questions)
        with self._write_lock:
            self._questions = snapshot

    def replace_tags(self, tags: Iterable[TagDTO]) -> None:
        snapshot = tuple(tags)
        with self._write_lock:
            self._tags = snapshot

    def upsert(self, collection: str, record) -> None:
        with self._write_lock:
            current = getattr(self, _ATTRS[collection])
            if any(item.id == record.id for item in current):
                updated = tuple(record if item.id == record.id else item for item in current)
            else:
                updated = current + (record,)
            setattr(self, _ATTRS[collection], updated)

    def remove(self, collection: str, record_id) -> None:
        with self._write_lock:
            current = getattr(self, _ATTRS[collection])
            setattr(self, _ATTRS[collection], tuple(item for item in current if item.id != record_id))

    def merge_questions(self, fetched: Iterable[QuestionDTO]) -> int:
        """Additive merge: fetched records win, nothing cached is evicted.

        Returns the number of questions that were not cached before.
        """
        fetched = tuple(fetched)
        if not fetched:
            return 0
        with self._write_lock:
            incoming = {question.id: question for question in fetched}
            merged = [incoming.pop(question.id, question) for question in self._questions]
            added = len(incoming)
            merged.extend(incoming.values())
            self._questions = tuple(merged)
        return added

    def untag_questions(self, tag_id) -> None:
        """Drop ``tag_id`` from every cached question's tag set."""
        with self._write_lock:
            self._questions = tuple(
                _without_tag(question, tag_id) if tag_id in question.tag_ids else question
                for question in self._questions
            )

    def clear(self, *collections: str) -> None:
        with self._write_lock:
            for collection in collections or tuple(_ATTRS):
                setattr(self, _ATTRS[collection], ())


_ATTRS = {
    'courses': '_courses',
    'questions': '_questions',
    'tags': '_tags',
}


def _find(records, record_id):
    if record_id is None:
        return None
    try:
        wanted = int(record_id)
    except (TypeError, ValueError):
        return None
    for record in records:
        if record.id == wanted:
            return record
    return None


def _without_tag(question: QuestionDTO, tag_id) -> QuestionDTO:
    return replace(question, tag_ids=tuple(t for t in question.tag_ids if t != tag_id))


def get_content_cache(app=None) -> ContentCache:
    app = app or current_app
    return app.extensions['content_cache']


# ----------------------------------------------------------------------
# Keep the cache of the writing process in step with the store
# ----------------------------------------------------------------------
@content_created.connect
def _on_content_created(sender, collection=None, record=None, **_kwargs):
    get_content_cache(sender).upsert(collection, record)


@content_updated.connect
def _on_content_updated(sender, collection=None, record=None, **_kwargs):
    get_content_cache(sender).upsert(collection, record)


@content_deleted.connect
def _on_content_deleted(sender, collection=None, record_id=None, **_kwargs):
    cache = get_content_cache(sender)
    cache.remove(collection, record_id)
    if collection == 'tags':
        # Stored questions keep the dangling id; only this cache is untagged.
        cache.untag_questions(record_id)
        logger.info("Removed tag %s from cached questions", record_id)


@content_purged.connect
def _on_content_purged(sender, collections=(), **_kwargs):
    get_content_cache(sender).clear(*collections)
    logger.info("Cleared cached collections: %s", ", ".join(collections))
