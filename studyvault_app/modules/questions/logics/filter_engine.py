# File: studyvault_app/modules/questions/logics/filter_engine.py
"""
Resolve a FilterSpec into the matching questions.

Two paths:
- course and/or difficulty only: filter the cached question list in memory;
- any topic or tag constraint: ask the store for course/topic/difficulty
  matches, then apply the tag filter here, because the store can only answer
  one array-contains condition at a time.

Tag matching is OR: a question matches when it carries at least one of the
requested tags. Empty selections never constrain anything.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ....core.defaults import ANY
from ....schemas import QuestionDTO

logger = logging.getLogger(__name__)


def _clean_id(value) -> Optional[int]:
    if value is None or value == '' or value == ANY:
        return None
    return int(value)


@dataclass(frozen=True)
class FilterSpec:
    course_id: Optional[int] = None
    topics: Tuple[str, ...] = ()
    difficulty: Optional[str] = None
    tag_ids: Tuple[int, ...] = ()

    @classmethod
    def build(cls, course_id=None, topics=None, difficulty=None, tag_ids=None) -> "FilterSpec":
        """Normalize raw selections: ``None``, ``''`` and ``'all'`` mean "any"."""
        if isinstance(topics, str):
            topics = [topics]
        cleaned_topics = []
        for topic in topics or ():
            topic = (topic or '').strip()
            if topic and topic != ANY and topic not in cleaned_topics:
                cleaned_topics.append(topic)

        cleaned_tags = []
        for tag_id in tag_ids or ():
            tag_id = _clean_id(tag_id)
            if tag_id is not None and tag_id not in cleaned_tags:
                cleaned_tags.append(tag_id)

        if difficulty in (None, '', ANY):
            difficulty = None

        return cls(
            course_id=_clean_id(course_id),
            topics=tuple(cleaned_topics),
            difficulty=difficulty,
            tag_ids=tuple(cleaned_tags),
        )

    @property
    def needs_store_query(self) -> bool:
        return bool(self.topics or self.tag_ids)

    def store_filters(self) -> dict:
        filters = {}
        if self.course_id is not None:
            filters['course_id'] = self.course_id
        if self.topics:
            filters['topic'] = self.topics[0] if len(self.topics) == 1 else list(self.topics)
        if self.difficulty:
            filters['difficulty'] = self.difficulty
        return filters

    def matches_fields(self, question: QuestionDTO) -> bool:
        if self.course_id is not None and question.course_id != self.course_id:
            return False
        if self.difficulty and question.difficulty != self.difficulty:
            return False
        if self.topics and question.topic not in self.topics:
            return False
        return True


def filter_by_tags(questions: Iterable[QuestionDTO], tag_ids: Iterable[int]) -> List[QuestionDTO]:
    """OR-match: keep questions sharing at least one id with ``tag_ids``."""
    wanted = set(tag_ids)
    if not wanted:
        return list(questions)
    return [question for question in questions if question.has_any_tag(wanted)]


def resolve_questions(spec: FilterSpec, cache, store) -> List[QuestionDTO]:
    """Return the questions matching ``spec`` (unordered; empty when none match).

    Records fetched from the store are merged into ``cache``. Store failures
    propagate as ``StoreError``.
    """
    if not spec.needs_store_query and cache.questions:
        return [question for question in cache.questions if spec.matches_fields(question)]

    fetched = store.list_where('questions', **spec.store_filters())
    added = cache.merge_questions(fetched)
    logger.debug(
        "Filter %s fetched %d question(s) from the store (%d new to the cache)",
        spec, len(fetched), added,
    )
    return filter_by_tags(fetched, spec.tag_ids)
