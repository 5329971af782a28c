# File: studyvault_app/modules/study/engine/controller.py
"""
Study wizard: course -> topics -> question types -> studying.

The controller lives in the Flask session between requests (``to_dict`` /
``from_dict``). The study queue is kept as question ids; the records
themselves come from the content cache.
"""
from __future__ import annotations

import random
from enum import Enum
from typing import Callable, Iterable, List, Optional

from flask import current_app, session

from ....core.defaults import ANY, DIFFICULTIES
from ....core.error_handlers import StudyVaultError, ValidationError
from ....services.content_cache import get_content_cache
from ....services.content_store import ContentStore
from ...questions.logics import FilterSpec, resolve_questions
from ..config import StudyModuleDefaultConfig


class StudyStep(str, Enum):
    SELECT_COURSE = 'select_course'
    SELECT_TOPICS = 'select_topics'
    SELECT_QUESTION_TYPES = 'select_question_types'
    STUDYING = 'studying'
    EMPTY = 'empty'


_FORWARD = {
    StudyStep.SELECT_COURSE: StudyStep.SELECT_TOPICS,
    StudyStep.SELECT_TOPICS: StudyStep.SELECT_QUESTION_TYPES,
}

_BACKWARD = {
    StudyStep.SELECT_TOPICS: StudyStep.SELECT_COURSE,
    StudyStep.SELECT_QUESTION_TYPES: StudyStep.SELECT_TOPICS,
    StudyStep.STUDYING: StudyStep.SELECT_QUESTION_TYPES,
    StudyStep.EMPTY: StudyStep.SELECT_QUESTION_TYPES,
}


class StudySessionController:
    """
    Selection state plus a cursor over a shuffled question queue.
    """
    SESSION_KEY = 'study_session'

    def __init__(self, step=StudyStep.SELECT_COURSE, course_id=None, topics=None,
                 question_type_ids=None, difficulty=ANY, queue=None, cursor=0,
                 answer_visible=False, user_answer='', error=None, *, cache=None):
        self.step = StudyStep(step)
        self.course_id = course_id
        self.topics: List[str] = list(topics or [])
        self.question_type_ids: List[int] = list(question_type_ids or [])
        self.difficulty = difficulty or ANY
        self.queue: List[int] = list(queue or [])
        self.cursor = cursor or 0
        self.answer_visible = bool(answer_visible)
        self.user_answer = user_answer or ''
        self.error = error
        self._cache = cache
        # Records resolved by start_studying in this request.
        self._records = {}

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data, cache=None):
        data = data or {}
        return cls(
            step=data.get('step', StudyStep.SELECT_COURSE.value),
            course_id=data.get('course_id'),
            topics=data.get('topics') or [],
            question_type_ids=data.get('question_type_ids') or [],
            difficulty=data.get('difficulty', ANY),
            queue=data.get('queue') or [],
            cursor=data.get('cursor', 0),
            answer_visible=data.get('answer_visible', False),
            user_answer=data.get('user_answer', ''),
            error=data.get('error'),
            cache=cache,
        )

    def to_dict(self):
        return {
            'step': self.step.value,
            'course_id': self.course_id,
            'topics': list(self.topics),
            'question_type_ids': list(self.question_type_ids),
            'difficulty': self.difficulty,
            'queue': list(self.queue),
            'cursor': self.cursor,
            'answer_visible': self.answer_visible,
            'user_answer': self.user_answer,
            'error': self.error,
        }

    @classmethod
    def load(cls, cache=None):
        """Controller stored in the Flask session, or a fresh one."""
        return cls.from_dict(session.get(cls.SESSION_KEY), cache=cache)

    def save(self):
        session[self.SESSION_KEY] = self.to_dict()
        session.modified = True

    @property
    def cache(self):
        return self._cache if self._cache is not None else get_content_cache()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    @property
    def course(self):
        return self.cache.get_course(self.course_id)

    def select_course(self, course_id):
        course = self.cache.get_course(course_id)
        if course is None:
            raise ValidationError("Selected course does not exist", errors={'course_id': ["Unknown course"]})
        if course.id != self.course_id:
            # A new course invalidates the topics and any queue built for the old one.
            self.topics = []
            self._reset_queue()
            self.error = None
            if self.step != StudyStep.SELECT_COURSE:
                self.step = StudyStep.SELECT_TOPICS
        self.course_id = course.id

    def topic_options(self) -> List[str]:
        course = self.course
        return list(course.topics) if course else []

    def _check_topic(self, topic):
        if topic not in self.topic_options():
            raise ValidationError(f"Topic '{topic}' is not part of the selected course",
                                  errors={'topics': [f"Unknown topic '{topic}'"]})

    def toggle_topic(self, topic):
        self._check_topic(topic)
        if topic in self.topics:
            self.topics.remove(topic)
        else:
            self.topics.append(topic)

    def set_topics(self, topics: Iterable[str]):
        selected = []
        for topic in topics or ():
            self._check_topic(topic)
            if topic not in selected:
                selected.append(topic)
        self.topics = selected

    def question_type_options(self):
        """Tags whose name is in the configured question-type allow-list."""
        allowed = current_app.config.get('QUESTION_TYPE_TAGS', StudyModuleDefaultConfig.QUESTION_TYPE_TAGS)
        return [tag for tag in self.cache.tags if tag.name in allowed]

    def _check_question_type(self, tag_id) -> int:
        try:
            tag_id = int(tag_id)
        except (TypeError, ValueError):
            tag_id = None
        if tag_id not in {tag.id for tag in self.question_type_options()}:
            raise ValidationError("Unknown question type", errors={'question_types': ["Unknown question type"]})
        return tag_id

    def toggle_question_type(self, tag_id):
        tag_id = self._check_question_type(tag_id)
        if tag_id in self.question_type_ids:
            self.question_type_ids.remove(tag_id)
        else:
            self.question_type_ids.append(tag_id)

    def set_question_types(self, tag_ids):
        selected = []
        for tag_id in tag_ids or ():
            tag_id = self._check_question_type(tag_id)
            if tag_id not in selected:
                selected.append(tag_id)
        self.question_type_ids = selected

    def set_difficulty(self, difficulty):
        difficulty = difficulty or ANY
        if difficulty != ANY and difficulty not in DIFFICULTIES:
            raise ValidationError("Invalid difficulty", errors={'difficulty': ["Not a valid choice"]})
        self.difficulty = difficulty

    # ------------------------------------------------------------------
    # Navigation between steps
    # ------------------------------------------------------------------
    def advance(self, resolver: Optional[Callable] = None):
        if self.step == StudyStep.SELECT_COURSE and self.course is None:
            raise ValidationError("Please select a course", errors={'course_id': ["Please select a course"]})
        if self.step == StudyStep.SELECT_QUESTION_TYPES:
            return self.start_studying(resolver)
        self.step = _FORWARD.get(self.step, self.step)
        return True

    def back(self):
        self.step = _BACKWARD.get(self.step, self.step)
        self.error = None

    def restart(self):
        self.step = StudyStep.SELECT_COURSE
        self.topics = []
        self.question_type_ids = []
        self.difficulty = ANY
        self._reset_queue()
        self.error = None

    def filter_spec(self) -> FilterSpec:
        return FilterSpec.build(
            course_id=self.course_id,
            topics=self.topics,
            difficulty=self.difficulty,
            tag_ids=self.question_type_ids,
        )

    def start_studying(self, resolver: Optional[Callable] = None) -> bool:
        """Resolve and shuffle the queue.

        ``resolver`` maps a ``FilterSpec`` to questions; by default the filter
        engine over the content cache and store. On failure the error is kept
        on the controller and the wizard stays on the question-type step.
        A course deleted since it was selected raises ``ValidationError`` and
        sends the wizard back to course selection.
        """
        if resolver is None:
            cache = self.cache

            def resolver(spec):
                return resolve_questions(spec, cache, ContentStore())

        if self.course is None:
            self._course_gone()

        spec = self.filter_spec()
        try:
            questions = list(resolver(spec))
        except StudyVaultError as exc:
            current_app.logger.error("Could not start study session for %s: %s", spec, exc.message)
            self.error = exc.message
            self.step = StudyStep.SELECT_QUESTION_TYPES
            return False

        random.shuffle(questions)
        limit = self.queue_limit()
        if len(questions) > limit:
            current_app.logger.info("Study queue capped at %d of %d question(s)", limit, len(questions))
            questions = questions[:limit]
        self._reset_queue()
        self.queue = [question.id for question in questions]
        self._records = {question.id: question for question in questions}
        self.error = None
        self.step = StudyStep.STUDYING if questions else StudyStep.EMPTY
        current_app.logger.info("Study session started with %d question(s)", len(questions))
        return True

    def _course_gone(self):
        """The selected course was deleted: back to course selection."""
        current_app.logger.warning("Study course %s no longer exists", self.course_id)
        self.course_id = None
        self.topics = []
        self._reset_queue()
        self.step = StudyStep.SELECT_COURSE
        self.error = "Selected course no longer exists"
        raise ValidationError(self.error, errors={'course_id': ["Unknown course"]})

    @staticmethod
    def queue_limit() -> int:
        """Longest queue kept; the ids are stored in the session cookie."""
        return int(current_app.config.get('STUDY_MAX_QUEUE', StudyModuleDefaultConfig.MAX_QUEUE_LENGTH))

    def _reset_queue(self):
        self.queue = []
        self._records = {}
        self.cursor = 0
        self.answer_visible = False
        self.user_answer = ''

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    @property
    def count(self) -> int:
        return len(self.queue)

    def _move_to(self, index) -> bool:
        if self.step != StudyStep.STUDYING or not self.queue:
            return False
        index = max(0, min(index, self.count - 1))
        if index == self.cursor:
            return False
        self.cursor = index
        self.answer_visible = False
        self.user_answer = ''
        return True

    def next(self) -> bool:
        return self._move_to(self.cursor + 1)

    def previous(self) -> bool:
        return self._move_to(self.cursor - 1)

    def toggle_answer(self):
        self.answer_visible = not self.answer_visible

    def set_user_answer(self, text):
        self.user_answer = text or ''

    def current_question(self):
        if self.step != StudyStep.STUDYING or not self.queue:
            return None
        question_id = self.queue[self.cursor]
        return self._records.get(question_id) or self.cache.get_question(question_id)

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------
    def to_view(self):
        course = self.course
        view = {
            'step': self.step.value,
            'course': course.to_dict() if course else None,
            'topics': list(self.topics),
            'question_types': list(self.question_type_ids),
            'difficulty': self.difficulty,
            'topic_options': self.topic_options(),
            'question_type_options': [tag.to_dict() for tag in self.question_type_options()],
            'error': self.error,
            'is_empty': self.step == StudyStep.EMPTY,
        }
        if self.step == StudyStep.STUDYING:
            question = self.current_question()
            view.update({
                'position': {'index': self.cursor, 'total': self.count},
                'question': question.to_dict(include_answer=self.answer_visible) if question else None,
                'answer_visible': self.answer_visible,
                'user_answer': self.user_answer,
            })
        return view
