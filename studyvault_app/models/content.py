"""Course, Question and Tag models."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from ..core.defaults import (
    DEFAULT_COLOR,
    DEFAULT_DIFFICULTY,
    DEFAULT_ESTIMATED_TIME,
    DEFAULT_QUESTION_TYPE,
)
from ..extensions import db
from ..schemas import CourseDTO, QuestionDTO, TagDTO


class Course(db.Model):
    """A named collection of study topics."""

    __tablename__ = 'courses'

    course_id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    color = db.Column(db.String(16), nullable=False, default=DEFAULT_COLOR)
    # Ordered, course-scoped topic labels.
    topics = db.Column(JSON, nullable=False, default=list)
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_dto(self) -> CourseDTO:
        return CourseDTO(
            id=self.course_id,
            title=self.title,
            description=self.description,
            color=self.color or DEFAULT_COLOR,
            topics=tuple(self.topics or ()),
            is_sample=bool(self.is_sample),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self):
        return f"<Course {self.course_id}: {self.title}>"


class QuestionTag(db.Model):
    """Membership of a tag id in a question's tag set.

    ``tag_id`` is not a foreign key: deleting a tag leaves the id in place.
    """

    __tablename__ = 'question_tags'

    link_id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(
        db.Integer,
        db.ForeignKey('questions.question_id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    tag_id = db.Column(db.Integer, nullable=False, index=True)

    __table_args__ = (
        db.UniqueConstraint('question_id', 'tag_id', name='uq_question_tag'),
    )


class Question(db.Model):
    """A single study item belonging to one course."""

    __tablename__ = 'questions'

    question_id = db.Column(db.Integer, primary_key=True)
    # Orphans are tolerated, so this is an indexed plain column.
    course_id = db.Column(db.Integer, nullable=False, index=True)
    title = db.Column(db.String(255))
    content = db.Column(db.Text, nullable=False)
    answer = db.Column(db.Text)
    difficulty = db.Column(db.String(16), nullable=False, default=DEFAULT_DIFFICULTY, index=True)
    type = db.Column(db.String(64), nullable=False, default=DEFAULT_QUESTION_TYPE)
    topic = db.Column(db.String(255), index=True)
    estimated_time = db.Column(db.Integer, nullable=False, default=DEFAULT_ESTIMATED_TIME)
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    tag_links = db.relationship(
        'QuestionTag',
        lazy='selectin',
        cascade='all, delete-orphan',
        order_by='QuestionTag.link_id',
    )

    @property
    def tag_ids(self) -> list[int]:
        return [link.tag_id for link in self.tag_links]

    @tag_ids.setter
    def tag_ids(self, values: Iterable[int]) -> None:
        wanted: list[int] = []
        for value in values or ():
            tag_id = int(value)
            if tag_id not in wanted:
                wanted.append(tag_id)

        kept = [link for link in self.tag_links if link.tag_id in wanted]
        present = {link.tag_id for link in kept}
        kept.extend(QuestionTag(tag_id=tag_id) for tag_id in wanted if tag_id not in present)
        self.tag_links = kept

    def to_dto(self) -> QuestionDTO:
        return QuestionDTO(
            id=self.question_id,
            course_id=self.course_id,
            title=self.title,
            content=self.content,
            answer=self.answer,
            difficulty=self.difficulty,
            type=self.type,
            topic=self.topic,
            tag_ids=tuple(self.tag_ids),
            estimated_time=self.estimated_time,
            is_sample=bool(self.is_sample),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self):
        return f"<Question {self.question_id} (course {self.course_id})>"


class Tag(db.Model):
    """A reusable label that questions reference by id."""

    __tablename__ = 'tags'

    tag_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    color = db.Column(db.String(16), nullable=False, default=DEFAULT_COLOR)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_dto(self) -> TagDTO:
        return TagDTO(
            id=self.tag_id,
            name=self.name,
            color=self.color or DEFAULT_COLOR,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self):
        return f"<Tag {self.tag_id}: {self.name}>"
