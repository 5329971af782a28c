"""Database models package for StudyVault."""

from ..extensions import db

from .content import Course, Question, QuestionTag, Tag

__all__ = [
    'db',
    'Course',
    'Question',
    'QuestionTag',
    'Tag',
]
