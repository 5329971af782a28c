"""Immutable record snapshots handed out by the store and the content cache."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .core.defaults import contrast_color


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class CourseDTO:
    id: int
    title: str
    description: Optional[str]
    color: str
    topics: Tuple[str, ...] = ()
    is_sample: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'color': self.color,
            'topics': list(self.topics),
            'is_sample': self.is_sample,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    def to_form_data(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'description': self.description or '',
            'color': self.color,
            'topics': list(self.topics),
        }


@dataclass(frozen=True)
class QuestionDTO:
    id: int
    course_id: int
    title: Optional[str]
    content: str
    answer: Optional[str]
    difficulty: str
    type: str
    topic: Optional[str]
    tag_ids: Tuple[int, ...] = ()
    estimated_time: Optional[int] = None
    is_sample: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_title(self) -> str:
        """Title, or the first 50 characters of the content."""
        return self.title or self.content[:50]

    def has_any_tag(self, tag_ids) -> bool:
        return bool(set(self.tag_ids) & set(tag_ids))

    def to_dict(self, include_answer: bool = True) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'course_id': self.course_id,
            'title': self.title,
            'display_title': self.display_title,
            'content': self.content,
            'difficulty': self.difficulty,
            'type': self.type,
            'topic': self.topic,
            'tags': list(self.tag_ids),
            'estimated_time': self.estimated_time,
            'is_sample': self.is_sample,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
        if include_answer:
            data['answer'] = self.answer
        return data

    def to_form_data(self) -> Dict[str, Any]:
        return {
            'course_id': self.course_id,
            'title': self.title or '',
            'content': self.content,
            'answer': self.answer or '',
            'difficulty': self.difficulty,
            'type': self.type,
            'topic': self.topic or '',
            'tags': list(self.tag_ids),
            'estimated_time': self.estimated_time,
        }


@dataclass(frozen=True)
class TagDTO:
    id: int
    name: str
    color: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def text_color(self) -> str:
        return contrast_color(self.color)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'text_color': self.text_color,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    def to_form_data(self) -> Dict[str, Any]:
        return {'name': self.name, 'color': self.color}
