# File: studyvault_app/modules/questions/forms.py

from flask_wtf import FlaskForm
from wtforms import IntegerField, SelectField, SelectMultipleField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NumberRange, Optional, ValidationError

from ...core.defaults import (
    DEFAULT_DIFFICULTY,
    DEFAULT_ESTIMATED_TIME,
    DEFAULT_QUESTION_TYPE,
    DIFFICULTIES,
)
from ...services.content_cache import get_content_cache


class QuestionForm(FlaskForm):
    """Create or edit a Question.

    The topic must be one of the selected course's topics. This is the only
    place that rule is enforced; the store accepts any string.
    """

    course_id = IntegerField('Course', validators=[DataRequired(message="Please select a course")])
    title = StringField('Title', validators=[Optional(), Length(max=255)])
    content = TextAreaField('Question', validators=[DataRequired(message="Question content is required")])
    answer = TextAreaField('Answer', validators=[Optional()])
    difficulty = SelectField(
        'Difficulty',
        choices=[(value, value.capitalize()) for value in DIFFICULTIES],
        default=DEFAULT_DIFFICULTY,
    )
    type = StringField('Question Type', default=DEFAULT_QUESTION_TYPE, validators=[Optional(), Length(max=64)])
    topic = StringField('Topic', validators=[Optional(), Length(max=255)])
    # Dangling ids of deleted tags must survive an edit, so no choice check.
    tags = SelectMultipleField('Tags', coerce=int, choices=[], validate_choice=False)
    estimated_time = IntegerField(
        'Estimated Time (minutes)',
        default=DEFAULT_ESTIMATED_TIME,
        validators=[Optional(), NumberRange(min=1, message="Estimated time must be at least 1 minute")],
    )

    def validate_course_id(self, field):
        if get_content_cache().get_course(field.data) is None:
            raise ValidationError("Selected course does not exist")

    def validate_topic(self, field):
        topic = (field.data or '').strip()
        if not topic:
            return
        course = get_content_cache().get_course(self.course_id.data)
        if course is not None and topic not in course.topics:
            raise ValidationError(f"Topic '{topic}' is not part of course '{course.title}'")

    def to_record(self) -> dict:
        return {
            'course_id': self.course_id.data,
            'title': (self.title.data or '').strip() or None,
            'content': self.content.data.strip(),
            'answer': (self.answer.data or '').strip() or None,
            'difficulty': self.difficulty.data or DEFAULT_DIFFICULTY,
            'type': (self.type.data or '').strip() or DEFAULT_QUESTION_TYPE,
            'topic': (self.topic.data or '').strip() or None,
            'tag_ids': list(self.tags.data or []),
            'estimated_time': self.estimated_time.data or DEFAULT_ESTIMATED_TIME,
        }
