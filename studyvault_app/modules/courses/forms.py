# File: studyvault_app/modules/courses/forms.py

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional, Regexp

from ...core.defaults import DEFAULT_COLOR, HEX_COLOR_PATTERN
from ...utils.forms import CommaListField


class CourseForm(FlaskForm):
    """Create or edit a Course."""

    title = StringField('Title', validators=[DataRequired(message="Title is required"), Length(max=255)])
    description = TextAreaField('Description', validators=[Optional()])
    color = StringField(
        'Color',
        default=DEFAULT_COLOR,
        validators=[Optional(), Regexp(HEX_COLOR_PATTERN, message="Color must be a hex value like #4f46e5")],
    )
    topics = CommaListField('Topics (comma-separated)')

    def to_record(self) -> dict:
        return {
            'title': self.title.data.strip(),
            'description': (self.description.data or '').strip() or None,
            'color': self.color.data or DEFAULT_COLOR,
            'topics': list(self.topics.data or []),
        }
