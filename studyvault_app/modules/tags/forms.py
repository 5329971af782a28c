# File: studyvault_app/modules/tags/forms.py

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional, Regexp

from ...core.defaults import DEFAULT_COLOR, HEX_COLOR_PATTERN


class TagForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(message="Tag name is required"), Length(max=100)])
    color = StringField(
        'Color',
        default=DEFAULT_COLOR,
        validators=[Optional(), Regexp(HEX_COLOR_PATTERN, message="Color must be a hex value like #4f46e5")],
    )

    def to_record(self) -> dict:
        return {
            'name': self.name.data.strip(),
            'color': self.color.data or DEFAULT_COLOR,
        }
