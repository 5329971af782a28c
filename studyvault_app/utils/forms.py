"""Helpers for validating JSON payloads with Flask-WTF forms."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Type

from flask import request
from werkzeug.datastructures import MultiDict
from wtforms import Field
from wtforms.widgets import TextInput

from ..core.error_handlers import ValidationError


class CommaListField(Field):
    """A list of strings given either as a JSON list or a comma-separated string.

    A single submitted value is split on commas; several values are taken as-is.
    Blank entries and duplicates are dropped, order is kept.
    """

    widget = TextInput()

    def _value(self):
        return ', '.join(self.data or [])

    def process_formdata(self, valuelist):
        if len(valuelist) == 1:
            valuelist = valuelist[0].split(',')
        items = []
        for raw in valuelist:
            item = raw.strip()
            if item and item not in items:
                items.append(item)
        self.data = items

    def process_data(self, value):
        self.data = list(value or [])


def payload_to_formdata(payload: Optional[Mapping[str, Any]]) -> MultiDict:
    """Flatten a JSON object into the MultiDict WTForms expects."""
    formdata = MultiDict()
    for key, value in (payload or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set)):
            formdata.setlist(key, [str(item) for item in value])
        elif isinstance(value, bool):
            formdata.add(key, 'y' if value else '')
        else:
            formdata.add(key, str(value))
    return formdata


def bind_form(form_class: Type, payload: Optional[Mapping[str, Any]], **kwargs):
    """Instantiate and validate ``form_class`` against ``payload``.

    Raises ``ValidationError`` carrying WTForms' per-field messages; nothing
    touches the store before this succeeds.
    """
    form = form_class(formdata=payload_to_formdata(payload), meta={'csrf': False}, **kwargs)
    if not form.validate():
        errors = {name: messages for name, messages in form.errors.items()}
        first = next(iter(errors.values()), ['Validation failed'])
        message = first[0] if isinstance(first, list) and first else 'Validation failed'
        raise ValidationError(message, errors=errors)
    return form


def request_payload() -> dict:
    """JSON body of the current request, falling back to submitted form fields."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return {key: values if len(values) > 1 else values[0] for key, values in request.form.lists()}
