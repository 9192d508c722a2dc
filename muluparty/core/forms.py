"""Shared form pieces for the JSON endpoints."""

from __future__ import annotations

from typing import Any

from flask_wtf import FlaskForm
from wtforms import Field
from wtforms.validators import ValidationError as FieldValidationError
from wtforms.widgets import TextInput

from muluparty.errors import ValidationError

from .codecs import validate_identifier


class Identifier:
    """Validator for ids that will be written into stored documents."""

    def __init__(self, kind: str = "identifier") -> None:
        self.kind = kind

    def __call__(self, form: FlaskForm, field: Field) -> None:
        values = field.data if isinstance(field.data, list) else [field.data]
        for value in values:
            if value in (None, ""):
                continue
            try:
                validate_identifier(value, self.kind)
            except ValidationError as e:
                raise FieldValidationError(e.message) from e


class IdListField(Field):
    """A list of ids, sent as a JSON array or a comma separated string."""

    widget = TextInput()

    def _value(self) -> str:
        return ",".join(self.data) if self.data else ""

    def process_formdata(self, valuelist: list[Any]) -> None:
        ids: list[str] = []
        for value in valuelist:
            for part in str(value).split(","):
                part = part.strip()
                if part and part not in ids:
                    ids.append(part)
        self.data = ids


class APIForm(FlaskForm):
    """Base form for requests from API clients rather than rendered pages."""

    class Meta:
        csrf = False


def form_error_message(form: FlaskForm) -> str:
    """Flatten a form's validation errors into one message."""
    return "; ".join(
        f"{name}: {', '.join(str(m) for m in messages)}"
        for name, messages in form.errors.items()
    )
