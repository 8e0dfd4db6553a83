# joinery/validation.py
"""Pydantic plumbing shared by every entity form.

Form schemas subclass ``FormSchema``.  ``validate`` cleans raw input, runs the
schema and turns a ``pydantic.ValidationError`` into a field-keyed map of
user-facing messages.
"""

from datetime import date
from typing import Annotated, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError
from pydantic_core import PydanticCustomError

# pydantic error type -> message kind
KINDS = {
    'missing': 'required',
    'greater_than': 'gt',
    'greater_than_equal': 'min',
    'less_than_equal': 'choice',
    'literal_error': 'choice',
    'enum': 'choice',
    'bool_parsing': 'choice',
    'bool_type': 'choice',
    'float_parsing': 'number',
    'float_type': 'number',
    'int_parsing': 'number',
    'int_type': 'number',
    'int_from_float': 'number',
    'date_parsing': 'date',
    'date_type': 'date',
    'date_from_datetime_parsing': 'date',
    'date_from_datetime_inexact': 'date',
    'string_type': 'invalid',
    'value_error': 'invalid',
}


def _date_part(value):
    if isinstance(value, str):
        return value[:10]
    return value


IsoDate = Annotated[date, BeforeValidator(_date_part)]


def custom_error(kind, message):
    """Error raised from schema validators; ``message`` is shown as is."""
    return PydanticCustomError(kind, message)


class FormSchema(BaseModel):
    """Base for entity form schemas.

    ``messages`` overrides the generated text per field, either one string
    for every failure or a dict keyed by message kind.
    """

    model_config = ConfigDict(extra='ignore', coerce_numbers_to_str=True)

    messages: ClassVar[dict] = {}

    @classmethod
    def field_names(cls):
        return list(cls.model_fields)

    @classmethod
    def defaults(cls):
        return {
            name: None if field.is_required() else field.get_default(call_default_factory=True)
            for name, field in cls.model_fields.items()
        }

    @classmethod
    def label(cls, name):
        field = cls.model_fields.get(name)
        if field is not None and field.title:
            return field.title
        return name.replace('_', ' ').capitalize()


def clean_input(data):
    """Trim strings and drop empty values so defaults and required rules apply."""
    cleaned = {}
    for name, value in (data or {}).items():
        if isinstance(value, str):
            value = value.strip()
            if value == '':
                continue
        if value is None:
            continue
        cleaned[name] = value
    return cleaned


def _message(schema, name, error):
    kind = KINDS.get(error['type'])
    if kind is None:
        return error['msg']

    override = schema.messages.get(name)
    if isinstance(override, str):
        return override
    if override and kind in override:
        return override[kind]

    label = schema.label(name)
    ctx = error.get('ctx') or {}
    if kind == 'required':
        return f'{label} is required'
    if kind == 'min':
        return f'{label} must be {ctx.get("ge")} or greater'
    if kind == 'gt':
        return f'{label} must be greater than {ctx.get("gt")}'
    if kind == 'number':
        return f'{label} must be a number'
    if kind == 'date':
        return f'{label} must be a valid date'
    return f'Invalid {label.lower()}'


def field_errors(schema, exc: ValidationError) -> dict:
    """First message per field from a pydantic validation failure."""
    errors = {}
    for error in exc.errors():
        name = str(error['loc'][0]) if error['loc'] else 'submit'
        errors.setdefault(name, _message(schema, name, error))
    return errors


def validate(schema, data):
    """Return ``(values, errors)``; ``values`` is empty when validation fails."""
    try:
        model = schema.model_validate(clean_input(data))
    except ValidationError as exc:
        return {}, field_errors(schema, exc)
    return model.model_dump(mode='json'), {}
