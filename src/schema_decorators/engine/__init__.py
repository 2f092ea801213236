"""
Thin layer over :mod:`marshmallow` that gives the composition code the
operations it expects from a validation engine: object schemas, an "of"
operation for lists, a deferred field that sees the candidate before it
builds itself, validation at a path, ``describe`` and async entry points.

No rules are defined here; every message still comes from marshmallow or
from the fields the caller declared.

Examples:
    >>> from marshmallow import fields
    >>> point = object_schema({"x": fields.Integer(required=True),
    ...                        "y": fields.Integer(required=True)})
    >>> validate_sync(point, {"x": "1", "y": 2})
    {'x': 1, 'y': 2}

    ... class instances are read through their attributes
    >>> class Point:
    ...     def __init__(self, x, y):
    ...         self.x, self.y = x, y
    >>> validate_sync(point, Point(3, 4))
    {'x': 3, 'y': 4}

    ... every failing path is reported
    >>> is_valid_sync(point, {"x": "one"})
    False
    >>> try:
    ...     validate_sync(point, {"x": "one"})
    ... except ValidationError as err:
    ...     print(flatten_errors(err))
    ['Not a valid integer.', 'Missing data for required field.']

    ... and a single path can be checked on its own
    >>> validate_sync_at(point, "y", {"x": "one", "y": "5"})
    5
"""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable

from marshmallow import Schema, ValidationError, fields, missing, pre_load

from schema_decorators._config import config

FieldRefinement = Callable[[fields.Field], fields.Field]

_INDEX_RE = re.compile(r"\[(\d*)\]")  # office[0] -> office.0


# ───────────────────────────── options ──────────────────────────────
@dataclass(frozen=True)
class ValidateOptions:
    """Keyword options forwarded to :meth:`marshmallow.Schema.load`."""
    partial: bool | Sequence[str] | None = None
    unknown: str | None = None

    @classmethod
    def coerce(cls, options) -> "ValidateOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls(**options)

    def as_kwargs(self) -> dict[str, Any]:
        return {"partial": self.partial, "unknown": self.unknown}


# ───────────────────────────── schemas ──────────────────────────────
def is_instance_like(obj) -> bool:
    return hasattr(obj, "__dict__") or hasattr(type(obj), "__slots__")


class ShapeSchema(Schema):
    """
    Base of every composed schema.

    A candidate that is not a mapping but an object is read through its
    attributes; attributes that are absent or ``None`` count as missing.
    """

    class Meta:
        unknown = config["unknown"]

    @pre_load
    def _read_attributes(self, data, **kwargs):
        if isinstance(data, Mapping) or not is_instance_like(data):
            return data
        out = {}
        for name, field in self.load_fields.items():
            value = getattr(data, field.attribute or name, None)
            if value is not None:
                out[field.data_key or name] = value
        return out

    def pick(self, keys) -> "ShapeSchema":
        """Plain object schema restricted to ``keys``."""
        keys = set(keys)
        return object_schema({n: f for n, f in self.declared_fields.items() if n in keys})

    def omit(self, keys) -> "ShapeSchema":
        """Plain object schema without ``keys``."""
        keys = set(keys)
        return object_schema({n: f for n, f in self.declared_fields.items() if n not in keys})

    def describe(self, _seen: frozenset = frozenset()) -> dict:
        """
        Plain description of the fields. Nested schemas are described in
        place; one already being described is given as a ``ref`` to its name.
        """
        return _describe_fields(self, _seen)


def _describe_fields(schema: Schema, seen: frozenset) -> dict:
    seen = seen | {type(schema)}
    return {
        "type": "object",
        "fields": {name: _describe_field(f, seen) for name, f in schema.fields.items()},
    }


def _describe_field(field: fields.Field, seen: frozenset = frozenset()) -> dict:
    out = {
        "type": type(field).__name__,
        "required": field.required,
        "allow_none": field.allow_none,
    }
    if isinstance(field, fields.List):
        out["inner"] = _describe_field(field.inner, seen)
    elif isinstance(field, fields.Nested):
        nested = field.schema
        if type(nested) in seen:
            out["schema"] = {"type": "object", "ref": type(nested).__name__}
        else:
            out["schema"] = describe(nested, seen)
    return out


def object_schema(shape: Mapping[str, fields.Field], name: str = "ObjectSchema") -> ShapeSchema:
    """Shape-mode schema validating exactly the fields in ``shape``."""
    return ShapeSchema.from_dict(dict(shape), name=name)()


def array_of(element: fields.Field,
             array: Callable[[fields.Field], fields.Field] | None = None) -> fields.Field:
    """
    Wrap ``element`` as the item field of a list field.

    ``array`` builds the list around the element, e.g.
    ``functools.partial(fields.List, validate=Length(min=1))``.
    """
    return (array or fields.List)(element)


class Lazy(fields.Field):
    """
    Field whose concrete field is built from the candidate value at load time.

    ``builder(value)`` must return a field; loading and dumping are delegated
    to it.
    """

    def __init__(self, builder: Callable[[Any], fields.Field], **kwargs):
        super().__init__(**kwargs)
        self.builder = builder

    def build(self, value) -> fields.Field:
        built = self.builder(value)
        parent = getattr(self, "parent", None)
        if parent is not None:
            built._bind_to_schema(self.name, parent)
        return built

    def deserialize(self, value, attr=None, data=None, **kwargs):
        return self.build(value).deserialize(value, attr, data, **kwargs)

    def _serialize(self, value, attr, obj, **kwargs):
        return self.build(value)._serialize(value, attr, obj, **kwargs)


def required(message: str | None = None) -> FieldRefinement:
    """
    Refinement marking a field as required, optionally with its own message.

    >>> f = required("Job is required")(fields.Raw())
    >>> f.required, f.error_messages["required"]
    (True, 'Job is required')
    """

    def refine(field: fields.Field) -> fields.Field:
        field.required = True
        if message is not None:
            field.error_messages = {**field.error_messages, "required": message}
        return field

    return refine


# ──────────────────────────── operations ────────────────────────────
def validate_sync(schema: Schema, value, options=None):
    return schema.load(value, **ValidateOptions.coerce(options).as_kwargs())


async def validate(schema: Schema, value, options=None):
    return validate_sync(schema, value, options)


def validate_sync_at(schema: Schema, path: str, value, options=None):
    """
    Validate only the value found at ``path`` (``job.office[0].name`` or
    ``job.office.0.name``) with the field the schema declares there.

    Failures are raised keyed by ``path``.
    """
    opts = ValidateOptions.coerce(options)
    field, attr, parent, current = _reach(schema, path, value)
    kwargs = {} if opts.partial is None else {"partial": opts.partial}
    try:
        return field.deserialize(current, attr, parent, **kwargs)
    except ValidationError as err:
        raise ValidationError({path: err.messages}, field_name=path) from err


async def validate_at(schema: Schema, path: str, value, options=None):
    return validate_sync_at(schema, path, value, options)


def is_valid_sync(schema: Schema, value, options=None) -> bool:
    try:
        validate_sync(schema, value, options)
    except ValidationError:
        return False
    return True


async def is_valid(schema: Schema, value, options=None) -> bool:
    return is_valid_sync(schema, value, options)


def cast(schema: Schema, value, options=None):
    """Coerce the values that are present; required checks are skipped."""
    opts = ValidateOptions.coerce(options)
    return schema.load(value, partial=True, unknown=opts.unknown)


def describe(schema: Schema, _seen: frozenset = frozenset()) -> dict:
    """``Lazy`` fields are built per candidate and described only by type."""
    if isinstance(schema, ShapeSchema):
        return schema.describe(_seen)
    return _describe_fields(schema, _seen)


def flatten_errors(error) -> list[str]:
    """
    Messages of a :class:`ValidationError` (or its ``messages``) as one
    ordered list: declaration order, depth first.

    >>> flatten_errors({"a": ["bad"], "b": {0: {"c": ["worse"]}}})
    ['bad', 'worse']
    """
    messages = error.messages if isinstance(error, ValidationError) else error
    out: list[str] = []
    _collect(messages, out)
    return out


def _collect(messages, out: list[str]) -> None:
    if isinstance(messages, str):
        out.append(messages)
    elif isinstance(messages, Mapping):
        for value in messages.values():
            _collect(value, out)
    else:
        for value in messages:
            _collect(value, out)


# ───────────────────────────── path walk ────────────────────────────
def _split_path(path: str) -> list[str]:
    return [part for part in _INDEX_RE.sub(r".\1", path).split(".") if part]


def _expand(node, value):
    """Lazy -> built field, Nested -> its schema."""
    while True:
        if isinstance(node, Lazy):
            node = node.build(value)
        elif isinstance(node, fields.Nested):
            node = node.schema
        else:
            return node


def _member(obj, key):
    if obj is missing or obj is None:
        return missing
    if isinstance(obj, Mapping):
        return obj.get(key, missing)
    if isinstance(key, int):
        if isinstance(obj, Sequence) and not isinstance(obj, str) and key < len(obj):
            return obj[key]
        return missing
    return getattr(obj, key, missing)


def _reach(schema: Schema, path: str, value):
    parts = _split_path(path)
    if not parts:
        raise ValueError("An empty path does not name a field")

    node, attr, parent, current = schema, None, None, value
    for part in parts:
        node = _expand(node, current)
        if isinstance(node, Schema) and part in node.fields:
            node = node.fields[part]
            key = node.data_key or part
        elif isinstance(node, fields.List) and part.isdigit():
            node = node.inner
            key = int(part)
        else:
            raise ValueError(f"The schema does not contain the path {path!r}")
        attr, parent, current = part, current, _member(current, key)
    return node, attr, parent, current


from schema_decorators.engine.target import (  # noqa: E402
    AlreadyValidInstance, NeedsConstruction, TargetClassSchema, target_class_schema,
)

__all__ = [
    "AlreadyValidInstance", "FieldRefinement", "Lazy", "NeedsConstruction",
    "ShapeSchema", "TargetClassSchema", "ValidateOptions", "ValidationError",
    "array_of", "cast", "describe", "flatten_errors", "is_valid", "is_valid_sync",
    "object_schema", "required", "target_class_schema", "validate",
    "validate_at", "validate_sync", "validate_sync_at",
]
