"""
Fields for properties whose value is itself a composed object.

Every function takes a *type reference*: the class itself, or a
zero-argument callable returning it (``lambda: Job``). A callable is only
called when the nested schema is first needed, so two classes may refer to
each other in either definition order.
"""
from __future__ import annotations

import copy
from collections.abc import Mapping
from types import UnionType
from typing import Callable, Union, get_args, get_origin, get_type_hints

from marshmallow import Schema, fields, missing

from schema_decorators.compiler import define_schema
from schema_decorators.engine import (FieldRefinement, Lazy, array_of, is_instance_like,
                                      object_schema)
from schema_decorators.registry import SchemaRegistry, default_registry

TypeRef = Union[type, Callable[[], type]]

NoneType = type(None)


def _is_optional(t) -> bool:
    return get_origin(t) in (Union, UnionType) and NoneType in get_args(t) and len(get_args(t)) == 2


def resolve_type(type_ref: TypeRef) -> type:
    if isinstance(type_ref, type):
        return type_ref
    return type_ref()


def declared_type(owner: type, name: str) -> type:
    """Class annotated for ``owner.name``; ``Optional[T]`` gives ``T``."""
    try:
        hints = get_type_hints(owner)
    except NameError as err:
        raise TypeError(
            f"{owner.__qualname__}.{name}: cannot evaluate the annotations ({err}); "
            "use nested_type() to name the class instead"
        ) from err
    if name not in hints:
        raise TypeError(f"{owner.__qualname__}.{name} has no type annotation to infer a schema from")
    typ = hints[name]
    if _is_optional(typ):
        typ = next(t for t in get_args(typ) if t is not NoneType)
    if not isinstance(typ, type):
        raise TypeError(f"{owner.__qualname__}.{name} is annotated with {typ!r}, not a class")
    return typ


def resolve_schema(type_ref: TypeRef, *, registry: SchemaRegistry | None = None) -> Schema:
    """Registered schema of the referenced class; compiled in shape mode if missing."""
    registry = registry or default_registry
    target = resolve_type(type_ref)
    compiled = registry.get_schema_by_type(target)
    if compiled is not None:
        return compiled
    return define_schema(target, registry=registry)


def nested_field(type_ref: TypeRef,
                 refine: FieldRefinement | None = None, *,
                 registry: SchemaRegistry | None = None) -> fields.Field:
    field = fields.Nested(lambda: resolve_schema(type_ref, registry=registry))
    return refine(field) if refine else field


def nested_array_field(type_ref: TypeRef,
                       array: Callable[[fields.Field], fields.Field] | None = None,
                       element: FieldRefinement | None = None, *,
                       registry: SchemaRegistry | None = None) -> fields.Field:
    return array_of(nested_field(type_ref, element, registry=registry), array)


def nested_record_field(type_ref: TypeRef,
                        refine: FieldRefinement | None = None,
                        element: FieldRefinement | None = None, *,
                        registry: SchemaRegistry | None = None) -> fields.Field:
    """
    Mapping of arbitrary string keys to the referenced class.

    The keys are only known once a value arrives, so the object schema is
    built per candidate: one element field per key present. An object that
    is not a mapping is a record of its instance attributes. Anything else
    gets an empty object schema, which still reports "Invalid input type."
    (and "required" through ``refine``).
    """
    element_field = nested_field(type_ref, element, registry=registry)

    def build(candidate) -> fields.Field:
        shape = {str(key): copy.copy(element_field) for key in _record_keys(candidate)}
        field = fields.Nested(object_schema(shape, name="RecordSchema"))
        return refine(field) if refine else field

    return Lazy(build)


def _record_keys(candidate) -> list:
    if isinstance(candidate, Mapping):
        return list(candidate)
    if candidate is missing or not is_instance_like(candidate):
        return []
    if hasattr(candidate, "__dict__"):
        return list(vars(candidate))
    slots = type(candidate).__slots__
    return [slots] if isinstance(slots, str) else list(slots)
