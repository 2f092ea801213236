"""
Class decorators and property declarations.

A property is declared by assigning a declaration to a class attribute.
When the class is created the declaration records its rule for that exact
class and then removes itself, so the attribute is free for instances (and
dataclasses see no default).

Examples:
    >>> from marshmallow import fields
    >>> from schema_decorators.registry import SchemaRegistry
    >>> registry = SchemaRegistry()

    >>> @named_schema("office", registry=registry)
    ... class Office:
    ...     name = rule(fields.String(required=True), registry=registry)

    >>> @schema(registry=registry)
    ... class Job:
    ...     title = rule(fields.String(required=True), registry=registry)
    ...     offices = nested_array(Office, registry=registry)

    >>> registry.get_schema_by_type(Job).load({"title": "DEV", "offices": [{"name": "North"}]})
    {'title': 'DEV', 'offices': [{'name': 'North'}]}

    >>> "title" in vars(Job)
    False
"""
from __future__ import annotations

import inspect
from typing import Callable

from marshmallow import fields

from schema_decorators.compiler import SchemaRefinement, define_schema
from schema_decorators.engine import FieldRefinement
from schema_decorators.nested import (TypeRef, declared_type, nested_array_field,
                                      nested_field, nested_record_field)
from schema_decorators.registry import SchemaRegistry, default_registry


# ───────────────────────── class decorators ─────────────────────────
def schema(cls: type | None = None, *,
           reconstruct_instance: bool = False,
           refine: SchemaRefinement | None = None,
           registry: SchemaRegistry | None = None):
    """Compile and register the decorated class's schema (``@schema`` or ``@schema(...)``)."""

    def wrap(target: type) -> type:
        define_schema(target, refine=refine, reconstruct_instance=reconstruct_instance,
                      registry=registry)
        return target

    return wrap(cls) if cls is not None else wrap


def named_schema(name: str, *,
                 reconstruct_instance: bool = False,
                 refine: SchemaRefinement | None = None,
                 registry: SchemaRegistry | None = None):
    """Like :func:`schema`, and also reachable as ``name``."""

    def wrap(target: type) -> type:
        define_schema(target, refine=refine, reconstruct_instance=reconstruct_instance,
                      name=name, registry=registry)
        return target

    return wrap


# ─────────────────────── property declarations ──────────────────────
class Declaration:
    """Placeholder that turns into a property rule once its owner exists."""

    def __init__(self, build: Callable[[type, str], fields.Field],
                 registry: SchemaRegistry | None = None):
        self._build = build
        self._registry = registry

    def __set_name__(self, owner: type, name: str) -> None:
        registry = self._registry or default_registry
        registry.metadata.add_schema_metadata(owner, name, self._build(owner, name))
        delattr(owner, name)


def rule(field: fields.Field, *, registry: SchemaRegistry | None = None) -> Declaration:
    """Attach a marshmallow field as the rule of this property."""
    return Declaration(lambda owner, name: field, registry)


def nested(refine: FieldRefinement | None = None, *,
           registry: SchemaRegistry | None = None) -> Declaration:
    """
    Nested object whose class is read from the property's annotation
    (``job: Job = nested()``; ``Optional[Job]`` works too).
    """

    def build(owner: type, name: str) -> fields.Field:
        if not _has_annotation(owner, name):
            raise TypeError(
                f"{owner.__qualname__}.{name} needs a type annotation for nested(); "
                "use nested_type() to name the class instead"
            )
        return nested_field(lambda: declared_type(owner, name), refine, registry=registry)

    return Declaration(build, registry)


def nested_type(type_ref: TypeRef, refine: FieldRefinement | None = None, *,
                registry: SchemaRegistry | None = None) -> Declaration:
    """Nested object of an explicitly named class (or type thunk)."""
    return Declaration(lambda owner, name: nested_field(type_ref, refine, registry=registry),
                       registry)


def nested_array(type_ref: TypeRef,
                 array: Callable[[fields.Field], fields.Field] | None = None,
                 element: FieldRefinement | None = None, *,
                 registry: SchemaRegistry | None = None) -> Declaration:
    """
    List of nested objects. ``array`` builds the list field around the
    element field (default :class:`marshmallow.fields.List`).
    """
    return Declaration(
        lambda owner, name: nested_array_field(type_ref, array, element, registry=registry),
        registry,
    )


def nested_record(type_ref: TypeRef, refine: FieldRefinement | None = None,
                  element: FieldRefinement | None = None, *,
                  registry: SchemaRegistry | None = None) -> Declaration:
    """Mapping of arbitrary string keys to nested objects of one class."""
    return Declaration(
        lambda owner, name: nested_record_field(type_ref, refine, element, registry=registry),
        registry,
    )


def _has_annotation(owner: type, name: str) -> bool:
    try:
        annotations = inspect.get_annotations(owner)
    except NameError:
        # forward reference not defined yet; declared_type() checks again when resolved
        return True
    return name in annotations
