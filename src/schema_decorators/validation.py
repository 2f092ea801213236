"""
Run-time entry points. Each one finds the compiled schema for the object
and hands the work to the engine unchanged.

The schema is chosen by ``schema_name``: a registered name, a class, or
(when omitted) the object's own class.
"""
from __future__ import annotations

from marshmallow import Schema

from schema_decorators import engine
from schema_decorators.registry import SchemaRegistry, default_registry

_SCALARS = (str, bytes, bytearray, int, float, complex, bool)


def _get_schema(obj, schema_name: str | type | None,
                registry: SchemaRegistry | None) -> Schema:
    if obj is None or isinstance(obj, _SCALARS):
        raise TypeError("Cannot validate non object types")
    registry = registry or default_registry

    if isinstance(schema_name, str):
        compiled = registry.get_named_schema(schema_name)
        wanted = repr(schema_name)
    else:
        target = schema_name if schema_name is not None else type(obj)
        compiled = registry.get_schema_by_type(target)
        wanted = target.__qualname__
    if compiled is None:
        raise LookupError(f"No schema registered for {wanted}")
    return compiled


def validate(obj, schema_name=None, *, options=None, registry=None):
    """
    Coroutine validating ``obj``; awaiting it gives the loaded result.

    Usage errors (non-object, unknown schema) are raised right away, not
    when awaited.
    """
    return engine.validate(_get_schema(obj, schema_name, registry), obj, options)


def validate_sync(obj, schema_name=None, *, options=None, registry=None):
    return engine.validate_sync(_get_schema(obj, schema_name, registry), obj, options)


def validate_at(obj, path: str, schema_name=None, *, options=None, registry=None):
    return engine.validate_at(_get_schema(obj, schema_name, registry), path, obj, options)


def validate_sync_at(obj, path: str, schema_name=None, *, options=None, registry=None):
    return engine.validate_sync_at(_get_schema(obj, schema_name, registry), path, obj, options)


def is_valid(obj, schema_name=None, *, options=None, registry=None):
    return engine.is_valid(_get_schema(obj, schema_name, registry), obj, options)


def is_valid_sync(obj, schema_name=None, *, options=None, registry=None) -> bool:
    return engine.is_valid_sync(_get_schema(obj, schema_name, registry), obj, options)


def cast(obj, schema_name=None, *, options=None, registry=None):
    """Coerce ``obj`` with its schema without enforcing required fields."""
    return engine.cast(_get_schema(obj, schema_name, registry), obj, options)
