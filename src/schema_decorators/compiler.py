from __future__ import annotations

from typing import Callable

from marshmallow import Schema

from schema_decorators.engine import object_schema, target_class_schema
from schema_decorators.registry import SchemaRegistry, default_registry

SchemaRefinement = Callable[[Schema], Schema]


def define_schema(target: type, *,
                  refine: SchemaRefinement | None = None,
                  reconstruct_instance: bool = False,
                  name: str | None = None,
                  registry: SchemaRegistry | None = None) -> Schema:
    """
    Compile the declared (and inherited) property rules of ``target`` into
    one schema and register it.

    Parameters
    ----------
    refine
        ``callable(schema) -> schema`` applied last, after the mode-specific
        schema is built.
    reconstruct_instance
        Build a :class:`~schema_decorators.engine.TargetClassSchema`:
        validated data is turned into a ``target`` instance by calling
        ``target(data)``; instances of ``target`` are returned unchanged.
    name
        Also register the result under this name.

    Compiling a class again overwrites its previous schema.

    Examples:
        >>> from marshmallow import fields
        >>> registry = SchemaRegistry()
        >>> class Point: ...
        >>> registry.metadata.add_schema_metadata(Point, "x", fields.Integer())
        >>> compiled = define_schema(Point, name="point", registry=registry)
        >>> registry.get_named_schema("point") is registry.get_schema_by_type(Point) is compiled
        True
        >>> compiled.load({"x": "7"})
        {'x': 7}
    """
    registry = registry or default_registry

    resolved = registry.metadata.find_schema_metadata(target) or {}
    shape = dict(resolved)

    if reconstruct_instance:
        compiled = target_class_schema(target, shape)
    else:
        compiled = object_schema(shape, name=f"{target.__name__}Schema")

    if refine is not None:
        compiled = refine(compiled)

    registry.register(target, compiled, name=name)
    registry.emit(
        f"[schema] {target.__qualname__}: "
        f"{'target-class' if reconstruct_instance else 'shape'} mode, {len(shape)} field(s)"
        + (f", name={name!r}" if name else "")
    )
    return compiled
