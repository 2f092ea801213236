"""
Declare marshmallow rules property by property on ordinary classes and get
one composed schema per class, inherited rules included.

Examples:
    >>> from marshmallow import validate as v
    >>> registry = SchemaRegistry()

    Rules are attached with :func:`rule` and the class is compiled by
    :func:`schema` / :func:`named_schema` ...
    >>> @named_schema("person", registry=registry)
    ... class Person:
    ...     email = rule(a.Email(required=True), registry=registry)
    ...     age = rule(a.Integer(validate=v.Range(min=0)), registry=registry)

    ... subclasses inherit the rules of their ancestors
    >>> @schema(registry=registry)
    ... class Employee(Person):
    ...     employee_id = rule(a.String(required=True), registry=registry)

    >>> validate_sync({"email": "ada@example.com", "age": "36", "employee_id": "7"},
    ...               Employee, registry=registry)
    {'email': 'ada@example.com', 'age': 36, 'employee_id': '7'}

    >>> try:
    ...     validate_sync({"age": -1}, "person", registry=registry)
    ... except ValidationError as err:
    ...     print(flatten_errors(err))
    ['Missing data for required field.', 'Must be greater than or equal to 0.']

    With ``reconstruct_instance=True`` the result is an instance of the class,
    built from the validated data
    >>> @schema(reconstruct_instance=True, registry=registry)
    ... class Badge:
    ...     code = rule(a.String(required=True), registry=registry)
    ...     def __init__(self, data):
    ...         self.code = data["code"]

    >>> badge = validate_sync({"code": "B-1"}, Badge, registry=registry)
    >>> isinstance(badge, Badge), badge.code
    (True, 'B-1')
    >>> validate_sync(badge, registry=registry) is badge
    True
"""
from marshmallow import ValidationError, fields

from schema_decorators.compiler import define_schema
from schema_decorators.decorators import (Declaration, named_schema, nested, nested_array,
                                          nested_record, nested_type, rule, schema)
from schema_decorators.engine import (Lazy, ShapeSchema, TargetClassSchema, ValidateOptions,
                                      describe, flatten_errors, object_schema, required)
from schema_decorators.metadata import MetadataStorage
from schema_decorators.registry import (SchemaRegistry, default_registry, get_named_schema,
                                        get_schema_by_type)
from schema_decorators.validation import (cast, is_valid, is_valid_sync, validate, validate_at,
                                          validate_sync, validate_sync_at)

# ``rule(a.String())`` / ``nested_array(Job, an.List)``
a = an = fields

__all__ = [
    "Declaration", "Lazy", "MetadataStorage", "SchemaRegistry", "ShapeSchema",
    "TargetClassSchema", "ValidateOptions", "ValidationError",
    "a", "an", "cast", "default_registry", "define_schema", "describe",
    "flatten_errors", "get_named_schema", "get_schema_by_type", "is_valid",
    "is_valid_sync", "named_schema", "nested", "nested_array", "nested_record",
    "nested_type", "object_schema", "required", "rule", "schema", "validate",
    "validate_at", "validate_sync", "validate_sync_at",
]
