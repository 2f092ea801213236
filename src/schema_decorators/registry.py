from __future__ import annotations

import warnings
from typing import Callable

from marshmallow import Schema

from schema_decorators._config import config
from schema_decorators.metadata import MetadataStorage


class SchemaRegistry:
    """
    Everything composition writes to: declared property rules, and the
    compiled schema of every class, by class and by name.

    One registry per isolated domain; ``default_registry`` is used whenever
    none is passed.

    ``log`` is any ``callable(str)`` (``print``, ``logging.info``, ...) and
    receives one line per compiled schema.
    """

    def __init__(self, *, log: Callable[[str], None] | None = None):
        self.metadata = MetadataStorage()
        self.log = log
        self._by_type: dict[type, Schema] = {}
        self._by_name: dict[str, Schema] = {}
        self._name_owner: dict[str, type] = {}

    def register(self, target: type, compiled: Schema, name: str | None = None) -> None:
        self._by_type[target] = compiled
        if name is None:
            return
        owner = self._name_owner.get(name)
        if owner is not None and owner is not target:
            warnings.warn(
                f"Schema name {name!r} moves from {owner.__qualname__} to {target.__qualname__}",
                stacklevel=2,
            )
        self._by_name[name] = compiled
        self._name_owner[name] = target

    def get_schema_by_type(self, target) -> Schema | None:
        """Compiled schema of a class, or of an instance's class."""
        cls = target if isinstance(target, type) else type(target)
        return self._by_type.get(cls)

    def get_named_schema(self, name: str) -> Schema | None:
        return self._by_name.get(name)

    def emit(self, message: str) -> None:
        if self.log:
            self.log(message)


default_registry = SchemaRegistry(log=print if config["debug"] else None)


def get_schema_by_type(target, registry: SchemaRegistry | None = None) -> Schema | None:
    return (registry or default_registry).get_schema_by_type(target)


def get_named_schema(name: str, registry: SchemaRegistry | None = None) -> Schema | None:
    return (registry or default_registry).get_named_schema(name)
