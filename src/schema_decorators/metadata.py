from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from marshmallow import fields


class MetadataStorage:
    """
    Per-class property rules, plus the inheritance-merged view of them.

    Examples:
        >>> from marshmallow import fields
        >>> store = MetadataStorage()
        >>> class Base: ...
        >>> class Child(Base): ...
        >>> store.add_schema_metadata(Base, "a", fields.String())
        >>> store.add_schema_metadata(Base, "b", fields.String())
        >>> store.add_schema_metadata(Child, "c", fields.Integer())
        >>> store.add_schema_metadata(Child, "a", fields.Integer())

        ... the subclass sees its ancestors' rules; its own override wins and
        takes the subclass position
        >>> {k: type(v).__name__ for k, v in store.find_schema_metadata(Child).items()}
        {'b': 'String', 'c': 'Integer', 'a': 'Integer'}

        ... the merged view is computed once and then reused
        >>> store.find_schema_metadata(Child) is store.find_schema_metadata(Child)
        True

        >>> store.find_schema_metadata(int) is None
        True
    """

    def __init__(self):
        self._metadata: dict[type, dict[str, fields.Field]] = {}
        self._cache: dict[type, Mapping[str, fields.Field]] = {}

    def add_schema_metadata(self, target: type, property_name: str, rule: fields.Field) -> None:
        self._metadata.setdefault(target, {})[property_name] = rule

    def own_metadata(self, target: type) -> Mapping[str, fields.Field]:
        return MappingProxyType(self._metadata.get(target, {}))

    def find_schema_metadata(self, target: type) -> Mapping[str, fields.Field] | None:
        """
        Rules of ``target`` and all of its ancestors, root first.

        The result is cached per queried class and never recomputed, so rules
        added to the class or an ancestor afterwards are not seen here.
        ``None`` means no class in the lineage declared anything.
        """
        cached = self._cache.get(target)
        if cached is not None:
            return cached

        # __mro__ is fixed at class creation and always ends with ``object``
        lineage = [self.own_metadata(k) for k in reversed(target.__mro__) if k in self._metadata]
        if not lineage:
            return None

        merged: dict[str, fields.Field] = {}
        for own in lineage:
            for name, rule in own.items():
                merged.pop(name, None)
                merged[name] = rule

        resolved = MappingProxyType(merged)
        self._cache[target] = resolved
        return resolved
