from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from marshmallow import fields

from schema_decorators.engine import ShapeSchema


@dataclass(frozen=True)
class AlreadyValidInstance:
    value: Any


@dataclass(frozen=True)
class NeedsConstruction:
    data: Mapping[str, Any]


class TargetClassSchema(ShapeSchema):
    """
    Schema bound to a class: loading gives back an instance of that class.

    * an instance of the class is validated through its attributes and
      returned as is (same object);
    * anything else is loaded through the shape and handed to the class
      constructor as its only argument.

    The class must therefore accept one mapping argument shaped like the
    validated data.

    Examples:
        >>> class Tag:
        ...     def __init__(self, data):
        ...         self.label = data["label"]
        >>> tags = target_class_schema(Tag, {"label": fields.String(required=True)})
        >>> tag = tags.load({"label": "urgent"})
        >>> type(tag).__name__, tag.label
        ('Tag', 'urgent')
        >>> tags.load(tag) is tag
        True
    """
    __target__: type = object

    def load(self, data, *, many=None, partial=None, unknown=None):
        validated = super().load(data, many=many, partial=partial, unknown=unknown)
        many = self.many if many is None else many
        if many:
            return [self._settle(self.classify(item, loaded))
                    for item, loaded in zip(data, validated)]
        return self._settle(self.classify(data, validated))

    def classify(self, candidate, validated) -> AlreadyValidInstance | NeedsConstruction:
        if isinstance(candidate, self.__target__):
            return AlreadyValidInstance(candidate)
        return NeedsConstruction(validated)

    def _settle(self, outcome: AlreadyValidInstance | NeedsConstruction):
        if isinstance(outcome, AlreadyValidInstance):
            return outcome.value
        return self.__target__(outcome.data)


def target_class_schema(target: type, shape: Mapping[str, fields.Field]) -> TargetClassSchema:
    schema_cls = TargetClassSchema.from_dict(dict(shape), name=f"{target.__name__}Schema")
    schema_cls.__target__ = target
    return schema_cls()
