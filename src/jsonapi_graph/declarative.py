"""
Declarative model definitions.

.. code-block:: python

   @registry.register
   class Product:
       title = Attr()
       url = Attr()
       tags = has_many("tags")

       class Meta:
           read_only = ("url",)

The members are collected in the order they appear in the class body.  The
model name defaults to the lower-cased class name.
"""

import collections.abc
import dataclasses
import typing

from .exceptions import InvalidDeclarationError
from .models import (
    Attr,
    CustomDeserializer,
    CustomSerializer,
    Member,
    ModelDefinition,
    ModelOptions,
    RelationshipDescriptor,
)

_META_KEYS = frozenset(["name", "read_only", "type", "serializer", "deserializer"])


@dataclasses.dataclass
class Meta:
    name: typing.Optional[str] = None
    read_only: typing.Sequence[str] = ()
    type: typing.Optional[str] = None
    serializer: typing.Optional[CustomSerializer] = None
    deserializer: typing.Optional[CustomDeserializer] = None


def _unwrap(value: typing.Any) -> typing.Any:
    # functions stored in a class body turn into methods on attribute access;
    # vars() gives them back as is, but staticmethod wrappers need unwrapping
    if isinstance(value, staticmethod):
        return value.__func__
    return value


def handle_meta(meta: typing.Optional[typing.Type]) -> Meta:
    if meta is None:
        return Meta()
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    unknown = set(attrs) - _META_KEYS
    if unknown:
        raise InvalidDeclarationError(
            f"unknown option(s) in Meta: {', '.join(sorted(unknown))}"
        )

    read_only = attrs.get("read_only", ())
    if isinstance(read_only, str) or not isinstance(read_only, collections.abc.Iterable):
        raise InvalidDeclarationError("Meta.read_only must be a sequence of attribute names")

    serializer = _unwrap(attrs.get("serializer"))
    deserializer = _unwrap(attrs.get("deserializer"))
    for name, func in (("serializer", serializer), ("deserializer", deserializer)):
        if func is not None and not callable(func):
            raise InvalidDeclarationError(f"Meta.{name} must be callable")

    return Meta(
        name=attrs.get("name"),
        read_only=tuple(read_only),
        type=attrs.get("type"),
        serializer=serializer,
        deserializer=deserializer,
    )


def collect_members(class_: typing.Type) -> typing.Sequence[typing.Tuple[str, Member]]:
    members: typing.List[typing.Tuple[str, Member]] = []
    seen: typing.Set[str] = set()
    # base classes first so that subclasses append to (or override) inherited members
    for klass in reversed(class_.__mro__):
        for k, v in vars(klass).items():
            if not isinstance(v, (Attr, RelationshipDescriptor)):
                continue
            if k in seen:
                members = [(n, v if n == k else m) for n, m in members]
            else:
                members.append((k, v))
                seen.add(k)
    return members


def build_definition(class_: typing.Type) -> ModelDefinition:
    meta = handle_meta(getattr(class_, "Meta", None))
    members = collect_members(class_)
    names = {name for name, _ in members}
    for name in meta.read_only:
        if name not in names:
            raise InvalidDeclarationError(
                f'"{name}" is declared read-only but {class_.__name__} has no such member'
            )
    return ModelDefinition(
        meta.name or class_.__name__.lower(),
        members,
        ModelOptions(
            read_only=frozenset(meta.read_only),
            type=meta.type,
            serializer=meta.serializer,
            deserializer=meta.deserializer,
        ),
    )
