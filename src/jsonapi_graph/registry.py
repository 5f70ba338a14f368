import logging
import typing

from .exceptions import UnknownResourceTypeError
from .interfaces import ModelResolver
from .models import (
    Attr,
    CustomDeserializer,
    CustomSerializer,
    Member,
    ModelDefinition,
    ModelOptions,
    RelationshipDescriptor,
)

logger = logging.getLogger(__name__)


def _normalize_member(value: typing.Any) -> Member:
    if isinstance(value, (Attr, RelationshipDescriptor)):
        return value
    return Attr(default=value)


class ModelRegistry(ModelResolver):
    """
    Holds the :py:class:`ModelDefinition`s known to an application.

    :param bool disable_errors_for_missing_resource_definitions: when set,
        :py:meth:`resolve` hands out an empty placeholder definition for unknown
        names instead of raising :py:class:`UnknownResourceTypeError`.
    """

    _definitions: typing.Dict[str, ModelDefinition]
    disable_errors_for_missing_resource_definitions: bool

    def add(self, definition: ModelDefinition) -> ModelDefinition:
        if definition.name in self._definitions:
            logger.debug("replacing the definition of %s", definition.name)
        self._definitions[definition.name] = definition
        return definition

    def define(
        self,
        name: str,
        attributes: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        *,
        read_only: typing.Iterable[str] = (),
        type: typing.Optional[str] = None,
        serializer: typing.Optional[CustomSerializer] = None,
        deserializer: typing.Optional[CustomDeserializer] = None,
    ) -> ModelDefinition:
        """
        Defines a model.

        Values in ``attributes`` that are neither :py:class:`Attr` nor
        :py:class:`RelationshipDescriptor` are taken as plain attributes whose
        default is the value itself, so ``{"title": ""}`` is a valid definition.

        :param str name: the singular model name.
        :param Optional[Mapping[str, Any]] attributes: the members in serialization order.
        :param Iterable[str] read_only: names never sent to the server.
        :param Optional[str] type: the wire type name, if it is not the plural of ``name``.
        :param Optional[CustomSerializer] serializer: replaces the serializer for the model.
        :param Optional[CustomDeserializer] deserializer: replaces the deserializer for the model.
        :return: the registered :py:class:`ModelDefinition`.
        """
        return self.add(
            ModelDefinition(
                name,
                ((k, _normalize_member(v)) for k, v in (attributes or {}).items()),
                ModelOptions(
                    read_only=frozenset(read_only),
                    type=type,
                    serializer=serializer,
                    deserializer=deserializer,
                ),
            )
        )

    C = typing.TypeVar("C", bound=type)

    def register(self, class_: C) -> C:
        """
        Class decorator that defines a model out of a declarative class.
        See :py:mod:`jsonapi_graph.declarative`.
        """
        from .declarative import build_definition

        self.add(build_definition(class_))
        return class_

    def resolve(self, name: str) -> ModelDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            if self.disable_errors_for_missing_resource_definitions:
                logger.debug("no definition for %s; using an empty one", name)
                return ModelDefinition(name)
            raise UnknownResourceTypeError(name)

    def reset(self) -> None:
        self._definitions.clear()

    def __contains__(self, name: typing.Any) -> bool:
        return name in self._definitions

    def __iter__(self) -> typing.Iterator[ModelDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def __init__(self, disable_errors_for_missing_resource_definitions: bool = False):
        self._definitions = {}
        self.disable_errors_for_missing_resource_definitions = (
            disable_errors_for_missing_resource_definitions
        )
