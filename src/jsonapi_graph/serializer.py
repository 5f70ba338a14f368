import collections.abc
import datetime
import logging
import typing

from .interfaces import ModelResolver, Pluralizer
from .models import Cardinality, RelationshipDescriptor
from .serde.builders import ResourceIdReprBuilder, ResourceReprBuilder
from .serde.renderer import ReprRenderer
from .utils import UNSPECIFIED, is_sequence

logger = logging.getLogger(__name__)


def _fetch(item: typing.Any, key: str) -> typing.Any:
    """
    Retrieves ``key`` from a mapping, or the attribute of that name from any
    other object.  Returns :py:data:`UNSPECIFIED` when there is neither.
    """
    if isinstance(item, collections.abc.Mapping):
        return item.get(key, UNSPECIFIED)
    return getattr(item, key, UNSPECIFIED)


class ResourceSerializer:
    """
    Converts domain objects into JSON:API resource objects according to the
    :py:class:`ModelDefinition` registered under a model name.

    Members are emitted in the order the model declares them.  Plain attributes
    the item does not carry are left out, whereas an explicit ``None`` is kept.
    Naive datetimes are taken to be in UTC unless a renderer says otherwise.
    """

    _resolver: ModelResolver
    _pluralizer: Pluralizer
    _renderer: ReprRenderer

    def _populate_identifier(
        self, builder: ResourceIdReprBuilder, descr: RelationshipDescriptor, value: typing.Any
    ) -> None:
        type_ = descr.type or _fetch(value, "type")
        if type_ is not UNSPECIFIED:
            builder.set_type(type_)
        id_ = _fetch(value, "id")
        builder.set_id(None if id_ is UNSPECIFIED else id_)
        meta = _fetch(value, "meta")
        if meta:
            builder.meta.update(meta)

    def _add_relationship(
        self,
        builder: ResourceReprBuilder,
        name: str,
        descr: RelationshipDescriptor,
        value: typing.Any,
    ) -> None:
        if descr.cardinality is Cardinality.HAS_ONE:
            rel = builder.next_to_one_relationship(name)
            if value is None:
                rel.nullify()
            else:
                self._populate_identifier(rel.set(), descr, value)
        else:
            to_many = builder.next_to_many_relationship(name)
            if value is None:
                return
            for v in value if is_sequence(value) else [value]:
                self._populate_identifier(to_many.next(), descr, v)

    def resource(self, type_name: typing.Optional[str], item: typing.Any) -> typing.Any:
        """
        Serializes a single domain object.

        :param Optional[str] type_name: the model name.  When empty, ``item`` is returned as it is.
        :param Any item: a mapping or an object exposing the model members as attributes.
        :return: the resource object, or whatever a custom serializer returns.
        :raises UnknownResourceTypeError: when ``type_name`` is not registered.
        """
        if not type_name:
            return item

        model = self._resolver.resolve(type_name)
        if model.options.serializer is not None:
            return model.options.serializer(item)

        builder = ResourceReprBuilder()
        builder.set_type(model.options.type or self._pluralizer(type_name))

        for name, member in model.attributes.items():
            if model.is_read_only(name):
                continue
            value = _fetch(item, name)
            if value is UNSPECIFIED:
                continue
            if isinstance(member, RelationshipDescriptor):
                self._add_relationship(builder, name, member, value)
            else:
                builder.add_attribute(name, value)

        id_ = _fetch(item, "id")
        if id_:
            builder.set_id(id_)
        meta = _fetch(item, "meta")
        if meta:
            builder.meta.update(meta)
        links = _fetch(item, "links")
        if links:
            builder.links = links

        return self._renderer(builder())

    def collection(
        self, type_name: typing.Optional[str], items: typing.Iterable[typing.Any]
    ) -> typing.Any:
        if not type_name:
            return items
        logger.debug("serializing a collection of %s", type_name)
        return [self.resource(type_name, item) for item in items]

    def __init__(
        self,
        resolver: ModelResolver,
        pluralizer: Pluralizer,
        renderer: typing.Optional[ReprRenderer] = None,
    ):
        self._resolver = resolver
        self._pluralizer = pluralizer
        if renderer is None:
            renderer = ReprRenderer(assume_naive_timezone_as=datetime.timezone.utc)
        self._renderer = renderer


__all__ = ["ResourceSerializer"]
