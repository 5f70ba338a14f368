"""
:py:mod:`jsonapi_graph.deserializer` rebuilds graphs of domain objects out of
the flattened ``data`` / ``included`` representation of JSON:API.

Two mechanisms keep the traversal finite on cyclic graphs:

* to-one targets are built through an identity cache keyed by ``(type, id)``.
  An object enters the cache once its attributes are mapped and *before* its
  relationships are resolved, so a path leading back to it finds the same
  (partially populated) instance instead of recursing.
* to-many relationships of a given resource are expanded once per top-level
  call.  Later encounters of the same source resource yield ``None`` for its
  to-many relationships.

Both live in a :py:class:`DeserializationContext` that belongs to a single
top-level call.
"""

import logging
import typing

from .interfaces import ModelResolver, Pluralizer, WarningSink
from .log import warning_sink
from .models import Cardinality, ModelDefinition, RelationshipDescriptor
from .serde.deserializer import ReprDeserializer
from .serde.models import LinkageData, LinkageRepr, ResourceIdRepr, ResourceRepr
from .serde.types import Identity, JSONObject
from .serde.utils import JSONPointer

logger = logging.getLogger(__name__)

DomainObject = typing.Dict[str, typing.Any]
ResourceInput = typing.Union[ResourceRepr, JSONObject]


class DeserializationContext:
    """
    Mutable state of one top-level deserialization call.

    Callers that hand the same context to several calls own its lifecycle and
    must :py:meth:`clear` it before starting an unrelated call.
    """

    cache: typing.Dict[Identity, DomainObject]
    expanded: typing.Set[str]

    def get(self, identity: Identity) -> typing.Optional[DomainObject]:
        return self.cache.get(identity)

    def set(self, identity: Identity, obj: DomainObject) -> None:
        self.cache[identity] = obj

    def visit(self, token: str) -> bool:
        """
        Marks the resource denoted by ``token`` as expanded.

        :return: ``True`` if it had already been marked.
        """
        if token in self.expanded:
            return True
        self.expanded.add(token)
        return False

    def reset_expanded(self) -> None:
        self.expanded.clear()

    def clear(self) -> None:
        self.cache.clear()
        self.expanded.clear()

    def __init__(self):
        self.cache = {}
        self.expanded = set()


class IncludedPool(typing.Sequence[ResourceRepr]):
    """
    The ``included`` resources of a document, indexed by identity.
    """

    resources: typing.Sequence[ResourceRepr]
    _index: typing.Dict[Identity, typing.List[ResourceRepr]]

    def find(self, identity: Identity) -> typing.Sequence[ResourceRepr]:
        return self._index.get(identity, ())

    @typing.overload
    def __getitem__(self, index: int) -> ResourceRepr:
        ...  # pragma: nocover

    @typing.overload
    def __getitem__(self, index: slice) -> typing.Sequence[ResourceRepr]:
        ...  # pragma: nocover

    def __getitem__(self, index):
        return self.resources[index]

    def __len__(self) -> int:
        return len(self.resources)

    def __init__(self, resources: typing.Iterable[ResourceRepr] = ()):
        self.resources = tuple(resources)
        self._index = {}
        for r in self.resources:
            self._index.setdefault(r.identity, []).append(r)


def _stub(id_repr: ResourceIdRepr) -> DomainObject:
    retval: DomainObject = {"id": id_repr.id, "type": id_repr.type}
    if id_repr.meta:
        retval["meta"] = id_repr.meta
    return retval


def _stubs(data: LinkageData) -> typing.Any:
    if isinstance(data, ResourceIdRepr):
        return _stub(data)
    return [_stub(id_repr) for id_repr in data or ()]


class ResourceGraphDeserializer:
    """
    Converts JSON:API resources into domain objects (plain ``dict`` s) according to
    the :py:class:`ModelDefinition` registered for their types.

    :param ModelResolver resolver: looks up models by their singular name.
    :param Pluralizer pluralizer: turns wire type names into model names.
    :param Optional[WarningSink] warn: receives non-fatal problems; the package logger by default.
    :param Optional[ReprDeserializer] parser: parses raw mappings handed to the public methods.
    """

    _resolver: ModelResolver
    _pluralizer: Pluralizer
    _warn: WarningSink
    _parser: ReprDeserializer

    def create_context(self) -> DeserializationContext:
        return DeserializationContext()

    def _coerce_resource(self, item: ResourceInput, pointer: JSONPointer) -> ResourceRepr:
        if isinstance(item, ResourceRepr):
            return item
        return self._parser.resource(item, pointer)

    def _coerce_included(
        self, included: typing.Union[IncludedPool, typing.Iterable[ResourceInput], None]
    ) -> IncludedPool:
        if isinstance(included, IncludedPool):
            return included
        pointer = JSONPointer("/included")
        return IncludedPool(
            self._coerce_resource(r, pointer[i]) for i, r in enumerate(included or ())
        )

    def _model_for(self, repr_: ResourceRepr) -> ModelDefinition:
        return self._resolver.resolve(self._pluralizer.singular(repr_.type))

    def _related_items(
        self,
        descr: RelationshipDescriptor,
        linkage: LinkageRepr,
        included: IncludedPool,
    ) -> typing.Sequence[ResourceRepr]:
        return [
            candidate
            for id_repr in linkage.identifiers
            for candidate in included.find(id_repr.identity)
            if descr.matches(candidate)
        ]

    def _attach_has_one(
        self,
        ctx: DeserializationContext,
        descr: RelationshipDescriptor,
        linkage: LinkageRepr,
        included: IncludedPool,
        depth: int,
    ) -> typing.Any:
        related = self._related_items(descr, linkage, included)
        if related:
            return self._resource(ctx, related[0], included, True, depth)
        if linkage.data is not None:
            return _stubs(linkage.data)
        return None

    def _attach_has_many(
        self,
        ctx: DeserializationContext,
        descr: RelationshipDescriptor,
        linkage: LinkageRepr,
        item: ResourceRepr,
        included: IncludedPool,
        depth: int,
        revisit: bool,
    ) -> typing.Any:
        if revisit:
            self._warn(
                f'Relationship "{descr.name}" of "{item.type}:{item.id}" has already been '
                "expanded. Stopping deserialization."
            )
            return None
        related = self._related_items(descr, linkage, included)
        if related:
            return self._collection(ctx, related, included, False, depth)
        if linkage.data is not None:
            return _stubs(linkage.data)
        return []

    def _resource(
        self,
        ctx: DeserializationContext,
        item: ResourceRepr,
        included: IncludedPool,
        use_cache: bool,
        depth: int,
    ) -> typing.Any:
        model = self._model_for(item)
        if model.options.deserializer is not None:
            return model.options.deserializer(item, included.resources)

        if use_cache:
            cached = ctx.get(item.identity)
            if cached is not None:
                logger.debug("%s:%s served from cache (depth %d)", item.type, item.id, depth)
                return cached

        obj: DomainObject = {"id": item.id, "type": item.type}

        for name, value in item.attributes.items():
            found = model.lookup(name)
            if found is None:
                if name != "id":
                    self._warn(
                        f'Resource response for type "{item.type}" contains attribute "{name}", '
                        "but it is not present on model config and therefore not deserialized."
                    )
                    continue
                obj[name] = value
            else:
                obj[found[0]] = value

        # must precede relationship resolution so that cycles end up in the cache
        if use_cache:
            ctx.set(item.identity, obj)

        revisit = ctx.visit(f"{item.type}:{item.id}")

        for key, linkage in item.relationships.items():
            found = model.lookup(key)
            if found is None:
                self._warn(
                    f'Resource response for type "{item.type}" contains relationship "{key}", '
                    "but it is not present on model config and therefore not deserialized."
                )
                continue
            name, member = found
            if not isinstance(member, RelationshipDescriptor):
                self._warn(
                    f'Resource response for type "{item.type}" contains relationship "{key}", '
                    "but it is present on model config as a plain attribute."
                )
                continue
            if member.cardinality is Cardinality.HAS_ONE:
                obj[name] = self._attach_has_one(ctx, member, linkage, included, depth + 1)
            else:
                obj[name] = self._attach_has_many(
                    ctx, member, linkage, item, included, depth + 1, revisit
                )

        if item.meta:
            obj["meta"] = item.meta
        if item.links:
            obj["links"] = item.links
        return obj

    def _collection(
        self,
        ctx: DeserializationContext,
        items: typing.Iterable[ResourceRepr],
        included: IncludedPool,
        use_cache: bool,
        depth: int,
    ) -> typing.List[typing.Any]:
        return [self._resource(ctx, item, included, use_cache, depth) for item in items]

    def resource(
        self,
        item: ResourceInput,
        included: typing.Union[IncludedPool, typing.Iterable[ResourceInput], None] = (),
        use_cache: bool = False,
        depth: int = 0,
        context: typing.Optional[DeserializationContext] = None,
    ) -> typing.Any:
        """
        Deserializes a single resource.

        :param ResourceInput item: the resource, either as parsed JSON or as a :py:class:`ResourceRepr`.
        :param included: the ``included`` resources of the document.
        :param bool use_cache: consult and populate the identity cache for ``item`` itself.
        :param int depth: the relationship depth ``item`` is found at.
        :param Optional[DeserializationContext] context: the context to work in.
                                                         A fresh one is used when omitted.
        :return: the domain object, or whatever a custom deserializer returns.
        :raises DeserializationError: when ``item`` or ``included`` are malformed.
        """
        ctx = self.create_context() if context is None else context
        return self._resource(
            ctx,
            self._coerce_resource(item, JSONPointer("/data")),
            self._coerce_included(included),
            use_cache,
            depth,
        )

    def collection(
        self,
        items: typing.Iterable[ResourceInput],
        included: typing.Union[IncludedPool, typing.Iterable[ResourceInput], None] = (),
        use_cache: bool = False,
        depth: int = 0,
        context: typing.Optional[DeserializationContext] = None,
    ) -> typing.List[typing.Any]:
        """
        Deserializes resources in order.  At depth 0 the record of expanded
        to-many relationships in the context starts afresh.

        See :py:meth:`resource` for the parameters.
        """
        ctx = self.create_context() if context is None else context
        if depth == 0:
            ctx.reset_expanded()
        pointer = JSONPointer("/data")
        return self._collection(
            ctx,
            [self._coerce_resource(item, pointer[i]) for i, item in enumerate(items)],
            self._coerce_included(included),
            use_cache,
            depth,
        )

    def __init__(
        self,
        resolver: ModelResolver,
        pluralizer: Pluralizer,
        warn: typing.Optional[WarningSink] = None,
        parser: typing.Optional[ReprDeserializer] = None,
    ):
        self._resolver = resolver
        self._pluralizer = pluralizer
        self._warn = warning_sink() if warn is None else warn
        self._parser = ReprDeserializer() if parser is None else parser


__all__ = [
    "DeserializationContext",
    "DomainObject",
    "IncludedPool",
    "ResourceGraphDeserializer",
]
