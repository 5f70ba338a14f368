"""
Typed counterparts of the JSON:API document elements the library deals with.

Every repr remembers where it was read from through ``_source_``, which is
``None`` for reprs built in memory.
"""

import dataclasses
import datetime
import decimal
import typing
from collections import OrderedDict

from .types import Identity
from .utils import JSONPointer

Source = typing.Union[JSONPointer, str]
LinksValue = typing.Mapping[str, typing.Any]
MetaValue = typing.Dict[str, typing.Any]


@dataclasses.dataclass
class Repr:
    _source_: typing.Optional[Source] = None


@dataclasses.dataclass(init=False)
class MetaContainerRepr(Repr):
    """
    Base for elements that may carry ``meta``.  Absent ``meta`` is an empty dict.
    """

    meta: MetaValue = dataclasses.field(default_factory=dict)

    def __init__(
        self,
        *,
        meta: typing.Optional[MetaValue] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(_source_=_source_)
        self.meta = {} if meta is None else meta


@dataclasses.dataclass(init=False)
class NodeRepr(MetaContainerRepr):
    """
    Base for elements that may carry ``links`` besides ``meta``.

    ``links`` is left as found, since link objects may have members of their own.
    """

    links: typing.Optional[LinksValue] = None

    def __init__(
        self,
        *,
        links: typing.Optional[LinksValue] = None,
        meta: typing.Optional[MetaValue] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(meta=meta, _source_=_source_)
        self.links = links


@dataclasses.dataclass(init=False)
class ResourceIdRepr(MetaContainerRepr):
    """
    A `resource identifier object <https://jsonapi.org/format/#document-resource-identifier-objects>`_.
    """

    type: str  # type: ignore
    id: str  # type: ignore

    @property
    def identity(self) -> Identity:
        return (self.type, self.id)

    def __init__(
        self,
        *,
        type: str,
        id: str,
        meta: typing.Optional[MetaValue] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(meta=meta, _source_=_source_)
        self.type = type
        self.id = id


LinkageData = typing.Union[None, ResourceIdRepr, typing.Sequence[ResourceIdRepr]]


@dataclasses.dataclass(init=False)
class LinkageRepr(NodeRepr):
    """
    A relationship object together with its `resource linkage <https://jsonapi.org/format/#document-resource-object-linkage>`_.

    ``data`` is ``None`` both for an explicit ``null`` and for a relationship
    that only carries links.
    """

    data: LinkageData = None

    @property
    def identifiers(self) -> typing.Sequence[ResourceIdRepr]:
        """
        The identifiers in ``data`` as a sequence, whatever the cardinality.
        """
        if self.data is None:
            return ()
        elif isinstance(self.data, ResourceIdRepr):
            return (self.data,)
        return self.data

    def __init__(
        self,
        *,
        data: LinkageData,
        links: typing.Optional[LinksValue] = None,
        meta: typing.Optional[MetaValue] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(links=links, meta=meta, _source_=_source_)
        self.data = data


AttributeScalar = typing.Union[
    datetime.datetime, datetime.date, decimal.Decimal, str, int, float, bool, bytes, None
]
AttributeValue = typing.Union[
    typing.Sequence[typing.Any],
    typing.Mapping[str, typing.Any],
    AttributeScalar,
]


@dataclasses.dataclass(init=False)
class ResourceRepr(NodeRepr):
    """
    A `resource object <https://jsonapi.org/format/#document-resource-objects>`_.
    ``id`` is ``None`` for resources that are yet to be created on the server.

    :param str type: the resource type.
    :param Optional[str] id: the resource id.
    :param Iterable[Tuple[str, AttributeValue]] attributes: attribute name / value pairs, in order.
    :param Iterable[Tuple[str, LinkageRepr]] relationships: relationship name / linkage pairs,
                                                         in order.
    """

    type: str  # type: ignore
    id: typing.Optional[str]  # type: ignore
    attributes: typing.Mapping[str, AttributeValue] = dataclasses.field(  # type: ignore
        default_factory=OrderedDict
    )
    relationships: typing.Mapping[str, LinkageRepr] = dataclasses.field(  # type: ignore
        default_factory=OrderedDict
    )

    @property
    def identity(self) -> Identity:
        return (self.type, self.id)

    def __getitem__(self, name: str) -> AttributeValue:
        return self.attributes[name]

    def __init__(
        self,
        *,
        type: str,
        id: typing.Optional[str],
        attributes: typing.Iterable[typing.Tuple[str, AttributeValue]] = (),
        relationships: typing.Iterable[typing.Tuple[str, LinkageRepr]] = (),
        links: typing.Optional[LinksValue] = None,
        meta: typing.Optional[MetaValue] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(links=links, meta=meta, _source_=_source_)
        self.type = type
        self.id = id
        self.attributes = OrderedDict(attributes)
        self.relationships = OrderedDict(relationships)


PrimaryData = typing.Union[None, ResourceRepr, typing.Sequence[ResourceRepr]]


@dataclasses.dataclass(init=False)
class DocumentRepr(NodeRepr):
    """
    A top-level document.  ``data`` holds a single resource, a sequence of
    resources for collection documents, or ``None``.

    ``errors`` are kept exactly as they appear on the wire.
    """

    data: PrimaryData = None
    included: typing.Sequence[ResourceRepr] = ()
    errors: typing.Optional[typing.Sequence[typing.Mapping[str, typing.Any]]] = None
    jsonapi: typing.Optional[typing.Mapping[str, typing.Any]] = None

    @property
    def is_collection(self) -> bool:
        return not (self.data is None or isinstance(self.data, ResourceRepr))

    def __init__(
        self,
        *,
        data: PrimaryData = None,
        included: typing.Iterable[ResourceRepr] = (),
        errors: typing.Optional[typing.Sequence[typing.Mapping[str, typing.Any]]] = None,
        jsonapi: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        links: typing.Optional[LinksValue] = None,
        meta: typing.Optional[MetaValue] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(links=links, meta=meta, _source_=_source_)
        self.data = data
        self.included = tuple(included)
        self.errors = errors
        self.jsonapi = jsonapi
