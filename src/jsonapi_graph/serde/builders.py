"""
Mutable builders that assemble :py:class:`ResourceRepr` objects piece by piece.

.. code-block:: python

   b = ResourceReprBuilder()
   b.set_type("products")
   b.add_attribute("title", "Lamp")
   brand = b.next_to_one_relationship("brand").set()
   brand.set_type("brands")
   brand.set_id("7")
   resource = b()
"""

import abc
import typing
from collections import OrderedDict

from .models import (
    AttributeValue,
    LinkageRepr,
    LinksValue,
    Repr,
    ResourceIdRepr,
    ResourceRepr,
)


class ReprBuilder(metaclass=abc.ABCMeta):
    parent: typing.Optional["ReprBuilder"]
    meta: typing.Dict[str, typing.Any]

    @abc.abstractmethod
    def __call__(self) -> Repr:
        ...  # pragma: nocover

    def __init__(self, parent: typing.Optional["ReprBuilder"] = None):
        self.parent = parent
        self.meta = {}


class ResourceIdReprBuilder(ReprBuilder):
    type: typing.Optional[str] = None
    id: typing.Optional[str] = None

    def set_type(self, type: str) -> None:
        self.type = type

    def set_id(self, id: typing.Optional[str]) -> None:
        self.id = id

    def __call__(self) -> ResourceIdRepr:
        # polymorphic relationships may leave the type to the counterpart
        return ResourceIdRepr(
            type=typing.cast(str, self.type),
            id=typing.cast(str, self.id),
            meta=self.meta,
        )


class RelationshipReprBuilder(ReprBuilder):
    links: typing.Optional[LinksValue]

    @abc.abstractmethod
    def _data(self) -> typing.Any:
        ...  # pragma: nocover

    def __call__(self) -> LinkageRepr:
        return LinkageRepr(data=self._data(), links=self.links, meta=self.meta)

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)
        self.links = None


class ToOneRelReprBuilder(RelationshipReprBuilder):
    """
    Builds a to-one relationship, which is ``null`` until :py:meth:`set` is called.
    """

    target: typing.Optional[ResourceIdReprBuilder] = None

    def set(self) -> ResourceIdReprBuilder:
        self.target = ResourceIdReprBuilder(self)
        return self.target

    def nullify(self) -> None:
        self.target = None

    def _data(self) -> typing.Optional[ResourceIdRepr]:
        return None if self.target is None else self.target()


class ToManyRelReprBuilder(RelationshipReprBuilder):
    """
    Builds a to-many relationship; it renders as an empty array until
    :py:meth:`next` is called.
    """

    targets: typing.List[ResourceIdReprBuilder]

    def next(self) -> ResourceIdReprBuilder:
        builder = ResourceIdReprBuilder(self)
        self.targets.append(builder)
        return builder

    def _data(self) -> typing.Sequence[ResourceIdRepr]:
        return tuple(builder() for builder in self.targets)

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)
        self.targets = []


R = typing.TypeVar("R", bound=RelationshipReprBuilder)


class ResourceReprBuilder(ReprBuilder):
    type: typing.Optional[str] = None
    id: typing.Optional[str] = None
    links: typing.Optional[LinksValue]
    attributes: "OrderedDict[str, AttributeValue]"
    relationships: "OrderedDict[str, RelationshipReprBuilder]"

    def set_type(self, type: str) -> None:
        self.type = type

    def set_id(self, id: typing.Optional[str]) -> None:
        self.id = id

    def add_attribute(self, name: str, value: AttributeValue) -> None:
        self.attributes[name] = value

    def _relationship(self, name: str, class_: typing.Type[R]) -> R:
        builder = self.relationships.get(name)
        if builder is None:
            builder = self.relationships[name] = class_(self)
        elif not isinstance(builder, class_):
            raise TypeError(f'relationship "{name}" was started with a different cardinality')
        return typing.cast(R, builder)

    def next_to_one_relationship(self, name: str) -> ToOneRelReprBuilder:
        return self._relationship(name, ToOneRelReprBuilder)

    def next_to_many_relationship(self, name: str) -> ToManyRelReprBuilder:
        return self._relationship(name, ToManyRelReprBuilder)

    def __call__(self) -> ResourceRepr:
        assert self.type is not None
        return ResourceRepr(
            type=self.type,
            id=self.id,
            attributes=self.attributes.items(),
            relationships=((name, builder()) for name, builder in self.relationships.items()),
            links=self.links,
            meta=self.meta,
        )

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)
        self.links = None
        self.attributes = OrderedDict()
        self.relationships = OrderedDict()
