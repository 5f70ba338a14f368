import dataclasses
import enum
import re
import typing
from collections import OrderedDict

from .serde.models import ResourceRepr
from .utils import UNSPECIFIED


class Cardinality(enum.Enum):
    HAS_ONE = "hasOne"
    HAS_MANY = "hasMany"


@dataclasses.dataclass(frozen=True)
class ModelMember:
    name: typing.Optional[str] = dataclasses.field(default=None, compare=False)
    parent: typing.Optional["ModelDefinition"] = dataclasses.field(
        default=None, compare=False, repr=False
    )

    T = typing.TypeVar("T", bound="ModelMember")

    def bind(self: T, parent: "ModelDefinition", name: str) -> T:
        """
        Returns a copy of the member that belongs to ``parent`` under ``name``.
        Members are copied as the same instance may be shared by several models.
        """
        return dataclasses.replace(self, name=name, parent=parent)


@dataclasses.dataclass(frozen=True)
class Attr(ModelMember):
    """
    Marks a plain attribute.  ``default`` is informational only; it is never
    filled into deserialized objects.
    """

    default: typing.Any = UNSPECIFIED


@dataclasses.dataclass(frozen=True)
class RelationshipDescriptor(ModelMember):
    """
    Marks a relationship to other resources.

    :param Cardinality cardinality: either ``HAS_ONE`` or ``HAS_MANY``.
    :param Optional[str] type: the wire type of the related resources.
                               ``None`` makes the relationship polymorphic, in which case
                               the types supplied by the counterpart are trusted.
    :param Optional[Mapping[str, Any]] filter: attribute values an included resource must
                                               carry to be considered as a relationship target.
    """

    cardinality: Cardinality = Cardinality.HAS_ONE
    type: typing.Optional[str] = None
    filter: typing.Optional[typing.Mapping[str, typing.Any]] = dataclasses.field(
        default=None, hash=False
    )

    def matches(self, repr_: ResourceRepr) -> bool:
        """
        Tells if the included resource satisfies the descriptor's filter.
        """
        if not self.filter:
            return True
        return all(
            k in repr_.attributes and repr_.attributes[k] == v for k, v in self.filter.items()
        )


def has_one(
    type: typing.Optional[str] = None,
    filter: typing.Optional[typing.Mapping[str, typing.Any]] = None,
) -> RelationshipDescriptor:
    return RelationshipDescriptor(cardinality=Cardinality.HAS_ONE, type=type, filter=filter)


def has_many(
    type: typing.Optional[str] = None,
    filter: typing.Optional[typing.Mapping[str, typing.Any]] = None,
) -> RelationshipDescriptor:
    return RelationshipDescriptor(cardinality=Cardinality.HAS_MANY, type=type, filter=filter)


Member = typing.Union[Attr, RelationshipDescriptor]

CustomSerializer = typing.Callable[[typing.Any], typing.Any]
CustomDeserializer = typing.Callable[[ResourceRepr, typing.Sequence[ResourceRepr]], typing.Any]


@dataclasses.dataclass(frozen=True)
class ModelOptions:
    read_only: typing.FrozenSet[str] = frozenset()
    type: typing.Optional[str] = None
    serializer: typing.Optional[CustomSerializer] = None
    deserializer: typing.Optional[CustomDeserializer] = None


_KEBAB_RE = re.compile(r"-([a-z])")


def kebab_to_camel(name: str) -> str:
    """
    >>> kebab_to_camel("kebab-case-description")
    'kebabCaseDescription'
    """
    return _KEBAB_RE.sub(lambda m: m.group(1).upper(), name)


class ModelDefinition:
    """
    A :py:class:`ModelDefinition` describes how resources of a type map to domain objects.

    :param str name: The name of the model, which is the singular form of the type.
    :param Iterable[Tuple[str, Member]] attributes: The members, in the order they are serialized.
    :param Optional[ModelOptions] options: Per-model options.
    """

    name: str
    """
    The name of the model.
    """
    options: ModelOptions
    _attributes: "OrderedDict[str, Member]"

    @property
    def attributes(self) -> typing.Mapping[str, Member]:
        """
        The mapping of member names to either :py:class:`Attr` or :py:class:`RelationshipDescriptor`.
        """
        return self._attributes

    def lookup(self, name: str) -> typing.Optional[typing.Tuple[str, Member]]:
        """
        Looks up a member by its wire name.  The name is tried as is first,
        then converted from kebab-case to camelCase.

        :param str name: the name found in a document.
        :return: a tuple of the resolved name and the member, or ``None``.
        """
        member = self._attributes.get(name)
        if member is not None:
            return name, member
        camel = kebab_to_camel(name)
        member = self._attributes.get(camel)
        if member is not None:
            return camel, member
        return None

    def is_read_only(self, name: str) -> bool:
        return name in self.options.read_only

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, [{', '.join(self._attributes)}])"

    def __init__(
        self,
        name: str,
        attributes: typing.Iterable[typing.Tuple[str, Member]] = (),
        options: typing.Optional[ModelOptions] = None,
    ) -> None:
        self.name = name
        self.options = options if options is not None else ModelOptions()
        self._attributes = OrderedDict(
            (attr_name, member.bind(self, attr_name)) for attr_name, member in attributes
        )
