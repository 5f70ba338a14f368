"""
:py:mod:`jsonapi_graph.serde.renderer` turns :py:class:`ResourceRepr` objects
back into JSON-compatible structures.

.. code-block:: python

   import json

   from jsonapi_graph.serde.models import LinkageRepr, ResourceIdRepr, ResourceRepr
   from jsonapi_graph.serde.renderer import ReprRenderer

   resource = ResourceRepr(
       type="products",
       id="1",
       attributes=[("title", "Lamp")],
       relationships=[
           ("tags", LinkageRepr(data=[ResourceIdRepr(type="tags", id="5")])),
       ],
   )
   print(json.dumps(ReprRenderer()(resource)))

Attribute values that have no JSON counterpart are converted: timezone-aware
``datetime`` to ISO 8601 in UTC, ``date`` to ISO 8601, ``Decimal`` to a string
(or a float), and ``bytes`` to base64.  Other scalars are passed through as
they are, leaving their encoding to the JSON encoder in use.
"""

import base64
import collections.abc
import datetime
import decimal
import typing
from collections import OrderedDict

from .models import LinkageRepr, ResourceIdRepr, ResourceRepr
from .types import JSONScalar, JSONValue, MutableJSONObject
from .utils import JSONPointer


class TZLocalizer(typing.Protocol):
    def localize(self, dt: datetime.datetime) -> datetime.datetime:
        ...  # pragma: nocover


ScalarRenderer = typing.Callable[["ReprRenderer", JSONPointer, typing.Any], JSONScalar]


class ReprRenderer:
    """
    :param bool render_decimal_as_str: render ``Decimal`` as a string rather than a float.
    :param Optional[tzinfo] assume_naive_timezone_as: the zone naive datetimes are taken to be in.
                                                      Naive datetimes are rejected when omitted.
    """

    _render_decimal_as_str: bool
    _assume_naive_timezone_as: typing.Optional[datetime.tzinfo]

    def _mapping(self, items: typing.Iterable[typing.Tuple[str, typing.Any]]):
        return OrderedDict(items)

    def _datetime(self, path: JSONPointer, value: datetime.datetime) -> JSONScalar:
        if value.tzinfo is None:
            tz = self._assume_naive_timezone_as
            if tz is None:
                raise ValueError(f"{path}: naive datetime {value}")
            if hasattr(tz, "localize"):
                value = typing.cast(TZLocalizer, tz).localize(value)
            else:
                value = value.replace(tzinfo=tz)
        return value.astimezone(datetime.timezone.utc).isoformat()

    def _date(self, path: JSONPointer, value: datetime.date) -> JSONScalar:
        return value.isoformat()

    def _decimal(self, path: JSONPointer, value: decimal.Decimal) -> JSONScalar:
        if self._render_decimal_as_str:
            return str(value)
        return float(value)

    def _bytes(self, path: JSONPointer, value: bytes) -> JSONScalar:
        return base64.b64encode(value).decode("ascii")

    # datetime precedes date as it is a subclass of it
    _scalar_renderers: typing.ClassVar[typing.Sequence[typing.Tuple[type, ScalarRenderer]]] = (
        (datetime.datetime, _datetime),
        (datetime.date, _date),
        (decimal.Decimal, _decimal),
        (bytes, _bytes),
    )

    def _render_scalar(self, path: JSONPointer, value: typing.Any) -> JSONScalar:
        for type_, renderer in self._scalar_renderers:
            if isinstance(value, type_):
                return renderer(self, path, value)
        return value

    def _render_value(self, path: JSONPointer, value: typing.Any) -> JSONValue:
        if isinstance(value, collections.abc.Mapping):
            return self._mapping(
                (str(k), self._render_value(path / str(k), v)) for k, v in value.items()
            )
        elif isinstance(value, (str, bytes)):
            return self._render_scalar(path, value)
        elif isinstance(value, (collections.abc.Sequence, collections.abc.Set)):
            return [self._render_value(path[i], v) for i, v in enumerate(value)]
        return self._render_scalar(path, value)

    def _render_identifier(self, repr_: ResourceIdRepr) -> MutableJSONObject:
        retval: MutableJSONObject = {"type": repr_.type, "id": repr_.id}
        if repr_.meta:
            retval["meta"] = repr_.meta
        return retval

    def _render_linkage(self, repr_: LinkageRepr) -> MutableJSONObject:
        retval: MutableJSONObject = {}
        if repr_.links:
            retval["links"] = repr_.links
        data = repr_.data
        if data is None or isinstance(data, ResourceIdRepr):
            retval["data"] = None if data is None else self._render_identifier(data)
        else:
            retval["data"] = [self._render_identifier(id_repr) for id_repr in data]
        if repr_.meta:
            retval["meta"] = repr_.meta
        return retval

    def _render_resource(self, path: JSONPointer, repr_: ResourceRepr) -> MutableJSONObject:
        retval: MutableJSONObject = {"type": repr_.type}
        if repr_.id is not None:
            retval["id"] = repr_.id
        if repr_.attributes:
            retval["attributes"] = self._mapping(
                (name, self._render_value(path / "attributes" / name, value))
                for name, value in repr_.attributes.items()
            )
        if repr_.relationships:
            retval["relationships"] = self._mapping(
                (name, self._render_linkage(linkage))
                for name, linkage in repr_.relationships.items()
            )
        if repr_.meta:
            retval["meta"] = repr_.meta
        if repr_.links:
            retval["links"] = repr_.links
        return retval

    def __call__(
        self, repr_: ResourceRepr, path: typing.Optional[JSONPointer] = None
    ) -> MutableJSONObject:
        """
        Renders a resource.  ``path`` is where it is going to be placed in the
        document, ``/data`` by default; it only shows up in error messages.
        """
        return self._render_resource(JSONPointer("/data") if path is None else path, repr_)

    def __init__(
        self,
        render_decimal_as_str: bool = True,
        assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None,
    ):
        self._render_decimal_as_str = render_decimal_as_str
        self._assume_naive_timezone_as = assume_naive_timezone_as
