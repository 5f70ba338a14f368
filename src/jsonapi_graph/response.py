import collections.abc
import dataclasses
import logging
import typing

from .deserializer import ResourceGraphDeserializer
from .serde.deserializer import ReprDeserializer
from .serde.models import ResourceRepr

logger = logging.getLogger(__name__)

DESERIALIZABLE_METHODS = frozenset(["GET", "PATCH", "POST", "DELETE"])


@dataclasses.dataclass
class TransportResponse:
    """
    What the transport hands over after a request completes.

    :param int status: the HTTP status code.
    :param Optional[Mapping[str, Any]] body: the parsed JSON body, if any.
    :param str method: the HTTP method of the request.
    """

    status: int
    body: typing.Optional[typing.Mapping[str, typing.Any]]
    method: str


@dataclasses.dataclass
class ApiResponse:
    data: typing.Any = None
    errors: typing.Any = None
    meta: typing.Any = None
    links: typing.Any = None
    document: typing.Optional[typing.Mapping[str, typing.Any]] = None


class ResponseAdapter:
    """
    Wraps a transport response into an :py:class:`ApiResponse`, deserializing
    the primary data for requests that carry a representation back.
    """

    _deserializer: ResourceGraphDeserializer
    _parser: ReprDeserializer

    def needs_deserialization(self, response: TransportResponse) -> bool:
        return (
            response.status != 204
            and response.method.upper() in DESERIALIZABLE_METHODS
            and response.body is not None
        )

    def _deserialize(self, body: typing.Mapping[str, typing.Any]) -> typing.Any:
        if body.get("data") is None:
            return None
        doc = self._parser(body)
        ctx = self._deserializer.create_context()
        try:
            if doc.is_collection:
                return self._deserializer.collection(
                    typing.cast(typing.Sequence[ResourceRepr], doc.data),
                    doc.included,
                    context=ctx,
                )
            else:
                primary = typing.cast(ResourceRepr, doc.data)
                data = self._deserializer.resource(primary, doc.included, context=ctx)
                if isinstance(data, collections.abc.MutableMapping):
                    if primary.meta:
                        data["meta"] = primary.meta
                    if primary.links:
                        data["links"] = primary.links
                return data
        finally:
            logger.debug("discarding %d cached object(s)", len(ctx.cache))
            ctx.clear()

    def __call__(self, response: TransportResponse) -> ApiResponse:
        body = response.body
        if body is None:
            return ApiResponse()
        data = None
        if self.needs_deserialization(response):
            data = self._deserialize(body)
        return ApiResponse(
            data=data,
            errors=body.get("errors"),
            meta=body.get("meta"),
            links=body.get("links"),
            document=body,
        )

    def __init__(
        self,
        deserializer: ResourceGraphDeserializer,
        parser: typing.Optional[ReprDeserializer] = None,
    ):
        self._deserializer = deserializer
        self._parser = ReprDeserializer() if parser is None else parser
