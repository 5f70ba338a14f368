"""
:py:mod:`jsonapi_graph.api` ties the model registry, both engines and the
response adapter together.

Synopsis
--------

.. code-block:: python

   from jsonapi_graph import JsonApi, has_many, has_one

   api = JsonApi()
   api.define("product", {"title": "", "tags": has_many("tags")})
   api.define("tag", {"name": ""})

   body = api.request_body("product", {"title": "Lamp", "tags": [{"id": "1"}]})
   product = api.response(200, document).data
"""

import logging
import typing

from .config import Config
from .deserializer import ResourceGraphDeserializer
from .inflection import build_pluralizer
from .interfaces import Pluralizer, WarningSink
from .log import init_logging, warning_sink
from .models import CustomDeserializer, CustomSerializer, ModelDefinition
from .registry import ModelRegistry
from .response import ApiResponse, ResponseAdapter, TransportResponse
from .serializer import ResourceSerializer

logger = logging.getLogger(__name__)


class JsonApi:
    """
    :param Optional[Config] config: the settings; the defaults of :py:class:`Config` when omitted.
    :param overrides: individual settings that take precedence over ``config``.
    """

    config: Config
    registry: ModelRegistry
    pluralize: Pluralizer
    warn: WarningSink
    serialize: ResourceSerializer
    deserialize: ResourceGraphDeserializer
    handle_response: ResponseAdapter

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
        return self.registry.define(
            name,
            attributes,
            read_only=read_only,
            type=type,
            serializer=serializer,
            deserializer=deserializer,
        )

    C = typing.TypeVar("C", bound=type)

    def register(self, class_: C) -> C:
        return self.registry.register(class_)

    def model_for(self, name: str) -> ModelDefinition:
        return self.registry.resolve(name)

    def request_body(
        self,
        type_name: typing.Optional[str],
        payload: typing.Any,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> typing.Dict[str, typing.Any]:
        """
        Builds the document to send for a create or update request.
        A sequence payload is serialized as a collection.
        """
        if isinstance(payload, (list, tuple)):
            data = self.serialize.collection(type_name, payload)
        else:
            data = self.serialize.resource(type_name, payload)
        body: typing.Dict[str, typing.Any] = {"data": data}
        if meta:
            body["meta"] = dict(meta)
        return body

    def response(
        self,
        status: int,
        body: typing.Optional[typing.Mapping[str, typing.Any]],
        method: str = "GET",
    ) -> ApiResponse:
        """
        Shorthand for ``handle_response(TransportResponse(status, body, method))``.
        """
        return self.handle_response(TransportResponse(status=status, body=body, method=method))

    def __init__(self, config: typing.Optional[Config] = None, **overrides: typing.Any):
        config = Config() if config is None else config
        if overrides:
            config = config.replace(**overrides)
        self.config = config
        if config.logger:
            init_logging(config.loglevel)
        self.registry = ModelRegistry(
            disable_errors_for_missing_resource_definitions=(
                config.disable_errors_for_missing_resource_definitions
            )
        )
        self.pluralize = build_pluralizer(config.pluralize)
        self.warn = warning_sink(config.logger)
        self.serialize = ResourceSerializer(self.registry, self.pluralize)
        self.deserialize = ResourceGraphDeserializer(self.registry, self.pluralize, warn=self.warn)
        self.handle_response = ResponseAdapter(self.deserialize)
        logger.debug("initialized with %r", config)
