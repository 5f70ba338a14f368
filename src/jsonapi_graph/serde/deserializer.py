import collections.abc
import json
import typing

from .exceptions import DeserializationError, JsonicDataValidationError
from .models import (
    DocumentRepr,
    LinkageData,
    LinkageRepr,
    LinksValue,
    PrimaryData,
    ResourceIdRepr,
    ResourceRepr,
)
from .types import JSONObject, JSONValue
from .utils import JSONPointer


class ErrorCollectingContext:
    errors: typing.List[JsonicDataValidationError]

    def validation_error_occurred(self, error: JsonicDataValidationError) -> None:
        self.errors.append(error)

    def __init__(self):
        self.errors = []


def _type_repr(value: JSONValue) -> str:
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif isinstance(value, (int, float)):
        return "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, collections.abc.Mapping):
        return "object"
    else:
        return "array"


def _dump(value: JSONValue) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


class ReprDeserializer:
    """
    Turns a parsed JSON:API document (or parts of it) into the typed
    representation of :py:mod:`jsonapi_graph.serde.models`.

    Structural problems are collected over the whole input and reported at once
    through a :py:class:`DeserializationError`.  Nothing is validated against
    resource declarations here; that is up to the layers above.
    """

    def _expect_object(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue, what: str
    ) -> bool:
        if isinstance(value, collections.abc.Mapping):
            return True
        ctx.validation_error_occurred(
            JsonicDataValidationError(
                pointer,
                f"value has type {_type_repr(value)} ({_dump(value)}) where {what} expected",
            )
        )
        return False

    def _convert_id(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[str]:
        if isinstance(value, str):
            return value
        # numeric identifiers are common enough in the wild to be accepted
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        ctx.validation_error_occurred(
            JsonicDataValidationError(pointer, f"value must be a string, got {_dump(value)}")
        )
        return None

    def _convert_type(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONObject
    ) -> typing.Optional[str]:
        if "type" not in value:
            ctx.validation_error_occurred(
                JsonicDataValidationError(pointer / "type", 'value must have a property "type"')
            )
            return None
        type_ = value["type"]
        if not isinstance(type_, str) or not type_:
            ctx.validation_error_occurred(
                JsonicDataValidationError(
                    pointer / "type", f"value must be a non-empty string, got {_dump(type_)}"
                )
            )
            return None
        return type_

    def _convert_meta(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONObject
    ) -> typing.Optional[typing.Dict[str, typing.Any]]:
        meta = value.get("meta")
        if meta is None:
            return None
        if not self._expect_object(ctx, pointer / "meta", meta, "object"):
            return None
        return dict(meta)

    def _convert_links(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONObject
    ) -> typing.Optional[LinksValue]:
        links = value.get("links")
        if links is None:
            return None
        if not self._expect_object(ctx, pointer / "links", links, "object"):
            return None
        return links

    def _convert_resource_id(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[ResourceIdRepr]:
        if not self._expect_object(ctx, pointer, value, "resource identifier"):
            return None
        value = typing.cast(JSONObject, value)
        type_ = self._convert_type(ctx, pointer, value)
        id_: typing.Optional[str] = None
        if "id" not in value:
            ctx.validation_error_occurred(
                JsonicDataValidationError(pointer / "id", 'value must have a property "id"')
            )
        else:
            id_ = self._convert_id(ctx, pointer / "id", value["id"])
        meta = self._convert_meta(ctx, pointer, value)
        if type_ is None or id_ is None:
            return None
        return ResourceIdRepr(type=type_, id=id_, meta=meta, _source_=pointer)

    def _convert_linkage(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[LinkageRepr]:
        if not self._expect_object(ctx, pointer, value, "relationship"):
            return None
        value = typing.cast(JSONObject, value)
        data: LinkageData = None
        data_ = value.get("data")
        if isinstance(data_, collections.abc.Sequence) and not isinstance(data_, str):
            identifiers = []
            for i, v in enumerate(data_):
                id_repr = self._convert_resource_id(ctx, (pointer / "data")[i], v)
                if id_repr is not None:
                    identifiers.append(id_repr)
            data = tuple(identifiers)
        elif data_ is not None:
            data = self._convert_resource_id(ctx, pointer / "data", data_)
        return LinkageRepr(
            data=data,
            links=self._convert_links(ctx, pointer, value),
            meta=self._convert_meta(ctx, pointer, value),
            _source_=pointer,
        )

    def _convert_resource(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[ResourceRepr]:
        if not self._expect_object(ctx, pointer, value, "resource"):
            return None
        value = typing.cast(JSONObject, value)
        type_ = self._convert_type(ctx, pointer, value)

        id_: typing.Optional[str] = None
        if value.get("id") is not None:
            id_ = self._convert_id(ctx, pointer / "id", value["id"])

        attributes: typing.Sequence[typing.Tuple[str, typing.Any]] = ()
        attributes_ = value.get("attributes")
        if attributes_ is not None and self._expect_object(
            ctx, pointer / "attributes", attributes_, "object"
        ):
            attributes = tuple(attributes_.items())

        relationships: typing.List[typing.Tuple[str, LinkageRepr]] = []
        relationships_ = value.get("relationships")
        if relationships_ is not None and self._expect_object(
            ctx, pointer / "relationships", relationships_, "object"
        ):
            for k, v in relationships_.items():
                linkage = self._convert_linkage(ctx, pointer / "relationships" / k, v)
                if linkage is not None:
                    relationships.append((k, linkage))

        meta = self._convert_meta(ctx, pointer, value)
        links = self._convert_links(ctx, pointer, value)
        if type_ is None:
            return None
        return ResourceRepr(
            type=type_,
            id=id_,
            attributes=attributes,
            relationships=relationships,
            links=links,
            meta=meta,
            _source_=pointer,
        )

    def _convert_resources(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Sequence[ResourceRepr]:
        if not isinstance(value, collections.abc.Sequence) or isinstance(value, str):
            ctx.validation_error_occurred(
                JsonicDataValidationError(
                    pointer, f"value has type {_type_repr(value)} where array expected"
                )
            )
            return ()
        resources = []
        for i, v in enumerate(value):
            resource = self._convert_resource(ctx, pointer[i], v)
            if resource is not None:
                resources.append(resource)
        return tuple(resources)

    def resource(
        self, value: JSONValue, pointer: typing.Optional[JSONPointer] = None
    ) -> ResourceRepr:
        """
        Converts a single resource object.

        :param JSONValue value: the resource object.
        :param Optional[JSONPointer] pointer: where the resource was found; ``/data`` by default.
        :return: the :py:class:`ResourceRepr`.
        """
        ctx = ErrorCollectingContext()
        retval = self._convert_resource(
            ctx, JSONPointer("/data") if pointer is None else pointer, value
        )
        if ctx.errors:
            raise DeserializationError(value, ctx.errors)
        return typing.cast(ResourceRepr, retval)

    def resources(
        self, value: JSONValue, pointer: typing.Optional[JSONPointer] = None
    ) -> typing.Sequence[ResourceRepr]:
        """
        Converts an array of resource objects, such as ``included``.
        """
        ctx = ErrorCollectingContext()
        retval = self._convert_resources(
            ctx, JSONPointer("/included") if pointer is None else pointer, value
        )
        if ctx.errors:
            raise DeserializationError(value, ctx.errors)
        return retval

    def __call__(self, document: JSONValue) -> DocumentRepr:
        """
        Converts a whole document.  A document must carry at least one of
        ``data``, ``errors`` and ``meta``; ``"data": null`` counts as present.
        """
        ctx = ErrorCollectingContext()
        root = JSONPointer()
        if not self._expect_object(ctx, root, document, "document"):
            raise DeserializationError(document, ctx.errors)
        document = typing.cast(JSONObject, document)

        if all(document.get(k) is None for k in ("errors", "meta")) and "data" not in document:
            ctx.validation_error_occurred(
                JsonicDataValidationError(root, "either data, errors, or meta must be specified")
            )

        data: PrimaryData = None
        data_ = document.get("data")
        if isinstance(data_, collections.abc.Sequence) and not isinstance(data_, str):
            data = self._convert_resources(ctx, root / "data", data_)
        elif data_ is not None:
            data = self._convert_resource(ctx, root / "data", data_)

        included: typing.Sequence[ResourceRepr] = ()
        if document.get("included") is not None:
            included = self._convert_resources(ctx, root / "included", document["included"])

        links = self._convert_links(ctx, root, document)
        meta = self._convert_meta(ctx, root, document)
        if ctx.errors:
            raise DeserializationError(document, ctx.errors)
        return DocumentRepr(
            data=data,
            included=included,
            errors=document.get("errors"),
            jsonapi=document.get("jsonapi"),
            links=links,
            meta=meta,
            _source_=root,
        )
