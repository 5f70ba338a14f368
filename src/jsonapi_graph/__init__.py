from .api import JsonApi  # noqa
from .config import Config  # noqa
from .deserializer import DeserializationContext, ResourceGraphDeserializer  # noqa
from .exceptions import (  # noqa
    ConfigurationError,
    DeserializationError,
    InvalidDeclarationError,
    JSONAPIGraphException,
    UnknownResourceTypeError,
)
from .models import Attr, Cardinality, ModelDefinition, RelationshipDescriptor, has_many, has_one  # noqa
from .registry import ModelRegistry  # noqa
from .response import ApiResponse, ResponseAdapter, TransportResponse  # noqa
from .serializer import ResourceSerializer  # noqa
