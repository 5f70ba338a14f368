import abc
import typing

from .serde.exceptions import DeserializationError  # noqa: F401
from .serde.models import Source


class JSONAPIGraphException(Exception, metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self):
        return self.message


class InvalidDeclarationError(JSONAPIGraphException):
    _message: str

    @property
    def message(self) -> str:
        return self._message

    def __init__(self, message: str):
        super().__init__(message)
        self._message = message


class UnknownResourceTypeError(JSONAPIGraphException):
    name: str
    _source: typing.Optional[Source]

    @property
    def sources(self) -> typing.Sequence[Source]:
        if self._source is None:
            return []
        else:
            return [self._source]

    @property
    def message(self) -> str:
        return f'no resource known as "{self.name}"'

    def __init__(self, name: str, source: typing.Optional[Source] = None):
        super().__init__(name)
        self.name = name
        self._source = source


class ConfigurationError(JSONAPIGraphException):
    name: str
    value: typing.Any

    @property
    def message(self) -> str:
        return f"invalid value for configuration option {self.name}: {self.value!r}"

    def __init__(self, name: str, value: typing.Any):
        super().__init__(name, value)
        self.name = name
        self.value = value
