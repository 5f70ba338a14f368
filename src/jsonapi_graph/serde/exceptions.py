import typing

from .types import JSONValue
from .utils import JSONPointer, english_enumerate


class JSONAPISerdeError(Exception):
    pass


class JsonicDataValidationError(JSONAPISerdeError):
    pointer: JSONPointer
    message: str

    def __str__(self):
        return f"{self.pointer}: {self.message}"

    def __eq__(self, other: typing.Any) -> bool:
        if not isinstance(other, JsonicDataValidationError):
            return NotImplemented
        return self.pointer == other.pointer and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.pointer, self.message))

    def __init__(self, pointer: JSONPointer, message: str):
        super().__init__(pointer, message)
        self.pointer = pointer
        self.message = message


class DeserializationErrorItem(typing.Protocol):
    pointer: JSONPointer
    message: str


class DeserializationError(JSONAPISerdeError):
    payload: JSONValue
    errors: typing.Sequence[DeserializationErrorItem]

    def __str__(self):
        return "malformed document: " + english_enumerate(
            f"{e.message} ({e.pointer})" for e in self.errors
        )

    def __init__(self, payload: JSONValue, errors: typing.Sequence[DeserializationErrorItem]):
        super().__init__(payload, errors)
        self.payload = payload
        self.errors = errors
