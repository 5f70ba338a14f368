import typing


def _escape(component: str) -> str:
    return component.replace("~", "~0").replace("/", "~1")


def _unescape(component: str) -> str:
    return component.replace("~1", "/").replace("~0", "~")


class JSONPointer:
    """
    An immutable `JSON Pointer <https://tools.ietf.org/html/rfc6901>`_.

    Pointers are built up with the ``/`` operator for object members and
    subscription for array elements::

        >>> JSONPointer() / "data" / "attributes"
        JSONPointer('/data/attributes')
        >>> (JSONPointer() / "included")[2]
        JSONPointer('/included/2')
    """

    components: typing.Tuple[str, ...]

    @classmethod
    def _make(cls, components: typing.Iterable[str]) -> "JSONPointer":
        pointer = object.__new__(cls)
        pointer.components = tuple(components)
        return pointer

    @classmethod
    def from_string(cls, value: str) -> "JSONPointer":
        if value in ("", "/"):
            return cls._make(())
        if not value.startswith("/"):
            raise ValueError(f"invalid JSON pointer: {value!r}")
        return cls._make(_unescape(c) for c in value[1:].split("/"))

    def __truediv__(self, component: str) -> "JSONPointer":
        return self._make(self.components + (component,))

    def __getitem__(self, index: int) -> "JSONPointer":
        return self._make(self.components + (str(index),))

    def __eq__(self, other: typing.Any) -> bool:
        if isinstance(other, str):
            return str(self) == other
        if not isinstance(other, JSONPointer):
            return NotImplemented
        return self.components == other.components

    def __hash__(self) -> int:
        return hash(self.components)

    def __str__(self) -> str:
        if not self.components:
            return "/"
        return "".join("/" + _escape(c) for c in self.components)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    def __init__(self, path: str = "/"):
        self.components = JSONPointer.from_string(path).components
