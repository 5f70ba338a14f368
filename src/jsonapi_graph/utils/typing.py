import collections.abc
import typing


def is_sequence(value: typing.Any) -> bool:
    """
    Tells if ``value`` is a sequence in the JSON sense, that is, neither a
    string nor a byte string.
    """
    return isinstance(value, collections.abc.Sequence) and not isinstance(
        value, (str, bytes, bytearray)
    )
