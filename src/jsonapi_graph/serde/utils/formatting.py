import typing


def english_enumerate(
    items: typing.Iterable[str], conj: str = ", and ", quote: typing.Optional[str] = None
) -> str:
    """
    Joins ``items`` the way an English sentence enumerates things::

        >>> english_enumerate(["a", "b", "c"])
        'a, b, and c'
        >>> english_enumerate(["a", "b"], conj=" or ", quote='"')
        '"a" or "b"'
    """
    buf = [x if quote is None else f"{quote}{x}{quote}" for x in items]
    if len(buf) < 2:
        return "".join(buf)
    if len(buf) == 2 and conj.startswith(", "):
        conj = conj[1:]
    return ", ".join(buf[:-1]) + conj + buf[-1]
