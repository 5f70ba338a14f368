import dataclasses
import logging
import os
import typing

from .exceptions import ConfigurationError
from .interfaces import Pluralizer

_TRUTHY = frozenset(["1", "true", "yes", "on"])
_FALSY = frozenset(["0", "false", "no", "off", ""])


def _parse_bool(name: str, value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUTHY:
        return True
    elif v in _FALSY:
        return False
    raise ConfigurationError(name, value)


def _parse_loglevel(name: str, value: str) -> int:
    v = value.strip()
    if v.isdigit():
        return int(v)
    level = logging.getLevelName(v.upper())
    if not isinstance(level, int):
        raise ConfigurationError(name, value)
    return level


@dataclasses.dataclass(frozen=True)
class Config:
    """
    Settings for :py:class:`jsonapi_graph.api.JsonApi`.

    :param bool logger: report non-fatal problems (unknown attributes and the like) to
                        the ``jsonapi_graph`` logger.  When ``False`` they are discarded.
    :param int loglevel: the level the package logger is initialized with.
    :param Union[bool, Pluralizer] pluralize: ``True`` to derive wire type names by English
                                              inflection, ``False`` to use model names as is,
                                              or a custom :py:class:`Pluralizer`.
    :param bool disable_errors_for_missing_resource_definitions: resolve unknown types to
                                                                 an empty model instead of raising.
    """

    logger: bool = True
    loglevel: int = logging.WARNING
    pluralize: typing.Union[bool, Pluralizer] = True
    disable_errors_for_missing_resource_definitions: bool = False

    def replace(self, **kwargs: typing.Any) -> "Config":
        return dataclasses.replace(self, **kwargs)

    @classmethod
    def from_environ(
        cls,
        environ: typing.Optional[typing.Mapping[str, str]] = None,
        prefix: str = "JSONAPI_GRAPH_",
    ) -> "Config":
        """
        Builds a configuration out of environment variables, e.g.
        ``JSONAPI_GRAPH_PLURALIZE=false`` or ``JSONAPI_GRAPH_LOGLEVEL=debug``.
        Variables that are not set keep their defaults.
        """
        if environ is None:
            environ = os.environ
        kwargs: typing.Dict[str, typing.Any] = {}
        for field in dataclasses.fields(cls):
            key = prefix + field.name.upper()
            if key not in environ:
                continue
            if field.name == "loglevel":
                kwargs[field.name] = _parse_loglevel(key, environ[key])
            else:
                kwargs[field.name] = _parse_bool(key, environ[key])
        return cls(**kwargs)
