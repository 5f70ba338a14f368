"""
This module contains the interfaces of the collaborators the engines in
:py:mod:`jsonapi_graph.deserializer` and :py:mod:`jsonapi_graph.serializer`
rely on.  Default implementations live in :py:mod:`jsonapi_graph.inflection`
and :py:mod:`jsonapi_graph.registry`.
"""
import abc
import typing

if typing.TYPE_CHECKING:
    from .models import ModelDefinition  # noqa: F401


WarningSink = typing.Callable[[str], None]
"""
A callable that receives non-fatal diagnostic messages.
"""


class Pluralizer(metaclass=abc.ABCMeta):
    """
    A :py:class:`Pluralizer` translates model names into wire type names and back.
    """

    @abc.abstractmethod
    def __call__(self, word: str) -> str:
        """
        Returns the plural form of ``word``.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def singular(self, word: str) -> str:
        """
        Returns the singular form of ``word``.  A word that is already singular
        must be returned as it is.
        """
        ...  # pragma: nocover


class ModelResolver(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def resolve(self, name: str) -> "ModelDefinition":
        """
        Returns the :py:class:`ModelDefinition` registered for a model name.

        :param str name: the singular model name.
        :raises UnknownResourceTypeError: when nothing is registered under the name and
                                          the resolver is not lenient.
        """
        ...  # pragma: nocover
