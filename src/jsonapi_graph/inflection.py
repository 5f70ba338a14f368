import typing

import inflect

from .interfaces import Pluralizer


class InflectPluralizer(Pluralizer):
    """
    English inflection backed by :py:mod:`inflect`.

    :py:meth:`inflect.engine.singular_noun` cannot tell a singular word ending
    in "s" from a plural one, so ``singular("bus")`` would give ``"bu"``.
    Such words can be listed in ``singulars`` to be left alone.

    :param Optional[inflect.engine] engine: the engine to use.
    :param Iterable[str] singulars: words known to be singular already.
    """

    _engine: inflect.engine
    _singulars: typing.FrozenSet[str]

    def __call__(self, word: str) -> str:
        return self._engine.plural(word)

    def singular(self, word: str) -> str:
        if word in self._singulars:
            return word
        # singular_noun() gives False for words that are not plural
        singular = self._engine.singular_noun(word)
        return word if singular is False else singular

    def __init__(
        self, engine: typing.Optional[inflect.engine] = None, singulars: typing.Iterable[str] = ()
    ):
        self._engine = inflect.engine() if engine is None else engine
        self._singulars = frozenset(singulars)


class NoopPluralizer(Pluralizer):
    """
    Leaves names untouched; model names and wire type names are the same.
    """

    def __call__(self, word: str) -> str:
        return word

    def singular(self, word: str) -> str:
        return word


class FuncPluralizer(Pluralizer):
    _plural: typing.Callable[[str], str]
    _singular: typing.Callable[[str], str]

    def __call__(self, word: str) -> str:
        return self._plural(word)

    def singular(self, word: str) -> str:
        return self._singular(word)

    def __init__(self, plural: typing.Callable[[str], str], singular: typing.Callable[[str], str]):
        self._plural = plural
        self._singular = singular


def build_pluralizer(option: typing.Union[bool, Pluralizer]) -> Pluralizer:
    """
    Builds a :py:class:`Pluralizer` out of the ``pluralize`` configuration option.

    :param Union[bool, Pluralizer] option: ``True`` for English inflection,
                                          ``False`` for no inflection at all,
                                          or a :py:class:`Pluralizer` to use as is.
    """
    if isinstance(option, Pluralizer):
        return option
    elif option:
        return InflectPluralizer()
    else:
        return NoopPluralizer()
