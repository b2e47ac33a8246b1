"""Lexicon port: outbound interface for lexical databases."""

from typing import Protocol

from domain.model.lexicon import Category, Sense


class LexiconPort(Protocol):
    """Port for part-of-speech, definition and random-word lookups.

    Implementations wrap a lexical database (WordNet, an HTTP dictionary)
    and return domain types only. Every coroutine settles exactly once:
    it either returns a (possibly empty) result or raises
    ProviderCallError.
    """

    async def filter_words(self, category: Category, words: list[str]) -> list[str]:
        """Return the words from ``words`` that belong to ``category``."""
        ...

    async def define(self, word: str) -> list[Sense]:
        """Return every sense of ``word`` across all categories."""
        ...

    async def random_words(
        self, category: Category | None, starts_with: str, count: int,
    ) -> list[str]:
        """Return up to ``count`` random words, optionally filtered.

        Args:
            category: Restrict sampling to this category, or None for any.
            starts_with: Only sample words with this prefix ('' for any).
            count: Maximum number of words to return.
        """
        ...
