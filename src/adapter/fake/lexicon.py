"""In-memory implementation of LexiconPort for testing."""

import asyncio
from typing import Any

from domain.model.errors import ProviderCallError
from domain.model.lexicon import Category, Sense


class FakeLexiconAdapter:
    """Fake lexicon that answers from preconfigured tables.

    Calls can be held back with gates (asyncio.Event keyed by call key)
    to control completion order, made to fail, or made to hang forever.
    Call keys are (method, category, target) tuples as recorded in
    ``calls``.
    """

    def __init__(
        self,
        pos: dict[Category, set[str]] | None = None,
        senses: dict[str, list[Sense]] | None = None,
        vocabulary: dict[Category | None, list[str]] | None = None,
    ):
        self.pos = pos or {}
        self.senses = senses or {}
        self.vocabulary = vocabulary or {}
        self.calls: list[tuple[str, Any, Any]] = []
        self.gates: dict[tuple[str, Any, Any], asyncio.Event] = {}
        self.failures: set[tuple[str, Any, Any]] = set()
        self.hanging: set[tuple[str, Any, Any]] = set()

    def gate(self, key: tuple[str, Any, Any]) -> asyncio.Event:
        """Hold the call with ``key`` until the returned event is set."""
        return self.gates.setdefault(key, asyncio.Event())

    async def _settle(self, key: tuple[str, Any, Any]) -> None:
        self.calls.append(key)
        # Always yield once so no call completes synchronously.
        await asyncio.sleep(0)
        if key in self.hanging:
            await asyncio.Event().wait()
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if key in self.failures:
            raise ProviderCallError(f"fake failure for {key}")

    async def filter_words(self, category: Category, words: list[str]) -> list[str]:
        await self._settle(('filter_words', category, tuple(words)))
        members = self.pos.get(category, set())
        return [w for w in words if w in members]

    async def define(self, word: str) -> list[Sense]:
        await self._settle(('define', None, word))
        return list(self.senses.get(word, []))

    async def random_words(
        self, category: Category | None, starts_with: str, count: int,
    ) -> list[str]:
        await self._settle(('random_words', category, starts_with))
        words = [w for w in self.vocabulary.get(category, []) if w.startswith(starts_with)]
        return words[:count]
