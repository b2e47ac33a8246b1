"""Free Dictionary API adapter.

Implements LexiconPort for English by fetching entries from the Free
Dictionary API. Part-of-speech membership and definitions are read from
the returned entries; random sampling is not offered by the API.

API Documentation: https://freedictionaryapi.com
"""

import asyncio
import logging
import os
from typing import Any
from urllib.parse import quote

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from domain.model.errors import ProviderCallError, UnsupportedOperationError
from domain.model.lexicon import Category, Sense

logger = logging.getLogger(__name__)

FREE_DICTIONARY_API_BASE_URL = os.getenv(
    'FREE_DICTIONARY_API_BASE_URL', "https://freedictionaryapi.com/api/v1/entries",
)
API_TIMEOUT_SECONDS = 5.0
LANGUAGE_CODE = "en"

# API partOfSpeech → Category (other parts of speech are ignored)
_CATEGORY_BY_POS = {
    "noun": Category.NOUN,
    "adjective": Category.ADJECTIVE,
    "verb": Category.VERB,
    "adverb": Category.ADVERB,
}


class FreeDictionaryAdapter:
    """Lexicon that answers from the Free Dictionary API.

    Entries are fetched at most once per word for the lifetime of the
    adapter, so a ``get`` over four categories costs one request per word.
    """

    def __init__(
        self,
        base_url: str = FREE_DICTIONARY_API_BASE_URL,
        timeout: float = API_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._entries: dict[str, asyncio.Task] = {}

    # ------------------------------------------------------------------
    # Public interface (implements LexiconPort)
    # ------------------------------------------------------------------

    async def filter_words(self, category: Category, words: list[str]) -> list[str]:
        entry_lists = await asyncio.gather(*(self._entries_for(w) for w in words))
        return [
            word for word, entries in zip(words, entry_lists)
            if category in _entry_categories(entries)
        ]

    async def define(self, word: str) -> list[Sense]:
        entries = await self._entries_for(word)
        return _read_senses(word, entries)

    async def random_words(
        self, category: Category | None, starts_with: str, count: int,
    ) -> list[str]:
        raise UnsupportedOperationError("Free Dictionary API", "random word sampling")

    async def fetch(self, word: str) -> list[dict[str, Any]]:
        """Fetch dictionary entries for a word.

        Returns:
            List of entry dicts; empty when the word is unknown (404).

        Raises:
            ProviderCallError: On HTTP, network or payload errors.
        """
        url = f"{self.base_url}/{LANGUAGE_CODE}/{quote(word, safe='')}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await _fetch_with_retry(client, url)

                if response.status_code == 404:
                    logger.debug("Word not found in Free Dictionary API", extra={"word": word})
                    return []

                response.raise_for_status()
                data = response.json()

        except httpx.HTTPStatusError as e:
            logger.warning(
                "Free Dictionary API HTTP error",
                extra={"word": word, "status_code": e.response.status_code},
            )
            raise ProviderCallError(
                f"Free Dictionary API returned {e.response.status_code} for {word!r}"
            ) from e
        except httpx.RequestError as e:
            logger.warning(
                "Free Dictionary API request error",
                extra={"word": word, "error_type": type(e).__name__},
            )
            raise ProviderCallError(f"Free Dictionary API request failed for {word!r}") from e
        except ValueError as e:
            raise ProviderCallError(f"Free Dictionary API sent invalid JSON for {word!r}") from e

        if not isinstance(data, dict):
            logger.warning(
                "Unexpected response type from Free Dictionary API",
                extra={"word": word, "type": type(data).__name__},
            )
            raise ProviderCallError(f"Unexpected Free Dictionary API payload for {word!r}")

        entries = data.get("entries") or []
        logger.debug(
            "Free Dictionary API lookup successful",
            extra={"word": word, "entry_count": len(entries)},
        )
        return entries

    def _entries_for(self, word: str) -> asyncio.Future:
        """Shared fetch task per word; callers that time out leave it running."""
        key = word.lower()
        task = self._entries.get(key)
        if task is None:
            task = asyncio.ensure_future(self.fetch(word))
            self._entries[key] = task
        return asyncio.shield(task)


# ── HTTP helpers ─────────────────────────────────────────────


@retry(
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=4),
    reraise=True,
)
async def _fetch_with_retry(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """Fetch URL with automatic retry on transient failures."""
    return await client.get(url)


# ── Entry parsing ────────────────────────────────────────────


def _entry_categories(entries: list[dict[str, Any]]) -> set[Category]:
    """Categories a word has at least one entry in."""
    categories = set()
    for entry in entries:
        category = _CATEGORY_BY_POS.get((entry.get("partOfSpeech") or "").lower())
        if category is not None:
            categories.add(category)
    return categories


def _read_senses(word: str, entries: list[dict[str, Any]]) -> list[Sense]:
    """Flatten entries into Senses, labelled word:entry.sense."""
    senses = []
    for ei, entry in enumerate(entries):
        category = _CATEGORY_BY_POS.get((entry.get("partOfSpeech") or "").lower())
        if category is None:
            continue
        for si, sense in enumerate(entry.get("senses", [])):
            definition = sense.get("definition")
            if not definition:
                continue
            examples = tuple(
                e if isinstance(e, str) else e.get("text", "")
                for e in sense.get("examples", [])
            )
            senses.append(Sense(
                category=category,
                gloss=definition,
                synonyms=tuple(sense.get("synonyms", [])),
                examples=examples,
                source_id=f"{word}:{ei}.{si}",
            ))
    return senses
