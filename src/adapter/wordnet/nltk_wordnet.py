"""WordNet lexicon adapter: part-of-speech, gloss and random-word lookups.

Implements LexiconPort on top of the NLTK WordNet corpus reader. All
NLTK types (Synset, Lemma) stay inside this adapter; only domain types
cross the boundary.
"""

import asyncio
import logging
import os
import random
import threading
from bisect import bisect_left, bisect_right
from typing import Any

from domain.model.errors import LexiconUnavailableError
from domain.model.lexicon import Category, Sense

logger = logging.getLogger(__name__)

# Allow fetching the corpus with nltk.download() on first use
WORDNET_AUTO_DOWNLOAD = os.getenv('WORDNET_AUTO_DOWNLOAD', '1').lower() not in ('0', 'false', 'no')

# Category → WordNet pos letter (satellite adjectives live in the 'a' index)
_WORDNET_POS = {
    Category.NOUN: 'n',
    Category.ADJECTIVE: 'a',
    Category.VERB: 'v',
    Category.ADVERB: 'r',
}

# WordNet synset pos letter → Category
_CATEGORY_BY_POS = {
    'n': Category.NOUN,
    'a': Category.ADJECTIVE,
    's': Category.ADJECTIVE,
    'v': Category.VERB,
    'r': Category.ADVERB,
}

# Upper bound for prefix range scans in the sorted lemma index
_PREFIX_END = '\U0010ffff'


def _wordnet_reader() -> Any:
    from nltk.corpus import wordnet as wn
    return wn


def _load_wordnet(auto_download: bool) -> Any:
    """Load the WordNet corpus reader, downloading the corpus if allowed."""
    wn = _wordnet_reader()

    try:
        wn.ensure_loaded()
        return wn
    except LookupError:
        if not auto_download:
            raise LexiconUnavailableError(
                "WordNet corpus not installed (run: python -m nltk.downloader wordnet)"
            )

    import nltk

    logger.info("WordNet corpus missing, downloading")
    if not nltk.download('wordnet', quiet=True):
        raise LexiconUnavailableError("WordNet corpus download failed")
    try:
        wn.ensure_loaded()
    except LookupError as e:
        raise LexiconUnavailableError(f"WordNet corpus unavailable: {e}") from e
    return wn


def _normalize(word: str) -> str:
    """WordNet index form: lowercase, spaces as underscores."""
    return word.strip().lower().replace(' ', '_')


class WordNetAdapter:
    """Lexicon backed by NLTK's WordNet corpus.

    The corpus and the sorted lemma indexes are loaded lazily, once,
    under a lock. Corpus reads are blocking, so every public coroutine
    offloads its work with asyncio.to_thread.
    """

    def __init__(
        self,
        *,
        auto_download: bool = WORDNET_AUTO_DOWNLOAD,
        rng: random.Random | None = None,
        wordnet: Any = None,
    ):
        self.auto_download = auto_download
        self._wordnet = wordnet
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        # Synset reads share one seek/readline file handle per pos in the corpus reader
        self._read_lock = threading.Lock()
        # pos letter ('' for all) → sorted lemma names
        self._lemma_index: dict[str, list[str]] = {}

    def preload(self) -> None:
        """Eagerly load the corpus (otherwise loaded on first lookup)."""
        self._ensure_wordnet()

    # ------------------------------------------------------------------
    # Public interface (implements LexiconPort)
    # ------------------------------------------------------------------

    async def filter_words(self, category: Category, words: list[str]) -> list[str]:
        return await asyncio.to_thread(self._filter_words, category, list(words))

    async def define(self, word: str) -> list[Sense]:
        return await asyncio.to_thread(self._define, word)

    async def random_words(
        self, category: Category | None, starts_with: str, count: int,
    ) -> list[str]:
        return await asyncio.to_thread(self._random_words, category, starts_with, count)

    # ------------------------------------------------------------------
    # Corpus management
    # ------------------------------------------------------------------

    def _ensure_wordnet(self) -> Any:
        if self._wordnet is None:
            with self._lock:
                if self._wordnet is None:
                    self._wordnet = _load_wordnet(self.auto_download)
                    logger.info("WordNet corpus loaded")
        return self._wordnet

    def _lemma_names(self, category: Category | None) -> list[str]:
        """Sorted lemma names for a category (all categories for None)."""
        key = _WORDNET_POS[category] if category is not None else ''
        names = self._lemma_index.get(key)
        if names is None:
            wn = self._ensure_wordnet()
            with self._lock:
                names = self._lemma_index.get(key)
                if names is None:
                    names = sorted(set(wn.all_lemma_names(pos=key or None)))
                    self._lemma_index[key] = names
                    logger.debug("Lemma index built", extra={
                        "pos": key or "all", "size": len(names),
                    })
        return names

    # ------------------------------------------------------------------
    # Lookups (blocking, run in worker threads)
    # ------------------------------------------------------------------

    def _filter_words(self, category: Category, words: list[str]) -> list[str]:
        names = self._lemma_names(category)
        matched = []
        for word in words:
            lemma = _normalize(word)
            i = bisect_left(names, lemma)
            if i < len(names) and names[i] == lemma:
                matched.append(word)
        return matched

    def _define(self, word: str) -> list[Sense]:
        wn = self._ensure_wordnet()
        senses = []
        with self._read_lock:
            for synset in wn.synsets(_normalize(word)):
                category = _CATEGORY_BY_POS.get(synset.pos())
                if category is None:
                    continue
                senses.append(Sense(
                    category=category,
                    gloss=synset.definition(),
                    synonyms=tuple(synset.lemma_names()),
                    examples=tuple(synset.examples()),
                    source_id=synset.name(),
                ))
        return senses

    def _random_words(self, category: Category | None, starts_with: str, count: int) -> list[str]:
        if count <= 0:
            return []
        names = self._lemma_names(category)
        prefix = _normalize(starts_with)
        lo = bisect_left(names, prefix)
        hi = bisect_right(names, prefix + _PREFIX_END, lo)
        k = min(count, hi - lo)
        return [names[i] for i in self._rng.sample(range(lo, hi), k)]
