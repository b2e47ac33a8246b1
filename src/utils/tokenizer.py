"""Tokenizer: turns raw input text into the word list lookups run on."""

import re

from utils.stopwords import is_stopword

# Split on runs of non-word characters
_WORD_SPLIT_RE = re.compile(r"\W+")


def tokenize(text: str) -> list[str]:
    """Split text into word tokens, dropping empty pieces."""
    if not text:
        return []
    return [token for token in _WORD_SPLIT_RE.split(text) if token]


def parse_words(text: str, *, exclude_stopwords: bool = True) -> list[str]:
    """Tokenize, de-duplicate (first occurrence wins) and drop stopwords.

    Examples:
        parse_words("The dog and the cat")  → ['dog', 'cat']
        parse_words("The dog", exclude_stopwords=False) → ['The', 'dog']
    """
    seen: set[str] = set()
    words = []
    for token in tokenize(text):
        if token in seen:
            continue
        seen.add(token)
        if exclude_stopwords and is_stopword(token):
            continue
        words.append(token)
    return words
