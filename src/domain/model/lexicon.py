# domain/model/lexicon.py

"""Lexical domain models: categories, commands and senses."""

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Part-of-speech classes used to partition lexical results."""
    NOUN = 'Noun'
    ADJECTIVE = 'Adjective'
    VERB = 'Verb'
    ADVERB = 'Adverb'

    @classmethod
    def ordered(cls) -> list['Category']:
        """All categories in display order (noun, adjective, verb, adverb)."""
        return list(cls)


class Command(str, Enum):
    """Commands accepted by the CLI."""
    GET = 'get'
    DEF = 'def'
    RAND = 'rand'
    PARSE = 'parse'
    STOPWORDS = 'stopwords'


@dataclass(frozen=True)
class Sense:
    """One gloss of a word, tagged with the category it belongs to."""
    category: Category
    gloss: str
    synonyms: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    source_id: str | None = None

    def to_dict(self) -> dict:
        return {
            'category': self.category.value,
            'gloss': self.gloss,
            'synonyms': list(self.synonyms),
            'examples': list(self.examples),
            'source_id': self.source_id,
        }
