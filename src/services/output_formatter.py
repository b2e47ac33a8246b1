"""Output formatting: renders a completed ResultMap as text.

Pure and synchronous. Runs once per invocation, after the aggregator
has completed.
"""

import json
import pprint
from dataclasses import dataclass
from typing import Any, Mapping

from domain.model.lexicon import Category, Command, Sense

# Depth for the --full structured dump
FULL_DUMP_DEPTH = 10


@dataclass(frozen=True)
class FormatOptions:
    """Output mode flags. Precedence: count, json, full, default list."""
    count: bool = False
    brief: bool = False
    full: bool = False
    json: bool = False

    @property
    def separator(self) -> str:
        return ' ' if self.brief else '\n'


def to_plain(value: Any) -> Any:
    """Convert result values (Sense, tuples, mappings) to JSON-ready data."""
    if isinstance(value, Sense):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def format_results(
    command: Command,
    results: Mapping[str, list],
    options: FormatOptions,
    *,
    word_count: int,
) -> str:
    """Render a ResultMap for ``command``.

    Args:
        command: Command that produced the results.
        results: Completed ResultMap (for parse: {"words": [...]}).
        options: Output mode flags.
        word_count: Number of parsed input words (used by count mode).
    """
    if options.count and command is not Command.DEF:
        return _format_counts(command, results, word_count)

    if options.json:
        return json.dumps(to_plain(results), separators=(',', ':'))
    if options.full:
        return pprint.pformat(to_plain(results), depth=FULL_DUMP_DEPTH)

    if command is Command.DEF:
        return _format_definitions(results)
    return _format_lists(results, options)


def _format_counts(command: Command, results: Mapping[str, list], word_count: int) -> str:
    """Per-category cardinalities followed by the parsed word count.

    Only get has per-category counts; parse and rand print the word count.
    """
    if command is not Command.GET:
        return str(word_count)
    counts = [str(len(results.get(c.value) or [])) for c in Category.ordered()]
    return ' '.join(counts + [str(word_count)])


def _format_definitions(results: Mapping[str, list]) -> str:
    out = []
    for word, senses in results.items():
        if not senses:
            continue
        lines = ''.join(f"  {s.category.value}: {s.gloss}\n" for s in senses)
        out.append(f"{word}\n{lines}\n")
    return ''.join(out)


def _format_lists(results: Mapping[str, list], options: FormatOptions) -> str:
    sep = options.separator
    out = []
    for key, values in results.items():
        if not values:
            continue
        header = '' if options.brief else f"# {key} {len(values)}:{sep}"
        out.append(f"{header}{sep.join(values)}{sep}\n")
    return ''.join(out)


def format_stopwords(stopwords: list[str], options: FormatOptions) -> str:
    """Render the stopword list (only --json and --brief apply)."""
    if options.json:
        return json.dumps(stopwords, separators=(',', ':'))
    return options.separator.join(stopwords)
