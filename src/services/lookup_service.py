"""Lookup service: runs one command end to end.

Pipeline: parse words → compute plan → fan-out aggregation → format.
The parse command stops after the first step; stopwords never touches
the lexicon.
"""

import logging
from dataclasses import dataclass, field

from domain.model.lexicon import Category, Command
from port.lexicon import LexiconPort
from services.command_plan import compute_plan
from services.fanout import FanOutAggregator
from services.output_formatter import FormatOptions, format_results, format_stopwords
from utils.stopwords import STOPWORDS
from utils.tokenizer import parse_words

logger = logging.getLogger(__name__)


@dataclass
class LookupRequest:
    """One CLI invocation's worth of lookup parameters."""
    command: Command
    text: str = ''
    categories: list[Category] = field(default_factory=list)
    options: FormatOptions = field(default_factory=FormatOptions)
    include_stopwords: bool = False
    count: int = 1
    timeout: float | None = None


async def run_command(request: LookupRequest, lexicon: LexiconPort) -> str:
    """Execute a command and return its rendered output."""
    if request.command is Command.STOPWORDS:
        return format_stopwords(list(STOPWORDS), request.options)

    words = parse_words(request.text, exclude_stopwords=not request.include_stopwords)

    if request.command is Command.PARSE:
        return format_results(
            Command.PARSE, {"words": words}, request.options, word_count=len(words),
        )

    plan = compute_plan(request.command, request.categories, words, count=request.count)
    logger.info("Running lookups", extra={
        "command": request.command.value,
        "word_count": len(words),
        "expected_count": plan.expected_count,
    })

    aggregator = FanOutAggregator(plan, timeout=request.timeout)
    rendered: list[str] = []
    await aggregator.run(
        lexicon,
        lambda results: rendered.append(format_results(
            request.command, results, request.options, word_count=len(words),
        )),
    )

    if aggregator.failed_count:
        logger.warning("Some lookups failed", extra={
            "command": request.command.value,
            "failed_count": aggregator.failed_count,
            "expected_count": plan.expected_count,
            "timed_out": aggregator.timed_out,
        })
    return rendered[0]
