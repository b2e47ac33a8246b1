"""Command-line entry point.

Usage:
    poslookup [options] <get|def|rand|parse|stopwords> [word ... | -i <file> | <stdin>]
"""

import argparse
import asyncio
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import TextIO

from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before importing modules that read env vars (like the WordNet adapter)
load_dotenv()

from adapter.external.free_dictionary import FreeDictionaryAdapter
from adapter.wordnet.nltk_wordnet import WordNetAdapter
from domain.model.errors import InputError
from domain.model.lexicon import Category, Command
from port.lexicon import LexiconPort
from services.lookup_service import LookupRequest, run_command
from services.output_formatter import FormatOptions
from utils.input_source import read_file, read_stream
from utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)

LEXICON_SOURCE = os.getenv('LEXICON_SOURCE', 'wordnet')
LOOKUP_TIMEOUT_SECONDS = os.getenv('LOOKUP_TIMEOUT_SECONDS')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')

LEXICON_SOURCES = ('wordnet', 'freedictionary')

COMMAND_HELP = {
    Command.GET: 'get list of words for particular POS',
    Command.DEF: 'lookup definitions',
    Command.RAND: 'get random words (starting with <word>, optionally)',
    Command.PARSE: 'show parsed words, deduped and less stopwords',
    Command.STOPWORDS: 'show list of stopwords (valid options are -b and -j)',
}

# flag dest → Category
CATEGORY_FLAGS = {
    'noun': Category.NOUN,
    'adj': Category.ADJECTIVE,
    'verb': Category.VERB,
    'adv': Category.ADVERB,
}


def _package_version() -> str:
    try:
        return version('poslookup')
    except PackageNotFoundError:
        return 'unknown'


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number: {value}")
    return number


def _default_timeout() -> float | None:
    if not LOOKUP_TIMEOUT_SECONDS:
        return None
    try:
        return _positive_float(LOOKUP_TIMEOUT_SECONDS)
    except (ValueError, argparse.ArgumentTypeError):
        logger.warning("Ignoring invalid LOOKUP_TIMEOUT_SECONDS",
                       extra={"value": LOOKUP_TIMEOUT_SECONDS})
        return None


def _add_options(parser: argparse.ArgumentParser, *, suppress: bool) -> None:
    """Add the shared options.

    Subcommand copies use SUPPRESS defaults so options given before the
    command are not reset by the subcommand parser.
    """
    def default(value):
        return argparse.SUPPRESS if suppress else value

    parser.add_argument('-n', '--noun', action='store_true', default=default(False), help='Get nouns')
    parser.add_argument('-a', '--adj', action='store_true', default=default(False), help='Get adjectives')
    parser.add_argument('-v', '--verb', action='store_true', default=default(False), help='Get verbs')
    parser.add_argument('-r', '--adv', action='store_true', default=default(False), help='Get adverbs')

    parser.add_argument('-c', '--count', action='store_true', default=default(False),
                        help='count only (noun, adj, verb, adv, total parsed words)')
    parser.add_argument('-b', '--brief', action='store_true', default=default(False),
                        help='brief output (all on one line, no headers)')
    parser.add_argument('-f', '--full', action='store_true', default=default(False),
                        help='full results object')
    parser.add_argument('-j', '--json', action='store_true', default=default(False),
                        help='full results object as JSON')
    parser.add_argument('-i', '--file', metavar='<file>', default=default(None), help='input file')
    parser.add_argument('-s', '--with-stopwords', dest='with_stopwords', action='store_true',
                        default=default(False),
                        help='include stopwords (default: stopwords are excluded)')
    parser.add_argument('-N', '--num', metavar='<num>', type=_positive_int, default=default(1),
                        help='number of random words to return')
    parser.add_argument('--source', choices=LEXICON_SOURCES, default=default(LEXICON_SOURCE),
                        help='lexical database to query (default: %(default)s)')
    parser.add_argument('--timeout', metavar='<seconds>', type=_positive_float,
                        default=default(_default_timeout()),
                        help=('give up on lookups still pending after this many seconds '
                              '(bounds the result, not process exit, when a corpus read hangs)'))


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    _add_options(common, suppress=True)

    parser = argparse.ArgumentParser(
        prog='poslookup',
        usage='%(prog)s [options] <command> [word ... | -i <file> | <stdin>]',
        description='Part-of-speech, definition and random word lookups.',
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {_package_version()}")
    _add_options(parser, suppress=False)

    subparsers = parser.add_subparsers(dest='command', metavar='<command>')
    for command, help_text in COMMAND_HELP.items():
        sub = subparsers.add_parser(
            command.value, parents=[common], help=help_text, description=help_text,
        )
        sub.add_argument('words', nargs='*', metavar='word')
    return parser


def parse_arguments(parser: argparse.ArgumentParser, argv: list[str] | None) -> argparse.Namespace:
    """Parse argv, allowing options between the words of a command.

    The words positional stops at the first option, so words after it
    come back as extras and are appended in order.
    """
    args, extras = parser.parse_known_args(argv)
    if extras and (not args.command or any(arg.startswith('-') for arg in extras)):
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    if extras:
        args.words = list(args.words) + extras
    return args


def selected_categories(args: argparse.Namespace) -> list[Category]:
    return [category for flag, category in CATEGORY_FLAGS.items() if getattr(args, flag)]


def read_input(command: Command, args: argparse.Namespace, stdin: TextIO) -> str:
    """Resolve input text: --file, then positional words, then stdin.

    rand and stopwords never wait on stdin.

    Raises:
        InputError: If --file cannot be read.
    """
    if args.file:
        return read_file(args.file)
    words = getattr(args, 'words', [])
    if words or command in (Command.RAND, Command.STOPWORDS):
        return ' '.join(words)
    return read_stream(stdin)


def create_lexicon(source: str) -> LexiconPort:
    if source == 'freedictionary':
        return FreeDictionaryAdapter()
    return WordNetAdapter()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the poslookup CLI."""
    setup_structured_logging(LOG_LEVEL)

    parser = build_parser()
    args = parse_arguments(parser, argv)
    if not args.command:
        parser.print_help()
        return 0

    command = Command(args.command)
    try:
        text = read_input(command, args, sys.stdin)
    except InputError as e:
        print(e, file=sys.stderr)
        return 1

    request = LookupRequest(
        command=command,
        text=text,
        categories=selected_categories(args),
        options=FormatOptions(count=args.count, brief=args.brief, full=args.full, json=args.json),
        include_stopwords=args.with_stopwords,
        count=args.num,
        timeout=args.timeout,
    )

    try:
        output = asyncio.run(run_command(request, create_lexicon(args.source)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    print(output, end='' if output.endswith('\n') else '\n')
    return 0


if __name__ == "__main__":
    sys.exit(main())
