"""Input sources for the CLI: positional words, a file, or piped stdin."""

import logging
from pathlib import Path
from typing import TextIO

from domain.model.errors import InputError

logger = logging.getLogger(__name__)

# ^D and ^Z at the start of a line end interactive input
END_OF_INPUT_CHARS = ('\x04', '\x1a')


def read_file(path: str) -> str:
    """Read an input file as UTF-8.

    Raises:
        InputError: If the file cannot be read or decoded.
    """
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Input file unreadable", extra={"path": path, "error": str(e)})
        raise InputError(path, str(e)) from e


def read_stream(stream: TextIO) -> str:
    """Read text until EOF or a line starting with ^D / ^Z."""
    chunks = []
    for line in stream:
        if line[:1] in END_OF_INPUT_CHARS:
            break
        chunks.append(line)
    return ''.join(chunks)
