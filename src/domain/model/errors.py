"""Domain-level exceptions.

Adapters raise provider errors to signal a failed lookup call.
The fan-out aggregator absorbs them; only setup errors reach the CLI.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class InputError(DomainError):
    """Input text could not be read (e.g. unreadable --file)."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read input from {source}: {reason}")


class ProviderCallError(DomainError):
    """A single lexical lookup call failed."""


class UnsupportedOperationError(ProviderCallError):
    """The lexical provider cannot serve the requested operation."""

    def __init__(self, provider: str, operation: str):
        self.provider = provider
        self.operation = operation
        super().__init__(f"{provider} does not support {operation}")


class LexiconUnavailableError(ProviderCallError):
    """The lexical database could not be loaded."""
