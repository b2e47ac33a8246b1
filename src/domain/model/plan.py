"""Plan domain model: typed description of one fan-out run."""

from dataclasses import dataclass
from enum import Enum

from domain.model.lexicon import Category, Command


class Operation(Enum):
    """Lexical provider operation invoked by a call descriptor."""
    FILTER = 'filter_words'
    DEFINE = 'define'
    RANDOM = 'random_words'


class KeyMode(Enum):
    """How per-call results are keyed in the result map."""
    CATEGORY = 'category'
    WORD = 'word'


@dataclass(frozen=True)
class RandomQuery:
    """Random sampling query: words starting with a prefix."""
    starts_with: str = ''
    count: int = 1


@dataclass(frozen=True)
class CallDescriptor:
    """One unit of asynchronous lookup work.

    ``category`` is None when the call has no category dimension
    (unfiltered random sampling). ``target`` is a tuple of words for
    FILTER, a single word for DEFINE and a RandomQuery for RANDOM.
    """
    operation: Operation
    category: Category | None
    target: tuple[str, ...] | str | RandomQuery

    def result_key(self, key_mode: KeyMode) -> str:
        """Result map key this call contributes to."""
        if key_mode is KeyMode.WORD:
            return self.target
        return self.category.value if self.category is not None else ''


@dataclass(frozen=True)
class CommandPlan:
    """Descriptors and completion count for one command invocation.

    expected_count is fixed when the plan is built and is the sole
    termination signal for the aggregator.
    """
    command: Command
    descriptors: tuple[CallDescriptor, ...]
    expected_count: int
    key_mode: KeyMode
    categories: tuple[Category | None, ...] = ()

    def __post_init__(self) -> None:
        if self.expected_count != len(self.descriptors):
            raise ValueError(
                f"expected_count {self.expected_count} does not match "
                f"{len(self.descriptors)} descriptors"
            )

    def result_keys(self) -> list[str]:
        """Distinct result keys in descriptor order."""
        keys: dict[str, None] = {}
        for descriptor in self.descriptors:
            keys.setdefault(descriptor.result_key(self.key_mode), None)
        return list(keys)
