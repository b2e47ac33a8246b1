"""Command planning: decides which lookups a command issues.

Pure and synchronous: maps a command, the selected categories and the
parsed words to a CommandPlan. The aggregator executes the plan.
"""

from domain.model.lexicon import Category, Command
from domain.model.plan import (
    CallDescriptor,
    CommandPlan,
    KeyMode,
    Operation,
    RandomQuery,
)

# ── Operation table ──────────────────────────────────────────

COMMAND_OPERATIONS: dict[Command, Operation] = {
    Command.GET: Operation.FILTER,
    Command.DEF: Operation.DEFINE,
    Command.RAND: Operation.RANDOM,
}


def select_categories(
    command: Command, selected: list[Category] | None,
) -> tuple[Category | None, ...]:
    """Resolve the category selection for a command.

    Empty selection means "no category filter" (None) for rand and
    all categories otherwise. Selections are de-duplicated and kept
    in display order.
    """
    if not selected:
        if command is Command.RAND:
            return (None,)
        return tuple(Category.ordered())
    chosen = set(selected)
    return tuple(c for c in Category.ordered() if c in chosen)


def compute_plan(
    command: Command,
    selected_categories: list[Category] | None,
    words: list[str],
    *,
    count: int = 1,
) -> CommandPlan:
    """Build the call descriptors and expected completion count.

    Args:
        command: Requested command. ``parse`` yields an empty plan.
        selected_categories: Categories chosen on the command line.
        words: Parsed input words.
        count: Number of random words per query (rand only).

    Returns:
        CommandPlan whose expected_count equals its descriptor count.

    Raises:
        ValueError: If the command issues no lexical lookups at all.
    """
    key_mode = KeyMode.WORD if command is Command.DEF else KeyMode.CATEGORY

    if command is Command.PARSE:
        return CommandPlan(command, (), 0, key_mode)

    operation = COMMAND_OPERATIONS.get(command)
    if operation is None:
        raise ValueError(f"Command {command.value!r} does not perform lookups")

    categories = select_categories(command, selected_categories)
    descriptors: list[CallDescriptor] = []

    if operation is Operation.FILTER:
        # One call per category, each evaluated against the whole word list
        if words:
            target = tuple(words)
            descriptors = [CallDescriptor(operation, c, target) for c in categories]
    elif operation is Operation.DEFINE:
        # One call per word; categories only filter the returned senses
        descriptors = [CallDescriptor(operation, None, w) for w in words]
    else:
        prefixes = words or ['']
        descriptors = [
            CallDescriptor(operation, c, RandomQuery(starts_with=w, count=count))
            for c in categories
            for w in prefixes
        ]

    return CommandPlan(
        command=command,
        descriptors=tuple(descriptors),
        expected_count=len(descriptors),
        key_mode=key_mode,
        categories=categories,
    )
