"""Fan-out aggregator: executes a CommandPlan against a lexicon.

Every call descriptor is dispatched as its own asyncio task before any
result is awaited. Each task carries a done-callback bound to its
descriptor, so results are routed by key no matter which call returns
first. Completion is driven only by counting settled calls against the
plan's expected_count:

    IDLE ──run()──► RUNNING ──(received == expected)──► COMPLETE
      └──────────(expected == 0)─────────────────────────┘

Failed calls are logged and still counted, so a run always completes
once every call has settled. A call that never settles keeps the run
in RUNNING unless a timeout is configured.
"""

import asyncio
import logging
from enum import Enum
from functools import partial
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping

from domain.model.errors import ProviderCallError
from domain.model.plan import CallDescriptor, CommandPlan, Operation
from port.lexicon import LexiconPort

logger = logging.getLogger(__name__)

ResultMap = Mapping[str, list]
CompletionHandler = Callable[[ResultMap], Any]


class AggregatorState(str, Enum):
    """Lifecycle states of a FanOutAggregator."""
    IDLE = 'idle'
    RUNNING = 'running'
    COMPLETE = 'complete'


# ── Provider calls per operation ─────────────────────────────


def _call_filter(lexicon: LexiconPort, descriptor: CallDescriptor, plan: CommandPlan) -> Awaitable[list]:
    return lexicon.filter_words(descriptor.category, list(descriptor.target))


async def _call_define(lexicon: LexiconPort, descriptor: CallDescriptor, plan: CommandPlan) -> list:
    senses = await lexicon.define(descriptor.target)
    return [s for s in senses if s.category in plan.categories]


def _call_random(lexicon: LexiconPort, descriptor: CallDescriptor, plan: CommandPlan) -> Awaitable[list]:
    query = descriptor.target
    return lexicon.random_words(descriptor.category, query.starts_with, query.count)


_PROVIDER_CALLS: dict[Operation, Callable[[LexiconPort, CallDescriptor, CommandPlan], Awaitable[list]]] = {
    Operation.FILTER: _call_filter,
    Operation.DEFINE: _call_define,
    Operation.RANDOM: _call_random,
}


# ── Aggregator ───────────────────────────────────────────────


class FanOutAggregator:
    """Runs one CommandPlan and merges per-call results into a ResultMap.

    Instantiate one aggregator per plan; ``run`` may be called once.
    All mutation happens in done-callbacks on the event loop thread.
    """

    def __init__(self, plan: CommandPlan, *, timeout: float | None = None):
        self.plan = plan
        self.timeout = timeout
        self.state = AggregatorState.IDLE
        self.received_count = 0
        self.failed_count = 0
        self.timed_out = False
        self.results: dict[str, list] = {}
        # key -> {descriptor index: number of items contributed}
        self._contributions: dict[str, dict[int, int]] = {}
        self._tasks: list[asyncio.Task] = []
        self._on_complete: CompletionHandler | None = None
        self._done: asyncio.Future | None = None
        self._deadline: asyncio.TimerHandle | None = None

    @property
    def expected_count(self) -> int:
        return self.plan.expected_count

    def run(
        self, lexicon: LexiconPort, on_complete: CompletionHandler | None = None,
    ) -> asyncio.Future:
        """Dispatch every descriptor and return a future for the ResultMap.

        ``on_complete`` is invoked exactly once with the completed map.
        With an empty plan it is invoked synchronously, before this
        method returns, and no provider call is issued.

        Must be called from within a running event loop.
        """
        if self.state is not AggregatorState.IDLE:
            raise RuntimeError(f"Aggregator already {self.state.value}")

        loop = asyncio.get_running_loop()
        self._on_complete = on_complete
        self._done = loop.create_future()

        if self.plan.expected_count == 0:
            self._complete()
            return self._done

        self.state = AggregatorState.RUNNING
        logger.debug("Dispatching lookup calls", extra={
            "command": self.plan.command.value,
            "expected_count": self.plan.expected_count,
        })

        for index, descriptor in enumerate(self.plan.descriptors):
            call = _PROVIDER_CALLS[descriptor.operation]
            task = loop.create_task(call(lexicon, descriptor, self.plan))
            task.add_done_callback(partial(self._collect, index, descriptor))
            self._tasks.append(task)

        if self.timeout is not None:
            self._deadline = loop.call_later(self.timeout, self._expire)

        return self._done

    # ------------------------------------------------------------------
    # Completion handling
    # ------------------------------------------------------------------

    def _collect(self, index: int, descriptor: CallDescriptor, task: asyncio.Task) -> None:
        """Done-callback for one provider call."""
        if self.state is not AggregatorState.RUNNING:
            return

        key = descriptor.result_key(self.plan.key_mode)
        if task.cancelled():
            self.failed_count += 1
            logger.warning("Lookup call cancelled", extra={
                "operation": descriptor.operation.value, "key": key,
            })
        elif task.exception() is not None:
            self.failed_count += 1
            error = task.exception()
            if isinstance(error, ProviderCallError):
                logger.warning("Lookup call failed", extra={
                    "operation": descriptor.operation.value, "key": key,
                    "error": str(error),
                })
            else:
                logger.error("Unexpected error in lookup call", extra={
                    "operation": descriptor.operation.value, "key": key,
                }, exc_info=error)
        else:
            self._merge(key, index, task.result())

        self.received_count += 1
        if self.received_count == self.plan.expected_count:
            self._complete()

    def _merge(self, key: str, index: int, items: list | None) -> None:
        """Splice a call's items into results[key] at its plan position.

        Contributions for a key are ordered by descriptor index, so the
        accumulated value does not depend on arrival order.
        """
        items = list(items or [])
        contributions = self._contributions.setdefault(key, {})
        offset = sum(n for i, n in contributions.items() if i < index)
        contributions[index] = len(items)
        bucket = self.results.setdefault(key, [])
        bucket[offset:offset] = items

    def _complete(self) -> None:
        self.state = AggregatorState.COMPLETE
        if self._deadline is not None:
            self._deadline.cancel()

        snapshot = MappingProxyType({
            key: self.results[key]
            for key in self.plan.result_keys()
            if key in self.results
        })
        logger.debug("Lookup run complete", extra={
            "command": self.plan.command.value,
            "received_count": self.received_count,
            "failed_count": self.failed_count,
        })

        try:
            if self._on_complete is not None:
                self._on_complete(snapshot)
        except Exception as e:
            logger.error("Completion handler failed", exc_info=True)
            if not self._done.done():
                self._done.set_exception(e)
            return

        if not self._done.done():
            self._done.set_result(snapshot)

    def _expire(self) -> None:
        """Cancel calls still pending at the deadline.

        Each cancelled task settles through _collect as a failure, so
        completion is still reached by counting.
        """
        pending = [task for task in self._tasks if not task.done()]
        if not pending:
            return
        self.timed_out = True
        logger.warning("Lookup timeout reached, cancelling pending calls", extra={
            "pending": len(pending), "timeout": self.timeout,
        })
        for task in pending:
            task.cancel()


async def aggregate(
    plan: CommandPlan,
    lexicon: LexiconPort,
    *,
    timeout: float | None = None,
    on_complete: CompletionHandler | None = None,
) -> ResultMap:
    """Run ``plan`` on a fresh aggregator and wait for its ResultMap."""
    return await FanOutAggregator(plan, timeout=timeout).run(lexicon, on_complete)
