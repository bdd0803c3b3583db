"""Exploration session: concurrent parent fetches folded into one view.

Fetches run as asyncio tasks and may finish in any order. Each one puts its
``(handle, Parents | TransportError)`` result on a queue; the owner of the
session drains that queue and merges results one at a time, so the graph is
only ever touched from a single place.

Example:
    >>> async with OrchestratorClient("127.0.0.1:9090") as client:
    ...     session = ExplorationSession(client)
    ...     await session.explore(root, depth=2)
    ...     session.view.graph.ordering
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from ancestry.foundation.errors import TransportError
from ancestry.graph import AncestorGraph, AncestryView, MergeResult
from ancestry.handle import Handle
from ancestry.transport import OrchestratorClient, Parents

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """What happened to one parent fetch once it was drained.

    Exactly one of ``merge`` and ``error`` is set, unless the orchestrator
    reported no known parents, in which case both are None.
    """

    handle: Handle
    merge: MergeResult | None = None
    error: TransportError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ExplorationSession:
    """Owns an AncestryView and the fetches that grow it."""

    def __init__(self, client: OrchestratorClient, view: AncestryView | None = None) -> None:
        self.client = client
        self.view = view or AncestryView()
        self.errors: list[TransportError] = []
        self._results: asyncio.Queue[tuple[Handle, Parents | TransportError]] = asyncio.Queue()
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._pending)

    @property
    def last_error(self) -> TransportError | None:
        return self.errors[-1] if self.errors else None

    def set_main_handle(self, handle: Handle) -> AncestorGraph:
        """Start over from ``handle``. Fetches still in flight are not cancelled."""
        self.errors.clear()
        return self.view.set_main_handle(handle)

    def request_parents(self, handle: Handle) -> asyncio.Task[None]:
        """Dispatch a parent fetch. Must be called from a running event loop."""
        logger.debug("Requesting parents of %s", handle)
        task = asyncio.create_task(self._fetch_parents(handle))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _fetch_parents(self, handle: Handle) -> None:
        result: Parents | TransportError
        try:
            result = await self.client.get_parents(handle)
        except TransportError as e:
            logger.warning("Fetching parents of %s failed: %s", handle, e)
            result = e
        await self._results.put((handle, result))

    def drain(self) -> list[FetchOutcome]:
        """Merge every result that has arrived so far, without waiting."""
        outcomes = []
        while True:
            try:
                handle, result = self._results.get_nowait()
            except asyncio.QueueEmpty:
                break
            outcomes.append(self._apply(handle, result))
        return outcomes

    def _apply(self, handle: Handle, result: Parents | TransportError) -> FetchOutcome:
        if isinstance(result, TransportError):
            self.errors.append(result)
            return FetchOutcome(handle=handle, error=result)
        if result.tasks is None:
            logger.info("No known parents for %s", handle)
            return FetchOutcome(handle=handle)
        return FetchOutcome(handle=handle, merge=self.view.set_parents(handle, result.tasks))

    async def wait(self) -> list[FetchOutcome]:
        """Wait for every in-flight fetch, then drain."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
        return self.drain()

    async def explore(self, root: Handle, depth: int = 1) -> list[FetchOutcome]:
        """Reveal ``depth`` generations of ancestors of ``root``, breadth first.

        Fetches of one generation run concurrently; the next generation is
        requested for the nodes the previous one created.
        """
        graph = self.set_main_handle(root)
        frontier = [root]
        outcomes: list[FetchOutcome] = []

        for generation in range(depth):
            if not frontier:
                break
            logger.debug("Generation %d: fetching %d handles", generation + 1, len(frontier))
            for handle in frontier:
                self.request_parents(handle)
            drained = await self.wait()
            outcomes.extend(drained)
            frontier = [
                graph.element(index).handle
                for outcome in drained
                if outcome.merge is not None
                for index in outcome.merge.created
            ]

        return outcomes
