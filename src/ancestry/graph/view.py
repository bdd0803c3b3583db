"""The ancestry view: an optional graph around the currently selected main handle."""

import logging
from collections.abc import Callable, Iterator, Sequence
from enum import Enum

from ancestry.graph.ancestors import AncestorGraph, Arrow, MergeResult, MergeStatus
from ancestry.graph.element import Element
from ancestry.graph.geometry import Bounds, ClosestElem, DrawParameters, PlotTransform, Point, Renderer
from ancestry.handle import Handle, Task

logger = logging.getLogger(__name__)


class GraphState(Enum):
    EMPTY = "empty"
    ROOTED = "rooted"


class AncestryView:
    """Holds the ancestry graph of the main handle, if one was selected.

    Selecting a new main handle discards the previous graph; merges for
    handles of a discarded graph come back as NOT_FOUND.
    """

    def __init__(self, name: str = "Ancestry Tree", renderer: Renderer | None = None) -> None:
        self.name = name
        self.renderer = renderer
        self._ancestry: AncestorGraph | None = None

    @property
    def state(self) -> GraphState:
        return GraphState.EMPTY if self._ancestry is None else GraphState.ROOTED

    @property
    def graph(self) -> AncestorGraph | None:
        return self._ancestry

    def set_main_handle(self, handle: Handle) -> AncestorGraph:
        """Reset the graph to a lone main handle."""
        logger.info("Main handle set to %s", handle)
        self._ancestry = AncestorGraph(Element(handle), renderer=self.renderer)
        return self._ancestry

    def set_parents(self, handle: Handle, parents: Sequence[Task]) -> MergeResult:
        """Merge the parents of a specific handle into the tree."""
        if self._ancestry is None:
            logger.warning("Dropping parents of %s: no main handle", handle)
            return MergeResult(status=MergeStatus.NOT_FOUND, target=handle)
        return self._ancestry.merge_new_parents(handle, parents)

    def iter(self) -> Iterator[Element]:
        if self._ancestry is None:
            return iter(())
        return self._ancestry.iter()

    def __len__(self) -> int:
        return 0 if self._ancestry is None else len(self._ancestry)

    def get_draw_parameters(self, index: int) -> DrawParameters:
        if self._ancestry is None:
            raise IndexError(f"No element with index {index} in an empty view")
        return self._ancestry.get_draw_parameters(index)

    def bounds(self) -> Bounds | None:
        return None if self._ancestry is None else self._ancestry.bounds()

    def arrows(self) -> list[Arrow]:
        return [] if self._ancestry is None else self._ancestry.arrows()

    def find_closest(self, point: Point, transform: PlotTransform) -> ClosestElem | None:
        if self._ancestry is None:
            return None
        return self._ancestry.find_closest(point, transform)

    def handle_nearby_click(
        self,
        point: Point,
        closest: ClosestElem,
        request: Callable[[Handle], object],
    ) -> bool:
        if self._ancestry is None:
            return False
        return self._ancestry.handle_nearby_click(point, closest, request)
