"""Append-only ancestry tree of a single main handle.

The main handle is the root. Every merge hangs newly discovered parents
*above* the node they were fetched for, so the tree grows upwards:

        pp0 = 3  pp1 = 4
             \\    /
     p0 = 1  p1 = 2  p2 = 5
         \\     |    /
           main = 0

Nodes live in an arena indexed by their OrderingIndex (insertion order).
A handle is stored at most once; when a fetch reports an already known handle
as a parent somewhere else, only a back-edge is recorded on the existing node.
Neither indices nor lineages ever change after a node is created, but the
layout of existing nodes does shift when siblings are added, which is why
draw parameters are recomputed on every call instead of cached.
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum

from ancestry.graph.element import Element
from ancestry.graph.geometry import (
    Bounds,
    ClosestElem,
    DrawParameters,
    PlotTransform,
    Point,
    Renderer,
    TextBoxRenderer,
)
from ancestry.handle import Handle, Operation, Task

logger = logging.getLogger(__name__)

# Vertical distance between generations relative to the horizontal slot width
Y_SCALE = 0.5

OrderingIndex = int
Lineage = tuple[int, ...]


class MergeStatus(Enum):
    MERGED = "merged"
    NOT_FOUND = "not_found"


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Outcome of folding a batch of parents into the graph.

    Attributes:
        status: NOT_FOUND when the target handle is not in the graph, which
            happens when a late fetch result arrives after the main handle
            was changed. Nothing is modified in that case.
        target: Handle whose parents were merged.
        created: Ordering indices of nodes created by this merge.
        linked: Ordering indices of existing nodes that gained a back-edge.
    """

    status: MergeStatus
    target: Handle
    created: tuple[OrderingIndex, ...] = ()
    linked: tuple[OrderingIndex, ...] = ()

    @property
    def found(self) -> bool:
        return self.status is MergeStatus.MERGED


@dataclass(slots=True)
class Ancestor:
    """One node of the tree: an element and the parents discovered for it."""

    content: Element
    index: OrderingIndex
    lineage: Lineage

    parents: list[OrderingIndex] = field(default_factory=list)
    """Owned parent nodes, rendered above this one, in discovery order."""

    children: list[tuple[OrderingIndex, Operation]] = field(default_factory=list)
    """Back-edges: nodes this one is a parent of, and how it was used."""

    @property
    def handle(self) -> Handle:
        return self.content.handle

    def add_child(self, child: OrderingIndex, operation: Operation) -> bool:
        """Record a back-edge unless the same (index, operation) pair exists."""
        edge = (child, operation)
        if edge in self.children:
            return False
        self.children.append(edge)
        return True


class ArrowDirection(Enum):
    DOWN = "down"
    RIGHT = "right"


@dataclass(frozen=True, slots=True)
class Arrow:
    """Plot-space geometry of one back-edge.

    Arrows leave the parent from the bottom centre of its box, or from the
    right middle when a node feeds itself, and end at the top centre of the
    child's box.
    """

    parent: OrderingIndex
    child: OrderingIndex
    operation: Operation
    origin: Point
    origin_scale: float
    direction: ArrowDirection
    target: Point
    target_scale: float


class AncestorGraph:
    """An element and all of its known ancestors. Append only."""

    def __init__(
        self,
        root: Element,
        *,
        element_factory: Callable[[Handle], Element] = Element,
        renderer: Renderer | None = None,
    ) -> None:
        self._nodes: list[Ancestor] = [Ancestor(content=root, index=0, lineage=(0,))]
        self._index: dict[Handle, OrderingIndex] = {root.handle: 0}
        self._element_factory = element_factory
        self.renderer: Renderer = renderer or TextBoxRenderer()

    @classmethod
    def new(cls, root: Element) -> "AncestorGraph":
        return cls(root)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, handle: object) -> bool:
        return handle in self._index

    def __iter__(self) -> Iterator[Element]:
        return self.iter()

    def iter(self) -> Iterator[Element]:
        """Elements in insertion order, which defines the OrderingIndex."""
        return (node.content for node in self._nodes)

    @property
    def root(self) -> Element:
        return self._nodes[0].content

    @property
    def ordering(self) -> list[Handle]:
        return [node.handle for node in self._nodes]

    @property
    def lineages(self) -> dict[Handle, tuple[OrderingIndex, Lineage]]:
        return {node.handle: (node.index, node.lineage) for node in self._nodes}

    def index_of(self, handle: Handle) -> OrderingIndex | None:
        return self._index.get(handle)

    def element(self, index: OrderingIndex) -> Element:
        return self._node(index).content

    def lineage_of(self, index: OrderingIndex) -> Lineage:
        return self._node(index).lineage

    def parents_of(self, index: OrderingIndex) -> list[OrderingIndex]:
        return list(self._node(index).parents)

    def back_edges(self, index: OrderingIndex) -> list[tuple[OrderingIndex, Operation]]:
        return list(self._node(index).children)

    def _node(self, index: OrderingIndex) -> Ancestor:
        if not 0 <= index < len(self._nodes):
            raise IndexError(f"No ancestor with ordering index {index}")
        return self._nodes[index]

    # ------------------------------------------------------------------
    # Growth
    # ------------------------------------------------------------------

    def merge_new_parents(self, handle: Handle, incoming_parents: Sequence[Task]) -> MergeResult:
        """Fold a fetched list of parents of ``handle`` into the tree.

        Known parents only gain a back-edge to ``handle``; unknown ones become
        new nodes above it.
        """
        child_index = self._index.get(handle)
        if child_index is None:
            logger.warning("Dropping %d parents of %s: not in graph", len(incoming_parents), handle)
            return MergeResult(status=MergeStatus.NOT_FOUND, target=handle)

        child = self._nodes[child_index]
        created: list[OrderingIndex] = []
        linked: list[OrderingIndex] = []

        for parent in incoming_parents:
            existing = self._index.get(parent.handle)
            if existing is not None:
                if self._nodes[existing].add_child(child_index, parent.operation):
                    linked.append(existing)
                continue

            index = len(self._nodes)
            node = Ancestor(
                content=self._element_factory(parent.handle),
                index=index,
                lineage=(*child.lineage, len(child.parents)),
                children=[(child_index, parent.operation)],
            )
            self._nodes.append(node)
            self._index[parent.handle] = index
            child.parents.append(index)
            created.append(index)

        logger.debug(
            "Merged parents of %s: %d new, %d linked, %d total",
            handle,
            len(created),
            len(linked),
            len(self._nodes),
        )
        return MergeResult(
            status=MergeStatus.MERGED,
            target=handle,
            created=tuple(created),
            linked=tuple(linked),
        )

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def get_draw_parameters(self, index: OrderingIndex) -> DrawParameters:
        """Position and scale of a node, derived from the current tree shape.

        Each generation splits its child's slot evenly between siblings:

            |       0       |       1       |       2       |
            |   0   |   1   |   0   |   1   |

        Linear in the depth of the node.
        """
        lineage = self._node(index).lineage

        # Start one step below the origin so that the root lands on (0, 0)
        scale = 1.0
        x, y = 0.0, -scale * Y_SCALE
        generation: list[OrderingIndex] = [0]
        for slot in lineage:
            siblings = len(generation)
            scale /= siblings
            y += scale * Y_SCALE
            x += scale * (slot - siblings * 0.5 + 0.5)
            generation = self._nodes[generation[slot]].parents

        return DrawParameters(Point(x, y), scale)

    def element_bounds(self, index: OrderingIndex) -> Bounds:
        return self.renderer.bounds(self.element(index), self.get_draw_parameters(index))

    def bounds(self) -> Bounds:
        """Plot-space box containing every element."""
        result = self.element_bounds(0)
        for index in range(1, len(self._nodes)):
            result = result.merge(self.element_bounds(index))
        return result

    def arrows(self) -> list[Arrow]:
        arrows = []
        for node in self._nodes:
            origin_params = self.get_draw_parameters(node.index)
            origin_box = self.renderer.bounds(node.content, origin_params)
            for child_index, operation in node.children:
                if child_index == node.index:
                    origin = Point(origin_box.max.x, origin_box.center.y)
                    direction = ArrowDirection.RIGHT
                else:
                    origin = Point(origin_box.center.x, origin_box.min.y)
                    direction = ArrowDirection.DOWN
                target_params = self.get_draw_parameters(child_index)
                target_box = self.renderer.bounds(self.element(child_index), target_params)
                arrows.append(
                    Arrow(
                        parent=node.index,
                        child=child_index,
                        operation=operation,
                        origin=origin,
                        origin_scale=origin_params.scale,
                        direction=direction,
                        target=Point(target_box.center.x, target_box.max.y),
                        target_scale=target_params.scale,
                    )
                )
        return arrows

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------

    def find_closest(self, point: Point, transform: PlotTransform) -> ClosestElem | None:
        """Closest element to a screen-space point, by squared distance to its box.

        A linear scan; graphs are explored by hand and stay small.
        """
        closest: ClosestElem | None = None
        for index in range(len(self._nodes)):
            rect = transform.screen_bounds(self.element_bounds(index))
            dist_sq = rect.distance_sq(point)
            if closest is None or dist_sq < closest.dist_sq:
                closest = ClosestElem(index=index, dist_sq=dist_sq)
        return closest

    def handle_nearby_click(
        self,
        point: Point,
        closest: ClosestElem,
        on_match: Callable[[Handle], object],
    ) -> bool:
        """Call ``on_match`` if a plot-space click landed inside ``closest``.

        Returns:
            True if the click hit the element and ``on_match`` was called
        """
        if not 0 <= closest.index < len(self._nodes):
            logger.error("Handling a click near to an element whose index no longer exists")
            return False

        if not self.element_bounds(closest.index).contains(point):
            return False

        handle = self._nodes[closest.index].handle
        logger.info("Requesting parents of %s", handle)
        on_match(handle)
        return True
