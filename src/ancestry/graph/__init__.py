"""Ancestry graph: append-only provenance tree with a deterministic layout.

Example:
    >>> from ancestry.graph import AncestorGraph, Element
    >>> from ancestry.handle import Operation, Task, decode
    >>> root = decode("d9-0-4-100000000000000")
    >>> graph = AncestorGraph(Element(root))
    >>> result = graph.merge_new_parents(root, [Task(decode("10-0-0-2400000000000000"), Operation.APPLY)])
    >>> result.created
    (1,)
"""

from ancestry.graph.ancestors import (
    Y_SCALE,
    Ancestor,
    AncestorGraph,
    Arrow,
    ArrowDirection,
    Lineage,
    MergeResult,
    MergeStatus,
    OrderingIndex,
)
from ancestry.graph.element import Element
from ancestry.graph.geometry import (
    AffineTransform,
    Bounds,
    ClosestElem,
    DrawParameters,
    PlotTransform,
    Point,
    Renderer,
    TextBoxRenderer,
)
from ancestry.graph.view import AncestryView, GraphState

__all__ = [
    "AffineTransform",
    "Ancestor",
    "AncestorGraph",
    "AncestryView",
    "Arrow",
    "ArrowDirection",
    "Bounds",
    "ClosestElem",
    "DrawParameters",
    "Element",
    "GraphState",
    "Lineage",
    "MergeResult",
    "MergeStatus",
    "OrderingIndex",
    "PlotTransform",
    "Point",
    "Renderer",
    "TextBoxRenderer",
    "Y_SCALE",
]
