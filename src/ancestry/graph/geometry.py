"""Plot geometry shared by the ancestry graph and whatever draws it.

Plot space has y pointing up (parents render above their children); screen
space has y pointing down. A PlotTransform maps between the two and a
Renderer decides how large an element's box is at a given draw position.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ancestry.graph.element import Element


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class DrawParameters:
    """Where an element is drawn and how much it is scaled."""

    position: Point
    scale: float


@dataclass(frozen=True, slots=True)
class ClosestElem:
    """Result of a nearest-element search, in flat ordering indices."""

    index: int
    dist_sq: float


@dataclass(frozen=True, slots=True)
class Bounds:
    """Axis aligned box given by its minimum and maximum corners."""

    min: Point
    max: Point

    @classmethod
    def around(cls, center: Point, width: float, height: float) -> Bounds:
        half_w, half_h = width / 2, height / 2
        return cls(
            Point(center.x - half_w, center.y - half_h),
            Point(center.x + half_w, center.y + half_h),
        )

    @property
    def center(self) -> Point:
        return Point((self.min.x + self.max.x) / 2, (self.min.y + self.max.y) / 2)

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y

    def contains(self, point: Point) -> bool:
        """True if ``point`` lies strictly inside the box."""
        return (
            self.min.x < point.x < self.max.x
            and self.min.y < point.y < self.max.y
        )

    def distance_sq(self, point: Point) -> float:
        """Squared distance from ``point`` to the box, 0 inside it."""
        dx = max(self.min.x - point.x, 0.0, point.x - self.max.x)
        dy = max(self.min.y - point.y, 0.0, point.y - self.max.y)
        return dx * dx + dy * dy

    def merge(self, other: Bounds) -> Bounds:
        return Bounds(
            Point(min(self.min.x, other.min.x), min(self.min.y, other.min.y)),
            Point(max(self.max.x, other.max.x), max(self.max.y, other.max.y)),
        )


class PlotTransform(Protocol):
    """Maps plot coordinates to screen coordinates."""

    def screen_from_plot(self, point: Point) -> Point: ...

    def screen_bounds(self, bounds: Bounds) -> Bounds: ...


@dataclass(frozen=True, slots=True)
class AffineTransform:
    """Uniform zoom plus offset, flipping the y axis for screen space.

    Attributes:
        zoom: Screen units per plot unit.
        origin: Screen position of the plot origin.
    """

    zoom: float = 1.0
    origin: Point = Point(0.0, 0.0)

    def screen_from_plot(self, point: Point) -> Point:
        return Point(
            self.origin.x + point.x * self.zoom,
            self.origin.y - point.y * self.zoom,
        )

    def plot_from_screen(self, point: Point) -> Point:
        return Point(
            (point.x - self.origin.x) / self.zoom,
            (self.origin.y - point.y) / self.zoom,
        )

    def screen_bounds(self, bounds: Bounds) -> Bounds:
        a = self.screen_from_plot(bounds.min)
        b = self.screen_from_plot(bounds.max)
        return Bounds(Point(min(a.x, b.x), min(a.y, b.y)), Point(max(a.x, b.x), max(a.y, b.y)))


class Renderer(Protocol):
    """Geometry half of a renderer: the plot-space box of an element."""

    def bounds(self, element: Element, params: DrawParameters) -> Bounds: ...


@dataclass(frozen=True, slots=True)
class TextBoxRenderer:
    """Boxes sized from the element's label, like monospace text.

    A label of ``n`` characters drawn at scale 1 is ``n * char_width`` wide
    and ``line_height`` tall, plus ``padding`` on every side. Everything
    scales linearly with the draw scale.
    """

    char_width: float = 0.012
    line_height: float = 0.03
    padding: float = 0.02

    def bounds(self, element: Element, params: DrawParameters) -> Bounds:
        width = len(element.label) * self.char_width + 2 * self.padding
        height = self.line_height + 2 * self.padding
        return Bounds.around(params.position, width * params.scale, height * params.scale)
