"""Geometry of page elements: points, quads, box models and viewports."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def _area(self, other: Point) -> float:
        return (self.x * other.y - other.x * self.y) / 2.0

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __truediv__(self, divisor: float) -> Point:
        return Point(self.x / divisor, self.y / divisor)

    def to_mouse_event(self) -> dict[str, Any]:
        """Params of a left single mouse press at this point."""
        return {
            "type": "mousePressed",
            "x": self.x,
            "y": self.y,
            "button": "left",
            "clickCount": 1,
        }


@dataclass(frozen=True)
class ElementQuad:
    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point

    @classmethod
    def from_quad(cls, quad: Sequence[float]) -> ElementQuad:
        """Build from the eight coordinates of a protocol quad."""
        if len(quad) != 8:
            raise ValueError(f"a quad needs 8 coordinates, got {len(quad)}")
        tl_x, tl_y, tr_x, tr_y, br_x, br_y, bl_x, bl_y = quad
        return cls(
            Point(tl_x, tl_y), Point(tr_x, tr_y), Point(br_x, br_y), Point(bl_x, bl_y)
        )

    def _corners(self) -> tuple[Point, Point, Point, Point]:
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    def quad_center(self) -> Point:
        corners = self._corners()
        return Point(
            sum(p.x for p in corners) / 4.0, sum(p.y for p in corners) / 4.0
        )

    def quad_area(self) -> float:
        """Sum of the directed areas of adjacent triangles, as a positive value."""
        corners = self._corners()
        area = sum(
            corner._area(following)
            for corner, following in zip(corners, corners[1:] + corners[:1])
        )
        return abs(area)

    def height(self) -> float:
        return self.bottom_left.y - self.top_left.y

    def width(self) -> float:
        return self.top_right.x - self.top_left.x

    def aspect_ratio(self) -> float:
        """The width divided by the height."""
        return self.width() / self.height()

    def most_left(self) -> float:
        return min(p.x for p in self._corners())

    def most_right(self) -> float:
        return max(p.x for p in self._corners())

    def most_top(self) -> float:
        return min(p.y for p in self._corners())

    def most_bottom(self) -> float:
        return max(p.y for p in self._corners())

    def strictly_above(self, other: ElementQuad) -> bool:
        return self.most_bottom() < other.most_top()

    def above(self, other: ElementQuad) -> bool:
        return self.most_bottom() <= other.most_top()

    def strictly_below(self, other: ElementQuad) -> bool:
        return self.most_top() > other.most_bottom()

    def below(self, other: ElementQuad) -> bool:
        return self.most_top() >= other.most_bottom()

    def strictly_left_of(self, other: ElementQuad) -> bool:
        return self.most_right() < other.most_left()

    def left_of(self, other: ElementQuad) -> bool:
        return self.most_right() <= other.most_left()

    def strictly_right_of(self, other: ElementQuad) -> bool:
        return self.most_left() > other.most_right()

    def right_of(self, other: ElementQuad) -> bool:
        return self.most_left() >= other.most_right()

    def within_horizontal_bounds_of(self, other: ElementQuad) -> bool:
        return (
            self.most_left() >= other.most_left()
            and self.most_right() <= other.most_right()
        )

    def within_vertical_bounds_of(self, other: ElementQuad) -> bool:
        return (
            self.most_top() >= other.most_top()
            and self.most_bottom() <= other.most_bottom()
        )

    def within_bounds_of(self, other: ElementQuad) -> bool:
        return self.within_horizontal_bounds_of(other) and self.within_vertical_bounds_of(
            other
        )


@dataclass(frozen=True)
class PageViewport:
    """A clip region of the page."""

    x: float
    y: float
    width: float
    height: float
    scale: float = 1.0


def _viewport_of(quad: ElementQuad) -> PageViewport:
    return PageViewport(
        x=quad.top_left.x,
        y=quad.top_left.y,
        width=quad.width(),
        height=quad.height(),
        scale=1.0,
    )


@dataclass(frozen=True)
class BoxModel:
    content: ElementQuad
    padding: ElementQuad
    border: ElementQuad
    margin: ElementQuad
    width: int
    height: int

    def content_viewport(self) -> PageViewport:
        return _viewport_of(self.content)

    def padding_viewport(self) -> PageViewport:
        return _viewport_of(self.padding)

    def border_viewport(self) -> PageViewport:
        return _viewport_of(self.border)

    def margin_viewport(self) -> PageViewport:
        return _viewport_of(self.margin)


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float