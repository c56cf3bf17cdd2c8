"""ShapeState: the immutable instance collection flowing through array processors.

Each processor returns a new ShapeState; instances are never edited in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any

from shapesmith.models.shape import Shape, shape_dimensions
from shapesmith.utils.transform_math import center_from_corner


@dataclass(frozen=True)
class Transform:
    """World placement of one instance. Rotation in radians, pivot at the corner."""

    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0

    def to_dict(self) -> dict[str, float]:
        return {
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
            "scaleX": self.scale_x,
            "scaleY": self.scale_y,
        }


@dataclass
class ShapeInstance:
    """One positioned copy of a shape."""

    shape: Shape
    transform: Transform
    index: int = 0
    # Provenance: arrayIndex, sourceInstance, isFirstClone, isGroupClone, ...
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> tuple[float, float]:
        """Visual (scaled) width and height."""
        w, h = shape_dimensions(self.shape)
        return (w * self.transform.scale_x, h * self.transform.scale_y)

    @property
    def center(self) -> tuple[float, float]:
        """Visual center, accounting for the corner-anchored rotation."""
        w, h = self.size
        return center_from_corner(
            (self.transform.x, self.transform.y), w, h, self.transform.rotation
        )

    def corners(self) -> list[tuple[float, float]]:
        """The four rotated corners of the instance's box."""
        w, h = self.size
        cos_t = math.cos(self.transform.rotation)
        sin_t = math.sin(self.transform.rotation)
        x0, y0 = self.transform.x, self.transform.y
        return [
            (x0 + lx * cos_t - ly * sin_t, y0 + lx * sin_t + ly * cos_t)
            for lx, ly in ((0.0, 0.0), (w, 0.0), (w, h), (0.0, h))
        ]

    def derive(
        self,
        transform: Transform,
        metadata: dict[str, Any] | None = None,
        shape: Shape | None = None,
    ) -> ShapeInstance:
        """New instance with an owned shape copy and merged metadata."""
        merged = dict(self.metadata)
        if metadata:
            merged.update(metadata)
        return ShapeInstance(
            shape=(shape or self.shape).model_copy(deep=True),
            transform=transform,
            index=self.index,
            metadata=merged,
        )


@dataclass(frozen=True)
class ShapeState:
    instances: tuple[ShapeInstance, ...] = ()

    def __len__(self) -> int:
        return len(self.instances)

    @classmethod
    def from_shapes(cls, shapes: list[Shape]) -> ShapeState:
        """Initial state: one instance per shape, transform taken from the shape."""
        return cls.of([
            ShapeInstance(
                shape=s.model_copy(deep=True),
                transform=Transform(x=s.x, y=s.y, rotation=s.rotation),
                metadata={},
            )
            for s in shapes
        ])

    @classmethod
    def of(cls, instances: list[ShapeInstance]) -> ShapeState:
        """Build a state, reassigning contiguous indices in order."""
        return cls(tuple(replace(inst, index=i) for i, inst in enumerate(instances)))


@dataclass(frozen=True)
class GroupContext:
    """Treat the whole input state as one rigid group."""

    group_top_left: tuple[float, float]
    group_width: float
    group_height: float
    # Live placement of the group; None when the group hasn't moved
    group_transform: Transform | None = None

    @property
    def center(self) -> tuple[float, float]:
        return (
            self.group_top_left[0] + self.group_width / 2,
            self.group_top_left[1] + self.group_height / 2,
        )

    @classmethod
    def from_state(
        cls,
        state: ShapeState,
        group_transform: Transform | None = None,
    ) -> GroupContext:
        """Group context spanning the rotated boxes of every instance."""
        b = collective_bounds(state)
        return cls(
            group_top_left=(b.x, b.y),
            group_width=b.width,
            group_height=b.height,
            group_transform=group_transform,
        )


@dataclass(frozen=True)
class CollectiveBounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


def collective_bounds(state: ShapeState) -> CollectiveBounds:
    """Axis-aligned box around every instance's rotated, scaled box."""
    if not state.instances:
        return CollectiveBounds(0.0, 0.0, 0.0, 0.0)
    xs: list[float] = []
    ys: list[float] = []
    for inst in state.instances:
        for cx, cy in inst.corners():
            xs.append(cx)
            ys.append(cy)
    return CollectiveBounds(
        x=min(xs),
        y=min(ys),
        width=max(xs) - min(xs),
        height=max(ys) - min(ys),
    )
