"""Shared test fixtures."""

from __future__ import annotations

import math

import numpy as np
import pytest

from shapesmith.engine.context import ShapeState
from shapesmith.models.shape import Shape


# Sample shapes (host contract: top-left position, radians, camelCase props)

SQUARE = Shape(id="square", type="rectangle", x=0, y=0, props={"w": 100, "h": 100, "color": "blue"})

WIDE_RECT = Shape(id="wide", type="rectangle", x=50, y=20, props={"w": 200, "h": 50, "color": "red"})

ROTATED_RECT = Shape(
    id="tilted",
    type="rectangle",
    x=10,
    y=30,
    rotation=math.pi / 6,
    props={"w": 80, "h": 40},
)

CIRCLE = Shape(id="disc", type="circle", x=0, y=0, props={"r": 50, "color": "green"})

HEXAGON = Shape(id="hex", type="polygon", x=0, y=0, props={"w": 120, "h": 100, "sides": 6})

TRIANGLE = Shape(id="tri", type="triangle", x=0, y=0, props={"w": 100, "h": 80})

ZIGZAG_LINE = Shape(
    id="zig",
    type="line",
    x=10,
    y=10,
    props={"points": [{"x": 0, "y": 0}, {"x": 20, "y": 10}, {"x": 40, "y": 0}, {"x": 60, "y": 10}]},
)

BEZIER_BLOB = Shape(
    id="blob",
    type="bezier",
    x=0,
    y=0,
    props={
        "w": 100,
        "h": 100,
        "isClosed": True,
        "points": [
            {"x": 50, "y": 0, "cp1": {"x": 30, "y": 0}, "cp2": {"x": 70, "y": 0}},
            {"x": 100, "y": 50, "cp1": {"x": 100, "y": 30}, "cp2": {"x": 100, "y": 70}},
            {"x": 50, "y": 100, "cp1": {"x": 70, "y": 100}, "cp2": {"x": 30, "y": 100}},
            {"x": 0, "y": 50, "cp1": {"x": 0, "y": 70}, "cp2": {"x": 0, "y": 30}},
        ],
    },
)

TEXT = Shape(id="label", type="text", x=0, y=0, props={"text": "hello"})


# Sample paths

WAVY_OPEN = np.array(
    [(x, 10 * math.sin(x / 7.0) + (x % 3)) for x in range(0, 100, 4)],
    dtype=np.float64,
)

SQUARE_RING = np.array(
    [(0, 0), (50, 0), (100, 0), (100, 50), (100, 100), (50, 100), (0, 100), (0, 50)],
    dtype=np.float64,
)


@pytest.fixture
def square_state() -> ShapeState:
    return ShapeState.from_shapes([SQUARE])


@pytest.fixture
def two_shape_state() -> ShapeState:
    return ShapeState.from_shapes([SQUARE, WIDE_RECT])
