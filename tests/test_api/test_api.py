"""Tests for API endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from shapesmith.main import app
from tests.conftest import SQUARE, WIDE_RECT, ZIGZAG_LINE


client = TestClient(app)


def _shape_json(shape) -> dict:
    return shape.model_dump()


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["modifiers_registered"] == 9


def test_modifiers_listing():
    response = client.get("/api/modifiers")
    assert response.status_code == 200
    data = response.json()
    ids = [m["id"] for m in data]
    assert "circular-array" in ids and "noise-offset" in ids
    circular = next(m for m in data if m["id"] == "circular-array")
    assert "alignToTangent" in circular["settings_schema"]["properties"]


def test_modify_circular():
    response = client.post("/api/modify", json={
        "shapes": [_shape_json(SQUARE)],
        "steps": [{"id": "circular-array", "settings": {"count": 4, "radius": 100}}],
    })
    assert response.status_code == 200
    data = response.json()
    assert len(data["instances"]) == 4
    assert data["steps_completed"] == 1
    first = data["instances"][0]
    assert abs(first["transform"]["x"]) < 1e-9
    assert first["transform"]["scaleX"] == 1.0
    assert first["metadata"]["isFirstClone"] is True


def test_modify_stack_with_path_step():
    response = client.post("/api/modify", json={
        "shapes": [_shape_json(ZIGZAG_LINE)],
        "steps": [
            {"id": "linear-array", "settings": {"count": 2}},
            {"id": "subdivide", "settings": {"iterations": 1}},
        ],
    })
    assert response.status_code == 200
    data = response.json()
    assert len(data["instances"]) == 2
    assert all(len(i["shape"]["props"]["points"]) == 7 for i in data["instances"])


def test_modify_invalid_settings_skipped():
    response = client.post("/api/modify", json={
        "shapes": [_shape_json(SQUARE)],
        "steps": [{"id": "grid-array", "settings": {"rows": 0}}],
    })
    data = response.json()
    assert data["steps_skipped"] == 1
    assert len(data["instances"]) == 1


def test_modify_unknown_modifier_404():
    response = client.post("/api/modify", json={
        "shapes": [_shape_json(SQUARE)],
        "steps": [{"id": "spiral-array"}],
    })
    assert response.status_code == 404


def test_modify_group_mode():
    response = client.post("/api/modify", json={
        "shapes": [_shape_json(SQUARE), _shape_json(WIDE_RECT)],
        "steps": [{"id": "linear-array", "settings": {"count": 3}}],
        "group": {},
    })
    data = response.json()
    assert len(data["instances"]) == 6
    assert data["instances"][2]["metadata"]["isGroupClone"] is True


def test_path_from_raw_points():
    response = client.post("/api/path", json={
        "modifier": "subdivide",
        "path": {"type": "points", "data": [[0, 0], [10, 0]], "isClosed": False},
    })
    assert response.status_code == 200
    data = response.json()
    assert data["bounds_changed"] is True
    assert data["path"]["data"] == [[0, 0], [5, 0], [10, 0]]


def test_path_from_shape_upgrades():
    response = client.post("/api/path", json={
        "modifier": "noise-offset",
        "settings": {"amplitude": 4, "seed": 9},
        "shape": _shape_json(SQUARE),
    })
    data = response.json()
    assert data["shape"]["type"] == "bezier"
    assert data["shape"]["meta"]["convertedFromType"] == "rectangle"


def test_path_requires_input():
    response = client.post("/api/path", json={"modifier": "smooth"})
    assert response.status_code == 422


def test_path_unknown_modifier():
    response = client.post("/api/path", json={"modifier": "twist", "path": {"type": "points", "data": []}})
    assert response.status_code == 404


def test_boolean_union():
    response = client.post("/api/boolean", json={
        "shapes": [_shape_json(SQUARE), _shape_json(WIDE_RECT)],
        "operation": "union",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["shape"]["id"] == "square:boolean"
    assert data["shape"]["props"]["w"] == 250
    assert data["style_source_id"] == "square"
    assert data["cache_size"] >= 2


def test_boolean_rejects_empty_list():
    response = client.post("/api/boolean", json={"shapes": [], "operation": "union"})
    assert response.status_code == 422


def test_boolean_cache_clear():
    client.post("/api/boolean", json={"shapes": [_shape_json(SQUARE)]})
    response = client.delete("/api/boolean/cache")
    assert response.status_code == 200
    assert response.json()["cleared"] >= 1
    assert client.delete("/api/boolean/cache").json()["cleared"] == 0


def test_modify_lsystem_growth_limit_skipped():
    response = client.post("/api/modify", json={
        "shapes": [_shape_json(SQUARE)],
        "steps": [{"id": "lsystem", "settings": {"iterations": 10, "branches": [-40, -20, 0, 20, 40]}}],
    })
    data = response.json()
    assert data["steps_skipped"] == 1
    assert len(data["instances"]) == 1
