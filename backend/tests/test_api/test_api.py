"""Tests for API endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from toolpath.main import app
from tests.conftest import NESTED_GROUPS_SVG, SHAPES_SVG, VIEWBOX_ONLY_SVG, svg_doc


client = TestClient(app)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"


def test_convert_view_box_only():
    response = client.post("/api/convert", json={"svg": VIEWBOX_ONLY_SVG})
    assert response.status_code == 200
    data = response.json()
    assert len(data["draws"]) == 1
    draw = data["draws"][0]
    assert draw["label"] == "svg > rect"
    assert draw["transform"] == [1.0, 0.0, 0.0, -1.0, 0.0, 50.0]
    assert draw["segments"][0] == {"kind": "move", "x": 0.0, "y": 0.0}
    assert draw["segments"][-1] == {"kind": "close"}
    assert data["diagnostics"] == []
    assert data["processing_time_ms"] >= 0


def test_convert_reports_diagnostics():
    response = client.post("/api/convert", json={"svg": SHAPES_SVG})
    assert response.status_code == 200
    data = response.json()
    assert len(data["draws"]) == 7
    assert data["diagnostics"] == [{"severity": "info", "message": "Unknown node: text", "tag": "text"}]


def test_convert_with_extra_attribute():
    response = client.post(
        "/api/convert",
        json={"svg": NESTED_GROUPS_SVG, "extra_attribute_name": "data-name"},
    )
    assert response.status_code == 200
    assert response.json()["draws"][0]["label"] == "svg > g#grp > rect#r1=>Frame"


def test_convert_with_width_override():
    response = client.post("/api/convert", json={"svg": VIEWBOX_ONLY_SVG, "width": "200"})
    assert response.status_code == 200
    assert response.json()["draws"][0]["transform"] == [2.0, 0.0, 0.0, -2.0, 0.0, 100.0]


def test_convert_bad_override():
    response = client.post("/api/convert", json={"svg": VIEWBOX_ONLY_SVG, "height": "tall"})
    assert response.status_code == 422
    assert "height" in response.json()["detail"]


def test_convert_malformed_transform():
    response = client.post("/api/convert", json={"svg": svg_doc('<g transform="scale(1,2,3)"/>')})
    assert response.status_code == 422


def test_convert_malformed_xml():
    response = client.post("/api/convert", json={"svg": "<svg"})
    assert response.status_code == 422


def test_convert_rejects_non_positive_dpi():
    response = client.post("/api/convert", json={"svg": VIEWBOX_ONLY_SVG, "dpi": 0})
    assert response.status_code == 422
