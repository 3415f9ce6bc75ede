import math

import pytest
from fastapi.testclient import TestClient

from curvecompress.main import app

client = TestClient(app)


@pytest.fixture
def sine_payload():
    n = 100
    return [{"time": i / (n - 1), "value": math.sin(2 * math.pi * i / (n - 1))} for i in range(n)]


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": "0.1.0"}


def test_compress_endpoint(sine_payload):
    response = client.post("/compress", json={"samples": sine_payload, "tolerance": 0.02, "method": "rdp_bezier"})

    assert response.status_code == 200
    body = response.json()
    assert body["original_count"] == 100
    assert body["compressed_count"] == len(body["segments"])
    assert body["compression_ratio"] == pytest.approx(body["compressed_count"] / 100)
    assert body["elapsed_ms"] is not None
    assert all(s["kind"] == "bezier" for s in body["segments"])
    assert "in_tangent" in body["segments"][0]
    assert "compressed_samples" not in body


def test_compress_endpoint_fixed_bspline(sine_payload):
    response = client.post("/compress", json={
        "samples": sine_payload,
        "method": "bspline_direct",
        "mode": "fixed_control_points",
        "fixed_control_point_count": 6,
        "include_samples": True,
    })

    assert response.status_code == 200
    body = response.json()
    assert body["compressed_count"] == 5
    assert len(body["segments"][0]["control_points"]) == 2
    assert len(body["compressed_samples"]) == 100


def test_compress_endpoint_custom_weights(sine_payload):
    response = client.post("/compress", json={
        "samples": sine_payload,
        "method": "rdp_linear",
        "data_type": "custom",
        "importance_weights": {"curvature": 1.0, "change_rate": 0.0, "local_variance": 0.0, "extreme_value": 0.0},
    })
    assert response.status_code == 200


@pytest.mark.parametrize("payload", [
    {"tolerance": 0},
    {"tolerance": 2.0},
    {"importance_threshold": -1},
    {"fixed_control_point_count": 1},
    {"importance_weights": {"curvature": -1.0}},
    {"importance_weights": {"changeRate": 0.3}},
])
def test_compress_endpoint_rejects_bad_configuration(sine_payload, payload):
    response = client.post("/compress", json={"samples": sine_payload, **payload})
    assert response.status_code == 422


def test_compress_endpoint_empty_samples():
    response = client.post("/compress", json={"samples": []})
    assert response.status_code == 200
    assert response.json()["original_count"] == 0
    assert response.json()["segments"] == []


def test_estimate_endpoint(sine_payload):
    response = client.post("/estimate", json={"samples": sine_payload, "tolerance": 0.02, "max_points": 20})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"Elbow", "Curvature", "Entropy", "DouglasPeucker", "TotalVariation", "ErrorBound", "Statistical"}
    assert body["Elbow"]["method"] == "Elbow Method"
    assert 2 <= body["TotalVariation"]["optimal_points"] <= 20


def test_estimate_endpoint_rejects_bad_bounds(sine_payload):
    response = client.post("/estimate", json={"samples": sine_payload, "min_points": 10, "max_points": 5})
    assert response.status_code == 422


@pytest.mark.parametrize("bounds", [{"min_points": 0}, {"max_points": 0}])
def test_estimate_endpoint_rejects_explicit_zero(sine_payload, bounds):
    response = client.post("/estimate", json={"samples": sine_payload, **bounds})
    assert response.status_code == 422
