"""Tests for the HTTP API."""
import pytest
from fastapi.testclient import TestClient

from boardview.main import app, get_board


@pytest.fixture
def client(sample_board):
    app.dependency_overrides[get_board] = lambda: sample_board
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_board_info(client):
    response = client.get("/api/board/info")
    assert response.status_code == 200

    data = response.json()
    assert data["name"] == "sample"
    assert data["counts"]["components"] == 2
    assert data["counts"]["pins"] == 10
    assert data["counts"]["nets"] == 3
    assert data["bounds"]["width"] == pytest.approx(100.1)
    assert data["origin_offset"] == pytest.approx([50.0, 30.0])
    assert data["folded"] is False


def test_layers(client):
    layers = client.get("/api/layers").json()
    assert len(layers) == 30
    assert layers[0]["id"] == 31
    assert {"id": 28, "name": "Board Edges", "type": "outline"}.items() <= layers[-1].items()


def test_nets(client):
    nets = client.get("/api/nets").json()["nets"]
    assert [n["name"] for n in nets] == ["GND", "VCC", "NET7"]
    assert [n["pin_count"] for n in nets] == [2, 1, 0]


def test_net_detail(client):
    """Test that a net lists its pins in board coordinates."""
    data = client.get("/api/net/2").json()
    assert data["name"] == "VCC"
    assert data["trace_count"] == 1
    assert data["via_count"] == 1

    (pin,) = data["pins"]
    assert pin["component"] == "R1"
    assert pin["name"] == "1"
    assert pin["x"] == pytest.approx(-30.8)
    assert pin["y"] == pytest.approx(0.0)
    assert pin["reading"] == "0.512"


def test_net_not_found(client):
    assert client.get("/api/net/999").status_code == 404


def test_components(client):
    components = client.get("/api/components").json()
    assert [c["reference"] for c in components] == ["R1", "U1"]
    assert components[0]["value"] == "10k"
    assert components[1]["pin_count"] == 8


def test_component_detail(client):
    data = client.get("/api/component/R1").json()
    assert data["footprint"] == "R0603"
    assert data["width"] == pytest.approx(3.0)
    assert data["description"].startswith("Component R1 10k")
    assert [p["orientation"] for p in data["pins"]] == ["vertical", "vertical"]
    assert [p["net_name"] for p in data["pins"]] == ["VCC", "GND"]


def test_component_not_found(client):
    assert client.get("/api/component/Q99").status_code == 404


def test_svg(client):
    response = client.get("/api/svg")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text.startswith("<svg")


def test_svg_layer_filter(client):
    response = client.get("/api/svg", params={"layers": "28,31"})
    assert 'id="layer-28"' in response.text
    assert 'id="layer-1"' not in response.text


def test_svg_bad_layers(client):
    assert client.get("/api/svg", params={"layers": "1,top"}).status_code == 400


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
