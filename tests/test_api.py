import json

import pytest

from backend.api import create_app


@pytest.fixture
def client(tmp_path):
    app = create_app(
        preferences_path=tmp_path / "preferences.json",
        plugins_path=tmp_path / "plugins.json",
    )
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_convert_with_explicit_system(client):
    response = client.post(
        "/api/convert",
        json={"kind": "temperature", "value": 180, "system": "imperial"},
    )
    assert response.status_code == 200
    assert response.get_json() == {
        "value": 356,
        "unit": "°F",
        "text": "356°F",
        "label": "356 degrees Fahrenheit",
    }


def test_convert_uses_saved_system(client):
    client.post("/api/preferences", json={"system": "imperial"})
    response = client.post("/api/convert", json={"kind": "length", "value": "15"})
    assert response.status_code == 200
    assert response.get_json()["text"] == "5.9 in"


def test_convert_non_finite_value(client):
    response = client.post("/api/convert", json={"kind": "weight", "value": "nan"})
    assert response.status_code == 200
    body = response.get_json()
    assert body["value"] is None
    assert body["text"] == "NaN g"


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"value": 1}, "kind is required"),
        ({"kind": "weight"}, "Value is required"),
        ({"kind": "weight", "value": "heaps"}, "must be a number"),
        ({"kind": "weight", "value": True}, "must be a number"),
        ({"kind": "speed", "value": 1}, "Unknown measurement kind"),
        ({"kind": "weight", "value": 1, "system": "roman"}, "Invalid system"),
    ],
)
def test_convert_bad_requests(client, payload, message):
    response = client.post("/api/convert", json=payload)
    assert response.status_code == 400
    assert message in response.get_json()["error"]


def test_render_text(client):
    response = client.post(
        "/api/render",
        json={"markup": "Butter (<Weight value={15} />)", "system": "metric"},
    )
    assert response.status_code == 200
    assert response.get_json() == {
        "rendered": "Butter (15 g)",
        "system": "metric",
        "format": "text",
    }


def test_render_html(client):
    response = client.post(
        "/api/render",
        json={"markup": "<Volume value={2000} />", "system": "imperial", "format": "html"},
    )
    assert response.status_code == 200
    assert response.get_json()["rendered"] == (
        '<span aria-label="2.1 quarts" title="2.1 quarts">2.1 qt</span>'
    )


def test_render_bad_requests(client):
    assert client.post("/api/render", json={}).status_code == 400
    response = client.post("/api/render", json={"markup": "x", "format": "pdf"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid format"}

    response = client.post("/api/render", json={"markup": "x", "format": ["html"]})
    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid format"}


def test_preferences_round_trip(client):
    response = client.get("/api/preferences")
    assert response.status_code == 200
    assert response.get_json()["system"] == "metric"
    assert response.get_json()["temperature_unit"] == "celsius"

    response = client.post(
        "/api/preferences", json={"system": "imperial", "region": "UK"}
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["temperature_unit"] == "fahrenheit"
    assert body["region_label"] == "United Kingdom"

    assert client.get("/api/preferences").get_json() == body


def test_preferences_rejects_invalid_values(client):
    response = client.post("/api/preferences", json={"language": "tlh"})
    assert response.status_code == 400
    assert "Invalid language" in response.get_json()["error"]

    response = client.post("/api/preferences", data="[]", content_type="application/json")
    assert response.status_code == 400


def test_plugins_lists_enabled_only(client, tmp_path):
    assert client.get("/api/plugins").get_json()["plugins"][0]["id"] == (
        "sequential-thinking"
    )

    (tmp_path / "plugins.json").write_text(
        json.dumps(
            [
                {"id": "on", "name": "On", "command": "npx"},
                {"id": "off", "name": "Off", "command": "npx", "enabled": False},
            ]
        ),
        encoding="utf-8",
    )
    plugins = client.get("/api/plugins").get_json()["plugins"]
    assert [p["id"] for p in plugins] == ["on"]


def test_unknown_route_is_404(client):
    assert client.get("/api/nothing").status_code == 404
