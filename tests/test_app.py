"""
Tests for application wiring.
"""

from fastapi.testclient import TestClient

from flashstudy.config import Settings
from flashstudy.main import create_app


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "study_sessions": 0}


def test_create_app_uses_given_settings():
    settings = Settings(app_name="Study Test", study_max_sessions_per_user=1)
    app = create_app(settings)

    assert app.state.study_store.max_sessions_per_user == 1
    assert TestClient(app).get("/").json()["name"] == "Study Test"
