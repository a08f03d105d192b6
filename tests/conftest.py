import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

import uuid
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from linkshelf.core.config import settings
from linkshelf.main import create_app
from linkshelf.services.fetch_service import FetchError


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    """
    Aucun appel réseau pendant les tests:
    - fetch des pages -> FetchError (à re-patcher dans le test si besoin)
    - pas de clé Gemini -> l'IA est dégradée
    """
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")
    with patch("linkshelf.services.metadata_service.fetch_html", side_effect=FetchError("network disabled in tests")) as mock_fetch:
        yield mock_fetch


@pytest.fixture
def app(tmp_path):
    # une BD SQLite neuve par test
    return create_app(f"sqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def client(app):
    """Client de test FastAPI (le with déclenche open/close de la BD)"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(client):
    """Session DB pour les tests"""
    session = client.app.state.db.session()
    yield session
    session.close()


@pytest.fixture
def create_user(client):
    """Crée un user via /auth/register et retourne (user_id, headers)"""
    def _create_user(email=None, password="password123"):
        email = email or f"user{uuid.uuid4().hex[:8]}@test.com"
        response = client.post(
            "/auth/register",
            json={"email": email, "name": "Test User", "password": password}
        )
        assert response.status_code == 201, response.json()
        data = response.json()
        return data["user"]["id"], {"Authorization": f"Bearer {data['accessToken']}"}

    return _create_user


@pytest.fixture
def auth_headers(create_user):
    _, headers = create_user()
    return headers
