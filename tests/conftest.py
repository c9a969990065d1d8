"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from results_service.index import create_app  # noqa: E402
from results_service.results.store import ResultStore  # noqa: E402


@pytest.fixture
def store():
    """A fresh, empty result store"""
    return ResultStore()


@pytest.fixture
def app(store):
    """Application wired to the ``store`` fixture, without sample data"""
    return create_app(store, seed_sample_data=False)


@pytest.fixture
def client(app):
    """Test client with the application lifespan running"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def add_result(client):
    """Post a result and return the created record"""

    def _add(regno, subject, marks):
        response = client.post(
            "/api/results", json={"regno": regno, "subject": subject, "marks": marks}
        )
        assert response.status_code == 201, response.text
        return response.json()["result"]

    return _add
