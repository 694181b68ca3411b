# tests/conftest.py
import os

# in-memory db for the whole session; must be set before the app is imported
os.environ.setdefault("PROPEVAL_DB_URI", "sqlite://")

import pytest
from fastapi.testclient import TestClient

from propeval.api.http import app  # ensures imports resolve; run tests from repo root


@pytest.fixture(scope="session")
def client():
    return TestClient(app)
