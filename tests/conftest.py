# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from staysearch.catalog import SAMPLE_LISTINGS, get_catalog
from staysearch.main import app
from staysearch.schemas import Listing
from staysearch.services import SearchHistoryStore, get_history_store


@pytest.fixture(scope="session")
def catalog():
    # built straight from the fixture so a CATALOG_PATH in the environment can't leak in
    return tuple(Listing.model_validate(item) for item in SAMPLE_LISTINGS)


@pytest.fixture
def history():
    return SearchHistoryStore(capacity=10)


@pytest.fixture
def client(catalog, history):
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_history_store] = lambda: history
    yield TestClient(app)
    app.dependency_overrides.clear()
