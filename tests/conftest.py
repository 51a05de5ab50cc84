import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure `src/` is on sys.path so `import addressbook` works without an editable install.
    root = Path(__file__).resolve().parent.parent
    src = root / "src"
    if src.exists():
        p = str(src)
        if p not in sys.path:
            sys.path.insert(0, p)


BASE_URL = "http://testserver/api/addressbook"


@pytest.fixture
def store():
    from addressbook.web.mock_api import InMemoryAddressBook

    return InMemoryAddressBook()


@pytest.fixture
def api_client(store):
    from fastapi.testclient import TestClient

    from addressbook.web.mock_api import create_app

    client = TestClient(create_app(store))
    yield client
    client.close()


@pytest.fixture
def repository(api_client):
    from addressbook.contacts.repository import ContactRepository

    return ContactRepository(BASE_URL, client=api_client)
