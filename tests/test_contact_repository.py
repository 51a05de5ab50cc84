import httpx
import pytest

from addressbook.contacts.models import Contact
from addressbook.contacts.repository import ContactRepository, RepositoryErrorKind

from conftest import BASE_URL


def _contact(**overrides) -> Contact:
    values = dict(
        first_name="Ann",
        last_name="Lee",
        email="a@x.com",
        phone="555-0100",
        company="Acme Corp",
        category="friend",
        address="1 Main St",
    )
    values.update(overrides)
    return Contact(**values)


def _repo_with(handler) -> ContactRepository:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ContactRepository(BASE_URL, client=client)


def test_create_then_list_includes_store_assigned_id(repository):
    draft = _contact()
    created = repository.create(draft)

    assert created is not None
    assert created.id is not None

    listed = repository.list_all()
    assert len(listed) == 1
    stored = listed[0]
    assert stored.id == created.id
    assert stored.to_payload() == draft.to_payload()


def test_update_then_get_returns_new_fields_same_id(repository):
    created = repository.create(_contact())
    changed = _contact(first_name="Anne", company="Globex", category="business")

    updated = repository.update(created.id, changed)
    assert updated is not None
    assert updated.id == created.id

    fetched = repository.get_by_id(created.id)
    assert fetched.id == created.id
    assert fetched.to_payload() == changed.to_payload()


def test_delete_then_get_returns_none(repository):
    created = repository.create(_contact())

    assert repository.delete(created.id) is True
    assert repository.get_by_id(created.id) is None
    assert repository.last_error.kind == RepositoryErrorKind.STATUS
    assert repository.last_error.status_code == 404


def test_missing_ids_degrade_to_sentinels(repository):
    assert repository.get_by_id(999) is None
    assert repository.update(999, _contact()) is None
    assert repository.delete(999) is False


def test_create_never_sends_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["body"] = request.read()
        return httpx.Response(201, json={"id": 5, "firstName": "Ann"})

    repo = _repo_with(handler)
    created = repo.create(_contact(id=42))

    assert seen["method"] == "POST"
    assert seen["url"] == BASE_URL
    assert b'"id"' not in seen["body"]
    assert created.id == 5
    assert created.last_name == ""


def test_create_accepts_200_and_update_rejects_201():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(200, json={"id": 1, "firstName": "Ann"})
        return httpx.Response(201, json={"id": 1, "firstName": "Ann"})

    repo = _repo_with(handler)
    assert repo.create(_contact()) is not None
    assert repo.update(1, _contact()) is None
    assert repo.last_error.kind == RepositoryErrorKind.STATUS


def test_delete_accepts_200():
    repo = _repo_with(lambda request: httpx.Response(200))
    assert repo.delete(3) is True
    assert repo.last_error is None


def test_list_non_success_status_returns_empty():
    repo = _repo_with(lambda request: httpx.Response(500, text="boom"))

    assert repo.list_all() == []
    assert repo.last_error.kind == RepositoryErrorKind.STATUS
    assert repo.last_error.status_code == 500


@pytest.mark.parametrize(
    "call, expected",
    [
        (lambda r: r.list_all(), []),
        (lambda r: r.get_by_id(1), None),
        (lambda r: r.create(Contact(first_name="A")), None),
        (lambda r: r.update(1, Contact(first_name="A")), None),
        (lambda r: r.delete(1), False),
    ],
)
def test_transport_failure_is_logged_not_raised(call, expected):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    repo = _repo_with(handler)
    assert call(repo) == expected
    assert repo.last_error.kind == RepositoryErrorKind.NETWORK
    assert isinstance(repo.last_error.cause, httpx.ConnectError)


def test_malformed_body_is_a_decode_failure():
    repo = _repo_with(lambda request: httpx.Response(200, text="<html>not json</html>"))

    assert repo.list_all() == []
    assert repo.last_error.kind == RepositoryErrorKind.DECODE
    assert repo.get_by_id(1) is None
    assert repo.last_error.kind == RepositoryErrorKind.DECODE


def test_list_requires_an_array():
    repo = _repo_with(lambda request: httpx.Response(200, json={"firstName": "Ann"}))
    assert repo.list_all() == []
    assert repo.last_error.kind == RepositoryErrorKind.DECODE


def test_last_error_is_cleared_by_next_success(repository):
    assert repository.get_by_id(1) is None
    assert repository.last_error is not None

    assert repository.list_all() == []
    assert repository.last_error is None


def test_search_filters_full_list(repository):
    repository.create(Contact(first_name="Ann", last_name="Lee", email="a@x.com", category="friend"))
    repository.create(Contact(first_name="Bo", last_name="Ng", email="b@x.com", company="Acme", category="business"))

    assert [c.first_name for c in repository.search("", "")] == ["Ann", "Bo"]
    assert [c.first_name for c in repository.search("ac", "")] == ["Bo"]
    assert repository.search("ac", "friend") == []


def test_item_urls_and_from_config():
    class Cfg:
        def get(self, key, default=None):
            return {"api.base_url": "http://example.test/api/addressbook/", "api.timeout_s": 2}.get(key, default)

    with ContactRepository.from_config(Cfg()) as repo:
        assert repo.base_url == "http://example.test/api/addressbook"
        assert repo._item_url(4) == "http://example.test/api/addressbook/4"
