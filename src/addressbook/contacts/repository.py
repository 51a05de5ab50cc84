"""
Remote address book repository.

Maps the five CRUD operations onto HTTP/JSON calls against the address book
API and converts contacts to and from their wire form. Every failure
(transport, unexpected status, unreadable body) is logged and collapsed to
a "no data" value: None, an empty list, or False. The most recent failure is
kept on `last_error` with its kind and cause.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Collection, List, Optional

import httpx
from loguru import logger

from addressbook.contacts.models import Contact
from addressbook.contacts.search import filter_contacts


DEFAULT_BASE_URL = "http://localhost:8081/api/addressbook"
DEFAULT_TIMEOUT_S = 10.0


class RepositoryErrorKind(str, Enum):
    """Why a repository call produced no data."""
    NETWORK = "network"
    STATUS = "status"
    DECODE = "decode"


@dataclass
class RepositoryError:
    kind: RepositoryErrorKind
    message: str
    status_code: Optional[int] = None
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.kind.value}: {self.message} (status={self.status_code})"
        return f"{self.kind.value}: {self.message}"


@dataclass
class RepositoryResult:
    """Outcome of a single HTTP exchange."""

    success: bool
    value: Any = None
    error: Optional[RepositoryError] = None

    @classmethod
    def ok(cls, value: Any) -> "RepositoryResult":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: RepositoryError) -> "RepositoryResult":
        return cls(success=False, error=error)


def _parse_contact(response: httpx.Response) -> Contact:
    return Contact.from_payload(response.json())


def _parse_contact_list(response: httpx.Response) -> List[Contact]:
    data = response.json()
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array, got {type(data).__name__}")
    return [Contact.from_payload(item) for item in data]


class ContactRepository:
    """
    HTTP client for the remote address book.

    | list   | GET    | /addressbook      | 200      |
    | get    | GET    | /addressbook/{id} | 200      |
    | create | POST   | /addressbook      | 200, 201 |
    | update | PUT    | /addressbook/{id} | 200      |
    | delete | DELETE | /addressbook/{id} | 200, 204 |
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        client: Optional[httpx.Client] = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self.base_url = str(base_url).rstrip("/")
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(
                timeout=httpx.Timeout(timeout_s),
                headers={"Accept": "application/json"},
            )
        self._client = client
        self.last_error: Optional[RepositoryError] = None

    @classmethod
    def from_config(cls, config: Any) -> "ContactRepository":
        """Build a repository from a ConfigManager (`api.base_url`, `api.timeout_s`)."""
        return cls(
            config.get("api.base_url", DEFAULT_BASE_URL),
            timeout_s=float(config.get("api.timeout_s", DEFAULT_TIMEOUT_S)),
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ContactRepository":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _item_url(self, contact_id: Any) -> str:
        return f"{self.base_url}/{contact_id}"

    def execute(
        self,
        method: str,
        url: str,
        *,
        ok_statuses: Collection[int],
        parse: Callable[[httpx.Response], Any],
        payload: Optional[dict] = None,
    ) -> RepositoryResult:
        """Run one request and classify its outcome. Never raises for HTTP failures."""
        try:
            response = self._client.request(method, url, json=payload)
        except httpx.HTTPError as e:
            return RepositoryResult.fail(
                RepositoryError(RepositoryErrorKind.NETWORK, str(e) or type(e).__name__, cause=e)
            )

        if response.status_code not in ok_statuses:
            return RepositoryResult.fail(
                RepositoryError(
                    RepositoryErrorKind.STATUS,
                    f"Unexpected response from {method} {url}",
                    status_code=response.status_code,
                )
            )

        try:
            return RepositoryResult.ok(parse(response))
        except ValueError as e:
            return RepositoryResult.fail(
                RepositoryError(
                    RepositoryErrorKind.DECODE,
                    f"Unreadable response body: {e}",
                    status_code=response.status_code,
                    cause=e,
                )
            )

    def _run(self, action: str, method: str, url: str, **kwargs: Any) -> RepositoryResult:
        self.last_error = None
        result = self.execute(method, url, **kwargs)
        if not result.success:
            self.last_error = result.error
            logger.error(f"Error {action} ({method} {url}): {result.error}")
        return result

    def list_all(self) -> List[Contact]:
        """All contacts, or an empty list if the store could not be read."""
        result = self._run(
            "fetching contacts", "GET", self.base_url,
            ok_statuses={200}, parse=_parse_contact_list,
        )
        return result.value if result.success else []

    def get_by_id(self, contact_id: int) -> Optional[Contact]:
        result = self._run(
            f"fetching contact by ID: {contact_id}", "GET", self._item_url(contact_id),
            ok_statuses={200}, parse=_parse_contact,
        )
        return result.value if result.success else None

    def create(self, contact: Contact) -> Optional[Contact]:
        """Create `contact` remotely and return the stored version with its new id."""
        result = self._run(
            "creating contact", "POST", self.base_url,
            ok_statuses={200, 201}, parse=_parse_contact, payload=contact.to_payload(),
        )
        return result.value if result.success else None

    def update(self, contact_id: int, contact: Contact) -> Optional[Contact]:
        result = self._run(
            f"updating contact with ID: {contact_id}", "PUT", self._item_url(contact_id),
            ok_statuses={200}, parse=_parse_contact, payload=contact.to_payload(),
        )
        return result.value if result.success else None

    def delete(self, contact_id: int) -> bool:
        result = self._run(
            f"deleting contact with ID: {contact_id}", "DELETE", self._item_url(contact_id),
            ok_statuses={200, 204}, parse=lambda _resp: True,
        )
        return bool(result.success)

    def search(self, query: Optional[str] = None, category: Optional[str] = None) -> List[Contact]:
        """Re-read the full list and filter it by query text and category."""
        return filter_contacts(self.list_all(), query, category)
