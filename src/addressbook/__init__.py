"""
AddressBook - Contact management client for a remote address book API.

Lists, creates, edits, deletes and filters contacts stored behind a
JSON-over-HTTP CRUD service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from addressbook.session import ContactSession as ContactSession

__all__ = ["ContactSession", "__version__"]


def __getattr__(name: str):
    # Lazy import keeps `addressbook.contacts.*` importable on its own.
    if name == "ContactSession":
        from addressbook.session import ContactSession  # local import

        return ContactSession
    raise AttributeError(name)
