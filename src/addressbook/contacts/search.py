"""Text and category filtering over a full contact list."""

from __future__ import annotations

from typing import Iterable, List, Optional

from addressbook.contacts.models import Contact


def matches_query(contact: Contact, query: Optional[str]) -> bool:
    """
    Case-insensitive substring match on name, email and company.

    An empty query matches everything. A None company never matches.
    """
    if not query:
        return True
    q = query.lower()
    for value in (contact.first_name, contact.last_name, contact.email):
        if q in (value or "").lower():
            return True
    return contact.company is not None and q in contact.company.lower()


def matches_category(contact: Contact, category: Optional[str]) -> bool:
    if not category:
        return True
    return category == contact.category


def filter_contacts(
    contacts: Iterable[Contact],
    query: Optional[str] = None,
    category: Optional[str] = None,
) -> List[Contact]:
    """Keep contacts matching both the query and the category, in input order."""
    return [
        c for c in contacts
        if matches_query(c, query) and matches_category(c, category)
    ]
