"""Contact model, search and remote repository."""
from .models import CATEGORIES, Contact, ContactForm, validate_contact
from .repository import (
    ContactRepository,
    RepositoryError,
    RepositoryErrorKind,
    RepositoryResult,
)
from .search import filter_contacts

__all__ = [
    "CATEGORIES",
    "Contact",
    "ContactForm",
    "validate_contact",
    "ContactRepository",
    "RepositoryError",
    "RepositoryErrorKind",
    "RepositoryResult",
    "filter_contacts",
]
