"""
Contact session - per-user view state for the address book.

Holds the form draft, the loaded contacts, the filtered view and the edit
flag, and sequences every write as: repository call -> notice -> reload ->
refilter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence

from loguru import logger

from addressbook.contacts.models import CATEGORIES, Contact, validate_contact
from addressbook.contacts.repository import ContactRepository


class NoticeSeverity(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass
class Notice:
    """A user-facing message produced by a session action."""

    severity: NoticeSeverity
    summary: str
    detail: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_error(self) -> bool:
        return self.severity == NoticeSeverity.ERROR

    def __str__(self) -> str:
        return f"{self.summary}: {self.detail}"


class ContactSession:
    """
    Session coordinator for one user of the address book.

    Every successful mutation replaces `all_contacts` with a fresh copy from
    the repository and recomputes `visible_contacts`; failed mutations only
    add an error notice.
    """

    def __init__(
        self,
        repository: ContactRepository,
        *,
        categories: Optional[Sequence[str]] = None,
    ) -> None:
        self._repository = repository
        self.categories: List[str] = list(categories or CATEGORIES)

        self.working_contact = Contact()
        self.all_contacts: List[Contact] = []
        self.visible_contacts: List[Contact] = []
        self.query: str = ""
        self.category_filter: str = ""
        self.is_editing = False
        self.notices: List[Notice] = []

    @property
    def repository(self) -> ContactRepository:
        return self._repository

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        self.working_contact = Contact()
        self.reload()
        self.visible_contacts = list(self.all_contacts)
        self.is_editing = False

    def reload(self) -> None:
        """Re-fetch every contact and reset the visible list to all of them."""
        try:
            self.all_contacts = self._repository.list_all()
            self.visible_contacts = list(self.all_contacts)
        except Exception as e:
            logger.error(f"Loading contacts failed: {e}")
            self.all_contacts = []
            self.visible_contacts = []
            self._error(f"Error loading contacts: {e}")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def submit_form(self) -> bool:
        """Validate the draft, then update it when editing or create it otherwise."""
        problems = validate_contact(self.working_contact)
        if problems:
            for message in problems:
                self._error(message)
            return False
        if self.is_editing:
            return self.submit_update()
        return self.submit_create()

    def submit_create(self) -> bool:
        try:
            created = self._repository.create(self.working_contact)
            if created is None:
                self._log_repository_failure("create")
                self._error("Failed to add contact. Please try again.")
                return False
            logger.info(f"Contact created (id={created.id})")
            self._success("Contact added successfully!")
            self.clear_form()
            self.reload()
            self.apply_filter()
            return True
        except Exception as e:
            logger.error(f"Adding contact failed: {e}")
            self._error(f"Error adding contact: {e}")
            return False

    def submit_update(self) -> bool:
        contact_id = self.working_contact.id
        if contact_id is None:
            logger.warning("Update requested for a contact that was never saved")
            self._error("Failed to update contact. Please try again.")
            return False
        try:
            updated = self._repository.update(contact_id, self.working_contact)
            if updated is None:
                self._log_repository_failure("update")
                self._error("Failed to update contact. Please try again.")
                return False
            logger.info(f"Contact updated (id={contact_id})")
            self._success("Contact updated successfully!")
            self.clear_form()
            self.reload()
            self.apply_filter()
            return True
        except Exception as e:
            logger.error(f"Updating contact failed: {e}")
            self._error(f"Error updating contact: {e}")
            return False

    def remove(self, contact: Contact) -> bool:
        if contact.id is None:
            logger.warning("Delete requested for a contact that was never saved")
            self._error("Failed to delete contact. Please try again.")
            return False
        try:
            if not self._repository.delete(contact.id):
                self._log_repository_failure("delete")
                self._error("Failed to delete contact. Please try again.")
                return False
            logger.info(f"Contact deleted (id={contact.id})")
            self._success("Contact deleted successfully!")
            self.reload()
            self.apply_filter()
            return True
        except Exception as e:
            logger.error(f"Deleting contact failed: {e}")
            self._error(f"Error deleting contact: {e}")
            return False

    # ------------------------------------------------------------------
    # Form state
    # ------------------------------------------------------------------

    def begin_edit(self, contact: Contact) -> None:
        self.working_contact = contact.copy()
        self.is_editing = True

    def cancel_edit(self) -> None:
        self.clear_form()

    def clear_form(self) -> None:
        self.working_contact = Contact()
        self.is_editing = False

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def apply_filter(self) -> None:
        try:
            self.visible_contacts = self._repository.search(self.query, self.category_filter)
        except Exception as e:
            logger.error(f"Searching contacts failed: {e}")
            self._error(f"Error searching contacts: {e}")
            self.visible_contacts = list(self.all_contacts)

    def clear_filter(self) -> None:
        self.query = ""
        self.category_filter = ""
        self.visible_contacts = list(self.all_contacts)

    # ------------------------------------------------------------------
    # View helpers
    # ------------------------------------------------------------------

    @property
    def submit_button_text(self) -> str:
        return "Update Contact" if self.is_editing else "Add Contact"

    @property
    def form_title(self) -> str:
        return "Edit Contact" if self.is_editing else "Add New Contact"

    @property
    def total_contacts(self) -> int:
        return len(self.visible_contacts)

    @property
    def is_empty(self) -> bool:
        return not self.visible_contacts

    def drain_notices(self) -> List[Notice]:
        """Return pending notices and clear them."""
        out, self.notices = self.notices, []
        return out

    def _success(self, message: str) -> None:
        self.notices.append(Notice(NoticeSeverity.INFO, "Success", message))

    def _error(self, message: str) -> None:
        self.notices.append(Notice(NoticeSeverity.ERROR, "Error", message))

    def _log_repository_failure(self, action: str) -> None:
        err = getattr(self._repository, "last_error", None)
        if err is not None:
            logger.warning(f"Contact {action} failed ({err.kind.value}): {err.message}")
        else:
            logger.warning(f"Contact {action} failed")
