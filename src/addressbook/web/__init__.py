"""Development web services."""
from .mock_api import InMemoryAddressBook, create_app, run_mock_api

__all__ = ["InMemoryAddressBook", "create_app", "run_mock_api"]
