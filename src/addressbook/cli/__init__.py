"""
AddressBook CLI - Command Line Interface

Drives one ContactSession per invocation: list/filter, show, add, edit,
delete, plus a local mock API server for development.
"""

from .app import build_parser, main, setup_logging

__all__ = ["build_parser", "main", "setup_logging"]
