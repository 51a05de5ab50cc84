"""
AddressBook - Contact management client

Main entry point for the AddressBook command line.
"""

import sys

from addressbook.cli import main


if __name__ == "__main__":
    sys.exit(main())
