import argparse
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from dotenv import load_dotenv
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from addressbook import __version__
from addressbook.config import ConfigManager
from addressbook.contacts.models import Contact
from addressbook.contacts.repository import ContactRepository
from addressbook.session import ContactSession, Notice


console = Console()

# CLI option -> Contact attribute
FIELD_OPTIONS = {
    "first_name": "--first-name",
    "last_name": "--last-name",
    "email": "--email",
    "phone": "--phone",
    "company": "--company",
    "category": "--category",
    "address": "--address",
}


def setup_logging(debug: bool = False, log_dir: str = "logs", log_file: str = "addressbook.log") -> None:
    """Configure logging."""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    # Console handler
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="DEBUG" if debug else "INFO",
        colorize=True,
    )

    # File handler
    logger.add(
        log_path / log_file,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="DEBUG",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )


def _add_field_options(parser: argparse.ArgumentParser, *, required: bool) -> None:
    for attr, flag in FIELD_OPTIONS.items():
        needed = required and attr in ("first_name", "last_name", "email")
        parser.add_argument(flag, dest=attr, required=needed, help=f"Contact {attr.replace('_', ' ')}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="addressbook",
        description="AddressBook - manage contacts on a remote address book API",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Override the address book API base URL",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"AddressBook {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List contacts, optionally filtered")
    p_list.add_argument("--query", "-q", default="", help="Text to match in name, email or company")
    p_list.add_argument("--category", "-c", default="", help="Exact category to keep")

    p_show = sub.add_parser("show", help="Show a single contact")
    p_show.add_argument("id", type=int)

    p_add = sub.add_parser("add", help="Add a new contact")
    _add_field_options(p_add, required=True)

    p_edit = sub.add_parser("edit", help="Edit an existing contact")
    p_edit.add_argument("id", type=int)
    _add_field_options(p_edit, required=False)

    p_delete = sub.add_parser("delete", help="Delete a contact")
    p_delete.add_argument("id", type=int)

    p_mock = sub.add_parser("serve-mock", help="Run an in-memory mock of the address book API")
    p_mock.add_argument("--host", type=str, default=None, help="Host for mock server")
    p_mock.add_argument("--port", type=int, default=None, help="Port for mock server")

    return parser


def render_contacts(contacts: Iterable[Contact], title: str = "Contacts") -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Email")
    table.add_column("Phone")
    table.add_column("Company")
    table.add_column("Category", style="magenta")
    for c in contacts:
        table.add_row(
            str(c.id) if c.id is not None else "-",
            c.full_name,
            c.email or "",
            c.phone or "",
            c.company or "",
            c.category or "",
        )
    return table


def render_contact(contact: Contact) -> Panel:
    lines = [f"[bold]{contact.full_name}[/bold] ({contact.initials})"]
    for label, value in (
        ("Email", contact.email),
        ("Phone", contact.phone),
        ("Company", contact.company),
        ("Category", contact.category),
        ("Address", contact.address),
    ):
        if value:
            lines.append(f"{label}: {value}")
    return Panel("\n".join(lines), title=f"Contact #{contact.id}")


def _print_notices(notices: List[Notice]) -> bool:
    """Print notices; return True if any was an error."""
    failed = False
    for notice in notices:
        style = "red" if notice.is_error else "green"
        stamp = notice.timestamp.strftime("%H:%M:%S")
        console.print(f"[dim]{stamp}[/dim] [{style}]{notice.summary}:[/{style}] {notice.detail}")
        failed = failed or notice.is_error
    return failed


def _apply_fields(contact: Contact, args: argparse.Namespace) -> None:
    for attr in FIELD_OPTIONS:
        value = getattr(args, attr, None)
        if value is not None:
            setattr(contact, attr, value)


def _find(session: ContactSession, contact_id: int) -> Optional[Contact]:
    for c in session.all_contacts:
        if c.id == contact_id:
            return c
    return None


def run_command(args: argparse.Namespace, session: ContactSession) -> int:
    """Execute one subcommand against an initialized session. Returns an exit code."""
    if args.command == "list":
        session.query = args.query or ""
        session.category_filter = args.category or ""
        if session.query or session.category_filter:
            session.apply_filter()
        failed = _print_notices(session.drain_notices())
        if session.is_empty:
            console.print("No contacts found.")
        else:
            console.print(render_contacts(session.visible_contacts, title=f"Contacts ({session.total_contacts})"))
        return 1 if failed else 0

    if args.command == "show":
        contact = session.repository.get_by_id(args.id)
        if contact is None:
            console.print(f"[red]Error:[/red] Contact {args.id} could not be loaded.")
            return 1
        console.print(render_contact(contact))
        return 0

    if args.command == "add":
        session.clear_form()
        _apply_fields(session.working_contact, args)
        session.submit_form()
        return 1 if _print_notices(session.drain_notices()) else 0

    if args.command in ("edit", "delete"):
        contact = _find(session, args.id)
        if contact is None:
            _print_notices(session.drain_notices())
            console.print(f"[red]Error:[/red] No contact with ID {args.id}.")
            return 1
        if args.command == "edit":
            session.begin_edit(contact)
            _apply_fields(session.working_contact, args)
            session.submit_form()
        else:
            session.remove(contact)
        return 1 if _print_notices(session.drain_notices()) else 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    config = ConfigManager(args.config)
    config.load()
    if args.api_url:
        config.set("api.base_url", args.api_url)

    setup_logging(
        debug=args.debug or bool(config.get("app.debug", False)),
        log_dir=config.get("logging.dir", "logs"),
        log_file=config.get("logging.file", "addressbook.log"),
    )

    if args.command == "serve-mock":
        from addressbook.web.mock_api import run_mock_api

        run_mock_api(
            host=args.host or config.get("mock_api.host", "127.0.0.1"),
            port=args.port or int(config.get("mock_api.port", 8081)),
            prefix=config.get("mock_api.prefix", "/api"),
        )
        return 0

    try:
        with ContactRepository.from_config(config) as repository:
            session = ContactSession(repository, categories=config.get("ui.categories"))
            session.initialize()
            return run_command(args, session)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1
