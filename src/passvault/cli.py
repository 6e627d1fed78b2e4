"""CLI using Typer."""

import os
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from typing_extensions import Annotated

from . import __version__, ui
from .analyzer import analyze_password
from .auth import prompt_create_master_password, prompt_unlock_vault
from .config import Config, config
from .messages import (
    ERROR_GENERIC,
    ERROR_LOCKED,
    ERROR_MUTUALLY_EXCLUSIVE_GEN,
    ERROR_NOT_FOUND,
    ERROR_OPEN_FAILED,
    ERROR_SAVE_FAILED,
    ERROR_TOO_MANY_ATTEMPTS,
    INFO_CANCELLED,
    INFO_CLIPBOARD_UNAVAILABLE,
    INFO_COPIED,
    INFO_NO_ENTRIES,
    INFO_NO_MATCHES,
    SUCCESS_ADDED,
    SUCCESS_CREATED,
    SUCCESS_DELETED,
    SUCCESS_UPDATED,
)
from .models import PasswordEntry
from .passwordgen import (
    DEFAULT_LEN,
    GenOptions,
    clamp_length,
    copy_to_clipboard,
    generate_password,
)
from .vault import (
    EntryNotFoundError,
    Vault,
    VaultAuthenticationError,
    VaultLockedError,
)

app = typer.Typer(
    name="passvault",
    help="Encrypted local password vault with health analytics",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"passvault {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    vault: Annotated[
        Optional[str],
        typer.Option(
            "--vault",
            "-v",
            help="Path to vault file (default: ~/.passvault/passvault.dat)",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Enable debug logging")
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
):
    """Encrypted local password vault."""
    if vault:
        config.vault_path = os.path.expanduser(vault)
    ui.configure_logging(verbose)


def open_vault() -> Vault:
    """Create or unlock the configured vault, exiting on failure."""
    vault = Vault(config.vault_path)

    if not Path(config.vault_path).exists():
        ui.info(f"Creating new vault at {config.vault_path}")
        try:
            master_password = prompt_create_master_password()
        except (KeyboardInterrupt, EOFError, ValueError) as e:
            ui.error(f"Vault creation cancelled: {e}")
            raise typer.Exit(1)
        if not vault.initialize(master_password) or not vault.save_to_file():
            _exit_with_error(vault, ERROR_OPEN_FAILED)
        ui.success(SUCCESS_CREATED.format(path=config.vault_path))
        return vault

    for _ in range(Config.MAX_PASSWORD_ATTEMPTS):
        try:
            master_password = prompt_unlock_vault()
        except (KeyboardInterrupt, EOFError):
            ui.error("Vault unlock cancelled")
            raise typer.Exit(1)

        if vault.initialize(master_password):
            return vault
        if not isinstance(vault.last_error, VaultAuthenticationError):
            _exit_with_error(vault, ERROR_OPEN_FAILED)
        ui.error(str(vault.last_error))

    ui.error(ERROR_TOO_MANY_ATTEMPTS)
    raise typer.Exit(1)


def _exit_with_error(vault: Vault, template: str = ERROR_GENERIC) -> NoReturn:
    """Report the vault's last failure and exit with status 1."""
    err = vault.last_error
    if isinstance(err, VaultLockedError):
        ui.error(ERROR_LOCKED)
    else:
        ui.error(template.format(error=err))
    raise typer.Exit(1)


def _resolve_password(
    password: Optional[str], generate: bool, length: int
) -> Optional[str]:
    if generate and password:
        ui.error(ERROR_MUTUALLY_EXCLUSIVE_GEN)
        raise typer.Exit(1)
    if generate:
        new_password = generate_password(GenOptions(length=clamp_length(length)))
        ui.show_password_generated(new_password)
        return new_password
    return password


@app.command("add", help="Add a new password entry", rich_help_panel="Entries")
def add_entry(
    website: Annotated[
        str, typer.Option("--website", "-w", prompt="Website/Service")
    ],
    username: Annotated[
        str, typer.Option("--username", "-u", prompt="Username/Email")
    ],
    password: Annotated[
        Optional[str], typer.Option("--password", "-p", help="Password to store")
    ] = None,
    generate: Annotated[
        bool, typer.Option("--generate", "-g", help="Generate a strong password")
    ] = False,
    length: Annotated[
        int, typer.Option("--length", "-l", help="Generated length (8-32)")
    ] = DEFAULT_LEN,
    category: Annotated[
        str, typer.Option("--category", "-c")
    ] = Config.DEFAULT_CATEGORY,
    notes: Annotated[str, typer.Option("--notes", "-n")] = "",
):
    """Add a new password entry."""
    secret = _resolve_password(password, generate, length)
    if secret is None:
        secret = typer.prompt("Password", hide_input=True)

    vault = open_vault()
    entry_id = vault.add_entry(
        PasswordEntry(
            website=website,
            username=username,
            password=secret,
            category=category,
            notes=notes,
        )
    )
    if not entry_id:
        _exit_with_error(vault, ERROR_SAVE_FAILED)

    ui.success(SUCCESS_ADDED.format(website=website, id=entry_id))
    ui.show_strength(analyze_password(secret))


@app.command("list", help="List all password entries", rich_help_panel="Entries")
def list_entries():
    """List all password entries in insertion order."""
    vault = open_vault()
    entries = vault.get_all_entries()
    if not entries:
        ui.info(INFO_NO_ENTRIES)
        return
    ui.show_entries_table(entries)


@app.command("get", help="Show one entry", rich_help_panel="Entries")
def get_entry(
    entry_id: Annotated[str, typer.Argument(help="Entry id")],
    show_password: Annotated[
        bool, typer.Option("--show-password", "-s", help="Show password in output")
    ] = False,
    copy: Annotated[
        bool, typer.Option("--copy", "-c", help="Copy password to clipboard")
    ] = False,
):
    """Show entry details, optionally revealing or copying the password."""
    vault = open_vault()
    entry = vault.get_entry(entry_id)
    if entry is None:
        ui.error(ERROR_NOT_FOUND.format(id=entry_id))
        raise typer.Exit(1)

    ui.show_entry_panel(
        entry, analyze_password(entry.password), show_password=show_password
    )
    if copy:
        if copy_to_clipboard(entry.password):
            ui.success(INFO_COPIED)
        else:
            ui.warning(INFO_CLIPBOARD_UNAVAILABLE)


@app.command("search", help="Search entries", rich_help_panel="Entries")
def search_entries(
    query: Annotated[str, typer.Argument(help="Website, username or category text")],
):
    """Search entries by website, username or category."""
    vault = open_vault()
    results = vault.search_entries(query)
    if not results:
        ui.info(INFO_NO_MATCHES.format(query=query))
        return
    ui.show_entries_table(results, title=f"Results for '{query}'")


@app.command("update", help="Update an entry", rich_help_panel="Entries")
def update_entry(
    entry_id: Annotated[str, typer.Argument(help="Entry id")],
    website: Annotated[Optional[str], typer.Option("--website", "-w")] = None,
    username: Annotated[Optional[str], typer.Option("--username", "-u")] = None,
    password: Annotated[Optional[str], typer.Option("--password", "-p")] = None,
    generate: Annotated[
        bool, typer.Option("--generate", "-g", help="Generate a new password")
    ] = False,
    length: Annotated[
        int, typer.Option("--length", "-l", help="Generated length (8-32)")
    ] = DEFAULT_LEN,
    category: Annotated[Optional[str], typer.Option("--category", "-c")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", "-n")] = None,
):
    """Update an entry. Fields not given keep their current value."""
    secret = _resolve_password(password, generate, length)

    vault = open_vault()
    current = vault.get_entry(entry_id)
    if current is None:
        ui.error(ERROR_NOT_FOUND.format(id=entry_id))
        raise typer.Exit(1)

    draft = PasswordEntry(
        website=website if website is not None else current.website,
        username=username if username is not None else current.username,
        password=secret if secret is not None else current.password,
        category=category if category is not None else current.category,
        notes=notes if notes is not None else current.notes,
    )
    if not vault.update_entry(entry_id, draft):
        _exit_with_error(vault, ERROR_SAVE_FAILED)

    ui.success(SUCCESS_UPDATED.format(id=entry_id))
    if secret is not None:
        ui.show_strength(analyze_password(secret))


@app.command("delete", help="Delete an entry", rich_help_panel="Entries")
def delete_entry(
    entry_id: Annotated[str, typer.Argument(help="Entry id")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")
    ] = False,
):
    """Delete an entry after confirmation."""
    vault = open_vault()
    if not yes and not typer.confirm(f"Delete entry {entry_id}?", default=False):
        ui.info(INFO_CANCELLED)
        return

    if not vault.delete_entry(entry_id):
        if isinstance(vault.last_error, EntryNotFoundError):
            ui.error(ERROR_NOT_FOUND.format(id=entry_id))
            raise typer.Exit(1)
        _exit_with_error(vault, ERROR_SAVE_FAILED)

    ui.success(SUCCESS_DELETED.format(id=entry_id))


@app.command("generate", help="Generate a password", rich_help_panel="Utilities")
def generate_standalone_password(
    length: Annotated[
        int, typer.Option("--length", "-l", help="Password length, clamped to 8-32")
    ] = DEFAULT_LEN,
    upper: Annotated[bool, typer.Option("--upper/--no-upper")] = True,
    lower: Annotated[bool, typer.Option("--lower/--no-lower")] = True,
    digits: Annotated[bool, typer.Option("--digits/--no-digits")] = True,
    symbols: Annotated[bool, typer.Option("--symbols/--no-symbols")] = True,
    copy: Annotated[
        bool, typer.Option("--copy", "-c", help="Copy to clipboard instead of printing")
    ] = False,
):
    """Generate a random password without touching the vault."""
    opts = GenOptions(
        length=clamp_length(length),
        upper=upper,
        lower=lower,
        digits=digits,
        symbols=symbols,
    )
    password = generate_password(opts)
    copied = copy and copy_to_clipboard(password)
    if copy and not copied:
        ui.warning(INFO_CLIPBOARD_UNAVAILABLE)
    ui.show_password_generated(password, copied)
    ui.show_strength(analyze_password(password))


@app.command("analyze", help="Analyze password strength", rich_help_panel="Utilities")
def analyze(
    password: Annotated[
        Optional[str], typer.Argument(help="Password to analyze (prompted if omitted)")
    ] = None,
):
    """Score a password without storing it."""
    if password is None:
        password = typer.prompt("Password", hide_input=True)
    ui.show_strength(analyze_password(password))


@app.command("health", help="Password health dashboard", rich_help_panel="Utilities")
def health():
    """Show weak, reused and old password counts with an overall score."""
    vault = open_vault()
    ui.show_health_report(vault.get_health_report())


def main() -> None:
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        ui.error("Operation cancelled")
        sys.exit(1)
