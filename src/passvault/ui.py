"""UI utilities."""

import logging
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from .analyzer import PasswordStrength
from .health import HealthReport
from .models import PasswordEntry

console = Console()
err_console = Console(stderr=True)

STRENGTH_COLORS = {
    "Weak": "red",
    "Fair": "yellow",
    "Good": "cyan",
    "Strong": "green",
    "Very Strong": "bold green",
}


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def success(message: str) -> None:
    """Display success message."""
    console.print(f"[green]✓[/green] {message}")


def error(message: str) -> None:
    """Display error message."""
    console.print(f"[red]✗[/red] {message}")


def info(message: str) -> None:
    """Display info message."""
    console.print(f"[blue]i[/blue] {message}")


def warning(message: str) -> None:
    """Display warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def humanize_date(dt: Optional[datetime]) -> str:
    """Format datetime as absolute local timestamp."""
    if not dt:
        return "—"
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def show_entries_table(
    entries: List[PasswordEntry], title: str = "Password Vault"
) -> None:
    """Display entries table."""
    if not entries:
        info("No entries found")
        return

    table = Table(title=title, show_lines=False, expand=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Website", style="cyan bold")
    table.add_column("Username", style="green")
    table.add_column("Category", style="magenta")
    table.add_column("Updated", style="dim", justify="right")

    for entry in entries:
        table.add_row(
            entry.id,
            escape(entry.website),
            escape(entry.username),
            escape(entry.category) or "—",
            humanize_date(entry.last_modified),
        )

    console.print(table)
    console.print(f"[dim]Total: {len(entries)} entries[/dim]")


def show_entry_panel(
    entry: PasswordEntry,
    strength: PasswordStrength,
    show_password: bool = False,
) -> None:
    """Display entry details."""
    content = [f"[green]Username:[/green] {escape(entry.username)}"]

    color = STRENGTH_COLORS.get(strength.label, "white")
    if show_password:
        content.append(f"[yellow]Password:[/yellow] {escape(entry.password)}")
    else:
        content.append(
            f"[yellow]Password:[/yellow] {'•' * 12}  "
            f"[dim]([{color}]{strength.label}[/{color}], "
            f"{len(entry.password)} chars)[/dim]"
        )

    if entry.category:
        content.append(f"[magenta]Category:[/magenta] {escape(entry.category)}")

    if entry.notes:
        content.append(f"\n[cyan]Notes:[/cyan]\n{escape(entry.notes)}")

    content.append("")
    content.append(f"[dim]ID {entry.id}[/dim]")
    content.append(f"[dim]Created {humanize_date(entry.created_at)}[/dim]")
    content.append(f"[dim]Updated {humanize_date(entry.last_modified)}[/dim]")

    panel = Panel(
        "\n".join(content),
        title=escape(entry.website),
        border_style="cyan",
        expand=False,
    )
    console.print(panel)


def show_strength(strength: PasswordStrength) -> None:
    """Display score bar, label, entropy and feedback for one password."""
    color = STRENGTH_COLORS.get(strength.label, "white")
    table = Table.grid(padding=(0, 1))
    table.add_row(
        ProgressBar(total=100, completed=strength.score, width=20),
        f"{strength.score}%",
        f"[{color}]{strength.label}[/{color}]",
    )
    console.print(table)
    console.print(f"[dim]Entropy: {strength.entropy:.1f} bits[/dim]")
    for line in strength.feedback:
        console.print(f"  • {line}")


def show_password_generated(password: str, copied: bool = False) -> None:
    """Display generated password."""
    if copied:
        # Password copied - don't display it for security
        success("Password generated and copied to clipboard")
        return

    panel = Panel(
        Text(password, style="yellow bold"),
        title="Generated Password",
        border_style="yellow",
        expand=False,
    )
    console.print(panel)


def show_health_report(report: HealthReport) -> None:
    """Display the vault health dashboard."""
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Count", justify="right")
    table.add_row("Total passwords", str(report.total))
    table.add_row("Weak passwords", _count_cell(report.weak))
    table.add_row("Reused passwords", _count_cell(report.reused))
    table.add_row("Old passwords (6+ months)", _count_cell(report.old))

    score = Table.grid(padding=(0, 1))
    score.add_row(
        "Health score:",
        ProgressBar(total=100, completed=report.score, width=20),
        f"{report.score}%",
    )

    border = "green" if report.score >= 90 else "yellow" if report.score >= 70 else "red"
    console.print()
    console.print(
        Panel(
            table,
            title="[bold cyan]Password Health Dashboard[/bold cyan]",
            border_style=border,
            padding=(1, 2),
        )
    )
    console.print(score)
    console.print(f"Verdict: [{border}]{report.verdict}[/{border}]")


def _count_cell(count: int) -> str:
    return f"[yellow]{count}[/yellow]" if count else "[green]0[/green]"
