"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional, Tuple

import pendulum
import typer
from pendulum import Date
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from ..adapters.clipboard import copy_to_clipboard
from ..adapters.graph_authenticator import GraphAuthenticator, TokenCacheStore
from ..adapters.graph_client import GraphClient
from ..adapters.mock_graph_client import MockGraphClient
from ..config import AppConfig, SearchParameters, get_default_config_path, parse_date
from ..domain.exceptions import ClipboardError, ConfigurationError, GapFinderError
from ..formatting import format_report, format_summary
from ..services.gap_finder import CalendarClientProtocol, GapFinderService

app = typer.Typer(
    name="gapfinder",
    help="Find free time slots in your Microsoft 365 calendar",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path], mock: bool) -> AppConfig:
    config_path = config_file or get_default_config_path()

    if mock and config_file is None and not config_path.exists():
        console.print("[dim]No config.yaml found, using built-in defaults.[/dim]")
        return AppConfig()

    return AppConfig.load_from_yaml(config_path)


def _determine_date_range(
    *,
    tz: str,
    days_ahead: int,
    this_week: bool,
    next_week: bool,
    days: Optional[int],
    start_option: Optional[str],
    end_option: Optional[str]
) -> Tuple[Date, Date]:
    """
    Resolve the date range from shortcut flags or explicit dates.

    Raises:
        ConfigurationError: If shortcuts conflict or a date cannot be parsed
    """
    shortcuts = [name for name, used in (
        ("--this-week", this_week),
        ("--next-week", next_week),
        ("--days", days is not None),
    ) if used]
    if len(shortcuts) > 1:
        raise ConfigurationError(f"{' and '.join(shortcuts)} cannot be combined", "date range")
    if shortcuts and (start_option or end_option):
        raise ConfigurationError(f"{shortcuts[0]} cannot be combined with --start/--end", "date range")

    today = pendulum.today(tz).date()

    if this_week:
        return today, today.end_of("week")

    if next_week:
        next_monday = today.next(pendulum.MONDAY)
        return next_monday, next_monday.add(days=6)

    if days is not None:
        if days < 1:
            raise ConfigurationError("--days must be at least 1", "days")
        return today, today.add(days=days - 1)

    start_date = parse_date(start_option, "start_date") if start_option else today
    end_date = parse_date(end_option, "end_date") if end_option else start_date.add(days=days_ahead - 1)

    return start_date, end_date


def _build_calendar_client(config: AppConfig, mock: bool) -> CalendarClientProtocol:
    if mock:
        console.print("[yellow]⚠  MOCK MODE: using sample calendar data[/yellow]")
        return MockGraphClient(data_file=config.mock_data_file)

    authenticator = GraphAuthenticator(
        client_id=config.client_id,
        tenant_id=config.tenant_id,
        authority_url=config.get_authority_url()
    )
    access_token = authenticator.get_access_token(force_refresh=False)
    return GraphClient(access_token=access_token)


@app.command()
def find(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD), inclusive")] = None,
    start_time: Annotated[Optional[str], typer.Option("--start-time", help="Start of the working day (HH:MM)")] = None,
    end_time: Annotated[Optional[str], typer.Option("--end-time", help="End of the working day (HH:MM)")] = None,
    min_minutes: Annotated[Optional[int], typer.Option("--min-minutes", "-m", help="Minimum slot length in minutes")] = None,
    days: Annotated[Optional[int], typer.Option("--days", help="Search this many days starting today")] = None,
    this_week: Annotated[bool, typer.Option("--this-week", help="Search from today until the end of this week.")] = False,
    next_week: Annotated[bool, typer.Option("--next-week", help="Search next week (Monday to Sunday).")] = False,
    mock: Annotated[bool, typer.Option("--mock", help="Use sample data and skip authentication.")] = False,
    copy: Annotated[bool, typer.Option("--copy", help="Copy the report to the clipboard.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Find free time slots in your calendar.

    Examples:

        gapfinder find --next-week

        gapfinder find --start 2024-03-18 --end 2024-03-22 --min-minutes 60

        gapfinder find --mock --start 2024-03-18 --copy
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file, mock)
        tz = config.timezone

        start_date, end_date = _determine_date_range(
            tz=tz,
            days_ahead=config.defaults.days_ahead,
            this_week=this_week,
            next_week=next_week,
            days=days,
            start_option=start,
            end_option=end
        )

        params = SearchParameters.parse(
            start_date=start_date,
            end_date=end_date,
            start_time=start_time or config.defaults.start_time,
            end_time=end_time or config.defaults.end_time,
            minimum_slot_minutes=(
                min_minutes if min_minutes is not None else config.defaults.minimum_slot_minutes
            ),
        )

        client = _build_calendar_client(config, mock)
        service = GapFinderService(
            calendar_client=client,
            timezone=tz,
            exclude_days=config.exclude_days,
        )
        report = service.find_availability(params)

    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(1)

    except (GapFinderError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    text = format_report(report)

    console.print()
    console.print(text, markup=False, highlight=False)
    console.print()
    console.print(format_summary(report), style="dim", highlight=False)

    if copy:
        try:
            copy_to_clipboard(text)
            console.print("[green]✓ Report copied to clipboard[/green]")
        except ClipboardError as e:
            console.print(f"[yellow]Warning:[/yellow] {e}")


@app.command()
def test_auth(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
    force: Annotated[bool, typer.Option("--force", help="Force re-authentication")] = False,
):
    """
    Test Microsoft Graph authentication.
    """
    try:
        config = AppConfig.load_from_yaml(config_file or get_default_config_path())

        authenticator = GraphAuthenticator(
            client_id=config.client_id,
            tenant_id=config.tenant_id,
            authority_url=config.get_authority_url()
        )
        access_token = authenticator.get_access_token(force_refresh=force)
        user_info = GraphClient(access_token=access_token).test_connection()

        console.print(Panel.fit(
            f"[bold green]✓ Authentication successful![/bold green]\n\n"
            f"[bold]User:[/bold] {user_info.get('displayName', 'N/A')}\n"
            f"[bold]E-Mail:[/bold] {user_info.get('mail') or user_info.get('userPrincipalName', 'N/A')}",
            title="✓ Connection test"
        ))

    except (GapFinderError, FileNotFoundError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}\n")
        raise typer.Exit(1)


@app.command()
def clear_cache(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    Clear the authentication token cache.
    """
    try:
        config = AppConfig.load_from_yaml(config_file or get_default_config_path())

        TokenCacheStore.for_account(config.client_id, config.tenant_id).clear()
        console.print("\n[green]✓ Token cache cleared.[/green]")
        console.print("You will need to sign in again on the next run.\n")

    except (GapFinderError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]gapfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
