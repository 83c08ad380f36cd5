"""
CLI interface for the image generation dashboard.

Renders the analytics, admin dashboard, user management and gallery views
in the terminal.
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from imagegen_dashboard.config.loader import DashboardSettings, load_settings
from imagegen_dashboard.core.analytics import AnalyticsSnapshot, load_analytics
from imagegen_dashboard.core.dashboard import compute_dashboard_stats, recent_activity
from imagegen_dashboard.core.export import export_csv, export_filename
from imagegen_dashboard.core.filters import filter_by_text, filter_gallery, parse_time_range
from imagegen_dashboard.core.users import change_user_role, role_counts, summarize_users
from imagegen_dashboard.sdk.image_client import GenerationError, GuardedImageGenerator
from imagegen_dashboard.storage.db import DEFAULT_DB_PATH
from imagegen_dashboard.storage.models import ImageQuality, ImageSize, ImageStyle
from imagegen_dashboard.storage.repository import (
    RecordStoreError,
    get_repository,
    initialize_schema,
)

app = typer.Typer()
console = Console()
logger = logging.getLogger(__name__)

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

DAILY_ROWS_SHOWN = 7


def _now() -> datetime:
    """Reference time for every view in one command."""
    return datetime.now(timezone.utc)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)]
    )


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/] {message}")
    sys.exit(EXIT_CODE_FAIL)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the dashboard YAML configuration"
    ),
    db: str = typer.Option(
        DEFAULT_DB_PATH,
        "--db",
        help="Path to the SQLite record store"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging"
    )
):
    """Image generation dashboard CLI."""
    _configure_logging(verbose)
    try:
        settings = load_settings(str(config) if config else None)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        _fail(f"Could not load configuration: {e}")
    ctx.obj = {"settings": settings, "db": db}

    if ctx.invoked_subcommand is None:
        console.print(f"{settings.site.name} - Use --help to see available commands")


def _settings(ctx: typer.Context) -> DashboardSettings:
    return ctx.obj["settings"]


@app.command()
def init(ctx: typer.Context):
    """Initialize the record store."""
    try:
        initialize_schema(ctx.obj["db"])
        console.print("[green]✓[/] Record store initialized successfully")
        sys.exit(EXIT_CODE_PASS)
    except RecordStoreError as e:
        console.print(f"[red]Error initializing record store:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def analytics(
    ctx: typer.Context,
    time_range: Optional[str] = typer.Option(
        None,
        "--range",
        "-r",
        help="Time range such as 7d, 30d or 90d"
    ),
    export: Optional[Path] = typer.Option(
        None,
        "--export",
        "-e",
        help="Write the daily activity as CSV to this file or directory"
    )
):
    """Show usage analytics for a time range."""
    settings = _settings(ctx)
    range_label = time_range or settings.analytics.default_range
    try:
        window_days = parse_time_range(range_label)
        snapshot = load_analytics(
            get_repository(ctx.obj["db"]),
            window_days,
            _now(),
            settings
        )
    except (ValueError, RecordStoreError) as e:
        _fail(f"Failed to load analytics: {e}")

    _display_analytics(snapshot, range_label)

    if export is not None:
        target = export / export_filename(range_label) if export.is_dir() else export
        try:
            target.write_text(export_csv(snapshot.daily_stats), encoding="utf-8")
        except OSError as e:
            _fail(f"Failed to export: {e}")
        console.print(f"\n[green]✓[/] Exported daily activity to {target}")

    sys.exit(EXIT_CODE_PASS)


@app.command()
def dashboard(ctx: typer.Context):
    """Show the admin overview and recent activity."""
    page_size = _settings(ctx).analytics.page_size
    try:
        repository = get_repository(ctx.obj["db"])
        users = repository.list_users(limit=page_size)
        images = repository.list_images(limit=page_size)
    except RecordStoreError as e:
        _fail(f"Failed to load dashboard data: {e}")

    stats = compute_dashboard_stats(users, images, _now())

    console.print("\n[bold]Admin Dashboard[/bold]")
    console.print("-" * 40)
    console.print(f"Total users: {stats.total_users:,}")
    console.print(f"Total images: {stats.total_images:,}")
    console.print(f"Images this month: {stats.images_this_month:,}")
    console.print(f"Active users (7 days): {stats.active_users:,}")

    activity = recent_activity(users, images)
    if not activity:
        console.print("\n[dim]No recent activity.[/]")
    else:
        table = Table(title="Recent Activity")
        table.add_column("When")
        table.add_column("Event")
        table.add_column("User")
        for entry in activity:
            table.add_row(
                entry.timestamp or "-",
                entry.message,
                entry.user_email or entry.user_id
            )
        console.print(table)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def users(
    ctx: typer.Context,
    search: str = typer.Option(
        "",
        "--search",
        "-s",
        help="Filter by email or display name"
    )
):
    """List users with their role and image count."""
    page_size = _settings(ctx).analytics.page_size
    try:
        repository = get_repository(ctx.obj["db"])
        all_users = repository.list_users(limit=page_size)
        images = repository.list_images(limit=page_size)
    except RecordStoreError as e:
        _fail(f"Failed to load users: {e}")

    counts = role_counts(all_users)
    console.print(
        "Roles: " + ", ".join(f"{role.value}={count}" for role, count in counts.items())
    )

    matching = filter_by_text(all_users, search, ["email", "display_name"])
    table = Table(title=f"Users ({len(matching)})")
    table.add_column("ID")
    table.add_column("Email")
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Images", justify="right")
    table.add_column("Joined")
    for summary in summarize_users(matching, images):
        user = summary.user
        table.add_row(
            user.id,
            user.email,
            user.display_name or "",
            user.role,
            str(summary.image_count),
            user.created_at or "-"
        )
    console.print(table)

    if not matching:
        console.print("[dim]No users match your search.[/]")
    sys.exit(EXIT_CODE_PASS)


@app.command("set-role")
def set_role(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="User to update"),
    role: str = typer.Argument(..., help="New role: user, moderator or admin")
):
    """Change a user's role."""
    try:
        updated = change_user_role(get_repository(ctx.obj["db"]), user_id, role)
    except (ValueError, RecordStoreError) as e:
        _fail(f"Failed to update user role: {e}")

    if not updated:
        _fail(f"No user with id {user_id}")
    console.print(f"[green]✓[/] User role updated to {role}")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def gallery(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="Owner of the images"),
    search: str = typer.Option("", "--search", "-s", help="Search prompts"),
    size: str = typer.Option("all", "--size", help="Image size or 'all'"),
    quality: str = typer.Option("all", "--quality", "-q", help="Image quality or 'all'")
):
    """Show a user's most recent images."""
    page_size = _settings(ctx).analytics.gallery_page_size
    try:
        images = get_repository(ctx.obj["db"]).list_images(user_id=user_id, limit=page_size)
    except RecordStoreError as e:
        _fail(f"Failed to load gallery: {e}")

    if not images:
        console.print("[dim]No images yet.[/]")
        sys.exit(EXIT_CODE_PASS)

    matching = filter_gallery(images, search, size, quality)
    if not matching:
        console.print("[dim]No images match your filters.[/]")
        sys.exit(EXIT_CODE_PASS)

    table = Table(title=f"Showing {len(matching)} of {len(images)} images")
    table.add_column("Created")
    table.add_column("Prompt")
    table.add_column("Size")
    table.add_column("Quality")
    table.add_column("URL")
    for image in matching:
        table.add_row(image.created_at, image.prompt, image.size, image.quality, image.url)
    console.print(table)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def generate(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="Owner of the generated image"),
    prompt: str = typer.Argument(..., help="Description of the image"),
    size: str = typer.Option(ImageSize.SQUARE.value, "--size", help="Image size"),
    quality: str = typer.Option(ImageQuality.HIGH.value, "--quality", "-q", help="Image quality"),
    style: str = typer.Option(ImageStyle.NATURAL.value, "--style", help="vivid or natural")
):
    """Generate an image and add it to the user's gallery."""
    try:
        generator = GuardedImageGenerator(
            user_id=user_id,
            settings=_settings(ctx),
            db_path=ctx.obj["db"]
        )
        record = generator.generate(prompt, size=size, quality=quality, style=style)
    except (ValueError, GenerationError, RecordStoreError) as e:
        _fail(f"Failed to generate image: {e}")
    except Exception as e:
        logger.debug("Image generation failed", exc_info=True)
        _fail(f"Failed to generate image. Please try again. ({e})")

    console.print("[green]✓[/] Image generated successfully!")
    console.print(f"URL: {record.url}")
    sys.exit(EXIT_CODE_PASS)


def _display_analytics(snapshot: AnalyticsSnapshot, range_label: str) -> None:
    """Display the analytics snapshot as overview lines and tables."""
    console.print(f"\n[bold]Analytics ({range_label})[/bold]")
    console.print("-" * 40)
    console.print(f"Total users: {snapshot.total_users:,}")
    console.print(f"Total images: {snapshot.total_images:,}")
    console.print(f"Avg per day: {snapshot.average_images_per_day:,.1f} images")
    console.print(f"Active users: {snapshot.active_users:,} in selected period")
    if snapshot.skipped_images or snapshot.skipped_users:
        console.print(
            f"[yellow]Skipped {snapshot.skipped_images} image(s) and "
            f"{snapshot.skipped_users} user(s) with unreadable dates[/]"
        )

    daily = Table(title="Daily Activity")
    daily.add_column("Date")
    daily.add_column("Images", justify="right")
    daily.add_column("Users", justify="right")
    for stat in snapshot.daily_stats[-DAILY_ROWS_SHOWN:]:
        daily.add_row(stat.date, str(stat.images), str(stat.users))
    console.print(daily)

    growth = Table(title="User Growth")
    growth.add_column("Month")
    growth.add_column("New users", justify="right")
    for entry in snapshot.user_growth:
        growth.add_row(entry.label, str(entry.count))
    console.print(growth)

    if not snapshot.top_prompts:
        console.print("[dim]No prompts data available[/]")
        return
    prompts = Table(title="Popular Prompts")
    prompts.add_column("#", justify="right")
    prompts.add_column("Prompt")
    prompts.add_column("Count", justify="right")
    for index, entry in enumerate(snapshot.top_prompts, start=1):
        prompts.add_row(str(index), entry.key, str(entry.count))
    console.print(prompts)


if __name__ == "__main__":
    app()
