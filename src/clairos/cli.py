"""Command-line interface for ClairOS."""

from __future__ import annotations

import json
import threading
from datetime import timedelta
from typing import List, Optional

import typer
import uvicorn

from clairos.db.sessions import create_session
from clairos.db.shopping import get_shopping_list
from clairos.shopping import (
    badge_for,
    classify,
    format_item_label,
    get_category_table,
    group_by_category,
)
from clairos.timers import LiveTimerTick, TimerStore, format_remaining, live_remaining_ms

app = typer.Typer(help="ClairOS household organizer commands.")


@app.command("classify")
def classify_command(
    names: List[str] = typer.Argument(..., help="Item names to classify."),
    as_json: bool = typer.Option(False, "--json", help="Emit a JSON object instead of lines."),
) -> None:
    """Print the grocery category inferred for each item name."""

    results = {name: classify(name) for name in names}
    if as_json:
        typer.echo(json.dumps(results, indent=2))
        return
    for name, category in results.items():
        typer.echo(f"{name}\t{category}")


@app.command("categories")
def categories_command() -> None:
    """List the configured categories in display order."""

    for category in get_category_table().categories:
        typer.echo(category)


@app.command("show-list")
def show_list(list_id: str = typer.Argument(..., help="Shopping list ID.")) -> None:
    """Print a shopping list grouped into category sections."""

    shopping_list = get_shopping_list(list_id)
    if shopping_list is None:
        typer.secho(f"Shopping list {list_id} not found", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{shopping_list.name} [{shopping_list.status}]")
    for category, items in group_by_category(shopping_list.items):
        typer.echo(f"\n{category}")
        for item in items:
            mark = "x" if item.checked else " "
            badge = badge_for(item.category)
            suffix = f"  <{badge}>" if badge else ""
            typer.echo(f"  [{mark}] {format_item_label(item)}{suffix}")


@app.command("issue-session")
def issue_session(
    user_id: str = typer.Option(..., "--user-id", help="User the session belongs to."),
    email: Optional[str] = typer.Option(None, "--email"),
    name: Optional[str] = typer.Option(None, "--name"),
    ttl_days: float = typer.Option(7.0, "--ttl-days", help="Days until the session expires."),
) -> None:
    """Create a session token for local development and print it."""

    session = create_session(
        user_id=user_id,
        email=email,
        name=name,
        ttl=timedelta(days=ttl_days),
    )
    typer.echo(session.token)


@app.command("countdown")
def countdown(
    seconds: float = typer.Argument(..., help="Countdown length in seconds."),
    label: str = typer.Option("Timer", "--label"),
    interval_ms: int = typer.Option(250, "--interval-ms", help="Display refresh interval."),
) -> None:
    """Run a single kitchen timer in the terminal until it completes."""

    if seconds <= 0:
        raise typer.BadParameter("seconds must be greater than 0")
    if interval_ms <= 0:
        raise typer.BadParameter("--interval-ms must be greater than 0")

    store = TimerStore()
    timer_id = "cli"
    store.add(timer_id, label, int(seconds * 1000))
    store.start(timer_id)
    finished = threading.Event()

    def refresh() -> None:
        remaining = live_remaining_ms(store.get(timer_id))
        typer.echo(f"\r{label} {format_remaining(remaining)}", nl=False)
        if remaining <= 0:
            store.check_completions()
            finished.set()

    with LiveTimerTick(refresh, interval_ms=interval_ms, enabled=True):
        try:
            finished.wait()
        except KeyboardInterrupt:
            store.pause(timer_id)
            typer.echo("\nStopped.")
            return
    typer.echo(f"\n{label} done.")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes."),
) -> None:
    """Run the API server under uvicorn."""

    uvicorn.run("clairos.server.app:app", host=host, port=port, reload=reload)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the ``clairos`` console script."""
    app(prog_name="clairos", args=argv)


if __name__ == "__main__":
    main()
