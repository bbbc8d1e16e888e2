"""
habits - command line for habit tracking and journaling.

Thin layer over the tracker, journal, and reporter: parses arguments,
renders tables with rich, or dumps JSON with --json.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from habitlog.core.clock import Clock, parse_date
from habitlog.core.config import Config
from habitlog.core.db import describe_database, init_db
from habitlog.core.errors import HabitLogError
from habitlog.core.settings import SettingsStore
from habitlog.journal.entries import JournalService
from habitlog.journal.mood import MOOD_EMOJIS, mood_to_emoji
from habitlog.review.report import PeriodSummary, Reporter, parse_mmyy
from habitlog.tracking.habits import HabitTracker

app = typer.Typer(help="habits - CLI for habit tracking and journaling", no_args_is_help=True)
journal_app = typer.Typer(help="Write, read, and search the journal", no_args_is_help=True)
app.add_typer(journal_app, name="journal")

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("habits")

CHECK = "✅"
EMPTY = "⬜"
NO_MOOD = "—"


@dataclass
class Services:
    """Everything a command needs, built once per invocation."""

    config: Config
    settings: SettingsStore
    clock: Clock
    tracker: HabitTracker
    journal: JournalService
    reporter: Reporter


def build_services(config: Optional[Config] = None) -> Services:
    """Wire config, settings, clock, and services; create the schema."""
    config = config or Config.from_env()
    if not config.is_memory:
        config.ensure_home()

    init_db(config)
    logger.debug(f"Using database {describe_database(config)}")

    settings = SettingsStore(config.settings_path)
    clock = Clock(settings)
    tracker = HabitTracker(config, clock)
    journal = JournalService(config, clock)

    return Services(
        config=config,
        settings=settings,
        clock=clock,
        tracker=tracker,
        journal=journal,
        reporter=Reporter(tracker, journal, clock),
    )


def _fail(message: str) -> None:
    err_console.print(f"[red]❌ {message}[/red]")
    raise typer.Exit(1)


def _echo_json(data) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _date_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        _fail(str(e))


def _pretty_date(value: str, with_weekday: bool = True) -> str:
    parsed = datetime.strptime(value, "%Y-%m-%d")
    if with_weekday:
        return f"{parsed:%a}, {parsed:%b} {parsed.day}"
    return f"{parsed:%b} {parsed.day}"


def _habit_label(habit) -> str:
    return habit.emoji or habit.name[:3]


def _services(ctx: typer.Context, check_timezone: bool = True) -> Services:
    if ctx.obj is None:
        ctx.obj = build_services()

    if check_timezone:
        try:
            ctx.obj.clock.zone()
        except HabitLogError as e:
            _fail(f"{e}. Fix it with: habits timezone <name>, or habits timezone --clear")
    return ctx.obj


def _grid(title: str, summary: PeriodSummary, day_label) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Day" if summary.year else "Date")
    for habit in summary.habits:
        table.add_column(_habit_label(habit), justify="center")
    table.add_column("Mood", justify="center")

    for day in summary.days:
        checks = [CHECK if log.logged else EMPTY for log in day.habits]
        table.add_row(day_label(day.date), *checks, day.mood_emoji or NO_MOOD)

    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Track daily habits, mood, and a short journal."""
    load_dotenv()

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@app.command()
def today(
    ctx: typer.Context,
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show today's habits, mood, and journal."""
    services = _services(ctx)
    day = services.reporter.day(_date_or_none(date))

    if as_json:
        _echo_json(day.to_dict())
        return

    console.print(f"\n📅 {_pretty_date(day.date)}\n")
    console.print("[bold]Habits:[/bold]")
    if not day.habits:
        console.print("  (no habits configured)")
    for i, log in enumerate(day.habits, start=1):
        mark = CHECK if log.logged else EMPTY
        console.print(f"  {i}. {log.habit.emoji or '•'} {log.habit.name} {mark}", markup=False)

    mood = f"{day.mood} {day.mood_emoji}" if day.mood else "(not set)"
    console.print(f"\nMood: {mood}")
    console.print(f"\nJournal: {day.content or '(empty)'}\n", markup=False)


@app.command()
def week(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show the last 7 days."""
    summary = _services(ctx).reporter.week()

    if as_json:
        _echo_json(summary.to_dict())
        return

    console.print(_grid("📊 Last 7 Days", summary, lambda d: _pretty_date(d, with_weekday=False)))


@app.command()
def history(
    ctx: typer.Context,
    mmyy: Optional[str] = typer.Argument(None, help="Month as MMYY (default: current month)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show a month of habits and mood."""
    services = _services(ctx)

    year = month = None
    if mmyy:
        try:
            year, month = parse_mmyy(mmyy)
        except ValueError as e:
            _fail(str(e))

    summary = services.reporter.month(year, month)

    if as_json:
        _echo_json(summary.to_dict())
        return

    title = f"📅 {datetime(summary.year, summary.month, 1):%B %Y}"
    console.print(_grid(title, summary, lambda d: str(int(d[-2:])).rjust(2)))

    average = summary.mood_average
    if average:
        console.print(f"Average mood: {average.display} {average.emoji}")


@app.command("list")
def list_habits(
    ctx: typer.Context,
    show_all: bool = typer.Option(False, "--all", "-a", help="Include inactive habits"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List habits."""
    habits = _services(ctx).tracker.list_habits(include_inactive=show_all)

    if as_json:
        _echo_json([h.to_dict() for h in habits])
        return

    if not habits:
        console.print("No habits configured. Add one with: habits add <name>")
        return

    for i, habit in enumerate(habits, start=1):
        status = "" if habit.active else " [inactive]"
        console.print(f"{i}. {habit.emoji or '•'} {habit.name} ({habit.frequency}){status}", markup=False)


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Habit name"),
    emoji: Optional[str] = typer.Option(None, "--emoji", "-e", help="Emoji label"),
    frequency: str = typer.Option("daily", "--frequency", "-f", help="Frequency label"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Add a new habit."""
    try:
        habit = _services(ctx).tracker.add_habit(name, emoji, frequency)
    except (HabitLogError, ValueError) as e:
        _fail(str(e))

    if as_json:
        _echo_json(habit.to_dict())
    else:
        console.print(f"{CHECK} Added habit: {habit.emoji or ''} {habit.name}", markup=False)


@app.command()
def edit(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Habit name or id"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    emoji: Optional[str] = typer.Option(None, "--emoji", "-e", help="New emoji"),
):
    """Rename a habit or change its emoji."""
    try:
        updated = _services(ctx).tracker.update_habit(target, name=name, emoji=emoji)
    except HabitLogError as e:
        _fail(str(e))

    if not updated:
        _fail(f"Habit not found: {target}")
    console.print(f"{CHECK} Updated: {target}", markup=False)


@app.command()
def log(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Habit name or id"),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD)"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Notes"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Log a habit as done."""
    log_date = _date_or_none(date)
    success = _services(ctx).tracker.log_habit(target, log_date, notes)

    if as_json:
        _echo_json({"success": success, "habit": target, "date": log_date or "today"})
        return

    if not success:
        _fail(f"Habit not found: {target}")
    console.print(f"{CHECK} Logged: {target}", markup=False)


@app.command()
def unlog(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Habit name or id"),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Remove a habit log."""
    success = _services(ctx).tracker.unlog_habit(target, _date_or_none(date))

    if as_json:
        _echo_json({"success": success, "habit": target})
        return

    if not success:
        _fail(f"Habit not found: {target}")
    console.print(f"{CHECK} Unlogged: {target}", markup=False)


@app.command()
def done(
    ctx: typer.Context,
    numbers: str = typer.Argument(..., help="Habit numbers from 'habits list', e.g. 1,3,4"),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Log several habits by their list number."""
    indices = [int(n.strip()) for n in numbers.split(",") if n.strip().isdigit()]
    result = _services(ctx).tracker.log_multiple(indices, _date_or_none(date))

    if as_json:
        _echo_json(result.to_dict())
        return

    if result.logged:
        console.print(f"{CHECK} Logged: {', '.join(result.logged)}", markup=False)
    if result.failed:
        console.print(f"❌ Failed: {', '.join(result.failed)}", markup=False)
    if not result.logged and not result.failed:
        console.print("Nothing logged.")


@app.command()
def streak(
    ctx: typer.Context,
    habit_or_days: Optional[str] = typer.Argument(None, help="Habit name, or number of days"),
    days: Optional[int] = typer.Argument(None, help="Number of days to show"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show streaks (default: all habits, 7 days)."""
    habit_name = None
    num_days = 7

    if habit_or_days:
        if habit_or_days.isdigit():
            num_days = int(habit_or_days)
        else:
            habit_name = habit_or_days
            if days is not None:
                num_days = days

    if num_days < 1:
        _fail(f"Number of days must be at least 1, got {num_days}")

    results = _services(ctx).reporter.streaks(habit_name, num_days)

    if not results:
        _fail(f"Habit not found: {habit_name}" if habit_name else "No habits configured.")

    if as_json:
        _echo_json([r.to_dict() for r in results])
        return

    console.print(f"\n🔥 Habit Streaks (last {num_days} days)\n")
    for r in results:
        visual = "".join(CHECK if logged else EMPTY for _, logged in r.days)
        console.print(
            f"{r.habit.emoji or '•'} {r.habit.name}: {visual} ({r.current_streak} day streak)",
            markup=False,
        )
    console.print()


@app.command()
def deactivate(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Habit name or id"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Deactivate a habit."""
    success = _services(ctx).tracker.deactivate_habit(target)

    if as_json:
        _echo_json({"success": success, "habit": target})
        return

    if not success:
        _fail(f"Habit not found: {target}")
    console.print(f"{CHECK} Deactivated: {target}", markup=False)


@app.command()
def activate(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Habit name or id"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Reactivate a habit."""
    success = _services(ctx).tracker.activate_habit(target)

    if as_json:
        _echo_json({"success": success, "habit": target})
        return

    if not success:
        _fail(f"Habit not found: {target}")
    console.print(f"{CHECK} Activated: {target}", markup=False)


@journal_app.command("write")
def journal_write(
    ctx: typer.Context,
    text: List[str] = typer.Argument(..., help="Text to add"),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Add to a day's journal."""
    content = " ".join(text).strip()
    if not content:
        _fail("Usage: habits journal write <text> [--date YYYY-MM-DD]")

    entry = _services(ctx).journal.write_journal(content, _date_or_none(date))

    if as_json:
        _echo_json(entry.to_dict())
    else:
        console.print(f"{CHECK} Journal updated for {entry.date}")


@journal_app.command("replace")
def journal_replace(
    ctx: typer.Context,
    text: List[str] = typer.Argument(..., help="New text"),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Overwrite a day's journal."""
    content = " ".join(text).strip()
    entry = _services(ctx).journal.replace_journal(content, _date_or_none(date))

    if as_json:
        _echo_json(entry.to_dict())
    else:
        console.print(f"{CHECK} Journal replaced for {entry.date}")


@journal_app.command("read")
def journal_read(
    ctx: typer.Context,
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD)"),
    last: Optional[int] = typer.Option(None, "--last", "-l", help="Show the last N entries"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Read a day's journal, or the last N entries."""
    journal = _services(ctx).journal

    if last:
        entries = journal.get_recent_entries(last)
    else:
        entry = journal.get_entry(_date_or_none(date))
        entries = [entry] if entry else []

    if as_json:
        if last:
            _echo_json([e.to_dict() for e in entries])
        else:
            _echo_json(entries[0].to_dict() if entries else None)
        return

    if not entries:
        console.print("No journal entry for this date.")
        return

    for entry in entries:
        mood = f" {mood_to_emoji(entry.mood)}" if entry.mood else ""
        console.print(f"\n📅 {_pretty_date(entry.date)}{mood}")
        console.print(entry.content or "(empty)", markup=False)


@journal_app.command("search")
def journal_search(
    ctx: typer.Context,
    query: List[str] = typer.Argument(..., help="Text to look for"),
    limit: int = typer.Option(10, "--limit", help="Maximum results"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Search journal entries (case-insensitive)."""
    text = " ".join(query).strip()
    if not text:
        _fail("Usage: habits journal search <query>")

    results = _services(ctx).journal.search_journal(text, limit)

    if as_json:
        _echo_json([e.to_dict() for e in results])
        return

    if not results:
        console.print("No matching entries found.")
        return

    for entry in results:
        content = entry.content or ""
        preview = content[:100] + ("..." if len(content) > 100 else "")
        console.print(f"\n📅 {_pretty_date(entry.date)}")
        console.print(preview, markup=False)


@app.command()
def mood(
    ctx: typer.Context,
    value: str = typer.Argument(..., help="Mood 1-5, or 'history'"),
    days: Optional[int] = typer.Argument(None, help="Days of history (default 7)"),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Set a day's mood, or show mood history."""
    services = _services(ctx)

    if value == "history":
        summary = services.reporter.mood_history(days or 7)
        _show_mood_history(summary, as_json)
        return

    scale = "  ".join(f"{score} = {face}" for score, face in MOOD_EMOJIS.items())
    if not value.isdigit():
        err_console.print("Usage: habits mood <1-5> [--date YYYY-MM-DD]")
        err_console.print("       habits mood history [days]")
        _fail(scale)

    try:
        entry = services.journal.set_mood(int(value), _date_or_none(date))
    except HabitLogError as e:
        err_console.print(scale)
        _fail(str(e))

    if as_json:
        _echo_json(entry.to_dict())
    else:
        console.print(f"{CHECK} Mood set: {entry.mood} {mood_to_emoji(entry.mood)}")


def _show_mood_history(summary: PeriodSummary, as_json: bool) -> None:
    if as_json:
        _echo_json([
            {"date": day.date, "mood": day.mood, "emoji": day.mood_emoji or NO_MOOD}
            for day in summary.days
        ])
        return

    console.print(f"\n😊 Mood History (last {len(summary.days)} days)\n")
    console.print(" ".join(day.mood_emoji or NO_MOOD for day in summary.days))
    console.print()

    if summary.days:
        console.print(
            f"{_pretty_date(summary.start, with_weekday=False)} → "
            f"{_pretty_date(summary.end, with_weekday=False)}"
        )

    average = summary.mood_average
    if average:
        console.print(f"Average: {average.display} {average.emoji}")
    console.print()


@app.command()
def timezone(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="IANA timezone, e.g. America/Toronto"),
    clear: bool = typer.Option(False, "--clear", help="Use the system's local time"),
):
    """Show or set the timezone used to decide what 'today' is."""
    settings = _services(ctx, check_timezone=False).settings

    if clear:
        settings.update(timezone=None)
        console.print(f"{CHECK} Timezone cleared (using local time)")
        return

    if name is None:
        console.print(settings.timezone or "(local time)")
        return

    try:
        settings.update(timezone=name)
    except HabitLogError as e:
        _fail(str(e))

    console.print(f"{CHECK} Timezone set: {name}")


@app.command()
def db(ctx: typer.Context):
    """Show database path."""
    typer.echo(describe_database(_services(ctx, check_timezone=False).config))


if __name__ == "__main__":
    app()
