"""Command-line interface for readingtracker.

Built with Typer for commands and Rich for beautiful output.
"""

import logging
from datetime import date
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import get_config
from .db.schemas import BookCategory, BookView
from .errors import NotFoundError, ReadingTrackerError
from .services import Tracker, get_tracker
from .settings.schemas import ThemeMode
from .streaks.manager import streak_message
from .streaks.schemas import StreakStatus

# Create the main app
app = typer.Typer(
    name="readingtracker",
    help="Track pages read, reading streaks and statistics.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
theme_app = typer.Typer(help="Show or change the app theme.")
app.add_typer(theme_app, name="theme")

# Rich console for pretty output
console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Track pages read, reading streaks and statistics."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def _tracker() -> Tracker:
    """Get the tracker, exiting with the configuration problems if any."""
    problems = get_config().validate()
    if problems:
        for problem in problems:
            print_error(problem)
        raise typer.Exit(1)
    try:
        return get_tracker()
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        print_error(f"Invalid date: {value} (expected YYYY-MM-DD)")
        raise typer.Exit(1)


def _find_book(tracker: Tracker, query: str) -> BookView:
    """Resolve a book by id, id prefix or title words."""
    books = tracker.catalog.list_books()
    for book in books:
        if book.id == query:
            return book

    matches = [b for b in books if b.id.startswith(query)]
    if not matches:
        matches = [b for b in books if query.lower() in b.title.lower()]
    if not matches:
        raise NotFoundError(f"No book found matching: {query}")

    if len(matches) == 1:
        return matches[0]

    console.print("\n[bold]Multiple books found:[/bold]")
    for i, b in enumerate(matches, 1):
        console.print(f"  {i}. {b.title} by {b.author}")
    choice = typer.prompt("Select book number", type=int, default=1)
    if choice < 1 or choice > len(matches):
        print_error("Invalid selection")
        raise typer.Exit(1)
    return matches[choice - 1]


def progress_bar(percent: int, width: int = 20) -> str:
    """Text progress bar, e.g. '█████░░░░░'."""
    filled = round(width * percent / 100)
    return "█" * filled + "░" * (width - filled)


def format_book_table(books: list[BookView], title: str = "Books") -> Table:
    """Create a rich table for displaying books."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Category", style="yellow")
    table.add_column("Progress", justify="right")

    for book in books:
        table.add_row(
            book.id[:8],
            book.title,
            book.author,
            book.category.value,
            f"{book.pages_read}/{book.total_pages} ({book.progress_percent}%)",
        )

    return table


def _show_book(book: BookView) -> None:
    lines = [
        f"[bold]{book.title}[/bold]",
        f"by {book.author}",
        "",
        f"Category: {book.category.value}",
        f"Pages: {book.pages_read} of {book.total_pages} ({book.remaining_pages} left)",
        f"[cyan]{progress_bar(book.progress_percent)}[/cyan] {book.progress_percent}%",
    ]
    if book.read_url:
        lines.append(f"Read online: {book.read_url}")
    if book.created_at:
        lines.append(f"[dim]Added {book.created_at:%Y-%m-%d}[/dim]")
    console.print(Panel("\n".join(lines), title=f"Book {book.id[:8]}", expand=False))


# ============================================================================
# Book Management Commands
# ============================================================================


@app.command()
def add(
    title: str = typer.Argument(..., help="Book title"),
    pages: int = typer.Option(..., "--pages", "-p", help="Total number of pages"),
    category: BookCategory = typer.Option(
        BookCategory.OTHER, "--category", "-c", case_sensitive=False, help="Book category"
    ),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Author"),
    cover: Optional[str] = typer.Option(None, "--cover", help="Cover image URL"),
) -> None:
    """Add a book to your library."""
    tracker = _tracker()
    try:
        book = tracker.catalog.add_book(
            {
                "title": title,
                "total_pages": pages,
                "category": category,
                "author": author,
                "cover_image": cover,
            }
        )
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Added: {book.title} ({book.total_pages} pages)")
    console.print(f"[dim]ID: {book.id}[/dim]")


@app.command("list")
def list_books(
    unfinished: bool = typer.Option(False, "--unfinished", "-u", help="Hide finished books"),
) -> None:
    """List your books, newest first."""
    tracker = _tracker()
    try:
        books = tracker.catalog.list_books()
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if unfinished:
        books = [b for b in books if not b.is_finished]

    if not books:
        console.print("[dim]No books yet. Add one with 'readingtracker add'.[/dim]")
        return

    console.print(format_book_table(books, title="My Books"))


@app.command()
def show(
    query: str = typer.Argument(..., help="Book id, id prefix or title"),
) -> None:
    """Show details and progress for a book."""
    tracker = _tracker()
    try:
        book = _find_book(tracker, query)
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    _show_book(book)


@app.command()
def delete(
    query: str = typer.Argument(..., help="Book id, id prefix or title"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a book and its reading history."""
    tracker = _tracker()
    try:
        book = _find_book(tracker, query)
        if not yes and not typer.confirm(f"Delete '{book.title}' and its history?", default=False):
            console.print("[dim]Cancelled.[/dim]")
            raise typer.Exit(0)
        tracker.catalog.delete_book(book.id)
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Deleted: {book.title}")


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete all books, reading history and cached book data."""
    tracker = _tracker()
    if not yes and not typer.confirm("Delete ALL reading data? This cannot be undone.", default=False):
        console.print("[dim]Cancelled.[/dim]")
        raise typer.Exit(0)

    try:
        tracker.catalog.reset()
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success("All reading data deleted")


# ============================================================================
# Reading Progress Commands
# ============================================================================


@app.command()
def log(
    query: str = typer.Argument(..., help="Book id, id prefix or title"),
    pages: str = typer.Argument(..., help="Pages read since the last update"),
    on_date: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD, default: today)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Cap at the last page without asking"),
) -> None:
    """Record pages read for a book."""
    tracker = _tracker()
    day = _parse_date(on_date)

    try:
        book = _find_book(tracker, query)
        preview = tracker.progress.preview(book.id, pages)

        increment = preview.requested
        if preview.would_exceed:
            if preview.capped_increment == 0:
                print_warning(f"'{book.title}' is already finished")
                raise typer.Exit(0)
            question = (
                f"Only {preview.capped_increment} pages left in '{book.title}'. "
                f"Record {preview.capped_increment} and mark it finished?"
            )
            if not yes and not typer.confirm(question, default=True):
                console.print("[dim]Cancelled.[/dim]")
                raise typer.Exit(0)
            increment = preview.capped_increment

        updated = tracker.progress.record_progress(book.id, increment, on_date=day)
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Logged {increment} pages for: {updated.title}")
    console.print(
        f"  [cyan]{progress_bar(updated.progress_percent)}[/cyan] "
        f"{updated.pages_read}/{updated.total_pages} ({updated.progress_percent}%)"
    )
    if updated.is_finished:
        console.print("  [bold green]Finished! 🎉[/bold green]")


@app.command()
def stats(
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Days in the window"),
) -> None:
    """Show pages read per day and the daily average."""
    tracker = _tracker()
    window = days if days is not None else tracker.config.stats_window_days

    try:
        result = tracker.analytics.compute_statistics(window)
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    peak = max((d.pages_read for d in result.days), default=0)

    table = Table(title=f"Last {result.window_days} Days", show_header=True, header_style="bold magenta")
    table.add_column("Day", style="cyan")
    table.add_column("Date", style="dim")
    table.add_column("Pages", justify="right")
    table.add_column("")

    for day in result.days:
        width = round(20 * day.pages_read / peak) if peak else 0
        table.add_row(day.day_name, day.date.isoformat(), str(day.pages_read), "█" * width)

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {result.total_pages} pages")
    console.print(f"[bold]Average:[/bold] {result.average_pages_per_day} pages/day")
    if result.best_day:
        console.print(
            f"[bold]Best day:[/bold] {result.best_day.day_name} "
            f"({result.best_day.pages_read} pages)"
        )


@app.command()
def streak() -> None:
    """Show your current and longest reading streak."""
    tracker = _tracker()
    try:
        result = tracker.streaks.compute_streak(tracker.config.streak_lookback_days)
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    day_word = "day" if result.current_streak == 1 else "days"
    lines = [
        f"[bold]Current streak:[/bold] {result.current_streak} {day_word}",
        f"[bold]Longest streak:[/bold] {result.longest_streak} days "
        f"[dim](last {result.lookback_days} days)[/dim]",
        "",
        streak_message(result.current_streak),
    ]
    if result.status == StreakStatus.AT_RISK:
        lines.append("[yellow]Read today to keep your streak going![/yellow]")

    console.print(Panel("\n".join(lines), title="Reading Streak", expand=False))


# ============================================================================
# Public-Domain Books
# ============================================================================


@app.command()
def search(
    query: str = typer.Argument(..., help="Title or author words"),
    limit: int = typer.Option(10, "--limit", "-l", help="Max results"),
) -> None:
    """Search Project Gutenberg for public-domain books."""
    tracker = _tracker()
    console.print(f"[dim]Searching Project Gutenberg for: {query}...[/dim]")
    try:
        results = tracker.gutendex().search(query)
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not results:
        console.print(f"[dim]No books found matching: {query}[/dim]")
        return

    table = Table(title=f"Gutenberg: {query}", show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Readable", justify="center")

    for book in results[:limit]:
        table.add_row(str(book.gutenberg_id), book.title, book.author, "✓" if book.read_url else "-")

    console.print(table)
    console.print("[dim]Add one with 'readingtracker add-gutenberg <ID>'.[/dim]")


@app.command("add-gutenberg")
def add_gutenberg(
    gutenberg_id: int = typer.Argument(..., help="Project Gutenberg book id"),
    pages: Optional[int] = typer.Option(None, "--pages", "-p", help="Total pages (default: 300)"),
) -> None:
    """Add a public-domain book from Project Gutenberg."""
    tracker = _tracker()
    try:
        result = tracker.gutendex().get_by_id(gutenberg_id)
        if result is None:
            print_error(f"No Gutenberg book with id {gutenberg_id}")
            raise typer.Exit(1)
        book = tracker.catalog.add_book(result.to_book_create(total_pages=pages))
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Added: {book.title} by {book.author}")
    if book.read_url:
        console.print(f"[dim]Read online: {book.read_url}[/dim]")


# ============================================================================
# Theme Commands
# ============================================================================


@theme_app.command("show")
def theme_show() -> None:
    """Show the current theme."""
    tracker = _tracker()
    console.print(f"Theme: [bold]{tracker.theme.get_theme().value}[/bold]")


@theme_app.command("set")
def theme_set(
    mode: ThemeMode = typer.Argument(..., case_sensitive=False, help="dark or light"),
) -> None:
    """Set the theme."""
    tracker = _tracker()
    try:
        theme = tracker.theme.set_theme(mode)
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Theme set to {theme.value}")


@theme_app.command("toggle")
def theme_toggle() -> None:
    """Switch between dark and light."""
    tracker = _tracker()
    try:
        theme = tracker.theme.toggle_theme()
    except ReadingTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Theme set to {theme.value}")


# ============================================================================
# Utility Commands
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"readingtracker version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
