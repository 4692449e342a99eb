"""Command line for checking and scaffolding the post corpus."""

import json
import logging
from datetime import UTC
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from postcorpus.config import CorpusConfig
from postcorpus.config_loader import ConfigLoader
from postcorpus.exceptions import CorpusError
from postcorpus.logging_setup import configure_logging, console, err_console
from postcorpus.store import ContentStore
from postcorpus.types import Severity, ValidationReport
from postcorpus.validation import validate_corpus

app = typer.Typer(name="postcorpus", help="Check and scaffold a Markdown blog post corpus.", no_args_is_help=True)

logger = logging.getLogger(__name__)

ROOT_HELP = "Corpus root holding .postcorpus/config.yml (defaults to the current directory)."


def _load(root: Path | None) -> tuple[CorpusConfig, ContentStore]:
    config = ConfigLoader(root.resolve() if root else None).load()
    store = ContentStore.from_config(config)
    logger.debug("Using %r", store)
    return config, store


def _fail(exc: CorpusError) -> typer.Exit:
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False, soft_wrap=True)
    return typer.Exit(code=1)


@app.callback()
def main(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to POSTCORPUS_LOG_LEVEL or INFO).",
    ),
) -> None:
    configure_logging(log_level)


def _print_report(report: ValidationReport) -> None:
    if report.issues:
        table = Table(title=f"{len(report.issues)} issue(s) in {escape(str(report.root))}")
        table.add_column("Severity", style="bold")
        table.add_column("Code", style="cyan")
        table.add_column("Post")
        table.add_column("Message")
        for issue in sorted(report.issues, key=lambda i: (str(i.path or ""), i.code)):
            style = "red" if issue.severity == Severity.ERROR else "yellow"
            location = issue.slug or (str(issue.path) if issue.path else "")
            table.add_row(
                f"[{style}]{issue.severity.value}[/{style}]",
                issue.code,
                escape(location),
                escape(issue.message),
            )
        console.print(table)

    summary = f"{report.post_count} post(s), {len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    if report.ok:
        console.print(f"[bold green]✔[/bold green] {summary}")
    else:
        console.print(f"[bold red]✘[/bold red] {summary}")


@app.command()
def validate(
    root: Path = typer.Argument(None, help=ROOT_HELP, show_default=False),
    strict: bool = typer.Option(False, "--strict", help="Fail on warnings as well as errors."),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
) -> None:
    """
    Check slugs, front matter and dates of every post.
    """
    try:
        config, store = _load(root)
    except CorpusError as exc:
        raise _fail(exc) from exc

    settings = config.validation
    if strict:
        settings = settings.model_copy(update={"strict": True})

    report = validate_corpus(store, settings)
    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_report(report)

    if not report.ok:
        raise typer.Exit(code=1)


@app.command("list")
def list_posts(
    root: Path = typer.Argument(None, help=ROOT_HELP, show_default=False),
    tag: str = typer.Option(None, "--tag", help="Only posts with this tag."),
    category: str = typer.Option(None, "--category", help="Only posts in this category."),
) -> None:
    """
    List posts, newest first.
    """
    try:
        _, store = _load(root)
    except CorpusError as exc:
        raise _fail(exc) from exc

    posts = store.posts()
    if tag:
        posts = [post for post in posts if tag in post.tags]
    if category:
        posts = [post for post in posts if category in post.categories]

    table = Table(title=f"{len(posts)} post(s)")
    table.add_column("Date", style="bold")
    table.add_column("Slug", style="cyan")
    table.add_column("Title")
    table.add_column("Tags")
    for post in posts:
        table.add_row(
            post.date.astimezone(UTC).strftime("%Y-%m-%d"),
            escape(post.slug),
            escape(post.title),
            escape(", ".join(sorted(post.tags))),
        )
    console.print(table)


@app.command()
def show(
    slug: str = typer.Argument(..., help="Slug of the post."),
    root: Path = typer.Argument(None, help=ROOT_HELP, show_default=False),
) -> None:
    """
    Show the metadata of one post.
    """
    try:
        _, store = _load(root)
        post = store.get(slug)
    except CorpusError as exc:
        raise _fail(exc) from exc

    table = Table(show_header=False, title=escape(post.title))
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("slug", escape(post.slug))
    table.add_row("date", post.iso_date)
    table.add_row("description", escape(post.description or ""))
    table.add_row("categories", escape(", ".join(sorted(post.categories))))
    table.add_row("tags", escape(", ".join(sorted(post.tags))))
    if post.image:
        table.add_row("image", escape(post.image))
    for link in post.links:
        table.add_row("link", escape(link))
    for key, value in post.extra.items():
        table.add_row(escape(key), escape(str(value)))
    table.add_row("path", escape(str(post.path)))
    console.print(table)


@app.command()
def taxonomy(
    root: Path = typer.Argument(None, help=ROOT_HELP, show_default=False),
    kind: str = typer.Option("tags", "--kind", help="'tags' or 'categories'."),
) -> None:
    """
    Count posts per tag or category.
    """
    if kind not in ("tags", "categories"):
        err_console.print(
            f"[bold red]Error:[/bold red] --kind must be 'tags' or 'categories', got {escape(repr(kind))}"
        )
        raise typer.Exit(code=2)
    try:
        _, store = _load(root)
    except CorpusError as exc:
        raise _fail(exc) from exc

    table = Table(title=kind.capitalize())
    table.add_column("Term", style="bold cyan")
    table.add_column("Posts", justify="right")
    for term, slugs in store.taxonomy(kind).items():  # type: ignore[arg-type]
        table.add_row(escape(term), str(len(slugs)))
    console.print(table)


@app.command()
def new(
    title: str = typer.Argument(..., help="Post title."),
    root: Path = typer.Argument(None, help=ROOT_HELP, show_default=False),
    slug: str = typer.Option(None, "--slug", help="Slug (defaults to the slugified title)."),
    description: str = typer.Option(None, "--description", "-d", help="Short summary."),
    tags: list[str] = typer.Option([], "--tag", "-t", help="Tag (repeatable)."),
    categories: list[str] = typer.Option([], "--category", "-c", help="Category (repeatable)."),
) -> None:
    """
    Scaffold a new post directory for a pull request.
    """
    try:
        _, store = _load(root)
        post = store.create(title, slug=slug, description=description, tags=tags, categories=categories)
    except CorpusError as exc:
        raise _fail(exc) from exc

    console.print(
        f"[bold green]✔[/bold green] Created [cyan]{escape(post.slug)}[/cyan] at {escape(str(post.path))}"
    )


if __name__ == "__main__":
    app()
