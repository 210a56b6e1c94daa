"""CLI entry point for inkwell."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from inkwell.collection import LoadReport, PostIndex, PostLoader
from inkwell.config import InkwellConfig, load_config
from inkwell.config.loader import DEFAULT_CONFIG_TEMPLATE
from inkwell.logs import setup_logging
from inkwell.output import IndexWriter
from inkwell.posts import (
    FilenameError,
    Post,
    PostError,
    absolute_url,
    dump_frontmatter,
    expand_permalink,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="inkwell",
    help="Browse a Jekyll-style blog: posts, categories, excerpts and code listings.",
)

config_app = typer.Typer(help="Manage inkwell configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: InkwellConfig | None = None


def _get_config() -> InkwellConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to _config.yml")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    setup_logging("debug" if verbose else _config.log_level, _config.log_format)


def _load_index(cfg: InkwellConfig) -> tuple[PostIndex, LoadReport]:
    loader = PostLoader(cfg)
    posts, report = loader.load_posts()
    if report.errors:
        rprint(
            f"[yellow]{len(report.errors)} file(s) failed to load.[/yellow] "
            "Run [bold]inkwell check[/bold] for details."
        )
    return PostIndex(posts), report


def _require_format(format: str, allowed: tuple[str, ...]) -> None:
    if format not in allowed:
        rprint(f"[red]Error:[/red] unknown format '{escape(format)}' ({' or '.join(allowed)})")
        raise typer.Exit(1)


def _format_date(post: Post) -> str:
    return post.date.strftime("%Y-%m-%d") if post.date else "-"


def _post_summary(post: Post, cfg: InkwellConfig) -> dict:
    return {
        "identifier": post.identifier,
        "title": post.title,
        "date": post.date.isoformat() if post.date else None,
        "categories": post.categories,
        "permalink": expand_permalink(post, cfg.permalink),
        "has_more": post.has_more,
        "languages": post.languages,
    }


def _display_post_table(title: str, posts: list[Post]) -> None:
    table = Table(title=title)
    table.add_column("Date", style="dim", no_wrap=True)
    table.add_column("Slug", style="cyan")
    table.add_column("Title")
    table.add_column("Categories", style="yellow")
    for p in posts:
        table.add_row(
            _format_date(p),
            escape(p.slug),
            escape(p.title),
            escape(", ".join(p.categories)) if p.categories else "-",
        )
    rprint(table)


@app.command("list")
def list_posts(
    category: Annotated[
        str | None, typer.Option("--category", help="Only posts in this category")
    ] = None,
    year: Annotated[int | None, typer.Option("--year", help="Only posts from this year")] = None,
    page: Annotated[
        int | None, typer.Option("--page", "-p", help="Page number (pagination.per_page per page)")
    ] = None,
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: table or json")
    ] = "table",
) -> None:
    """List posts, newest first."""
    _require_format(format, ("table", "json"))
    cfg = _get_config()
    index, _report = _load_index(cfg)

    posts = index.by_category(category) if category else index.all()
    if year is not None:
        posts = [p for p in posts if p.date is not None and p.date.year == year]

    if page is not None:
        pages = PostIndex(posts).paginate(cfg.pagination.per_page)
        if page < 1 or page > len(pages):
            rprint(f"[red]Error:[/red] page {page} out of range (1-{len(pages)})")
            raise typer.Exit(1)
        posts = list(pages[page - 1].posts)

    if format == "json":
        typer.echo(json.dumps([_post_summary(p, cfg) for p in posts], indent=2))
        return

    if not posts:
        rprint("[yellow]No posts found.[/yellow]")
        raise typer.Exit(0)
    _display_post_table(f"Posts ({len(posts)})", posts)


@app.command()
def show(
    key: str = typer.Argument(..., help="Post identifier (YYYY-MM-DD-slug) or slug"),
    excerpt: Annotated[bool, typer.Option("--excerpt", help="Only show the excerpt")] = False,
    code: Annotated[bool, typer.Option("--code", help="Only show code listings")] = False,
) -> None:
    """Show a single post."""
    cfg = _get_config()
    index, _report = _load_index(cfg)

    matches = index.find(key)
    if not matches:
        rprint(f"[red]Error:[/red] no post matches '{escape(key)}'")
        raise typer.Exit(1)
    if len(matches) > 1:
        rprint(f"[red]Error:[/red] '{escape(key)}' is ambiguous; use one of:")
        for m in matches:
            rprint(f"  - {escape(m.identifier)}")
        raise typer.Exit(1)

    post = matches[0]
    newer, older = index.neighbours(post)
    permalink = expand_permalink(post, cfg.permalink)
    url = absolute_url(cfg, permalink) if cfg.url else permalink
    comments = post.comments if post.comments is not None else cfg.comments
    panel_text = (
        f"[bold]{escape(post.title)}[/bold]\n\n"
        f"[dim]Date:[/dim]       {post.date.isoformat(sep=' ') if post.date else '-'}\n"
        f"[dim]Layout:[/dim]     {escape(post.layout)}\n"
        f"[dim]Categories:[/dim] {escape(', '.join(post.categories)) or 'none'}\n"
        f"[dim]Comments:[/dim]   {'on' if comments else 'off'}\n"
        f"[dim]URL:[/dim]        {escape(url)}\n"
        f"[dim]Code:[/dim]       {escape(', '.join(post.languages)) or 'none'}\n"
        f"[dim]Newer:[/dim]      {escape(newer.identifier) if newer else '-'}\n"
        f"[dim]Older:[/dim]      {escape(older.identifier) if older else '-'}"
    )
    rprint(Panel(panel_text, title=escape(post.identifier), border_style="blue"))

    if code:
        blocks = post.code_blocks
        if not blocks:
            rprint("[yellow]No code listings.[/yellow]")
            return
        for i, block in enumerate(blocks, start=1):
            label = block.language or "text"
            suffix = "" if block.closed else " [red](unclosed)[/red]"
            heading = f"{label}: {block.title}" if block.title else label
            rprint(f"\n[bold]#{i}[/bold] {escape(heading)} (line {block.start_line}){suffix}")
            rprint(Syntax(block.code, label, theme="monokai", line_numbers=True))
        return

    if excerpt:
        rprint(Syntax(post.excerpt, "markdown", theme="monokai"))
        if post.has_more:
            rprint(f"\n[dim]{escape(cfg.excerpt_link)}[/dim]")
        return

    rprint(Syntax(post.body.strip(), "markdown", theme="monokai"))


@app.command()
def categories() -> None:
    """List categories with post counts."""
    cfg = _get_config()
    index, _report = _load_index(cfg)

    cats = index.categories()
    if not cats:
        rprint("[yellow]No categories found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Categories ({len(cats)})")
    table.add_column("Category", style="cyan")
    table.add_column("Posts", justify="right", style="green")
    for name, count in cats:
        table.add_row(escape(name), str(count))
    rprint(table)


@app.command()
def archives() -> None:
    """Show posts grouped by year."""
    cfg = _get_config()
    index, _report = _load_index(cfg)

    grouped = index.archives()
    if not grouped:
        rprint("[yellow]No posts found.[/yellow]")
        raise typer.Exit(0)

    tree = Tree(f"[bold]Archives[/bold] ({len(index)} posts)")
    for year, posts in grouped.items():
        branch = tree.add(f"[bold]{year}[/bold] ({len(posts)})")
        for p in posts:
            branch.add(f"[dim]{_format_date(p)}[/dim] [cyan]{escape(p.title)}[/cyan]")
    rprint(tree)


@app.command()
def pages() -> None:
    """List undated pages such as About."""
    cfg = _get_config()
    loader = PostLoader(cfg)
    found, report = loader.load_pages()

    if not found:
        rprint("[yellow]No pages found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Pages ({len(found)})")
    table.add_column("Slug", style="cyan")
    table.add_column("Title")
    table.add_column("URL", style="green")
    for p in sorted(found, key=lambda p: p.slug):
        table.add_row(escape(p.slug), escape(p.title), escape(expand_permalink(p, cfg.permalink)))
    rprint(table)
    for err in report.errors:
        rprint(f"  [red]error:[/red] {escape(err.file)}: {escape(err.error)}")


@app.command()
def check(
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: table or json")
    ] = "table",
) -> None:
    """Report post and page files that fail to load."""
    _require_format(format, ("table", "json"))
    cfg = _get_config()
    loader = PostLoader(cfg)
    posts, post_report = loader.load_posts()
    found_pages, page_report = loader.load_pages()
    duplicates = PostIndex(posts).duplicate_slugs()

    errors = post_report.errors + page_report.errors

    if format == "json":
        typer.echo(json.dumps({
            "posts": post_report.loaded,
            "pages": page_report.loaded,
            "skipped": [s.model_dump() for s in post_report.skipped],
            "errors": [e.model_dump() for e in errors],
            "duplicate_slugs": {s: [p.identifier for p in ps] for s, ps in duplicates.items()},
        }, indent=2))
    else:
        table = Table(title="Load Report")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="green")
        table.add_row("Posts", str(post_report.loaded))
        table.add_row("Pages", str(page_report.loaded))
        table.add_row("Skipped", str(len(post_report.skipped)))
        table.add_row("Errors", str(len(errors)))
        table.add_row("Duration", f"{post_report.duration + page_report.duration:.2f}s")
        rprint(table)

        for err in errors:
            rprint(f"  [red]error:[/red] {escape(err.file)}: {escape(err.error)}")
        for skipped in post_report.skipped:
            rprint(f"  [dim]skipped:[/dim] {escape(skipped.file)}: {escape(skipped.reason)}")
        for slug, dupes in duplicates.items():
            ids = ", ".join(p.identifier for p in dupes)
            rprint(f"  [yellow]warn:[/yellow] slug '{escape(slug)}' used by {escape(ids)}")

    if errors:
        raise typer.Exit(1)


@app.command()
def index(
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output directory (default: source)")
    ] = None,
    format: Annotated[
        str, typer.Option("--format", "-f", help="Index format: yaml or json")
    ] = "yaml",
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without writing"),
) -> None:
    """Write a metadata index of all posts."""
    _require_format(format, ("yaml", "json"))
    cfg = _get_config()

    post_index, _report = _load_index(cfg)
    writer = IndexWriter(output or cfg.source, cfg)
    dest = writer.write(post_index, fmt=format, dry_run=dry_run)

    if dry_run:
        rprint(f"[yellow](dry run)[/yellow] would write {len(post_index)} post(s) to {escape(str(dest))}")
        return
    rprint(Panel(
        f"[dim]File:[/dim]   {escape(str(dest))}\n"
        f"[dim]Posts:[/dim]  {len(post_index)}",
        title="Index Written",
        border_style="green",
    ))


@app.command("frontmatter")
def frontmatter_cmd(
    key: str = typer.Argument(..., help="Post identifier (YYYY-MM-DD-slug) or slug"),
) -> None:
    """Print a post's front matter as parsed."""
    cfg = _get_config()
    index, _report = _load_index(cfg)
    matches = index.find(key)
    if len(matches) != 1:
        rprint(f"[red]Error:[/red] expected one post for '{escape(key)}', found {len(matches)}")
        raise typer.Exit(1)
    rprint(Syntax(dump_frontmatter(matches[0].front_matter), "yaml"))


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default _config.yml in current directory."""
    target = Path("_config.yml")
    if target.exists() and not force:
        rprint("[yellow]_config.yml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


def _load_single(path: str) -> Post:
    """Load one file for ad-hoc inspection (used by `inkwell parse`)."""
    cfg = _get_config()
    loader = PostLoader(cfg)
    try:
        return loader.load_post(path)
    except FilenameError:
        logger.debug("%s is not a dated post, loading as page", path)
        return loader.load_page(path)


@app.command()
def parse(
    file: str = typer.Argument(..., help="Path to a post or page file"),
) -> None:
    """Parse a single file and print its metadata as JSON."""
    cfg = _get_config()
    try:
        post = _load_single(file)
    except (PostError, OSError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    data = _post_summary(post, cfg)
    data["layout"] = post.layout
    data["code_blocks"] = len(post.code_blocks)
    typer.echo(json.dumps(data, indent=2))
