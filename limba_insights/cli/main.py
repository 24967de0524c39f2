"""
Typer CLI for limba-insights.

Commands:
    limba grammar map [--level B1]          - List the grammar feature map
    limba grammar chain FEATURE_KEY         - Show a feature's prerequisite tree
    limba content list                      - List content (CEFR-stratified unless --difficulty)
    limba content coverage [--gaps-only]    - Grammar coverage audit
    limba serve                             - Run the HTTP API

Usage:
    limba --help
    limba grammar chain past_tense_perfect --json
    limba content list --topic food --limit 12
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from config import get_settings
from limba_insights.analytics import service
from limba_insights.analytics.cefr import CEFR_LEVELS, CefrLevel, band_of
from limba_insights.analytics.exceptions import FeatureNotFoundError
from limba_insights.analytics.models import PrerequisiteNode
from limba_insights.db.database import session_scope
from limba_insights.db.repository import ContentFilters

app = typer.Typer(
    help="limba-insights CLI: read-only analytics over grammar, content and telemetry",
    no_args_is_help=True,
)

console = Console()


# ========================================
# GRAMMAR COMMANDS
# ========================================

grammar_app = typer.Typer(help="Grammar feature map and prerequisite chains")
app.add_typer(grammar_app, name="grammar")


@grammar_app.command("map")
def grammar_map(
    level: Optional[CefrLevel] = typer.Option(None, "--level", "-l", help="Filter by CEFR level"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """List grammar features ordered by CEFR level and sort order."""
    with session_scope() as session:
        features = service.get_grammar_map(session, level.value if level else None)

    if as_json:
        console.print_json(json.dumps([feature.to_dict() for feature in features]))
        return

    table = Table(title="Grammar Feature Map", show_header=True)
    table.add_column("Level", style="cyan")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Category", style="dim")
    table.add_column("Prerequisites", style="dim")

    for feature in features:
        table.add_row(
            feature.cefr_level,
            feature.feature_key,
            feature.feature_name,
            feature.category or "",
            ", ".join(feature.prerequisites),
        )

    console.print(table)


def _add_branch(tree: Tree, node: PrerequisiteNode) -> None:
    for child in node.prerequisites:
        if child.is_placeholder:
            label = f"[red]{child.feature_key}[/red] [dim]{child.feature_name}[/dim]"
        else:
            label = f"[cyan]{child.cefr_level}[/cyan] {child.feature_key} [dim]{child.feature_name}[/dim]"
        _add_branch(tree.add(label), child)


@grammar_app.command("chain")
def grammar_chain(
    feature_key: str = typer.Argument(..., help="feature_key to trace prerequisites for"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Show the recursive prerequisite tree for a grammar feature."""
    try:
        with session_scope() as session:
            tree = service.get_prerequisite_chain(session, feature_key)
    except FeatureNotFoundError as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(tree.to_dict()))
        return

    root = Tree(f"[bold cyan]{tree.cefr_level}[/bold cyan] [bold]{tree.feature_key}[/bold] {tree.feature_name}")
    _add_branch(root, tree)
    console.print(root)
    console.print(f"\n  Depth: {tree.depth()}")


# ========================================
# CONTENT COMMANDS
# ========================================

content_app = typer.Typer(help="Content listing and grammar coverage")
app.add_typer(content_app, name="content")


@content_app.command("list")
def content_list(
    difficulty: Optional[float] = typer.Option(
        None, "--difficulty", "-d", min=1.0, max=9.5, help="Exact difficulty level (1.0-9.5)"
    ),
    topic: Optional[str] = typer.Option(None, "--topic", "-t", help="Topic substring (case-insensitive)"),
    content_type: Optional[str] = typer.Option(None, "--type", help="audio or text"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Max results"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """List content items; stratified across CEFR levels unless --difficulty is given."""
    if content_type is not None and content_type not in ("audio", "text"):
        console.print(f"[red]✗[/red] Invalid content type: {content_type} (expected audio or text)")
        raise typer.Exit(code=2)

    filters = ContentFilters(
        difficulty_level=difficulty,
        topic=topic,
        content_type=content_type,
        limit=limit or get_settings().content_default_limit,
    )
    with session_scope() as session:
        items = service.get_content(session, filters)

    if as_json:
        console.print_json(json.dumps([item.to_dict() for item in items]))
        return

    table = Table(title=f"Content ({len(items)} items)", show_header=True)
    table.add_column("Level", style="cyan")
    table.add_column("Difficulty", justify="right")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Topic", style="dim")
    table.add_column("Created", style="dim")

    for item in items:
        table.add_row(
            band_of(item.difficulty_level).value,
            f"{item.difficulty_level:.1f}",
            item.type,
            item.title,
            item.topic or "",
            item.created_at.strftime("%Y-%m-%d"),
        )

    console.print(table)


@content_app.command("coverage")
def content_coverage(
    gaps_only: bool = typer.Option(False, "--gaps-only", help="Only show features with no content"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Cross-reference the grammar map against content grammar tags."""
    with session_scope() as session:
        report = service.get_coverage_report(session)

    if as_json:
        console.print_json(json.dumps(report.to_dict()))
        return

    rows = report.gap_rows if gaps_only else list(report.features)

    table = Table(title="Grammar Coverage", show_header=True)
    table.add_column("Level", style="cyan")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Category", style="dim")
    table.add_column("Content", justify="right")

    for row in rows:
        count = "[red]0[/red]" if row.is_gap else str(row.content_count)
        table.add_row(row.cefr_level, row.feature_key, row.feature_name, row.category or "", count)

    console.print(table)

    summary = report.summary
    console.print(
        f"\n  Covered: {summary.covered}/{summary.total_features} "
        f"({summary.coverage_percent}%)  Gaps: {summary.gaps}"
    )
    by_level = {level.value: 0 for level in CEFR_LEVELS}
    for row in report.gap_rows:
        if row.cefr_level in by_level:
            by_level[row.cefr_level] += 1
    console.print("  Gaps by level: " + ", ".join(f"{level} {count}" for level, count in by_level.items()))


# ========================================
# SERVER
# ========================================


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "limba_insights.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    """Entry point for the CLI."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="WARNING",
        format="<level>{message}</level>",
    )
    app()


if __name__ == "__main__":
    main()
