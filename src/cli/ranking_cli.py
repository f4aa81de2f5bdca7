"""
QE Ranking CLI - inspect the course ranking endpoints from a terminal.

Usage:
    qe-ranking show 42                       # Ranking page holding the current user
    qe-ranking show 42 --page 3 --with-risk  # Page 3, risk-mode scores
    qe-ranking status 42                     # Your own standing in course 42
    qe-ranking health                        # Are the qe/v1 routes reachable?

Configuration comes from QE_API_URL / QE_NONCE (environment or .env).
"""

from __future__ import annotations

import asyncio
import sys
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import get_settings
from src.ranking import (
    CourseRankingClient,
    CourseRankingSession,
    RankingApiConfig,
    RankingApiError,
    RankingConfigError,
)
from src.ranking.coordinator import RankingFetchCoordinator

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="qe-ranking",
    help="Course ranking inspector for the Quiz Extended REST API",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def get_api_config() -> RankingApiConfig:
    """Load API configuration or exit with a readable message."""
    try:
        return RankingApiConfig.from_settings()
    except RankingConfigError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def show(
    course_id: Annotated[int, typer.Argument(help="Course ID", metavar="COURSE_ID")],
    page: Annotated[
        int | None, typer.Option("--page", "-p", help="Page to show (default: your page)")
    ] = None,
    with_risk: Annotated[
        bool, typer.Option("--with-risk", "-r", help="Rank by risk-mode scores")
    ] = False,
    per_page: Annotated[
        int | None, typer.Option("--per-page", "-n", help="Rows per page (max 50)")
    ] = None,
) -> None:
    """Show one page of a course ranking with course statistics."""
    config = get_api_config()
    ok = asyncio.run(_run_show(config, course_id, page, with_risk, per_page))
    if not ok:
        raise typer.Exit(1)


async def _run_show(
    config: RankingApiConfig,
    course_id: int,
    page: int | None,
    with_risk: bool,
    per_page: int | None,
) -> bool:
    async with CourseRankingClient(config) as client:
        session = CourseRankingSession(
            client,
            per_page=per_page,
            auto_jump_to_user_page=page is None,
        )
        session.coordinator.with_risk = with_risk
        await session.open(course_id)
        if page is not None and page != session.coordinator.pagination.current_page:
            if not await session.go_to_page(page):
                console.print(
                    f"[yellow]Page {page} is out of range "
                    f"(1-{session.coordinator.pagination.total_pages})[/]"
                )

        coordinator = session.coordinator
        if coordinator.show_inline_error:
            console.print(f"[red]Error loading ranking: {coordinator.error}[/]")
            return False

        _render_ranking(coordinator)
        return True


def _render_ranking(coordinator: RankingFetchCoordinator) -> None:
    with_risk = coordinator.with_risk
    pagination = coordinator.pagination
    stats = coordinator.statistics

    if stats is not None:
        console.print(
            Panel(
                f"Users: [bold]{stats.total_users}[/]   "
                f"Average: [bold]{stats.average_for(with_risk):.2f}[/]   "
                f"Top 20% cutoff: [bold]{stats.top_20_cutoff_for(with_risk):.2f}[/]",
                title=f"Course ranking ({'with' if with_risk else 'without'} risk)",
                border_style="cyan",
            )
        )

    table = Table(title=f"Page {pagination.current_page}/{pagination.total_pages}")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("User")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Quizzes", justify="right")
    table.add_column("Attempts", justify="right")

    for entry in coordinator.entries:
        name = f"[bold]{entry.display_name}[/] (you)" if entry.is_current_user else entry.display_name
        table.add_row(
            str(entry.position),
            name,
            f"{entry.score_for(with_risk):.2f}",
            str(entry.quizzes_completed),
            str(entry.total_attempts),
        )

    console.print(table)
    if coordinator.error:
        console.print(f"[yellow]Showing previous data; last refresh failed: {coordinator.error}[/]")


@app.command()
def status(
    course_id: Annotated[int, typer.Argument(help="Course ID", metavar="COURSE_ID")],
) -> None:
    """Show your own standing in a course."""
    config = get_api_config()
    ok = asyncio.run(_run_status(config, course_id))
    if not ok:
        raise typer.Exit(1)


async def _run_status(config: RankingApiConfig, course_id: int) -> bool:
    async with CourseRankingClient(config) as client:
        try:
            my_status = await client.get_my_ranking_status(course_id)
        except RankingApiError as e:
            console.print(f"[red]Could not load ranking status: {e}[/]")
            return False

    table = Table(title=f"My ranking status - course {course_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Quizzes completed", f"{my_status.completed_quizzes}/{my_status.total_quizzes}")
    table.add_row("Average score", f"{my_status.average_score:.2f}")
    table.add_row("Average score (risk)", f"{my_status.average_score_with_risk:.2f}")
    if my_status.position is not None:
        table.add_row("Position", f"{my_status.position}/{my_status.total_users}")
        table.add_row("Position (risk)", f"{my_status.position_with_risk}/{my_status.total_users}")
    table.add_row("Completed all", "✓" if my_status.has_completed_all else "✗")
    console.print(table)

    if not my_status.has_completed_all and my_status.completed_quizzes > 0:
        console.print(
            f"[yellow]Provisional score: {my_status.pending_quizzes} quizzes pending.[/]"
        )
    return True


@app.command()
def health() -> None:
    """Check that the ranking routes are reachable."""
    config = get_api_config()
    healthy = asyncio.run(_run_health(config))
    if healthy:
        console.print(f"[green]✓ {config.api_url} is reachable[/]")
    else:
        console.print(f"[red]✗ {config.api_url} is unreachable[/]")
        raise typer.Exit(1)


async def _run_health(config: RankingApiConfig) -> bool:
    async with CourseRankingClient(config) as client:
        return await client.health_check()


# =============================================================================
# Entry Point
# =============================================================================

def run() -> None:
    """CLI entry point."""
    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level.upper(),
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    run()
