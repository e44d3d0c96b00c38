"""
Artifact Harvester CLI — Query server build artifacts from GitHub tags.

Usage:
    artifact-harvester list --platform linux --status recommended
    artifact-harvester list --sort-by date --sort-order asc --limit 10 --offset 20
    artifact-harvester list --include-eol --output-dir ./export
    artifact-harvester issues --no-cache
    artifact-harvester summary
"""

import asyncio
import logging

import click

STATUS_CHOICES = ["recommended", "latest", "active", "deprecated", "eol"]


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _human_size(size: int) -> str:
    return f"{size / (1024 * 1024):.0f} MB"


def repository_options(func):
    """Options shared by every command that talks to GitHub."""
    func = click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")(func)
    func = click.option(
        "--token", "-t", type=str, default=None, envvar="GITHUB_TOKEN", help="GitHub API token."
    )(func)
    func = click.option("--repo", default="fivem", show_default=True, help="GitHub repository.")(func)
    func = click.option(
        "--owner", default="citizenfx", show_default=True, help="GitHub repository owner."
    )(func)
    return func


@click.group()
@click.version_option(package_name="artifact-harvester")
def cli():
    """Artifact Harvester — Server build artifacts from GitHub tags."""
    pass


@cli.command("list")
@click.option(
    "--platform",
    "-p",
    type=click.Choice(["all", "windows", "linux"]),
    default="all",
    help="Platform to list.",
)
@click.option("--build", "-b", "version", type=str, default="", help="Exact build number.")
@click.option("--status", "-s", type=click.Choice(STATUS_CHOICES), default=None, help="Support status.")
@click.option("--include-eol", is_flag=True, help="Include end-of-life builds.")
@click.option(
    "--sort-by",
    type=click.Choice(["version", "date", "size"]),
    default="version",
    show_default=True,
    help="Sort field.",
)
@click.option(
    "--sort-order",
    type=click.Choice(["asc", "desc"]),
    default="desc",
    show_default=True,
    help="Sort order.",
)
@click.option("--limit", "-l", type=int, default=0, help="Page size (default 50).")
@click.option("--offset", "-o", type=int, default=0, help="Number of results to skip.")
@click.option(
    "--output-dir",
    type=click.Path(),
    default=None,
    help="Also export the page as JSON into this directory.",
)
@repository_options
def list_artifacts(
    platform,
    version,
    status,
    include_eol,
    sort_by,
    sort_order,
    limit,
    offset,
    output_dir,
    owner,
    repo,
    token,
    verbose,
):
    """List artifacts matching the given filters."""
    from pathlib import Path

    from rich.console import Console
    from rich.table import Table

    from artifact_harvester.core.errors import ArtifactsError
    from artifact_harvester.core.service import ArtifactsService
    from artifact_harvester.exporters.json_export import JSONExporter
    from artifact_harvester.models.artifact import ArtifactsQuery

    _configure_logging(verbose)

    service = ArtifactsService(token=token, owner=owner, repo=repo)
    query = ArtifactsQuery(
        platform=platform,
        version=version,
        status=status or "",
        include_eol=include_eol,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )

    try:
        page = asyncio.run(service.query_artifacts(query))
    except ArtifactsError as e:
        raise click.ClickException(str(e)) from e

    console = Console()
    table = Table(title=f"{owner}/{repo} artifacts")
    table.add_column("Version", justify="right")
    table.add_column("Platform")
    table.add_column("Status")
    table.add_column("Size", justify="right")
    table.add_column("URL", overflow="fold")
    for entry in page.items:
        table.add_row(
            entry.version,
            entry.platform.value,
            entry.support_status.value,
            _human_size(entry.size),
            entry.url,
        )
    console.print(table)
    console.print(
        f"Page {page.current_page}/{page.total_pages} | "
        f"{page.filtered} matching of {page.total} artifacts"
    )

    if output_dir:
        exporter = JSONExporter(output_dir=Path(output_dir))

        async def export_page():
            for entry in page.items:
                await exporter.export(entry)
            await exporter.finalize()

        asyncio.run(export_page())
        console.print(f"[green]Exported {len(page.items)} artifacts to {output_dir}[/green]")

    if verbose:
        stats = service.fetcher.stats
        console.print(
            f"[cyan]Requests:[/cyan] {stats['successful_requests']}/{stats['total_requests']}"
        )
        if stats["rate_limit_remaining"] is not None:
            console.print(
                f"[cyan]Rate limit remaining:[/cyan] {stats['rate_limit_remaining']} "
                f"(resets {service.fetcher.rate_limit_reset_time()})"
            )


@cli.command()
@click.option("--no-cache", is_flag=True, help="Always fetch from GitHub.")
@repository_options
def issues(no_cache, owner, repo, token, verbose):
    """List repository issues (all states)."""
    from rich.console import Console
    from rich.table import Table

    from artifact_harvester.core.errors import ArtifactsError
    from artifact_harvester.core.service import ArtifactsService

    _configure_logging(verbose)

    service = ArtifactsService(token=token, owner=owner, repo=repo)
    try:
        fetched = asyncio.run(service.fetch_github_issues(use_cache=not no_cache))
    except ArtifactsError as e:
        raise click.ClickException(str(e)) from e

    table = Table(title=f"{owner}/{repo} issues ({len(fetched)})")
    table.add_column("#", justify="right")
    table.add_column("State")
    table.add_column("Title", overflow="fold")
    for issue in fetched:
        table.add_row(str(issue.number), issue.state, issue.title)
    Console().print(table)


@cli.command()
@repository_options
def summary(owner, repo, token, verbose):
    """Show per-platform totals and the latest / recommended builds."""
    from rich.console import Console

    from artifact_harvester.core.errors import ArtifactsError
    from artifact_harvester.core.service import ArtifactsService
    from artifact_harvester.models.artifact import EOL_INFO_URL, SUPPORT_STATUS_DESCRIPTIONS

    _configure_logging(verbose)

    service = ArtifactsService(token=token, owner=owner, repo=repo)
    try:
        summaries = asyncio.run(service.summarize())
    except ArtifactsError as e:
        raise click.ClickException(str(e)) from e

    console = Console()
    for platform, stats in summaries.items():
        console.print(f"\n[bold cyan]{platform.capitalize()}[/bold cyan]: {stats.total} artifacts")
        for status, count in stats.counts.items():
            console.print(f"  {status}: {count}")
        if stats.latest:
            console.print(f"  Latest: {stats.latest.version}")
        if stats.recommended:
            console.print(f"  Recommended: {stats.recommended.version}")

    console.print("\n[cyan]Support tiers:[/cyan]")
    for status, description in SUPPORT_STATUS_DESCRIPTIONS.items():
        console.print(f"  {status.value}: {description}")
    console.print(f"  More info: {EOL_INFO_URL}")


if __name__ == "__main__":
    cli()
