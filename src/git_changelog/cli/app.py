"""
Main CLI application for git-changelog.

Provides a Typer-based command-line interface that files merged pull requests
into CHANGELOG.md under the version they will be released in.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..changelog import Changelog
from ..config import ChangelogConfig, get_config_manager, load_config
from ..core.entry import Revision
from ..exceptions import ChangelogError, GitError, NoEntry
from ..updater.base import Updater
from ..updater.github import GitHubUpdater
from ..vcs import git

# Initialize Typer app
app = typer.Typer(
    name="git-changelog",
    help="Keep CHANGELOG.md up to date from merged pull requests",
    add_completion=False,
    rich_markup_mode="rich"
)

# Global console for rich output
console = Console()

logger = logging.getLogger(__name__)


@dataclass
class UpdateStats:
    """Outcome counts of one update run."""

    added: int = 0
    unchanged: int = 0
    skipped: int = 0
    failed: int = 0


def fatal(message: str) -> None:
    console.print(f"[red]fatal: {escape(message)}[/red]")
    raise typer.Exit(1)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def enter_repository() -> Path:
    """Change to the root of the git repository and return it."""
    try:
        root = Path(git.root())
    except GitError as e:
        fatal(str(e))
    os.chdir(root)
    return root


def create_updater(config: ChangelogConfig) -> Updater:
    """Build the GitHub updater, falling back to the origin remote for owner and name."""
    github = config.github
    owner, repo, host = github.owner, github.repo, github.host
    if not owner or not repo:
        try:
            remote = git.parse_remote(git.remote_url())
        except GitError as e:
            fatal(f"Could not determine the GitHub repository: {e}")
        if remote is None:
            fatal("Could not determine the GitHub repository from the origin remote")
        host, owner, repo = remote

    return GitHubUpdater(
        owner,
        repo,
        token=github.token,
        host=host,
        api_url=github.api_url,
        trunk_branch=config.trunk_branch,
        labels=config.labels,
        default_version=config.default_version,
    )


def resolve_ranges(revs: List[str], select_all: bool) -> List[str]:
    """
    Turn command line revisions into git revision ranges.

    Without arguments the range starts at the last tag, or covers the whole
    history when there is no tag. Single revisions are extended to HEAD.
    """
    if select_all:
        return list(revs) or [git.HEAD]

    if not revs:
        tag = git.last_tag()
        return [git.rev_range(tag, git.HEAD)] if tag else [git.HEAD]

    return [rev if ".." in rev else git.rev_range(rev, git.HEAD) for rev in revs]


def load_changelog(path: Path) -> Changelog:
    """Parse the changelog if it exists or start an empty one."""
    if not path.exists():
        return Changelog()
    try:
        return Changelog.parse_file(path)
    except (OSError, UnicodeDecodeError) as e:
        fatal(f"Could not read {path}: {e}")


def process_revisions(
    changelog: Changelog,
    updater: Updater,
    revisions: Iterable[str],
    show: Optional[Callable[[str], Revision]] = None,
) -> UpdateStats:
    """
    Resolve and insert every revision, isolating failures to the revision that caused them.
    """
    show = show or git.show
    stats = UpdateStats()
    for rev_id in revisions:
        try:
            entry = updater.new_entry(show(rev_id))
        except NoEntry:
            stats.skipped += 1
            continue
        except ChangelogError as e:
            logger.error("Could not process %s: %s", rev_id, e)
            stats.failed += 1
            continue

        if changelog.add_entry(entry):
            stats.added += 1
        else:
            stats.unchanged += 1
    return stats


@app.command()
def update(
    revs: Optional[List[str]] = typer.Argument(None, help="Revisions or ranges to scan (default: since the last tag)"),
    select_all: bool = typer.Option(False, "--all", "-a", help="Select from the first commit to the selected commit (HEAD as the default)"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Changelog path relative to the repository root"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """
    Add merged pull requests to the changelog.
    """
    setup_logging(verbose)
    repo_dir = enter_repository()
    config = load_config(repo_dir)
    path = file or Path(config.changelog_path)

    changelog = load_changelog(path)

    try:
        revisions = git.merges(*resolve_ranges(revs or [], select_all))
    except GitError as e:
        fatal(f"Could not list revisions: {e}")

    with create_updater(config) as updater:
        stats = process_revisions(changelog, updater, revisions)

    try:
        changelog.write_file(path)
    except OSError as e:
        fatal(f"Could not update {path}: {e}")

    table = Table(title=f"Updated {escape(str(path))}", show_header=False)
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", style="green")
    table.add_row("Added", str(stats.added))
    table.add_row("Already present or dropped", str(stats.unchanged))
    table.add_row("Not a pull request", str(stats.skipped))
    table.add_row("Failed", str(stats.failed))
    console.print(table)


@app.command()
def nextver(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """
    Print the version of the next release based on the merges since the last release.
    """
    setup_logging(verbose)
    repo_dir = enter_repository()
    config = load_config(repo_dir)

    try:
        revisions = [git.show(rev) for rev in git.merges(*resolve_ranges([], False))]
    except GitError as e:
        fatal(f"Could not list revisions: {e}")

    with create_updater(config) as updater:
        try:
            version = updater.next_version(revisions)
        except ChangelogError as e:
            fatal(str(e))

    if version is None:
        fatal("No pull requests merged since the last release")
    typer.echo(f"v{version}")


@app.command()
def show(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Changelog path"),
) -> None:
    """
    List the version sections of the changelog.
    """
    path = file or Path(load_config().changelog_path)
    if not path.exists():
        fatal(f"{path} does not exist")

    changelog = load_changelog(path)
    table = Table(title=escape(str(path)))
    table.add_column("Version", style="cyan")
    table.add_column("Released", style="green")
    for version, label in changelog.versions():
        table.add_row(f"v{version}", escape(label))
    console.print(table)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    create_default: bool = typer.Option(False, "--create-default", help="Create default config file"),
) -> None:
    """
    Manage git-changelog configuration.
    """
    config_manager = get_config_manager()

    if create_default:
        path = config_manager.create_default_config()
        console.print(f"[green]Created default configuration at {escape(str(path))}[/green]")
        return

    if show:
        info = config_manager.get_config_info()
        current = config_manager.load_config()

        config_display = f"""[bold]git-changelog Configuration[/bold]

[bold cyan]Changelog:[/bold cyan]
• Path: {escape(current.changelog_path)}
• Trunk Branch: {escape(current.trunk_branch)}
• First Version: {escape(current.default_version)}

[bold yellow]GitHub:[/bold yellow]
• Host: {escape(current.github.host)}
• Repository: {escape(info['github_repo'] or 'from origin remote')}
• Token Set: {'Yes' if info['github_token_set'] else 'No'}

[bold green]Labels:[/bold green]"""

        for name, kind in current.labels.items():
            config_display += f"\n• {escape(name)}: {kind.value}"

        config_display += f"""

[bold magenta]Files:[/bold magenta]
• Config File: {escape(info['config_file'])}
• Exists: {'Yes' if info['config_exists'] else 'No'}"""

        console.print(Panel(config_display, border_style="green"))
        return

    console.print("Use [cyan]git-changelog config --show[/cyan] to see full configuration")
    console.print("Use [cyan]git-changelog config --create-default[/cyan] to create a default config file")


if __name__ == "__main__":
    app()
