"""Branch Manager - git branch workflows from the command line.

Usage:
    branch-manager create feature/user-login --base main
    branch-manager merge feature/user-login --into main
    branch-manager sync --strategy rebase
    branch-manager cleanup --dry-run
    branch-manager workflow complete-feature
    branch-manager backups restore 20241019-101500-merge

Exit codes: 0 success, 1 operation failed, 2 invalid usage,
124 git timed out, 130 interrupted.
"""

import functools
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from ..branching import __version__
from ..branching.config_file import load_branch_config
from ..branching.git_client import ErrorCategory, GitClient, GitCommandError
from ..branching.manager import (
    BranchManager,
    BranchManagerError,
    BranchStatus,
    MergeResult,
    MergeStrategy,
    SyncStatus,
    SyncStrategy,
    WorkflowResult,
)
from ..branching.workflows import WORKFLOW_GUIDANCE, WORKFLOW_PATTERNS, suggest_branch_name
from ..config.settings import load_config
from ..utils.logging import configure_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_TIMEOUT = 124
EXIT_INTERRUPTED = 130

app = typer.Typer(help="Branch Manager - git branch workflows", no_args_is_help=True)
workflow_app = typer.Typer(help="Multi-step workflows", no_args_is_help=True)
app.add_typer(workflow_app, name="workflow")
backups_app = typer.Typer(help="Safety backups of branch tips", no_args_is_help=True)
app.add_typer(backups_app, name="backups")

console = Console()


class BranchCliState:
    def __init__(self, manager: BranchManager, confirm: bool = True):
        self.manager = manager
        self.confirm = confirm


def handle_errors(func):
    """Map branch manager and git failures onto the documented exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BranchManagerError as e:
            console.print(f"[red]❌ {e.message}[/red]")
            raise typer.Exit(e.exit_code)
        except GitCommandError as e:
            console.print(f"[red]❌ {e.description}: {e}[/red]")
            if e.category == ErrorCategory.TIMEOUT:
                raise typer.Exit(EXIT_TIMEOUT)
            if e.category == ErrorCategory.USER_INPUT:
                raise typer.Exit(EXIT_USAGE)
            raise typer.Exit(EXIT_ERROR)
        except (KeyboardInterrupt, typer.Abort):
            console.print("\n[yellow]⚠️  Interrupted by user[/yellow]")
            raise typer.Exit(EXIT_INTERRUPTED)

    return wrapper


def confirm(state: BranchCliState, question: str) -> None:
    """Ask before a destructive step; declining aborts with exit 130."""
    if state.confirm and not typer.confirm(question, default=True):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(EXIT_INTERRUPTED)


def print_status(status: BranchStatus) -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_row("Branch:", f"[cyan]{status.branch or '(detached HEAD)'}[/cyan]")
    table.add_row("Upstream:", status.upstream or "[yellow]none[/yellow]")
    if status.sync_status != SyncStatus.NO_UPSTREAM:
        table.add_row(
            "Sync:", f"{status.sync_status.value} (ahead {status.ahead}, behind {status.behind})"
        )
    table.add_row("Working tree:", "[green]clean[/green]" if status.clean else "[yellow]dirty[/yellow]")
    console.print(table)
    for path in status.changed_files:
        console.print(f"  [yellow]M[/yellow] {path}")
    for path in status.untracked_files:
        console.print(f"  [red]?[/red] {path}")


def print_merge(result: MergeResult) -> None:
    if result.merged:
        console.print(
            f"[green]✅ Merged {result.source} into {result.target} ({result.strategy.value})[/green]"
        )
        for path in result.resolved:
            console.print(f"  [green]resolved[/green] {path}")
        return
    if not result.has_conflicts:
        console.print(f"[cyan]{result.message}[/cyan]")
        return

    console.print(f"[red]❌ {result.message}[/red]")
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("File")
    table.add_column("Complexity")
    table.add_column("Markers", justify="right")
    table.add_column("Auto-resolvable")
    for conflict in result.conflicts:
        table.add_row(
            conflict.path,
            conflict.complexity.value,
            str(conflict.markers),
            "yes (whitespace only)" if conflict.auto_resolvable else "no",
        )
    console.print(table)


def print_workflow(result: WorkflowResult) -> None:
    for step in result.steps:
        console.print(f"  • {step}")
    if result.merge is not None:
        print_merge(result.merge)


@app.callback()
def main(
    ctx: typer.Context,
    no_confirm: bool = typer.Option(False, "--no-confirm", "-y", help="Skip confirmation prompts"),
    repo: Optional[Path] = typer.Option(None, "--repo", "-C", help="Repository directory"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Branch manager config file"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    configure_logging("DEBUG" if debug else "INFO")
    if ctx.obj is not None:
        return
    cfg = load_branch_config(load_config().branch_manager, config_file)
    if not debug:
        configure_logging(cfg.log_level)
    manager = BranchManager(GitClient(repo, timeout=cfg.git_timeout), cfg)
    ctx.obj = BranchCliState(manager, confirm=cfg.require_confirmation and not no_confirm)


@app.command()
@handle_errors
def create(
    ctx: typer.Context,
    name: str,
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Branch to start from"),
    stash: bool = typer.Option(False, "--stash", help="Stash uncommitted changes first"),
):
    """Create a branch and switch to it."""
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    result = state.manager.create(name, base=base, stash=stash)
    console.print(f"[green]✅ Created {result.branch} from {result.base}[/green]")
    if result.stashed:
        console.print("[yellow]Uncommitted changes were stashed; run 'git stash pop' to restore[/yellow]")


@app.command()
@handle_errors
def switch(
    ctx: typer.Context,
    name: str,
    stash: bool = typer.Option(False, "--stash", help="Stash uncommitted changes first"),
):
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    result = state.manager.switch(name, stash=stash)
    if not result.changed:
        console.print(f"[cyan]Already on {name}[/cyan]")
        return
    console.print(f"[green]✅ Switched to {result.branch}[/green]")
    if result.stashed:
        console.print("[yellow]Uncommitted changes were stashed[/yellow]")


@app.command()
@handle_errors
def merge(
    ctx: typer.Context,
    source: str,
    into: Optional[str] = typer.Option(None, "--into", "-t", help="Target branch (default: current)"),
    strategy: MergeStrategy = typer.Option(MergeStrategy.AUTO, "--strategy", "-s"),
    auto_resolve: bool = typer.Option(
        False, "--auto-resolve", help="Keep our side of whitespace-only conflicts"
    ),
    merge_tool: bool = typer.Option(
        False, "--merge-tool", help="Open the configured tool on remaining conflicts"
    ),
):
    """Merge SOURCE into the target branch."""
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    target = into or state.manager.git.current_branch()
    confirm(state, f"Merge {source} into {target}?")
    result = state.manager.merge(
        source, target, strategy, auto_resolve=auto_resolve, merge_tool=merge_tool
    )
    print_merge(result)
    if result.has_conflicts:
        raise typer.Exit(EXIT_ERROR)


@app.command()
@handle_errors
def sync(
    ctx: typer.Context,
    branch: Optional[str] = typer.Argument(None, help="Branch to sync (default: current)"),
    strategy: SyncStrategy = typer.Option(SyncStrategy.AUTO, "--strategy", "-s"),
):
    """Bring a branch up to date with its upstream."""
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    result = state.manager.sync(branch, strategy)
    color = "green" if result.action != "none" else "cyan"
    console.print(f"[{color}]{result.message}[/{color}]")


@app.command()
@handle_errors
def status(ctx: typer.Context):
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    print_status(state.manager.status())


@app.command()
@handle_errors
def cleanup(
    ctx: typer.Context,
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Branch merged into"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Only list branches"),
):
    """Delete local branches already merged into the target."""
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    candidates = state.manager.merged_candidates(target)
    if not candidates:
        console.print("[cyan]No merged branches to clean up[/cyan]")
        return
    console.print("Merged branches:")
    for branch in candidates:
        console.print(f"  • {branch}")
    if dry_run:
        return

    confirm(state, f"Delete {len(candidates)} merged branches?")
    result = state.manager.cleanup(target)
    console.print(f"[green]🧹 Deleted {len(result.deleted)} branches[/green]")
    if result.failed:
        console.print(f"[red]Could not delete: {', '.join(result.failed)}[/red]")
        raise typer.Exit(EXIT_ERROR)


@app.command("config")
def show_config(ctx: typer.Context):
    """Show the active configuration."""
    cfg = ctx.obj.manager.cfg
    table = Table(show_header=False, box=None, padding=(0, 2))
    for key, value in cfg.model_dump().items():
        table.add_row(f"{key}:", ", ".join(value) if isinstance(value, list) else str(value))
    console.print(table)


@app.command()
def version():
    console.print(f"branch-manager {__version__}")


@workflow_app.command("complete-feature")
@handle_errors
def complete_feature(
    ctx: typer.Context,
    source: Optional[str] = typer.Argument(None, help="Feature branch (default: current)"),
    target: Optional[str] = typer.Option(None, "--target", "-t"),
    push: bool = typer.Option(True, "--push/--no-push"),
):
    """Sync, merge the feature branch into the target, delete it and push."""
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    source = source or state.manager.git.current_branch()
    target = target or state.manager.cfg.default_base_branch
    confirm(state, f"Merge {source} into {target} and delete {source}?")
    result = state.manager.complete_feature_workflow(source, target, push=push)
    print_workflow(result)
    if not result.ok:
        raise typer.Exit(EXIT_ERROR)


@workflow_app.command("merge-and-push")
@handle_errors
def merge_and_push(
    ctx: typer.Context,
    source: str,
    target: Optional[str] = typer.Option(None, "--target", "-t"),
    push: bool = typer.Option(True, "--push/--no-push"),
):
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    target = target or state.manager.git.current_branch()
    confirm(state, f"Merge {source} into {target} and push?")
    result = state.manager.merge_and_push(source, target, push=push)
    print_workflow(result)
    if not result.ok:
        raise typer.Exit(EXIT_ERROR)


@backups_app.command("list")
@handle_errors
def list_backups(ctx: typer.Context):
    """List safety backups, oldest first."""
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    backups = state.manager.list_backups()
    if not backups:
        console.print("[cyan]No backups found[/cyan]")
        return
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("ID")
    table.add_column("Operation")
    table.add_column("Created")
    table.add_column("Branches")
    for backup in backups:
        table.add_row(
            backup.id,
            backup.operation,
            backup.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            ", ".join(f"{branch}@{sha[:8]}" for branch, sha in backup.branches.items()),
        )
    console.print(table)


@backups_app.command("restore")
@handle_errors
def restore_backup(ctx: typer.Context, backup_id: str):
    """Move the backed up branches back to their recorded commits."""
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    confirm(state, f"Restore branches from backup {backup_id}?")
    restored = state.manager.restore_backup(backup_id)
    console.print(f"[green]⏪ Restored {', '.join(restored)} from {backup_id}[/green]")


@backups_app.command("prune")
@handle_errors
def prune_backups(ctx: typer.Context):
    """Delete backups older than the configured retention."""
    state: BranchCliState = ctx.obj
    state.manager.ensure_repository()
    pruned = state.manager.prune_backups()
    console.print(f"[green]🧹 Pruned {len(pruned)} backups[/green]")


@workflow_app.command("suggest")
def suggest(
    ctx: typer.Context,
    description: str,
    branch_type: str = typer.Option("feature", "--type", help="feature, hotfix, release, ..."),
    workflow: Optional[str] = typer.Option(None, "--workflow", "-w"),
):
    """Suggest a branch name that follows the workflow's convention."""
    workflow = workflow or ctx.obj.manager.cfg.default_workflow
    if workflow not in WORKFLOW_PATTERNS:
        console.print(f"[red]Unknown workflow '{workflow}'. Choose from {', '.join(WORKFLOW_PATTERNS)}[/red]")
        raise typer.Exit(EXIT_USAGE)
    name = suggest_branch_name(workflow, branch_type, description)
    logger.debug(f"Suggested {name} for {workflow}")
    console.print(name)
    console.print(f"[dim]{WORKFLOW_GUIDANCE[workflow]}[/dim]")


if __name__ == "__main__":
    app()
