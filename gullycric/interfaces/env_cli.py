"""Flutter/Android development environment setup.

Usage:
    gullycric-env complete            # every phase in order
    gullycric-env android --dry-run   # print the commands only
    gullycric-env validate
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config.settings import load_config
from ..devenv.phases import EnvironmentSetup, Phase, ValidationReport
from ..devenv.runner import CommandRunner
from ..utils.logging import configure_logging

app = typer.Typer(help="Set up a Flutter/Android development environment")
console = Console()


def print_report(report: ValidationReport) -> None:
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Detail")
    for check in report.checks:
        if check.ok:
            mark = "[green]✓[/green]"
        elif check.required:
            mark = "[red]✗[/red]"
        else:
            mark = "[yellow]-[/yellow]"
        table.add_row(check.name, mark, check.detail or "")
    console.print(table)


@app.command()
def main(
    phase: Phase = typer.Argument(Phase.COMPLETE, help="Phase to run"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Print commands without running them"),
    rc_file: Optional[Path] = typer.Option(None, "--rc-file", help="Shell rc file for exports"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Run one setup phase, or all of them with `complete`."""
    configure_logging("DEBUG" if debug else "INFO")
    cfg = load_config().devenv
    if rc_file is not None:
        cfg = cfg.model_copy(update={"rc_file": str(rc_file)})

    setup = EnvironmentSetup(cfg, CommandRunner(dry_run=dry_run, timeout=cfg.command_timeout))
    try:
        results = setup.run(phase)
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Interrupted by user[/yellow]")
        raise typer.Exit(130)

    for result in results:
        mark = "[green]✅[/green]" if result.ok else "[red]❌[/red]"
        console.print(f"{mark} [bold]{result.phase.value}[/bold]: {result.message}")
        if dry_run:
            for command in result.commands:
                console.print(f"   [dim]$ {command}[/dim]")

    if setup.report is not None:
        print_report(setup.report)
    if not all(result.ok for result in results):
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
