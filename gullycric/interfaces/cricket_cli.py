"""GullyCric command line - matches, live scoring, teams, players and sign-in.

Usage:
    gullycric matches list --status in_progress
    gullycric matches create "Sunday Derby" --team1 team_1 --team2 team_2 --overs 10
    gullycric matches start match_1 --toss-winner team_1 --toss-decision bat
    gullycric score ball match_1 --bowler team_2_player_11 --striker team_1_player_1 --runs 4
    gullycric auth login demo@gullycric.com --password password123
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from ..adapters.auth_repository import AuthRepositoryImpl
from ..adapters.cricket_repository import CricketRepositoryImpl
from ..adapters.factory import create_auth_repository, create_cricket_repository, create_store
from ..config.settings import GullyCricConfig, load_config
from ..config.utils import (
    config_summary_lines,
    create_config_template,
    export_config_to_json,
    validate_config_file,
)
from ..domain.common.result import Result, action_text
from ..domain.models.enums import BallType, MatchStatus, TossDecision, WicketType
from ..domain.models.match import MatchDomain
from ..domain.models.player import PlayerDomain
from ..domain.models.score import ScoreDomain
from ..domain.usecases import (
    CreateMatchParams,
    CreateMatchUseCase,
    EndMatchParams,
    EndMatchUseCase,
    GetCurrentUserUseCase,
    GetMatchesParams,
    GetMatchesUseCase,
    GetMatchScoreUseCase,
    GetMatchUseCase,
    GetTeamsParams,
    GetTeamsUseCase,
    GetTeamUseCase,
    GetTopBatsmenUseCase,
    GetTopBowlersUseCase,
    LoginWithEmailParams,
    LoginWithEmailUseCase,
    LogoutUseCase,
    MatchIdParams,
    RecordBallParams,
    RecordBallUseCase,
    StartMatchParams,
    StartMatchUseCase,
    TeamIdParams,
    TopPlayersParams,
)
from ..utils.logging import configure_logging

app = typer.Typer(help="GullyCric - local cricket match management", no_args_is_help=True)
matches_app = typer.Typer(help="Create, browse and run matches", no_args_is_help=True)
score_app = typer.Typer(help="Ball-by-ball scoring", no_args_is_help=True)
teams_app = typer.Typer(help="Browse teams", no_args_is_help=True)
players_app = typer.Typer(help="Player leaderboards", no_args_is_help=True)
auth_app = typer.Typer(help="Sign in and out", no_args_is_help=True)
config_app = typer.Typer(help="Inspect and export configuration", no_args_is_help=True)
app.add_typer(matches_app, name="matches")
app.add_typer(score_app, name="score")
app.add_typer(teams_app, name="teams")
app.add_typer(players_app, name="players")
app.add_typer(auth_app, name="auth")
app.add_typer(config_app, name="config")

console = Console()


class CliContext:
    """Configuration plus lazily built repositories shared by one invocation."""

    def __init__(
        self,
        cfg: Optional[GullyCricConfig] = None,
        cricket: Optional[CricketRepositoryImpl] = None,
        auth: Optional[AuthRepositoryImpl] = None,
    ):
        self.cfg = cfg or load_config()
        self._cricket = cricket
        self._auth = auth
        self._store = None

    @property
    def store(self):
        if self._store is None:
            self._store = create_store(self.cfg)
        return self._store

    @property
    def cricket(self) -> CricketRepositoryImpl:
        if self._cricket is None:
            self._cricket = create_cricket_repository(self.cfg, store=self.store)
        return self._cricket

    @property
    def auth(self) -> AuthRepositoryImpl:
        if self._auth is None:
            self._auth = create_auth_repository(self.cfg, store=self.store)
        return self._auth


def unwrap(result: Result):
    """Value of a successful result; otherwise print the failure and exit 1."""
    if result.is_failure:
        failure = result.error
        console.print(f"[red]❌ {failure.message}[/red]")
        if failure.field_errors:
            for field, error in failure.field_errors.items():
                console.print(f"[red]   {field}: {error}[/red]")
        action = action_text(failure)
        if action != "OK":
            console.print(f"[dim]Next step: {action}[/dim]")
        raise typer.Exit(1)
    return result.value


def _when(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


def _status_style(status: MatchStatus) -> str:
    return {
        MatchStatus.IN_PROGRESS: "[bold green]live[/bold green]",
        MatchStatus.SCHEDULED: "[cyan]scheduled[/cyan]",
        MatchStatus.COMPLETED: "[dim]completed[/dim]",
    }.get(status, status.value)


def print_matches(matches: List[MatchDomain]) -> None:
    if not matches:
        console.print("[yellow]No matches found[/yellow]")
        return
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Overs", justify="right")
    table.add_column("Start")
    table.add_column("Venue")
    for match in matches:
        table.add_row(
            match.id,
            match.title,
            _status_style(match.status),
            str(match.total_overs),
            _when(match.start_time),
            match.venue or "-",
        )
    console.print(table)


def print_match(match: MatchDomain) -> None:
    console.print(f"\n[bold cyan]🏏 {match.title}[/bold cyan] ({match.id})")
    info = Table(show_header=False, box=None, padding=(0, 2))
    info.add_row("Status:", _status_style(match.status))
    info.add_row("Teams:", f"{match.team1.name} ({match.team1.id}) vs {match.team2.name} ({match.team2.id})")
    info.add_row("Format:", f"{match.match_format.value}, {match.total_overs} overs")
    info.add_row("Venue:", match.venue or "-")
    info.add_row("Start:", _when(match.start_time))
    if match.toss_winner:
        toss_team = match.team(match.toss_winner)
        decision = match.toss_decision.value if match.toss_decision else "-"
        info.add_row("Toss:", f"{toss_team.name if toss_team else match.toss_winner} chose to {decision}")
    console.print(info)

    for inning in match.innings:
        batting = match.team(inning.batting_team_id)
        name = batting.name if batting else inning.batting_team_id
        console.print(
            f"  Inning {inning.inning_number}: [bold]{name}[/bold] "
            f"{inning.runs}/{inning.wickets} ({inning.overs} ov, RR {inning.run_rate:.2f})"
        )
    if match.outcome:
        console.print(f"[bold green]🏆 {match.outcome.summary}[/bold green]")
    console.print()


def print_score(score: ScoreDomain) -> None:
    console.print(
        f"[bold]Inning {score.inning_number}:[/bold] {score.score_display} "
        f"({score.overs} ov) RR {score.run_rate:.2f}"
    )
    if score.current_over:
        console.print(f"  This over: {score.current_over}")
    if score.target is not None:
        console.print(
            f"  Target {score.target}: {score.runs_required} needed from "
            f"{score.balls_remaining} balls (RRR {score.required_run_rate or 0:.2f})"
        )
    if score.is_match_complete:
        console.print("[bold green]🏁 Match complete[/bold green]")
    elif score.is_inning_complete:
        console.print("[yellow]Inning complete[/yellow]")


def print_players(players: List[PlayerDomain], bowling: bool = False) -> None:
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("#", justify="right")
    table.add_column("Player")
    table.add_column("Team")
    if bowling:
        table.add_column("Wkts", justify="right")
        table.add_column("Avg", justify="right")
        table.add_column("Econ", justify="right")
    else:
        table.add_column("Runs", justify="right")
        table.add_column("Avg", justify="right")
        table.add_column("SR", justify="right")
    for rank, player in enumerate(players, start=1):
        stats = player.career_stats
        if bowling:
            numbers = (str(stats.wickets_taken), f"{stats.bowling_average:.2f}", f"{stats.economy_rate:.2f}")
        else:
            numbers = (str(stats.runs_scored), f"{stats.batting_average:.2f}", f"{stats.strike_rate:.2f}")
        table.add_row(str(rank), player.name, player.team_id or "-", *numbers)
    console.print(table)


@app.callback()
def main(
    ctx: typer.Context,
    offline: bool = typer.Option(False, "--offline", help="Use only locally stored data"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    configure_logging("DEBUG" if debug else "WARNING")
    if ctx.obj is None:
        cfg = load_config()
        if offline:
            cfg = cfg.model_copy(
                update={"network": cfg.network.model_copy(update={"offline": True})}
            )
        ctx.obj = CliContext(cfg)


# Matches


@matches_app.command("list")
def matches_list(
    ctx: typer.Context,
    status: Optional[MatchStatus] = typer.Option(None, "--status", "-s", help="Filter by status"),
    limit: int = typer.Option(20, "--limit", "-n"),
):
    """List matches, newest first."""
    repo = ctx.obj.cricket
    matches = unwrap(GetMatchesUseCase(repo)(GetMatchesParams(status=status, limit=limit)))
    print_matches(matches)


@matches_app.command("show")
def matches_show(ctx: typer.Context, match_id: str):
    print_match(unwrap(GetMatchUseCase(ctx.obj.cricket)(MatchIdParams(match_id=match_id))))


@matches_app.command("create")
def matches_create(
    ctx: typer.Context,
    title: str,
    team1: str = typer.Option(..., "--team1", help="ID of the first team"),
    team2: str = typer.Option(..., "--team2", help="ID of the second team"),
    overs: Optional[int] = typer.Option(None, "--overs", "-o", help="Overs per side"),
    players: int = typer.Option(11, "--players", help="Players per side"),
    venue: Optional[str] = typer.Option(None, "--venue"),
):
    """Schedule a match between two stored teams."""
    obj: CliContext = ctx.obj
    repo = obj.cricket
    first = unwrap(GetTeamUseCase(repo)(TeamIdParams(team_id=team1)))
    second = unwrap(GetTeamUseCase(repo)(TeamIdParams(team_id=team2)))
    match = unwrap(
        CreateMatchUseCase(repo, obj.cfg.match)(
            CreateMatchParams(
                title=title,
                team1=first,
                team2=second,
                total_overs=overs or obj.cfg.match.default_overs,
                players_per_team=players,
                venue=venue,
            )
        )
    )
    console.print(f"[green]✅ Created match {match.id}[/green]")
    print_match(match)


@matches_app.command("start")
def matches_start(
    ctx: typer.Context,
    match_id: str,
    toss_winner: Optional[str] = typer.Option(None, "--toss-winner", help="Team ID"),
    toss_decision: Optional[TossDecision] = typer.Option(None, "--toss-decision"),
):
    match = unwrap(
        StartMatchUseCase(ctx.obj.cricket)(
            StartMatchParams(
                match_id=match_id, toss_winner=toss_winner, toss_decision=toss_decision
            )
        )
    )
    console.print(f"[green]✅ {match.title} is live[/green]")
    print_match(match)


@matches_app.command("end")
def matches_end(ctx: typer.Context, match_id: str):
    """End a live match; the result follows from the innings."""
    match = unwrap(EndMatchUseCase(ctx.obj.cricket)(EndMatchParams(match_id=match_id)))
    print_match(match)


# Scoring


@score_app.command("ball")
def score_ball(
    ctx: typer.Context,
    match_id: str,
    bowler: str = typer.Option(..., "--bowler", "-b", help="Bowler player ID"),
    striker: str = typer.Option(..., "--striker", "-s", help="Striker player ID"),
    runs: int = typer.Option(0, "--runs", "-r"),
    ball_type: BallType = typer.Option(BallType.NORMAL, "--type", "-t"),
    wicket: Optional[WicketType] = typer.Option(None, "--wicket", "-w", help="Dismissal type"),
    non_striker: Optional[str] = typer.Option(None, "--non-striker"),
):
    """Record one delivery."""
    repo = ctx.obj.cricket
    score = unwrap(
        RecordBallUseCase(repo, repo)(
            RecordBallParams(
                match_id=match_id,
                bowler_id=bowler,
                striker_id=striker,
                non_striker_id=non_striker,
                runs=runs,
                ball_type=ball_type,
                is_wicket=wicket is not None,
                wicket_type=wicket,
                dismissed_player_id=striker if wicket else None,
            )
        )
    )
    print_score(score)


@score_app.command("show")
def score_show(ctx: typer.Context, match_id: str):
    print_score(unwrap(GetMatchScoreUseCase(ctx.obj.cricket)(MatchIdParams(match_id=match_id))))


# Teams and players


@teams_app.command("list")
def teams_list(ctx: typer.Context, limit: int = typer.Option(20, "--limit", "-n")):
    teams = unwrap(GetTeamsUseCase(ctx.obj.cricket)(GetTeamsParams(limit=limit)))
    if not teams:
        console.print("[yellow]No teams found[/yellow]")
        return
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Players", justify="right")
    table.add_column("Win %", justify="right")
    for team in teams:
        table.add_row(team.id, team.name, str(len(team.players)), f"{team.stats.win_percentage:.1f}")
    console.print(table)


@players_app.command("top-batsmen")
def players_top_batsmen(ctx: typer.Context, limit: int = typer.Option(10, "--limit", "-n")):
    print_players(unwrap(GetTopBatsmenUseCase(ctx.obj.cricket)(TopPlayersParams(limit=limit))))


@players_app.command("top-bowlers")
def players_top_bowlers(ctx: typer.Context, limit: int = typer.Option(10, "--limit", "-n")):
    players = unwrap(GetTopBowlersUseCase(ctx.obj.cricket)(TopPlayersParams(limit=limit)))
    print_players(players, bowling=True)


# Auth


@auth_app.command("login")
def auth_login(
    ctx: typer.Context,
    email: str,
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
):
    obj: CliContext = ctx.obj
    user = unwrap(
        LoginWithEmailUseCase(obj.auth, obj.cfg.auth)(
            LoginWithEmailParams(email=email, password=password)
        )
    )
    logger.debug(f"Signed in as {user.id}")
    console.print(f"[green]✅ Signed in as {user.email}[/green]")


@auth_app.command("logout")
def auth_logout(ctx: typer.Context):
    unwrap(LogoutUseCase(ctx.obj.auth)())
    console.print("[green]👋 Signed out[/green]")


@auth_app.command("whoami")
def auth_whoami(ctx: typer.Context):
    user = unwrap(GetCurrentUserUseCase(ctx.obj.auth)())
    if user is None:
        console.print("[yellow]Not signed in[/yellow]")
        raise typer.Exit(1)
    name = f"{user.first_name} {user.last_name}".strip() or user.email
    console.print(f"{name} <{user.email}> ({user.role.value})")


# Configuration


@config_app.command("show")
def config_show(ctx: typer.Context):
    for line in config_summary_lines(ctx.obj.cfg):
        console.print(line)


@config_app.command("template")
def config_template():
    """Print a JSON template with every option and its default."""
    console.print_json(create_config_template())


@config_app.command("export")
def config_export(ctx: typer.Context, output: Path):
    export_config_to_json(ctx.obj.cfg, output)
    console.print(f"[green]✅ Configuration written to {output}[/green]")


@config_app.command("validate")
def config_validate(path: Path):
    """Check a JSON configuration file without falling back to defaults."""
    issues = validate_config_file(path)
    if issues:
        for issue in issues:
            console.print(f"[red]❌ {issue}[/red]")
        raise typer.Exit(1)
    console.print("[green]✅ Configuration is valid[/green]")


if __name__ == "__main__":
    app()
