"""Command line interface for Sleeper Analyzer."""

from typing import Any, Callable, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from sleeper_analyzer.config import ConfigManager, Settings
from sleeper_analyzer.errors import AnalyzerError
from sleeper_analyzer.io.files import FileManager
from sleeper_analyzer.log import configure_logging
from sleeper_analyzer.response import ApiResponse
from sleeper_analyzer.services.aggregator import SleeperAggregator
from sleeper_analyzer.services.api import SleeperAPIClient, TrendingType

app = typer.Typer(
    name="sleeper-analyzer",
    help="Query Sleeper fantasy leagues, rosters, matchups and players",
    add_completion=False,
)
console = Console()


class CLIState:
    """Options shared by every command."""

    def __init__(self, json_output: bool = False, output: Optional[str] = None):
        self.json_output = json_output
        self.output = output
        self.config_manager = ConfigManager()
        self.config = self.config_manager.load_config()


def get_aggregator() -> SleeperAggregator:
    """Build an aggregator from environment settings."""
    return SleeperAggregator(SleeperAPIClient(Settings.from_env()))


def _state(ctx: typer.Context) -> CLIState:
    if ctx.obj is None:
        ctx.obj = CLIState()
    return ctx.obj


def _run(ctx: typer.Context, fetch: Callable[[SleeperAggregator], Any], render: Callable[[Any], None]) -> None:
    """Fetch through the aggregator, then print a table or the JSON envelope."""
    state = _state(ctx)
    aggregator = get_aggregator()
    try:
        result = fetch(aggregator)
    except AnalyzerError as e:
        response = ApiResponse.from_error(e)
        if state.json_output:
            typer.echo(response.to_json())
        else:
            console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(1)
    finally:
        aggregator.close()

    response = ApiResponse.ok(result)
    if state.output:
        path = FileManager(state.config_manager).write_response(response, state.output)
        if not state.json_output:
            console.print(f"[green]Saved response to {path}[/green]", highlight=False)

    if state.json_output:
        typer.echo(response.to_json())
    else:
        render(result)


def _league_id(state: CLIState, league_id: Optional[str]) -> str:
    resolved = league_id or state.config.league_id
    if not resolved:
        console.print("[red]❌ No league ID provided. Pass one or run set-defaults --league-id.[/red]")
        raise typer.Exit(1)
    return resolved


def _render_users(users) -> None:
    table = Table(title="Users")
    table.add_column("User ID", style="blue")
    table.add_column("Username", style="cyan")
    table.add_column("Display Name", style="green")
    table.add_column("Team Name")
    table.add_column("Bot")
    for user in users:
        table.add_row(
            user.user_id,
            user.username or "",
            user.display_name or "",
            user.team_name or "",
            "yes" if user.is_bot else "",
        )
    console.print(table)


def _render_leagues(leagues) -> None:
    table = Table(title="Leagues")
    table.add_column("League ID", style="blue")
    table.add_column("Name", style="green")
    table.add_column("Season")
    table.add_column("Sport")
    table.add_column("Status", style="yellow")
    table.add_column("Teams", justify="right")
    table.add_column("Slots", justify="right")
    for league in leagues:
        table.add_row(
            league.league_id,
            league.name,
            league.season,
            league.sport,
            league.status,
            str(league.total_rosters),
            str(len(league.starter_slots)),
        )
    console.print(table)


def _render_rosters(rosters) -> None:
    table = Table(title="Rosters")
    table.add_column("Roster", style="cyan", justify="right")
    table.add_column("Owner", style="blue")
    table.add_column("Players", justify="right")
    table.add_column("Starters", justify="right")
    table.add_column("Reserve", justify="right")
    for roster in rosters:
        table.add_row(
            str(roster.roster_id),
            roster.owner_id if roster.is_claimed else "unclaimed",
            str(len(roster.players)),
            str(len(roster.starters)),
            str(len(roster.reserve)),
        )
    console.print(table)


def _render_matchups(matchups) -> None:
    if not matchups:
        console.print("[yellow]No matchups found for this week[/yellow]")
        return

    table = Table(title="Matchups")
    table.add_column("Matchup", style="cyan")
    table.add_column("Roster", justify="right")
    table.add_column("Points", style="green", justify="right")
    table.add_column("Starters", justify="right")
    table.add_column("Bench", justify="right")
    for matchup in sorted(matchups, key=lambda m: (m.has_bye, m.matchup_id or 0, m.roster_id)):
        table.add_row(
            "BYE" if matchup.has_bye else f"#{matchup.matchup_id}",
            str(matchup.roster_id),
            f"{matchup.effective_points:.2f}",
            str(len(matchup.get_starters_list())),
            str(len(matchup.bench())),
        )
    console.print(table)


def _render_trending(entries) -> None:
    table = Table(title="Trending Players")
    table.add_column("Player ID", style="blue")
    table.add_column("Count", style="green", justify="right")
    for entry in entries:
        table.add_row(str(entry.get("player_id", "")), str(entry.get("count", "")))
    console.print(table)


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Print the JSON response envelope"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Also save the JSON envelope to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Query the Sleeper fantasy API."""
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        problems = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        console.print(f"[red]❌ Invalid SLEEPER_* settings: {problems}[/red]")
        raise typer.Exit(1)
    configure_logging(settings.log_level, verbose=verbose)
    ctx.obj = CLIState(json_output=json_output, output=output)


@app.command("user")
def user(ctx: typer.Context, username_or_id: str = typer.Argument(..., help="Sleeper username or user ID")) -> None:
    """Look up a user."""
    _run(ctx, lambda agg: agg.get_user(username_or_id), lambda u: _render_users([u]))


@app.command("leagues")
def leagues(
    ctx: typer.Context,
    user_id: Optional[str] = typer.Argument(None, help="Sleeper user ID (defaults to saved user)"),
    sport: Optional[str] = typer.Option(None, help="Sport, e.g. nfl"),
    season: Optional[str] = typer.Option(None, help="Season year, e.g. 2024"),
) -> None:
    """List a user's leagues for a season."""
    state = _state(ctx)
    user_id = user_id or state.config.user_id
    season = season or state.config.season
    if not user_id or not season:
        console.print("[red]❌ A user ID and --season are required (or save them with set-defaults).[/red]")
        raise typer.Exit(1)
    sport = sport or state.config.sport
    _run(ctx, lambda agg: agg.get_user_leagues(user_id, sport, season), _render_leagues)


@app.command("league")
def league(ctx: typer.Context, league_id: Optional[str] = typer.Argument(None, help="League ID")) -> None:
    """Show a league."""
    target = _league_id(_state(ctx), league_id)
    _run(ctx, lambda agg: agg.get_league(target), lambda lg: _render_leagues([lg]))


@app.command("rosters")
def rosters(ctx: typer.Context, league_id: Optional[str] = typer.Argument(None, help="League ID")) -> None:
    """List a league's rosters."""
    target = _league_id(_state(ctx), league_id)
    _run(ctx, lambda agg: agg.get_league_rosters(target), _render_rosters)


@app.command("users")
def users(ctx: typer.Context, league_id: Optional[str] = typer.Argument(None, help="League ID")) -> None:
    """List a league's users."""
    target = _league_id(_state(ctx), league_id)
    _run(ctx, lambda agg: agg.get_league_users(target), _render_users)


@app.command("matchups")
def matchups(
    ctx: typer.Context,
    week: int = typer.Option(..., "--week", "-w", help="Week number"),
    league_id: Optional[str] = typer.Argument(None, help="League ID"),
) -> None:
    """List a league's matchups for a week."""
    target = _league_id(_state(ctx), league_id)
    _run(ctx, lambda agg: agg.get_league_matchups(target, week), _render_matchups)


@app.command("players")
def players(
    ctx: typer.Context,
    sport: str = typer.Argument("nfl", help="Sport, e.g. nfl"),
    show: int = typer.Option(10, help="Number of players to display"),
) -> None:
    """Download the player directory for a sport."""
    state = _state(ctx)
    if state.json_output or state.output:
        _run(ctx, lambda agg: agg.get_all_players(sport), lambda _: None)
        return

    aggregator = get_aggregator()
    table = Table(title=f"{sport.upper()} Players")
    table.add_column("Player ID", style="blue")
    table.add_column("Name", style="green")
    table.add_column("Position", style="cyan")
    table.add_column("Team")
    table.add_column("Status", style="yellow")
    total = 0
    try:
        with console.status(f"[blue]Fetching {sport} players...[/blue]"):
            for player_id, player in aggregator.iter_all_players(sport):
                if total < show:
                    table.add_row(
                        player_id, player.display_name, player.display_position, player.display_team, player.status or ""
                    )
                total += 1
    except AnalyzerError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(1)
    finally:
        aggregator.close()

    console.print(table)
    console.print(f"[green]Loaded {total} players[/green]")


@app.command("trending")
def trending(
    ctx: typer.Context,
    trending_type: TrendingType = typer.Argument(..., help="add or drop"),
    sport: str = typer.Option("nfl", help="Sport, e.g. nfl"),
    lookback_hours: int = typer.Option(24, help="Hours of activity to consider"),
    limit: int = typer.Option(25, help="Maximum number of players"),
) -> None:
    """List players trending on waivers."""
    _run(
        ctx,
        lambda agg: agg.get_trending_players(sport, trending_type, lookback_hours=lookback_hours, limit=limit),
        _render_trending,
    )


@app.command("set-defaults")
def set_defaults(
    ctx: typer.Context,
    league_id: Optional[str] = typer.Option(None, "--league-id", "-l", help="Default league ID"),
    user_id: Optional[str] = typer.Option(None, "--user-id", "-u", help="Default user ID"),
    sport: Optional[str] = typer.Option(None, help="Default sport"),
    season: Optional[str] = typer.Option(None, help="Default season"),
) -> None:
    """Save default league, user, sport and season."""
    state = _state(ctx)
    updates = {
        key: value
        for key, value in {"league_id": league_id, "user_id": user_id, "sport": sport, "season": season}.items()
        if value
    }
    if not updates:
        console.print("[yellow]Nothing to save[/yellow]")
        return

    state.config = state.config.model_copy(update=updates)
    state.config_manager.save_config(state.config)
    for key, value in updates.items():
        console.print(f"[green]Saved {key} = {value}[/green]", highlight=False)


if __name__ == "__main__":
    app()
