#!/usr/bin/env python3
"""
CLI for Crease cricket scoring
"""
import logging
import random

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel
from sqlalchemy.exc import SQLAlchemyError

from crease.config import settings
from crease.database import init_db, get_session
from crease.demo import DemoScorer, build_team
from crease.engine import ScoringEngine
from crease.engine.state import Match, Innings
from crease.repository import MatchRepository

console = Console()


@click.group()
@click.option("--log-level", default=settings.LOG_LEVEL, help="Logging level for engine output")
def cli(log_level: str):
    """Crease - ball-by-ball cricket scoring"""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print(f"[green]Database initialized at {settings.DATABASE_PATH}[/green]")


@cli.command()
def matches():
    """List stored matches"""
    init_db()
    session = get_session()
    try:
        records = MatchRepository(session).list_records()
        if not records:
            console.print("[red]No matches found. Run 'demo' to score one.[/red]")
            return

        table = Table(title=f"Matches ({len(records)} total)")
        table.add_column("ID")
        table.add_column("Teams", style="cyan")
        table.add_column("Overs", justify="right")
        table.add_column("Status", style="magenta")
        table.add_column("Result", style="green")

        for record in records:
            if record.is_complete:
                status = "complete"
            elif record.is_live:
                status = "live"
            else:
                status = "not started"
            table.add_row(
                record.id,
                f"{record.team1_name} vs {record.team2_name}",
                str(record.total_overs),
                status,
                record.result or "-",
            )

        console.print(table)
    finally:
        session.close()


@cli.command()
@click.argument("match_id")
def scorecard(match_id: str):
    """Print the scorecard of a stored match"""
    init_db()
    session = get_session()
    try:
        match = MatchRepository(session).get(match_id)
    finally:
        session.close()

    if match is None:
        console.print(f"[red]Match {match_id} not found[/red]")
        raise SystemExit(1)
    _print_match(match)


@cli.command()
@click.option("--overs", default=settings.DEFAULT_TOTAL_OVERS, help="Overs per innings")
@click.option("--players", default=11, help="Players per side")
@click.option("--seed", type=int, default=None, help="Random seed for a repeatable match")
@click.option("--save/--no-save", default=True, help="Store the finished match")
def demo(overs: int, players: int, seed: int, save: bool):
    """Score a random match ball by ball"""
    team1 = build_team("home", "Home XI", players)
    team2 = build_team("away", "Away XI", players)

    scorer = DemoScorer(ScoringEngine(), random.Random(seed))
    try:
        match = scorer.start(team1, team2, overs)
    except ValueError as e:
        console.print(f"[red]Cannot start match: {e}[/red]")
        raise SystemExit(1)

    console.print(f"[yellow]Scoring {team1.name} vs {team2.name}, {overs} overs...[/yellow]\n")
    match = scorer.play(match)
    _print_match(match)

    if save:
        init_db()
        session = get_session()
        try:
            MatchRepository(session).save(match)
            console.print(f"\n[green]Saved match {match.id}[/green]")
        except SQLAlchemyError as e:
            logging.getLogger(__name__).error("Could not save match %s: %s", match.id, e)
        finally:
            session.close()


def _print_match(match: Match):
    console.print(Panel(f"[bold]{match.team1.name} vs {match.team2.name}[/bold]"))
    for innings in (match.first_innings, match.second_innings):
        if innings is None:
            continue
        team = match.team(innings.batting_team_id)
        console.print(
            f"\n[bold]{team.name}:[/bold] {innings.score}/{innings.wickets} "
            f"({innings.overs_display} overs) - RR: {innings.run_rate:.2f}"
        )
        _print_scorecard(match, innings)

    if match.result:
        console.print(f"\n[bold green]{match.result}[/bold green]")
    if match.awards:
        players = {p.id: p.name for p in match.all_players()}
        awards = match.awards
        console.print(f"Best batsman: {players.get(awards.best_batsman_id, '-')}")
        console.print(f"Best bowler: {players.get(awards.best_bowler_id, '-')}")
        console.print(f"Player of the match: {players.get(awards.man_of_the_match_id, '-')}")


def _print_scorecard(match: Match, innings: Innings):
    """Print innings scorecard"""
    batting = match.team(innings.batting_team_id)
    bowling = match.team(innings.bowling_team_id)

    # Batting
    bat_table = Table(title="Batting")
    bat_table.add_column("Batter", style="cyan")
    bat_table.add_column("Dismissal")
    bat_table.add_column("R", justify="right")
    bat_table.add_column("B", justify="right")
    bat_table.add_column("4s", justify="right")
    bat_table.add_column("6s", justify="right")
    bat_table.add_column("SR", justify="right")

    for player in batting.playing_xi:
        stats = player.batting_stats
        if stats.balls_faced == 0 and not stats.is_out and player.id not in (
                innings.striker_id, innings.non_striker_id):
            continue
        bat_table.add_row(
            player.name,
            stats.status,
            str(stats.runs),
            str(stats.balls_faced),
            str(stats.fours),
            str(stats.sixes),
            f"{stats.strike_rate:.1f}",
        )

    console.print(bat_table)
    console.print(f"Extras: {innings.extras}")

    # Bowling
    bowl_table = Table(title="Bowling")
    bowl_table.add_column("Bowler", style="magenta")
    bowl_table.add_column("O", justify="right")
    bowl_table.add_column("R", justify="right")
    bowl_table.add_column("W", justify="right")
    bowl_table.add_column("Econ", justify="right")

    for player in bowling.playing_xi:
        stats = player.bowling_stats
        if stats.overs == 0 and stats.balls == 0 and stats.runs == 0:
            continue
        bowl_table.add_row(
            player.name,
            stats.overs_display,
            str(stats.runs),
            str(stats.wickets),
            f"{stats.economy_rate:.1f}",
        )

    console.print(bowl_table)


if __name__ == "__main__":
    cli()
