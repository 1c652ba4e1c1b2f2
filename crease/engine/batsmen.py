"""
Current batsmen resolution.

Every place that needs "who is batting right now" goes through
resolve_current_batsmen, so the fallback order is defined once:

1. the explicit striker / non-striker ids on the innings;
2. otherwise the most recently active batsmen still able to bat, ordered by
   balls faced (most first).
"""
import logging
from dataclasses import dataclass
from typing import Optional, List

from crease.engine.exceptions import PlayerNotFoundError
from crease.engine.state import Innings, Player, Team

logger = logging.getLogger(__name__)


@dataclass
class CurrentBatsmen:
    striker: Optional[Player] = None
    non_striker: Optional[Player] = None

    @property
    def complete(self) -> bool:
        return self.striker is not None and self.non_striker is not None


def _can_bat(player: Player) -> bool:
    return not player.batting_stats.is_out or player.batting_stats.is_retired_hurt


def resolve_current_batsmen(innings: Innings, roster: Team) -> CurrentBatsmen:
    """Pure lookup of the two batsmen at the crease"""
    striker = roster.find_player(innings.striker_id)
    non_striker = roster.find_player(innings.non_striker_id)
    if striker is not None and non_striker is not None:
        return CurrentBatsmen(striker, non_striker)

    available = sorted(
        (p for p in roster.playing_xi if _can_bat(p)),
        key=lambda p: p.batting_stats.balls_faced,
        reverse=True,
    )
    if striker is None:
        striker = next((p for p in available if p is not non_striker), None)
    if non_striker is None:
        non_striker = next((p for p in available if p is not striker), None)
    if striker is not None or non_striker is not None:
        logger.warning(
            "Innings %d batsmen resolved by fallback: striker=%s non_striker=%s",
            innings.number,
            striker.id if striker else None,
            non_striker.id if non_striker else None,
        )
    return CurrentBatsmen(striker, non_striker)


def require_striker(innings: Innings, roster: Team) -> Player:
    striker = resolve_current_batsmen(innings, roster).striker
    if striker is None:
        raise PlayerNotFoundError(innings.striker_id, roster.name)
    return striker


def repair_current_batsmen(innings: Innings, roster: Team) -> List[str]:
    """
    Clear a stale out flag on a batsman who is still at the crease.

    Historical documents can carry a current batsman marked out. The slot that
    is waiting for a replacement is left alone.
    """
    repaired = []
    for player_id in (innings.striker_id, innings.non_striker_id):
        if player_id is None:
            continue
        if innings.needs_new_batsman and player_id == innings.vacated_batsman_id:
            continue
        player = roster.find_player(player_id)
        if player and player.batting_stats.is_out and not player.batting_stats.is_retired_hurt:
            player.batting_stats.is_out = False
            player.batting_stats.dismissal_type = None
            repaired.append(player_id)
            logger.warning("Cleared stale out flag on current batsman %s", player_id)
    return repaired


def eligible_batsmen(innings: Innings, roster: Team) -> List[Player]:
    """Players who may walk out next: not at the crease and not dismissed"""
    at_crease = {innings.striker_id, innings.non_striker_id}
    return [p for p in roster.playing_xi if p.id not in at_crease and not p.is_dismissed]


def swap_strike(innings: Innings):
    innings.striker_id, innings.non_striker_id = innings.non_striker_id, innings.striker_id
