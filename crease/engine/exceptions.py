"""
Fatal engine errors.

Ordinary rule violations are never raised: the validation gate reports them
as values. These exceptions signal a sequencing bug in the caller.
"""


class ScoringError(Exception):
    """Base class for unrecoverable scoring errors"""


class InningsNotFoundError(ScoringError):
    """An innings was required but the match has none in that slot"""

    def __init__(self, innings_number: int):
        self.innings_number = innings_number
        super().__init__(f"Innings {innings_number} has not been started")


class PlayerNotFoundError(ScoringError):
    """A referenced player id is not part of the team's playing XI"""

    def __init__(self, player_id: str, team_name: str):
        self.player_id = player_id
        self.team_name = team_name
        super().__init__(f"Player {player_id} is not in the {team_name} playing XI")
