"""
Ball-by-ball commentary lines
"""
import random
from typing import Optional

from crease.engine.state import ExtraKind, DismissalKind

FOUR_LINES = [
    "FOUR! Cracking shot through the covers!",
    "FOUR! Timed to perfection!",
    "FOUR! Finds the gap beautifully!",
    "FOUR! What a stroke!",
]

SIX_LINES = [
    "SIX! That's absolutely massive!",
    "SIX! Into the stands!",
    "SIX! Clean as a whistle!",
    "SIX! What a shot! The crowd is on its feet!",
]

RUN_LINES = {
    0: ["dot ball, well bowled!", "defended solidly."],
    1: ["takes a quick single.", "nudged for one."],
    2: ["good running, two runs!", "placed in the gap for two."],
    3: ["excellent running, three runs! Great placement."],
}

DISMISSAL_LINES = {
    DismissalKind.BOWLED: "BOWLED! Through the gate and the stumps are shattered!",
    DismissalKind.LBW: "LBW! Plumb in front, the finger goes up!",
    DismissalKind.CAUGHT: "CAUGHT! Straight down the fielder's throat!",
    DismissalKind.HIT_WICKET: "HIT WICKET! Dislodges the bails on the follow-through!",
    DismissalKind.RUN_OUT: "RUN OUT! A direct hit and short of the crease!",
    DismissalKind.STUMPED: "STUMPED! Lightning work behind the stumps!",
    DismissalKind.OBSTRUCTING_FIELD: "OUT! Given out for obstructing the field.",
    DismissalKind.HANDLED_BALL: "OUT! Given out for handling the ball.",
    DismissalKind.TIMED_OUT: "OUT! Timed out, the new batsman took too long.",
    DismissalKind.RETIRED_HURT: "Retired hurt, helped off the field.",
}


def ball_commentary(runs: int, extra: Optional[ExtraKind] = None) -> str:
    if extra is ExtraKind.WIDE:
        return f"WIDE! {runs - 1} runs added." if runs > 1 else "WIDE! Down the leg side."
    if extra is ExtraKind.NO_BALL:
        return f"NO BALL! {runs - 1} runs off it. Free hit coming up!" if runs > 1 else "NO BALL! Free hit coming up!"
    if extra is ExtraKind.BYE:
        return f"{runs} BYE{'S' if runs > 1 else ''}! Sneaks past the keeper."
    if extra is ExtraKind.LEG_BYE:
        return f"{runs} LEG BYE{'S' if runs > 1 else ''}! Off the pads."

    if runs == 4:
        return random.choice(FOUR_LINES)
    if runs == 6:
        return random.choice(SIX_LINES)
    if runs in RUN_LINES:
        return random.choice(RUN_LINES[runs])
    return f"{runs} runs, good cricket!"


def describe_ball(over: int, ball: int, bowler_name: str, batsman_name: str, text: str) -> str:
    """Prefix a line with the delivery reference, e.g. '4.3 Starc to Kohli, ...'"""
    return f"{over}.{ball} {bowler_name} to {batsman_name}, {text}"


def wicket_commentary(kind: DismissalKind, batsman_name: str, free_hit: bool = False) -> str:
    line = DISMISSAL_LINES[kind]
    if free_hit and kind is DismissalKind.RUN_OUT:
        line += " Even a free hit can't save the batsman."
    return f"{line} {batsman_name} {'walks off' if kind.is_dismissal else 'will hopefully return'}."


def chase_commentary(runs_needed: int, balls_left: int) -> str:
    if runs_needed <= 0:
        return "Target reached!"
    return f"{runs_needed} needed from {balls_left} balls."
