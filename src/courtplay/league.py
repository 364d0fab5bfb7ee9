"""
Week-by-week league helpers built on top of the individual formats.
"""
import dataclasses
import logging
from typing import List, Optional, Sequence

from .config import LeagueConfig
from .models import Bracket, Match, Participant, is_team
from .pools import allocate
from .propagation import is_complete
from .round_robin import generate_singles_round_robin, generate_team_round_robin

logger = logging.getLogger(__name__)


def generate_weekly_schedule(config: LeagueConfig, participants: Sequence[Participant],
                             week_number: int) -> List[Match]:
    """
    Generate the matches for one league week.

    Ladder and king of the court leagues are played on demand, so they have
    no pre-built schedule. Round robin leagues play one circle-method round
    per week, wrapping around after a full cycle.
    """
    id_prefix = f"WK{week_number}-"

    if config.type in ("ladder", "king-of-court"):
        return []

    if config.type == "pool":
        matches = []
        for pool in allocate(participants, config.pool_count,
                             number_of_courts=config.number_of_courts, id_prefix=id_prefix):
            matches.extend(dataclasses.replace(m, round=week_number) for m in pool.matches)
        return matches

    if config.type == "round-robin":
        if len(participants) < 2:
            return []
        generate = generate_team_round_robin if is_team(participants[0]) else generate_singles_round_robin
        result = generate(participants, max_rounds=week_number,
                          number_of_courts=config.number_of_courts, id_prefix=id_prefix)
        return [m for m in result.matches if m.round == week_number]

    logger.warning(f"Unknown league type {config.type}; no schedule generated")
    return []


def is_league_complete(config: LeagueConfig, matches: Sequence[Match],
                       bracket: Optional[Bracket] = None) -> bool:
    """All regular season matches played and, if there are playoffs, the bracket finished."""
    regular = [m for m in matches if not m.is_playoff and not m.cancelled]
    if not regular or not all(m.completed for m in regular):
        return False

    if config.playoff_format != "none" and bracket is not None:
        return is_complete(bracket)
    return True


def get_current_week(matches: Sequence[Match]) -> int:
    """The latest scheduled week, or the one after it once that week is finished."""
    if not matches:
        return 1
    latest = max(m.round for m in matches)
    if all(m.completed or m.cancelled for m in matches if m.round == latest):
        return latest + 1
    return latest
