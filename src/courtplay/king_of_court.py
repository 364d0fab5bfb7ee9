"""
King of the Court rotation.

The winner stays on court, the loser goes to the back of the queue and the
next challenger steps up from the front.
"""
import dataclasses
import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import ConfigurationError
from .models import KingOfCourtState, Participant, Standing

logger = logging.getLogger(__name__)


def initialize(participants: Sequence[Participant], rng: Optional[random.Random] = None) -> KingOfCourtState:
    """Shuffle the participants; the first two play, the rest queue up."""
    if len(participants) < 2:
        raise ConfigurationError("Need at least 2 players/teams for King of the Court")

    shuffled = list(participants)
    (rng or random).shuffle(shuffled)
    king, challenger, *queue = shuffled
    return KingOfCourtState(court_king=king, challenger=challenger, queue=queue)


def resolve(state: KingOfCourtState, king_won: bool) -> KingOfCourtState:
    """
    Apply the result of the current game and return the next state.

    With an empty queue the same two participants play again.
    """
    queue = list(state.queue)

    if king_won:
        king, loser = state.court_king, state.challenger
        streak = state.king_streak + 1
    else:
        king, loser = state.challenger, state.court_king
        streak = 1
        logger.debug(f"New king: {king.id}")

    if queue:
        queue.append(loser)
        challenger = queue.pop(0)
    else:
        challenger = loser

    return dataclasses.replace(
        state,
        court_king=king,
        challenger=challenger,
        queue=queue,
        matches_played=state.matches_played + 1,
        king_streak=streak,
    )


def match_result(state: KingOfCourtState, king_won: bool) -> Tuple[str, str]:
    """(winner_id, loser_id) of the game being played in ``state``."""
    if king_won:
        return state.court_king.id, state.challenger.id
    return state.challenger.id, state.court_king.id


def get_king_of_court_standings(results: Sequence[Tuple[str, str]],
                                participants: Sequence[Participant]) -> List[Standing]:
    """Standings from (winner_id, loser_id) results: wins, then win percentage."""
    stats: Dict[str, Standing] = {
        p.id: Standing(participant_id=p.id, participant_name=p.name) for p in participants
    }
    for winner_id, loser_id in results:
        if winner_id in stats:
            stats[winner_id].wins += 1
            stats[winner_id].played += 1
        if loser_id in stats:
            stats[loser_id].losses += 1
            stats[loser_id].played += 1

    standings = list(stats.values())
    for standing in standings:
        decided = standing.wins + standing.losses
        standing.win_percentage = standing.wins / decided if decided else 0.0

    standings.sort(key=lambda s: (-s.wins, -s.win_percentage))
    for position, standing in enumerate(standings, start=1):
        standing.rank = position
    return standings
