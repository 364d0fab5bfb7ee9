"""
Standings calculation shared by pools, leagues, ladders and king of the court.

Standings are derived on demand from the completed matches; nothing here is
stored between calls.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .models import Match, Participant, Standing

logger = logging.getLogger(__name__)


def match_winner_id(match: Match) -> Optional[str]:
    """
    Decide the winner of a completed match.

    The score decides; ``winner_id`` is only consulted when the scores are
    level (forfeits, walkovers recorded without points).
    """
    if match.score.a > match.score.b:
        return match.side_a.id
    if match.score.b > match.score.a:
        return match.side_b.id
    if match.winner_id in match.participant_ids:
        return match.winner_id
    return None


def sort_standings(standings: List[Standing]) -> List[Standing]:
    """Sort by wins, then point differential, then points for, and assign ranks.

    Head-to-head results are not used as a tie-breaker.
    """
    standings.sort(key=lambda s: (-s.wins, -s.point_diff, -s.points_for))
    for position, standing in enumerate(standings, start=1):
        standing.rank = position
    return standings


def compute_standings(matches: Iterable[Match], participants: Sequence[Participant]) -> List[Standing]:
    """
    Compute ranked standings for ``participants`` from ``matches``.

    Only completed, non-cancelled matches count. Matches involving someone
    outside ``participants`` are ignored.
    """
    table: Dict[str, Standing] = {
        p.id: Standing(participant_id=p.id, participant_name=p.name) for p in participants
    }

    for match in matches:
        if not match.completed or match.cancelled:
            continue
        standing_a = table.get(match.side_a.id)
        standing_b = table.get(match.side_b.id)
        if standing_a is None or standing_b is None:
            logger.debug(f"Skipping match {match.id}: participant outside standings table")
            continue

        standing_a.played += 1
        standing_b.played += 1
        standing_a.points_for += match.score.a
        standing_a.points_against += match.score.b
        standing_b.points_for += match.score.b
        standing_b.points_against += match.score.a

        winner = match_winner_id(match)
        if winner == match.side_a.id:
            standing_a.wins += 1
            standing_b.losses += 1
        elif winner == match.side_b.id:
            standing_b.wins += 1
            standing_a.losses += 1

    for standing in table.values():
        standing.point_diff = standing.points_for - standing.points_against
        decided = standing.wins + standing.losses
        standing.win_percentage = standing.wins / decided if decided else 0.0

    return sort_standings(list(table.values()))
