"""
Round robin schedule generation (circle method).

Three variants share the same rotation:
- singles: each player against every other player
- set-partner teams: each team against every other team
- rotating partners: individual players paired into a fresh doubles team
  every round

When ``max_rounds`` is larger than one full cycle the rotation wraps around,
so long leagues repeat the pairings in order instead of failing.
"""
import dataclasses
import logging
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from .errors import InvalidResult
from .models import Match, Participant, Player, Score, Team

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class RoundRobinResult:
    matches: List[Match] = dataclasses.field(default_factory=list)
    rounds_generated: int = 0
    total_possible_rounds: int = 0
    # Only filled by the rotating partner generator.
    partner_counts: Dict[FrozenSet[str], int] = dataclasses.field(default_factory=dict)


def _rotated(entries: Sequence, rotation_index: int) -> List:
    """Keep entry 0 fixed and rotate the rest ``rotation_index`` places."""
    size = len(entries)
    return [entries[0]] + [
        entries[((i - 1 + rotation_index) % (size - 1)) + 1] for i in range(1, size)
    ]


def _circle_pairings(entries: Sequence, rotation_index: int) -> List[Tuple]:
    """Pair position i with position size-1-i of the rotated circle."""
    rotated = _rotated(entries, rotation_index)
    size = len(rotated)
    return [(rotated[i], rotated[size - 1 - i]) for i in range(size // 2)]


def _circle_schedule(participants: Sequence[Participant], max_rounds: Optional[int],
                     number_of_courts: Optional[int], id_prefix: str) -> RoundRobinResult:
    entries: List[Optional[Participant]] = list(participants)
    if len(entries) % 2 == 1:
        entries.append(None)  # bye

    total_possible_rounds = len(entries) - 1
    rounds_to_generate = max_rounds if max_rounds is not None else total_possible_rounds

    matches = []
    for round_index in range(rounds_to_generate):
        rotation_index = round_index % total_possible_rounds
        match_number = 1
        for home, away in _circle_pairings(entries, rotation_index):
            if home is None or away is None:
                continue
            matches.append(Match(
                id=f"{id_prefix}R{round_index + 1}-M{match_number}",
                round=round_index + 1,
                side_a=home,
                side_b=away,
                court=match_number if number_of_courts else None,
            ))
            match_number += 1

    return RoundRobinResult(
        matches=matches,
        rounds_generated=rounds_to_generate,
        total_possible_rounds=total_possible_rounds,
    )


def generate_singles_round_robin(players: Sequence[Player], max_rounds: Optional[int] = None,
                                 number_of_courts: Optional[int] = None,
                                 id_prefix: str = "") -> RoundRobinResult:
    """
    Generate singles (1v1) round robin matchups.

    With an odd number of players one player sits out each round. Returns an
    empty result when fewer than two players are given.
    """
    if len(players) < 2:
        logger.debug(f"Singles round robin needs 2 players, got {len(players)}")
        return RoundRobinResult()

    result = _circle_schedule(players, max_rounds, number_of_courts, id_prefix)
    logger.info(f"Generated {len(result.matches)} singles matches over {result.rounds_generated} rounds")
    return result


def generate_team_round_robin(teams: Sequence[Team], max_rounds: Optional[int] = None,
                              number_of_courts: Optional[int] = None,
                              id_prefix: str = "") -> RoundRobinResult:
    """Generate round robin matchups for set-partner teams."""
    if len(teams) < 2:
        logger.debug(f"Team round robin needs 2 teams, got {len(teams)}")
        return RoundRobinResult()

    result = _circle_schedule(teams, max_rounds, number_of_courts, id_prefix)
    logger.info(f"Generated {len(result.matches)} team matches over {result.rounds_generated} rounds")
    return result


def generate_individual_round_robin(players: Sequence[Player], max_rounds: Optional[int] = None,
                                    number_of_courts: Optional[int] = None,
                                    id_prefix: str = "") -> RoundRobinResult:
    """
    Generate doubles round robin with rotating partners.

    Players are padded with byes up to a multiple of four; any match that
    would include a bye is dropped, so those players sit out the round.
    Each round the rotated circle is split into halves and partners are taken
    from opposite halves: (0, h) vs (1, h+1), (2, h+2) vs (3, h+3) and so on,
    which spreads partnerships across rounds. No player appears in two
    matches of the same round.
    """
    if len(players) < 4:
        logger.debug(f"Rotating partner round robin needs 4 players, got {len(players)}")
        return RoundRobinResult()

    entries: List[Optional[Player]] = list(players)
    while len(entries) % 4 != 0:
        entries.append(None)

    size = len(entries)
    half = size // 2
    total_possible_rounds = size - 1
    rounds_to_generate = max_rounds if max_rounds is not None else total_possible_rounds

    matches = []
    partner_counts: Dict[FrozenSet[str], int] = {}
    for round_index in range(rounds_to_generate):
        rotated = _rotated(entries, round_index % total_possible_rounds)
        match_number = 1
        for m in range(size // 4):
            base = m * 2
            p1, p2 = rotated[base], rotated[base + half]
            p3, p4 = rotated[base + 1], rotated[base + 1 + half]
            if None in (p1, p2, p3, p4):
                continue

            for first, second in ((p1, p2), (p3, p4)):
                key = frozenset((first.id, second.id))
                partner_counts[key] = partner_counts.get(key, 0) + 1

            matches.append(Match(
                id=f"{id_prefix}R{round_index + 1}-M{match_number}",
                round=round_index + 1,
                side_a=Team(id=f"{p1.id}+{p2.id}", player1=p1, player2=p2),
                side_b=Team(id=f"{p3.id}+{p4.id}", player1=p3, player2=p4),
                court=match_number if number_of_courts else None,
            ))
            match_number += 1

    logger.info(f"Generated {len(matches)} rotating partner matches over {rounds_to_generate} rounds")
    return RoundRobinResult(
        matches=matches,
        rounds_generated=rounds_to_generate,
        total_possible_rounds=total_possible_rounds,
        partner_counts=partner_counts,
    )


def get_matches_by_round(matches: Sequence[Match]) -> Dict[int, List[Match]]:
    by_round: Dict[int, List[Match]] = {}
    for match in matches:
        by_round.setdefault(match.round, []).append(match)
    return by_round


def is_round_robin_complete(matches: Sequence[Match]) -> bool:
    return len(matches) > 0 and all(m.completed or m.cancelled for m in matches)


def get_completed_match_count(matches: Sequence[Match]) -> int:
    return sum(1 for m in matches if m.completed)


def record_match_score(match: Match, score_a: int, score_b: int,
                       winner_id: Optional[str] = None) -> Match:
    """
    Record a final score and return the completed match.

    ``winner_id`` is only needed when the score alone cannot decide the match
    (for example a forfeit recorded as 0-0).
    """
    if match.cancelled:
        raise InvalidResult(f"Match {match.id} was cancelled")
    if score_a < 0 or score_b < 0:
        raise InvalidResult("Scores cannot be negative")
    if winner_id is not None and winner_id not in match.participant_ids:
        raise InvalidResult(f"{winner_id} did not play in match {match.id}")

    if score_a > score_b:
        winner_id = match.side_a.id
    elif score_b > score_a:
        winner_id = match.side_b.id

    return dataclasses.replace(
        match,
        score=Score(a=score_a, b=score_b),
        completed=True,
        winner_id=winner_id,
    )


def cancel_match(match: Match) -> Match:
    """Mark a match as cancelled. Cancelled matches stay in the schedule."""
    return dataclasses.replace(match, cancelled=True, completed=False)
