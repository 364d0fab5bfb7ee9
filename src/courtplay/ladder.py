"""
Ladder league rankings and challenges.

Rank 1 is the top of the ladder. A player may challenge someone ranked above
them within ``max_range`` places; a successful challenger takes the
defender's rank and everyone from the defender down to the challenger's old
rank moves down one place. Every function returns new player objects, so
ranks always stay a gap-free permutation of 1..n.
"""
import dataclasses
import logging
import random
import uuid
from typing import List, Optional, Sequence

from .errors import InvalidChallenge, PlayerNotFound, PlayerNotRanked
from .models import LadderPlayer, Match, Player, skill_of

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHALLENGE_RANGE = 3


def initialize_ladder_rankings(players: Sequence[Player], sort_by_skill: bool = False,
                               rng: Optional[random.Random] = None) -> List[LadderPlayer]:
    """
    Assign ranks 1..n, returning a new LadderPlayer for every player.

    Args:
        players: ladder participants; plain roster players are accepted
        sort_by_skill: highest skill level gets rank 1; otherwise the order is
            shuffled
        rng: random source for the shuffle
    """
    if sort_by_skill:
        ordered = sorted(players, key=skill_of, reverse=True)
    else:
        ordered = list(players)
        (rng or random).shuffle(ordered)

    return [
        LadderPlayer(id=player.id, name=player.name, skill_level=player.skill_level, rank=position)
        for position, player in enumerate(ordered, start=1)
    ]


def validate_challenge(challenger: LadderPlayer, defender: LadderPlayer,
                       max_range: int = DEFAULT_MAX_CHALLENGE_RANGE) -> None:
    """
    Check that ``challenger`` may challenge ``defender``.

    Raises:
        InvalidChallenge: with the rule that was broken as its message.
    """
    if not challenger.rank or not defender.rank:
        raise InvalidChallenge("Both players must have ranks assigned")

    if challenger.rank <= defender.rank:
        raise InvalidChallenge("Can only challenge players ranked higher than you")

    rank_diff = challenger.rank - defender.rank
    if rank_diff > max_range:
        raise InvalidChallenge(
            f"Can only challenge players within {max_range} ranks "
            f"(tried to challenge {rank_diff} ranks up)"
        )


def _find(players: Sequence[LadderPlayer], player_id: str) -> LadderPlayer:
    for player in players:
        if player.id == player_id:
            return player
    raise PlayerNotFound(player_id)


def resolve_challenge(players: Sequence[LadderPlayer], challenger_id: str, defender_id: str,
                      challenger_won: bool, max_range: Optional[int] = None) -> List[LadderPlayer]:
    """
    Apply the result of a ladder challenge and return the new ladder.

    ``max_range`` is only enforced when given; the direction of the challenge
    is always checked.

    Raises:
        PlayerNotFound: either id is not on the ladder.
        PlayerNotRanked: either player has no rank.
        InvalidChallenge: the challenger is not ranked below the defender.
    """
    challenger = _find(players, challenger_id)
    defender = _find(players, defender_id)
    for player in (challenger, defender):
        if not player.rank:
            raise PlayerNotRanked(player.id)

    try:
        validate_challenge(challenger, defender, max_range if max_range is not None else len(players))
    except InvalidChallenge as exc:
        logger.warning(f"Rejected challenge {challenger_id} -> {defender_id}: {exc.message}")
        raise

    if not challenger_won:
        return [dataclasses.replace(player) for player in players]

    old_rank = challenger.rank
    new_rank = defender.rank
    logger.info(f"{challenger_id} moves from rank {old_rank} to {new_rank}")

    updated = []
    for player in players:
        if player.id == challenger_id:
            updated.append(dataclasses.replace(player, rank=new_rank))
        elif player.rank and new_rank <= player.rank < old_rank:
            updated.append(dataclasses.replace(player, rank=player.rank + 1))
        else:
            updated.append(dataclasses.replace(player))
    return updated


def get_valid_targets(rank: int, max_range: int = DEFAULT_MAX_CHALLENGE_RANGE) -> List[int]:
    """Ranks a player at ``rank`` may challenge, best first."""
    if rank <= 1:
        return []
    return list(range(max(1, rank - max_range), rank))


def get_ladder_standings(players: Sequence[LadderPlayer]) -> List[LadderPlayer]:
    """Ranked players in rank order; unranked players are left out."""
    return sorted((p for p in players if p.rank is not None), key=lambda p: p.rank)


def create_ladder_challenge(challenger: LadderPlayer, defender: LadderPlayer, week_number: int,
                            max_range: int = DEFAULT_MAX_CHALLENGE_RANGE) -> Match:
    """Validate a challenge and create the match for it."""
    validate_challenge(challenger, defender, max_range)
    return Match(
        id=f"C-{uuid.uuid4().hex[:8]}",
        round=week_number,
        side_a=challenger,
        side_b=defender,
        challenge=True,
    )
