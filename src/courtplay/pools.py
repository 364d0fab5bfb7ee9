"""
Pool play: skill-balanced pool allocation and in-pool round robin.

Pools are filled with a snake draft over the participants sorted by skill
(1-2-3-3-2-1-...), so every pool gets a similar average skill level. Each pool
is then scheduled on its own with the circle-method generators.
"""
import dataclasses
import logging
from typing import List, Sequence

from .errors import ConfigurationError
from .models import Participant, Pool, is_team, skill_of
from .round_robin import generate_singles_round_robin, generate_team_round_robin
from .standings import compute_standings

logger = logging.getLogger(__name__)


def snake_order(count: int, pool_count: int) -> List[int]:
    """
    Return the pool index each sorted participant is drafted into.

    For 3 pools: [0, 1, 2, 2, 1, 0, 0, 1, 2, ...]
    """
    order = []
    for index in range(count):
        draft_round = index // pool_count
        if draft_round % 2 == 0:
            order.append(index % pool_count)
        else:
            order.append(pool_count - 1 - (index % pool_count))
    return order


def generate_pools(participants: Sequence[Participant], pool_count: int) -> List[Pool]:
    """
    Distribute players or teams into ``pool_count`` balanced pools.

    Raises:
        ConfigurationError: fewer than one pool, or fewer than two
            participants per pool.
    """
    if pool_count < 1:
        raise ConfigurationError("Must have at least 1 pool")
    if len(participants) < pool_count * 2:
        raise ConfigurationError(
            f"Not enough participants for {pool_count} pools "
            f"(need {pool_count * 2}, got {len(participants)})"
        )

    team_based = is_team(participants[0])
    ranked = sorted(participants, key=skill_of, reverse=True)

    pools = [
        Pool(number=i + 1, teams=[] if team_based else None)
        for i in range(pool_count)
    ]
    for participant, pool_index in zip(ranked, snake_order(len(ranked), pool_count)):
        if team_based:
            pools[pool_index].teams.append(participant)
        else:
            pools[pool_index].players.append(participant)

    logger.info(f"Allocated {len(participants)} participants into {pool_count} pools")
    return pools


def generate_pool_schedule(pool: Pool, max_rounds=None, number_of_courts=None,
                           id_prefix: str = "") -> Pool:
    """Return a copy of ``pool`` with its round robin matches filled in.

    Match ids look like ``P2-R1-M3`` (pool 2, round 1, third match).
    """
    id_prefix = f"{id_prefix}P{pool.number}-"
    if pool.teams is not None:
        result = generate_team_round_robin(pool.teams, max_rounds, number_of_courts, id_prefix)
    else:
        result = generate_singles_round_robin(pool.players, max_rounds, number_of_courts, id_prefix)

    matches = [dataclasses.replace(match, pool_number=pool.number) for match in result.matches]
    return dataclasses.replace(pool, matches=matches)


def allocate(participants: Sequence[Participant], pool_count: int, max_rounds=None,
             number_of_courts=None, id_prefix: str = "") -> List[Pool]:
    """Allocate participants into pools and schedule every pool."""
    return [
        generate_pool_schedule(pool, max_rounds, number_of_courts, id_prefix)
        for pool in generate_pools(participants, pool_count)
    ]


def get_pool_standings(pool: Pool):
    """Standings for one pool, from its own completed matches."""
    matches = [m for m in pool.matches if m.pool_number == pool.number]
    return compute_standings(matches, pool.participants)


def advance_to_playoffs(pools: Sequence[Pool], teams_per_pool: int = 2) -> List[Participant]:
    """
    Take the top ``teams_per_pool`` finishers of every pool.

    The result is in seeding order: all pool winners (by pool number), then all
    runners-up, and so on.
    """
    advancing = []
    for pool in pools:
        by_id = {p.id: p for p in pool.participants}
        for pool_rank, standing in enumerate(get_pool_standings(pool)[:teams_per_pool], start=1):
            advancing.append((pool_rank, pool.number, by_id[standing.participant_id]))

    advancing.sort(key=lambda entry: (entry[0], entry[1]))
    return [entity for _, _, entity in advancing]


def get_pool_progress(pool: Pool) -> dict:
    """Summary counts for one pool; cancelled matches are not counted."""
    scheduled = [m for m in pool.matches if not m.cancelled]
    completed = sum(1 for m in scheduled if m.completed)
    total = len(scheduled)
    return {
        'total_matches': total,
        'completed_matches': completed,
        'remaining_matches': total - completed,
        'percent_complete': (completed / total) * 100 if total else 0.0,
    }
