"""
Single elimination bracket generation.

Participants are passed in seed order (index 0 is seed 1). The bracket is
padded with byes up to the next power of two; byes always land against the
top seeds and are resolved as soon as the bracket is built.

Match ids are ``W{round}-M{match}``; every match names the match its winner
advances to and every later match names the two matches that feed it, so
results can be propagated without any round/index arithmetic.
"""
import logging
import math
import random
from typing import List, Optional, Sequence

from .errors import ConfigurationError
from .models import Bracket, BracketMatch, BracketRound, Participant, SlotSource, skill_of
from .propagation import propagate_result

logger = logging.getLogger(__name__)


def get_round_name(teams_in_round: int) -> str:
    """Get the name of a round based on number of teams still in it."""
    if teams_in_round == 2:
        return "Finals"
    elif teams_in_round == 4:
        return "Semifinals"
    elif teams_in_round == 8:
        return "Quarterfinals"
    else:
        return f"Round of {teams_in_round}"


def calculate_bracket_size(num_teams: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_teams <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_teams))


def calculate_byes(num_teams: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_teams) - num_teams


def calculate_bracket_rounds(num_teams: int) -> int:
    if num_teams <= 1:
        return 0
    return int(math.log2(calculate_bracket_size(num_teams)))


def generate_bracket_order(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.
    This ensures that if all higher seeds win, they meet in the proper rounds.

    For 8 teams: [1, 8, 4, 5, 2, 7, 3, 6]
    This gives matchups: 1v8, 4v5, 2v7, 3v6
    Winners: 1v4 side, 2v3 side
    Final: 1v2 (if chalk)
    """
    if bracket_size == 2:
        return [1, 2]

    half_size = bracket_size // 2
    upper_half = generate_bracket_order(half_size)

    # Pair each upper seed with its mirror
    result = []
    for seed in upper_half:
        result.extend([seed, bracket_size + 1 - seed])

    return result


SEEDING_METHODS = ("random", "rating", "manual", "snake", "hybrid")


def seed_participants(participants: Sequence[Participant], method: str = "rating",
                      rng: Optional[random.Random] = None) -> List[Participant]:
    """
    Put participants in seed order (index 0 is seed 1).

    - random: shuffled
    - rating / snake: highest skill first (snake drafting itself happens in pools)
    - manual: the order given
    - hybrid: the top quarter (rounded up) by skill, the rest shuffled

    Raises:
        ConfigurationError: unknown seeding method.
    """
    rng = rng or random
    if method == "random":
        seeded = list(participants)
        rng.shuffle(seeded)
        return seeded
    if method in ("rating", "snake"):
        return sorted(participants, key=skill_of, reverse=True)
    if method == "manual":
        return list(participants)
    if method == "hybrid":
        by_skill = sorted(participants, key=skill_of, reverse=True)
        top_count = math.ceil(len(by_skill) / 4)
        rest = by_skill[top_count:]
        rng.shuffle(rest)
        return by_skill[:top_count] + rest
    raise ConfigurationError(f"Unknown seeding method '{method}'; expected one of {SEEDING_METHODS}")


def match_code(prefix: str, round_number: int, match_number: int) -> str:
    return f"{prefix}W{round_number}-M{match_number}"


def build_winners_rounds(participants: Sequence[Participant], prefix: str = "") -> List[BracketRound]:
    """
    Build the winners bracket rounds with all winner edges declared.

    Byes are marked but not yet advanced; see ``settle_byes``.
    """
    bracket_size = calculate_bracket_size(len(participants))
    total_rounds = int(math.log2(bracket_size))
    bracket_order = generate_bracket_order(bracket_size)

    def seeded(seed: int) -> Optional[Participant]:
        return participants[seed - 1] if seed <= len(participants) else None

    rounds = []
    teams_in_round = bracket_size
    for round_number in range(1, total_rounds + 1):
        matches = []
        for match_number in range(1, teams_in_round // 2 + 1):
            next_match_id = None
            if round_number < total_rounds:
                next_match_id = match_code(prefix, round_number + 1, (match_number + 1) // 2)

            match = BracketMatch(
                id=match_code(prefix, round_number, match_number),
                round_number=round_number,
                match_number=match_number,
                next_match_id=next_match_id,
            )
            if round_number == 1:
                seed_a = bracket_order[(match_number - 1) * 2]
                seed_b = bracket_order[(match_number - 1) * 2 + 1]
                match.seeds = (seed_a, seed_b)
                match.slot_a = seeded(seed_a)
                match.slot_b = seeded(seed_b)
                match.is_bye = match.slot_a is None or match.slot_b is None
            else:
                match.slot_a_source = SlotSource(match_code(prefix, round_number - 1, match_number * 2 - 1), True)
                match.slot_b_source = SlotSource(match_code(prefix, round_number - 1, match_number * 2), True)
            matches.append(match)

        rounds.append(BracketRound(
            name=get_round_name(teams_in_round),
            round_number=round_number,
            matches=matches,
        ))
        teams_in_round //= 2

    return rounds


def settle_byes(bracket: Bracket) -> Bracket:
    """Complete every round-1 bye and push its participant forward."""
    index = bracket.match_index()
    for match in bracket.rounds[0].matches:
        if not match.is_bye:
            continue
        advancing = match.slot_a if match.slot_a is not None else match.slot_b
        match.completed = True
        match.winner_id = advancing.id
        propagate_result(bracket, index, match)
    return bracket


def generate_single_elimination_bracket(participants: Sequence[Participant], prefix: str = "") -> Bracket:
    """
    Generate a single elimination bracket.

    Args:
        participants: players or teams in seed order
        prefix: prepended to every match id, for running several brackets
            (for example a silver bracket) side by side

    Raises:
        ConfigurationError: fewer than two participants.
    """
    if len(participants) < 2:
        raise ConfigurationError("Need at least 2 teams for a bracket")

    bracket = Bracket(type="single", rounds=build_winners_rounds(participants, prefix))
    settle_byes(bracket)

    logger.info(
        f"Generated single elimination bracket: {len(participants)} teams, "
        f"{len(bracket.rounds)} rounds, {calculate_byes(len(participants))} byes"
    )
    return bracket
