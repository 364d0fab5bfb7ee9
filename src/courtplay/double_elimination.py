"""
Double elimination bracket generation.

In double elimination:
- Teams must lose twice to be eliminated
- Winners Bracket: Teams that haven't lost yet
- Losers Bracket: Teams that have lost once
- Grand Final: Winners bracket champion vs Losers bracket champion
- Bracket Reset: If losers bracket winner wins Grand Final, a final match decides the champion
"""
import logging
import math
from typing import Dict, List, Sequence, Set

from .elimination import build_winners_rounds, calculate_bracket_size, settle_byes
from .errors import ConfigurationError
from .models import Bracket, BracketMatch, BracketRound, Participant, SlotSource

logger = logging.getLogger(__name__)

GRAND_FINAL_ID = "GF"
GRAND_FINAL_RESET_ID = "GF-RESET"


def get_losers_round_name(round_num: int, total_losers_rounds: int) -> str:
    """Get the name for a losers bracket round (0-indexed)."""
    rounds_from_end = total_losers_rounds - round_num - 1
    if rounds_from_end == 0:
        return "Losers Final"
    elif rounds_from_end == 1:
        return "Losers Semifinal"
    else:
        return f"Losers Round {round_num + 1}"


def calculate_losers_bracket_rounds(bracket_size: int) -> int:
    """
    Calculate number of rounds in losers bracket.
    For N teams in winners bracket (power of 2):
    - Winners bracket has log2(N) rounds
    - Losers bracket has 2 * (log2(N) - 1) rounds

    Pattern: minor, major, minor, major, ... ending with a major round
    """
    if bracket_size < 2:
        return 0
    winners_rounds = int(math.log2(bracket_size))
    return 2 * (winners_rounds - 1)


def _losers_match(prefix: str, round_number: int, match_number: int,
                  source_a: SlotSource, source_b: SlotSource) -> BracketMatch:
    return BracketMatch(
        id=f"{prefix}L{round_number}-M{match_number}",
        round_number=round_number,
        match_number=match_number,
        slot_a_source=source_a,
        slot_b_source=source_b,
    )


def _generate_losers_bracket(winners_rounds: List[BracketRound], prefix: str = "") -> List[List[BracketMatch]]:
    """
    Generate losers bracket matches and wire the winners bracket losers into it.

    The losers bracket alternates between:
    - Minor rounds: only losers bracket teams compete
    - Major (dropdown) rounds: losers from the winners bracket drop in

    For 8-team bracket:
    - L Round 1 (minor): 4 W-QF losers pair off -> 2 matches -> 2 winners
    - L Round 2 (major): 2 W-SF losers + 2 L-R1 winners -> 2 matches -> 2 winners
    - L Round 3 (minor): 2 L-R2 winners pair off -> 1 match -> 1 winner
    - L Round 4 (major): 1 W-F loser + 1 L-R3 winner -> 1 match -> 1 winner (L champion)
    """
    losers_rounds: List[List[BracketMatch]] = []
    if len(winners_rounds) < 2:
        return losers_rounds

    # First losers round: losers of winners round 1 play each other
    first_round = winners_rounds[0].matches
    current = []
    for i in range(len(first_round) // 2):
        feeder_a, feeder_b = first_round[i * 2], first_round[i * 2 + 1]
        match = _losers_match(prefix, 1, i + 1,
                              SlotSource(feeder_a.id, False), SlotSource(feeder_b.id, False))
        feeder_a.loser_next_match_id = match.id
        feeder_b.loser_next_match_id = match.id
        current.append(match)
    losers_rounds.append(current)

    for winners_round in winners_rounds[1:]:
        # Major round: winners bracket losers vs losers bracket survivors
        round_number = len(losers_rounds) + 1
        dropdown = []
        for i, (dropping, surviving) in enumerate(zip(winners_round.matches, current)):
            match = _losers_match(prefix, round_number, i + 1,
                                  SlotSource(dropping.id, False), SlotSource(surviving.id, True))
            dropping.loser_next_match_id = match.id
            surviving.next_match_id = match.id
            dropdown.append(match)
        losers_rounds.append(dropdown)
        current = dropdown

        if len(dropdown) < 2:
            break

        # Minor round: survivors pair off
        round_number = len(losers_rounds) + 1
        consolidation = []
        for i in range(len(dropdown) // 2):
            feeder_a, feeder_b = dropdown[i * 2], dropdown[i * 2 + 1]
            match = _losers_match(prefix, round_number, i + 1,
                                  SlotSource(feeder_a.id, True), SlotSource(feeder_b.id, True))
            feeder_a.next_match_id = match.id
            feeder_b.next_match_id = match.id
            consolidation.append(match)
        losers_rounds.append(consolidation)
        current = consolidation

    return losers_rounds


def _mark_walkovers(bracket: Bracket) -> None:
    """
    Flag matches that can only ever receive one participant (or none).

    A round-1 bye has a winner but no loser, so any losers bracket match fed by
    its loser is a walkover for whoever arrives in the other slot. A match that
    can receive nobody is completed straight away with no winner.
    """
    index: Dict[str, BracketMatch] = bracket.match_index()
    empty: Set[str] = set()

    def delivers(source: SlotSource) -> bool:
        feeder = index[source.match_id]
        if source.is_winner:
            return feeder.id not in empty
        return not feeder.is_bye

    for match in bracket.all_matches():
        if match.slot_a_source is None or match.slot_b_source is None:
            continue
        arriving = [delivers(match.slot_a_source), delivers(match.slot_b_source)]
        if all(arriving):
            continue
        match.is_bye = True
        if not any(arriving):
            empty.add(match.id)
            match.completed = True
            logger.debug(f"{match.id} can never be played; marked complete")


def generate_double_elimination_bracket(participants: Sequence[Participant], prefix: str = "") -> Bracket:
    """
    Generate a double elimination bracket.

    Args:
        participants: players or teams in seed order
        prefix: prepended to every match id

    Raises:
        ConfigurationError: fewer than two participants.
    """
    if len(participants) < 2:
        raise ConfigurationError("Need at least 2 teams for a bracket")

    winners_rounds = build_winners_rounds(participants, prefix)
    losers_matches = _generate_losers_bracket(winners_rounds, prefix)
    total_winners_rounds = len(winners_rounds)
    winners_final = winners_rounds[-1].matches[0]

    if losers_matches:
        losers_final = losers_matches[-1][0]
        losers_source = SlotSource(losers_final.id, True)
    else:
        # Two teams: the winners final loser goes straight to the grand final
        losers_final = winners_final
        losers_source = SlotSource(winners_final.id, False)

    grand_final_id = f"{prefix}{GRAND_FINAL_ID}"
    reset_id = f"{prefix}{GRAND_FINAL_RESET_ID}"
    grand_final = BracketMatch(
        id=grand_final_id,
        round_number=total_winners_rounds + 1,
        match_number=1,
        slot_a_source=SlotSource(winners_final.id, True),
        slot_b_source=losers_source,
        next_match_id=reset_id,
        loser_next_match_id=reset_id,
    )
    winners_final.next_match_id = grand_final_id
    if losers_source.is_winner:
        losers_final.next_match_id = grand_final_id
    else:
        winners_final.loser_next_match_id = grand_final_id

    # Only played when the losers bracket champion wins the grand final
    grand_final_reset = BracketMatch(
        id=reset_id,
        round_number=total_winners_rounds + 2,
        match_number=1,
        slot_a_source=SlotSource(grand_final_id, False),
        slot_b_source=SlotSource(grand_final_id, True),
    )

    total_losers_rounds = len(losers_matches)
    losers_rounds = [
        BracketRound(
            name=get_losers_round_name(i, total_losers_rounds),
            round_number=i + 1,
            matches=matches,
        )
        for i, matches in enumerate(losers_matches)
    ]

    bracket = Bracket(
        type="double",
        rounds=winners_rounds,
        losers_rounds=losers_rounds,
        grand_final=grand_final,
        grand_final_reset=grand_final_reset,
    )
    _mark_walkovers(bracket)
    settle_byes(bracket)

    logger.info(
        f"Generated double elimination bracket: {len(participants)} teams, "
        f"bracket size {calculate_bracket_size(len(participants))}, "
        f"{total_winners_rounds} winners rounds, {total_losers_rounds} losers rounds"
    )
    return bracket
