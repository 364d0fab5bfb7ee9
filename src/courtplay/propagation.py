"""
Recording bracket results and moving participants along the bracket edges.

Each match declares where its winner (``next_match_id``) and, in double
elimination, its loser (``loser_next_match_id``) go. The receiving match
declares which edge feeds each of its slots (``slot_a_source`` /
``slot_b_source``). Propagation is a lookup on those edges, so recording the
same match again with a different winner overwrites the downstream slots.
A later match that was already decided with the old participant is reopened,
and whatever it had sent further on is taken back, so the bracket never
holds a result for a pairing that no longer exists.

``record_result`` never mutates its input; callers persist the returned
bracket. Two results for the same bracket must be recorded one after the
other, each on the bracket returned by the previous call.
"""
import copy
import logging
import math
from typing import Dict, List, Optional, Tuple, Union

from .errors import BracketIntegrityError, InvalidResult, MatchNotFound
from .models import Bracket, BracketMatch, Participant, Score, SlotSource

logger = logging.getLogger(__name__)

ScoreLike = Union[Score, Tuple[int, int]]


def find_match(bracket: Bracket, match_id: str) -> BracketMatch:
    """Find a match in winners rounds, losers rounds, grand final or reset."""
    for match in bracket.all_matches():
        if match.id == match_id:
            return match
    raise MatchNotFound(match_id)


def _slot_for(target: BracketMatch, edge: SlotSource) -> Optional[str]:
    if target.slot_a_source == edge:
        return "a"
    if target.slot_b_source == edge:
        return "b"
    return None


def _place(index: Dict[str, BracketMatch], bracket: Bracket, source: BracketMatch,
           target_id: str, participant: Participant, is_winner: bool) -> None:
    target = index.get(target_id)
    if target is None:
        raise BracketIntegrityError(f"{source.id} points at missing match {target_id}")

    slot = _slot_for(target, SlotSource(match_id=source.id, is_winner=is_winner))
    if slot is None:
        raise BracketIntegrityError(
            f"{target.id} has no slot fed by the {'winner' if is_winner else 'loser'} of {source.id}"
        )
    previous = target.slot_a if slot == "a" else target.slot_b
    if slot == "a":
        target.slot_a = participant
    else:
        target.slot_b = participant

    # Walkover: the other slot can never be filled
    if target.is_bye:
        target.completed = True
        target.winner_id = participant.id
        target.loser_id = None
        propagate_result(bracket, index, target)
        return

    if target.completed and (previous is None or previous.id != participant.id):
        logger.info(f"{target.id} was decided with a different participant; reopening it")
        _reopen(index, target)


def _reopen(index: Dict[str, BracketMatch], match: BracketMatch) -> None:
    """Drop the result of ``match`` and take back everything it sent on."""
    match.completed = False
    match.score = None
    match.winner_id = None
    match.loser_id = None
    _retract(index, match)


def _retract(index: Dict[str, BracketMatch], source: BracketMatch) -> None:
    """Empty the slots ``source`` feeds, reopening matches already decided from them."""
    for target_id, is_winner in ((source.next_match_id, True), (source.loser_next_match_id, False)):
        target = index.get(target_id) if target_id else None
        if target is None:
            continue
        slot = _slot_for(target, SlotSource(match_id=source.id, is_winner=is_winner))
        if slot is None:
            continue
        if slot == "a":
            target.slot_a = None
        else:
            target.slot_b = None
        # Walkovers that never had anyone to play (winner None) stay settled
        if target.completed and target.winner_id is not None:
            _reopen(index, target)


def _clear(match: BracketMatch) -> None:
    match.slot_a = None
    match.slot_b = None
    match.score = None
    match.winner_id = None
    match.loser_id = None
    match.completed = False


def losers_side_slot(bracket: Bracket) -> Optional[str]:
    """
    Which grand final slot ("a" or "b") holds the losers bracket champion.

    Decided from the slot's source edge: it is fed either by a losers
    bracket match or by the loser of a winners bracket match.
    """
    grand_final = bracket.grand_final
    if grand_final is None:
        return None
    losers_ids = {m.id for r in bracket.losers_rounds for m in r.matches}
    for slot, source in (("a", grand_final.slot_a_source), ("b", grand_final.slot_b_source)):
        if source is not None and (not source.is_winner or source.match_id in losers_ids):
            return slot
    raise BracketIntegrityError("Grand final has no slot fed from the losers bracket")


def reset_required(bracket: Bracket) -> bool:
    """True when the losers bracket champion won the grand final."""
    grand_final = bracket.grand_final
    if grand_final is None or not grand_final.completed or grand_final.winner_id is None:
        return False
    losers_slot = grand_final.slot_a if losers_side_slot(bracket) == "a" else grand_final.slot_b
    return losers_slot is not None and grand_final.winner_id == losers_slot.id


def _settle_grand_final(bracket: Bracket, index: Dict[str, BracketMatch]) -> None:
    grand_final = bracket.grand_final
    reset = bracket.grand_final_reset
    if reset is None:
        return
    if not reset_required(bracket):
        _clear(reset)
        return

    logger.info("Losers bracket champion won the grand final; reset match is live")
    _clear(reset)
    winner = grand_final.participant(grand_final.winner_id)
    loser = grand_final.participant(grand_final.loser_id)
    _place(index, bracket, grand_final, reset.id, winner, is_winner=True)
    _place(index, bracket, grand_final, reset.id, loser, is_winner=False)


def propagate_result(bracket: Bracket, index: Dict[str, BracketMatch], match: BracketMatch) -> None:
    """Push the winner and loser of a completed ``match`` into their next matches.

    Mutates ``bracket`` in place; ``index`` must be ``bracket.match_index()``.
    """
    if bracket.grand_final is not None and match.id == bracket.grand_final.id:
        _settle_grand_final(bracket, index)
        return

    if match.next_match_id and match.winner_id is not None:
        winner = match.participant(match.winner_id)
        _place(index, bracket, match, match.next_match_id, winner, is_winner=True)

    if match.loser_next_match_id and match.loser_id is not None:
        loser = match.participant(match.loser_id)
        _place(index, bracket, match, match.loser_next_match_id, loser, is_winner=False)


def record_result(bracket: Bracket, match_id: str, winner_id: str, score: ScoreLike) -> Bracket:
    """
    Record the result of a bracket match and return the updated bracket.

    Raises:
        MatchNotFound: ``match_id`` is not in the bracket.
        InvalidResult: the match is a bye, or ``winner_id`` is not in it.
    """
    updated = copy.deepcopy(bracket)
    index = updated.match_index()

    match = index.get(match_id)
    if match is None:
        raise MatchNotFound(match_id)
    if match.is_bye:
        raise InvalidResult(f"Match {match_id} is a bye and advances automatically")

    winner = match.participant(winner_id)
    if winner is None:
        raise InvalidResult(f"{winner_id} is not playing in match {match_id}")

    if not isinstance(score, Score):
        score = Score(*score)

    if match.completed and match.winner_id != winner_id:
        logger.info(f"Correcting result of {match_id}: winner {match.winner_id} -> {winner_id}")

    match.completed = True
    match.score = score
    match.winner_id = winner_id
    match.loser_id = None
    if match.has_both_slots:
        match.loser_id = match.slot_b.id if match.slot_a.id == winner_id else match.slot_a.id

    propagate_result(updated, index, match)
    return updated


def is_complete(bracket: Bracket) -> bool:
    """
    A bracket is complete when every match with two participants has been
    played and, for double elimination, the grand final (and the reset, if
    the losers bracket champion forced one) has been played too.
    """
    for bracket_round in bracket.rounds + bracket.losers_rounds:
        for match in bracket_round.matches:
            if match.has_both_slots and not match.completed:
                return False

    if bracket.type == "double" and bracket.grand_final is not None:
        if not bracket.grand_final.completed:
            return False
        if reset_required(bracket) and bracket.grand_final_reset is not None \
                and not bracket.grand_final_reset.completed:
            return False

    return True


def get_next_playoff_match(bracket: Bracket, match_id: str) -> Tuple[Optional[BracketMatch], Optional[BracketMatch]]:
    """Return (winner's next match, loser's next match) for ``match_id``."""
    match = find_match(bracket, match_id)
    index = bracket.match_index()
    winner_next = index.get(match.next_match_id) if match.next_match_id else None
    loser_next = index.get(match.loser_next_match_id) if match.loser_next_match_id else None
    return winner_next, loser_next


def get_ready_matches(bracket: Bracket) -> List[BracketMatch]:
    """Matches with both participants known that have not been played."""
    return [
        m for m in bracket.all_matches()
        if m.has_both_slots and not m.completed and not m.is_bye
    ]


def get_champion(bracket: Bracket) -> Optional[Participant]:
    if bracket.type == "double":
        if reset_required(bracket):
            decider = bracket.grand_final_reset
        else:
            decider = bracket.grand_final
    else:
        decider = bracket.rounds[-1].matches[0] if bracket.rounds else None

    if decider is None or not decider.completed or decider.winner_id is None:
        return None
    return decider.participant(decider.winner_id)


def get_bracket_progress(bracket: Bracket) -> dict:
    """
    Summary counts for a bracket, ignoring byes and an unneeded reset.

    ``current_round`` is the first winners bracket round that still has a match
    to play (the last round once everything is done).
    """
    playable = []
    for match in bracket.all_matches():
        if match.is_bye:
            continue
        if match is bracket.grand_final_reset and not reset_required(bracket):
            continue
        playable.append(match)

    current = bracket.rounds[-1] if bracket.rounds else None
    for bracket_round in bracket.rounds:
        if not all(m.completed or m.is_bye for m in bracket_round.matches):
            current = bracket_round
            break

    completed = sum(1 for m in playable if m.completed)
    total = len(playable)
    return {
        'total_matches': total,
        'completed_matches': completed,
        'remaining_matches': total - completed,
        'percent_complete': (completed / total) * 100 if total else 0.0,
        'current_round': current.round_number if current else 0,
        'current_round_name': current.name if current else "",
    }


def get_estimated_remaining_time(remaining_matches: int, avg_match_minutes: int,
                                 available_courts: int) -> int:
    """Minutes left if matches run ``available_courts`` at a time."""
    if available_courts <= 0 or remaining_matches <= 0:
        return 0
    return math.ceil(remaining_matches / available_courts) * avg_match_minutes
