"""
Competition formats and the participant counts they need.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from .elimination import calculate_bracket_size
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

MIN_PARTICIPANTS = {
    "single-elimination": 2,
    "double-elimination": 4,
    "round-robin": 3,
    "pool-play": 6,
    "pool-to-bracket": 8,
}


@dataclass
class ParticipantCountCheck:
    valid: bool
    message: Optional[str] = None
    recommendation: Optional[int] = None


def validate_participant_count(count: int, format_name: str) -> ParticipantCountCheck:
    """
    Check whether ``count`` participants can play ``format_name``.

    Too few participants is invalid, with the minimum as the recommendation.
    Elimination brackets where byes fill more than a quarter of the bracket
    are valid but come back with a message and the full bracket size as the
    recommendation.
    """
    if format_name not in MIN_PARTICIPANTS:
        raise ConfigurationError(
            f"Unknown format '{format_name}'; expected one of {tuple(MIN_PARTICIPANTS)}"
        )

    minimum = MIN_PARTICIPANTS[format_name]
    if count < minimum:
        return ParticipantCountCheck(
            valid=False,
            message=f"{format_name} requires at least {minimum} participants",
            recommendation=minimum,
        )

    if format_name in ("single-elimination", "double-elimination"):
        bracket_size = calculate_bracket_size(count)
        byes = bracket_size - count
        if byes * 4 > bracket_size:
            return ParticipantCountCheck(
                valid=True,
                message=f"{byes} byes will be needed. Consider {bracket_size} participants for a full bracket",
                recommendation=bracket_size,
            )

    return ParticipantCountCheck(valid=True)


def require_participant_count(count: int, format_name: str) -> None:
    """Like validate_participant_count, but raise when the count is too low."""
    check = validate_participant_count(count, format_name)
    if not check.valid:
        logger.warning(check.message)
        raise ConfigurationError(check.message)
