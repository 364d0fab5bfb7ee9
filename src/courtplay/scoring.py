"""
Game and match scoring for rally-scored games.

A game is a ``Score`` (side A points, side B points). A game is won by the
first side to reach ``points_to_win`` with a lead of at least ``win_by``;
``max_points`` optionally caps a game so the first side to reach it wins
regardless of the lead. A match is best of ``best_of`` games.
"""
import dataclasses
from typing import List, Optional, Sequence

from .errors import InvalidResult
from .models import Score

DEFAULT_POINTS_TO_WIN = 11
DEFAULT_WIN_BY = 2


@dataclasses.dataclass
class MatchScore:
    games: List[Score] = dataclasses.field(default_factory=list)
    games_won_a: int = 0
    games_won_b: int = 0
    total_points_a: int = 0
    total_points_b: int = 0
    # "a", "b" or None while the match is still going
    winner: Optional[str] = None


def game_winner(game: Score, points_to_win: int = DEFAULT_POINTS_TO_WIN,
                win_by: int = DEFAULT_WIN_BY, max_points: Optional[int] = None) -> Optional[str]:
    """Return "a" or "b" for a finished game, None while it is still in play."""
    if game.a >= points_to_win and game.a - game.b >= win_by:
        return "a"
    if game.b >= points_to_win and game.b - game.a >= win_by:
        return "b"
    if max_points and (game.a >= max_points or game.b >= max_points) and game.a != game.b:
        return "a" if game.a > game.b else "b"
    return None


def is_game_complete(game: Score, points_to_win: int = DEFAULT_POINTS_TO_WIN,
                     win_by: int = DEFAULT_WIN_BY, max_points: Optional[int] = None) -> bool:
    return game_winner(game, points_to_win, win_by, max_points) is not None


def calculate_match_score(games: Sequence[Score], best_of: int = 3,
                          points_to_win: int = DEFAULT_POINTS_TO_WIN, win_by: int = DEFAULT_WIN_BY,
                          max_points: Optional[int] = None) -> MatchScore:
    """
    Total up a best-of-N match from its game scores.

    Games still in play count towards total points but not games won.

    Raises:
        InvalidResult: ``best_of`` is not a positive odd number.
    """
    if best_of < 1 or best_of % 2 == 0:
        raise InvalidResult(f"best_of must be a positive odd number, got {best_of}")

    result = MatchScore(games=list(games))
    for game in games:
        result.total_points_a += game.a
        result.total_points_b += game.b
        won = game_winner(game, points_to_win, win_by, max_points)
        if won == "a":
            result.games_won_a += 1
        elif won == "b":
            result.games_won_b += 1

    games_needed = (best_of + 1) // 2
    if result.games_won_a >= games_needed:
        result.winner = "a"
    elif result.games_won_b >= games_needed:
        result.winner = "b"
    return result


def format_score_display(match_score: Optional[MatchScore]) -> str:
    """Games as "11-7, 9-11, 11-5"; "-" when nothing has been played."""
    if match_score is None or not match_score.games:
        return "-"
    return ", ".join(f"{game.a}-{game.b}" for game in match_score.games)
