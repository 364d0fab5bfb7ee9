"""
Entity model shared by every scheduling format.

Participants are either a single Player or a fixed two-player Team. Everything
downstream refers to them by id; match slots keep the participant value so a
renderer can lay out a bracket without a second lookup.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union


@dataclass
class Player:
    id: str
    name: str
    skill_level: Optional[float] = None


@dataclass
class Team:
    id: str
    player1: Player
    player2: Player

    @property
    def name(self) -> str:
        return f"{self.player1.name} & {self.player2.name}"

    @property
    def skill_level(self) -> float:
        """Average of the two players' skill levels (missing counts as 0)."""
        return ((self.player1.skill_level or 0) + (self.player2.skill_level or 0)) / 2


Participant = Union[Player, Team]


def is_team(entity: Participant) -> bool:
    return isinstance(entity, Team)


def entity_id(entity: Participant) -> str:
    return entity.id


def entity_name(entity: Participant) -> str:
    return entity.name


def skill_of(entity: Participant) -> float:
    return entity.skill_level or 0


@dataclass
class Score:
    a: int = 0
    b: int = 0


@dataclass
class Match:
    """A schedulable game between two sides (players or teams)."""
    id: str
    round: int
    side_a: Participant
    side_b: Participant
    court: Optional[int] = None
    score: Score = field(default_factory=Score)
    completed: bool = False
    winner_id: Optional[str] = None
    pool_number: Optional[int] = None
    is_playoff: bool = False
    challenge: bool = False
    cancelled: bool = False

    @property
    def participant_ids(self) -> List[str]:
        return [self.side_a.id, self.side_b.id]


@dataclass
class Pool:
    number: int
    players: List[Player] = field(default_factory=list)
    teams: Optional[List[Team]] = None
    matches: List[Match] = field(default_factory=list)

    @property
    def participants(self) -> List[Participant]:
        return list(self.teams) if self.teams is not None else list(self.players)


@dataclass(frozen=True)
class SlotSource:
    """Edge into a bracket slot: the winner (or loser) of ``match_id``."""
    match_id: str
    is_winner: bool


@dataclass
class BracketMatch:
    id: str
    round_number: int
    match_number: int
    slot_a: Optional[Participant] = None
    slot_b: Optional[Participant] = None
    score: Optional[Score] = None
    winner_id: Optional[str] = None
    loser_id: Optional[str] = None
    completed: bool = False
    next_match_id: Optional[str] = None
    loser_next_match_id: Optional[str] = None
    slot_a_source: Optional[SlotSource] = None
    slot_b_source: Optional[SlotSource] = None
    is_bye: bool = False
    seeds: Optional[Tuple[int, int]] = None

    @property
    def has_both_slots(self) -> bool:
        return self.slot_a is not None and self.slot_b is not None

    def participant(self, participant_id: str) -> Optional[Participant]:
        for slot in (self.slot_a, self.slot_b):
            if slot is not None and slot.id == participant_id:
                return slot
        return None


@dataclass
class BracketRound:
    name: str
    round_number: int
    matches: List[BracketMatch] = field(default_factory=list)


@dataclass
class Bracket:
    type: str
    rounds: List[BracketRound] = field(default_factory=list)
    losers_rounds: List[BracketRound] = field(default_factory=list)
    grand_final: Optional[BracketMatch] = None
    grand_final_reset: Optional[BracketMatch] = None

    def all_matches(self) -> Iterator[BracketMatch]:
        """Winners rounds, losers rounds, grand final, reset; in that order."""
        for bracket_round in self.rounds:
            yield from bracket_round.matches
        for bracket_round in self.losers_rounds:
            yield from bracket_round.matches
        if self.grand_final is not None:
            yield self.grand_final
        if self.grand_final_reset is not None:
            yield self.grand_final_reset

    def match_index(self) -> Dict[str, BracketMatch]:
        return {match.id: match for match in self.all_matches()}


@dataclass
class LadderPlayer(Player):
    rank: Optional[int] = None


@dataclass
class KingOfCourtState:
    court_king: Participant
    challenger: Participant
    queue: List[Participant] = field(default_factory=list)
    matches_played: int = 0
    king_streak: int = 0


@dataclass
class Standing:
    participant_id: str
    participant_name: str
    played: int = 0
    wins: int = 0
    losses: int = 0
    points_for: int = 0
    points_against: int = 0
    point_diff: int = 0
    win_percentage: float = 0.0
    rank: Optional[int] = None
