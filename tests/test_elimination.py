"""
Tests for single elimination bracket generation.
"""
import math
import random

import pytest

from courtplay.elimination import (
    get_round_name,
    calculate_bracket_size,
    calculate_byes,
    calculate_bracket_rounds,
    generate_bracket_order,
    generate_single_elimination_bracket,
    seed_participants,
)
from courtplay.errors import ConfigurationError
from courtplay.models import SlotSource
from courtplay.propagation import get_ready_matches
from conftest import make_players


class TestBracketHelpers:
    """Tests for bracket helper functions."""

    def test_get_round_name_final(self):
        """2 teams = Finals."""
        assert get_round_name(2) == "Finals"

    def test_get_round_name_semifinal(self):
        """4 teams = Semifinals."""
        assert get_round_name(4) == "Semifinals"

    def test_get_round_name_quarterfinal(self):
        """8 teams = Quarterfinals."""
        assert get_round_name(8) == "Quarterfinals"

    def test_get_round_name_round_of_16(self):
        """16 teams = Round of 16."""
        assert get_round_name(16) == "Round of 16"

    def test_calculate_bracket_size(self):
        """Bracket size is the next power of two."""
        assert calculate_bracket_size(2) == 2
        assert calculate_bracket_size(5) == 8
        assert calculate_bracket_size(8) == 8
        assert calculate_bracket_size(9) == 16
        assert calculate_bracket_size(0) == 0

    def test_calculate_byes(self):
        assert calculate_byes(8) == 0
        assert calculate_byes(5) == 3
        assert calculate_byes(6) == 2

    def test_calculate_bracket_rounds(self):
        assert calculate_bracket_rounds(1) == 0
        assert calculate_bracket_rounds(2) == 1
        assert calculate_bracket_rounds(5) == 3
        assert calculate_bracket_rounds(16) == 4


class TestBracketOrder:
    """Tests for generate_bracket_order."""

    def test_bracket_order_2_teams(self):
        assert generate_bracket_order(2) == [1, 2]

    def test_bracket_order_4_teams(self):
        """1v4 and 2v3."""
        assert generate_bracket_order(4) == [1, 4, 2, 3]

    def test_bracket_order_8_teams(self):
        """1v8, 4v5, 2v7, 3v6."""
        assert generate_bracket_order(8) == [1, 8, 4, 5, 2, 7, 3, 6]

    def test_bracket_order_pairs_sum(self):
        """Every first-round pair adds up to size + 1."""
        order = generate_bracket_order(16)
        assert sorted(order) == list(range(1, 17))
        for i in range(0, 16, 2):
            assert order[i] + order[i + 1] == 17


class TestSingleEliminationBracket:
    """Tests for generate_single_elimination_bracket."""

    @pytest.mark.slow
    @pytest.mark.parametrize("count", [2, 3, 4, 5, 6, 7, 8, 9, 12, 16, 17])
    def test_round_count(self, count):
        """n participants need ceil(log2 n) rounds."""
        bracket = generate_single_elimination_bracket(make_players(count))
        assert len(bracket.rounds) == math.ceil(math.log2(count))

    @pytest.mark.parametrize("count", [2, 3, 5, 6, 7, 8, 11, 16])
    def test_bye_matches_completed(self, count):
        """Exactly nextPow2(n) - n first-round matches are byes, already complete."""
        bracket = generate_single_elimination_bracket(make_players(count))
        byes = [m for m in bracket.rounds[0].matches if m.is_bye]

        assert len(byes) == calculate_bracket_size(count) - count
        assert all(m.completed for m in byes)
        assert all(m.loser_id is None for m in byes)

    @pytest.mark.parametrize("size", [2, 4, 8, 16])
    def test_top_seed_meets_bottom_seed(self, size):
        """For a full bracket, seed 1 opens against seed n."""
        participants = make_players(size)
        first = generate_single_elimination_bracket(participants).rounds[0].matches[0]
        assert first.seeds == (1, size)
        assert first.slot_a.id == "p1"
        assert first.slot_b.id == f"p{size}"

    def test_byes_go_to_top_seeds(self):
        """With five players seeds 1-3 skip the first round."""
        bracket = generate_single_elimination_bracket(make_players(5))
        second_round = bracket.rounds[1].matches

        assert second_round[0].slot_a.id == "p1"
        assert second_round[0].slot_b is None
        assert second_round[1].slot_a.id == "p2"
        assert second_round[1].slot_b.id == "p3"

        ready = {m.id for m in get_ready_matches(bracket)}
        assert ready == {"W1-M2", "W2-M2"}

    def test_round_names(self):
        bracket = generate_single_elimination_bracket(make_players(8))
        assert [r.name for r in bracket.rounds] == ["Quarterfinals", "Semifinals", "Finals"]

    def test_edges_declared(self):
        """Each later match names the two matches feeding it."""
        bracket = generate_single_elimination_bracket(make_players(8))
        semi = bracket.rounds[1].matches[1]

        assert semi.id == "W2-M2"
        assert semi.slot_a_source == SlotSource("W1-M3", True)
        assert semi.slot_b_source == SlotSource("W1-M4", True)
        assert bracket.rounds[0].matches[2].next_match_id == "W2-M2"
        assert bracket.rounds[-1].matches[0].next_match_id is None

    def test_prefix_applied(self):
        """A prefix lets two brackets share an id space."""
        bracket = generate_single_elimination_bracket(make_players(4), prefix="S-")
        ids = [m.id for m in bracket.all_matches()]
        assert ids == ["S-W1-M1", "S-W1-M2", "S-W2-M1"]
        assert bracket.rounds[0].matches[0].next_match_id == "S-W2-M1"

    def test_every_participant_placed_once(self):
        participants = make_players(13)
        bracket = generate_single_elimination_bracket(participants)
        placed = [
            slot.id for m in bracket.rounds[0].matches for slot in (m.slot_a, m.slot_b) if slot is not None
        ]
        assert sorted(placed) == sorted(p.id for p in participants)

    def test_needs_two_participants(self):
        with pytest.raises(ConfigurationError, match="at least 2"):
            generate_single_elimination_bracket(make_players(1))

    def test_type(self):
        bracket = generate_single_elimination_bracket(make_players(4))
        assert bracket.type == "single"
        assert bracket.losers_rounds == []
        assert bracket.grand_final is None


class TestSeedParticipants:
    """Tests for seed_participants."""

    def test_rating_puts_strongest_first(self):
        players = list(reversed(make_players(6, with_skill=True)))
        seeded = seed_participants(players, "rating")
        assert [p.id for p in seeded] == ["p1", "p2", "p3", "p4", "p5", "p6"]

    def test_manual_keeps_given_order(self):
        players = list(reversed(make_players(4, with_skill=True)))
        seeded = seed_participants(players, "manual")
        assert [p.id for p in seeded] == ["p4", "p3", "p2", "p1"]
        assert seeded is not players

    def test_random_is_a_permutation(self):
        players = make_players(9)
        seeded = seed_participants(players, "random", rng=random.Random(7))
        assert sorted(p.id for p in seeded) == sorted(p.id for p in players)

    def test_hybrid_fixes_top_quarter(self):
        """Nine players keep the top three by skill; the rest are shuffled."""
        players = list(reversed(make_players(9, with_skill=True)))
        seeded = seed_participants(players, "hybrid", rng=random.Random(3))

        assert [p.id for p in seeded[:3]] == ["p1", "p2", "p3"]
        assert {p.id for p in seeded[3:]} == {f"p{i}" for i in range(4, 10)}

    def test_seeded_bracket_follows_rating(self):
        """Rating seeds feed straight into the bracket order."""
        players = list(reversed(make_players(4, with_skill=True)))
        first = generate_single_elimination_bracket(seed_participants(players)).rounds[0].matches[0]
        assert (first.slot_a.id, first.slot_b.id) == ("p1", "p4")

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError, match="Unknown seeding method"):
            seed_participants(make_players(4), "coin-toss")
