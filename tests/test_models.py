"""
Tests for the shared entity model.
"""
from courtplay.models import (
    Player, Team, Match, Pool, Bracket, BracketMatch, BracketRound, SlotSource,
    LadderPlayer, is_team, entity_id, entity_name, skill_of,
)


class TestParticipants:
    """Tests for Player and Team."""

    def test_team_name_joins_players(self):
        """A team is named after both of its players."""
        team = Team(id="t1", player1=Player("a", "Alice"), player2=Player("b", "Bob"))
        assert team.name == "Alice & Bob"
        assert entity_name(team) == "Alice & Bob"
        assert entity_id(team) == "t1"

    def test_team_skill_is_average(self):
        """Team skill is the mean of both players' skill."""
        team = Team(id="t1", player1=Player("a", "A", 4.0), player2=Player("b", "B", 3.0))
        assert team.skill_level == 3.5

    def test_missing_skill_counts_as_zero(self):
        """Players without a skill level sort as zero."""
        team = Team(id="t1", player1=Player("a", "A", 4.0), player2=Player("b", "B"))
        assert team.skill_level == 2.0
        assert skill_of(Player("c", "C")) == 0

    def test_is_team(self):
        player = Player("a", "A")
        assert not is_team(player)
        assert is_team(Team(id="t", player1=player, player2=Player("b", "B")))

    def test_ladder_player_defaults(self):
        """Ladder players start unranked."""
        assert LadderPlayer(id="l1", name="L").rank is None


class TestMatch:
    """Tests for Match."""

    def test_defaults(self):
        """A new match is unplayed with a 0-0 score."""
        match = Match(id="m1", round=1, side_a=Player("a", "A"), side_b=Player("b", "B"))
        assert not match.completed
        assert match.score.a == 0 and match.score.b == 0
        assert match.participant_ids == ["a", "b"]

    def test_scores_not_shared(self):
        """Each match gets its own score object."""
        first = Match(id="m1", round=1, side_a=Player("a", "A"), side_b=Player("b", "B"))
        second = Match(id="m2", round=1, side_a=Player("a", "A"), side_b=Player("b", "B"))
        first.score.a = 11
        assert second.score.a == 0


class TestPool:
    """Tests for Pool."""

    def test_participants_prefers_teams(self):
        """A team pool reports its teams; a player pool its players."""
        players = [Player("a", "A"), Player("b", "B")]
        team = Team(id="t", player1=players[0], player2=players[1])

        assert Pool(number=1, players=players).participants == players
        assert Pool(number=1, teams=[team]).participants == [team]


class TestBracket:
    """Tests for Bracket traversal."""

    def test_all_matches_order(self):
        """Winners, losers, grand final and reset are visited in that order."""
        winners = BracketMatch(id="W1-M1", round_number=1, match_number=1)
        losers = BracketMatch(id="L1-M1", round_number=1, match_number=1)
        grand_final = BracketMatch(id="GF", round_number=2, match_number=1)
        reset = BracketMatch(id="GF-RESET", round_number=3, match_number=1)
        bracket = Bracket(
            type="double",
            rounds=[BracketRound("Finals", 1, [winners])],
            losers_rounds=[BracketRound("Losers Final", 1, [losers])],
            grand_final=grand_final,
            grand_final_reset=reset,
        )

        assert [m.id for m in bracket.all_matches()] == ["W1-M1", "L1-M1", "GF", "GF-RESET"]
        assert set(bracket.match_index()) == {"W1-M1", "L1-M1", "GF", "GF-RESET"}

    def test_participant_lookup(self):
        """participant() finds whoever occupies a slot."""
        alice, bob = Player("a", "A"), Player("b", "B")
        match = BracketMatch(id="W1-M1", round_number=1, match_number=1, slot_a=alice, slot_b=bob)
        assert match.has_both_slots
        assert match.participant("b") is bob
        assert match.participant("z") is None

    def test_slot_source_equality(self):
        """Edges compare by match id and winner/loser flag."""
        assert SlotSource("W1-M1", True) == SlotSource("W1-M1", True)
        assert SlotSource("W1-M1", True) != SlotSource("W1-M1", False)
