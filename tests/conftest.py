"""
Shared pytest fixtures for courtplay tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip the larger bracket and schedule sweeps
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from courtplay.models import Player, Team, LadderPlayer


def make_players(count, with_skill=False):
    """Players p1..pN; with_skill gives p1 the highest skill level."""
    return [
        Player(id=f"p{i}", name=f"Player {i}", skill_level=float(count - i + 1) if with_skill else None)
        for i in range(1, count + 1)
    ]


def make_teams(count):
    """Teams t1..tN built from fresh players."""
    teams = []
    for i in range(1, count + 1):
        teams.append(Team(
            id=f"t{i}",
            player1=Player(id=f"t{i}a", name=f"T{i} A", skill_level=float(count - i + 1)),
            player2=Player(id=f"t{i}b", name=f"T{i} B", skill_level=float(count - i + 1)),
        ))
    return teams


@pytest.fixture
def players():
    """Eight players, p1 strongest."""
    return make_players(8, with_skill=True)


@pytest.fixture
def teams():
    """Six set-partner teams, t1 strongest."""
    return make_teams(6)


@pytest.fixture
def ladder():
    """Six ranked ladder players: l1 is rank 1 ... l6 is rank 6."""
    return [LadderPlayer(id=f"l{i}", name=f"Ladder {i}", rank=i) for i in range(1, 7)]
