"""
League configuration and roster loading from YAML.

league.yaml:

    type: pool            # ladder | pool | round-robin | king-of-court
    number_of_weeks: 6
    playoff_format: single  # single | double | none
    pool_count: 2
    teams_per_pool_advancing: 2
    max_challenge_range: 3
    number_of_courts: 4

roster.yaml:

    players:
      - {id: p1, name: Alice, skill: 4.5}
      - {id: p2, name: Bob}
    teams:                  # optional; when present the roster is the teams
      - {id: t1, players: [p1, p2]}
"""
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Union

import yaml

from .errors import ConfigurationError
from .models import Player, Team

logger = logging.getLogger(__name__)

LEAGUE_TYPES = ("ladder", "pool", "round-robin", "king-of-court")
PLAYOFF_FORMATS = ("single", "double", "none")


@dataclass
class LeagueConfig:
    type: str
    number_of_weeks: int = 1
    playoff_format: str = "none"
    pool_count: int = 2
    teams_per_pool_advancing: int = 2
    max_challenge_range: int = 3
    number_of_courts: Optional[int] = None


def parse_league_config(raw: dict) -> LeagueConfig:
    """Build a LeagueConfig from already-loaded YAML data."""
    if not isinstance(raw, dict):
        raise ConfigurationError("League config must be a mapping")

    try:
        courts = raw.get("number_of_courts")
        config = LeagueConfig(
            type=str(raw["type"]),
            number_of_weeks=int(raw.get("number_of_weeks", 1)),
            playoff_format=str(raw.get("playoff_format", "none")),
            pool_count=int(raw.get("pool_count", 2)),
            teams_per_pool_advancing=int(raw.get("teams_per_pool_advancing", 2)),
            max_challenge_range=int(raw.get("max_challenge_range", 3)),
            number_of_courts=int(courts) if courts is not None else None,
        )
    except KeyError as exc:
        raise ConfigurationError(f"League config is missing {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid league config: {exc}") from exc

    _validate(config)
    return config


def _validate(config: LeagueConfig) -> None:
    if config.type not in LEAGUE_TYPES:
        raise ConfigurationError(f"type must be one of {LEAGUE_TYPES}, got '{config.type}'")
    if config.playoff_format not in PLAYOFF_FORMATS:
        raise ConfigurationError(
            f"playoff_format must be one of {PLAYOFF_FORMATS}, got '{config.playoff_format}'"
        )
    if config.number_of_weeks < 1:
        raise ConfigurationError("number_of_weeks must be >= 1")
    if config.pool_count < 1:
        raise ConfigurationError("pool_count must be >= 1")
    if config.teams_per_pool_advancing < 1:
        raise ConfigurationError("teams_per_pool_advancing must be >= 1")
    if config.max_challenge_range < 1:
        raise ConfigurationError("max_challenge_range must be >= 1")


def load_league_config(file_path: str) -> LeagueConfig:
    """
    Load league settings from a YAML file.

    Raises:
        FileNotFoundError: the file is missing.
        ConfigurationError: required fields are absent or invalid.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"League config not found: {os.path.abspath(file_path)}")

    with open(file_path, mode='r', encoding='utf-8') as file:
        raw = yaml.safe_load(file) or {}
    return parse_league_config(raw)


def load_roster(file_path: str) -> List[Union[Player, Team]]:
    """Load players, or teams built from those players, from a YAML file."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or {}

    players = {}
    for entry in data.get('players', []):
        skill = entry.get('skill')
        player = Player(
            id=str(entry['id']),
            name=str(entry.get('name', entry['id'])),
            skill_level=float(skill) if skill is not None else None,
        )
        players[player.id] = player

    if not data.get('teams'):
        logger.info(f"Loaded {len(players)} players from {file_path}")
        return list(players.values())

    teams = []
    for entry in data['teams']:
        member_ids = [str(p) for p in entry.get('players', [])]
        if len(member_ids) != 2:
            raise ConfigurationError(f"Team {entry.get('id')} must list exactly 2 players")
        missing = [p for p in member_ids if p not in players]
        if missing:
            raise ConfigurationError(f"Team {entry.get('id')} references unknown players: {missing}")
        teams.append(Team(id=str(entry['id']), player1=players[member_ids[0]], player2=players[member_ids[1]]))

    logger.info(f"Loaded {len(teams)} teams from {file_path}")
    return teams
