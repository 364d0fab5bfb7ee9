"""Exception classes raised by the scheduling engine."""


class CourtplayError(Exception):
    """Base error class."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ConfigurationError(CourtplayError):
    """Raised before generation when the requested structure cannot be built."""


class NotFoundError(CourtplayError):
    """Raised when a referenced match or player does not exist."""


class MatchNotFound(NotFoundError):
    def __init__(self, match_id):
        super().__init__(f"Match not found: {match_id}")
        self.match_id = match_id


class PlayerNotFound(NotFoundError):
    def __init__(self, player_id):
        super().__init__(f"Player not found: {player_id}")
        self.player_id = player_id


class PlayerNotRanked(NotFoundError):
    def __init__(self, player_id):
        super().__init__(f"Player has no ladder rank: {player_id}")
        self.player_id = player_id


class ValidationError(CourtplayError):
    """Raised when an operation is well-formed but breaks a rule of the format.

    The message is meant to be shown to the user as-is.
    """


class InvalidChallenge(ValidationError):
    pass


class InvalidResult(ValidationError):
    pass


class BracketIntegrityError(RuntimeError):
    """A bracket edge points at a match or slot that does not exist.

    Only a faulty generator can produce this; it is never caught internally.
    """
