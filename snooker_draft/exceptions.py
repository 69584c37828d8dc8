"""
Custom exceptions for the Snooker Draft Contest.
"""


class DraftContestError(Exception):
    """Base exception for all custom errors."""
    pass


# Bracket Errors
class BracketError(DraftContestError):
    """Base exception for bracket-related errors."""
    pass


class BracketUnavailable(BracketError):
    """Raised when no bracket could be supplied for the current snapshot."""
    pass


class BracketMalformed(BracketError):
    """Raised when bracket data does not form a valid single-elimination tree."""
    pass


class AmbiguousPath(BracketError):
    """Raised when a player's semifinal slot cannot be determined yet."""
    def __init__(self, player_id: str = None):
        self.player_id = player_id
        msg = "Semifinal slot undetermined"
        if player_id:
            msg += f" for player {player_id}"
        super().__init__(msg)


# Player Errors
class PlayerNotFound(DraftContestError):
    """Raised when a pick references a player absent from the snapshot."""
    def __init__(self, player_id: str = None):
        self.player_id = player_id
        msg = "Player not found"
        if player_id:
            msg += f": {player_id}"
        super().__init__(msg)


# Data Source Errors
class DataSourceError(DraftContestError):
    """Raised when tournament data cannot be fetched or parsed."""
    pass


class ParticipantDataError(DataSourceError):
    """Raised when participant data is missing or malformed."""
    pass


# Configuration Errors
class ConfigurationError(DraftContestError):
    """Raised when configuration is invalid or missing."""
    pass
