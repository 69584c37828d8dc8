"""
Core module - Snapshot type and collaborator protocols.
"""
from .snapshot import TournamentSnapshot
from .protocols import TournamentDataProvider, ParticipantStore

__all__ = [
    "TournamentSnapshot",
    "TournamentDataProvider",
    "ParticipantStore",
]
