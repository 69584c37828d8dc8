"""
Protocol definitions for the data collaborators.

The core consumes their outputs and never fetches, caches or persists
anything itself. Using Protocol allows duck typing while still providing
type checking support.
"""
from typing import Protocol, List, runtime_checkable

from snooker_draft.core.snapshot import TournamentSnapshot
from snooker_draft.leaderboard import Participant


@runtime_checkable
class TournamentDataProvider(Protocol):
    """
    Source of bracket and player state.
    
    Implementations:
    - WSTProvider: live WST tournament API
    - FileSnapshotProvider: static snapshot on disk
    """
    
    def load_snapshot(self) -> TournamentSnapshot:
        """
        Load the current tournament state.
        
        Returns:
            TournamentSnapshot, with bracket=None if no valid bracket exists
            
        Raises:
            DataSourceError: if the source cannot be read at all
        """
        ...


@runtime_checkable
class ParticipantStore(Protocol):
    """
    Source of contest participants and their picks.
    
    Implementations:
    - CsvParticipantStore: spreadsheet export
    - AppsScriptParticipantStore: Apps Script JSON (file or URL)
    """
    
    def load_participants(self) -> List[Participant]:
        """
        Load all participants.
        
        Returns:
            Participants with picks as entered (player names or ids)
            
        Raises:
            ParticipantDataError: if the data is missing or malformed
        """
        ...
