"""
Configuration module with strongly typed settings.

Usage:
    from snooker_draft.config import settings
    
    print(settings.scoring.winner)
    print(settings.provider.tournament_id)
"""
from .settings import (
    Settings,
    ScoringSettings,
    ProviderSettings,
    ParticipantSettings,
    ObservabilitySettings,
)

# Singleton instance - validates on import
settings = Settings()

__all__ = [
    "settings",
    "Settings",
    "ScoringSettings",
    "ProviderSettings",
    "ParticipantSettings",
    "ObservabilitySettings",
]
