"""
Strongly typed configuration using pydantic-settings.

All settings are validated at startup and loaded from:
1. Default values defined here
2. .env file (if present)
3. Environment variables (highest priority)

Environment variable naming:
- ScoringSettings: SCORING_WINNER, SCORING_SEMIFINALIST, etc.
- ProviderSettings: WST_TOURNAMENT_ID, WST_TIMEOUT_S, etc.
- ParticipantSettings: PARTICIPANTS_SOURCE
- ObservabilitySettings: ENVIRONMENT, LOG_LEVEL (no prefix)
"""
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path

from snooker_draft.bracket.ladder import PointsLadder


class ScoringSettings(BaseSettings):
    """Points ladder for the contest."""
    
    model_config = SettingsConfigDict(env_prefix="SCORING_")
    
    winner: int = Field(default=14, ge=0)
    finalist: int = Field(default=10, ge=0)
    semifinalist: int = Field(default=6, ge=0)
    quarterfinalist: int = Field(default=4, ge=0)
    last16: int = Field(default=2, ge=0)
    early: int = Field(default=0, ge=0, description="Any round before the last 16")
    
    @model_validator(mode="after")
    def ladder_non_decreasing(self):
        values = [self.early, self.last16, self.quarterfinalist, self.semifinalist, self.finalist, self.winner]
        if any(a > b for a, b in zip(values, values[1:])):
            raise ValueError(f"Points ladder must be non-decreasing, got {values}")
        return self
    
    def ladder(self) -> PointsLadder:
        return PointsLadder(
            champion=self.winner,
            rungs=(self.finalist, self.semifinalist, self.quarterfinalist, self.last16),
            early=self.early,
        )


class ProviderSettings(BaseSettings):
    """Tournament data provider settings."""
    
    model_config = SettingsConfigDict(env_prefix="WST_")
    
    base_url: str = Field(default="https://tournaments.snooker.web.gc.wstservices.co.uk/v2")
    tournament_id: str = Field(default="34ca357d-bed6-4501-b8cd-aa94e5f7ff16")
    timeout_s: float = Field(default=10.0, gt=0.0, le=120.0)
    snapshot_path: Path = Field(default=Path("data/bracket.json"), description="Static snapshot file")
    season: Optional[int] = Field(default=None, description="Season used for seeding; latest if unset")


class ParticipantSettings(BaseSettings):
    """Participant store settings."""
    
    model_config = SettingsConfigDict(env_prefix="PARTICIPANTS_")
    
    source: str = Field(default="data/participants.csv", description="CSV/JSON path or Apps Script URL")


class ObservabilitySettings(BaseSettings):
    """Logging settings."""
    
    model_config = SettingsConfigDict(env_prefix="")  # Direct: ENVIRONMENT, LOG_LEVEL
    
    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: Optional[str] = Field(default=None, pattern="^(console|json)$", description="Defaults to json in production")


class Settings(BaseSettings):
    """
    Root settings aggregating all subsections.
    
    Usage:
        from snooker_draft.config import settings
        
        settings.scoring.ladder()
        settings.provider.tournament_id
        settings.observability.log_level
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    participants: ParticipantSettings = Field(default_factory=ParticipantSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    
