"""Engine configuration via Pydantic Settings."""

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from proprio_core.core.types import Joint


class AnalysisSettings(BaseSettings):
    """Frame ingestion and confidence gate parameters."""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    confidence_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    window_size: int = Field(default=60, ge=2)
    low_confidence_frames: int = Field(default=5, ge=1)
    sample_rate_hz: float = Field(default=60.0, gt=0.0)


class TremorSettings(BaseSettings):
    """Tremor pipeline parameters."""

    model_config = SettingsConfigDict(env_prefix="TREMOR_")

    joint: Joint = Joint.RIGHT_WRIST
    axis: Literal["x", "y"] = "x"
    scale_factor: float = Field(default=100.0, gt=0.0)
    trend_tolerance: float = Field(default=0.05, ge=0.0, le=1.0)
    trend_history: int = Field(default=120, ge=4)

    @field_validator("joint", mode="before")
    @classmethod
    def _parse_joint_name(cls, value: Any) -> Any:
        # Accept "RIGHT_WRIST" / "right_wrist" as well as landmark indices
        if isinstance(value, str) and not value.isdigit():
            try:
                return Joint[value.upper()]
            except KeyError as e:
                raise ValueError(f"Unknown joint: {value}") from e
        if isinstance(value, str):
            return int(value)
        return value

    @field_validator("joint")
    @classmethod
    def _require_upper_body(cls, value: Joint) -> Joint:
        if not value.is_upper_body:
            raise ValueError(f"Tremor joint must be an upper-body joint, got {value.name}")
        return value


class GaitSettings(BaseSettings):
    """Step detection and gait metric parameters."""

    model_config = SettingsConfigDict(env_prefix="GAIT_")

    step_lift_threshold: float = Field(default=0.03, gt=0.0, lt=1.0)
    stride_history: int = Field(default=8, ge=2)
    stability_scale: float = Field(default=4.0, gt=0.0)
    symmetry_tolerance: float = Field(default=0.05, ge=0.0, le=1.0)


class HapticSettings(BaseSettings):
    """Haptic cue derivation parameters."""

    model_config = SettingsConfigDict(env_prefix="HAPTIC_")

    base_bpm: float = Field(default=60.0, gt=0.0)
    min_bpm: float = Field(default=40.0, gt=0.0)
    max_bpm: float = Field(default=120.0, gt=0.0)
    stability_guidance_threshold: float = Field(default=0.8, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_tempo_range(self) -> "HapticSettings":
        if not self.min_bpm <= self.max_bpm:
            raise ValueError("min_bpm must not exceed max_bpm")
        return self


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    tremor: TremorSettings = Field(default_factory=TremorSettings)
    gait: GaitSettings = Field(default_factory=GaitSettings)
    haptic: HapticSettings = Field(default_factory=HapticSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
