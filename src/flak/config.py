"""Configuration management using Pydantic settings."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlakSettings(BaseSettings):
    """Flak tuning values loaded from environment variables.

    Frozen: every zone, scheduler and activation loop holds a reference to
    the same instance, so values cannot drift under already-scheduled tasks.
    Build a new instance (``settings.model_copy(update=...)``) to change them
    before a mission starts.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLAK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # In-sim debug messages (log output is always written)
    debug: bool = False
    message_duration: float = 5.0

    # Hold fire: unset means the switch is ignored
    hold_fire_flag: Optional[str] = None
    hold_fire_value: int = 1

    # Density: bursts = floor((radius / density_factor) * density_multiplier)
    density_factor: float = Field(500.0, gt=0)       # meters per burst
    density_multiplier: float = Field(0.5, ge=0)

    # Layering: offsets from center altitude
    layer_offsets: tuple[float, ...] = (-150.0, 0.0, 150.0)

    # Timing (seconds)
    interval: float = Field(0.6, gt=0)          # barrage cycle
    update_interval: float = Field(1.0, gt=0)   # activation re-evaluation
    burst_stagger: float = Field(0.1, ge=0)     # spacing between bursts in a layer

    # Burst placement
    vertical_jitter: float = Field(50.0, ge=0)

    # Dynamic altitude binning
    altitude_bin_size: float = Field(150.0, gt=0)

    # Zones
    default_zone_radius: float = Field(500.0, gt=0)
    corridor_zone_radius: float = Field(800.0, gt=0)
    corridor_name_prefix: str = "FlakCorridor_"

    # Which contacts count as enemies / feed dynamic altitude
    target_side: str = "blue"
    target_category: str = "airplane"

    # Burst RNG seed (None = nondeterministic)
    seed: Optional[int] = None


settings = FlakSettings()
