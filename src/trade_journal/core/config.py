"""Settings for the journal core.

A TOML file supplies the base values, `JOURNAL_*` environment variables
override them (nested keys use `__`, e.g. `JOURNAL_COUPLING__MAX_DEVIATION`).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class FilterSyncConfig(BaseModel):
    debounce_ms: int = 500  # Quiet period before the URL is rewritten


class LeaningConfig(BaseModel):
    threshold: float = 15.0  # |leaning| above this is directional


class CouplingConfig(BaseModel):
    max_deviation: float = 30.0  # Max |discipline - tilt|
    upper_extreme: float = 90.0
    lower_extreme: float = 10.0
    min_stability_index: float = 20.0  # Advisory floor for (d + t) / 2
    # Raw scorer fallbacks when the tag never occurs
    default_discipline: float = 85.0
    default_tilt: float = 72.0


class ApiConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    user_header: str = "X-User-Id"


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Root settings object; see :func:`load_settings`."""

    trades_file: str = ""  # JSON trade export used by the CLI / server

    filter_sync: FilterSyncConfig = Field(default_factory=FilterSyncConfig)
    leaning: LeaningConfig = Field(default_factory=LeaningConfig)
    coupling: CouplingConfig = Field(default_factory=CouplingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "JOURNAL_", "env_nested_delimiter": "__"}

    def validate_thresholds(self) -> None:
        """Reject coupling bounds that cannot all hold at once."""
        c = self.coupling
        if not 0 < c.max_deviation <= 100:
            raise ConfigError(
                f"coupling.max_deviation must be in (0, 100], got {c.max_deviation}"
            )
        if not 0 <= c.lower_extreme < c.upper_extreme <= 100:
            raise ConfigError(
                "coupling extremes must satisfy 0 <= lower_extreme < "
                f"upper_extreme <= 100, got {c.lower_extreme}/{c.upper_extreme}"
            )
        if not 0 <= c.min_stability_index <= 100:
            raise ConfigError(
                "coupling.min_stability_index must be in [0, 100], "
                f"got {c.min_stability_index}"
            )
        if self.leaning.threshold < 0:
            raise ConfigError(
                f"leaning.threshold must be >= 0, got {self.leaning.threshold}"
            )
        if self.filter_sync.debounce_ms < 0:
            raise ConfigError(
                f"filter_sync.debounce_ms must be >= 0, got {self.filter_sync.debounce_ms}"
            )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Build validated settings.

    Args:
        config_path: TOML file; a path that does not exist is skipped.
        overrides: Top-level keys replacing those read from the file.

    Raises:
        ConfigError: The file is not valid TOML, or the coupling and
            leaning bounds are incoherent.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid config file {path}: {exc}") from exc

    if overrides:
        data.update(overrides)

    settings = Settings(**data)
    settings.validate_thresholds()
    return settings
