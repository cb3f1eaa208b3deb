"""Process-wide settings, read once at start and passed down explicitly."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .constants import EMBED_TAG_NAME
from .errors import ConfigError

OUTPUT_DIR_ENV_KEY = "FFUU_OUTPUT_DIR"
LOG_LEVEL_ENV_KEY = "FFUU_LOG_LEVEL"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class Settings:
    output_dir: Path | None = None
    embed_tag: str = EMBED_TAG_NAME
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.output_dir is not None and not isinstance(self.output_dir, Path):
            object.__setattr__(self, "output_dir", Path(self.output_dir))
        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level!r}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        environ = os.environ if environ is None else environ
        output_dir = environ.get(OUTPUT_DIR_ENV_KEY) or None
        return cls(
            output_dir=Path(output_dir) if output_dir else None,
            log_level=environ.get(LOG_LEVEL_ENV_KEY, "WARNING"),
        )

    def with_overrides(self, **changes: object) -> Settings:
        """Return a copy with every non-None value in `changes` applied."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})

    def require_output_dir(self) -> Path:
        if self.output_dir is None:
            raise ConfigError(f"No output directory given; set {OUTPUT_DIR_ENV_KEY}")
        return self.output_dir
