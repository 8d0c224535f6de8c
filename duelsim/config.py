"""
Configuration - Environment-driven settings for the simulator.

Variables:
- DUELSIM_ENV: "development" (default) enables strict invariant checks
- DUELSIM_STRICT_INVARIANTS: explicit override for strict checks
- DUELSIM_LOG_LEVEL: default log level used by the CLI
- DUELSIM_MAX_STEPS: safety cap on phase steps for a full game
- ALLOWED_ORIGINS: CORS origins for the HTTP API (comma separated)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import os


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str) -> bool | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


@dataclass
class Settings:
    """Snapshot of the environment at the time it was read."""
    env: str = "development"
    strict_invariants: bool = True
    log_level: str = "WARNING"
    max_steps: int = 1000
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def is_production(self) -> bool:
        return self.env == "production"


def get_settings() -> Settings:
    """Build Settings from the current environment."""
    env = os.getenv("DUELSIM_ENV", "development")
    strict = _env_flag("DUELSIM_STRICT_INVARIANTS")
    if strict is None:
        strict = env == "development"

    try:
        max_steps = int(os.getenv("DUELSIM_MAX_STEPS", "1000"))
    except ValueError:
        max_steps = 1000

    return Settings(
        env=env,
        strict_invariants=strict,
        log_level=os.getenv("DUELSIM_LOG_LEVEL", "WARNING").upper(),
        max_steps=max_steps,
        allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
    )


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """
    Install a single stream handler on the package logger.

    Library modules only ever call logging.getLogger(__name__); handlers
    are attached here by entry points (CLI, server).
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger("duelsim")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
