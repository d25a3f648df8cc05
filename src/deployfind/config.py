"""Settings: which class finder is active and how candidates are ordered.

Settings are process-wide. Call configure() once at startup, typically with
the result of load_settings():

    deployfind.configure(deployfind.load_settings(".deployfind/config.yaml"))

Example config:
    class_finder: DeployJarClassFileFinder
    sort_candidates: true
    output_base: /home/me/.cache/bazel/execroot/main
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from deployfind.errors import ConfigError
from deployfind.fallback import FALLBACK_FINDER_KEY

logger = logging.getLogger("deployfind.config")

CLASS_FINDER_KEY = "DeployJarClassFileFinder"
KNOWN_FINDERS = frozenset({CLASS_FINDER_KEY, FALLBACK_FINDER_KEY})


@dataclass(frozen=True)
class Settings:
    class_finder: str = CLASS_FINDER_KEY
    # Sort candidate binaries by label instead of index iteration order.
    sort_candidates: bool = False
    output_base: str | None = None

    def __post_init__(self) -> None:
        if self.class_finder not in KNOWN_FINDERS:
            raise ConfigError(
                f"Unknown class finder {self.class_finder!r}, expected one of {sorted(KNOWN_FINDERS)}"
            )


def load_settings(path: str | Path) -> Settings:
    """Read settings from a YAML file. A missing file yields defaults."""
    path = Path(path)
    if not path.exists():
        return Settings()

    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read settings from {path}: {e}") from e

    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    known = {f.name for f in fields(Settings)}
    settings = Settings(**{k: v for k, v in raw.items() if k in known})
    logger.info("Loaded settings from %s: finder=%s", path, settings.class_finder)
    return settings


_settings = Settings()


def configure(settings: Settings) -> None:
    """Install process-wide settings."""
    global _settings
    _settings = settings


def get_settings() -> Settings:
    return _settings


def is_enabled(settings: Settings | None = None) -> bool:
    """Is the deploy-archive class finder selected?"""
    return (settings or _settings).class_finder == CLASS_FINDER_KEY
