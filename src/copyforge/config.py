"""Unified configuration loaded from .copyforge.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from copyforge.llm import DEFAULT_MODEL

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".copyforge.toml"
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "copyforge" / "config.toml"


class GeminiSectionConfig(BaseModel):
    """[gemini] section."""

    model: str = DEFAULT_MODEL
    api_key: str = ""
    timeout: int = 120


class OutputConfig(BaseModel):
    """[output] section."""

    directory: str = "./copy"


class StorageConfig(BaseModel):
    """[storage] section."""

    directory: str = "./.copyforge"


class HistorySectionConfig(BaseModel):
    """[history] section.

    ``collapse_window_seconds`` > 0 merges a new record into the previous
    one when parameters match and it arrives within the window.
    """

    collapse_window_seconds: float = 0


class EditorSectionConfig(BaseModel):
    """[editor] section."""

    autosave_delay: float = 0.5


class CopyforgeConfig(BaseModel):
    """Top-level configuration."""

    gemini: GeminiSectionConfig = Field(default_factory=GeminiSectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    history: HistorySectionConfig = Field(default_factory=HistorySectionConfig)
    editor: EditorSectionConfig = Field(default_factory=EditorSectionConfig)

    @property
    def output_dir(self) -> Path:
        return Path(self.output.directory).expanduser()

    @property
    def storage_dir(self) -> Path:
        return Path(self.storage.directory).expanduser()


def load_config(path: Path | str | None = None) -> CopyforgeConfig:
    """Load config from TOML, then overlay environment variables.

    Search order:
    1. Explicit path (if provided)
    2. .copyforge.toml in CWD
    3. ~/.config/copyforge/config.toml

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged CopyforgeConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for candidate in (Path(".") / CONFIG_FILENAME, GLOBAL_CONFIG_PATH):
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break

    config = CopyforgeConfig.model_validate(data) if data else CopyforgeConfig()
    return _apply_env_vars(config)


def merge_cli_overrides(config: CopyforgeConfig, **cli_kwargs: object) -> CopyforgeConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "model": ("gemini", "model"),
        "api_key": ("gemini", "api_key"),
        "output_directory": ("output", "directory"),
        "storage_directory": ("storage", "directory"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = value

    return CopyforgeConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: CopyforgeConfig) -> CopyforgeConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "GOOGLE_AI_API_KEY": ("gemini", "api_key"),
        "GEMINI_API_KEY": ("gemini", "api_key"),
        "COPYFORGE_MODEL": ("gemini", "model"),
        "COPYFORGE_OUTPUT_DIR": ("output", "directory"),
        "COPYFORGE_STORAGE_DIR": ("storage", "directory"),
        "COPYFORGE_AUTOSAVE_DELAY": ("editor", "autosave_delay"),
        "COPYFORGE_HISTORY_COLLAPSE_SECONDS": ("history", "collapse_window_seconds"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    return CopyforgeConfig.model_validate(data)
