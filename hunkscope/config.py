"""Configuration management for hunkscope.

Handles the analysis limits and data tables used by the context builder and
commit splitter. Values are resolved with the following precedence:

    defaults < .hunkscope/config.yaml ("analysis" section) < environment

CLI options are applied on top by the caller via AnalysisConfig.model_copy().
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration cannot be read or is invalid."""

    pass


CONFIG_DIR_NAME = ".hunkscope"
CONFIG_FILE_NAME = "config.yaml"

# Lock-file style artifacts whose diff content is never shown
DEFAULT_SKIP_CONTENT_FILES = [
    "Cargo.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
    "go.sum",
    "Gemfile.lock",
    "poetry.lock",
    "composer.lock",
    "uv.lock",
]

# Parent directories too broad to name a module
DEFAULT_GENERIC_MODULE_DIRS = ["src", "lib", "services", ""]

# Environment variable -> config field
ENV_OVERRIDES = {
    "HUNKSCOPE_MAX_DIFF_LINES": "max_diff_lines",
    "HUNKSCOPE_MAX_FILE_LINES": "max_file_lines",
    "HUNKSCOPE_MAX_CONTEXT_CHARS": "max_context_chars",
}


class AnalysisConfig(BaseModel):
    """Limits and data tables for the analysis pipeline."""

    max_diff_lines: int = Field(500, gt=0)
    max_file_lines: int = Field(100, gt=0)
    # ~4 chars per token; 24000 is safe for 8K context models
    max_context_chars: int = Field(24_000, gt=0)
    chars_per_token: int = Field(4, gt=0)
    scaffold_reserve: int = Field(2_000, ge=0)
    min_diff_budget: int = Field(4_000, ge=0)
    generic_module_dirs: list[str] = Field(
        default_factory=lambda: DEFAULT_GENERIC_MODULE_DIRS.copy()
    )
    skip_content_files: list[str] = Field(
        default_factory=lambda: DEFAULT_SKIP_CONTENT_FILES.copy()
    )

    @field_validator("generic_module_dirs", "skip_content_files", mode="before")
    @classmethod
    def ensure_list(cls, v):
        """Treat a null table as empty."""
        if v is None:
            return []
        return v

    @property
    def approx_token_budget(self) -> int:
        """Approximate model token budget implied by max_context_chars."""
        return self.max_context_chars // self.chars_per_token


def get_config_file(repo_root: Path) -> Path:
    """Return path to the repository config file.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .hunkscope/config.yaml.
    """
    return repo_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _read_yaml_section(config_file: Path) -> dict[str, Any]:
    """Read the "analysis" section of a config file."""
    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")

    section = data.get("analysis", {}) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'analysis' section in {config_file} must be a mapping")
    return section


def _env_overrides(environ: Optional[dict[str, str]] = None) -> dict[str, Any]:
    """Collect overrides from HUNKSCOPE_* environment variables."""
    if environ is None:
        environ = dict(os.environ)

    overrides: dict[str, Any] = {}
    for var, key in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value is None or value == "":
            continue
        try:
            overrides[key] = int(value)
        except ValueError:
            raise ConfigError(f"{var} must be an integer, got {value!r}")
    return overrides


def load_config(
    repo_root: Optional[Path] = None,
    environ: Optional[dict[str, str]] = None,
) -> AnalysisConfig:
    """Load the analysis configuration.

    Args:
        repo_root: Repository root to look for .hunkscope/config.yaml in.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Validated AnalysisConfig.

    Raises:
        ConfigError: If the file or any value is invalid.
    """
    values: dict[str, Any] = {}

    if repo_root is not None:
        config_file = get_config_file(repo_root)
        if config_file.exists():
            values.update(_read_yaml_section(config_file))
            logger.debug("Loaded analysis config from %s", config_file)

    values.update(_env_overrides(environ))

    try:
        return AnalysisConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid analysis configuration: {e}")


def save_config(repo_root: Path, config: AnalysisConfig) -> Path:
    """Save the configuration to .hunkscope/config.yaml.

    Other top-level sections already present in the file are preserved.

    Args:
        repo_root: The root directory of the git repository.
        config: Configuration to save.

    Returns:
        Path to the written file.
    """
    config_file = get_config_file(repo_root)
    config_file.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {}
    if config_file.exists():
        try:
            with open(config_file, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError:
            data = {}
    if not isinstance(data, dict):
        data = {}

    data["analysis"] = config.model_dump()

    try:
        with open(config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"Failed to save config to {config_file}: {e}")

    return config_file
