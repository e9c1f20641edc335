"""Configuration, credentials and LangSmith setup."""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from skipreview.errors import ConfigurationError

# Default values
DEFAULT_MODEL = "gpt-5-mini"
DEFAULT_CONFIDENCE_THRESHOLD = 80
DEFAULT_LABEL_NAME = "skip-review"
DEFAULT_MAX_DIFF_SIZE = 50000
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"

# Config file path
CONFIG_PATH = ".github/skip-review.yml"

# Environment variable -> config field (GitHub Actions passes inputs as INPUT_*)
ENV_OVERRIDES = {
    "INPUT_MODEL": "model",
    "INPUT_CONFIDENCE_THRESHOLD": "confidence_threshold",
    "INPUT_LABEL_NAME": "label_name",
    "INPUT_MAX_DIFF_SIZE": "max_diff_size",
    "INPUT_ADD_COMMENT": "add_comment",
    "OPENAI_BASE_URL": "openai_base_url",
}


@dataclass(frozen=True)
class SkipReviewConfig:
    """Per-run settings, built once at startup and never mutated."""

    model: str = DEFAULT_MODEL
    confidence_threshold: int = DEFAULT_CONFIDENCE_THRESHOLD
    label_name: str = DEFAULT_LABEL_NAME
    max_diff_size: int = DEFAULT_MAX_DIFF_SIZE
    add_comment: bool = True
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL

    def __post_init__(self) -> None:
        if not 0 <= self.confidence_threshold <= 100:
            raise ConfigurationError(
                f"confidence_threshold must be between 0 and 100, got {self.confidence_threshold}"
            )
        if self.max_diff_size <= 0:
            raise ConfigurationError(
                f"max_diff_size must be a positive integer, got {self.max_diff_size}"
            )
        if not self.label_name:
            raise ConfigurationError("label_name must not be empty")


@dataclass(frozen=True)
class Credentials:
    """Opaque tokens for GitHub and the inference endpoint."""

    github_token: str
    openai_api_key: Optional[str] = None


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _coerce(name: str, value: Any) -> Any:
    if name in ("confidence_threshold", "max_diff_size"):
        return _parse_int(name, value)
    if name == "add_comment":
        if isinstance(value, bool):
            return value
        # Only an explicit "false" disables the comment
        return str(value).strip().lower() != "false"
    return str(value)


def load_config(
    repo_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> SkipReviewConfig:
    """Load skip-review configuration.

    Priority (highest to lowest):
    1. Environment variables (INPUT_CONFIDENCE_THRESHOLD, etc.)
    2. Repo config file (.github/skip-review.yml)
    3. Package defaults

    Args:
        repo_path: Path to repository root. Defaults to current directory.
        env: Environment mapping. Defaults to os.environ.

    Returns:
        SkipReviewConfig instance

    Raises:
        ConfigurationError: If a value has the wrong type or is out of range.
    """
    if repo_path is None:
        repo_path = Path.cwd()
    if env is None:
        env = os.environ

    known = {f.name for f in fields(SkipReviewConfig)}
    values: dict[str, Any] = {}

    config_file = repo_path / CONFIG_PATH
    if config_file.exists():
        with open(config_file) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{config_file} must contain a mapping")
        for key, value in data.items():
            if key in known and value is not None:
                values[key] = _coerce(key, value)

    # Override with environment variables
    for env_name, key in ENV_OVERRIDES.items():
        if env_value := env.get(env_name):
            values[key] = _coerce(key, env_value)

    return SkipReviewConfig(**values)


def with_overrides(config: SkipReviewConfig, **overrides: Any) -> SkipReviewConfig:
    """Return a copy with the non-None overrides applied (CLI flags)."""
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def load_credentials(
    require_oracle: bool = True,
    env: Optional[Mapping[str, str]] = None,
) -> Credentials:
    """Read tokens from the environment before any network call is made.

    Raises:
        ConfigurationError: If a required token is missing.
    """
    if env is None:
        env = os.environ

    github_token = env.get("GITHUB_TOKEN")
    if not github_token:
        raise ConfigurationError("GITHUB_TOKEN is required")

    openai_api_key = env.get("OPENAI_API_KEY")
    if require_oracle and not openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY is required")

    return Credentials(github_token=github_token, openai_api_key=openai_api_key)


def setup_langsmith() -> bool:
    """Configure LangSmith tracing if API key is available.

    Returns:
        True if LangSmith is enabled, False otherwise.
    """
    if not os.environ.get("LANGCHAIN_API_KEY"):
        os.environ["LANGCHAIN_TRACING_V2"] = "false"
        return False

    os.environ.setdefault("LANGCHAIN_TRACING_V2", "true")
    os.environ.setdefault("LANGCHAIN_PROJECT", "skip-review")
    return True
