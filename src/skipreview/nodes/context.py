"""Accessors for per-run collaborators injected via RunnableConfig.

The CLI builds settings, the GitHub client and the oracle once and passes
them under ``config["configurable"]``; nodes never read the environment.
"""

from typing import Any

from github import Github
from langchain_core.runnables import RunnableConfig

from skipreview.config import SkipReviewConfig
from skipreview.errors import ConfigurationError
from skipreview.policy import Oracle


def _configurable(config: RunnableConfig, key: str) -> Any:
    value = (config or {}).get("configurable", {}).get(key)
    if value is None:
        raise ConfigurationError(f"Missing '{key}' in run configuration")
    return value


def get_settings(config: RunnableConfig) -> SkipReviewConfig:
    return _configurable(config, "settings")


def get_github(config: RunnableConfig) -> Github:
    return _configurable(config, "github")


def get_oracle(config: RunnableConfig) -> Oracle:
    return _configurable(config, "oracle")


def make_run_config(settings: SkipReviewConfig, github: Github, oracle: Oracle) -> RunnableConfig:
    """Bundle collaborators for ``graph.invoke(..., config=...)``."""
    return {"configurable": {"settings": settings, "github": github, "oracle": oracle}}
