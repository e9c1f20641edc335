"""Tests for configuration loading."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from skipreview.config import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_LABEL_NAME,
    DEFAULT_MAX_DIFF_SIZE,
    DEFAULT_MODEL,
    SkipReviewConfig,
    load_config,
    load_credentials,
    with_overrides,
)
from skipreview.errors import ConfigurationError


def _write_config(root: str, content: str) -> None:
    config_dir = Path(root) / ".github"
    config_dir.mkdir(parents=True)
    (config_dir / "skip-review.yml").write_text(content)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_when_no_config(self):
        """Should return defaults when no config file exists."""
        with TemporaryDirectory() as tmpdir:
            config = load_config(Path(tmpdir), env={})

            assert config.model == DEFAULT_MODEL
            assert config.confidence_threshold == DEFAULT_CONFIDENCE_THRESHOLD
            assert config.label_name == DEFAULT_LABEL_NAME
            assert config.max_diff_size == DEFAULT_MAX_DIFF_SIZE
            assert config.add_comment is True

    def test_load_from_file(self):
        """Should load config from file."""
        with TemporaryDirectory() as tmpdir:
            _write_config(
                tmpdir,
                """
model: gpt-4o-mini
confidence_threshold: 90
label_name: low-risk
add_comment: false
""",
            )

            config = load_config(Path(tmpdir), env={})

            assert config.model == "gpt-4o-mini"
            assert config.confidence_threshold == 90
            assert config.label_name == "low-risk"
            assert config.add_comment is False
            assert config.max_diff_size == DEFAULT_MAX_DIFF_SIZE  # Not set in file

    def test_env_override(self):
        """Environment variables should override config file."""
        with TemporaryDirectory() as tmpdir:
            _write_config(tmpdir, "confidence_threshold: 90\nlabel_name: low-risk\n")

            config = load_config(
                Path(tmpdir),
                env={"INPUT_CONFIDENCE_THRESHOLD": "75", "INPUT_MAX_DIFF_SIZE": "1000"},
            )

            assert config.confidence_threshold == 75
            assert config.max_diff_size == 1000
            assert config.label_name == "low-risk"

    @pytest.mark.parametrize(
        "value, expected",
        [("false", False), ("FALSE", False), ("true", True), ("no", True)],
    )
    def test_only_explicit_false_disables_comment(self, value, expected):
        with TemporaryDirectory() as tmpdir:
            config = load_config(Path(tmpdir), env={"INPUT_ADD_COMMENT": value})
            assert config.add_comment is expected

    @pytest.mark.parametrize("value", ["abc", "101", "-1"])
    def test_invalid_threshold(self, value):
        with TemporaryDirectory() as tmpdir:
            with pytest.raises(ConfigurationError):
                load_config(Path(tmpdir), env={"INPUT_CONFIDENCE_THRESHOLD": value})

    def test_invalid_yaml(self):
        with TemporaryDirectory() as tmpdir:
            _write_config(tmpdir, "confidence_threshold: [80\n")
            with pytest.raises(ConfigurationError):
                load_config(Path(tmpdir), env={})

    def test_non_mapping_file(self):
        with TemporaryDirectory() as tmpdir:
            _write_config(tmpdir, "- just\n- a list\n")
            with pytest.raises(ConfigurationError):
                load_config(Path(tmpdir), env={})

    def test_unknown_keys_ignored(self):
        with TemporaryDirectory() as tmpdir:
            _write_config(tmpdir, "reviewers: [alice]\nlabel_name: tiny\n")
            assert load_config(Path(tmpdir), env={}).label_name == "tiny"


class TestSkipReviewConfig:
    """Validation and CLI overrides."""

    def test_zero_max_diff_size_rejected(self):
        with pytest.raises(ConfigurationError):
            SkipReviewConfig(max_diff_size=0)

    def test_empty_label_rejected(self):
        with pytest.raises(ConfigurationError):
            SkipReviewConfig(label_name="")

    def test_with_overrides_ignores_none(self):
        config = with_overrides(SkipReviewConfig(), confidence_threshold=95, label_name=None)

        assert config.confidence_threshold == 95
        assert config.label_name == DEFAULT_LABEL_NAME

    def test_with_overrides_validates(self):
        with pytest.raises(ConfigurationError):
            with_overrides(SkipReviewConfig(), confidence_threshold=150)


class TestLoadCredentials:
    """Tests for load_credentials function."""

    def test_requires_github_token(self):
        with pytest.raises(ConfigurationError, match="GITHUB_TOKEN"):
            load_credentials(env={"OPENAI_API_KEY": "sk-test"})

    def test_requires_openai_key_for_llm(self):
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            load_credentials(env={"GITHUB_TOKEN": "ghp_test"})

    def test_openai_key_optional_for_rules(self):
        credentials = load_credentials(require_oracle=False, env={"GITHUB_TOKEN": "ghp_test"})

        assert credentials.github_token == "ghp_test"
        assert credentials.openai_api_key is None
