"""Tests for node logging and tracing helpers."""

import pytest

from skipreview.diff import summarize
from skipreview.nodes.schemas import Verdict
from skipreview.observability import describe_state, log_node_event, traced_node

from .conftest import make_file, typo_patch


@pytest.fixture(autouse=True)
def no_tracing(monkeypatch):
    monkeypatch.setenv("LANGCHAIN_TRACING_V2", "false")
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)


class TestDescribeState:
    """Tests for describe_state function."""

    def test_empty(self):
        assert describe_state({"repo": "acme/shop"}) == []

    def test_populated_channels(self):
        files = [make_file("src/cart.js", typo_patch())]
        bundle = summarize(files, 100)
        verdict = Verdict(
            eligible=True, categories=["FixTypos"], confidence=95, reasoning="Typo fix"
        )

        summary = describe_state({"files": files, "bundle": bundle, "verdict": verdict})

        assert summary[0] == "files=1"
        assert summary[1].endswith("(truncated)")
        assert summary[2] == "verdict=eligible@95%"


class TestTracedNode:
    """Tests for the traced_node decorator."""

    def test_logs_pull_request_and_output(self, capsys):
        @traced_node("demo", log_input=True)
        def demo_node(state):
            return {"labels_applied": ["skip-review"]}

        result = demo_node({"repo": "acme/shop", "pr_number": 7, "files": []})

        err = capsys.readouterr().err
        assert result == {"labels_applied": ["skip-review"]}
        assert "[demo] Starting acme/shop#7..." in err
        assert "Input: files=0" in err
        assert "output: ['labels_applied']" in err

    def test_failure_is_logged_and_raised(self, capsys):
        @traced_node("demo")
        def failing_node(state):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            failing_node({})

        assert "Failed after" in capsys.readouterr().err


class TestLogNodeEvent:
    """Tests for log_node_event function."""

    def test_data_appended(self, capsys):
        log_node_event("intake", "Fetched changed files", files=3)
        assert "[intake] Fetched changed files (files=3)" in capsys.readouterr().err

    def test_actions_annotation(self, capsys, monkeypatch):
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        log_node_event("summarize", "Diff truncated\nat 50000", "warning")

        assert capsys.readouterr().err.strip() == (
            "::warning title=skip-review/summarize::Diff truncated%0Aat 50000"
        )
