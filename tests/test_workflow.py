"""End-to-end tests for the LangGraph workflows with fake collaborators."""

import pytest
from github import GithubException

from skipreview.config import SkipReviewConfig
from skipreview.errors import CollaboratorIOError, OracleSchemaError
from skipreview.graph.workflow import classify_graph, full_graph
from skipreview.nodes.context import make_run_config
from skipreview.nodes.schemas import Category
from skipreview.rules import RuleBasedOracle

from .conftest import (
    CSS_PADDING_PATCH,
    VALIDATION_LOGIC_PATCH,
    StubOracle,
    make_file,
    make_github,
)

PR = {"repo": "acme/shop", "pr_number": 12}


def _eligible(confidence: int) -> dict:
    return {
        "eligible": True,
        "category": "FixTypos",
        "confidence": confidence,
        "reasoning": "Comment typo fixed",
        "flags": [],
    }


class TestFullWorkflow:
    """Classification followed by label and comment."""

    def test_labels_then_comments(self, settings, typo_files):
        gh, issue = make_github(typo_files)

        result = full_graph.invoke(PR, config=make_run_config(settings, gh, RuleBasedOracle()))

        assert result["skip_review"] is True
        assert result["verdict"].categories == [Category.FIX_TYPOS]
        assert result["labels_applied"] == ["skip-review"]
        issue.add_to_labels.assert_called_once_with("skip-review")
        issue.create_comment.assert_called_once_with(result["comment_body"])
        assert [call[0] for call in issue.method_calls] == ["add_to_labels", "create_comment"]

    def test_not_eligible_has_no_side_effects(self, settings):
        files = [
            make_file("src/styles/button.css", CSS_PADDING_PATCH),
            make_file("src/validators/email.js", VALIDATION_LOGIC_PATCH),
        ]
        gh, issue = make_github(files)

        result = full_graph.invoke(PR, config=make_run_config(settings, gh, RuleBasedOracle()))

        assert result["verdict"].eligible is False
        assert "labels_applied" not in result
        assert issue.method_calls == []

    @pytest.mark.parametrize("confidence, labeled", [(79, False), (80, True)])
    def test_threshold_gate(self, settings, typo_files, confidence, labeled):
        gh, issue = make_github(typo_files)
        oracle = StubOracle(_eligible(confidence))

        full_graph.invoke(PR, config=make_run_config(settings, gh, oracle))

        assert oracle.calls == 1
        assert issue.add_to_labels.called is labeled

    def test_custom_label_without_comment(self, typo_files):
        settings = SkipReviewConfig(label_name="low-risk", add_comment=False)
        gh, issue = make_github(typo_files)

        result = full_graph.invoke(PR, config=make_run_config(settings, gh, RuleBasedOracle()))

        issue.add_to_labels.assert_called_once_with("low-risk")
        issue.create_comment.assert_not_called()
        assert "comment_body" not in result

    def test_schema_error_aborts_without_label(self, settings, typo_files):
        gh, issue = make_github(typo_files)
        oracle = StubOracle({"eligible": "yes", "confidence": 95})

        with pytest.raises(OracleSchemaError):
            full_graph.invoke(PR, config=make_run_config(settings, gh, oracle))

        issue.add_to_labels.assert_not_called()

    def test_comment_failure_keeps_label(self, settings, typo_files):
        gh, issue = make_github(typo_files)
        issue.create_comment.side_effect = GithubException(403, {"message": "Forbidden"}, None)

        with pytest.raises(CollaboratorIOError):
            full_graph.invoke(PR, config=make_run_config(settings, gh, RuleBasedOracle()))

        issue.add_to_labels.assert_called_once_with("skip-review")

    def test_truncated_bundle(self, typo_files):
        settings = SkipReviewConfig(max_diff_size=200)
        gh, issue = make_github(typo_files)

        result = full_graph.invoke(PR, config=make_run_config(settings, gh, RuleBasedOracle()))

        assert result["bundle"].truncated is True
        assert result["bundle"].file_count == 3
        assert result["verdict"].eligible is False
        issue.add_to_labels.assert_not_called()


class TestClassifyWorkflow:
    """Dry-run graph never touches the pull request."""

    def test_dry_run(self, settings, typo_files):
        gh, issue = make_github(typo_files)

        result = classify_graph.invoke(
            PR, config=make_run_config(settings, gh, RuleBasedOracle())
        )

        assert result["skip_review"] is True
        assert issue.method_calls == []
