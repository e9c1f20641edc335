"""PRState schema for LangGraph workflow."""

from typing import Optional, TypedDict

from skipreview.diff import DiffBundle, FileChange
from skipreview.nodes.schemas import Verdict


class PRState(TypedDict, total=False):
    """State schema for the pull request classification workflow."""

    # === Input ===
    repo: str  # owner/repo
    pr_number: int

    # === Intake ===
    files: list[FileChange]

    # === Summarize ===
    bundle: DiffBundle

    # === Classify ===
    verdict: Verdict
    skip_review: bool  # eligible and confidence >= threshold

    # === Actions ===
    labels_applied: list[str]
    comment_body: Optional[str]
