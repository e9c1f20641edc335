"""Action nodes for GitHub operations."""

from langchain_core.runnables import RunnableConfig

from skipreview.graph.state import PRState
from skipreview.integrations.github import add_labels, post_comment
from skipreview.nodes.context import get_github, get_settings
from skipreview.nodes.schemas import Verdict
from skipreview.observability import log_node_event, traced_node


def build_comment_body(verdict: Verdict, label_name: str) -> str:
    """Render the explanatory comment for a labeled pull request."""
    parts = [
        "**AI Skip-Review Analysis**",
        "",
        f"**Category**: {verdict.category_label}",
        f"**Confidence**: {verdict.confidence}%",
        "",
        f"**Reasoning**: {verdict.reasoning}",
        "",
        f"This PR has been automatically labeled as `{label_name}` based on AI analysis. "
        "The changes appear to be low-risk and do not require human code review.",
    ]

    if verdict.flags:
        parts.append("")
        parts.append(f"**Notes**: {', '.join(verdict.flags)}")

    parts.append("")
    parts.append("---")
    parts.append(
        "*If you believe this categorization is incorrect, "
        "please remove the label and request review.*"
    )
    return "\n".join(parts)


@traced_node("apply_label", run_type="tool", log_input=True)
def apply_label_node(state: PRState, config: RunnableConfig) -> dict:
    """Apply the skip-review label. Runs before the comment."""
    settings = get_settings(config)
    add_labels(get_github(config), state["repo"], state["pr_number"], [settings.label_name])

    log_node_event(
        "apply_label",
        f"Applied '{settings.label_name}' label to PR #{state['pr_number']}",
        "success",
    )
    return {"labels_applied": [settings.label_name]}


@traced_node("post_comment", run_type="tool")
def post_comment_node(state: PRState, config: RunnableConfig) -> dict:
    """Post a comment explaining why the PR skips review."""
    settings = get_settings(config)
    body = build_comment_body(state["verdict"], settings.label_name)
    post_comment(get_github(config), state["repo"], state["pr_number"], body)

    log_node_event("post_comment", "Added explanatory comment to PR", "success")
    return {"comment_body": body}
