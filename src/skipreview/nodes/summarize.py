"""Summarize node - renders the size-capped diff bundle."""

from langchain_core.runnables import RunnableConfig

from skipreview.diff import summarize
from skipreview.graph.state import PRState
from skipreview.nodes.context import get_settings
from skipreview.observability import log_node_event, traced_node


@traced_node("summarize")
def summarize_node(state: PRState, config: RunnableConfig) -> dict:
    settings = get_settings(config)
    bundle = summarize(state["files"], settings.max_diff_size, state.get("pr_number"))

    log_node_event(
        "summarize",
        f"PR stats: {bundle.file_count} files, "
        f"+{bundle.total_additions}/-{bundle.total_deletions} lines",
    )
    if bundle.truncated:
        log_node_event(
            "summarize",
            "Diff truncated",
            "warning",
            max_diff_size=settings.max_diff_size,
        )
    return {"bundle": bundle}
