"""Intake node - fetches changed files from GitHub."""

from langchain_core.runnables import RunnableConfig

from skipreview.graph.state import PRState
from skipreview.integrations.github import get_pull_request_files
from skipreview.nodes.context import get_github
from skipreview.observability import log_node_event, traced_node


@traced_node("intake")
def intake_node(state: PRState, config: RunnableConfig) -> dict:
    """Fetch the PR's changed files (with patches) from the GitHub API."""
    files = get_pull_request_files(get_github(config), state["repo"], state["pr_number"])

    log_node_event(
        "intake",
        "Fetched changed files",
        files=len(files),
        without_patch=sum(1 for f in files if f.patch is None),
    )
    return {"files": files}
