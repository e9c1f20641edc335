"""Conditional routing functions for LangGraph workflow."""

from langchain_core.runnables import RunnableConfig

from skipreview.graph.state import PRState
from skipreview.nodes.context import get_settings


def route_after_classify(state: PRState) -> str:
    """Only a verdict that passed the threshold gate gets a label."""
    if state.get("skip_review"):
        return "apply_label"
    return "end"


def route_after_label(state: PRState, config: RunnableConfig) -> str:
    """Comment after labeling when comments are enabled."""
    if get_settings(config).add_comment:
        return "post_comment"
    return "end"
