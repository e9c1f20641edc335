"""LangGraph workflow definition."""

from langgraph.graph import END, StateGraph

from skipreview.graph.routing import route_after_classify, route_after_label
from skipreview.graph.state import PRState
from skipreview.nodes.actions import apply_label_node, post_comment_node
from skipreview.nodes.classify import classify_node
from skipreview.nodes.intake import intake_node
from skipreview.nodes.summarize import summarize_node


def _build_classify_graph() -> StateGraph:
    """Build classification-only graph: intake → summarize → classify."""
    workflow = StateGraph(PRState)

    workflow.add_node("intake", intake_node)
    workflow.add_node("summarize", summarize_node)
    workflow.add_node("classify", classify_node)

    workflow.set_entry_point("intake")
    workflow.add_edge("intake", "summarize")
    workflow.add_edge("summarize", "classify")
    workflow.add_edge("classify", END)

    return workflow


def _build_full_graph() -> StateGraph:
    """Build the full graph: classification, then label and comment."""
    workflow = StateGraph(PRState)

    workflow.add_node("intake", intake_node)
    workflow.add_node("summarize", summarize_node)
    workflow.add_node("classify", classify_node)
    workflow.add_node("apply_label", apply_label_node)
    workflow.add_node("post_comment", post_comment_node)

    workflow.set_entry_point("intake")
    workflow.add_edge("intake", "summarize")
    workflow.add_edge("summarize", "classify")

    # Label only when the verdict passed the threshold gate
    workflow.add_conditional_edges(
        "classify",
        route_after_classify,
        {
            "apply_label": "apply_label",
            "end": END,
        },
    )

    # Label first, so a failed comment never leaves the PR unlabeled
    workflow.add_conditional_edges(
        "apply_label",
        route_after_label,
        {
            "post_comment": "post_comment",
            "end": END,
        },
    )
    workflow.add_edge("post_comment", END)

    return workflow


def create_classify_workflow():
    """Create the dry-run workflow (no GitHub side effects)."""
    return _build_classify_graph().compile()


def create_full_workflow():
    """Create the full workflow."""
    return _build_full_graph().compile()


classify_graph = create_classify_workflow()
full_graph = create_full_workflow()
