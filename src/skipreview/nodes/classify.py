"""Classify node - asks the oracle for a verdict and applies the gate."""

from langchain_core.runnables import RunnableConfig

from skipreview.graph.state import PRState
from skipreview.nodes.context import get_oracle, get_settings
from skipreview.observability import log_node_event, traced_node
from skipreview.policy import classify, should_apply_label


@traced_node("classify", run_type="llm", log_input=True)
def classify_node(state: PRState, config: RunnableConfig) -> dict:
    """Classify the diff bundle against the skip-review rubric."""
    settings = get_settings(config)
    verdict = classify(state["bundle"], get_oracle(config))

    log_node_event(
        "classify",
        "Verdict",
        eligible=verdict.eligible,
        category=verdict.category_label,
        confidence=verdict.confidence,
    )

    skip_review = should_apply_label(verdict, settings.confidence_threshold)
    if skip_review:
        log_node_event(
            "classify",
            f"PR qualifies for skip-review "
            f"(confidence: {verdict.confidence}% >= {settings.confidence_threshold}%)",
            "success",
        )
    elif verdict.eligible:
        log_node_event(
            "classify",
            f"PR is eligible but confidence too low "
            f"({verdict.confidence}% < {settings.confidence_threshold}%)",
            "warning",
        )
    else:
        log_node_event("classify", "PR does not qualify for skip-review")
        if verdict.flags:
            log_node_event("classify", f"Flags: {', '.join(verdict.flags)}")

    return {"verdict": verdict, "skip_review": skip_review}
