"""Observability utilities for workflow nodes.

Stderr logging and LangSmith tracing for LangGraph nodes, tagged with the
pull request being classified. Inside GitHub Actions, warnings and errors are
emitted as workflow commands so they show up as run annotations.
"""

import functools
import os
import sys
import time
from typing import Any, Callable, TypeVar

from langsmith import traceable

F = TypeVar("F", bound=Callable[..., Any])

_PREFIXES = {
    "info": "ℹ️",
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "start": "🚀",
}


def _in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def _log(message: str, level: str = "info", node: str = "node") -> None:
    """Log message to stderr for GitHub Actions visibility."""
    if level in ("warning", "error") and _in_actions():
        # Workflow command; newlines must be escaped
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        print(f"::{level} title=skip-review/{node}::{escaped}", file=sys.stderr, flush=True)
        return
    print(f"{_PREFIXES.get(level, '')} [{node}] {message}", file=sys.stderr, flush=True)


def _format_elapsed(elapsed: float) -> str:
    return f"{elapsed:.2f}s" if elapsed >= 1 else f"{elapsed * 1000:.0f}ms"


def _pr_metadata(state: dict) -> dict:
    """Trace metadata identifying the pull request under classification."""
    return {k: state[k] for k in ("repo", "pr_number") if state.get(k) is not None}


def describe_state(state: dict) -> list[str]:
    """Short summaries of the populated PR state channels."""
    parts = []
    if state.get("files") is not None:
        parts.append(f"files={len(state['files'])}")
    if bundle := state.get("bundle"):
        parts.append(f"bundle={len(bundle.text)} chars{' (truncated)' if bundle.truncated else ''}")
    if verdict := state.get("verdict"):
        parts.append(
            f"verdict={'eligible' if verdict.eligible else 'not eligible'}"
            f"@{verdict.confidence}%"
        )
    if state.get("labels_applied"):
        parts.append(f"labels={state['labels_applied']}")
    return parts


def traced_node(
    name: str,
    *,
    run_type: str = "chain",
    log_input: bool = False,
    log_output: bool = True,
) -> Callable[[F], F]:
    """Decorator to add tracing and logging to a LangGraph node.

    The LangSmith run carries the repository and PR number as metadata.

    Args:
        name: Name for the trace (e.g., "intake", "classify").
        run_type: LangSmith run type ("chain", "llm", "tool").
        log_input: Whether to summarize the incoming state.
        log_output: Whether to log output keys.

    Example:
        @traced_node("classify", run_type="llm", log_input=True)
        def classify_node(state: PRState, config: RunnableConfig) -> dict:
            ...
    """

    def decorator(func: F) -> F:
        traced_func = traceable(name=name, run_type=run_type)(func)

        @functools.wraps(func)
        def wrapper(state: dict, *args: Any, **kwargs: Any) -> dict:
            metadata = _pr_metadata(state)
            target = f" {metadata['repo']}#{metadata['pr_number']}" if len(metadata) == 2 else ""
            _log(f"Starting{target}...", "start", name)
            if log_input and (summary := describe_state(state)):
                _log(f"Input: {', '.join(summary)}", "info", name)

            start_time = time.perf_counter()
            try:
                result = traced_func(
                    state, *args, langsmith_extra={"metadata": metadata}, **kwargs
                )
            except Exception as e:
                elapsed = time.perf_counter() - start_time
                _log(f"Failed after {_format_elapsed(elapsed)}: {e}", "error", name)
                raise

            elapsed_str = _format_elapsed(time.perf_counter() - start_time)
            if log_output and isinstance(result, dict):
                _log(f"Completed in {elapsed_str}, output: {list(result.keys())}", "success", name)
            else:
                _log(f"Completed in {elapsed_str}", "success", name)
            return result

        return wrapper  # type: ignore

    return decorator


def log_node_event(node: str, event: str, level: str = "info", **data: Any) -> None:
    """Log a custom event from within a node.

    Example:
        log_node_event("intake", "fetched files", files=12)
    """
    if data:
        event = f"{event} ({', '.join(f'{k}={v}' for k, v in data.items())})"
    _log(event, level, node)
