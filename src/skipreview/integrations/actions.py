"""GitHub Actions runtime: PR context and step outputs."""

import json
import os
import uuid
from pathlib import Path
from typing import Mapping, Optional

from skipreview.errors import ConfigurationError
from skipreview.nodes.schemas import Verdict


def _pr_from_event(event: dict, repository: Optional[str]) -> tuple[str, int]:
    pr_number = (event.get("pull_request") or {}).get("number")
    if not pr_number or not repository or "/" not in repository:
        raise ConfigurationError("Unable to determine PR number or repository from context")
    return repository, int(pr_number)


def read_pr_context(env: Optional[Mapping[str, str]] = None) -> tuple[str, int]:
    """Resolve (owner/repo, PR number) for the running workflow.

    Reads the GITHUB_CONTEXT JSON passed by the action, falling back to the
    runner's GITHUB_EVENT_PATH and GITHUB_REPOSITORY.

    Raises:
        ConfigurationError: If the context is missing or unparsable.
    """
    if env is None:
        env = os.environ

    if raw_context := env.get("GITHUB_CONTEXT"):
        try:
            context = json.loads(raw_context)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"GITHUB_CONTEXT is not valid JSON: {e}") from e
        if not isinstance(context, dict):
            raise ConfigurationError("GITHUB_CONTEXT must be a JSON object")
        return _pr_from_event(context.get("event") or {}, context.get("repository"))

    if event_path := env.get("GITHUB_EVENT_PATH"):
        try:
            event = json.loads(Path(event_path).read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read event payload {event_path}: {e}") from e
        return _pr_from_event(event, env.get("GITHUB_REPOSITORY"))

    raise ConfigurationError("Unable to determine PR number or repository from context")


def set_output(name: str, value: str, env: Optional[Mapping[str, str]] = None) -> None:
    """Append a step output to $GITHUB_OUTPUT (no-op outside Actions)."""
    if env is None:
        env = os.environ

    output_file = env.get("GITHUB_OUTPUT")
    if not output_file:
        return

    with open(output_file, "a", encoding="utf-8") as f:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            f.write(f"{name}={value}\n")


def write_verdict_outputs(verdict: Verdict, env: Optional[Mapping[str, str]] = None) -> None:
    """Expose the verdict to downstream workflow steps."""
    set_output("eligible", str(verdict.eligible).lower(), env)
    set_output("confidence", str(verdict.confidence), env)
    set_output("category", verdict.category_label, env)
    set_output("reasoning", verdict.reasoning, env)
