"""CLI entry point using Typer."""

import shutil
import subprocess
import traceback
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import typer

from skipreview.config import (
    Credentials,
    SkipReviewConfig,
    load_config,
    load_credentials,
    setup_langsmith,
    with_overrides,
)
from skipreview.diff import summarize as summarize_files
from skipreview.graph.workflow import classify_graph, full_graph
from skipreview.integrations.actions import read_pr_context, write_verdict_outputs
from skipreview.integrations.github import get_github_client, get_pull_request_files
from skipreview.integrations.llm import OpenAIOracle
from skipreview.nodes.context import make_run_config
from skipreview.nodes.schemas import Verdict
from skipreview.policy import Oracle
from skipreview.rules import RuleBasedOracle

app = typer.Typer(
    name="skip-review",
    help="AI-powered skip-review labeling for low-risk pull requests",
)


class OracleKind(str, Enum):
    LLM = "llm"
    RULES = "rules"


def _build_oracle(kind: OracleKind, settings: SkipReviewConfig, credentials: Credentials) -> Oracle:
    if kind == OracleKind.RULES:
        return RuleBasedOracle()
    return OpenAIOracle.from_config(settings, credentials.openai_api_key)


def _run_or_exit(run: Callable[[], None]) -> None:
    """Run a command body; any fatal error becomes exit status 1."""
    try:
        run()
    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"\nError: {e}", err=True)
        typer.echo(traceback.format_exc(), err=True)
        raise typer.Exit(1)


def _print_verdict(result: dict, settings: SkipReviewConfig) -> None:
    verdict = result["verdict"]
    typer.echo("\n--- Verdict ---")
    typer.echo(f"Eligible: {verdict.eligible}")
    typer.echo(f"Category: {verdict.category_label}")
    typer.echo(f"Confidence: {verdict.confidence}%")
    typer.echo(f"Reasoning: {verdict.reasoning}")
    if verdict.flags:
        typer.echo(f"Flags: {', '.join(verdict.flags)}")

    if result.get("skip_review"):
        typer.echo(
            f"\nPR qualifies for skip-review "
            f"(confidence: {verdict.confidence}% >= {settings.confidence_threshold}%)"
        )
    elif verdict.eligible:
        typer.echo(
            f"\nPR is eligible but confidence too low "
            f"({verdict.confidence}% < {settings.confidence_threshold}%)"
        )
    else:
        typer.echo("\nPR does not qualify for skip-review")


def _classify_pr(
    repo: str,
    pr_number: int,
    settings: SkipReviewConfig,
    oracle_kind: OracleKind,
    *,
    dry_run: bool,
    on_verdict: Optional[Callable[[Verdict], None]] = None,
) -> dict:
    """Run the workflow; ``on_verdict`` fires once, before any GitHub side effect."""
    credentials = load_credentials(require_oracle=oracle_kind == OracleKind.LLM)
    run_config = make_run_config(
        settings,
        get_github_client(credentials.github_token),
        _build_oracle(oracle_kind, settings, credentials),
    )

    graph = classify_graph if dry_run else full_graph
    result: dict = {}
    for state in graph.stream(
        {"repo": repo, "pr_number": pr_number}, config=run_config, stream_mode="values"
    ):
        if on_verdict and "verdict" in state and "verdict" not in result:
            on_verdict(state["verdict"])
        result = state
    return result


@app.command()
def analyze(
    repo: str = typer.Argument(..., help="Repository in owner/repo format"),
    pr: int = typer.Option(..., "--pr", "-p", help="Pull request number to analyze"),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Don't apply labels or post comments"
    ),
    oracle: OracleKind = typer.Option(
        OracleKind.LLM, "--oracle", help="Classifier: language model or offline rules"
    ),
    threshold: Optional[int] = typer.Option(
        None, "--threshold", help="Minimum confidence (0-100) for labeling"
    ),
    label: Optional[str] = typer.Option(None, "--label", help="Label to apply"),
    no_comment: bool = typer.Option(
        False, "--no-comment", help="Label without posting an explanatory comment"
    ),
) -> None:
    """Classify a pull request and label it when it is safe to skip review."""

    def run() -> None:
        setup_langsmith()
        settings = with_overrides(
            load_config(),
            confidence_threshold=threshold,
            label_name=label,
            add_comment=False if no_comment else None,
        )

        typer.echo(f"Analyzing PR #{pr} in {repo}...")
        result = _classify_pr(repo, pr, settings, oracle, dry_run=dry_run)
        _print_verdict(result, settings)

        if dry_run:
            typer.echo("\n[DRY RUN] No actions taken on GitHub.")
        elif result.get("labels_applied"):
            typer.echo(f"\nLabels applied: {result['labels_applied']}")
            if result.get("comment_body"):
                typer.echo("Explanatory comment posted.")

    _run_or_exit(run)


@app.command()
def action(
    oracle: OracleKind = typer.Option(
        OracleKind.LLM, "--oracle", help="Classifier: language model or offline rules"
    ),
) -> None:
    """Run inside GitHub Actions: read the PR from context and write step outputs."""

    def run() -> None:
        setup_langsmith()
        settings = load_config()
        repo, pr_number = read_pr_context()

        typer.echo(f"Analyzing PR #{pr_number} in {repo}")
        result = _classify_pr(
            repo, pr_number, settings, oracle, dry_run=False, on_verdict=write_verdict_outputs
        )
        _print_verdict(result, settings)

    _run_or_exit(run)


@app.command()
def summarize(
    repo: str = typer.Argument(..., help="Repository in owner/repo format"),
    pr: int = typer.Option(..., "--pr", "-p", help="Pull request number"),
) -> None:
    """Print the size-capped diff summary the classifier would see."""

    def run() -> None:
        settings = load_config()
        credentials = load_credentials(require_oracle=False)
        gh = get_github_client(credentials.github_token)

        bundle = summarize_files(
            get_pull_request_files(gh, repo, pr), settings.max_diff_size, pr
        )
        typer.echo(bundle.text)
        typer.echo(
            f"\n{bundle.file_count} files, "
            f"+{bundle.total_additions}/-{bundle.total_deletions} lines"
            f"{' (truncated)' if bundle.truncated else ''}",
            err=True,
        )

    _run_or_exit(run)


WORKFLOW_TEMPLATE = """# skip-review - AI-powered skip-review labeling
# Generated by: skip-review init

name: skip-review

on:
  pull_request:
    types: [opened, synchronize, reopened]

permissions:
  contents: read
  pull-requests: write
  issues: write

jobs:
  classify:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/setup-python@v5
        with:
          python-version: "3.12"
      - run: pip install skip-review-labeler
      - id: skip-review
        run: skip-review action
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
          OPENAI_API_KEY: ${{{{ secrets.OPENAI_API_KEY }}}}
          GITHUB_CONTEXT: ${{{{ toJson(github) }}}}
          INPUT_LABEL_NAME: {label_name}
"""


@app.command()
def init(
    skip_label: bool = typer.Option(
        False, "--skip-label", help="Skip creating the GitHub label"
    ),
    skip_workflow: bool = typer.Option(
        False, "--skip-workflow", help="Skip creating workflow file"
    ),
) -> None:
    """Initialize skip-review in the current repository.

    Creates:
    - .github/workflows/skip-review.yml (GitHub Action workflow)
    - The skip-review GitHub label
    """
    if not Path(".git").exists():
        typer.echo("Error: Not a git repository. Run this command from the repo root.")
        raise typer.Exit(1)

    if not skip_label and not shutil.which("gh"):
        typer.echo("Warning: GitHub CLI (gh) not found. Label will not be created.")
        typer.echo("Install: https://cli.github.com/")
        skip_label = True

    settings = load_config()
    typer.echo("Initializing skip-review...\n")

    if not skip_workflow:
        workflow_file = Path(".github/workflows") / "skip-review.yml"
        workflow_file.parent.mkdir(parents=True, exist_ok=True)

        if workflow_file.exists() and not typer.confirm(
            f"{workflow_file} already exists. Overwrite?", default=False
        ):
            typer.echo("Skipping workflow file.")
        else:
            workflow_file.write_text(WORKFLOW_TEMPLATE.format(label_name=settings.label_name))
            typer.echo(f"Created: {workflow_file}")

    if not skip_label:
        result = subprocess.run(
            [
                "gh",
                "label",
                "create",
                settings.label_name,
                "--color",
                "0E8A16",
                "--description",
                "Low-risk change, safe to merge without review",
            ],
            capture_output=True,
            text=True,
        )
        if result.returncode == 0:
            typer.echo(f"  Created: {settings.label_name}")
        elif "already exists" in result.stderr:
            typer.echo(f"  Exists:  {settings.label_name}")
        else:
            typer.echo(f"  Failed:  {settings.label_name} - {result.stderr.strip()}")

    typer.echo("\nNext steps:")
    typer.echo("1. Add the OPENAI_API_KEY secret to your repository")
    typer.echo("2. Commit and push .github/workflows/skip-review.yml")
    typer.echo("3. Open a pull request to test!")


if __name__ == "__main__":
    app()
