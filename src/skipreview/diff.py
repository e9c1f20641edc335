"""Diff summarizer: renders PR file changes into a size-capped document."""

from dataclasses import dataclass
from typing import Optional, Sequence

NO_PATCH_PLACEHOLDER = "(No patch available - likely binary or very large file)"
TRUNCATION_MARKER = "\n\n... (diff truncated due to size) ...\n"


@dataclass(frozen=True)
class FileChange:
    """One file touched by the pull request."""

    path: str
    status: str  # added | modified | removed | renamed | ...
    additions: int
    deletions: int
    patch: Optional[str] = None


@dataclass(frozen=True)
class DiffBundle:
    """Rendered diff plus aggregates over every changed file."""

    text: str
    file_count: int
    total_additions: int
    total_deletions: int
    truncated: bool = False


def render_files(files: Sequence[FileChange], pr_number: Optional[int] = None) -> str:
    """Render the full, uncapped document for a list of file changes."""
    title = "# Pull Request - File Changes"
    if pr_number is not None:
        title = f"# Pull Request #{pr_number} - File Changes"

    parts = [f"{title}\n\n", f"Total files changed: {len(files)}\n\n"]
    for file in files:
        parts.append(f"## File: {file.path}\n")
        parts.append(f"Status: {file.status}\n")
        parts.append(f"Additions: +{file.additions} | Deletions: -{file.deletions}\n\n")

        if file.patch:
            parts.append(f"```diff\n{file.patch}\n```\n\n")
        else:
            parts.append(f"{NO_PATCH_PLACEHOLDER}\n\n")

    return "".join(parts)


def summarize(
    files: Sequence[FileChange],
    max_diff_size: int,
    pr_number: Optional[int] = None,
) -> DiffBundle:
    """Build a DiffBundle capped at ``max_diff_size`` characters.

    The cut happens before the truncation marker is appended, so the text may
    exceed the cap by at most ``len(TRUNCATION_MARKER)``. Aggregates always
    cover the full file list.

    Args:
        files: Changed files in the order the hosting API returned them.
        max_diff_size: Character cap for the rendered text.
        pr_number: Optional PR number shown in the document title.

    Returns:
        DiffBundle with the rendered text and aggregate stats.
    """
    text = render_files(files, pr_number)
    truncated = len(text) > max_diff_size
    if truncated:
        text = text[:max_diff_size] + TRUNCATION_MARKER

    return DiffBundle(
        text=text,
        file_count=len(files),
        total_additions=sum(f.additions for f in files),
        total_deletions=sum(f.deletions for f in files),
        truncated=truncated,
    )
