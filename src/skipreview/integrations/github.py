"""GitHub API integration."""

from github import Github, GithubException

from skipreview.diff import FileChange
from skipreview.errors import CollaboratorIOError


def get_github_client(token: str) -> Github:
    """Get authenticated GitHub client."""
    return Github(token)


def get_pull_request_files(gh: Github, repo: str, pr_number: int) -> list[FileChange]:
    """Fetch every changed file of a pull request, in API order.

    Args:
        gh: Authenticated GitHub client
        repo: Repository in owner/repo format
        pr_number: Pull request number

    Returns:
        List of FileChange records (patch is None for binary or huge files)
    """
    try:
        pull = gh.get_repo(repo).get_pull(pr_number)
        return [
            FileChange(
                path=f.filename,
                status=f.status,
                additions=f.additions,
                deletions=f.deletions,
                patch=f.patch,
            )
            for f in pull.get_files()
        ]
    except GithubException as e:
        raise CollaboratorIOError(
            f"Failed to list files for {repo}#{pr_number}: {e.status} {e.data}"
        ) from e


def add_labels(gh: Github, repo: str, pr_number: int, labels: list[str]) -> None:
    """Add labels to a pull request."""
    if not labels:
        return

    try:
        issue = gh.get_repo(repo).get_issue(pr_number)
        issue.add_to_labels(*labels)
    except GithubException as e:
        raise CollaboratorIOError(
            f"Failed to add labels {labels} to {repo}#{pr_number}: {e.status} {e.data}"
        ) from e


def post_comment(gh: Github, repo: str, pr_number: int, body: str) -> None:
    """Post a comment on a pull request."""
    try:
        issue = gh.get_repo(repo).get_issue(pr_number)
        issue.create_comment(body)
    except GithubException as e:
        raise CollaboratorIOError(
            f"Failed to comment on {repo}#{pr_number}: {e.status} {e.data}"
        ) from e
