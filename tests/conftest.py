"""Pytest configuration and fixtures."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from skipreview.config import SkipReviewConfig
from skipreview.diff import FileChange


def typo_patch(word: str = "Calcualte", fixed: str = "Calculate") -> str:
    return (
        "@@ -1,4 +1,4 @@\n"
        " function total(items) {\n"
        f"-  // {word} the total price\n"
        f"+  // {fixed} the total price\n"
        "   return items.reduce((a, b) => a + b, 0);\n"
        " }"
    )


CSS_PADDING_PATCH = (
    "@@ -1,4 +1,4 @@\n"
    " .button {\n"
    "-  padding: 4px 8px;\n"
    "+  padding: 6px 12px;\n"
    "   color: #333;\n"
    " }"
)

VALIDATION_LOGIC_PATCH = (
    "@@ -1,3 +1,6 @@\n"
    " export function validateEmail(value) {\n"
    '-  return value.includes("@");\n'
    "+  if (value.length > 254) {\n"
    "+    return false;\n"
    "+  }\n"
    "+  return /^[^@\\s]+@[^@\\s]+$/.test(value);\n"
    " }"
)

FORMATTING_PATCH = (
    "@@ -1,2 +1,2 @@\n"
    "-import {sum} from './math'\n"
    '+import { sum } from "./math";\n'
    " export default sum;"
)

I18N_PATCH = (
    "@@ -1,4 +1,4 @@\n"
    " {\n"
    '-  "greeting": "Helo",\n'
    '+  "greeting": "Hello",\n'
    '   "farewell": "Bye"\n'
    " }"
)

PACKAGE_JSON_BUMP_PATCH = (
    "@@ -10,4 +10,4 @@\n"
    '   "dependencies": {\n'
    '-    "lodash": "^4.17.20",\n'
    '+    "lodash": "^4.17.21",\n'
    '     "react": "^18.2.0"'
)

PACKAGE_LOCK_BUMP_PATCH = (
    "@@ -120,9 +120,9 @@\n"
    '     "node_modules/lodash": {\n'
    '-      "version": "4.17.20",\n'
    '-      "resolved": "https://registry.npmjs.org/lodash/-/lodash-4.17.20.tgz",\n'
    '-      "integrity": "sha512-PlhdFcillOINfeV7Ni6oF1TAEayyZBoZ8bcshTHqOYJYlrqzRK5hagpagky5o4HfCzzd1TRkXPMFq6cKk9rGmA=="\n'
    '+      "version": "4.17.21",\n'
    '+      "resolved": "https://registry.npmjs.org/lodash/-/lodash-4.17.21.tgz",\n'
    '+      "integrity": "sha512-v2kDEe57lecTulaDIuNTPy3Ry4gLGJ6Z1O3vE1krgXZNrsQ+LFTGHVxVjcXPs17LhbZVGedAJv8XZ1tvj5FvSg=="\n'
    "     },"
)


def make_file(path: str, patch: str | None, status: str = "modified") -> FileChange:
    """Build a FileChange whose counts match its patch."""
    lines = (patch or "").split("\n")
    return FileChange(
        path=path,
        status=status,
        additions=sum(1 for line in lines if line.startswith("+")),
        deletions=sum(1 for line in lines if line.startswith("-")),
        patch=patch,
    )


class StubOracle:
    """Oracle that returns a fixed raw response and counts calls."""

    def __init__(self, response: dict):
        self.response = response
        self.calls = 0

    def evaluate(self, bundle) -> dict:
        self.calls += 1
        return self.response


def make_github(files: list[FileChange]) -> tuple[MagicMock, MagicMock]:
    """Fake PyGithub client serving ``files`` and recording issue calls."""
    gh = MagicMock()
    repo = gh.get_repo.return_value
    repo.get_pull.return_value.get_files.return_value = [
        SimpleNamespace(
            filename=f.path,
            status=f.status,
            additions=f.additions,
            deletions=f.deletions,
            patch=f.patch,
        )
        for f in files
    ]
    return gh, repo.get_issue.return_value


@pytest.fixture
def settings() -> SkipReviewConfig:
    return SkipReviewConfig()


@pytest.fixture
def typo_files() -> list[FileChange]:
    """Three files whose diffs only fix misspelled comments."""
    return [
        make_file("src/cart.js", typo_patch("Calcualte", "Calculate")),
        make_file("src/order.js", typo_patch("recieve", "receive")),
        make_file("src/invoice.js", typo_patch("seperate", "separate")),
    ]
