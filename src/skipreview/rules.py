"""Deterministic rule-engine oracle.

Applies the skip-review rubric textually to a rendered DiffBundle. It only
sees what an LLM oracle would see (the bundle text), so a truncated bundle is
never eligible. Anything the rules cannot place in a low-risk category is a
disqualifying contribution, and one disqualifying file vetoes the whole PR.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Optional

from skipreview.diff import NO_PATCH_PLACEHOLDER, TRUNCATION_MARKER, DiffBundle
from skipreview.nodes.schemas import MAX_CATEGORIES, Category

# Fit score for a clean contribution of each category
CATEGORY_SCORES = {
    Category.FIX_TYPOS: 95,
    Category.UPDATE_I18N_KEY: 93,
    Category.UPDATE_UI_STYLE: 92,
    Category.CODE_FORMATTING: 97,
    Category.REMOVE_UNUSED_CODE: 85,
    Category.SAFE_DEPENDENCY_BUMP: 94,
}
BORDERLINE_SCORE = 80
EXTRA_CATEGORY_PENALTY = 5

DISQUALIFIED_CONFIDENCE = 20
UNVERIFIABLE_CONFIDENCE = 40

_FILE_HEADER_RE = re.compile(
    r"^## File: (?P<path>.+)\n"
    r"Status: (?P<status>.*)\n"
    r"Additions: \+(?P<additions>\d+) \| Deletions: -(?P<deletions>\d+)\n\n",
    re.MULTILINE,
)
_TOTAL_RE = re.compile(r"^Total files changed: (\d+)$", re.MULTILINE)

_TEST_PATH_RE = re.compile(
    r"(^|/)(tests?|__tests__|specs?|testing)/"
    r"|(^|/)test_[^/]+$|_test\.[^/]+$|\.(test|spec)\.[^/]+$|Tests?\.[^/.]+$|(^|/)conftest\.py$"
)
_MANIFEST_NAMES = {
    "package.json",
    "package-lock.json",
    "npm-shrinkwrap.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "pipfile",
    "pipfile.lock",
    "poetry.lock",
    "pyproject.toml",
    "cargo.toml",
    "cargo.lock",
    "go.mod",
    "go.sum",
    "gemfile",
    "gemfile.lock",
    "composer.json",
    "composer.lock",
}
_REQUIREMENTS_RE = re.compile(r"(^|/)requirements([-_.][^/]*)?\.txt$|(^|/)requirements/[^/]+\.txt$")
_I18N_DIRS = {"locales", "locale", "i18n", "l10n", "lang", "langs", "translations"}
_I18N_SUFFIXES = {".po", ".pot", ".xliff", ".xlf", ".arb", ".strings"}
_STYLE_SUFFIXES = {".css", ".scss", ".sass", ".less", ".styl"}
_CONFIG_SUFFIXES = {".yml", ".yaml", ".ini", ".cfg", ".conf", ".toml", ".env", ".properties"}
_CONFIG_NAMES = {"dockerfile", "makefile", "procfile"}
_DOC_SUFFIXES = {".md", ".rst", ".txt", ".adoc"}
_INDENT_SENSITIVE_SUFFIXES = {".py", ".yml", ".yaml", ".coffee", ".pug", ".haml"}

_IMPORT_RE = re.compile(r"^\s*(import\s|from\s+\S+\s+import\s|#include\s|using\s|require\()")
_COMMENT_RE = re.compile(r"^\s*(#|//|/\*|\*|--|;|<!--)")
_WORD_SPLIT_RE = re.compile(r"([A-Za-z]+)")

_I18N_CALL_RE = re.compile(
    r"(\b(t|i18n\.t|translate|gettext|ngettext|formatMessage)\s*\(|\$t\s*\(|\bi18nKey\s*=)"
)
_STRING_RE = re.compile(r"([\"'])(.*?)\1")
_LITERAL_RE = re.compile(r"([\"'`])(.*?)\1")
_KEY_USE_BEFORE_RE = re.compile(r"(\[|\b(get|pop|getattr|setattr|hasattr|getenv)\((\w+,\s*)?)\s*$")
_KEY_USE_AFTER_RE = re.compile(r"^\s*(\]|:(?!:)|=(?!=))")
_I18N_KEY_RE = re.compile(r"^[\w.\-:]+$")
_RESOURCE_KEY_RE = re.compile(r"^\s*(?:msgid\s+)?[\"']?([\w.\-]+)[\"']?\s*[:=]|^\s*msgid\s+\"(.*)\"")
_ROUTING_KEY_RE = re.compile(r"(route|path|url|slug|href)", re.IGNORECASE)

_STYLE_PROP_RE = re.compile(
    r"\b(padding\w*|margin\w*|color|background(-color)?|backgroundColor|"
    r"font(-size|-weight|-family|Size|Weight|Family)?|border(-radius|Radius)?|"
    r"gap|opacity|line-?[hH]eight|letter-?[sS]pacing|box-?[sS]hadow|text-?[aA]lign)\b"
)
_STYLE_VALUE_RE = re.compile(r"#[0-9a-fA-F]{3,8}\b|-?\d*\.?\d+(px|rem|em|%|vh|vw|pt|ms|s)?\b")
_CLASS_ATTR_RE = re.compile(r"\b(className|class)\s*=")
_RISKY_STYLE_RE = re.compile(r"\b(display|visibility|content)\s*:")
_A11Y_STYLE_RE = re.compile(r"\b(outline|cursor|pointer-events)\s*:|:focus|prefers-reduced-motion")
_MOTION_STYLE_RE = re.compile(r"\b(animation|transition)[\w-]*\s*:|@keyframes")

_DEFINITION_RE = re.compile(
    r"^(?:async\s+)?(?:def|class)\s+(?P<py>\w+)"
    r"|^(?:async\s+)?function\s*\*?\s*(?P<fn>\w+)"
    r"|^(?:const|let|var|class)\s+(?P<js>\w+)"
)
_CLOSING_LINE_RE = re.compile(r"^[\)\]\}]+[;,]?$")

_VERSION_RE = re.compile(r"v?\d+(?:\.\d+){1,3}")
_HASH_RE = re.compile(r"(?:sha\d+-|h1:)[A-Za-z0-9+/=]+|\b[0-9a-f]{32,}\b")
_TOOLCHAIN_RE = re.compile(
    r"\"(node|npm|yarn|pnpm)\"\s*:|\"engines\"|\"packageManager\"|python_requires|"
    r"requires-python|rust-version|^\s*go\s+\d|^\s*toolchain\s|^\s*python\s*="
)


@dataclass
class FileContribution:
    """How one changed file contributes to the verdict."""

    path: str
    weights: Counter = field(default_factory=Counter)  # Category -> changed lines
    score: int = 100
    flags: list[str] = field(default_factory=list)
    disqualified: Optional[str] = None

    def add(self, category: Category, weight: int, score: Optional[int] = None) -> None:
        self.weights[category] += max(weight, 1)
        self.score = min(self.score, score if score is not None else CATEGORY_SCORES[category])

    def disqualify(self, reason: str) -> "FileContribution":
        self.disqualified = reason
        return self


@dataclass
class _ParsedFile:
    path: str
    status: str
    patch: Optional[str]


def parse_bundle(text: str) -> tuple[Optional[int], list[_ParsedFile]]:
    """Recover the declared file count and per-file patches from bundle text."""
    total_match = _TOTAL_RE.search(text)
    declared = int(total_match.group(1)) if total_match else None

    headers = list(_FILE_HEADER_RE.finditer(text))
    files = []
    for i, header in enumerate(headers):
        end = headers[i + 1].start() if i + 1 < len(headers) else len(text)
        body = text[header.end():end]

        patch = None
        if body.startswith("```diff\n") and body.endswith("\n```\n\n"):
            patch = body[len("```diff\n"):-len("\n```\n\n")]
        elif not body.startswith(NO_PATCH_PLACEHOLDER):
            # Cut off mid-file by truncation
            continue

        files.append(_ParsedFile(header["path"], header["status"], patch))

    return declared, files


def _change_blocks(patch: str) -> list[tuple[list[str], list[str]]]:
    """Split a unified diff into runs of (removed, added) lines."""
    blocks = []
    removed: list[str] = []
    added: list[str] = []

    def flush() -> None:
        if removed or added:
            blocks.append((list(removed), list(added)))
        removed.clear()
        added.clear()

    for line in patch.split("\n"):
        if line.startswith("\\"):
            continue
        if line.startswith("-"):
            if added:
                flush()
            removed.append(line[1:])
        elif line.startswith("+"):
            added.append(line[1:])
        else:
            flush()
    flush()
    return blocks


def _file_kind(path: str) -> str:
    p = PurePosixPath(path)
    name = p.name.lower()
    suffix = p.suffix.lower()
    dirs = {part.lower() for part in p.parts[:-1]}

    if _TEST_PATH_RE.search(path):
        return "test"
    if name in _MANIFEST_NAMES or _REQUIREMENTS_RE.search(path):
        return "manifest"
    if suffix in _I18N_SUFFIXES or dirs & _I18N_DIRS or re.match(r"messages_\w+\.properties$", name):
        return "i18n"
    if suffix in _STYLE_SUFFIXES:
        return "style"
    if (
        suffix in _CONFIG_SUFFIXES
        or name in _CONFIG_NAMES
        or name.startswith(".env")
        or path.startswith(".github/")
    ):
        return "config"
    if suffix in _DOC_SUFFIXES:
        return "doc"
    return "source"


def _squash(lines: list[str], indent_sensitive: bool = False) -> str:
    """Collapse text to what a formatter cannot change.

    A trailing comma is only layout when a line break separates it from the
    closing bracket. In Python ``)`` is excluded even then: ``('a',)`` is a
    tuple and ``('a')`` is a string.
    """
    joined = "\n".join(line.rstrip().rstrip(";") for line in lines)
    closers = r"\]\}" if indent_sensitive else r"\)\]\}"
    joined = re.sub(rf",[ \t]*\n\s*(?=[{closers}])", "", joined)
    joined = joined.replace("'", '"')
    return re.sub(r"\s+", "", joined)


def _is_formatting_only(removed: list[str], added: list[str], indent_sensitive: bool) -> bool:
    nonblank = [line for line in removed + added if line.strip()]
    if nonblank and all(_IMPORT_RE.match(line) for line in nonblank):
        return Counter(_squash([l], indent_sensitive) for l in removed if l.strip()) == Counter(
            _squash([l], indent_sensitive) for l in added if l.strip()
        )

    if indent_sensitive:
        if len(removed) != len(added):
            return False
        return all(
            _leading_ws(old) == _leading_ws(new) and _squash([old], True) == _squash([new], True)
            for old, new in zip(removed, added)
        )
    return _squash(removed) == _squash(added)


def _leading_ws(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _edit_distance(a: str, b: str) -> int:
    """Optimal string alignment distance (adjacent swaps count as one edit)."""
    rows = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(len(a) + 1):
        rows[i][0] = i
    for j in range(len(b) + 1):
        rows[0][j] = j
    for i in range(1, len(a) + 1):
        for j in range(1, len(b) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            rows[i][j] = min(rows[i - 1][j] + 1, rows[i][j - 1] + 1, rows[i - 1][j - 1] + cost)
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                rows[i][j] = min(rows[i][j], rows[i - 2][j - 2] + 1)
    return rows[len(a)][len(b)]


def _similar_words(old: str, new: str) -> bool:
    if min(len(old), len(new)) < 3:
        return False
    return _edit_distance(old.lower(), new.lower()) <= 1


def _in_comment_or_prose_string(line: str, offset: int) -> bool:
    if _COMMENT_RE.match(line):
        return True

    for literal in _LITERAL_RE.finditer(line):
        if literal.start() < offset < literal.end():
            text = literal.group(2).strip()
            # key-like literals are read by the program at runtime
            if not re.search(r"\s", text):
                return False
            return not (
                _KEY_USE_BEFORE_RE.search(line[: literal.start()])
                or _KEY_USE_AFTER_RE.match(line[literal.end():])
            )

    prefix = _LITERAL_RE.sub('""', line[:offset])
    return "//" in prefix or "/*" in prefix or " #" in prefix


def _is_typo_fix(old: str, new: str, *, prose: bool = False) -> bool:
    """Only misspelled words differ; punctuation and structure are identical.

    Outside prose, a fix must sit in a comment or a prose string literal:
    identifiers, dictionary keys and lookup names are read by the program.
    """
    old_parts = _WORD_SPLIT_RE.split(old)
    new_parts = _WORD_SPLIT_RE.split(new)
    if len(old_parts) != len(new_parts):
        return False

    changed = 0
    offset = 0
    for i, (a, b) in enumerate(zip(old_parts, new_parts)):
        if a != b:
            if i % 2 == 0 or not _similar_words(a, b):
                return False
            # endpoint paths are not typo territory
            if "/" in old_parts[i - 1][-1:] + old_parts[i + 1][:1]:
                return False
            if not prose and not _in_comment_or_prose_string(old, offset):
                return False
            changed += 1
        offset += len(a)
    return 0 < changed <= 3


def _strings_skeleton(line: str) -> tuple[str, list[str]]:
    strings = [m.group(2) for m in _STRING_RE.finditer(line)]
    return _STRING_RE.sub('""', line), strings


def _is_i18n_reference_update(old: str, new: str) -> bool:
    if not (_I18N_CALL_RE.search(old) and _I18N_CALL_RE.search(new)):
        return False
    old_skel, old_strings = _strings_skeleton(old)
    new_skel, new_strings = _strings_skeleton(new)
    if old_skel != new_skel or old_strings == new_strings:
        return False
    return all(
        _I18N_KEY_RE.match(b)
        for a, b in zip(old_strings, new_strings)
        if a != b
    )


def _is_inline_style_update(old: str, new: str) -> tuple[bool, bool]:
    """Return (is_style_update, is_class_list_change)."""
    if _STYLE_PROP_RE.search(old) and _STYLE_PROP_RE.search(new):
        if _STYLE_VALUE_RE.sub("0", old) == _STYLE_VALUE_RE.sub("0", new):
            return True, False
    if _CLASS_ATTR_RE.search(old) and _CLASS_ATTR_RE.search(new):
        if "?" in old + new or "&&" in old + new:
            return False, False  # conditional rendering
        old_skel, _ = _strings_skeleton(old)
        new_skel, _ = _strings_skeleton(new)
        if old_skel == new_skel:
            return True, True
    return False, False


def _parse_version(text: str) -> tuple[int, ...]:
    return tuple(int(part) for part in text.lstrip("v").split("."))


def _bump_problem(old_version: str, new_version: str) -> Optional[str]:
    old_v = _parse_version(old_version)
    new_v = _parse_version(new_version)
    if new_v < old_v:
        return f"version downgrade {old_version} -> {new_version}"
    # 0.x releases treat the minor number as breaking
    major_len = 2 if old_v[0] == 0 else 1
    if old_v[:major_len] != new_v[:major_len]:
        return f"major version bump {old_version} -> {new_version}"
    return None


def _assess_manifest(contribution: FileContribution, blocks) -> FileContribution:
    for removed, added in blocks:
        if len(removed) != len(added):
            return contribution.disqualify("dependency added or removed")
        for old, new in zip(removed, added):
            if _TOOLCHAIN_RE.search(old) or _TOOLCHAIN_RE.search(new):
                return contribution.disqualify("toolchain version change")
            old_masked = _HASH_RE.sub("#", old)
            new_masked = _HASH_RE.sub("#", new)
            if _VERSION_RE.sub("0", old_masked) != _VERSION_RE.sub("0", new_masked):
                return contribution.disqualify("manifest change other than a version bump")
            for old_version, new_version in zip(
                _VERSION_RE.findall(old_masked), _VERSION_RE.findall(new_masked)
            ):
                if old_version != new_version:
                    problem = _bump_problem(old_version, new_version)
                    if problem:
                        return contribution.disqualify(problem)
        contribution.add(Category.SAFE_DEPENDENCY_BUMP, len(removed) + len(added))
    return contribution


def _resource_keys(lines: list[str]) -> set[str]:
    keys = set()
    for line in lines:
        match = _RESOURCE_KEY_RE.match(line)
        if match:
            keys.add(match.group(1) or match.group(2))
    return keys


def _assess_i18n(contribution: FileContribution, blocks) -> FileContribution:
    removed = [line for r, _ in blocks for line in r]
    added = [line for _, a in blocks for line in a]

    dropped = _resource_keys(removed) - _resource_keys(added)
    if dropped:
        return contribution.disqualify(
            f"translation keys removed without usage proof: {', '.join(sorted(dropped))}"
        )
    if any(_ROUTING_KEY_RE.search(key) for key in _resource_keys(removed + added)):
        return contribution.disqualify("translation keys that affect routing")

    contribution.add(Category.UPDATE_I18N_KEY, len(removed) + len(added))
    return contribution


def _assess_style(contribution: FileContribution, blocks) -> FileContribution:
    lines = [line for r, a in blocks for line in r + a]
    if any(_A11Y_STYLE_RE.search(line) for line in lines):
        return contribution.disqualify("focus, cursor or outline rules changed")
    if any(_MOTION_STYLE_RE.search(line) for line in lines):
        return contribution.disqualify("animation or transition states changed")
    if any(_RISKY_STYLE_RE.search(line) for line in lines):
        contribution.flags.append(f"{contribution.path}: display/visibility rules changed")
        contribution.add(Category.UPDATE_UI_STYLE, len(lines), BORDERLINE_SCORE)
    else:
        contribution.add(Category.UPDATE_UI_STYLE, len(lines))
    return contribution


def _assess_pairs(
    contribution: FileContribution,
    removed: list[str],
    added: list[str],
    *,
    prose: bool,
    comments_only: bool,
) -> Optional[str]:
    """Classify a block of equal-length removed/added lines pair by pair."""
    for old, new in zip(removed, added):
        if comments_only and not (_COMMENT_RE.match(old) and _COMMENT_RE.match(new)):
            return "configuration change"
        if not prose and not comments_only:
            if _is_i18n_reference_update(old, new):
                contribution.add(Category.UPDATE_I18N_KEY, 2)
                continue
            is_style, is_class_list = _is_inline_style_update(old, new)
            if is_style:
                if is_class_list:
                    contribution.flags.append(f"{contribution.path}: class list changed")
                    contribution.add(Category.UPDATE_UI_STYLE, 2, BORDERLINE_SCORE)
                else:
                    contribution.add(Category.UPDATE_UI_STYLE, 2)
                continue
        if _is_typo_fix(old, new, prose=prose):
            contribution.add(Category.FIX_TYPOS, 2)
            continue
        return "logic or content change"
    return None


def _dead_definition_problem(
    removed: list[str], indent_sensitive: bool, references: str
) -> Optional[str]:
    """Why a deletion-only block is not provably dead code, or None.

    Only whole, module-private, top-level definitions qualify, and their
    names must not appear anywhere else in the diff.
    """
    lines = [line for line in removed if line.strip()]
    if not lines or lines[0][0].isspace():
        return "removed lines are not a whole top-level definition"

    names = []
    for line in lines:
        if line[0].isspace():
            continue
        match = _DEFINITION_RE.match(line)
        if match:
            names.append(match["py"] or match["fn"] or match["js"])
        elif indent_sensitive or not _CLOSING_LINE_RE.match(line.strip()):
            return "removed lines are not a whole top-level definition"

    if not indent_sensitive and sum(l.count("{") for l in lines) != sum(l.count("}") for l in lines):
        return "removed lines are not a whole top-level definition"
    if indent_sensitive and not all(name.startswith("_") for name in names):
        return "removed public definition may be imported elsewhere"

    for name in names:
        if re.search(rf"\b{re.escape(name)}\b", references):
            return f"removed definition '{name}' is still referenced"
    return None


def _assess_text(
    contribution: FileContribution,
    blocks,
    kind: str,
    indent_sensitive: bool,
    references: str,
):
    prose = kind == "doc"
    comments_only = kind == "config"

    removal_only = any(not a and any(l.strip() for l in r) for r, a in blocks)
    addition_only = any(not r and any(l.strip() for l in a) for r, a in blocks)
    if removal_only and addition_only:
        return contribution.disqualify("statements moved between hunks")

    for removed, added in blocks:
        if not comments_only and _is_formatting_only(removed, added, indent_sensitive):
            contribution.add(Category.CODE_FORMATTING, len(removed) + len(added))
            continue
        if not added and kind == "source":
            problem = _dead_definition_problem(removed, indent_sensitive, references)
            if problem:
                return contribution.disqualify(problem)
            contribution.add(Category.REMOVE_UNUSED_CODE, len(removed))
            continue
        if len(removed) != len(added):
            if comments_only:
                return contribution.disqualify("configuration change")
            if prose:
                return contribution.disqualify("documentation content change")
            return contribution.disqualify("new or replacement code added")
        problem = _assess_pairs(
            contribution, removed, added, prose=prose, comments_only=comments_only
        )
        if problem:
            return contribution.disqualify(problem)

    if Category.REMOVE_UNUSED_CODE in contribution.weights:
        contribution.flags.append(
            f"{contribution.path}: removed definitions are unreferenced within the diff only"
        )
    return contribution


def reference_text(bundle_text: str) -> str:
    """Every line of the bundle that survives the change (context and additions)."""
    return "\n".join(line for line in bundle_text.split("\n") if not line.startswith("-"))


def assess_file(
    path: str, status: str, patch: Optional[str], references: str = ""
) -> FileContribution:
    """Classify a single file's contribution.

    ``references`` is the text searched for uses of removed definitions.
    """
    contribution = FileContribution(path=path)
    kind = _file_kind(path)

    if patch is None:
        return contribution.disqualify("no patch available to inspect")
    if kind == "test":
        return contribution.disqualify("test file change")

    blocks = _change_blocks(patch)
    if not blocks:
        return contribution.disqualify(f"no textual changes to inspect ({status})")

    if kind == "manifest":
        return _assess_manifest(contribution, blocks)
    if kind == "i18n":
        return _assess_i18n(contribution, blocks)
    if kind == "style":
        return _assess_style(contribution, blocks)

    indent_sensitive = PurePosixPath(path).suffix.lower() in _INDENT_SENSITIVE_SUFFIXES
    return _assess_text(contribution, blocks, kind, indent_sensitive, references)


def _not_eligible(reasoning: str, confidence: int, flags: list[str]) -> dict:
    return {
        "eligible": False,
        "category": [Category.NONE.value],
        "confidence": confidence,
        "reasoning": reasoning,
        "flags": flags,
    }


def order_categories(weights: Counter) -> list[Category]:
    """Dominant first; ties broken by declaration order."""
    return sorted(weights, key=lambda c: (-weights[c], Category.declaration_order(c)))


class RuleBasedOracle:
    """Oracle that applies the rubric with deterministic text rules."""

    def evaluate(self, bundle: DiffBundle) -> dict:
        declared, files = parse_bundle(bundle.text)

        if bundle.truncated or bundle.text.endswith(TRUNCATION_MARKER):
            return _not_eligible(
                "The diff was truncated, so not all changed content could be inspected.",
                UNVERIFIABLE_CONFIDENCE,
                ["diff truncated"],
            )
        if declared is None or declared != len(files):
            return _not_eligible(
                "The diff summary could not be fully parsed.",
                UNVERIFIABLE_CONFIDENCE,
                ["unparsable diff summary"],
            )
        if not files:
            return _not_eligible("The pull request changes no files.", UNVERIFIABLE_CONFIDENCE, [])

        references = reference_text(bundle.text)
        contributions = [assess_file(f.path, f.status, f.patch, references) for f in files]

        vetoes = [c for c in contributions if c.disqualified]
        if vetoes:
            reasons = [f"{c.path}: {c.disqualified}" for c in vetoes]
            return _not_eligible(
                f"{len(vetoes)} of {len(contributions)} files need review "
                f"({'; '.join(reasons[:3])}).",
                DISQUALIFIED_CONFIDENCE,
                reasons,
            )

        weights: Counter = Counter()
        for c in contributions:
            weights.update(c.weights)
        flags = [flag for c in contributions for flag in c.flags]
        categories = order_categories(weights)

        if len(categories) > MAX_CATEGORIES:
            return _not_eligible(
                f"Changes span {len(categories)} categories, more than {MAX_CATEGORIES}.",
                UNVERIFIABLE_CONFIDENCE,
                flags,
            )
        if Category.SAFE_DEPENDENCY_BUMP in categories and len(categories) > 1:
            return _not_eligible(
                "Dependency bump is accompanied by other changes.",
                DISQUALIFIED_CONFIDENCE,
                flags,
            )

        confidence = min(c.score for c in contributions)
        confidence -= EXTRA_CATEGORY_PENALTY * (len(categories) - 1)

        summary = ", ".join(
            f"{c.value} ({sum(1 for f in contributions if c in f.weights)} files)"
            for c in categories
        )
        return {
            "eligible": True,
            "category": [c.value for c in categories],
            "confidence": confidence,
            "reasoning": f"All {len(contributions)} changed files fit low-risk categories: {summary}.",
            "flags": flags,
        }
