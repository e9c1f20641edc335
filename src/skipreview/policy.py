"""Classification policy: oracle contract, verdict validation and gating.

The oracle (LLM, rule engine, or a stub in tests) only proposes a raw JSON
object. Everything that decides whether that proposal is trustworthy lives
here and runs the same way regardless of which oracle produced it.
"""

import math
from numbers import Real
from typing import Any, Protocol

from pydantic import ValidationError

from skipreview.diff import DiffBundle
from skipreview.errors import OracleSchemaError
from skipreview.nodes.schemas import Category, Verdict

# Highest confidence an eligible verdict may carry for a given category count.
CONFIDENCE_CAP_BY_CATEGORY_COUNT = {1: 100, 2: 89, 3: 84}


class Oracle(Protocol):
    """Anything that maps a DiffBundle to a raw candidate verdict."""

    def evaluate(self, bundle: DiffBundle) -> dict: ...


def _is_valid_category_field(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value)
    if isinstance(value, list):
        return bool(value) and all(isinstance(item, str) for item in value)
    return False


def validate_candidate(raw: Any) -> Verdict:
    """Turn a raw oracle response into a Verdict or raise OracleSchemaError.

    Structural checks run first so that a partially generated response is
    rejected with a precise message instead of being coerced.
    """
    if not isinstance(raw, dict):
        raise OracleSchemaError(f"Verdict must be a JSON object, got {type(raw).__name__}")

    eligible = raw.get("eligible")
    confidence = raw.get("confidence")
    reasoning = raw.get("reasoning")
    category = raw.get("category", raw.get("categories"))
    flags = raw.get("flags") or []

    if not isinstance(eligible, bool):
        raise OracleSchemaError("'eligible' must be a boolean")
    if isinstance(confidence, bool) or not isinstance(confidence, Real):
        raise OracleSchemaError("'confidence' must be a number")
    if not isinstance(reasoning, str) or not reasoning.strip():
        raise OracleSchemaError("'reasoning' must be a non-empty string")
    if not _is_valid_category_field(category):
        raise OracleSchemaError(
            "'category' must be a non-empty string or a non-empty list of strings"
        )
    if not isinstance(flags, list) or not all(isinstance(f, str) for f in flags):
        raise OracleSchemaError("'flags' must be a list of strings")
    if not math.isfinite(confidence) or int(confidence) != confidence:
        raise OracleSchemaError(f"'confidence' must be an integer, got {confidence}")

    names = [category] if isinstance(category, str) else category
    known = {c.value for c in Category}
    unknown = [name for name in names if name not in known]
    if unknown:
        raise OracleSchemaError(f"Unknown categories: {unknown}")

    try:
        return Verdict(
            eligible=eligible,
            categories=[Category(name) for name in names],
            confidence=int(confidence),
            reasoning=reasoning.strip(),
            flags=flags,
        )
    except ValidationError as e:
        raise OracleSchemaError(f"Invalid verdict: {e}") from e


def calibrate(verdict: Verdict) -> Verdict:
    """Cap the confidence of multi-category verdicts below the clean band."""
    if not verdict.eligible:
        return verdict

    cap = CONFIDENCE_CAP_BY_CATEGORY_COUNT[len(verdict.categories)]
    if verdict.confidence <= cap:
        return verdict

    return verdict.model_copy(
        update={
            "confidence": cap,
            "flags": [
                *verdict.flags,
                f"confidence capped at {cap} for {len(verdict.categories)} categories",
            ],
        }
    )


def classify(bundle: DiffBundle, oracle: Oracle) -> Verdict:
    """Ask the oracle once, then validate and calibrate its answer."""
    raw = oracle.evaluate(bundle)
    return calibrate(validate_candidate(raw))


def should_apply_label(verdict: Verdict, threshold: int) -> bool:
    """Side effects happen only for eligible verdicts at or above threshold."""
    return verdict.eligible and verdict.confidence >= threshold
