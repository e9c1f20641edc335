"""Pydantic schemas for the classification verdict."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_CATEGORIES = 3


class Category(str, Enum):
    """Low-risk edit categories, in tie-break order."""

    FIX_TYPOS = "FixTypos"
    UPDATE_I18N_KEY = "UpdateI18nKey"
    UPDATE_UI_STYLE = "UpdateUiStyle"
    CODE_FORMATTING = "CodeFormatting"
    REMOVE_UNUSED_CODE = "RemoveUnusedCode"
    SAFE_DEPENDENCY_BUMP = "SafeDependencyBump"
    NONE = "None"

    @classmethod
    def declaration_order(cls, category: "Category") -> int:
        return list(cls).index(category)


class Verdict(BaseModel):
    """Classification result for one pull request."""

    model_config = ConfigDict(frozen=True)

    eligible: bool
    categories: list[Category]  # dominant first
    confidence: int = Field(ge=0, le=100)
    reasoning: str = Field(min_length=1)
    flags: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_categories(self) -> "Verdict":
        if not self.eligible:
            if self.categories != [Category.NONE]:
                raise ValueError("not-eligible verdict must have categories ['None']")
            return self

        if not self.categories:
            raise ValueError("eligible verdict needs at least one category")
        if len(self.categories) > MAX_CATEGORIES:
            raise ValueError(f"at most {MAX_CATEGORIES} categories are allowed")
        if Category.NONE in self.categories:
            raise ValueError("eligible verdict cannot cite category 'None'")
        if len(set(self.categories)) != len(self.categories):
            raise ValueError("categories must be distinct")
        return self

    @property
    def category_label(self) -> str:
        """Comma-joined category names, dominant first."""
        return ", ".join(c.value for c in self.categories)
