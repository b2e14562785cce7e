"""Rule-based follow-up questions keyed on product category.

Unlike assistant question generation this is fully local: it lists the
standard disclosures for a category that the answers do not cover yet.
"""

from typing import Any

from pydantic import BaseModel

FOLLOW_UP_RULES: dict[str, tuple[tuple[str, str], ...]] = {
    "cosmetics": (
        ("ingredients", "List the full ingredient list"),
        ("allergens", "Are there any known allergens?"),
        ("crueltyFree", "Is the product cruelty-free? (yes/no)"),
    ),
    "food": (
        ("ingredients", "List the ingredient list"),
        ("nutrition", "Provide nutrition facts (calories, fats, sugars)"),
        ("allergens", "Any allergens present?"),
    ),
}
DEFAULT_RULES: tuple[tuple[str, str], ...] = (
    ("materials", "What materials is the product made from?"),
    ("origin", "Country of origin / manufacturer?"),
)


class FollowUp(BaseModel):
    id: str
    question: str


def follow_up_questions(category: str, answers: dict[str, Any] | None = None) -> list[FollowUp]:
    answers = answers or {}
    rules = FOLLOW_UP_RULES.get(category, DEFAULT_RULES)
    return [FollowUp(id=key, question=question) for key, question in rules if not answers.get(key)]
