"""Keyword-based topical categorization."""

from __future__ import annotations

from typing import Sequence, Tuple

from notices.models.domain import Category

CategoryRule = Tuple[Category, Tuple[str, ...]]

# Evaluated top to bottom; the first rule with a matching keyword wins.
CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    (Category.HEALTH, ("health", "medical", "hospital")),
    (Category.EDUCATION, ("education", "school", "university")),
    (Category.EMPLOYMENT, ("job", "employment", "recruitment")),
    (Category.TAXATION, ("tax", "income", "gst")),
    (Category.LEGAL, ("legal", "court", "law")),
)


def categorize(title: str, content: str, rules: Sequence[CategoryRule] = CATEGORY_RULES) -> Category:
    text = f"{title} {content}".lower()
    for category, keywords in rules:
        if any(keyword in text for keyword in keywords):
            return category
    return Category.GENERAL
