"""Predefined journal categories."""

from __future__ import annotations

from typing import Dict, List

from reflections.core.results import ServiceResult

CATEGORIES: Dict[str, List[str]] = {
    "Work": ["Work", "Studies", "Projects", "Career"],
    "Health": ["Health", "Fitness", "Mental Health", "Self-care"],
    "Relationships": ["Family", "Friends", "Social", "Personal"],
    "Interests": ["Hobbies", "Travel", "Reading", "Creativity"],
    "Events": ["Birthday", "Holiday", "Celebration", "Special"],
}


def get_all_categories() -> ServiceResult[List[str]]:
    names = sorted({name for group in CATEGORIES.values() for name in group})
    return ServiceResult.ok(names)


def get_categories_by_type(category_type: str) -> ServiceResult[List[str]]:
    if category_type not in CATEGORIES:
        return ServiceResult.fail(f"Category type '{category_type}' not found")
    return ServiceResult.ok(sorted(CATEGORIES[category_type]))


def get_category_types() -> List[str]:
    return sorted(CATEGORIES)
