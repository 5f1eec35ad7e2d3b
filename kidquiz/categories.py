"""
categories.py
======================

The closed set of quiz topics and their static display configuration.

CATEGORY_DISPLAY is built once at import time and cannot be mutated. Its
order is the order of the cards on the topic selector.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping


class Category(Enum):
    ANIMALS = "Animals"
    PEOPLE = "Famous People"
    FLAGS = "Flags"
    LOGOS = "Logos"
    COUNTRIES = "Countries"
    STATES = "US States"
    BIRDS = "Birds"
    MATH = "Math Wizards"
    COMPREHENSION = "Reading Adventure"
    SCIENCE = "Science Explorers"
    SOCIAL = "Social Studies"
    RAMAYANA = "Ramayana for Kids"
    MAHABHARATA = "Mahabharata Tales"
    INDIAN_MYTH = "Indian Mythology"
    OTHER_MYTH = "Global Mythology"


@dataclass(frozen=True)
class CategoryDisplay:
    icon: str
    color: str


CATEGORY_DISPLAY: Mapping[Category, CategoryDisplay] = MappingProxyType(
    {
        Category.ANIMALS: CategoryDisplay("🦁", "#f97316"),
        Category.RAMAYANA: CategoryDisplay("🏹", "#d97706"),
        Category.MAHABHARATA: CategoryDisplay("⚔️", "#e11d48"),
        Category.INDIAN_MYTH: CategoryDisplay("🕉️", "#ea580c"),
        Category.COMPREHENSION: CategoryDisplay("📖", "#2563eb"),
        Category.SCIENCE: CategoryDisplay("🧪", "#06b6d4"),
        Category.MATH: CategoryDisplay("➕", "#ec4899"),
        Category.OTHER_MYTH: CategoryDisplay("⚡", "#9333ea"),
        Category.SOCIAL: CategoryDisplay("🏘️", "#059669"),
        Category.FLAGS: CategoryDisplay("🚩", "#ef4444"),
        Category.BIRDS: CategoryDisplay("🦜", "#eab308"),
        Category.COUNTRIES: CategoryDisplay("🌍", "#22c55e"),
    }
)

_GUIDANCE = {
    Category.COMPREHENSION: (
        "Include a short (2-3 sentence) story or passage in the 'passage' "
        "field and ask a question about it."
    ),
    Category.RAMAYANA: (
        "Use simplified, kid-friendly versions focusing on heroes and moral lessons."
    ),
    Category.MAHABHARATA: (
        "Use simplified, kid-friendly versions focusing on heroes and moral lessons."
    ),
    Category.INDIAN_MYTH: (
        "Use simplified, kid-friendly versions focusing on heroes and moral lessons."
    ),
    Category.OTHER_MYTH: "Include Greek, Norse, or Egyptian myths.",
    Category.SCIENCE: (
        "Stick to 3rd-grade curriculum topics (water cycle, plants, magnets, etc.)."
    ),
    Category.SOCIAL: (
        "Stick to 3rd-grade curriculum topics (local government, communities, maps, etc.)."
    ),
}


def featured_categories() -> List[Category]:
    """Categories shown on the topic selector, in display order."""
    return list(CATEGORY_DISPLAY.keys())


def display_for(category: Category) -> CategoryDisplay:
    # categories without a card (e.g. Logos) still get a neutral descriptor
    return CATEGORY_DISPLAY.get(category, CategoryDisplay("❓", "#64748b"))


def is_comprehension(category: Category) -> bool:
    """Only reading-comprehension questions may carry a passage."""
    return category is Category.COMPREHENSION


def category_guidance(category: Category) -> str:
    return _GUIDANCE.get(category, "")
