"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Category(StrEnum):
    ARCHITECTURE = "Architecture"
    TRAVEL = "Travel"
    NATURE = "Nature"
    STREET = "Street"
    PEOPLE = "People"
    OTHER = "Other"
    UNCATEGORIZED = "Uncategorized"

    @classmethod
    def coerce(cls, value: object) -> Category:
        """Return the matching category, defaulting to ``UNCATEGORIZED``."""
        if isinstance(value, str):
            try:
                return cls(value.strip())
            except ValueError:
                return cls.UNCATEGORIZED
        return cls.UNCATEGORIZED
