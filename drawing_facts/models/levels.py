"""Ordered severity levels shared by the tolerance, GD&T and fabrication models."""

from enum import IntEnum


class OrderedLevel(IntEnum):
    """IntEnum base whose members compare by severity and render as CamelCase."""

    @property
    def label(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


class ToleranceTier(OrderedLevel):
    """How demanding a tolerance is to hold (loosest first)."""
    STANDARD = 0
    MODERATE = 1
    TIGHT = 2
    PRECISION = 3


class CostImpact(OrderedLevel):
    """Estimated cost impact of a requirement (none first)."""
    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4
