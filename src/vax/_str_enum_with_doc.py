"""String enums whose members carry their own docstrings."""

from enum import StrEnum
from typing import Self


class StrEnumWithDoc(StrEnum):
    """Base class for string enums with per-member docstrings.

    Members are declared as ``NAME = "value", "description"``.
    """

    def __new__(cls, value: str, doc: str = "") -> Self:
        """Create a new enum member with a docstring."""
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.__doc__ = doc
        return obj

    @classmethod
    def describe(cls) -> str:
        """Render all members as ``value: doc`` lines, e.g. for CLI help."""
        return "\n".join(f"{member.value}: {member.__doc__}" for member in cls)
