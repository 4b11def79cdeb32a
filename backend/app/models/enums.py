"""Enumerations shared by models and schemas."""

import enum
from typing import Optional


class Role(str, enum.Enum):
    HEAD = "HEAD"
    TEACHER = "TEACHER"
    PARENTS = "PARENTS"
    STUDENT = "STUDENT"


class Trimester(str, enum.Enum):
    FIRST = "FIRST"
    SECOND = "SECOND"
    THIRD = "THIRD"

    @property
    def number(self) -> int:
        return _TRIMESTER_NUMBERS[self]

    @property
    def display_name(self) -> str:
        return f"{self.value.capitalize()} Trimester"

    @property
    def roman(self) -> str:
        return "I" * self.number

    @classmethod
    def from_number(cls, value: int) -> "Trimester":
        for trimester, number in _TRIMESTER_NUMBERS.items():
            if number == value:
                return trimester
        raise ValueError(f"Invalid trimester value: {value}")


_TRIMESTER_NUMBERS = {Trimester.FIRST: 1, Trimester.SECOND: 2, Trimester.THIRD: 3}


class Period(str, enum.Enum):
    PERIOD_1 = "PERIOD_1"
    PERIOD_2 = "PERIOD_2"
    PERIOD_3 = "PERIOD_3"
    FINAL_SEMESTER = "FINAL_SEMESTER"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def rank(self) -> int:
        return list(Period).index(self)


class ClassLevel(str, enum.Enum):
    NURSERY_1 = "NURSERY_1"
    NURSERY_2 = "NURSERY_2"
    NURSERY_3 = "NURSERY_3"
    PRE_PRIMARY = "PRE_PRIMARY"

    @property
    def display_name(self) -> str:
        return _CLASS_LEVEL_DISPLAY[self]

    @classmethod
    def parse(cls, value) -> Optional["ClassLevel"]:
        """Accept enum names or display names ("Nursery 1", "nursery-1", "PRE_PRIMARY")."""
        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip()
        if not text:
            return None
        key = text.upper().replace("-", "_").replace(" ", "_")
        if key in cls.__members__:
            return cls[key]
        raise ValueError(
            f"Invalid ClassLevel value: {value}. Valid values are: "
            + ", ".join(level.name for level in cls)
            + " or their display names ("
            + ", ".join(level.display_name for level in cls)
            + ")."
        )


_CLASS_LEVEL_DISPLAY = {
    ClassLevel.NURSERY_1: "Nursery-1",
    ClassLevel.NURSERY_2: "Nursery-2",
    ClassLevel.NURSERY_3: "Nursery-3",
    ClassLevel.PRE_PRIMARY: "Pre-Primary",
}


class StudentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    GRADUATED = "GRADUATED"
    TRANSFERRED = "TRANSFERRED"
    SUSPENDED = "SUSPENDED"
