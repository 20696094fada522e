"""
Cohort age ranges and the age / age-range literal parser.
"""

from dataclasses import dataclass

from .config import MAX_AGE
from .errors import InvalidAgeError, InvalidRangeError


@dataclass(frozen=True)
class AgeRange:
    """
    Inclusive range of cohort ages.

    Attributes:
        start: Youngest age in the range
        end: Oldest age in the range (>= start)
    """

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise InvalidRangeError(
                f"Range ages must be >= 0, got {self.start}-{self.end}",
                text=str(self),
            )
        if self.start > self.end:
            raise InvalidRangeError(
                f"The start of the range {self} is greater than its end",
                text=str(self),
            )

    def contains(self, age: int) -> bool:
        return self.start <= age <= self.end

    def overlaps(self, other: "AgeRange") -> bool:
        return self.start <= other.end and other.start <= self.end

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def _parse_age(text: str, literal: str, max_age: int) -> int:
    if not (text.isascii() and text.isdigit()):
        raise InvalidAgeError(f'"{literal}" is not a valid age or age range', text=literal)
    age = int(text)
    if age > max_age:
        raise InvalidAgeError(
            f"The age {text} in \"{literal}\" is greater than {max_age}", text=literal
        )
    return age


def is_range_literal(text: str) -> bool:
    """Whether a token is written as a range ("<start>-<end>")."""
    return "-" in text


def parse_age_or_range(text: str, max_age: int = MAX_AGE) -> int | AgeRange:
    """
    Parse a single age ("10") or an age range ("10-40").

    Args:
        text: The literal token
        max_age: Largest age accepted

    Returns:
        The age as an int, or an AgeRange

    Raises:
        InvalidAgeError: If the token is not a non-negative integer or range
        InvalidRangeError: If the range start is greater than its end
    """
    if not is_range_literal(text):
        return _parse_age(text, text, max_age)

    start_text, _, end_text = text.partition("-")
    start = _parse_age(start_text, text, max_age)
    end = _parse_age(end_text, text, max_age)
    if start > end:
        raise InvalidRangeError(
            f"The start of the range {text} is greater than its end", text=text
        )
    return AgeRange(start, end)
