"""
Validation of the ages and age ranges listed for one species.

Ages and ranges for a species must not cover the same cohort twice: no age
may repeat, no age may lie within a range, and no two ranges may overlap.
"""

from .age_range import AgeRange, parse_age_or_range
from .config import MAX_AGE
from .errors import (
    AgeInRangeError,
    DuplicateAgeError,
    InvalidAgeError,
    OverlappingRangeError,
    RangeContainsAgeError,
)


class AgeSetValidator:
    """
    Accumulates the ages and ranges read for a single species.

    Each new age or range is checked against everything accumulated so far
    and rejected if it covers a cohort already covered.

    Example:
        >>> validator = AgeSetValidator()
        >>> validator.add("10")
        >>> validator.add("20-40")
        >>> validator.add("30")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        AgeInRangeError: The age 30 lies within the range 20-40
    """

    def __init__(self, max_age: int = MAX_AGE):
        self.max_age = max_age
        self._ages: list[int] = []
        self._ranges: list[AgeRange] = []

    @property
    def ages(self) -> frozenset[int]:
        return frozenset(self._ages)

    @property
    def ranges(self) -> tuple[AgeRange, ...]:
        return tuple(self._ranges)

    def __len__(self) -> int:
        return len(self._ages) + len(self._ranges)

    def add(self, token: str) -> None:
        """
        Parse and add one age or age-range token.

        Args:
            token: Literal text, e.g. "10" or "20-40"

        Raises:
            InvalidAgeError, InvalidRangeError: If the token is malformed
            DuplicateAgeError, AgeInRangeError: If an age is already covered
            RangeContainsAgeError, OverlappingRangeError: If a range covers
                an age or range already added
        """
        self.add_value(parse_age_or_range(token, self.max_age), token)

    def add_value(self, value: int | AgeRange, text: str | None = None) -> None:
        """Add an already-parsed age or range; ``text`` is echoed in errors."""
        if text is None:
            text = str(value)

        if isinstance(value, AgeRange):
            self._add_range(value, text)
        else:
            self._add_age(value, text)

    def _add_age(self, age: int, text: str) -> None:
        if age < 0:
            raise InvalidAgeError(f"The age {text} must be >= 0", text=text)

        if age in self._ages:
            raise DuplicateAgeError(f"The age {text} appears more than once", text=text)

        for previous in self._ranges:
            if previous.contains(age):
                raise AgeInRangeError(
                    f"The age {text} lies within the range {previous.start}-{previous.end}",
                    text=text,
                )

        self._ages.append(age)

    def _add_range(self, age_range: AgeRange, text: str) -> None:
        for age in self._ages:
            if age_range.contains(age):
                raise RangeContainsAgeError(
                    f"The range {text} contains the age {age}", text=text
                )

        for previous in self._ranges:
            if age_range.overlaps(previous):
                raise OverlappingRangeError(
                    f"The range {text} overlaps the range {previous.start}-{previous.end}",
                    text=text,
                )

        self._ranges.append(age_range)

    def build(self):
        """Create the SpecificAges rule for the accumulated ages and ranges."""
        # Import here to avoid circular dependency
        from .selectors import SpecificAges

        return SpecificAges(ages=self.ages, ranges=self.ranges)
