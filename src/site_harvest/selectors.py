"""
Cohort selection rules.

A rule decides which of one species' cohorts at a site are selected (for
removal, typically). Rules are plain immutable values; ``select_cohorts``
is the single function that evaluates any of them against a collection of
cohorts.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from .age_range import AgeRange
from .config import EVERY_NTH_PREFIX, MAX_DIVISOR
from .errors import InvalidDivisorError


@dataclass(frozen=True)
class All:
    """Select every cohort."""


@dataclass(frozen=True)
class Youngest:
    """Select the cohort(s) with the youngest age."""


@dataclass(frozen=True)
class Oldest:
    """Select the cohort(s) with the oldest age."""


@dataclass(frozen=True)
class AllExceptYoungest:
    """Select every cohort except the youngest."""


@dataclass(frozen=True)
class AllExceptOldest:
    """Select every cohort except the oldest."""


@dataclass(frozen=True)
class EveryNth:
    """
    Select every Nth cohort, counting from the youngest.

    Attributes:
        n: Divisor (>= 1); cohorts at 1-based positions n, 2n, 3n, ... are selected
    """

    n: int

    def __post_init__(self):
        if self.n < 1:
            raise InvalidDivisorError(
                f'For "1/N", N must be > 0, got {self.n}', text=f"{EVERY_NTH_PREFIX}{self.n}"
            )


@dataclass(frozen=True)
class SpecificAges:
    """
    Select cohorts by explicit ages and age ranges.

    No age may repeat, lie within a range, or be covered by two ranges.
    Invalid combinations are rejected here, so every instance is consistent.

    Attributes:
        ages: Individual cohort ages
        ranges: Non-overlapping age ranges
    """

    ages: frozenset[int] = field(default_factory=frozenset)
    ranges: tuple[AgeRange, ...] = ()

    def __post_init__(self):
        # Import here to avoid circular dependency
        from .validation import AgeSetValidator

        validator = AgeSetValidator()
        for age in sorted(self.ages):
            validator.add_value(age)
        for age_range in self.ranges:
            validator.add_value(age_range)

        object.__setattr__(self, "ages", validator.ages)
        object.__setattr__(self, "ranges", validator.ranges)

    def covers(self, age: int) -> bool:
        """Whether a cohort of this age is selected."""
        return age in self.ages or any(r.contains(age) for r in self.ranges)


# Type alias for any cohort selection rule
CohortSelectionRule = (
    All | Youngest | Oldest | AllExceptYoungest | AllExceptOldest | EveryNth | SpecificAges
)

_KEYWORD_RULES: dict[str, CohortSelectionRule] = {
    "All": All(),
    "Youngest": Youngest(),
    "AllExceptYoungest": AllExceptYoungest(),
    "Oldest": Oldest(),
    "AllExceptOldest": AllExceptOldest(),
}

def parse_every_nth(word: str, max_divisor: int = MAX_DIVISOR) -> EveryNth:
    """
    Parse a "1/N" keyword.

    Raises:
        InvalidDivisorError: If N is missing, not an integer, 0, or > max_divisor
    """
    divisor_text = word[len(EVERY_NTH_PREFIX) :]
    if not (divisor_text.isascii() and divisor_text.isdigit()):
        raise InvalidDivisorError(
            f'For "1/N", N must be a positive integer, got "{divisor_text}"', text=word
        )
    n = int(divisor_text)
    if n == 0:
        raise InvalidDivisorError('For "1/N", N must be > 0', text=word)
    if n > max_divisor:
        raise InvalidDivisorError(
            f'For "1/N", N must be <= {max_divisor}, got {n}', text=word
        )
    return EveryNth(n)


def rule_from_keyword(word: str, max_divisor: int = MAX_DIVISOR) -> CohortSelectionRule | None:
    """
    Map a cohort keyword to its rule.

    Recognised keywords (case-exact): All, Youngest, AllExceptYoungest,
    Oldest, AllExceptOldest and 1/N.

    Args:
        word: First word after the species name
        max_divisor: Largest N accepted in "1/N"

    Returns:
        The rule, or None if the word is not a keyword
    """
    if word in _KEYWORD_RULES:
        return _KEYWORD_RULES[word]
    if word.startswith(EVERY_NTH_PREFIX):
        return parse_every_nth(word, max_divisor)
    return None


def _identity(value: Any) -> Any:
    return value


def select_cohorts(
    rule: CohortSelectionRule,
    cohorts: Iterable[Any],
    key: Callable[[Any], int] | None = None,
) -> list[Any]:
    """
    Evaluate a rule against one species' cohorts.

    Args:
        rule: Cohort selection rule
        cohorts: The species' cohorts (any order; ages may repeat)
        key: Returns a cohort's age; if None the cohorts are ages themselves

    Returns:
        Selected cohorts, ordered by increasing age (ties keep input order)
    """
    age_of = key if key is not None else _identity
    ordered = sorted(cohorts, key=age_of)
    if not ordered:
        return []

    if isinstance(rule, All):
        return ordered
    elif isinstance(rule, Youngest):
        youngest = age_of(ordered[0])
        return [c for c in ordered if age_of(c) == youngest]
    elif isinstance(rule, Oldest):
        oldest = age_of(ordered[-1])
        return [c for c in ordered if age_of(c) == oldest]
    elif isinstance(rule, AllExceptYoungest):
        youngest = age_of(ordered[0])
        return [c for c in ordered if age_of(c) != youngest]
    elif isinstance(rule, AllExceptOldest):
        oldest = age_of(ordered[-1])
        return [c for c in ordered if age_of(c) != oldest]
    elif isinstance(rule, EveryNth):
        return [c for i, c in enumerate(ordered, start=1) if i % rule.n == 0]
    elif isinstance(rule, SpecificAges):
        return [c for c in ordered if rule.covers(age_of(c))]
    else:
        raise TypeError(f"Unknown cohort selection rule type: {type(rule)}")


def describe_rule(rule: CohortSelectionRule) -> str:
    """Render a rule in the input language, e.g. "Oldest", "1/3" or "10 20-30"."""
    if isinstance(rule, EveryNth):
        return f"{EVERY_NTH_PREFIX}{rule.n}"
    elif isinstance(rule, SpecificAges):
        parts = [(age, str(age)) for age in rule.ages]
        parts += [(r.start, str(r)) for r in rule.ranges]
        return " ".join(text for _, text in sorted(parts))
    elif isinstance(rule, (All, Youngest, Oldest, AllExceptYoungest, AllExceptOldest)):
        return type(rule).__name__
    else:
        raise TypeError(f"Unknown cohort selection rule type: {type(rule)}")
