"""
Parse errors for harvest-specification input.

Every error carries the literal text that failed and, once the block reader
has seen it, the number of the source line it came from. Errors are grouped
by kind so callers can decide how to report them:

- StructuralError: malformed grammar shape
- SpeciesLookupError: a name that is not in the species dataset
- UniquenessError: an identity repeated within one scope
- OverlapError: ages and ranges that cover the same cohort
- ValueFormatError: a literal whose value is not acceptable
"""


class ParseError(ValueError):
    """
    Base class for all harvest-specification parse errors.

    Attributes:
        message: Human-readable description
        text: The offending literal, if there is one
        line_number: Source line number, if known
    """

    def __init__(
        self, message: str, text: str | None = None, line_number: int | None = None
    ):
        super().__init__(message)
        self.message = message
        self.text = text
        self.line_number = line_number

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"Error at line {self.line_number}: {self.message}"


class StructuralError(ParseError):
    pass


class SpeciesLookupError(ParseError):
    pass


class UniquenessError(ParseError):
    pass


class OverlapError(ParseError):
    pass


class ValueFormatError(ParseError):
    pass


# Structural
class UnexpectedTrailingDataError(StructuralError):
    pass


class EmptyBlockError(StructuralError):
    pass


class EmptyPlantingListError(StructuralError):
    pass


class MissingCohortSelectionError(StructuralError):
    pass


# Lookup
class UnknownSpeciesError(SpeciesLookupError):
    pass


# Uniqueness
class DuplicateSpeciesError(UniquenessError):
    pass


class DuplicateAgeError(UniquenessError):
    pass


class DuplicatePlantingSpeciesError(UniquenessError):
    pass


# Overlap
class AgeInRangeError(OverlapError):
    pass


class RangeContainsAgeError(OverlapError):
    pass


class OverlappingRangeError(OverlapError):
    pass


# Range / format
class InvalidAgeError(ValueFormatError):
    pass


class InvalidRangeError(ValueFormatError):
    pass


class InvalidDivisorError(ValueFormatError):
    pass


class MalformedDensityError(ValueFormatError):
    pass


class DensityOutOfRangeError(ValueFormatError):
    pass


class MissingDensityValueError(ValueFormatError):
    pass


class UnterminatedDensityError(ValueFormatError):
    pass
