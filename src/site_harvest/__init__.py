"""
Site Harvest - Parsing of per-species cohort removal and planting rules.

This package provides utilities for:
- Reading blocks of species lines that say which cohorts to remove
  (by keyword, explicit ages, or age ranges)
- Validating ages and age ranges so no cohort is covered twice
- Evaluating cohort selection rules against a species' cohorts
- Reading "Plant" lists with optional planting densities
"""

from .age_range import AgeRange, parse_age_or_range
from .config import ParserConfig
from .errors import (
    AgeInRangeError,
    DensityOutOfRangeError,
    DuplicateAgeError,
    DuplicatePlantingSpeciesError,
    DuplicateSpeciesError,
    EmptyBlockError,
    EmptyPlantingListError,
    InvalidAgeError,
    InvalidDivisorError,
    InvalidRangeError,
    MalformedDensityError,
    MissingCohortSelectionError,
    MissingDensityValueError,
    OverlappingRangeError,
    OverlapError,
    ParseError,
    RangeContainsAgeError,
    SpeciesLookupError,
    StructuralError,
    UnexpectedTrailingDataError,
    UniquenessError,
    UnknownSpeciesError,
    UnterminatedDensityError,
    ValueFormatError,
)
from .parser import CohortSpecificationReader, HarvestBlock, parse_harvest_block
from .planting import PlantingEntry, PlantingList, parse_bounded_int, read_species_list
from .selector_map import SpeciesCohortSelectorMap, print_selection_report
from .selectors import (
    All,
    AllExceptOldest,
    AllExceptYoungest,
    CohortSelectionRule,
    EveryNth,
    Oldest,
    SpecificAges,
    Youngest,
    describe_rule,
    rule_from_keyword,
    select_cohorts,
)
from .species import Species, SpeciesDataset
from .text_input import LineCursor, LineReader
from .validation import AgeSetValidator

__all__ = [
    # Configuration
    "ParserConfig",
    # Species
    "Species",
    "SpeciesDataset",
    # Text input
    "LineReader",
    "LineCursor",
    # Ages and rules
    "AgeRange",
    "parse_age_or_range",
    "AgeSetValidator",
    "CohortSelectionRule",
    "All",
    "Youngest",
    "Oldest",
    "AllExceptYoungest",
    "AllExceptOldest",
    "EveryNth",
    "SpecificAges",
    "rule_from_keyword",
    "select_cohorts",
    "describe_rule",
    # Parsing
    "CohortSpecificationReader",
    "HarvestBlock",
    "parse_harvest_block",
    "SpeciesCohortSelectorMap",
    "print_selection_report",
    # Planting
    "PlantingEntry",
    "PlantingList",
    "read_species_list",
    "parse_bounded_int",
    # Errors
    "ParseError",
    "StructuralError",
    "SpeciesLookupError",
    "UniquenessError",
    "OverlapError",
    "ValueFormatError",
    "UnexpectedTrailingDataError",
    "EmptyBlockError",
    "EmptyPlantingListError",
    "MissingCohortSelectionError",
    "UnknownSpeciesError",
    "DuplicateSpeciesError",
    "DuplicateAgeError",
    "DuplicatePlantingSpeciesError",
    "AgeInRangeError",
    "RangeContainsAgeError",
    "OverlappingRangeError",
    "InvalidAgeError",
    "InvalidRangeError",
    "InvalidDivisorError",
    "MalformedDensityError",
    "DensityOutOfRangeError",
    "MissingDensityValueError",
    "UnterminatedDensityError",
]
