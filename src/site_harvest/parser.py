"""
Reader for blocks of per-species cohort selection lines.

A block lists one species per line, followed by either a cohort keyword or
one or more cohort ages and age ranges:

    pinubank  All
    querelli  AllExceptYoungest
    acerrubr  1/2
    betupapy  10 20-40 80-120

A block ends at end of input or at a line whose first word is one of the
caller's terminator keywords. The same reader handles the optional
"AdditionalCohortsRemoved" list, the "PreventEstablishment" flag and the
"Plant" line that may follow.
"""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from loguru import logger

from .age_range import AgeRange
from .config import (
    ADDITIONAL_COHORTS_REMOVED,
    PLANT,
    PREVENT_ESTABLISHMENT,
    ParserConfig,
)
from .errors import (
    DuplicateSpeciesError,
    EmptyBlockError,
    MissingCohortSelectionError,
    ParseError,
    UnexpectedTrailingDataError,
    UnknownSpeciesError,
)
from .planting import PlantingList, read_species_list
from .selector_map import SpeciesCohortSelectorMap
from .selectors import CohortSelectionRule, SpecificAges, describe_rule, rule_from_keyword
from .species import Species, SpeciesResolver
from .text_input import LineCursor, LineReader
from .validation import AgeSetValidator


@contextmanager
def _at_line(line_number: int | None) -> Iterator[None]:
    """Attach a line number to parse errors raised inside the block."""
    try:
        yield
    except ParseError as err:
        if err.line_number is None:
            err.line_number = line_number
        raise


class CohortSpecificationReader:
    """
    Reads cohort selection rules and planting lists from parameter text.

    Args:
        lines: Text to read, as a LineReader, a string or a list of lines
        species_dataset: Resolves species names (any object with ``lookup``)
        config: Parser options (defaults to ParserConfig())

    Attributes:
        species_line_numbers: Line on which each species of the current
            block was found; reset at the start of every block
    """

    def __init__(
        self,
        lines: LineReader | str | Iterable[str],
        species_dataset: SpeciesResolver,
        config: ParserConfig | None = None,
    ):
        self.lines = lines if isinstance(lines, LineReader) else LineReader(lines)
        self.species_dataset = species_dataset
        self.config = config if config is not None else ParserConfig()
        self.species_line_numbers: dict[Species, int] = {}

    def read_species(self, cursor: LineCursor) -> Species:
        """
        Read a species name from the current line.

        Raises:
            UnknownSpeciesError: If the name is not in the species dataset
            DuplicateSpeciesError: If the species was on an earlier line of
                the same block
        """
        name = cursor.read_word()
        species = self.species_dataset.lookup(name)
        if species is None:
            raise UnknownSpeciesError(f"{name} is not a species name", text=name)

        previous_line = self.species_line_numbers.get(species)
        if previous_line is not None:
            raise DuplicateSpeciesError(
                f"The species {name} was previously used on line {previous_line}",
                text=name,
            )
        self.species_line_numbers[species] = self.lines.line_number
        return species

    def read_species_and_cohorts(
        self,
        *terminators: str,
        into: SpeciesCohortSelectorMap | None = None,
    ) -> SpeciesCohortSelectorMap:
        """
        Read species lines until end of input or a terminator keyword.

        Args:
            terminators: Keywords that start the next section
            into: Map to fill in (a new one is created if None)

        Returns:
            The filled-in map, frozen

        Raises:
            EmptyBlockError: If no species line precedes the terminator
            ParseError: For any invalid line (annotated with its line number)
        """
        selector_map = into if into is not None else SpeciesCohortSelectorMap()
        if selector_map.frozen:
            raise TypeError("Cannot read rules into a frozen SpeciesCohortSelectorMap")
        self.species_line_numbers = {}
        rules: dict[Species, CohortSelectionRule] = {}

        while not self.lines.at_end and self.lines.current_name not in terminators:
            with _at_line(self.lines.line_number):
                species, rule = self._read_cohort_line()
                if species in selector_map:
                    raise DuplicateSpeciesError(
                        f"The species {species} already has a cohort selection rule",
                        text=species.name,
                    )
            rules[species] = rule
            logger.debug(
                "Line {}: {} -> {}", self.lines.line_number, species, describe_rule(rule)
            )
            self.lines.advance()

        if not self.species_line_numbers:
            found = self.lines.current_name
            raise EmptyBlockError(
                "Expected a line starting with a species name"
                + (f', found "{found}"' if found else ""),
                text=found,
                line_number=self.lines.line_number,
            )

        # The map is only touched once the whole block has been read
        for species, rule in rules.items():
            selector_map[species] = rule

        logger.debug("Read cohort selection rules for {} species", len(selector_map))
        return selector_map.freeze()

    def _read_cohort_line(self) -> tuple[Species, CohortSelectionRule]:
        cursor = LineCursor(self.lines.current_line)
        species = self.read_species(cursor)

        # Cohort keyword, cohort age or cohort age range
        cursor.skip_whitespace()
        data_start = cursor.index
        word = cursor.read_word()
        if not word:
            raise MissingCohortSelectionError(
                "No cohort keyword, age or age range after the species name",
                text=species.name,
            )

        if self.config.keywords_enabled:
            rule = rule_from_keyword(word, self.config.max_divisor)
            if rule is not None:
                self._check_no_data_after(f'the keyword "{word}"', cursor)
                return species, rule

        validator = AgeSetValidator(self.config.max_age)
        cursor = LineCursor(cursor.text, data_start)
        while True:
            token = cursor.read_word()
            if not token:
                break
            validator.add(token)
        return species, self.create_specific_ages_rule(
            species, validator.ages, validator.ranges
        )

    def create_specific_ages_rule(
        self,
        species: Species,
        ages: frozenset[int],
        ranges: tuple[AgeRange, ...],
    ) -> CohortSelectionRule:
        """
        Create the rule for a species from its validated ages and ranges.

        Subclasses can override this to handle ages and ranges differently
        (for example, percentages for partial harvesting).
        """
        return SpecificAges(ages=ages, ranges=ranges)

    @staticmethod
    def _check_no_data_after(what: str, cursor: LineCursor) -> None:
        extra = cursor.read_word()
        if extra:
            raise UnexpectedTrailingDataError(
                f'Extra data "{extra}{cursor.rest}" after {what}',
                text=extra,
            )

    def read_prevent_establishment(self) -> bool:
        """Read the optional "PreventEstablishment" keyword line."""
        return self.lines.read_optional_name(PREVENT_ESTABLISHMENT)

    def read_species_to_plant(self) -> PlantingList | None:
        """
        Read the optional "Plant" line listing species to plant.

        Returns:
            The planting list, or None if the current line is not "Plant"
        """
        if self.lines.at_end or self.lines.current_name != PLANT:
            return None

        cursor = LineCursor(self.lines.current_line)
        cursor.read_word()
        with _at_line(self.lines.line_number):
            planting = read_species_list(cursor, self.species_dataset, self.config)
        logger.debug(
            "Line {}: plant {}",
            self.lines.line_number,
            ", ".join(entry.species.name for entry in planting),
        )
        self.lines.advance()
        return planting


@dataclass(frozen=True)
class HarvestBlock:
    """
    Everything read from one harvest block.

    Attributes:
        cohort_selector: Rules for the cohorts to remove
        additional_cohort_selector: Rules for the "AdditionalCohortsRemoved"
            list, or None if the block has none
        prevent_establishment: Whether the "PreventEstablishment" flag was given
        planting: Species to plant, or None if the block has no "Plant" line
    """

    cohort_selector: SpeciesCohortSelectorMap
    additional_cohort_selector: SpeciesCohortSelectorMap | None = None
    prevent_establishment: bool = False
    planting: PlantingList | None = None


def parse_harvest_block(
    text: str | Iterable[str],
    species_dataset: SpeciesResolver,
    config: ParserConfig | None = None,
) -> HarvestBlock:
    """
    Parse a complete harvest block.

    Layout (optional parts in brackets):

        <species lines>
        [AdditionalCohortsRemoved
         <species lines>]
        [PreventEstablishment]
        [Plant <species> [(<density>)] ...]

    Args:
        text: Block text or list of lines
        species_dataset: Resolves species names
        config: Parser options

    Returns:
        HarvestBlock with the parsed rules and planting list

    Raises:
        ParseError: For the first invalid line; nothing is returned partially
    """
    reader = CohortSpecificationReader(text, species_dataset, config)

    cohort_selector = reader.read_species_and_cohorts(
        ADDITIONAL_COHORTS_REMOVED, PREVENT_ESTABLISHMENT, PLANT
    )

    additional_cohort_selector = None
    if reader.lines.read_optional_name(ADDITIONAL_COHORTS_REMOVED):
        additional_cohort_selector = reader.read_species_and_cohorts(
            PREVENT_ESTABLISHMENT, PLANT
        )

    prevent_establishment = reader.read_prevent_establishment()
    planting = reader.read_species_to_plant()

    if not reader.lines.at_end:
        raise UnexpectedTrailingDataError(
            f'Unexpected line "{reader.lines.current_line.strip()}"',
            text=reader.lines.current_name,
            line_number=reader.lines.line_number,
        )

    logger.info(
        "Parsed harvest block: {} species removed, {} additional, {} to plant",
        len(cohort_selector),
        len(additional_cohort_selector) if additional_cohort_selector else 0,
        len(planting) if planting else 0,
    )
    return HarvestBlock(
        cohort_selector=cohort_selector,
        additional_cohort_selector=additional_cohort_selector,
        prevent_establishment=prevent_establishment,
        planting=planting,
    )
