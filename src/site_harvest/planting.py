"""
Species planting lists.

A planting list names the species to plant at a site after its cohorts are
removed. Each species may carry a planting density in parentheses:

    Plant pinubank (500) querelli acerrubr(1200)

Species keep the order they are written in.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

from .config import ParserConfig
from .errors import (
    DensityOutOfRangeError,
    DuplicatePlantingSpeciesError,
    EmptyPlantingListError,
    MalformedDensityError,
    MissingDensityValueError,
    ParseError,
    UnknownSpeciesError,
    UnterminatedDensityError,
)
from .species import Species, SpeciesResolver
from .text_input import LineCursor

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class PlantingEntry:
    """
    One species in a planting list.

    Attributes:
        species: Species to plant
        density: Planting density, or None if none was given
    """

    species: Species
    density: int | None = None


@dataclass(frozen=True)
class PlantingList:
    """Ordered species to plant; each species appears once."""

    entries: tuple[PlantingEntry, ...]

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))
        names = [entry.species.name for entry in self.entries]
        if len(names) != len(set(names)):
            duplicates = sorted({name for name in names if names.count(name) > 1})
            raise DuplicatePlantingSpeciesError(
                f"Species appear more than once in planting list: {duplicates}",
                text=duplicates[0],
            )

    @property
    def species(self) -> tuple[Species, ...]:
        return tuple(entry.species for entry in self.entries)

    def density_of(self, species: Species) -> int | None:
        for entry in self.entries:
            if entry.species == species:
                return entry.density
        raise KeyError(f"{species} is not in the planting list")

    def __contains__(self, species: object) -> bool:
        return any(entry.species == species for entry in self.entries)

    def __iter__(self) -> Iterator[PlantingEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> PlantingEntry:
        return self.entries[index]


def parse_bounded_int(
    text: str,
    low: int,
    high: int,
    *,
    malformed: type[ParseError] = MalformedDensityError,
    out_of_range: type[ParseError] = DensityOutOfRangeError,
) -> int:
    """
    Parse an integer literal and check it lies in [low, high].

    Args:
        text: Literal text (optional sign, ASCII digits)
        low: Smallest value accepted
        high: Largest value accepted
        malformed: Error raised if the text is not an integer
        out_of_range: Error raised if the value is outside the bounds

    Returns:
        The parsed value
    """
    if not _INTEGER.fullmatch(text):
        raise malformed(f'"{text}" is not a valid integer', text=text)
    value = int(text)
    if not low <= value <= high:
        raise out_of_range(f"{text} is not between {low:,} and {high:,}", text=text)
    return value


def read_density(cursor: LineCursor, config: ParserConfig) -> int:
    """
    Read a parenthesized density, with the cursor on the "(".

    Whitespace inside the parentheses is allowed: "( 500 )".
    """
    start = cursor.index
    cursor.index += 1

    value_text = cursor.read_word(stop=")")
    if not value_text:
        raise MissingDensityValueError(
            "Missing density value inside parentheses", text=cursor.text[start : cursor.index + 1]
        )

    density = parse_bounded_int(value_text, config.min_density, config.max_density)

    cursor.skip_whitespace()
    if cursor.peek() != ")":
        raise UnterminatedDensityError(
            f'Expected ")" after the density {value_text}',
            text=cursor.text[start : cursor.index],
        )
    cursor.index += 1
    return density


def read_species_list(
    source: str | LineCursor,
    species_dataset: SpeciesResolver,
    config: ParserConfig | None = None,
) -> PlantingList:
    """
    Read species names, each with an optional density, up to end of line.

    Args:
        source: Text after the "Plant" keyword (or a cursor positioned there)
        species_dataset: Resolves species names
        config: Density bounds (defaults to ParserConfig())

    Returns:
        The planting list in input order

    Raises:
        EmptyPlantingListError: If no species are listed
        UnknownSpeciesError: If a name is not a species
        DuplicatePlantingSpeciesError: If a species is listed twice
        MissingDensityValueError, MalformedDensityError,
        DensityOutOfRangeError, UnterminatedDensityError: For bad densities
    """
    if config is None:
        config = ParserConfig()
    cursor = source if isinstance(source, LineCursor) else LineCursor(source)

    entries: list[PlantingEntry] = []
    seen: set[Species] = set()

    cursor.skip_whitespace()
    while not cursor.at_end:
        name = cursor.read_word(stop="(")
        if not name:
            raise UnknownSpeciesError(
                f'Expected a species name, found "{cursor.rest}"', text=cursor.rest
            )
        species = species_dataset.lookup(name)
        if species is None:
            raise UnknownSpeciesError(f"{name} is not a species name", text=name)
        if species in seen:
            raise DuplicatePlantingSpeciesError(
                f"The species {name} appears more than once", text=name
            )
        seen.add(species)

        cursor.skip_whitespace()
        density = None
        if cursor.peek() == "(":
            density = read_density(cursor, config)
        entries.append(PlantingEntry(species, density))

        cursor.skip_whitespace()

    if not entries:
        raise EmptyPlantingListError("Expected one or more species to plant", text="")

    return PlantingList(tuple(entries))
