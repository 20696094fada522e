"""
Tests for the cohort-specification block reader and whole-block parsing.
"""

import pytest

from site_harvest.age_range import AgeRange
from site_harvest.config import ParserConfig
from site_harvest.errors import (
    AgeInRangeError,
    DensityOutOfRangeError,
    DuplicateAgeError,
    DuplicateSpeciesError,
    EmptyBlockError,
    InvalidAgeError,
    InvalidDivisorError,
    MissingCohortSelectionError,
    OverlappingRangeError,
    ParseError,
    RangeContainsAgeError,
    UnexpectedTrailingDataError,
    UnknownSpeciesError,
)
from site_harvest.parser import CohortSpecificationReader, parse_harvest_block
from site_harvest.planting import PlantingEntry
from site_harvest.selector_map import SpeciesCohortSelectorMap
from site_harvest.selectors import (
    All,
    AllExceptOldest,
    AllExceptYoungest,
    EveryNth,
    Oldest,
    SpecificAges,
    Youngest,
    select_cohorts,
)
from site_harvest.species import SpeciesDataset


@pytest.fixture
def species():
    return SpeciesDataset(["PinuSyl", "PinuBan", "QuerRubr", "AcerRubr", "BetuPapy"])


def read_block(text, species, *terminators, config=None):
    reader = CohortSpecificationReader(text, species, config)
    return reader.read_species_and_cohorts(*terminators)


class TestReadSpeciesAndCohorts:
    def test_keywords(self, species):
        text = """PinuSyl All
PinuBan Youngest
QuerRubr AllExceptYoungest
AcerRubr Oldest
BetuPapy AllExceptOldest
"""
        rules = read_block(text, species)
        assert dict(rules) == {
            species["PinuSyl"]: All(),
            species["PinuBan"]: Youngest(),
            species["QuerRubr"]: AllExceptYoungest(),
            species["AcerRubr"]: Oldest(),
            species["BetuPapy"]: AllExceptOldest(),
        }
        assert rules.frozen

    def test_every_nth(self, species):
        rules = read_block("PinuSyl 1/4", species)
        assert rules[species["PinuSyl"]] == EveryNth(4)

    def test_ages_and_ranges(self, species):
        rules = read_block("PinuSyl 10 20-40   80-120", species)
        assert rules[species["PinuSyl"]] == SpecificAges(
            ages=frozenset({10}), ranges=(AgeRange(20, 40), AgeRange(80, 120))
        )

    def test_stops_at_terminator(self, species):
        reader = CohortSpecificationReader(
            "PinuSyl All\nPinuBan 10\nPlant QuerRubr\n", species
        )
        rules = reader.read_species_and_cohorts("Plant", "PreventEstablishment")
        assert len(rules) == 2
        assert reader.lines.current_name == "Plant"

    def test_comments_and_blank_lines_ignored(self, species):
        text = ">> species to cut\n\nPinuSyl All  >> clear\n\n"
        rules = read_block(text, species)
        assert list(rules) == [species["PinuSyl"]]

    def test_duplicate_age(self, species):
        with pytest.raises(DuplicateAgeError) as exc_info:
            read_block("PinuSyl 10 10", species)
        assert exc_info.value.text == "10"
        assert exc_info.value.line_number == 1

    def test_range_contains_age(self, species):
        with pytest.raises(RangeContainsAgeError):
            read_block("PinuSyl 10 5-15", species)

    def test_age_in_range(self, species):
        with pytest.raises(AgeInRangeError, match="lies within the range 5-15"):
            read_block("PinuSyl 5-15 10", species)

    def test_overlapping_ranges(self, species):
        with pytest.raises(OverlappingRangeError, match="line 2"):
            read_block("PinuBan All\nPinuSyl 10-20 15-30", species)

    def test_same_ages_for_different_species_allowed(self, species):
        rules = read_block("PinuSyl 10 20-30\nPinuBan 10 20-30", species)
        assert rules[species["PinuSyl"]] == rules[species["PinuBan"]]

    def test_every_nth_zero(self, species):
        with pytest.raises(InvalidDivisorError):
            read_block("PinuSyl 1/0", species)

    def test_every_nth_not_a_number(self, species):
        with pytest.raises(InvalidDivisorError):
            read_block("PinuSyl 1/abc", species)

    @pytest.mark.parametrize("line", ["PinuSyl All 10", "PinuSyl Oldest Youngest", "PinuSyl 1/2 x"])
    def test_data_after_keyword(self, species, line):
        with pytest.raises(UnexpectedTrailingDataError, match="after the keyword"):
            read_block(line, species)

    def test_keyword_after_ages_is_invalid_age(self, species):
        with pytest.raises(InvalidAgeError, match='"All"'):
            read_block("PinuSyl 10 All", species)

    def test_keywords_are_case_exact(self, species):
        with pytest.raises(InvalidAgeError):
            read_block("PinuSyl oldest", species)

    def test_keywords_disabled(self, species):
        config = ParserConfig(keywords_enabled=False)
        rules = read_block("PinuSyl 10 20-30", species, config=config)
        assert rules[species["PinuSyl"]] == SpecificAges(
            ages=frozenset({10}), ranges=(AgeRange(20, 30),)
        )
        with pytest.raises(InvalidAgeError):
            read_block("PinuSyl All", species, config=config)
        with pytest.raises(InvalidAgeError):
            read_block("PinuSyl 1/2", species, config=config)

    def test_unknown_species(self, species):
        with pytest.raises(UnknownSpeciesError, match="PinuFoo is not a species name"):
            read_block("PinuSyl All\nPinuFoo All", species)

    def test_duplicate_species_cites_earlier_line(self, species):
        text = "PinuSyl All\n\nPinuBan 10\nPinuSyl Oldest\n"
        with pytest.raises(DuplicateSpeciesError, match="previously used on line 1") as exc_info:
            read_block(text, species)
        assert exc_info.value.line_number == 4
        assert exc_info.value.text == "PinuSyl"

    def test_missing_cohort_selection(self, species):
        with pytest.raises(MissingCohortSelectionError, match="after the species name"):
            read_block("PinuSyl", species)

    def test_empty_block_at_terminator(self, species):
        with pytest.raises(EmptyBlockError, match='found "Plant"') as exc_info:
            read_block("Plant PinuSyl", species, "Plant")
        assert exc_info.value.line_number == 1

    def test_empty_block_at_end_of_input(self, species):
        with pytest.raises(EmptyBlockError):
            read_block(">> nothing here\n", species)

    def test_errors_are_parse_errors(self, species):
        with pytest.raises(ParseError):
            read_block("PinuSyl 10-5", species)

    def test_writes_into_given_map(self, species):
        target = SpeciesCohortSelectorMap()
        reader = CohortSpecificationReader("PinuSyl All", species)
        result = reader.read_species_and_cohorts(into=target)
        assert result is target
        assert target.frozen
        assert target[species["PinuSyl"]] == All()

    def test_given_map_untouched_when_a_later_line_fails(self, species):
        target = SpeciesCohortSelectorMap()
        reader = CohortSpecificationReader("PinuSyl All\nPinuBan 10 10", species)
        with pytest.raises(DuplicateAgeError):
            reader.read_species_and_cohorts(into=target)
        assert len(target) == 0
        assert not target.frozen

    def test_given_map_untouched_when_block_is_empty(self, species):
        target = SpeciesCohortSelectorMap()
        reader = CohortSpecificationReader("Plant PinuSyl", species)
        with pytest.raises(EmptyBlockError):
            reader.read_species_and_cohorts("Plant", into=target)
        assert len(target) == 0
        assert not target.frozen

    def test_species_already_in_given_map(self, species):
        target = SpeciesCohortSelectorMap({species["PinuBan"]: Oldest()})
        reader = CohortSpecificationReader("PinuSyl All\nPinuBan Youngest", species)
        with pytest.raises(DuplicateSpeciesError, match="line 2"):
            reader.read_species_and_cohorts(into=target)
        assert dict(target) == {species["PinuBan"]: Oldest()}

    def test_frozen_given_map_rejected(self, species):
        target = SpeciesCohortSelectorMap().freeze()
        reader = CohortSpecificationReader("PinuSyl All", species)
        with pytest.raises(TypeError, match="frozen"):
            reader.read_species_and_cohorts(into=target)

    def test_species_line_numbers_reset_per_block(self, species):
        reader = CohortSpecificationReader(
            "PinuSyl All\nNext\nPinuSyl Oldest\n", species
        )
        first = reader.read_species_and_cohorts("Next")
        assert reader.lines.read_optional_name("Next")
        second = reader.read_species_and_cohorts()
        assert first[species["PinuSyl"]] == All()
        assert second[species["PinuSyl"]] == Oldest()
        assert reader.species_line_numbers == {species["PinuSyl"]: 3}

    def test_parsed_all_selects_every_cohort(self, species):
        rules = read_block("PinuSyl All\nPinuBan Youngest\nQuerRubr AllExceptYoungest", species)
        ages = [5, 5, 10, 30]
        assert select_cohorts(rules[species["PinuSyl"]], ages) == ages
        youngest = select_cohorts(rules[species["PinuBan"]], ages)
        rest = select_cohorts(rules[species["QuerRubr"]], ages)
        assert sorted(youngest + rest) == ages


class CustomRuleReader(CohortSpecificationReader):
    def create_specific_ages_rule(self, species, ages, ranges):
        return EveryNth(len(ages) + len(ranges))


class TestCreateSpecificAgesRuleHook:
    def test_subclass_can_override(self, species):
        reader = CustomRuleReader("PinuSyl 10 20 30-40", species)
        rules = reader.read_species_and_cohorts()
        assert rules[species["PinuSyl"]] == EveryNth(3)


class TestParseHarvestBlock:
    TEXT = """>> Clear-cut with replanting
PinuSyl   All
PinuBan   10 20-40
AdditionalCohortsRemoved
PinuSyl   Oldest
PreventEstablishment
Plant PinuSyl (500) PinuBan
"""

    def test_full_block(self, species):
        block = parse_harvest_block(self.TEXT, species)
        assert dict(block.cohort_selector) == {
            species["PinuSyl"]: All(),
            species["PinuBan"]: SpecificAges(
                ages=frozenset({10}), ranges=(AgeRange(20, 40),)
            ),
        }
        assert dict(block.additional_cohort_selector) == {species["PinuSyl"]: Oldest()}
        assert block.prevent_establishment is True
        assert list(block.planting) == [
            PlantingEntry(species["PinuSyl"], 500),
            PlantingEntry(species["PinuBan"], None),
        ]

    def test_minimal_block(self, species):
        block = parse_harvest_block("QuerRubr 1/2", species)
        assert dict(block.cohort_selector) == {species["QuerRubr"]: EveryNth(2)}
        assert block.additional_cohort_selector is None
        assert block.prevent_establishment is False
        assert block.planting is None

    def test_accepts_list_of_lines(self, species):
        block = parse_harvest_block(["PinuSyl All", "Plant QuerRubr(10)"], species)
        assert block.planting.density_of(species["QuerRubr"]) == 10

    def test_empty_additional_list(self, species):
        with pytest.raises(EmptyBlockError, match="line 3"):
            parse_harvest_block("PinuSyl All\nAdditionalCohortsRemoved\nPlant PinuBan", species)

    def test_planting_errors_carry_line_number(self, species):
        with pytest.raises(DensityOutOfRangeError) as exc_info:
            parse_harvest_block("PinuSyl All\nPlant PinuBan (200000)", species)
        assert exc_info.value.line_number == 2
        assert exc_info.value.text == "200000"

    def test_line_after_plant_raises(self, species):
        with pytest.raises(UnexpectedTrailingDataError, match="Unexpected line"):
            parse_harvest_block("PinuSyl All\nPlant PinuBan\nQuerRubr All", species)

    def test_prevent_establishment_with_extra_data_raises(self, species):
        with pytest.raises(UnexpectedTrailingDataError):
            parse_harvest_block("PinuSyl All\nPreventEstablishment now", species)

    def test_no_species_lines(self, species):
        with pytest.raises(EmptyBlockError):
            parse_harvest_block("Plant PinuSyl", species)
