"""
Per-species cohort selection rules for one parsed block.

The map is filled in by the block reader and frozen once the block has been
read; after that it is a read-only mapping from species to rule.
"""

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

import pandas as pd

from .errors import DuplicateSpeciesError
from .selectors import CohortSelectionRule, describe_rule, select_cohorts
from .species import Species


class SpeciesCohortSelectorMap(Mapping):
    """
    Mapping from species to its cohort selection rule.

    Each species has at most one rule. Rules can be added until ``freeze``
    is called.
    """

    def __init__(self, rules: Mapping[Species, CohortSelectionRule] | None = None):
        self._rules: dict[Species, CohortSelectionRule] = {}
        self._frozen = False
        for species, rule in (rules or {}).items():
            self[species] = rule

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "SpeciesCohortSelectorMap":
        self._frozen = True
        return self

    def __setitem__(self, species: Species, rule: CohortSelectionRule) -> None:
        if self._frozen:
            raise TypeError("Cannot add rules to a frozen SpeciesCohortSelectorMap")
        if species in self._rules:
            raise DuplicateSpeciesError(
                f"The species {species} already has a cohort selection rule",
                text=str(species),
            )
        self._rules[species] = rule

    def __getitem__(self, species: Species) -> CohortSelectionRule:
        return self._rules[species]

    def __iter__(self) -> Iterator[Species]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        rules = ", ".join(f"{s}: {describe_rule(r)}" for s, r in self._rules.items())
        return f"SpeciesCohortSelectorMap({{{rules}}})"

    def select(
        self,
        species: Species,
        cohorts: Iterable[Any],
        key: Callable[[Any], int] | None = None,
    ) -> list[Any]:
        """
        Select cohorts of one species.

        Args:
            species: Species the cohorts belong to
            cohorts: The species' cohorts at a site
            key: Returns a cohort's age; if None the cohorts are ages

        Returns:
            Selected cohorts (empty if the species has no rule)
        """
        rule = self._rules.get(species)
        if rule is None:
            return []
        return select_cohorts(rule, cohorts, key=key)

    def select_frame(
        self,
        cohorts: pd.DataFrame,
        species_col: str = "SPECIES",
        age_col: str = "AGE",
    ) -> pd.DataFrame:
        """
        Apply the rules to a table of cohorts.

        Args:
            cohorts: One row per cohort, with species name and age columns
            species_col: Column holding species names (or Species objects)
            age_col: Column holding cohort ages

        Returns:
            The selected rows, in their original order
        """
        missing = [col for col in (species_col, age_col) if col not in cohorts.columns]
        if missing:
            raise ValueError(f"Cohort data missing required columns: {missing}")
        if not pd.api.types.is_integer_dtype(cohorts[age_col]):
            raise ValueError(
                f"Cohort ages must be integers, got {cohorts[age_col].dtype} in column {age_col!r}"
            )

        rules_by_name = {species.name: rule for species, rule in self._rules.items()}
        names = cohorts[species_col].astype(str).to_numpy()
        ages = cohorts[age_col].to_numpy()

        positions_by_name: dict[str, list[int]] = {}
        for position, name in enumerate(names):
            if name in rules_by_name:
                positions_by_name.setdefault(name, []).append(position)

        selected: list[int] = []
        for name, positions in positions_by_name.items():
            selected.extend(
                select_cohorts(rules_by_name[name], positions, key=lambda p: int(ages[p]))
            )

        return cohorts.iloc[sorted(selected)]

    def to_frame(self) -> pd.DataFrame:
        """One row per species with its rule in input-language form."""
        return pd.DataFrame(
            {
                "species": [species.name for species in self._rules],
                "rule": [describe_rule(rule) for rule in self._rules.values()],
            },
            columns=["species", "rule"],
        )


def print_selection_report(selector_map: SpeciesCohortSelectorMap) -> None:
    """
    Print a summary of the cohort selection rules.

    Args:
        selector_map: Rules returned by the block reader
    """
    table = selector_map.to_frame()

    print("\nCohort Selection Rules:")
    print(f"  Species with rules: {len(table)}")
    if len(table) > 0:
        print()
        for _, row in table.iterrows():
            print(f"    {row['species']:<16} {row['rule']}")
