"""
Tree species and the species dataset used to resolve names.

The host simulator owns the real dataset; any object with a
``lookup(name) -> Species | None`` method can be passed to the readers.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Species:
    """
    A tree species.

    Attributes:
        name: Species code as written in parameter files (e.g. "pinubank")
        index: Position of the species in its dataset
    """

    name: str
    index: int

    def __str__(self) -> str:
        return self.name


class SpeciesResolver(Protocol):
    def lookup(self, name: str) -> Species | None: ...


class SpeciesDataset:
    """
    Ordered collection of species, looked up by exact name.

    Example:
        >>> dataset = SpeciesDataset(["pinubank", "querelli"])
        >>> dataset.lookup("querelli")
        Species(name='querelli', index=1)
        >>> dataset.lookup("QUERELLI") is None
        True
    """

    def __init__(self, names: Iterable[str]):
        self._species: list[Species] = []
        self._by_name: dict[str, Species] = {}
        for name in names:
            if name in self._by_name:
                raise ValueError(f"Duplicate species name in dataset: {name}")
            species = Species(name=name, index=len(self._species))
            self._species.append(species)
            self._by_name[name] = species

    def lookup(self, name: str) -> Species | None:
        return self._by_name.get(name)

    def __getitem__(self, name: str) -> Species:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"{name} is not a species name") from None

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Species]:
        return iter(self._species)

    def __len__(self) -> int:
        return len(self._species)
