"""
Configuration dataclasses and constants for harvest-specification parsing.

The numeric bounds below mirror the literal range checks of the host
simulator's parameter files (unsigned 16-bit ages and divisors, densities
up to 100000). They are policy values, not derived invariants.
"""

import os
from dataclasses import dataclass, field


# Parameter names recognised in a harvest block
PLANT = "Plant"
PREVENT_ESTABLISHMENT = "PreventEstablishment"
ADDITIONAL_COHORTS_REMOVED = "AdditionalCohortsRemoved"

# Text after this marker on a line is ignored
COMMENT_MARKER = ">>"

# Prefix of the "1/N" cohort keyword
EVERY_NTH_PREFIX = "1/"

# Default bounds
MAX_AGE = 65535
MAX_DIVISOR = 65535
MIN_DENSITY = 0
DEFAULT_MAX_DENSITY = 100000
MAX_DENSITY_ENV = "SITE_HARVEST_MAX_DENSITY"


def default_max_density() -> int:
    """Largest planting density, from SITE_HARVEST_MAX_DENSITY if set."""
    value = os.environ.get(MAX_DENSITY_ENV)
    if value is None:
        return DEFAULT_MAX_DENSITY
    try:
        return int(value)
    except ValueError:
        raise ValueError(
            f"{MAX_DENSITY_ENV} must be an integer, got {value!r}"
        ) from None


@dataclass
class ParserConfig:
    """
    Configuration for a cohort-specification reader.

    Attributes:
        keywords_enabled: Accept keywords like "Oldest" and "1/N"; when False
            these words are read as (invalid) ages
        max_age: Largest cohort age accepted in an age or age range
        max_divisor: Largest N accepted in "1/N"
        min_density: Smallest planting density accepted
        max_density: Largest planting density accepted
    """

    keywords_enabled: bool = True
    max_age: int = MAX_AGE
    max_divisor: int = MAX_DIVISOR
    min_density: int = MIN_DENSITY
    max_density: int = field(default_factory=default_max_density)

    def __post_init__(self):
        """Validate configuration."""
        if self.max_age < 0:
            raise ValueError(f"max_age must be >= 0, got {self.max_age}")
        if self.max_divisor < 1:
            raise ValueError(f"max_divisor must be >= 1, got {self.max_divisor}")
        if self.min_density < 0:
            raise ValueError(f"min_density must be >= 0, got {self.min_density}")
        if self.min_density > self.max_density:
            raise ValueError(
                f"min_density ({self.min_density}) must be <= max_density ({self.max_density})"
            )
