"""
Genealogy Census

Marital status of individuals on census day, rendered into census-form
condition columns.
"""

__version__ = "0.1.0"

from genealogy_census.core.models import (
    Person,
    Family,
    Event,
    GenealogyDate,
    DateOrder,
)
from genealogy_census.census.status import (
    ClassifierConfig,
    MaritalStatus,
    classify,
)
from genealogy_census.census.columns import (
    CensusColumn,
    CensusDefinition,
    CensusRegistry,
)

__all__ = [
    "Person",
    "Family",
    "Event",
    "GenealogyDate",
    "DateOrder",
    "ClassifierConfig",
    "MaritalStatus",
    "classify",
    "CensusColumn",
    "CensusDefinition",
    "CensusRegistry",
]
