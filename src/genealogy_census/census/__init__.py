"""Census status classification and condition columns."""

from genealogy_census.census.status import (
    ClassifierConfig,
    FamilyVerdict,
    MaritalStatus,
    classify,
    classify_family,
)
from genealogy_census.census.columns import CensusColumn, CensusDefinition, CensusRegistry
from genealogy_census.census.subjects import (
    CensusFamily,
    CensusIndividual,
    CensusSpouse,
    TreeFamily,
    TreeIndividual,
    ensure_individual,
)

__all__ = [
    "ClassifierConfig",
    "FamilyVerdict",
    "MaritalStatus",
    "classify",
    "classify_family",
    "CensusColumn",
    "CensusDefinition",
    "CensusRegistry",
    "CensusFamily",
    "CensusIndividual",
    "CensusSpouse",
    "TreeFamily",
    "TreeIndividual",
    "ensure_individual",
]
