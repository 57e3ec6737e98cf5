"""
Marital status of an individual at the date of a census.

Each spouse family yields a verdict. Verdicts are folded in the order the
families are supplied and the last qualifying verdict decides the status.
Missing dates and facts never raise; they only stop a verdict from being
reached.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from loguru import logger

from genealogy_census.core.models import GenealogyDate, age_at
from genealogy_census.census.subjects import CensusFamily, CensusIndividual


class MaritalStatus(str, Enum):
    """Status of an individual on census day."""
    CHILD = "child"
    UNMARRIED = "unmarried"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


class FamilyVerdict(str, Enum):
    """What one spouse family says about census day."""
    NOT_APPLICABLE = "not_applicable"    # No marriage recorded
    NOT_YET_MARRIED = "not_yet_married"  # Marriage after census day
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"

    @property
    def qualifies(self) -> bool:
        return self in (FamilyVerdict.MARRIED, FamilyVerdict.DIVORCED, FamilyVerdict.WIDOWED)


_STATUS_FOR_VERDICT = {
    FamilyVerdict.MARRIED: MaritalStatus.MARRIED,
    FamilyVerdict.DIVORCED: MaritalStatus.DIVORCED,
    FamilyVerdict.WIDOWED: MaritalStatus.WIDOWED,
}


@dataclass
class ClassifierConfig:
    """Configuration for census status classification."""

    # Individuals younger than this with no qualifying family are children
    adult_age: int = 15

    # When set, a DIV fact dated after census day does not count as divorced.
    # Undated DIV facts always count.
    check_divorce_date: bool = False


DEFAULT_CONFIG = ClassifierConfig()


def as_census_date(census_date: GenealogyDate | str) -> GenealogyDate:
    """Accept a GenealogyDate or GEDCOM date text such as "30 JUN 1830"."""
    if isinstance(census_date, GenealogyDate):
        return census_date
    return GenealogyDate.from_gedcom(census_date)


def _divorced_by(family: CensusFamily, census_date: GenealogyDate, config: ClassifierConfig) -> bool:
    divorces = family.facts_of_type("DIV")
    if not divorces:
        return False
    if not config.check_divorce_date:
        return True
    for fact in divorces:
        if fact.date is None or not fact.date.is_after(census_date):
            return True
    return False


def classify_family(
    family: CensusFamily,
    census_date: GenealogyDate | str,
    config: ClassifierConfig | None = None,
) -> FamilyVerdict:
    """
    Verdict of a single spouse family on census day.

    1. No MARR fact and no known marriage date: not applicable.
    2. Marriage known to be after census day: not yet married.
    3. Any DIV fact: divorced.
    4. Spouse known to have died on or before census day: widowed.
    5. Otherwise married.
    """
    config = config or DEFAULT_CONFIG
    census_date = as_census_date(census_date)
    marriage_date = family.marriage_date()

    if not family.facts_of_type("MARR") and not marriage_date.is_known:
        return FamilyVerdict.NOT_APPLICABLE

    if marriage_date.is_after(census_date):
        return FamilyVerdict.NOT_YET_MARRIED

    if _divorced_by(family, census_date, config):
        return FamilyVerdict.DIVORCED

    spouse = family.spouse()
    if spouse is not None and spouse.death_date().on_or_before(census_date):
        return FamilyVerdict.WIDOWED

    return FamilyVerdict.MARRIED


def fold_verdicts(verdicts: Iterable[FamilyVerdict]) -> FamilyVerdict:
    """Last qualifying verdict, or NOT_APPLICABLE when none qualifies."""
    result = FamilyVerdict.NOT_APPLICABLE
    for verdict in verdicts:
        if verdict.qualifies:
            result = verdict
    return result


def classify(
    individual: CensusIndividual,
    census_date: GenealogyDate | str,
    config: ClassifierConfig | None = None,
) -> MaritalStatus:
    """Marital status of an individual on census day."""
    config = config or DEFAULT_CONFIG
    census_date = as_census_date(census_date)

    families = list(individual.spousal_families())
    if not families:
        return MaritalStatus.UNMARRIED

    verdicts = []
    for family in families:
        verdict = classify_family(family, census_date, config)
        logger.debug(f"{family!r} on {census_date.to_gedcom()}: {verdict.value}")
        verdicts.append(verdict)

    verdict = fold_verdicts(verdicts)
    if verdict.qualifies:
        return _STATUS_FOR_VERDICT[verdict]

    age = age_at(individual.estimated_birth_date(), census_date)
    if age is not None and age < config.adult_age:
        return MaritalStatus.CHILD
    return MaritalStatus.UNMARRIED
