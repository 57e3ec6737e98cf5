"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from genealogy_census.core.gedcom import GedcomManager
from genealogy_census.core.models import Event, GenealogyDate
from genealogy_census.census.columns import CensusRegistry


# =============================================================================
# In-memory individuals and families
# =============================================================================

@dataclass
class FakeIndividual:
    """Individual built directly in a test."""
    gender: str = "U"
    birth: str = ""
    death: str = ""
    families: list["FakeFamily"] = field(default_factory=list)

    def sex(self) -> str:
        return self.gender

    def estimated_birth_date(self) -> GenealogyDate:
        return GenealogyDate.from_gedcom(self.birth)

    def death_date(self) -> GenealogyDate:
        return GenealogyDate.from_gedcom(self.death)

    def spousal_families(self) -> list["FakeFamily"]:
        return self.families


@dataclass
class LivingSubject:
    """Individual offering only what the classifier asks of its subject."""
    gender: str = "U"
    birth: str = ""
    families: list["FakeFamily"] = field(default_factory=list)

    def sex(self) -> str:
        return self.gender

    def estimated_birth_date(self) -> GenealogyDate:
        return GenealogyDate.from_gedcom(self.birth)

    def spousal_families(self) -> list["FakeFamily"]:
        return self.families


@dataclass
class FakeFamily:
    """Family built directly in a test, seen from the subject."""
    married: str = ""
    marriage_facts: int = 0
    divorce_dates: list[str] = field(default_factory=list)
    partner: FakeIndividual | None = None

    def marriage_date(self) -> GenealogyDate:
        return GenealogyDate.from_gedcom(self.married)

    def facts_of_type(self, tag: str) -> list[Event]:
        if tag == "MARR":
            return [Event(event_type="MARR") for _ in range(self.marriage_facts)]
        if tag == "DIV":
            return [
                Event(event_type="DIV", date=GenealogyDate.from_gedcom(d) if d else None)
                for d in self.divorce_dates
            ]
        return []

    def spouse(self) -> FakeIndividual | None:
        return self.partner


@pytest.fixture
def census_date() -> GenealogyDate:
    """Census day used by the reference scenarios."""
    return GenealogyDate.from_gedcom("30 JUN 1830")


# =============================================================================
# Registry Fixtures
# =============================================================================

@pytest.fixture
def census_registry() -> CensusRegistry:
    """Create a census registry from the bundled census.yaml."""
    return CensusRegistry()


# =============================================================================
# GEDCOM Fixtures
# =============================================================================

@pytest.fixture
def sample_gedcom_content() -> str:
    """Sample GEDCOM file with one household per marital status."""
    return """0 HEAD
1 SOUR Genealogy Census
2 VERS 0.1.0
1 GEDC
2 VERS 5.5.1
2 FORM LINEAGE-LINKED
1 CHAR UTF-8
0 @I1@ INDI
1 NAME Marie /DUPONT/
1 SEX F
1 BIRT
2 DATE 1800
2 PLAC Lyon, Rhône, France
1 FAMS @F1@
0 @I2@ INDI
1 NAME Jean /MARTIN/
1 SEX M
1 BIRT
2 DATE ABT 1798
1 FAMS @F1@
0 @I3@ INDI
1 NAME Claire /LEROY/
1 SEX F
1 BIRT
2 DATE 12 MAR 1795
1 FAMS @F2@
0 @I4@ INDI
1 NAME Pierre /LEROY/
1 SEX M
1 DEAT
2 DATE 1820
2 PLAC Paris, France
1 FAMS @F2@
0 @I5@ INDI
1 NAME Louis /MARTIN/
1 SEX M
1 BIRT
2 DATE 1820
1 FAMC @F1@
0 @I6@ INDI
1 NAME Sophie /BLANC/
1 SEX F
1 CHR
2 DATE 3 FEB 1822
1 FAMS @F3@
0 @I7@ INDI
1 NAME Anne /ROUX/
1 SEX F
1 BIRT
2 DATE 1790
1 FAMS @F4@
1 FAMS @F5@
0 @I8@ INDI
1 NAME Paul /ROUX/
1 SEX M
1 FAMS @F4@
0 @I9@ INDI
1 NAME Henri /FAURE/
1 SEX M
1 FAMS @F5@
0 @F1@ FAM
1 HUSB @I2@
1 WIFE @I1@
1 CHIL @I5@
1 MARR
2 DATE 1819
1 DIV
0 @F2@ FAM
1 HUSB @I4@
1 WIFE @I3@
1 MARR
2 DATE 1815
2 PLAC Paris, France
0 @F3@ FAM
1 WIFE @I6@
0 @F4@ FAM
1 HUSB @I8@
1 WIFE @I7@
1 MARR
2 DATE 12 MAY 1812
0 @F5@ FAM
1 HUSB @I9@
1 WIFE @I7@
1 MARR
2 DATE 1840
0 TRLR
"""


@pytest.fixture
def sample_gedcom_file(tmp_path: Path, sample_gedcom_content: str) -> Path:
    """Create a temporary GEDCOM file."""
    gedcom_path = tmp_path / "test_family.ged"
    gedcom_path.write_text(sample_gedcom_content, encoding="utf-8")
    return gedcom_path


@pytest.fixture
def sample_tree(sample_gedcom_file: Path) -> GedcomManager:
    """A GedcomManager loaded with the sample file."""
    manager = GedcomManager()
    manager.load(sample_gedcom_file)
    return manager
