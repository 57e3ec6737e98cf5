"""Tests for census condition columns and the census registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from genealogy_census.core.gedcom import GedcomManager
from genealogy_census.census.columns import CensusColumn, CensusDefinition, CensusRegistry
from genealogy_census.census.status import MaritalStatus
from genealogy_census.census.subjects import TreeIndividual

from conftest import FakeFamily, FakeIndividual, LivingSubject


CENSUS_DAY = "30 JUN 1830"


# =============================================================================
# French "femme" column
# =============================================================================


class TestFrenchFemmeColumn:
    """A mark only for divorced women."""

    @pytest.fixture
    def column(self, census_registry: CensusRegistry) -> CensusColumn:
        return census_registry.column("french_femme")

    @pytest.mark.parametrize("status", list(MaritalStatus))
    def test_male_always_empty(self, column: CensusColumn, status: MaritalStatus):
        """Men never get a mark in this column."""
        assert column.render(status, "M") == ""

    @pytest.mark.parametrize("status", list(MaritalStatus))
    def test_female(self, column: CensusColumn, status: MaritalStatus):
        """Women get a mark only when divorced."""
        expected = "1" if status == MaritalStatus.DIVORCED else ""
        assert column.render(status, "F") == expected

    @pytest.mark.parametrize("sex", ["M", "F"])
    def test_no_spouse_families(self, column: CensusColumn, sex: str):
        """Never married renders an empty cell."""
        individual = FakeIndividual(gender=sex, birth="1800")
        assert column.generate(individual, CENSUS_DAY) == ""

    @pytest.mark.parametrize("sex", ["M", "F"])
    def test_no_family_facts(self, column: CensusColumn, sex: str):
        """A family without facts renders an empty cell."""
        individual = FakeIndividual(gender=sex, birth="1800", families=[FakeFamily()])
        assert column.generate(individual, CENSUS_DAY) == ""

    @pytest.mark.parametrize("sex", ["M", "F"])
    def test_spouse_dead(self, column: CensusColumn, sex: str):
        """Widowhood renders an empty cell."""
        family = FakeFamily(marriage_facts=1, partner=FakeIndividual(death="1820"))
        individual = FakeIndividual(gender=sex, families=[family])
        assert column.generate(individual, CENSUS_DAY) == ""

    @pytest.mark.parametrize("sex", ["M", "F"])
    def test_child(self, column: CensusColumn, sex: str):
        """Children render an empty cell."""
        individual = FakeIndividual(gender=sex, birth="1820", families=[FakeFamily()])
        assert column.generate(individual, CENSUS_DAY) == ""

    def test_divorced_male(self, column: CensusColumn):
        """A divorced man renders an empty cell."""
        family = FakeFamily(marriage_facts=1, divorce_dates=[""])
        individual = FakeIndividual(gender="M", families=[family])
        assert column.generate(individual, CENSUS_DAY) == ""

    def test_divorced_female(self, column: CensusColumn):
        """A divorced woman gets the mark."""
        family = FakeFamily(marriage_facts=1, divorce_dates=[""])
        individual = FakeIndividual(gender="F", birth="1800", families=[family])
        assert column.generate(individual, CENSUS_DAY) == "1"

    def test_subject_without_death_date(self, column: CensusColumn):
        """The subject needs no death date of its own, only its spouse does."""
        family = FakeFamily(marriage_facts=1, divorce_dates=[""])
        subject = LivingSubject(gender="F", birth="1800", families=[family])
        assert column.generate(subject, CENSUS_DAY) == "1"

    def test_generate_rejects_non_individual(self, column: CensusColumn):
        """Objects without the individual capabilities are rejected."""
        with pytest.raises(TypeError):
            column.generate(object(), CENSUS_DAY)


# =============================================================================
# Other bundled columns
# =============================================================================


class TestBundledColumns:
    """Literal tables of the other bundled columns."""

    @pytest.mark.parametrize(
        "status, expected",
        [
            (MaritalStatus.CHILD, ""),
            (MaritalStatus.UNMARRIED, "Unm"),
            (MaritalStatus.MARRIED, "Mar"),
            (MaritalStatus.WIDOWED, "Wid"),
            (MaritalStatus.DIVORCED, "Div"),
        ],
    )
    def test_english_condition(self, census_registry: CensusRegistry, status, expected):
        """English condition column, same text for both sexes."""
        column = census_registry.column("english_condition")
        assert column.render(status, "M") == expected
        assert column.render(status, "F") == expected

    def test_us_condition(self, census_registry: CensusRegistry):
        """US condition column uses single letters."""
        column = census_registry.column("us_condition")
        assert column.render(MaritalStatus.UNMARRIED, "F") == "S"
        assert column.render(MaritalStatus.WIDOWED, "M") == "W"

    def test_french_one_mark_columns(self, census_registry: CensusRegistry):
        """Each French column marks one sex and status group."""
        assert census_registry.column("french_garcon").render(MaritalStatus.CHILD, "M") == "1"
        assert census_registry.column("french_garcon").render(MaritalStatus.CHILD, "F") == ""
        assert census_registry.column("french_homme").render(MaritalStatus.MARRIED, "M") == "1"
        assert census_registry.column("french_veuf").render(MaritalStatus.WIDOWED, "M") == "1"
        assert census_registry.column("french_fille").render(MaritalStatus.UNMARRIED, "F") == "1"
        assert census_registry.column("french_veuve").render(MaritalStatus.WIDOWED, "F") == "1"
        assert census_registry.column("french_veuve").render(MaritalStatus.WIDOWED, "M") == ""

    def test_unknown_sex_lowercase(self, census_registry: CensusRegistry):
        """Sex lookup ignores case; unknown sex has its own row."""
        column = census_registry.column("english_condition")
        assert column.render(MaritalStatus.MARRIED, "u") == "Mar"
        assert census_registry.column("french_femme").render(MaritalStatus.DIVORCED, "U") == ""


# =============================================================================
# CensusColumn / CensusDefinition from dictionaries
# =============================================================================


class TestFromDict:
    """Tests for building columns and censuses from YAML data."""

    def test_column_from_dict(self):
        """Test column creation; null text renders empty."""
        column = CensusColumn.from_dict("test", {
            "abbreviation": "Cond",
            "literals": {"f": {"widowed": "W", "married": None}},
        })
        assert column.abbreviation == "Cond"
        assert column.render(MaritalStatus.WIDOWED, "F") == "W"
        assert column.render(MaritalStatus.MARRIED, "F") == ""

    def test_column_unknown_status(self):
        """Unknown status names are rejected."""
        with pytest.raises(ValueError, match="unknown status"):
            CensusColumn.from_dict("test", {"literals": {"F": {"engaged": "E"}}})

    def test_column_unknown_sex(self):
        """Unknown sex keys are rejected."""
        with pytest.raises(ValueError, match="unknown sex"):
            CensusColumn.from_dict("test", {"literals": {"X": {"married": "M"}}})

    def test_census_from_dict(self):
        """Test census creation from dictionary."""
        census = CensusDefinition.from_dict("test", {
            "place": "France",
            "date": "30 JUN 1830",
            "columns": ["french_femme"],
        })
        assert census.date.to_gedcom() == "30 JUN 1830"
        assert census.columns == ["french_femme"]

    def test_census_requires_date(self):
        """A census without a date is rejected."""
        with pytest.raises(ValueError, match="date"):
            CensusDefinition.from_dict("test", {"place": "France"})


# =============================================================================
# CensusRegistry
# =============================================================================


class TestCensusRegistry:
    """Tests for loading census definitions."""

    def test_bundled_registry(self, census_registry: CensusRegistry):
        """Test loading the bundled census.yaml."""
        assert len(census_registry) > 0
        assert census_registry.get_census("england_1881").date.to_gedcom() == "3 APR 1881"

    def test_all_censuses_chronological(self, census_registry: CensusRegistry):
        """Bundled censuses come back oldest first."""
        dates = [c.date.earliest() for c in census_registry.all_censuses()]
        assert dates == sorted(dates)

    def test_censuses_for_place(self, census_registry: CensusRegistry):
        """Place matching ignores case."""
        censuses = census_registry.censuses_for_place("united states")
        assert censuses
        assert all(c.place == "United States" for c in censuses)

    def test_unknown_ids(self, census_registry: CensusRegistry):
        """get_* return None, column()/census() raise KeyError."""
        assert census_registry.get_column("nope") is None
        assert census_registry.get_census("nope") is None
        with pytest.raises(KeyError):
            census_registry.column("nope")
        with pytest.raises(KeyError):
            census_registry.census("nope")

    def test_missing_file(self, tmp_path: Path):
        """A missing YAML file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            CensusRegistry(tmp_path / "missing.yaml")

    def test_custom_file(self, tmp_path: Path):
        """Test loading an alternative census file."""
        path = tmp_path / "census.yaml"
        path.write_text(
            "columns:\n"
            "  divorcee:\n"
            "    literals:\n"
            "      F: {divorced: '1'}\n"
            "censuses:\n"
            "  test_1830:\n"
            "    place: Testland\n"
            "    date: 30 JUN 1830\n"
            "    columns: [divorcee]\n",
            encoding="utf-8",
        )
        registry = CensusRegistry(path)
        assert len(registry) == 1
        assert registry.column("divorcee").render(MaritalStatus.DIVORCED, "F") == "1"

    def test_open_ended_census_dates_sort(self, tmp_path: Path):
        """Censuses dated BEF/AFT sort beside exactly dated ones."""
        path = tmp_path / "census.yaml"
        path.write_text(
            "censuses:\n"
            "  after: {place: Testland, date: AFT 1830}\n"
            "  exact: {place: Testland, date: 30 JUN 1830}\n"
            "  before: {place: Testland, date: BEF 1830}\n",
            encoding="utf-8",
        )
        registry = CensusRegistry(path)
        assert [c.id for c in registry.all_censuses()] == ["before", "exact", "after"]
        assert [c.id for c in registry.censuses_for_place("testland")] == ["before", "exact", "after"]

    def test_census_with_unknown_column(self, tmp_path: Path):
        """A census naming an undefined column is rejected."""
        path = tmp_path / "census.yaml"
        path.write_text(
            "censuses:\n"
            "  test_1830:\n"
            "    date: 30 JUN 1830\n"
            "    columns: [missing]\n",
            encoding="utf-8",
        )
        with pytest.raises(ValueError, match="unknown columns"):
            CensusRegistry(path)


class TestGenerateRow:
    """Rendering a full census row."""

    def test_french_row_for_divorced_woman(
        self, census_registry: CensusRegistry, sample_tree: GedcomManager
    ):
        """Only the femme column is marked for a divorced woman."""
        census = census_registry.census("france_1831")
        individual = TreeIndividual.from_tree(sample_tree, "I1")
        row = census.generate_row(individual, census_registry)

        assert list(row) == census.columns
        assert row["french_femme"] == "1"
        assert [k for k, v in row.items() if v] == ["french_femme"]

    def test_french_row_for_widow(self, census_registry: CensusRegistry, sample_tree: GedcomManager):
        """A widow is marked in the veuve column."""
        census = census_registry.census("france_1831")
        row = census.generate_row(TreeIndividual.from_tree(sample_tree, "I3"), census_registry)
        assert row["french_veuve"] == "1"
        assert row["french_femme"] == ""

    def test_french_row_for_girl(self, census_registry: CensusRegistry, sample_tree: GedcomManager):
        """A girl is marked in the fille column."""
        census = census_registry.census("france_1831")
        row = census.generate_row(TreeIndividual.from_tree(sample_tree, "I6"), census_registry)
        assert row["french_fille"] == "1"

    def test_english_row(self, census_registry: CensusRegistry, sample_tree: GedcomManager):
        """A remarried woman is Mar in the English census."""
        census = census_registry.census("england_1851")
        row = census.generate_row(TreeIndividual.from_tree(sample_tree, "I7"), census_registry)
        assert row == {"english_condition": "Mar"}
