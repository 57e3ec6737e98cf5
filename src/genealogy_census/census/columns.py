"""Census condition columns and census definitions.

Loads column literal tables and census definitions from YAML and renders
marital status into the text each census form expects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from genealogy_census.core.models import GenealogyDate
from genealogy_census.census.status import ClassifierConfig, MaritalStatus, classify
from genealogy_census.census.subjects import CensusIndividual, ensure_individual


SEXES = ("M", "F", "U")


@dataclass
class CensusColumn:
    """A condition column: literal text per sex and status."""

    id: str
    abbreviation: str = ""
    title: str = ""
    literals: dict[str, dict[MaritalStatus, str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, id: str, data: dict[str, Any]) -> CensusColumn:
        """Create from dictionary (YAML data)."""
        literals: dict[str, dict[MaritalStatus, str]] = {}

        for sex, table in (data.get("literals") or {}).items():
            sex = str(sex).upper()
            if sex not in SEXES:
                raise ValueError(f"Column {id}: unknown sex {sex!r}")
            row = {}
            for status, text in (table or {}).items():
                try:
                    row[MaritalStatus(status)] = "" if text is None else str(text)
                except ValueError:
                    raise ValueError(f"Column {id}: unknown status {status!r}") from None
            literals[sex] = row

        return cls(
            id=id,
            abbreviation=data.get("abbreviation", ""),
            title=data.get("title", ""),
            literals=literals,
        )

    def render(self, status: MaritalStatus, sex: str) -> str:
        """Literal for the census cell; empty when the table has none."""
        return self.literals.get(str(sex).upper(), {}).get(status, "")

    def generate(
        self,
        individual: CensusIndividual,
        census_date: GenealogyDate | str,
        config: ClassifierConfig | None = None,
    ) -> str:
        """Classify an individual and render the result."""
        individual = ensure_individual(individual)
        status = classify(individual, census_date, config)
        return self.render(status, individual.sex())


@dataclass
class CensusDefinition:
    """A census event: where, when and which condition columns it has."""

    id: str
    place: str
    date: GenealogyDate
    columns: list[str] = field(default_factory=list)
    title: str = ""

    @classmethod
    def from_dict(cls, id: str, data: dict[str, Any]) -> CensusDefinition:
        """Create from dictionary (YAML data)."""
        census_date = GenealogyDate.from_gedcom(str(data.get("date", "")))
        if (census_date.earliest() or census_date.latest()) is None:
            raise ValueError(f"Census {id}: missing or invalid date {data.get('date')!r}")

        return cls(
            id=id,
            place=data.get("place", ""),
            date=census_date,
            columns=list(data.get("columns", [])),
            title=data.get("title", ""),
        )

    def generate_row(
        self,
        individual: CensusIndividual,
        registry: CensusRegistry,
        config: ClassifierConfig | None = None,
    ) -> dict[str, str]:
        """Rendered text of every condition column for one individual."""
        individual = ensure_individual(individual)
        status = classify(individual, self.date, config)
        sex = individual.sex()
        return {
            column_id: registry.column(column_id).render(status, sex)
            for column_id in self.columns
        }


class CensusRegistry:
    """Registry of condition columns and census definitions loaded from YAML."""

    def __init__(self, census_path: Path | str | None = None):
        """Initialize registry from YAML file."""
        if census_path is None:
            # Default to bundled census.yaml
            census_path = Path(__file__).parent.parent / "data" / "census.yaml"

        self._census_path = Path(census_path)
        self._columns: dict[str, CensusColumn] = {}
        self._censuses: dict[str, CensusDefinition] = {}
        self._load()

    def _load(self) -> None:
        """Load columns and censuses from YAML file."""
        if not self._census_path.exists():
            raise FileNotFoundError(f"Census file not found: {self._census_path}")

        with open(self._census_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        for column_id, column_data in (data.get("columns") or {}).items():
            self._columns[column_id] = CensusColumn.from_dict(column_id, column_data or {})

        for census_id, census_data in (data.get("censuses") or {}).items():
            census = CensusDefinition.from_dict(census_id, census_data or {})
            unknown = [c for c in census.columns if c not in self._columns]
            if unknown:
                raise ValueError(f"Census {census_id}: unknown columns {', '.join(unknown)}")
            self._censuses[census_id] = census

        logger.debug(f"Loaded {self!r} from {self._census_path}")

    def get_column(self, column_id: str) -> CensusColumn | None:
        """Get column by ID."""
        return self._columns.get(column_id)

    def column(self, column_id: str) -> CensusColumn:
        """Get column by ID, raising KeyError if unknown."""
        try:
            return self._columns[column_id]
        except KeyError:
            raise KeyError(f"Unknown census column: {column_id}") from None

    def all_columns(self) -> list[CensusColumn]:
        return list(self._columns.values())

    def get_census(self, census_id: str) -> CensusDefinition | None:
        """Get census by ID."""
        return self._censuses.get(census_id)

    def census(self, census_id: str) -> CensusDefinition:
        """Get census by ID, raising KeyError if unknown."""
        try:
            return self._censuses[census_id]
        except KeyError:
            raise KeyError(f"Unknown census: {census_id}") from None

    def all_censuses(self) -> list[CensusDefinition]:
        """All censuses in chronological order."""
        # BEF dates have no first day; from_dict guarantees one bound exists
        return sorted(self._censuses.values(), key=lambda c: c.date.earliest() or c.date.latest())

    def censuses_for_place(self, place: str) -> list[CensusDefinition]:
        """Censuses whose place matches, in chronological order."""
        place = place.lower()
        return [c for c in self.all_censuses() if place in c.place.lower()]

    def __len__(self) -> int:
        """Return number of registered censuses."""
        return len(self._censuses)

    def __repr__(self) -> str:
        return f"CensusRegistry({len(self._censuses)} censuses, {len(self._columns)} columns)"
