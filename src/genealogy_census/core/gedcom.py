"""
GEDCOM 5.5.1 / 7.0 file reading.

Handles:
- Reading and parsing GEDCOM files
- Validation of the links and dates the census classifier relies on
- Conversion of INDI/FAM records to Person/Family models
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, TextIO

from loguru import logger

from genealogy_census.core.models import (
    Event,
    Family,
    GenealogyDate,
    Name,
    Person,
    Place,
)


# Family-level facts read into Family.events
FAMILY_EVENT_TAGS = ("MARR", "MARB", "MARC", "MARL", "MARS", "ENGA", "DIV", "DIVF", "ANUL", "CENS", "EVEN")

# Individual-level facts read into Person.events
INDIVIDUAL_EVENT_TAGS = ("BAPM", "BURI", "CREM", "CENS", "RESI", "OCCU", "EMIG", "IMMI", "NATU", "EVEN")

LINE_PATTERN = re.compile(r"^(\d+)\s+(?:(@[^@]+@)\s+)?(\S+)(?:\s+(.*))?$")
NAME_PATTERN = re.compile(r"^([^/]*)/([^/]*)/")


@dataclass
class GedcomLine:
    """A single parsed GEDCOM line."""
    level: int
    tag: str
    value: str = ""
    xref: str | None = None  # @I123@ style ID
    number: int | None = None  # 1-based line in the source file

    @classmethod
    def parse(cls, line: str, number: int | None = None) -> GedcomLine | None:
        """Parse "level [xref] tag [value]"; None for blank or malformed lines."""
        match = LINE_PATTERN.match(line.strip())
        if not match:
            return None
        level, xref, tag, value = match.groups()
        return cls(level=int(level), tag=tag.upper(), value=value or "", xref=xref, number=number)


@dataclass
class GedcomRecord:
    """A level 0 line and its subordinate lines."""
    id: str | None  # @I123@ style
    tag: str  # INDI, FAM, HEAD, ...
    lines: list[GedcomLine] = field(default_factory=list)

    def level_one(self, tag: str) -> Iterator[GedcomLine]:
        for line in self.lines[1:]:
            if line.level == 1 and line.tag == tag:
                yield line

    def get_all_values(self, tag: str) -> list[str]:
        """Values of every level 1 line with the given tag."""
        return [line.value for line in self.level_one(tag)]

    def substructures(self, tag: str) -> list[list[GedcomLine]]:
        """
        Level 1 structures with the given tag, in record order.

        Each structure is the level 1 line followed by its subordinate lines.
        """
        blocks: list[list[GedcomLine]] = []
        current: list[GedcomLine] | None = None

        for line in self.lines[1:]:
            if line.level <= 1:
                current = [line] if line.level == 1 and line.tag == tag else None
                if current is not None:
                    blocks.append(current)
            elif current is not None:
                current.append(line)

        return blocks


@dataclass
class GedcomValidationError:
    """A problem found while validating a GEDCOM file."""
    severity: str  # "error", "warning"
    record_id: str | None
    line_number: int | None
    message: str

    def __str__(self) -> str:
        where = f" (line {self.line_number})" if self.line_number else ""
        return f"{self.severity.upper()}: {self.message}{where}"


def normalize_id(gedcom_id: str) -> str:
    """Accept I1 or @I1@ and return the @I1@ form."""
    return f"@{gedcom_id.strip().strip('@')}@"


def _event_from_block(block: list[GedcomLine]) -> Event:
    """Build an Event from a level 1 fact and its DATE/PLAC lines."""
    head = block[0]
    event_date = None
    event_place = None

    for subline in block[1:]:
        if subline.level != head.level + 1:
            continue
        if subline.tag == "DATE" and event_date is None:
            event_date = GenealogyDate.from_gedcom(subline.value)
        elif subline.tag == "PLAC" and event_place is None and subline.value:
            event_place = Place.from_string(subline.value)

    return Event(
        event_type=head.tag,
        date=event_date,
        place=event_place,
        description=head.value or None,
    )


def _name_from_value(value: str) -> Name | None:
    """Parse "Given /Surname/"; a value without slashes is all given name."""
    match = NAME_PATTERN.match(value)
    if match:
        return Name(given=match.group(1).strip(), surname=match.group(2).strip())
    if value.strip():
        return Name(given=value.strip())
    return None


class GedcomManager:
    """
    GEDCOM file reader.

    Loads a GEDCOM file, checks the links and dates census classification
    depends on, and exposes individuals and families as Person/Family models.
    """

    def __init__(self):
        self.records: dict[str, GedcomRecord] = {}
        self.header: GedcomRecord | None = None

        # Indexes for fast lookup
        self.individuals: dict[str, GedcomRecord] = {}
        self.families: dict[str, GedcomRecord] = {}

        # Validation state
        self.errors: list[GedcomValidationError] = []
        self.warnings: list[GedcomValidationError] = []

        self._duplicates: list[GedcomRecord] = []
        self._person_cache: dict[str, Person] = {}
        self._family_cache: dict[str, Family] = {}

    def load(self, path: str | Path) -> None:
        """Load a GEDCOM file."""
        path = Path(path)
        with path.open("r", encoding="utf-8-sig") as f:
            self._parse(f)
        logger.debug(
            f"Loaded {path.name}: {len(self.individuals)} individuals, "
            f"{len(self.families)} families"
        )

    def loads(self, content: str) -> None:
        """Load GEDCOM content from a string."""
        self._parse(io.StringIO(content))

    def _parse(self, file: TextIO) -> None:
        record: GedcomRecord | None = None

        for number, text in enumerate(file, 1):
            line = GedcomLine.parse(text, number)
            if line is None:
                continue
            if line.level == 0:
                if record is not None:
                    self._store(record)
                record = GedcomRecord(id=line.xref, tag=line.tag, lines=[line])
            elif record is not None:
                record.lines.append(line)

        if record is not None:
            self._store(record)

        self._person_cache.clear()
        self._family_cache.clear()

    def _store(self, record: GedcomRecord) -> None:
        if record.tag == "HEAD":
            self.header = record
        if record.id is None:
            return
        if record.id in self.records:
            self._duplicates.append(record)
        self.records[record.id] = record
        if record.tag == "INDI":
            self.individuals[record.id] = record
        elif record.tag == "FAM":
            self.families[record.id] = record

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[GedcomValidationError]:
        """
        Check the file for problems that would mislead census classification.

        Errors: missing HEAD, duplicate IDs, FAMC/FAMS/HUSB/WIFE/CHIL links to
        missing records. Warnings: a FAMS family that does not name the person
        as a partner, and DATE values no year can be read from.
        """
        self.errors = []
        self.warnings = []

        if self.header is None:
            self._report("error", None, None, "Missing HEAD record")

        for record in self._duplicates:
            self._report("error", record.id, record.lines[0].number, f"Duplicate ID: {record.id}")

        for indi_id, indi in self.individuals.items():
            self._check_links(indi_id, indi, ("FAMC", "FAMS"), self.families, "family")
            for line in indi.level_one("FAMS"):
                family = self.families.get(line.value)
                if family is not None and indi_id not in (
                    family.get_all_values("HUSB") + family.get_all_values("WIFE")
                ):
                    self._report(
                        "warning", indi_id, line.number,
                        f"FAMS {line.value} does not list {indi_id} as HUSB or WIFE",
                    )

        for fam_id, fam in self.families.items():
            self._check_links(fam_id, fam, ("HUSB", "WIFE", "CHIL"), self.individuals, "individual")

        for record_id, record in self.records.items():
            for line in record.lines:
                if line.tag == "DATE" and line.value.strip():
                    if not GenealogyDate.from_gedcom(line.value).is_known:
                        self._report(
                            "warning", record_id, line.number,
                            f"Non-standard date format: {line.value}",
                        )

        return self.errors + self.warnings

    def _check_links(
        self,
        record_id: str,
        record: GedcomRecord,
        tags: tuple[str, ...],
        targets: dict[str, GedcomRecord],
        kind: str,
    ) -> None:
        for tag in tags:
            for line in record.level_one(tag):
                if line.value not in targets:
                    self._report(
                        "error", record_id, line.number,
                        f"{tag} references non-existent {kind}: {line.value}",
                    )

    def _report(self, severity: str, record_id: str | None, line_number: int | None, message: str) -> None:
        issue = GedcomValidationError(severity, record_id, line_number, message)
        (self.errors if severity == "error" else self.warnings).append(issue)

    # -------------------------------------------------------------------------
    # Models
    # -------------------------------------------------------------------------

    def get_person(self, gedcom_id: str) -> Person | None:
        """Convert GEDCOM individual to Person model."""
        gedcom_id = normalize_id(gedcom_id)
        if gedcom_id in self._person_cache:
            return self._person_cache[gedcom_id]

        record = self.individuals.get(gedcom_id)
        if not record:
            return None

        person = Person(
            gedcom_id=gedcom_id,
            names=[n for n in map(_name_from_value, record.get_all_values("NAME")) if n],
            sex=next(iter(record.get_all_values("SEX")), "U"),
            parent_family_ids=record.get_all_values("FAMC"),
            spouse_family_ids=record.get_all_values("FAMS"),
        )

        for tag, attr in (("BIRT", "birth"), ("CHR", "christening"), ("DEAT", "death")):
            blocks = record.substructures(tag)
            if blocks:
                setattr(person, attr, _event_from_block(blocks[0]))

        if person.christening is None:
            blocks = record.substructures("BAPM")
            if blocks:
                person.christening = _event_from_block(blocks[0])

        for tag in INDIVIDUAL_EVENT_TAGS:
            person.events.extend(_event_from_block(b) for b in record.substructures(tag))

        self._person_cache[gedcom_id] = person
        return person

    def get_family(self, gedcom_id: str) -> Family | None:
        """Convert GEDCOM family to Family model."""
        gedcom_id = normalize_id(gedcom_id)
        if gedcom_id in self._family_cache:
            return self._family_cache[gedcom_id]

        record = self.families.get(gedcom_id)
        if not record:
            return None

        family = Family(
            gedcom_id=gedcom_id,
            husband_id=next(iter(record.get_all_values("HUSB")), None),
            wife_id=next(iter(record.get_all_values("WIFE")), None),
            children_ids=record.get_all_values("CHIL"),
        )

        # Facts keep record order; the classifier reads the first dated MARR
        blocks: list[list[GedcomLine]] = []
        for line in record.lines[1:]:
            if line.level == 1:
                blocks.append([line])
            elif blocks:
                blocks[-1].append(line)
        family.events = [
            _event_from_block(block) for block in blocks if block[0].tag in FAMILY_EVENT_TAGS
        ]

        self._family_cache[gedcom_id] = family
        return family

    def get_statistics(self) -> dict[str, int]:
        """Counts of the records and facts census classification uses."""
        families = [self.get_family(fam_id) for fam_id in self.families]
        return {
            "individuals": len(self.individuals),
            "families": len(families),
            "marriages": sum(1 for f in families if f.facts("MARR") or f.marriage_date().is_known),
            "divorces": sum(1 for f in families if f.facts("DIV")),
            "errors": len(self.errors),
            "warnings": len(self.warnings),
        }

    def find_person_by_name(
        self,
        given: str | None = None,
        surname: str | None = None,
    ) -> list[Person]:
        """Individuals with a name containing the given parts, ignoring case."""
        given = (given or "").lower()
        surname = (surname or "").lower()
        results = []

        for indi_id in self.individuals:
            person = self.get_person(indi_id)
            if any(
                given in name.given.lower() and surname in name.surname.lower()
                for name in person.names
            ):
                results.append(person)

        return results
