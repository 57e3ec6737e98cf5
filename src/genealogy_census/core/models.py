"""
Core data models for census-time family status.

These models cover:
- GEDCOM dates with partial precision and modifiers
- Facts (events) attached to individuals and families
- Individuals and the families they belong to
"""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from enum import Enum
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


MONTHS = ["JAN", "FEB", "MAR", "APR", "MAY", "JUN",
          "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"]


class DateModifier(str, Enum):
    """GEDCOM-compliant date modifiers."""
    EXACT = "exact"
    ABOUT = "ABT"
    BEFORE = "BEF"
    AFTER = "AFT"
    BETWEEN = "BET"
    CALCULATED = "CAL"
    ESTIMATED = "EST"


class DateOrder(str, Enum):
    """Outcome of comparing two genealogy dates."""
    BEFORE = "before"
    SAME = "same"
    AFTER = "after"
    UNKNOWN = "unknown"  # Overlapping spans or missing information


def _span_start(year: int, month: int | None, day: int | None) -> date:
    return date(year, month or 1, day or 1)


def _span_end(year: int, month: int | None, day: int | None) -> date:
    if month is None:
        return date(year, 12, 31)
    if day is None:
        return date(year, month, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class GenealogyDate(BaseModel):
    """
    GEDCOM-compliant date representation.

    Supports modifiers: ABT, BEF, AFT, BET...AND..., CAL, EST
    Format: DD MMM YYYY (e.g., "15 JAN 1862")

    A date without a year is unknown. Unknown dates never compare as
    before or after anything.
    """
    year: int | None = Field(None, ge=1, le=9999)
    month: int | None = Field(None, ge=1, le=12)
    day: int | None = Field(None, ge=1, le=31)
    modifier: DateModifier | None = DateModifier.EXACT
    end_year: int | None = Field(None, ge=1, le=9999)  # For BET...AND...
    end_month: int | None = Field(None, ge=1, le=12)
    end_day: int | None = Field(None, ge=1, le=31)
    original_text: str | None = None  # Preserve original if ambiguous

    @field_validator("modifier", mode="before")
    @classmethod
    def validate_modifier(cls, v) -> DateModifier:
        """Convert None to EXACT."""
        if v is None:
            return DateModifier.EXACT
        return v

    @field_validator("day")
    @classmethod
    def validate_day(cls, v: int | None, info) -> int | None:
        if v is None:
            return v
        month = info.data.get("month")
        if month is None:
            raise ValueError("Cannot specify day without month")
        year = info.data.get("year")
        if year is not None and v > calendar.monthrange(year, month)[1]:
            raise ValueError(f"Day {v} out of range for month {month}")
        return v

    @field_validator("end_day")
    @classmethod
    def validate_end_day(cls, v: int | None, info) -> int | None:
        if v is None:
            return v
        month = info.data.get("end_month")
        if month is None:
            raise ValueError("Cannot specify end day without end month")
        year = info.data.get("end_year")
        if year is not None and v > calendar.monthrange(year, month)[1]:
            raise ValueError(f"Day {v} out of range for month {month}")
        return v

    @property
    def is_known(self) -> bool:
        """True when the date carries at least a year."""
        return self.year is not None

    def to_gedcom(self) -> str:
        """Convert to GEDCOM date format."""
        parts = []
        if self.modifier != DateModifier.EXACT:
            parts.append(self.modifier.value)

        if self.day:
            parts.append(str(self.day))
        if self.month:
            parts.append(MONTHS[self.month - 1])
        if self.year:
            parts.append(str(self.year))

        if self.modifier == DateModifier.BETWEEN and self.end_year:
            parts.append("AND")
            if self.end_day:
                parts.append(str(self.end_day))
            if self.end_month:
                parts.append(MONTHS[self.end_month - 1])
            parts.append(str(self.end_year))

        return " ".join(parts)

    def earliest(self) -> date | None:
        """First day this date can denote, or None if open or unknown."""
        if self.year is None:
            return None
        start = _span_start(self.year, self.month, self.day)
        if self.modifier == DateModifier.BEFORE:
            return None
        if self.modifier == DateModifier.AFTER:
            end = _span_end(self.year, self.month, self.day)
            return end + timedelta(days=1) if end < date.max else None
        return start

    def latest(self) -> date | None:
        """Last day this date can denote, or None if open or unknown."""
        if self.year is None:
            return None
        if self.modifier == DateModifier.AFTER:
            return None
        if self.modifier == DateModifier.BEFORE:
            start = _span_start(self.year, self.month, self.day)
            return start - timedelta(days=1) if start > date.min else None
        if self.modifier == DateModifier.BETWEEN and self.end_year:
            return _span_end(self.end_year, self.end_month, self.end_day)
        return _span_end(self.year, self.month, self.day)

    def compare(self, other: GenealogyDate) -> DateOrder:
        """
        Compare two dates by the spans of days they denote.

        BEFORE/AFTER are only reported when the spans cannot overlap,
        SAME only when both dates denote one identical day.
        """
        if not self.is_known or not other.is_known:
            return DateOrder.UNKNOWN

        lo, hi = self.earliest(), self.latest()
        other_lo, other_hi = other.earliest(), other.latest()

        if hi is not None and other_lo is not None and hi < other_lo:
            return DateOrder.BEFORE
        if lo is not None and other_hi is not None and lo > other_hi:
            return DateOrder.AFTER
        if None not in (lo, hi, other_lo, other_hi) and lo == hi == other_lo == other_hi:
            return DateOrder.SAME
        return DateOrder.UNKNOWN

    def on_or_before(self, other: GenealogyDate) -> bool:
        """True when this date is known to end no later than other begins."""
        if not self.is_known or not other.is_known:
            return False
        hi, other_lo = self.latest(), other.earliest()
        return hi is not None and other_lo is not None and hi <= other_lo

    def is_after(self, other: GenealogyDate) -> bool:
        """True when this date is known to begin after other ends."""
        return self.compare(other) == DateOrder.AFTER

    @classmethod
    def from_gedcom(cls, date_str: str | None) -> GenealogyDate:
        """Parse a GEDCOM date string. Empty or unparseable text is unknown."""
        months = {name: i for i, name in enumerate(MONTHS, 1)}

        text = re.sub(r"@#D[^@]*@", " ", date_str or "")
        parts = text.upper().split()
        modifier = DateModifier.EXACT
        year = month = day = None
        end_year = end_month = end_day = None

        idx = 0
        if parts and parts[0] in ["ABT", "BEF", "AFT", "BET", "CAL", "EST"]:
            modifier = DateModifier(parts[0])
            idx = 1

        # Parse main date
        while idx < len(parts) and parts[idx] != "AND":
            if parts[idx] in months:
                month = months[parts[idx]]
            elif parts[idx].isdigit():
                num = int(parts[idx])
                if num > 31:
                    year = num if num <= 9999 else year
                else:
                    day = num
            idx += 1

        # Parse end date for BET...AND...
        if modifier == DateModifier.BETWEEN and idx < len(parts) and parts[idx] == "AND":
            idx += 1
            while idx < len(parts):
                if parts[idx] in months:
                    end_month = months[parts[idx]]
                elif parts[idx].isdigit():
                    num = int(parts[idx])
                    if num > 31:
                        end_year = num if num <= 9999 else end_year
                    else:
                        end_day = num
                idx += 1

        # Drop parts that cannot stand on their own
        if year is None:
            month = day = None
        if month is None or not day or day > calendar.monthrange(year, month)[1]:
            day = None
        if end_year is None:
            end_month = end_day = None
        if end_month is None or not end_day or end_day > calendar.monthrange(end_year, end_month)[1]:
            end_day = None

        return cls(
            year=year, month=month, day=day,
            modifier=modifier,
            end_year=end_year, end_month=end_month, end_day=end_day,
            original_text=date_str,
        )


def age_at(birth: GenealogyDate, when: GenealogyDate) -> int | None:
    """Whole years between a birth estimate and a later date."""
    born = birth.earliest() or birth.latest()
    then = when.earliest() or when.latest()
    if born is None or then is None:
        return None
    years = then.year - born.year
    if (then.month, then.day) < (born.month, born.day):
        years -= 1
    return years


class Place(BaseModel):
    """
    GEDCOM-compliant place representation.

    Format: City, County/Province, State, Country
    """
    name: str  # Full place string
    city: str | None = None
    country: str | None = None

    @classmethod
    def from_string(cls, place_str: str) -> Place:
        """Parse a comma-separated place string."""
        parts = [p.strip() for p in place_str.split(",") if p.strip()]
        return cls(
            name=place_str,
            city=parts[0] if parts else None,
            country=parts[-1] if len(parts) > 1 else None,
        )


class Event(BaseModel):
    """A genealogical fact (birth, death, marriage, divorce, etc.)."""
    id: UUID = Field(default_factory=uuid4)
    event_type: str  # BIRT, CHR, BAPM, DEAT, MARR, DIV, ...
    date: GenealogyDate | None = None
    place: Place | None = None
    description: str | None = None

    @field_validator("event_type")
    @classmethod
    def validate_event_type(cls, v: str) -> str:
        return v.upper()


class Name(BaseModel):
    """Person's name as recorded in GEDCOM."""
    given: str = ""
    surname: str = ""
    name_type: Literal["birth", "married", "adopted", "alias", "immigrant"] = "birth"

    def full_name(self) -> str:
        """Return full name string: Given SURNAME."""
        return " ".join(p for p in (self.given, self.surname) if p)

    def gedcom_name(self) -> str:
        """Return GEDCOM-formatted name: Given /Surname/"""
        return f"{self.given} /{self.surname}/"


class Person(BaseModel):
    """
    Individual person in a family tree.

    Follows GEDCOM structure. Family links keep the order in which the
    FAMS/FAMC lines appear.
    """
    gedcom_id: str | None = None  # @I###@ format

    # Names (can have multiple)
    names: list[Name] = Field(default_factory=list)

    # Vital events
    sex: Literal["M", "F", "U"] = "U"
    birth: Event | None = None
    christening: Event | None = None  # Baptism/christening event
    death: Event | None = None

    # Other events
    events: list[Event] = Field(default_factory=list)

    # Family links
    parent_family_ids: list[str] = Field(default_factory=list)  # FAMC
    spouse_family_ids: list[str] = Field(default_factory=list)  # FAMS

    @field_validator("sex", mode="before")
    @classmethod
    def validate_sex(cls, v):
        """Anything other than M or F is unknown."""
        if isinstance(v, str) and v.upper() in ("M", "F"):
            return v.upper()
        return "U"

    @property
    def primary_name(self) -> Name | None:
        """Get the primary (birth) name."""
        for name in self.names:
            if name.name_type == "birth":
                return name
        return self.names[0] if self.names else None

    def display_name(self) -> str:
        name = self.primary_name
        return name.full_name() if name else (self.gedcom_id or "?")

    def estimated_birth_date(self) -> GenealogyDate:
        """Birth date, else christening date, else an unknown date."""
        for event in (self.birth, self.christening):
            if event and event.date and event.date.is_known:
                return event.date
        return GenealogyDate()

    def death_date(self) -> GenealogyDate:
        if self.death and self.death.date:
            return self.death.date
        return GenealogyDate()


class Family(BaseModel):
    """
    Family unit linking individuals.

    Represents a marriage/partnership and its facts, in record order.
    """
    gedcom_id: str | None = None  # @F###@ format

    # Partners
    husband_id: str | None = None
    wife_id: str | None = None

    # Children (ordered by birth)
    children_ids: list[str] = Field(default_factory=list)

    # Family facts: MARR, DIV, ENGA, ...
    events: list[Event] = Field(default_factory=list)

    def facts(self, tag: str) -> list[Event]:
        """All facts with the given tag, in record order."""
        tag = tag.upper()
        return [e for e in self.events if e.event_type == tag]

    def marriage_date(self) -> GenealogyDate:
        """Date of the first dated marriage fact, or an unknown date."""
        for event in self.facts("MARR"):
            if event.date and event.date.is_known:
                return event.date
        return GenealogyDate()

    def spouse_of(self, person_id: str) -> str | None:
        """The partner of person_id in this family."""
        if person_id == self.husband_id:
            return self.wife_id
        if person_id == self.wife_id:
            return self.husband_id
        return None
