"""Core models and GEDCOM reading."""

from genealogy_census.core.models import (
    Person,
    Family,
    Event,
    Name,
    Place,
    GenealogyDate,
    DateModifier,
    DateOrder,
    age_at,
)
from genealogy_census.core.gedcom import GedcomManager

__all__ = [
    "Person",
    "Family",
    "Event",
    "Name",
    "Place",
    "GenealogyDate",
    "DateModifier",
    "DateOrder",
    "age_at",
    "GedcomManager",
]
