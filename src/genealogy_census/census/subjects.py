"""
Capabilities the census classifier needs from individuals and families.

Any object providing these methods can be classified. TreeIndividual and
TreeFamily present the records of a loaded GEDCOM file this way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

from genealogy_census.core.models import Event, Family, GenealogyDate, Person

if TYPE_CHECKING:
    from genealogy_census.core.gedcom import GedcomManager


@runtime_checkable
class CensusIndividual(Protocol):
    """The individual being classified."""

    def sex(self) -> str: ...

    def estimated_birth_date(self) -> GenealogyDate: ...

    def spousal_families(self) -> Sequence[CensusFamily]: ...


@runtime_checkable
class CensusSpouse(Protocol):
    """The partner in a family; only its death matters."""

    def death_date(self) -> GenealogyDate: ...


@runtime_checkable
class CensusFamily(Protocol):
    """One marriage or partnership, seen from one of its partners."""

    def marriage_date(self) -> GenealogyDate: ...

    def facts_of_type(self, tag: str) -> Sequence[Event]: ...

    def spouse(self) -> CensusSpouse | None: ...


def ensure_individual(obj: object) -> CensusIndividual:
    """Reject objects that do not provide the individual capabilities."""
    if not isinstance(obj, CensusIndividual):
        raise TypeError(
            f"{type(obj).__name__} does not provide sex(), estimated_birth_date() "
            "and spousal_families()"
        )
    return obj


class TreeIndividual:
    """A Person of a loaded GEDCOM tree."""

    def __init__(self, person: Person, tree: GedcomManager):
        self.person = person
        self._tree = tree

    @classmethod
    def from_tree(cls, tree: GedcomManager, gedcom_id: str) -> TreeIndividual | None:
        person = tree.get_person(gedcom_id)
        if person is None:
            return None
        return cls(person, tree)

    def sex(self) -> str:
        return self.person.sex

    def estimated_birth_date(self) -> GenealogyDate:
        return self.person.estimated_birth_date()

    def death_date(self) -> GenealogyDate:
        return self.person.death_date()

    def spousal_families(self) -> list[TreeFamily]:
        """Spouse families in FAMS order. Dangling links are skipped."""
        families = []
        for family_id in self.person.spouse_family_ids:
            family = self._tree.get_family(family_id)
            if family is not None:
                families.append(TreeFamily(family, self, self._tree))
        return families

    def __repr__(self) -> str:
        return f"TreeIndividual({self.person.gedcom_id}, {self.person.display_name()!r})"


class TreeFamily:
    """A Family of a loaded GEDCOM tree, seen from one partner."""

    def __init__(self, family: Family, partner: TreeIndividual, tree: GedcomManager):
        self.family = family
        self._partner = partner
        self._tree = tree

    def marriage_date(self) -> GenealogyDate:
        return self.family.marriage_date()

    def facts_of_type(self, tag: str) -> list[Event]:
        return self.family.facts(tag)

    def spouse(self) -> TreeIndividual | None:
        spouse_id = self.family.spouse_of(self._partner.person.gedcom_id or "")
        if spouse_id is None:
            return None
        return TreeIndividual.from_tree(self._tree, spouse_id)

    def __repr__(self) -> str:
        return f"TreeFamily({self.family.gedcom_id})"
