"""
Command-line interface for census condition columns.

Classifies individuals of a GEDCOM file on census day and renders the
condition columns of a census form.
"""

from __future__ import annotations

import sys
from typing import Optional

import click
import yaml
from loguru import logger
from rich.console import Console
from rich.table import Table

from genealogy_census import __version__
from genealogy_census.core.gedcom import GedcomManager
from genealogy_census.core.models import GenealogyDate
from genealogy_census.census.columns import CensusDefinition, CensusRegistry
from genealogy_census.census.status import ClassifierConfig, MaritalStatus, classify
from genealogy_census.census.subjects import TreeIndividual

console = Console()

status_colors = {
    MaritalStatus.CHILD: "cyan",
    MaritalStatus.UNMARRIED: "white",
    MaritalStatus.MARRIED: "green",
    MaritalStatus.DIVORCED: "yellow",
    MaritalStatus.WIDOWED: "magenta",
}


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="{time:HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    sys.exit(1)


def _load_tree(file: str) -> GedcomManager:
    manager = GedcomManager()
    try:
        manager.load(file)
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"could not load GEDCOM: {e}")
    return manager


def _individual(tree: GedcomManager, person_id: str) -> TreeIndividual:
    individual = TreeIndividual.from_tree(tree, person_id)
    if individual is None:
        _fail(f"individual {person_id} not found")
    return individual


def _census(ctx: click.Context, census_id: str) -> CensusDefinition:
    try:
        return ctx.obj["registry"].census(census_id)
    except KeyError as e:
        _fail(str(e.args[0]))


@click.group()
@click.version_option(version=__version__, prog_name="genealogy-census")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--census-file", type=click.Path(exists=True, dir_okay=False),
              help="Alternative census definitions (YAML)")
@click.option("--adult-age", type=int, default=15, show_default=True,
              help="Age below which an unmarried individual is a child")
@click.option("--check-divorce-date", is_flag=True,
              help="Ignore divorces dated after census day")
@click.pass_context
def cli(ctx, verbose, census_file, adult_age, check_divorce_date):
    """
    Census condition columns for GEDCOM individuals.

    Works out whether an individual was a child, unmarried, married,
    divorced or widowed on census day.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    try:
        ctx.obj["registry"] = CensusRegistry(census_file)
    except (OSError, ValueError, yaml.YAMLError) as e:
        _fail(f"could not load census definitions: {e}")
    ctx.obj["config"] = ClassifierConfig(
        adult_age=adult_age,
        check_divorce_date=check_divorce_date,
    )


@cli.command("censuses")
@click.option("--place", "-p", help="Only censuses of this place")
@click.pass_context
def list_censuses(ctx, place: Optional[str]):
    """List known census definitions."""
    registry: CensusRegistry = ctx.obj["registry"]
    censuses = registry.censuses_for_place(place) if place else registry.all_censuses()

    table = Table(title="Censuses")
    table.add_column("ID")
    table.add_column("Place")
    table.add_column("Date")
    table.add_column("Columns", style="dim")

    for census in censuses:
        table.add_row(census.id, census.place, census.date.to_gedcom(), ", ".join(census.columns))

    console.print(table)


@cli.command("classify")
@click.argument("file", type=click.Path(exists=True))
@click.argument("person_id")
@click.option("--census", "-c", "census_id", help="Census ID (see 'censuses')")
@click.option("--date", "-d", "census_date", help='Census date, e.g. "30 JUN 1830"')
@click.pass_context
def classify_person(ctx, file: str, person_id: str, census_id: Optional[str], census_date: Optional[str]):
    """Show the marital status of an individual on census day."""
    if bool(census_id) == bool(census_date):
        _fail("give exactly one of --census or --date")

    if census_id:
        when = _census(ctx, census_id).date
    else:
        when = GenealogyDate.from_gedcom(census_date)
        if not when.is_known:
            _fail(f"invalid census date: {census_date}")

    individual = _individual(_load_tree(file), person_id)
    status = classify(individual, when, ctx.obj["config"])
    color = status_colors.get(status, "white")

    console.print(
        f"{individual.person.display_name()} on {when.to_gedcom()}: "
        f"[{color}]{status.value}[/{color}]"
    )


def _print_rows(ctx, census: CensusDefinition, individuals: list[TreeIndividual]) -> None:
    registry: CensusRegistry = ctx.obj["registry"]

    table = Table(title=f"{census.place} census, {census.date.to_gedcom()}")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Sex")
    for column_id in census.columns:
        column = registry.column(column_id)
        table.add_column(column.abbreviation or column.id, justify="center")

    for individual in individuals:
        row = census.generate_row(individual, registry, ctx.obj["config"])
        table.add_row(
            individual.person.gedcom_id,
            individual.person.display_name(),
            individual.sex(),
            *(row[column_id] for column_id in census.columns),
        )

    console.print(table)


@cli.command("row")
@click.argument("file", type=click.Path(exists=True))
@click.argument("person_id")
@click.option("--census", "-c", "census_id", required=True, help="Census ID (see 'censuses')")
@click.pass_context
def census_row(ctx, file: str, person_id: str, census_id: str):
    """Render the condition columns of one individual."""
    census = _census(ctx, census_id)
    individual = _individual(_load_tree(file), person_id)
    _print_rows(ctx, census, [individual])


@cli.command("household")
@click.argument("file", type=click.Path(exists=True))
@click.argument("person_ids", nargs=-1, required=True)
@click.option("--census", "-c", "census_id", required=True, help="Census ID (see 'censuses')")
@click.pass_context
def census_household(ctx, file: str, person_ids: tuple, census_id: str):
    """Render the condition columns of several individuals."""
    census = _census(ctx, census_id)
    tree = _load_tree(file)
    _print_rows(ctx, census, [_individual(tree, pid) for pid in person_ids])


@cli.command("find")
@click.argument("file", type=click.Path(exists=True))
@click.option("--surname", "-s", help="Part of the surname")
@click.option("--given", "-g", help="Part of the given name")
def find_people(file: str, surname: Optional[str], given: Optional[str]):
    """Look up the IDs of individuals by name."""
    if not surname and not given:
        _fail("give --surname or --given")

    people = _load_tree(file).find_person_by_name(given=given, surname=surname)
    if not people:
        console.print("[yellow]No matches found[/yellow]")
        return

    table = Table(title=f"Matches ({len(people)})")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Sex")
    table.add_column("Born")
    table.add_column("Families", style="dim")

    for person in people:
        table.add_row(
            person.gedcom_id,
            person.display_name(),
            person.sex,
            person.estimated_birth_date().to_gedcom() or "-",
            " ".join(person.spouse_family_ids) or "-",
        )

    console.print(table)


@cli.command("check")
@click.argument("file", type=click.Path(exists=True))
def check_tree(file: str):
    """Summarise a GEDCOM file and report problems affecting classification."""
    tree = _load_tree(file)
    issues = tree.validate()
    stats = tree.get_statistics()

    table = Table(title="GEDCOM summary")
    table.add_column("Records", style="bold")
    table.add_column("Count", justify="right")
    for key, count in stats.items():
        table.add_row(key.capitalize(), str(count))
    console.print(table)

    if not issues:
        console.print("[green]No problems found[/green]")
        return

    for issue in issues:
        color = "red" if issue.severity == "error" else "yellow"
        console.print(f"[{color}]{issue}[/{color}]")

    if tree.errors:
        sys.exit(1)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
