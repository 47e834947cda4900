from typing import Optional

import typer

from registry.clients.registry.models.Country import CountryDetails, CreateCountryRequest, UpdateCountryRequest
from schemactl.commands.CommandContext import get_context
from schemactl.output.OutputPrinter import OutputPrinter, format_time, yes_no

app = typer.Typer(help="Manage countries", no_args_is_help=True)


def print_country_details(printer: OutputPrinter, country: CountryDetails) -> None:
    printer.print_key_values([
        ("Code", country.code),
        ("Name", country.name),
        ("Active", yes_no(country.is_active)),
        ("Created At", format_time(country.created_at)),
        ("Updated At", format_time(country.updated_at)),
    ])


@app.command("list")
def list_countries(
    ctx: typer.Context,
    include_all: bool = typer.Option(False, "--all", help="Include inactive countries"),
):
    """List countries. Use --all to include inactive ones."""
    state = get_context(ctx)
    countries = state.run(lambda client: client.do_list_countries(include_inactive=include_all))
    state.emit(countries, lambda: state.printer.print_table(
        ["CODE", "NAME", "ACTIVE"],
        [[c.code, c.name, yes_no(c.is_active)] for c in countries],
    ))


@app.command("get")
def get_country(ctx: typer.Context, code: str = typer.Argument(...)):
    """Get a country by its code."""
    state = get_context(ctx)
    country = state.run(lambda client: client.do_get_country(code))
    if country is None:
        state.fail(f"country {code} not found")
    state.emit(country, lambda: print_country_details(state.printer, country))


@app.command("create")
def create_country(
    ctx: typer.Context,
    code: str = typer.Argument(...),
    name: str = typer.Argument(...),
):
    """Create a new country with the given code and name."""
    state = get_context(ctx)
    request = CreateCountryRequest(code=code, name=name)
    country = state.run(lambda client: client.do_create_country(request))
    state.emit(country, lambda: state.printer.print_success(f"Country created: {country.code if country else code}"))


@app.command("update")
def update_country(
    ctx: typer.Context,
    code: str = typer.Argument(...),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    active: Optional[bool] = typer.Option(None, "--active/--inactive", help="Set active status"),
):
    """Update a country's name or active status."""
    state = get_context(ctx)
    fields: dict = {}
    if name:
        fields["name"] = name
    if active is not None:
        fields["is_active"] = active
    if not fields:
        state.fail("no update fields provided")

    request = UpdateCountryRequest(**fields)
    country = state.run(lambda client: client.do_update_country(code, request))
    state.emit(country, lambda: state.printer.print_success(f"Country updated: {country.code if country else code}"))


@app.command("delete")
def delete_country(ctx: typer.Context, code: str = typer.Argument(...)):
    """Soft delete a country (sets isActive to false)."""
    state = get_context(ctx)
    state.run(lambda client: client.do_delete_country(code))
    state.printer.print_success(f"Country deleted: {code}")
