from typing import Optional

import typer

from registry.clients.registry.models.DocType import CreateDocTypeRequest, DocTypeDetails, UpdateDocTypeRequest
from schemactl.commands.CommandContext import get_context
from schemactl.output.OutputPrinter import OutputPrinter, format_time, or_dash, truncate, yes_no

app = typer.Typer(help="Manage document types", no_args_is_help=True)


def print_doc_type_details(printer: OutputPrinter, doc_type: DocTypeDetails) -> None:
    printer.print_key_values([
        ("Code", doc_type.code),
        ("Name", doc_type.name),
        ("Description", or_dash(doc_type.description)),
        ("Active", yes_no(doc_type.is_active)),
        ("Created At", format_time(doc_type.created_at)),
        ("Updated At", format_time(doc_type.updated_at)),
    ])


@app.command("list")
def list_doc_types(
    ctx: typer.Context,
    include_all: bool = typer.Option(False, "--all", help="Include inactive doc types"),
):
    """List document types. Use --all to include inactive ones."""
    state = get_context(ctx)
    doc_types = state.run(lambda client: client.do_list_doc_types(include_inactive=include_all))
    state.emit(doc_types, lambda: state.printer.print_table(
        ["CODE", "NAME", "DESCRIPTION", "ACTIVE"],
        [[dt.code, dt.name, truncate(or_dash(dt.description), 40), yes_no(dt.is_active)] for dt in doc_types],
    ))


@app.command("get")
def get_doc_type(ctx: typer.Context, code: str = typer.Argument(...)):
    """Get a document type by its code."""
    state = get_context(ctx)
    doc_type = state.run(lambda client: client.do_get_doc_type(code))
    if doc_type is None:
        state.fail(f"doc type {code} not found")
    state.emit(doc_type, lambda: print_doc_type_details(state.printer, doc_type))


@app.command("create")
def create_doc_type(
    ctx: typer.Context,
    code: str = typer.Argument(...),
    name: str = typer.Argument(...),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Doc type description"),
):
    """Create a new document type with the given code and name."""
    state = get_context(ctx)
    request = CreateDocTypeRequest(code=code, name=name, description=description or None)
    doc_type = state.run(lambda client: client.do_create_doc_type(request))
    state.emit(doc_type, lambda: state.printer.print_success(f"Doc type created: {doc_type.code if doc_type else code}"))


@app.command("update")
def update_doc_type(
    ctx: typer.Context,
    code: str = typer.Argument(...),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description, pass \"\" to clear"),
    active: Optional[bool] = typer.Option(None, "--active/--inactive", help="Set active status"),
):
    """Update a document type's name, description, or active status."""
    state = get_context(ctx)
    fields: dict = {}
    if name:
        fields["name"] = name
    if description is not None:
        fields["description"] = description
    if active is not None:
        fields["is_active"] = active
    if not fields:
        state.fail("no update fields provided")

    request = UpdateDocTypeRequest(**fields)
    doc_type = state.run(lambda client: client.do_update_doc_type(code, request))
    state.emit(doc_type, lambda: state.printer.print_success(f"Doc type updated: {doc_type.code if doc_type else code}"))


@app.command("delete")
def delete_doc_type(ctx: typer.Context, code: str = typer.Argument(...)):
    """Soft delete a document type (sets isActive to false)."""
    state = get_context(ctx)
    state.run(lambda client: client.do_delete_doc_type(code))
    state.printer.print_success(f"Doc type deleted: {code}")
