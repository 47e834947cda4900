from typing import Optional

import typer

from registry.clients.registry.models.Extraction import ExtractResponse, GenerateResponse, GenerateSchemaRequest
from registry.clients.registry.models.FindBest import FindBestRequest
from registry.clients.registry.models.RegistryModel import SchemaStatus, SchemaType, Visibility
from registry.clients.registry.models.Schema import (
    CreateSchemaRequest,
    ListSchemasOptions,
    PaginatedSchemaList,
    SchemaWithRelations,
    UpdateSchemaRequest,
)
from schemactl.commands.CommandContext import get_context
from schemactl.output.OutputPrinter import OutputPrinter, format_time, or_dash, truncate

app = typer.Typer(help="Manage schemas", no_args_is_help=True)


##########################################
############### RENDERING ################
##########################################

def print_schema_details(printer: OutputPrinter, schema: SchemaWithRelations) -> None:
    doc_type = f"{schema.doc_type.code} ({schema.doc_type.name})" if schema.doc_type else schema.doc_type_code
    if schema.country:
        country = f"{schema.country.code} ({schema.country.name})"
    else:
        country = or_dash(schema.country_code)
    printer.print_key_values([
        ("ID", schema.public_id),
        ("Version ID", schema.public_version_id),
        ("Name", schema.name),
        ("Description", or_dash(schema.description)),
        ("Version", str(schema.version)),
        ("Status", schema.status.value),
        ("Doc Type", doc_type),
        ("Country", country),
        ("Visibility", schema.visibility.value),
        ("Schema Type", schema.schema_type.value),
        ("Customer ID", or_dash(schema.customer_id)),
        ("Created At", format_time(schema.created_at)),
        ("Updated At", format_time(schema.updated_at)),
    ])
    printer.print_line()
    printer.print_line("Content:")
    printer.print_content(schema.content)


def print_schema_list(printer: OutputPrinter, result: PaginatedSchemaList) -> None:
    printer.print_table(
        ["ID", "VERSION ID", "NAME", "DOC TYPE", "COUNTRY", "STATUS", "VER", "VISIBILITY"],
        [
            [
                s.public_id,
                s.public_version_id,
                truncate(s.name, 30),
                s.doc_type_code,
                or_dash(s.country_code),
                s.status.value,
                str(s.version),
                s.visibility.value,
            ]
            for s in result.data
        ],
    )
    if result.pagination.has_more:
        printer.print_line()
        printer.print_line(f"Showing {len(result.data)} of {result.pagination.total} schemas (use --offset to see more)")


def print_match_result(printer: OutputPrinter, result: ExtractResponse) -> None:
    printer.print_line("Classification:")
    printer.print_key_values([
        ("Doc Type", result.classification.doc_type),
        ("Country", result.classification.country),
        ("Pages", ", ".join(str(p) for p in result.classification.pages) or "-"),
    ], indent=2)
    printer.print_line()
    if result.matched_schema is None:
        printer.print_line("No matching schema found")
        return
    printer.print_line("Matched Schema:")
    printer.print_key_values([
        ("ID", result.matched_schema.public_id),
        ("Version ID", result.matched_schema.public_version_id),
        ("Name", result.matched_schema.name),
        ("Type", result.matched_schema.schema_type.value),
    ], indent=2)


def print_generate_result(printer: OutputPrinter, result: GenerateResponse) -> None:
    printer.print_key_values([
        ("Doc Type", result.doc_type),
        ("Country", result.country),
    ])
    printer.print_line()
    printer.print_line("Generated Schema:")
    printer.print_content(result.generated_schema.content)


##########################################
############### COMMANDS #################
##########################################

@app.command("list")
def list_schemas(
    ctx: typer.Context,
    status: Optional[SchemaStatus] = typer.Option(None, "--status", help="Filter by status"),
    doc_type: Optional[str] = typer.Option(None, "--doc-type", "-t", help="Filter by doc type code"),
    country: Optional[str] = typer.Option(None, "--country", "-c", help="Filter by country code"),
    visibility: Optional[Visibility] = typer.Option(None, "--visibility", "-v", help="Filter by visibility"),
    customer_id: Optional[str] = typer.Option(None, "--customer-id", help="Filter by customer ID"),
    limit: int = typer.Option(50, "--limit", help="Number of items to return"),
    offset: int = typer.Option(0, "--offset", help="Number of items to skip"),
):
    """List schemas with optional filtering."""
    state = get_context(ctx)
    options = ListSchemasOptions(
        status=status,
        doc_type_code=doc_type,
        country_code=country,
        visibility=visibility,
        customer_id=customer_id,
        limit=limit,
        offset=offset,
    )
    result = state.run(lambda client: client.do_list_schemas(options))
    if result is None:
        state.fail("empty response from server")
    state.emit(result, lambda: print_schema_list(state.printer, result))


@app.command("get")
def get_schema(
    ctx: typer.Context,
    schema_id: str = typer.Argument(..., metavar="ID", help="publicId (sch_xxx) or publicVersionId (schv_xxx)"),
):
    """Get a schema by publicId or publicVersionId."""
    state = get_context(ctx)
    schema = state.run(lambda client: client.do_get_schema(schema_id))
    if schema is None:
        state.fail(f"schema {schema_id} not found")
    state.emit(schema, lambda: print_schema_details(state.printer, schema))


@app.command("create")
def create_schema(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Schema name"),
    doc_type: str = typer.Option(..., "--doc-type", "-t", help="Doc type code"),
    content: str = typer.Option(..., "--content", help="JSON schema content or @filepath"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Schema description"),
    country: Optional[str] = typer.Option(None, "--country", "-c", help="Country code"),
    visibility: Visibility = typer.Option(Visibility.PRIVATE, "--visibility", "-v", help="Visibility"),
    schema_type: SchemaType = typer.Option(SchemaType.STANDARD, "--schema-type", help="Schema type"),
    customer_id: Optional[str] = typer.Option(None, "--customer-id", help="Customer ID"),
):
    """Create a new schema in draft status."""
    state = get_context(ctx)
    request = CreateSchemaRequest(
        name=name,
        doc_type_code=doc_type,
        content=state.parse_content(content),
        description=description or None,
        country_code=country or None,
        visibility=visibility,
        schema_type=schema_type,
        customer_id=customer_id or None,
    )
    schema = state.run(lambda client: client.do_create_schema(request))
    if schema is None:
        state.fail("empty response from server")
    state.emit(schema, lambda: state.printer.print_success(f"Schema created: {schema.public_id} (version: {schema.public_version_id})"))


@app.command("update")
def update_schema(
    ctx: typer.Context,
    schema_id: str = typer.Argument(..., metavar="ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Schema name"),
    doc_type: Optional[str] = typer.Option(None, "--doc-type", "-t", help="Doc type code"),
    content: Optional[str] = typer.Option(None, "--content", help="JSON schema content or @filepath"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Schema description, pass \"\" to clear"),
    country: Optional[str] = typer.Option(None, "--country", "-c", help="Country code, pass \"\" to clear"),
    visibility: Optional[Visibility] = typer.Option(None, "--visibility", "-v", help="Visibility"),
    schema_type: Optional[SchemaType] = typer.Option(None, "--schema-type", help="Schema type"),
):
    """Update a schema. If the schema is active, a new version is created."""
    state = get_context(ctx)
    fields: dict = {}
    if name:
        fields["name"] = name
    if doc_type:
        fields["doc_type_code"] = doc_type
    if content:
        fields["content"] = state.parse_content(content)
    # description and country may be passed empty to clear them
    if description is not None:
        fields["description"] = description
    if country is not None:
        fields["country_code"] = country
    if visibility is not None:
        fields["visibility"] = visibility
    if schema_type is not None:
        fields["schema_type"] = schema_type
    if not fields:
        state.fail("no update fields provided")

    request = UpdateSchemaRequest(**fields)
    schema = state.run(lambda client: client.do_update_schema(schema_id, request))
    if schema is None:
        state.fail("empty response from server")
    state.emit(schema, lambda: state.printer.print_success(f"Schema updated: {schema.public_id} (version: {schema.public_version_id})"))


@app.command("activate")
def activate_schema(ctx: typer.Context, schema_id: str = typer.Argument(..., metavar="ID")):
    """Transition a draft schema to active status."""
    state = get_context(ctx)
    schema = state.run(lambda client: client.do_activate_schema(schema_id))
    state.emit(schema, lambda: state.printer.print_success(f"Schema activated: {schema.public_id if schema else schema_id}"))


@app.command("deprecate")
def deprecate_schema(ctx: typer.Context, schema_id: str = typer.Argument(..., metavar="ID")):
    """Transition an active schema to deprecated status."""
    state = get_context(ctx)
    schema = state.run(lambda client: client.do_deprecate_schema(schema_id))
    state.emit(schema, lambda: state.printer.print_success(f"Schema deprecated: {schema.public_id if schema else schema_id}"))


@app.command("delete")
def delete_schema(ctx: typer.Context, schema_id: str = typer.Argument(..., metavar="ID")):
    """Delete a draft schema. Active schemas must be deprecated first."""
    state = get_context(ctx)
    state.run(lambda client: client.do_delete_schema(schema_id))
    state.printer.print_success(f"Schema deleted: {schema_id}")


@app.command("find-best")
def find_best_schema(
    ctx: typer.Context,
    doc_type: str = typer.Option(..., "--doc-type", "-t", help="Doc type code"),
    country: Optional[str] = typer.Option(None, "--country", "-c", help="Country code"),
    customer_id: Optional[str] = typer.Option(None, "--customer-id", help="Customer ID"),
):
    """Find the best schema for a doc type and optional country."""
    state = get_context(ctx)
    request = FindBestRequest(doc_type_code=doc_type, country_code=country or None, customer_id=customer_id or None)
    result = state.run(lambda client: client.do_find_best_schema(request))

    def render() -> None:
        if result is None or result.matched_schema is None:
            state.printer.print_success("No matching schema found")
            return
        state.printer.print_line(f"Match type: {or_dash(result.match_type, 'unknown')}")
        state.printer.print_line()
        print_schema_details(state.printer, result.matched_schema)

    state.emit(result, render)


@app.command("versions")
def list_schema_versions(ctx: typer.Context, schema_id: str = typer.Argument(..., metavar="ID")):
    """List all versions of a schema by publicId."""
    state = get_context(ctx)
    versions = state.run(lambda client: client.do_list_schema_versions(schema_id))
    state.emit(versions, lambda: state.printer.print_table(
        ["VERSION ID", "VERSION", "STATUS", "CREATED AT"],
        [[v.public_version_id, str(v.version), v.status.value, format_time(v.created_at)] for v in versions],
    ))


@app.command("version")
def get_schema_version(ctx: typer.Context, version_id: str = typer.Argument(..., metavar="VERSION_ID")):
    """Get one schema version by publicVersionId."""
    state = get_context(ctx)
    schema = state.run(lambda client: client.do_get_schema_version(version_id))
    if schema is None:
        state.fail(f"schema version {version_id} not found")
    state.emit(schema, lambda: print_schema_details(state.printer, schema))


@app.command("match")
def match_schema(
    ctx: typer.Context,
    file_path: str = typer.Argument(..., metavar="FILE", help="PDF or JPEG file"),
    customer_id: Optional[str] = typer.Option(None, "--customer-id", help="Customer ID for private schema matching"),
):
    """Upload a PDF or JPEG file to classify it and find the matching schema."""
    state = get_context(ctx)
    result = state.run(lambda client: client.do_match_schema(file_path, customer_id=customer_id or None))
    if result is None:
        state.fail("empty response from server")
    state.emit(result, lambda: print_match_result(state.printer, result))


@app.command("generate")
def generate_schema(
    ctx: typer.Context,
    doc_type: str = typer.Option(..., "--doc-type", "-t", help="Doc type code"),
    country: str = typer.Option(..., "--country", "-c", help="Country code"),
    file_path: Optional[str] = typer.Option(None, "--file", "-f", help="Path to PDF or JPEG file"),
    text: Optional[str] = typer.Option(None, "--text", help="Raw text content (alternative to file)"),
    use_ocr: bool = typer.Option(True, "--use-ocr/--no-ocr", help="Run OCR on the file (off uses vision mode)"),
):
    """
    Generate a JSON schema from a document.

    Provide either a file or text content, e.g.

      schemactl schemas generate -f invoice.pdf -t Invoice -c PT
    """
    state = get_context(ctx)
    if not file_path and not text:
        state.fail("either --file or --text must be provided")
    if file_path and text:
        state.fail("only one of --file or --text can be provided")

    request = GenerateSchemaRequest(
        doc_type_code=doc_type,
        country_code=country,
        file_path=file_path or None,
        text=text or None,
        use_ocr=use_ocr,
    )
    result = state.run(lambda client: client.do_generate_schema(request))
    if result is None:
        state.fail("empty response from server")
    state.emit(result, lambda: print_generate_result(state.printer, result))
