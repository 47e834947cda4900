"""
schemactl - command-line interface for the DocOntology schema registry.

Manages schemas, document types and countries, and queries reference data.
Running without a command starts the interactive shell.

Environment variables:
  SCHEMACTL_API_URL    API base URL (default: https://api.docdigitizer.com/registry)
  SCHEMACTL_API_KEY    API key for authentication (optional)
  SCHEMACTL_TIMEOUT    Request timeout in seconds (default: 30)
  LOG_LEVEL            Log level of the stderr log (default: critical)
"""

import sys
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Optional

import click
import typer

from registry.logging.logging_setup import setup_logging
from schemactl.commands import CountriesCommand, DocTypesCommand, SchemasCommand
from schemactl.commands.CommandContext import CommandContext, get_context
from schemactl.output.OutputPrinter import OutputPrinter, format_time, or_dash, truncate
from schemactl.shell.InteractiveShell import InteractiveShell

VALUE_OPTIONS = ("--api-url", "--api-key", "--timeout")
FLAG_OPTIONS = ("--json",)

app = typer.Typer(
    name="schemactl",
    help="CLI for the Schema Registry API. Run without a command to start the interactive shell.",
    add_completion=False,
)
app.add_typer(SchemasCommand.app, name="schemas")
app.add_typer(DocTypesCommand.app, name="doc-types")
app.add_typer(DocTypesCommand.app, name="doctypes", hidden=True)
app.add_typer(CountriesCommand.app, name="countries")


def get_version() -> str:
    try:
        return package_version("schemactl")
    except PackageNotFoundError:
        return "dev"


##########################################
############ GLOBAL OPTIONS ##############
##########################################

def split_global_options(args: list[str]) -> tuple[list[str], list[str]]:
    """
    Separates the global options from the rest of a command line, so they can be
    given anywhere instead of only before the command.

    Returns:
        tuple[list[str], list[str]]: The global options and the remaining arguments, each in their original order.
    """
    global_args: list[str] = []
    rest: list[str] = []
    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--":
            rest.extend(args[index:])
            break
        if arg in FLAG_OPTIONS or ("=" in arg and arg.split("=", 1)[0] in VALUE_OPTIONS):
            global_args.append(arg)
        elif arg in VALUE_OPTIONS:
            global_args.extend(args[index:index + 2])
            index += 1
        else:
            rest.append(arg)
        index += 1
    return global_args, rest


def hoist_global_options(args: list[str]) -> list[str]:
    global_args, rest = split_global_options(args)
    return global_args + rest


##########################################
################ ROOT ##################
##########################################

@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    api_url: Optional[str] = typer.Option(None, "--api-url", help="API base URL (env: SCHEMACTL_API_URL)"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="API key (env: SCHEMACTL_API_KEY)"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds (env: SCHEMACTL_TIMEOUT)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    in_shell = isinstance(ctx.obj, dict) and ctx.obj.get("in_shell", False)
    ctx.obj = CommandContext(
        logger=setup_logging(),
        api_url=api_url,
        api_key=api_key,
        timeout=timeout,
        json_output=json_output,
    )
    if ctx.invoked_subcommand is None and not in_shell:
        start_shell(ctx.obj)


@app.command("version")
def show_version(ctx: typer.Context):
    """Print the version number."""
    get_context(ctx).printer.print_success(f"schemactl version {get_version()}")


@app.command("health")
def health(ctx: typer.Context):
    """Check the health of the API server and its database connection."""
    state = get_context(ctx)
    result = state.run(lambda client: client.do_health())
    if result is None:
        state.fail("empty response from server")
    state.emit(result, lambda: state.printer.print_key_values([
        ("Status", "OK" if result.status == "ok" else "ERROR"),
        ("Database", "Connected" if result.database == "connected" else "Disconnected"),
        ("Timestamp", format_time(result.timestamp)),
    ]))


def reference_data(ctx: typer.Context):
    """Get all active doc types and countries in a single request."""
    state = get_context(ctx)
    result = state.run(lambda client: client.do_fetch_reference_data())
    if result is None:
        state.fail("empty response from server")

    def render() -> None:
        printer = state.printer
        printer.print_heading("Document Types")
        printer.print_table(
            ["CODE", "NAME", "DESCRIPTION"],
            [[dt.code, dt.name, truncate(or_dash(dt.description), 40)] for dt in result.doc_types],
        )
        printer.print_line()
        printer.print_heading("Countries")
        printer.print_table(["CODE", "NAME"], [[c.code, c.name] for c in result.countries])

    state.emit(result, render)


app.command("reference-data")(reference_data)
app.command("ref", hidden=True)(reference_data)
app.command("reference", hidden=True)(reference_data)


@app.command("shell")
def shell(ctx: typer.Context):
    """Start an interactive shell session."""
    start_shell(get_context(ctx))


##########################################
################ SHELL ###################
##########################################

def start_shell(state: CommandContext) -> None:
    # options given when starting the shell apply to every line, later ones win
    session_args: list[str] = []
    if state.api_url:
        session_args += ["--api-url", state.api_url]
    if state.api_key:
        session_args += ["--api-key", state.api_key]
    if state.timeout is not None:
        session_args += ["--timeout", str(state.timeout)]
    if state.json_output:
        session_args.append("--json")

    printer = OutputPrinter()
    InteractiveShell(
        dispatch=lambda args: dispatch(session_args + args, printer),
        printer=printer,
        version=get_version(),
    ).run()


def dispatch(args: list[str], printer: OutputPrinter) -> None:
    """
    Runs one shell line through the command tree. Errors are printed, never raised.
    """
    command = typer.main.get_command(app)
    try:
        command.main(
            args=hoist_global_options(args),
            prog_name="schemactl",
            standalone_mode=False,
            obj={"in_shell": True},
        )
    except click.ClickException as e:
        printer.print_error(e.format_message())
    except click.Abort:
        printer.print_line("Aborted")


##########################################
################ ENTRY ###################
##########################################

def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    app(args=hoist_global_options(args), prog_name="schemactl")


if __name__ == "__main__":
    main()
