from typing import Callable

from schemactl.output.OutputPrinter import OutputPrinter
from schemactl.shell.ShellTokenizer import tokenize

PROMPT = "schemactl> "
EXIT_COMMANDS = ("exit", "quit", "q")
HELP_COMMANDS = ("help", "?")

SHELL_HELP = """
COMMANDS
  health                  Check API health status
  reference-data          Get all doc types and countries
  version                 Print the version number

SCHEMAS
  schemas list            List schemas         e.g. schemas list --status active -t Invoice -c PT
  schemas get <id>        Get a schema         e.g. schemas get sch_abc123def456
  schemas version <vid>   Get a schema version e.g. schemas version schv_abc123def456
  schemas create          Create a schema      e.g. schemas create -n "My Schema" -t Invoice --content @schema.json
  schemas update <id>     Update a schema      e.g. schemas update sch_abc123def456 -n "New Name"
  schemas activate <id>   Activate a draft schema
  schemas deprecate <id>  Deprecate an active schema
  schemas delete <id>     Delete a draft schema
  schemas find-best       Find the best schema e.g. schemas find-best -t Invoice -c PT
  schemas versions <id>   List all versions of a schema
  schemas match <file>    Classify a file and match a schema
  schemas generate        Generate a schema    e.g. schemas generate -f invoice.pdf -t Invoice -c PT

DOC-TYPES
  doc-types list [--all]  List document types
  doc-types get <code>    Get a document type
  doc-types create <code> <name> [-d description]
  doc-types update <code> [-n name] [-d description] [--active/--inactive]
  doc-types delete <code> Deactivate a document type

COUNTRIES
  countries list [--all]  List countries
  countries get <code>    Get a country
  countries create <code> <name>
  countries update <code> [-n name] [--active/--inactive]
  countries delete <code> Deactivate a country

GLOBAL OPTIONS (anywhere on the line)
  --json  --api-url <url>  --api-key <key>  --timeout <seconds>

SHELL
  help, ?                 Show this help
  exit, quit, q           Leave the shell
"""


class InteractiveShell:
    """
    Read-eval-print loop over the CLI command tree.

    Every line is tokenized and handed to dispatch, which runs it like a
    command line (without the program name). A failing command never ends the loop.
    """

    def __init__(
        self,
        dispatch: Callable[[list[str]], None],
        printer: OutputPrinter,
        version: str = "dev",
        read_line: Callable[[str], str] = input,
    ):
        self._dispatch = dispatch
        self._printer = printer
        self._version = version
        self._read_line = read_line

    def run(self) -> None:
        self._print_banner()
        while True:
            try:
                line = self._read_line(PROMPT)
            except EOFError:
                self._printer.print_line()
                self._printer.print_line("Goodbye!")
                return
            except KeyboardInterrupt:
                self._printer.print_line()
                continue

            if not self.handle_line(line):
                return

    def handle_line(self, line: str) -> bool:
        """
        Handles one input line.

        Returns:
            bool: False if the shell should stop.
        """
        line = line.strip()
        if not line:
            return True
        if line in EXIT_COMMANDS:
            self._printer.print_line("Goodbye!")
            return False
        if line in HELP_COMMANDS:
            self._printer.print_line(SHELL_HELP)
            return True

        args = tokenize(line)
        if not args:
            return True
        if args[0] == "shell":
            self._printer.print_line("Already in interactive shell")
            return True

        self._dispatch(args)
        self._printer.print_line()
        return True

    def _print_banner(self) -> None:
        self._printer.print_line("schemactl - Schema Registry CLI")
        self._printer.print_line(f"  Version: {self._version}")
        self._printer.print_line("  Type 'help' for commands, 'exit' to quit")
        self._printer.print_line()
