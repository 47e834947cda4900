import asyncio
import json
import os
from typing import Any, Awaitable, Callable, NoReturn, TypeVar

import typer

from registry.clients.ClientErrors import ClientError
from registry.clients.registry.RegistryClientInterface import RegistryClientInterface
from registry.clients.registry.docontology.RegistryClientDocOntology import RegistryClientDocOntology
from registry.helper.HelperConfig import HelperConfig
from registry.logging.logging_setup import ColorLogger
from schemactl.output.OutputPrinter import OutputPrinter

T = TypeVar("T")


class CommandContext:
    """
    State of one CLI invocation, carried in the Typer context object.

    Holds the global options and creates a fresh registry client for every
    call; nothing is shared between calls except these settings.
    """

    def __init__(
        self,
        logger: ColorLogger,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        json_output: bool = False,
    ):
        self.logging = logger
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self.printer = OutputPrinter(json_output=json_output)

    @property
    def json_output(self) -> bool:
        return self.printer.json_output

    ##########################################
    ################ CLIENT ##################
    ##########################################

    def build_client(self) -> RegistryClientInterface:
        """
        Creates a client from env config, with the global options applied on top.

        Raises:
            ConfigurationError: If the resolved configuration is invalid.
        """
        return RegistryClientDocOntology(
            helper_config=HelperConfig(self.logging),
            base_url=self.api_url,
            api_key=self.api_key,
            timeout=self.timeout,
        )

    def run(self, operation: Callable[[RegistryClientInterface], Awaitable[T]]) -> T:
        """
        Runs one client operation to completion. Any client error ends the command
        with a single "Error: ..." line on stderr and exit code 1.
        """
        try:
            return asyncio.run(self._run(operation))
        except ClientError as e:
            self.logging.debug("%s: %s", type(e).__name__, e, color="red")
            self.fail(str(e))

    async def _run(self, operation: Callable[[RegistryClientInterface], Awaitable[T]]) -> T:
        client = self.build_client()
        self.logging.debug("Using %s registry at %s", client.get_engine_name(), client.config.base_url, color="cyan")
        async with client:
            return await operation(client)

    ##########################################
    ################ OUTPUT ##################
    ##########################################

    def fail(self, message: str) -> NoReturn:
        self.printer.print_error(message)
        raise typer.Exit(code=1)

    def emit(self, data: Any, render: Callable[[], None]) -> None:
        """
        Prints data as JSON in JSON mode, calls the human readable renderer otherwise.
        """
        if self.json_output:
            self.printer.print_json(data)
        else:
            render()

    def parse_content(self, raw: str) -> dict[str, Any]:
        """
        Parses a JSON object given inline or as @path.
        """
        if raw.startswith("@"):
            file_path = raw[1:]
            try:
                with open(os.path.expanduser(file_path), "r", encoding="utf-8") as f:
                    raw = f.read()
            except OSError as e:
                self.fail(f"invalid content: failed to read file: {e}")
        try:
            content = json.loads(raw)
        except json.JSONDecodeError as e:
            self.fail(f"invalid content: invalid JSON: {e}")
        if not isinstance(content, dict):
            self.fail("invalid content: JSON schema content must be an object")
        return content


def get_context(ctx: typer.Context) -> CommandContext:
    return ctx.find_object(CommandContext)
