"""Terminal rendering of registry results: tables, key/value blocks and JSON."""

import json
from datetime import datetime
from typing import Any, Iterable

import typer
from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.table import Table

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


##########################################
############### FORMATTERS ###############
##########################################

def truncate(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    if max_len <= 3:
        return value[:max_len]
    return value[:max_len - 3] + "..."


def or_dash(value: Any, default: str = "-") -> str:
    if value is None:
        return default
    return str(value)


def yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def format_time(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime(TIME_FORMAT)


def to_jsonable(data: Any) -> Any:
    """
    Converts models (and lists of models) into plain JSON data, keyed by the API's camelCase field names.
    """
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [to_jsonable(item) for item in data]
    return data


##########################################
################ PRINTER #################
##########################################

class OutputPrinter:
    """
    Writes command results to stdout and errors to stderr.

    With json_output set, every result is written as indented JSON instead of a table.
    """

    def __init__(self, json_output: bool = False):
        self.json_output = json_output
        self._console = Console(highlight=False, emoji=False, soft_wrap=True)
        self._err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)

    def print_json(self, data: Any) -> None:
        typer.echo(json.dumps(to_jsonable(data), indent=2, ensure_ascii=False))

    def print_line(self, line: str = "") -> None:
        self._console.print(line, markup=False)

    def print_success(self, message: str) -> None:
        self._console.print(message, markup=False)

    def print_error(self, message: str) -> None:
        self._err_console.print(f"Error: {message}", markup=False)

    def print_heading(self, title: str) -> None:
        self.print_line(f"{title}:")
        self.print_line("-" * (len(title) + 1))

    def print_table(self, headers: list[str], rows: Iterable[list[str]]) -> None:
        table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
        for header in headers:
            table.add_column(header, no_wrap=True)
        for row in rows:
            table.add_row(*row)
        self._console.print(table)

    def print_key_values(self, pairs: list[tuple[str, str]], indent: int = 0) -> None:
        """
        Prints aligned "Key: value" lines. Keeps the given order.
        """
        if not pairs:
            return
        width = max(len(key) for key, _ in pairs) + 1
        prefix = " " * indent
        for key, value in pairs:
            self.print_line(f"{prefix}{(key + ':').ljust(width)}  {value}")

    def print_content(self, content: Any, indent: int = 2) -> None:
        """
        Prints a JSON document indented below a heading.
        """
        prefix = " " * indent
        for line in json.dumps(content, indent=2, ensure_ascii=False).splitlines():
            self.print_line(f"{prefix}{line}")
