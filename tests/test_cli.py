import functools
import json

import httpx
import pytest
from typer.testing import CliRunner

import schemactl.commands.CommandContext as command_context_module
from conftest import BASE_URL, doc_type_payload, schema_payload
from registry.clients.registry.docontology.RegistryClientDocOntology import RegistryClientDocOntology
from schemactl.cli import app, dispatch, hoist_global_options, split_global_options
from schemactl.output.OutputPrinter import OutputPrinter, format_time, or_dash, truncate, yes_no
from schemactl.shell.InteractiveShell import InteractiveShell

runner = CliRunner()


@pytest.fixture
def server(monkeypatch):
    """Routes every client the CLI builds to an in-memory handler and records the requests."""
    state = {"requests": [], "responses": {}}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        status_code, payload = state["responses"].get((request.method, request.url.path), (404, {"error": "not found"}))
        if payload is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=payload)

    monkeypatch.setattr(
        command_context_module,
        "RegistryClientDocOntology",
        functools.partial(RegistryClientDocOntology, transport=httpx.MockTransport(handler)),
    )
    monkeypatch.setenv("SCHEMACTL_API_URL", BASE_URL)
    return state


def invoke(*args: str):
    return runner.invoke(app, hoist_global_options(list(args)))


##########################################
############ GLOBAL OPTIONS ##############
##########################################

def test_global_options_are_hoisted():
    global_args, rest = split_global_options(["schemas", "list", "--json", "--api-url", "http://x", "--status", "active", "--timeout=5"])

    assert global_args == ["--json", "--api-url", "http://x", "--timeout=5"]
    assert rest == ["schemas", "list", "--status", "active"]


def test_arguments_after_double_dash_are_kept():
    assert hoist_global_options(["schemas", "get", "--", "--json"]) == ["schemas", "get", "--", "--json"]


def test_version_needs_no_configuration(monkeypatch):
    monkeypatch.setenv("SCHEMACTL_API_URL", "   ")

    result = invoke("version")

    assert result.exit_code == 0
    assert result.output.startswith("schemactl version ")


##########################################
############### COMMANDS #################
##########################################

def test_doc_types_list_as_json(server):
    server["responses"][("GET", "/doc-types")] = (200, [doc_type_payload("Invoice", description="Invoices")])

    result = invoke("doc-types", "list", "--json")

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data[0]["code"] == "Invoice"
    assert data[0]["isActive"] is True
    assert data[0]["createdAt"].startswith("2024-05-01T10:00:00")


def test_doc_types_list_all_as_table(server):
    server["responses"][("GET", "/admin/doc-types")] = (200, [
        doc_type_payload("Invoice"),
        doc_type_payload("Receipt", isActive=False, description="Till receipts"),
    ])

    result = invoke("doctypes", "list", "--all")

    assert result.exit_code == 0, result.output
    assert "CODE" in result.output
    assert "Till receipts" in result.output
    assert "No" in result.output


def test_api_key_flag_is_sent(server):
    server["responses"][("GET", "/countries")] = (200, [])

    result = invoke("countries", "list", "--api-key", "secret")

    assert result.exit_code == 0, result.output
    assert server["requests"][-1].headers["Authorization"] == "Bearer secret"


def test_api_error_prints_one_error_line(server):
    server["responses"][("GET", "/admin/schemas/sch_missing")] = (404, {"error": "schema not found"})

    result = invoke("schemas", "get", "sch_missing")

    assert result.exit_code == 1
    assert result.output.strip() == "Error: API error (404): schema not found"


def test_invalid_configuration_is_reported(server):
    result = invoke("health", "--timeout", "0")

    assert result.exit_code == 1
    assert result.output.startswith("Error: Timeout must be a positive number")


def test_non_ascii_api_key_is_reported(server):
    result = invoke("countries", "list", "--api-key", "clé")

    assert result.exit_code == 1
    assert result.output.startswith("Error: API key must contain only ASCII characters")
    assert server["requests"] == []


def test_update_without_fields_fails(server):
    result = invoke("schemas", "update", "sch_abc123")

    assert result.exit_code == 1
    assert "Error: no update fields provided" in result.output
    assert server["requests"] == []


def test_update_with_empty_description_clears_it(server):
    server["responses"][("PATCH", "/admin/doc-types/Invoice")] = (200, doc_type_payload())

    result = invoke("doc-types", "update", "Invoice", "-d", "")

    assert result.exit_code == 0, result.output
    assert json.loads(server["requests"][-1].content) == {"description": ""}
    assert "Doc type updated: Invoice" in result.output


def test_update_active_flag(server):
    server["responses"][("PATCH", "/admin/countries/PT")] = (200, {
        "code": "PT", "name": "Portugal", "isActive": False,
        "createdAt": "2024-05-01T10:00:00Z", "updatedAt": "2024-05-01T10:00:00Z",
    })

    result = invoke("countries", "update", "PT", "--inactive")

    assert result.exit_code == 0, result.output
    assert json.loads(server["requests"][-1].content) == {"isActive": False}


def test_create_schema_from_content_file(server, tmp_path):
    content_file = tmp_path / "schema.json"
    content_file.write_text(json.dumps({"type": "object"}))
    server["responses"][("POST", "/admin/schemas")] = (201, schema_payload("sch_new", publicVersionId="schv_new"))

    result = invoke("schemas", "create", "-n", "Invoice PT", "-t", "Invoice", "--content", f"@{content_file}", "-c", "PT")

    assert result.exit_code == 0, result.output
    assert json.loads(server["requests"][-1].content) == {
        "name": "Invoice PT",
        "content": {"type": "object"},
        "docTypeCode": "Invoice",
        "countryCode": "PT",
        "visibility": "private",
        "schemaType": "standard",
    }
    assert "Schema created: sch_new (version: schv_new)" in result.output


def test_create_schema_rejects_invalid_content(server):
    result = invoke("schemas", "create", "-n", "X", "-t", "Invoice", "--content", "{oops")

    assert result.exit_code == 1
    assert "Error: invalid content: invalid JSON" in result.output
    assert server["requests"] == []


def test_schemas_list_shows_paging_hint(server):
    server["responses"][("GET", "/admin/schemas")] = (200, {
        "data": [schema_payload("sch_1")],
        "pagination": {"total": 3, "limit": 1, "offset": 0, "hasMore": True},
    })

    result = invoke("schemas", "list", "--limit", "1", "--status", "draft")

    assert result.exit_code == 0, result.output
    assert dict(server["requests"][-1].url.params) == {"status": "draft", "limit": "1"}
    assert "Showing 1 of 3 schemas (use --offset to see more)" in result.output


def test_find_best_without_match(server):
    server["responses"][("POST", "/schemas/find-best")] = (200, {"schema": None, "matchType": None})

    result = invoke("schemas", "find-best", "-t", "Unknown")

    assert result.exit_code == 0, result.output
    assert "No matching schema found" in result.output


def test_generate_requires_one_source(server):
    result = invoke("schemas", "generate", "-t", "Invoice", "-c", "PT")

    assert result.exit_code == 1
    assert "Error: either --file or --text must be provided" in result.output


def test_delete_prints_confirmation(server):
    server["responses"][("DELETE", "/admin/schemas/sch_abc123")] = (204, None)

    result = invoke("schemas", "delete", "sch_abc123")

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "Schema deleted: sch_abc123"


def test_reference_data_alias(server):
    server["responses"][("GET", "/reference-data")] = (200, {"docTypes": [doc_type_payload()], "countries": []})

    result = invoke("ref", "--json")

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["docTypes"][0]["code"] == "Invoice"


def test_health_output(server):
    server["responses"][("GET", "/health")] = (200, {"status": "ok", "database": "connected", "timestamp": "2024-05-01T10:00:00Z"})

    result = invoke("health")

    assert result.exit_code == 0, result.output
    assert "Status:     OK" in result.output
    assert "Database:   Connected" in result.output
    assert "Timestamp:  2024-05-01 10:00:00" in result.output


##########################################
################# SHELL ##################
##########################################

def test_shell_dispatch_keeps_running_after_errors(server, capsys):
    printer = OutputPrinter()

    dispatch(["schemas", "get", "sch_missing"], printer)
    dispatch(["schemas", "nonsense"], printer)

    captured = capsys.readouterr()
    assert "Error: API error (404): not found" in captured.err
    assert "Error:" in captured.err.splitlines()[-1]


def test_shell_loop(capsys):
    lines = iter(["", "help", "doc-types list --json", "shell", "quit", "never reached"])
    dispatched = []

    InteractiveShell(dispatch=dispatched.append, printer=OutputPrinter(), read_line=lambda prompt: next(lines)).run()

    output = capsys.readouterr().out
    assert dispatched == [["doc-types", "list", "--json"]]
    assert "COMMANDS" in output
    assert "Already in interactive shell" in output
    assert output.rstrip().endswith("Goodbye!")


def test_shell_exits_on_eof(capsys):
    def read_line(prompt):
        raise EOFError

    InteractiveShell(dispatch=lambda args: None, printer=OutputPrinter(), read_line=read_line).run()

    assert "Goodbye!" in capsys.readouterr().out


##########################################
############### FORMATTERS ###############
##########################################

def test_formatters():
    assert truncate("short", 10) == "short"
    assert truncate("a very long description", 10) == "a very ..."
    assert truncate("abcdef", 3) == "abc"
    assert or_dash(None) == "-"
    assert or_dash(None, "unknown") == "unknown"
    assert yes_no(True) == "Yes" and yes_no(False) == "No"
    assert format_time(None) == "-"
