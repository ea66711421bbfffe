"""Doctor command for environment diagnostics."""

from __future__ import annotations

import re

import typer
from rich.console import Console
from rich.table import Table

from adapters.network import PsutilAddressResolver
from adapters.process_runner import resolve_executable
from cli.ui_components import build_steps_table
from core.config import AppSettings
from core.domain.env_document import EnvDocument
from core.errors import EnvFileError
from core.services.env_sync import API_URL_KEY, FRONTEND_URL_KEY, LISTEN_PORT_KEY, EnvSynchronizer

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_WELL_FORMED_URL = re.compile(r"^http://[^:/\s]+:\d+$")


def _load_document(settings: AppSettings) -> tuple[EnvDocument | None, str]:
    synchronizer = EnvSynchronizer.from_settings(settings)
    if not synchronizer.exists():
        return None, "Missing -> run `lan-setup sync` or `lan-setup setup`"
    try:
        document, _, _ = synchronizer.load()
    except EnvFileError as exc:
        return None, str(exc)
    return document, str(synchronizer.env_path)


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings: AppSettings = ctx.ensure_object(dict).get("settings") or AppSettings()

    table = Table(title="LAN-SETUP Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Network
    host = PsutilAddressResolver(fallback=settings.fallback_host).resolve()
    if host == settings.fallback_host:
        table.add_row("Local IP", "FALLBACK", f"No external IPv4 interface -> {host} (local-only access)")
    else:
        table.add_row("Local IP", "OK", host)

    # Documents
    document, detail = _load_document(settings)
    table.add_row(settings.env_filename, "OK" if document is not None else "FAIL", detail)
    template = settings.template_path()
    table.add_row(
        settings.template_filename,
        "OK" if template.is_file() else "OPTIONAL",
        str(template) if template.is_file() else "Not found -> built-in defaults are used",
    )

    if document is not None:
        for key in (FRONTEND_URL_KEY, API_URL_KEY):
            value = document.get(key)
            if value is None:
                table.add_row(key, "FAIL", "Missing")
            elif _WELL_FORMED_URL.match(value.strip()):
                table.add_row(key, "OK", value.strip())
            else:
                table.add_row(key, "WARN", f"{value.strip()} is not http://host:port")
        port = document.get(LISTEN_PORT_KEY)
        table.add_row("Server block", "OK" if port is not None else "WARN", f"PORT={port}" if port else "PORT missing")

    # Steps
    for step in settings.steps:
        executable = resolve_executable(step.command[0])
        cwd = step.resolve_cwd(settings.project_root)
        if executable is None:
            table.add_row(step.description, "FAIL", f"`{step.command[0]}` not found on PATH")
        elif not cwd.is_dir():
            table.add_row(step.description, "FAIL", f"Directory {cwd} does not exist")
        else:
            table.add_row(step.description, "OK", executable)

    _console.print(table)
    _console.print(build_steps_table(settings.steps))
