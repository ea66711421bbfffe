"""CLI principal (Typer).

Comandos:
- `ip`: imprime la IP detectada.
- `sync`: actualiza `.env` con la IP detectada.
- `setup`: crea `.env` si falta e instala todo (fail-fast).
- `doctor`: diagnósticos.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from adapters.network import PsutilAddressResolver
from cli import doctor
from cli.ui_components import build_network_panel, describe_sync, print_banner
from core.config import AppSettings
from core.domain.models import SetupStep, SyncResult
from core.errors import CommandError, SetupError
from core.services.env_sync import EnvSynchronizer
from core.services.setup_orchestrator import SetupHooks, SetupOrchestrator

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Detect the LAN address, keep .env in sync and bootstrap the project.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format="<level>{level: <8}</level> {message}")


def _settings(ctx: typer.Context) -> AppSettings:
    return ctx.ensure_object(dict)["settings"]


def _fail(exc: SetupError) -> NoReturn:
    _err_console.print(f"[red]❌ {escape(str(exc))}[/red]")
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    root: Optional[Path] = typer.Option(
        None, "--root", "-r", help="Project root (defaults to LAN_SETUP_PROJECT_ROOT or the current directory)."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level for stderr (DEBUG, INFO, ...)."),
) -> None:
    overrides: dict[str, object] = {}
    if root is not None:
        overrides["project_root"] = root
    if log_level is not None:
        overrides["log_level"] = log_level
    settings = AppSettings(**overrides)
    configure_logging(settings.log_level)
    ctx.ensure_object(dict)["settings"] = settings


@app.command()
def ip(ctx: typer.Context) -> None:
    """Print the detected local IP address (or the fallback host)."""

    settings = _settings(ctx)
    typer.echo(PsutilAddressResolver(fallback=settings.fallback_host).resolve())


@app.command()
def sync(ctx: typer.Context) -> None:
    """Write the detected IP into the frontend/API URLs of .env."""

    settings = _settings(ctx)
    host = PsutilAddressResolver(fallback=settings.fallback_host).resolve()

    _console.print(build_network_panel(host, frontend_port=settings.frontend_port, api_port=settings.api_port))
    try:
        result = EnvSynchronizer.from_settings(settings).synchronize(host)
    except SetupError as exc:
        _fail(exc)
    _console.print(describe_sync(result))

    _console.print("\n📱 Access from other devices:")
    _console.print(f"   http://{host}:{settings.frontend_port}")
    _console.print("\n📋 Make sure to:")
    _console.print(f"   1. Update database credentials in {settings.env_filename}")
    _console.print("   2. Run: lan-setup setup")
    _console.print("   3. Start the application")


def _console_hooks() -> SetupHooks:
    def env_exists(path: Path) -> None:
        _console.print(f"📄 {path.name} file already exists")

    def env_created(result: SyncResult) -> None:
        _console.print(describe_sync(result))

    def step_start(step: SetupStep) -> None:
        _console.print(f"\n🔧 {escape(step.description)}...")

    def step_success(step: SetupStep) -> None:
        _console.print(f"[green]✅ {escape(step.description)} completed[/green]")

    def step_failure(step: SetupStep, returncode: int) -> None:
        _err_console.print(f"[red]❌ {escape(step.description)} failed (exit {returncode})[/red]")

    return SetupHooks(
        env_exists=env_exists,
        env_created=env_created,
        step_start=step_start,
        step_success=step_success,
        step_failure=step_failure,
    )


@app.command()
def setup(ctx: typer.Context) -> None:
    """Create .env if missing, then install dependencies and set up the database."""

    settings = _settings(ctx)
    print_banner(_console, "Network setup")

    host = PsutilAddressResolver(fallback=settings.fallback_host).resolve()
    _console.print(f"🌐 Detected local IP: {host}")

    orchestrator = SetupOrchestrator(
        EnvSynchronizer.from_settings(settings),
        host,
        project_root=settings.project_root,
        hooks=_console_hooks(),
    )
    try:
        orchestrator.run(settings.steps)
    except CommandError:
        # Already announced by the failure hook.
        raise typer.Exit(code=1)
    except SetupError as exc:
        _fail(exc)

    _console.print("\n🎉 Setup completed successfully!")
    _console.print("\n📱 Access URLs:")
    _console.print(f"   Frontend: http://{host}:{settings.frontend_port}")
    _console.print(f"   Backend:  http://{host}:{settings.api_port}")
    _console.print("\n🔑 Default login credentials are created by the database setup step.")
    _console.print("\n⚠️  Remember to:")
    _console.print(f"   1. Update database password in {settings.env_filename}")
    _console.print("   2. Change default passwords after first login")
    _console.print("   3. Configure firewall if needed")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
