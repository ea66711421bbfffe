"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar paneles en `sync`, `setup` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import EnvSource, SetupStep, SyncResult


def print_banner(console: Console, subtitle: str = "Network setup") -> None:
    """Imprime el banner de bienvenida."""

    title = Text("LAN-SETUP", style="bold cyan")
    sub = Text(subtitle, style="dim")
    body = Align.center(Text.assemble(title, "\n", sub), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_network_panel(host: str, *, frontend_port: int, api_port: int) -> Panel:
    """Panel con la IP detectada y las URLs derivadas."""

    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(style="magenta")
    table.add_row("Local IP Address", host)
    table.add_row("Frontend URL", f"http://{host}:{frontend_port}")
    table.add_row("Backend API", f"http://{host}:{api_port}")
    return Panel(table, title="🌐 Network Configuration", border_style="cyan")


def describe_sync(result: SyncResult) -> Text:
    """Una línea legible que resume lo que hizo la sincronización."""

    text = Text()
    verb = "Updated" if result.source is EnvSource.EXISTING else "Created"
    text.append(f"✅ {verb} {result.path.name} with IP: {result.host}", style="green")
    if result.source is EnvSource.TEMPLATE:
        text.append(" (from template)", style="dim")
    if not result.changed:
        text.append(" (no changes)", style="dim")
    for key in result.skipped_keys:
        text.append(f"\n⚠️  {key} left untouched: unrecognized URL or port", style="yellow")
    return text


def build_steps_table(steps: list[SetupStep]) -> Table:
    """Tabla con los pasos configurados (para `doctor`)."""

    table = Table(title="Setup steps")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Command", style="cyan")
    table.add_column("Directory", style="magenta")
    for i, step in enumerate(steps, start=1):
        table.add_row(str(i), step.description, " ".join(step.command), str(step.cwd or "."))
    return table
