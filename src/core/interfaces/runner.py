"""Contrato para ejecutar comandos externos."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class CommandRunner(Protocol):
    """Ejecuta un comando de forma síncrona y devuelve su código de salida.

    La salida estándar y de error se heredan del proceso actual.
    """

    def __call__(self, command: Sequence[str], cwd: Path) -> int:
        ...
