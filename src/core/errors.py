"""Errores del Core.

Solo hay dos tipos de fallo fatal:
- `EnvFileError`: el documento `.env` (o su plantilla) no se puede leer/escribir.
- `CommandError`: un paso de instalación terminó con código distinto de cero.

La resolución de IP no tiene error propio: degrada al host de fallback.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class SetupError(Exception):
    """Base de todos los errores que la CLI reporta al operador."""


class EnvFileError(SetupError):
    """No se pudo leer o escribir el documento `.env`."""

    def __init__(self, path: Path, action: str, cause: Exception | None = None) -> None:
        self.path = path
        self.action = action
        detail = f": {getattr(cause, 'strerror', None) or cause}" if cause is not None else ""
        super().__init__(f"Cannot {action} {path}{detail}")


class CommandError(SetupError):
    """Un paso de instalación terminó con código distinto de cero."""

    def __init__(self, description: str, returncode: int, command: Sequence[str] = ()) -> None:
        self.description = description
        self.returncode = returncode
        self.command = list(command)
        super().__init__(f"{description} failed (exit {returncode})")
