"""Ejecución de comandos externos (subprocess).

Por qué un wrapper:
- Centraliza cómo se lanzan los pasos: sin shell, stdout/stderr heredados y
  sin timeout.
- Traduce "no se pudo lanzar" a un código de salida, para que el orquestador
  solo razone sobre códigos.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Sequence

from loguru import logger


# Shell convention for "command not found".
NOT_FOUND_RETURNCODE = 127


def resolve_executable(name: str) -> str | None:
    """Busca `name` en PATH (resuelve `npm.cmd` en Windows)."""

    return shutil.which(name)


def run_command(command: Sequence[str], cwd: Path) -> int:
    """Ejecuta `command` en `cwd` y espera a que termine."""

    argv = list(command)
    executable = resolve_executable(argv[0]) or argv[0]
    logger.info("Running {} in {}", " ".join(argv), cwd)
    try:
        completed = subprocess.run([executable, *argv[1:]], cwd=cwd, check=False)
    except OSError as exc:
        logger.error("Could not start {}: {}", argv[0], exc)
        return NOT_FOUND_RETURNCODE
    logger.debug("{} exited with {}", argv[0], completed.returncode)
    return completed.returncode
