"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Los pasos de instalación llegan como configuración (JSON en variables de
  entorno), así que se validan en el borde sin lógica extra.
- Los resultados (`SyncResult`, `StepOutcome`) son datos puros que la CLI
  presenta sin conocer cómo se produjeron.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class EnvSource(str, Enum):
    """Origen del contenido inicial del documento `.env`."""

    EXISTING = "existing"
    TEMPLATE = "template"
    DEFAULTS = "defaults"


class SetupStep(BaseModel):
    """Un paso de aprovisionamiento: descripción legible + comando externo.

    Los pasos no comparten datos entre sí; solo importa el orden.
    """

    model_config = ConfigDict(frozen=True)

    description: str = Field(
        ...,
        min_length=1,
        description="Texto que se anuncia al operador (p.ej. 'Installing backend dependencies').",
    )
    command: list[str] = Field(
        ...,
        min_length=1,
        description="argv del comando; se ejecuta sin shell.",
    )
    cwd: Path | None = Field(
        default=None,
        description="Directorio de trabajo; si es relativo se resuelve contra el project root.",
    )

    def resolve_cwd(self, project_root: Path) -> Path:
        if self.cwd is None:
            return project_root
        return self.cwd if self.cwd.is_absolute() else project_root / self.cwd


class StepOutcome(BaseModel):
    """Resultado de ejecutar un `SetupStep` una vez."""

    step: SetupStep
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class SyncResult(BaseModel):
    """Resumen de una sincronización del `.env`."""

    path: Path = Field(..., description="Ruta canónica escrita.")
    source: EnvSource = Field(..., description="De dónde salió el contenido inicial.")
    host: str = Field(..., min_length=1, description="Identidad de red embebida en las URLs.")
    updated_keys: list[str] = Field(
        default_factory=list,
        description="Claves cuyo valor cambió o que se añadieron.",
    )
    skipped_keys: list[str] = Field(
        default_factory=list,
        description="Claves URL presentes pero con un puerto no reconocido (no se tocan).",
    )
    server_block_added: bool = Field(
        default=False,
        description="Si se añadió el bloque PORT/HOST.",
    )
    changed: bool = Field(
        default=False,
        description="Si el contenido escrito difiere del contenido cargado.",
    )
