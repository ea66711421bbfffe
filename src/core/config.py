"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los componentes reciben rutas, puertos y pasos como argumentos explícitos;
  solo este módulo lee el entorno del proceso.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import SetupStep


def default_setup_steps() -> list[SetupStep]:
    """Pasos por defecto: dependencias del frontend, del backend y la base de datos."""

    return [
        SetupStep(description="Installing frontend dependencies", command=["npm", "install"]),
        SetupStep(
            description="Installing backend dependencies",
            command=["npm", "install"],
            cwd=Path("backend"),
        ),
        SetupStep(
            description="Setting up database",
            command=["npm", "run", "setup"],
            cwd=Path("backend"),
        ),
    ]


class AppSettings(BaseSettings):
    """Configuración central de la herramienta.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - `LAN_SETUP_STEPS` acepta JSON, así que los comandos concretos son
      configuración y no código.
    """

    model_config = SettingsConfigDict(
        env_prefix="LAN_SETUP_",
        extra="ignore",
        case_sensitive=False,
        env_file=".lan-setup.env",
        env_file_encoding="utf-8",
    )

    project_root: Path = Field(
        default_factory=Path.cwd,
        validate_default=True,
        description="Raíz del proyecto donde viven `.env`, `env.example` y `backend/`.",
    )
    env_filename: str = Field(
        default=".env",
        min_length=1,
        description="Nombre del documento canónico.",
    )
    template_filename: str = Field(
        default="env.example",
        min_length=1,
        description="Plantilla de solo lectura usada cuando no hay `.env`.",
    )

    frontend_port: int = Field(default=5173, ge=1, le=65535, description="Puerto del frontend (Vite).")
    api_port: int = Field(default=3002, ge=1, le=65535, description="Puerto fijo de la API.")
    api_legacy_ports: list[int] = Field(
        default_factory=lambda: [3001],
        description="Puertos antiguos con los que una API URL se sigue reconociendo y corrigiendo.",
    )
    listen_port: int | None = Field(
        default=None,
        ge=1,
        le=65535,
        description="PORT del bloque de servidor; por defecto igual a `api_port`.",
    )
    bind_address: str = Field(default="0.0.0.0", min_length=1, description="HOST del bloque de servidor.")
    fallback_host: str = Field(
        default="localhost",
        min_length=1,
        description="Valor usado cuando no hay ninguna IPv4 no-loopback.",
    )

    steps: list[SetupStep] = Field(
        default_factory=default_setup_steps,
        description="Pasos de aprovisionamiento, en orden.",
    )

    log_level: str = Field(default="WARNING", description="Nivel de log de loguru para stderr.")

    @field_validator("project_root")
    @classmethod
    def _resolve_root(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _default_listen_port(self) -> "AppSettings":
        if self.listen_port is None:
            self.listen_port = self.api_port
        return self

    def env_path(self) -> Path:
        return self.project_root / self.env_filename

    def template_path(self) -> Path:
        return self.project_root / self.template_filename
