"""Sincronización de la IP detectada con el documento `.env`.

Flujo:
1. Cargar: `.env` existente, si no `env.example`, si no el contenido por defecto.
2. Reescribir solo `FRONTEND_URL` y `REACT_APP_API_URL`, y solo si su valor
   actual es `http://<host>:<puerto conocido>...`.
3. Añadir (una vez) el bloque `PORT`/`HOST` si falta la clave `PORT`.
4. Escribir el documento completo de una vez (archivo temporal + `os.replace`).

Ejecutar dos veces con la misma IP produce el mismo archivo byte a byte.
"""

from __future__ import annotations

import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from loguru import logger

from core.config import AppSettings
from core.domain.env_document import EnvDocument, EnvLine
from core.domain.models import EnvSource, SyncResult
from core.errors import EnvFileError


FRONTEND_URL_KEY = "FRONTEND_URL"
API_URL_KEY = "REACT_APP_API_URL"
LISTEN_PORT_KEY = "PORT"
BIND_ADDRESS_KEY = "HOST"

DEFAULT_ENV_CONTENT = """\
# Database Configuration
DB_HOST=localhost
DB_USER=root
DB_PASSWORD=your_mysql_password
DB_NAME=ehub_pms
DB_PORT=3306

# JWT Secret (Change this in production!)
JWT_SECRET=your-super-secret-jwt-key-change-this-in-production

# Frontend URL (for CORS)
FRONTEND_URL=http://localhost:5173

# API URL (for frontend)
REACT_APP_API_URL=http://localhost:3001/api
"""

_URL_RE = re.compile(r"^http://(?P<host>[^:/\s]+):(?P<port>\d+)(?P<rest>\S*)$")


@dataclass(frozen=True)
class UrlRule:
    """Una clave URL gestionada: qué puertos reconoce y a cuál la reescribe."""

    key: str
    port: int
    accepted_ports: frozenset[int]

    def target(self, host: str) -> str:
        return f"http://{host}:{self.port}"

    def matches(self, value: str) -> bool:
        match = _URL_RE.match(value.strip())
        return match is not None and int(match.group("port")) in self.accepted_ports


class EnvSynchronizer:
    """Carga, actualiza y persiste el `.env` canónico.

    Nunca escribe la plantilla; solo la lee.
    """

    def __init__(
        self,
        env_path: Path,
        template_path: Path,
        *,
        frontend_port: int = 5173,
        api_port: int = 3002,
        api_legacy_ports: Iterable[int] = (3001,),
        listen_port: int | None = None,
        bind_address: str = "0.0.0.0",
        default_content: str = DEFAULT_ENV_CONTENT,
    ) -> None:
        self.env_path = env_path
        self.template_path = template_path
        self.listen_port = listen_port if listen_port is not None else api_port
        self.bind_address = bind_address
        self.default_content = default_content
        self.rules = (
            UrlRule(FRONTEND_URL_KEY, frontend_port, frozenset({frontend_port})),
            UrlRule(API_URL_KEY, api_port, frozenset({api_port, *api_legacy_ports})),
        )

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "EnvSynchronizer":
        return cls(
            settings.env_path(),
            settings.template_path(),
            frontend_port=settings.frontend_port,
            api_port=settings.api_port,
            api_legacy_ports=settings.api_legacy_ports,
            listen_port=settings.listen_port,
            bind_address=settings.bind_address,
        )

    def exists(self) -> bool:
        return self.env_path.is_file()

    def load(self) -> tuple[EnvDocument, EnvSource, str]:
        """Devuelve el documento inicial, su origen y el texto tal cual se leyó."""

        if self.env_path.exists():
            text = _read_text(self.env_path)
            source = EnvSource.EXISTING
        elif self.template_path.exists():
            text = _read_text(self.template_path)
            source = EnvSource.TEMPLATE
        else:
            text = self.default_content
            source = EnvSource.DEFAULTS
        logger.debug("Loaded environment document from {}", source.value)
        return EnvDocument.parse(text), source, text

    def apply(self, document: EnvDocument, host: str) -> tuple[list[str], list[str], bool]:
        """Aplica las actualizaciones in situ.

        Devuelve (claves actualizadas, claves omitidas, bloque de servidor añadido).
        """

        updated: list[str] = []
        skipped: list[str] = []
        missing: list[EnvLine] = []

        for rule in self.rules:
            current = document.get(rule.key)
            if current is None:
                missing.append(EnvLine.entry(rule.key, rule.target(host)))
                continue
            if not rule.matches(current):
                logger.warning("Leaving {}={} untouched: unrecognized URL or port", rule.key, current)
                skipped.append(rule.key)
                continue
            if document.set(rule.key, rule.target(host)):
                updated.append(rule.key)

        if missing:
            document.append_block([EnvLine.raw("# Network URLs (auto-detected)"), *missing])
            updated.extend(line.key for line in missing if line.key)

        server_block_added = False
        if not document.has(LISTEN_PORT_KEY):
            block = [
                EnvLine.raw("# Server Configuration"),
                EnvLine.entry(LISTEN_PORT_KEY, str(self.listen_port)),
            ]
            if not document.has(BIND_ADDRESS_KEY):
                block.append(EnvLine.entry(BIND_ADDRESS_KEY, self.bind_address))
            document.append_block(block)
            server_block_added = True

        return updated, skipped, server_block_added

    def synchronize(self, host: str) -> SyncResult:
        """Sincroniza el `.env` canónico con `host` y lo escribe."""

        document, source, original = self.load()
        updated, skipped, server_block_added = self.apply(document, host)
        rendered = document.render()
        changed = source is not EnvSource.EXISTING or rendered != original

        _write_atomic(self.env_path, rendered)
        logger.info("Updated {} with IP {}", self.env_path, host)

        return SyncResult(
            path=self.env_path,
            source=source,
            host=host,
            updated_keys=updated,
            skipped_keys=skipped,
            server_block_added=server_block_added,
            changed=changed,
        )


def _read_text(path: Path) -> str:
    # Bytes in, bytes out: no newline translation, so CRLF lines survive untouched.
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EnvFileError(path, "read", exc) from exc


def _write_atomic(path: Path, content: str) -> None:
    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as handle:
            tmp_name = handle.name
            handle.write(content.encode("utf-8"))
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise EnvFileError(path, "write", exc) from exc
