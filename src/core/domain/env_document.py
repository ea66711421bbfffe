"""Documento `.env` como secuencia ordenada de líneas.

Por qué no un dict:
- Un dict pierde comentarios, líneas en blanco y el orden original.
- Aquí cada línea física es un `EnvLine`; las que no se tocan se reescriben
  byte a byte, así que "no romper lo ajeno" es verificable.

Reglas:
- Una línea `KEY=VALUE` con clave identificador es una entrada.
- La primera aparición de una clave gana; los duplicados quedan como texto.
- Las claves nuevas siempre se añaden al final.
"""

from __future__ import annotations

import re
from typing import Iterable

from loguru import logger
from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


_BOM = "\ufeff"
_ENTRY_RE = re.compile(r"^\s*(?P<key>[A-Za-z_][A-Za-z0-9_]*)\s*=(?P<value>.*)$")


class EnvLine(BaseModel):
    """Una línea física del documento."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Contenido de la línea sin el terminador.")
    eol: str = Field(default="\n", description="Terminador original ('\\n', '\\r\\n' o '').")
    key: str | None = Field(default=None, description="Clave si la línea es una entrada reconocida.")
    value: str | None = Field(default=None, description="Valor crudo (todo lo que sigue al '=').")

    @property
    def is_entry(self) -> bool:
        return self.key is not None

    def render(self) -> str:
        return self.text + (self.eol or "\n")

    @classmethod
    def entry(cls, key: str, value: str) -> "EnvLine":
        return cls(text=f"{key}={value}", key=key, value=value)

    @classmethod
    def raw(cls, text: str) -> "EnvLine":
        return cls(text=text)


def _split_eol(physical: str) -> tuple[str, str]:
    if physical.endswith("\r\n"):
        return physical[:-2], "\r\n"
    if physical.endswith("\n"):
        return physical[:-1], "\n"
    return physical, ""


class EnvDocument(BaseModel):
    """Secuencia ordenada de `EnvLine` con claves únicas."""

    lines: list[EnvLine] = Field(default_factory=list)
    bom: bool = Field(
        default=False,
        description="Si el texto empezaba con BOM UTF-8 (Notepad); se conserva al escribir.",
    )

    @classmethod
    def parse(cls, text: str) -> "EnvDocument":
        bom = text.startswith(_BOM)
        if bom:
            text = text[len(_BOM):]
        lines: list[EnvLine] = []
        seen: set[str] = set()
        for physical in _physical_lines(text):
            body, eol = _split_eol(physical)
            match = _ENTRY_RE.match(body)
            if match is None:
                lines.append(EnvLine(text=body, eol=eol))
                continue
            key = match.group("key")
            if key in seen:
                logger.warning("Duplicate key {} kept as plain text", key)
                lines.append(EnvLine(text=body, eol=eol))
                continue
            seen.add(key)
            lines.append(EnvLine(text=body, eol=eol, key=key, value=match.group("value")))
        return cls(lines=lines, bom=bom)

    def render(self) -> str:
        body = "".join(line.render() for line in self.lines)
        return _BOM + body if self.bom else body

    def keys(self) -> list[str]:
        return [line.key for line in self.lines if line.key is not None]

    def has(self, key: str) -> bool:
        return self._index(key) is not None

    def get(self, key: str) -> str | None:
        index = self._index(key)
        return None if index is None else self.lines[index].value

    def set(self, key: str, value: str) -> bool:
        """Reemplaza in situ el valor de `key`.

        Devuelve `True` si la línea cambió. Si la clave no existe la añade al final.
        """

        index = self._index(key)
        if index is None:
            self.lines.append(EnvLine.entry(key, value))
            return True
        current = self.lines[index]
        if current.value == value:
            return False
        self.lines[index] = EnvLine(text=f"{key}={value}", eol=current.eol, key=key, value=value)
        return True

    def append_block(self, lines: Iterable[EnvLine]) -> None:
        """Añade un bloque al final, separado por una línea en blanco."""

        block = list(lines)
        for line in block:
            if line.key is not None and self.has(line.key):
                raise ValueError(f"key {line.key!r} already present")
        self.lines.append(EnvLine.raw(""))
        self.lines.extend(block)

    def _index(self, key: str) -> int | None:
        for i, line in enumerate(self.lines):
            if line.key == key:
                return i
        return None


def _physical_lines(text: str) -> list[str]:
    parts = text.split("\n")
    out = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        out.append(parts[-1])
    return out
