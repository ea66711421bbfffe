"""Contrato para resolver la identidad de red del host.

Por qué Protocol:
- La CLI resuelve la IP una sola vez por ejecución y la pasa al sincronizador
  y al orquestador; el origen (psutil o un valor fijo en un test) no les importa.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AddressResolver(Protocol):
    """Contrato mínimo para obtener la IP saliente.

    Reglas de diseño:
    - Nunca falla: si no hay IPv4 utilizable devuelve el host de fallback.
    - Se recalcula en cada llamada (sin caché entre ejecuciones).
    """

    def resolve(self) -> str:
        """Devuelve una IPv4 no-loopback o el host de fallback."""

        ...
