"""Detección de la IP local vía psutil.

Por qué psutil y no el truco del socket UDP:
- Enumera interfaces sin abrir sockets ni depender de una ruta por defecto.
- Da la familia de cada dirección, así que filtrar IPv4 es directo.

El orden de interfaces lo decide el sistema operativo; si varias califican se
devuelve la primera que aparezca, sin garantía de cuál.
"""

from __future__ import annotations

import ipaddress
import socket
from typing import Any, Callable, Mapping, Sequence

import psutil
from loguru import logger


FALLBACK_HOST = "localhost"

InterfaceMap = Mapping[str, Sequence[Any]]


def _is_external_ipv4(addr: Any) -> bool:
    if getattr(addr, "family", None) != socket.AF_INET:
        return False
    try:
        ip = ipaddress.IPv4Address(str(addr.address))
    except ValueError:
        return False
    return not ip.is_loopback


def resolve_local_ip(
    interfaces: InterfaceMap | None = None,
    *,
    fallback: str = FALLBACK_HOST,
) -> str:
    """Devuelve la primera IPv4 no-loopback, o `fallback` si no hay ninguna.

    `interfaces` tiene la forma de `psutil.net_if_addrs()`; si es `None` se
    consulta el host.
    """

    if interfaces is None:
        try:
            interfaces = psutil.net_if_addrs()
        except OSError as exc:
            logger.warning("Could not enumerate network interfaces: {}", exc)
            interfaces = {}

    for name, addrs in interfaces.items():
        for addr in addrs:
            if _is_external_ipv4(addr):
                logger.debug("Using {} from interface {}", addr.address, name)
                return str(addr.address)

    logger.warning("No external IPv4 interface found, falling back to {}", fallback)
    return fallback


class PsutilAddressResolver:
    """`AddressResolver` respaldado por `psutil.net_if_addrs`."""

    def __init__(
        self,
        *,
        fallback: str = FALLBACK_HOST,
        source: Callable[[], InterfaceMap] | None = None,
    ) -> None:
        self._fallback = fallback
        self._source = source

    def resolve(self) -> str:
        interfaces = self._source() if self._source is not None else None
        return resolve_local_ip(interfaces, fallback=self._fallback)
