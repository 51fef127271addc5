"""
Caché de catálogos código -> nombre.

Una instancia pertenece a un servicio o se inyecta como singleton de la
aplicación. Las escrituras son fusiones idempotentes (gana la última).
Con ttl=None las entradas no vencen y la caché solo crece.
"""

import time
from collections import defaultdict
from collections.abc import Callable, Hashable, Iterable, Mapping
from typing import Any

# Código consultado que no existe en el catálogo
_ABSENT = object()


class LookupCache:
    """Mapas por espacio de nombres (ubigeos, caracteristicas, ...)."""

    def __init__(
        self,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, dict[Hashable, tuple[Any, float]]] = defaultdict(dict)

    def _fresh(self, stored_at: float) -> bool:
        if self._ttl is None:
            return True
        return self._clock() - stored_at < self._ttl

    def _entry(self, namespace: str, key: Hashable) -> Any:
        entry = self._entries[namespace].get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if not self._fresh(stored_at):
            del self._entries[namespace][key]
            return None
        return entry

    def missing(self, namespace: str, keys: Iterable[Hashable]) -> list[Hashable]:
        """Claves aún no consultadas (o vencidas), sin duplicados."""
        faltantes = []
        for key in dict.fromkeys(keys):
            if self._entry(namespace, key) is None:
                faltantes.append(key)
        return faltantes

    def merge(self, namespace: str, mapping: Mapping[Hashable, Any]) -> None:
        now = self._clock()
        for key, value in mapping.items():
            self._entries[namespace][key] = (value, now)

    def remember_misses(self, namespace: str, keys: Iterable[Hashable]) -> None:
        """Registra claves sin fila para no volver a consultarlas."""
        now = self._clock()
        for key in keys:
            self._entries[namespace][key] = (_ABSENT, now)

    def get(self, namespace: str, key: Hashable, default: Any = None) -> Any:
        entry = self._entry(namespace, key)
        if entry is None or entry[0] is _ABSENT:
            return default
        return entry[0]

    def lookup(self, namespace: str, keys: Iterable[Hashable]) -> dict[Hashable, Any]:
        """Nombres resueltos para las claves dadas; las ausentes se omiten."""
        resolved = {}
        for key in keys:
            entry = self._entry(namespace, key)
            if entry is not None and entry[0] is not _ABSENT:
                resolved[key] = entry[0]
        return resolved

    def invalidate(self, namespace: str | None = None, key: Hashable | None = None) -> None:
        if namespace is None:
            self._entries.clear()
        elif key is None:
            self._entries.pop(namespace, None)
        else:
            self._entries[namespace].pop(key, None)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())
