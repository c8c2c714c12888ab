"""Sistema de caché en memoria con TTL por entrada"""
import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Valor cacheado con su momento de inserción y TTL (segundos)"""
    value: Any
    inserted_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.inserted_at > self.ttl


class CacheBackend(ABC):
    """
    Interfaz de caché clave/valor.

    La implementación en memoria sirve para un solo proceso; otra
    implementación (p. ej. Redis) puede reemplazarla sin tocar los servicios.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Obtiene un valor si existe y no ha expirado"""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Guarda (o sobrescribe) un valor"""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Elimina un valor"""

    @abstractmethod
    def sweep(self) -> int:
        """Elimina las entradas expiradas y retorna cuántas se borraron"""

    @abstractmethod
    def clear(self) -> None:
        """Limpia todo el caché"""

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryCache(CacheBackend):
    """Cache con Time-To-Live (TTL) configurable por entrada"""

    def __init__(
        self,
        default_ttl: float = 60,
        clock: Callable[[], float] = time.time,
        name: str = "cache",
    ):
        self.store: Dict[str, CacheEntry] = {}
        self.default_ttl = default_ttl
        self.clock = clock
        self.name = name

    def get(self, key: str) -> Optional[Any]:
        entry = self.store.get(key)
        if entry is None:
            return None

        if entry.is_expired(self.clock()):
            del self.store[key]
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        self.store[key] = CacheEntry(
            value=value,
            inserted_at=self.clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )

    def delete(self, key: str) -> None:
        self.store.pop(key, None)

    def sweep(self) -> int:
        now = self.clock()
        expired = [key for key, entry in self.store.items() if entry.is_expired(now)]
        for key in expired:
            del self.store[key]
        if expired:
            logger.debug(f"[CACHE SWEEP] {self.name}: {len(expired)} entradas expiradas eliminadas")
        return len(expired)

    def clear(self) -> None:
        self.store.clear()

    def __len__(self) -> int:
        return len(self.store)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": len(self.store),
            "default_ttl": self.default_ttl,
        }


class FailedPuuidCache:
    """
    Caché negativo de PUUIDs que Riot no pudo descifrar.

    Mientras la marca siga vigente no se vuelve a pedir el historial de
    partidas para ese PUUID.
    """

    def __init__(self, cache: CacheBackend, ttl: float = 300):
        self.cache = cache
        self.ttl = ttl

    def mark_failed(self, puuid: str) -> None:
        self.cache.set(puuid, True, ttl=self.ttl)

    def is_failed(self, puuid: str) -> bool:
        return self.cache.get(puuid) is not None

    def sweep(self) -> int:
        """Limpieza explícita de marcas expiradas"""
        return self.cache.sweep()

    def __len__(self) -> int:
        return len(self.cache)


class CacheSweeper:
    """
    Tarea en segundo plano que barre periódicamente los cachés.

    Se inicia en el startup de la aplicación y se detiene en el shutdown.
    """

    def __init__(self, targets: Iterable[Any], interval: float = 60.0):
        self.targets: List[Any] = list(targets)
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> int:
        removed = 0
        for target in self.targets:
            removed += target.sweep()
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                removed = self.sweep_once()
            except Exception as e:
                logger.error(f"[CACHE SWEEP] Error durante el barrido: {e}", exc_info=True)
                continue
            if removed:
                logger.info(f"[CACHE SWEEP] {removed} entradas expiradas eliminadas")

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"✓ Barrido de caché activado (cada {self.interval:.0f}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Barrido de caché detenido")
