"""
Detección de partidas en vivo con validación contra el historial.

El endpoint de espectador de Riot puede seguir reportando una partida
varios minutos después de que terminó. Antes de responder "en partida" se
busca el ID de esa partida entre las últimas partidas completadas.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, NamedTuple, Optional

from komplexaci.core.cache import CacheBackend
from komplexaci.core.errors import RiotAPIError
from komplexaci.core.logging_config import TimingLogger
from komplexaci.core.regions import Region
from komplexaci.services.riot_service import RiotAPIService

logger = logging.getLogger(__name__)

# Colas que nunca se reportan como "en partida": custom / practice tool
EXCLUDED_QUEUE_IDS: FrozenSet[int] = frozenset({0})

QUEUE_NAMES: Dict[int, str] = {
    # Ranked
    420: "Ranked Solo/Duo",
    440: "Ranked Flex",
    # Normal
    400: "Normal Draft",
    430: "Normal Blind",
    490: "Normal Quickplay",
    # Especiales
    450: "ARAM",
    700: "Clash",
    # Modos rotativos
    900: "URF",
    1010: "Snow URF",
    1020: "One for All",
    1200: "Nexus Blitz",
    1300: "Nexus Blitz",
    1400: "Ultimate Spellbook",
    1700: "Arena",
    1900: "URF",
    # Custom (excluida, solo para mostrar)
    0: "Custom Game",
    # Co-op vs AI
    830: "Co-op vs AI (Intro)",
    840: "Co-op vs AI (Beginner)",
    850: "Co-op vs AI (Intermediate)",
}

# (desde, hasta, nombre) para colas sin nombre exacto
QUEUE_RANGES = (
    (1700, 1799, "Arena"),
    (1400, 1499, "Ultimate Spellbook"),
    (1200, 1399, "Nexus Blitz"),
    (1000, 1099, "Rotating Game Mode"),
    (900, 999, "URF"),
    (800, 899, "Co-op vs AI"),
    (700, 799, "Tournament"),
)


def get_queue_type_name(queue_id: Optional[int]) -> str:
    """Nombre legible de una cola: tabla exacta, luego rangos, luego genérico"""
    if queue_id in QUEUE_NAMES:
        return QUEUE_NAMES[queue_id]
    if queue_id is not None:
        for low, high, name in QUEUE_RANGES:
            if low <= queue_id <= high:
                return name
    return f"Game Mode {queue_id}"


def is_trackable_queue(queue_id: Optional[int], excluded: FrozenSet[int] = EXCLUDED_QUEUE_IDS) -> bool:
    return queue_id not in excluded


@dataclass
class LiveGameCheck:
    """Resultado de la reconciliación"""
    in_game: bool
    game_info: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"inGame": self.in_game, "gameInfo": self.game_info}


NOT_IN_GAME = LiveGameCheck(in_game=False, game_info=None)


class LiveGameService:
    """Decide si un jugador está realmente en una partida activa"""

    def __init__(
        self,
        riot: RiotAPIService,
        history_check_count: int = 5,
        excluded_queue_ids: FrozenSet[int] = EXCLUDED_QUEUE_IDS,
        clock: Callable[[], float] = time.time,
    ):
        self.riot = riot
        self.history_check_count = history_check_count
        self.excluded_queue_ids = excluded_queue_ids
        self.clock = clock

    def _annotate(self, game: Dict[str, Any], queue_name: str) -> Dict[str, Any]:
        start_ms = game.get("gameStartTime") or 0
        duration = 0
        if start_ms:
            duration = max(0, int((self.clock() * 1000 - start_ms) / 1000 / 60))
        return {**game, "queueTypeName": queue_name, "gameDurationMinutes": duration}

    async def check(self, puuid: str, region: Region, member_name: str = "Unknown") -> LiveGameCheck:
        """
        Reconciliación completa.

        Raises:
            RiotAPIError: si el endpoint de espectador falla (salvo 404)
        """
        with TimingLogger(f"Partida en vivo de {member_name}", logger_name=__name__):
            current_game = await self.riot.get_current_game(puuid, region)
            if current_game is None:
                logger.debug(f"[LIVE] {member_name}: sin datos de espectador")
                return NOT_IN_GAME

            queue_id = current_game.get("gameQueueConfigId")
            queue_name = get_queue_type_name(queue_id)

            if not is_trackable_queue(queue_id, self.excluded_queue_ids):
                logger.debug(f"[LIVE] {member_name}: cola ignorada {queue_name} ({queue_id})")
                return NOT_IN_GAME

            expected_match_id = f"{region.platform_code}_{current_game.get('gameId')}"
            try:
                recent_match_ids = await self.riot.get_match_ids(
                    puuid, region, 0, self.history_check_count
                )
            except RiotAPIError as e:
                # Sin historial no se puede validar: se confía en el espectador
                logger.warning(
                    f"[LIVE] {member_name}: no se pudo validar con el historial "
                    f"({e.kind.value}), se asume {queue_name} activa"
                )
                return LiveGameCheck(True, self._annotate(current_game, queue_name))

            if expected_match_id in recent_match_ids:
                logger.info(f"[LIVE] {member_name}: {expected_match_id} ya está en el historial, datos de espectador viejos")
                return NOT_IN_GAME

            logger.info(f"[LIVE] {member_name}: {queue_name} activa ({expected_match_id})")
            return LiveGameCheck(True, self._annotate(current_game, queue_name))


class LiveGameStatus(NamedTuple):
    payload: Dict[str, Any]
    cache_hit: bool


class LiveGameCacheService:
    """
    Caché de resultados de partida en vivo por (puuid, región).

    - Resultado normal: `ttl` segundos
    - Rate limit de Riot: se cachea un resultado degradado por `rate_limit_ttl`
      para frenar el polling mientras dura la ventana del límite
    """

    def __init__(
        self,
        live_games: LiveGameService,
        cache: CacheBackend,
        ttl: float = 60,
        rate_limit_ttl: float = 300,
        clock: Callable[[], float] = time.time,
    ):
        self.live_games = live_games
        self.cache = cache
        self.ttl = ttl
        self.rate_limit_ttl = rate_limit_ttl
        self.clock = clock

    @staticmethod
    def cache_key(puuid: str, region: Region) -> str:
        return f"{puuid}-{region.value}"

    def _timestamp(self) -> int:
        return int(self.clock() * 1000)

    async def get_status(self, puuid: str, region: Region, member_name: str = "Unknown") -> LiveGameStatus:
        key = self.cache_key(puuid, region)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"[CACHE HIT] {member_name} ({'IN GAME' if cached['inGame'] else 'NOT IN GAME'})")
            return LiveGameStatus(cached, True)

        logger.debug(f"[CACHE MISS] {member_name}")
        try:
            check = await self.live_games.check(puuid, region, member_name)
        except RiotAPIError as e:
            if not e.is_rate_limited:
                raise
            logger.warning(f"[LIVE] Rate limit para {member_name}, resultado degradado por {self.rate_limit_ttl:.0f}s")
            payload = {
                "inGame": False,
                "gameInfo": None,
                "timestamp": self._timestamp(),
                "memberName": member_name,
                "rateLimited": True,
            }
            self.cache.set(key, payload, ttl=self.rate_limit_ttl)
            return LiveGameStatus(payload, False)

        payload = {
            **check.to_dict(),
            "timestamp": self._timestamp(),
            "memberName": member_name,
            "validated": True,
        }
        self.cache.set(key, payload, ttl=self.ttl)
        return LiveGameStatus(payload, False)
