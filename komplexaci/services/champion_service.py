"""Servicio de datos estáticos de campeones (Data Dragon)"""
import logging
import time
from typing import Any, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ChampionDataService:
    """
    Mapea championId -> nombre/imagen usando Data Dragon.

    Los datos se descargan como mucho una vez por `ttl` segundos. Si Data
    Dragon falla se siguen usando los datos anteriores aunque estén vencidos
    y no se reintenta hasta pasados `retry_delay` segundos.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://ddragon.leagueoflegends.com",
        locale: str = "en_US",
        fallback_version: str = "15.10.1",
        ttl: float = 3600,
        retry_delay: float = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.http = http_client
        self.base_url = base_url.rstrip("/")
        self.locale = locale
        self.fallback_version = fallback_version
        self.ttl = ttl
        self.retry_delay = retry_delay
        self.clock = clock

        self.version: Optional[str] = None
        self._by_id: Dict[int, Dict[str, Any]] = {}
        self._by_name: Dict[str, Dict[str, Any]] = {}
        self._next_refresh: float = 0.0

    async def _fetch_latest_version(self) -> str:
        try:
            response = await self.http.get(f"{self.base_url}/api/versions.json")
            response.raise_for_status()
            return response.json()[0]
        except (httpx.HTTPError, ValueError, IndexError) as e:
            logger.warning(f"[DDRAGON] No se pudo obtener la versión actual, usando {self.fallback_version}: {e}")
            return self.fallback_version

    async def get_champion_data(self) -> Dict[int, Dict[str, Any]]:
        """Retorna {championId: datos}, refrescando si el caché venció"""
        now = self.clock()
        if now < self._next_refresh:
            return self._by_id

        version = await self._fetch_latest_version()
        url = f"{self.base_url}/cdn/{version}/data/{self.locale}/champion.json"
        try:
            response = await self.http.get(url)
            response.raise_for_status()
            champions = response.json()["data"]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error(f"[DDRAGON] Error descargando campeones, reintento en {self.retry_delay:.0f}s: {e}")
            self._next_refresh = now + self.retry_delay
            return self._by_id

        self._by_id.clear()
        self._by_name.clear()
        for champion in champions.values():
            self._by_id[int(champion["key"])] = champion
            self._by_name[champion["id"].lower()] = champion
            self._by_name[champion["name"].lower()] = champion

        self.version = version
        self._next_refresh = now + self.ttl
        logger.info(f"[DDRAGON] {len(self._by_id)} campeones cargados (versión {version})")
        return self._by_id

    async def get_champion_by_id(self, champion_id: int) -> Optional[Dict[str, Any]]:
        champions = await self.get_champion_data()
        return champions.get(champion_id)

    async def get_champion_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        await self.get_champion_data()
        return self._by_name.get(name.lower())

    async def get_champion_name(self, champion_id: int) -> str:
        champion = await self.get_champion_by_id(champion_id)
        return champion["name"] if champion else f"Champion {champion_id}"

    async def get_champion_image(self, champion_id: int) -> str:
        champion = await self.get_champion_by_id(champion_id)
        if not champion:
            return ""
        return self.champion_image_url(champion["id"])

    def champion_image_url(self, champion_key: str) -> str:
        version = self.version or self.fallback_version
        return f"{self.base_url}/cdn/{version}/img/champion/{champion_key}.png"

    def champion_splash_url(self, champion_key: str, skin_num: int = 0) -> str:
        return f"{self.base_url}/cdn/img/champion/splash/{champion_key}_{skin_num}.jpg"

    async def enrich_mastery(self, mastery: Dict[str, Any]) -> Dict[str, Any]:
        """Agrega championName y championImage a una entrada de maestría"""
        champion_id = mastery.get("championId")
        return {
            **mastery,
            "championName": await self.get_champion_name(champion_id),
            "championImage": await self.get_champion_image(champion_id),
        }

    async def enrich_match(self, match: Dict[str, Any]) -> Dict[str, Any]:
        """Agrega nombre e imagen de campeón a cada participante de una partida"""
        info = match.get("info") or {}
        participants = []
        for participant in info.get("participants", []):
            champion_id = participant.get("championId")
            participants.append({
                **participant,
                "championName": await self.get_champion_name(champion_id),
                "championImage": await self.get_champion_image(champion_id),
            })

        return {**match, "info": {**info, "participants": participants}}

    async def get_all_champions(self) -> List[Dict[str, Any]]:
        """Listado compacto de campeones para el frontend"""
        champions = await self.get_champion_data()
        return [
            {
                "id": c["id"],
                "key": c["key"],
                "name": c["name"],
                "title": c.get("title"),
                "tags": c.get("tags", []),
                "square": self.champion_image_url(c["id"]),
                "splash": self.champion_splash_url(c["id"]),
            }
            for c in sorted(champions.values(), key=lambda c: c["name"])
        ]
