"""Cliente asíncrono para la API de Riot Games"""
import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote, unquote

import httpx

from komplexaci.core.cache import FailedPuuidCache
from komplexaci.core.errors import RiotAPIError, RiotErrorKind, classify_riot_error
from komplexaci.core.regions import Region
from komplexaci.services.champion_service import ChampionDataService

logger = logging.getLogger(__name__)


class RequestPacer:
    """
    Separación mínima entre requests consecutivos a Riot.

    Cada llamada reserva su turno antes de dormir, así varias corutinas
    concurrentes quedan espaciadas sin necesidad de un lock.
    """

    def __init__(
        self,
        min_interval: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self.clock = clock
        self.sleep = sleep
        self._next_allowed = 0.0

    async def wait(self) -> float:
        """Espera el turno y retorna cuántos segundos se durmió"""
        now = self.clock()
        slot = max(now, self._next_allowed)
        self._next_allowed = slot + self.min_interval
        delay = slot - now
        if delay > 0:
            await self.sleep(delay)
        return delay


class RiotAPIService:
    """Servicio para consultar cuentas, invocadores, partidas y partidas en vivo"""

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient,
        failed_puuids: Optional[FailedPuuidCache] = None,
        champions: Optional[ChampionDataService] = None,
        pacer: Optional[RequestPacer] = None,
        account_retry_delay: float = 0.1,
    ):
        if not api_key:
            raise ValueError("RIOT_API_KEY es obligatorio")

        self.api_key = api_key
        self.http = http_client
        self.failed_puuids = failed_puuids
        self.champions = champions
        self.pacer = pacer or RequestPacer()
        self.account_retry_delay = account_retry_delay

    # ============== HTTP ==============
    @staticmethod
    def _regional_url(region: Region) -> str:
        return f"https://{region.regional_route}.api.riotgames.com"

    @staticmethod
    def _platform_url(region: Region) -> str:
        return f"https://{region.platform_route}.api.riotgames.com"

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json()["status"]["message"]
        except (ValueError, KeyError, TypeError):
            return response.reason_phrase or f"HTTP {response.status_code}"

    async def _make_request(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        await self.pacer.wait()

        try:
            response = await self.http.get(
                url,
                params=params,
                headers={"X-Riot-Token": self.api_key},
            )
        except httpx.HTTPError as e:
            logger.warning(f"[RIOT] Error de red en {url}: {e}")
            raise RiotAPIError(RiotErrorKind.SERVER_ERROR, f"Network error: {e}") from e

        if response.is_success:
            return response.json()

        message = self._error_message(response)
        kind = classify_riot_error(response.status_code, message)
        if kind is not RiotErrorKind.NOT_FOUND:
            logger.warning(f"[RIOT] {response.status_code} ({kind.value}) en {url}: {message}")
        raise RiotAPIError(kind, message, response.status_code)

    # ============== ACCOUNTS ==============
    async def get_account_by_riot_id(
        self, game_name: str, tag_line: str, region: Region = Region.EUW1
    ) -> Dict[str, Any]:
        """
        Busca una cuenta por Riot ID (gameName#tagLine).

        Prueba variantes de mayúsculas/minúsculas porque Riot a veces no
        encuentra la cuenta con el casing exacto que escribió el usuario.
        """
        variations: List[Tuple[str, str]] = []
        for candidate in (
            (game_name, tag_line),
            (game_name.lower(), tag_line.lower()),
            (game_name.lower(), tag_line.upper()),
            (game_name, tag_line.upper()),
        ):
            if candidate not in variations:
                variations.append(candidate)

        base = self._regional_url(region)
        last_error: Optional[RiotAPIError] = None

        for attempt, (name, tag) in enumerate(variations, start=1):
            url = f"{base}/riot/account/v1/accounts/by-riot-id/{quote(name, safe='')}/{quote(tag, safe='')}"
            try:
                account = await self._make_request(url)
                logger.debug(f"[RIOT] Cuenta {name}#{tag} encontrada en el intento {attempt}")
                return account
            except RiotAPIError as e:
                if e.kind not in (RiotErrorKind.NOT_FOUND, RiotErrorKind.UNKNOWN):
                    raise
                last_error = e
                logger.debug(f"[RIOT] Intento {attempt} fallido para {name}#{tag}: {e.message}")

            if attempt < len(variations):
                await asyncio.sleep(self.account_retry_delay)

        raise RiotAPIError(
            last_error.kind,
            f'Account not found: "{game_name}#{tag_line}". {last_error.message}. '
            "Try checking the spelling or use a different region.",
            last_error.status_code,
        )

    async def get_account_by_puuid(self, puuid: str, region: Region = Region.EUW1) -> Dict[str, Any]:
        url = f"{self._regional_url(region)}/riot/account/v1/accounts/by-puuid/{puuid}"
        return await self._make_request(url)

    # ============== SUMMONER / LEAGUE / MASTERY ==============
    async def get_summoner_by_puuid(self, puuid: str, region: Region = Region.EUW1) -> Dict[str, Any]:
        url = f"{self._platform_url(region)}/lol/summoner/v4/summoners/by-puuid/{puuid}"
        return await self._make_request(url)

    async def get_ranked_stats(self, puuid: str, region: Region = Region.EUW1) -> List[Dict[str, Any]]:
        url = f"{self._platform_url(region)}/lol/league/v4/entries/by-puuid/{puuid}"
        return await self._make_request(url)

    async def get_champion_mastery(
        self, puuid: str, region: Region = Region.EUW1, count: int = 10
    ) -> List[Dict[str, Any]]:
        url = f"{self._platform_url(region)}/lol/champion-mastery/v4/champion-masteries/by-puuid/{puuid}/top"
        masteries = await self._make_request(url, params={"count": count})

        if self.champions is None:
            return masteries
        return [await self.champions.enrich_mastery(m) for m in masteries]

    # ============== MATCHES ==============
    async def get_match_ids(
        self, puuid: str, region: Region = Region.EUW1, start: int = 0, count: int = 20
    ) -> List[str]:
        """
        IDs de las partidas más recientes.

        Si el PUUID falló hace poco con un error de descifrado se responde el
        mismo error sin llamar a Riot.
        """
        if self.failed_puuids is not None and self.failed_puuids.is_failed(puuid):
            logger.debug(f"[RIOT] PUUID ...{puuid[-8:]} en caché negativo, se omite el historial")
            raise RiotAPIError(
                RiotErrorKind.DECRYPTION_FAILED,
                "Exception decrypting puuid (cached failure)",
                400,
            )

        url = f"{self._regional_url(region)}/lol/match/v5/matches/by-puuid/{puuid}/ids"
        try:
            return await self._make_request(url, params={"start": start, "count": count})
        except RiotAPIError as e:
            if e.kind is RiotErrorKind.DECRYPTION_FAILED and self.failed_puuids is not None:
                logger.info(f"[RIOT] PUUID ...{puuid[-8:]} no se pudo descifrar, marcado por {self.failed_puuids.ttl:.0f}s")
                self.failed_puuids.mark_failed(puuid)
            raise

    async def get_match_details(self, match_id: str, region: Region = Region.EUW1) -> Dict[str, Any]:
        url = f"{self._regional_url(region)}/lol/match/v5/matches/{match_id}"
        return await self._make_request(url)

    async def get_match_history(
        self, puuid: str, region: Region = Region.EUW1, count: int = 10
    ) -> List[Dict[str, Any]]:
        """Historial de partidas con detalles y datos de campeón"""
        match_ids = await self.get_match_ids(puuid, region, 0, count)
        matches = await asyncio.gather(
            *(self.get_match_details(match_id, region) for match_id in match_ids)
        )

        if self.champions is None:
            return list(matches)
        return [await self.champions.enrich_match(m) for m in matches]

    # ============== SPECTATOR ==============
    async def _backfill_participant_name(self, participant: Dict[str, Any], region: Region) -> Dict[str, Any]:
        name = participant.get("riotId") or participant.get("summonerName")
        if (name and len(name) >= 3) or not participant.get("puuid"):
            return participant

        puuid = participant["puuid"]
        try:
            account = await self.get_account_by_puuid(puuid, region)
        except RiotAPIError as e:
            logger.warning(f"[RIOT] No se pudo obtener el nombre del PUUID ...{puuid[-8:]}: {e.message}")
            return participant

        if account.get("gameName") and account.get("tagLine"):
            summoner_name = f"{account['gameName']}#{account['tagLine']}"
        else:
            summoner_name = f"Player{puuid[-4:]}"
        return {**participant, "summonerName": summoner_name}

    async def get_current_game(
        self, puuid: str, region: Region = Region.EUW1, backfill_names: bool = True
    ) -> Optional[Dict[str, Any]]:
        """
        Partida activa según el endpoint de espectador.

        Retorna None si Riot responde 404 (el jugador no está en partida).
        """
        url = f"{self._platform_url(region)}/lol/spectator/v5/active-games/by-summoner/{puuid}"
        try:
            game = await self._make_request(url)
        except RiotAPIError as e:
            if e.is_not_found:
                return None
            raise

        participants = game.get("participants")
        if backfill_names and participants:
            game = {
                **game,
                "participants": list(await asyncio.gather(
                    *(self._backfill_participant_name(p, region) for p in participants)
                )),
            }
        return game

    # ============== PROFILE ==============
    async def get_summoner_profile(
        self, game_name: str, tag_line: str, region: Region = Region.EUW1
    ) -> Dict[str, Any]:
        """Perfil completo: cuenta, invocador, ranked, maestrías y partida en vivo"""
        account = await self.get_account_by_riot_id(game_name, tag_line, region)
        puuid = account["puuid"]

        summoner = await self.get_summoner_by_puuid(puuid, region)
        ranked_stats = await self.get_ranked_stats(puuid, region)
        mastery = await self.get_champion_mastery(puuid, region, 5)
        current_game = await self.get_current_game(puuid, region)

        return {
            "account": account,
            "summoner": summoner,
            "rankedStats": ranked_stats,
            "championMastery": mastery,
            "isInGame": current_game is not None,
            "currentGame": current_game,
        }

    # ============== HELPERS ==============
    @staticmethod
    def parse_riot_id(riot_id: str) -> Optional[Tuple[str, str]]:
        """
        Separa "gameName#tagLine" en sus dos partes.

        Acepta el '#' codificado en la URL y, como alternativa, un único '-'
        (formato de op.gg).
        """
        decoded = unquote(riot_id or "")

        if "#" in decoded:
            parts = decoded.split("#")
        elif decoded.count("-") == 1:
            parts = decoded.split("-")
        else:
            parts = []

        if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
            logger.debug(f"[RIOT] Riot ID inválido: {riot_id!r}")
            return None

        return parts[0].strip(), parts[1].strip()
