from functools import lru_cache

import httpx
from fastapi import HTTPException

from komplexaci.core.cache import CacheSweeper, FailedPuuidCache, InMemoryCache
from komplexaci.core.config import get_settings
from komplexaci.services.champion_service import ChampionDataService
from komplexaci.services.live_game_service import LiveGameCacheService, LiveGameService
from komplexaci.services.riot_service import RequestPacer, RiotAPIService


@lru_cache
def get_http_client() -> httpx.AsyncClient:
    """Cliente HTTP compartido para Riot y Data Dragon"""
    s = get_settings()
    return httpx.AsyncClient(timeout=s.REQUEST_TIMEOUT)


# ============== CACHÉS ==============
@lru_cache
def get_live_game_cache() -> InMemoryCache:
    return InMemoryCache(default_ttl=get_settings().LIVE_GAME_CACHE_TTL, name="live_game")


@lru_cache
def get_puuid_cache() -> InMemoryCache:
    return InMemoryCache(default_ttl=get_settings().PUUID_CACHE_TTL, name="puuid")


@lru_cache
def get_failed_puuid_cache() -> FailedPuuidCache:
    ttl = get_settings().FAILED_PUUID_TTL
    return FailedPuuidCache(InMemoryCache(default_ttl=ttl, name="failed_puuid"), ttl=ttl)


@lru_cache
def get_cache_sweeper() -> CacheSweeper:
    """Barrido periódico de todos los cachés en memoria"""
    return CacheSweeper(
        [get_live_game_cache(), get_puuid_cache(), get_failed_puuid_cache()],
        interval=get_settings().CACHE_SWEEP_INTERVAL,
    )


# ============== SERVICIOS ==============
@lru_cache
def get_champion_service() -> ChampionDataService:
    s = get_settings()
    return ChampionDataService(
        get_http_client(),
        base_url=s.DDRAGON_BASE_URL,
        locale=s.DDRAGON_LOCALE,
        fallback_version=s.DDRAGON_FALLBACK_VERSION,
        ttl=s.CHAMPION_DATA_TTL,
        retry_delay=s.CHAMPION_RETRY_DELAY,
    )


@lru_cache
def _build_riot_service(api_key: str) -> RiotAPIService:
    s = get_settings()
    return RiotAPIService(
        api_key,
        get_http_client(),
        failed_puuids=get_failed_puuid_cache(),
        champions=get_champion_service(),
        pacer=RequestPacer(min_interval=s.MIN_REQUEST_INTERVAL),
        account_retry_delay=s.ACCOUNT_RETRY_DELAY,
    )


def get_riot_service() -> RiotAPIService:
    """Dependency: cliente de Riot (500 si no hay API key configurada)"""
    api_key = get_settings().RIOT_API_KEY
    if not api_key:
        raise HTTPException(500, "Riot API key not configured")
    return _build_riot_service(api_key)


def get_live_game_service() -> LiveGameService:
    s = get_settings()
    return LiveGameService(get_riot_service(), history_check_count=s.MATCH_HISTORY_CHECK_COUNT)


def get_live_game_cache_service() -> LiveGameCacheService:
    s = get_settings()
    return LiveGameCacheService(
        get_live_game_service(),
        get_live_game_cache(),
        ttl=s.LIVE_GAME_CACHE_TTL,
        rate_limit_ttl=s.RATE_LIMIT_CACHE_TTL,
    )


async def close_http_client() -> None:
    """
    Cierra el cliente HTTP compartido y descarta los servicios que lo usan.

    El siguiente startup crea un cliente nuevo junto con sus servicios.
    """
    await get_http_client().aclose()
    get_http_client.cache_clear()
    get_champion_service.cache_clear()
    _build_riot_service.cache_clear()
