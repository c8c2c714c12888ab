"""Endpoints de invocadores, cuentas, historial y maestrías"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from komplexaci.api.deps import get_puuid_cache, get_riot_service
from komplexaci.api.errors import raise_for_riot_error, require_param, validate_count, validate_region
from komplexaci.core.cache import CacheBackend
from komplexaci.core.errors import RiotAPIError
from komplexaci.schemas.lol import (
    MasteryResponse,
    MatchHistoryResponse,
    PuuidResponse,
    RiotAccount,
    SummonerProfile,
)
from komplexaci.services.riot_service import RiotAPIService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lol", tags=["LoL Summoners"])

RIOT_ID_HINT = " (format: gameName#tagLine)"
INVALID_RIOT_ID = "Invalid Riot ID format. Use: gameName#tagLine"


# ============== PROFILE ==============
@router.get("/summoner", response_model=SummonerProfile)
async def get_summoner(
    response: Response,
    riot_id: Optional[str] = Query(None, alias="riotId", description="Riot ID en formato gameName#tagLine"),
    region: str = Query("euw1", description="Región (plataforma)"),
    refresh: bool = Query(False, description="Evita la caché del navegador/CDN"),
    riot: RiotAPIService = Depends(get_riot_service),
):
    """
    Perfil completo: cuenta, invocador, ranked, top 5 maestrías y partida en vivo.

    - **Ejemplo**: `/api/lol/summoner?riotId=Faker%23KR1&region=kr`
    """
    riot_id = require_param(riot_id, "riotId", RIOT_ID_HINT)
    parsed = RiotAPIService.parse_riot_id(riot_id)
    if parsed is None:
        raise HTTPException(400, INVALID_RIOT_ID)
    platform = validate_region(region)

    game_name, tag_line = parsed
    try:
        profile = await riot.get_summoner_profile(game_name, tag_line, platform)
    except RiotAPIError as e:
        logger.error(f"Error obteniendo perfil de {riot_id}: {e}")
        raise_for_riot_error(e, "Summoner not found", "Failed to fetch summoner data")

    response.headers["Cache-Control"] = (
        "no-cache, no-store, must-revalidate" if refresh
        else "public, s-maxage=300, stale-while-revalidate=600"
    )
    return profile


@router.get("/summoner-by-puuid", response_model=RiotAccount)
async def get_summoner_by_puuid(
    response: Response,
    puuid: Optional[str] = Query(None, description="PUUID del jugador"),
    region: str = Query("euw1", description="Región (plataforma)"),
    riot: RiotAPIService = Depends(get_riot_service),
):
    """Cuenta de Riot (gameName/tagLine) a partir de un PUUID"""
    puuid = require_param(puuid, "puuid")
    platform = validate_region(region)

    try:
        account = await riot.get_account_by_puuid(puuid, platform)
    except RiotAPIError as e:
        raise_for_riot_error(e, "Account not found", "Failed to fetch summoner data")

    response.headers["Cache-Control"] = "public, s-maxage=300, stale-while-revalidate=600"
    return account


@router.get("/puuid-only", response_model=PuuidResponse)
async def get_puuid_only(
    response: Response,
    riot_id: Optional[str] = Query(None, alias="riotId", description="Riot ID en formato gameName#tagLine"),
    region: str = Query("euw1", description="Región (plataforma)"),
    riot: RiotAPIService = Depends(get_riot_service),
    cache: CacheBackend = Depends(get_puuid_cache),
):
    """
    Solo el PUUID de un Riot ID (llamada mínima).

    - **Caché**: 24 horas, header `X-Cache: HIT|MISS`
    """
    riot_id = require_param(riot_id, "riotId", RIOT_ID_HINT)
    parsed = RiotAPIService.parse_riot_id(riot_id)
    if parsed is None:
        raise HTTPException(400, INVALID_RIOT_ID)
    platform = validate_region(region)

    response.headers["Cache-Control"] = "public, max-age=86400, stale-while-revalidate=172800"
    cache_key = f"{riot_id}-{platform.value}"

    cached_puuid = cache.get(cache_key)
    if cached_puuid is not None:
        logger.debug(f"[CACHE HIT] PUUID de {riot_id}")
        response.headers["X-Cache"] = "HIT"
        return {"puuid": cached_puuid, "riotId": riot_id, "region": platform.value, "cached": True}

    game_name, tag_line = parsed
    try:
        account = await riot.get_account_by_riot_id(game_name, tag_line, platform)
    except RiotAPIError as e:
        logger.error(f"Error obteniendo PUUID de {riot_id}: {e}")
        raise_for_riot_error(e, "Summoner not found", "Failed to fetch summoner data")

    cache.set(cache_key, account["puuid"])
    response.headers["X-Cache"] = "MISS"
    return {"puuid": account["puuid"], "riotId": riot_id, "region": platform.value, "cached": False}


# ============== MATCHES / MASTERY ==============
@router.get("/matches", response_model=MatchHistoryResponse)
async def get_matches(
    response: Response,
    puuid: Optional[str] = Query(None, description="PUUID del jugador"),
    region: str = Query("euw1", description="Región (plataforma)"),
    count: int = Query(10, description="Número de partidas (1-100)"),
    riot: RiotAPIService = Depends(get_riot_service),
):
    """Historial de partidas con nombre e imagen de campeón por participante"""
    puuid = require_param(puuid, "puuid")
    validate_count(count, 100)
    platform = validate_region(region)

    try:
        matches = await riot.get_match_history(puuid, platform, count)
    except RiotAPIError as e:
        logger.error(f"Error obteniendo historial de ...{puuid[-8:]}: {e}")
        raise_for_riot_error(e, "No match history found for this summoner", "Failed to fetch match history")

    response.headers["Cache-Control"] = "public, s-maxage=180, stale-while-revalidate=360"
    return {"matches": matches}


@router.get("/mastery", response_model=MasteryResponse)
async def get_mastery(
    response: Response,
    puuid: Optional[str] = Query(None, description="PUUID del jugador"),
    region: str = Query("euw1", description="Región (plataforma)"),
    count: int = Query(10, description="Número de campeones (1-50)"),
    riot: RiotAPIService = Depends(get_riot_service),
):
    """Top de maestrías de campeón"""
    puuid = require_param(puuid, "puuid")
    validate_count(count, 50)
    platform = validate_region(region)

    try:
        mastery = await riot.get_champion_mastery(puuid, platform, count)
    except RiotAPIError as e:
        logger.error(f"Error obteniendo maestrías de ...{puuid[-8:]}: {e}")
        raise_for_riot_error(
            e, "No champion mastery data found for this summoner", "Failed to fetch champion mastery data"
        )

    response.headers["Cache-Control"] = "public, s-maxage=600, stale-while-revalidate=1200"
    return {"championMastery": mastery}
