"""Endpoints de partida en vivo"""
import logging
import time
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from komplexaci.api.deps import get_live_game_cache_service, get_live_game_service, get_riot_service
from komplexaci.api.errors import (
    AUTH_INVALID_MESSAGE,
    DECRYPTION_MESSAGE,
    raise_for_riot_error,
    require_param,
    validate_region,
)
from komplexaci.core.errors import RiotAPIError, RiotErrorKind
from komplexaci.schemas.lol import LiveGameResponse, LiveGameStatusResponse
from komplexaci.services.live_game_service import LiveGameCacheService, LiveGameService
from komplexaci.services.riot_service import RiotAPIService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lol", tags=["LoL Live Game"])

NO_STORE = "no-cache, no-store, must-revalidate"

# Mensajes para errores que se devuelven con status 200
FOLDED_ERROR_MESSAGES = {
    RiotErrorKind.NOT_FOUND: "Player not in game",
    RiotErrorKind.DECRYPTION_FAILED: DECRYPTION_MESSAGE,
    RiotErrorKind.SERVER_ERROR: "Riot API temporarily unavailable",
}


def _now_ms() -> int:
    return int(time.time() * 1000)


def _folded_error(error: RiotAPIError, member_name: str) -> Dict[str, Any]:
    """
    Respuesta 200 para clientes que hacen polling.

    Solo un API key inválido se propaga como 403.
    """
    if error.kind is RiotErrorKind.AUTH_INVALID:
        raise HTTPException(403, AUTH_INVALID_MESSAGE)

    return {
        "inGame": False,
        "gameInfo": None,
        "error": FOLDED_ERROR_MESSAGES.get(error.kind, "Unknown error occurred"),
        "memberName": member_name,
    }


@router.get("/live-game", response_model=LiveGameResponse, response_model_exclude_unset=True)
async def get_live_game(
    response: Response,
    puuid: Optional[str] = Query(None, description="PUUID del jugador"),
    region: str = Query("euw1", description="Región (plataforma)"),
    cache_buster: Optional[str] = Query(None, alias="_cb", description="Fuerza respuesta sin caché"),
    riot: RiotAPIService = Depends(get_riot_service),
):
    """
    Partida en vivo tal como la reporta el endpoint de espectador (sin validar).

    - **Ejemplo**: `/api/lol/live-game?puuid=...&region=euw1`
    """
    puuid = require_param(puuid, "puuid")
    platform = validate_region(region)

    try:
        current_game = await riot.get_current_game(puuid, platform)
    except RiotAPIError as e:
        raise_for_riot_error(
            e,
            not_found_message="Summoner is not currently in a game",
            default_message="Failed to fetch live game data",
        )

    if current_game is None:
        return {"inGame": False, "message": "Summoner is not currently in a game"}

    response.headers["Cache-Control"] = (
        NO_STORE if cache_buster else "public, s-maxage=30, stale-while-revalidate=60"
    )
    return {"inGame": True, "gameInfo": current_game}


@router.get(
    "/live-game-optimized",
    response_model=LiveGameStatusResponse,
    response_model_exclude_unset=True,
)
async def get_live_game_optimized(
    response: Response,
    puuid: Optional[str] = Query(None, description="PUUID del jugador"),
    region: str = Query("euw1", description="Región (plataforma)"),
    member_name: str = Query("Unknown", alias="memberName", description="Nombre del miembro del clan"),
    service: LiveGameCacheService = Depends(get_live_game_cache_service),
):
    """
    Partida en vivo validada contra el historial, con caché.

    - **Caché**: 60 segundos (5 minutos si Riot aplica rate limit)
    - **Header**: `X-Cache: HIT|MISS`
    """
    puuid = require_param(puuid, "puuid")
    platform = validate_region(region)

    try:
        status = await service.get_status(puuid, platform, member_name)
    except RiotAPIError as e:
        logger.warning(f"[LIVE] Error en live-game-optimized para {member_name}: {e}")
        return _folded_error(e, member_name)

    payload = status.payload
    response.headers["X-Cache"] = "HIT" if status.cache_hit else "MISS"
    if payload.get("rateLimited"):
        response.headers["X-Rate-Limited"] = "true"
        response.headers["Cache-Control"] = "public, max-age=300, stale-while-revalidate=600"
    else:
        response.headers["Cache-Control"] = "public, max-age=30, stale-while-revalidate=60"
    return payload


@router.get(
    "/live-game-immediate",
    response_model=LiveGameStatusResponse,
    response_model_exclude_unset=True,
)
async def get_live_game_immediate(
    response: Response,
    puuid: Optional[str] = Query(None, description="PUUID del jugador"),
    region: str = Query("euw1", description="Región (plataforma)"),
    member_name: str = Query("Unknown", alias="memberName", description="Nombre del miembro del clan"),
    service: LiveGameService = Depends(get_live_game_service),
):
    """
    Validación inmediata sin caché, para detectar el fin de una partida.

    Siempre responde 200 (salvo parámetros inválidos o API key inválida).
    """
    puuid = require_param(puuid, "puuid")
    platform = validate_region(region)

    response.headers["Cache-Control"] = NO_STORE
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    response.headers["X-Immediate-Check"] = "true"

    try:
        check = await service.check(puuid, platform, member_name)
    except RiotAPIError as e:
        logger.warning(f"[LIVE] Error en live-game-immediate para {member_name}: {e}")
        if e.is_rate_limited:
            response.headers["X-Rate-Limited"] = "true"
            return {
                "inGame": False,
                "gameInfo": None,
                "timestamp": _now_ms(),
                "memberName": member_name,
                "rateLimited": True,
                "immediate": True,
            }
        return {**_folded_error(e, member_name), "immediate": True}

    return {
        **check.to_dict(),
        "timestamp": _now_ms(),
        "memberName": member_name,
        "immediate": True,
        "validated": True,
    }
