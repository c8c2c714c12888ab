from fastapi import APIRouter

from komplexaci.api.deps import get_cache_sweeper, get_failed_puuid_cache, get_live_game_cache, get_puuid_cache
from komplexaci.core.config import get_settings

router = APIRouter(tags=["health"])

@router.get("/health")
def health():
    """
    Health check con el estado de la configuración y de los cachés

    **Información incluida:**
    - API key de Riot configurada o no
    - Tamaño de cada caché en memoria
    - Estado del barrido periódico
    """
    s = get_settings()
    live_cache = get_live_game_cache()
    puuid_cache = get_puuid_cache()

    return {
        "status": "ok",
        "riot_api_configured": bool(s.RIOT_API_KEY),
        "cache": {
            "live_game": live_cache.get_stats(),
            "puuid": puuid_cache.get_stats(),
            "failed_puuids": len(get_failed_puuid_cache()),
            "sweeper_running": get_cache_sweeper().running,
            "sweep_interval": s.CACHE_SWEEP_INTERVAL,
        },
    }
