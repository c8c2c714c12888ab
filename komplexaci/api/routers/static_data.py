"""Datos estáticos: regiones y campeones"""
from fastapi import APIRouter, Depends, HTTPException, Response

from komplexaci.api.deps import get_champion_service
from komplexaci.core.regions import region_catalog
from komplexaci.schemas.lol import ChampionsResponse, RegionsResponse
from komplexaci.services.champion_service import ChampionDataService

router = APIRouter(prefix="/api/lol", tags=["LoL Static Data"])


@router.get("/regions", response_model=RegionsResponse)
def get_regions(response: Response):
    """Regiones soportadas con su cluster regional"""
    response.headers["Cache-Control"] = "public, s-maxage=86400, stale-while-revalidate=172800"
    return {"regions": region_catalog()}


@router.get("/champions", response_model=ChampionsResponse)
async def get_champions(
    response: Response,
    service: ChampionDataService = Depends(get_champion_service),
):
    """
    Listado de campeones desde Data Dragon.

    - **Caché**: 1 hora en memoria
    """
    champions = await service.get_all_champions()
    if not champions:
        raise HTTPException(503, "Champion data is currently unavailable")

    response.headers["Cache-Control"] = "public, s-maxage=3600, stale-while-revalidate=7200"
    return {"total": len(champions), "version": service.version, "champions": champions}
