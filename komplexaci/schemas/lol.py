"""Esquemas Pydantic para la API de League of Legends"""
from typing import Optional, Dict, Any, List
from pydantic import BaseModel

# ============== LIVE GAME ==============
class LiveGameResponse(BaseModel):
    """Respuesta simple del endpoint de espectador"""
    inGame: bool
    gameInfo: Optional[Dict[str, Any]] = None
    message: Optional[str] = None

class LiveGameStatusResponse(BaseModel):
    """Estado validado (optimizado o inmediato) de partida en vivo"""
    inGame: bool
    gameInfo: Optional[Dict[str, Any]] = None
    timestamp: Optional[int] = None
    memberName: Optional[str] = None
    validated: Optional[bool] = None
    rateLimited: Optional[bool] = None
    immediate: Optional[bool] = None
    error: Optional[str] = None

# ============== ACCOUNTS / SUMMONERS ==============
class RiotAccount(BaseModel):
    """Cuenta de Riot (account-v1)"""
    puuid: str
    gameName: Optional[str] = None
    tagLine: Optional[str] = None

class SummonerProfile(BaseModel):
    """Perfil completo de un invocador"""
    account: RiotAccount
    summoner: Dict[str, Any]
    rankedStats: List[Dict[str, Any]] = []
    championMastery: List[Dict[str, Any]] = []
    isInGame: bool
    currentGame: Optional[Dict[str, Any]] = None

class PuuidResponse(BaseModel):
    """PUUID resuelto a partir de un Riot ID"""
    puuid: str
    riotId: str
    region: str
    cached: bool

# ============== MATCHES / MASTERY ==============
class MatchHistoryResponse(BaseModel):
    matches: List[Dict[str, Any]]

class MasteryResponse(BaseModel):
    championMastery: List[Dict[str, Any]]

# ============== STATIC DATA ==============
class RegionInfo(BaseModel):
    code: str
    name: str
    cluster: str

class RegionsResponse(BaseModel):
    regions: List[RegionInfo]

class ChampionSummary(BaseModel):
    id: str
    key: str
    name: str
    title: Optional[str] = None
    tags: List[str] = []
    square: str
    splash: str

class ChampionsResponse(BaseModel):
    total: int
    version: Optional[str] = None
    champions: List[ChampionSummary]

class ErrorResponse(BaseModel):
    error: str
