# komplexaci/core/config.py
from functools import lru_cache
from pathlib import Path
from typing import Optional, List
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]

class Settings(BaseSettings):
    # === Riot Games API ===
    RIOT_API_KEY: Optional[str] = os.getenv("RIOT_API_KEY")

    # Timeout del cliente HTTP (segundos)
    REQUEST_TIMEOUT: float = 10.0

    # Separación mínima entre requests consecutivos a Riot (segundos)
    MIN_REQUEST_INTERVAL: float = 0.2

    # Pausa entre variantes de mayúsculas al buscar una cuenta por Riot ID
    ACCOUNT_RETRY_DELAY: float = 0.1

    # === Configuración de Caché ===
    LIVE_GAME_CACHE_TTL: int = 60
    RATE_LIMIT_CACHE_TTL: int = 300
    FAILED_PUUID_TTL: int = 300
    PUUID_CACHE_TTL: int = 60 * 60 * 24
    CACHE_SWEEP_INTERVAL: float = 60.0

    # Partidas recientes que se revisan para detectar datos de espectador viejos
    MATCH_HISTORY_CHECK_COUNT: int = 5

    # === Data Dragon (datos estáticos de campeones) ===
    DDRAGON_BASE_URL: str = "https://ddragon.leagueoflegends.com"
    DDRAGON_LOCALE: str = "en_US"
    DDRAGON_FALLBACK_VERSION: str = "15.10.1"
    CHAMPION_DATA_TTL: int = 3600
    # Espera antes de reintentar si Data Dragon falló
    CHAMPION_RETRY_DELAY: int = 60

    # === Logging ===
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = str(BASE_DIR.parent / "logs")
    LOG_TO_FILE: bool = True
    SLOW_REQUEST_THRESHOLD: float = 5.0

    # === CORS ===
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "https://www.komplexaci.cz",
    ]

    # Configuración de pydantic v2
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

@lru_cache
def get_settings() -> Settings:
    return Settings()
