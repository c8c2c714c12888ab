"""Validación de parámetros y traducción de errores de Riot a HTTP"""
from typing import Dict, NoReturn, Optional

from fastapi import HTTPException

from komplexaci.core.errors import RiotAPIError, RiotErrorKind
from komplexaci.core.regions import Region

RIOT_ERROR_STATUS: Dict[RiotErrorKind, int] = {
    RiotErrorKind.NOT_FOUND: 404,
    RiotErrorKind.AUTH_INVALID: 403,
    RiotErrorKind.RATE_LIMITED: 429,
    RiotErrorKind.SERVER_ERROR: 503,
    RiotErrorKind.DECRYPTION_FAILED: 400,
    RiotErrorKind.UNKNOWN: 500,
}

AUTH_INVALID_MESSAGE = "API key invalid or expired"
RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please try again later."
UNAVAILABLE_MESSAGE = "Riot API is currently unavailable. Please try again later."
DECRYPTION_MESSAGE = "Player data needs refresh"


def raise_for_riot_error(
    error: RiotAPIError,
    not_found_message: str,
    default_message: str,
) -> NoReturn:
    """Convierte un RiotAPIError en el HTTPException correspondiente"""
    messages = {
        RiotErrorKind.NOT_FOUND: not_found_message,
        RiotErrorKind.AUTH_INVALID: AUTH_INVALID_MESSAGE,
        RiotErrorKind.RATE_LIMITED: RATE_LIMITED_MESSAGE,
        RiotErrorKind.SERVER_ERROR: UNAVAILABLE_MESSAGE,
        RiotErrorKind.DECRYPTION_FAILED: DECRYPTION_MESSAGE,
    }
    raise HTTPException(RIOT_ERROR_STATUS[error.kind], messages.get(error.kind, default_message))


def validate_region(region: Optional[str]) -> Region:
    parsed = Region.from_code(region)
    if parsed is None:
        raise HTTPException(400, f"Invalid region. Valid regions: {', '.join(Region.codes())}")
    return parsed


def require_param(value: Optional[str], name: str, hint: str = "") -> str:
    if not value:
        raise HTTPException(400, f"{name} parameter is required{hint}")
    return value


def validate_count(count: int, maximum: int) -> int:
    if count < 1 or count > maximum:
        raise HTTPException(400, f"count must be between 1 and {maximum}")
    return count
