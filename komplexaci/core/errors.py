"""Errores tipados de la API de Riot"""
from enum import Enum
from typing import Optional


class RiotErrorKind(str, Enum):
    """Clasificación de un fallo de la API de Riot"""
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    AUTH_INVALID = "auth_invalid"
    SERVER_ERROR = "server_error"
    DECRYPTION_FAILED = "decryption_failed"
    UNKNOWN = "unknown"


class RiotAPIError(Exception):
    """
    Error de la API de Riot, clasificado una sola vez en el cliente HTTP.

    Los routers deciden el status HTTP a partir de `kind`, nunca del texto.
    """

    def __init__(self, kind: RiotErrorKind, message: str, status_code: Optional[int] = None):
        self.kind = kind
        self.message = message
        self.status_code = status_code
        super().__init__(f"Riot API Error: {status_code or '-'} - {message}")

    @property
    def is_not_found(self) -> bool:
        return self.kind is RiotErrorKind.NOT_FOUND

    @property
    def is_rate_limited(self) -> bool:
        return self.kind is RiotErrorKind.RATE_LIMITED


def classify_riot_error(status_code: Optional[int], message: str = "") -> RiotErrorKind:
    """
    Traduce un status HTTP (y el mensaje de Riot) a un RiotErrorKind.

    Riot responde 400 con "Exception decrypting ..." cuando un PUUID expiró
    o pertenece a otro cluster regional.
    """
    if status_code is None:
        return RiotErrorKind.SERVER_ERROR
    if status_code == 404:
        return RiotErrorKind.NOT_FOUND
    if status_code == 429:
        return RiotErrorKind.RATE_LIMITED
    if status_code in (401, 403):
        return RiotErrorKind.AUTH_INVALID
    if status_code >= 500:
        return RiotErrorKind.SERVER_ERROR
    if status_code == 400 and "decrypting" in (message or "").lower():
        return RiotErrorKind.DECRYPTION_FAILED
    return RiotErrorKind.UNKNOWN
