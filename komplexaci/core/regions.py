"""Regiones (plataformas) de League of Legends soportadas"""
from enum import Enum
from typing import Dict, List, Optional


class Region(str, Enum):
    """
    Plataformas de Riot aceptadas por la API.

    - platform_route: host de plataforma (summoner, league, spectator...)
    - regional_route: cluster para account-v1 y match-v5
    """

    EUW1 = "euw1"
    EUN1 = "eun1"
    NA1 = "na1"
    KR = "kr"
    JP1 = "jp1"
    BR1 = "br1"
    LA1 = "la1"
    LA2 = "la2"
    OC1 = "oc1"
    TR1 = "tr1"
    RU = "ru"

    @property
    def platform_route(self) -> str:
        return self.value

    @property
    def regional_route(self) -> str:
        return _REGIONAL_ROUTES[self.value]

    @property
    def platform_code(self) -> str:
        """Prefijo de los match ids (p. ej. EUW1 en EUW1_1234567)"""
        return self.value.upper()

    @classmethod
    def from_code(cls, code: Optional[str]) -> Optional["Region"]:
        try:
            return cls(code)
        except ValueError:
            return None

    @classmethod
    def codes(cls) -> List[str]:
        return [r.value for r in cls]


_REGIONAL_ROUTES: Dict[str, str] = {
    "euw1": "europe",
    "eun1": "europe",
    "tr1": "europe",
    "ru": "europe",
    "na1": "americas",
    "br1": "americas",
    "la1": "americas",
    "la2": "americas",
    "kr": "asia",
    "jp1": "asia",
    "oc1": "sea",
}

DEFAULT_REGION = Region.EUW1

REGION_NAMES: Dict[str, str] = {
    "euw1": "Europe West",
    "eun1": "Europe Nordic & East",
    "na1": "North America",
    "kr": "Korea",
    "jp1": "Japan",
    "br1": "Brazil",
    "la1": "Latin America North",
    "la2": "Latin America South",
    "oc1": "Oceania",
    "tr1": "Turkey",
    "ru": "Russia",
}


def region_catalog() -> List[Dict[str, str]]:
    """Listado estático de regiones para el selector del frontend"""
    return [
        {"code": r.value, "name": REGION_NAMES[r.value], "cluster": r.regional_route}
        for r in Region
    ]
