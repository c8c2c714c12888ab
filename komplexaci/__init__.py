"""Komplexáci - API de League of Legends para la web del clan"""

__version__ = "1.0.0"
