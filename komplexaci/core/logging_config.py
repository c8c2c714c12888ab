"""
Configuración centralizada de logging para la API
- Consola + archivos rotativos (límite 50MB por archivo)
- Archivos separados para errores, requests y tiempos
"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-30s | "
    "%(funcName)-20s | Line %(lineno)-4d | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_BYTES = 50 * 1024 * 1024  # 50 MB
BACKUP_COUNT = 5


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=path,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
    log_to_file: bool = True,
) -> None:
    """
    Configura el logging de la aplicación

    Args:
        level: Nivel de logging (logging.DEBUG, "INFO", etc.)
        log_dir: Directorio para los archivos de log
        log_to_file: Si es False solo se loggea en consola
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logs_dir = Path(log_dir or "logs")
    if log_to_file:
        logs_dir.mkdir(parents=True, exist_ok=True)

        root_logger.addHandler(_rotating_handler(logs_dir / "app.log", logging.INFO, formatter))
        root_logger.addHandler(_rotating_handler(logs_dir / "errors.log", logging.ERROR, formatter))

        # Solo logs de timing
        performance_handler = _rotating_handler(logs_dir / "performance.log", logging.DEBUG, formatter)
        performance_handler.addFilter(lambda record: "[TIMING]" in record.getMessage())
        root_logger.addHandler(performance_handler)

        # Solo logs de requests HTTP entrantes
        requests_handler = _rotating_handler(logs_dir / "requests.log", logging.INFO, formatter)
        requests_handler.addFilter(lambda record: "[REQUEST]" in record.getMessage())
        root_logger.addHandler(requests_handler)

    # Reducir verbosidad de librerías externas
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("=" * 80)
    logger.info(f"Sistema de logging inicializado - Nivel: {logging.getLevelName(level)}")
    if log_to_file:
        logger.info(f"Directorio de logs: {logs_dir.absolute()}")
    logger.info("=" * 80)


class TimingLogger:
    """
    Context manager para medir y loggear tiempos de ejecución

    Uso:
        with TimingLogger("Operación X"):
            ...
    """

    def __init__(self, operation_name: str, logger_name: str = None, level: int = logging.DEBUG):
        self.operation_name = operation_name
        self.logger = logging.getLogger(logger_name or __name__)
        self.level = level
        self.start_time = None
        self.elapsed: Optional[float] = None

    def __enter__(self):
        self.start_time = datetime.now()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = (datetime.now() - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.log(
                self.level,
                f"[TIMING] Completado: {self.operation_name} | Tiempo: {self.elapsed:.3f}s"
            )
        else:
            self.logger.warning(
                f"[TIMING] Error en: {self.operation_name} | "
                f"Tiempo antes del error: {self.elapsed:.3f}s | Error: {exc_val}"
            )

        return False
