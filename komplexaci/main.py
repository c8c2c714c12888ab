import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from komplexaci import __version__
from komplexaci.api.deps import close_http_client, get_cache_sweeper
from komplexaci.api.routers import health, live_game, static_data, summoner
from komplexaci.core.config import get_settings
from komplexaci.core.logging_config import setup_logging
from komplexaci.middleware import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    s = get_settings()
    setup_logging(level=s.LOG_LEVEL, log_dir=s.LOG_DIR, log_to_file=s.LOG_TO_FILE)

    app = FastAPI(
        title="Komplexáci LoL API",
        version=__version__,
        description="Proxy de la API de Riot Games con detección de partidas en vivo",
    )

    # ============== MIDDLEWARES ==============
    app.add_middleware(RequestLoggingMiddleware, slow_request_threshold=s.SLOW_REQUEST_THRESHOLD)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=s.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"✓ CORS configurado para orígenes: {s.CORS_ORIGINS}")

    # ============== ERRORES ==============
    # Todas las respuestas de error usan {"error": "..."}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
        return JSONResponse(
            {"error": f"Invalid parameter '{field}': {first.get('msg', 'invalid value')}"},
            status_code=400,
        )

    # ============== ROUTERS ==============
    app.include_router(health.router)
    app.include_router(live_game.router)
    app.include_router(summoner.router)
    app.include_router(static_data.router)

    @app.get("/")
    def root():
        return {
            "message": "Komplexáci LoL API",
            "version": __version__,
            "endpoints": [
                "/api/lol/summoner",
                "/api/lol/summoner-by-puuid",
                "/api/lol/puuid-only",
                "/api/lol/matches",
                "/api/lol/mastery",
                "/api/lol/live-game",
                "/api/lol/live-game-optimized",
                "/api/lol/live-game-immediate",
                "/api/lol/regions",
                "/api/lol/champions",
                "/health",
                "/docs",
            ],
        }

    @app.on_event("startup")
    async def startup_event():
        logger.info("=" * 80)
        logger.info(f"INICIANDO KOMPLEXÁCI LOL API v{__version__}")
        logger.info("=" * 80)
        if not s.RIOT_API_KEY:
            logger.warning("⚠️  RIOT_API_KEY no configurada: los endpoints de Riot responderán 500")
        get_cache_sweeper().start()
        logger.info("🚀 SISTEMA LISTO - Esperando requests...")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("🛑 Apagando Komplexáci LoL API...")
        await get_cache_sweeper().stop()
        await close_http_client()

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("komplexaci.main:app", host="0.0.0.0", port=8000, reload=True, log_config=None)
