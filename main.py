from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from app.core.config import settings
from app.core.exceptions import GameError, game_error_handler
from app.core.file_storage import file_storage
from app.core.logging import get_logger, setup_logging
from app.apis.auth.main import router as auth_router
from app.apis.games.main import router as games_router

import uvicorn
from fastapi.middleware.cors import CORSMiddleware


logger = get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging(settings.log_level)

    app = FastAPI(title=settings.app.name, version=settings.app.version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GameError, game_error_handler)

    # Serve uploaded thumbnails as static files
    app.mount(
        "/uploads",
        StaticFiles(directory=str(file_storage.base_dir), html=False),
        name="uploads",
    )

    app.include_router(auth_router)
    app.include_router(games_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        logger.error(f"An error occurred when starting the server: {e}.")
