import uvicorn
from fastapi import FastAPI

from fitstreak.api.routes.gamification import router as gamification_router
from fitstreak.api.routes.health import router as health_router
from fitstreak.api.routes.shop import router as shop_router
from fitstreak.core.config import get_settings
from fitstreak.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Fitstreak Gamification API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.include_router(health_router)
    app.include_router(gamification_router)
    app.include_router(shop_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "fitstreak.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
