from __future__ import annotations

from fastapi import FastAPI

from core.config import get_settings
from core.logging import get_logger

from api.routes.health import router as health_router
from api.routes.fixtures import router as fixtures_router
from api.routes.teams import router as teams_router
from api.routes.metrics import router as metrics_router

logger = get_logger("api.app")


def create_app() -> FastAPI:
    app = FastAPI(title="Football Detail API", version="0.1.0")
    try:
        get_settings()
    except Exception as exc:  # pragma: no cover
        logger.error("Impossibile caricare settings: %s", exc)

    app.include_router(health_router)
    app.include_router(fixtures_router)
    app.include_router(teams_router)
    app.include_router(metrics_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.app:app", host="0.0.0.0", port=8000, reload=False)
