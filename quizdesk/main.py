import uvicorn
from fastapi import FastAPI

from quizdesk.api.routes.admin_quizzes import router as admin_quizzes_router
from quizdesk.api.routes.health import router as health_router
from quizdesk.api.routes.quizzes import router as quizzes_router
from quizdesk.core.config import get_settings
from quizdesk.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Quizdesk API",
        version="0.1.0",
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
    )
    app.include_router(health_router)
    # Static admin paths must be matched before /api/quizzes/{quiz_id}.
    app.include_router(admin_quizzes_router)
    app.include_router(quizzes_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "quizdesk.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
