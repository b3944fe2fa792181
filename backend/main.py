"""
FastAPI backend for preference-driven ranking of analyzed content.
Stores item features/embeddings, learns from like/dislike feedback, ranks items.
Deployment-ready: CORS, configurable host/port via env.
"""
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.db.session import get_session_factory
from app.routers import feedback, items, ranking
from app.services.container import build_services

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
# Hide per-query SQL
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def create_app(services=None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "services", None) is None:
            app.state.services = build_services(settings, get_session_factory())
            logging.info("Ranking services ready")
        yield

    app = FastAPI(
        title="Feed Ranking API",
        description="Learns attribute and embedding preferences from feedback and ranks content for the daily digest.",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(items.router)
    app.include_router(feedback.router)
    app.include_router(ranking.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
