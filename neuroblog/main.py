import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import neuroblog.models  # noqa: F401  (registers tables on Base.metadata)
from neuroblog.config import Settings, get_settings
from neuroblog.database import Base, SessionLocal, engine
from neuroblog.routers import ai_agent, auth, categories, comments, posts
from neuroblog.services.container import ServiceContainer, build_container

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, container: ServiceContainer | None = None) -> FastAPI:
    settings = settings or get_settings()
    container = container or build_container(settings, SessionLocal)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if container.session_factory is SessionLocal:
            Base.metadata.create_all(bind=engine)
        if settings.auto_generation_enabled:
            container.scheduler.start()
        yield
        container.scheduler.stop()

    app = FastAPI(title="NeuroBlog API", lifespan=lifespan)
    app.state.container = container

    # Enable CORS (required for the frontend)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(posts.router)
    app.include_router(categories.router)
    app.include_router(comments.router)
    app.include_router(ai_agent.router)

    # Health check
    @app.get("/")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
