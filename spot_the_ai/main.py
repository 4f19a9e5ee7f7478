import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spot_the_ai import __version__
from spot_the_ai.api.routes import router
from spot_the_ai.settings import get_settings
from spot_the_ai.singleton import init_session

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="spot-the-ai", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
app.include_router(router)


@app.on_event("startup")
async def _startup() -> None:
    session = init_session(settings=settings)
    logger.info(
        "Game ready (%s): up to %d players, AI backend %s",
        settings.app_env,
        session.registry.capacity,
        settings.ai_backend,
    )


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "spot-the-ai", "version": __version__}
