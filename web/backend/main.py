from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from playhead.core.config import load_config
from playhead.core.output import setup_from_config
from web.backend.deps import shutdown_player_service

config = load_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_from_config(config.logging)
    logger.info(f"Playhead web backend starting (origins={config.web.allowed_origins})")
    yield
    logger.info("Shutting down player service")
    shutdown_player_service()


app = FastAPI(title="Playhead Web API", version="0.1.0", lifespan=lifespan)

# CORS: PLAYHEAD_ALLOWED_ORIGINS overrides the [web] config section
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.web.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
from web.backend.routers import library, live, player, stats

app.include_router(player.router, prefix="/api", tags=["player"])
app.include_router(library.router, prefix="/api", tags=["library"])
app.include_router(stats.router, prefix="/api", tags=["stats"])
app.include_router(live.router, tags=["live"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
