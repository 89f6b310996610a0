import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import settings
from api.errors import register_error_handlers
from api.middleware import install_middleware, mount_static
from api.router import include_routes
from services.db import dispose_engine, init_models

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Recipe Book API (%s)", settings.env_name)
    await init_models()
    yield
    logger.info("Shutting down Recipe Book API")
    await dispose_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Recipe Book API",
        description="Recipes, favorites, collections and meal plans.",
        version="1.0.0",
        lifespan=lifespan,
    )
    install_middleware(app)
    register_error_handlers(app)
    include_routes(app)
    # last: the static mount at "/" would otherwise shadow the API
    mount_static(app)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port)
