from contextlib import asynccontextmanager

from fastapi import FastAPI
import logging

from films import config
from films.api.v1 import films as films_v1
from films.api.v2 import films as films_v2
from films.database.db import wait_for_db

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Launching the films service...")
    wait_for_db()
    logger.info("The service is ready to work")
    yield


app = FastAPI(
    title="Films service",
    description="API for the Sakila film and actor catalog",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(films_v1.router, prefix="/api/films", tags=["films v1"])
app.include_router(films_v2.router, prefix="/api/v2/films", tags=["films v2"])
app.include_router(films_v2.actors_router, prefix="/api/v2/actors", tags=["actors v2"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
