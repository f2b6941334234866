# pokedex/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .catalog import catalog_router
from .catalog.router import close_controller


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_controller()


app = FastAPI(
    title="Pokédex lookup",
    description=(
        "Browse the PokeAPI creature catalogue page by page or look up a "
        "single creature by name."
    ),
    version="1.0.0",
    lifespan=lifespan,
)
app.include_router(catalog_router)


# Base route for a quick health check
@app.get("/")
def health_check():
    return {"status": "ok"}
