"""Main FastAPI application."""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from catering.core.config import settings
from catering.core.logging import setup_logging
from catering.db.database import init_db
from catering.api import health, catalog, quotes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    await init_db()
    yield


app = FastAPI(
    title="Catering Quotes",
    description="Quote builder for a catering business",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(catalog.router, tags=["catalog"])
app.include_router(quotes.router, tags=["quotes"])


@app.get("/")
async def root():
    """Service banner."""
    return {
        "message": f"{settings.business_name} Quotes API",
        "version": "0.1.0",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
