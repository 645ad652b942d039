from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import commands, governance, health, queries
from .config import settings
from .logging_config import setup_logging

setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Intent Engine API",
    description="Text-to-transaction previews, payload translation and intent verification",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(commands.router, tags=["Commands"])
app.include_router(queries.router, tags=["Queries"])
app.include_router(governance.router, tags=["Governance"])


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Intent Engine API",
        "version": __version__,
        "description": "Text-to-transaction previews, payload translation and intent verification",
        "docs": "/docs",
        "health": "/healthz"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "intent_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
