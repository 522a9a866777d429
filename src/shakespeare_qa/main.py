"""Main FastAPI application entry point."""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings
from .api.routes import router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = get_settings()

logging.getLogger().setLevel(settings.log_level)

app = FastAPI(
    title="Shakespeare Q&A",
    description="Retrieval-augmented answers over Shakespeare's works",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info("Starting Shakespeare Q&A service...")
    logger.info(f"LLM Provider: {settings.llm_provider}")
    logger.info(f"Data directory: {settings.data_dir}")
    logger.info(f"ChromaDB: {settings.chroma_host}:{settings.chroma_port}")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    logger.info("Shutting down Shakespeare Q&A service...")
    state = getattr(app.state, "qa_state", None)
    if state is not None:
        await state.close()


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Shakespeare Q&A",
        "version": __version__,
        "status": "running"
    }


def run():
    """Console entry point."""
    import uvicorn
    uvicorn.run(
        "shakespeare_qa.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    run()
