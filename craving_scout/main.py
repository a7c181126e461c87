from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import structlog

from craving_scout.config import get_settings
from craving_scout.api.routes import search

logger = structlog.get_logger()

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not configured - searches will fail with API_KEY_ERROR")
    logger.info("Starting Craving Scout...")
    yield
    # Shutdown
    logger.info("Shutting down Craving Scout...")


app = FastAPI(
    title="Craving Scout",
    description="AI-ranked, map-verified restaurant discovery",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(search.router, prefix="/api/search", tags=["search"])
app.add_exception_handler(RequestValidationError, search.request_validation_handler)


@app.get("/")
async def root():
    return {"message": "Craving Scout API", "version": VERSION}


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("craving_scout.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
