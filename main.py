from contextlib import asynccontextmanager
from fastapi import FastAPI
from dotenv import load_dotenv
import os
import sys
import logging
from routers import extraction, tasks
from middleware.jwt_auth import is_jwt_auth_configured
from services.database import close_engine, create_tables

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Validate required environment variables
REQUIRED_ENV_VARS = ["OPENAI_API_KEY", "DATABASE_URL", "INTERNAL_JWT_SECRET"]


def validate_environment():
    """Validate that all required environment variables are set."""
    missing = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
    if missing:
        logger.error(f"Missing required environment variables: {missing}")
        sys.exit(1)
    if not is_jwt_auth_configured():
        logger.error("INTERNAL_JWT_SECRET must be at least 32 characters")
        sys.exit(1)
    logger.info("Environment validation passed")


def auto_create_tables_enabled() -> bool:
    return os.getenv("AUTO_CREATE_TABLES", "false").lower() in ("1", "true", "yes")


# Call validation at startup
validate_environment()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if auto_create_tables_enabled():
        await create_tables()
    logger.info(f"Task extractor started: model={os.getenv('OPENAI_MODEL', 'gpt-4o')}")
    yield
    await close_engine()


app = FastAPI(title="Meeting Task Extractor", lifespan=lifespan)

# Include routers
app.include_router(extraction.router)
app.include_router(tasks.router)


@app.get("/health")
def health():
    return {"status": "ok"}
