# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
import logging

# External package imports
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Local application imports
from .api.v1 import media_router, match_router
from .core.config import get_settings
from .di.container import get_container
from .domain.exceptions import StoreFailure
from .domain.repositories.attendee_repository import AttendeeRepository
from .domain.repositories.identifier_map_repository import IdentifierMapRepository
from .infrastructure.aws_client_factory import close_aws_clients
from .infrastructure.db.mongo_connection import close_database
from .infrastructure.utils.scheduler import Scheduler

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level_name: str) -> None:
    """Configure the root logger from LOG_LEVEL (defaults to INFO on unknown names)"""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # boto's own debug output drowns the application logs
    for noisy in ("botocore", "boto3", "urllib3", "s3transfer"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    
    Builds the DI container and the unique indexes of the record store on
    startup, and releases database and AWS clients on shutdown.
    """
    container = get_container()
    
    for repository_type in (AttendeeRepository, IdentifierMapRepository):
        repository = container.get(repository_type)
        ensure_indexes = getattr(repository, "ensure_indexes", None)
        if ensure_indexes is None:
            continue
        try:
            await ensure_indexes()
        except StoreFailure as e:
            # The API still serves searches; writes may then create duplicates
            logger.error(f"Could not create indexes for {repository_type.__name__}: {e.message}")
    
    logger.info("Application startup complete")
    
    yield
    
    container.get(Scheduler).cancel()
    close_database()
    close_aws_clients()
    logger.info("Application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.
    
    This function sets up the FastAPI application with:
    - Environment variable loading
    - Logging configuration
    - CORS middleware configuration
    - API route registration
    
    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)
    
    settings = get_settings()
    configure_logging(settings.log_level)
    
    application = FastAPI(
        title="EventFace API",
        version="1.0.0",
        description="Face indexing and match aggregation for event photos and videos",
        lifespan=lifespan
    )
    
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    # Register API routers
    application.include_router(media_router, prefix="/api/v1")
    application.include_router(match_router, prefix="/api/v1")
    
    @application.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}
    
    return application


# Create application instance
app = create_application()
