"""
Resource Search - Hybrid Multi-Strategy Search API
FastAPI Application Entry Point
"""

import logging
import logging.handlers
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.v1.health import router as health_router
from .api.v1.search import get_orchestrator_dep
from .api.v1.search import router as search_router
from .exceptions import SearchValidationError
from .middleware import LoggingMiddleware
from .services.ai.ai_utils_client import AiUtilsClient
from .services.config.config_monitor import init_config_monitor
from .services.config.weights_config_service import init_weights_config_service
from .services.nlp.keyword_variations import KeywordVariationGenerator
from .services.nlp.nlp_utils import ensure_nltk_data, get_nlp_utils
from .services.observability.langsmith_service import get_langsmith_service
from .services.search.executor import MsearchExecutor, create_opensearch_client
from .services.search.orchestrator import HybridSearchOrchestrator
from .services.search.result_processor import ResultProcessor
from .services.search.strategy_factory import StrategyFactory
from .services.search.weight_resolver import WeightResolver

# Load environment variables
load_dotenv()


def configure_logging():
    """
    Configure structured logging using structlog.

    - Production (ENV=production): JSON output for log aggregation
    - Development (ENV=development): Human-readable console output
    - Includes automatic context: timestamp, level, logger name, correlation_id, tenant
    - LOG_FILE_PATH adds a rotating file handler
    """
    env = os.getenv("ENV", "development").lower()
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        timestamper,
    ]

    if env == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback
        )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root_logger = logging.getLogger()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    log_file_path = os.getenv("LOG_FILE_PATH")
    if log_file_path:
        log_file_path = str(Path(log_file_path).resolve())
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file_path,
            maxBytes=10 * 1024 * 1024,  # 10MB per file
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)

    # Reduce noise from verbose libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("opensearch").setLevel(logging.WARNING)

    return structlog.get_logger(__name__)


# Initialize structured logging
logger = configure_logging()

# Global instances
search_orchestrator = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown"""

    # Startup
    logger.info("Starting Resource Search application...")

    global search_orchestrator

    # Search weights with hot reload
    weights_service = init_weights_config_service()
    weights_service.start_watching()
    logger.info(f"✓ Search weights loaded (version {weights_service.get_version()})")

    init_config_monitor(weights_service)
    logger.info("✓ Configuration monitor initialized")

    langsmith_service = get_langsmith_service()
    if langsmith_service.is_enabled():
        logger.info("✓ LangSmith observability enabled")
    else:
        logger.info("LangSmith observability disabled")

    # NLP corpora for keyword variations
    try:
        ensure_nltk_data()
        logger.info("✓ NLTK data available")
    except Exception as e:
        logger.warning(f"NLTK data download failed: {e}. Keyword variations may be incomplete.")

    nlp = get_nlp_utils()
    executor = MsearchExecutor(create_opensearch_client())
    ai_client = AiUtilsClient()

    registry = StrategyFactory().create_registry()
    search_orchestrator = HybridSearchOrchestrator(
        registry=registry,
        executor=executor,
        ai_client=ai_client,
        weight_resolver=WeightResolver(weights_service),
        keyword_generator=KeywordVariationGenerator(nlp),
        result_processor=ResultProcessor(nlp),
    )

    logger.info(f"✓ HybridSearchOrchestrator initialized with strategies: {registry.list_strategy_names()}")
    logger.info("All services initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down Resource Search application...")

    await weights_service.stop_watching()

    try:
        await executor.close()
        logger.info("✓ OpenSearch client closed")
    except Exception as e:
        logger.error(f"Error closing OpenSearch client: {e}")

    try:
        await ai_client.close()
        logger.info("✓ AI utils client closed")
    except Exception as e:
        logger.error(f"Error closing AI utils client: {e}")

    search_orchestrator = None
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Resource Search",
    description="Hybrid multi-strategy search over the resource directory",
    version=__version__,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware)


def _strip_value_error_prefix(message: str) -> str:
    prefix = "Value error, "
    return message[len(prefix):] if message.startswith(prefix) else message


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Pydantic errors as [{field, message}], with the "body" location dropped"""
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": _strip_value_error_prefix(error.get("msg", "")),
        }
        for error in errors
    ]


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = format_validation_errors(exc.errors())
    logger.warning(f"Request validation failed: {errors}")
    return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})


@app.exception_handler(SearchValidationError)
async def search_validation_exception_handler(request: Request, exc: SearchValidationError):
    logger.warning(f"Search validation failed: {exc.message}")
    return JSONResponse(status_code=400, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "status": 500,
            "message": "Internal server error",
            "path": request.url.path,
            "method": request.method,
        },
    )


def get_orchestrator() -> HybridSearchOrchestrator:
    """Get orchestrator instance for dependency injection"""
    return search_orchestrator


# Include routers
app.include_router(search_router)
app.include_router(health_router)

# Override dependency in app (not router)
app.dependency_overrides[get_orchestrator_dep] = get_orchestrator


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Resource Search",
        "version": __version__,
        "endpoints": {
            "search": "/api/v1/hybrid-semantic/search",
            "health": "/api/v1/health",
            "docs": "/docs"
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "resource_search.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
