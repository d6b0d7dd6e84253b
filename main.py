from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import uvicorn
import logging

from config import settings, configure_logging
from core.exceptions import AppException
from models.common import HealthCheckResponse, create_error_response

logger = logging.getLogger(__name__)

# Configurar logging una sola vez al inicio
configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Maneja el ciclo de vida de la aplicación."""
    # Startup
    if settings.url_materialization_enabled:
        logger.info(f"Materialización de URLs activa con base {settings.storage_base_url}")
    else:
        logger.warning("STORAGE_BASE_URL no configurado: las URLs se devolverán tal como están guardadas")
    yield
    # Shutdown


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convierte las excepciones de la capa de frontera en respuestas JSON."""
    logger.warning(
        f"{request.method} {request.url.path} - {exc.status_code} - {exc.error_kind}: {exc.message}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.error_kind, exc.message, exc.details),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registra los manejadores de excepciones en una aplicación FastAPI."""
    app.add_exception_handler(AppException, app_exception_handler)


app = FastAPI(
    title=settings.app_name,
    description="API administrativa: capa de frontera para sanitización de entrada y materialización de URLs.",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    debug=settings.debug_mode
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/")
async def root():
    """Endpoint raíz con información de la API."""
    return {
        "message": f"{settings.app_name}",
        "version": settings.app_version,
        "status": "active",
        "environment": "production" if settings.is_production else "development",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """Health check endpoint con el estado de la configuración de frontera."""
    return HealthCheckResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version,
        url_materialization="enabled" if settings.url_materialization_enabled else "disabled",
        environment="production" if settings.is_production else "development",
    )


if __name__ == "__main__":
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
