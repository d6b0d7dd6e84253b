"""
Modelos comunes de respuesta para la API.

Estos modelos proporcionan respuestas consistentes y estandarizadas
para todos los endpoints de la API
"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class ErrorResponse(BaseModel):
    """Respuesta estándar de error."""
    success: bool = Field(False, description="Indica que la operación falló")
    error: str = Field(..., description="Tipo de error (InputTooLong, OutOfRange, ...)")
    message: str = Field(..., description="Mensaje descriptivo del error")
    details: Optional[dict] = Field(None, description="Detalles adicionales del error (campo afectado)")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Timestamp de la respuesta")


class HealthCheckResponse(BaseModel):
    """Respuesta del health check."""
    status: str = Field(..., description="Estado general (healthy/unhealthy)")
    service: str = Field(..., description="Nombre del servicio")
    version: str = Field(..., description="Versión de la API")
    url_materialization: str = Field(..., description="Materialización de URLs (enabled/disabled)")
    environment: str = Field(..., description="Entorno (production/development)")
    timestamp: datetime = Field(default_factory=datetime.utcnow)


def create_error_response(error: str, message: str, details: Optional[dict] = None) -> dict:
    """Helper para crear respuestas de error (serializables a JSON)."""
    return ErrorResponse(error=error, message=message, details=details or None).model_dump(mode="json")
