from .common import (
    ErrorResponse,
    HealthCheckResponse,
    create_error_response,
)

__all__ = [
    # Common responses
    "ErrorResponse", "HealthCheckResponse", "create_error_response",
]
