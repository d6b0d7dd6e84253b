"""
Excepciones personalizadas para la capa de frontera.

Estas excepciones proporcionan una forma estructurada de rechazar entradas
malformadas o maliciosas y mapearlas a códigos de estado HTTP en la capa de API.
Ninguna es reintentable: todas describen un problema del cliente.
"""

from typing import Optional, Any


class AppException(Exception):
    """Excepción base para todos los errores de la aplicación."""

    error_kind: str = "AppError"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(AppException):
    """Excepción base para errores de validación de entrada."""

    error_kind = "ValidationError"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.field = field
        if field:
            details = details or {}
            details["field"] = field
        super().__init__(message=message, status_code=400, details=details)


class InputTooLongException(ValidationException):
    """Un string supera la longitud máxima permitida."""

    error_kind = "InputTooLong"

    def __init__(
        self,
        max_length: int,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        details = details or {}
        details["max_length"] = max_length
        super().__init__(
            message=f"Entrada demasiado larga. Máximo {max_length} caracteres permitidos",
            field=field,
            details=details,
        )


class SuspiciousInputException(ValidationException):
    """La entrada contiene una firma de inyección sin reescritura segura."""

    error_kind = "SuspiciousInputRejected"

    def __init__(
        self,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message="Entrada inválida detectada", field=field, details=details)


class PrototypePollutionException(ValidationException):
    """Se recibió una clave prohibida (__proto__, constructor, prototype)."""

    error_kind = "PrototypePollutionRejected"

    def __init__(
        self,
        key: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=f"Nombre de propiedad inválido: {key}",
            field=field,
            details=details,
        )


class OutOfRangeException(ValidationException):
    """Un parámetro está fuera de los límites o de la lista permitida."""

    error_kind = "OutOfRange"


class InvalidFormatException(ValidationException):
    """Un parámetro no tiene el formato esperado."""

    error_kind = "InvalidFormat"


class StructuralException(AppException):
    """Excepción para estructuras de datos que no se pueden recorrer."""

    error_kind = "StructuralError"

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=400, details=details)


class CycleDetectedException(StructuralException):
    """El árbol de datos contiene una referencia circular."""

    error_kind = "CycleDetected"

    def __init__(self, path: str = ""):
        self.path = path
        super().__init__(
            message="Referencia circular detectada en la estructura de datos",
            details={"field": path} if path else None,
        )
