"""
Utilidades de seguridad para la validación de identificadores.

Los IDs de la base de datos son BIGINT autoincrementales; llegan como strings
en la ruta o en la query y se validan antes de llegar a la capa de datos.
"""

import re
from typing import Any
from uuid import UUID

from core.exceptions import InvalidFormatException

MAX_ID_DIGITS = 15
MAX_BIGINT = 2 ** 63 - 1

_DIGITS_RE = re.compile(r"^[0-9]+$")


def validate_numeric_id(value: Any, field_name: str = "ID") -> str:
    """
    Valida que una cadena sea un ID numérico válido.

    Las comprobaciones se aplican en orden: vacío, solo dígitos, longitud
    máxima, ceros a la izquierda y rango de un entero de 64 bits.

    Args:
        value: Cadena a validar
        field_name: Nombre del campo para mensajes de error

    Returns:
        El ID validado como cadena de dígitos (no se convierte a int)

    Raises:
        InvalidFormatException: Si el valor no es un ID válido
    """
    if value is None or not isinstance(value, str):
        raise InvalidFormatException(
            message=f"{field_name} es requerido",
            field=field_name,
        )

    trimmed = value.strip()
    if not trimmed:
        raise InvalidFormatException(
            message=f"{field_name} no puede estar vacío",
            field=field_name,
        )

    if not _DIGITS_RE.match(trimmed):
        raise InvalidFormatException(
            message=f'{field_name} debe ser una cadena numérica válida (ej: "1", "123")',
            field=field_name,
            details={"value": trimmed[:MAX_ID_DIGITS + 1]}
        )

    if len(trimmed) > MAX_ID_DIGITS:
        raise InvalidFormatException(
            message=f"{field_name} es demasiado largo (máximo {MAX_ID_DIGITS} dígitos)",
            field=field_name,
        )

    if len(trimmed) > 1 and trimmed.startswith("0"):
        raise InvalidFormatException(
            message=f"{field_name} no puede tener ceros a la izquierda",
            field=field_name,
            details={"value": trimmed}
        )

    if int(trimmed) > MAX_BIGINT:
        raise InvalidFormatException(
            message=f"{field_name} no es un número válido",
            field=field_name,
        )

    return trimmed


def validate_uuid(value: Any, field_name: str = "id") -> str:
    """
    Valida que una cadena sea un UUID válido.

    Args:
        value: Cadena a validar
        field_name: Nombre del campo para mensajes de error

    Returns:
        El UUID validado como cadena

    Raises:
        InvalidFormatException: Si el valor no es un UUID válido
    """
    if not value:
        raise InvalidFormatException(
            message=f"{field_name} es requerido",
            field=field_name,
        )
    try:
        UUID(str(value))
        return str(value)
    except (ValueError, AttributeError, TypeError):
        raise InvalidFormatException(
            message=f"{field_name} debe ser un UUID válido",
            field=field_name,
            details={"value": str(value)}
        )
