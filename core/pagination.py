"""
Utilidades de paginación para una paginación consistente en toda la aplicación.

Hay dos estrategias, que se usan en puntos distintos y no deben mezclarse:

- clamp_pagination(): nunca falla; acota silenciosamente los valores fuera de
  rango (listados públicos).
- validate_pagination_strict(): rechaza con OutOfRangeException los valores
  fuera de rango (endpoints con contrato de validación explícito).

Las páginas son 1-indexed.
"""

import re
from datetime import datetime
from typing import Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from core.exceptions import InvalidFormatException, OutOfRangeException
from core.sanitizer import strip_markup

SORT_ORDERS = ("asc", "desc")

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


class PaginationBounds(BaseModel):
    """Límites de paginación, inmutables y compartidos por todo el proceso."""

    model_config = ConfigDict(frozen=True)

    max_page: int = Field(1000, ge=1, description="Número máximo de página")
    max_limit: int = Field(100, ge=1, description="Máximo de items por página")
    max_search_length: int = Field(200, ge=1, description="Longitud máxima de búsqueda")
    default_limit: int = Field(10, ge=1, description="Items por página por defecto")
    allowed_sort_fields: Tuple[str, ...] = ("name", "createdAt", "updatedAt", "type", "memberCount")
    default_sort_field: str = "createdAt"
    default_sort_order: Literal["asc", "desc"] = "desc"


class PaginationParams(BaseModel):
    """Parametros de paginación ya validados."""
    page: int = Field(1, ge=1, description="Page number (1-indexed)")
    limit: int = Field(10, ge=1, description="Items per page")
    sort_by: str = Field("createdAt", description="Campo de ordenamiento")
    sort_order: Literal["asc", "desc"] = Field("desc", description="Dirección de ordenamiento")
    search: Optional[str] = Field(None, description="Texto de búsqueda")

    @property
    def skip(self) -> int:
        return calculate_skip(self.page, self.limit)


class PaginationMeta(BaseModel):
    """Metadata para la paginacion."""
    page: int = Field(..., ge=1, description="Current page number (1-indexed)")
    limit: int = Field(..., ge=1, description="Page size")
    total_items: int = Field(..., ge=0, description="Total items available")
    total_pages: int = Field(..., ge=0, description="Total pages")
    has_next: bool = Field(..., description="Has next page")
    has_previous: bool = Field(..., description="Has previous page")


def _parse_int(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not _INTEGER_RE.match(text):
        return None
    return int(text)


def clamp_pagination(
    bounds: PaginationBounds,
    page: Any = None,
    limit: Any = None,
    search: Any = None,
    sort_by: Any = None,
    sort_order: Any = None,
) -> PaginationParams:
    """
    Normaliza los parámetros de paginación sin fallar nunca.

    Args:
        bounds: Límites configurados
        page: Página recibida (string sin tipo); no numérica o < 1 -> 1
        limit: Tamaño de página; no numérico -> límite por defecto, < 1 -> 1
        search: Texto de búsqueda; se recorta a la longitud máxima
        sort_by: Campo de orden; fuera de la lista permitida -> campo por defecto
        sort_order: asc/desc; otro valor -> orden por defecto

    Returns:
        PaginationParams acotados
    """
    parsed_page = _parse_int(page)
    if parsed_page is None or parsed_page < 1:
        parsed_page = 1
    parsed_page = min(parsed_page, bounds.max_page)

    parsed_limit = _parse_int(limit)
    if parsed_limit is None:
        parsed_limit = bounds.default_limit
    parsed_limit = max(1, min(parsed_limit, bounds.max_limit))

    if search is not None:
        search = str(search)
        if len(search) > bounds.max_search_length:
            search = search[:bounds.max_search_length]

    if sort_by not in bounds.allowed_sort_fields:
        sort_by = bounds.default_sort_field

    if sort_order not in SORT_ORDERS:
        sort_order = bounds.default_sort_order

    return PaginationParams(
        page=parsed_page,
        limit=parsed_limit,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
    )


def validate_pagination_strict(
    bounds: PaginationBounds,
    page: Any = None,
    limit: Any = None,
    search: Any = None,
    sort_by: Any = None,
    sort_order: Any = None,
) -> PaginationParams:
    """
    Valida los parámetros de paginación rechazando los valores fuera de rango.

    Los parámetros ausentes toman el valor por defecto. La búsqueda se recorta
    y se le quita el marcado peligroso (<script>, javascript:, ...).

    Raises:
        InvalidFormatException: Si page o limit no son enteros
        OutOfRangeException: Si page, limit o search superan los límites, o si
            sortBy/sortOrder no son valores permitidos
    """
    parsed_page = 1
    if page is not None:
        parsed_page = _parse_int(page)
        if parsed_page is None:
            raise InvalidFormatException("page debe ser un entero positivo", field="page")
        if parsed_page < 1 or parsed_page > bounds.max_page:
            raise OutOfRangeException(
                f"page debe estar entre 1 y {bounds.max_page}",
                field="page",
                details={"value": parsed_page, "max": bounds.max_page},
            )

    parsed_limit = bounds.default_limit
    if limit is not None:
        parsed_limit = _parse_int(limit)
        if parsed_limit is None:
            raise InvalidFormatException("limit debe ser un entero positivo", field="limit")
        if parsed_limit < 1 or parsed_limit > bounds.max_limit:
            raise OutOfRangeException(
                f"limit debe estar entre 1 y {bounds.max_limit}",
                field="limit",
                details={"value": parsed_limit, "max": bounds.max_limit},
            )

    if search is not None:
        search = str(search).strip()
        if len(search) > bounds.max_search_length:
            raise OutOfRangeException(
                f"search no puede superar {bounds.max_search_length} caracteres",
                field="search",
                details={"max": bounds.max_search_length},
            )
        search = strip_markup(search).strip()

    if sort_by is None:
        sort_by = bounds.default_sort_field
    elif sort_by not in bounds.allowed_sort_fields:
        raise OutOfRangeException(
            f"sortBy debe ser uno de: {', '.join(bounds.allowed_sort_fields)}",
            field="sortBy",
            details={"allowed": list(bounds.allowed_sort_fields)},
        )

    if sort_order is None:
        sort_order = bounds.default_sort_order
    elif sort_order not in SORT_ORDERS:
        raise OutOfRangeException(
            'sortOrder debe ser "asc" o "desc"',
            field="sortOrder",
            details={"allowed": list(SORT_ORDERS)},
        )

    return PaginationParams(
        page=parsed_page,
        limit=parsed_limit,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
    )


def calculate_skip(page: int, limit: int) -> int:
    """
    Calcula el valor de skip/offset para las consultas de la base de datos.

    Args:
        page: Número de página actual (indexado desde 1)
        limit: Número de elementos por página

    Returns:
        Número de elementos a saltar (nunca negativo)
    """
    return max(0, (page - 1) * limit)


def calculate_pagination_meta(
    page: int,
    limit: int,
    total_items: int
) -> PaginationMeta:
    """
    Calcula la metadata de la paginación.

    Args:
        page: Número de página actual (1-indexed)
        limit: Items por página
        total_items: Total number of items

    Returns:
        paginationmeta objeto con valores calculados
    """
    total_pages = (total_items + limit - 1) // limit if limit > 0 else 0

    return PaginationMeta(
        page=page,
        limit=limit,
        total_items=total_items,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > 1
    )


def create_paginated_response(
    items: List[Any],
    params: PaginationParams,
    total_items: int
) -> dict:
    """
    Crea un diccionario de respuesta paginado.
    Argumentos:
    items: Lista de elementos de la página actual
    params: Parámetros de paginación ya validados o acotados
    total_items: Número total de elementos
    Devuelve:
    Diccionario con la respuesta paginada
    """
    pagination_meta = calculate_pagination_meta(params.page, params.limit, total_items)

    return {
        "success": True,
        "data": items,
        "pagination": pagination_meta.model_dump(),
        "meta": {
            "sort_by": params.sort_by,
            "sort_order": params.sort_order,
            "search": params.search,
        },
        "timestamp": datetime.utcnow()
    }
