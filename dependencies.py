"""
Dependency injection for the boundary layer.

This module builds the process-wide policy objects once (from settings) and
exposes the FastAPI dependencies that route handlers use to validate and
sanitize incoming parameters and to materialize outgoing results.
"""

from functools import lru_cache
from typing import Any, Callable, Optional

from fastapi import Depends, Query, Request

from config import get_settings
from core.entity_registry import EntityFieldRegistry, build_registry
from core.exceptions import InvalidFormatException
from core.pagination import (
    PaginationBounds,
    PaginationParams,
    clamp_pagination,
    validate_pagination_strict,
)
from core.relation_resolver import RelationResolver
from core.sanitizer import InputSanitizer, SanitizationPolicy
from core.security import validate_numeric_id
from core.url_materializer import UrlMaterializer
from services.materialization_service import MaterializationService


# ==================== Policy Tables ====================

@lru_cache
def get_entity_registry() -> EntityFieldRegistry:
    """Get the entity field registry (built once)."""
    return build_registry()


@lru_cache
def get_sanitization_policy() -> SanitizationPolicy:
    """Get the sanitization policy built from settings."""
    return SanitizationPolicy(max_string_length=get_settings().max_input_length)


@lru_cache
def get_pagination_bounds() -> PaginationBounds:
    """Get the pagination bounds built from settings."""
    settings = get_settings()
    return PaginationBounds(
        max_page=settings.max_page_number,
        max_limit=settings.max_pagination_limit,
        max_search_length=settings.max_search_length,
        default_limit=settings.default_pagination_limit,
        allowed_sort_fields=tuple(settings.sort_fields_list),
        default_sort_field=settings.default_sort_field,
        default_sort_order=settings.default_sort_order,
    )


# ==================== Component Dependencies ====================

@lru_cache
def get_url_materializer() -> UrlMaterializer:
    """Get the UrlMaterializer configured with the storage base URL."""
    return UrlMaterializer(get_entity_registry(), get_settings().storage_base_url)


@lru_cache
def get_materialization_service() -> MaterializationService:
    """
    Get MaterializationService instance.

    This is the dependency to use in route handlers (or repositories) that
    return query results.

    Example:
        ```python
        @router.get("/causes/{cause_id}")
        def get_cause(
            cause_id: str = Depends(numeric_id_param("cause_id", "Cause ID")),
            materializer: MaterializationService = Depends(get_materialization_service),
        ):
            return materializer.materialize_result("Cause", repository.find_unique(cause_id))
        ```
    """
    return MaterializationService(RelationResolver(get_url_materializer()))


@lru_cache
def get_input_sanitizer() -> InputSanitizer:
    """Get the rejecting InputSanitizer."""
    return InputSanitizer(get_sanitization_policy())


# ==================== Request Dependencies ====================

async def sanitized_body(
    request: Request,
    sanitizer: InputSanitizer = Depends(get_input_sanitizer),
) -> Any:
    """
    Decode the JSON body and sanitize it before it reaches business logic.

    Returns:
        The sanitized payload, or None when the body is empty
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        payload = await request.json()
    except ValueError:
        raise InvalidFormatException("El cuerpo de la petición no es JSON válido", field="body")
    return sanitizer.sanitize(payload)


def clamped_pagination(
    page: Optional[str] = Query(None, description="Número de página (1-indexed)"),
    limit: Optional[str] = Query(None, description="Items por página"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Campo de ordenamiento"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc o desc"),
    search: Optional[str] = Query(None, description="Texto de búsqueda"),
    bounds: PaginationBounds = Depends(get_pagination_bounds),
) -> PaginationParams:
    """Pagination parameters clamped silently to the configured bounds."""
    return clamp_pagination(bounds, page, limit, search, sort_by, sort_order)


def strict_pagination(
    page: Optional[str] = Query(None, description="Número de página (1-indexed)"),
    limit: Optional[str] = Query(None, description="Items por página"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Campo de ordenamiento"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc o desc"),
    search: Optional[str] = Query(None, description="Texto de búsqueda"),
    bounds: PaginationBounds = Depends(get_pagination_bounds),
) -> PaginationParams:
    """Pagination parameters validated strictly (out of range -> 400)."""
    return validate_pagination_strict(bounds, page, limit, search, sort_by, sort_order)


def numeric_id_param(name: str, label: Optional[str] = None) -> Callable[[Request], str]:
    """
    Build a dependency that validates a numeric ID path (or query) parameter.

    Args:
        name: Parameter name in the route path or query string
        label: Human readable name for error messages (defaults to name)

    Returns:
        A FastAPI dependency returning the validated digit string
    """
    def dependency(request: Request) -> str:
        raw = request.path_params.get(name, request.query_params.get(name))
        return validate_numeric_id(raw, label or name)

    return dependency


def storage_path_body(entity_type: str) -> Callable[..., Any]:
    """
    Build a dependency that sanitizes the body and turns URL fields back into
    storage paths before the record is written.

    Args:
        entity_type: Registered entity type of the payload records

    Returns:
        A FastAPI dependency returning the sanitized payload (a record or a
        list of records) with absolute URLs under the base replaced by paths

    Example:
        ```python
        @router.put("/causes/{cause_id}")
        def update_cause(
            cause_id: str = Depends(numeric_id_param("cause_id", "Cause ID")),
            payload: dict = Depends(storage_path_body("Cause")),
        ):
            return repository.update(cause_id, payload)
        ```
    """
    def dependency(
        payload: Any = Depends(sanitized_body),
        materializer: UrlMaterializer = Depends(get_url_materializer),
    ) -> Any:
        if isinstance(payload, dict):
            return materializer.dematerialize(entity_type, payload)
        if isinstance(payload, list):
            return [
                materializer.dematerialize(entity_type, item) if isinstance(item, dict) else item
                for item in payload
            ]
        return payload

    return dependency
