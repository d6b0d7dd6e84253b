""" Capa de frontera compartida por todos los endpoints de la API.

Este paquete contiene:

- Excepciones personalizadas
- Recorrido de valores dinámicos
- Materialización de URLs (salida)
- Sanitización de entrada, paginación e identificadores (entrada)
"""

from .exceptions import (
    AppException,
    ValidationException,
    InputTooLongException,
    SuspiciousInputException,
    PrototypePollutionException,
    OutOfRangeException,
    InvalidFormatException,
    StructuralException,
    CycleDetectedException,
)
from .tree_walker import (
    walk,
    iter_level_order,
    format_path,
)
from .entity_registry import (
    FieldKind,
    EntityFieldRegistry,
    DEFAULT_ENTITY_FIELDS,
    build_registry,
)
from .url_materializer import UrlMaterializer
from .relation_resolver import RelationResolver, key_to_entity_type
from .sanitizer import (
    SanitizationPolicy,
    InputSanitizer,
    TruncatingInputSanitizer,
    strip_markup,
)
from .security import (
    validate_numeric_id,
    validate_uuid,
)
from .pagination import (
    PaginationBounds,
    PaginationParams,
    PaginationMeta,
    clamp_pagination,
    validate_pagination_strict,
    calculate_pagination_meta,
    create_paginated_response,
    calculate_skip,
)

__all__ = [
    # Excepciones
    "AppException",
    "ValidationException",
    "InputTooLongException",
    "SuspiciousInputException",
    "PrototypePollutionException",
    "OutOfRangeException",
    "InvalidFormatException",
    "StructuralException",
    "CycleDetectedException",
    # recorrido
    "walk",
    "iter_level_order",
    "format_path",
    # salida
    "FieldKind",
    "EntityFieldRegistry",
    "DEFAULT_ENTITY_FIELDS",
    "build_registry",
    "UrlMaterializer",
    "RelationResolver",
    "key_to_entity_type",
    # entrada
    "SanitizationPolicy",
    "InputSanitizer",
    "TruncatingInputSanitizer",
    "strip_markup",
    "validate_numeric_id",
    "validate_uuid",
    # paginacion
    "PaginationBounds",
    "PaginationParams",
    "PaginationMeta",
    "clamp_pagination",
    "validate_pagination_strict",
    "calculate_pagination_meta",
    "create_paginated_response",
    "calculate_skip",
]
