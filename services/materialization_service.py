"""
Servicio de materialización de resultados.

Se aplica justo después de cada lectura de la capa de datos: convierte las
rutas relativas guardadas en URLs completas en todo el resultado, incluidas
las relaciones anidadas. Las operaciones de escritura no se transforman.
"""

import functools
import logging
from typing import Any, Callable, Optional

from core.relation_resolver import RelationResolver
from core.tree_walker import DynamicValue

logger = logging.getLogger(__name__)

READ_OPERATIONS = frozenset({
    "find_unique",
    "find_first",
    "find_many",
    "find_unique_or_throw",
    "find_first_or_throw",
})


class MaterializationService:
    """Punto de entrada de la capa de datos para materializar resultados."""

    def __init__(self, resolver: RelationResolver):
        """
        Inicializa el servicio.

        Args:
            resolver: RelationResolver configurado con la URL base
        """
        self.resolver = resolver

    def materialize_result(self, entity_type: str, result: DynamicValue) -> DynamicValue:
        """
        Materializa el resultado de una lectura.

        Args:
            entity_type: Modelo consultado (User, Institute, Organization, Cause, Lecture, Documentation)
            result: Registro, lista de registros o None

        Returns:
            Resultado con las URLs materializadas; nunca falla
        """
        if result is None:
            return result
        return self.resolver.materialize_result(entity_type, result)

    def after_operation(
        self,
        operation: str,
        entity_type: Optional[str],
        result: DynamicValue,
    ) -> DynamicValue:
        """
        Aplica la materialización solo a las operaciones de lectura.

        Args:
            operation: Nombre de la operación de la capa de datos (find_many, create, ...)
            entity_type: Modelo sobre el que se ejecutó la operación
            result: Resultado devuelto por la capa de datos

        Returns:
            El resultado materializado, o sin cambios si no es una lectura
        """
        if operation not in READ_OPERATIONS or not entity_type:
            return result
        return self.materialize_result(entity_type, result)

    def materialize_reads(self, entity_type: str) -> Callable:
        """
        Decorador para los métodos de lectura de un repositorio.

        Example:
            ```python
            class CauseRepository:
                @materialization_service.materialize_reads("Cause")
                def find_many(self, ...):
                    ...
            ```
        """
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                return self.materialize_result(entity_type, func(*args, **kwargs))
            return wrapper
        return decorator
