"""
Resolución de relaciones anidadas para la materialización de URLs.

Los resultados de las consultas incluyen relaciones (una causa con sus
lecciones y la documentación de cada lección). El tipo de entidad de cada
relación se deduce del nombre de la clave: "lectures" -> "Lecture".

Esta convención es frágil a propósito: claves con nombres irregulares
(plurales en "-ies", alias, etc.) no se resuelven y se recorren sin
transformar. Para cambiar la convención basta con reemplazar
key_to_entity_type() por un mapa explícito.
"""

import logging
from typing import Any, Dict, Optional

from core.entity_registry import EntityFieldRegistry
from core.exceptions import CycleDetectedException
from core.tree_walker import DynamicValue, Path, walk
from core.url_materializer import UrlMaterializer

logger = logging.getLogger(__name__)


def key_to_entity_type(key: str, registry: EntityFieldRegistry) -> Optional[str]:
    """
    Deduce el tipo de entidad a partir del nombre de una clave.

    Se capitaliza la primera letra; si el nombre no está registrado y termina
    en "s" se prueba también con el singular.

    Args:
        key: Clave del registro (por ejemplo "documentations")
        registry: Registro de entidades

    Returns:
        El tipo de entidad registrado, o None
    """
    if not key:
        return None
    candidate = key[0].upper() + key[1:]
    if candidate in registry:
        return candidate
    if candidate.endswith("s") and candidate[:-1] in registry:
        return candidate[:-1]
    return None


def _relation_key(path: Path) -> Optional[str]:
    # Registro directamente bajo una clave, o elemento de una lista bajo una clave
    if path and isinstance(path[-1], str):
        return path[-1]
    if len(path) >= 2 and isinstance(path[-1], int) and isinstance(path[-2], str):
        return path[-2]
    return None


class RelationResolver:
    """Aplica el UrlMaterializer al resultado completo, incluyendo relaciones."""

    def __init__(self, materializer: UrlMaterializer):
        self.materializer = materializer
        self.registry = materializer.registry

    def materialize_result(self, entity_type: str, result: DynamicValue) -> DynamicValue:
        """
        Materializa un resultado de consulta (registro o lista de registros).

        El tipo de entidad de nivel superior lo indica quien llama; nunca se
        deduce. Un tipo no registrado devuelve el resultado sin cambios.
        Esta operación nunca falla: ante una estructura circular se registra
        el problema y se devuelve el resultado original.

        Args:
            entity_type: Modelo consultado (User, Cause, ...)
            result: Resultado de la lectura

        Returns:
            Un resultado nuevo con las URLs materializadas
        """
        if entity_type not in self.registry:
            logger.debug(f"Entidad '{entity_type}' no registrada, resultado sin cambios")
            return result
        if not self.materializer.enabled:
            return result

        def visit_record(record: Dict[str, Any], path: Path) -> Dict[str, Any]:
            if all(isinstance(step, int) for step in path):
                return self.materializer.materialize(entity_type, record)
            key = _relation_key(path)
            related = key_to_entity_type(key, self.registry) if key else None
            if related is None:
                return record
            return self.materializer.materialize(related, record)

        try:
            return walk(result, visit_record=visit_record)
        except CycleDetectedException as e:
            logger.warning(
                f"No se pudo materializar {entity_type}: {e.message} ({e.path})"
            )
            return result
