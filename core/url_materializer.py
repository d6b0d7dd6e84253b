"""
Materialización de URLs para las respuestas de la API.

La base de datos guarda rutas relativas (por ejemplo /images/file.jpg) y la
API devuelve URLs completas (https://storage.example.com/images/file.jpg).
Sin URL base configurada la materialización queda desactivada y los valores
se devuelven tal como están guardados.
"""

import logging
from typing import Any, Dict, Optional

from core.entity_registry import EntityFieldRegistry

logger = logging.getLogger(__name__)


def is_relative_path(value: Any) -> bool:
    """Indica si el valor es una ruta relativa de almacenamiento ("/..." pero no "//...")."""
    return isinstance(value, str) and value.startswith("/") and not value.startswith("//")


class UrlMaterializer:
    """Reescribe los campos registrados de un registro usando la URL base."""

    def __init__(self, registry: EntityFieldRegistry, base_url: Optional[str] = None):
        self.registry = registry
        self.base_url = (base_url or "").strip().rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def materialize_url(self, value: Any) -> Any:
        """
        Convierte una ruta relativa en URL completa.

        Args:
            value: Valor guardado en la base de datos

        Returns:
            La URL completa, o el valor sin cambios si no es transformable
        """
        if self.enabled and is_relative_path(value):
            return f"{self.base_url}{value}"
        return value

    def to_storage_path(self, value: Any) -> Any:
        """
        Extrae la ruta relativa de una URL construida con la URL base.

        Los clientes pueden reenviar la URL completa que recibieron; para
        guardar siempre rutas relativas se elimina el prefijo configurado.
        Enlaces de otros dominios se devuelven sin cambios.
        """
        if not self.enabled or not isinstance(value, str):
            return value
        if value.startswith(self.base_url + "/"):
            return value[len(self.base_url):]
        return value

    def materialize(self, entity_type: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Materializa los campos URL de un registro de la entidad indicada.

        Args:
            entity_type: Nombre del modelo (User, Cause, ...)
            record: Registro leído de la base de datos

        Returns:
            Un registro nuevo; el original no se modifica
        """
        transformed = dict(record)
        for field in self.registry.url_fields(entity_type):
            if field in transformed:
                original = transformed[field]
                transformed[field] = self.materialize_url(original)
                if transformed[field] is not original:
                    logger.debug(f"{entity_type}.{field} materializado")
        return transformed

    def dematerialize(self, entity_type: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Operación inversa de materialize() para los datos que llegan del cliente.

        Las rutas la usan a través de la dependencia storage_path_body().
        """
        transformed = dict(record)
        for field in self.registry.url_fields(entity_type):
            if field in transformed:
                transformed[field] = self.to_storage_path(transformed[field])
        return transformed
