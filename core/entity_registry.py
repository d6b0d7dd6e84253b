"""
Registro estático de campos por tipo de entidad.

Indica qué campos de cada modelo guardan rutas relativas de almacenamiento
(archivos subidos) y por lo tanto deben convertirse a URL completa en la
respuesta. Los enlaces externos (videos, grabaciones, reuniones) se registran
como EXCLUDE para dejar constancia de que nunca se reescriben.
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


class FieldKind(str, Enum):
    materialize_url = "materialize_url"
    exclude = "exclude"


DEFAULT_ENTITY_FIELDS: Dict[str, Dict[str, FieldKind]] = {
    "User": {
        "imageUrl": FieldKind.materialize_url,
        "idUrl": FieldKind.materialize_url,
    },
    "Institute": {
        "imageUrl": FieldKind.materialize_url,
    },
    "Organization": {
        "imageUrl": FieldKind.materialize_url,
    },
    "Cause": {
        "imageUrl": FieldKind.materialize_url,
        "introVideoUrl": FieldKind.exclude,
    },
    "Lecture": {
        "recordingUrl": FieldKind.exclude,
        "liveLink": FieldKind.exclude,
    },
    "Documentation": {
        "docUrl": FieldKind.materialize_url,
    },
}


class EntityFieldRegistry:
    """
    Mapa inmutable: tipo de entidad -> {campo: FieldKind}.

    Se construye una sola vez al iniciar y se comparte por referencia entre
    todos los componentes; no expone ninguna operación de escritura.
    """

    def __init__(self, entity_fields: Mapping[str, Mapping[str, FieldKind]]):
        self._entities = MappingProxyType({
            entity_type: MappingProxyType(
                {name: FieldKind(kind) for name, kind in fields.items()}
            )
            for entity_type, fields in entity_fields.items()
        })

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._entities

    @property
    def entity_types(self) -> Tuple[str, ...]:
        return tuple(self._entities)

    def fields_for(self, entity_type: str) -> Mapping[str, FieldKind]:
        """Devuelve la política de campos de una entidad (vacía si no está registrada)."""
        return self._entities.get(entity_type, MappingProxyType({}))

    def url_fields(self, entity_type: str) -> Tuple[str, ...]:
        """Campos de la entidad que deben materializarse como URL."""
        return tuple(
            name for name, kind in self.fields_for(entity_type).items()
            if kind is FieldKind.materialize_url
        )

    def kind_of(self, entity_type: str, field_name: str) -> Optional[FieldKind]:
        return self.fields_for(entity_type).get(field_name)


def build_registry(entity_fields: Optional[Mapping[str, Mapping[str, FieldKind]]] = None) -> EntityFieldRegistry:
    """Construye el registro con la tabla por defecto o con una tabla propia."""
    return EntityFieldRegistry(entity_fields if entity_fields is not None else DEFAULT_ENTITY_FIELDS)
