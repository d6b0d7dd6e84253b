"""
Capa de servicio de la frontera.
Este paquete contiene los servicios que la capa de datos invoca después de
cada lectura.
"""

from .materialization_service import MaterializationService, READ_OPERATIONS

__all__ = [
    "MaterializationService",
    "READ_OPERATIONS",
]
