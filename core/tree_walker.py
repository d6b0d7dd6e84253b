"""
Recorrido recursivo de valores dinámicos (escalares, secuencias y registros).

Es el núcleo compartido de la frontera: la materialización de URLs en la
salida y la sanitización en la entrada se construyen sobre estas funciones.
Los árboles nunca se modifican; siempre se devuelve una estructura nueva.
"""

from collections import deque
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from core.exceptions import CycleDetectedException

# Un valor dinámico es un escalar, una secuencia o un registro (dict con claves str)
Scalar = Union[str, int, float, bool, None]
DynamicValue = Union[Scalar, List["DynamicValue"], Dict[str, "DynamicValue"], Any]

# Ruta hasta un nodo: claves de registro (str) e índices de secuencia (int)
Path = Tuple[Union[str, int], ...]

ScalarVisitor = Callable[[Any, Path], Any]
RecordVisitor = Callable[[Dict[str, Any], Path], Dict[str, Any]]


def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def format_path(path: Path) -> str:
    """
    Convierte una ruta en su representación legible.

    Ejemplo: ("lectures", 0, "docUrl") -> "lectures[0].docUrl"
    """
    parts = []
    for step in path:
        if isinstance(step, int):
            parts.append(f"[{step}]")
        elif parts:
            parts.append(f".{step}")
        else:
            parts.append(str(step))
    return "".join(parts)


def _enter(value: Any, path: Path, ancestors: frozenset) -> frozenset:
    marker = id(value)
    if marker in ancestors:
        raise CycleDetectedException(format_path(path))
    return ancestors | {marker}


def walk(
    value: DynamicValue,
    visit_scalar: Optional[ScalarVisitor] = None,
    visit_record: Optional[RecordVisitor] = None,
    path: Path = (),
) -> DynamicValue:
    """
    Recorre un valor dinámico y devuelve una copia transformada.

    Args:
        value: Valor a recorrer
        visit_scalar: Función (valor, ruta) aplicada a cada escalar
        visit_record: Función (registro, ruta) aplicada a cada registro antes
            de recorrer sus hijos; debe devolver un registro nuevo
        path: Ruta inicial (útil para reportar errores)

    Returns:
        Un árbol nuevo con la misma forma que el original

    Raises:
        CycleDetectedException: Si un contenedor se contiene a sí mismo
    """
    return _walk(value, visit_scalar, visit_record, path, frozenset())


def _walk(value, visit_scalar, visit_record, path, ancestors):
    if is_record(value):
        ancestors = _enter(value, path, ancestors)
        record = visit_record(value, path) if visit_record else value
        return {
            key: _walk(child, visit_scalar, visit_record, path + (key,), ancestors)
            for key, child in record.items()
        }
    if is_sequence(value):
        ancestors = _enter(value, path, ancestors)
        return [
            _walk(child, visit_scalar, visit_record, path + (index,), ancestors)
            for index, child in enumerate(value)
        ]
    if visit_scalar is None:
        return value
    return visit_scalar(value, path)


def iter_level_order(value: DynamicValue) -> Iterator[Tuple[Path, Any]]:
    """
    Itera todos los nodos en anchura (los menos profundos primero).

    Yields:
        Tuplas (ruta, nodo)

    Raises:
        CycleDetectedException: Si un contenedor se contiene a sí mismo
    """
    queue = deque([((), value, frozenset())])
    while queue:
        path, node, ancestors = queue.popleft()
        yield path, node
        if is_record(node):
            ancestors = _enter(node, path, ancestors)
            for key, child in node.items():
                queue.append((path + (key,), child, ancestors))
        elif is_sequence(node):
            ancestors = _enter(node, path, ancestors)
            for index, child in enumerate(node):
                queue.append((path + (index,), child, ancestors))
