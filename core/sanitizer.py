"""
Sanitización de entrada para los payloads de las peticiones.

Recorre cualquier estructura anidada y:
- rechaza claves que permiten contaminar prototipos (__proto__, constructor, prototype)
- rechaza strings demasiado largos (protección DoS)
- elimina etiquetas y atributos peligrosos (XSS)
- rechaza firmas de inyección SQL, que no tienen una reescritura segura
- elimina bytes nulos y espacios sobrantes

La revisión se hace en anchura para reportar siempre el nodo menos profundo.
La clave de un registro se revisa a la profundidad de su valor.
"""

import logging
import re
from typing import Any, Dict, FrozenSet, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from core.exceptions import (
    InputTooLongException,
    PrototypePollutionException,
    SuspiciousInputException,
)
from core.tree_walker import DynamicValue, Path, format_path, iter_level_order, walk

logger = logging.getLogger(__name__)


DEFAULT_MAX_STRING_LENGTH = 10000

PATTERN_FLAGS = re.IGNORECASE | re.DOTALL

MARKUP_PATTERNS: Tuple[str, ...] = (
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>",
    r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>",
    r"<object\b[^<]*(?:(?!</object>)<[^<]*)*</object>",
    r"<embed\b[^<]*>",
    r"javascript:",
    r"\bon\w+\s*=",  # onclick=, onerror=, ...
)

# Cada firma es una secuencia de tokens que deben aparecer en ese orden,
# con cualquier texto entre ellos.
INJECTION_PATTERNS: Tuple[Tuple[str, ...], ...] = (
    (r"\bUNION\b", r"\bSELECT\b"),
    (r"\bSELECT\b", r"\bFROM\b", r"\bWHERE\b"),
    (r"\bINSERT\b", r"\bINTO\b"),
    (r"\bUPDATE\b", r"\bSET\b"),
    (r"\bDELETE\b", r"\bFROM\b"),
    (r"\bDROP\b", r"\bTABLE\b"),
    (r"\bEXEC\b", r"\("),
    (r";", r"--"),
    (r"'", r"OR", r"'", r"=", r"'"),
)

DANGEROUS_KEYS: FrozenSet[str] = frozenset({"__proto__", "constructor", "prototype"})


def compile_patterns(patterns: Sequence[str]) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(p, PATTERN_FLAGS) for p in patterns)


def remove_markup(value: str, patterns: Sequence[re.Pattern]) -> str:
    """
    Elimina los patrones de marcado hasta que no quede ninguno.

    Una sola pasada no basta: "<scr<script></script>ipt>" vuelve a formar
    una etiqueta al quitar la interior. Cada reemplazo acorta el string,
    así que el bucle siempre termina.
    """
    while True:
        total = 0
        for pattern in patterns:
            value, count = pattern.subn("", value)
            total += count
        if not total:
            return value


_DEFAULT_MARKUP = compile_patterns(MARKUP_PATTERNS)


def strip_markup(value: str) -> str:
    """Elimina el marcado peligroso con los patrones por defecto."""
    return remove_markup(value, _DEFAULT_MARKUP)


def contains_sequence(value: str, tokens: Sequence[re.Pattern]) -> bool:
    """
    Indica si los tokens aparecen en orden dentro del string.

    Cada token se busca desde el final del anterior, sin retroceso, por lo
    que el coste es lineal en la longitud del string por cada token.
    """
    position = 0
    for token in tokens:
        match = token.search(value, position)
        if match is None:
            return False
        position = match.end()
    return True


class SanitizationPolicy(BaseModel):
    """Política de sanitización, inmutable y compartida por todo el proceso."""

    model_config = ConfigDict(frozen=True)

    max_string_length: int = Field(DEFAULT_MAX_STRING_LENGTH, ge=1)
    markup_patterns: Tuple[str, ...] = MARKUP_PATTERNS
    injection_patterns: Tuple[Tuple[str, ...], ...] = INJECTION_PATTERNS
    dangerous_keys: FrozenSet[str] = DANGEROUS_KEYS


class InputSanitizer:
    """
    Sanitizador que rechaza los strings que superan la longitud máxima.

    Es el modo por defecto. Para recortar en lugar de rechazar se debe usar
    TruncatingInputSanitizer de forma explícita.
    """

    def __init__(self, policy: SanitizationPolicy):
        self.policy = policy
        self._markup = compile_patterns(policy.markup_patterns)
        self._injection = tuple(compile_patterns(tokens) for tokens in policy.injection_patterns)
        self._dangerous_keys = frozenset(k.lower() for k in policy.dangerous_keys)

    def sanitize(self, value: DynamicValue) -> DynamicValue:
        """
        Sanitiza un valor dinámico completo.

        Args:
            value: Payload decodificado de la petición

        Returns:
            Un valor nuevo con los strings limpios

        Raises:
            PrototypePollutionException: Si aparece una clave prohibida
            InputTooLongException: Si un string supera la longitud máxima
            SuspiciousInputException: Si un string contiene una firma de inyección
            CycleDetectedException: Si la estructura es circular
        """
        cleaned: Dict[Path, str] = {}
        for path, node in iter_level_order(value):
            # Solo los hijos de un registro terminan en una clave de texto
            if path and isinstance(path[-1], str):
                self._check_key(path[-1], path)
            if isinstance(node, str):
                cleaned[path] = self.sanitize_string(node, path)

        return walk(value, visit_scalar=lambda scalar, path: cleaned.get(path, scalar))

    def sanitize_string(self, value: str, path: Path = ()) -> str:
        """Aplica longitud, marcado, inyección y limpieza final a un string."""
        value = self._check_length(value, path)
        # Un byte nulo no puede partir una palabra clave
        value = value.replace("\0", "")

        value = remove_markup(value, self._markup)

        for tokens in self._injection:
            if contains_sequence(value, tokens):
                field = format_path(path)
                logger.warning(f"Entrada sospechosa rechazada en '{field}'")
                raise SuspiciousInputException(field=field or None)

        return value.replace("\0", "").strip()

    def _check_key(self, key: Any, path: Path) -> None:
        if str(key).lower() in self._dangerous_keys:
            field = format_path(path)
            logger.warning(f"Clave peligrosa rechazada: '{field}'")
            raise PrototypePollutionException(key=str(key), field=field)

    def _check_length(self, value: str, path: Path) -> str:
        max_length = self.policy.max_string_length
        if len(value) > max_length:
            field = format_path(path)
            logger.warning(f"Entrada demasiado larga en '{field}' ({len(value)} caracteres)")
            raise InputTooLongException(max_length=max_length, field=field or None)
        return value


class TruncatingInputSanitizer(InputSanitizer):
    """Variante permisiva: recorta los strings largos en lugar de rechazarlos."""

    def _check_length(self, value: str, path: Path) -> str:
        max_length = self.policy.max_string_length
        if len(value) > max_length:
            logger.info(f"Entrada recortada en '{format_path(path)}' a {max_length} caracteres")
            return value[:max_length]
        return value
