"""
Tests for the input sanitizer.

Tests cover:
- Prototype pollution keys at any depth
- Length limits (rejecting and truncating variants)
- Markup stripping
- SQL injection signatures
- Null bytes and whitespace
- Shallowest offending node is reported first
"""

import copy
import time
import pytest

from core.exceptions import (
    InputTooLongException,
    PrototypePollutionException,
    SuspiciousInputException,
)
from core.sanitizer import InputSanitizer, SanitizationPolicy, TruncatingInputSanitizer, strip_markup


class TestPrototypePollution:
    """Tests for the dangerous key denylist."""

    def test_proto_en_raiz(self, sanitizer: InputSanitizer):
        """Test __proto__ at the top level is rejected."""
        with pytest.raises(PrototypePollutionException) as exc_info:
            sanitizer.sanitize({"__proto__": {"x": 1}})

        assert exc_info.value.field == "__proto__"
        assert exc_info.value.error_kind == "PrototypePollutionRejected"

    def test_proto_anidado(self, sanitizer: InputSanitizer):
        """Test __proto__ is rejected at any nesting depth."""
        payload = {"a": [{"b": {"__proto__": {"x": 1}}}]}

        with pytest.raises(PrototypePollutionException) as exc_info:
            sanitizer.sanitize(payload)

        assert exc_info.value.field == "a[0].b.__proto__"

    @pytest.mark.parametrize("key", ["constructor", "prototype", "Constructor", "__PROTO__"])
    def test_claves_peligrosas_sin_distinguir_mayusculas(self, sanitizer: InputSanitizer, key: str):
        """Test the denylist is case-insensitive."""
        with pytest.raises(PrototypePollutionException):
            sanitizer.sanitize({key: "x"})


class TestLength:
    """Tests for string length limits."""

    def test_string_demasiado_largo(self, short_policy: SanitizationPolicy):
        """Test strings over the limit are rejected by default."""
        sanitizer = InputSanitizer(short_policy)

        with pytest.raises(InputTooLongException) as exc_info:
            sanitizer.sanitize({"name": "x" * 11})

        assert exc_info.value.field == "name"
        assert exc_info.value.details["max_length"] == 10

    def test_string_en_el_limite(self, short_policy: SanitizationPolicy):
        """Test strings exactly at the limit are accepted."""
        sanitizer = InputSanitizer(short_policy)

        assert sanitizer.sanitize({"name": "x" * 10}) == {"name": "x" * 10}

    def test_variante_que_recorta(self, truncating_sanitizer: TruncatingInputSanitizer):
        """Test the truncating sanitizer cuts long strings instead of failing."""
        assert truncating_sanitizer.sanitize({"name": "abcdefghijklmnop"}) == {"name": "abcdefghij"}

    def test_longitud_antes_que_patrones(self, short_policy: SanitizationPolicy):
        """Test the length check runs before pattern scanning."""
        sanitizer = InputSanitizer(short_policy)

        with pytest.raises(InputTooLongException):
            sanitizer.sanitize("1' OR '1'='1 and more text")


class TestMarkup:
    """Tests for markup stripping."""

    def test_script_eliminado(self, sanitizer: InputSanitizer):
        """Test script tags are removed."""
        assert sanitizer.sanitize("<script>alert(1)</script>hello") == "hello"

    def test_iframe_y_embed_eliminados(self, sanitizer: InputSanitizer):
        """Test iframe and embed tags are removed."""
        value = '<iframe src="x"></iframe>texto<embed src="y">'

        assert sanitizer.sanitize(value) == "texto"

    def test_javascript_y_eventos_eliminados(self, sanitizer: InputSanitizer):
        """Test javascript: scheme and inline event handlers are removed."""
        assert sanitizer.sanitize("JavaScript:alert(1)") == "alert(1)"
        assert "onerror" not in sanitizer.sanitize('<img src="a" onerror="x">')

    def test_texto_normal_sin_cambios(self, sanitizer: InputSanitizer):
        """Test ordinary text is kept."""
        assert sanitizer.sanitize("Clases de matemáticas 2024") == "Clases de matemáticas 2024"

    def test_etiqueta_anidada_no_se_recompone(self, sanitizer: InputSanitizer):
        """Test a tag split by an inner tag does not come back after stripping."""
        result = sanitizer.sanitize("<scr<script></script>ipt>alert(1)</script>")

        assert "<script" not in result.lower()
        assert result == ""

    def test_javascript_anidado_no_se_recompone(self, sanitizer: InputSanitizer):
        """Test a nested javascript: scheme is removed completely."""
        assert sanitizer.sanitize("javajavascript:script:alert(1)") == "alert(1)"

    def test_strip_markup_por_defecto(self):
        """Test the module level helper uses the default markup patterns."""
        assert strip_markup("<scr<script>x</script>ipt>y</script>busqueda") == "busqueda"


class TestInjection:
    """Tests for SQL injection signatures."""

    def test_tautologia_con_comillas(self, sanitizer: InputSanitizer):
        """Test quote-based tautologies are rejected."""
        with pytest.raises(SuspiciousInputException) as exc_info:
            sanitizer.sanitize({"search": "1' OR '1'='1"})

        assert exc_info.value.error_kind == "SuspiciousInputRejected"
        assert exc_info.value.field == "search"

    @pytest.mark.parametrize("value", [
        "x UNION SELECT password",
        "insert into users values (1)",
        "UPDATE users SET role='admin'",
        "delete from causes",
        "DROP TABLE users",
        "1; --",
        "union\nselect",
        "select name from users where id = 1",
        "EXEC sp_who(1)",
    ])
    def test_firmas_sql(self, sanitizer: InputSanitizer, value: str):
        """Test SQL keyword co-occurrences are rejected."""
        with pytest.raises(SuspiciousInputException):
            sanitizer.sanitize(value)

    def test_orden_de_palabras_clave(self, sanitizer: InputSanitizer):
        """Test keywords only count in signature order."""
        assert sanitizer.sanitize("la tabla TABLE se cae: DROP") == "la tabla TABLE se cae: DROP"

    def test_byte_nulo_no_oculta_palabra_clave(self, sanitizer: InputSanitizer):
        """Test a null byte inside a keyword does not hide the signature."""
        with pytest.raises(SuspiciousInputException) as exc_info:
            sanitizer.sanitize({"q": "DR\0OP TABLE users"})

        assert exc_info.value.field == "q"

    @pytest.mark.parametrize("value", [
        "'OR" * 3333,
        "SELECT FROM " * 800,
        "'" * 9999,
    ])
    def test_entrada_adversaria_en_tiempo_lineal(self, sanitizer: InputSanitizer, value: str):
        """Test long adversarial strings are scanned quickly and accepted."""
        start = time.perf_counter()

        result = sanitizer.sanitize(value)

        assert time.perf_counter() - start < 2.0
        assert result == value.strip()


class TestCleanup:
    """Tests for the final cleanup and passthrough."""

    def test_bytes_nulos_y_espacios(self, sanitizer: InputSanitizer):
        """Test null bytes are removed and value trimmed."""
        assert sanitizer.sanitize("  hola\0mundo  ") == "holamundo"

    def test_escalares_no_string_sin_cambios(self, sanitizer: InputSanitizer):
        """Test numbers, booleans and null pass through."""
        payload = {"n": 1, "f": 1.5, "b": True, "z": None, "l": [1, False]}

        assert sanitizer.sanitize(payload) == payload

    def test_no_modifica_entrada(self, sanitizer: InputSanitizer):
        """Test the input payload is not mutated."""
        payload = {"name": "  <script>x</script>Ana  ", "tags": [" a "]}
        snapshot = copy.deepcopy(payload)

        result = sanitizer.sanitize(payload)

        assert payload == snapshot
        assert result == {"name": "Ana", "tags": ["a"]}


class TestReportOrder:
    """Tests for top-down reporting."""

    def test_nodo_menos_profundo_primero(self, sanitizer: InputSanitizer):
        """Test the shallowest offending node is reported."""
        payload = {
            "a": {"b": {"c": "1' OR '1'='1"}},
            "z": "DROP TABLE users",
        }

        with pytest.raises(SuspiciousInputException) as exc_info:
            sanitizer.sanitize(payload)

        assert exc_info.value.field == "z"

    def test_clave_peligrosa_antes_que_hijos(self, sanitizer: InputSanitizer):
        """Test a dangerous key is reported before deeper string problems."""
        payload = {"a": {"b": "DROP TABLE x"}, "prototype": 1}

        with pytest.raises(PrototypePollutionException):
            sanitizer.sanitize(payload)

    def test_clave_peligrosa_a_la_profundidad_de_su_valor(self, sanitizer: InputSanitizer):
        """Test a nested dangerous key does not outrank a shallower string."""
        payload = {"b": {"__proto__": 1}, "a": "DROP TABLE users"}

        with pytest.raises(SuspiciousInputException) as exc_info:
            sanitizer.sanitize(payload)

        assert exc_info.value.field == "a"
