"""
Configuración centralizada de la aplicación usando pydantic-settings.

Este módulo maneja todas las variables de entorno y configuraciones
de la aplicación de manera tipada y validada.
"""
import logging
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, field_validator


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Configuración de la aplicación cargada desde variables de entorno."""

    # Almacenamiento (URLs públicas de archivos subidos)
    storage_base_url: str = Field(
        default="",
        validation_alias=AliasChoices("gcs_base_url", "storage_base_url"),
        description="URL base del almacenamiento; vacía desactiva la materialización de URLs"
    )

    # CORS Configuration
    cors_allowed_origins: str = Field(
        default="http://localhost,http://localhost:3000,http://localhost:8000",
        description="Orígenes permitidos para CORS, separados por coma"
    )

    # Application
    app_name: str = Field(
        default="LMS Admin API",
        description="Nombre de la aplicación"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Versión de la aplicación"
    )
    debug_mode: bool = Field(
        default=False,
        description="Modo debug (solo para desarrollo)"
    )

    # Sanitización de entrada
    max_input_length: int = Field(
        default=10000,
        ge=1,
        description="Longitud máxima de cualquier string recibido"
    )

    # Paginación
    max_page_number: int = Field(
        default=1000,
        ge=1,
        description="Número máximo de página"
    )
    max_pagination_limit: int = Field(
        default=100,
        ge=1,
        description="Tamaño máximo de página permitido"
    )
    default_pagination_limit: int = Field(
        default=10,
        ge=1,
        description="Tamaño de página por defecto para listados"
    )
    max_search_length: int = Field(
        default=200,
        ge=1,
        description="Longitud máxima del texto de búsqueda"
    )
    allowed_sort_fields: str = Field(
        default="name,createdAt,updatedAt,type,memberCount",
        description="Campos de ordenamiento permitidos, separados por coma"
    )
    default_sort_field: str = Field(
        default="createdAt",
        description="Campo de ordenamiento por defecto"
    )
    default_sort_order: str = Field(
        default="desc",
        description="Dirección de ordenamiento por defecto (asc/desc)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("storage_base_url")
    @classmethod
    def normalize_storage_base_url(cls, v: str) -> str:
        """Elimina espacios y la barra final para concatenar rutas que empiezan con '/'."""
        return v.strip().rstrip("/")

    @field_validator("default_sort_order")
    @classmethod
    def validate_default_sort_order(cls, v: str) -> str:
        """Valida que el orden por defecto sea asc o desc."""
        v_lower = v.lower()
        if v_lower not in ("asc", "desc"):
            logger.warning(f"Orden por defecto '{v}' no válido. Usando 'desc'.")
            return "desc"
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Valida que el nivel de logging sea válido."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(
                f"Nivel de log '{v}' no válido. Usando 'INFO'. "
                f"Niveles válidos: {valid_levels}"
            )
            return "INFO"
        return v_upper

    @property
    def cors_origins_list(self) -> list[str]:
        """Devuelve la lista de orígenes CORS permitidos."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def sort_fields_list(self) -> list[str]:
        """Devuelve la lista de campos de ordenamiento permitidos."""
        return [field.strip() for field in self.allowed_sort_fields.split(",") if field.strip()]

    @property
    def url_materialization_enabled(self) -> bool:
        return bool(self.storage_base_url)

    @property
    def is_production(self) -> bool:
        """Determina si la app está en modo producción."""
        return not self.debug_mode


# Instancia global de configuración
settings = Settings()


def configure_logging():
    """Configura el sistema de logging de la aplicación."""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=log_format,
        handlers=[
            logging.StreamHandler(),
        ]
    )

    # Reducir verbosidad de librerías externas
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger.info(f"🚀 Logging configurado en nivel {settings.log_level}")
    logger.info(f"📦 Aplicación: {settings.app_name} v{settings.app_version}")
    logger.info(f"🔧 Modo: {'Desarrollo' if settings.debug_mode else 'Producción'}")


def get_settings() -> Settings:
    """Retorna la instancia de configuración (útil para dependency injection)."""
    return settings
