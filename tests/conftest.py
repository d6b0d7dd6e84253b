"""
Configuración de fixtures para pytest.

Este módulo contiene fixtures reutilizables para todos los tests.
"""

import pytest
import os
from typing import Generator, Dict, Any
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

# Configurar la URL base de almacenamiento para los tests
os.environ.pop("GCS_BASE_URL", None)
os.environ["STORAGE_BASE_URL"] = "https://cdn.example.com"

from main import app, register_exception_handlers
from core.entity_registry import EntityFieldRegistry, build_registry
from core.pagination import PaginationBounds, PaginationParams
from core.relation_resolver import RelationResolver
from core.sanitizer import InputSanitizer, SanitizationPolicy, TruncatingInputSanitizer
from core.url_materializer import UrlMaterializer
from services.materialization_service import MaterializationService
from dependencies import (
    clamped_pagination,
    get_materialization_service,
    get_url_materializer,
    numeric_id_param,
    sanitized_body,
    storage_path_body,
    strict_pagination,
)


BASE_URL = "https://cdn.example.com"


# ==================== Egress Fixtures ====================

@pytest.fixture
def registry() -> EntityFieldRegistry:
    """Default entity field registry."""
    return build_registry()


@pytest.fixture
def materializer(registry: EntityFieldRegistry) -> UrlMaterializer:
    """UrlMaterializer with a configured base URL."""
    return UrlMaterializer(registry, BASE_URL)


@pytest.fixture
def disabled_materializer(registry: EntityFieldRegistry) -> UrlMaterializer:
    """UrlMaterializer without base URL (materialization disabled)."""
    return UrlMaterializer(registry, None)


@pytest.fixture
def resolver(materializer: UrlMaterializer) -> RelationResolver:
    """RelationResolver built on the configured materializer."""
    return RelationResolver(materializer)


@pytest.fixture
def materialization_service(resolver: RelationResolver) -> MaterializationService:
    """MaterializationService built on the configured resolver."""
    return MaterializationService(resolver)


@pytest.fixture
def cause_result() -> Dict[str, Any]:
    """Cause as returned by the data layer, with nested lectures and docs."""
    return {
        "id": "12",
        "title": "Clean Water",
        "imageUrl": "/causes/a.jpg",
        "introVideoUrl": "https://youtu.be/x",
        "lectures": [
            {
                "id": "7",
                "recordingUrl": "/recordings/r.mp4",
                "documentations": [
                    {"id": "3", "docUrl": "/docs/b.pdf"},
                ],
            },
        ],
    }


# ==================== Ingress Fixtures ====================

@pytest.fixture
def sanitization_policy() -> SanitizationPolicy:
    """Default sanitization policy."""
    return SanitizationPolicy()


@pytest.fixture
def sanitizer(sanitization_policy: SanitizationPolicy) -> InputSanitizer:
    """Rejecting InputSanitizer."""
    return InputSanitizer(sanitization_policy)


@pytest.fixture
def short_policy() -> SanitizationPolicy:
    """Sanitization policy with a small max string length."""
    return SanitizationPolicy(max_string_length=10)


@pytest.fixture
def truncating_sanitizer(short_policy: SanitizationPolicy) -> TruncatingInputSanitizer:
    """Permissive sanitizer that truncates long strings."""
    return TruncatingInputSanitizer(short_policy)


@pytest.fixture
def pagination_bounds() -> PaginationBounds:
    """Pagination bounds (1000, 100, 200)."""
    return PaginationBounds(max_page=1000, max_limit=100, max_search_length=200)


# ==================== API Fixtures ====================

@pytest.fixture(scope="function")
def boundary_app(
    materialization_service: MaterializationService,
    materializer: UrlMaterializer
) -> FastAPI:
    """Small app wiring the boundary dependencies the way route handlers do."""
    test_app = FastAPI()
    register_exception_handlers(test_app)

    stored_causes = {
        "12": {
            "id": "12",
            "imageUrl": "/causes/a.jpg",
            "introVideoUrl": "https://youtu.be/x",
            "lectures": [{"documentations": [{"docUrl": "/docs/b.pdf"}]}],
        }
    }

    @test_app.post("/payloads")
    async def create_payload(payload: Any = Depends(sanitized_body)):
        return {"data": payload}

    @test_app.get("/items")
    def list_items(params: PaginationParams = Depends(clamped_pagination)):
        return {**params.model_dump(), "skip": params.skip}

    @test_app.get("/items/strict")
    def list_items_strict(params: PaginationParams = Depends(strict_pagination)):
        return {**params.model_dump(), "skip": params.skip}

    @test_app.get("/causes/{cause_id}")
    def get_cause(
        cause_id: str = Depends(numeric_id_param("cause_id", "Cause ID")),
        service: MaterializationService = Depends(get_materialization_service),
    ):
        return service.materialize_result("Cause", stored_causes.get(cause_id))

    @test_app.put("/causes/{cause_id}")
    def update_cause(
        cause_id: str = Depends(numeric_id_param("cause_id", "Cause ID")),
        payload: Any = Depends(storage_path_body("Cause")),
    ):
        return {"id": cause_id, "stored": payload}

    test_app.dependency_overrides[get_materialization_service] = lambda: materialization_service
    test_app.dependency_overrides[get_url_materializer] = lambda: materializer
    return test_app


@pytest.fixture(scope="function")
def client(boundary_app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client for the boundary app."""
    with TestClient(boundary_app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def app_client() -> Generator[TestClient, None, None]:
    """Test client for the main application."""
    with TestClient(app) as test_client:
        yield test_client
