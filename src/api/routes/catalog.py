"""
Catalog endpoints: categories, suppliers, services and vehicles.

The four resources share the same CRUD shape, so their routers are built
by one factory. Deletes require the admin role.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from src.api.dependencies import (
    get_categories,
    get_current_principal,
    get_services,
    get_suppliers,
    get_vehicles,
    page_request,
    require_admin,
)
from src.application.dto.requests import (
    CreateCategoryRequest,
    CreateServiceRequest,
    CreateSupplierRequest,
    CreateVehicleRequest,
    UpdateCategoryRequest,
    UpdateServiceRequest,
    UpdateSupplierRequest,
    UpdateVehicleRequest,
)
from src.application.dto.responses import (
    CategoryResponse,
    DeleteResponse,
    EntityResponse,
    ErrorResponse,
    PaginatedResponse,
    ServiceResponse,
    SupplierResponse,
    VehicleResponse,
    paginated,
)
from src.config import get_logger, get_settings
from src.core.entities.catalog import (
    Category,
    Service,
    ServiceCategory,
    ServiceStatus,
    Supplier,
    Vehicle,
)
from src.core.entities.principal import Principal
from src.core.exceptions import (
    CategoryNotFoundError,
    NotFoundError,
    ServiceNotFoundError,
    SupplierNotFoundError,
    VehicleNotFoundError,
)
from src.core.validators import parse_enum

logger = get_logger(__name__)

Prepare = Callable[[dict[str, Any]], dict[str, Any]]


def _unchanged(values: dict[str, Any]) -> dict[str, Any]:
    return values


def _parse_service_enums(values: dict[str, Any]) -> dict[str, Any]:
    if values.get("category") is not None:
        values["category"] = parse_enum(ServiceCategory, values["category"], "category")
    if values.get("status") is not None:
        values["status"] = parse_enum(ServiceStatus, values["status"], "status")
    return values


def build_catalog_router(
    *,
    prefix: str,
    tag: str,
    label: str,
    entity_cls: type[BaseModel],
    create_model: type[BaseModel],
    update_model: type[BaseModel],
    response_model: type[EntityResponse],
    store_dependency: Callable,
    not_found: type[NotFoundError],
    prepare: Prepare = _unchanged,
    default_sort: str = "name",
) -> APIRouter:
    """Build list/create/get/update/delete routes for one catalog resource."""
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get(
        "",
        response_model=PaginatedResponse[response_model],
        responses={400: {"model": ErrorResponse}},
    )
    async def list_entities(
        search: str | None = None,
        page: int = Query(default=1, ge=1),
        limit: int | None = Query(default=None, ge=1),
        sort: str = default_sort,
        _: Principal = Depends(get_current_principal),
        store=Depends(store_dependency),
    ):
        request = page_request(page, limit, sort, get_settings().inventory.items_page_size)
        result = await store.list_all(request, search=search)
        return paginated(result, response_model)

    @router.post(
        "",
        response_model=response_model,
        status_code=status.HTTP_201_CREATED,
        responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    )
    async def create_entity(
        request: create_model,
        _: Principal = Depends(get_current_principal),
        store=Depends(store_dependency),
    ):
        entity = entity_cls(**prepare(request.model_dump()))
        created = await store.create(entity)
        logger.info(f"{tag}_created", id=created.id)
        return response_model.model_validate(created)

    @router.get(
        "/{entity_id}",
        response_model=response_model,
        responses={404: {"model": ErrorResponse}},
    )
    async def get_entity(
        entity_id: int,
        _: Principal = Depends(get_current_principal),
        store=Depends(store_dependency),
    ):
        entity = await store.get(entity_id)
        if entity is None:
            raise not_found(entity_id)
        return response_model.model_validate(entity)

    @router.put(
        "/{entity_id}",
        response_model=response_model,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    )
    async def update_entity(
        entity_id: int,
        request: update_model,
        _: Principal = Depends(get_current_principal),
        store=Depends(store_dependency),
    ):
        existing = await store.get(entity_id)
        if existing is None:
            raise not_found(entity_id)

        # null on a field that has a non-null default means "keep"
        changes = {
            key: value
            for key, value in request.model_dump(exclude_unset=True).items()
            if value is not None or entity_cls.model_fields[key].default is None
        }
        merged = {
            **existing.model_dump(),
            **prepare(changes),
            "updated_at": datetime.utcnow(),
        }
        updated = await store.update(entity_cls.model_validate(merged))
        logger.info(f"{tag}_updated", id=entity_id, fields=sorted(changes))
        return response_model.model_validate(updated)

    @router.delete(
        "/{entity_id}",
        response_model=DeleteResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    )
    async def delete_entity(
        entity_id: int,
        _: Principal = Depends(require_admin),
        store=Depends(store_dependency),
    ):
        if not await store.delete(entity_id):
            raise not_found(entity_id)
        logger.info(f"{tag}_deleted", id=entity_id)
        return DeleteResponse(id=entity_id, message=f"{label} deleted")

    return router


categories_router = build_catalog_router(
    prefix="/api/categories",
    tag="categories",
    label="Category",
    entity_cls=Category,
    create_model=CreateCategoryRequest,
    update_model=UpdateCategoryRequest,
    response_model=CategoryResponse,
    store_dependency=get_categories,
    not_found=CategoryNotFoundError,
)

suppliers_router = build_catalog_router(
    prefix="/api/suppliers",
    tag="suppliers",
    label="Supplier",
    entity_cls=Supplier,
    create_model=CreateSupplierRequest,
    update_model=UpdateSupplierRequest,
    response_model=SupplierResponse,
    store_dependency=get_suppliers,
    not_found=SupplierNotFoundError,
)

services_router = build_catalog_router(
    prefix="/api/services",
    tag="services",
    label="Service",
    entity_cls=Service,
    create_model=CreateServiceRequest,
    update_model=UpdateServiceRequest,
    response_model=ServiceResponse,
    store_dependency=get_services,
    not_found=ServiceNotFoundError,
    prepare=_parse_service_enums,
)

vehicles_router = build_catalog_router(
    prefix="/api/vehicles",
    tag="vehicles",
    label="Vehicle",
    entity_cls=Vehicle,
    create_model=CreateVehicleRequest,
    update_model=UpdateVehicleRequest,
    response_model=VehicleResponse,
    store_dependency=get_vehicles,
    not_found=VehicleNotFoundError,
    default_sort="-created_at",
)
