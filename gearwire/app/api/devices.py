from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from gearwire.app.api.deps import get_container
from gearwire.app.core.container import AppContainer
from gearwire.app.models.device import CustomDeviceCreateRequest, Device

router = APIRouter(prefix="/devices", tags=["devices"])


@router.get("", response_model=list[Device])
async def list_devices(
    category: str | None = Query(default=None),
    container: AppContainer = Depends(get_container),
) -> list[Device]:
    return container.catalog_service.list_devices(category)


@router.get("/categories")
async def list_categories(container: AppContainer = Depends(get_container)) -> dict[str, int]:
    return container.catalog_service.categories()


@router.post("/custom", response_model=Device, status_code=201)
async def create_custom_device(
    request: CustomDeviceCreateRequest,
    container: AppContainer = Depends(get_container),
) -> Device:
    return container.catalog_service.create_custom_device(request)


@router.get("/{device_id}", response_model=Device)
async def get_device(device_id: str, container: AppContainer = Depends(get_container)) -> Device:
    return container.catalog_service.require_device(device_id)
