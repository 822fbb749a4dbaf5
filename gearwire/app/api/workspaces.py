from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from gearwire.app.api.deps import get_workspace_service
from gearwire.app.models.connection import Connection, ConnectionCreateRequest, ConnectionReassignRequest
from gearwire.app.models.workspace import (
    AudioPathResponse,
    WorkspaceCreateRequest,
    WorkspaceDevice,
    WorkspaceDeviceAddRequest,
    WorkspaceInfo,
    WorkspaceListItem,
    WorkspaceReport,
)
from gearwire.app.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.post("", response_model=WorkspaceInfo, status_code=201)
async def create_workspace(
    request: WorkspaceCreateRequest,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceInfo:
    return await service.create_workspace(request)


@router.get("", response_model=list[WorkspaceListItem])
async def list_workspaces(service: WorkspaceService = Depends(get_workspace_service)) -> list[WorkspaceListItem]:
    return await service.list_workspaces()


@router.get("/{workspace_id}", response_model=WorkspaceInfo)
async def get_workspace(workspace_id: str, service: WorkspaceService = Depends(get_workspace_service)) -> WorkspaceInfo:
    return await service.get_workspace(workspace_id)


@router.delete("/{workspace_id}", status_code=204)
async def delete_workspace(workspace_id: str, service: WorkspaceService = Depends(get_workspace_service)) -> Response:
    await service.delete_workspace(workspace_id)
    return Response(status_code=204)


@router.post("/{workspace_id}/devices", response_model=WorkspaceDevice, status_code=201)
async def add_device(
    workspace_id: str,
    request: WorkspaceDeviceAddRequest,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDevice:
    return await service.add_device(workspace_id, request)


@router.delete("/{workspace_id}/devices/{instance_id}", status_code=204)
async def remove_device(
    workspace_id: str,
    instance_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
) -> Response:
    await service.remove_device(workspace_id, instance_id)
    return Response(status_code=204)


@router.post("/{workspace_id}/devices/{instance_id}/clock-master", response_model=WorkspaceDevice)
async def toggle_clock_master(
    workspace_id: str,
    instance_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDevice:
    return await service.toggle_clock_master(workspace_id, instance_id)


@router.get("/{workspace_id}/devices/{instance_id}/audio-path", response_model=AudioPathResponse)
async def audio_path(
    workspace_id: str,
    instance_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
) -> AudioPathResponse:
    return await service.audio_path(workspace_id, instance_id)


@router.post("/{workspace_id}/connections", response_model=Connection, status_code=201)
async def connect_ports(
    workspace_id: str,
    request: ConnectionCreateRequest,
    service: WorkspaceService = Depends(get_workspace_service),
) -> Connection:
    return await service.connect_ports(workspace_id, request)


@router.patch("/{workspace_id}/connections/{connection_id}", response_model=Connection)
async def reassign_connection(
    workspace_id: str,
    connection_id: str,
    request: ConnectionReassignRequest,
    service: WorkspaceService = Depends(get_workspace_service),
) -> Connection:
    return await service.reassign_connection(workspace_id, connection_id, request)


@router.delete("/{workspace_id}/connections/{connection_id}", status_code=204)
async def remove_connection(
    workspace_id: str,
    connection_id: str,
    service: WorkspaceService = Depends(get_workspace_service),
) -> Response:
    await service.remove_connection(workspace_id, connection_id)
    return Response(status_code=204)


@router.get("/{workspace_id}/report", response_model=WorkspaceReport)
async def workspace_report(workspace_id: str, service: WorkspaceService = Depends(get_workspace_service)) -> WorkspaceReport:
    return await service.report(workspace_id)
