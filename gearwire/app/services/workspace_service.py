from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import HTTPException

from gearwire.app.core.config import Settings
from gearwire.app.models.connection import (
    Connection,
    ConnectionCreateRequest,
    ConnectionReassignRequest,
    ConnectionStatus,
    InferenceOptions,
    InferenceResult,
    PortReference,
    PortSelection,
)
from gearwire.app.models.workspace import (
    AudioPathResponse,
    DevicePosition,
    WorkspaceCreateRequest,
    WorkspaceDevice,
    WorkspaceDeviceAddRequest,
    WorkspaceDocument,
    WorkspaceInfo,
    WorkspaceListItem,
    WorkspaceReport,
)
from gearwire.app.services.catalog_service import CatalogService
from gearwire.app.services.inference_service import InferenceService
from gearwire.app.services.recommendation_service import RecommendationService
from gearwire.app.services.routing_service import AudioRoutingService

logger = logging.getLogger(__name__)

MAX_GRID_COLUMNS = 3
GRID_COLUMN_SPACING = 360
GRID_ROW_SPACING = 240
GRID_MARGIN_X = 32
GRID_MARGIN_Y = 32
CARD_WIDTH = 280
CARD_HEIGHT = 200
CANVAS_PADDING = 16
VIRTUAL_CANVAS_WIDTH = 2400
VIRTUAL_CANVAS_HEIGHT = 1600


def fallback_position(index: int, columns: int = MAX_GRID_COLUMNS) -> DevicePosition:
    safe_columns = max(1, min(MAX_GRID_COLUMNS, columns))
    column = index % safe_columns
    row = index // safe_columns
    return DevicePosition(x=GRID_MARGIN_X + column * GRID_COLUMN_SPACING, y=GRID_MARGIN_Y + row * GRID_ROW_SPACING)


def clamp_to_canvas(position: DevicePosition) -> DevicePosition:
    min_x = CANVAS_PADDING
    min_y = CANVAS_PADDING
    max_x = max(min_x, VIRTUAL_CANVAS_WIDTH - CARD_WIDTH - CANVAS_PADDING)
    max_y = max(min_y, VIRTUAL_CANVAS_HEIGHT - CARD_HEIGHT - CANVAS_PADDING)
    return DevicePosition(x=min(max(position.x, min_x), max_x), y=min(max(position.y, min_y), max_y))


def connection_id_for(source: PortReference, destination: PortReference) -> str:
    return f"{source.instance_id}-{source.port_id}::{destination.instance_id}-{destination.port_id}"


class WorkspaceService:
    def __init__(
        self,
        settings: Settings,
        catalog_service: CatalogService,
        inference_service: InferenceService,
        recommendation_service: RecommendationService,
        routing_service: AudioRoutingService,
    ) -> None:
        self._settings = settings
        self._catalog_service = catalog_service
        self._inference_service = inference_service
        self._recommendation_service = recommendation_service
        self._routing_service = routing_service
        self._workspaces: dict[str, WorkspaceDocument] = {}
        self._lock = asyncio.Lock()

    async def create_workspace(self, request: WorkspaceCreateRequest) -> WorkspaceInfo:
        async with self._lock:
            if len(self._workspaces) >= self._settings.max_workspaces:
                raise HTTPException(
                    status_code=409,
                    detail=f"Workspace limit reached ({self._settings.max_workspaces})",
                )
            document = WorkspaceDocument(id=str(uuid4()), name=request.name)
            self._workspaces[document.id] = document

        logger.info("Created workspace %s (%s)", document.id, document.name)
        return self._info(document)

    async def list_workspaces(self) -> list[WorkspaceListItem]:
        async with self._lock:
            documents = list(self._workspaces.values())
        return [
            WorkspaceListItem(
                id=document.id,
                name=document.name,
                device_count=len(document.devices),
                connection_count=len(document.connections),
                updated_at=document.updated_at,
            )
            for document in documents
        ]

    async def get_workspace(self, workspace_id: str) -> WorkspaceInfo:
        async with self._lock:
            document = self._get_unlocked(workspace_id)
            return self._info(document)

    async def delete_workspace(self, workspace_id: str) -> None:
        async with self._lock:
            if self._workspaces.pop(workspace_id, None) is None:
                raise HTTPException(status_code=404, detail=f"Workspace '{workspace_id}' not found")
        logger.info("Deleted workspace %s", workspace_id)

    async def add_device(self, workspace_id: str, request: WorkspaceDeviceAddRequest) -> WorkspaceDevice:
        device = self._catalog_service.require_device(request.device_id)

        async with self._lock:
            document = self._get_unlocked(workspace_id)
            candidate = request.position or fallback_position(len(document.devices))
            instance = WorkspaceDevice(
                instance_id=f"{device.id}-{uuid4().hex[:8]}",
                device=device,
                position=clamp_to_canvas(candidate),
            )
            document.devices = [*document.devices, instance]
            self._touch(document)

        logger.info("Placed %s as %s in workspace %s", device.id, instance.instance_id, workspace_id)
        return instance

    async def remove_device(self, workspace_id: str, instance_id: str) -> None:
        async with self._lock:
            document = self._get_unlocked(workspace_id)
            self._find_instance(document, instance_id)
            document.devices = [item for item in document.devices if item.instance_id != instance_id]
            dropped = [connection.id for connection in document.connections if connection.touches(instance_id)]
            document.connections = [
                connection for connection in document.connections if not connection.touches(instance_id)
            ]
            self._touch(document)

        logger.info(
            "Removed %s from workspace %s (dropped %d connections)", instance_id, workspace_id, len(dropped)
        )

    async def toggle_clock_master(self, workspace_id: str, instance_id: str) -> WorkspaceDevice:
        async with self._lock:
            document = self._get_unlocked(workspace_id)
            target = self._find_instance(document, instance_id)
            if not target.device.supports_clock_master:
                raise HTTPException(
                    status_code=422,
                    detail=f"{target.device.name} has no MIDI output and cannot be the clock master",
                )

            next_is_master = not target.is_clock_master
            updated: list[WorkspaceDevice] = []
            for item in document.devices:
                if item.instance_id == instance_id:
                    item = item.model_copy(update={"is_clock_master": next_is_master})
                    target = item
                elif next_is_master and item.is_clock_master:
                    item = item.model_copy(update={"is_clock_master": False})
                updated.append(item)
            document.devices = updated
            self._touch(document)

        return target

    async def connect_ports(self, workspace_id: str, request: ConnectionCreateRequest) -> Connection:
        async with self._lock:
            document = self._get_unlocked(workspace_id)
            source = self._reference(document, request.source)
            destination = self._reference(document, request.destination)

            if source.same_port(destination):
                raise HTTPException(status_code=422, detail="A port cannot be connected to itself")
            if len(document.connections) >= self._settings.max_connections_per_workspace:
                raise HTTPException(
                    status_code=409,
                    detail=f"Connection limit reached ({self._settings.max_connections_per_workspace})",
                )

            connection = Connection(
                id=connection_id_for(source, destination),
                source=source,
                destination=destination,
                status=ConnectionStatus.PENDING,
            )
            if any(existing.links_same_ports(connection) for existing in document.connections):
                raise HTTPException(status_code=409, detail="These ports are already connected")

            document.connections = [*document.connections, connection]
            self._touch(document)

        return connection

    async def reassign_connection(
        self,
        workspace_id: str,
        connection_id: str,
        request: ConnectionReassignRequest,
    ) -> Connection:
        async with self._lock:
            document = self._get_unlocked(workspace_id)
            index = self._connection_index(document, connection_id)
            existing = document.connections[index]
            reference = self._reference(document, request.port)

            source = reference if request.end == "source" else existing.source
            destination = reference if request.end == "destination" else existing.destination
            updated = existing.model_copy(
                update={
                    "id": connection_id_for(source, destination),
                    "source": source,
                    "destination": destination,
                }
            )

            if source.same_port(destination):
                raise HTTPException(status_code=422, detail="A port cannot be connected to itself")
            for position, other in enumerate(document.connections):
                if position != index and other.links_same_ports(updated):
                    raise HTTPException(status_code=409, detail="These ports are already connected")

            connections = list(document.connections)
            connections[index] = updated
            document.connections = connections
            self._touch(document)

        return updated

    async def remove_connection(self, workspace_id: str, connection_id: str) -> None:
        async with self._lock:
            document = self._get_unlocked(workspace_id)
            index = self._connection_index(document, connection_id)
            document.connections = [*document.connections[:index], *document.connections[index + 1 :]]
            self._touch(document)

    async def report(self, workspace_id: str) -> WorkspaceReport:
        async with self._lock:
            document = self._get_unlocked(workspace_id).model_copy(deep=True)

        inference = self._evaluate(document)
        graph = self._routing_service.build_graph(document.devices, inference.connections)
        return WorkspaceReport(
            workspace_id=document.id,
            inference=inference,
            recommendations=self._recommendation_service.recommend_for_instances(document.devices),
            test_sound_available={
                item.instance_id: self._routing_service.can_play_test_sound(graph, item.instance_id)
                for item in document.devices
            },
        )

    async def audio_path(self, workspace_id: str, instance_id: str) -> AudioPathResponse:
        async with self._lock:
            document = self._get_unlocked(workspace_id).model_copy(deep=True)
            self._find_instance(document, instance_id)

        inference = self._evaluate(document)
        graph = self._routing_service.build_graph(document.devices, inference.connections)
        path = self._routing_service.downstream(graph, instance_id)
        return AudioPathResponse(
            workspace_id=document.id,
            source_instance_id=instance_id,
            devices=path.devices,
            connections=path.connections,
        )

    def _evaluate(self, document: WorkspaceDocument) -> InferenceResult:
        clock_master_ids = {item.instance_id for item in document.devices if item.is_clock_master}
        return self._inference_service.infer(
            document.devices,
            document.connections,
            InferenceOptions(clock_master_ids=clock_master_ids),
        )

    def _get_unlocked(self, workspace_id: str) -> WorkspaceDocument:
        document = self._workspaces.get(workspace_id)
        if not document:
            raise HTTPException(status_code=404, detail=f"Workspace '{workspace_id}' not found")
        return document

    @staticmethod
    def _find_instance(document: WorkspaceDocument, instance_id: str) -> WorkspaceDevice:
        for item in document.devices:
            if item.instance_id == instance_id:
                return item
        raise HTTPException(status_code=404, detail=f"Device instance '{instance_id}' not found")

    @staticmethod
    def _connection_index(document: WorkspaceDocument, connection_id: str) -> int:
        for index, connection in enumerate(document.connections):
            if connection.id == connection_id:
                return index
        raise HTTPException(status_code=404, detail=f"Connection '{connection_id}' not found")

    def _reference(self, document: WorkspaceDocument, selection: PortSelection) -> PortReference:
        instance = self._find_instance(document, selection.instance_id)
        port = instance.device.find_port(selection.port_id)
        if not port:
            raise HTTPException(
                status_code=404,
                detail=f"Port '{selection.port_id}' not found on {instance.device.name}",
            )
        return PortReference(
            instance_id=instance.instance_id,
            device_id=instance.device.id,
            port_id=port.id,
            device_name=instance.device.name,
            port_label=port.label,
        )

    @staticmethod
    def _touch(document: WorkspaceDocument) -> None:
        document.updated_at = datetime.now(timezone.utc)

    @staticmethod
    def _info(document: WorkspaceDocument) -> WorkspaceInfo:
        return WorkspaceInfo.model_validate(document.model_dump())
