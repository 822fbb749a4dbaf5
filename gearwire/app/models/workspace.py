from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from gearwire.app.models.connection import Connection, InferenceResult
from gearwire.app.models.device import DeviceInstance


class DevicePosition(BaseModel):
    x: float = 0.0
    y: float = 0.0


class WorkspaceDevice(DeviceInstance):
    position: DevicePosition = Field(default_factory=DevicePosition)
    is_clock_master: bool = False


class WorkspaceCreateRequest(BaseModel):
    name: str = Field(default="Untitled rig", min_length=1, max_length=128)


class WorkspaceDeviceAddRequest(BaseModel):
    device_id: str = Field(min_length=1)
    position: DevicePosition | None = None


class WorkspaceInfo(BaseModel):
    id: str
    name: str
    devices: list[WorkspaceDevice] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class WorkspaceListItem(BaseModel):
    id: str
    name: str
    device_count: int
    connection_count: int
    updated_at: datetime


class WorkspaceReport(BaseModel):
    workspace_id: str
    inference: InferenceResult
    recommendations: list[str] = Field(default_factory=list)
    test_sound_available: dict[str, bool] = Field(default_factory=dict)


class AudioPathResponse(BaseModel):
    workspace_id: str
    source_instance_id: str
    devices: list[str] = Field(default_factory=list)
    connections: list[str] = Field(default_factory=list)


class WorkspaceDocument(BaseModel):
    id: str
    name: str
    devices: list[WorkspaceDevice] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
