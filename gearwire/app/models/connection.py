from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from gearwire.app.models.device import DeviceInstance


class ConnectionStatus(StrEnum):
    PENDING = "pending"
    VALID = "valid"
    INVALID = "invalid"


class PortReference(BaseModel):
    instance_id: str = Field(min_length=1)
    device_id: str = Field(min_length=1)
    port_id: str = Field(min_length=1)
    device_name: str | None = None
    port_label: str | None = None

    def same_port(self, other: "PortReference") -> bool:
        return self.instance_id == other.instance_id and self.port_id == other.port_id


class Connection(BaseModel):
    id: str = Field(min_length=1)
    source: PortReference
    destination: PortReference
    status: ConnectionStatus = ConnectionStatus.PENDING
    issues: list[str] | None = None

    def links_same_ports(self, other: "Connection") -> bool:
        direct = self.source.same_port(other.source) and self.destination.same_port(other.destination)
        reverse = self.source.same_port(other.destination) and self.destination.same_port(other.source)
        return direct or reverse

    def touches(self, instance_id: str) -> bool:
        return self.source.instance_id == instance_id or self.destination.instance_id == instance_id


class CableSuggestion(BaseModel):
    id: str
    description: str
    connector: str
    ports: tuple[PortReference, PortReference]
    requires_adapter: str | None = None
    adapters: list[str] = Field(default_factory=list)


class InferenceOptions(BaseModel):
    clock_master_ids: set[str] = Field(default_factory=set)


class InferenceResult(BaseModel):
    connections: list[Connection] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    required_cables: list[CableSuggestion] = Field(default_factory=list)
    summaries: list[str] = Field(default_factory=list)


class InferenceRequest(BaseModel):
    instances: list[DeviceInstance] = Field(default_factory=list, max_length=256)
    connections: list[Connection] = Field(default_factory=list, max_length=2_000)
    clock_master_ids: list[str] = Field(default_factory=list)


class RecommendationRequest(BaseModel):
    device_a_id: str = Field(min_length=1)
    device_b_id: str = Field(min_length=1)


class PortSelection(BaseModel):
    instance_id: str = Field(min_length=1)
    port_id: str = Field(min_length=1)


class ConnectionCreateRequest(BaseModel):
    source: PortSelection
    destination: PortSelection


class ConnectionReassignRequest(BaseModel):
    end: Literal["source", "destination"]
    port: PortSelection
